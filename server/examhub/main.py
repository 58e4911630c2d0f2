import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from examhub import envelope
from examhub.config import settings
from examhub.database import init_db

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup"""
    init_db()
    logger.info("%s is starting...", settings.app_name)
    logger.info("Database: %s", settings.database_url)
    logger.info("LLM model: %s (configured=%s)", settings.llm_model, bool(settings.openai_api_key))
    if settings.quick_save_course_fallback:
        logger.warning("Quick-save first-course fallback is enabled")
    yield


# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[envelope.CORRELATION_HEADER],
)

envelope.install(app)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.api_version,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


# Import and include routers
from examhub.routes import auth, courses, exams  # noqa: E402

app.include_router(exams.router, prefix="/api/exams", tags=["Exams"])
app.include_router(courses.router, prefix="/api/courses", tags=["Courses"])
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
