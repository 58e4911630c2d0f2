from fastapi import APIRouter, Request

from examhub.auth import create_token
from examhub.config import settings
from examhub.envelope import success
from examhub.errors import NotFound
from examhub.schemas import MockLoginRequest

router = APIRouter(tags=["Auth"])


@router.post("/mock-login")
def mock_login(request: Request, payload: MockLoginRequest):
    """Issue a token for any user id. Only available with DEBUG enabled."""
    if not settings.debug:
        raise NotFound("Mock login is disabled", message="Not found")
    token = create_token(payload.user_id, roles=payload.roles)
    return success(request, {"access_token": token, "token_type": "bearer"}, "Token issued")
