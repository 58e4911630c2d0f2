"""
Async HTTP client for the exam API.

Every call resolves to an `ApiResult`; transport failures and error
envelopes are reported through `error` instead of raising.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from examhub.config import settings

logger = logging.getLogger(__name__)

CONNECTION_ERROR = "No fue posible conectar con el servidor."
UNKNOWN_ERROR = "Error desconocido."


@dataclass
class ApiResult:
    ok: bool
    data: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None


class ExamApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 120.0,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            headers=headers,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> ApiResult:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            return ApiResult(ok=False, error=CONNECTION_ERROR)

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_success:
            return ApiResult(ok=True, data=body.get("data"), status_code=response.status_code)

        error = body.get("error") or {}
        detail = error.get("detail") if isinstance(error.get("detail"), str) else None
        return ApiResult(
            ok=False,
            error=detail or body.get("message") or UNKNOWN_ERROR,
            status_code=response.status_code,
        )

    # Exams

    async def create_exam(self, payload: Dict[str, Any]) -> ApiResult:
        return await self._request("POST", "/api/exams", json=payload)

    async def generate_questions(self, payload: Dict[str, Any]) -> ApiResult:
        return await self._request("POST", "/api/exams/questions", json=payload)

    async def quick_save(self, payload: Dict[str, Any]) -> ApiResult:
        return await self._request("POST", "/api/exams/quick-save", json=payload)

    async def get_exam(self, exam_id: str) -> ApiResult:
        return await self._request("GET", f"/api/exams/{exam_id}")

    async def add_question(self, exam_id: str, payload: Dict[str, Any]) -> ApiResult:
        return await self._request("POST", f"/api/exams/{exam_id}/questions", json=payload)

    async def update_question(self, question_id: str, patch: Dict[str, Any]) -> ApiResult:
        return await self._request("PUT", f"/api/exams/questions/{question_id}", json=patch)

    # Courses

    async def list_courses(self) -> ApiResult:
        return await self._request("GET", "/api/courses")

    async def create_course(self, name: str) -> ApiResult:
        return await self._request("POST", "/api/courses", json={"name": name})

    async def list_course_exams(self, course_id: str) -> ApiResult:
        return await self._request("GET", f"/api/courses/{course_id}/exams")
