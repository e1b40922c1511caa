"""Async client for the inspection tracking backend API.

Every response body is parsed into the schemas in ``inspectflow.schemas``.
Reads are retried with backoff; writes are sent once.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter

from inspectflow.core.config import settings
from inspectflow.enums import AuthActionType
from inspectflow.schemas.auth import AuthResponse
from inspectflow.schemas.base import ApiModel
from inspectflow.schemas.inspection import (
    ApproveRequest,
    Inspection,
    InspectionCreate,
    InspectionQuery,
    RejectRequest,
)
from inspectflow.schemas.organization import (
    Organization,
    OrganizationCreate,
    OrganizationUpdate,
)
from inspectflow.schemas.user import (
    LoginRequest,
    OrganizationMember,
    User,
    UserRegister,
    UserUpdate,
)
from inspectflow.schemas.workflow import Workflow, WorkflowCreate, WorkflowUpdate
from inspectflow.services.auth_service import (
    AUTH_FAILED_MESSAGE,
    SESSION_EXPIRED_MESSAGE,
    AuthSession,
)
from inspectflow.services.http_service import request_with_retries

logger = logging.getLogger(__name__)

T = TypeVar("T")

MediaFile = tuple[str, bytes, str]  # (filename, content, content type)


class ApiError(Exception):
    """Backend answered with a non-success status."""

    def __init__(self, status_code: int, message: str, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details


class TokenExpiredError(ApiError):
    """Bearer token was rejected as expired."""

    pass


def build_api_url(base_url: str, endpoint: str) -> str:
    """Join base URL and endpoint, adding the ``api/`` prefix exactly once."""
    path = endpoint.lstrip("/")
    if not path.startswith("api/"):
        path = f"api/{path}"
    return f"{base_url.rstrip('/')}/{path}"


class InspectionApiClient:
    """
    Backend API client bound to one auth session.

    Usage:
        async with InspectionApiClient() as client:
            await client.login("admin@example.com", "secret")
            inspections = await client.list_inspections()
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: AuthSession | None = None,
        *,
        timeout: float | None = None,
        max_attempts: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.session = session or AuthSession()
        self.max_attempts = max_attempts or settings.API_MAX_ATTEMPTS
        self._client = httpx.AsyncClient(
            timeout=timeout or settings.API_TIMEOUT_SECONDS,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> InspectionApiClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # =========================================================================
    # Transport
    # =========================================================================

    def _auth_headers(self) -> dict[str, str]:
        if self.session.token:
            return {"Authorization": f"Bearer {self.session.token}"}
        return {}

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        json: ApiModel | dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        files: list[tuple[str, MediaFile]] | None = None,
        retry: bool = False,
    ) -> Any:
        url = build_api_url(self.base_url, endpoint)
        body = json.to_payload() if isinstance(json, ApiModel) else json

        async def send() -> httpx.Response:
            return await self._client.request(
                method,
                url,
                json=body,
                params=params,
                files=files,
                headers=self._auth_headers(),
            )

        if retry:
            response = await request_with_retries(send, max_attempts=self.max_attempts)
        else:
            response = await send()
        return self._handle_response(method, url, response)

    def _handle_response(self, method: str, url: str, response: httpx.Response) -> Any:
        if response.is_success:
            if not response.content:
                return None
            return response.json()

        try:
            data = response.json()
        except ValueError:
            data = None
        message = (
            data.get("message") if isinstance(data, dict) else None
        ) or f"Request failed with status {response.status_code}"

        logger.warning("%s %s returned %s: %s", method, url, response.status_code, message)

        expired = isinstance(data, dict) and data.get("expired")
        if response.status_code in (401, 403) and expired:
            self.session.failed(AuthActionType.AUTH_ERROR, SESSION_EXPIRED_MESSAGE)
            raise TokenExpiredError(response.status_code, message, data)
        raise ApiError(response.status_code, message, data)

    async def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        return await self._request("GET", endpoint, params=params, retry=True)

    @staticmethod
    def _parse(adapter_type: type[T], data: Any) -> T:
        return TypeAdapter(adapter_type).validate_python(data)

    # =========================================================================
    # Auth
    # =========================================================================

    async def login(self, email: str, password: str) -> AuthResponse:
        payload = LoginRequest(email=email, password=password)
        try:
            data = await self._request("POST", "/auth/login", json=payload)
        except ApiError as exc:
            self.session.failed(AuthActionType.LOGIN_FAIL, exc.message)
            raise
        response = AuthResponse.model_validate(data)
        self.session.login_succeeded(response)
        return response

    async def register(self, payload: UserRegister) -> AuthResponse:
        try:
            data = await self._request("POST", "/auth/register", json=payload)
        except ApiError as exc:
            self.session.failed(AuthActionType.REGISTER_FAIL, exc.message)
            raise
        response = AuthResponse.model_validate(data)
        self.session.register_succeeded(response)
        return response

    async def load_user(self) -> User | None:
        """Validate the stored token by fetching the current user."""
        if not self.session.token:
            self.session.set_unauthenticated()
            return None

        self.session.dispatch_loading()
        try:
            data = await self._get("/auth")
        except TokenExpiredError:
            raise
        except ApiError:
            self.session.failed(AuthActionType.AUTH_ERROR, AUTH_FAILED_MESSAGE)
            raise
        user = User.model_validate(data)
        self.session.user_loaded(AuthResponse(token=self.session.token, user=user))
        return user

    def logout(self) -> None:
        self.session.logout()

    # =========================================================================
    # Organizations and users
    # =========================================================================

    async def list_organizations(self) -> list[Organization]:
        return self._parse(list[Organization], await self._get("/organizations"))

    async def get_current_organization(self) -> Organization:
        return Organization.model_validate(await self._get("/organizations/current"))

    async def get_organization(self, org_id: str) -> Organization:
        return Organization.model_validate(await self._get(f"/organizations/{org_id}"))

    async def create_organization(self, payload: OrganizationCreate) -> Organization:
        return Organization.model_validate(
            await self._request("POST", "/organizations", json=payload)
        )

    async def update_organization(
        self, org_id: str, payload: OrganizationUpdate
    ) -> Organization:
        return Organization.model_validate(
            await self._request("PUT", f"/organizations/{org_id}", json=payload)
        )

    async def update_current_organization(self, payload: OrganizationUpdate) -> Organization:
        data = await self._request("PUT", "/organizations/current", json=payload)
        return Organization.model_validate(data)

    async def list_users(self) -> list[OrganizationMember]:
        return self._parse(list[OrganizationMember], await self._get("/users"))

    async def get_user(self, user_id: str) -> OrganizationMember:
        return OrganizationMember.model_validate(await self._get(f"/users/{user_id}"))

    async def create_user(self, payload: UserRegister) -> OrganizationMember:
        """Admin-created member; the caller's session is unchanged."""
        return OrganizationMember.model_validate(
            await self._request("POST", "/users", json=payload)
        )

    async def update_user(self, user_id: str, payload: UserUpdate) -> OrganizationMember:
        return OrganizationMember.model_validate(
            await self._request("PUT", f"/users/{user_id}", json=payload)
        )

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", f"/users/{user_id}")

    # =========================================================================
    # Workflows
    # =========================================================================

    async def list_workflows(self) -> list[Workflow]:
        return self._parse(list[Workflow], await self._get("/workflows"))

    async def get_workflow(self, workflow_id: str) -> Workflow:
        return Workflow.model_validate(await self._get(f"/workflows/{workflow_id}"))

    async def create_workflow(self, payload: WorkflowCreate) -> Workflow:
        return Workflow.model_validate(
            await self._request("POST", "/workflows", json=payload)
        )

    async def update_workflow(self, workflow_id: str, payload: WorkflowUpdate) -> Workflow:
        return Workflow.model_validate(
            await self._request("PUT", f"/workflows/{workflow_id}", json=payload)
        )

    async def delete_workflow(self, workflow_id: str) -> None:
        await self._request("DELETE", f"/workflows/{workflow_id}")

    async def list_workflow_categories(self) -> list[str]:
        return self._parse(list[str], await self._get("/workflows/categories"))

    # =========================================================================
    # Inspections
    # =========================================================================

    async def list_inspections(self, query: InspectionQuery | None = None) -> list[Inspection]:
        params = query.to_query_params() if query else None
        return self._parse(list[Inspection], await self._get("/inspections", params))

    async def get_inspection(self, inspection_id: str) -> Inspection:
        return Inspection.model_validate(await self._get(f"/inspections/{inspection_id}"))

    async def create_inspection(self, payload: InspectionCreate) -> Inspection:
        return Inspection.model_validate(
            await self._request("POST", "/inspections", json=payload)
        )

    async def approve_inspection(
        self, inspection_id: str, remarks: str | None = None
    ) -> Inspection:
        payload = ApproveRequest(remarks=remarks)
        return Inspection.model_validate(
            await self._request("PUT", f"/inspections/{inspection_id}/approve", json=payload)
        )

    async def reject_inspection(self, inspection_id: str, remarks: str) -> Inspection:
        payload = RejectRequest(remarks=remarks)
        return Inspection.model_validate(
            await self._request("PUT", f"/inspections/{inspection_id}/reject", json=payload)
        )

    async def delete_inspection(self, inspection_id: str) -> None:
        await self._request("DELETE", f"/inspections/{inspection_id}")

    async def list_inspection_categories(self) -> list[str]:
        return self._parse(list[str], await self._get("/inspections/categories"))

    # =========================================================================
    # Bulk approval batches
    # =========================================================================

    async def list_batches(self) -> list[dict[str, Any]]:
        return self._parse(list[dict[str, Any]], await self._get("/inspections/batch"))

    async def get_batch(self, batch_id: str) -> list[Inspection]:
        return self._parse(list[Inspection], await self._get(f"/inspections/batch/{batch_id}"))

    async def approve_batch(self, batch_id: str, remarks: str | None = None) -> None:
        payload = ApproveRequest(remarks=remarks)
        await self._request("PUT", f"/inspections/batch/{batch_id}/approve", json=payload)

    async def reject_batch(self, batch_id: str, remarks: str) -> None:
        payload = RejectRequest(remarks=remarks)
        await self._request("PUT", f"/inspections/batch/{batch_id}/reject", json=payload)

    async def process_batches(self) -> None:
        await self._request("POST", "/inspections/process-batches")

    # =========================================================================
    # Media
    # =========================================================================

    async def upload_media(self, files: list[MediaFile]) -> list[str]:
        """Upload files as multipart ``media`` parts and return their URLs in order."""
        data = await self._request(
            "POST", "/media/upload", files=[("media", f) for f in files]
        )
        return self._parse(list[str], (data or {}).get("urls", []))
