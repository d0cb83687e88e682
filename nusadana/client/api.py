"""HTTP client for the NusaDana API.

Wraps ``httpx.Client`` with the bearer token kept in a small session file,
the command-line stand-in for the browser's local storage.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import httpx
import structlog

logger = structlog.get_logger(__name__)

DEFAULT_API_URL = "http://localhost:3000/api"
DEFAULT_SESSION_FILE = Path.home() / ".nusadana" / "session.json"
GENERIC_ERROR = "An error occurred while contacting the server."


class ApiError(Exception):
    """Request failed; ``message`` is the server's ``error`` field when it sent one."""

    def __init__(self, status_code: int | None, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class SessionStore:
    """Persists ``token`` and ``user`` between CLI invocations."""

    def __init__(self, path: Path | None = None):
        self.path = Path(path or os.getenv("NUSADANA_SESSION_FILE") or DEFAULT_SESSION_FILE)

    def load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text())
        except json.JSONDecodeError:
            return {}

    def save(self, token: str, user: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token, "user": user}))

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)

    @property
    def token(self) -> str | None:
        return self.load().get("token")

    @property
    def user(self) -> dict[str, Any] | None:
        return self.load().get("user")


class ApiClient:
    """Synchronous client for the ``/api`` routes."""

    def __init__(
        self,
        base_url: str | None = None,
        session: SessionStore | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or os.getenv("NUSADANA_API_URL") or DEFAULT_API_URL).rstrip("/")
        self.session = session or SessionStore()
        self.client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        token = self.session.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def request(self, method: str, path: str, **kwargs) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            ApiError: On transport failure or any 4xx/5xx response
        """
        try:
            response = self.client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.warning("api_request_failed", method=method, path=path, error=str(e))
            raise ApiError(None, GENERIC_ERROR) from e

        if response.status_code >= 400:
            message = GENERIC_ERROR
            try:
                message = response.json().get("error") or GENERIC_ERROR
            except (ValueError, AttributeError):
                pass
            raise ApiError(response.status_code, message)

        return response.json()

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs) -> Any:
        return self.request("PUT", path, **kwargs)

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def login(self, email: str, password: str) -> dict[str, Any]:
        data = self.post("/auth/login", json={"email": email, "password": password})
        if not data.get("token"):
            raise ApiError(None, "Login failed: No token received.")
        self.session.save(data["token"], data["user"])
        return data["user"]

    def register(
        self, name: str, email: str, password: str, role: str = "villager"
    ) -> dict[str, Any]:
        data = self.post(
            "/auth/register",
            json={"name": name, "email": email, "password": password, "role": role},
        )
        self.session.save(data["token"], data["user"])
        return data["user"]

    def logout(self) -> None:
        self.session.clear()
