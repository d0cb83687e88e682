"""Shared project list state for client front-ends."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

import structlog

from nusadana.client.api import ApiClient, ApiError

logger = structlog.get_logger(__name__)


def project_payload(form: Mapping[str, Any]) -> dict[str, Any]:
    """Map project form fields to the body ``POST /projects`` expects.

    The form calls the budget ``dana``; blank description and location get
    placeholder values.
    """
    try:
        budget = Decimal(str(form.get("dana") or 0))
    except InvalidOperation:
        budget = Decimal(0)

    return {
        "title": form.get("title"),
        "description": form.get("description") or "No description",
        "location": form.get("location") or "Desa",
        "estimated_budget": float(budget),
    }


class ProjectStore:
    """Fetches and caches the project list.

    Attributes:
        projects: Last list received from the server, plus locally added rows
        loading: True until the first fetch finishes
        error: Message from the last failed fetch, if any
    """

    def __init__(self, api: ApiClient):
        self.api = api
        self.projects: list[dict[str, Any]] = []
        self.loading = True
        self.error: str | None = None

    def refresh(self) -> list[dict[str, Any]]:
        """Reload the project list; failures are kept in ``error``."""
        try:
            self.projects = self.api.get("/projects")
            self.error = None
        except ApiError as e:
            logger.error("projects_fetch_failed", error=e.message)
            self.error = e.message
        finally:
            self.loading = False
        return self.projects

    def add_project(self, form: Mapping[str, Any]) -> dict[str, Any]:
        """Create a project and append the server's row to ``projects``.

        Raises:
            ApiError: If the server rejects the project
        """
        try:
            created = self.api.post("/projects", json=project_payload(form))
        except ApiError as e:
            logger.error("project_save_failed", error=e.message)
            raise
        self.projects = [*self.projects, created]
        return created
