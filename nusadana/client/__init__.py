"""Command-line client for the NusaDana API."""

from nusadana.client.api import ApiClient, ApiError, SessionStore
from nusadana.client.store import ProjectStore, project_payload
from nusadana.client.views import display_projects, format_rupiah, prioritized

__all__ = [
    "ApiClient",
    "ApiError",
    "ProjectStore",
    "SessionStore",
    "display_projects",
    "format_rupiah",
    "prioritized",
    "project_payload",
]
