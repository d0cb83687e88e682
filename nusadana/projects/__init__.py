"""Project records and priority ranking."""

from nusadana.projects.repository import (
    UnknownProjectsError,
    get_project,
    list_projects,
    set_priority_order,
)

__all__ = [
    "UnknownProjectsError",
    "get_project",
    "list_projects",
    "set_priority_order",
]
