"""NusaDana Web Route Modules.

This package contains modular route definitions for the NusaDana HTTP API.
Each module handles a specific functional area using FastAPI's APIRouter.

Architecture:
- Each route module exports a `router` object (APIRouter instance)
- The app factory in nusadana.web.app includes these routers
- Shared dependencies provided by nusadana.web.dependencies
- Shared models defined in nusadana.web.models

Usage:
    from nusadana.web.routes import auth
    app.include_router(auth.router)
"""

from nusadana.web.routes import (
    auth,
    documents,
    funds,
    health,
    metrics,
    progress,
    projects,
    reports,
    schedule,
)

__all__ = [
    "auth",  # Registration, login, current user
    "projects",  # Project CRUD and priority ranking
    "schedule",  # Village agenda
    "funds",  # Disbursements, expenses, fund totals
    "progress",  # Progress updates and feedback
    "documents",  # Document upload to object storage
    "reports",  # LPJ report
    "metrics",  # Month-bucketed dashboard metrics
    "health",
]
