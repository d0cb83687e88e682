"""Shared dependencies for NusaDana web routes.

The database, storage backend and config are created once in the app
lifespan and kept on ``app.state``; these providers hand them to handlers
through FastAPI's Depends() system.

Usage:
    from fastapi import Depends
    from nusadana.web.dependencies import get_db_session

    @router.get("/api/things")
    async def things(session: AsyncSession = Depends(get_db_session)):
        ...
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from nusadana.config import AppConfig
from nusadana.db.connection import Database
from nusadana.db.models import ProjectModel
from nusadana.projects import get_project
from nusadana.storage import StorageBackend


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_database(request: Request) -> Database:
    return request.app.state.db


async def get_db_session(
    db: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request; rolled back if the handler raises."""
    async with db.session() as session:
        yield session


def get_storage(request: Request) -> StorageBackend:
    return request.app.state.storage


async def load_project(
    project_id: int,
    session: AsyncSession = Depends(get_db_session),
) -> ProjectModel:
    """Resolve the ``{project_id}`` path parameter or fail with 404."""
    project = await get_project(session, project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project
