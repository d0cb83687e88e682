"""Project routes for the NusaDana API.

Handles project creation, listing, status changes and the priority ranking.

Routes:
- POST /api/projects               - Create a draft project
- GET  /api/projects               - List projects (ranked first, then newest)
- PUT  /api/projects/priority      - Replace the priority ranking
- GET  /api/projects/{id}          - Single project
- PUT  /api/projects/{id}/status   - Overwrite status
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from nusadana.db.models import ProjectModel
from nusadana.projects import UnknownProjectsError, list_projects, set_priority_order
from nusadana.web.auth import CurrentUser, require_user
from nusadana.web.dependencies import get_db_session, load_project
from nusadana.web.models import (
    PriorityResult,
    PriorityUpdate,
    ProjectCreate,
    ProjectOut,
    StatusUpdate,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["projects"])


@router.post("/projects", response_model=ProjectOut, status_code=201)
async def create_project(
    payload: ProjectCreate,
    session: AsyncSession = Depends(get_db_session),
    current: CurrentUser = Depends(require_user),
):
    """Create a new project. New projects always start as ``draft``."""
    project = ProjectModel(
        title=payload.title,
        description=payload.description,
        location=payload.location,
        estimated_budget=payload.estimated_budget,
        status="draft",
        created_by=current.id,
    )
    session.add(project)
    await session.commit()

    logger.info("project_created", project_id=project.id, created_by=current.id)
    return project


@router.get("/projects", response_model=list[ProjectOut])
async def get_projects(session: AsyncSession = Depends(get_db_session)):
    return await list_projects(session)


@router.put("/projects/priority", response_model=PriorityResult)
async def update_priority(
    payload: PriorityUpdate,
    session: AsyncSession = Depends(get_db_session),
    current: CurrentUser = Depends(require_user),
):
    """Rank projects in the order given; unlisted projects lose their rank."""
    try:
        count = await set_priority_order(session, payload.priority_list)
    except UnknownProjectsError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    await session.commit()

    logger.info("projects_prioritized", count=count, user_id=current.id)
    return PriorityResult(success=True, message=f"Prioritized {count} projects.")


@router.get("/projects/{project_id}", response_model=ProjectOut)
async def get_project(project: ProjectModel = Depends(load_project)):
    return project


@router.put("/projects/{project_id}/status", response_model=ProjectOut)
async def update_status(
    payload: StatusUpdate,
    current: CurrentUser = Depends(require_user),
    project: ProjectModel = Depends(load_project),
    session: AsyncSession = Depends(get_db_session),
):
    """Overwrite the project status. Transitions are not validated."""
    previous = project.status
    project.status = payload.status
    await session.commit()

    logger.info(
        "project_status_changed",
        project_id=project.id,
        old=previous,
        new=payload.status,
        user_id=current.id,
    )
    return project
