"""Progress routes: official updates and villager feedback.

Routes:
- POST /api/projects/{id}/progress - Official's progress update
- POST /api/projects/{id}/feedback - Villager's comment
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nusadana.db.models import ProgressFeedbackModel, ProgressUpdateModel, ProjectModel
from nusadana.web.auth import CurrentUser, require_user
from nusadana.web.dependencies import get_db_session, load_project
from nusadana.web.models import FeedbackCreate, FeedbackOut, ProgressCreate, ProgressOut

router = APIRouter(prefix="/api", tags=["progress"])


@router.post("/projects/{project_id}/progress", response_model=ProgressOut, status_code=201)
async def record_progress(
    payload: ProgressCreate,
    current: CurrentUser = Depends(require_user),
    project: ProjectModel = Depends(load_project),
    session: AsyncSession = Depends(get_db_session),
):
    update = ProgressUpdateModel(
        project_id=project.id,
        notes=payload.notes,
        completion_percentage=payload.completion_percentage,
        created_by=current.id,
    )
    session.add(update)
    await session.commit()
    return update


@router.post("/projects/{project_id}/feedback", response_model=FeedbackOut, status_code=201)
async def record_feedback(
    payload: FeedbackCreate,
    current: CurrentUser = Depends(require_user),
    project: ProjectModel = Depends(load_project),
    session: AsyncSession = Depends(get_db_session),
):
    feedback = ProgressFeedbackModel(
        project_id=project.id,
        comment_text=payload.comment_text,
        created_by=current.id,
    )
    session.add(feedback)
    await session.commit()
    return feedback
