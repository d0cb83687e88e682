"""Village schedule routes.

Routes:
- GET  /api/schedule - Agenda ordered by due date
- POST /api/schedule - Add an agenda item
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nusadana.db.models import ScheduleItemModel
from nusadana.web.auth import CurrentUser, require_user
from nusadana.web.dependencies import get_db_session
from nusadana.web.models import ScheduleItemCreate, ScheduleItemOut

router = APIRouter(prefix="/api", tags=["schedule"])


@router.get("/schedule", response_model=list[ScheduleItemOut])
async def list_schedule(session: AsyncSession = Depends(get_db_session)):
    result = await session.execute(
        select(ScheduleItemModel).order_by(
            ScheduleItemModel.due_date.asc(), ScheduleItemModel.id.asc()
        )
    )
    return result.scalars().all()


@router.post("/schedule", response_model=ScheduleItemOut, status_code=201)
async def create_schedule_item(
    payload: ScheduleItemCreate,
    current: CurrentUser = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    item = ScheduleItemModel(**payload.model_dump())
    session.add(item)
    await session.commit()
    return item
