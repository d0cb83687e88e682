"""Dashboard metrics routes.

Routes:
- GET /api/metrics/projects-by-month - Project count, budget and spending per month
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nusadana.reporting.metrics import compute_projects_by_month
from nusadana.web.dependencies import get_db_session
from nusadana.web.models import MonthMetricsOut

router = APIRouter(prefix="/api/metrics", tags=["metrics"])


@router.get("/projects-by-month", response_model=dict[str, MonthMetricsOut])
async def projects_by_month(session: AsyncSession = Depends(get_db_session)):
    buckets = await compute_projects_by_month(session)
    return {
        month: MonthMetricsOut(
            projects=bucket.projects,
            fundsIn=bucket.funds_in,
            fundsOut=bucket.funds_out,
        )
        for month, bucket in buckets.items()
    }
