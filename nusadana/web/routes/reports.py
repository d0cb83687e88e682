"""Report routes.

Routes:
- GET /api/projects/{id}/reports/lpj - LPJ accountability report
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from nusadana.reporting.lpj import build_lpj_report
from nusadana.web.dependencies import get_db_session
from nusadana.web.models import LpjReportOut, LpjSummaryOut

router = APIRouter(prefix="/api", tags=["reports"])


@router.get("/projects/{project_id}/reports/lpj", response_model=LpjReportOut)
async def lpj_report(project_id: int, session: AsyncSession = Depends(get_db_session)):
    """Aggregate one project's funds, spending, progress and feedback."""
    report = await build_lpj_report(session, project_id)
    if report is None:
        raise HTTPException(status_code=404, detail="Project not found")

    funds = report.funds
    return LpjReportOut.model_validate(
        {
            "project": report.project,
            "disbursements": report.disbursements,
            "expenses": report.expenses,
            "progress": report.progress,
            "feedback": report.feedback,
            "summary": LpjSummaryOut(
                totalDisbursed=funds.total_disbursed,
                totalSpent=funds.total_spent,
                remaining=funds.remaining,
                latestCompletion=report.latest_completion,
            ),
        },
        from_attributes=True,
    )
