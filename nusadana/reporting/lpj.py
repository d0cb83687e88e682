"""LPJ (Laporan Pertanggungjawaban) accountability report.

The report is a data aggregate of one project's funds and progress; it is
returned as JSON, not rendered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nusadana.db.models import (
    ExpenseModel,
    FundDisbursementModel,
    ProgressFeedbackModel,
    ProgressUpdateModel,
    ProjectModel,
)
from nusadana.reporting.funds import FundsSummary, summarize_funds


@dataclass
class LpjReport:
    project: ProjectModel
    disbursements: Sequence[FundDisbursementModel]
    expenses: Sequence[ExpenseModel]
    progress: Sequence[ProgressUpdateModel]
    feedback: Sequence[ProgressFeedbackModel]

    @property
    def funds(self) -> FundsSummary:
        return summarize_funds(
            (d.amount for d in self.disbursements),
            (e.amount_spent for e in self.expenses),
        )

    @property
    def latest_completion(self) -> int | None:
        """Newest completion percentage; notes-only updates are skipped."""
        for entry in reversed(self.progress):
            if entry.completion_percentage is not None:
                return entry.completion_percentage
        return None


async def build_lpj_report(session: AsyncSession, project_id: int) -> LpjReport | None:
    """Collect everything recorded against a project.

    Returns:
        The report, or None if the project does not exist
    """
    project = await session.get(ProjectModel, project_id)
    if project is None:
        return None

    disbursements = await session.execute(
        select(FundDisbursementModel)
        .where(FundDisbursementModel.project_id == project_id)
        .order_by(FundDisbursementModel.date_received, FundDisbursementModel.id)
    )
    expenses = await session.execute(
        select(ExpenseModel)
        .where(ExpenseModel.project_id == project_id)
        .order_by(ExpenseModel.date_spent, ExpenseModel.id)
    )
    progress = await session.execute(
        select(ProgressUpdateModel)
        .where(ProgressUpdateModel.project_id == project_id)
        .order_by(ProgressUpdateModel.created_at, ProgressUpdateModel.id)
    )
    feedback = await session.execute(
        select(ProgressFeedbackModel)
        .where(ProgressFeedbackModel.project_id == project_id)
        .order_by(ProgressFeedbackModel.created_at, ProgressFeedbackModel.id)
    )

    return LpjReport(
        project=project,
        disbursements=disbursements.scalars().all(),
        expenses=expenses.scalars().all(),
        progress=progress.scalars().all(),
        feedback=feedback.scalars().all(),
    )
