"""Funds and spending routes.

Disbursements are money IN, expenses are money OUT. Both are append-only.

Routes:
- GET  /api/funds                           - Totals and remaining balance
- GET  /api/funds/distribution              - Every disbursement, newest first
- GET  /api/projects/{id}/disbursements     - A project's disbursements
- POST /api/projects/{id}/disbursements     - Record a disbursement
- GET  /api/projects/{id}/expenses          - A project's expenses
- POST /api/projects/{id}/expenses          - Record an expense
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nusadana.db.models import ExpenseModel, FundDisbursementModel, ProjectModel
from nusadana.reporting.funds import compute_funds_summary
from nusadana.web.auth import CurrentUser, require_user
from nusadana.web.dependencies import get_db_session, load_project
from nusadana.web.models import (
    DisbursementCreate,
    DisbursementOut,
    ExpenseCreate,
    ExpenseOut,
    FundsSummaryOut,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["funds"])


@router.get("/funds", response_model=FundsSummaryOut)
async def funds_summary(session: AsyncSession = Depends(get_db_session)):
    summary = await compute_funds_summary(session)
    return FundsSummaryOut(
        totalDisbursed=summary.total_disbursed,
        totalSpent=summary.total_spent,
        remaining=summary.remaining,
    )


@router.get("/funds/distribution", response_model=list[DisbursementOut])
async def funds_distribution(session: AsyncSession = Depends(get_db_session)):
    result = await session.execute(
        select(FundDisbursementModel).order_by(
            FundDisbursementModel.date_received.desc(), FundDisbursementModel.id.desc()
        )
    )
    return result.scalars().all()


@router.get("/projects/{project_id}/disbursements", response_model=list[DisbursementOut])
async def list_disbursements(
    project: ProjectModel = Depends(load_project),
    session: AsyncSession = Depends(get_db_session),
):
    result = await session.execute(
        select(FundDisbursementModel)
        .where(FundDisbursementModel.project_id == project.id)
        .order_by(
            FundDisbursementModel.date_received.desc(), FundDisbursementModel.id.desc()
        )
    )
    return result.scalars().all()


@router.post(
    "/projects/{project_id}/disbursements",
    response_model=DisbursementOut,
    status_code=201,
)
async def create_disbursement(
    payload: DisbursementCreate,
    current: CurrentUser = Depends(require_user),
    project: ProjectModel = Depends(load_project),
    session: AsyncSession = Depends(get_db_session),
):
    disbursement = FundDisbursementModel(project_id=project.id, **payload.model_dump())
    session.add(disbursement)
    await session.commit()

    logger.info(
        "disbursement_recorded",
        project_id=project.id,
        amount=str(disbursement.amount),
        user_id=current.id,
    )
    return disbursement


@router.get("/projects/{project_id}/expenses", response_model=list[ExpenseOut])
async def list_expenses(
    project: ProjectModel = Depends(load_project),
    session: AsyncSession = Depends(get_db_session),
):
    result = await session.execute(
        select(ExpenseModel)
        .where(ExpenseModel.project_id == project.id)
        .order_by(ExpenseModel.date_spent.desc(), ExpenseModel.id.desc())
    )
    return result.scalars().all()


@router.post("/projects/{project_id}/expenses", response_model=ExpenseOut, status_code=201)
async def create_expense(
    payload: ExpenseCreate,
    current: CurrentUser = Depends(require_user),
    project: ProjectModel = Depends(load_project),
    session: AsyncSession = Depends(get_db_session),
):
    expense = ExpenseModel(project_id=project.id, **payload.model_dump())
    session.add(expense)
    await session.commit()

    logger.info(
        "expense_recorded",
        project_id=project.id,
        amount=str(expense.amount_spent),
        user_id=current.id,
    )
    return expense
