"""Fund totals: money in (disbursements) versus money out (expenses).

All sums are ``Decimal`` so ``remaining`` is exact.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nusadana.db.models import ExpenseModel, FundDisbursementModel

ZERO = Decimal("0")


def to_money(value: Decimal | int | float | str | None) -> Decimal:
    """Coerce a stored or submitted amount into ``Decimal`` (``None`` -> 0)."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their shortest repr instead of binary noise
    return Decimal(str(value))


@dataclass(frozen=True)
class FundsSummary:
    """Totals across a set of disbursements and expenses."""

    total_disbursed: Decimal
    total_spent: Decimal

    @property
    def remaining(self) -> Decimal:
        return self.total_disbursed - self.total_spent


def summarize_funds(
    disbursed_amounts: Iterable[Decimal | int | float | str | None],
    spent_amounts: Iterable[Decimal | int | float | str | None],
) -> FundsSummary:
    return FundsSummary(
        total_disbursed=sum((to_money(a) for a in disbursed_amounts), ZERO),
        total_spent=sum((to_money(a) for a in spent_amounts), ZERO),
    )


async def compute_funds_summary(
    session: AsyncSession, project_id: int | None = None
) -> FundsSummary:
    """Sum every disbursement and expense, optionally for one project."""
    disbursed_stmt = select(FundDisbursementModel.amount)
    spent_stmt = select(ExpenseModel.amount_spent)
    if project_id is not None:
        disbursed_stmt = disbursed_stmt.where(FundDisbursementModel.project_id == project_id)
        spent_stmt = spent_stmt.where(ExpenseModel.project_id == project_id)

    disbursed = (await session.execute(disbursed_stmt)).scalars().all()
    spent = (await session.execute(spent_stmt)).scalars().all()
    return summarize_funds(disbursed, spent)
