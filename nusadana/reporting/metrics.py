"""Month-bucketed project metrics for the dashboard chart."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nusadana.db.models import ExpenseModel, ProjectModel
from nusadana.reporting.funds import ZERO, to_money


@dataclass
class MonthBucket:
    """Activity for one calendar month."""

    projects: int = 0
    funds_in: Decimal = field(default=ZERO)
    funds_out: Decimal = field(default=ZERO)


def month_key(value: date | datetime | str) -> str:
    """Return the ``YYYY-MM`` key for a date, datetime or ISO string."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return f"{value.year:04d}-{value.month:02d}"


def bucket_projects_by_month(
    projects: Iterable[tuple[date | datetime | str, Decimal | float | None]],
    expenses: Iterable[tuple[date | datetime | str, Decimal | float | None]],
) -> dict[str, MonthBucket]:
    """Group projects by creation month and attach expenses to those months.

    ``projects`` yields ``(created_at, estimated_budget)`` pairs; each counts
    toward ``projects`` and adds its budget to ``funds_in``. ``expenses``
    yields ``(date_spent, amount_spent)``; an expense is added to
    ``funds_out`` only when its month already has a bucket. Expenses in months
    where no project was created are dropped.

    Returns:
        Buckets keyed by ``YYYY-MM``, in ascending month order
    """
    buckets: dict[str, MonthBucket] = {}

    for created_at, budget in projects:
        bucket = buckets.setdefault(month_key(created_at), MonthBucket())
        bucket.projects += 1
        bucket.funds_in += to_money(budget)

    for date_spent, amount in expenses:
        bucket = buckets.get(month_key(date_spent))
        if bucket is not None:
            bucket.funds_out += to_money(amount)

    return dict(sorted(buckets.items()))


async def compute_projects_by_month(session: AsyncSession) -> dict[str, MonthBucket]:
    projects = await session.execute(
        select(ProjectModel.created_at, ProjectModel.estimated_budget)
    )
    expenses = await session.execute(
        select(ExpenseModel.date_spent, ExpenseModel.amount_spent)
    )
    return bucket_projects_by_month(projects.all(), expenses.all())
