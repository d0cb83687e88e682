"""Database queries for projects and their priority ranking."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from nusadana.db.models import ProjectModel


class UnknownProjectsError(LookupError):
    """Raised when a priority list names projects that do not exist."""

    def __init__(self, project_ids: list[int]):
        self.project_ids = project_ids
        super().__init__(f"Unknown project ids: {project_ids}")


async def list_projects(session: AsyncSession) -> list[ProjectModel]:
    """Return all projects, ranked ones first, then newest first."""
    result = await session.execute(
        select(ProjectModel).order_by(
            ProjectModel.priority.asc().nulls_last(),
            ProjectModel.created_at.desc(),
        )
    )
    return list(result.scalars().all())


async def get_project(session: AsyncSession, project_id: int) -> ProjectModel | None:
    return await session.get(ProjectModel, project_id)


async def set_priority_order(session: AsyncSession, project_ids: Sequence[int]) -> int:
    """Replace the whole priority ranking with ``project_ids`` in order.

    Every project row is locked and cleared, then each listed id gets
    ``position + 1``. All statements run in the caller's transaction, so a
    failure leaves the previous ranking intact once the session rolls back,
    and two overlapping re-rankings on Postgres run one after the other.

    Args:
        session: Database session (committed by the caller)
        project_ids: Project ids, highest priority first

    Returns:
        Number of projects ranked

    Raises:
        ValueError: If the same id appears more than once
        UnknownProjectsError: If any id does not match a project
    """
    ids = list(project_ids)
    if len(set(ids)) != len(ids):
        raise ValueError("priority_list contains duplicate project ids")

    # FOR UPDATE is a no-op on SQLite, which already serialises writers
    result = await session.execute(
        select(ProjectModel.id).order_by(ProjectModel.id).with_for_update()
    )
    found = set(result.scalars().all())
    missing = [pid for pid in ids if pid not in found]
    if missing:
        raise UnknownProjectsError(missing)

    # Unfiltered so the clear also waits on rows another ranking holds
    await session.execute(
        update(ProjectModel)
        .values(priority=None)
        .execution_options(synchronize_session=False)
    )

    if ids:
        ranks = {pid: position for position, pid in enumerate(ids, start=1)}
        await session.execute(
            update(ProjectModel)
            .where(ProjectModel.id.in_(ids))
            .values(priority=case(ranks, value=ProjectModel.id))
            .execution_options(synchronize_session=False)
        )

    return len(ids)
