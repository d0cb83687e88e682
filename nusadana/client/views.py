"""Presentation helpers for project tables."""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable


def format_rupiah(amount: Decimal | float | int | str | None) -> str:
    """Format an amount as Indonesian Rupiah, e.g. ``Rp 5.000.000``.

    Rounded to whole rupiah; dots group thousands.
    """
    value = Decimal(str(amount or 0)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,.0f}".replace(",", ".")
    return f"{sign}Rp {grouped}"


def display_projects(
    projects: Iterable[dict[str, Any]], completed_only: bool = False
) -> list[dict[str, Any]]:
    """Projects shown in the main table; all of them unless ``completed_only``."""
    if completed_only:
        return [p for p in projects if p.get("status") == "completed"]
    return list(projects)


def prioritized(projects: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Ranked projects only, lowest rank first."""
    return sorted(
        (p for p in projects if p.get("priority") is not None),
        key=lambda p: p["priority"],
    )
