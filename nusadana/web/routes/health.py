"""Health check API routes.

Provides an endpoint for monitoring application health and connectivity.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from nusadana.web.dependencies import get_db_session

router = APIRouter(prefix="/api/health", tags=["Health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check(session: AsyncSession = Depends(get_db_session)):
    """Check application health.

    Verifies database connectivity.
    """
    await session.execute(text("SELECT 1"))
    return {"status": "ok", "database": "connected"}
