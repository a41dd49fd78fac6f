"""Health check endpoint for monitoring."""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from imagehoster.core.dependencies import get_db

router = APIRouter(tags=["health"])

ROUTER_CONFIG = {"prefix": ""}


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)) -> dict:
    """Health check endpoint; also confirms the database answers."""
    await db.execute(text("SELECT 1"))
    return {"status": "healthy", "database": "ok"}
