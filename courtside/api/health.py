"""
Health check endpoints.

Liveness is unconditional; readiness checks the store and reports how much
data an analysis would run against.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.db.database import get_session
from courtside.models.db import ChallengeDB, LibraryDocumentDB

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str | None = None
    challenges: int | None = None
    library_records: int | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HealthResponse:
    """
    Readiness probe.

    Returns 503 if the database cannot be queried.
    """
    try:
        challenges = await session.scalar(select(func.count()).select_from(ChallengeDB))
        library = await session.scalar(select(func.count()).select_from(LibraryDocumentDB))
    except SQLAlchemyError:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database="disconnected")

    return HealthResponse(
        status="ready",
        database="connected",
        challenges=challenges or 0,
        library_records=library or 0,
    )
