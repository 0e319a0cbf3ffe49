"""
Card library API endpoints.

The library is a single set of raw moment records. Uploads replace it
wholesale; reads return it grouped by player, rarity and series.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.analysis.summary import summarize_library
from courtside.db import get_library_records, replace_library
from courtside.db.database import get_session
from courtside.models.failure import FailureKind, KnownError
from courtside.parsers.library import SEGMENT_DELIMITER, parse_library

router = APIRouter(prefix="/library", tags=["library"])


class LibraryUpdateRequest(BaseModel):
    """Request model for replacing the library."""

    records: list[str] = Field(
        ...,
        description="Raw moment records, one card each",
        examples=[["LeBron James - Dunk - Jan 1 2024, Series 1, Lakers"]],
    )


class LibraryUpdateResponse(BaseModel):
    """Response model for a library replacement."""

    records_stored: int
    unparsed_records: int = Field(
        default=0,
        description="Records stored but not in the '<player> - <play> - <details>' shape",
    )


class LibraryGroupResponse(BaseModel):
    """Cards sharing a player, rarity and series."""

    player_name: str
    rarity: str
    series: str
    count: int
    play_types: list[str] = Field(default_factory=list)


class LibrarySummaryResponse(BaseModel):
    """Response model for the grouped library."""

    total_cards: int = 0
    groups: list[LibraryGroupResponse] = Field(default_factory=list)


@router.put("", response_model=LibraryUpdateResponse)
async def put_library(
    request: LibraryUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> LibraryUpdateResponse:
    """
    Replace the card library.

    Malformed records are kept; they degrade to unknown-player cards
    when analyzed.
    """
    records = [record.strip() for record in request.records if record.strip()]
    if not records:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message="Library cannot be empty",
            suggestion="Send at least one moment record.",
        )

    stored = await replace_library(session, records)
    unparsed = sum(1 for record in records if record.count(SEGMENT_DELIMITER) < 2)
    return LibraryUpdateResponse(records_stored=stored, unparsed_records=unparsed)


@router.get("", response_model=LibrarySummaryResponse)
async def get_library_summary(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> LibrarySummaryResponse:
    """Get the library grouped by player, rarity and series."""
    cards = parse_library(await get_library_records(session))
    groups = summarize_library(cards)

    return LibrarySummaryResponse(
        total_cards=len(cards),
        groups=[
            LibraryGroupResponse(
                player_name=group.player_name,
                rarity=group.rarity,
                series=group.series,
                count=group.count,
                play_types=group.play_types,
            )
            for group in groups
        ],
    )
