"""
Challenge API endpoints.

Challenges arrive as scraped records and are stored with their ordered
card requirements.
"""

from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.config import DEFAULT_CHALLENGE_LIMIT
from courtside.db import challenge_to_model, get_challenge, list_challenges, upsert_challenge
from courtside.db.database import get_session
from courtside.models.challenge import Challenge
from courtside.models.failure import ChallengeNotFoundError
from courtside.parsers.challenge import parse_challenge

router = APIRouter(prefix="/challenges", tags=["challenges"])


class RequiredCardResponse(BaseModel):
    """One card requirement of a challenge."""

    title: str
    rarity: str = ""
    type: str = "required_card"


class ChallengeResponse(BaseModel):
    """Response model for a stored challenge."""

    id: str
    title: str
    description: str | None = None
    url: str | None = None
    full_url: str | None = None
    countdown: str | None = None
    scraped_at: datetime | None = None
    required_cards: list[RequiredCardResponse] = Field(default_factory=list)
    total_required: int = 0


class ChallengeListResponse(BaseModel):
    """Response model for the challenge listing."""

    challenges: list[ChallengeResponse] = Field(default_factory=list)
    count: int = 0


def _to_response(challenge: Challenge) -> ChallengeResponse:
    return ChallengeResponse(
        id=challenge.id,
        title=challenge.title,
        description=challenge.description,
        url=challenge.url,
        full_url=challenge.full_url,
        countdown=challenge.countdown,
        scraped_at=challenge.scraped_at,
        required_cards=[
            RequiredCardResponse(title=card.title, rarity=card.rarity_text, type=card.type)
            for card in challenge.required_cards
        ],
        total_required=challenge.requirement_count(),
    )


@router.get("", response_model=ChallengeListResponse)
async def get_challenges(
    session: Annotated[AsyncSession, Depends(get_session)],
    limit: Annotated[int, Query(ge=1, le=100)] = DEFAULT_CHALLENGE_LIMIT,
) -> ChallengeListResponse:
    """List the most recently scraped challenges."""
    rows = await list_challenges(session, limit=limit)
    challenges = [_to_response(challenge_to_model(row)) for row in rows]
    return ChallengeListResponse(challenges=challenges, count=len(challenges))


@router.get("/{challenge_id}", response_model=ChallengeResponse)
async def get_one_challenge(
    challenge_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ChallengeResponse:
    """Get a challenge with its required cards in page order."""
    row = await get_challenge(session, challenge_id)
    if row is None:
        raise ChallengeNotFoundError(challenge_id)
    return _to_response(challenge_to_model(row))


@router.put("", response_model=ChallengeResponse)
async def put_challenge(
    record: Annotated[
        dict[str, Any],
        Body(
            examples=[
                {
                    "title": "Playoff Push",
                    "url": "/challenges/playoff-push",
                    "requiredCards": [
                        {"title": "LeBron James 2025 NBA Playoffs", "rarity": "Rare"}
                    ],
                }
            ]
        ),
    ],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ChallengeResponse:
    """
    Store one scraped challenge record.

    Re-sending a challenge with a known URL replaces its stored
    requirements. Malformed records are rejected with 422.
    """
    challenge = parse_challenge(record)
    row = await upsert_challenge(session, challenge)
    return _to_response(challenge_to_model(row))
