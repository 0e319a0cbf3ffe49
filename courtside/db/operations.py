"""
Database CRUD operations.

Provides async functions for challenges, the card library and analysis
history. Analysis persistence is fire-and-forget from the analyzer's point
of view: persist_analysis() logs storage errors instead of raising them.
"""

import logging
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from courtside.config import DEFAULT_CHALLENGE_LIMIT, DEFAULT_HISTORY_LIMIT
from courtside.models.analysis import AnalysisResult, MatchResult, MatchStatus
from courtside.models.card import Card, LibraryRecord
from courtside.models.challenge import Challenge, RequiredCard
from courtside.models.db import (
    ChallengeAnalysisDB,
    ChallengeDB,
    LibraryDocumentDB,
    RequiredCardDB,
)

logger = logging.getLogger(__name__)

ANALYZER_VERSION = "1.0"

# --- Challenge Operations ---


async def get_challenge(session: AsyncSession, challenge_id: str) -> ChallengeDB | None:
    """
    Get a challenge with its required cards.

    Returns None if the challenge does not exist.
    """
    result = await session.execute(
        select(ChallengeDB)
        .where(ChallengeDB.id == challenge_id)
        .options(selectinload(ChallengeDB.required_cards))
    )
    return result.scalar_one_or_none()


async def get_challenge_by_url(session: AsyncSession, url: str) -> ChallengeDB | None:
    """Get a challenge by its page URL."""
    result = await session.execute(
        select(ChallengeDB)
        .where(ChallengeDB.url == url)
        .options(selectinload(ChallengeDB.required_cards))
    )
    return result.scalar_one_or_none()


async def list_challenges(
    session: AsyncSession, limit: int = DEFAULT_CHALLENGE_LIMIT
) -> list[ChallengeDB]:
    """Get the most recently scraped challenges."""
    result = await session.execute(
        select(ChallengeDB)
        .options(selectinload(ChallengeDB.required_cards))
        .order_by(ChallengeDB.scraped_at.desc().nulls_last(), ChallengeDB.title)
        .limit(limit)
    )
    return list(result.scalars().all())


def _required_card_rows(challenge: Challenge) -> list[RequiredCardDB]:
    return [
        RequiredCardDB(
            position=position,
            title=required.title,
            rarity=required.rarity_text or None,
            type=required.type,
        )
        for position, required in enumerate(challenge.required_cards)
    ]


async def upsert_challenge(session: AsyncSession, challenge: Challenge) -> ChallengeDB:
    """
    Insert or update a challenge.

    Re-scrapes are matched by URL when one is known, otherwise by id.
    Required cards are replaced wholesale so the stored order always
    matches the latest scrape.
    """
    existing = None
    if challenge.url:
        existing = await get_challenge_by_url(session, challenge.url)
    if existing is None:
        existing = await get_challenge(session, challenge.id)

    if existing:
        existing.title = challenge.title
        existing.description = challenge.description
        existing.url = challenge.url
        existing.full_url = challenge.full_url
        existing.countdown_formatted = challenge.countdown
        existing.scraped_at = challenge.scraped_at
        existing.required_cards.clear()
        await session.flush()
        existing.required_cards.extend(_required_card_rows(challenge))
        await session.flush()
        return existing

    db_challenge = ChallengeDB(
        id=challenge.id,
        title=challenge.title,
        description=challenge.description,
        url=challenge.url,
        full_url=challenge.full_url,
        countdown_formatted=challenge.countdown,
        scraped_at=challenge.scraped_at,
        required_cards=_required_card_rows(challenge),
    )
    session.add(db_challenge)
    await session.flush()
    return db_challenge


def challenge_to_model(db_challenge: ChallengeDB) -> Challenge:
    """Convert a database challenge to a domain model."""
    return Challenge(
        id=db_challenge.id,
        title=db_challenge.title,
        required_cards=tuple(
            RequiredCard(title=row.title, rarity_text=row.rarity or "", type=row.type)
            for row in sorted(db_challenge.required_cards, key=lambda row: row.position)
        ),
        description=db_challenge.description,
        url=db_challenge.url,
        full_url=db_challenge.full_url,
        countdown=db_challenge.countdown_formatted,
        scraped_at=db_challenge.scraped_at,
    )


# --- Library Operations ---


async def get_library_records(session: AsyncSession) -> list[LibraryRecord]:
    """Get every raw library record in id order."""
    result = await session.execute(select(LibraryDocumentDB).order_by(LibraryDocumentDB.id))
    return [LibraryRecord(id=str(row.id), content=row.content) for row in result.scalars().all()]


async def replace_library(session: AsyncSession, contents: list[str]) -> int:
    """
    Replace the card library with new raw records.

    Returns the number of records stored.
    """
    await session.execute(delete(LibraryDocumentDB))
    session.add_all(LibraryDocumentDB(content=content) for content in contents)
    await session.flush()
    return len(contents)


# --- Analysis Operations ---


def _card_to_dict(card: Card) -> dict[str, Any]:
    return {
        "id": card.id,
        "player_name": card.player_name,
        "play_type": card.play_type,
        "series": card.series,
        "team": card.team,
        "rarity": card.rarity.value if card.rarity else None,
    }


def _required_to_dict(required: RequiredCard) -> dict[str, Any]:
    return {"title": required.title, "rarity": required.rarity_text}


def _result_details(
    results: tuple[MatchResult, ...],
) -> tuple[list[dict[str, Any]], list[dict[str, Any]], list[dict[str, Any]]]:
    matching: list[dict[str, Any]] = []
    missing: list[dict[str, Any]] = []
    potential: list[dict[str, Any]] = []

    for result in results:
        required = _required_to_dict(result.requirement)
        if result.status.counts_as_matched and result.matched_card is not None:
            matching.append(
                {
                    "required": required,
                    "library_match": _card_to_dict(result.matched_card),
                    "match_status": result.status.value,
                    "notes": result.notes,
                }
            )
        elif result.status == MatchStatus.POTENTIAL_MATCH:
            potential.append(
                {
                    "required": required,
                    "potential_matches": [_card_to_dict(card) for card in result.candidates],
                    "match_status": result.status.value,
                    "notes": result.notes,
                }
            )
        else:
            missing.append(
                {
                    "required": required,
                    "reason": result.reason or result.notes,
                    "alternatives": list(result.alternatives),
                }
            )

    return matching, missing, potential


async def save_analysis(
    session: AsyncSession,
    result: AnalysisResult,
    duration_ms: int | None = None,
) -> ChallengeAnalysisDB:
    """Store an analysis run."""
    matching, missing, potential = _result_details(result.per_requirement)

    record = ChallengeAnalysisDB(
        challenge_id=result.challenge_id,
        challenge_title=result.challenge_title,
        analysis_method=result.analysis_method,
        analyzer_version=ANALYZER_VERSION,
        library_size=result.library_size,
        can_complete=result.can_complete,
        completion_percentage=result.completion_percentage,
        total_required_cards=result.total_requirements,
        exact_matches=result.exact_matches,
        rarity_upgrades=result.rarity_upgrades,
        potential_matches=result.potential_matches,
        missing_cards=result.missing,
        matching_cards=matching,
        missing_cards_details=missing,
        potential_matches_details=potential,
        ai_raw_response=result.raw_response,
        analysis_summary=result.summary,
        recommendations=list(result.recommendations),
        analysis_duration_ms=duration_ms,
    )
    session.add(record)
    await session.flush()
    return record


async def persist_analysis(
    session: AsyncSession,
    result: AnalysisResult,
    duration_ms: int | None = None,
) -> str | None:
    """
    Store an analysis run without letting storage errors escape.

    Returns the stored record id, or None if the store rejected it.
    """
    try:
        record = await save_analysis(session, result, duration_ms)
    except SQLAlchemyError as e:
        logger.warning("Failed to save analysis for %s: %s", result.challenge_id, e)
        await session.rollback()
        return None

    logger.info("Saved analysis %s for challenge %s", record.id, result.challenge_id)
    return record.id


async def get_previous_analysis(
    session: AsyncSession,
    challenge_id: str,
    method: str = "rule_based",
) -> ChallengeAnalysisDB | None:
    """Get the latest stored analysis of a challenge by one method."""
    result = await session.execute(
        select(ChallengeAnalysisDB)
        .where(
            ChallengeAnalysisDB.challenge_id == challenge_id,
            ChallengeAnalysisDB.analysis_method == method,
        )
        .order_by(ChallengeAnalysisDB.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_analysis_history(
    session: AsyncSession,
    challenge_id: str | None = None,
    limit: int = DEFAULT_HISTORY_LIMIT,
) -> list[ChallengeAnalysisDB]:
    """Get stored analyses, newest first, optionally for one challenge."""
    query = select(ChallengeAnalysisDB).order_by(ChallengeAnalysisDB.created_at.desc())
    if challenge_id:
        query = query.where(ChallengeAnalysisDB.challenge_id == challenge_id)

    result = await session.execute(query.limit(limit))
    return list(result.scalars().all())


async def compare_methods(session: AsyncSession, challenge_id: str) -> dict[str, int]:
    """
    Latest completion percentage of a challenge per analysis method.

    Returns:
        Dict mapping method name to its most recent completion percentage
    """
    result = await session.execute(
        select(ChallengeAnalysisDB)
        .where(ChallengeAnalysisDB.challenge_id == challenge_id)
        .order_by(ChallengeAnalysisDB.created_at.desc())
    )

    latest: dict[str, int] = {}
    for record in result.scalars().all():
        latest.setdefault(record.analysis_method, record.completion_percentage)
    return latest
