"""
Challenge analysis API endpoints.

Runs an analysis strategy against the stored library and exposes the
stored analysis history.
"""

from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from courtside.config import DEFAULT_HISTORY_LIMIT, settings
from courtside.db import compare_methods, get_analysis_history
from courtside.db.database import get_session
from courtside.models.analysis import AnalysisResult, MatchResult
from courtside.models.card import Card
from courtside.services.analysis_service import analyze_stored_challenge, get_strategy

router = APIRouter(prefix="/analysis", tags=["analysis"])


class CardResponse(BaseModel):
    """A library card referenced by a match."""

    id: str
    player_name: str
    play_type: str | None = None
    moment_date: str | None = None
    series: str | None = None
    team: str | None = None
    rarity: str | None = None


class RequirementResponse(BaseModel):
    """Match outcome for one required card."""

    title: str
    rarity: str = ""
    status: str
    matched_card: CardResponse | None = None
    candidates: list[CardResponse] = Field(default_factory=list)
    notes: str = ""
    reason: str | None = None
    alternatives: list[str] = Field(default_factory=list)


class AnalysisResponse(BaseModel):
    """Response model for an analysis run."""

    challenge_id: str
    challenge_title: str
    analysis_method: str
    library_size: int
    completion_percentage: int
    can_complete: bool
    total_required: int
    exact_matches: int
    rarity_upgrades: int
    potential_matches: int
    missing: int
    requirements: list[RequirementResponse] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    summary: str = ""
    duration_ms: int = 0
    saved_analysis_id: str | None = Field(
        default=None,
        description="Id of the stored run, or null when not saved",
    )
    previous_completion_percentage: int | None = Field(
        default=None,
        description="Completion of the last stored run by the same method",
    )


class HistoryEntryResponse(BaseModel):
    """One stored analysis run."""

    id: str
    challenge_id: str
    challenge_title: str
    analysis_method: str
    completion_percentage: int
    can_complete: bool
    total_required_cards: int
    exact_matches: int
    rarity_upgrades: int
    potential_matches: int
    missing_cards: int
    analysis_summary: str | None = None
    recommendations: list[Any] = Field(default_factory=list)
    analysis_duration_ms: int | None = None
    created_at: datetime | None = None


class HistoryResponse(BaseModel):
    """Response model for analysis history."""

    analyses: list[HistoryEntryResponse] = Field(default_factory=list)
    count: int = 0


class MethodComparisonResponse(BaseModel):
    """Latest completion percentage of a challenge per method."""

    challenge_id: str
    methods: dict[str, int] = Field(default_factory=dict)


def _card_response(card: Card) -> CardResponse:
    return CardResponse(
        id=card.id,
        player_name=card.player_name,
        play_type=card.play_type,
        moment_date=card.moment_date,
        series=card.series,
        team=card.team,
        rarity=card.rarity.value if card.rarity else None,
    )


def _requirement_response(result: MatchResult) -> RequirementResponse:
    return RequirementResponse(
        title=result.requirement.title,
        rarity=result.requirement.rarity_text,
        status=result.status.value,
        matched_card=_card_response(result.matched_card) if result.matched_card else None,
        candidates=[_card_response(card) for card in result.candidates],
        notes=result.notes,
        reason=result.reason,
        alternatives=list(result.alternatives),
    )


def _analysis_response(result: AnalysisResult) -> AnalysisResponse:
    return AnalysisResponse(
        challenge_id=result.challenge_id,
        challenge_title=result.challenge_title,
        analysis_method=result.analysis_method,
        library_size=result.library_size,
        completion_percentage=result.completion_percentage,
        can_complete=result.can_complete,
        total_required=result.total_requirements,
        exact_matches=result.exact_matches,
        rarity_upgrades=result.rarity_upgrades,
        potential_matches=result.potential_matches,
        missing=result.missing,
        requirements=[_requirement_response(r) for r in result.per_requirement],
        recommendations=list(result.recommendations),
        summary=result.summary,
    )


@router.get("/history", response_model=HistoryResponse)
async def analysis_history(
    session: Annotated[AsyncSession, Depends(get_session)],
    challenge_id: str | None = None,
    limit: Annotated[int, Query(ge=1, le=100)] = DEFAULT_HISTORY_LIMIT,
) -> HistoryResponse:
    """Get stored analyses, newest first."""
    records = await get_analysis_history(session, challenge_id=challenge_id, limit=limit)
    entries = [
        HistoryEntryResponse(
            id=record.id,
            challenge_id=record.challenge_id,
            challenge_title=record.challenge_title,
            analysis_method=record.analysis_method,
            completion_percentage=record.completion_percentage,
            can_complete=record.can_complete,
            total_required_cards=record.total_required_cards,
            exact_matches=record.exact_matches,
            rarity_upgrades=record.rarity_upgrades,
            potential_matches=record.potential_matches,
            missing_cards=record.missing_cards,
            analysis_summary=record.analysis_summary,
            recommendations=record.recommendations or [],
            analysis_duration_ms=record.analysis_duration_ms,
            created_at=record.created_at,
        )
        for record in records
    ]
    return HistoryResponse(analyses=entries, count=len(entries))


@router.post("/{challenge_id}", response_model=AnalysisResponse)
async def analyze(
    challenge_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
    strategy: str | None = None,
    save: bool | None = None,
) -> AnalysisResponse:
    """
    Analyze a stored challenge against the stored library.

    A failing model-backed strategy falls back to the rule-based engine;
    the response's analysis_method shows which one answered.
    """
    selected = get_strategy(strategy or settings.default_strategy)
    should_save = settings.save_analysis_results if save is None else save

    run = await analyze_stored_challenge(session, challenge_id, selected, save=should_save)

    response = _analysis_response(run.result)
    response.duration_ms = run.duration_ms
    response.saved_analysis_id = run.record_id
    response.previous_completion_percentage = run.previous_percentage
    return response


@router.get("/{challenge_id}/methods", response_model=MethodComparisonResponse)
async def analysis_methods(
    challenge_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> MethodComparisonResponse:
    """Compare the latest completion percentage of each analysis method."""
    methods = await compare_methods(session, challenge_id)
    return MethodComparisonResponse(challenge_id=challenge_id, methods=methods)
