"""
Analysis orchestration.

Selects a strategy, runs it with the rule-based engine as the fallback,
and ties analyses to the store: loading the challenge and library,
reporting the previous run, and persisting the new one.

INVARIANTS:
- A semantic strategy failure never fails the analysis; the rule-based
  engine answers instead, tagged "rule_based_fallback"
- Storage failures never change the returned AnalysisResult
"""

import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from courtside.analysis.engine import RULE_BASED_METHOD, AnalysisStrategy, RuleBasedStrategy
from courtside.analysis.fuzzy import FuzzyMatchIndex
from courtside.db.operations import (
    challenge_to_model,
    get_challenge,
    get_library_records,
    get_previous_analysis,
    persist_analysis,
)
from courtside.models.analysis import AnalysisResult
from courtside.models.challenge import Challenge
from courtside.models.failure import (
    ChallengeNotFoundError,
    FailureKind,
    KnownError,
    SemanticAnalyzerError,
)
from courtside.parsers.library import parse_library
from courtside.semantic import ClaudeAnalyzer, HuggingFaceAnalyzer, OllamaAnalyzer

logger = logging.getLogger(__name__)

FALLBACK_METHOD = "rule_based_fallback"

STRATEGY_NAMES = frozenset({RULE_BASED_METHOD, "claude", "ollama", "huggingface"})


def get_strategy(name: str) -> AnalysisStrategy:
    """
    Build the strategy registered under a name.

    Raises:
        KnownError: If the name is not a known strategy
    """
    if name == RULE_BASED_METHOD:
        return RuleBasedStrategy()
    if name == "claude":
        return ClaudeAnalyzer()
    if name == "ollama":
        return OllamaAnalyzer()
    if name == "huggingface":
        return HuggingFaceAnalyzer()

    raise KnownError(
        kind=FailureKind.INVALID_INPUT,
        message=f"Unknown analysis strategy '{name}'",
        suggestion=f"Use one of: {', '.join(sorted(STRATEGY_NAMES))}",
    )


async def run_analysis(
    challenge: Challenge,
    index: FuzzyMatchIndex,
    strategy: AnalysisStrategy,
) -> AnalysisResult:
    """
    Run a strategy, falling back to the rule-based engine on failure.

    Args:
        challenge: Challenge to analyze
        index: Index over the library snapshot
        strategy: Preferred strategy

    Returns:
        The strategy's result, or the rule-based fallback result
    """
    try:
        return await strategy.analyze(challenge, index)
    except SemanticAnalyzerError as e:
        logger.warning(
            "%s analysis of %s failed (%s), using rule-based fallback",
            strategy.name,
            challenge.id,
            e.reason,
        )

    return await RuleBasedStrategy(method=FALLBACK_METHOD).analyze(challenge, index)


@dataclass(frozen=True)
class AnalysisRun:
    """An analysis result with its storage outcome."""

    result: AnalysisResult
    duration_ms: int
    record_id: str | None
    previous_percentage: int | None
    previous_analyzed_at: datetime | None


async def load_library_index(session: AsyncSession) -> FuzzyMatchIndex:
    """Parse the stored library into a shareable index."""
    records = await get_library_records(session)
    return FuzzyMatchIndex(parse_library(records))


async def analyze_stored_challenge(
    session: AsyncSession,
    challenge_id: str,
    strategy: AnalysisStrategy,
    save: bool = True,
    index: FuzzyMatchIndex | None = None,
) -> AnalysisRun:
    """
    Analyze a stored challenge against the stored library.

    Args:
        session: Database session
        challenge_id: Challenge to analyze
        strategy: Preferred strategy
        save: Persist the result to analysis history
        index: Prebuilt library index, loaded from the store when omitted

    Raises:
        ChallengeNotFoundError: If the challenge does not exist
    """
    db_challenge = await get_challenge(session, challenge_id)
    if db_challenge is None:
        raise ChallengeNotFoundError(challenge_id)
    challenge = challenge_to_model(db_challenge)

    if index is None:
        index = await load_library_index(session)

    logger.info(
        "Analyzing %s (%d required cards) against %d library cards",
        challenge.title,
        challenge.requirement_count(),
        len(index),
    )

    previous = await get_previous_analysis(session, challenge.id, strategy.name)
    previous_percentage = previous.completion_percentage if previous else None
    previous_analyzed_at = previous.created_at if previous else None
    if previous is not None and previous.created_at is not None:
        created_at = previous.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)
        hours = round((datetime.now(UTC) - created_at).total_seconds() / 3600)
        logger.info(
            "Previous analysis found from %d hours ago (%d%%)",
            hours,
            previous.completion_percentage,
        )

    started = time.perf_counter()
    result = await run_analysis(challenge, index, strategy)
    duration_ms = int((time.perf_counter() - started) * 1000)

    record_id = await persist_analysis(session, result, duration_ms) if save else None

    return AnalysisRun(
        result=result,
        duration_ms=duration_ms,
        record_id=record_id,
        previous_percentage=previous_percentage,
        previous_analyzed_at=previous_analyzed_at,
    )
