"""
Rule-based challenge analysis.

Pure and synchronous: the same challenge and library snapshot always give
the same AnalysisResult. This engine is the bottom of every fallback
chain, so it depends only on in-memory data.
"""

import logging
from collections.abc import Iterable
from typing import Protocol

from courtside.analysis.fuzzy import FuzzyMatchIndex
from courtside.analysis.matcher import RequirementMatcher
from courtside.analysis.names import NameResolver
from courtside.analysis.scorer import build_summary, generate_recommendations, score_results
from courtside.models.analysis import AnalysisResult
from courtside.models.card import Card
from courtside.models.challenge import Challenge

logger = logging.getLogger(__name__)

RULE_BASED_METHOD = "rule_based"


def analyze_challenge(
    challenge: Challenge,
    library: FuzzyMatchIndex | Iterable[Card],
    resolver: NameResolver | None = None,
    method: str = RULE_BASED_METHOD,
) -> AnalysisResult:
    """
    Analyze whether a library can complete a challenge.

    Args:
        challenge: Challenge to analyze
        library: Prebuilt index (shareable across analyses) or the cards themselves
        resolver: Name resolver, defaults to the built-in roster
        method: Label recorded on the result

    Returns:
        AnalysisResult with one MatchResult per requirement, in order
    """
    index = library if isinstance(library, FuzzyMatchIndex) else FuzzyMatchIndex(library)
    matcher = RequirementMatcher(index, resolver)

    results = tuple(matcher.match(requirement) for requirement in challenge.required_cards)
    score = score_results(results)

    logger.debug(
        "Analyzed challenge %s: %d/%d matched",
        challenge.id,
        score.matched_count,
        score.total_requirements,
    )

    return AnalysisResult(
        challenge_id=challenge.id,
        challenge_title=challenge.title,
        analysis_method=method,
        library_size=len(index),
        completion_percentage=score.completion_percentage,
        can_complete=score.can_complete,
        per_requirement=results,
        recommendations=tuple(generate_recommendations(results)),
        summary=build_summary(results),
    )


class AnalysisStrategy(Protocol):
    """A way of producing an AnalysisResult for a challenge."""

    name: str

    async def analyze(self, challenge: Challenge, index: FuzzyMatchIndex) -> AnalysisResult: ...


class RuleBasedStrategy:
    """Strategy adapter around analyze_challenge."""

    name = RULE_BASED_METHOD

    def __init__(self, resolver: NameResolver | None = None, method: str = RULE_BASED_METHOD):
        self._resolver = resolver
        self._method = method

    async def analyze(self, challenge: Challenge, index: FuzzyMatchIndex) -> AnalysisResult:
        return analyze_challenge(challenge, index, self._resolver, method=self._method)
