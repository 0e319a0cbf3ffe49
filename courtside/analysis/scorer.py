"""
Completion scoring and recommendations.

Only exact matches and rarity upgrades count toward completion. Potential
matches are surfaced for manual verification but never inflate the
percentage or make a challenge completable.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from courtside.models.analysis import MatchResult, MatchStatus

CLOSING_SUGGESTION = "Consider checking for alternative series or special editions"


@dataclass(frozen=True)
class CompletionScore:
    """Aggregate completion of a challenge."""

    matched_count: int
    total_requirements: int
    completion_percentage: int
    can_complete: bool


def _round_half_up(value: float) -> int:
    # round() uses banker's rounding; 62.5 must become 63
    return int(value + 0.5)


def score_results(results: Sequence[MatchResult]) -> CompletionScore:
    """
    Reduce per-requirement results to a completion score.

    A challenge with no requirements is vacuously complete: 100% and
    completable.
    """
    total = len(results)
    matched = sum(1 for result in results if result.status.counts_as_matched)

    if total == 0:
        return CompletionScore(
            matched_count=0,
            total_requirements=0,
            completion_percentage=100,
            can_complete=True,
        )

    return CompletionScore(
        matched_count=matched,
        total_requirements=total,
        completion_percentage=_round_half_up(100 * matched / total),
        can_complete=matched == total,
    )


def generate_recommendations(results: Sequence[MatchResult]) -> list[str]:
    """
    Build recommendations from result counts.

    Emission order is fixed: exact matches, upgrades, missing, potential
    matches, the nothing-owned hint, then the closing suggestion.
    """
    counts = {status: 0 for status in MatchStatus}
    for result in results:
        counts[result.status] += 1

    exact = counts[MatchStatus.EXACT_MATCH]
    upgrades = counts[MatchStatus.RARITY_UPGRADE]
    missing = counts[MatchStatus.MISSING]
    potential = counts[MatchStatus.POTENTIAL_MATCH]

    recommendations: list[str] = []

    if exact > 0:
        recommendations.append(f"You have {exact} exact matches - great collection!")
    if upgrades > 0:
        recommendations.append(
            f"You have {upgrades} higher rarity cards that can fulfill requirements"
        )
    if missing > 0:
        recommendations.append(f"Need to acquire {missing} cards to complete challenge")
        recommendations.append("Check NBA Top Shot marketplace for missing cards")
    if potential > 0:
        recommendations.append(f"{potential} potential matches found - verify manually")
    if exact + upgrades == 0 and missing > 0:
        recommendations.append("Focus on acquiring any card from this challenge first")

    recommendations.append(CLOSING_SUGGESTION)
    return recommendations


def build_summary(results: Sequence[MatchResult]) -> str:
    """One-line human summary, e.g. "Found 3/4 required cards (2 exact, 1 upgrades)"."""
    exact = sum(1 for r in results if r.status == MatchStatus.EXACT_MATCH)
    upgrades = sum(1 for r in results if r.status == MatchStatus.RARITY_UPGRADE)
    return (
        f"Found {exact + upgrades}/{len(results)} required cards "
        f"({exact} exact, {upgrades} upgrades)"
    )
