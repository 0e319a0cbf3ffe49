"""Tests for completion scoring and recommendations."""

from courtside.analysis.scorer import (
    CLOSING_SUGGESTION,
    build_summary,
    generate_recommendations,
    score_results,
)
from courtside.models.analysis import MatchResult, MatchStatus
from courtside.models.challenge import RequiredCard


def _results(*statuses: MatchStatus) -> list[MatchResult]:
    return [
        MatchResult(requirement=RequiredCard(title=f"Player {i}"), status=status)
        for i, status in enumerate(statuses)
    ]


class TestScoreResults:
    def test_partial_completion(self) -> None:
        """2 exact, 1 upgrade and 1 missing is 75% and not completable."""
        results = _results(
            MatchStatus.EXACT_MATCH,
            MatchStatus.EXACT_MATCH,
            MatchStatus.RARITY_UPGRADE,
            MatchStatus.MISSING,
        )

        score = score_results(results)

        assert score.matched_count == 3
        assert score.completion_percentage == 75
        assert score.can_complete is False

    def test_full_completion(self) -> None:
        """Every requirement matched is 100% and completable."""
        score = score_results(_results(MatchStatus.EXACT_MATCH, MatchStatus.RARITY_UPGRADE))

        assert score.completion_percentage == 100
        assert score.can_complete is True

    def test_potential_matches_do_not_count(self) -> None:
        """Potential matches never raise completion."""
        score = score_results(_results(MatchStatus.POTENTIAL_MATCH, MatchStatus.POTENTIAL_MATCH))

        assert score.completion_percentage == 0
        assert score.can_complete is False

    def test_zero_requirements_is_complete(self) -> None:
        """A challenge with no requirements is vacuously complete."""
        score = score_results([])

        assert score.completion_percentage == 100
        assert score.can_complete is True

    def test_rounds_half_up(self) -> None:
        """5/8 = 62.5% rounds up to 63."""
        results = _results(*([MatchStatus.EXACT_MATCH] * 5 + [MatchStatus.MISSING] * 3))

        assert score_results(results).completion_percentage == 63

    def test_rounds_down_below_half(self) -> None:
        """1/3 = 33.3% rounds to 33."""
        results = _results(MatchStatus.EXACT_MATCH, MatchStatus.MISSING, MatchStatus.MISSING)

        assert score_results(results).completion_percentage == 33


class TestGenerateRecommendations:
    def test_fixed_emission_order(self) -> None:
        """Recommendations follow exact, upgrade, missing, potential order."""
        results = _results(
            MatchStatus.POTENTIAL_MATCH,
            MatchStatus.MISSING,
            MatchStatus.RARITY_UPGRADE,
            MatchStatus.EXACT_MATCH,
            MatchStatus.EXACT_MATCH,
        )

        assert generate_recommendations(results) == [
            "You have 2 exact matches - great collection!",
            "You have 1 higher rarity cards that can fulfill requirements",
            "Need to acquire 1 cards to complete challenge",
            "Check NBA Top Shot marketplace for missing cards",
            "1 potential matches found - verify manually",
            CLOSING_SUGGESTION,
        ]

    def test_nothing_owned(self) -> None:
        """All-missing challenges get the focus hint."""
        recommendations = generate_recommendations(_results(MatchStatus.MISSING))

        assert recommendations == [
            "Need to acquire 1 cards to complete challenge",
            "Check NBA Top Shot marketplace for missing cards",
            "Focus on acquiring any card from this challenge first",
            CLOSING_SUGGESTION,
        ]

    def test_only_potential_has_no_focus_hint(self) -> None:
        """The focus hint needs at least one missing requirement."""
        recommendations = generate_recommendations(_results(MatchStatus.POTENTIAL_MATCH))

        assert recommendations == [
            "1 potential matches found - verify manually",
            CLOSING_SUGGESTION,
        ]

    def test_closing_suggestion_always_last(self) -> None:
        """Even an empty challenge ends with the closing suggestion."""
        assert generate_recommendations([]) == [CLOSING_SUGGESTION]


class TestBuildSummary:
    def test_summary_text(self) -> None:
        """Summary counts matched requirements by kind."""
        results = _results(
            MatchStatus.EXACT_MATCH,
            MatchStatus.RARITY_UPGRADE,
            MatchStatus.MISSING,
        )

        assert build_summary(results) == "Found 2/3 required cards (1 exact, 1 upgrades)"
