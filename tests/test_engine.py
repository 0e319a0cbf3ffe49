"""Tests for rule-based challenge analysis."""

from courtside.analysis.engine import RULE_BASED_METHOD, RuleBasedStrategy, analyze_challenge
from courtside.analysis.fuzzy import FuzzyMatchIndex
from courtside.models.analysis import MatchStatus
from courtside.models.card import RARITY_ORDER, Card, LibraryRecord, Rarity
from courtside.models.challenge import Challenge, RequiredCard
from courtside.parsers.library import parse_library


def _challenge(*requirements: RequiredCard) -> Challenge:
    return Challenge(id="c1", title="Test Challenge", required_cards=requirements)


class TestAnalyzeChallenge:
    def test_sample_challenge(
        self, sample_challenge: Challenge, sample_library_records: list[LibraryRecord]
    ) -> None:
        """Upgrade, alias exact match and missing requirement combine to 67%."""
        cards = parse_library(sample_library_records)

        result = analyze_challenge(sample_challenge, cards)

        assert [r.status for r in result.per_requirement] == [
            MatchStatus.RARITY_UPGRADE,
            MatchStatus.EXACT_MATCH,
            MatchStatus.MISSING,
        ]
        assert result.completion_percentage == 67
        assert result.can_complete is False
        assert result.library_size == 4
        assert result.analysis_method == RULE_BASED_METHOD
        assert result.summary == "Found 2/3 required cards (1 exact, 1 upgrades)"
        assert result.raw_response is None

    def test_empty_library(self) -> None:
        """Against an empty library every requirement is missing."""
        result = analyze_challenge(_challenge(RequiredCard("Pascal Siakam", "Common")), [])

        assert result.per_requirement[0].status == MatchStatus.MISSING
        assert result.completion_percentage == 0
        assert result.can_complete is False

    def test_zero_requirements(self) -> None:
        """A challenge with no requirements is complete."""
        result = analyze_challenge(_challenge(), [])

        assert result.completion_percentage == 100
        assert result.can_complete is True
        assert result.per_requirement == ()

    def test_results_follow_requirement_order(self) -> None:
        """One result per requirement, in order."""
        requirements = (
            RequiredCard("Rudy Gobert", "Rare"),
            RequiredCard("Obi Toppin", "Common"),
        )
        cards = [Card(id="1", player_name="Obi Toppin", rarity=Rarity.COMMON)]

        result = analyze_challenge(_challenge(*requirements), cards)

        assert [r.requirement for r in result.per_requirement] == list(requirements)

    def test_idempotent(
        self, sample_challenge: Challenge, sample_library_records: list[LibraryRecord]
    ) -> None:
        """Same challenge and library give the same result."""
        index = FuzzyMatchIndex(parse_library(sample_library_records))

        assert analyze_challenge(sample_challenge, index) == analyze_challenge(
            sample_challenge, index
        )

    def test_adding_cards_never_lowers_completion(
        self, sample_challenge: Challenge, sample_library_records: list[LibraryRecord]
    ) -> None:
        """Growing the library never reduces completion."""
        cards = parse_library(sample_library_records)
        before = analyze_challenge(sample_challenge, cards)

        extra = Card(id="99", player_name="Rudy Gobert", series="Series 7 LE", rarity=Rarity.RARE)
        after = analyze_challenge(sample_challenge, [*cards, extra])

        assert after.completion_percentage >= before.completion_percentage
        assert after.can_complete is True

    def test_matched_cards_are_consistent(
        self, sample_challenge: Challenge, sample_library_records: list[LibraryRecord]
    ) -> None:
        """Upgrades are strictly above the required tier and only matches carry a card."""
        result = analyze_challenge(sample_challenge, parse_library(sample_library_records))

        for match in result.per_requirement:
            if match.status == MatchStatus.RARITY_UPGRADE:
                assert RARITY_ORDER[match.matched_card.rarity] > RARITY_ORDER[Rarity.COMMON]
            if match.status in (MatchStatus.POTENTIAL_MATCH, MatchStatus.MISSING):
                assert match.matched_card is None

    def test_completion_bounds(self) -> None:
        """Completion stays within 0-100 and equals 100 only when completable."""
        cards = [Card(id="1", player_name="Obi Toppin", rarity=Rarity.COMMON)]
        for requirements in [
            (RequiredCard("Obi Toppin", "Common"),),
            (RequiredCard("Obi Toppin", "Common"), RequiredCard("Rudy Gobert", "Rare")),
            (RequiredCard("Rudy Gobert", "Rare"),),
        ]:
            result = analyze_challenge(_challenge(*requirements), cards)

            assert 0 <= result.completion_percentage <= 100
            assert (result.completion_percentage == 100) == result.can_complete

    def test_custom_method_label(self) -> None:
        """The method label is recorded on the result."""
        result = analyze_challenge(_challenge(), [], method="rule_based_fallback")

        assert result.analysis_method == "rule_based_fallback"


class TestRuleBasedStrategy:
    async def test_strategy_matches_engine(
        self, sample_challenge: Challenge, sample_library_records: list[LibraryRecord]
    ) -> None:
        """The strategy returns the engine's result."""
        index = FuzzyMatchIndex(parse_library(sample_library_records))

        result = await RuleBasedStrategy().analyze(sample_challenge, index)

        assert result == analyze_challenge(sample_challenge, index)
        assert RuleBasedStrategy.name == RULE_BASED_METHOD
