"""
Requirement matching.

Classifies one challenge requirement against the library, in priority
order:

1. EXACT_MATCH: a card of a candidate player satisfying the tier and
   series constraints. The first one found ends the search.
2. RARITY_UPGRADE: a card of a candidate player whose tier is strictly
   above the required tier. The first one found wins.
3. POTENTIAL_MATCH: cards whose player name fuzzily matches a candidate,
   collected across the whole library.
4. MISSING: nothing plausible owned.
"""

import logging

from courtside.analysis.fuzzy import FuzzyMatchIndex
from courtside.analysis.names import NameResolver
from courtside.models.analysis import MatchResult, MatchStatus
from courtside.models.card import RARITY_ORDER, Card, Rarity
from courtside.models.challenge import RequiredCard

logger = logging.getLogger(__name__)

# Requirement qualifier that restricts matches to playoff series
PLAYOFFS_QUALIFIER = "2025 NBA Playoffs"
PLAYOFFS_SERIES_MARKERS = ("2025", "Playoffs")

OR_HIGHER_MODIFIER = "or higher tier"

# Searched in this order, first hit wins
_TIER_SEARCH_ORDER = (Rarity.LEGENDARY, Rarity.RARE, Rarity.COMMON)

MISSING_REASON = "No matching player found in library"
MISSING_ALTERNATIVES = (
    "Check marketplace",
    "Look for pack drops",
    "Verify player name spelling",
)


def extract_required_tier(rarity_text: str) -> Rarity | None:
    """Tier named in the requirement's rarity text, None if unconstrained."""
    for tier in _TIER_SEARCH_ORDER:
        if tier.value in rarity_text:
            return tier
    return None


def _allows_higher_tier(requirement: RequiredCard) -> bool:
    return OR_HIGHER_MODIFIER in requirement.rarity_text.lower()


def _meets_series_constraint(card: Card, requirement: RequiredCard) -> bool:
    if PLAYOFFS_QUALIFIER not in requirement.rarity_text:
        return True
    series = card.series or ""
    return any(marker in series for marker in PLAYOFFS_SERIES_MARKERS)


def satisfies_requirement(card: Card, requirement: RequiredCard) -> bool:
    """
    Exact-match predicate.

    A card with no inferred tier, or a requirement with no tier, is
    accepted once the series constraint passes.
    """
    if not _meets_series_constraint(card, requirement):
        return False

    required = extract_required_tier(requirement.rarity_text)
    if required is None or card.rarity is None:
        return True

    if _allows_higher_tier(requirement):
        return RARITY_ORDER[card.rarity] >= RARITY_ORDER[required]

    return required.value.lower() in card.rarity.value.lower()


def is_rarity_upgrade(card: Card, requirement: RequiredCard) -> bool:
    """True if the card's tier is strictly above the required tier."""
    required = extract_required_tier(requirement.rarity_text)
    if required is None or card.rarity is None:
        return False
    return RARITY_ORDER[card.rarity] > RARITY_ORDER[required]


class RequirementMatcher:
    """Classifies requirements against one library index."""

    def __init__(self, index: FuzzyMatchIndex, resolver: NameResolver | None = None) -> None:
        self._index = index
        self._resolver = resolver or NameResolver()

    def match(self, requirement: RequiredCard) -> MatchResult:
        """Classify a single requirement. Never raises for well-typed input."""
        names = self._resolver.resolve(requirement.title)
        if not names:
            logger.debug("No candidate names in requirement %r", requirement.title)

        upgrade: Card | None = None
        candidates: dict[str, Card] = {}

        for name in names:
            bucket = self._index.lookup(name)

            exact = next((card for card in bucket if satisfies_requirement(card, requirement)), None)
            if exact is not None:
                return MatchResult(
                    requirement=requirement,
                    status=MatchStatus.EXACT_MATCH,
                    matched_card=exact,
                    notes=f"Exact match: {exact.player_name}",
                )

            if upgrade is None:
                upgrade = next((card for card in bucket if is_rarity_upgrade(card, requirement)), None)

            for card in (*bucket, *self._index.search(name)):
                candidates.setdefault(card.id, card)

        if upgrade is not None:
            rarity = upgrade.rarity.value if upgrade.rarity else "Unknown"
            return MatchResult(
                requirement=requirement,
                status=MatchStatus.RARITY_UPGRADE,
                matched_card=upgrade,
                notes=f"Higher rarity available: {upgrade.player_name} ({rarity})",
            )

        if candidates:
            return MatchResult(
                requirement=requirement,
                status=MatchStatus.POTENTIAL_MATCH,
                candidates=tuple(candidates.values()),
                notes="Potential matches found but need verification",
            )

        return MatchResult(
            requirement=requirement,
            status=MatchStatus.MISSING,
            notes=MISSING_REASON,
            reason=MISSING_REASON,
            alternatives=MISSING_ALTERNATIVES,
        )
