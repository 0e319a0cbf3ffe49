from dataclasses import dataclass, field
from enum import Enum

from courtside.models.card import Card
from courtside.models.challenge import RequiredCard


class MatchStatus(str, Enum):
    """Classification of one requirement, strongest first."""

    EXACT_MATCH = "exact_match"
    RARITY_UPGRADE = "rarity_upgrade"
    POTENTIAL_MATCH = "potential_match"
    MISSING = "missing"

    @property
    def counts_as_matched(self) -> bool:
        """True for statuses that satisfy the requirement."""
        return self in (MatchStatus.EXACT_MATCH, MatchStatus.RARITY_UPGRADE)


@dataclass(frozen=True)
class MatchResult:
    """
    Outcome of matching one requirement against the library.

    matched_card is set only for exact matches and rarity upgrades, and
    candidates only for potential matches. reason and alternatives
    describe missing requirements.
    """

    requirement: RequiredCard
    status: MatchStatus
    matched_card: Card | None = None
    candidates: tuple[Card, ...] = field(default_factory=tuple)
    notes: str = ""
    reason: str | None = None
    alternatives: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AnalysisResult:
    """Completion analysis of one challenge against one library snapshot."""

    challenge_id: str
    challenge_title: str
    analysis_method: str
    library_size: int
    completion_percentage: int
    can_complete: bool
    per_requirement: tuple[MatchResult, ...]
    recommendations: tuple[str, ...]
    summary: str
    raw_response: str | None = None

    def _count(self, status: MatchStatus) -> int:
        return sum(1 for result in self.per_requirement if result.status == status)

    @property
    def exact_matches(self) -> int:
        return self._count(MatchStatus.EXACT_MATCH)

    @property
    def rarity_upgrades(self) -> int:
        return self._count(MatchStatus.RARITY_UPGRADE)

    @property
    def potential_matches(self) -> int:
        return self._count(MatchStatus.POTENTIAL_MATCH)

    @property
    def missing(self) -> int:
        return self._count(MatchStatus.MISSING)

    @property
    def matched_count(self) -> int:
        """Requirements satisfied by an exact match or a rarity upgrade."""
        return self.exact_matches + self.rarity_upgrades

    @property
    def total_requirements(self) -> int:
        return len(self.per_requirement)
