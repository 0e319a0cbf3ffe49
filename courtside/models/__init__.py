from courtside.models.analysis import AnalysisResult, MatchResult, MatchStatus
from courtside.models.card import RARITY_ORDER, Card, LibraryRecord, Rarity
from courtside.models.challenge import Challenge, RequiredCard
from courtside.models.failure import (
    ChallengeNotFoundError,
    FailureDetail,
    FailureKind,
    KnownError,
    MalformedChallengeError,
    SemanticAnalyzerError,
)

__all__ = [
    "AnalysisResult",
    "Card",
    "Challenge",
    "ChallengeNotFoundError",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "LibraryRecord",
    "MalformedChallengeError",
    "MatchResult",
    "MatchStatus",
    "RARITY_ORDER",
    "Rarity",
    "RequiredCard",
    "SemanticAnalyzerError",
]
