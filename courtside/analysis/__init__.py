from courtside.analysis.engine import (
    RULE_BASED_METHOD,
    AnalysisStrategy,
    RuleBasedStrategy,
    analyze_challenge,
)
from courtside.analysis.fuzzy import FuzzyMatchIndex, normalize_key, similarity
from courtside.analysis.matcher import RequirementMatcher
from courtside.analysis.names import DEFAULT_ROSTER, NameResolver, Roster
from courtside.analysis.scorer import generate_recommendations, score_results
from courtside.analysis.summary import LibraryGroup, summarize_library

__all__ = [
    "DEFAULT_ROSTER",
    "RULE_BASED_METHOD",
    "AnalysisStrategy",
    "FuzzyMatchIndex",
    "LibraryGroup",
    "NameResolver",
    "RequirementMatcher",
    "Roster",
    "RuleBasedStrategy",
    "analyze_challenge",
    "generate_recommendations",
    "normalize_key",
    "score_results",
    "similarity",
    "summarize_library",
]
