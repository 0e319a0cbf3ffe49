from courtside.services.analysis_service import (
    FALLBACK_METHOD,
    STRATEGY_NAMES,
    AnalysisRun,
    analyze_stored_challenge,
    get_strategy,
    load_library_index,
    run_analysis,
)

__all__ = [
    "FALLBACK_METHOD",
    "STRATEGY_NAMES",
    "AnalysisRun",
    "analyze_stored_challenge",
    "get_strategy",
    "load_library_index",
    "run_analysis",
]
