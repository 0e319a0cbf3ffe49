from courtside.db.database import get_session, init_db
from courtside.db.operations import (
    challenge_to_model,
    compare_methods,
    get_analysis_history,
    get_challenge,
    get_challenge_by_url,
    get_library_records,
    get_previous_analysis,
    list_challenges,
    persist_analysis,
    replace_library,
    save_analysis,
    upsert_challenge,
)

__all__ = [
    "challenge_to_model",
    "compare_methods",
    "get_analysis_history",
    "get_challenge",
    "get_challenge_by_url",
    "get_library_records",
    "get_previous_analysis",
    "get_session",
    "init_db",
    "list_challenges",
    "persist_analysis",
    "replace_library",
    "save_analysis",
    "upsert_challenge",
]
