from courtside.parsers.challenge import parse_challenge, parse_required_card
from courtside.parsers.library import (
    PARSE_ERROR_PLAYER,
    UNKNOWN_PLAYER,
    infer_rarity,
    parse_library,
    parse_library_record,
)

__all__ = [
    "PARSE_ERROR_PLAYER",
    "UNKNOWN_PLAYER",
    "infer_rarity",
    "parse_challenge",
    "parse_library",
    "parse_library_record",
    "parse_required_card",
]
