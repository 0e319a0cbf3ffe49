"""
Parser for the raw card library.

Each library record holds one delimited moment string:
    "<player> - <play type> - <date>, <series>, <team>"

Any sub-field may be absent. Malformed records never raise; they degrade
to placeholder cards so the rest of the library is still analyzed.
"""

import logging
from collections.abc import Iterable

from courtside.models.card import Card, LibraryRecord, Rarity

logger = logging.getLogger(__name__)

SEGMENT_DELIMITER = " - "
DETAIL_DELIMITER = ", "

UNKNOWN_PLAYER = "Unknown"
PARSE_ERROR_PLAYER = "Parse Error"

# Series markers that denote a Rare moment
RARE_SERIES_MARKERS = ("Metallic Gold", "LE")


def infer_rarity(series: str | None) -> Rarity:
    """
    Infer a moment's tier from its series text.

    Only Common and Rare are ever inferred; the library text carries no
    reliable Legendary marker.
    """
    if series and any(marker in series for marker in RARE_SERIES_MARKERS):
        return Rarity.RARE
    return Rarity.COMMON


def _optional(value: str) -> str | None:
    value = value.strip()
    return value or None


def parse_library_record(record: LibraryRecord) -> Card:
    """
    Parse one library record into a Card.

    Returns:
        A structured Card, or a placeholder Card named "Unknown" (too few
        segments) or "Parse Error" (content is not text).
    """
    content = record.content
    if not isinstance(content, str):
        logger.warning("Library record %s has non-text content", record.id)
        return Card(id=str(record.id), player_name=PARSE_ERROR_PLAYER, raw_content=str(content))

    parts = content.split(SEGMENT_DELIMITER, 2)
    if len(parts) < 3:
        logger.warning("Library record %s is not delimited: %r", record.id, content)
        return Card(id=str(record.id), player_name=UNKNOWN_PLAYER, raw_content=content)

    player_name, play_type, remaining = (part.strip() for part in parts)
    details = remaining.split(DETAIL_DELIMITER)
    moment_date = _optional(details[0]) if len(details) > 0 else None
    series = _optional(details[1]) if len(details) > 1 else None
    team = _optional(details[2]) if len(details) > 2 else None

    return Card(
        id=str(record.id),
        player_name=player_name or UNKNOWN_PLAYER,
        play_type=play_type or None,
        moment_date=moment_date,
        series=series,
        team=team,
        rarity=infer_rarity(series),
        raw_content=content,
    )


def parse_library(records: Iterable[LibraryRecord]) -> list[Card]:
    """Parse every record, keeping library order."""
    cards = [parse_library_record(record) for record in records]
    unparsed = sum(1 for card in cards if card.rarity is None)
    if unparsed:
        logger.info("Parsed %d library cards (%d malformed)", len(cards), unparsed)
    return cards
