from dataclasses import dataclass
from enum import Enum


class Rarity(str, Enum):
    """Top Shot scarcity tier of a moment."""

    COMMON = "Common"
    RARE = "Rare"
    LEGENDARY = "Legendary"


# Shared by exact-match and upgrade checks so tie-breaks stay consistent
RARITY_ORDER: dict[Rarity, int] = {
    Rarity.COMMON: 1,
    Rarity.RARE: 2,
    Rarity.LEGENDARY: 3,
}


@dataclass(frozen=True, slots=True)
class LibraryRecord:
    """
    A raw library row as stored by the library source.

    Attributes:
        id: Opaque identifier of the row
        content: Delimited moment text, e.g.
            "Pascal Siakam - Dunk - May 21 2025, 2025 Playoffs Metallic Gold, Indiana Pacers"
    """

    id: str
    content: str


@dataclass(frozen=True, slots=True)
class Card:
    """
    A moment owned by the user.

    Attributes:
        id: Identifier copied from the library record
        player_name: Trimmed player name ("Unknown" / "Parse Error" for malformed rows)
        play_type: Play classification (dunk, assist, ...)
        moment_date: Date segment of the moment text
        series: Edition or set name, may carry special-edition markers
        team: Team name
        rarity: Tier inferred from series, None when the row could not be parsed
        raw_content: Original record text
    """

    id: str
    player_name: str
    play_type: str | None = None
    moment_date: str | None = None
    series: str | None = None
    team: str | None = None
    rarity: Rarity | None = None
    raw_content: str = ""
