"""
Player name resolution for requirement text.

Turns a requirement title such as "Pascal Siakam or Tyrese Haliburton
Playoff Moment" into the player names to look up in the library.
"""

import re
from dataclasses import dataclass, field

from courtside.config import MIN_FALLBACK_TOKEN_LENGTH


@dataclass(frozen=True)
class Roster:
    """
    Known player names and abbreviations.

    Attributes:
        players: Proper names, in search order
        aliases: Lowercase abbreviation -> canonical player name
    """

    players: tuple[str, ...] = field(default_factory=tuple)
    aliases: dict[str, str] = field(default_factory=dict)


DEFAULT_ROSTER = Roster(
    players=(
        "Jalen Williams",
        "Chet Holmgren",
        "Shai Gilgeous-Alexander",
        "Kenrich Williams",
        "Tyrese Haliburton",
        "Pascal Siakam",
        "Aaron Nesmith",
        "Obi Toppin",
        "Karl-Anthony Towns",
        "Jalen Brunson",
        "Anthony Edwards",
        "Nickeil Alexander-Walker",
        "Isaiah Hartenstein",
        "Miles McBride",
        "OG Anunoby",
        "Mitchell Robinson",
        "De'Aaron Fox",
        "Saddiq Bey",
        "Buddy Hield",
        "Daniel Gafford",
        "Jaden Ivey",
        "Ben Sheppard",
        "Rudy Gobert",
        "Julius Randle",
        "Donte DiVincenzo",
        "Jaden McDaniels",
    ),
    aliases={"sga": "Shai Gilgeous-Alexander"},
)


class NameResolver:
    """Extracts candidate player names from free-text requirements."""

    def __init__(self, roster: Roster = DEFAULT_ROSTER) -> None:
        self._roster = roster
        self._alias_patterns = [
            (re.compile(rf"\b{re.escape(alias.lower())}\b"), canonical)
            for alias, canonical in roster.aliases.items()
        ]

    @property
    def roster(self) -> Roster:
        return self._roster

    def resolve(self, text: str) -> list[str]:
        """
        Return candidate player names for a requirement, duplicate-free.

        Known names found in the text come first (roster order), then
        alias expansions. If neither matches, the first token is used as a
        last resort when it is longer than two characters; otherwise the
        result is empty.
        """
        text_lower = text.lower()
        found = [player for player in self._roster.players if player.lower() in text_lower]

        for pattern, canonical in self._alias_patterns:
            if pattern.search(text_lower):
                found.append(canonical)

        if not found:
            tokens = text.split()
            if tokens and len(tokens[0]) >= MIN_FALLBACK_TOKEN_LENGTH:
                found.append(tokens[0])

        # dict preserves first-seen order
        return list(dict.fromkeys(found))
