"""
Player-name index over the card library.

Exact lookups go through a normalized-key bucket map. The fuzzy search
scans the whole library and accepts a card when one normalized name
contains the other or their edit-distance similarity exceeds
SIMILARITY_THRESHOLD.

The index is built once per library snapshot and never mutated, so it can
be shared across analyses of the same library.
"""

import re
from collections.abc import Iterable

from rapidfuzz.distance import Levenshtein

from courtside.config import SIMILARITY_THRESHOLD
from courtside.models.card import Card
from courtside.parsers.library import PARSE_ERROR_PLAYER, UNKNOWN_PLAYER

# Names given to malformed library rows; never matched against requirements
PLACEHOLDER_PLAYERS = frozenset({UNKNOWN_PLAYER, PARSE_ERROR_PLAYER})

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")


def normalize_key(name: str) -> str:
    """Lowercase and drop everything outside [a-z0-9]."""
    return _NON_ALPHANUMERIC.sub("", name.lower())


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance with unit insert, delete and substitute costs."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """(max_len - distance) / max_len; two empty strings are identical."""
    return Levenshtein.normalized_similarity(a, b)


def is_fuzzy_candidate(card_key: str, query_key: str) -> bool:
    """True if two normalized names plausibly refer to the same player."""
    if not card_key or not query_key:
        return False
    if query_key in card_key or card_key in query_key:
        return True
    return similarity(card_key, query_key) > SIMILARITY_THRESHOLD


class FuzzyMatchIndex:
    """Read-only lookup from player name to owned cards."""

    def __init__(self, cards: Iterable[Card]) -> None:
        self._cards: tuple[Card, ...] = tuple(cards)
        # Placeholder rows get an empty key, which neither lookup nor search matches
        self._keys: tuple[str, ...] = tuple(
            "" if card.player_name in PLACEHOLDER_PLAYERS else normalize_key(card.player_name)
            for card in self._cards
        )

        buckets: dict[str, list[Card]] = {}
        for key, card in zip(self._keys, self._cards, strict=True):
            if not key:
                continue
            buckets.setdefault(key, []).append(card)
        self._buckets: dict[str, tuple[Card, ...]] = {
            key: tuple(bucket) for key, bucket in buckets.items()
        }

    def __len__(self) -> int:
        return len(self._cards)

    @property
    def cards(self) -> tuple[Card, ...]:
        """Every card in library order."""
        return self._cards

    def lookup(self, name: str) -> tuple[Card, ...]:
        """Cards whose normalized player name equals the query's, in library order."""
        return self._buckets.get(normalize_key(name), ())

    def search(self, name: str) -> list[Card]:
        """Cards across the whole library that fuzzily match the name."""
        query_key = normalize_key(name)
        return [
            card
            for key, card in zip(self._keys, self._cards, strict=True)
            if is_fuzzy_candidate(key, query_key)
        ]
