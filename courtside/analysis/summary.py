"""Grouped overview of a card library."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from courtside.models.card import Card

UNKNOWN_GROUP_VALUE = "Unknown"


@dataclass
class LibraryGroup:
    """Cards sharing a player, rarity and series."""

    player_name: str
    rarity: str
    series: str
    count: int = 0
    play_types: list[str] = field(default_factory=list)


def summarize_library(cards: Iterable[Card]) -> list[LibraryGroup]:
    """
    Group cards by player, rarity and series.

    Play types are listed once each, in first-seen order. Groups are
    sorted by player name; ties keep first-seen order.
    """
    groups: dict[tuple[str, str, str], LibraryGroup] = {}

    for card in cards:
        rarity = card.rarity.value if card.rarity else UNKNOWN_GROUP_VALUE
        series = card.series or UNKNOWN_GROUP_VALUE
        key = (card.player_name, rarity, series)

        group = groups.get(key)
        if group is None:
            group = LibraryGroup(player_name=card.player_name, rarity=rarity, series=series)
            groups[key] = group

        group.count += 1
        if card.play_type and card.play_type not in group.play_types:
            group.play_types.append(card.play_type)

    return sorted(groups.values(), key=lambda group: group.player_name.casefold())
