"""
Boundary adapter for scraped challenge records.

Accepts both the scraper's camelCase JSON shape and the store's
snake_case shape:

    {
        "title": "Playoff Pressure",
        "fullUrl": "https://nbatopshot.com/challenges/...",
        "countdown": {"formatted": "2d 4h 10m"},
        "scrapedAt": "2025-05-28T12:00:00Z",
        "requiredCards": [{"title": "Pascal Siakam", "rarity": "Rare or higher tier"}]
    }

A record without a requirement list is a contract violation and fails
fast here, before it can reach the matcher.
"""

import uuid
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from courtside.models.challenge import Challenge, RequiredCard
from courtside.models.failure import MalformedChallengeError


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _parse_scraped_at(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError as e:
        raise MalformedChallengeError("scraped_at", detail=str(e)) from e


def _parse_countdown(value: Any) -> str | None:
    if isinstance(value, Mapping):
        formatted = value.get("formatted")
        return str(formatted) if formatted else None
    return str(value) if value else None


def parse_required_card(data: Any, position: int) -> RequiredCard:
    """Parse one requirement entry; position is used in error messages."""
    if not isinstance(data, Mapping):
        raise MalformedChallengeError(f"required_cards[{position}]", detail="not an object")

    title = data.get("title")
    if not isinstance(title, str):
        raise MalformedChallengeError(f"required_cards[{position}].title")

    rarity_text = _first(data, "rarity_text", "rarity")
    return RequiredCard(
        title=title.strip(),
        rarity_text=str(rarity_text).strip() if rarity_text else "",
        type=str(data.get("type") or "required_card"),
    )


def parse_challenge(data: Mapping[str, Any]) -> Challenge:
    """
    Convert a raw challenge record to a Challenge.

    Records without an id get a fresh UUID, matching how the store
    assigns ids to newly scraped challenges.

    Raises:
        MalformedChallengeError: If title or the requirement list is missing
    """
    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        raise MalformedChallengeError("title")

    raw_cards = _first(data, "required_cards", "requiredCards")
    if raw_cards is None:
        raise MalformedChallengeError("required_cards")
    if not isinstance(raw_cards, list):
        raise MalformedChallengeError("required_cards", detail="expected a list")

    required_cards = tuple(
        parse_required_card(entry, position) for position, entry in enumerate(raw_cards)
    )

    challenge_id = data.get("id")
    return Challenge(
        id=str(challenge_id) if challenge_id else str(uuid.uuid4()),
        title=title.strip(),
        required_cards=required_cards,
        description=data.get("description"),
        url=data.get("url"),
        full_url=_first(data, "full_url", "fullUrl"),
        countdown=_parse_countdown(_first(data, "countdown_formatted", "countdown")),
        scraped_at=_parse_scraped_at(_first(data, "scraped_at", "scrapedAt")),
    )
