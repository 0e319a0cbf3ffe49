from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class RequiredCard:
    """
    One card requirement within a challenge.

    Attributes:
        title: Free-text description, may name several players or a set qualifier
        rarity_text: Free-text tier requirement, e.g. "Rare or higher tier"
        type: Requirement kind as reported by the scraper
    """

    title: str
    rarity_text: str = ""
    type: str = "required_card"


@dataclass(frozen=True)
class Challenge:
    """
    A Top Shot challenge and the cards it requires.

    Attributes:
        id: Challenge identifier
        title: Challenge name
        required_cards: Requirements in page order
        description: Challenge description text
        url: Relative URL path of the challenge page
        full_url: Absolute URL of the challenge page
        countdown: Human-readable time remaining when scraped
        scraped_at: When the challenge was scraped
    """

    id: str
    title: str
    required_cards: tuple[RequiredCard, ...] = field(default_factory=tuple)
    description: str | None = None
    url: str | None = None
    full_url: str | None = None
    countdown: str | None = None
    scraped_at: datetime | None = None

    def requirement_count(self) -> int:
        """Number of cards needed to complete the challenge."""
        return len(self.required_cards)
