"""
SQLAlchemy ORM models for persistent storage.

Models mirror the dataclass models but add database persistence.
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ChallengeDB(Base):
    """
    A scraped Top Shot challenge.

    Scraped challenges are keyed by their page URL so re-scrapes update
    the existing row.
    """

    __tablename__ = "challenges"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(Text, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(Text, unique=True, nullable=True)
    full_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    countdown_formatted: Mapped[str | None] = mapped_column(Text, nullable=True)
    scraped_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    required_cards: Mapped[list["RequiredCardDB"]] = relationship(
        back_populates="challenge",
        cascade="all, delete-orphan",
        order_by="RequiredCardDB.position",
    )

    def __repr__(self) -> str:
        return f"<ChallengeDB(id={self.id}, title={self.title})>"


class RequiredCardDB(Base):
    """A card requirement of a challenge, in page order."""

    __tablename__ = "required_cards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    challenge_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("challenges.id", ondelete="CASCADE"), index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0)
    title: Mapped[str] = mapped_column(Text, index=True)
    rarity: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(50), default="required_card")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    challenge: Mapped["ChallengeDB"] = relationship(back_populates="required_cards")

    def __repr__(self) -> str:
        return f"<RequiredCardDB(title={self.title}, rarity={self.rarity})>"


class LibraryDocumentDB(Base):
    """
    One raw card library record.

    Content is the delimited moment text parsed by courtside.parsers.library.
    """

    __tablename__ = "library_documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return f"<LibraryDocumentDB(id={self.id})>"


class ChallengeAnalysisDB(Base):
    """
    A stored analysis run.

    Runs are append-only so completion can be compared over time and
    across analysis methods.
    """

    __tablename__ = "challenge_analysis"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), index=True
    )

    # Challenge information
    challenge_id: Mapped[str] = mapped_column(String(36), index=True)
    challenge_title: Mapped[str] = mapped_column(Text)

    # Analysis metadata
    analysis_method: Mapped[str] = mapped_column(String(50), index=True)
    analyzer_version: Mapped[str] = mapped_column(String(20), default="1.0")
    library_size: Mapped[int] = mapped_column(Integer)

    # Results summary
    can_complete: Mapped[bool] = mapped_column(Boolean, index=True)
    completion_percentage: Mapped[int] = mapped_column(Integer, index=True)
    total_required_cards: Mapped[int] = mapped_column(Integer)
    exact_matches: Mapped[int] = mapped_column(Integer, default=0)
    rarity_upgrades: Mapped[int] = mapped_column(Integer, default=0)
    potential_matches: Mapped[int] = mapped_column(Integer, default=0)
    missing_cards: Mapped[int] = mapped_column(Integer, default=0)

    # Detailed analysis stored as JSON for flexibility
    matching_cards: Mapped[list[Any]] = mapped_column(JSON, default=list)
    missing_cards_details: Mapped[list[Any]] = mapped_column(JSON, default=list)
    potential_matches_details: Mapped[list[Any]] = mapped_column(JSON, default=list)

    ai_raw_response: Mapped[str | None] = mapped_column(Text, nullable=True)
    analysis_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    recommendations: Mapped[list[Any]] = mapped_column(JSON, default=list)

    analysis_duration_ms: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<ChallengeAnalysisDB(challenge={self.challenge_id}, "
            f"method={self.analysis_method}, pct={self.completion_percentage})>"
        )
