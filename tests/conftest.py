import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from courtside.db.database import get_session
from courtside.main import app
from courtside.models.card import LibraryRecord
from courtside.models.challenge import Challenge, RequiredCard
from courtside.models.db import Base


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncSession:
    """Provide a database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory: async_sessionmaker[AsyncSession]):
    """Provide an async test client with overridden database session."""

    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_library_records() -> list[LibraryRecord]:
    """Sample library rows as stored by the scraper."""
    return [
        LibraryRecord(
            id="1",
            content="Pascal Siakam - Dunk - May 21 2025, 2025 Playoffs Metallic Gold, Indiana Pacers",
        ),
        LibraryRecord(
            id="2",
            content="Shai Gilgeous-Alexander - Jump Shot - May 10 2025, 2025 Playoffs, OKC Thunder",
        ),
        LibraryRecord(
            id="3",
            content="Jalen Brunson - Assist - Apr 2 2025, Series 7, New York Knicks",
        ),
        LibraryRecord(id="4", content="justonestring"),
    ]


@pytest.fixture
def sample_challenge() -> Challenge:
    """Sample playoff challenge with three requirements."""
    return Challenge(
        id="challenge-1",
        title="Playoff Pressure",
        required_cards=(
            RequiredCard(title="Pascal Siakam Playoff Moment", rarity_text="Common"),
            RequiredCard(title="SGA Playoff Moment", rarity_text="Common 2025 NBA Playoffs"),
            RequiredCard(title="Rudy Gobert Block", rarity_text="Rare"),
        ),
        url="/challenges/playoff-pressure",
    )
