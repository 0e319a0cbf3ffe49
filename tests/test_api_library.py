"""Tests for card library API endpoints."""

from httpx import AsyncClient

LIBRARY = [
    "Obi Toppin - Dunk - May 1 2025, Series 7, Knicks",
    "Obi Toppin - Block - May 3 2025, Series 7, Knicks",
    "Obi Toppin - Dunk - May 9 2025, Series 7, Knicks",
    "Jalen Brunson - Assist - May 2 2025, 2025 Playoffs Metallic Gold, Knicks",
    "justonestring",
]


class TestPutLibrary:
    async def test_replace_library(self, client: AsyncClient) -> None:
        """Records are stored and malformed ones counted."""
        response = await client.put("/library", json={"records": LIBRARY})

        assert response.status_code == 200
        assert response.json() == {"records_stored": 5, "unparsed_records": 1}

    async def test_blank_records_dropped(self, client: AsyncClient) -> None:
        """Blank lines are not stored."""
        response = await client.put("/library", json={"records": [LIBRARY[0], "  ", ""]})

        assert response.json()["records_stored"] == 1

    async def test_empty_library_rejected(self, client: AsyncClient) -> None:
        """An empty upload is invalid input."""
        response = await client.put("/library", json={"records": []})

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_input"


class TestGetLibrary:
    async def test_grouped_summary(self, client: AsyncClient) -> None:
        """Cards are grouped by player, rarity and series."""
        await client.put("/library", json={"records": LIBRARY})

        response = await client.get("/library")

        assert response.status_code == 200
        data = response.json()
        assert data["total_cards"] == 5
        assert data["groups"] == [
            {
                "player_name": "Jalen Brunson",
                "rarity": "Rare",
                "series": "2025 Playoffs Metallic Gold",
                "count": 1,
                "play_types": ["Assist"],
            },
            {
                "player_name": "Obi Toppin",
                "rarity": "Common",
                "series": "Series 7",
                "count": 3,
                "play_types": ["Dunk", "Block"],
            },
            {
                "player_name": "Unknown",
                "rarity": "Unknown",
                "series": "Unknown",
                "count": 1,
                "play_types": [],
            },
        ]

    async def test_empty(self, client: AsyncClient) -> None:
        """An empty library has no groups."""
        data = (await client.get("/library")).json()

        assert data == {"total_cards": 0, "groups": []}
