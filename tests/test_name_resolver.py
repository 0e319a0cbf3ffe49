"""Tests for player name resolution."""

from courtside.analysis.names import DEFAULT_ROSTER, NameResolver, Roster


class TestNameResolver:
    def test_finds_known_player(self) -> None:
        """Known names are found case-insensitively."""
        resolver = NameResolver()

        assert resolver.resolve("pascal siakam playoff dunk") == ["Pascal Siakam"]

    def test_multiple_players_in_roster_order(self) -> None:
        """Several names are returned in roster order."""
        resolver = NameResolver()

        names = resolver.resolve("Pascal Siakam or Tyrese Haliburton")

        assert names == ["Tyrese Haliburton", "Pascal Siakam"]

    def test_alias_expands_to_canonical_name(self) -> None:
        """SGA resolves to Shai Gilgeous-Alexander."""
        resolver = NameResolver()

        assert resolver.resolve("SGA Playoff Moment") == ["Shai Gilgeous-Alexander"]

    def test_alias_and_full_name_not_duplicated(self) -> None:
        """A name found twice is listed once."""
        resolver = NameResolver()

        names = resolver.resolve("Shai Gilgeous-Alexander (SGA) Jumper")

        assert names == ["Shai Gilgeous-Alexander"]

    def test_alias_requires_whole_word(self) -> None:
        """Alias tokens inside longer words are ignored."""
        resolver = NameResolver()

        assert resolver.resolve("Sgallery Moment") == ["Sgallery"]

    def test_fallback_to_first_token(self) -> None:
        """Unknown players fall back to the first token."""
        resolver = NameResolver()

        assert resolver.resolve("Horford Block") == ["Horford"]

    def test_short_first_token_gives_no_fallback(self) -> None:
        """A first token of two characters or fewer is not replaced by a later one."""
        resolver = NameResolver()

        assert resolver.resolve("Al Horford Block") == []
        assert resolver.resolve("A Jokic Moment") == []

    def test_degenerate_input_is_empty(self) -> None:
        """Text with no usable token resolves to nothing."""
        resolver = NameResolver()

        assert resolver.resolve("") == []
        assert resolver.resolve("a b c") == []

    def test_custom_roster(self) -> None:
        """Rosters are injectable."""
        resolver = NameResolver(
            Roster(players=("Victor Wembanyama",), aliases={"wemby": "Victor Wembanyama"})
        )

        assert resolver.resolve("Wemby block") == ["Victor Wembanyama"]
        assert resolver.resolve("Pascal Siakam") == ["Pascal"]

    def test_default_roster_has_sga_alias(self) -> None:
        """The default roster ships the SGA alias."""
        assert DEFAULT_ROSTER.aliases["sga"] == "Shai Gilgeous-Alexander"
        assert NameResolver().roster is DEFAULT_ROSTER
