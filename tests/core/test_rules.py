"""Tests for round configuration."""

import pytest

from core.game import Difficulty, GameMode, InvalidConfiguration, RoundConfig
from core.game.rules import DEFAULT_NAMES, MAX_PAIRS, MIN_PAIRS
from core.player import COMPUTER_NAME
from core.themes import CardTheme


class TestRoundConfig:
    """Tests for RoundConfig validation."""

    def test_defaults(self):
        """Test the default setup is a five-pair two-player round."""
        config = RoundConfig()
        assert config.num_pairs == 5
        assert config.players == DEFAULT_NAMES
        assert config.mode == GameMode.MULTIPLAYER
        assert config.theme == CardTheme.OLYMPICS
        assert config.difficulty == Difficulty.MEDIUM

    @pytest.mark.parametrize("num_pairs", [MIN_PAIRS, 5, MAX_PAIRS])
    def test_pair_range_accepted(self, num_pairs):
        """Test pair counts inside the range."""
        assert RoundConfig(num_pairs=num_pairs).num_pairs == num_pairs

    @pytest.mark.parametrize("num_pairs", [0, 1, 11, -3])
    def test_pair_range_rejected(self, num_pairs):
        """Test pair counts outside the range."""
        with pytest.raises(InvalidConfiguration):
            RoundConfig(num_pairs=num_pairs)

    @pytest.mark.parametrize("num_pairs", [True, 5.0, "5"])
    def test_pair_count_must_be_int(self, num_pairs):
        """Test non-integer pair counts are rejected."""
        with pytest.raises(InvalidConfiguration):
            RoundConfig(num_pairs=num_pairs)

    def test_names_are_stripped(self):
        """Test surrounding whitespace is removed from names."""
        config = RoundConfig.multiplayer(["  Ann ", "Bob  "])
        assert config.players == ("Ann", "Bob")

    def test_blank_name_rejected(self):
        """Test a whitespace-only name is rejected."""
        with pytest.raises(InvalidConfiguration, match="empty"):
            RoundConfig.multiplayer(["Ann", "   "])

    @pytest.mark.parametrize("count", [1, 6])
    def test_multiplayer_seat_count(self, count):
        """Test multiplayer needs two to five players."""
        with pytest.raises(InvalidConfiguration):
            RoundConfig.multiplayer([f"P{i}" for i in range(count)])

    def test_five_players_allowed(self):
        """Test the largest table."""
        config = RoundConfig.multiplayer(["A", "B", "C", "D", "E"])
        assert config.player_count == 5

    def test_solo_needs_one_player(self):
        """Test solo mode takes exactly one name."""
        assert RoundConfig.solo("Ann").players == ("Ann",)
        with pytest.raises(InvalidConfiguration):
            RoundConfig(players=("Ann", "Bob"), mode=GameMode.SOLO)

    def test_vs_computer_second_seat_reserved(self):
        """Test the computer always takes the second seat."""
        config = RoundConfig(players=("Ann", "Mallory"), mode=GameMode.VS_COMPUTER)
        assert config.players == ("Ann", COMPUTER_NAME)
        assert config.has_computer

    def test_vs_computer_single_name(self):
        """Test one human name is enough against the computer."""
        config = RoundConfig(players=("Ann",), mode=GameMode.VS_COMPUTER)
        assert config.players == ("Ann", COMPUTER_NAME)

    def test_vs_computer_needs_a_human(self):
        """Test the computer cannot play alone or with a crowd."""
        with pytest.raises(InvalidConfiguration):
            RoundConfig(players=(), mode=GameMode.VS_COMPUTER)
        with pytest.raises(InvalidConfiguration):
            RoundConfig(players=("A", "B", "C"), mode=GameMode.VS_COMPUTER)

    def test_vs_computer_blank_human_rejected(self):
        """Test the human seat still needs a name."""
        with pytest.raises(InvalidConfiguration):
            RoundConfig(players=(" ",), mode=GameMode.VS_COMPUTER)

    def test_config_frozen(self):
        """Test configs cannot be changed after validation."""
        config = RoundConfig()
        with pytest.raises(Exception):  # dataclasses.FrozenInstanceError
            config.num_pairs = 9

    def test_invalid_configuration_is_value_error(self):
        """Test callers can catch ValueError."""
        with pytest.raises(ValueError):
            RoundConfig(num_pairs=50)


class TestRoundConfigFromDict:
    """Tests for building configs from plain mappings."""

    def test_from_dict(self):
        """Test string enum values are parsed."""
        config = RoundConfig.from_dict(
            {
                "mode": "vs_computer",
                "num_pairs": 8,
                "players": ["Ann"],
                "theme": "vehicles",
                "difficulty": "hard",
            }
        )
        assert config.mode == GameMode.VS_COMPUTER
        assert config.num_pairs == 8
        assert config.theme == CardTheme.VEHICLES
        assert config.difficulty == Difficulty.HARD
        assert config.players == ("Ann", COMPUTER_NAME)

    def test_from_dict_defaults(self):
        """Test missing keys fall back to the defaults."""
        assert RoundConfig.from_dict({}) == RoundConfig()

    @pytest.mark.parametrize(
        "data",
        [{"mode": "team"}, {"difficulty": "impossible"}, {"theme": "pirates"}],
    )
    def test_from_dict_bad_enum(self, data):
        """Test unknown enum strings become InvalidConfiguration."""
        with pytest.raises(InvalidConfiguration):
            RoundConfig.from_dict(data)

    @pytest.mark.parametrize("players", ["Ann", None, 3, {"name": "Ann"}])
    def test_from_dict_players_must_be_a_list(self, players):
        """Test a bare name or non-list value is rejected, not split or crashed on."""
        with pytest.raises(InvalidConfiguration):
            RoundConfig.from_dict({"num_pairs": 2, "players": players})

    def test_from_dict_theme_must_be_a_string(self):
        with pytest.raises(InvalidConfiguration):
            RoundConfig.from_dict({"theme": 7})
