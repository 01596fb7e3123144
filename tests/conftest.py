"""Shared test fixtures for the rules core tests."""

import pytest

from monopoly_core import GameConfig, GameEngine, Player, create_game


@pytest.fixture
def game_config():
    """Default game configuration with fixed seed for reproducibility."""
    return GameConfig(seed=42)


@pytest.fixture
def two_players():
    """Two test players."""
    return [Player(0, "Alice"), Player(1, "Bob")]


@pytest.fixture
def three_players():
    return [Player(0, "Alice"), Player(1, "Bob"), Player(2, "Charlie")]


@pytest.fixture
def basic_game(game_config, two_players):
    """Basic game with two players and fixed seed."""
    return create_game(game_config, two_players)


@pytest.fixture
def three_player_game(game_config, three_players):
    return create_game(game_config, three_players)


@pytest.fixture
def engine(basic_game):
    """Turn engine over the two-player game."""
    return GameEngine(basic_game)


@pytest.fixture
def give():
    """Hand properties straight to a player, bypassing the purchase rules."""

    def _give(game, player_id, *positions):
        for position in positions:
            game.ownership[position].owner_id = player_id
            game.get_player(player_id).properties.add(position)

    return _give
