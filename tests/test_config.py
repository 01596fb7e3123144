"""
Tests for house-rule settings and the event log.
"""

import pytest
from pydantic import ValidationError

from monopoly_core import (
    EventType,
    GameConfig,
    HouseRuleSettings,
    InvariantViolationError,
    Player,
    create_game,
    get_house_rules,
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No MONOPOLY_ variables and no .env file in the working directory."""
    monkeypatch.chdir(tmp_path)
    for name in ("STARTING_CASH", "FREE_PARKING_POOL", "AUCTION_ON_DECLINE", "SEED"):
        monkeypatch.delenv(f"MONOPOLY_{name}", raising=False)
    get_house_rules.cache_clear()
    yield monkeypatch
    get_house_rules.cache_clear()


def test_defaults(clean_env):
    config = HouseRuleSettings().to_game_config()

    assert config == GameConfig()


def test_settings_from_environment(clean_env):
    clean_env.setenv("MONOPOLY_STARTING_CASH", "2000")
    clean_env.setenv("MONOPOLY_FREE_PARKING_POOL", "true")
    clean_env.setenv("MONOPOLY_AUCTION_ON_DECLINE", "false")
    clean_env.setenv("MONOPOLY_SEED", "7")

    config = get_house_rules().to_game_config()

    assert config.starting_cash == 2000
    assert config.free_parking_pool
    assert not config.auction_on_decline
    assert config.seed == 7
    assert config.go_salary == 200


def test_settings_from_env_file(clean_env, tmp_path):
    (tmp_path / ".env").write_text("MONOPOLY_STARTING_CASH=900\n")

    assert HouseRuleSettings().starting_cash == 900


def test_negative_starting_cash_rejected(clean_env):
    clean_env.setenv("MONOPOLY_STARTING_CASH", "-1")

    with pytest.raises(ValidationError):
        HouseRuleSettings()


def test_starting_cash_applies_to_players(two_players):
    game = create_game(GameConfig(starting_cash=900), two_players)

    assert [p.cash for p in game.players] == [900, 900]


def test_game_needs_two_distinct_players():
    with pytest.raises(InvariantViolationError):
        create_game(GameConfig(), [Player(0, "Alice")])
    with pytest.raises(InvariantViolationError):
        create_game(GameConfig(), [Player(0, "Alice"), Player(0, "Bob")])


class TestEventLog:
    def test_game_start_is_logged(self, basic_game):
        types = [e.event_type for e in basic_game.event_log.get_events()]

        assert types[:2] == [EventType.GAME_STARTED, EventType.TURN_STARTED]

    def test_filter_by_type(self, basic_game):
        log = basic_game.event_log
        log.log(EventType.MONEY_TRANSFERRED, 0, amount=5)

        events = log.get_events(EventType.MONEY_TRANSFERRED)

        assert len(events) == 1
        assert events[0].details["amount"] == 5
        assert log.get_events()[-1] is events[0]

    def test_failing_subscriber_does_not_stop_others(self, basic_game):
        seen = []

        def broken(event):
            raise RuntimeError("observer bug")

        log = basic_game.event_log
        log.subscribe(broken)
        log.subscribe(seen.append)

        event = log.log(EventType.TURN_ENDED, 0)

        assert seen == [event]
        assert log.get_events()[-1] is event

    def test_unsubscribe(self, basic_game):
        seen = []
        log = basic_game.event_log
        log.subscribe(seen.append)
        log.unsubscribe(seen.append)

        log.log(EventType.TURN_ENDED, 0)

        assert seen == []
