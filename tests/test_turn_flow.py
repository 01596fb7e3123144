"""
Tests for the turn-phase state machine.
"""

import pytest

from monopoly_core import (
    DeckType,
    EventType,
    FailureReason,
    GameConfig,
    GameEngine,
    InvalidActionError,
    TurnPhase,
)


def roll(engine, player_id, die1, die2):
    return engine.submit({"command": "roll_dice", "player_id": player_id, "dice": [die1, die2]})


def stack(game, deck_type, card_id):
    deck = game.decks[deck_type]
    draw_ids, held_ids = deck.state()
    deck.restore([card_id] + [c for c in draw_ids if c != card_id], held_ids)


def test_game_starts_waiting_for_first_roll(engine):
    assert engine.phase == TurnPhase.ROLL_DICE
    assert engine.current_player.player_id == 0
    assert "roll_dice" in engine.legal_commands()
    assert "end_turn" not in engine.legal_commands()


def test_landing_on_unowned_property_offers_purchase(engine):
    result = roll(engine, 0, 1, 2)

    assert result.outcome["position"] == 3
    assert engine.phase == TurnPhase.PURCHASE_DECISION
    assert engine.game.pending_property == 3

    engine.submit({"command": "buy_property", "player_id": 0, "position": 3})

    assert engine.phase == TurnPhase.OPTIONAL_ACTIONS
    assert engine.game.owner_of(3) == 0
    assert engine.game.pending_property is None
    assert engine.game.get_player(0).cash == 1440


def test_only_pending_property_can_be_bought(engine):
    roll(engine, 0, 1, 2)

    result = engine.submit({"command": "buy_property", "player_id": 0, "position": 1})

    assert result.reason == FailureReason.NOT_ON_SPACE


def test_declined_property_goes_to_auction(engine):
    roll(engine, 0, 1, 4)
    engine.submit({"command": "decline_purchase", "player_id": 0, "position": 5})

    assert engine.phase == TurnPhase.AUCTION
    assert engine.legal_commands() == ["auction"]

    result = engine.submit(
        {
            "command": "auction",
            "position": 5,
            "bids": [{"player_id": 0, "amount": 0}, {"player_id": 1, "amount": 120}],
        }
    )

    assert result.outcome["winner_id"] == 1
    assert engine.game.owner_of(5) == 1
    assert engine.phase == TurnPhase.OPTIONAL_ACTIONS


def test_decline_without_auction_house_rule(two_players):
    engine = GameEngine.new_game(GameConfig(seed=42, auction_on_decline=False), two_players)
    roll(engine, 0, 1, 4)

    engine.submit({"command": "decline_purchase", "player_id": 0, "position": 5})

    assert engine.phase == TurnPhase.OPTIONAL_ACTIONS
    assert engine.game.owner_of(5) is None


def test_owned_property_asks_for_rent(engine, give):
    give(engine.game, 1, 3)
    roll(engine, 0, 1, 2)

    assert engine.phase == TurnPhase.PAY_RENT
    assert engine.amount_owed() == (1, 4)

    engine.submit({"command": "pay_rent", "player_id": 0})

    assert engine.phase == TurnPhase.OPTIONAL_ACTIONS
    assert engine.game.get_player(0).cash == 1496
    assert engine.game.get_player(1).cash == 1504


def test_own_property_needs_no_decision(engine, give):
    give(engine.game, 0, 3)

    roll(engine, 0, 1, 2)

    assert engine.phase == TurnPhase.OPTIONAL_ACTIONS


def test_utility_rent_uses_the_actual_roll(engine, give):
    """Utility rent is 10 times the dice when both utilities are owned."""
    game = engine.game
    give(game, 1, 12, 28)
    game.get_player(0).position = 6
    roll(engine, 0, 3, 3)

    assert engine.phase == TurnPhase.PAY_RENT
    assert engine.amount_owed() == (1, 60)

    result = engine.submit({"command": "pay_rent", "player_id": 0, "dice_total": 1})

    assert result.reason == FailureReason.INVALID_AMOUNT
    assert engine.phase == TurnPhase.PAY_RENT
    assert game.get_player(0).cash == 1500

    result = engine.submit({"command": "pay_rent", "player_id": 0})

    assert result.outcome["amount"] == 60
    assert game.get_player(0).cash == 1440
    assert game.get_player(1).cash == 1560
    assert engine.history.last.to_transport().dice_total == 6
    assert engine.phase == TurnPhase.ROLL_DICE


def test_mortgage_to_raise_rent(engine, give):
    game = engine.game
    give(game, 1, 3)
    give(game, 0, 39)
    game.get_player(0).cash = 3
    roll(engine, 0, 1, 2)

    assert engine.submit({"command": "pay_rent", "player_id": 0}).reason == FailureReason.INSUFFICIENT_FUNDS
    assert engine.phase == TurnPhase.PAY_RENT

    assert engine.submit({"command": "mortgage", "player_id": 0, "position": 39}).success
    assert engine.phase == TurnPhase.PAY_RENT
    assert engine.submit({"command": "pay_rent", "player_id": 0}).success
    assert game.get_player(0).cash == 199


def test_bankruptcy_ends_two_player_game(engine, give):
    game = engine.game
    give(game, 1, 3)
    game.get_player(0).cash = 3
    roll(engine, 0, 1, 2)

    result = engine.submit({"command": "declare_bankruptcy", "player_id": 0})

    assert result.success
    assert result.outcome["creditor_id"] == 1
    assert engine.phase == TurnPhase.GAME_OVER
    assert game.winner_id == 1
    assert game.get_player(1).cash == 1503
    assert engine.legal_commands() == []
    assert roll(engine, 1, 1, 2).reason == FailureReason.GAME_OVER


def test_cannot_declare_bankruptcy_while_solvent(engine, give):
    give(engine.game, 1, 3)
    roll(engine, 0, 1, 2)

    result = engine.submit({"command": "declare_bankruptcy", "player_id": 0})

    assert result.reason == FailureReason.CAN_STILL_PAY
    assert engine.phase == TurnPhase.PAY_RENT


def test_tax_space(engine):
    roll(engine, 0, 1, 3)

    assert engine.phase == TurnPhase.PAY_TAX
    assert engine.amount_owed() == (None, 200)

    engine.submit({"command": "pay_tax", "player_id": 0})

    assert engine.phase == TurnPhase.OPTIONAL_ACTIONS
    assert engine.game.get_player(0).cash == 1300


def test_card_space(engine):
    roll(engine, 0, 3, 4)
    assert engine.phase == TurnPhase.DRAW_CARD

    wrong = engine.submit({"command": "draw_card", "player_id": 0, "deck": "community_chest"})
    assert wrong.reason == FailureReason.NOT_ON_SPACE

    stack(engine.game, DeckType.CHANCE, "CH07")
    engine.submit({"command": "draw_card", "player_id": 0, "deck": "chance"})

    assert engine.phase == TurnPhase.OPTIONAL_ACTIONS
    assert engine.game.get_player(0).cash == 1550


def test_card_moving_onto_property_offers_purchase(engine):
    roll(engine, 0, 3, 4)
    stack(engine.game, DeckType.CHANCE, "CH14")

    engine.submit({"command": "draw_card", "player_id": 0, "deck": "chance"})

    assert engine.phase == TurnPhase.PURCHASE_DECISION
    assert engine.game.pending_property == 39


def test_unaffordable_card_waits_for_settlement(engine):
    game = engine.game
    roll(engine, 0, 1, 1)
    assert engine.phase == TurnPhase.DRAW_CARD
    game.get_player(0).cash = 40
    stack(game, DeckType.COMMUNITY_CHEST, "CC03")

    result = engine.submit({"command": "draw_card", "player_id": 0, "deck": "community_chest"})

    assert result.outcome["payment_due"] == 50
    assert engine.phase == TurnPhase.SETTLE_PAYMENT
    assert engine.amount_owed() == (None, 50)
    assert engine.submit({"command": "settle_payment", "player_id": 0}).reason == FailureReason.INSUFFICIENT_FUNDS

    game.get_player(0).cash = 60
    engine.submit({"command": "settle_payment", "player_id": 0})

    assert game.get_player(0).cash == 10
    assert game.pending_payment is None
    # the doubles still owe another roll
    assert engine.phase == TurnPhase.ROLL_DICE


def test_doubles_roll_again(engine):
    roll(engine, 0, 2, 2)
    engine.submit({"command": "pay_tax", "player_id": 0})

    assert engine.phase == TurnPhase.ROLL_DICE
    assert engine.current_player.player_id == 0


def test_three_doubles_go_to_jail(engine):
    """
    Rule: 'If you throw doubles three times in succession, move your token immediately to Jail'
    """
    roll(engine, 0, 2, 2)
    engine.submit({"command": "pay_tax", "player_id": 0})
    roll(engine, 0, 3, 3)
    assert engine.phase == TurnPhase.ROLL_DICE

    result = roll(engine, 0, 4, 4)

    player = engine.game.get_player(0)
    assert result.outcome["jailed"]
    assert player.in_jail
    assert player.position == 10
    assert engine.phase == TurnPhase.OPTIONAL_ACTIONS
    assert roll(engine, 0, 1, 2).reason == FailureReason.WRONG_PHASE


def test_landing_on_go_to_jail(engine):
    engine.game.get_player(0).position = 25

    result = roll(engine, 0, 2, 3)

    assert result.outcome["jailed"]
    assert engine.game.get_player(0).position == 10
    assert engine.phase == TurnPhase.OPTIONAL_ACTIONS


def test_only_current_player_may_act(engine):
    result = roll(engine, 1, 1, 2)

    assert result.reason == FailureReason.NOT_YOUR_TURN
    assert engine.game.get_player(1).position == 0


def test_end_turn_only_after_obligations(engine):
    assert engine.submit({"command": "end_turn", "player_id": 0}).reason == FailureReason.WRONG_PHASE

    roll(engine, 0, 1, 2)
    assert engine.submit({"command": "end_turn", "player_id": 0}).reason == FailureReason.WRONG_PHASE

    engine.submit({"command": "buy_property", "player_id": 0, "position": 3})
    result = engine.submit({"command": "end_turn", "player_id": 0})

    assert result.outcome["next_player_id"] == 1
    assert engine.phase == TurnPhase.ROLL_DICE
    assert engine.current_player.player_id == 1


def test_jailed_player_starts_in_jail_decision(engine):
    roll(engine, 0, 2, 2)
    engine.submit({"command": "pay_tax", "player_id": 0})
    roll(engine, 0, 3, 3)
    roll(engine, 0, 4, 4)
    engine.submit({"command": "end_turn", "player_id": 0})
    roll(engine, 1, 1, 2)
    engine.submit({"command": "decline_purchase", "player_id": 1, "position": 3})
    engine.submit(
        {"command": "auction", "position": 3, "bids": [{"player_id": 0, "amount": 0}, {"player_id": 1, "amount": 0}]}
    )

    engine.submit({"command": "end_turn", "player_id": 1})

    assert engine.current_player.player_id == 0
    assert engine.phase == TurnPhase.JAIL_DECISION


def test_trade_must_involve_current_player(three_players):
    engine = GameEngine.new_game(GameConfig(seed=42), three_players)
    engine.game.get_player(1).properties.add(1)
    engine.game.ownership[1].owner_id = 1

    result = engine.submit(
        {
            "command": "trade",
            "proposer_id": 1,
            "recipient_id": 2,
            "proposer_offer": {"properties": [1]},
            "recipient_offer": {"cash": 100},
            "recipient_accepted": True,
        }
    )

    assert result.reason == FailureReason.NOT_YOUR_TURN


def test_trade_during_roll_phase(engine, give):
    give(engine.game, 1, 1)

    result = engine.submit(
        {
            "command": "trade",
            "proposer_id": 0,
            "recipient_id": 1,
            "proposer_offer": {"cash": 100},
            "recipient_offer": {"properties": [1]},
            "recipient_accepted": True,
        }
    )

    assert result.success
    assert engine.game.owner_of(1) == 0
    assert engine.phase == TurnPhase.ROLL_DICE


def test_malformed_intent_raises(engine):
    with pytest.raises(InvalidActionError):
        engine.submit({"command": "teleport", "player_id": 0})
    with pytest.raises(InvalidActionError):
        engine.submit({"command": "roll_dice"})


def test_undo_restores_phase_and_redo_reapplies(engine):
    roll(engine, 0, 1, 2)
    assert engine.phase == TurnPhase.PURCHASE_DECISION

    assert engine.undo().success
    assert engine.phase == TurnPhase.ROLL_DICE
    assert engine.game.get_player(0).position == 0
    assert engine.game.pending_property is None

    assert engine.game.event_log.get_events(EventType.DICE_ROLLED) == []

    assert engine.redo().success
    assert engine.phase == TurnPhase.PURCHASE_DECISION
    assert engine.game.get_player(0).position == 3


def test_undo_stops_at_end_of_turn(engine):
    roll(engine, 0, 1, 2)
    engine.submit({"command": "buy_property", "player_id": 0, "position": 3})
    engine.submit({"command": "end_turn", "player_id": 0})

    assert engine.undo().reason == FailureReason.IRREVERSIBLE
    assert engine.current_player.player_id == 1


def test_engine_replay(game_config, two_players, engine):
    intents = [
        {"command": "roll_dice", "player_id": 0, "dice": [1, 2]},
        {"command": "buy_property", "player_id": 0, "position": 3},
        {"command": "end_turn", "player_id": 0},
        {"command": "roll_dice", "player_id": 1, "dice": [3, 4]},
    ]
    engine.replay(intents)

    other = GameEngine.new_game(game_config, two_players)
    other.replay(engine.history.transports())

    assert other.snapshot() == engine.snapshot()
    assert other.phase == TurnPhase.DRAW_CARD


def test_events_reach_subscribers(engine):
    seen = []
    engine.subscribe(seen.append)

    roll(engine, 0, 1, 2)

    types = [event.event_type for event in seen]
    assert EventType.DICE_ROLLED in types
    assert EventType.PLAYER_MOVED in types

    engine.unsubscribe(seen.append)
    roll_count = len(seen)
    engine.submit({"command": "buy_property", "player_id": 0, "position": 3})
    assert len(seen) == roll_count


def test_queries_from_a_subscriber_see_the_submission_in_progress(engine):
    phases = []
    engine.subscribe(lambda event: phases.append(engine.legal_commands()))

    roll(engine, 0, 1, 2)

    assert phases
    assert all("roll_dice" in legal for legal in phases)
    assert engine.board_snapshot()[3].name
