"""
Tests for snapshots and read-only views.
"""

from monopoly_core import GameSnapshot, Trade, TradeOffer, TurnPhase, restore_game, snapshot_game
from monopoly_core.commands import BuyHouseOrHotelCommand, MortgageCommand, RollDiceCommand, TradeCommand


def play_a_little(game, give):
    give(game, 0, 1, 3, 39)
    BuyHouseOrHotelCommand(game, 0, 1).execute()
    MortgageCommand(game, 0, 39).execute()
    RollDiceCommand(game, 0).execute()
    game.get_player(1).get_out_of_jail_cards = 1
    TradeCommand(game, Trade(1, 0, TradeOffer(cash=10, jail_cards=1), TradeOffer(), True, True)).execute()
    game.phase = TurnPhase.OPTIONAL_ACTIONS


def test_restore_rebuilds_identical_state(basic_game, give):
    play_a_little(basic_game, give)
    snapshot = snapshot_game(basic_game)

    restored = restore_game(snapshot)

    assert snapshot_game(restored) == snapshot
    assert restored.ownership[1].houses == 1
    assert restored.ownership[39].is_mortgaged
    assert restored.get_player(0).get_out_of_jail_cards == 1


def test_restored_game_rolls_the_same_dice(basic_game):
    restored = restore_game(snapshot_game(basic_game))

    assert [basic_game.roll_dice() for _ in range(5)] == [restored.roll_dice() for _ in range(5)]


def test_snapshot_survives_json(basic_game, give):
    play_a_little(basic_game, give)
    snapshot = snapshot_game(basic_game)

    loaded = GameSnapshot.model_validate_json(snapshot.model_dump_json())

    assert loaded == snapshot
    assert snapshot_game(restore_game(loaded)) == snapshot


def test_financial_summary(engine, give):
    game = engine.game
    give(game, 0, 1, 3, 39)
    game.ownership[1].houses = 1
    game.ownership[39].is_mortgaged = True

    summary = engine.financial_summary(0)

    assert summary.cash == 1500
    assert summary.properties == [1, 3, 39]
    assert summary.mortgaged == [39]
    assert summary.houses == 1
    assert summary.hotels == 0
    # cash + mortgage values of the browns + half a $50 house
    assert summary.liquidation_value == 1500 + 30 + 30 + 25


def test_board_snapshot(engine, give):
    give(engine.game, 1, 5)

    board = engine.board_snapshot()

    assert len(board) == 40
    assert board[0].name == "GO"
    assert board[5].owner_id == 1
    assert board[5].price == 200
    assert board[4].owner_id is None
    assert board[4].space_type == "tax"
    assert board[1].color_group is not None
