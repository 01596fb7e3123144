"""
Tests for auctions of declined properties.
"""

import pytest

from monopoly_core import Auction, FailureReason, InvariantViolationError
from monopoly_core.commands import AuctionCommand


class TestAuction:
    def test_highest_bid_wins(self):
        auction = Auction(1, [0, 1, 2])
        auction.place_bid(0, 50)
        auction.place_bid(1, 80)
        auction.pass_turn(2)

        assert auction.is_complete
        assert auction.get_winner() == 1
        assert auction.get_winning_bid() == 80

    def test_tie_goes_to_earliest_participant(self):
        auction = Auction(1, [2, 0, 1])
        auction.place_bid(0, 60)
        auction.place_bid(1, 60)
        auction.place_bid(2, 10)

        assert auction.get_winner() == 0

    def test_all_pass_means_no_winner(self):
        auction = Auction(1, [0, 1])
        auction.pass_turn(0)
        auction.pass_turn(1)

        assert auction.get_winner() is None
        assert auction.get_winning_bid() == 0

    def test_rejects_invalid_bids(self):
        auction = Auction(1, [0, 1])

        assert not auction.place_bid(5, 10)
        assert not auction.place_bid(0, -1)
        assert auction.place_bid(0, 10)
        assert not auction.place_bid(0, 20)
        assert not auction.is_complete

    def test_duplicate_participants(self):
        with pytest.raises(ValueError):
            Auction(1, [0, 0])


class TestAuctionCommand:
    def test_winner_pays_bank_and_takes_property(self, basic_game):
        result = AuctionCommand(basic_game, 39, [(0, 150), (1, 320)]).execute()

        assert result.success
        assert result.outcome["winner_id"] == 1
        assert result.outcome["price"] == 320
        assert basic_game.owner_of(39) == 1
        assert 39 in basic_game.get_player(1).properties
        assert basic_game.get_player(1).cash == 1500 - 320
        assert basic_game.get_player(0).cash == 1500

    def test_winner_may_pay_below_list_price(self, basic_game):
        AuctionCommand(basic_game, 39, [(0, 1), (1, 0)]).execute()

        assert basic_game.owner_of(39) == 0
        assert basic_game.get_player(0).cash == 1499

    def test_everyone_passes(self, basic_game):
        result = AuctionCommand(basic_game, 39, [(0, 0), (1, 0)]).execute()

        assert result.success
        assert result.outcome["winner_id"] is None
        assert basic_game.owner_of(39) is None

    def test_bid_over_cash_rejected(self, basic_game):
        basic_game.get_player(1).cash = 100

        result = AuctionCommand(basic_game, 39, [(0, 50), (1, 101)]).execute()

        assert result.reason == FailureReason.BID_EXCEEDS_CASH
        assert basic_game.owner_of(39) is None

    def test_every_solvent_player_must_bid(self, three_player_game):
        result = AuctionCommand(three_player_game, 39, [(0, 50), (1, 60)]).execute()

        assert result.reason == FailureReason.INVALID_BIDDERS

    def test_bankrupt_players_do_not_bid(self, three_player_game):
        three_player_game.get_player(2).is_bankrupt = True

        assert AuctionCommand(three_player_game, 39, [(0, 50), (1, 60)]).execute().success

    def test_owned_property_cannot_be_auctioned(self, basic_game, give):
        give(basic_game, 0, 39)

        assert AuctionCommand(basic_game, 39, [(0, 5), (1, 0)]).execute().reason == FailureReason.ALREADY_OWNED

    def test_negative_bid_is_a_programming_error(self, basic_game):
        with pytest.raises(InvariantViolationError):
            AuctionCommand(basic_game, 39, [(0, -5), (1, 0)])

    def test_undo_returns_property_to_bank(self, basic_game):
        command = AuctionCommand(basic_game, 39, [(0, 200), (1, 100)])
        command.execute()

        command.undo()

        assert basic_game.owner_of(39) is None
        assert basic_game.get_player(0).cash == 1500
        assert basic_game.get_player(0).properties == set()
