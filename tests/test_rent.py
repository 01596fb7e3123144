"""
Tests for rent calculation on all property types.
"""

import pytest

from monopoly_core import FailureReason, rules
from monopoly_core.commands import PayRentCommand
from monopoly_core.spaces import SpaceType


def test_unowned_property_has_no_rent(basic_game):
    assert rules.calculate_rent(basic_game, 1) == 0


def test_basic_property_rent(basic_game, give):
    """
    Rule: 'The amount payable is shown on the Title Deed'
    """
    give(basic_game, 0, 1)

    # Mediterranean base rent is 2
    assert rules.calculate_rent(basic_game, 1) == 2


def test_monopoly_doubles_rent(basic_game, give):
    """
    Rule: 'the rent payable is doubled on any Site of that group not yet built on.'
    """
    give(basic_game, 0, 1, 3)

    assert rules.calculate_rent(basic_game, 1) == 4
    assert rules.calculate_rent(basic_game, 3) == 8


def test_rent_with_houses_and_hotel(basic_game, give):
    give(basic_game, 0, 37, 39)
    boardwalk = basic_game.ownership[39]

    boardwalk.houses = 3
    assert rules.calculate_rent(basic_game, 39) == 1400

    boardwalk.houses = 0
    boardwalk.has_hotel = True
    assert rules.calculate_rent(basic_game, 39) == 2000


@pytest.mark.parametrize("owned, expected", [(1, 25), (2, 50), (3, 100), (4, 200)])
def test_railroad_rent(basic_game, give, owned, expected):
    """
    Rule: rent is 25 x 2^(railroads owned - 1)
    """
    railroads = basic_game.board.positions_of(SpaceType.RAILROAD)
    give(basic_game, 1, *railroads[:owned])

    assert rules.calculate_rent(basic_game, railroads[0]) == expected


def test_utility_rent_one_owned(basic_game, give):
    give(basic_game, 1, 12)

    assert rules.calculate_rent(basic_game, 12, dice_total=9) == 36


def test_utility_rent_both_owned(basic_game, give):
    """
    Rule: 'If both Utilities are owned, rent is 10 times amount shown on dice.'
    """
    give(basic_game, 1, 12, 28)

    assert rules.calculate_rent(basic_game, 28, dice_total=9) == 90


def test_mortgaged_property_never_charges_rent(basic_game, give):
    """
    Rule: 'No rent can be collected on mortgaged properties'
    Checked for every buyable space, with and without buildings.
    """
    game = basic_game
    for color, group in game.board.color_groups.items():
        give(game, 1, *group)
    give(game, 1, *game.board.positions_of(SpaceType.RAILROAD), *game.board.positions_of(SpaceType.UTILITY))

    for position in game.board.buyable_positions():
        record = game.ownership[position]
        record.is_mortgaged = True
        levels = [(0, False), (2, False), (4, False), (0, True)] if game.board.get_property_space(position) else [(0, False)]
        for houses, hotel in levels:
            record.houses, record.has_hotel = houses, hotel
            assert rules.calculate_rent(game, position, dice_total=12) == 0
        record.houses, record.has_hotel, record.is_mortgaged = 0, False, False


def test_mortgaged_group_member_keeps_monopoly_bonus(basic_game, give):
    """Full-group ownership doubles base rent even while another group member is mortgaged."""
    give(basic_game, 0, 1, 3)
    basic_game.ownership[3].is_mortgaged = True

    assert rules.calculate_rent(basic_game, 1) == 4


class TestPayRentCommand:
    def test_pays_owner(self, basic_game, give):
        give(basic_game, 1, 39)
        basic_game.get_player(0).position = 39

        result = PayRentCommand(basic_game, 0).execute()

        assert result.success
        assert result.outcome["amount"] == 50
        assert basic_game.get_player(0).cash == 1450
        assert basic_game.get_player(1).cash == 1550

    def test_own_property_is_free(self, basic_game, give):
        give(basic_game, 0, 39)
        basic_game.get_player(0).position = 39

        result = PayRentCommand(basic_game, 0).execute()

        assert result.success
        assert result.outcome["amount"] == 0
        assert basic_game.get_player(0).cash == 1500

    def test_utility_uses_last_roll(self, basic_game, give):
        give(basic_game, 1, 12, 28)
        basic_game.get_player(0).position = 12
        basic_game.last_dice_roll = (4, 5)

        result = PayRentCommand(basic_game, 0).execute()

        assert result.outcome["amount"] == 90

    def test_insufficient_funds(self, basic_game, give):
        give(basic_game, 1, 37, 39)
        basic_game.ownership[39].has_hotel = True
        basic_game.get_player(0).position = 39

        result = PayRentCommand(basic_game, 0).execute()

        assert not result.success
        assert result.reason == FailureReason.INSUFFICIENT_FUNDS
        assert basic_game.get_player(0).cash == 1500
