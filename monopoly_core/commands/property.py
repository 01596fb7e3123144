"""
Buying, building on, selling from and mortgaging properties.
"""

from monopoly_core import rules
from monopoly_core.commands.base import Command, transfer
from monopoly_core.commands.transport import (
    BuildTransport,
    BuyPropertyTransport,
    DeclinePurchaseTransport,
    MortgageTransport,
    SellBuildingTransport,
    UnmortgageTransport,
)
from monopoly_core.game import GameState
from monopoly_core.money import EventType
from monopoly_core.results import CommandResult, FailureReason, RuleCheck


class PropertyCommand(Command):
    """A player acting on one board position."""

    def __init__(self, game: GameState, player_id: int, position: int):
        super().__init__(game)
        self.player_id = self._require_player(player_id)
        self.position = self._require_position(position)

    @property
    def player(self):
        return self.game.get_player(self.player_id)

    @property
    def space(self):
        return self.game.board.get_space(self.position)

    @property
    def record(self):
        return self.game.ownership[self.position]

    @classmethod
    def from_transport(cls, game: GameState, transport) -> "PropertyCommand":
        return cls(game, transport.player_id, transport.position)


class BuyPropertyCommand(PropertyCommand):
    kind = "buy_property"

    def validate(self) -> RuleCheck:
        return rules.can_purchase(self.game, self.player_id, self.position)

    def _apply(self) -> CommandResult:
        price = self.space.price
        transfer(self.game, self.player_id, None, price, f"purchase:{self.position}")
        self.record.owner_id = self.player_id
        self.player.properties.add(self.position)
        self.game.event_log.log(
            EventType.PROPERTY_PURCHASED, self.player_id, position=self.position, price=price
        )
        return CommandResult.ok(
            f"{self.player.name} bought {self.space.name} for ${price}",
            position=self.position,
            price=price,
            cash=self.player.cash,
        )

    def to_transport(self) -> BuyPropertyTransport:
        return BuyPropertyTransport(player_id=self.player_id, position=self.position)


class DeclinePurchaseCommand(PropertyCommand):
    """Passing on an unowned property. Changes nothing but is recorded for replay."""

    kind = "decline_purchase"

    def validate(self) -> RuleCheck:
        if self.game.board.get_buyable(self.position) is None:
            return RuleCheck.deny(FailureReason.NOT_BUYABLE, f"{self.space.name} is not for sale")
        if self.record.is_owned():
            return RuleCheck.deny(FailureReason.ALREADY_OWNED, f"{self.space.name} is already owned")
        return RuleCheck.ok()

    def _apply(self) -> CommandResult:
        self.game.event_log.log(EventType.PURCHASE_DECLINED, self.player_id, position=self.position)
        return CommandResult.ok(f"{self.player.name} declined {self.space.name}", position=self.position)

    def to_transport(self) -> DeclinePurchaseTransport:
        return DeclinePurchaseTransport(player_id=self.player_id, position=self.position)


class BuyHouseOrHotelCommand(PropertyCommand):
    """
    Build one level on a street: a house, or a hotel once it has 4 houses.
    The 4 houses a hotel replaces go back to the bank.
    """

    kind = "buy_house_or_hotel"

    def validate(self) -> RuleCheck:
        return rules.can_build(self.game, self.player_id, self.position)

    def _apply(self) -> CommandResult:
        record = self.record
        cost = self.space.house_cost
        if record.houses == 4:
            self.game.bank.buy_hotel(return_houses=4)
            record.houses = 0
            record.has_hotel = True
            building = "hotel"
        else:
            self.game.bank.buy_house()
            record.houses += 1
            building = "house"
        transfer(self.game, self.player_id, None, cost, f"build:{self.position}")
        self.game.event_log.log(
            EventType.BUILDING_BUILT, self.player_id, position=self.position, building=building, cost=cost
        )
        return CommandResult.ok(
            f"{self.player.name} built a {building} on {self.space.name}",
            position=self.position,
            building=building,
            houses=record.houses,
            has_hotel=record.has_hotel,
            cost=cost,
            cash=self.player.cash,
        )

    def to_transport(self) -> BuildTransport:
        return BuildTransport(player_id=self.player_id, position=self.position)


class SellBuildingCommand(PropertyCommand):
    """Sell one building level back to the bank at half the house cost."""

    kind = "sell_building"

    def validate(self) -> RuleCheck:
        return rules.can_sell_building(self.game, self.player_id, self.position)

    def _apply(self) -> CommandResult:
        record = self.record
        refund = self.space.house_cost // 2
        if record.has_hotel:
            self.game.bank.sell_hotel(take_houses=4)
            record.has_hotel = False
            record.houses = 4
            building = "hotel"
        else:
            self.game.bank.sell_houses(1)
            record.houses -= 1
            building = "house"
        transfer(self.game, None, self.player_id, refund, f"sell_building:{self.position}")
        self.game.event_log.log(
            EventType.BUILDING_SOLD, self.player_id, position=self.position, building=building, refund=refund
        )
        return CommandResult.ok(
            f"{self.player.name} sold a {building} on {self.space.name}",
            position=self.position,
            building=building,
            houses=record.houses,
            has_hotel=record.has_hotel,
            refund=refund,
            cash=self.player.cash,
        )

    def to_transport(self) -> SellBuildingTransport:
        return SellBuildingTransport(player_id=self.player_id, position=self.position)


class MortgageCommand(PropertyCommand):
    kind = "mortgage"

    def validate(self) -> RuleCheck:
        return rules.can_mortgage(self.game, self.player_id, self.position)

    def _apply(self) -> CommandResult:
        value = self.space.mortgage_value
        self.record.is_mortgaged = True
        transfer(self.game, None, self.player_id, value, f"mortgage:{self.position}")
        self.game.event_log.log(EventType.PROPERTY_MORTGAGED, self.player_id, position=self.position, value=value)
        return CommandResult.ok(
            f"{self.player.name} mortgaged {self.space.name} for ${value}",
            position=self.position,
            amount=value,
            cash=self.player.cash,
        )

    def to_transport(self) -> MortgageTransport:
        return MortgageTransport(player_id=self.player_id, position=self.position)


class UnmortgageCommand(PropertyCommand):
    kind = "unmortgage"

    def validate(self) -> RuleCheck:
        return rules.can_unmortgage(self.game, self.player_id, self.position)

    def _apply(self) -> CommandResult:
        cost = rules.unmortgage_cost(self.space, self.game.config)
        transfer(self.game, self.player_id, None, cost, f"unmortgage:{self.position}")
        self.record.is_mortgaged = False
        self.game.event_log.log(EventType.PROPERTY_UNMORTGAGED, self.player_id, position=self.position, cost=cost)
        return CommandResult.ok(
            f"{self.player.name} lifted the mortgage on {self.space.name} for ${cost}",
            position=self.position,
            amount=cost,
            cash=self.player.cash,
        )

    def to_transport(self) -> UnmortgageTransport:
        return UnmortgageTransport(player_id=self.player_id, position=self.position)
