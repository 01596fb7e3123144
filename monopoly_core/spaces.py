"""
Board space definitions.

Every space carries the shared name/position/space_type fields; the
variants add their own payload. Callers dispatch on ``space_type``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class SpaceType(Enum):
    """Kinds of spaces on the board."""

    GO = "go"
    PROPERTY = "property"
    RAILROAD = "railroad"
    UTILITY = "utility"
    TAX = "tax"
    CHANCE = "chance"
    COMMUNITY_CHEST = "community_chest"
    JAIL = "jail"
    FREE_PARKING = "free_parking"
    GO_TO_JAIL = "go_to_jail"


BUYABLE_TYPES = frozenset({SpaceType.PROPERTY, SpaceType.RAILROAD, SpaceType.UTILITY})


@dataclass(frozen=True)
class Space:
    """Base class for a board space."""

    name: str
    position: int
    space_type: SpaceType

    @property
    def is_buyable(self) -> bool:
        return self.space_type in BUYABLE_TYPES

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', position={self.position})"


@dataclass(frozen=True, repr=False)
class PropertySpace(Space):
    """A street that can be owned, built upon, and mortgaged."""

    price: int = 0
    color_group: str = ""
    rent_base: int = 0
    rent_with_1: int = 0
    rent_with_2: int = 0
    rent_with_3: int = 0
    rent_with_4: int = 0
    rent_hotel: int = 0
    house_cost: int = 0

    @property
    def mortgage_value(self) -> int:
        return self.price // 2

    def rent_for(self, houses: int, has_hotel: bool) -> int:
        """Rent from the printed schedule, before any monopoly bonus."""
        if has_hotel:
            return self.rent_hotel
        return (
            self.rent_base,
            self.rent_with_1,
            self.rent_with_2,
            self.rent_with_3,
            self.rent_with_4,
        )[houses]


@dataclass(frozen=True, repr=False)
class RailroadSpace(Space):
    """A railroad."""

    price: int = 200

    @property
    def mortgage_value(self) -> int:
        return self.price // 2

    @staticmethod
    def rent_for(railroads_owned: int) -> int:
        """Rent based on the number of railroads the owner holds."""
        return 25 * (2 ** (railroads_owned - 1))


@dataclass(frozen=True, repr=False)
class UtilitySpace(Space):
    """Electric Company or Water Works."""

    price: int = 150

    @property
    def mortgage_value(self) -> int:
        return self.price // 2

    @staticmethod
    def rent_for(dice_total: int, utilities_owned: int) -> int:
        multiplier = 4 if utilities_owned == 1 else 10
        return dice_total * multiplier


@dataclass(frozen=True, repr=False)
class TaxSpace(Space):
    """Income Tax or Luxury Tax."""

    amount: int = 0


BuyableSpace = Union[PropertySpace, RailroadSpace, UtilitySpace]


def street(name, position, price, color, base, r1, r2, r3, r4, hotel, house_cost) -> PropertySpace:
    return PropertySpace(
        name, position, SpaceType.PROPERTY, price, color, base, r1, r2, r3, r4, hotel, house_cost
    )


def railroad(name: str, position: int) -> RailroadSpace:
    return RailroadSpace(name, position, SpaceType.RAILROAD)


def utility(name: str, position: int) -> UtilitySpace:
    return UtilitySpace(name, position, SpaceType.UTILITY)


def tax(name: str, position: int, amount: int) -> TaxSpace:
    return TaxSpace(name, position, SpaceType.TAX, amount)


def plain(name: str, position: int, space_type: SpaceType) -> Space:
    """A space with no payload (Go, Jail, card spaces, ...)."""
    return Space(name, position, space_type)
