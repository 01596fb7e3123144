"""
Player state and property ownership records.
"""

from dataclasses import dataclass
from typing import Optional, Set


@dataclass(frozen=True)
class Player:
    """A seat at the table. This is what callers hand to ``create_game``."""

    player_id: int
    name: str


class PlayerState:
    """
    Everything the game tracks about one player.

    ``properties`` holds board positions; the matching ownership records
    live on the game.
    """

    def __init__(self, player_id: int, name: str, starting_cash: int):
        self.player_id = player_id
        self.name = name
        self.cash = starting_cash
        self.position = 0
        self.in_jail = False
        self.jail_turns = 0
        self.get_out_of_jail_cards = 0
        self.is_bankrupt = False
        self.properties: Set[int] = set()

    @property
    def is_active(self) -> bool:
        """Still in the game."""
        return not self.is_bankrupt

    def can_afford(self, amount: int) -> bool:
        return self.cash >= amount

    def __repr__(self) -> str:
        jail = f", jailed({self.jail_turns})" if self.in_jail else ""
        return (
            f"PlayerState(P{self.player_id} {self.name}, ${self.cash}, "
            f"at {self.position}{jail}, {len(self.properties)} properties"
            f"{', bankrupt' if self.is_bankrupt else ''})"
        )


@dataclass
class PropertyOwnership:
    """
    Mutable state of one buyable space.

    The owner is stored by player id; the player's ``properties`` set holds
    the matching board position.
    """

    owner_id: Optional[int] = None
    houses: int = 0
    has_hotel: bool = False
    is_mortgaged: bool = False

    def is_owned(self) -> bool:
        return self.owner_id is not None

    @property
    def building_level(self) -> int:
        """Houses on the property, with a hotel counted as level 5."""
        return 5 if self.has_hotel else self.houses

    @property
    def has_buildings(self) -> bool:
        return self.has_hotel or self.houses > 0
