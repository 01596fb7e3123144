"""
The fixed 40-space board.
"""

from typing import Dict, List, Optional, Tuple

from monopoly_core.config import BOARD_SIZE
from monopoly_core.spaces import (
    BuyableSpace,
    PropertySpace,
    Space,
    SpaceType,
    plain,
    railroad,
    street,
    tax,
    utility,
)


def _standard_spaces() -> Tuple[Space, ...]:
    """Create the standard 40-space board."""
    return (
        # Bottom row (0-10)
        plain("GO", 0, SpaceType.GO),
        street("Mediterranean Avenue", 1, 60, "brown", 2, 10, 30, 90, 160, 250, 50),
        plain("Community Chest", 2, SpaceType.COMMUNITY_CHEST),
        street("Baltic Avenue", 3, 60, "brown", 4, 20, 60, 180, 320, 450, 50),
        tax("Income Tax", 4, 200),
        railroad("Reading Railroad", 5),
        street("Oriental Avenue", 6, 100, "light_blue", 6, 30, 90, 270, 400, 550, 50),
        plain("Chance", 7, SpaceType.CHANCE),
        street("Vermont Avenue", 8, 100, "light_blue", 6, 30, 90, 270, 400, 550, 50),
        street("Connecticut Avenue", 9, 120, "light_blue", 8, 40, 100, 300, 450, 600, 50),
        plain("Jail", 10, SpaceType.JAIL),
        # Left side (11-20)
        street("St. Charles Place", 11, 140, "pink", 10, 50, 150, 450, 625, 750, 100),
        utility("Electric Company", 12),
        street("States Avenue", 13, 140, "pink", 10, 50, 150, 450, 625, 750, 100),
        street("Virginia Avenue", 14, 160, "pink", 12, 60, 180, 500, 700, 900, 100),
        railroad("Pennsylvania Railroad", 15),
        street("St. James Place", 16, 180, "orange", 14, 70, 200, 550, 750, 950, 100),
        plain("Community Chest", 17, SpaceType.COMMUNITY_CHEST),
        street("Tennessee Avenue", 18, 180, "orange", 14, 70, 200, 550, 750, 950, 100),
        street("New York Avenue", 19, 200, "orange", 16, 80, 220, 600, 800, 1000, 100),
        plain("Free Parking", 20, SpaceType.FREE_PARKING),
        # Top row (21-30)
        street("Kentucky Avenue", 21, 220, "red", 18, 90, 250, 700, 875, 1050, 150),
        plain("Chance", 22, SpaceType.CHANCE),
        street("Indiana Avenue", 23, 220, "red", 18, 90, 250, 700, 875, 1050, 150),
        street("Illinois Avenue", 24, 240, "red", 20, 100, 300, 750, 925, 1100, 150),
        railroad("B. & O. Railroad", 25),
        street("Atlantic Avenue", 26, 260, "yellow", 22, 110, 330, 800, 975, 1150, 150),
        street("Ventnor Avenue", 27, 260, "yellow", 22, 110, 330, 800, 975, 1150, 150),
        utility("Water Works", 28),
        street("Marvin Gardens", 29, 280, "yellow", 24, 120, 360, 850, 1025, 1200, 150),
        plain("Go To Jail", 30, SpaceType.GO_TO_JAIL),
        # Right side (31-39)
        street("Pacific Avenue", 31, 300, "green", 26, 130, 390, 900, 1100, 1275, 200),
        street("North Carolina Avenue", 32, 300, "green", 26, 130, 390, 900, 1100, 1275, 200),
        plain("Community Chest", 33, SpaceType.COMMUNITY_CHEST),
        street("Pennsylvania Avenue", 34, 320, "green", 28, 150, 450, 1000, 1200, 1400, 200),
        railroad("Short Line", 35),
        plain("Chance", 36, SpaceType.CHANCE),
        street("Park Place", 37, 350, "dark_blue", 35, 175, 500, 1100, 1300, 1500, 200),
        tax("Luxury Tax", 38, 100),
        street("Boardwalk", 39, 400, "dark_blue", 50, 200, 600, 1400, 1700, 2000, 200),
    )


class Board:
    """The Monopoly game board with 40 spaces."""

    def __init__(self):
        self.spaces: Tuple[Space, ...] = _standard_spaces()
        if len(self.spaces) != BOARD_SIZE:
            raise ValueError(f"Board must have {BOARD_SIZE} spaces, got {len(self.spaces)}")
        self.color_groups: Dict[str, Tuple[int, ...]] = self._build_color_groups()

    def _build_color_groups(self) -> Dict[str, Tuple[int, ...]]:
        groups: Dict[str, List[int]] = {}
        for space in self.spaces:
            if isinstance(space, PropertySpace):
                groups.setdefault(space.color_group, []).append(space.position)
        return {color: tuple(positions) for color, positions in groups.items()}

    def get_space(self, position: int) -> Space:
        """Get the space at the given position."""
        return self.spaces[position % BOARD_SIZE]

    def get_buyable(self, position: int) -> Optional[BuyableSpace]:
        """Get a property, railroad or utility, or None for any other space."""
        space = self.get_space(position)
        return space if space.is_buyable else None

    def get_property_space(self, position: int) -> Optional[PropertySpace]:
        space = self.get_space(position)
        return space if isinstance(space, PropertySpace) else None

    def get_color_group(self, color: str) -> Tuple[int, ...]:
        """Get all property positions in a color group."""
        return self.color_groups.get(color, ())

    def positions_of(self, space_type: SpaceType) -> List[int]:
        return [s.position for s in self.spaces if s.space_type == space_type]

    def buyable_positions(self) -> List[int]:
        return [s.position for s in self.spaces if s.is_buyable]

    def find_nearest(self, position: int, space_type: SpaceType) -> int:
        """
        Next space of the given kind strictly ahead of ``position``.

        Wraps to the lowest-indexed space of that kind when none remain ahead.
        """
        targets = self.positions_of(space_type)
        if not targets:
            raise ValueError(f"No {space_type.value} spaces on the board")
        for target in targets:
            if target > position:
                return target
        return targets[0]
