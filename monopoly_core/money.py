"""
Bank building supply and the game event log.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of game events."""

    GAME_STARTED = "game_started"
    TURN_STARTED = "turn_started"
    TURN_ENDED = "turn_ended"
    DICE_ROLLED = "dice_rolled"
    PLAYER_MOVED = "player_moved"

    PROPERTY_PURCHASED = "property_purchased"
    PURCHASE_DECLINED = "purchase_declined"
    AUCTION_RESOLVED = "auction_resolved"

    MONEY_TRANSFERRED = "money_transferred"

    CARD_DRAWN = "card_drawn"

    BUILDING_BUILT = "building_built"
    BUILDING_SOLD = "building_sold"

    PROPERTY_MORTGAGED = "property_mortgaged"
    PROPERTY_UNMORTGAGED = "property_unmortgaged"

    PLAYER_JAILED = "player_jailed"
    JAIL_ESCAPE_FAILED = "jail_escape_failed"
    PLAYER_RELEASED_FROM_JAIL = "player_released_from_jail"

    TRADE_EXECUTED = "trade_executed"
    PLAYER_BANKRUPT = "player_bankrupt"
    GAME_OVER = "game_over"


@dataclass
class GameEvent:
    """A logged event in the game."""

    event_type: EventType
    player_id: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        player_str = f"P{self.player_id}" if self.player_id is not None else "System"
        return f"[{player_str}] {self.event_type.value}: {self.details}"


EventHandler = Callable[[GameEvent], None]


class EventLog:
    """
    Records game events and notifies subscribers.

    A subscriber that raises is logged and skipped so that one observer
    cannot break a command that has already been applied.
    """

    def __init__(self):
        self.events: List[GameEvent] = []
        self._subscribers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> None:
        if handler not in self._subscribers:
            self._subscribers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        if handler in self._subscribers:
            self._subscribers.remove(handler)

    def log(self, event_type: EventType, player_id: Optional[int] = None, **details: Any) -> GameEvent:
        """Log a game event."""
        event = GameEvent(event_type, player_id, details)
        self.events.append(event)
        for handler in list(self._subscribers):
            try:
                handler(event)
            except Exception:
                logger.exception(f"Event handler {handler!r} failed on {event_type.value}")
        return event

    def get_events(self, event_type: Optional[EventType] = None) -> List[GameEvent]:
        """Get logged events, optionally only those of one type."""
        if event_type is None:
            return self.events.copy()
        return [e for e in self.events if e.event_type == event_type]

    def __len__(self) -> int:
        return len(self.events)

    def truncate(self, length: int) -> None:
        """Drop events logged after the first ``length``. Subscribers are not told."""
        del self.events[length:]


class Bank:
    """
    Building supply.
    The bank has unlimited money but limited houses and hotels.
    """

    def __init__(self, house_limit: int = 32, hotel_limit: int = 12):
        self.houses_available = house_limit
        self.hotels_available = hotel_limit

    def can_buy_houses(self, count: int = 1) -> bool:
        return self.houses_available >= count

    def can_buy_hotel(self) -> bool:
        return self.hotels_available > 0

    def buy_house(self) -> None:
        if not self.can_buy_houses(1):
            raise ValueError("No houses left in the bank")
        self.houses_available -= 1

    def buy_hotel(self, return_houses: int = 4) -> None:
        """Take a hotel from the bank, handing back the houses it replaces."""
        if not self.can_buy_hotel():
            raise ValueError("No hotels left in the bank")
        self.hotels_available -= 1
        self.houses_available += return_houses

    def sell_houses(self, count: int) -> None:
        self.houses_available += count

    def sell_hotel(self, take_houses: int = 4) -> None:
        """Return a hotel, taking back the houses it is broken into."""
        if not self.can_buy_houses(take_houses):
            raise ValueError("Not enough houses to break the hotel down")
        self.hotels_available += 1
        self.houses_available -= take_houses
