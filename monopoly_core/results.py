"""
Typed outcomes for rule checks and commands.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class FailureReason(Enum):
    """Reason codes for expected business-rule failures."""

    INSUFFICIENT_FUNDS = "insufficient_funds"
    NOT_BUYABLE = "not_buyable"
    ALREADY_OWNED = "already_owned"
    NOT_OWNER = "not_owner"
    NOT_OWNED = "not_owned"
    MORTGAGED = "mortgaged"
    NOT_MORTGAGED = "not_mortgaged"
    NO_MONOPOLY = "no_monopoly"
    GROUP_MORTGAGED = "group_mortgaged"
    UNEVEN_BUILDING = "uneven_building"
    MAX_HOUSES = "max_houses"
    HAS_HOTEL = "has_hotel"
    NEEDS_FOUR_HOUSES = "needs_four_houses"
    HAS_BUILDINGS = "has_buildings"
    NO_BUILDINGS = "no_buildings"
    NO_HOUSES_AVAILABLE = "no_houses_available"
    NO_HOTELS_AVAILABLE = "no_hotels_available"
    NOT_IN_JAIL = "not_in_jail"
    NO_JAIL_CARD = "no_jail_card"
    PLAYER_BANKRUPT = "player_bankrupt"
    NOT_ON_SPACE = "not_on_space"
    NOTHING_OWED = "nothing_owed"
    CAN_STILL_PAY = "can_still_pay"
    SELF_TRADE = "self_trade"
    TRADE_NOT_ACCEPTED = "trade_not_accepted"
    TRADE_EMPTY = "trade_empty"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_BIDDERS = "invalid_bidders"
    BID_EXCEEDS_CASH = "bid_exceeds_cash"
    NOT_YOUR_TURN = "not_your_turn"
    WRONG_PHASE = "wrong_phase"
    GAME_OVER = "game_over"
    NOTHING_TO_UNDO = "nothing_to_undo"
    NOTHING_TO_REDO = "nothing_to_redo"
    IRREVERSIBLE = "irreversible"


@dataclass(frozen=True)
class RuleCheck:
    """Answer to an eligibility question. Truthy when the action is allowed."""

    allowed: bool
    reason: Optional[FailureReason] = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def ok(cls) -> "RuleCheck":
        return cls(True)

    @classmethod
    def deny(cls, reason: FailureReason, message: str) -> "RuleCheck":
        return cls(False, reason, message)


@dataclass(frozen=True)
class CommandResult:
    """Success with an outcome payload, or failure with a reason code."""

    success: bool
    reason: Optional[FailureReason] = None
    message: str = ""
    outcome: Dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, message: str = "", **outcome: Any) -> "CommandResult":
        return cls(True, None, message, dict(outcome))

    @classmethod
    def fail(cls, reason: FailureReason, message: str) -> "CommandResult":
        return cls(False, reason, message)

    @classmethod
    def from_check(cls, check: RuleCheck) -> "CommandResult":
        """Failure result carrying a denied check's reason."""
        return cls(False, check.reason, check.message)
