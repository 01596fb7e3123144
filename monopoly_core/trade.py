"""
Trade offers between two players.
"""

from dataclasses import dataclass, field
from typing import FrozenSet


@dataclass(frozen=True)
class TradeOffer:
    """What one side of a trade hands over."""

    cash: int = 0
    properties: FrozenSet[int] = field(default_factory=frozenset)
    jail_cards: int = 0

    def is_empty(self) -> bool:
        return self.cash == 0 and not self.properties and self.jail_cards == 0

    def __repr__(self) -> str:
        parts = []
        if self.cash:
            parts.append(f"${self.cash}")
        if self.properties:
            parts.append(f"properties {sorted(self.properties)}")
        if self.jail_cards:
            parts.append(f"{self.jail_cards} jail card(s)")
        return ", ".join(parts) if parts else "nothing"


@dataclass(frozen=True)
class Trade:
    """
    A two-sided trade.

    ``proposer_offer`` moves from the proposer to the recipient and
    ``recipient_offer`` moves the other way. Both consent flags must be set
    before the trade can execute.
    """

    proposer_id: int
    recipient_id: int
    proposer_offer: TradeOffer = field(default_factory=TradeOffer)
    recipient_offer: TradeOffer = field(default_factory=TradeOffer)
    proposer_accepted: bool = True
    recipient_accepted: bool = False

    def accepted(self) -> "Trade":
        """The same trade with the recipient's consent."""
        return Trade(
            self.proposer_id,
            self.recipient_id,
            self.proposer_offer,
            self.recipient_offer,
            self.proposer_accepted,
            True,
        )

    def __repr__(self) -> str:
        return (
            f"Trade(P{self.proposer_id} gives {self.proposer_offer!r} "
            f"<-> P{self.recipient_id} gives {self.recipient_offer!r})"
        )
