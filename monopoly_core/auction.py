"""
Sealed-bid property auctions.
"""

from typing import Dict, Optional, Sequence, Tuple


class Auction:
    """
    One sealed bid per participant; a bid of 0 is a pass.

    The strictly highest bid wins. When several participants share the
    highest bid, the one earliest in ``participant_ids`` wins. If everyone
    passes the property stays with the bank.
    """

    def __init__(self, property_position: int, participant_ids: Sequence[int]):
        if len(set(participant_ids)) != len(participant_ids):
            raise ValueError("Auction participants must be distinct")
        self.property_position = property_position
        self.participant_ids: Tuple[int, ...] = tuple(participant_ids)
        self.bids: Dict[int, int] = {}

    def place_bid(self, player_id: int, amount: int) -> bool:
        """Record a bid. Returns False for strangers, repeat bids or negatives."""
        if player_id not in self.participant_ids or player_id in self.bids or amount < 0:
            return False
        self.bids[player_id] = amount
        return True

    def pass_turn(self, player_id: int) -> bool:
        return self.place_bid(player_id, 0)

    @property
    def is_complete(self) -> bool:
        return len(self.bids) == len(self.participant_ids)

    def get_winner(self) -> Optional[int]:
        winner = None
        best = 0
        for player_id in self.participant_ids:
            amount = self.bids.get(player_id, 0)
            if amount > best:
                winner, best = player_id, amount
        return winner

    def get_winning_bid(self) -> int:
        winner = self.get_winner()
        return self.bids[winner] if winner is not None else 0

    def __repr__(self) -> str:
        return f"Auction(position={self.property_position}, bids={self.bids})"
