"""
Auctioning a declined property.
"""

from typing import Sequence, Tuple

from monopoly_core import rules
from monopoly_core.auction import Auction
from monopoly_core.commands.base import Command, transfer
from monopoly_core.commands.transport import AuctionTransport, BidTransport
from monopoly_core.exceptions import InvariantViolationError
from monopoly_core.game import GameState
from monopoly_core.money import EventType
from monopoly_core.results import CommandResult, RuleCheck


class AuctionCommand(Command):
    """
    Settle a sealed-bid auction.

    ``bids`` lists (player id, amount) in participant order; that order
    breaks ties. The winner pays the bank and takes the property, or the
    property stays unowned if everyone passed.
    """

    kind = "auction"

    def __init__(self, game: GameState, position: int, bids: Sequence[Tuple[int, int]]):
        super().__init__(game)
        self.position = self._require_position(position)
        self.bids = tuple((self._require_player(player_id), amount) for player_id, amount in bids)
        try:
            self.auction = Auction(position, [player_id for player_id, _ in self.bids])
        except ValueError as e:
            raise InvariantViolationError(str(e)) from e
        for player_id, amount in self.bids:
            if not self.auction.place_bid(player_id, amount):
                raise InvariantViolationError(f"Invalid bid {amount!r} from player {player_id}")

    def validate(self) -> RuleCheck:
        return rules.validate_auction(self.game, self.auction)

    def _apply(self) -> CommandResult:
        winner_id, price = rules.resolve_auction(self.auction)
        space = self.game.board.get_space(self.position)
        if winner_id is not None:
            transfer(self.game, winner_id, None, price, f"auction:{self.position}")
            self.game.ownership[self.position].owner_id = winner_id
            self.game.get_player(winner_id).properties.add(self.position)
        self.game.event_log.log(
            EventType.AUCTION_RESOLVED, winner_id, position=self.position, price=price, bids=dict(self.bids)
        )
        message = f"Player {winner_id} won {space.name} for ${price}" if winner_id is not None else f"No bids for {space.name}"
        return CommandResult.ok(message, position=self.position, winner_id=winner_id, price=price)

    def to_transport(self) -> AuctionTransport:
        return AuctionTransport(
            position=self.position,
            bids=[BidTransport(player_id=player_id, amount=amount) for player_id, amount in self.bids],
        )

    @classmethod
    def from_transport(cls, game: GameState, transport: AuctionTransport) -> "AuctionCommand":
        return cls(game, transport.position, [(b.player_id, b.amount) for b in transport.bids])
