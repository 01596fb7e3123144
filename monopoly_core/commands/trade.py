"""
Player-to-player trades.
"""

from monopoly_core import rules
from monopoly_core.commands.base import Command, transfer
from monopoly_core.commands.transport import TradeOfferTransport, TradeTransport
from monopoly_core.exceptions import InvariantViolationError
from monopoly_core.game import GameState
from monopoly_core.money import EventType
from monopoly_core.results import CommandResult, RuleCheck
from monopoly_core.trade import Trade, TradeOffer


class TradeCommand(Command):
    """
    Swap both offers atomically: properties, then cash, then jail cards.
    Undo restores every transferred item.
    """

    kind = "trade"

    def __init__(self, game: GameState, trade: Trade):
        super().__init__(game)
        if trade is None:
            raise InvariantViolationError("TradeCommand needs a trade")
        self._require_player(trade.proposer_id)
        self._require_player(trade.recipient_id)
        for position in trade.proposer_offer.properties | trade.recipient_offer.properties:
            self._require_position(position)
        self.trade = trade

    def validate(self) -> RuleCheck:
        return rules.validate_trade(self.game, self.trade)

    def _hand_over(self, giver_id: int, taker_id: int, offer: TradeOffer) -> None:
        giver = self.game.get_player(giver_id)
        taker = self.game.get_player(taker_id)
        for position in offer.properties:
            self.game.ownership[position].owner_id = taker_id
            giver.properties.discard(position)
            taker.properties.add(position)
        transfer(self.game, giver_id, taker_id, offer.cash, "trade")
        giver.get_out_of_jail_cards -= offer.jail_cards
        taker.get_out_of_jail_cards += offer.jail_cards

    def _apply(self) -> CommandResult:
        trade = self.trade
        self._hand_over(trade.proposer_id, trade.recipient_id, trade.proposer_offer)
        self._hand_over(trade.recipient_id, trade.proposer_id, trade.recipient_offer)
        self.game.event_log.log(
            EventType.TRADE_EXECUTED,
            trade.proposer_id,
            recipient=trade.recipient_id,
            gave=repr(trade.proposer_offer),
            received=repr(trade.recipient_offer),
        )
        proposer = self.game.get_player(trade.proposer_id)
        recipient = self.game.get_player(trade.recipient_id)
        return CommandResult.ok(
            repr(trade),
            proposer_cash=proposer.cash,
            recipient_cash=recipient.cash,
            proposer_properties=sorted(proposer.properties),
            recipient_properties=sorted(recipient.properties),
        )

    def to_transport(self) -> TradeTransport:
        trade = self.trade
        return TradeTransport(
            proposer_id=trade.proposer_id,
            recipient_id=trade.recipient_id,
            proposer_offer=_offer_transport(trade.proposer_offer),
            recipient_offer=_offer_transport(trade.recipient_offer),
            proposer_accepted=trade.proposer_accepted,
            recipient_accepted=trade.recipient_accepted,
        )

    @classmethod
    def from_transport(cls, game: GameState, transport: TradeTransport) -> "TradeCommand":
        trade = Trade(
            transport.proposer_id,
            transport.recipient_id,
            _offer(transport.proposer_offer),
            _offer(transport.recipient_offer),
            transport.proposer_accepted,
            transport.recipient_accepted,
        )
        return cls(game, trade)


def _offer_transport(offer: TradeOffer) -> TradeOfferTransport:
    return TradeOfferTransport(cash=offer.cash, properties=sorted(offer.properties), jail_cards=offer.jail_cards)


def _offer(transport: TradeOfferTransport) -> TradeOffer:
    return TradeOffer(transport.cash, frozenset(transport.properties), transport.jail_cards)
