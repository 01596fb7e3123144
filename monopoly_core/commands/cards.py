"""
Drawing Chance and Community Chest cards.
"""

from monopoly_core import rules
from monopoly_core.cards import DeckType
from monopoly_core.commands.base import apply_landing, place, send_to_jail, transfer
from monopoly_core.commands.movement import PlayerCommand
from monopoly_core.commands.transport import DrawCardTransport
from monopoly_core.exceptions import InvariantViolationError
from monopoly_core.game import GameState
from monopoly_core.money import EventType
from monopoly_core.results import CommandResult, RuleCheck


class DrawCardCommand(PlayerCommand):
    """
    Draw the top card, apply its effect, and return it to the bottom of the
    deck unless the player keeps it.

    The whole effect is planned first. If the player cannot cover a payment
    the card asks for, nothing is paid and the debt becomes the game's
    pending payment.
    """

    kind = "draw_card"

    def __init__(self, game: GameState, player_id: int, deck: DeckType):
        super().__init__(game, player_id)
        if not isinstance(deck, DeckType):
            raise InvariantViolationError(f"Unknown deck {deck!r}")
        self.deck = deck

    def validate(self) -> RuleCheck:
        return self._check_solvent()

    def _apply(self) -> CommandResult:
        game = self.game
        player = self.player
        deck = game.decks[self.deck]
        card = deck.draw()
        effect = rules.plan_card_effect(game, card, self.player_id)
        game.event_log.log(EventType.CARD_DRAWN, self.player_id, card_id=card.card_id, description=card.description)

        for payer_id, payee_id, amount in effect.transfers:
            if payee_id is None and game.config.free_parking_pool:
                game.free_parking_pool += amount
            transfer(game, payer_id, payee_id, amount, f"card:{card.card_id}")
        if effect.debt is not None:
            game.pending_payment = effect.debt

        jailed = False
        if effect.destination is not None:
            place(game, player, effect.destination, f"card:{card.card_id}")
            jailed = apply_landing(game, player)
        if effect.go_to_jail:
            send_to_jail(game, player, f"card:{card.card_id}")
            jailed = True

        if effect.gain_jail_card:
            player.get_out_of_jail_cards += 1
            deck.hold(card)
        else:
            deck.put_back(card)

        return CommandResult.ok(
            card.description,
            card_id=card.card_id,
            action=card.action.value,
            moved=effect.destination is not None,
            position=player.position,
            passed_go=effect.passed_go,
            jailed=jailed,
            payment_due=effect.debt.amount if effect.debt else 0,
            cash=player.cash,
        )

    def to_transport(self) -> DrawCardTransport:
        return DrawCardTransport(player_id=self.player_id, deck=self.deck)

    @classmethod
    def from_transport(cls, game: GameState, transport: DrawCardTransport) -> "DrawCardCommand":
        return cls(game, transport.player_id, transport.deck)
