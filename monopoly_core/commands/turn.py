"""
Commands that close out a turn or a player. Neither can be undone.
"""

from typing import Optional

from monopoly_core import rules
from monopoly_core.commands.base import return_jail_card, transfer
from monopoly_core.commands.movement import PlayerCommand
from monopoly_core.commands.transport import DeclareBankruptcyTransport, EndTurnTransport
from monopoly_core.game import GameState
from monopoly_core.money import EventType
from monopoly_core.results import CommandResult, FailureReason, RuleCheck


class EndTurnCommand(PlayerCommand):
    """Pass play to the next solvent player."""

    kind = "end_turn"
    reversible = False

    def validate(self) -> RuleCheck:
        if self.game.current_player.player_id != self.player_id:
            return RuleCheck.deny(FailureReason.NOT_YOUR_TURN, f"It is not {self.player.name}'s turn")
        return self._check_solvent()

    def _apply(self) -> CommandResult:
        game = self.game
        game.consecutive_doubles = 0
        game.extra_roll_pending = False
        game.last_dice_roll = None
        game.pending_property = None
        game.event_log.log(EventType.TURN_ENDED, self.player_id, turn=game.turn_number)

        game.current_player_index = game.next_active_index(game.current_player_index)
        game.turn_number += 1
        next_player = game.current_player
        game.event_log.log(EventType.TURN_STARTED, next_player.player_id, turn=game.turn_number)
        return CommandResult.ok(
            f"{next_player.name}'s turn",
            next_player_id=next_player.player_id,
            turn_number=game.turn_number,
        )

    def to_transport(self) -> EndTurnTransport:
        return EndTurnTransport(player_id=self.player_id)


class DeclareBankruptcyCommand(PlayerCommand):
    """
    Go bankrupt to a creditor (or the bank when ``creditor_id`` is None).

    Refused while the player could still raise ``debt`` by mortgaging and
    selling. Every property passes to the creditor unmortgaged and without
    buildings, the buildings go back to the bank, and the remaining cash
    goes to the creditor. Ends the game when one solvent player is left.
    """

    kind = "declare_bankruptcy"
    reversible = False

    def __init__(self, game: GameState, player_id: int, creditor_id: Optional[int] = None, debt: int = 0):
        super().__init__(game, player_id)
        self.creditor_id = self._require_player(creditor_id) if creditor_id is not None else None
        self.debt = debt

    def validate(self) -> RuleCheck:
        check = self._check_solvent()
        if not check:
            return check
        if self.creditor_id is not None and (
            self.creditor_id == self.player_id or self.game.get_player(self.creditor_id).is_bankrupt
        ):
            return RuleCheck.deny(FailureReason.PLAYER_BANKRUPT, f"Player {self.creditor_id} cannot be the creditor")
        if self.debt > 0 and not rules.is_bankrupt(self.game, self.player_id, self.debt):
            return RuleCheck.deny(
                FailureReason.CAN_STILL_PAY, f"{self.player.name} can still raise ${self.debt}"
            )
        return RuleCheck.ok()

    def _apply(self) -> CommandResult:
        game = self.game
        debtor = self.player
        settlement = rules.plan_bankruptcy(game, self.player_id, self.creditor_id)
        creditor = game.get_player(self.creditor_id) if self.creditor_id is not None else None

        for position in settlement.properties:
            record = game.ownership[position]
            if record.has_hotel:
                game.bank.hotels_available += 1
            game.bank.sell_houses(record.houses)
            record.houses = 0
            record.has_hotel = False
            record.is_mortgaged = False
            record.owner_id = self.creditor_id
            if creditor is not None:
                creditor.properties.add(position)
        debtor.properties.clear()

        transfer(game, self.player_id, self.creditor_id, settlement.cash, "bankruptcy")
        if creditor is not None:
            creditor.get_out_of_jail_cards += settlement.jail_cards
        else:
            for _ in range(settlement.jail_cards):
                return_jail_card(game)

        debtor.cash = 0
        debtor.get_out_of_jail_cards = 0
        debtor.in_jail = False
        debtor.jail_turns = 0
        debtor.is_bankrupt = True
        if game.pending_payment is not None and game.pending_payment.debtor_id == self.player_id:
            game.pending_payment = None
        game.event_log.log(
            EventType.PLAYER_BANKRUPT,
            self.player_id,
            creditor=self.creditor_id,
            cash=settlement.cash,
            properties=list(settlement.properties),
        )

        if len(game.active_players()) <= 1:
            game.finish()
        elif game.current_player.player_id == self.player_id:
            game.consecutive_doubles = 0
            game.extra_roll_pending = False
            game.last_dice_roll = None
            game.pending_property = None
            game.current_player_index = game.next_active_index(game.current_player_index)
            game.turn_number += 1
            game.event_log.log(EventType.TURN_STARTED, game.current_player.player_id, turn=game.turn_number)
        return CommandResult.ok(
            f"{debtor.name} is bankrupt",
            creditor_id=self.creditor_id,
            cash_transferred=settlement.cash,
            properties=list(settlement.properties),
            houses_returned=settlement.houses_returned,
            hotels_returned=settlement.hotels_returned,
            game_over=game.is_game_over,
            winner_id=game.winner_id,
        )

    def to_transport(self) -> DeclareBankruptcyTransport:
        return DeclareBankruptcyTransport(player_id=self.player_id, creditor_id=self.creditor_id, debt=self.debt)

    @classmethod
    def from_transport(cls, game: GameState, transport: DeclareBankruptcyTransport) -> "DeclareBankruptcyCommand":
        return cls(game, transport.player_id, transport.creditor_id, transport.debt)
