"""
Rent, tax and outstanding payments.
"""

from typing import Optional

from monopoly_core import rules
from monopoly_core.commands.base import advance, apply_landing, pay_fee, release_from_jail, transfer
from monopoly_core.commands.movement import PlayerCommand
from monopoly_core.commands.transport import PayRentTransport, PayTaxTransport, SettlePaymentTransport
from monopoly_core.game import GameState
from monopoly_core.results import CommandResult, FailureReason, RuleCheck
from monopoly_core.spaces import SpaceType, TaxSpace


class PayRentCommand(PlayerCommand):
    """
    Pay the rent due on a space.

    Rent on an unowned, mortgaged or own space is zero, which succeeds with
    amount 0. ``dice_total`` defaults to the last roll and only matters for
    utilities.
    """

    kind = "pay_rent"

    def __init__(
        self,
        game: GameState,
        player_id: int,
        position: Optional[int] = None,
        dice_total: Optional[int] = None,
    ):
        super().__init__(game, player_id)
        if position is None:
            position = self.player.position
        self.position = self._require_position(position)
        if dice_total is None:
            dice_total = sum(game.last_dice_roll) if game.last_dice_roll else 0
        self.dice_total = dice_total

    def _amount(self) -> int:
        owner_id = self.game.owner_of(self.position)
        if owner_id is None or owner_id == self.player_id:
            return 0
        return rules.calculate_rent(self.game, self.position, self.dice_total)

    def validate(self) -> RuleCheck:
        check = self._check_solvent()
        if not check:
            return check
        rent = self._amount()
        if not self.player.can_afford(rent):
            return RuleCheck.deny(
                FailureReason.INSUFFICIENT_FUNDS, f"{self.player.name} owes ${rent} but has ${self.player.cash}"
            )
        return RuleCheck.ok()

    def _apply(self) -> CommandResult:
        rent = self._amount()
        owner_id = self.game.owner_of(self.position) if rent else None
        transfer(self.game, self.player_id, owner_id, rent, f"rent:{self.position}")
        return CommandResult.ok(
            f"{self.player.name} paid ${rent} rent",
            position=self.position,
            amount=rent,
            owner_id=owner_id,
            cash=self.player.cash,
        )

    def to_transport(self) -> PayRentTransport:
        return PayRentTransport(player_id=self.player_id, position=self.position, dice_total=self.dice_total)

    @classmethod
    def from_transport(cls, game: GameState, transport: PayRentTransport) -> "PayRentCommand":
        return cls(game, transport.player_id, transport.position, transport.dice_total)


class PayTaxCommand(PlayerCommand):
    kind = "pay_tax"

    def __init__(self, game: GameState, player_id: int, position: Optional[int] = None):
        super().__init__(game, player_id)
        if position is None:
            position = self.player.position
        self.position = self._require_position(position)

    def validate(self) -> RuleCheck:
        check = self._check_solvent()
        if not check:
            return check
        space = self.game.board.get_space(self.position)
        if space.space_type != SpaceType.TAX:
            return RuleCheck.deny(FailureReason.NOTHING_OWED, f"{space.name} is not a tax space")
        if not self.player.can_afford(space.amount):
            return RuleCheck.deny(FailureReason.INSUFFICIENT_FUNDS, f"{space.name} costs ${space.amount}")
        return RuleCheck.ok()

    def _apply(self) -> CommandResult:
        space: TaxSpace = self.game.board.get_space(self.position)
        pay_fee(self.game, self.player_id, space.amount, f"tax:{self.position}")
        return CommandResult.ok(
            f"{self.player.name} paid ${space.amount} {space.name}",
            position=self.position,
            amount=space.amount,
            cash=self.player.cash,
        )

    def to_transport(self) -> PayTaxTransport:
        return PayTaxTransport(player_id=self.player_id, position=self.position)

    @classmethod
    def from_transport(cls, game: GameState, transport: PayTaxTransport) -> "PayTaxCommand":
        return cls(game, transport.player_id, transport.position)


class SettlePaymentCommand(PlayerCommand):
    """
    Pay off the pending payment in full, once the player has raised the cash.
    A settled forced jail fine releases the player and moves them by their roll.
    """

    kind = "settle_payment"

    def validate(self) -> RuleCheck:
        pending = self.game.pending_payment
        if pending is None or pending.debtor_id != self.player_id:
            return RuleCheck.deny(FailureReason.NOTHING_OWED, f"{self.player.name} owes nothing")
        if not self.player.can_afford(pending.amount):
            return RuleCheck.deny(
                FailureReason.INSUFFICIENT_FUNDS, f"{self.player.name} owes ${pending.amount}"
            )
        return RuleCheck.ok()

    def _apply(self) -> CommandResult:
        game = self.game
        pending = game.pending_payment
        for payee_id, amount in pending.payees:
            if payee_id is None:
                pay_fee(game, self.player_id, amount, pending.reason)
            else:
                transfer(game, self.player_id, payee_id, amount, pending.reason)
        game.pending_payment = None

        moved = passed_go = jailed = False
        if pending.release_from_jail:
            release_from_jail(game, self.player, "forced_fine")
            passed_go = advance(game, self.player, sum(game.last_dice_roll), "roll")
            jailed = apply_landing(game, self.player)
            moved = True
        return CommandResult.ok(
            f"{self.player.name} paid ${pending.amount}",
            amount=pending.amount,
            moved=moved,
            passed_go=passed_go,
            jailed=jailed,
            position=self.player.position,
            cash=self.player.cash,
        )

    def to_transport(self) -> SettlePaymentTransport:
        return SettlePaymentTransport(player_id=self.player_id)
