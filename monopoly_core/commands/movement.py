"""
Dice, movement and jail commands.
"""

from typing import Optional, Tuple

from monopoly_core import rules
from monopoly_core.commands.base import (
    Command,
    advance,
    apply_landing,
    pay_fee,
    release_from_jail,
    return_jail_card,
    send_to_jail,
)
from monopoly_core.commands.transport import (
    MoveTransport,
    PayJailFineTransport,
    RollDiceTransport,
    UseJailCardTransport,
)
from monopoly_core.exceptions import InvariantViolationError
from monopoly_core.game import GameState, PendingPayment
from monopoly_core.money import EventType
from monopoly_core.results import CommandResult, FailureReason, RuleCheck


class PlayerCommand(Command):
    """A command acting on behalf of one player."""

    def __init__(self, game: GameState, player_id: int):
        super().__init__(game)
        self.player_id = self._require_player(player_id)

    @property
    def player(self):
        return self.game.get_player(self.player_id)

    def _check_solvent(self) -> RuleCheck:
        if self.player.is_bankrupt:
            return RuleCheck.deny(FailureReason.PLAYER_BANKRUPT, f"{self.player.name} is bankrupt")
        return RuleCheck.ok()

    @classmethod
    def from_transport(cls, game: GameState, transport) -> "PlayerCommand":
        return cls(game, transport.player_id)


class MoveCommand(PlayerCommand):
    """Move forward a number of spaces, collecting the Go salary on a wrap."""

    kind = "move"

    def __init__(self, game: GameState, player_id: int, spaces: int):
        super().__init__(game, player_id)
        if spaces is None or spaces < 0:
            raise InvariantViolationError(f"Cannot move {spaces!r} spaces")
        self.spaces = spaces

    def validate(self) -> RuleCheck:
        return self._check_solvent()

    def _apply(self) -> CommandResult:
        player = self.player
        passed_go = advance(self.game, player, self.spaces, "move")
        return CommandResult.ok(
            f"{player.name} moved {self.spaces} to {self.game.board.get_space(player.position).name}",
            position=player.position,
            passed_go=passed_go,
            cash=player.cash,
        )

    def to_transport(self) -> MoveTransport:
        return MoveTransport(player_id=self.player_id, spaces=self.spaces)

    @classmethod
    def from_transport(cls, game: GameState, transport: MoveTransport) -> "MoveCommand":
        return cls(game, transport.player_id, transport.spaces)


class RollDiceCommand(PlayerCommand):
    """
    Roll and move.

    Outside jail: doubles are counted and owe another roll; the third
    consecutive doubles goes straight to jail without moving. In jail:
    doubles release and move (no extra roll, not counted); a miss uses up a
    jail turn, and the last allowed miss forces the card or the fine before
    moving. An unaffordable forced fine is left as the pending payment.

    The game's random source is always rolled, and the given dice, if any,
    replace the result. A recorded roll therefore advances the source just
    as the live roll did. Undo restores the source, so re-executing rolls
    the same dice.
    """

    kind = "roll_dice"

    def __init__(self, game: GameState, player_id: int, dice: Optional[Tuple[int, int]] = None):
        super().__init__(game, player_id)
        if dice is not None:
            dice = tuple(dice)
            if len(dice) != 2 or not all(1 <= d <= 6 for d in dice):
                raise InvariantViolationError(f"Invalid dice {dice!r}")
        self.requested_dice = dice
        self.dice: Optional[Tuple[int, int]] = dice

    def validate(self) -> RuleCheck:
        return self._check_solvent()

    def _apply(self) -> CommandResult:
        game = self.game
        player = self.player
        rolled = game.roll_dice()
        self.dice = self.requested_dice or rolled
        die1, die2 = self.dice
        doubles = die1 == die2
        game.last_dice_roll = self.dice
        game.event_log.log(EventType.DICE_ROLLED, self.player_id, dice=self.dice, doubles=doubles)

        if player.in_jail:
            return self._roll_in_jail(doubles)

        game.consecutive_doubles = game.consecutive_doubles + 1 if doubles else 0
        if game.consecutive_doubles >= 3:
            send_to_jail(game, player, "three_doubles")
            return self._result(doubles, moved=False, passed_go=False, jailed=True)

        game.extra_roll_pending = doubles
        passed_go = advance(game, player, die1 + die2, "roll")
        jailed = apply_landing(game, player)
        return self._result(doubles, moved=True, passed_go=passed_go, jailed=jailed)

    def _roll_in_jail(self, doubles: bool) -> CommandResult:
        game = self.game
        player = self.player
        game.extra_roll_pending = False
        if doubles:
            release_from_jail(game, player, "doubles")
            return self._move_out(doubles)

        player.jail_turns += 1
        game.event_log.log(EventType.JAIL_ESCAPE_FAILED, self.player_id, jail_turns=player.jail_turns)
        if player.jail_turns < game.config.max_jail_turns:
            return self._result(doubles, moved=False, passed_go=False, jailed=True)

        if player.get_out_of_jail_cards > 0:
            player.get_out_of_jail_cards -= 1
            return_jail_card(game)
            release_from_jail(game, player, "forced_card")
        elif player.can_afford(game.config.jail_fine):
            pay_fee(game, self.player_id, game.config.jail_fine, "jail_fine")
            release_from_jail(game, player, "forced_fine")
        else:
            game.pending_payment = PendingPayment(
                self.player_id, ((None, game.config.jail_fine),), "jail_fine", release_from_jail=True
            )
            return self._result(doubles, moved=False, passed_go=False, jailed=True, payment_due=True)
        return self._move_out(doubles)

    def _move_out(self, doubles: bool) -> CommandResult:
        passed_go = advance(self.game, self.player, sum(self.dice), "roll")
        jailed = apply_landing(self.game, self.player)
        return self._result(doubles, moved=True, passed_go=passed_go, jailed=jailed)

    def _result(self, doubles, moved, passed_go, jailed, payment_due=False) -> CommandResult:
        player = self.player
        return CommandResult.ok(
            f"{player.name} rolled {self.dice[0]}+{self.dice[1]}",
            dice=self.dice,
            total=sum(self.dice),
            doubles=doubles,
            moved=moved,
            position=player.position,
            passed_go=passed_go,
            jailed=jailed,
            extra_roll=self.game.extra_roll_pending,
            payment_due=payment_due,
            cash=player.cash,
        )

    def to_transport(self) -> RollDiceTransport:
        return RollDiceTransport(player_id=self.player_id, dice=self.dice)

    @classmethod
    def from_transport(cls, game: GameState, transport: RollDiceTransport) -> "RollDiceCommand":
        return cls(game, transport.player_id, transport.dice)


class PayJailFineCommand(PlayerCommand):
    """Pay the fine to leave jail before rolling."""

    kind = "pay_jail_fine"

    def validate(self) -> RuleCheck:
        return rules.can_pay_jail_fine(self.game, self.player_id)

    def _apply(self) -> CommandResult:
        fine = self.game.config.jail_fine
        pay_fee(self.game, self.player_id, fine, "jail_fine")
        release_from_jail(self.game, self.player, "fine")
        return CommandResult.ok(f"{self.player.name} paid ${fine} to leave jail", amount=fine, cash=self.player.cash)

    def to_transport(self) -> PayJailFineTransport:
        return PayJailFineTransport(player_id=self.player_id)


class UseJailCardCommand(PlayerCommand):
    kind = "use_jail_card"

    def validate(self) -> RuleCheck:
        return rules.can_use_jail_card(self.game, self.player_id)

    def _apply(self) -> CommandResult:
        self.player.get_out_of_jail_cards -= 1
        return_jail_card(self.game)
        release_from_jail(self.game, self.player, "card")
        return CommandResult.ok(
            f"{self.player.name} used a Get Out of Jail Free card",
            jail_cards=self.player.get_out_of_jail_cards,
        )

    def to_transport(self) -> UseJailCardTransport:
        return UseJailCardTransport(player_id=self.player_id)
