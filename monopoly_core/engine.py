"""
Turn-phase state machine.

The engine is the single entry point for an outside driver: it checks that
an intent is legal for the current phase and player, runs the matching
command, records it, and moves the game to its next phase. Landing, moving
and jail entry happen synchronously inside one submission; the game only
ever waits in the phases of ``TurnPhase``.
"""

import logging
import threading
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from monopoly_core import rules
from monopoly_core.cards import DeckType
from monopoly_core.commands import COMMAND_TYPES, Command
from monopoly_core.commands.transport import TransportModel, parse_transport
from monopoly_core.config import GameConfig
from monopoly_core.exceptions import InvalidActionError, ReplayError
from monopoly_core.game import GameState, TurnPhase, create_game
from monopoly_core.history import CommandHistory
from monopoly_core.money import EventHandler
from monopoly_core.player import Player, PlayerState
from monopoly_core.results import CommandResult, FailureReason
from monopoly_core.snapshot import (
    GameSnapshot,
    PlayerFinancialSummary,
    SpaceView,
    financial_summary,
    snapshot_game,
    space_views,
)
from monopoly_core.spaces import SpaceType


logger = logging.getLogger(__name__)

Intent = Union[TransportModel, Mapping[str, Any]]

OPTIONAL_ACTIONS: FrozenSet[str] = frozenset(
    {"buy_house_or_hotel", "sell_building", "mortgage", "unmortgage", "trade"}
)

ALLOWED_COMMANDS: Dict[TurnPhase, FrozenSet[str]] = {
    TurnPhase.ROLL_DICE: OPTIONAL_ACTIONS | {"roll_dice"},
    TurnPhase.JAIL_DECISION: OPTIONAL_ACTIONS | {"roll_dice", "pay_jail_fine", "use_jail_card"},
    TurnPhase.PURCHASE_DECISION: OPTIONAL_ACTIONS | {"buy_property", "decline_purchase"},
    TurnPhase.AUCTION: frozenset({"auction"}),
    TurnPhase.PAY_RENT: OPTIONAL_ACTIONS | {"pay_rent", "declare_bankruptcy"},
    TurnPhase.PAY_TAX: OPTIONAL_ACTIONS | {"pay_tax", "declare_bankruptcy"},
    TurnPhase.DRAW_CARD: frozenset({"draw_card"}),
    TurnPhase.SETTLE_PAYMENT: OPTIONAL_ACTIONS | {"settle_payment", "declare_bankruptcy"},
    TurnPhase.OPTIONAL_ACTIONS: OPTIONAL_ACTIONS | {"end_turn"},
    TurnPhase.GAME_OVER: frozenset(),
}

CARD_DECKS = {
    SpaceType.CHANCE: DeckType.CHANCE,
    SpaceType.COMMUNITY_CHEST: DeckType.COMMUNITY_CHEST,
}


class GameEngine:
    """Sequences commands into legal turns for one game."""

    def __init__(self, game: GameState, history: Optional[CommandHistory] = None):
        self.game = game
        self.history = history if history is not None else CommandHistory()
        self._lock = threading.RLock()

    @classmethod
    def new_game(cls, config: GameConfig, players: Sequence[Player]) -> "GameEngine":
        return cls(create_game(config, players))

    # Queries

    @property
    def phase(self) -> TurnPhase:
        return self.game.phase

    @property
    def current_player(self) -> PlayerState:
        return self.game.current_player

    def legal_commands(self) -> List[str]:
        """Command kinds the current player may submit now."""
        with self._lock:
            return sorted(ALLOWED_COMMANDS[self.game.phase])

    def board_snapshot(self) -> List[SpaceView]:
        with self._lock:
            return space_views(self.game)

    def financial_summary(self, player_id: int) -> PlayerFinancialSummary:
        with self._lock:
            return financial_summary(self.game, player_id)

    def snapshot(self) -> GameSnapshot:
        with self._lock:
            return snapshot_game(self.game)

    def subscribe(self, handler: EventHandler) -> None:
        self.game.event_log.subscribe(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        self.game.event_log.unsubscribe(handler)

    def amount_owed(self) -> Tuple[Optional[int], int]:
        """Creditor (None = bank) and amount of the obligation the current phase is waiting on."""
        with self._lock:
            return self._amount_owed()

    def _amount_owed(self) -> Tuple[Optional[int], int]:
        game = self.game
        player = game.current_player
        if game.phase == TurnPhase.PAY_RENT:
            return game.owner_of(player.position), rules.calculate_rent(game, player.position, self._rolled_total())
        if game.phase == TurnPhase.PAY_TAX:
            return None, game.board.get_space(player.position).amount
        if game.phase == TurnPhase.SETTLE_PAYMENT and game.pending_payment is not None:
            return game.pending_payment.creditor_id, game.pending_payment.amount
        return None, 0

    # Submission

    def submit(self, intent: Intent) -> CommandResult:
        """
        Run one intent (a transport model or its dict form) for the acting
        player. Illegal intents come back as failed results.
        """
        with self._lock:
            try:
                transport = parse_transport(intent)
            except ValidationError as e:
                raise InvalidActionError(f"Malformed intent: {e}") from e

            rejection = self._check_legal(transport)
            if rejection is not None:
                logger.warning(f"Rejected {transport.command}: {rejection.message}")
                return rejection

            if transport.command == "declare_bankruptcy":
                creditor_id, debt = self._amount_owed()
                transport = transport.model_copy(update={"creditor_id": creditor_id, "debt": debt})
            elif transport.command == "pay_rent":
                transport = transport.model_copy(update={"dice_total": self._rolled_total()})

            command = COMMAND_TYPES[transport.command].from_transport(self.game, transport)
            result = command.execute()
            if not result.success:
                logger.warning(f"{command.kind} failed: {result.reason.value} ({result.message})")
                return result

            self.history.push(command)
            self._advance(command, result)
            logger.info(f"{command.kind} done, phase is now {self.game.phase.value}")
            return result

    def undo(self) -> CommandResult:
        """Undo the last command, restoring the phase it was submitted in."""
        with self._lock:
            return self.history.undo()

    def redo(self) -> CommandResult:
        with self._lock:
            result = self.history.redo()
            if result.success:
                self._advance(self.history.last, result)
            return result

    def replay(self, intents: Iterable[Intent]) -> List[CommandResult]:
        """Submit a persisted sequence in order; raises ReplayError on the first failure."""
        results = []
        for index, intent in enumerate(intents):
            result = self.submit(intent)
            if not result.success:
                raise ReplayError(index, result.message)
            results.append(result)
        return results

    # Legality

    def _check_legal(self, transport: TransportModel) -> Optional[CommandResult]:
        game = self.game
        kind = transport.command
        if game.is_game_over:
            return CommandResult.fail(FailureReason.GAME_OVER, "The game is over")
        if kind not in ALLOWED_COMMANDS[game.phase]:
            return CommandResult.fail(FailureReason.WRONG_PHASE, f"{kind} is not allowed during {game.phase.value}")

        current_id = game.current_player.player_id
        if kind == "trade":
            if current_id not in (transport.proposer_id, transport.recipient_id):
                return CommandResult.fail(FailureReason.NOT_YOUR_TURN, "Trades must involve the current player")
        elif kind != "auction" and transport.player_id != current_id:
            return CommandResult.fail(FailureReason.NOT_YOUR_TURN, f"It is player {current_id}'s turn")

        position = game.current_player.position
        if kind in ("buy_property", "decline_purchase", "auction") and transport.position != game.pending_property:
            return CommandResult.fail(FailureReason.NOT_ON_SPACE, f"Position {transport.position} is not for sale now")
        if kind in ("pay_rent", "pay_tax") and transport.position not in (None, position):
            return CommandResult.fail(FailureReason.NOT_ON_SPACE, f"Player is on {position}")
        if kind == "pay_rent" and transport.dice_total not in (None, self._rolled_total()):
            return CommandResult.fail(
                FailureReason.INVALID_AMOUNT, f"Rent is based on the roll of {self._rolled_total()}"
            )
        if kind == "draw_card":
            expected = CARD_DECKS.get(game.board.get_space(position).space_type)
            if transport.deck != expected:
                return CommandResult.fail(FailureReason.NOT_ON_SPACE, f"Draw from the {expected.value} deck")
        return None

    def _rolled_total(self) -> int:
        last = self.game.last_dice_roll
        return sum(last) if last else 0

    # Transitions

    def _advance(self, command: Command, result: CommandResult) -> None:
        game = self.game
        outcome = result.outcome
        kind = command.kind

        if game.is_game_over:
            game.phase = TurnPhase.GAME_OVER
        elif kind in OPTIONAL_ACTIONS:
            pass
        elif kind in ("end_turn", "declare_bankruptcy"):
            game.phase = self._start_phase()
        elif kind in ("pay_jail_fine", "use_jail_card"):
            game.phase = TurnPhase.ROLL_DICE
        elif kind == "decline_purchase" and game.config.auction_on_decline:
            game.phase = TurnPhase.AUCTION
        elif kind in ("buy_property", "decline_purchase", "auction"):
            game.pending_property = None
            self._finish_landing()
        elif kind in ("pay_rent", "pay_tax"):
            self._finish_landing()
        elif kind in ("roll_dice", "draw_card", "settle_payment"):
            if outcome.get("payment_due"):
                game.phase = TurnPhase.SETTLE_PAYMENT
            elif outcome.get("jailed"):
                game.phase = TurnPhase.OPTIONAL_ACTIONS
            elif outcome.get("moved"):
                self._resolve_landing()
            else:
                self._finish_landing()

    def _start_phase(self) -> TurnPhase:
        return TurnPhase.JAIL_DECISION if self.game.current_player.in_jail else TurnPhase.ROLL_DICE

    def _resolve_landing(self) -> None:
        """Pick the decision the current space asks for, or finish the landing."""
        game = self.game
        player = game.current_player
        space = game.board.get_space(player.position)
        if player.in_jail:
            # failed escape roll: the player stays put
            game.phase = TurnPhase.OPTIONAL_ACTIONS
        elif space.is_buyable:
            owner_id = game.owner_of(space.position)
            dice_total = self._rolled_total()
            if owner_id is None:
                game.pending_property = space.position
                game.phase = TurnPhase.PURCHASE_DECISION
            elif owner_id != player.player_id and rules.calculate_rent(game, space.position, dice_total) > 0:
                game.phase = TurnPhase.PAY_RENT
            else:
                self._finish_landing()
        elif space.space_type == SpaceType.TAX:
            game.phase = TurnPhase.PAY_TAX
        elif space.space_type in CARD_DECKS:
            game.phase = TurnPhase.DRAW_CARD
        else:
            self._finish_landing()

    def _finish_landing(self) -> None:
        """Obligations settled: roll again after counted doubles, otherwise optional actions."""
        game = self.game
        if game.extra_roll_pending and not game.current_player.in_jail:
            game.phase = TurnPhase.ROLL_DICE
        else:
            game.phase = TurnPhase.OPTIONAL_ACTIONS
