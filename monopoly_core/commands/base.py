"""
Command base class, undo snapshots and the mutation helpers commands share.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, FrozenSet, Optional, Tuple

from pydantic import BaseModel

from monopoly_core import rules
from monopoly_core.cards import DeckType
from monopoly_core.config import BOARD_SIZE, JAIL_POSITION
from monopoly_core.exceptions import CommandStateError, InvariantViolationError
from monopoly_core.game import GameState, PendingPayment, TurnPhase
from monopoly_core.money import EventType
from monopoly_core.player import PlayerState
from monopoly_core.results import CommandResult, RuleCheck
from monopoly_core.spaces import SpaceType


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerSnapshot:
    player_id: int
    cash: int
    position: int
    in_jail: bool
    jail_turns: int
    jail_cards: int
    properties: FrozenSet[int]
    is_bankrupt: bool

    @classmethod
    def capture(cls, player: PlayerState) -> "PlayerSnapshot":
        return cls(
            player.player_id,
            player.cash,
            player.position,
            player.in_jail,
            player.jail_turns,
            player.get_out_of_jail_cards,
            frozenset(player.properties),
            player.is_bankrupt,
        )

    def restore(self, player: PlayerState) -> None:
        player.cash = self.cash
        player.position = self.position
        player.in_jail = self.in_jail
        player.jail_turns = self.jail_turns
        player.get_out_of_jail_cards = self.jail_cards
        player.properties = set(self.properties)
        player.is_bankrupt = self.is_bankrupt


@dataclass(frozen=True)
class OwnershipSnapshot:
    position: int
    owner_id: Optional[int]
    houses: int
    has_hotel: bool
    is_mortgaged: bool


@dataclass(frozen=True)
class StateSnapshot:
    """
    Everything a command may change, captured just before it changes it.

    Restoring also drops the events logged since the capture.
    """

    players: Tuple[PlayerSnapshot, ...]
    ownership: Tuple[OwnershipSnapshot, ...]
    houses_available: int
    hotels_available: int
    decks: Tuple[Tuple[DeckType, Tuple[str, ...], Tuple[str, ...]], ...]
    rng_state: Any
    free_parking_pool: int
    current_player_index: int
    turn_number: int
    phase: TurnPhase
    consecutive_doubles: int
    last_dice_roll: Optional[Tuple[int, int]]
    extra_roll_pending: bool
    pending_payment: Optional[PendingPayment]
    pending_property: Optional[int]
    game_over: bool
    winner_id: Optional[int]
    event_count: int

    @classmethod
    def capture(cls, game: GameState) -> "StateSnapshot":
        return cls(
            players=tuple(PlayerSnapshot.capture(p) for p in game.players),
            ownership=tuple(
                OwnershipSnapshot(pos, r.owner_id, r.houses, r.has_hotel, r.is_mortgaged)
                for pos, r in game.ownership.items()
            ),
            houses_available=game.bank.houses_available,
            hotels_available=game.bank.hotels_available,
            decks=tuple((deck_type, *deck.state()) for deck_type, deck in game.decks.items()),
            rng_state=game.rng.getstate(),
            free_parking_pool=game.free_parking_pool,
            current_player_index=game.current_player_index,
            turn_number=game.turn_number,
            phase=game.phase,
            consecutive_doubles=game.consecutive_doubles,
            last_dice_roll=game.last_dice_roll,
            extra_roll_pending=game.extra_roll_pending,
            pending_payment=game.pending_payment,
            pending_property=game.pending_property,
            game_over=game.game_over,
            winner_id=game.winner_id,
            event_count=len(game.event_log),
        )

    def restore(self, game: GameState) -> None:
        for snapshot in self.players:
            snapshot.restore(game.get_player(snapshot.player_id))
        for snapshot in self.ownership:
            record = game.ownership[snapshot.position]
            record.owner_id = snapshot.owner_id
            record.houses = snapshot.houses
            record.has_hotel = snapshot.has_hotel
            record.is_mortgaged = snapshot.is_mortgaged
        game.bank.houses_available = self.houses_available
        game.bank.hotels_available = self.hotels_available
        for deck_type, draw_ids, held_ids in self.decks:
            game.decks[deck_type].restore(draw_ids, held_ids)
        game.rng.setstate(self.rng_state)
        game.free_parking_pool = self.free_parking_pool
        game.current_player_index = self.current_player_index
        game.turn_number = self.turn_number
        game.phase = self.phase
        game.consecutive_doubles = self.consecutive_doubles
        game.last_dice_roll = self.last_dice_roll
        game.extra_roll_pending = self.extra_roll_pending
        game.pending_payment = self.pending_payment
        game.pending_property = self.pending_property
        game.game_over = self.game_over
        game.winner_id = self.winner_id
        game.event_log.truncate(self.event_count)


class Command(ABC):
    """
    One state change: validated by the rules engine, applied, reversible.

    Subclasses implement ``validate`` (a RuleCheck, no mutation), ``_apply``
    (mutation, returns the success result) and ``to_transport``.
    """

    kind: ClassVar[str] = ""
    reversible: ClassVar[bool] = True

    def __init__(self, game: GameState):
        if game is None:
            raise InvariantViolationError(f"{type(self).__name__} needs a game")
        self.game = game
        self._snapshot: Optional[StateSnapshot] = None
        self.result: Optional[CommandResult] = None

    @property
    def executed(self) -> bool:
        return self._snapshot is not None

    def execute(self) -> CommandResult:
        if self.executed:
            raise CommandStateError(f"{self.kind} has already been executed")
        check = self.validate()
        if not check:
            logger.debug(f"{self.kind} rejected: {check.reason.value} ({check.message})")
            return CommandResult.from_check(check)
        self._snapshot = StateSnapshot.capture(self.game)
        self.result = self._apply()
        logger.info(f"{self.kind} executed: {self.result.outcome}")
        return self.result

    def undo(self) -> None:
        if not self.reversible:
            raise CommandStateError(f"{self.kind} cannot be undone")
        if not self.executed:
            raise CommandStateError(f"{self.kind} has not been executed")
        self._snapshot.restore(self.game)
        self._snapshot = None
        logger.info(f"{self.kind} undone")

    @abstractmethod
    def validate(self) -> RuleCheck:
        """Rule check run before any mutation."""

    @abstractmethod
    def _apply(self) -> CommandResult:
        """Mutate the game; only called after a passing ``validate``."""

    @abstractmethod
    def to_transport(self) -> BaseModel:
        """Structured form sufficient to rebuild this command."""

    # Construction helpers

    def _require_player(self, player_id: int) -> int:
        if player_id is None or not self.game.has_player(player_id):
            raise InvariantViolationError(f"{type(self).__name__}: unknown player {player_id!r}")
        return player_id

    @staticmethod
    def _require_position(position: int) -> int:
        if position is None or not 0 <= position < BOARD_SIZE:
            raise InvariantViolationError(f"Position {position!r} is off the board")
        return position

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_transport()!r})"


# Mutation helpers used by the commands


def transfer(game: GameState, payer_id: Optional[int], payee_id: Optional[int], amount: int, reason: str) -> None:
    """Move cash between two players or a player and the bank (None)."""
    if amount <= 0:
        return
    if payer_id is not None:
        game.get_player(payer_id).cash -= amount
    if payee_id is not None:
        game.get_player(payee_id).cash += amount
    game.event_log.log(
        EventType.MONEY_TRANSFERRED,
        payer_id if payer_id is not None else payee_id,
        payer=payer_id,
        payee=payee_id,
        amount=amount,
        reason=reason,
    )


def pay_fee(game: GameState, payer_id: int, amount: int, reason: str) -> None:
    """A tax, fine or card fee: goes to the bank, or onto Free Parking under that house rule."""
    transfer(game, payer_id, None, amount, reason)
    if game.config.free_parking_pool:
        game.free_parking_pool += amount


def place(game: GameState, player: PlayerState, destination: int, reason: str) -> None:
    old = player.position
    player.position = destination
    game.event_log.log(EventType.PLAYER_MOVED, player.player_id, **{"from": old, "to": destination, "reason": reason})


def advance(game: GameState, player: PlayerState, spaces: int, reason: str) -> bool:
    """Move forward, paying the Go salary on a wrap. Returns whether Go was passed."""
    destination, passed_go = rules.move_destination(player.position, spaces)
    place(game, player, destination, reason)
    if passed_go:
        transfer(game, None, player.player_id, game.config.go_salary, "passed_go")
    return passed_go


def send_to_jail(game: GameState, player: PlayerState, reason: str) -> None:
    """Jail without passing Go; ends any run of doubles."""
    player.position = JAIL_POSITION
    player.in_jail = True
    player.jail_turns = 0
    game.consecutive_doubles = 0
    game.extra_roll_pending = False
    game.event_log.log(EventType.PLAYER_JAILED, player.player_id, reason=reason)


def release_from_jail(game: GameState, player: PlayerState, method: str) -> None:
    player.in_jail = False
    player.jail_turns = 0
    game.event_log.log(EventType.PLAYER_RELEASED_FROM_JAIL, player.player_id, method=method)


def return_jail_card(game: GameState) -> None:
    """Put one held Get Out of Jail Free card back under its deck."""
    for deck_type in (DeckType.CHANCE, DeckType.COMMUNITY_CHEST):
        if game.decks[deck_type].return_held_card() is not None:
            return


def apply_landing(game: GameState, player: PlayerState) -> bool:
    """
    Landing effects that need no decision: Go To Jail, and collecting the
    Free Parking pool. Returns True if the player was jailed.
    """
    space = game.board.get_space(player.position)
    if space.space_type == SpaceType.GO_TO_JAIL:
        send_to_jail(game, player, "go_to_jail_space")
        return True
    if space.space_type == SpaceType.FREE_PARKING and game.config.free_parking_pool and game.free_parking_pool:
        transfer(game, None, player.player_id, game.free_parking_pool, "free_parking")
        game.free_parking_pool = 0
    return False
