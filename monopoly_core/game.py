"""
Game state: the aggregate root every command and rule works against.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from monopoly_core.board import Board
from monopoly_core.cards import Deck, DeckType, create_chance_deck, create_community_chest_deck
from monopoly_core.config import GameConfig
from monopoly_core.exceptions import InvariantViolationError
from monopoly_core.money import Bank, EventLog, EventType
from monopoly_core.player import Player, PlayerState, PropertyOwnership


class TurnPhase(Enum):
    """Points where a turn waits for the next submitted command."""

    ROLL_DICE = "roll_dice"
    JAIL_DECISION = "jail_decision"
    PURCHASE_DECISION = "purchase_decision"
    AUCTION = "auction"
    PAY_RENT = "pay_rent"
    PAY_TAX = "pay_tax"
    DRAW_CARD = "draw_card"
    SETTLE_PAYMENT = "settle_payment"
    OPTIONAL_ACTIONS = "optional_actions"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class PendingPayment:
    """
    A debt that could not be paid when it arose.

    ``payees`` lists (player id or None for the bank, amount). A jail fine
    that was forced after the last failed escape sets ``release_from_jail``.
    """

    debtor_id: int
    payees: Tuple[Tuple[Optional[int], int], ...]
    reason: str
    release_from_jail: bool = False

    @property
    def amount(self) -> int:
        return sum(amount for _, amount in self.payees)

    @property
    def creditor_id(self) -> Optional[int]:
        """The single player owed, or None when the bank (or several players) is owed."""
        players = {payee for payee, _ in self.payees if payee is not None}
        if len(players) == 1 and all(payee is not None for payee, _ in self.payees):
            return players.pop()
        return None


class GameState:
    """Complete state of one game."""

    def __init__(self, config: GameConfig, players: Sequence[Player]):
        if len(players) < 2:
            raise InvariantViolationError("A game needs at least two players")
        ids = [p.player_id for p in players]
        if len(set(ids)) != len(ids):
            raise InvariantViolationError(f"Duplicate player ids: {ids}")

        self.config = config
        self.board = Board()
        self.rng = random.Random(config.seed)
        self.bank = Bank(config.house_limit, config.hotel_limit)
        self.event_log = EventLog()

        self.players: List[PlayerState] = [
            PlayerState(p.player_id, p.name, config.starting_cash) for p in players
        ]
        self._players_by_id: Dict[int, PlayerState] = {p.player_id: p for p in self.players}
        self.ownership: Dict[int, PropertyOwnership] = {
            position: PropertyOwnership() for position in self.board.buyable_positions()
        }
        self.decks: Dict[DeckType, Deck] = {
            DeckType.CHANCE: create_chance_deck(self.rng),
            DeckType.COMMUNITY_CHEST: create_community_chest_deck(self.rng),
        }

        self.current_player_index = 0
        self.turn_number = 0
        self.phase = TurnPhase.ROLL_DICE
        self.free_parking_pool = 0
        self.consecutive_doubles = 0
        self.last_dice_roll: Optional[Tuple[int, int]] = None
        self.extra_roll_pending = False
        self.pending_payment: Optional[PendingPayment] = None
        self.pending_property: Optional[int] = None
        self.game_over = False
        self.winner_id: Optional[int] = None

    # Players

    def has_player(self, player_id: int) -> bool:
        return player_id in self._players_by_id

    def get_player(self, player_id: int) -> PlayerState:
        try:
            return self._players_by_id[player_id]
        except KeyError:
            raise InvariantViolationError(f"Unknown player id {player_id}") from None

    @property
    def current_player(self) -> PlayerState:
        return self.players[self.current_player_index]

    def active_players(self) -> List[PlayerState]:
        """Non-bankrupt players in turn order."""
        return [p for p in self.players if p.is_active]

    def others(self, player_id: int) -> List[PlayerState]:
        """Every other non-bankrupt player, in turn order."""
        return [p for p in self.active_players() if p.player_id != player_id]

    def next_active_index(self, from_index: int) -> int:
        """Index of the next non-bankrupt player after ``from_index``, wrapping."""
        count = len(self.players)
        for offset in range(1, count + 1):
            index = (from_index + offset) % count
            if not self.players[index].is_bankrupt:
                return index
        return from_index

    # Properties

    def ownership_of(self, position: int) -> Optional[PropertyOwnership]:
        return self.ownership.get(position)

    def owner_of(self, position: int) -> Optional[int]:
        record = self.ownership.get(position)
        return record.owner_id if record else None

    def owned_count(self, owner_id: int, positions: Sequence[int]) -> int:
        return sum(1 for pos in positions if self.owner_of(pos) == owner_id)

    # Dice and state

    def roll_dice(self) -> Tuple[int, int]:
        return self.rng.randint(1, 6), self.rng.randint(1, 6)

    @property
    def is_game_over(self) -> bool:
        return self.game_over

    def finish(self) -> None:
        """Enter the terminal state; the last solvent player (if any) wins."""
        remaining = self.active_players()
        self.game_over = True
        self.phase = TurnPhase.GAME_OVER
        self.winner_id = remaining[0].player_id if len(remaining) == 1 else None
        self.event_log.log(EventType.GAME_OVER, self.winner_id, turn=self.turn_number)

    def __repr__(self) -> str:
        return (
            f"GameState(turn={self.turn_number}, phase={self.phase.value}, "
            f"current=P{self.current_player.player_id})"
        )


def create_game(config: GameConfig, players: Sequence[Player]) -> GameState:
    """Create a new game ready for the first player's roll."""
    game = GameState(config, players)
    game.event_log.log(
        EventType.GAME_STARTED,
        players=[p.player_id for p in game.players],
        starting_cash=config.starting_cash,
    )
    game.event_log.log(EventType.TURN_STARTED, game.current_player.player_id, turn=game.turn_number)
    return game
