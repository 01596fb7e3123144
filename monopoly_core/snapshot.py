"""
Full-state snapshot/restore and read-only views of a game.

The models are plain pydantic records; turning them into files or wire
messages is up to the caller (``model_dump`` / ``model_validate``).
"""

from dataclasses import asdict
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from monopoly_core import rules
from monopoly_core.cards import DeckType
from monopoly_core.config import GameConfig
from monopoly_core.game import GameState, PendingPayment, TurnPhase
from monopoly_core.player import Player


class SpaceView(BaseModel):
    position: int
    name: str
    space_type: str
    price: Optional[int] = None
    color_group: Optional[str] = None
    owner_id: Optional[int] = None
    houses: int = 0
    has_hotel: bool = False
    is_mortgaged: bool = False


class PlayerFinancialSummary(BaseModel):
    player_id: int
    name: str
    cash: int
    properties: List[int] = Field(default_factory=list)
    mortgaged: List[int] = Field(default_factory=list)
    houses: int = 0
    hotels: int = 0
    jail_cards: int = 0
    liquidation_value: int = 0
    in_jail: bool = False
    is_bankrupt: bool = False


class PlayerRecord(BaseModel):
    player_id: int
    name: str
    cash: int
    position: int
    in_jail: bool
    jail_turns: int
    jail_cards: int
    properties: List[int]
    is_bankrupt: bool


class OwnershipRecord(BaseModel):
    position: int
    owner_id: Optional[int] = None
    houses: int = 0
    has_hotel: bool = False
    is_mortgaged: bool = False


class DeckRecord(BaseModel):
    draw_pile: List[str]
    held: List[str] = Field(default_factory=list)


class PendingPaymentRecord(BaseModel):
    debtor_id: int
    payees: List[Tuple[Optional[int], int]]
    reason: str
    release_from_jail: bool = False


class RngRecord(BaseModel):
    version: int
    state: List[int]
    gauss_next: Optional[float] = None


class GameSnapshot(BaseModel):
    """Everything needed to rebuild a GameState exactly."""

    config: Dict[str, Any]
    players: List[PlayerRecord]
    ownership: List[OwnershipRecord]
    houses_available: int
    hotels_available: int
    decks: Dict[DeckType, DeckRecord]
    rng: RngRecord
    free_parking_pool: int = 0
    current_player_index: int = 0
    turn_number: int = 0
    phase: TurnPhase = TurnPhase.ROLL_DICE
    consecutive_doubles: int = 0
    last_dice_roll: Optional[Tuple[int, int]] = None
    extra_roll_pending: bool = False
    pending_payment: Optional[PendingPaymentRecord] = None
    pending_property: Optional[int] = None
    game_over: bool = False
    winner_id: Optional[int] = None


def space_views(game: GameState) -> List[SpaceView]:
    """Board snapshot: every space with its current ownership state."""
    views = []
    for space in game.board.spaces:
        record = game.ownership_of(space.position)
        view = SpaceView(
            position=space.position,
            name=space.name,
            space_type=space.space_type.value,
            price=getattr(space, "price", None),
            color_group=getattr(space, "color_group", None),
        )
        if record is not None:
            view.owner_id = record.owner_id
            view.houses = record.houses
            view.has_hotel = record.has_hotel
            view.is_mortgaged = record.is_mortgaged
        views.append(view)
    return views


def financial_summary(game: GameState, player_id: int) -> PlayerFinancialSummary:
    player = game.get_player(player_id)
    houses, hotels = rules.houses_and_hotels(game, player_id)
    return PlayerFinancialSummary(
        player_id=player.player_id,
        name=player.name,
        cash=player.cash,
        properties=sorted(player.properties),
        mortgaged=sorted(pos for pos in player.properties if game.ownership[pos].is_mortgaged),
        houses=houses,
        hotels=hotels,
        jail_cards=player.get_out_of_jail_cards,
        liquidation_value=rules.liquidation_value(game, player_id),
        in_jail=player.in_jail,
        is_bankrupt=player.is_bankrupt,
    )


def snapshot_game(game: GameState) -> GameSnapshot:
    version, state, gauss_next = game.rng.getstate()
    pending = game.pending_payment
    return GameSnapshot(
        config=asdict(game.config),
        players=[
            PlayerRecord(
                player_id=p.player_id,
                name=p.name,
                cash=p.cash,
                position=p.position,
                in_jail=p.in_jail,
                jail_turns=p.jail_turns,
                jail_cards=p.get_out_of_jail_cards,
                properties=sorted(p.properties),
                is_bankrupt=p.is_bankrupt,
            )
            for p in game.players
        ],
        ownership=[
            OwnershipRecord(
                position=pos,
                owner_id=r.owner_id,
                houses=r.houses,
                has_hotel=r.has_hotel,
                is_mortgaged=r.is_mortgaged,
            )
            for pos, r in sorted(game.ownership.items())
        ],
        houses_available=game.bank.houses_available,
        hotels_available=game.bank.hotels_available,
        decks={
            deck_type: DeckRecord(draw_pile=list(draw), held=list(held))
            for deck_type, (draw, held) in ((t, d.state()) for t, d in game.decks.items())
        },
        rng=RngRecord(version=version, state=list(state), gauss_next=gauss_next),
        free_parking_pool=game.free_parking_pool,
        current_player_index=game.current_player_index,
        turn_number=game.turn_number,
        phase=game.phase,
        consecutive_doubles=game.consecutive_doubles,
        last_dice_roll=game.last_dice_roll,
        extra_roll_pending=game.extra_roll_pending,
        pending_payment=(
            PendingPaymentRecord(
                debtor_id=pending.debtor_id,
                payees=list(pending.payees),
                reason=pending.reason,
                release_from_jail=pending.release_from_jail,
            )
            if pending
            else None
        ),
        pending_property=game.pending_property,
        game_over=game.game_over,
        winner_id=game.winner_id,
    )


def restore_game(snapshot: GameSnapshot) -> GameState:
    """Build a GameState identical to the one the snapshot was taken from."""
    config = GameConfig(**snapshot.config)
    game = GameState(config, [Player(p.player_id, p.name) for p in snapshot.players])

    for record in snapshot.players:
        player = game.get_player(record.player_id)
        player.cash = record.cash
        player.position = record.position
        player.in_jail = record.in_jail
        player.jail_turns = record.jail_turns
        player.get_out_of_jail_cards = record.jail_cards
        player.properties = set(record.properties)
        player.is_bankrupt = record.is_bankrupt
    for record in snapshot.ownership:
        ownership = game.ownership[record.position]
        ownership.owner_id = record.owner_id
        ownership.houses = record.houses
        ownership.has_hotel = record.has_hotel
        ownership.is_mortgaged = record.is_mortgaged

    game.bank.houses_available = snapshot.houses_available
    game.bank.hotels_available = snapshot.hotels_available
    for deck_type, record in snapshot.decks.items():
        game.decks[deck_type].restore(record.draw_pile, record.held)
    game.rng.setstate((snapshot.rng.version, tuple(snapshot.rng.state), snapshot.rng.gauss_next))

    game.free_parking_pool = snapshot.free_parking_pool
    game.current_player_index = snapshot.current_player_index
    game.turn_number = snapshot.turn_number
    game.phase = snapshot.phase
    game.consecutive_doubles = snapshot.consecutive_doubles
    game.last_dice_roll = tuple(snapshot.last_dice_roll) if snapshot.last_dice_roll else None
    game.extra_roll_pending = snapshot.extra_roll_pending
    if snapshot.pending_payment is not None:
        pending = snapshot.pending_payment
        game.pending_payment = PendingPayment(
            pending.debtor_id,
            tuple(tuple(payee) for payee in pending.payees),
            pending.reason,
            pending.release_from_jail,
        )
    game.pending_property = snapshot.pending_property
    game.game_over = snapshot.game_over
    game.winner_id = snapshot.winner_id
    return game
