"""
Monopoly rules core.

A rules engine, reversible commands, a turn-phase state machine and a
command history for a Monopoly-style game. Drivers (UI, CLI, persistence,
bots) submit intents to a GameEngine and observe results and events.
"""

from monopoly_core.auction import Auction
from monopoly_core.board import Board
from monopoly_core.cards import Card, CardAction, Deck, DeckType
from monopoly_core.commands import Command, command_from_transport
from monopoly_core.config import GameConfig, HouseRuleSettings, get_house_rules
from monopoly_core.engine import GameEngine
from monopoly_core.exceptions import (
    CommandStateError,
    InvalidActionError,
    InvariantViolationError,
    MonopolyError,
    ReplayError,
)
from monopoly_core.game import GameState, PendingPayment, TurnPhase, create_game
from monopoly_core.history import CommandHistory
from monopoly_core.money import EventType, GameEvent
from monopoly_core.player import Player, PlayerState, PropertyOwnership
from monopoly_core.results import CommandResult, FailureReason, RuleCheck
from monopoly_core.snapshot import GameSnapshot, restore_game, snapshot_game
from monopoly_core.spaces import Space, SpaceType
from monopoly_core.trade import Trade, TradeOffer

__all__ = [
    "Auction",
    "Board",
    "Card",
    "CardAction",
    "Command",
    "CommandHistory",
    "CommandResult",
    "CommandStateError",
    "Deck",
    "DeckType",
    "EventType",
    "FailureReason",
    "GameConfig",
    "GameEngine",
    "GameEvent",
    "GameSnapshot",
    "GameState",
    "HouseRuleSettings",
    "InvalidActionError",
    "InvariantViolationError",
    "MonopolyError",
    "PendingPayment",
    "Player",
    "PlayerState",
    "PropertyOwnership",
    "ReplayError",
    "RuleCheck",
    "Space",
    "SpaceType",
    "Trade",
    "TradeOffer",
    "TurnPhase",
    "command_from_transport",
    "create_game",
    "get_house_rules",
    "restore_game",
    "snapshot_game",
]
