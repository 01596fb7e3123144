"""
Commands: every state change as a validated, reversible, serializable object.
"""

from typing import Any, Dict, Mapping, Type, Union

from monopoly_core.commands.auction import AuctionCommand
from monopoly_core.commands.base import Command, StateSnapshot
from monopoly_core.commands.cards import DrawCardCommand
from monopoly_core.commands.movement import (
    MoveCommand,
    PayJailFineCommand,
    RollDiceCommand,
    UseJailCardCommand,
)
from monopoly_core.commands.payments import PayRentCommand, PayTaxCommand, SettlePaymentCommand
from monopoly_core.commands.property import (
    BuyHouseOrHotelCommand,
    BuyPropertyCommand,
    DeclinePurchaseCommand,
    MortgageCommand,
    SellBuildingCommand,
    UnmortgageCommand,
)
from monopoly_core.commands.trade import TradeCommand
from monopoly_core.commands.transport import CommandTransport, TransportModel, parse_transport
from monopoly_core.commands.turn import DeclareBankruptcyCommand, EndTurnCommand
from monopoly_core.game import GameState


COMMAND_TYPES: Dict[str, Type[Command]] = {
    cls.kind: cls
    for cls in (
        RollDiceCommand,
        MoveCommand,
        BuyPropertyCommand,
        DeclinePurchaseCommand,
        AuctionCommand,
        BuyHouseOrHotelCommand,
        SellBuildingCommand,
        MortgageCommand,
        UnmortgageCommand,
        PayRentCommand,
        PayTaxCommand,
        DrawCardCommand,
        SettlePaymentCommand,
        PayJailFineCommand,
        UseJailCardCommand,
        TradeCommand,
        DeclareBankruptcyCommand,
        EndTurnCommand,
    )
}


def command_from_transport(game: GameState, data: Union[TransportModel, Mapping[str, Any]]) -> Command:
    """Rebuild a command against ``game`` from its transport form (model or dict)."""
    transport = parse_transport(data)
    return COMMAND_TYPES[transport.command].from_transport(game, transport)


__all__ = [
    "AuctionCommand",
    "BuyHouseOrHotelCommand",
    "BuyPropertyCommand",
    "COMMAND_TYPES",
    "Command",
    "CommandTransport",
    "DeclareBankruptcyCommand",
    "DeclinePurchaseCommand",
    "DrawCardCommand",
    "EndTurnCommand",
    "MortgageCommand",
    "MoveCommand",
    "PayJailFineCommand",
    "PayRentCommand",
    "PayTaxCommand",
    "RollDiceCommand",
    "SellBuildingCommand",
    "SettlePaymentCommand",
    "StateSnapshot",
    "TradeCommand",
    "UnmortgageCommand",
    "UseJailCardCommand",
    "command_from_transport",
]
