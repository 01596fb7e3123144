"""
Transport forms: one pydantic model per command.

These are the structural records the persistence layer stores and hands
back for replay. The ``command`` field discriminates the union.
"""

from typing import Annotated, Any, List, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from monopoly_core.cards import DeckType


class TransportModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class RollDiceTransport(TransportModel):
    command: Literal["roll_dice"] = "roll_dice"
    player_id: int
    dice: Optional[Tuple[int, int]] = None


class MoveTransport(TransportModel):
    command: Literal["move"] = "move"
    player_id: int
    spaces: int


class BuyPropertyTransport(TransportModel):
    command: Literal["buy_property"] = "buy_property"
    player_id: int
    position: int


class DeclinePurchaseTransport(TransportModel):
    command: Literal["decline_purchase"] = "decline_purchase"
    player_id: int
    position: int


class BidTransport(TransportModel):
    player_id: int
    amount: int


class AuctionTransport(TransportModel):
    command: Literal["auction"] = "auction"
    position: int
    bids: List[BidTransport]


class BuildTransport(TransportModel):
    command: Literal["buy_house_or_hotel"] = "buy_house_or_hotel"
    player_id: int
    position: int


class SellBuildingTransport(TransportModel):
    command: Literal["sell_building"] = "sell_building"
    player_id: int
    position: int


class MortgageTransport(TransportModel):
    command: Literal["mortgage"] = "mortgage"
    player_id: int
    position: int


class UnmortgageTransport(TransportModel):
    command: Literal["unmortgage"] = "unmortgage"
    player_id: int
    position: int


class PayRentTransport(TransportModel):
    command: Literal["pay_rent"] = "pay_rent"
    player_id: int
    position: Optional[int] = None
    dice_total: Optional[int] = None


class PayTaxTransport(TransportModel):
    command: Literal["pay_tax"] = "pay_tax"
    player_id: int
    position: Optional[int] = None


class DrawCardTransport(TransportModel):
    command: Literal["draw_card"] = "draw_card"
    player_id: int
    deck: DeckType


class SettlePaymentTransport(TransportModel):
    command: Literal["settle_payment"] = "settle_payment"
    player_id: int


class PayJailFineTransport(TransportModel):
    command: Literal["pay_jail_fine"] = "pay_jail_fine"
    player_id: int


class UseJailCardTransport(TransportModel):
    command: Literal["use_jail_card"] = "use_jail_card"
    player_id: int


class TradeOfferTransport(TransportModel):
    cash: int = 0
    properties: List[int] = Field(default_factory=list)
    jail_cards: int = 0


class TradeTransport(TransportModel):
    command: Literal["trade"] = "trade"
    proposer_id: int
    recipient_id: int
    proposer_offer: TradeOfferTransport = Field(default_factory=TradeOfferTransport)
    recipient_offer: TradeOfferTransport = Field(default_factory=TradeOfferTransport)
    proposer_accepted: bool = True
    recipient_accepted: bool = False


class DeclareBankruptcyTransport(TransportModel):
    command: Literal["declare_bankruptcy"] = "declare_bankruptcy"
    player_id: int
    creditor_id: Optional[int] = None
    debt: int = 0


class EndTurnTransport(TransportModel):
    command: Literal["end_turn"] = "end_turn"
    player_id: int


CommandTransport = Annotated[
    Union[
        RollDiceTransport,
        MoveTransport,
        BuyPropertyTransport,
        DeclinePurchaseTransport,
        AuctionTransport,
        BuildTransport,
        SellBuildingTransport,
        MortgageTransport,
        UnmortgageTransport,
        PayRentTransport,
        PayTaxTransport,
        DrawCardTransport,
        SettlePaymentTransport,
        PayJailFineTransport,
        UseJailCardTransport,
        TradeTransport,
        DeclareBankruptcyTransport,
        EndTurnTransport,
    ],
    Field(discriminator="command"),
]

_transport_adapter: TypeAdapter = TypeAdapter(CommandTransport)


def parse_transport(data: Union[TransportModel, Mapping[str, Any]]) -> TransportModel:
    """Validate a dict (or pass through a model) into its transport model."""
    if isinstance(data, TransportModel):
        return data
    return _transport_adapter.validate_python(data)


def dump_transports(transports: List[TransportModel]) -> List[dict]:
    return [t.model_dump(mode="json") for t in transports]
