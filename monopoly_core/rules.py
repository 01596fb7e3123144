"""
Rules engine.

Pure functions over a GameState: they answer eligibility questions and
compute amounts or plans, and never mutate anything. Commands call them
before changing state.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from monopoly_core.auction import Auction
from monopoly_core.cards import Card, CardAction
from monopoly_core.config import BOARD_SIZE, GameConfig
from monopoly_core.exceptions import InvariantViolationError
from monopoly_core.game import GameState, PendingPayment
from monopoly_core.player import PropertyOwnership
from monopoly_core.results import FailureReason, RuleCheck
from monopoly_core.spaces import BuyableSpace, PropertySpace, SpaceType
from monopoly_core.trade import Trade, TradeOffer


# Movement

def move_destination(position: int, spaces: int) -> Tuple[int, bool]:
    """New position after moving forward, and whether Go was passed or landed on."""
    total = position + spaces
    return total % BOARD_SIZE, total >= BOARD_SIZE


# Purchasing and rent

def can_purchase(game: GameState, player_id: int, position: int) -> RuleCheck:
    player = game.get_player(player_id)
    space = game.board.get_buyable(position)
    if space is None:
        return RuleCheck.deny(FailureReason.NOT_BUYABLE, f"{game.board.get_space(position).name} cannot be bought")
    if player.is_bankrupt:
        return RuleCheck.deny(FailureReason.PLAYER_BANKRUPT, f"{player.name} is bankrupt")
    record = game.ownership[position]
    if record.is_owned():
        return RuleCheck.deny(FailureReason.ALREADY_OWNED, f"{space.name} is already owned")
    if record.is_mortgaged:
        return RuleCheck.deny(FailureReason.MORTGAGED, f"{space.name} is mortgaged")
    if not player.can_afford(space.price):
        return RuleCheck.deny(
            FailureReason.INSUFFICIENT_FUNDS, f"{space.name} costs ${space.price}, {player.name} has ${player.cash}"
        )
    return RuleCheck.ok()


def has_monopoly(game: GameState, player_id: int, color: str) -> bool:
    """Whether the player owns every property of the color group."""
    group = game.board.get_color_group(color)
    return bool(group) and all(game.owner_of(pos) == player_id for pos in group)


def calculate_rent(game: GameState, position: int, dice_total: int = 0) -> int:
    """
    Rent due for landing on ``position``.

    Unowned and mortgaged spaces charge nothing. An undeveloped street in a
    color group held entirely by its owner charges double the base rent.
    """
    space = game.board.get_buyable(position)
    if space is None:
        return 0
    record = game.ownership[position]
    if not record.is_owned() or record.is_mortgaged:
        return 0
    owner_id = record.owner_id

    if space.space_type == SpaceType.PROPERTY:
        if record.has_buildings:
            return space.rent_for(record.houses, record.has_hotel)
        if has_monopoly(game, owner_id, space.color_group):
            return space.rent_base * 2
        return space.rent_base
    elif space.space_type == SpaceType.RAILROAD:
        owned = game.owned_count(owner_id, game.board.positions_of(SpaceType.RAILROAD))
        return space.rent_for(owned)
    elif space.space_type == SpaceType.UTILITY:
        owned = game.owned_count(owner_id, game.board.positions_of(SpaceType.UTILITY))
        return space.rent_for(dice_total, owned)
    return 0


# Building

def _group(game: GameState, space: PropertySpace) -> List[PropertyOwnership]:
    return [game.ownership[pos] for pos in game.board.get_color_group(space.color_group)]


def _check_development(game: GameState, player_id: int, position: int) -> RuleCheck:
    """Checks shared by houses and hotels."""
    player = game.get_player(player_id)
    space = game.board.get_property_space(position)
    if space is None:
        return RuleCheck.deny(FailureReason.NOT_BUYABLE, f"Cannot build on {game.board.get_space(position).name}")
    if game.owner_of(position) != player_id:
        return RuleCheck.deny(FailureReason.NOT_OWNER, f"{player.name} does not own {space.name}")
    if not has_monopoly(game, player_id, space.color_group):
        return RuleCheck.deny(FailureReason.NO_MONOPOLY, f"{player.name} does not own all of {space.color_group}")
    if any(record.is_mortgaged for record in _group(game, space)):
        return RuleCheck.deny(FailureReason.GROUP_MORTGAGED, f"A {space.color_group} property is mortgaged")
    if not player.can_afford(space.house_cost):
        return RuleCheck.deny(
            FailureReason.INSUFFICIENT_FUNDS, f"Building on {space.name} costs ${space.house_cost}"
        )
    return RuleCheck.ok()


def can_build_house(game: GameState, player_id: int, position: int) -> RuleCheck:
    """
    Whether one more house may go on ``position``.

    Even-building: a property may only receive a house while it holds no
    more houses than the least developed property of its group.
    """
    check = _check_development(game, player_id, position)
    if not check:
        return check
    space = game.board.get_property_space(position)
    record = game.ownership[position]
    if record.has_hotel:
        return RuleCheck.deny(FailureReason.HAS_HOTEL, f"{space.name} already has a hotel")
    if record.houses >= 4:
        return RuleCheck.deny(FailureReason.MAX_HOUSES, f"{space.name} already has 4 houses")
    if record.houses > min(r.building_level for r in _group(game, space)):
        return RuleCheck.deny(
            FailureReason.UNEVEN_BUILDING, f"Build on the other {space.color_group} properties first"
        )
    if not game.bank.can_buy_houses(1):
        return RuleCheck.deny(FailureReason.NO_HOUSES_AVAILABLE, "The bank has no houses left")
    return RuleCheck.ok()


def can_build_hotel(game: GameState, player_id: int, position: int) -> RuleCheck:
    check = _check_development(game, player_id, position)
    if not check:
        return check
    space = game.board.get_property_space(position)
    record = game.ownership[position]
    if record.has_hotel:
        return RuleCheck.deny(FailureReason.HAS_HOTEL, f"{space.name} already has a hotel")
    if record.houses != 4:
        return RuleCheck.deny(FailureReason.NEEDS_FOUR_HOUSES, f"{space.name} needs 4 houses first")
    if any(r.building_level < 4 for r in _group(game, space)):
        return RuleCheck.deny(
            FailureReason.UNEVEN_BUILDING, f"Every {space.color_group} property needs 4 houses first"
        )
    if not game.bank.can_buy_hotel():
        return RuleCheck.deny(FailureReason.NO_HOTELS_AVAILABLE, "The bank has no hotels left")
    return RuleCheck.ok()


def can_build(game: GameState, player_id: int, position: int) -> RuleCheck:
    """House, or hotel once the property has 4 houses."""
    record = game.ownership_of(position)
    if record is not None and record.houses == 4:
        return can_build_hotel(game, player_id, position)
    return can_build_house(game, player_id, position)


def can_sell_building(game: GameState, player_id: int, position: int) -> RuleCheck:
    """
    Whether one building level may be sold back from ``position``.

    Only the most developed properties of a group may be sold down. A hotel
    is broken back into 4 houses, which the bank must have.
    """
    player = game.get_player(player_id)
    space = game.board.get_property_space(position)
    if space is None:
        return RuleCheck.deny(FailureReason.NOT_BUYABLE, f"No buildings on {game.board.get_space(position).name}")
    if game.owner_of(position) != player_id:
        return RuleCheck.deny(FailureReason.NOT_OWNER, f"{player.name} does not own {space.name}")
    record = game.ownership[position]
    if not record.has_buildings:
        return RuleCheck.deny(FailureReason.NO_BUILDINGS, f"{space.name} has no buildings")
    if record.building_level < max(r.building_level for r in _group(game, space)):
        return RuleCheck.deny(
            FailureReason.UNEVEN_BUILDING, f"Sell from the other {space.color_group} properties first"
        )
    if record.has_hotel and not game.bank.can_buy_houses(4):
        return RuleCheck.deny(FailureReason.NO_HOUSES_AVAILABLE, "The bank cannot break the hotel into houses")
    return RuleCheck.ok()


# Mortgages

def can_mortgage(game: GameState, player_id: int, position: int) -> RuleCheck:
    player = game.get_player(player_id)
    space = game.board.get_buyable(position)
    if space is None:
        return RuleCheck.deny(FailureReason.NOT_BUYABLE, f"{game.board.get_space(position).name} cannot be mortgaged")
    if game.owner_of(position) != player_id:
        return RuleCheck.deny(FailureReason.NOT_OWNER, f"{player.name} does not own {space.name}")
    record = game.ownership[position]
    if record.is_mortgaged:
        return RuleCheck.deny(FailureReason.MORTGAGED, f"{space.name} is already mortgaged")
    if isinstance(space, PropertySpace) and any(r.has_buildings for r in _group(game, space)):
        return RuleCheck.deny(
            FailureReason.HAS_BUILDINGS, f"Sell the {space.color_group} buildings before mortgaging"
        )
    return RuleCheck.ok()


def unmortgage_cost(space: BuyableSpace, config: GameConfig) -> int:
    """Mortgage value plus interest, rounded down."""
    return space.mortgage_value * (100 + config.mortgage_interest_percent) // 100


def can_unmortgage(game: GameState, player_id: int, position: int) -> RuleCheck:
    player = game.get_player(player_id)
    space = game.board.get_buyable(position)
    if space is None:
        return RuleCheck.deny(FailureReason.NOT_BUYABLE, f"{game.board.get_space(position).name} cannot be mortgaged")
    if game.owner_of(position) != player_id:
        return RuleCheck.deny(FailureReason.NOT_OWNER, f"{player.name} does not own {space.name}")
    if not game.ownership[position].is_mortgaged:
        return RuleCheck.deny(FailureReason.NOT_MORTGAGED, f"{space.name} is not mortgaged")
    cost = unmortgage_cost(space, game.config)
    if not player.can_afford(cost):
        return RuleCheck.deny(FailureReason.INSUFFICIENT_FUNDS, f"Lifting the mortgage costs ${cost}")
    return RuleCheck.ok()


# Jail

def can_pay_jail_fine(game: GameState, player_id: int) -> RuleCheck:
    player = game.get_player(player_id)
    if not player.in_jail:
        return RuleCheck.deny(FailureReason.NOT_IN_JAIL, f"{player.name} is not in jail")
    if not player.can_afford(game.config.jail_fine):
        return RuleCheck.deny(FailureReason.INSUFFICIENT_FUNDS, f"The fine is ${game.config.jail_fine}")
    return RuleCheck.ok()


def can_use_jail_card(game: GameState, player_id: int) -> RuleCheck:
    player = game.get_player(player_id)
    if not player.in_jail:
        return RuleCheck.deny(FailureReason.NOT_IN_JAIL, f"{player.name} is not in jail")
    if player.get_out_of_jail_cards <= 0:
        return RuleCheck.deny(FailureReason.NO_JAIL_CARD, f"{player.name} has no Get Out of Jail Free card")
    return RuleCheck.ok()


# Trades

def _check_side(game: GameState, player_id: int, offer: TradeOffer) -> RuleCheck:
    player = game.get_player(player_id)
    if offer.cash < 0 or offer.jail_cards < 0:
        return RuleCheck.deny(FailureReason.INVALID_AMOUNT, "Trade amounts cannot be negative")
    if not player.can_afford(offer.cash):
        return RuleCheck.deny(FailureReason.INSUFFICIENT_FUNDS, f"{player.name} has only ${player.cash}")
    if offer.jail_cards > player.get_out_of_jail_cards:
        return RuleCheck.deny(FailureReason.NO_JAIL_CARD, f"{player.name} lacks the offered jail cards")
    for position in offer.properties:
        if game.owner_of(position) != player_id:
            return RuleCheck.deny(FailureReason.NOT_OWNER, f"{player.name} does not own position {position}")
        space = game.board.get_space(position)
        if isinstance(space, PropertySpace) and any(r.has_buildings for r in _group(game, space)):
            return RuleCheck.deny(
                FailureReason.HAS_BUILDINGS, f"Sell the {space.color_group} buildings before trading {space.name}"
            )
    return RuleCheck.ok()


def validate_trade(game: GameState, trade: Trade) -> RuleCheck:
    """
    Both sides consent, both are solvent players, neither offers more than
    it holds or any built-up property, and at least one side offers something.
    Mortgaged properties may be traded.
    """
    if trade.proposer_id == trade.recipient_id:
        return RuleCheck.deny(FailureReason.SELF_TRADE, "A player cannot trade with themselves")
    for player_id in (trade.proposer_id, trade.recipient_id):
        if game.get_player(player_id).is_bankrupt:
            return RuleCheck.deny(FailureReason.PLAYER_BANKRUPT, f"Player {player_id} is bankrupt")
    if not (trade.proposer_accepted and trade.recipient_accepted):
        return RuleCheck.deny(FailureReason.TRADE_NOT_ACCEPTED, "Both players must accept the trade")
    if trade.proposer_offer.is_empty() and trade.recipient_offer.is_empty():
        return RuleCheck.deny(FailureReason.TRADE_EMPTY, "Neither side offers anything")
    check = _check_side(game, trade.proposer_id, trade.proposer_offer)
    if not check:
        return check
    return _check_side(game, trade.recipient_id, trade.recipient_offer)


# Bankruptcy

def building_value(game: GameState, position: int) -> int:
    """What the buildings on a street fetch when sold back: half price each."""
    space = game.board.get_property_space(position)
    if space is None:
        return 0
    record = game.ownership[position]
    return record.building_level * (space.house_cost // 2)


def liquidation_value(game: GameState, player_id: int) -> int:
    """Cash plus everything the player could raise from the bank."""
    player = game.get_player(player_id)
    total = player.cash
    for position in player.properties:
        if not game.ownership[position].is_mortgaged:
            total += game.board.get_buyable(position).mortgage_value
        total += building_value(game, position)
    return total


def is_bankrupt(game: GameState, player_id: int, debt: int) -> bool:
    return liquidation_value(game, player_id) < debt


@dataclass(frozen=True)
class BankruptcySettlement:
    """Everything that moves when a player goes bankrupt."""

    debtor_id: int
    creditor_id: Optional[int]
    properties: Tuple[int, ...]
    houses_returned: int
    hotels_returned: int
    cash: int
    jail_cards: int


def plan_bankruptcy(game: GameState, debtor_id: int, creditor_id: Optional[int]) -> BankruptcySettlement:
    """
    Work out a bankruptcy: every property goes to the creditor (or back to
    the bank) unmortgaged and stripped of buildings, which return to the
    bank's supply, and the debtor's remaining cash goes to the creditor.
    """
    debtor = game.get_player(debtor_id)
    if creditor_id is not None:
        creditor = game.get_player(creditor_id)
        if creditor_id == debtor_id or creditor.is_bankrupt:
            raise InvariantViolationError(f"Player {creditor_id} cannot take over player {debtor_id}")
    properties = tuple(sorted(debtor.properties))
    houses = sum(game.ownership[pos].houses for pos in properties)
    hotels = sum(1 for pos in properties if game.ownership[pos].has_hotel)
    return BankruptcySettlement(
        debtor_id=debtor_id,
        creditor_id=creditor_id,
        properties=properties,
        houses_returned=houses,
        hotels_returned=hotels,
        cash=max(debtor.cash, 0),
        jail_cards=debtor.get_out_of_jail_cards,
    )


# Cards

Transfer = Tuple[Optional[int], Optional[int], int]  # payer, payee (None = bank), amount


@dataclass(frozen=True)
class CardEffect:
    """
    The full consequence of a card, computed before anything is applied.

    When the drawing player cannot cover what the card demands, ``debt``
    is set and ``transfers`` holds no payments from them.
    """

    card: Card
    player_id: int
    transfers: Tuple[Transfer, ...] = ()
    destination: Optional[int] = None
    passed_go: bool = False
    go_to_jail: bool = False
    gain_jail_card: bool = False
    debt: Optional[PendingPayment] = None


def houses_and_hotels(game: GameState, player_id: int) -> Tuple[int, int]:
    houses = hotels = 0
    for position in game.get_player(player_id).properties:
        record = game.ownership[position]
        houses += record.houses
        hotels += 1 if record.has_hotel else 0
    return houses, hotels


def plan_card_effect(game: GameState, card: Card, player_id: int) -> CardEffect:
    """Dispatch on the card's action and describe what it does."""
    player = game.get_player(player_id)
    position = player.position
    action = card.action

    if action == CardAction.COLLECT_MONEY:
        return CardEffect(card, player_id, transfers=((None, player_id, card.value),))

    if action == CardAction.COLLECT_FROM_EACH_PLAYER:
        transfers = tuple(
            (other.player_id, player_id, min(card.value, max(other.cash, 0)))
            for other in game.others(player_id)
        )
        return CardEffect(card, player_id, transfers=transfers)

    if action in (CardAction.PAY_MONEY, CardAction.PAY_EACH_PLAYER, CardAction.PAY_PER_HOUSE):
        if action == CardAction.PAY_MONEY:
            payees = ((None, card.value),)
        elif action == CardAction.PAY_EACH_PLAYER:
            payees = tuple((other.player_id, card.value) for other in game.others(player_id))
        else:
            houses, hotels = houses_and_hotels(game, player_id)
            payees = ((None, houses * card.value + hotels * card.value2),)
        payees = tuple((payee, amount) for payee, amount in payees if amount > 0)
        if sum(amount for _, amount in payees) > player.cash:
            return CardEffect(card, player_id, debt=PendingPayment(player_id, payees, card.card_id))
        return CardEffect(
            card, player_id, transfers=tuple((player_id, payee, amount) for payee, amount in payees)
        )

    if action in (CardAction.MOVE, CardAction.ADVANCE, CardAction.MOVE_TO_NEAREST):
        if action == CardAction.MOVE:
            destination = card.value
            passed_go = destination < position or destination == 0
        elif action == CardAction.ADVANCE:
            destination = (position + card.value) % BOARD_SIZE
            passed_go = card.value > 0 and position + card.value >= BOARD_SIZE
        else:
            destination = game.board.find_nearest(position, card.target)
            passed_go = destination < position
        transfers = ((None, player_id, game.config.go_salary),) if passed_go else ()
        return CardEffect(card, player_id, transfers=transfers, destination=destination, passed_go=passed_go)

    if action == CardAction.GO_TO_JAIL:
        return CardEffect(card, player_id, go_to_jail=True)

    if action == CardAction.GET_OUT_OF_JAIL_FREE:
        return CardEffect(card, player_id, gain_jail_card=True)

    raise InvariantViolationError(f"Unhandled card action {action}")


# Auctions

def validate_auction(game: GameState, auction: Auction) -> RuleCheck:
    """Every solvent player bids exactly once, and no bid exceeds the bidder's cash."""
    space = game.board.get_buyable(auction.property_position)
    if space is None:
        return RuleCheck.deny(FailureReason.NOT_BUYABLE, "Only properties can be auctioned")
    if game.ownership[auction.property_position].is_owned():
        return RuleCheck.deny(FailureReason.ALREADY_OWNED, f"{space.name} is already owned")
    expected = {p.player_id for p in game.active_players()}
    if set(auction.participant_ids) != expected or not auction.is_complete:
        return RuleCheck.deny(FailureReason.INVALID_BIDDERS, "Every solvent player must bid exactly once")
    for player_id, amount in auction.bids.items():
        if amount > game.get_player(player_id).cash:
            return RuleCheck.deny(
                FailureReason.BID_EXCEEDS_CASH, f"Player {player_id} cannot cover a bid of ${amount}"
            )
    return RuleCheck.ok()


def resolve_auction(auction: Auction) -> Tuple[Optional[int], int]:
    """Winner and price. Ties go to the earliest participant."""
    return auction.get_winner(), auction.get_winning_bid()
