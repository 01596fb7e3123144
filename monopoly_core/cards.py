"""
Chance and Community Chest card system.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from monopoly_core.spaces import SpaceType


class DeckType(Enum):
    CHANCE = "chance"
    COMMUNITY_CHEST = "community_chest"


class CardAction(Enum):
    """Types of card effects."""

    COLLECT_MONEY = "collect_money"
    PAY_MONEY = "pay_money"
    PAY_EACH_PLAYER = "pay_each_player"
    COLLECT_FROM_EACH_PLAYER = "collect_from_each_player"
    MOVE = "move"  # absolute target in value
    ADVANCE = "advance"  # relative, may be negative
    MOVE_TO_NEAREST = "move_to_nearest"
    GO_TO_JAIL = "go_to_jail"
    GET_OUT_OF_JAIL_FREE = "get_out_of_jail_free"
    PAY_PER_HOUSE = "pay_per_house"  # value per house, value2 per hotel


@dataclass(frozen=True)
class Card:
    """Represents a Chance or Community Chest card."""

    card_id: str
    deck: DeckType
    description: str
    action: CardAction
    value: int = 0
    value2: int = 0
    target: Optional[SpaceType] = None  # MOVE_TO_NEAREST only
    keep: bool = False

    def __repr__(self) -> str:
        return f"Card({self.card_id}, '{self.description}')"


class Deck:
    """
    Ordered draw queue.

    Drawn cards go back to the bottom unless they are kept by a player;
    kept cards stay out of the queue until they are used. An empty queue is
    rebuilt from every card not currently held and shuffled.
    """

    def __init__(self, deck_type: DeckType, cards: Iterable[Card], rng: random.Random):
        self.deck_type = deck_type
        self.rng = rng
        self.cards_by_id: Dict[str, Card] = {card.card_id: card for card in cards}
        self.draw_pile: List[Card] = list(self.cards_by_id.values())
        self.held_cards: List[Card] = []
        self.shuffle()

    def __len__(self) -> int:
        return len(self.draw_pile)

    def shuffle(self) -> None:
        self.rng.shuffle(self.draw_pile)

    def draw(self) -> Card:
        """Take the top card, reshuffling first if the queue is exhausted."""
        if not self.draw_pile:
            self.draw_pile = [c for c in self.cards_by_id.values() if c not in self.held_cards]
            self.shuffle()
        return self.draw_pile.pop(0)

    def put_back(self, card: Card) -> None:
        """Return a card to the bottom of the deck."""
        self.draw_pile.append(card)

    def hold(self, card: Card) -> None:
        """Mark a card as kept by a player."""
        self.held_cards.append(card)

    def return_held_card(self) -> Optional[Card]:
        """Put one held card back at the bottom; None if none is held."""
        if not self.held_cards:
            return None
        card = self.held_cards.pop(0)
        self.put_back(card)
        return card

    def state(self) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
        """Card ids of the draw pile (top first) and of the held cards."""
        return (
            tuple(c.card_id for c in self.draw_pile),
            tuple(c.card_id for c in self.held_cards),
        )

    def restore(self, draw_ids: Iterable[str], held_ids: Iterable[str]) -> None:
        self.draw_pile = [self.cards_by_id[card_id] for card_id in draw_ids]
        self.held_cards = [self.cards_by_id[card_id] for card_id in held_ids]


def _chance(card_id, description, action, value=0, value2=0, target=None, keep=False) -> Card:
    return Card(card_id, DeckType.CHANCE, description, action, value, value2, target, keep)


def _chest(card_id, description, action, value=0, value2=0, keep=False) -> Card:
    return Card(card_id, DeckType.COMMUNITY_CHEST, description, action, value, value2, None, keep)


def chance_cards() -> List[Card]:
    """The standard sixteen Chance cards."""
    return [
        _chance("CH01", "Advance to Go (Collect $200)", CardAction.MOVE, 0),
        _chance("CH02", "Advance to Illinois Ave. If you pass Go, collect $200", CardAction.MOVE, 24),
        _chance("CH03", "Advance to St. Charles Place. If you pass Go, collect $200", CardAction.MOVE, 11),
        _chance(
            "CH04",
            "Advance token to nearest Utility. If unowned, you may buy it from the Bank",
            CardAction.MOVE_TO_NEAREST,
            target=SpaceType.UTILITY,
        ),
        _chance(
            "CH05",
            "Advance token to nearest Railroad. If unowned, you may buy it from the Bank",
            CardAction.MOVE_TO_NEAREST,
            target=SpaceType.RAILROAD,
        ),
        _chance(
            "CH06",
            "Advance token to nearest Railroad. If unowned, you may buy it from the Bank",
            CardAction.MOVE_TO_NEAREST,
            target=SpaceType.RAILROAD,
        ),
        _chance("CH07", "Bank pays you dividend of $50", CardAction.COLLECT_MONEY, 50),
        _chance("CH08", "Get Out of Jail Free", CardAction.GET_OUT_OF_JAIL_FREE, keep=True),
        _chance("CH09", "Go Back 3 Spaces", CardAction.ADVANCE, -3),
        _chance("CH10", "Go directly to Jail. Do not pass Go, do not collect $200", CardAction.GO_TO_JAIL),
        _chance(
            "CH11",
            "Make general repairs on all your property. For each house pay $25, for each hotel $100",
            CardAction.PAY_PER_HOUSE,
            25,
            100,
        ),
        _chance("CH12", "Pay poor tax of $15", CardAction.PAY_MONEY, 15),
        _chance("CH13", "Take a trip to Reading Railroad. If you pass Go, collect $200", CardAction.MOVE, 5),
        _chance("CH14", "Take a walk on the Boardwalk. Advance token to Boardwalk", CardAction.MOVE, 39),
        _chance("CH15", "You have been elected Chairman of the Board. Pay each player $50", CardAction.PAY_EACH_PLAYER, 50),
        _chance("CH16", "Your building loan matures. Collect $150", CardAction.COLLECT_MONEY, 150),
    ]


def community_chest_cards() -> List[Card]:
    """The standard sixteen Community Chest cards."""
    return [
        _chest("CC01", "Advance to Go (Collect $200)", CardAction.MOVE, 0),
        _chest("CC02", "Bank error in your favor. Collect $200", CardAction.COLLECT_MONEY, 200),
        _chest("CC03", "Doctor's fees. Pay $50", CardAction.PAY_MONEY, 50),
        _chest("CC04", "From sale of stock you get $50", CardAction.COLLECT_MONEY, 50),
        _chest("CC05", "Get Out of Jail Free", CardAction.GET_OUT_OF_JAIL_FREE, keep=True),
        _chest("CC06", "Go directly to jail. Do not pass Go, do not collect $200", CardAction.GO_TO_JAIL),
        _chest("CC07", "Grand Opera Night. Collect $50 from every player", CardAction.COLLECT_FROM_EACH_PLAYER, 50),
        _chest("CC08", "Holiday fund matures. Receive $100", CardAction.COLLECT_MONEY, 100),
        _chest("CC09", "Income tax refund. Collect $20", CardAction.COLLECT_MONEY, 20),
        _chest("CC10", "It is your birthday. Collect $10 from every player", CardAction.COLLECT_FROM_EACH_PLAYER, 10),
        _chest("CC11", "Life insurance matures. Collect $100", CardAction.COLLECT_MONEY, 100),
        _chest("CC12", "Pay hospital fees of $100", CardAction.PAY_MONEY, 100),
        _chest("CC13", "Pay school fees of $150", CardAction.PAY_MONEY, 150),
        _chest("CC14", "Receive $25 consultancy fee", CardAction.COLLECT_MONEY, 25),
        _chest(
            "CC15",
            "You are assessed for street repairs. $40 per house, $115 per hotel",
            CardAction.PAY_PER_HOUSE,
            40,
            115,
        ),
        _chest("CC16", "You have won second prize in a beauty contest. Collect $10", CardAction.COLLECT_MONEY, 10),
    ]


def create_chance_deck(rng: random.Random) -> Deck:
    return Deck(DeckType.CHANCE, chance_cards(), rng)


def create_community_chest_deck(rng: random.Random) -> Deck:
    return Deck(DeckType.COMMUNITY_CHEST, community_chest_cards(), rng)
