"""
Game configuration and house rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BOARD_SIZE = 40
JAIL_POSITION = 10


@dataclass
class GameConfig:
    """Configuration for a Monopoly game."""

    starting_cash: int = 1500
    go_salary: int = 200
    jail_fine: int = 50
    mortgage_interest_percent: int = 10

    house_limit: int = 32
    hotel_limit: int = 12

    max_jail_turns: int = 3

    seed: Optional[int] = None

    free_parking_pool: bool = False
    auction_on_decline: bool = True


class HouseRuleSettings(BaseSettings):
    """
    House rules consumed once at game setup.

    Environment variables (prefix: MONOPOLY_):
        MONOPOLY_STARTING_CASH       - Cash handed to every player (default: 1500)
        MONOPOLY_FREE_PARKING_POOL   - Taxes and fees collect on Free Parking (default: false)
        MONOPOLY_AUCTION_ON_DECLINE  - Declined properties go to auction (default: true)
        MONOPOLY_SEED                - Seed for dice and card shuffles
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="MONOPOLY_",
    )

    starting_cash: int = Field(
        default=1500,
        ge=0,
        description="Cash each player starts the game with.",
    )
    free_parking_pool: bool = Field(
        default=False,
        description="Whether taxes and card fees are pooled on Free Parking.",
    )
    auction_on_decline: bool = Field(
        default=True,
        description="Whether a declined purchase is auctioned to all players.",
    )
    seed: Optional[int] = Field(
        default=None,
        description="Seed for the game's random source.",
    )

    def to_game_config(self) -> GameConfig:
        """Build a GameConfig carrying these house rules."""
        return GameConfig(
            starting_cash=self.starting_cash,
            free_parking_pool=self.free_parking_pool,
            auction_on_decline=self.auction_on_decline,
            seed=self.seed,
        )


@lru_cache
def get_house_rules() -> HouseRuleSettings:
    """Return cached house rule settings."""
    return HouseRuleSettings()
