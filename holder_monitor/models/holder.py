"""Pydantic models for the data handed to the analytics by external providers.

Holder snapshots, token metadata and whale transfer records come from
indexing/price APIs that live outside this package. The models only validate
and freeze them; nothing here fetches or derives data.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, field_validator

from holder_monitor.utils.clock import ensure_utc

ActivityType = Literal["buy", "sell", "transfer"]
EntityType = Literal[
    "exchange", "dex", "bridge", "team", "treasury", "vesting", "multisig", "bot", "unknown"
]


class Holder(BaseModel):
    """One (address, balance) row of a holder snapshot."""

    address: str
    balance: float
    first_seen: datetime | None = None
    last_activity: datetime | None = None
    is_contract: bool | None = None

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("first_seen", "last_activity")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None


class TokenInfo(BaseModel):
    """Token metadata and market data resolved by the provider.

    ``total_supply`` must be positive for any percentage metric to be
    meaningful; the analytics degrade to 0 instead of failing when it is not.
    """

    name: str = ""
    symbol: str = ""
    address: str = ""
    chain: str = ""
    total_supply: float
    circulating_supply: float = 0.0
    current_price_usd: float = 0.0
    market_cap_usd: float = 0.0
    total_holders: int = 0

    model_config = {"frozen": True, "extra": "ignore"}


class WhaleActivity(BaseModel):
    """A large transfer reported by the activity feed. Read-only input."""

    tx_hash: str
    timestamp: datetime
    from_address: str
    to_address: str
    amount: float
    amount_usd: float
    percentage_of_supply: float
    type: ActivityType
    from_label: str | None = None
    to_label: str | None = None
    exchange_detected: str | None = None
    price_impact_estimated: float | None = None

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("timestamp")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class EntityLabel(BaseModel):
    """Known-entity annotation for an address (exchange hot wallet, DEX router...)."""

    label: str
    type: EntityType = "unknown"
    confidence: Literal["high", "medium", "low"] = "high"
    tags: frozenset[str] = frozenset()

    model_config = {"frozen": True, "extra": "ignore"}
