"""Shared test fixtures."""

from datetime import UTC, datetime

import pytest

from holder_monitor.models.holder import Holder, TokenInfo

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """Pinned evaluation time so 24h-window checks are deterministic."""
    return NOW


@pytest.fixture
def token_info() -> TokenInfo:
    return TokenInfo(
        name="Test Token",
        symbol="TST",
        address="0x1111111111111111111111111111111111111111",
        chain="ethereum",
        total_supply=1000.0,
        circulating_supply=1000.0,
        current_price_usd=1.0,
        market_cap_usd=1000.0,
        total_holders=10,
    )


@pytest.fixture
def equal_holders() -> list[Holder]:
    """10 holders with 10% each of a 1000 supply."""
    return [Holder(address=f"0xequal{i:02d}", balance=100.0) for i in range(10)]


@pytest.fixture
def dominant_holders() -> list[Holder]:
    """One holder with 60% of a 1000 supply, nine sharing the remaining 40%."""
    others = [Holder(address=f"0xminor{i:02d}", balance=400.0 / 9) for i in range(9)]
    return [Holder(address="0xdominant", balance=600.0), *others]
