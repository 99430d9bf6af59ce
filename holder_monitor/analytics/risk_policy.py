"""Versioned policy table for the enhanced risk score.

Weights, point bands, warning and recommendation gates are data, so a new
policy can be swapped in without touching the scoring code. Bands are listed
most severe first and the first match wins.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Literal

BandOp = Literal["gt", "ge", "lt"]


def _compare(value: float, threshold: float, op: BandOp) -> bool:
    if op == "gt":
        return value > threshold
    if op == "ge":
        return value >= threshold
    return value < threshold


@dataclass(frozen=True)
class ScoreBand:
    """Award ``points`` when ``value <op> threshold``; ``message`` is a format template."""

    threshold: float
    points: int
    message: str
    op: BandOp = "gt"

    def matches(self, value: float) -> bool:
        return _compare(value, self.threshold, self.op)


def first_band(bands: tuple[ScoreBand, ...], value: float) -> ScoreBand | None:
    for band in bands:
        if band.matches(value):
            return band
    return None


@dataclass(frozen=True)
class Gate:
    """A fixed warning/recommendation string fired when ``metric`` exceeds/undercuts a threshold."""

    metric: Literal["overall", "centralization", "whale_behavior", "exchange", "transfer", "nakamoto"]
    threshold: float
    text: str
    op: BandOp = "gt"

    def fires(self, value: float) -> bool:
        return _compare(value, self.threshold, self.op)


@dataclass(frozen=True)
class RiskWeights:
    centralization: float = 0.40
    whale_behavior: float = 0.30
    exchange: float = 0.20
    transfer: float = 0.10

    @property
    def total(self) -> float:
        return self.centralization + self.whale_behavior + self.exchange + self.transfer


@dataclass(frozen=True)
class TransferPatternPolicy:
    """Buy/sell imbalance rules for the trailing window."""

    distribution_ratio: float = 2.0
    distribution_points: int = 30
    mild_distribution_points: int = 15
    accumulation_ratio: float = 2.0
    accumulation_credit: int = 10
    exchange_deposit_bands: tuple[ScoreBand, ...] = (
        ScoreBand(5, 25, "{value} large exchange deposits in 24h"),
        ScoreBand(2, 15, "{value} exchange deposits in 24h"),
    )
    velocity_bands: tuple[ScoreBand, ...] = (
        ScoreBand(20, 20, "High transfer velocity: {value} large transfers in 24h"),
        ScoreBand(10, 10, "Moderate transfer velocity: {value} large transfers in 24h"),
    )


@dataclass(frozen=True)
class RiskPolicy:
    version: str = "1.0"
    weights: RiskWeights = field(default_factory=RiskWeights)
    window_hours: int = 24

    # Centralization factor
    gini_bands: tuple[ScoreBand, ...] = (
        ScoreBand(0.8, 30, "Extremely high Gini coefficient ({value:.3f})"),
        ScoreBand(0.6, 20, "High Gini coefficient ({value:.3f})"),
        ScoreBand(0.4, 10, "Moderate Gini coefficient ({value:.3f})"),
    )
    nakamoto_bands: tuple[ScoreBand, ...] = (
        ScoreBand(3, 25, "Very low Nakamoto coefficient ({value})", "lt"),
        ScoreBand(5, 20, "Low Nakamoto coefficient ({value})", "lt"),
        ScoreBand(10, 10, "Moderate Nakamoto coefficient ({value})", "lt"),
    )
    top10_bands: tuple[ScoreBand, ...] = (
        ScoreBand(80, 25, "Top 10 control {value:.1f}% of supply"),
        ScoreBand(60, 20, "Top 10 control {value:.1f}% of supply"),
        ScoreBand(40, 10, "Top 10 control {value:.1f}% of supply"),
    )
    hhi_bands: tuple[ScoreBand, ...] = (
        ScoreBand(2500, 20, "High market concentration (HHI: {value})"),
        ScoreBand(1500, 10, "Moderate market concentration (HHI: {value})"),
    )

    # Whale behavior factor
    top_whale_pct: float = 5.0
    top_whale_bands: tuple[ScoreBand, ...] = (
        ScoreBand(5, 20, "{value} whales hold >5% each"),
        ScoreBand(3, 10, "{value} whales hold >5% each"),
    )
    recent_sell_bands: tuple[ScoreBand, ...] = (
        ScoreBand(5, 30, "{value} large sells in last 24h", "ge"),
        ScoreBand(3, 20, "{value} large sells in last 24h", "ge"),
        ScoreBand(1, 10, "{value} large sell(s) in last 24h", "ge"),
    )
    large_transfer_min_pct: float = 1.0
    large_transfer_bands: tuple[ScoreBand, ...] = (
        ScoreBand(5, 25, "Transfer of {value:.2f}% of supply detected"),
        ScoreBand(2, 15, "Transfer of {value:.2f}% of supply detected"),
    )
    whale_exchange_bands: tuple[ScoreBand, ...] = (
        ScoreBand(50, 25, "Exchanges hold {value:.1f}% of supply"),
        ScoreBand(30, 15, "Exchanges hold {value:.1f}% of supply"),
    )

    # Exchange concentration factor
    exchange_total_bands: tuple[ScoreBand, ...] = (
        ScoreBand(60, 50, "{value:.1f}% held on exchanges - extreme sell pressure risk"),
        ScoreBand(40, 35, "{value:.1f}% held on exchanges - high sell pressure risk"),
        ScoreBand(20, 20, "{value:.1f}% held on exchanges - moderate sell pressure risk"),
        ScoreBand(0, 5, "{value:.1f}% held on exchanges - low sell pressure risk", "ge"),
    )
    exchange_largest_bands: tuple[ScoreBand, ...] = (
        ScoreBand(30, 50, "Single exchange ({label}) holds {value:.1f}%"),
        ScoreBand(20, 30, "Largest exchange ({label}) holds {value:.1f}%"),
        ScoreBand(10, 15, "Largest exchange ({label}) holds {value:.1f}%"),
    )

    # Transfer pattern factor
    transfer_pattern: TransferPatternPolicy = field(default_factory=TransferPatternPolicy)

    warnings: tuple[Gate, ...] = (
        Gate("centralization", 75, "⚠️ CRITICAL: Extremely centralized token distribution"),
        Gate("nakamoto", 3, "⚠️ CRITICAL: Very few holders can control majority of supply", "lt"),
        Gate("exchange", 60, "⚠️ HIGH: Significant sell pressure risk from exchange holdings"),
        Gate("whale_behavior", 70, "⚠️ HIGH: Concerning whale behavior patterns detected"),
    )
    recommendations: tuple[Gate, ...] = (
        Gate("overall", 50, "Consider waiting for better distribution before investing"),
        Gate("exchange", 40, "Monitor exchange deposit/withdrawal activity closely"),
        Gate("nakamoto", 5, "High centralization risk - diversify holdings", "lt"),
        Gate("transfer", 30, "Recent distribution pattern suggests caution"),
    )

    def __post_init__(self) -> None:
        if not math.isclose(self.weights.total, 1.0, abs_tol=1e-9):
            raise ValueError(
                f"Risk policy {self.version}: weights sum to {self.weights.total}, expected 1.0"
            )


DEFAULT_RISK_POLICY = RiskPolicy()
