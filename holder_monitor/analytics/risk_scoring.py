"""Enhanced risk score: four weighted factors with explanations.

Factors (weights from the policy table):
- Centralization: Gini, Nakamoto, top-10 share, HHI
- Whale behavior: big whales, recent sells, transfer size, exchange holdings
- Exchange concentration: total and single-exchange share held by CEX wallets
- Transfer pattern: buy/sell imbalance, exchange deposits, velocity

Each factor sums its band points, then clamps to 0-100.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from loguru import logger

from holder_monitor.analytics.concentration import determine_risk_level
from holder_monitor.analytics.risk_policy import (
    DEFAULT_RISK_POLICY,
    RiskPolicy,
    ScoreBand,
    first_band,
)
from holder_monitor.models.analysis import (
    CentralizationMetrics,
    EnhancedRiskScore,
    RiskBreakdown,
    RiskFactor,
    WhaleHolder,
)
from holder_monitor.models.holder import WhaleActivity
from holder_monitor.utils.clock import ensure_utc
from holder_monitor.utils.rounding import round_half_up

NO_RECENT_ACTIVITY = "No recent whale activity"
NO_WHALE_CONCERNS = "No concerning whale behavior detected"
NO_EXCHANGE_HOLDINGS = "No major exchange holdings detected"


@dataclass
class FactorResult:
    """Unweighted score and explanations for one factor."""

    score: int = 0
    factors: list[str] = field(default_factory=list)

    def add(self, bands: tuple[ScoreBand, ...], value: float, **fmt) -> ScoreBand | None:
        band = first_band(bands, value)
        if band is not None:
            self.score += band.points
            self.factors.append(band.message.format(value=value, **fmt))
        return band

    @property
    def clamped(self) -> int:
        return max(0, min(self.score, 100))


def _within_window(
    activity: WhaleActivity, now: datetime, window: timedelta
) -> bool:
    return now - activity.timestamp < window


def calculate_centralization_risk(
    metrics: CentralizationMetrics, policy: RiskPolicy = DEFAULT_RISK_POLICY
) -> FactorResult:
    result = FactorResult()
    result.add(policy.gini_bands, metrics.gini_coefficient)
    result.add(policy.nakamoto_bands, metrics.nakamoto_coefficient)
    result.add(policy.top10_bands, metrics.top10_percentage)
    result.add(policy.hhi_bands, metrics.herfindahl_index)
    return result


def calculate_whale_behavior_risk(
    whales: Sequence[WhaleHolder],
    recent_activity: Sequence[WhaleActivity],
    *,
    now: datetime,
    policy: RiskPolicy = DEFAULT_RISK_POLICY,
) -> FactorResult:
    result = FactorResult()
    window = timedelta(hours=policy.window_hours)

    top_whales = sum(1 for w in whales if w.percentage_of_supply > policy.top_whale_pct)
    result.add(policy.top_whale_bands, top_whales)

    recent_sells = sum(
        1 for a in recent_activity if a.type == "sell" and _within_window(a, now, window)
    )
    result.add(policy.recent_sell_bands, recent_sells)

    large = [
        a.percentage_of_supply
        for a in recent_activity
        if a.percentage_of_supply > policy.large_transfer_min_pct
    ]
    if large:
        result.add(policy.large_transfer_bands, max(large))

    exchange_pct = sum(w.percentage_of_supply for w in whales if w.is_exchange)
    result.add(policy.whale_exchange_bands, exchange_pct)

    if not result.factors:
        result.factors.append(NO_WHALE_CONCERNS if recent_activity else NO_RECENT_ACTIVITY)
    return result


def calculate_exchange_risk(
    whales: Sequence[WhaleHolder], policy: RiskPolicy = DEFAULT_RISK_POLICY
) -> FactorResult:
    result = FactorResult()

    exchange_holders = [w for w in whales if w.is_exchange]
    if not exchange_holders:
        result.factors.append(NO_EXCHANGE_HOLDINGS)
        return result

    total_pct = sum(w.percentage_of_supply for w in exchange_holders)
    result.add(policy.exchange_total_bands, total_pct)

    largest = max(exchange_holders, key=lambda w: w.percentage_of_supply)
    result.add(
        policy.exchange_largest_bands,
        largest.percentage_of_supply,
        label=largest.label or largest.address,
    )
    return result


def calculate_transfer_pattern_risk(
    recent_activity: Sequence[WhaleActivity],
    *,
    now: datetime,
    policy: RiskPolicy = DEFAULT_RISK_POLICY,
) -> FactorResult:
    result = FactorResult()
    if not recent_activity:
        result.factors.append(NO_RECENT_ACTIVITY)
        return result

    rules = policy.transfer_pattern
    window = timedelta(hours=policy.window_hours)
    recent = [a for a in recent_activity if _within_window(a, now, window)]

    buys = sum(1 for a in recent if a.type == "buy")
    sells = sum(1 for a in recent if a.type == "sell")

    if sells > buys * rules.distribution_ratio:
        result.score += rules.distribution_points
        result.factors.append(f"Distribution pattern: {sells} sells vs {buys} buys in 24h")
    elif sells > buys:
        result.score += rules.mild_distribution_points
        result.factors.append(f"Mild distribution: {sells} sells vs {buys} buys in 24h")
    elif buys > sells * rules.accumulation_ratio:
        result.score -= rules.accumulation_credit  # accumulation lowers risk
        result.factors.append(f"Accumulation pattern: {buys} buys vs {sells} sells in 24h")

    deposits = sum(1 for a in recent if a.type == "sell" and a.exchange_detected)
    result.add(rules.exchange_deposit_bands, deposits)
    result.add(rules.velocity_bands, len(recent))
    return result


def calculate_enhanced_risk_score(
    metrics: CentralizationMetrics,
    whales: Sequence[WhaleHolder],
    recent_activity: Sequence[WhaleActivity],
    *,
    policy: RiskPolicy = DEFAULT_RISK_POLICY,
    now: datetime | None = None,
) -> EnhancedRiskScore:
    """Combine the four factors into one 0-100 score with warnings and advice."""
    evaluated_at = ensure_utc(now)
    weights = policy.weights

    centralization = calculate_centralization_risk(metrics, policy)
    whale_behavior = calculate_whale_behavior_risk(
        whales, recent_activity, now=evaluated_at, policy=policy
    )
    exchange = calculate_exchange_risk(whales, policy)
    transfer = calculate_transfer_pattern_risk(
        recent_activity, now=evaluated_at, policy=policy
    )

    overall = (
        centralization.clamped * weights.centralization
        + whale_behavior.clamped * weights.whale_behavior
        + exchange.clamped * weights.exchange
        + transfer.clamped * weights.transfer
    )

    gate_values = {
        "overall": overall,
        "centralization": centralization.clamped,
        "whale_behavior": whale_behavior.clamped,
        "exchange": exchange.clamped,
        "transfer": transfer.clamped,
        "nakamoto": metrics.nakamoto_coefficient,
    }
    warnings = tuple(g.text for g in policy.warnings if g.fires(gate_values[g.metric]))
    recommendations = tuple(
        g.text for g in policy.recommendations if g.fires(gate_values[g.metric])
    )

    def _factor(result: FactorResult, weight: float) -> RiskFactor:
        return RiskFactor(
            score=result.clamped,
            weight=weight,
            factors=tuple(result.factors),
        )

    score = EnhancedRiskScore(
        overall_score=round_half_up(overall, 1),
        risk_level=determine_risk_level(overall),
        breakdown=RiskBreakdown(
            centralization_risk=_factor(centralization, weights.centralization),
            whale_behavior_risk=_factor(whale_behavior, weights.whale_behavior),
            exchange_concentration_risk=_factor(exchange, weights.exchange),
            transfer_pattern_risk=_factor(transfer, weights.transfer),
        ),
        warnings=warnings,
        recommendations=recommendations,
        policy_version=policy.version,
    )

    logger.debug(
        f"[RISK] overall={score.overall_score} ({score.risk_level}) "
        f"central={centralization.clamped} whale={whale_behavior.clamped} "
        f"exchange={exchange.clamped} transfer={transfer.clamped} "
        f"warnings={len(warnings)}"
    )
    return score
