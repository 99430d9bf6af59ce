"""Tests for the enhanced risk score and its policy table."""

from datetime import datetime, timedelta

import pytest

from holder_monitor.analytics.risk_policy import (
    DEFAULT_RISK_POLICY,
    RiskPolicy,
    RiskWeights,
    ScoreBand,
    first_band,
)
from holder_monitor.analytics.risk_scoring import (
    NO_EXCHANGE_HOLDINGS,
    NO_RECENT_ACTIVITY,
    NO_WHALE_CONCERNS,
    calculate_enhanced_risk_score,
    calculate_exchange_risk,
    calculate_transfer_pattern_risk,
    calculate_whale_behavior_risk,
)
from holder_monitor.models.analysis import CentralizationMetrics, WhaleHolder
from holder_monitor.models.holder import WhaleActivity


def _make_metrics(**kwargs) -> CentralizationMetrics:
    """Low-risk defaults: no centralization band fires."""
    defaults = {
        "gini_coefficient": 0.2,
        "herfindahl_index": 500,
        "nakamoto_coefficient": 20,
        "top10_percentage": 20.0,
        "top50_percentage": 45.0,
        "top100_percentage": 60.0,
        "centralization_score": 15.0,
        "risk_level": "low",
    }
    defaults.update(kwargs)
    return CentralizationMetrics(**defaults)


def _make_whale(rank: int, pct: float, *, now: datetime, label=None, tags=()) -> WhaleHolder:
    return WhaleHolder(
        address=f"0xwhale{rank:02d}",
        balance=pct * 10_000,
        balance_usd=pct * 10_000,
        percentage_of_supply=pct,
        rank=rank,
        label=label,
        tags=frozenset(tags),
        first_seen=now,
        last_activity=now,
    )


def _make_activity(
    tx_type: str, *, now: datetime, hours_ago: float = 1, pct: float = 0.5, **kwargs
) -> WhaleActivity:
    defaults = {
        "tx_hash": f"0xtx{tx_type}{hours_ago}",
        "timestamp": now - timedelta(hours=hours_ago),
        "from_address": "0xfrom",
        "to_address": "0xto",
        "amount": 1_000.0,
        "amount_usd": 10_000.0,
        "percentage_of_supply": pct,
        "type": tx_type,
    }
    defaults.update(kwargs)
    return WhaleActivity(**defaults)


# ── Empty inputs ──────────────────────────────────────────────────────


def test_empty_feed_and_no_whales(now):
    score = calculate_enhanced_risk_score(_make_metrics(), [], [], now=now)
    breakdown = score.breakdown

    assert breakdown.whale_behavior_risk.score == 0
    assert breakdown.whale_behavior_risk.factors == (NO_RECENT_ACTIVITY,)
    assert breakdown.exchange_concentration_risk.score == 0
    assert breakdown.exchange_concentration_risk.factors == (NO_EXCHANGE_HOLDINGS,)
    assert breakdown.transfer_pattern_risk.score == 0
    assert breakdown.transfer_pattern_risk.factors == (NO_RECENT_ACTIVITY,)
    assert breakdown.centralization_risk.score == 0
    assert breakdown.centralization_risk.factors == ()

    assert score.overall_score == 0
    assert score.risk_level == "low"
    assert score.warnings == ()
    assert score.recommendations == ()
    assert score.policy_version == "1.0"


def test_breakdown_carries_policy_weights(now):
    breakdown = calculate_enhanced_risk_score(_make_metrics(), [], [], now=now).breakdown
    assert breakdown.centralization_risk.weight == 0.40
    assert breakdown.whale_behavior_risk.weight == 0.30
    assert breakdown.exchange_concentration_risk.weight == 0.20
    assert breakdown.transfer_pattern_risk.weight == 0.10


# ── Centralization factor ─────────────────────────────────────────────


def test_centralization_all_bands_max(now):
    metrics = _make_metrics(
        gini_coefficient=0.85,
        nakamoto_coefficient=2,
        top10_percentage=85.0,
        herfindahl_index=3000,
    )

    score = calculate_enhanced_risk_score(metrics, [], [], now=now)
    central = score.breakdown.centralization_risk

    assert central.score == 100
    assert central.factors == (
        "Extremely high Gini coefficient (0.850)",
        "Very low Nakamoto coefficient (2)",
        "Top 10 control 85.0% of supply",
        "High market concentration (HHI: 3000)",
    )
    assert score.overall_score == 40.0
    assert score.risk_level == "medium"
    assert score.warnings == (
        "⚠️ CRITICAL: Extremely centralized token distribution",
        "⚠️ CRITICAL: Very few holders can control majority of supply",
    )
    assert score.recommendations == ("High centralization risk - diversify holdings",)


def test_centralization_band_edges_are_strict(now):
    metrics = _make_metrics(gini_coefficient=0.8, nakamoto_coefficient=3)

    central = calculate_enhanced_risk_score(metrics, [], [], now=now).breakdown.centralization_risk

    assert central.score == 40  # 20 (gini > 0.6) + 20 (nakamoto < 5)
    assert central.factors == (
        "High Gini coefficient (0.800)",
        "Low Nakamoto coefficient (3)",
    )


def test_moderate_bands(now):
    metrics = _make_metrics(
        gini_coefficient=0.45,
        nakamoto_coefficient=7,
        top10_percentage=45.0,
        herfindahl_index=1600,
    )
    central = calculate_enhanced_risk_score(metrics, [], [], now=now).breakdown.centralization_risk
    assert central.score == 40
    assert "Moderate market concentration (HHI: 1600)" in central.factors


# ── Whale behavior factor ─────────────────────────────────────────────


def test_whale_behavior_sells_big_whales_and_large_transfer(now):
    whales = [_make_whale(i, 6.0, now=now) for i in range(1, 7)]
    activity = [_make_activity("sell", now=now, hours_ago=h) for h in (1, 2, 3, 4, 5)]
    activity.append(_make_activity("sell", now=now, hours_ago=48))  # outside window
    activity.append(_make_activity("transfer", now=now, hours_ago=30, pct=6.5))

    result = calculate_whale_behavior_risk(whales, activity, now=now)

    assert result.clamped == 75
    assert result.factors == [
        "6 whales hold >5% each",
        "5 large sells in last 24h",
        "Transfer of 6.50% of supply detected",
    ]


def test_whale_behavior_single_sell_wording(now):
    result = calculate_whale_behavior_risk(
        [], [_make_activity("sell", now=now)], now=now
    )
    assert result.score == 10
    assert result.factors == ["1 large sell(s) in last 24h"]


def test_whale_behavior_quiet_feed(now):
    result = calculate_whale_behavior_risk(
        [], [_make_activity("buy", now=now)], now=now
    )
    assert result.score == 0
    assert result.factors == [NO_WHALE_CONCERNS]


def test_whale_behavior_small_transfers_ignored(now):
    """Transfers at or below 1% of supply never score the size band."""
    activity = [_make_activity("transfer", now=now, pct=1.0)]
    result = calculate_whale_behavior_risk([], activity, now=now)
    assert result.score == 0


def test_whale_behavior_exchange_holdings(now):
    whales = [
        _make_whale(1, 35.0, now=now, label="Binance", tags={"exchange", "cex"}),
        _make_whale(2, 10.0, now=now, label="Coinbase", tags={"cex"}),
    ]
    result = calculate_whale_behavior_risk(whales, [], now=now)
    assert result.score == 15
    assert result.factors == ["Exchanges hold 45.0% of supply"]


# ── Exchange concentration factor ─────────────────────────────────────


def test_exchange_risk_high_concentration(now):
    whales = [
        _make_whale(1, 35.0, now=now, label="Binance", tags={"exchange", "cex"}),
        _make_whale(2, 10.0, now=now, label="Coinbase", tags={"exchange", "cex"}),
        _make_whale(3, 20.0, now=now),
    ]

    result = calculate_exchange_risk(whales)

    assert result.clamped == 85
    assert result.factors == [
        "45.0% held on exchanges - high sell pressure risk",
        "Single exchange (Binance) holds 35.0%",
    ]


def test_exchange_risk_low_share(now):
    result = calculate_exchange_risk(
        [_make_whale(1, 3.0, now=now, label="Kraken", tags={"exchange"})]
    )
    assert result.score == 5
    assert result.factors == ["3.0% held on exchanges - low sell pressure risk"]


def test_exchange_risk_unlabeled_exchange_uses_address(now):
    result = calculate_exchange_risk([_make_whale(1, 25.0, now=now, tags={"cex"})])
    assert result.score == 20 + 30
    assert result.factors[-1] == "Largest exchange (0xwhale01) holds 25.0%"


def test_exchange_warning_and_recommendation(now):
    whales = [
        _make_whale(1, 45.0, now=now, label="Binance", tags={"exchange", "cex"}),
        _make_whale(2, 20.0, now=now, label="OKX", tags={"exchange", "cex"}),
    ]

    score = calculate_enhanced_risk_score(_make_metrics(), whales, [], now=now)

    assert score.breakdown.exchange_concentration_risk.score == 100
    assert "⚠️ HIGH: Significant sell pressure risk from exchange holdings" in score.warnings
    assert "Monitor exchange deposit/withdrawal activity closely" in score.recommendations


# ── Transfer pattern factor ───────────────────────────────────────────


def test_transfer_distribution_pattern(now):
    activity = [_make_activity("sell", now=now, hours_ago=h) for h in (1, 2, 3)]
    result = calculate_transfer_pattern_risk(activity, now=now)
    assert result.clamped == 30
    assert result.factors == ["Distribution pattern: 3 sells vs 0 buys in 24h"]


def test_transfer_mild_distribution(now):
    activity = [_make_activity("sell", now=now, hours_ago=h) for h in (1, 2, 3)]
    activity += [_make_activity("buy", now=now, hours_ago=h) for h in (4, 5)]
    result = calculate_transfer_pattern_risk(activity, now=now)
    assert result.clamped == 15
    assert result.factors == ["Mild distribution: 3 sells vs 2 buys in 24h"]


def test_transfer_accumulation_credit_floored_at_zero(now):
    activity = [_make_activity("buy", now=now, hours_ago=h) for h in (1, 2, 3, 4, 5, 6)]
    activity.append(_make_activity("sell", now=now, hours_ago=7))

    result = calculate_transfer_pattern_risk(activity, now=now)

    assert result.score == -10
    assert result.clamped == 0
    assert result.factors == ["Accumulation pattern: 6 buys vs 1 sells in 24h"]


def test_transfer_accumulation_offsets_other_points(now):
    activity = [
        _make_activity("buy", now=now, hours_ago=h / 2) for h in range(1, 24)
    ]  # 23 buys → velocity +20, accumulation −10
    result = calculate_transfer_pattern_risk(activity, now=now)
    assert result.clamped == 10


def test_transfer_exchange_deposits(now):
    activity = [
        _make_activity("sell", now=now, hours_ago=h, exchange_detected="Binance")
        for h in (1, 2, 3, 4, 5, 6)
    ]
    result = calculate_transfer_pattern_risk(activity, now=now)
    assert result.clamped == 55
    assert "6 large exchange deposits in 24h" in result.factors


def test_transfer_velocity(now):
    activity = [_make_activity("transfer", now=now, hours_ago=h / 2) for h in range(1, 22)]
    result = calculate_transfer_pattern_risk(activity, now=now)
    assert result.clamped == 20
    assert result.factors == ["High transfer velocity: 21 large transfers in 24h"]


def test_transfer_old_activity_only(now):
    activity = [_make_activity("sell", now=now, hours_ago=30)]
    result = calculate_transfer_pattern_risk(activity, now=now)
    assert result.score == 0
    assert result.factors == []


# ── Overall score ─────────────────────────────────────────────────────


def test_overall_weighted_sum(now):
    whales = [_make_whale(i, 6.0, now=now) for i in range(1, 7)]
    activity = [_make_activity("sell", now=now, hours_ago=h) for h in (1, 2, 3, 4, 5)]
    activity.append(_make_activity("transfer", now=now, hours_ago=30, pct=6.5))

    score = calculate_enhanced_risk_score(_make_metrics(), whales, activity, now=now)

    # 0×0.4 + 75×0.3 + 0×0.2 + 30×0.1
    assert score.overall_score == 25.5
    assert score.risk_level == "medium"
    assert score.warnings == ("⚠️ HIGH: Concerning whale behavior patterns detected",)


def test_overall_critical(now):
    metrics = _make_metrics(
        gini_coefficient=0.9, nakamoto_coefficient=1, top10_percentage=95.0, herfindahl_index=5000
    )
    whales = [
        _make_whale(1, 40.0, now=now, label="Binance", tags={"exchange", "cex"}),
        _make_whale(2, 25.0, now=now, label="OKX", tags={"exchange", "cex"}),
        *[_make_whale(i, 6.0, now=now) for i in range(3, 7)],
    ]
    activity = [
        _make_activity("sell", now=now, hours_ago=h, exchange_detected="Binance", pct=6.0)
        for h in range(1, 7)
    ]

    score = calculate_enhanced_risk_score(metrics, whales, activity, now=now)

    # 100×0.4 + 100×0.3 + 100×0.2 + 55×0.1
    assert score.overall_score == 95.5
    assert score.risk_level == "critical"
    assert score.warnings == (
        "⚠️ CRITICAL: Extremely centralized token distribution",
        "⚠️ CRITICAL: Very few holders can control majority of supply",
        "⚠️ HIGH: Significant sell pressure risk from exchange holdings",
        "⚠️ HIGH: Concerning whale behavior patterns detected",
    )
    assert score.recommendations == (
        "Consider waiting for better distribution before investing",
        "Monitor exchange deposit/withdrawal activity closely",
        "High centralization risk - diversify holdings",
        "Recent distribution pattern suggests caution",
    )


# ── Policy table ──────────────────────────────────────────────────────


def test_policy_weights_must_sum_to_one():
    with pytest.raises(ValueError):
        RiskPolicy(weights=RiskWeights(centralization=0.5))


def test_custom_policy_swaps_weights(now):
    policy = RiskPolicy(
        version="centralization-only",
        weights=RiskWeights(centralization=1.0, whale_behavior=0.0, exchange=0.0, transfer=0.0),
    )
    metrics = _make_metrics(gini_coefficient=0.85)

    score = calculate_enhanced_risk_score(metrics, [], [], policy=policy, now=now)

    assert score.overall_score == 30.0
    assert score.policy_version == "centralization-only"


def test_default_policy_values():
    assert DEFAULT_RISK_POLICY.weights.total == pytest.approx(1.0)
    assert DEFAULT_RISK_POLICY.window_hours == 24


def test_first_band_picks_most_severe():
    bands = (
        ScoreBand(5, 30, "a", "ge"),
        ScoreBand(3, 20, "b", "ge"),
        ScoreBand(1, 10, "c", "ge"),
    )
    assert first_band(bands, 7).points == 30
    assert first_band(bands, 3).points == 20
    assert first_band(bands, 0) is None
