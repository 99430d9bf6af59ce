"""Full holder analysis for one token snapshot.

Steps:
1. Keep the top N holders by balance
2. Identify whales (USD / % thresholds)
3. Concentration metrics, fed the whale count from step 2
4. Distribution tiers
5. Alerts and enhanced risk score (independent of each other)
6. Activity trends

Data fetching happens upstream; this module only analyses what it is given.
"""

from collections.abc import Sequence
from datetime import datetime

from loguru import logger

from config.settings import settings
from holder_monitor.analytics.alerts import generate_alerts
from holder_monitor.analytics.concentration import (
    calculate_centralization_metrics,
    clean_balance,
)
from holder_monitor.analytics.labels import KnownEntities
from holder_monitor.analytics.risk_policy import DEFAULT_RISK_POLICY, RiskPolicy
from holder_monitor.analytics.risk_scoring import calculate_enhanced_risk_score
from holder_monitor.analytics.trends import calculate_holder_trends
from holder_monitor.analytics.whales import analyze_distribution, identify_whales
from holder_monitor.models.analysis import AnalysisMetadata, HolderAnalysis
from holder_monitor.models.holder import Holder, TokenInfo, WhaleActivity
from holder_monitor.utils.clock import ensure_utc


def select_top_holders(holders: Sequence[Holder], count: int) -> tuple[Holder, ...]:
    """Largest ``count`` holders by balance; equal balances keep input order."""
    ranked = sorted(holders, key=lambda h: clean_balance(h.balance), reverse=True)
    return tuple(ranked[: max(count, 0)])


def analyze_holders(
    holders: Sequence[Holder],
    token_info: TokenInfo,
    recent_activity: Sequence[WhaleActivity] = (),
    *,
    whale_threshold_usd: float | None = None,
    whale_threshold_percent: float | None = None,
    alert_threshold_usd: float | None = None,
    top_holders_count: int | None = None,
    known_entities: KnownEntities | None = None,
    policy: RiskPolicy = DEFAULT_RISK_POLICY,
    previous_holder_counts: tuple[int | None, int | None] = (None, None),
    data_sources: Sequence[str] = (),
    block_height: int | None = None,
    now: datetime | None = None,
) -> HolderAnalysis:
    """Run every analytic over one snapshot with a single evaluation time.

    Thresholds left as None fall back to ``config.settings``.
    ``previous_holder_counts`` is (count 24h ago, count 7d ago) when known.
    """
    evaluated_at = ensure_utc(now)
    usd_threshold = (
        settings.whale_threshold_usd if whale_threshold_usd is None else whale_threshold_usd
    )
    pct_threshold = (
        settings.whale_threshold_percent
        if whale_threshold_percent is None
        else whale_threshold_percent
    )
    alert_threshold = (
        settings.alert_threshold_usd if alert_threshold_usd is None else alert_threshold_usd
    )
    limit = settings.top_holders_count if top_holders_count is None else top_holders_count

    label = token_info.symbol or token_info.address
    snapshot = select_top_holders(holders, limit)
    token = token_info.model_copy(update={"total_holders": len(snapshot)})
    activity = tuple(recent_activity)

    logger.info(
        f"[ANALYSIS] {label} on {token.chain or '?'}: "
        f"{len(snapshot)} holders, {len(activity)} activity records"
    )

    whales = identify_whales(
        snapshot,
        usd_threshold,
        pct_threshold,
        token,
        known_entities=known_entities,
        now=evaluated_at,
    )
    metrics = calculate_centralization_metrics(snapshot, token.total_supply, len(whales))
    distribution = analyze_distribution(snapshot, token)

    alerts = generate_alerts(metrics, activity, alert_threshold, now=evaluated_at)
    risk = calculate_enhanced_risk_score(
        metrics, whales, activity, policy=policy, now=evaluated_at
    )
    prev_24h, prev_7d = previous_holder_counts
    trends = calculate_holder_trends(
        activity,
        current_holder_count=token_info.total_holders or None,
        holder_count_24h_ago=prev_24h,
        holder_count_7d_ago=prev_7d,
        now=evaluated_at,
    )

    logger.info(
        f"[ANALYSIS] {label}: whales={len(whales)} "
        f"centralization={metrics.centralization_score:.2f} ({metrics.risk_level}) "
        f"gini={metrics.gini_coefficient:.3f} nakamoto={metrics.nakamoto_coefficient} "
        f"risk={risk.overall_score:.1f}/100 ({risk.risk_level.upper()}) "
        f"alerts={len(alerts)}"
    )

    return HolderAnalysis(
        token_info=token,
        centralization_metrics=metrics,
        whale_holders=whales,
        recent_whale_activity=activity,
        distribution_analysis=distribution,
        alerts=alerts,
        holder_trends=trends,
        enhanced_risk_score=risk,
        metadata=AnalysisMetadata(
            last_updated=evaluated_at,
            data_sources=tuple(data_sources),
            policy_version=policy.version,
            block_height=block_height,
        ),
    )
