"""Holder trend summary derived from the activity feed.

No history is stored: holder-count deltas are only reported when the caller
passes earlier counts it already has.
"""

from collections.abc import Sequence
from datetime import datetime, timedelta

from holder_monitor.models.analysis import AccumulationTrend, HolderTrends
from holder_monitor.models.holder import WhaleActivity
from holder_monitor.utils.clock import ensure_utc
from holder_monitor.utils.rounding import round_half_up

TREND_WINDOW = timedelta(hours=24)


def calculate_holder_trends(
    recent_activity: Sequence[WhaleActivity],
    *,
    current_holder_count: int | None = None,
    holder_count_24h_ago: int | None = None,
    holder_count_7d_ago: int | None = None,
    now: datetime | None = None,
) -> HolderTrends:
    evaluated_at = ensure_utc(now)
    recent = [a for a in recent_activity if evaluated_at - a.timestamp < TREND_WINDOW]

    # Buys bring USD in, sells take it out; plain transfers are neutral
    net_flow = sum(a.amount_usd for a in recent if a.type == "buy") - sum(
        a.amount_usd for a in recent if a.type == "sell"
    )

    buys = sum(1 for a in recent if a.type == "buy")
    sells = sum(1 for a in recent if a.type == "sell")
    trend: AccumulationTrend = "stable"
    if buys > sells:
        trend = "accumulating"
    elif sells > buys:
        trend = "distributing"

    def _delta(previous: int | None) -> int | None:
        if current_holder_count is None or previous is None:
            return None
        return current_holder_count - previous

    return HolderTrends(
        holder_count_change_24h=_delta(holder_count_24h_ago),
        holder_count_change_7d=_delta(holder_count_7d_ago),
        whale_accumulation_trend=trend,
        net_flow_24h_usd=round_half_up(net_flow, 2),
    )
