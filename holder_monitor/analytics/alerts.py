"""Rule-based alerts from concentration metrics and the whale activity feed.

Three rule groups:
1. Centralization: top-10 share, Nakamoto, Gini (most severe band per metric)
2. Large transfers: one alert per record above the USD threshold
3. Patterns: one aggregate alert for >=3 buys / >=3 sells in the last 24h

Output is sorted most severe first, then newest first.
"""

from collections.abc import Sequence
from datetime import datetime, timedelta

from loguru import logger

from holder_monitor.models.analysis import Alert, AlertSeverity, CentralizationMetrics
from holder_monitor.models.holder import WhaleActivity
from holder_monitor.utils.clock import ensure_utc

SEVERITY_ORDER: dict[AlertSeverity, int] = {"critical": 0, "warning": 1, "info": 2}
CRITICAL_TRANSFER_MULTIPLIER = 5
PATTERN_MIN_COUNT = 3
PATTERN_WINDOW = timedelta(hours=24)

_TYPE_LABELS = {"buy": "Purchase", "sell": "Sale", "transfer": "Transfer"}


def format_usd(value: float) -> str:
    """Human-scaled USD: $1.23M, $4.56K, $7.89."""
    if value >= 1_000_000:
        return f"${value / 1_000_000:.2f}M"
    if value >= 1_000:
        return f"${value / 1_000:.2f}K"
    return f"${value:.2f}"


def _centralization_alerts(metrics: CentralizationMetrics, now: datetime) -> list[Alert]:
    alerts: list[Alert] = []

    def _add(severity: AlertSeverity, message: str) -> None:
        alerts.append(
            Alert(severity=severity, type="centralization_risk", message=message, timestamp=now)
        )

    top10 = metrics.top10_percentage
    if top10 > 70:
        _add("critical", f"High centralization: Top 10 holders control {top10:.1f}% of supply")
    elif top10 > 50:
        _add("warning", f"Moderate centralization: Top 10 holders control {top10:.1f}% of supply")

    nakamoto = metrics.nakamoto_coefficient
    if nakamoto < 3:
        _add("critical", f"Extreme centralization: Only {nakamoto} holder(s) needed for 51% control")
    elif nakamoto < 5:
        _add("warning", f"High centralization risk: {nakamoto} holders needed for 51% control")

    gini = metrics.gini_coefficient
    if gini > 0.8:
        _add("critical", f"Very high inequality: Gini coefficient of {gini:.3f}")
    elif gini > 0.6:
        _add("warning", f"High inequality: Gini coefficient of {gini:.3f}")

    return alerts


def _large_transfer_alert(tx: WhaleActivity, threshold_usd: float) -> Alert:
    severity: AlertSeverity = (
        "critical" if tx.amount_usd > threshold_usd * CRITICAL_TRANSFER_MULTIPLIER else "warning"
    )
    message = (
        f"Large {_TYPE_LABELS[tx.type]}: {format_usd(tx.amount_usd)} "
        f"({tx.percentage_of_supply:.2f}% of supply)"
    )
    if tx.exchange_detected:
        direction = "to" if tx.type == "sell" else "from"
        message += f" {direction} {tx.exchange_detected}"

    return Alert(
        severity=severity,
        type="large_transfer",
        message=message,
        timestamp=tx.timestamp,
        related_address=tx.from_address,
        data=tx,
    )


def _pattern_alerts(recent_activity: Sequence[WhaleActivity], now: datetime) -> list[Alert]:
    alerts: list[Alert] = []
    recent = [tx for tx in recent_activity if now - tx.timestamp < PATTERN_WINDOW]

    buys = [tx for tx in recent if tx.type == "buy"]
    if len(buys) >= PATTERN_MIN_COUNT:
        total = sum(tx.amount_usd for tx in buys)
        alerts.append(
            Alert(
                severity="info",
                type="accumulation",
                message=(
                    f"Accumulation detected: {len(buys)} large purchases "
                    f"totaling {format_usd(total)} in 24h"
                ),
                timestamp=now,
            )
        )

    sells = [tx for tx in recent if tx.type == "sell"]
    if len(sells) >= PATTERN_MIN_COUNT:
        total = sum(tx.amount_usd for tx in sells)
        alerts.append(
            Alert(
                severity="warning",
                type="distribution",
                message=(
                    f"Distribution detected: {len(sells)} large sales "
                    f"totaling {format_usd(total)} in 24h"
                ),
                timestamp=now,
            )
        )

    return alerts


def sort_alerts(alerts: Sequence[Alert]) -> tuple[Alert, ...]:
    """Stable sort: severity rank ascending, then timestamp descending."""
    by_time = sorted(alerts, key=lambda a: a.timestamp, reverse=True)
    return tuple(sorted(by_time, key=lambda a: SEVERITY_ORDER[a.severity]))


def generate_alerts(
    metrics: CentralizationMetrics,
    recent_activity: Sequence[WhaleActivity],
    alert_threshold_usd: float,
    *,
    now: datetime | None = None,
) -> tuple[Alert, ...]:
    """Build the ordered alert list for one analysis run."""
    evaluated_at = ensure_utc(now)

    alerts = _centralization_alerts(metrics, evaluated_at)
    alerts.extend(
        _large_transfer_alert(tx, alert_threshold_usd)
        for tx in recent_activity
        if tx.amount_usd >= alert_threshold_usd
    )
    alerts.extend(_pattern_alerts(recent_activity, evaluated_at))

    ordered = sort_alerts(alerts)
    if ordered:
        critical = sum(1 for a in ordered if a.severity == "critical")
        logger.debug(f"[ALERTS] {len(ordered)} alerts ({critical} critical)")
    return ordered
