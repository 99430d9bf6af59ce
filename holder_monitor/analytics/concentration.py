"""Concentration metrics: Gini, HHI, Nakamoto, top-N share, composite score.

All functions are pure. Degenerate input (no holders, non-positive supply,
negative or non-finite balances) yields 0 rather than an exception.
"""

import math
from collections.abc import Sequence

from loguru import logger

from holder_monitor.models.analysis import CentralizationMetrics, RiskLevel
from holder_monitor.models.holder import Holder
from holder_monitor.utils.rounding import round_half_up

NAKAMOTO_MAJORITY = 0.51

# Composite score weights (sum to 1.0)
TOP10_WEIGHT = 0.30
GINI_WEIGHT = 0.25
NAKAMOTO_WEIGHT = 0.20
WHALE_DENSITY_WEIGHT = 0.15
HHI_WEIGHT = 0.10


def clean_balance(balance: float) -> float:
    """Negative and non-finite balances count as empty."""
    if not math.isfinite(balance) or balance < 0:
        return 0.0
    return balance


def valid_supply(total_supply: float) -> bool:
    return math.isfinite(total_supply) and total_supply > 0


def _balances(holders: Sequence[Holder]) -> list[float]:
    return [clean_balance(h.balance) for h in holders]


def calculate_gini_coefficient(holders: Sequence[Holder]) -> float:
    """Gini coefficient of the balances, 0 (equal) to 1 (one holder owns all).

    G = 2·Σ(i·b_i) / (n·Σb_i) − (n+1)/n over balances sorted ascending, i 1-based.
    """
    balances = sorted(_balances(holders))
    n = len(balances)
    if n == 0:
        return 0.0

    total = sum(balances)
    if total == 0:
        return 0.0

    weighted = sum(i * b for i, b in enumerate(balances, 1))
    gini = (2 * weighted) / (n * total) - (n + 1) / n
    return round_half_up(gini, 3)


def calculate_hhi(holders: Sequence[Holder], total_supply: float) -> int:
    """Herfindahl-Hirschman Index over percentage shares of supply (0-10000).

    < 1500 unconcentrated, 1500-2500 moderate, > 2500 highly concentrated.
    """
    if not valid_supply(total_supply):
        return 0

    hhi = 0.0
    for balance in _balances(holders):
        share = balance * 100 / total_supply
        hhi += share * share
    return int(round_half_up(hhi))


def calculate_nakamoto_coefficient(holders: Sequence[Holder], total_supply: float) -> int:
    """Minimum number of holders that together reach 51% of supply.

    If the snapshot never reaches the threshold, every holder is counted.
    """
    if not valid_supply(total_supply) or not holders:
        return 0

    threshold = total_supply * NAKAMOTO_MAJORITY
    running = 0.0
    count = 0
    for balance in sorted(_balances(holders), reverse=True):
        running += balance
        count += 1
        if running >= threshold:
            break
    return count


def calculate_top_n_percentage(
    holders: Sequence[Holder], n: int, total_supply: float
) -> float:
    """Percentage of supply held by the ``n`` largest holders."""
    if not valid_supply(total_supply) or not holders or n <= 0:
        return 0.0

    top = sorted(_balances(holders), reverse=True)[:n]
    return round_half_up(sum(top) * 100 / total_supply, 2)


def calculate_centralization_score(
    *,
    gini: float,
    hhi: int,
    nakamoto: int,
    top10: float,
    whale_count: int,
    total_holders: int,
) -> float:
    """Composite 0-100 score, higher = more centralized.

    - Top-10 concentration: 30%
    - Gini ×100: 25%
    - Nakamoto (inverted, 100 − 2n, floor 0): 20%
    - Whale density (×10 for sensitivity, cap 100): 15%
    - HHI scaled to 0-100: 10%
    """
    top10_score = min(top10, 100.0)
    gini_score = gini * 100
    nakamoto_score = max(0.0, 100.0 - nakamoto * 2)

    whale_pct = whale_count / total_holders * 100 if total_holders > 0 else 0.0
    whale_score = min(whale_pct * 10, 100.0)

    hhi_score = min(hhi / 10_000 * 100, 100.0)

    score = (
        top10_score * TOP10_WEIGHT
        + gini_score * GINI_WEIGHT
        + nakamoto_score * NAKAMOTO_WEIGHT
        + whale_score * WHALE_DENSITY_WEIGHT
        + hhi_score * HHI_WEIGHT
    )
    return round_half_up(score, 2)


def determine_risk_level(score: float) -> RiskLevel:
    """Map a 0-100 score to a tier. Lower bounds are inclusive."""
    if score >= 75:
        return "critical"
    if score >= 50:
        return "high"
    if score >= 25:
        return "medium"
    return "low"


def calculate_centralization_metrics(
    holders: Sequence[Holder],
    total_supply: float,
    whale_count: int,
) -> CentralizationMetrics:
    """Compute every concentration metric for one snapshot.

    ``whale_count`` comes from the whale classifier and is used as-is.
    """
    if not valid_supply(total_supply):
        logger.debug(
            f"[METRICS] total_supply={total_supply} is not positive, "
            f"percentage metrics degrade to 0"
        )

    gini = calculate_gini_coefficient(holders)
    hhi = calculate_hhi(holders, total_supply)
    nakamoto = calculate_nakamoto_coefficient(holders, total_supply)
    top10 = calculate_top_n_percentage(holders, 10, total_supply)
    top50 = calculate_top_n_percentage(holders, 50, total_supply)
    top100 = calculate_top_n_percentage(holders, 100, total_supply)

    score = calculate_centralization_score(
        gini=gini,
        hhi=hhi,
        nakamoto=nakamoto,
        top10=top10,
        whale_count=whale_count,
        total_holders=len(holders),
    )

    return CentralizationMetrics(
        gini_coefficient=gini,
        herfindahl_index=hhi,
        nakamoto_coefficient=nakamoto,
        top10_percentage=top10,
        top50_percentage=top50,
        top100_percentage=top100,
        centralization_score=score,
        risk_level=determine_risk_level(score),
    )
