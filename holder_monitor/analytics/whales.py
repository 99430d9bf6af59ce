"""Whale classification and holder distribution tiers.

Two separate notions of "whale" live here:
- ``identify_whales``: holders above a USD *or* percentage-of-supply threshold.
- ``analyze_distribution``: the fixed >=5%-of-supply tier.
"""

from collections.abc import Sequence
from datetime import datetime

from loguru import logger

from holder_monitor.analytics.concentration import clean_balance, valid_supply
from holder_monitor.analytics.labels import (
    DEFAULT_KNOWN_ENTITIES,
    KnownEntities,
    lookup_entity,
)
from holder_monitor.models.analysis import (
    DistributionAnalysis,
    DistributionBucket,
    WhaleHolder,
)
from holder_monitor.models.holder import Holder, TokenInfo
from holder_monitor.utils.clock import ensure_utc
from holder_monitor.utils.rounding import round_half_up

# Tier upper bounds in % of supply (exclusive); anything above is the whale tier
RETAIL_MAX_PCT = 0.01
SMALL_MAX_PCT = 0.1
MEDIUM_MAX_PCT = 1.0
LARGE_MAX_PCT = 5.0


def _percent_of_supply(balance: float, total_supply: float) -> float:
    if not valid_supply(total_supply):
        return 0.0
    return clean_balance(balance) * 100 / total_supply


def identify_whales(
    holders: Sequence[Holder],
    usd_threshold: float,
    percent_threshold: float,
    token_info: TokenInfo,
    *,
    known_entities: KnownEntities | None = None,
    now: datetime | None = None,
) -> tuple[WhaleHolder, ...]:
    """Holders worth at least ``usd_threshold`` OR holding ``percent_threshold``% of supply.

    Sorted by balance descending (stable) and ranked from 1. Labels and tags
    come from ``known_entities``; unknown addresses stay unlabeled.
    """
    entities = DEFAULT_KNOWN_ENTITIES if known_entities is None else known_entities
    evaluated_at = ensure_utc(now)
    price = token_info.current_price_usd
    # Without a usable supply only the USD branch can qualify
    check_percent = valid_supply(token_info.total_supply)

    qualifying = []
    for holder in holders:
        balance = clean_balance(holder.balance)
        usd_value = balance * price
        pct = _percent_of_supply(balance, token_info.total_supply)
        if usd_value >= usd_threshold or (check_percent and pct >= percent_threshold):
            qualifying.append(holder)

    qualifying.sort(key=lambda h: clean_balance(h.balance), reverse=True)

    whales = []
    for rank, holder in enumerate(qualifying, 1):
        balance = clean_balance(holder.balance)
        entity = lookup_entity(holder.address, entities)
        tags = entity.tags if entity is not None else frozenset()
        is_contract = holder.is_contract
        if is_contract is None:
            is_contract = "contract" in tags

        whales.append(
            WhaleHolder(
                address=holder.address,
                balance=balance,
                balance_usd=balance * price,
                percentage_of_supply=round_half_up(
                    _percent_of_supply(balance, token_info.total_supply), 2
                ),
                rank=rank,
                label=entity.label if entity is not None else None,
                tags=tags,
                first_seen=holder.first_seen or evaluated_at,
                last_activity=holder.last_activity or evaluated_at,
                is_contract=is_contract,
            )
        )

    if whales:
        labeled = sum(1 for w in whales if w.label)
        logger.debug(
            f"[WHALES] {token_info.symbol or token_info.address}: "
            f"{len(whales)}/{len(holders)} holders above "
            f"${usd_threshold:,.0f} or {percent_threshold}% ({labeled} labeled)"
        )

    return tuple(whales)


def analyze_distribution(
    holders: Sequence[Holder], token_info: TokenInfo
) -> DistributionAnalysis:
    """Bucket every holder into retail/small/medium/large/whale tiers by % of supply."""
    total_supply = token_info.total_supply
    counts = [0, 0, 0, 0, 0]
    sums = [0.0, 0.0, 0.0, 0.0, 0.0]

    for holder in holders:
        balance = clean_balance(holder.balance)
        pct = _percent_of_supply(balance, total_supply)

        if pct < RETAIL_MAX_PCT:
            tier = 0
        elif pct < SMALL_MAX_PCT:
            tier = 1
        elif pct < MEDIUM_MAX_PCT:
            tier = 2
        elif pct < LARGE_MAX_PCT:
            tier = 3
        else:
            tier = 4

        counts[tier] += 1
        sums[tier] += balance

    def _bucket(tier: int) -> DistributionBucket:
        pct = sums[tier] * 100 / total_supply if valid_supply(total_supply) else 0.0
        return DistributionBucket(count=counts[tier], total_percentage=round_half_up(pct, 2))

    return DistributionAnalysis(
        retail_holders=_bucket(0),
        small_holders=_bucket(1),
        medium_holders=_bucket(2),
        large_holders=_bucket(3),
        whales=_bucket(4),
    )
