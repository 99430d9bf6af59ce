"""Pydantic models produced by the analytics.

Every result is frozen and built fresh per call, so a report can be handed to
any number of consumers (JSON responses, formatters) without copying.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from holder_monitor.models.holder import TokenInfo, WhaleActivity
from holder_monitor.utils.rounding import round_half_up

RiskLevel = Literal["low", "medium", "high", "critical"]
AlertSeverity = Literal["info", "warning", "critical"]
AlertType = Literal[
    "large_transfer", "accumulation", "distribution", "new_whale", "centralization_risk"
]
AccumulationTrend = Literal["accumulating", "distributing", "stable"]


class CentralizationMetrics(BaseModel):
    """Concentration metrics for one holder snapshot."""

    gini_coefficient: float
    herfindahl_index: int
    nakamoto_coefficient: int
    top10_percentage: float
    top50_percentage: float
    top100_percentage: float
    centralization_score: float
    risk_level: RiskLevel

    model_config = {"frozen": True}

    @property
    def hhi_band(self) -> str:
        """Narrative HHI band. Not used for scoring."""
        if self.herfindahl_index > 2500:
            return "high"
        if self.herfindahl_index >= 1500:
            return "moderate"
        return "unconcentrated"


class WhaleHolder(BaseModel):
    """A holder that passed the USD/percentage whale thresholds."""

    address: str
    balance: float
    balance_usd: float
    percentage_of_supply: float
    rank: int  # 1-based, by descending balance
    label: str | None = None
    tags: frozenset[str] = frozenset()
    first_seen: datetime
    last_activity: datetime
    is_contract: bool = False

    model_config = {"frozen": True}

    @property
    def is_exchange(self) -> bool:
        return "exchange" in self.tags or "cex" in self.tags


class DistributionBucket(BaseModel):
    count: int = 0
    total_percentage: float = 0.0

    model_config = {"frozen": True}


class DistributionAnalysis(BaseModel):
    """Holders split into five tiers by share of supply.

    ``whales`` here is the >=5% tier, unrelated to the whale classifier.
    """

    retail_holders: DistributionBucket
    small_holders: DistributionBucket
    medium_holders: DistributionBucket
    large_holders: DistributionBucket
    whales: DistributionBucket

    model_config = {"frozen": True}

    @property
    def covered_percentage(self) -> float:
        """Share of total supply held by the analysed holders."""
        return round_half_up(
            sum(
                bucket.total_percentage
                for bucket in (
                    self.retail_holders,
                    self.small_holders,
                    self.medium_holders,
                    self.large_holders,
                    self.whales,
                )
            ),
            2,
        )


class Alert(BaseModel):
    severity: AlertSeverity
    type: AlertType
    message: str
    timestamp: datetime
    related_address: str | None = None
    data: WhaleActivity | None = None

    model_config = {"frozen": True}


class RiskFactor(BaseModel):
    """One weighted component of the enhanced risk score."""

    score: float
    weight: float
    factors: tuple[str, ...] = ()

    model_config = {"frozen": True}


class RiskBreakdown(BaseModel):
    centralization_risk: RiskFactor
    whale_behavior_risk: RiskFactor
    exchange_concentration_risk: RiskFactor
    transfer_pattern_risk: RiskFactor

    model_config = {"frozen": True}


class EnhancedRiskScore(BaseModel):
    overall_score: float
    risk_level: RiskLevel
    breakdown: RiskBreakdown
    warnings: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    policy_version: str = ""

    model_config = {"frozen": True}


class HolderTrends(BaseModel):
    """Activity-derived trend summary.

    Holder-count deltas stay None unless the caller supplies prior counts.
    """

    holder_count_change_24h: int | None = None
    holder_count_change_7d: int | None = None
    whale_accumulation_trend: AccumulationTrend = "stable"
    net_flow_24h_usd: float = 0.0

    model_config = {"frozen": True}


class AnalysisMetadata(BaseModel):
    last_updated: datetime
    data_sources: tuple[str, ...] = ()
    policy_version: str = ""
    block_height: int | None = None

    model_config = {"frozen": True}


class HolderAnalysis(BaseModel):
    """Full report for one token snapshot."""

    token_info: TokenInfo
    centralization_metrics: CentralizationMetrics
    whale_holders: tuple[WhaleHolder, ...]
    recent_whale_activity: tuple[WhaleActivity, ...]
    distribution_analysis: DistributionAnalysis
    alerts: tuple[Alert, ...]
    holder_trends: HolderTrends
    enhanced_risk_score: EnhancedRiskScore
    metadata: AnalysisMetadata

    model_config = {"frozen": True}
