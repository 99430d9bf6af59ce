from holder_monitor.models.analysis import (
    Alert,
    AnalysisMetadata,
    CentralizationMetrics,
    DistributionAnalysis,
    DistributionBucket,
    EnhancedRiskScore,
    HolderAnalysis,
    HolderTrends,
    RiskBreakdown,
    RiskFactor,
    WhaleHolder,
)
from holder_monitor.models.holder import EntityLabel, Holder, TokenInfo, WhaleActivity

__all__ = [
    "Holder",
    "TokenInfo",
    "WhaleActivity",
    "EntityLabel",
    "CentralizationMetrics",
    "WhaleHolder",
    "DistributionBucket",
    "DistributionAnalysis",
    "Alert",
    "RiskFactor",
    "RiskBreakdown",
    "EnhancedRiskScore",
    "HolderTrends",
    "AnalysisMetadata",
    "HolderAnalysis",
]
