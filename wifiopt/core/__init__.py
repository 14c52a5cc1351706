"""
WiFi Optimizer Core
====================

Domain models. The orchestration engine lives in :mod:`wifiopt.core.engine`.
"""

from wifiopt.core.models import (
    AssociatedInterface,
    Band,
    ChannelRecommendation,
    ChannelScore,
    CollectorError,
    CongestionLevel,
    DetailedMetrics,
    EvaluationResult,
    InterferenceFactor,
    InterferenceType,
    NetworkAnalysis,
    ObservedNetwork,
    Priority,
    Recommendation,
    RecommendationType,
    SecurityType,
    Severity,
    SignalQuality,
    Snapshot,
    WifiOptError,
)

__all__ = [
    "AssociatedInterface",
    "Band",
    "ChannelRecommendation",
    "ChannelScore",
    "CollectorError",
    "CongestionLevel",
    "DetailedMetrics",
    "EvaluationResult",
    "InterferenceFactor",
    "InterferenceType",
    "NetworkAnalysis",
    "ObservedNetwork",
    "Priority",
    "Recommendation",
    "RecommendationType",
    "SecurityType",
    "Severity",
    "SignalQuality",
    "Snapshot",
    "WifiOptError",
]
