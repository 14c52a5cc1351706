"""
WiFi Optimizer Analyzers
=========================

Pure, stateless scoring logic.

Modules:
    channel  -- Least-congested channel recommendation per band
    network  -- Performance, interference and recommendation analysis
"""

from wifiopt.analyzers.channel import ChannelRecommender
from wifiopt.analyzers.network import NetworkAnalyzer

__all__ = [
    "ChannelRecommender",
    "NetworkAnalyzer",
]
