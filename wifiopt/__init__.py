"""
WiFi Optimizer -- Channel Recommendation & Network Analysis
=============================================================

Ingests a point-in-time snapshot of nearby wireless access points and
produces a recommended least-congested channel per band, plus a
quality and interference analysis of the currently associated network
with actionable recommendations.

Modules:
    core.engine     -- Orchestration engine
    core.models     -- Pydantic domain models
    collectors      -- Discovery adapters (system_profiler, CoreWLAN, JSON snapshot)
    analyzers       -- Channel recommender and network analyzer
    output          -- Console and report output
    cli             -- Click-based command-line interface

References:
    - IEEE. (2020). IEEE Std 802.11-2020: Wireless LAN MAC and PHY
      Specifications.
    - Wi-Fi Alliance. (2018). WPA3 Specification v1.0.
"""

__version__ = "1.0.0"
