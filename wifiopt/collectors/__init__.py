"""
WiFi Optimizer Collectors
==========================

Discovery adapters that produce normalised snapshots.

Modules:
    base             -- NetworkSource abstract interface
    system_profiler  -- macOS ``system_profiler`` text report parser
    corewlan         -- macOS CoreWLAN scan and live interface readings
    fallback         -- Ordered chain of sources
    snapshot_file    -- JSON snapshot loader
    resolver         -- Current-network matching and enrichment
"""

from wifiopt.collectors.base import NetworkSource
from wifiopt.collectors.corewlan import CoreWLANSource
from wifiopt.collectors.fallback import FallbackSource
from wifiopt.collectors.resolver import (
    enrich_snapshot,
    normalize_ssid,
    resolve_current_network,
)
from wifiopt.collectors.snapshot_file import SnapshotFileSource
from wifiopt.collectors.system_profiler import (
    SystemProfilerSource,
    parse_system_profiler_output,
)

__all__ = [
    "CoreWLANSource",
    "FallbackSource",
    "NetworkSource",
    "SnapshotFileSource",
    "SystemProfilerSource",
    "enrich_snapshot",
    "normalize_ssid",
    "parse_system_profiler_output",
    "resolve_current_network",
]
