"""
WiFi Optimizer Network Source Interface
========================================

Abstract base for discovery adapters. A source turns whatever the host
offers (an OS tool, a saved file) into a normalised
:class:`~wifiopt.core.models.Snapshot`; the analyzers only ever see the
snapshot.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from wifiopt.core.models import Band, Snapshot


class NetworkSource(ABC):
    """Abstract base for all network discovery backends."""

    #: Short identifier recorded in :attr:`Snapshot.source`.
    name: str = "unknown"

    @abstractmethod
    def collect(self, band: Optional[Band] = None) -> Snapshot:
        """Produce one snapshot, optionally restricted to *band*.

        Raises:
            CollectorError: If the source cannot be read.
        """
