"""
WiFi Optimizer Fallback Source
===============================

Tries several discovery adapters in order and keeps the first snapshot
that contains networks. On macOS the default chain is
``system_profiler`` followed by a CoreWLAN scan; the ``system_profiler``
report lacks BSSIDs, so its interface record is replaced by live
CoreWLAN readings whenever those are available.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from shared.logger import WifiOptLogger

from wifiopt.collectors.base import NetworkSource
from wifiopt.core.models import AssociatedInterface, Band, CollectorError, Snapshot

logger = WifiOptLogger("collectors.fallback")

InterfaceReader = Callable[[], AssociatedInterface]


class FallbackSource(NetworkSource):
    """Chain of sources; the first non-empty snapshot wins.

    The band filter is applied after a source has been chosen, so a
    source is only skipped when it sees no networks at all.

    Args:
        sources: Sources to try, in order.
        interface_reader: Optional callable returning live interface
            readings that override the chosen snapshot's interface.
    """

    name = "auto"

    def __init__(
        self,
        sources: Sequence[NetworkSource],
        interface_reader: Optional[InterfaceReader] = None,
    ) -> None:
        if not sources:
            raise ValueError("FallbackSource needs at least one source")
        self._sources = tuple(sources)
        self._interface_reader = interface_reader

    @property
    def sources(self) -> tuple[NetworkSource, ...]:
        return self._sources

    def collect(self, band: Optional[Band] = None) -> Snapshot:
        errors: list[str] = []
        chosen: Optional[Snapshot] = None

        for source in self._sources:
            try:
                snapshot = source.collect()
            except CollectorError as exc:
                logger.warning("Source %s failed: %s", source.name, exc)
                errors.append(f"{source.name}: {exc}")
                continue
            if snapshot.networks:
                chosen = snapshot
                break
            logger.info("Source %s returned no networks", source.name)
            chosen = chosen or snapshot

        if chosen is None:
            raise CollectorError("No network source succeeded (" + "; ".join(errors) + ")")

        logger.info("Using %s data", chosen.source, networks=len(chosen.networks))
        return self._with_live_interface(chosen).for_band(band)

    def _with_live_interface(self, snapshot: Snapshot) -> Snapshot:
        if self._interface_reader is None:
            return snapshot
        try:
            live = self._interface_reader()
        except CollectorError as exc:
            logger.info("Live interface readings unavailable: %s", exc)
            return snapshot
        return snapshot.model_copy(update={"interface": live})
