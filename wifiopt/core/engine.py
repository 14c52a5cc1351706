"""
WiFi Optimizer Engine
======================

Central orchestration for the WiFi Optimizer. Coordinates discovery
adapters, the pure analyzers and the output generators.

The engine follows a pipeline architecture:
    1. Collection: Obtain a snapshot from a network source
    2. Resolution: Enrich the snapshot and locate the current network
    3. Analysis: Channel recommendation and current-network analysis
    4. Output: Console display and optional JSON report

Only steps 1 and 4 touch the outside world; :meth:`WifiOptEngine.evaluate`
is a pure function of its snapshot.

References:
    - Evans, E. (2003). Domain-Driven Design. Addison-Wesley.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional

from shared.config import ConfigurationError, WifiOptConfig
from shared.console import WifiOptConsole
from shared.logger import WifiOptLogger

from wifiopt import __version__
from wifiopt.analyzers.channel import ChannelRecommender
from wifiopt.analyzers.network import NetworkAnalyzer
from wifiopt.collectors.base import NetworkSource
from wifiopt.collectors.corewlan import CoreWLANSource
from wifiopt.collectors.fallback import FallbackSource
from wifiopt.collectors.resolver import enrich_snapshot, resolve_current_network
from wifiopt.collectors.snapshot_file import SnapshotFileSource
from wifiopt.collectors.system_profiler import SystemProfilerSource
from wifiopt.core.models import Band, CollectorError, EvaluationResult, Snapshot
from wifiopt.output.console import WifiOptConsoleOutput
from wifiopt.output.report import WifiOptReportGenerator

logger = WifiOptLogger("core.engine")

# Bands the channel recommender plans for
RECOMMENDED_BANDS: tuple[Band, ...] = (Band.GHZ_2_4, Band.GHZ_5)


class WifiOptEngine:
    """Orchestrates collection, evaluation and output.

    Usage::

        engine = WifiOptEngine()
        source = engine.build_source(snapshot_path="scan.json")
        result = engine.run(source, output_path="report.json")
    """

    def __init__(
        self,
        config: Optional[WifiOptConfig] = None,
        console: Optional[WifiOptConsole] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Configuration. Uses defaults if None.
            console: WifiOptConsole for output. Creates new if None.
        """
        self._config = config or WifiOptConfig()
        self._console = console or WifiOptConsole()
        self._output = WifiOptConsoleOutput(self._console)

        self._recommender = ChannelRecommender()
        self._analyzer = NetworkAnalyzer()

        self._report_gen = WifiOptReportGenerator(
            indent=self._config.report.indent,
            include_channel_scores=self._config.report.include_channel_scores,
        )

    # ------------------------------------------------------------------ #
    #  Sources
    # ------------------------------------------------------------------ #

    def build_source(self, snapshot_path: Optional[str | Path] = None) -> NetworkSource:
        """Return the snapshot-file source if *snapshot_path* is given,
        otherwise the source named by ``scanner.source``.

        ``auto`` chains ``system_profiler`` and CoreWLAN, and takes live
        interface readings from CoreWLAN when it is available.
        """
        if snapshot_path is not None:
            return SnapshotFileSource(snapshot_path)

        scanner = self._config.scanner
        if scanner.source == "snapshot":
            raise ConfigurationError("scanner.source = 'snapshot' requires a snapshot path")
        if scanner.source == "corewlan":
            return CoreWLANSource()

        profiler = SystemProfilerSource(
            executable=scanner.system_profiler_path,
            timeout=scanner.timeout,
        )
        if scanner.source == "system_profiler":
            return profiler

        corewlan = CoreWLANSource()
        return FallbackSource([profiler, corewlan], interface_reader=corewlan.read_interface)

    def default_band(self) -> Optional[Band]:
        """Band filter from ``scanner.default_band`` (``None`` for all)."""
        label = self._config.scanner.default_band
        return Band.from_label(label) if label else None

    def collect(self, source: NetworkSource, band: Optional[Band] = None) -> Snapshot:
        """Collect one snapshot.

        Raises:
            CollectorError: Propagated from the source.
        """
        with self._console.status(f"Scanning with {source.name}..."):
            with logger.operation("collect"):
                snapshot = source.collect(band)
        logger.info(
            "Snapshot collected",
            source=snapshot.source,
            networks=len(snapshot.networks),
            band=band.value if band else None,
        )
        return snapshot

    # ------------------------------------------------------------------ #
    #  Evaluation
    # ------------------------------------------------------------------ #

    def evaluate(self, snapshot: Snapshot) -> EvaluationResult:
        """Run both analyzers over *snapshot*.

        The snapshot is first enriched with the interface identity and
        the current network is resolved; neither analyzer sees the
        interface record itself.
        """
        with logger.timed("evaluate"):
            enriched = enrich_snapshot(snapshot)
            nets = enriched.networks
            current = resolve_current_network(nets, enriched.interface)

            recommendation = self._recommender.recommend(nets)
            channel_scores = {
                band: tuple(self._recommender.score_channels(band, nets))
                for band in RECOMMENDED_BANDS
            }
            analysis = self._analyzer.analyze(current, nets)

        return EvaluationResult(
            snapshot=enriched,
            current_network=current,
            recommendation=recommendation,
            channel_scores=channel_scores,
            analysis=analysis,
        )

    # ------------------------------------------------------------------ #
    #  Commands
    # ------------------------------------------------------------------ #

    def scan(self, source: NetworkSource, band: Optional[Band] = None) -> EvaluationResult:
        """Collect and list networks with the current one marked."""
        result = self.evaluate(self.collect(source, band))
        self._output.display_networks(result.snapshot, result.current_network)
        return result

    def watch(
        self,
        source: NetworkSource,
        band: Optional[Band] = None,
        interval: Optional[float] = None,
        max_scans: Optional[int] = None,
    ) -> int:
        """Re-scan every *interval* seconds until interrupted.

        A failing scan is reported and the loop carries on with the next
        one. ``KeyboardInterrupt`` propagates to the caller.

        Args:
            source: Network source to collect from.
            band: Optional band filter.
            interval: Seconds between scans; defaults to ``scanner.interval``.
            max_scans: Stop after this many scans (``None`` for no limit).

        Returns:
            Number of scans attempted.
        """
        delay = interval if interval is not None else self._config.scanner.interval
        scans = 0
        while max_scans is None or scans < max_scans:
            scans += 1
            try:
                self.scan(source, band)
            except CollectorError as exc:
                logger.warning("Scan %d failed: %s", scans, exc)
                self._console.error(str(exc))
            if max_scans is not None and scans >= max_scans:
                break
            time.sleep(delay)
        return scans

    def recommend(
        self, source: NetworkSource, band: Optional[Band] = None
    ) -> EvaluationResult:
        """Collect and show the per-band channel recommendation."""
        result = self.evaluate(self.collect(source, band))
        bands = (band,) if band is not None else RECOMMENDED_BANDS
        self._output.display_recommendation(
            result.recommendation, result.channel_scores, bands
        )
        return result

    def run(
        self,
        source: NetworkSource,
        band: Optional[Band] = None,
        output_path: Optional[str | Path] = None,
    ) -> EvaluationResult:
        """Full pipeline: collect, evaluate, display and optionally report.

        Args:
            source: Network source to collect from.
            band: Optional band filter applied at collection.
            output_path: Optional JSON report path.

        Returns:
            The evaluation result.
        """
        self._output.display_banner(__version__)
        result = self.evaluate(self.collect(source, band))

        self._output.display_networks(result.snapshot, result.current_network)
        self._output.display_recommendation(result.recommendation, result.channel_scores)
        self._output.display_analysis(result.analysis)

        if output_path is not None:
            path = self._report_gen.generate_json(result, self._report_path(output_path))
            self._console.info(f"JSON report: {path}")

        return result

    def _report_path(self, output_path: str | Path) -> Path:
        """Place bare file names under ``global.output_dir``."""
        path = Path(output_path)
        if path.is_absolute() or path.parent != Path("."):
            return path
        return Path(self._config.global_settings.output_dir) / path
