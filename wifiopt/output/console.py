"""
WiFi Optimizer Console Output
==============================

Rich-based console output: the nearby-network listing, per-band
channel recommendations with candidate scores, and the analysis of the
currently associated network.

References:
    - Rich library: https://github.com/Textualize/rich
    - WiFi Optimizer Console: shared.console.WifiOptConsole
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from rich.align import Align
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shared.console import WifiOptConsole

from wifiopt.core.models import (
    Band,
    ChannelRecommendation,
    ChannelScore,
    NetworkAnalysis,
    ObservedNetwork,
    SecurityType,
    Snapshot,
)


# ---------------------------------------------------------------------------
# Colour mappings
# ---------------------------------------------------------------------------

_SEVERITY_COLORS: dict[str, str] = {
    "critical": "bold white on red",
    "high": "bold red",
    "moderate": "bold yellow",
    "low": "bold bright_cyan",
}

_PRIORITY_COLORS: dict[str, str] = {
    "high": "bold red",
    "medium": "bold yellow",
    "low": "bold bright_cyan",
}

_QUALITY_COLORS: dict[str, str] = {
    "excellent": "bold bright_green",
    "good": "bold green",
    "fair": "bold yellow",
    "poor": "bold bright_red",
    "very_poor": "bold red",
}

_CONGESTION_COLORS: dict[str, str] = {
    "low": "bold green",
    "moderate": "bold yellow",
    "high": "bold bright_red",
    "severe": "bold red",
}

_SECURITY_COLORS: dict[SecurityType, str] = {
    SecurityType.WPA3_PERSONAL: "bold bright_green",
    SecurityType.WPA3_ENTERPRISE: "bold bright_green",
    SecurityType.WPA2_WPA3_PERSONAL: "bold green",
    SecurityType.WPA2_PERSONAL: "bold yellow",
    SecurityType.WPA2_ENTERPRISE: "bold green",
    SecurityType.WPA_PERSONAL: "bold bright_red",
    SecurityType.WPA_ENTERPRISE: "bold bright_red",
    SecurityType.WEP: "bold red",
    SecurityType.OPEN: "bold white on red",
    SecurityType.OWE: "bold green",
    SecurityType.UNKNOWN: "dim",
}

_BAND_TITLES: dict[Band, str] = {
    Band.GHZ_2_4: "2.4 GHz",
    Band.GHZ_5: "5 GHz",
    Band.GHZ_6: "6 GHz",
}


def _rssi_color(rssi: int) -> str:
    if rssi >= -50:
        return "bold bright_green"
    if rssi >= -70:
        return "bold yellow"
    return "bold red"


# ---------------------------------------------------------------------------
# Console Output
# ---------------------------------------------------------------------------


class WifiOptConsoleOutput:
    """Formatted display of scan, recommendation and analysis results.

    Usage::

        output = WifiOptConsoleOutput()
        output.display_networks(snapshot, current)
        output.display_recommendation(rec, scores)
        output.display_analysis(analysis)
    """

    def __init__(self, console: Optional[WifiOptConsole] = None) -> None:
        self._console = console or WifiOptConsole()

    def display_banner(self, version: str) -> None:
        self._console.banner(version)

    # ------------------------------------------------------------------ #
    #  Network listing
    # ------------------------------------------------------------------ #

    def display_networks(
        self,
        snapshot: Snapshot,
        current: Optional[ObservedNetwork] = None,
    ) -> None:
        """List observed networks, strongest first; ``*`` marks the current one."""
        self._console.section("Nearby Networks")

        if not snapshot.networks:
            self._console.warning("No networks found")
            return

        table = Table(
            title=f"{len(snapshot.networks)} networks ({snapshot.source})",
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=False,
            padding=(0, 1),
        )
        table.add_column("", width=1)
        table.add_column("SSID", style="bold")
        table.add_column("BSSID", style="dim")
        table.add_column("RSSI", justify="right")
        table.add_column("Noise", justify="right")
        table.add_column("SNR", justify="right")
        table.add_column("Ch", justify="right")
        table.add_column("Band", justify="center")
        table.add_column("Width", justify="right")
        table.add_column("Security")

        for net in sorted_by_signal(snapshot.networks):
            marker = "*" if current is not None and net.id == current.id else ""
            rssi_color = _rssi_color(net.rssi)
            sec_color = _SECURITY_COLORS.get(net.security, "")
            table.add_row(
                f"[bold bright_green]{marker}[/bold bright_green]" if marker else "",
                escape(net.ssid or "<hidden>"),
                escape(net.bssid),
                f"[{rssi_color}]{net.rssi} dBm[/{rssi_color}]",
                f"{net.noise} dBm",
                f"{net.snr} dB",
                str(net.channel),
                net.band.value,
                f"{net.bandwidth_mhz} MHz",
                f"[{sec_color}]{net.security.value}[/{sec_color}]" if sec_color else net.security.value,
            )

        self._console.rich.print(table)
        self._console.blank()

    # ------------------------------------------------------------------ #
    #  Channel recommendation
    # ------------------------------------------------------------------ #

    def display_recommendation(
        self,
        recommendation: ChannelRecommendation,
        channel_scores: dict[Band, Sequence[ChannelScore]],
        bands: Iterable[Band] = (Band.GHZ_2_4, Band.GHZ_5),
    ) -> None:
        """Show the recommended channel and candidate scores per band."""
        self._console.section("Channel Recommendation")

        picks = {
            Band.GHZ_2_4: recommendation.band_2_4,
            Band.GHZ_5: recommendation.band_5,
        }
        for band in bands:
            title = _BAND_TITLES[band]
            best = picks.get(band)
            if best is None:
                self._console.info(f"{title}: no candidate channels")
                continue

            self._console.success(f"{title}: recommended channel {best}")
            scores = channel_scores.get(band, ())
            if not scores:
                continue

            top = max((s.score for s in scores), default=0.0) or 1.0
            table = Table(
                title=f"{title} Candidates",
                border_style="bright_cyan",
                header_style="bold bright_magenta",
                show_lines=False,
                padding=(0, 1),
            )
            table.add_column("Channel", justify="center", width=8)
            table.add_column("Overlaps", justify="center", width=9)
            table.add_column("Interference", width=24)

            for s in scores:
                style = "bold bright_green" if s.channel == best else ""
                bar = self._make_bar(s.score / top, 12)
                table.add_row(
                    f"[{style}]{s.channel}[/{style}]" if style else str(s.channel),
                    str(s.overlaps),
                    f"{bar} {s.score:.2f}",
                )
            self._console.rich.print(table)
            self._console.blank()

    # ------------------------------------------------------------------ #
    #  Analysis
    # ------------------------------------------------------------------ #

    def display_analysis(self, analysis: NetworkAnalysis) -> None:
        """Show score, quality, metrics, interference and recommendations."""
        self._console.section("Current Network Analysis")

        net = analysis.current_network
        if net is None:
            self._console.warning("Not associated with any network")
            return

        quality = analysis.signal_quality.value
        q_color = _QUALITY_COLORS.get(quality, "")
        summary = (
            f"[bold]{escape(net.ssid or net.id)}[/bold]  "
            f"channel {net.channel} ({net.band.value}, {net.bandwidth_mhz} MHz)\n"
            f"RSSI {net.rssi} dBm  |  noise {net.noise} dBm  |  SNR {net.snr} dB\n\n"
            f"Performance score: [bold]{analysis.performance_score:.0f}/100[/bold]  "
            f"{self._make_bar(analysis.performance_score / 100.0, 20)}\n"
            f"Signal quality: [{q_color}]{quality.replace('_', ' ')}[/{q_color}]"
        )
        self._console.rich.print(
            Panel(
                Align.left(Text.from_markup(summary)),
                border_style="bright_cyan",
                padding=(0, 2),
            )
        )
        self._console.blank()

        m = analysis.detailed_metrics
        c_color = _CONGESTION_COLORS.get(m.congestion_level.value, "")
        self._console.table(
            "Detailed Metrics",
            ["Metric", "Value"],
            [
                ("Channel utilization", f"{m.channel_utilization:.0f}%"),
                ("Same-channel networks", m.same_channel_networks),
                ("Overlapping-channel networks", m.overlapping_channels),
                ("Neighboring networks", m.neighboring_networks),
                ("Average neighbor RSSI", f"{m.average_neighbor_rssi:.1f} dBm"),
                (
                    "Congestion",
                    f"[{c_color}]{m.congestion_level.value}[/{c_color}]",
                ),
            ],
            styles=["bold", "bright_white"],
        )
        self._console.blank()

        if analysis.interference_factors:
            table = Table(
                title="Interference Factors",
                border_style="bright_cyan",
                header_style="bold bright_magenta",
                show_lines=True,
                padding=(0, 1),
            )
            table.add_column("Severity", width=10)
            table.add_column("Type")
            table.add_column("Description")
            table.add_column("Impact", ratio=2)
            for f in analysis.interference_factors:
                color = _SEVERITY_COLORS.get(f.severity.value, "")
                table.add_row(
                    f"[{color}]{f.severity.value.upper()}[/{color}]",
                    f.type.value.replace("_", " "),
                    f.description,
                    f.impact,
                )
            self._console.rich.print(table)
            self._console.blank()
        else:
            self._console.success("No interference factors detected")

        if analysis.recommendations:
            table = Table(
                title="Recommendations",
                border_style="bright_cyan",
                header_style="bold bright_magenta",
                show_lines=True,
                padding=(0, 1),
            )
            table.add_column("#", style="dim", width=3, justify="right")
            table.add_column("Priority", width=8)
            table.add_column("Recommendation")
            table.add_column("Expected Improvement")
            for idx, rec in enumerate(analysis.recommendations, start=1):
                color = _PRIORITY_COLORS.get(rec.priority.value, "")
                table.add_row(
                    str(idx),
                    f"[{color}]{rec.priority.value.upper()}[/{color}]",
                    f"[bold]{rec.title}[/bold]\n{rec.description}",
                    rec.expected_improvement,
                )
            self._console.rich.print(table)
            self._console.blank()

        if analysis.has_critical_factor:
            self._console.critical("Connection quality is critically degraded")

    # ------------------------------------------------------------------ #
    #  Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _make_bar(value: float, width: int = 10) -> str:
        """Text bar for a value in [0.0, 1.0]."""
        value = min(1.0, max(0.0, value))
        filled = int(round(value * width))
        return "█" * filled + "░" * (width - filled)


def sorted_by_signal(networks: Iterable[ObservedNetwork]) -> list[ObservedNetwork]:
    """Networks ordered by RSSI, strongest first (stable for equal RSSI)."""
    return sorted(networks, key=lambda n: n.rssi, reverse=True)
