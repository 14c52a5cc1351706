"""
WiFi Optimizer system_profiler Collector
=========================================

Discovery adapter for macOS. Runs ``system_profiler SPAirPortDataType``
and parses its indented text report into a snapshot.

The relevant part of the report looks like::

    Wi-Fi:
      ...
      Interfaces:
        en0:
          ...
          Current Network Information:
            HomeNet:
              PHY Mode: 802.11ac
              Channel: 36 (5GHz, 80MHz)
              Security: WPA2 Personal
              Signal / Noise: -56 dBm / -91 dBm
          Other Local Wi-Fi Networks:
            Neighbour:
              Channel: 6 (2GHz, 20MHz)
              Security: WPA2 Personal
              Signal / Noise: -71 dBm / -92 dBm

``system_profiler`` does not report BSSIDs, so the network name is used
as both id and BSSID. The entry under "Current Network Information"
also becomes the snapshot's associated interface.

References:
    - Apple. system_profiler(8) manual page.
"""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass, field
from typing import Optional

from shared.logger import WifiOptLogger

from wifiopt.collectors.base import NetworkSource
from wifiopt.core.models import (
    AssociatedInterface,
    Band,
    CollectorError,
    ObservedNetwork,
    SecurityType,
    Snapshot,
)

logger = WifiOptLogger("collectors.system_profiler")


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_DATA_TYPE = "SPAirPortDataType"

_CURRENT_HEADER = "Current Network Information:"
_OTHER_HEADER = "Other Local Wi-Fi Networks:"

_DEFAULT_DBM = -100
_DEFAULT_CHANNEL = 0
_DEFAULT_BAND = Band.GHZ_2_4
_DEFAULT_WIDTH_MHZ = 20

_DBM_RE = re.compile(r"(-?\d+)\s*dBm")
_CHANNEL_RE = re.compile(r"^\s*(\d+)")
_CHANNEL_DETAIL_RE = re.compile(r"\(([^,()]+),\s*(\d+)\s*MHz\)", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class _Entry:
    name: str
    current: bool
    properties: dict[str, str] = field(default_factory=dict)


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def parse_signal_noise(value: str) -> tuple[int, int]:
    """Parse ``"-56 dBm / -91 dBm"`` into ``(rssi, noise)``.

    Missing readings default to -100 dBm.
    """
    readings = [int(m) for m in _DBM_RE.findall(value)]
    rssi = readings[0] if len(readings) > 0 else _DEFAULT_DBM
    noise = readings[1] if len(readings) > 1 else _DEFAULT_DBM
    return rssi, noise


def parse_channel(value: str) -> tuple[int, Band, int]:
    """Parse ``"36 (5GHz, 80MHz)"`` into ``(channel, band, width)``.

    Unparseable parts fall back to channel 0, 2.4 GHz and 20 MHz.
    """
    channel = _DEFAULT_CHANNEL
    band = _DEFAULT_BAND
    width = _DEFAULT_WIDTH_MHZ

    m = _CHANNEL_RE.match(value)
    if m:
        channel = int(m.group(1))

    detail = _CHANNEL_DETAIL_RE.search(value)
    if detail:
        try:
            band = Band.from_label(detail.group(1))
        except ValueError:
            logger.debug("Unrecognised band label %r", detail.group(1))
        width = int(detail.group(2))

    return channel, band, width


def _to_network(entry: _Entry) -> ObservedNetwork:
    rssi, noise = parse_signal_noise(entry.properties.get("Signal / Noise", ""))
    channel, band, width = parse_channel(entry.properties.get("Channel", ""))
    return ObservedNetwork(
        id=entry.name,
        ssid=entry.name,
        bssid=entry.name,
        rssi=rssi,
        noise=noise,
        channel=channel,
        band=band,
        bandwidth_mhz=width,
        security=SecurityType.from_label(entry.properties.get("Security", "")),
    )


def parse_system_profiler_output(text: str) -> Snapshot:
    """Parse the text report of ``system_profiler SPAirPortDataType``.

    Networks are listed in report order: the current network first
    (when associated), then the other local networks. A line indented
    at or above a section header closes the section.

    Args:
        text: Complete command output.

    Returns:
        Snapshot with ``source="system_profiler"``.
    """
    entries: list[_Entry] = []
    section: Optional[str] = None
    section_indent = 0
    entry: Optional[_Entry] = None
    entry_indent = 0

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        indent = _indent(line)

        if stripped in (_CURRENT_HEADER, _OTHER_HEADER):
            section = stripped
            section_indent = indent
            entry = None
            continue

        if section is None:
            continue

        if indent <= section_indent:
            section = None
            entry = None
            continue

        if stripped.endswith(":") and (entry is None or indent <= entry_indent):
            entry = _Entry(name=stripped[:-1], current=section == _CURRENT_HEADER)
            entry_indent = indent
            entries.append(entry)
            continue

        if entry is not None and ": " in stripped:
            key, value = stripped.split(": ", 1)
            entry.properties[key] = value

    parsed = [(e.current, _to_network(e)) for e in entries if e.properties]
    networks = tuple(net for _, net in parsed)

    interface: Optional[AssociatedInterface] = None
    current = next((net for is_current, net in parsed if is_current), None)
    if current is not None:
        interface = AssociatedInterface(
            ssid=current.ssid,
            bssid=current.bssid,
            rssi=current.rssi,
            noise=current.noise,
            channel=current.channel,
            band=current.band,
            bandwidth_mhz=current.bandwidth_mhz,
        )

    logger.debug(
        "Parsed system_profiler output",
        networks=len(networks),
        associated=interface is not None,
    )
    return Snapshot(networks=networks, interface=interface, source="system_profiler")


# ---------------------------------------------------------------------------
# Source
# ---------------------------------------------------------------------------


class SystemProfilerSource(NetworkSource):
    """Collect networks by running ``system_profiler`` (macOS only).

    Args:
        executable: Path to the ``system_profiler`` binary.
        timeout: Seconds to wait for the command to finish.
    """

    name = "system_profiler"

    def __init__(
        self,
        executable: str = "/usr/sbin/system_profiler",
        timeout: int = 30,
    ) -> None:
        self._executable = executable
        self._timeout = timeout

    def collect(self, band: Optional[Band] = None) -> Snapshot:
        with logger.timed("system_profiler scan"):
            text = self._run()
        return parse_system_profiler_output(text).for_band(band)

    def _run(self) -> str:
        cmd = [self._executable, _DATA_TYPE]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise CollectorError(
                f"system_profiler not found at {self._executable}"
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise CollectorError(
                f"system_profiler timed out after {self._timeout}s"
            ) from exc
        except OSError as exc:
            raise CollectorError(f"Failed to run system_profiler: {exc}") from exc

        if result.returncode != 0:
            raise CollectorError(
                f"system_profiler exited with status {result.returncode}: "
                f"{result.stderr.strip()}"
            )
        return result.stdout
