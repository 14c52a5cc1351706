"""
WiFi Optimizer CoreWLAN Collector
==================================

Discovery adapter backed by Apple's CoreWLAN framework through PyObjC
(``pyobjc-framework-CoreWLAN``). Unlike ``system_profiler`` it reports
real BSSIDs and exact channel widths, and it is the only way to read
the live associated-interface values (RSSI, noise, BSSID).

Scanning may require Location Services permission on recent macOS
releases; without it SSIDs and BSSIDs come back empty.

References:
    - Apple. CoreWLAN Framework Reference. CWWiFiClient, CWInterface,
      CWNetwork, CWChannel.
    - PyObjC. https://pyobjc.readthedocs.io/
"""

from __future__ import annotations

import uuid
from typing import Any, Optional

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

logger = WifiOptLogger("collectors.corewlan")


# ---------------------------------------------------------------------------
# Framework constants (resolved by name on the loaded module)
# ---------------------------------------------------------------------------

_BANDS: tuple[tuple[str, Band], ...] = (
    ("kCWChannelBand2GHz", Band.GHZ_2_4),
    ("kCWChannelBand5GHz", Band.GHZ_5),
    ("kCWChannelBand6GHz", Band.GHZ_6),
)

_WIDTHS: tuple[tuple[str, int], ...] = (
    ("kCWChannelWidth20MHz", 20),
    ("kCWChannelWidth40MHz", 40),
    ("kCWChannelWidth80MHz", 80),
    ("kCWChannelWidth160MHz", 160),
)

# Strongest first; the first supported mode wins
_SECURITY_PREFERENCE: tuple[tuple[str, SecurityType], ...] = (
    ("kCWSecurityEnterprise", SecurityType.WPA3_ENTERPRISE),
    ("kCWSecurityWPA2Enterprise", SecurityType.WPA2_ENTERPRISE),
    ("kCWSecurityWPAEnterprise", SecurityType.WPA_ENTERPRISE),
    ("kCWSecurityPersonal", SecurityType.WPA3_PERSONAL),
    ("kCWSecurityWPA2Personal", SecurityType.WPA2_PERSONAL),
    ("kCWSecurityWPAPersonalMixed", SecurityType.WPA2_PERSONAL),
    ("kCWSecurityWPAPersonal", SecurityType.WPA_PERSONAL),
    ("kCWSecurityDynamicWEP", SecurityType.WEP),
    ("kCWSecurityNone", SecurityType.OPEN),
)

_DEFAULT_WIDTH_MHZ = 20


def _load_corewlan() -> Any:
    """Import the PyObjC CoreWLAN bindings.

    Raises:
        CollectorError: On hosts without the framework or the bindings.
    """
    try:
        import CoreWLAN
    except ImportError as exc:
        raise CollectorError(
            "CoreWLAN is unavailable (requires macOS and pyobjc-framework-CoreWLAN)"
        ) from exc
    return CoreWLAN


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------


def _channel_band(cw: Any, channel: Any) -> Band:
    value = channel.channelBand()
    for name, band in _BANDS:
        if value == getattr(cw, name, None):
            return band
    return Band.GHZ_2_4


def _channel_width(cw: Any, channel: Any) -> int:
    value = channel.channelWidth()
    for name, mhz in _WIDTHS:
        if value == getattr(cw, name, None):
            return mhz
    return _DEFAULT_WIDTH_MHZ


def _security(cw: Any, network: Any) -> SecurityType:
    for name, security in _SECURITY_PREFERENCE:
        mode = getattr(cw, name, None)
        if mode is not None and network.supportsSecurity_(mode):
            return security
    return SecurityType.UNKNOWN


def decode_ssid(ssid: Optional[str], raw: Optional[bytes], bssid: Optional[str]) -> Optional[str]:
    """Best-effort SSID for a scan result.

    Uses the reported SSID, then the raw SSID bytes (UTF-8, else the
    printable ASCII subset), then a ``Network-<bssid tail>`` label.
    Returns ``None`` for a hidden network without a BSSID.
    """
    if ssid:
        return ssid
    if raw:
        try:
            text = bytes(raw).decode("utf-8").strip()
        except UnicodeDecodeError:
            text = "".join(chr(b) for b in bytes(raw) if 32 <= b <= 126)
        if text:
            return text
    if bssid:
        return f"Network-{bssid[-8:]}"
    return None


def _to_network(cw: Any, network: Any) -> ObservedNetwork:
    bssid = network.bssid()
    channel = network.wlanChannel()
    return ObservedNetwork(
        id=bssid or uuid.uuid4().hex,
        ssid=decode_ssid(network.ssid(), network.ssidData(), bssid),
        bssid=bssid or "Unknown",
        rssi=int(network.rssiValue()),
        noise=int(network.noiseMeasurement()),
        channel=int(channel.channelNumber()) if channel is not None else 0,
        band=_channel_band(cw, channel) if channel is not None else Band.GHZ_2_4,
        bandwidth_mhz=(
            _channel_width(cw, channel) if channel is not None else _DEFAULT_WIDTH_MHZ
        ),
        security=_security(cw, network),
    )


# ---------------------------------------------------------------------------
# Source
# ---------------------------------------------------------------------------


class CoreWLANSource(NetworkSource):
    """Collect networks with a CoreWLAN scan of the default interface.

    Args:
        corewlan: Loaded CoreWLAN module; imported on first use if
            omitted.
    """

    name = "corewlan"

    def __init__(self, corewlan: Any = None) -> None:
        self._cw = corewlan

    def _interface(self) -> tuple[Any, Any]:
        if self._cw is None:
            self._cw = _load_corewlan()
        iface = self._cw.CWWiFiClient.sharedWiFiClient().interface()
        if iface is None:
            raise CollectorError("No Wi-Fi interface found")
        return self._cw, iface

    def read_interface(self) -> AssociatedInterface:
        """Live readings of the associated interface.

        Raises:
            CollectorError: If CoreWLAN or the interface is unavailable.
        """
        cw, iface = self._interface()
        channel = iface.wlanChannel()
        reading = AssociatedInterface(
            ssid=iface.ssid(),
            bssid=iface.bssid(),
            rssi=int(iface.rssiValue()),
            noise=int(iface.noiseMeasurement()),
            channel=int(channel.channelNumber()) if channel is not None else None,
            band=_channel_band(cw, channel) if channel is not None else None,
            bandwidth_mhz=(
                _channel_width(cw, channel) if channel is not None else _DEFAULT_WIDTH_MHZ
            ),
        )
        logger.debug(
            "Interface reading",
            ssid=reading.ssid,
            bssid=reading.bssid,
            rssi=reading.rssi,
            channel=reading.channel,
        )
        return reading

    def collect(self, band: Optional[Band] = None) -> Snapshot:
        cw, iface = self._interface()
        with logger.timed("CoreWLAN scan"):
            networks, error = iface.scanForNetworksWithSSID_includeHidden_error_(
                None, True, None
            )
            if networks is None:
                logger.debug("Scan including hidden networks failed: %s", error)
                networks, error = iface.scanForNetworksWithSSID_includeHidden_error_(
                    None, False, None
                )
        if networks is None:
            raise CollectorError(f"CoreWLAN scan failed: {error}")

        snapshot = Snapshot(
            networks=tuple(_to_network(cw, n) for n in networks),
            interface=self.read_interface(),
            source=self.name,
        )
        logger.debug("CoreWLAN scan returned %d networks", len(snapshot.networks))
        return snapshot.for_band(band)
