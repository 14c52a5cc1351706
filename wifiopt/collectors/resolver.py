"""
WiFi Optimizer Current Network Resolver
========================================

Links the device's associated interface to an entry of the observed
network list. Discovery tools report the two separately, and some
(``system_profiler``) report no BSSIDs at all, so matching falls back
through progressively weaker keys.
"""

from __future__ import annotations

from typing import Optional, Sequence

from shared.logger import WifiOptLogger

from wifiopt.core.models import (
    AssociatedInterface,
    Band,
    ObservedNetwork,
    SecurityType,
    Snapshot,
)

logger = WifiOptLogger("collectors.resolver")


def normalize_ssid(ssid: Optional[str]) -> str:
    """Lower-case *ssid* with surrounding whitespace and quotes removed."""
    if not ssid:
        return ""
    return ssid.strip().strip('"').strip().lower()


def _find_index(
    networks: Sequence[ObservedNetwork], interface: AssociatedInterface
) -> Optional[int]:
    if interface.bssid:
        for idx, net in enumerate(networks):
            if net.bssid == interface.bssid:
                return idx

    target = normalize_ssid(interface.ssid)
    if target:
        for idx, net in enumerate(networks):
            if normalize_ssid(net.ssid) == target:
                return idx
    return None


def resolve_current_network(
    networks: Sequence[ObservedNetwork],
    interface: Optional[AssociatedInterface],
) -> Optional[ObservedNetwork]:
    """Pick the observed network the interface is associated with.

    Matching order:

    1. exact BSSID,
    2. normalised SSID,
    3. the network on the interface's channel whose RSSI is closest to
       the interface RSSI (first one wins ties).

    Returns:
        The matching network, or ``None`` when there is no interface or
        nothing matches.
    """
    if interface is None:
        return None

    idx = _find_index(networks, interface)
    if idx is not None:
        return networks[idx]

    if interface.channel is not None:
        same_channel = [
            n
            for n in networks
            if n.channel == interface.channel
            and (interface.band is None or n.band is interface.band)
        ]
        if same_channel:
            best = min(same_channel, key=lambda n: abs(n.rssi - interface.rssi))
            logger.debug(
                "Resolved current network by RSSI proximity",
                channel=interface.channel,
                match=best.id,
            )
            return best

    logger.debug("No observed network matches the interface")
    return None


def enrich_snapshot(snapshot: Snapshot) -> Snapshot:
    """Merge live interface identity into the network list.

    When the interface reports both SSID and BSSID, the matching entry
    (by BSSID, then normalised SSID) takes the interface's SSID and
    BSSID. If no entry matches and the interface has a channel, an entry
    is synthesised from the interface readings.

    Returns:
        A new snapshot; the input is left untouched.
    """
    iface = snapshot.interface
    if iface is None or not iface.ssid or not iface.bssid:
        return snapshot

    networks = list(snapshot.networks)
    idx = _find_index(networks, iface)

    if idx is not None:
        networks[idx] = networks[idx].model_copy(
            update={"ssid": iface.ssid, "bssid": iface.bssid}
        )
        logger.debug("Enriched entry %s with interface identity", networks[idx].id)
    elif iface.channel is not None:
        networks.append(
            ObservedNetwork(
                id=iface.bssid,
                ssid=iface.ssid,
                bssid=iface.bssid,
                rssi=iface.rssi,
                noise=iface.noise,
                channel=iface.channel,
                band=iface.band or Band.GHZ_2_4,
                bandwidth_mhz=iface.bandwidth_mhz,
                security=SecurityType.UNKNOWN,
            )
        )
        logger.debug("Synthesized current network entry for %s", iface.ssid)
    else:
        return snapshot

    return snapshot.model_copy(update={"networks": tuple(networks)})
