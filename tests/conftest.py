"""Shared fixtures for WiFi Optimizer tests."""

import itertools
import json

import pytest

from wifiopt.core.models import Band, ObservedNetwork


@pytest.fixture
def make_network():
    """Factory for ObservedNetwork with unique ids and sensible defaults."""
    counter = itertools.count(1)

    def _make(channel=6, band=Band.GHZ_2_4, rssi=-60, noise=-95, width=20, **kwargs):
        n = next(counter)
        kwargs.setdefault("id", f"aa:bb:cc:00:00:{n:02x}")
        kwargs.setdefault("bssid", kwargs["id"])
        kwargs.setdefault("ssid", f"net-{n}")
        return ObservedNetwork(
            channel=channel,
            band=band,
            rssi=rssi,
            noise=noise,
            bandwidth_mhz=width,
            **kwargs,
        )

    return _make


@pytest.fixture
def scenario_networks(make_network):
    """Current network weak on 2.4 GHz channel 3 with four co-channel neighbours."""
    current = make_network(channel=3, rssi=-72, noise=-90, ssid="Home")
    others = [make_network(channel=3, rssi=-85) for _ in range(4)]
    return current, [current, *others]


@pytest.fixture
def snapshot_file(tmp_path):
    """Write a JSON snapshot and return its path."""
    document = {
        "networks": [
            {
                "bssid": "aa:bb:cc:dd:ee:01",
                "ssid": "HomeNet",
                "rssi": -55,
                "noise": -92,
                "channel": 36,
                "band": "5GHz",
                "bandwidth_mhz": 80,
                "security": "WPA2 Personal",
            },
            {
                "bssid": "aa:bb:cc:dd:ee:02",
                "ssid": "Neighbour",
                "rssi": -70,
                "noise": -92,
                "channel": 6,
                "band": "2.4",
                "security": "WPA3 Personal",
            },
            {
                "bssid": "aa:bb:cc:dd:ee:03",
                "ssid": "Cafe",
                "rssi": -80,
                "noise": -92,
                "channel": 1,
                "band": "2.4GHz",
                "security": "None",
            },
        ],
        "interface": {
            "ssid": "HomeNet",
            "bssid": "aa:bb:cc:dd:ee:01",
            "rssi": -55,
            "noise": -92,
            "channel": 36,
            "band": "5",
            "bandwidth_mhz": 80,
        },
    }
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path
