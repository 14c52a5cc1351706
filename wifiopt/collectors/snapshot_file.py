"""
WiFi Optimizer Snapshot File Source
====================================

Loads a previously captured (or hand-written) snapshot from JSON::

    {
      "networks": [
        {"bssid": "aa:bb:cc:dd:ee:01", "ssid": "HomeNet", "rssi": -55,
         "noise": -92, "channel": 36, "band": "5GHz", "bandwidth_mhz": 80,
         "security": "WPA2 Personal"}
      ],
      "interface": {"ssid": "HomeNet", "bssid": "aa:bb:cc:dd:ee:01",
                    "rssi": -55, "noise": -92, "channel": 36, "band": "5"}
    }

The JSON report written by ``wifiopt analyze --output`` embeds a
snapshot under its ``"snapshot"`` key and can be loaded directly.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from shared.logger import WifiOptLogger

from wifiopt.collectors.base import NetworkSource
from wifiopt.core.models import Band, CollectorError, Snapshot

logger = WifiOptLogger("collectors.snapshot_file")


class SnapshotFileSource(NetworkSource):
    """Read a snapshot from a JSON file.

    Args:
        path: Path to the JSON document.
    """

    name = "snapshot"

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def collect(self, band: Optional[Band] = None) -> Snapshot:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CollectorError(f"Cannot read snapshot file {self._path}: {exc}") from exc

        try:
            document: Any = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CollectorError(f"Invalid JSON in {self._path}: {exc}") from exc

        if isinstance(document, dict) and isinstance(document.get("snapshot"), dict):
            document = document["snapshot"]
        if not isinstance(document, dict):
            raise CollectorError(f"Snapshot file {self._path} must contain a JSON object")

        payload = {"source": self.name, **document}
        try:
            snapshot = Snapshot.model_validate(payload)
        except ValidationError as exc:
            raise CollectorError(f"Invalid snapshot in {self._path}: {exc}") from exc

        logger.info(
            "Loaded snapshot from %s",
            self._path,
            networks=len(snapshot.networks),
        )
        return snapshot.for_band(band)
