"""
WiFi Optimizer Core Data Models
================================

Pydantic-based domain models for the WiFi Optimizer spectrum analysis
engine. These models represent a point-in-time snapshot of nearby
access points, the device's own associated interface, per-band channel
recommendations, and the multi-factor analysis of the currently
associated network.

Every model is frozen: a snapshot and the analysis derived from it are
values, superseded (never mutated) by the next scan.

References:
    - IEEE. (2020). IEEE Std 802.11-2020. Annex E: Country Information
      and Operating Classes.
    - Wi-Fi Alliance. (2018). WPA3 Specification v1.0.
    - Pydantic v2 Documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class WifiOptError(Exception):
    """Base class for WiFi Optimizer errors raised outside the core."""


class CollectorError(WifiOptError):
    """Raised when a network source cannot produce a snapshot."""


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Band(str, enum.Enum):
    """WiFi frequency band.

    Reference:
        IEEE. (2020). IEEE Std 802.11-2020. Annex E.
    """

    GHZ_2_4 = "2.4GHz"
    GHZ_5 = "5GHz"
    GHZ_6 = "6GHz"

    @classmethod
    def from_label(cls, label: str) -> Band:
        """Parse a band label such as ``"2.4"``, ``"5GHz"`` or ``"6 ghz"``.

        Raises:
            ValueError: If the label names no known band.
        """
        key = label.strip().lower().replace(" ", "").replace("_", ".")
        try:
            return _BAND_ALIASES[key]
        except KeyError:
            raise ValueError(f"Unknown WiFi band: {label!r}") from None


_BAND_ALIASES: dict[str, Band] = {
    "2": Band.GHZ_2_4,
    "2.4": Band.GHZ_2_4,
    "2ghz": Band.GHZ_2_4,
    "2.4ghz": Band.GHZ_2_4,
    "5": Band.GHZ_5,
    "5ghz": Band.GHZ_5,
    "6": Band.GHZ_6,
    "6ghz": Band.GHZ_6,
}


class SecurityType(str, enum.Enum):
    """Security classification of an access point.

    Reference:
        Wi-Fi Alliance. (2018). WPA3 Specification v1.0.
    """

    OPEN = "Open"
    WEP = "WEP"
    WPA_PERSONAL = "WPA Personal"
    WPA2_PERSONAL = "WPA2 Personal"
    WPA3_PERSONAL = "WPA3 Personal"
    WPA2_WPA3_PERSONAL = "WPA2/WPA3 Personal"
    WPA_ENTERPRISE = "WPA Enterprise"
    WPA2_ENTERPRISE = "WPA2 Enterprise"
    WPA3_ENTERPRISE = "WPA3 Enterprise"
    OWE = "OWE"
    UNKNOWN = "Unknown"

    @classmethod
    def from_label(cls, label: str) -> SecurityType:
        """Classify a vendor security string (e.g. ``"WPA2 Personal"``).

        Mixed labels resolve to the strongest protocol they mention,
        except WPA2/WPA3 personal transition mode which has its own
        member. Labels that name no protocol map to :attr:`UNKNOWN`.
        """
        text = label.strip().lower().replace("-", " ").replace("_", " ")
        if text in ("open", "none"):
            return cls.OPEN
        if "owe" in text:
            return cls.OWE

        enterprise = "enterprise" in text or "802.1x" in text
        if "wpa3" in text:
            if enterprise:
                return cls.WPA3_ENTERPRISE
            if "wpa2" in text or "transition" in text:
                return cls.WPA2_WPA3_PERSONAL
            return cls.WPA3_PERSONAL
        if "wpa2" in text:
            return cls.WPA2_ENTERPRISE if enterprise else cls.WPA2_PERSONAL
        if "wpa" in text:
            return cls.WPA_ENTERPRISE if enterprise else cls.WPA_PERSONAL
        if "wep" in text:
            return cls.WEP
        return cls.UNKNOWN


class SignalQuality(str, enum.Enum):
    """RSSI-based signal quality label, best to worst."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    VERY_POOR = "very_poor"


class CongestionLevel(str, enum.Enum):
    """Co-channel congestion tier."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    SEVERE = "severe"


class InterferenceType(str, enum.Enum):
    """Kinds of interference factor reported for the current network."""

    CHANNEL_OVERLAP = "channel_overlap"
    HIGH_DENSITY = "high_density"
    WEAK_SIGNAL = "weak_signal"
    NOISY_ENVIRONMENT = "noisy_environment"
    BANDWIDTH_LIMITATION = "bandwidth_limitation"
    FREQUENCY_BAND_CONGESTION = "frequency_band_congestion"


class Severity(str, enum.Enum):
    """Severity of an interference factor."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class RecommendationType(str, enum.Enum):
    """Kinds of actionable recommendation."""

    CHANNEL_CHANGE = "channel_change"
    BAND_CHANGE = "band_change"
    POSITION_OPTIMIZATION = "position_optimization"
    DEVICE_UPGRADE = "device_upgrade"
    ENVIRONMENTAL_CHANGE = "environmental_change"
    CONFIGURATION_CHANGE = "configuration_change"


class Priority(str, enum.Enum):
    """Recommendation priority."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ---------------------------------------------------------------------------
# Channel plan constants
# ---------------------------------------------------------------------------

# Candidate channels considered by the channel recommender. 5 GHz uses
# the non-DFS 20 MHz primaries only; 6 GHz planning is not offered.
CANDIDATE_CHANNELS: dict[Band, tuple[int, ...]] = {
    Band.GHZ_2_4: tuple(range(1, 12)),
    Band.GHZ_5: (36, 40, 44, 48, 149, 153, 157, 161),
    Band.GHZ_6: (),
}

# Non-overlapping 2.4 GHz channels (Americas regulatory domain)
NON_OVERLAPPING_24GHZ: tuple[int, ...] = (1, 6, 11)

# Alternative channels offered when suggesting a channel change for
# the currently associated network. The 6 GHz set is a coarse placeholder.
ALTERNATIVE_CHANNELS: dict[Band, tuple[int, ...]] = {
    Band.GHZ_2_4: NON_OVERLAPPING_24GHZ,
    Band.GHZ_5: (36, 40, 44, 48, 149, 153, 157, 161),
    Band.GHZ_6: (1, 5, 9, 13, 17, 21, 25, 29),
}


def _coerce_band(value: Any) -> Any:
    if isinstance(value, str) and not isinstance(value, Band):
        return Band.from_label(value)
    return value


def _coerce_security(value: Any) -> Any:
    if isinstance(value, str) and not isinstance(value, SecurityType):
        return SecurityType.from_label(value)
    return value


BandField = Annotated[Band, BeforeValidator(_coerce_band)]
SecurityField = Annotated[SecurityType, BeforeValidator(_coerce_security)]


# ---------------------------------------------------------------------------
# Snapshot records
# ---------------------------------------------------------------------------


class ObservedNetwork(BaseModel):
    """A single access point detected in one snapshot.

    Attributes:
        id: Stable key for the network (BSSID or equivalent).
        ssid: Human-readable network name, if known.
        bssid: Basic Service Set Identifier.
        rssi: Received signal strength in dBm (typically -100..0).
        noise: Noise floor in dBm.
        channel: Primary channel number within *band*.
        band: Frequency band.
        bandwidth_mhz: Channel width in MHz (20/40/80/160).
        security: Security classification.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    ssid: Optional[str] = None
    bssid: str = ""
    rssi: int = -100
    noise: int = -100
    channel: int = 0
    band: BandField = Band.GHZ_2_4
    bandwidth_mhz: int = 20
    security: SecurityField = SecurityType.UNKNOWN

    @model_validator(mode="before")
    @classmethod
    def _default_identity(cls, data: Any) -> Any:
        """Fall back to the BSSID, then the SSID, when no id is given."""
        if isinstance(data, dict) and not data.get("id"):
            key = data.get("bssid") or data.get("ssid")
            if key:
                data = {**data, "id": key}
        return data

    @computed_field  # type: ignore[prop-decorator]
    @property
    def snr(self) -> int:
        """Signal-to-noise ratio in dB."""
        return self.rssi - self.noise


class AssociatedInterface(BaseModel):
    """The device's own wireless interface and its current association.

    ``channel`` and ``band`` are ``None`` when the interface is not
    associated with any network.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    ssid: Optional[str] = None
    bssid: Optional[str] = None
    rssi: int = -100
    noise: int = -100
    channel: Optional[int] = None
    band: Optional[BandField] = None
    bandwidth_mhz: int = 20

    @computed_field  # type: ignore[prop-decorator]
    @property
    def snr(self) -> int:
        return self.rssi - self.noise

    @property
    def is_associated(self) -> bool:
        return self.channel is not None and self.band is not None


class Snapshot(BaseModel):
    """Point-in-time list of observed networks plus the local interface."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    networks: tuple[ObservedNetwork, ...] = ()
    interface: Optional[AssociatedInterface] = None
    captured_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    source: str = "unknown"

    def for_band(self, band: Optional[Band]) -> Snapshot:
        """Return a copy restricted to *band* (no-op when ``None``)."""
        if band is None:
            return self
        return self.model_copy(
            update={"networks": tuple(n for n in self.networks if n.band is band)}
        )


# ---------------------------------------------------------------------------
# Channel recommendation
# ---------------------------------------------------------------------------


class ChannelScore(BaseModel):
    """Interference score of one candidate channel.

    ``score`` is the sum of signal-weighted triangular overlap
    contributions; ``overlaps`` counts the networks reaching the channel.
    Lower is better for both.
    """

    model_config = ConfigDict(frozen=True)

    channel: int
    band: Band
    score: float = 0.0
    overlaps: int = 0


class ChannelRecommendation(BaseModel):
    """Least-congested channel per band; ``None`` when none is usable."""

    model_config = ConfigDict(frozen=True)

    band_2_4: Optional[int] = None
    band_5: Optional[int] = None


# ---------------------------------------------------------------------------
# Network analysis
# ---------------------------------------------------------------------------


class DetailedMetrics(BaseModel):
    """Congestion metrics for the currently associated network.

    Attributes:
        channel_utilization: Estimated utilization percentage [0, 100].
        neighboring_networks: Other networks above the visibility floor.
        same_channel_networks: Other networks on exactly the same channel.
        overlapping_channels: Other networks on overlapping channels.
        average_neighbor_rssi: Mean RSSI of the neighboring networks.
        congestion_level: Tier derived from the same-channel count.
    """

    model_config = ConfigDict(frozen=True)

    channel_utilization: float = Field(default=0.0, ge=0.0, le=100.0)
    neighboring_networks: int = 0
    same_channel_networks: int = 0
    overlapping_channels: int = 0
    average_neighbor_rssi: float = 0.0
    congestion_level: CongestionLevel = CongestionLevel.LOW

    @classmethod
    def empty(cls) -> DetailedMetrics:
        return cls()


class InterferenceFactor(BaseModel):
    """One detected source of degraded performance."""

    model_config = ConfigDict(frozen=True)

    type: InterferenceType
    severity: Severity
    description: str
    impact: str


class Recommendation(BaseModel):
    """One actionable suggestion for improving the current connection."""

    model_config = ConfigDict(frozen=True)

    type: RecommendationType
    priority: Priority
    title: str
    description: str
    expected_improvement: str


class NetworkAnalysis(BaseModel):
    """Aggregate quality and interference report for the current network.

    Constructed once per snapshot. ``current_network`` is ``None`` when
    the device is not associated, in which case every other field holds
    its neutral value (see :meth:`neutral`).
    """

    model_config = ConfigDict(frozen=True)

    current_network: Optional[ObservedNetwork] = None
    performance_score: float = Field(default=0.0, ge=0.0, le=100.0)
    signal_quality: SignalQuality = SignalQuality.VERY_POOR
    interference_factors: tuple[InterferenceFactor, ...] = ()
    recommendations: tuple[Recommendation, ...] = ()
    detailed_metrics: DetailedMetrics = Field(default_factory=DetailedMetrics)

    @classmethod
    def neutral(cls) -> NetworkAnalysis:
        """Analysis returned when there is no associated network."""
        return cls()

    @property
    def has_critical_factor(self) -> bool:
        return any(f.severity is Severity.CRITICAL for f in self.interference_factors)


class EvaluationResult(BaseModel):
    """Everything the engine derives from one snapshot."""

    model_config = ConfigDict(frozen=True)

    snapshot: Snapshot
    current_network: Optional[ObservedNetwork] = None
    recommendation: ChannelRecommendation
    channel_scores: dict[Band, tuple[ChannelScore, ...]] = Field(default_factory=dict)
    analysis: NetworkAnalysis
