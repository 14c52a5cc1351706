"""
WiFi Optimizer Network Analyzer
================================

Multi-factor quality and interference analysis of the currently
associated network against the rest of a snapshot.

The performance score is a weighted sum of four step-function
sub-scores (signal 40%, SNR 30%, co-channel congestion 20%, channel
bandwidth 10%) clamped to [0, 100]. Interference factors and
recommendations are independent threshold rules evaluated in a fixed
order, so the output lists are deterministic.

A channel is identified by its band and number: networks on channel 1
in 2.4 GHz and channel 1 in 6 GHz are not co-channel. Comparing channel
numbers alone would count them against each other, inflating the
congestion score, the co-channel factor and the airtime estimate for
dual-band scans. The density and neighbour counts consider every band.

References:
    - Cisco. (2023). Wireless LAN Design Guide. RSSI and SNR
      recommendations for data and voice.
    - Geier, J. (2010). Designing and Deploying 802.11n Wireless Networks.
      Cisco Press. Chapter 4: RF Analysis.
    - IEEE. (2020). IEEE Std 802.11-2020. Annex E.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from shared.logger import WifiOptLogger
from shared.math_utils import clamp, mean_or_zero

from wifiopt.core.models import (
    ALTERNATIVE_CHANNELS,
    Band,
    CongestionLevel,
    DetailedMetrics,
    InterferenceFactor,
    InterferenceType,
    NetworkAnalysis,
    ObservedNetwork,
    Priority,
    Recommendation,
    RecommendationType,
    Severity,
    SignalQuality,
)

logger = WifiOptLogger("analyzers.network")


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Performance score weights (sum to 1.0)
_WEIGHT_SIGNAL = 0.4
_WEIGHT_SNR = 0.3
_WEIGHT_CONGESTION = 0.2
_WEIGHT_BANDWIDTH = 0.1

# Interference thresholds
_WEAK_SIGNAL_DBM = -70
_CRITICAL_SIGNAL_DBM = -80
_NOISY_DBM = -85
_VERY_NOISY_DBM = -80
_OVERLAP_TRIGGER = 2
_OVERLAP_HIGH = 5
_DENSITY_TRIGGER = 10
_DENSITY_HIGH = 20

# Networks at or below this RSSI are not counted as neighbours
_VISIBILITY_FLOOR_DBM = -80

# A band change is suggested while 5 GHz has fewer networks than this
_SPARSE_5GHZ_LIMIT = 5

# Channel-number distance treated as overlapping, per band
_OVERLAP_DISTANCE: dict[Band, int] = {
    Band.GHZ_2_4: 4,
    Band.GHZ_5: 1,
    Band.GHZ_6: 1,
}

# Estimated airtime share taken by each co-channel network (percent)
_UTILIZATION_PER_NETWORK = 15.0


# ---------------------------------------------------------------------------
# Network Analyzer
# ---------------------------------------------------------------------------


class NetworkAnalyzer:
    """Analyze the currently associated network within a snapshot.

    The analysis never raises: an absent current network yields
    :meth:`NetworkAnalysis.neutral`, and empty snapshots yield zeroed
    metrics.

    Usage::

        analyzer = NetworkAnalyzer()
        analysis = analyzer.analyze(current, snapshot.networks)
        analysis.performance_score, analysis.recommendations
    """

    def analyze(
        self,
        current: Optional[ObservedNetwork],
        networks: Iterable[ObservedNetwork],
    ) -> NetworkAnalysis:
        """Build the full analysis for *current*.

        Args:
            current: The associated network, or ``None`` when not
                associated.
            networks: Every observed network in the snapshot. May
                include *current* itself.

        Returns:
            NetworkAnalysis aggregate.
        """
        if current is None:
            logger.debug("No associated network, returning neutral analysis")
            return NetworkAnalysis.neutral()

        nets = tuple(networks)
        with logger.operation("analyze"):
            analysis = NetworkAnalysis(
                current_network=current,
                performance_score=self.performance_score(current, nets),
                signal_quality=self.signal_quality(current.rssi),
                interference_factors=tuple(
                    self.interference_factors(current, nets)
                ),
                recommendations=tuple(self.recommendations(current, nets)),
                detailed_metrics=self.detailed_metrics(current, nets),
            )
            logger.debug(
                "Analyzed %s: score=%.1f quality=%s",
                current.ssid or current.id,
                analysis.performance_score,
                analysis.signal_quality.value,
                factors=len(analysis.interference_factors),
                recommendations=len(analysis.recommendations),
            )
        return analysis

    # ------------------------------------------------------------------ #
    #  Performance score
    # ------------------------------------------------------------------ #

    def performance_score(
        self, current: ObservedNetwork, networks: Sequence[ObservedNetwork]
    ) -> float:
        """Weighted 0-100 score; higher is better."""
        same = len(_same_channel(current, networks))
        total = 0.0
        total += self.signal_score(current.rssi) * _WEIGHT_SIGNAL
        total += self.snr_score(current.snr) * _WEIGHT_SNR
        total += self.congestion_score(same) * _WEIGHT_CONGESTION
        total += self.bandwidth_score(current.bandwidth_mhz) * _WEIGHT_BANDWIDTH
        return clamp(total, 0.0, 100.0)

    @staticmethod
    def signal_score(rssi: int) -> float:
        if -30 <= rssi <= 0:
            return 100.0
        if -50 <= rssi <= -31:
            return 80.0
        if -70 <= rssi <= -51:
            return 60.0
        if -80 <= rssi <= -71:
            return 40.0
        if -90 <= rssi <= -81:
            return 20.0
        return 0.0

    @staticmethod
    def snr_score(snr: int) -> float:
        if snr >= 40:
            return 100.0
        if snr >= 25:
            return 80.0
        if snr >= 15:
            return 60.0
        if snr >= 10:
            return 40.0
        if snr >= 5:
            return 20.0
        return 0.0

    @staticmethod
    def congestion_score(same_channel: int) -> float:
        """Score from the number of *other* networks on the same channel."""
        if same_channel <= 0:
            return 100.0
        if same_channel == 1:
            return 80.0
        if same_channel <= 3:
            return 60.0
        if same_channel <= 6:
            return 40.0
        if same_channel <= 10:
            return 20.0
        return 0.0

    @staticmethod
    def bandwidth_score(mhz: int) -> float:
        if mhz >= 160:
            return 100.0
        if mhz >= 80:
            return 80.0
        if mhz >= 40:
            return 60.0
        if mhz >= 20:
            return 40.0
        return 20.0

    # ------------------------------------------------------------------ #
    #  Classification
    # ------------------------------------------------------------------ #

    @staticmethod
    def signal_quality(rssi: int) -> SignalQuality:
        """User-facing quality tier from RSSI alone.

        Independent of the weak-signal interference threshold: -70 dBm
        is "fair" here but is not reported as a weak signal.
        """
        if -30 <= rssi <= 0:
            return SignalQuality.EXCELLENT
        if -50 <= rssi <= -31:
            return SignalQuality.GOOD
        if -70 <= rssi <= -51:
            return SignalQuality.FAIR
        if -80 <= rssi <= -71:
            return SignalQuality.POOR
        return SignalQuality.VERY_POOR

    @staticmethod
    def congestion_level(same_channel: int) -> CongestionLevel:
        if same_channel <= 1:
            return CongestionLevel.LOW
        if same_channel <= 4:
            return CongestionLevel.MODERATE
        if same_channel <= 8:
            return CongestionLevel.HIGH
        return CongestionLevel.SEVERE

    # ------------------------------------------------------------------ #
    #  Interference factors
    # ------------------------------------------------------------------ #

    def interference_factors(
        self, current: ObservedNetwork, networks: Sequence[ObservedNetwork]
    ) -> list[InterferenceFactor]:
        """Evaluate each interference rule; order is fixed."""
        factors: list[InterferenceFactor] = []

        if current.rssi < _WEAK_SIGNAL_DBM:
            factors.append(
                InterferenceFactor(
                    type=InterferenceType.WEAK_SIGNAL,
                    severity=(
                        Severity.CRITICAL
                        if current.rssi < _CRITICAL_SIGNAL_DBM
                        else Severity.HIGH
                    ),
                    description=(
                        f"Signal strength is {current.rssi} dBm, "
                        "below the recommended range"
                    ),
                    impact="May cause unstable connections and reduced speed",
                )
            )

        if current.noise > _NOISY_DBM:
            factors.append(
                InterferenceFactor(
                    type=InterferenceType.NOISY_ENVIRONMENT,
                    severity=(
                        Severity.HIGH
                        if current.noise > _VERY_NOISY_DBM
                        else Severity.MODERATE
                    ),
                    description=f"Ambient noise level is high at {current.noise} dBm",
                    impact="Degrades signal quality and data transfer efficiency",
                )
            )

        same = len(_same_channel(current, networks))
        if same > _OVERLAP_TRIGGER:
            factors.append(
                InterferenceFactor(
                    type=InterferenceType.CHANNEL_OVERLAP,
                    severity=(
                        Severity.HIGH if same > _OVERLAP_HIGH else Severity.MODERATE
                    ),
                    description=(
                        f"{same} other networks share channel {current.channel}"
                    ),
                    impact="Channel congestion can reduce speed and increase latency",
                )
            )

        nearby = len(_neighbors(current, networks))
        if nearby > _DENSITY_TRIGGER:
            factors.append(
                InterferenceFactor(
                    type=InterferenceType.HIGH_DENSITY,
                    severity=(
                        Severity.HIGH if nearby > _DENSITY_HIGH else Severity.MODERATE
                    ),
                    description=f"{nearby} strong networks detected nearby",
                    impact="Dense network environments compete for airtime",
                )
            )

        return factors

    # ------------------------------------------------------------------ #
    #  Recommendations
    # ------------------------------------------------------------------ #

    def recommendations(
        self, current: ObservedNetwork, networks: Sequence[ObservedNetwork]
    ) -> list[Recommendation]:
        """Evaluate each recommendation rule; order is fixed."""
        recs: list[Recommendation] = []

        if current.rssi < _WEAK_SIGNAL_DBM:
            recs.append(
                Recommendation(
                    type=RecommendationType.POSITION_OPTIMIZATION,
                    priority=Priority.HIGH,
                    title="Optimize device position",
                    description=(
                        "Move closer to the router or adjust the router's "
                        "antenna orientation"
                    ),
                    expected_improvement="Signal strength may improve by 5-15 dBm",
                )
            )

        better = self.better_channel(current, networks)
        if better is not None:
            recs.append(
                Recommendation(
                    type=RecommendationType.CHANNEL_CHANGE,
                    priority=Priority.MEDIUM,
                    title=f"Switch to channel {better}",
                    description=(
                        f"Channel {current.channel} is congested; "
                        f"switching to channel {better} is recommended"
                    ),
                    expected_improvement=(
                        "Less interference, 20-40% better performance"
                    ),
                )
            )

        if current.band is Band.GHZ_2_4:
            five = sum(1 for n in networks if n.band is Band.GHZ_5)
            if five < _SPARSE_5GHZ_LIMIT:
                recs.append(
                    Recommendation(
                        type=RecommendationType.BAND_CHANGE,
                        priority=Priority.MEDIUM,
                        title="Switch to the 5GHz band",
                        description=(
                            "The 5GHz band is less congested and offers "
                            "better performance"
                        ),
                        expected_improvement="50-100% faster with lower latency",
                    )
                )

        if current.bandwidth_mhz < 80 and current.band is not Band.GHZ_2_4:
            recs.append(
                Recommendation(
                    type=RecommendationType.CONFIGURATION_CHANGE,
                    priority=Priority.LOW,
                    title="Enable a wider channel bandwidth",
                    description=(
                        f"Current bandwidth is {current.bandwidth_mhz}MHz; "
                        "consider enabling 80MHz or 160MHz"
                    ),
                    expected_improvement="2-4x higher theoretical throughput",
                )
            )

        return recs

    def better_channel(
        self, current: ObservedNetwork, networks: Sequence[ObservedNetwork]
    ) -> Optional[int]:
        """Alternative channel with strictly fewer networks than the current one.

        Compares the number of other networks on the current channel with
        the number of networks exactly on each alternative channel of the
        same band. The first candidate wins ties.
        """
        lowest = len(_same_channel(current, networks))
        best: Optional[int] = None
        for ch in ALTERNATIVE_CHANNELS[current.band]:
            count = sum(
                1 for n in networks if n.band is current.band and n.channel == ch
            )
            if count < lowest:
                lowest = count
                best = ch
        return best

    # ------------------------------------------------------------------ #
    #  Detailed metrics
    # ------------------------------------------------------------------ #

    def detailed_metrics(
        self,
        current: Optional[ObservedNetwork],
        networks: Sequence[ObservedNetwork],
    ) -> DetailedMetrics:
        if current is None:
            return DetailedMetrics.empty()

        same = len(_same_channel(current, networks))
        neighbors = _neighbors(current, networks)
        reach = _OVERLAP_DISTANCE[current.band]
        overlapping = sum(
            1
            for n in _others(current, networks)
            if n.band is current.band and abs(n.channel - current.channel) <= reach
        )

        return DetailedMetrics(
            channel_utilization=min(100.0, same * _UTILIZATION_PER_NETWORK),
            neighboring_networks=len(neighbors),
            same_channel_networks=same,
            overlapping_channels=overlapping,
            average_neighbor_rssi=mean_or_zero([n.rssi for n in neighbors]),
            congestion_level=self.congestion_level(same),
        )


# ---------------------------------------------------------------------------
# Module helpers
# ---------------------------------------------------------------------------


def _others(
    current: ObservedNetwork, networks: Sequence[ObservedNetwork]
) -> list[ObservedNetwork]:
    return [n for n in networks if n.id != current.id]


def _same_channel(
    current: ObservedNetwork, networks: Sequence[ObservedNetwork]
) -> list[ObservedNetwork]:
    return [
        n
        for n in _others(current, networks)
        if n.band is current.band and n.channel == current.channel
    ]


def _neighbors(
    current: ObservedNetwork, networks: Sequence[ObservedNetwork]
) -> list[ObservedNetwork]:
    return [n for n in _others(current, networks) if n.rssi > _VISIBILITY_FLOOR_DBM]
