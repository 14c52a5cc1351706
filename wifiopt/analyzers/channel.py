"""
WiFi Optimizer Channel Recommender
===================================

Recommends the least congested channel for the 2.4 GHz and 5 GHz
bands from a single snapshot of observed access points.

Each candidate channel accumulates an interference score from every
network in the same band whose occupied width reaches it. A network's
contribution is its normalised signal strength scaled by a triangular
falloff: full weight when centred on the candidate, approaching zero at
the edge of its occupied width. Channel numbers in 5 GHz and 6 GHz are
spaced more sparsely than the 5 MHz steps of 2.4 GHz, which the
per-band width multiplier accounts for.

In 2.4 GHz the recommendation is always one of the non-overlapping
channels 1, 6 and 11.

References:
    - IEEE. (2020). IEEE Std 802.11-2020. Annex E: Country Information
      and Operating Classes.
    - Cisco. (2023). 2.4 GHz Band Channel Assignment. Wireless LAN
      Design Guide.
    - Gast, M. S. (2013). 802.11ac: A Survival Guide. O'Reilly Media.
      Chapter 2: Radio Propagation.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from shared.logger import WifiOptLogger
from shared.math_utils import linear_normalize

from wifiopt.core.models import (
    Band,
    CANDIDATE_CHANNELS,
    ChannelRecommendation,
    ChannelScore,
    NON_OVERLAPPING_24GHZ,
    ObservedNetwork,
)

logger = WifiOptLogger("analyzers.channel")


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Channel-number units occupied by one 20 MHz slice, per band
_BAND_MULTIPLIER: dict[Band, int] = {
    Band.GHZ_2_4: 4,
    Band.GHZ_5: 4,
    Band.GHZ_6: 8,
}

# RSSI range mapped onto [0, 1] for score weighting
_RSSI_FLOOR_DBM = -100
_RSSI_CEILING_DBM = -30


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def candidate_channels(band: Band) -> tuple[int, ...]:
    """Fixed candidate channel set for *band* (empty for 6 GHz)."""
    return CANDIDATE_CHANNELS[band]


def bandwidth_units(mhz: int, band: Band) -> int:
    """Width of a *mhz*-wide transmission in channel-number units."""
    return max(1, mhz // 20) * _BAND_MULTIPLIER[band]


def normalized_signal(rssi: int) -> float:
    """Map RSSI linearly from [-100, -30] dBm onto [0, 1], clamped."""
    return linear_normalize(rssi, _RSSI_FLOOR_DBM, _RSSI_CEILING_DBM)


# ---------------------------------------------------------------------------
# Channel Recommender
# ---------------------------------------------------------------------------


class ChannelRecommender:
    """Pick the quietest candidate channel per band.

    Stateless: every method is a pure function of its arguments, so a
    single instance may be shared freely.

    Usage::

        recommender = ChannelRecommender()
        rec = recommender.recommend(snapshot.networks)
        rec.band_2_4, rec.band_5
    """

    def recommend(
        self, networks: Iterable[ObservedNetwork]
    ) -> ChannelRecommendation:
        """Recommend a channel for the 2.4 GHz and 5 GHz bands.

        Args:
            networks: Observed networks in any band and any order.

        Returns:
            ChannelRecommendation with ``None`` for a band that has no
            usable candidate.
        """
        nets = tuple(networks)
        with logger.operation("recommend"):
            rec = ChannelRecommendation(
                band_2_4=self.best_channel(Band.GHZ_2_4, nets),
                band_5=self.best_channel(Band.GHZ_5, nets),
            )
            logger.debug(
                "Channel recommendation: 2.4GHz=%s 5GHz=%s",
                rec.band_2_4,
                rec.band_5,
                networks=len(nets),
            )
        return rec

    def best_channel(
        self, band: Band, networks: Iterable[ObservedNetwork]
    ) -> Optional[int]:
        """Return the least congested candidate channel in *band*.

        Candidates are ranked by interference score, then by overlap
        count; on a full tie the earlier candidate wins. For 2.4 GHz a
        winner outside 1/6/11 is replaced by the best of 1/6/11 under
        the same ordering.

        Returns:
            The channel number, or ``None`` when *band* has no
            candidates.
        """
        nets = tuple(networks)
        scores = self.score_channels(band, nets)
        best = self._select(scores)
        if best is None:
            return None

        if band is Band.GHZ_2_4 and best.channel not in NON_OVERLAPPING_24GHZ:
            preferred = self._select(
                self.score_channels(band, nets, NON_OVERLAPPING_24GHZ)
            )
            logger.debug(
                "Channel %d is not non-overlapping, preferring %d",
                best.channel,
                preferred.channel if preferred else -1,
            )
            best = preferred

        return best.channel if best is not None else None

    def score_channels(
        self,
        band: Band,
        networks: Iterable[ObservedNetwork],
        candidates: Optional[Sequence[int]] = None,
    ) -> list[ChannelScore]:
        """Score every candidate channel of *band* against *networks*.

        Args:
            band: Band to evaluate. Networks in other bands are ignored.
            networks: Observed networks.
            candidates: Channels to score; defaults to the band's fixed
                candidate set.

        Returns:
            One ChannelScore per candidate, in candidate order.
        """
        if candidates is None:
            candidates = candidate_channels(band)
        band_nets = [n for n in networks if n.band is band]

        results: list[ChannelScore] = []
        for ch in candidates:
            score = 0.0
            overlaps = 0
            for net in band_nets:
                half = max(1, bandwidth_units(net.bandwidth_mhz, band) // 2)
                dist = abs(net.channel - ch)
                if dist > half:
                    continue
                overlaps += 1
                falloff = 1.0 - dist / half
                score += normalized_signal(net.rssi) * max(0.0, falloff)
            results.append(
                ChannelScore(channel=ch, band=band, score=score, overlaps=overlaps)
            )
        return results

    @staticmethod
    def _select(scores: Sequence[ChannelScore]) -> Optional[ChannelScore]:
        """Lowest (score, overlaps); ``min`` keeps the first on ties."""
        if not scores:
            return None
        return min(scores, key=lambda s: (s.score, s.overlaps))
