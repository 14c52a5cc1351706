"""Tests for the pydantic domain models."""

import pydantic
import pytest

from wifiopt.core.models import (
    AssociatedInterface,
    Band,
    CongestionLevel,
    DetailedMetrics,
    NetworkAnalysis,
    ObservedNetwork,
    SecurityType,
    SignalQuality,
    Snapshot,
)


class TestBand:
    """Band label parsing."""

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("2.4", Band.GHZ_2_4),
            ("2.4GHz", Band.GHZ_2_4),
            ("2_4", Band.GHZ_2_4),
            ("2GHz", Band.GHZ_2_4),
            ("5", Band.GHZ_5),
            (" 5 GHz ", Band.GHZ_5),
            ("6ghz", Band.GHZ_6),
        ],
    )
    def test_known_labels(self, label, expected):
        assert Band.from_label(label) is expected

    def test_unknown_label_raises(self):
        with pytest.raises(ValueError):
            Band.from_label("60GHz")


class TestSecurityType:
    """Vendor security string classification."""

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("None", SecurityType.OPEN),
            ("Open", SecurityType.OPEN),
            ("WEP", SecurityType.WEP),
            ("WPA Personal", SecurityType.WPA_PERSONAL),
            ("WPA2 Personal", SecurityType.WPA2_PERSONAL),
            ("WPA3 Personal", SecurityType.WPA3_PERSONAL),
            ("WPA2/WPA3 Personal", SecurityType.WPA2_WPA3_PERSONAL),
            ("WPA2 Enterprise", SecurityType.WPA2_ENTERPRISE),
            ("WPA3 Enterprise", SecurityType.WPA3_ENTERPRISE),
            ("OWE", SecurityType.OWE),
        ],
    )
    def test_known_labels(self, label, expected):
        assert SecurityType.from_label(label) is expected

    def test_unrecognised_label_is_unknown(self):
        assert SecurityType.from_label("Proprietary") is SecurityType.UNKNOWN


class TestObservedNetwork:
    """Network record construction."""

    def test_snr_is_derived(self):
        net = ObservedNetwork(id="x", rssi=-60, noise=-90)
        assert net.snr == 30

    def test_snr_is_serialized(self):
        net = ObservedNetwork(id="x", rssi=-60, noise=-90)
        assert net.model_dump()["snr"] == 30

    def test_defaults(self):
        net = ObservedNetwork(id="x")
        assert net.band is Band.GHZ_2_4
        assert net.bandwidth_mhz == 20
        assert net.security is SecurityType.UNKNOWN

    def test_id_falls_back_to_bssid_then_ssid(self):
        assert ObservedNetwork(bssid="aa:bb").id == "aa:bb"
        assert ObservedNetwork(ssid="Home").id == "Home"

    def test_string_band_and_security_are_parsed(self):
        net = ObservedNetwork(id="x", band="5", security="WPA2 Personal")
        assert net.band is Band.GHZ_5
        assert net.security is SecurityType.WPA2_PERSONAL

    def test_invalid_band_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            ObservedNetwork(id="x", band="60GHz")

    def test_frozen(self):
        net = ObservedNetwork(id="x")
        with pytest.raises(pydantic.ValidationError):
            net.rssi = -10


class TestSnapshot:
    """Snapshot helpers."""

    def test_for_band_filters_networks(self, make_network):
        snap = Snapshot(
            networks=(
                make_network(band=Band.GHZ_2_4),
                make_network(channel=36, band=Band.GHZ_5),
            )
        )
        only_5 = snap.for_band(Band.GHZ_5)
        assert [n.band for n in only_5.networks] == [Band.GHZ_5]
        assert snap.for_band(None) is snap

    def test_interface_association(self):
        assert not AssociatedInterface().is_associated
        assert AssociatedInterface(channel=6, band="2.4").is_associated


class TestNeutralValues:
    """Neutral analysis and empty metrics."""

    def test_empty_metrics(self):
        m = DetailedMetrics.empty()
        assert m.channel_utilization == 0
        assert m.same_channel_networks == 0
        assert m.neighboring_networks == 0
        assert m.overlapping_channels == 0
        assert m.average_neighbor_rssi == 0
        assert m.congestion_level is CongestionLevel.LOW

    def test_neutral_analysis(self):
        a = NetworkAnalysis.neutral()
        assert a.current_network is None
        assert a.performance_score == 0
        assert a.signal_quality is SignalQuality.VERY_POOR
        assert a.interference_factors == ()
        assert a.recommendations == ()
        assert not a.has_critical_factor
