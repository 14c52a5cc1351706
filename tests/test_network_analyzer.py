"""Tests for the current-network analyzer."""

import pytest

from wifiopt.analyzers.network import NetworkAnalyzer
from wifiopt.core.models import (
    Band,
    CongestionLevel,
    InterferenceType,
    NetworkAnalysis,
    Priority,
    RecommendationType,
    Severity,
    SignalQuality,
)


@pytest.fixture
def analyzer():
    return NetworkAnalyzer()


def _types(items):
    return [i.type for i in items]


class TestNeutral:
    """No associated network."""

    def test_analyze_none_is_neutral(self, analyzer, make_network):
        nets = [make_network(channel=ch) for ch in (1, 6, 11)]
        assert analyzer.analyze(None, nets) == NetworkAnalysis.neutral()

    def test_analyze_none_with_empty_snapshot(self, analyzer):
        result = analyzer.analyze(None, [])
        assert result.performance_score == 0
        assert result.signal_quality is SignalQuality.VERY_POOR
        assert result.detailed_metrics.congestion_level is CongestionLevel.LOW


class TestStepFunctions:
    """Sub-scores and classifications at their tier boundaries."""

    @pytest.mark.parametrize(
        "rssi, expected",
        [(0, 100), (-30, 100), (-31, 80), (-50, 80), (-51, 60), (-70, 60),
         (-71, 40), (-80, 40), (-81, 20), (-90, 20), (-91, 0), (5, 0)],
    )
    def test_signal_score(self, rssi, expected):
        assert NetworkAnalyzer.signal_score(rssi) == expected

    @pytest.mark.parametrize(
        "snr, expected",
        [(60, 100), (40, 100), (39, 80), (25, 80), (24, 60), (15, 60),
         (14, 40), (10, 40), (9, 20), (5, 20), (4, 0), (-3, 0)],
    )
    def test_snr_score(self, snr, expected):
        assert NetworkAnalyzer.snr_score(snr) == expected

    @pytest.mark.parametrize(
        "count, expected",
        [(0, 100), (1, 80), (2, 60), (3, 60), (4, 40), (6, 40), (7, 20),
         (10, 20), (11, 0)],
    )
    def test_congestion_score(self, count, expected):
        assert NetworkAnalyzer.congestion_score(count) == expected

    @pytest.mark.parametrize(
        "mhz, expected",
        [(320, 100), (160, 100), (80, 80), (40, 60), (20, 40), (10, 20)],
    )
    def test_bandwidth_score(self, mhz, expected):
        assert NetworkAnalyzer.bandwidth_score(mhz) == expected

    @pytest.mark.parametrize(
        "rssi, expected",
        [(-30, SignalQuality.EXCELLENT), (-50, SignalQuality.GOOD),
         (-70, SignalQuality.FAIR), (-71, SignalQuality.POOR),
         (-80, SignalQuality.POOR), (-81, SignalQuality.VERY_POOR),
         (3, SignalQuality.VERY_POOR)],
    )
    def test_signal_quality(self, rssi, expected):
        assert NetworkAnalyzer.signal_quality(rssi) is expected

    @pytest.mark.parametrize(
        "count, expected",
        [(0, CongestionLevel.LOW), (1, CongestionLevel.LOW),
         (2, CongestionLevel.MODERATE), (4, CongestionLevel.MODERATE),
         (5, CongestionLevel.HIGH), (8, CongestionLevel.HIGH),
         (9, CongestionLevel.SEVERE)],
    )
    def test_congestion_level(self, count, expected):
        assert NetworkAnalyzer.congestion_level(count) is expected


class TestPerformanceScore:
    """Weighted score."""

    def test_weighted_sum(self, analyzer, make_network):
        # signal 80, snr 80, congestion 100, bandwidth 80
        current = make_network(channel=36, band=Band.GHZ_5, rssi=-45, noise=-75, width=80)
        score = analyzer.performance_score(current, [current])
        assert score == pytest.approx(80 * 0.4 + 80 * 0.3 + 100 * 0.2 + 80 * 0.1)

    def test_score_within_bounds(self, analyzer, make_network):
        for rssi in range(-110, 1, 7):
            for noise in (-100, -90, -70, -40):
                current = make_network(rssi=rssi, noise=noise)
                score = analyzer.analyze(current, [current]).performance_score
                assert 0 <= score <= 100

    def test_monotone_in_rssi(self, analyzer, make_network):
        previous = -1.0
        for rssi in range(-100, 1):
            current = make_network(id="fixed", rssi=rssi, noise=rssi - 20)
            score = analyzer.performance_score(current, [current])
            assert score >= previous
            previous = score

    def test_monotone_in_snr(self, analyzer, make_network):
        previous = -1.0
        for noise in range(-40, -121, -1):
            current = make_network(id="fixed", rssi=-60, noise=noise)
            score = analyzer.performance_score(current, [current])
            assert score >= previous
            previous = score


class TestInterferenceFactors:
    """Threshold rules for interference factors."""

    def test_clean_network_has_no_factors(self, analyzer, make_network):
        current = make_network(rssi=-50, noise=-95)
        assert analyzer.interference_factors(current, [current]) == []

    def test_weak_signal_boundary(self, analyzer, make_network):
        at_boundary = make_network(rssi=-70)
        assert analyzer.interference_factors(at_boundary, [at_boundary]) == []

    @pytest.mark.parametrize("rssi, severity", [(-71, Severity.HIGH), (-80, Severity.HIGH),
                                                (-81, Severity.CRITICAL)])
    def test_weak_signal_severity(self, analyzer, make_network, rssi, severity):
        current = make_network(rssi=rssi)
        factors = analyzer.interference_factors(current, [current])
        assert factors[0].type is InterferenceType.WEAK_SIGNAL
        assert factors[0].severity is severity
        assert str(rssi) in factors[0].description

    @pytest.mark.parametrize("noise, severity", [(-84, Severity.MODERATE),
                                                 (-80, Severity.MODERATE),
                                                 (-79, Severity.HIGH)])
    def test_noisy_environment(self, analyzer, make_network, noise, severity):
        current = make_network(rssi=-40, noise=noise)
        factors = analyzer.interference_factors(current, [current])
        assert _types(factors) == [InterferenceType.NOISY_ENVIRONMENT]
        assert factors[0].severity is severity

    def test_noise_at_threshold_not_reported(self, analyzer, make_network):
        current = make_network(rssi=-40, noise=-85)
        assert analyzer.interference_factors(current, [current]) == []

    @pytest.mark.parametrize("count, severity", [(3, Severity.MODERATE), (5, Severity.MODERATE),
                                                 (6, Severity.HIGH)])
    def test_channel_overlap(self, analyzer, make_network, count, severity):
        current = make_network(channel=6, rssi=-40)
        nets = [current] + [make_network(channel=6, rssi=-90) for _ in range(count)]
        factors = analyzer.interference_factors(current, nets)
        assert _types(factors) == [InterferenceType.CHANNEL_OVERLAP]
        assert factors[0].severity is severity

    def test_same_channel_number_in_other_band_is_not_co_channel(self, analyzer, make_network):
        current = make_network(channel=1, rssi=-40)
        nets = [current] + [make_network(channel=1, band=Band.GHZ_6, rssi=-90) for _ in range(4)]
        assert analyzer.interference_factors(current, nets) == []

    @pytest.mark.parametrize("count, severity", [(11, Severity.MODERATE), (21, Severity.HIGH)])
    def test_high_density(self, analyzer, make_network, count, severity):
        current = make_network(channel=36, band=Band.GHZ_5, rssi=-40)
        # Spread over channels and bands so only density triggers
        others = [
            make_network(channel=149 + 4 * (i % 4), band=Band.GHZ_5, rssi=-70)
            if i % 2 else make_network(channel=1 + 5 * (i % 3), rssi=-70)
            for i in range(count)
        ]
        factors = analyzer.interference_factors(current, [current, *others])
        assert InterferenceType.HIGH_DENSITY in _types(factors)
        density = next(f for f in factors if f.type is InterferenceType.HIGH_DENSITY)
        assert density.severity is severity

    def test_density_ignores_weak_neighbours(self, analyzer, make_network):
        current = make_network(channel=36, band=Band.GHZ_5, rssi=-40)
        others = [make_network(channel=1, rssi=-80) for _ in range(15)]
        factors = analyzer.interference_factors(current, [current, *others])
        assert InterferenceType.HIGH_DENSITY not in _types(factors)

    def test_factor_order_is_fixed(self, analyzer, make_network):
        current = make_network(channel=6, rssi=-85, noise=-75)
        others = [make_network(channel=6, rssi=-60) for _ in range(12)]
        factors = analyzer.interference_factors(current, [current, *others])
        assert _types(factors) == [
            InterferenceType.WEAK_SIGNAL,
            InterferenceType.NOISY_ENVIRONMENT,
            InterferenceType.CHANNEL_OVERLAP,
            InterferenceType.HIGH_DENSITY,
        ]


class TestRecommendations:
    """Recommendation rules."""

    def test_position_optimization_for_weak_signal(self, analyzer, make_network):
        current = make_network(channel=36, band=Band.GHZ_5, rssi=-75, width=80)
        recs = analyzer.recommendations(current, [current])
        assert _types(recs) == [RecommendationType.POSITION_OPTIMIZATION]
        assert recs[0].priority is Priority.HIGH

    def test_channel_change_needs_strictly_fewer(self, analyzer, make_network):
        current = make_network(channel=6, rssi=-40)
        nets = [current, make_network(channel=6), make_network(channel=1),
                make_network(channel=11)]
        # 1 other on channel 6; channels 1 and 11 each already hold one network
        assert analyzer.better_channel(current, nets) is None

    def test_channel_change_first_candidate_wins(self, analyzer, make_network):
        current = make_network(channel=3, rssi=-40)
        nets = [current] + [make_network(channel=3) for _ in range(2)]
        assert analyzer.better_channel(current, nets) == 1

    def test_channel_change_counts_current_network_on_candidate(self, analyzer, make_network):
        current = make_network(channel=1, rssi=-40)
        nets = [current, make_network(channel=1), make_network(channel=6)]
        # Channel 1 itself holds 2 networks, 6 holds 1, 11 holds 0
        assert analyzer.better_channel(current, nets) == 11

    def test_five_ghz_channel_change(self, analyzer, make_network):
        current = make_network(channel=36, band=Band.GHZ_5, rssi=-40, width=80)
        nets = [current] + [make_network(channel=36, band=Band.GHZ_5) for _ in range(3)]
        recs = analyzer.recommendations(current, nets)
        change = next(r for r in recs if r.type is RecommendationType.CHANNEL_CHANGE)
        assert change.priority is Priority.MEDIUM
        assert "40" in change.title

    def test_band_change_when_five_ghz_is_sparse(self, analyzer, make_network):
        current = make_network(channel=1, rssi=-40)
        nets = [current] + [make_network(channel=36, band=Band.GHZ_5) for _ in range(4)]
        assert RecommendationType.BAND_CHANGE in _types(analyzer.recommendations(current, nets))

    def test_no_band_change_when_five_ghz_is_busy(self, analyzer, make_network):
        current = make_network(channel=1, rssi=-40)
        nets = [current] + [make_network(channel=36, band=Band.GHZ_5) for _ in range(5)]
        assert RecommendationType.BAND_CHANGE not in _types(
            analyzer.recommendations(current, nets)
        )

    def test_wider_bandwidth_outside_two_four(self, analyzer, make_network):
        current = make_network(channel=36, band=Band.GHZ_5, rssi=-40, width=40)
        recs = analyzer.recommendations(current, [current])
        assert _types(recs) == [RecommendationType.CONFIGURATION_CHANGE]
        assert recs[0].priority is Priority.LOW

    def test_no_wider_bandwidth_on_two_four(self, analyzer, make_network):
        current = make_network(channel=6, rssi=-40, width=20)
        recs = analyzer.recommendations(current, [current])
        assert RecommendationType.CONFIGURATION_CHANGE not in _types(recs)


class TestDetailedMetrics:
    """Congestion metrics."""

    def test_counts_and_utilization(self, analyzer, make_network):
        current = make_network(channel=6, rssi=-50)
        nets = [
            current,
            make_network(channel=6, rssi=-60),
            make_network(channel=6, rssi=-70),
            make_network(channel=9, rssi=-85),
            make_network(channel=11, rssi=-75),
            make_network(channel=6, band=Band.GHZ_6, rssi=-40),
        ]
        m = analyzer.detailed_metrics(current, nets)
        assert m.same_channel_networks == 2
        assert m.overlapping_channels == 3
        assert m.neighboring_networks == 4
        assert m.average_neighbor_rssi == pytest.approx((-60 - 70 - 75 - 40) / 4)
        assert m.channel_utilization == 30
        assert m.congestion_level is CongestionLevel.MODERATE

    def test_five_ghz_overlap_window(self, analyzer, make_network):
        current = make_network(channel=36, band=Band.GHZ_5)
        nets = [
            current,
            make_network(channel=37, band=Band.GHZ_5),
            make_network(channel=40, band=Band.GHZ_5),
        ]
        assert analyzer.detailed_metrics(current, nets).overlapping_channels == 1

    def test_utilization_is_capped(self, analyzer, make_network):
        current = make_network(channel=6)
        nets = [current] + [make_network(channel=6) for _ in range(9)]
        m = analyzer.detailed_metrics(current, nets)
        assert m.channel_utilization == 100
        assert m.congestion_level is CongestionLevel.SEVERE

    def test_no_neighbours(self, analyzer, make_network):
        current = make_network(channel=6)
        m = analyzer.detailed_metrics(current, [current])
        assert m.average_neighbor_rssi == 0
        assert m.neighboring_networks == 0


class TestScenario:
    """Weak 2.4 GHz network on a crowded channel with no 5 GHz networks."""

    def test_full_analysis(self, analyzer, scenario_networks):
        current, nets = scenario_networks
        result = analyzer.analyze(current, nets)

        weak = next(f for f in result.interference_factors
                    if f.type is InterferenceType.WEAK_SIGNAL)
        assert weak.severity is Severity.HIGH

        overlap = next(f for f in result.interference_factors
                       if f.type is InterferenceType.CHANNEL_OVERLAP)
        assert overlap.severity is Severity.MODERATE

        change = next(r for r in result.recommendations
                      if r.type is RecommendationType.CHANNEL_CHANGE)
        assert any(f"channel {ch}" in change.title for ch in (1, 6, 11))
        assert RecommendationType.BAND_CHANGE in _types(result.recommendations)

        assert result.signal_quality is SignalQuality.POOR
        assert result.detailed_metrics.same_channel_networks == 4
        assert not result.has_critical_factor

    def test_repeated_analysis_is_identical(self, analyzer, scenario_networks):
        current, nets = scenario_networks
        assert analyzer.analyze(current, nets) == analyzer.analyze(current, nets)
