"""Tests for engine orchestration and the JSON report."""

import json
from pathlib import Path

import pytest

from shared.config import ConfigurationError, WifiOptConfig
from shared.console import WifiOptConsole
from wifiopt.collectors.base import NetworkSource
from wifiopt.collectors.corewlan import CoreWLANSource
from wifiopt.collectors.fallback import FallbackSource
from wifiopt.collectors.snapshot_file import SnapshotFileSource
from wifiopt.collectors.system_profiler import SystemProfilerSource
from wifiopt.core.engine import WifiOptEngine
from wifiopt.core.models import AssociatedInterface, Band, CollectorError, Snapshot
from wifiopt.output.report import WifiOptReportGenerator


@pytest.fixture
def engine():
    return WifiOptEngine(config=WifiOptConfig(), console=WifiOptConsole(quiet=True))


class TestSources:
    """Source selection."""

    def test_snapshot_path_wins(self, engine, snapshot_file):
        source = engine.build_source(snapshot_file)
        assert isinstance(source, SnapshotFileSource)
        assert source.path == Path(snapshot_file)

    def test_default_chains_system_profiler_then_corewlan(self, engine):
        source = engine.build_source()
        assert isinstance(source, FallbackSource)
        assert [type(s) for s in source.sources] == [SystemProfilerSource, CoreWLANSource]

    @pytest.mark.parametrize(
        "name, expected", [("system_profiler", SystemProfilerSource), ("corewlan", CoreWLANSource)]
    )
    def test_named_source(self, name, expected):
        config = WifiOptConfig()
        config.scanner.source = name
        source = WifiOptEngine(config=config, console=WifiOptConsole(quiet=True)).build_source()
        assert type(source) is expected

    def test_snapshot_source_requires_path(self):
        config = WifiOptConfig()
        config.scanner.source = "snapshot"
        with pytest.raises(ConfigurationError):
            WifiOptEngine(config=config, console=WifiOptConsole(quiet=True)).build_source()

    def test_default_band(self):
        config = WifiOptConfig()
        assert WifiOptEngine(config=config).default_band() is None
        config.scanner.default_band = "5"
        assert WifiOptEngine(config=config).default_band() is Band.GHZ_5


class TestEvaluate:
    """Pure evaluation of a snapshot."""

    def test_full_evaluation(self, engine, snapshot_file):
        result = engine.evaluate(SnapshotFileSource(snapshot_file).collect())
        assert result.current_network is not None
        assert result.current_network.ssid == "HomeNet"
        assert result.recommendation.band_2_4 == 11
        assert result.recommendation.band_5 == 48
        assert set(result.channel_scores) == {Band.GHZ_2_4, Band.GHZ_5}
        assert len(result.channel_scores[Band.GHZ_2_4]) == 11
        assert result.analysis.current_network == result.current_network

    def test_unassociated_snapshot_is_neutral(self, engine, make_network):
        result = engine.evaluate(Snapshot(networks=(make_network(),)))
        assert result.current_network is None
        assert result.analysis.performance_score == 0
        assert result.analysis.recommendations == ()

    def test_interface_only_network_is_synthesized(self, engine, make_network):
        iface = AssociatedInterface(
            ssid="Hidden", bssid="de:ad:be:ef:00:01", rssi=-50, noise=-95, channel=40, band="5"
        )
        result = engine.evaluate(Snapshot(networks=(make_network(),), interface=iface))
        assert result.current_network is not None
        assert result.current_network.id == "de:ad:be:ef:00:01"
        assert len(result.snapshot.networks) == 2

    def test_evaluation_is_repeatable(self, engine, snapshot_file):
        snap = SnapshotFileSource(snapshot_file).collect()
        first, second = engine.evaluate(snap), engine.evaluate(snap)
        assert first.recommendation == second.recommendation
        assert first.analysis == second.analysis


class TestRun:
    """Full pipeline and report placement."""

    def test_run_writes_report(self, engine, tmp_path, snapshot_file):
        out = tmp_path / "nested" / "report.json"
        engine.run(SnapshotFileSource(snapshot_file), output_path=out)
        assert out.is_file()

    def test_bare_report_name_uses_output_dir(self, tmp_path):
        config = WifiOptConfig()
        config.global_settings.output_dir = str(tmp_path / "out")
        eng = WifiOptEngine(config=config)
        assert eng._report_path("r.json") == tmp_path / "out" / "r.json"
        assert eng._report_path(tmp_path / "x.json") == tmp_path / "x.json"
        assert eng._report_path("sub/r.json") == Path("sub/r.json")


class _FlakySource(NetworkSource):
    """Snapshot-file source that fails on selected calls."""

    name = "flaky"

    def __init__(self, path, failing=()):
        self._inner = SnapshotFileSource(path)
        self._failing = set(failing)
        self.calls = 0

    def collect(self, band=None):
        self.calls += 1
        if self.calls in self._failing:
            raise CollectorError(f"scan {self.calls} failed")
        return self._inner.collect(band)


class TestWatch:
    """Repeated scanning."""

    @pytest.fixture
    def sleeps(self, monkeypatch):
        delays = []
        monkeypatch.setattr("wifiopt.core.engine.time.sleep", delays.append)
        return delays

    def test_stops_after_max_scans(self, engine, snapshot_file, sleeps):
        source = _FlakySource(snapshot_file)
        assert engine.watch(source, max_scans=3) == 3
        assert source.calls == 3
        assert sleeps == [3.0, 3.0]

    def test_failed_scan_does_not_stop_the_loop(self, engine, snapshot_file, sleeps):
        source = _FlakySource(snapshot_file, failing={2})
        assert engine.watch(source, interval=0.5, max_scans=3) == 3
        assert source.calls == 3
        assert sleeps == [0.5, 0.5]

    def test_interval_from_config(self, snapshot_file, sleeps):
        config = WifiOptConfig()
        config.scanner.interval = 7.5
        eng = WifiOptEngine(config=config, console=WifiOptConsole(quiet=True))
        eng.watch(_FlakySource(snapshot_file), max_scans=2)
        assert sleeps == [7.5]

    def test_keyboard_interrupt_propagates(self, engine, snapshot_file, monkeypatch):
        def interrupt(_delay):
            raise KeyboardInterrupt

        monkeypatch.setattr("wifiopt.core.engine.time.sleep", interrupt)
        source = _FlakySource(snapshot_file)
        with pytest.raises(KeyboardInterrupt):
            engine.watch(source)
        assert source.calls == 1


class TestReport:
    """JSON report contents."""

    @pytest.fixture
    def result(self, engine, snapshot_file):
        return engine.evaluate(SnapshotFileSource(snapshot_file).collect())

    def test_top_level_keys(self, result):
        report = WifiOptReportGenerator().build(result)
        assert {
            "tool", "version", "generated_at", "summary", "snapshot",
            "current_network", "channel_recommendation", "analysis", "channel_scores",
        } <= set(report)
        assert report["summary"]["networks"] == 3
        assert report["summary"]["associated"] is True

    def test_channel_scores_can_be_omitted(self, result):
        report = WifiOptReportGenerator(include_channel_scores=False).build(result)
        assert "channel_scores" not in report

    def test_channel_scores_keyed_by_band(self, result):
        scores = WifiOptReportGenerator().build(result)["channel_scores"]
        assert set(scores) == {"2.4GHz", "5GHz"}
        assert [s["channel"] for s in scores["5GHz"]] == [36, 40, 44, 48, 149, 153, 157, 161]

    def test_enums_are_serialized_as_values(self, result):
        report = WifiOptReportGenerator().build(result)
        assert report["current_network"]["band"] == "5GHz"
        assert report["analysis"]["signal_quality"] == result.analysis.signal_quality.value

    def test_compact_output(self, result, tmp_path):
        path = WifiOptReportGenerator(indent=0).generate_json(result, tmp_path / "r.json")
        text = Path(path).read_text(encoding="utf-8")
        assert "\n" not in text
        assert json.loads(text)["tool"] == "wifiopt"
