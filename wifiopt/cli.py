"""
WiFi Optimizer CLI
===================

Click-based command-line interface.

Commands:
    wifiopt scan [--band B] [--snapshot FILE] [--watch [--interval S]]
                                                      List nearby networks
    wifiopt recommend [--band B] [--snapshot FILE]       Recommend channels
    wifiopt analyze [--band B] [--snapshot FILE] [--output P]
                                                      Full analysis

Without ``--snapshot`` the networks are collected live through the
source named by ``scanner.source`` (``system_profiler`` then CoreWLAN
by default, macOS only).

Exit codes:
    0  success
    1  the current network has a critical interference factor (analyze)
    2  networks could not be collected

References:
    - Click Documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from shared.config import ConfigurationError, WifiOptConfig
from shared.console import WifiOptConsole
from shared.logger import setup_logging

from wifiopt import __version__
from wifiopt.core.models import Band, CollectorError

_BAND_CHOICES = ["2.4", "2.4ghz", "2_4", "2", "5", "5ghz", "6", "6ghz"]


def _parse_band(engine, label: Optional[str]) -> Optional[Band]:
    """CLI band label, falling back to ``scanner.default_band``."""
    if label:
        return Band.from_label(label)
    return engine.default_band()


# ---------------------------------------------------------------------------
# CLI Group
# ---------------------------------------------------------------------------


@click.group(
    name="wifiopt",
    help=(
        "WIFIOPT - Channel Recommendation & Network Analysis\n\n"
        "Scan nearby access points, recommend the least congested "
        "channel per band, and analyse the currently associated network."
    ),
)
@click.version_option(__version__, prog_name="wifiopt")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to configuration file (TOML).",
)
@click.option(
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress console output.",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug logging (also: WIFIOPT_DEBUG=1).",
)
@click.pass_context
def cli(
    ctx: click.Context, config_path: Optional[str], quiet: bool, debug: bool
) -> None:
    """WiFi Optimizer - main CLI entry point."""
    ctx.ensure_object(dict)

    try:
        config = WifiOptConfig.load(config_path)
    except (FileNotFoundError, ConfigurationError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if debug:
        config.global_settings.debug = True
        config.global_settings.log_level = "DEBUG"

    gs = config.global_settings
    setup_logging(
        gs.log_level,
        log_file=gs.log_file,
        json_logs=gs.log_json,
        console_output=not quiet,
    )

    ctx.obj["config"] = config
    ctx.obj["console"] = WifiOptConsole(quiet=quiet)
    ctx.obj["quiet"] = quiet


def _engine(ctx: click.Context):
    from wifiopt.core.engine import WifiOptEngine

    return WifiOptEngine(config=ctx.obj["config"], console=ctx.obj["console"])


def _source(ctx: click.Context, engine, snapshot: Optional[str]):
    try:
        return engine.build_source(snapshot)
    except ConfigurationError as exc:
        ctx.obj["console"].error(str(exc))
        sys.exit(1)


# ---------------------------------------------------------------------------
# Scan Command
# ---------------------------------------------------------------------------

_band_option = click.option(
    "--band", "-b",
    type=click.Choice(_BAND_CHOICES, case_sensitive=False),
    default=None,
    help="Restrict to one band (2.4, 5 or 6).",
)

_snapshot_option = click.option(
    "--snapshot", "-s",
    type=click.Path(dir_okay=False),
    default=None,
    help="Read networks from a JSON snapshot file instead of scanning.",
)


@cli.command(
    name="scan",
    help=(
        "List nearby networks.\n\n"
        "Networks are sorted by signal strength, strongest first. The "
        "currently associated network is marked with '*'. With --watch the "
        "scan repeats every --interval seconds (default: scanner.interval) "
        "until interrupted with Ctrl-C; failed scans are reported and "
        "skipped."
    ),
)
@_band_option
@_snapshot_option
@click.option(
    "--watch", "-w",
    is_flag=True,
    default=False,
    help="Keep scanning until interrupted.",
)
@click.option(
    "--interval", "-i",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds between scans in watch mode.",
)
@click.pass_context
def scan(
    ctx: click.Context,
    band: Optional[str],
    snapshot: Optional[str],
    watch: bool,
    interval: Optional[float],
) -> None:
    """List nearby networks."""
    engine = _engine(ctx)
    source = _source(ctx, engine, snapshot)
    if watch:
        try:
            engine.watch(source, _parse_band(engine, band), interval)
        except KeyboardInterrupt:
            ctx.obj["console"].info("Watch stopped")
        return

    try:
        engine.scan(source, _parse_band(engine, band))
    except CollectorError as exc:
        ctx.obj["console"].error(str(exc))
        sys.exit(2)


# ---------------------------------------------------------------------------
# Recommend Command
# ---------------------------------------------------------------------------


@cli.command(
    name="recommend",
    help=(
        "Recommend the least congested channel per band.\n\n"
        "Scores every candidate channel by signal-weighted overlap with "
        "observed networks. In 2.4 GHz the result is always 1, 6 or 11. "
        "6 GHz has no candidate channels."
    ),
)
@_band_option
@_snapshot_option
@click.pass_context
def recommend(ctx: click.Context, band: Optional[str], snapshot: Optional[str]) -> None:
    """Recommend channels."""
    engine = _engine(ctx)
    source = _source(ctx, engine, snapshot)
    try:
        engine.recommend(source, _parse_band(engine, band))
    except CollectorError as exc:
        ctx.obj["console"].error(str(exc))
        sys.exit(2)


# ---------------------------------------------------------------------------
# Analyze Command
# ---------------------------------------------------------------------------


@cli.command(
    name="analyze",
    help=(
        "Analyse the currently associated network.\n\n"
        "Shows the network list, channel recommendation, performance "
        "score, interference factors and recommendations. Exits with "
        "status 1 when a critical interference factor is present."
    ),
)
@_band_option
@_snapshot_option
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write a JSON report to this path.",
)
@click.pass_context
def analyze(
    ctx: click.Context,
    band: Optional[str],
    snapshot: Optional[str],
    output: Optional[str],
) -> None:
    """Run the full analysis."""
    engine = _engine(ctx)
    source = _source(ctx, engine, snapshot)
    try:
        result = engine.run(source, _parse_band(engine, band), output_path=output)
    except CollectorError as exc:
        ctx.obj["console"].error(str(exc))
        sys.exit(2)

    if result.analysis.has_critical_factor:
        sys.exit(1)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Entry point for the WiFi Optimizer CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
