"""
WiFi Optimizer Configuration Management
========================================

Configuration for the WiFi Optimizer using Python dataclasses and
TOML-based persistence. Every setting has a default, so the tool runs
without any configuration file.

Example ``wifiopt.toml``::

    [global]
    log_level = "DEBUG"
    log_file = "logs/wifiopt.log"
    log_json = true

    [scanner]
    source = "auto"
    timeout = 20
    interval = 5.0

    [report]
    indent = 2

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# ---------------------------------------------------------------------------
# Default configuration file path relative to the working directory
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path("wifiopt.toml")

# Environment variable that forces debug logging when set to a truthy value
DEBUG_ENV_VAR = "WIFIOPT_DEBUG"

_VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
_VALID_SOURCES = frozenset({"auto", "system_profiler", "corewlan", "snapshot"})
_VALID_BANDS = frozenset({"2.4", "5", "6"})


class ConfigurationError(ValueError):
    """Raised when a configuration value is out of its allowed domain."""


# ========================== Section Configs ================================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Logging verbosity, log destinations and output directory."""

    log_level: str = "WARNING"
    log_file: Optional[str] = None
    log_json: bool = False
    output_dir: str = "output"
    debug: bool = False


@dataclass(frozen=False, slots=True)
class ScannerConfig:
    """Network discovery settings.

    ``source`` selects the discovery adapter when no snapshot file is
    given on the command line: ``auto`` tries ``system_profiler`` and
    falls back to a CoreWLAN scan. ``interval`` is the delay in seconds
    between scans in watch mode. ``default_band`` restricts scans
    to one band (``"2.4"``, ``"5"`` or ``"6"``); empty means all bands.
    """

    source: str = "auto"
    system_profiler_path: str = "/usr/sbin/system_profiler"
    timeout: int = 30
    interval: float = 3.0
    default_band: str = ""


@dataclass(frozen=False, slots=True)
class ReportConfig:
    """JSON report settings."""

    indent: int = 2
    include_channel_scores: bool = True


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class WifiOptConfig:
    """Master configuration aggregating all sections.

    Usage:
        >>> config = WifiOptConfig.load()                  # from default path
        >>> config = WifiOptConfig.load("custom.toml")     # from custom path
        >>> config.scanner.timeout
        30
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> WifiOptConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``wifiopt.toml`` in the
        working directory. Missing keys fall back to dataclass defaults.
        The ``WIFIOPT_DEBUG`` environment variable, when truthy, forces
        ``debug = true`` and ``log_level = "DEBUG"``.

        Args:
            path: Filesystem path to a TOML configuration file.

        Returns:
            A validated :class:`WifiOptConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
            ConfigurationError: If a value is outside its allowed domain.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if config_path.exists():
            with open(config_path, "rb") as fh:
                raw: dict[str, Any] = tomllib.load(fh)
            config = cls(
                global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
                scanner=cls._build_section(ScannerConfig, raw.get("scanner", {})),
                report=cls._build_section(ReportConfig, raw.get("report", {})),
            )
        elif path is not None:
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        else:
            config = cls()

        if _env_flag(DEBUG_ENV_VAR):
            config.global_settings.debug = True
        if config.global_settings.debug:
            config.global_settings.log_level = "DEBUG"

        config.validate()
        return config

    def validate(self) -> None:
        """Check value domains.

        Raises:
            ConfigurationError: On the first invalid value found.
        """
        level = self.global_settings.log_level.upper()
        if level not in _VALID_LOG_LEVELS:
            raise ConfigurationError(f"Invalid log_level: {self.global_settings.log_level!r}")
        self.global_settings.log_level = level

        if self.scanner.source not in _VALID_SOURCES:
            raise ConfigurationError(
                f"Invalid scanner source: {self.scanner.source!r} "
                f"(expected one of {sorted(_VALID_SOURCES)})"
            )
        if self.scanner.timeout <= 0:
            raise ConfigurationError("scanner.timeout must be positive")
        if self.scanner.interval <= 0:
            raise ConfigurationError("scanner.interval must be positive")
        if self.scanner.default_band and self.scanner.default_band not in _VALID_BANDS:
            raise ConfigurationError(
                f"Invalid scanner default_band: {self.scanner.default_band!r}"
            )
        if self.report.indent < 0:
            raise ConfigurationError("report.indent must not be negative")

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")

