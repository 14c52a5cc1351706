"""
WiFi Optimizer Console Interface
=================================

Rich-powered console abstraction used by the WiFi Optimizer
presentation layer.

The class wraps :class:`rich.console.Console` and adds convenience methods
for banners, section headers, severity-coloured messages, tables and
status spinners, all with consistent styling.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

import datetime as _dt
from contextlib import contextmanager
from typing import Any, Generator, Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

# ---------------------------------------------------------------------------
# Theme -- consistent palette across all output
# ---------------------------------------------------------------------------
_WIFIOPT_THEME = Theme(
    {
        "wifiopt.banner": "bold bright_cyan",
        "wifiopt.section": "bold bright_magenta",
        "wifiopt.success": "bold green",
        "wifiopt.warning": "bold yellow",
        "wifiopt.error": "bold red",
        "wifiopt.info": "bold bright_blue",
        "wifiopt.dim": "dim white",
        "wifiopt.highlight": "bold bright_white",
        "wifiopt.critical": "bold white on red",
        "wifiopt.high": "bold red",
        "wifiopt.moderate": "bold yellow",
        "wifiopt.medium": "bold yellow",
        "wifiopt.low": "bold bright_cyan",
    }
)

_BANNER_ART = r"""
[bright_cyan]
 ██╗    ██╗██╗███████╗██╗ ██████╗ ██████╗ ████████╗
 ██║    ██║██║██╔════╝██║██╔═══██╗██╔══██╗╚══██╔══╝
 ██║ █╗ ██║██║█████╗  ██║██║   ██║██████╔╝   ██║
 ██║███╗██║██║██╔══╝  ██║██║   ██║██╔═══╝    ██║
 ╚███╔███╔╝██║██║     ██║╚██████╔╝██║        ██║
  ╚══╝╚══╝ ╚═╝╚═╝     ╚═╝ ╚═════╝ ╚═╝        ╚═╝
[/bright_cyan]"""

_TAGLINE = "Channel Recommendation & Network Analysis"


class WifiOptConsole:
    """Unified console interface for the WiFi Optimizer.

    Usage::

        con = WifiOptConsole()
        con.banner()
        con.section("Nearby Networks")
        con.success("Scan complete")
    """

    # ------------------------------------------------------------------ #
    #  Construction
    # ------------------------------------------------------------------ #

    def __init__(self, *, quiet: bool = False, record: bool = False) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output (useful in library / test mode).
            record: Enable Rich recording so output can be exported.
        """
        self._console = Console(
            theme=_WIFIOPT_THEME,
            quiet=quiet,
            record=record,
            highlight=False,
        )

    @property
    def rich(self) -> Console:
        """Direct access to the underlying Rich Console instance."""
        return self._console

    # ------------------------------------------------------------------ #
    #  Banner / section
    # ------------------------------------------------------------------ #

    def banner(self, version: str = "1.0.0") -> None:
        """Display the ASCII-art banner with version and timestamp."""
        now = _dt.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        subtitle = (
            f"[wifiopt.section]{_TAGLINE}[/wifiopt.section]\n"
            f"[wifiopt.dim]Version: {version}  |  {now}[/wifiopt.dim]"
        )
        panel = Panel(
            Align.center(Text.from_markup(_BANNER_ART + "\n" + subtitle)),
            border_style="bright_cyan",
            padding=(0, 2),
        )
        self._console.print(panel)

    def section(self, title: str) -> None:
        """Print a prominent section header."""
        self._console.rule(
            f"  {title}  ",
            style="wifiopt.section",
            characters="─",
        )
        self._console.print()

    # ------------------------------------------------------------------ #
    #  Message helpers (severity-coloured)
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        self._console.print(
            f"[wifiopt.success][✔] SUCCESS:[/wifiopt.success] {message}"
        )

    def warning(self, message: str) -> None:
        self._console.print(
            f"[wifiopt.warning][⚠] WARNING:[/wifiopt.warning] {message}"
        )

    def error(self, message: str) -> None:
        self._console.print(
            f"[wifiopt.error][✘] ERROR:[/wifiopt.error] {message}"
        )

    def info(self, message: str) -> None:
        self._console.print(
            f"[wifiopt.info][ℹ] INFO:[/wifiopt.info] {message}"
        )

    def critical(self, message: str) -> None:
        """Print a critical-severity message with high-visibility styling."""
        self._console.print(
            f"[wifiopt.critical][☠] CRITICAL: {message}[/wifiopt.critical]"
        )

    # ------------------------------------------------------------------ #
    #  Table display
    # ------------------------------------------------------------------ #

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Iterable of row tuples; each element is stringified.
            caption:  Optional footer caption.
            styles:   Optional per-column Rich style strings.
        """
        tbl = Table(
            title=title,
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=False,
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            style = styles[idx] if styles and idx < len(styles) else ""
            tbl.add_column(col_name, style=style)

        for row in rows:
            tbl.add_row(*(str(cell) for cell in row))

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Status spinner
    # ------------------------------------------------------------------ #

    @contextmanager
    def status(
        self, message: str = "Working..."
    ) -> Generator[Any, None, None]:
        """Context-manager showing a spinner with a status message.

        Example::

            with con.status("Scanning..."):
                snapshot = source.collect()
        """
        with self._console.status(
            f"[wifiopt.info]{message}[/wifiopt.info]",
            spinner="dots",
            spinner_style="bright_cyan",
        ) as status_obj:
            yield status_obj

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Proxy to :meth:`rich.console.Console.print`."""
        self._console.print(*args, **kwargs)

    def blank(self, count: int = 1) -> None:
        """Print *count* blank lines."""
        for _ in range(count):
            self._console.print()

    def export_text(self) -> str:
        """Export recorded console output as plain text (requires ``record=True``)."""
        return self._console.export_text()
