# obdsfhir/cli_theme.py
"""Terminal theme for the obdsfhir CLI.

  - Compact brand line with version
  - Section headers with a rule
  - Rounded tables with muted borders
  - Status lines for info, success, warning and error
"""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

# ── Brand ─────────────────────────────────────────────────────────

BRAND = "obds-to-fhir"
TAGLINE = "Registry report consolidation and FHIR mapping"

# ── Palette ───────────────────────────────────────────────────────

ACCENT = "#3A86C8"
BORDER = "#8FA3B8"
MUTED = "dim"


def print_banner(version: str, console: Console) -> None:
    """Print the brand line and tagline."""
    console.print()
    console.print(f"  [bold {ACCENT}]{BRAND}[/bold {ACCENT}] [{MUTED}]v{version}[/{MUTED}]")
    console.print(f"  [{BORDER}]{TAGLINE}[/{BORDER}]")
    console.print()


def print_version(version: str, console: Console) -> None:
    """Print a compact branded version line."""
    t = Text()
    t.append(BRAND, style=f"bold {ACCENT}")
    t.append(f"  v{version}", style=MUTED)
    console.print(t)


# ── Section headers ──────────────────────────────────────────────


def section(title: str, console: Console, uppercase: bool = True) -> None:
    """Print a section header followed by a rule."""
    console.print()
    t = Text("  ")
    t.append(title.upper() if uppercase else title, style="bold")
    console.print(t)
    console.print(f"  {'─' * len(TAGLINE)}", style=BORDER)


# ── Tables ───────────────────────────────────────────────────────


def make_table(title: str | None = None, **kwargs: object) -> Table:
    """Create a table with rounded, muted borders."""
    return Table(
        title=title,
        box=box.ROUNDED,
        border_style=BORDER,
        title_style=f"bold {ACCENT}",
        header_style="bold",
        padding=(0, 1),
        **kwargs,
    )


def make_kv_table() -> Table:
    """Create a headerless two-column key–value table."""
    t = make_table(show_header=False)
    t.add_column("Key", style=f"bold {ACCENT}", no_wrap=True)
    t.add_column("Value")
    return t


# ── Status lines ─────────────────────────────────────────────────


def info(msg: str) -> str:
    return f"  [{ACCENT}]›[/{ACCENT}] [{MUTED}]{msg}[/{MUTED}]"


def ok(msg: str) -> str:
    return f"  [bold green]✓[/bold green] {msg}"


def warn(msg: str) -> str:
    return f"  [bold yellow]![/bold yellow] [yellow]{msg}[/yellow]"


def err(msg: str) -> str:
    return f"  [bold red]✗[/bold red] {msg}"
