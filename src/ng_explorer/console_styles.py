"""Console styling utilities for consistent Rich output formatting.

Table builders, status indicators and formatting helpers shared by the
CLI commands.

Example:
    >>> from ng_explorer.console_styles import create_summary_table, format_count
    >>> table = create_summary_table("Graph Summary")
    >>> table.add_row("Nodes", format_count(12))
    >>> console.print(table)
"""

from typing import List, Tuple

from rich.box import ROUNDED
from rich.panel import Panel
from rich.table import Table


def format_count(count: int) -> str:
    """Format a count with thousands separator.

    Args:
        count: Number to format

    Returns:
        str: Formatted count string
    """
    return f"{count:,}"


def format_list(items: List[str], empty: str = "(none)") -> str:
    return ", ".join(items) if items else f"[dim]{empty}[/dim]"


def create_summary_table(title: str, header_style: str = "bold cyan") -> Table:
    """Create a styled summary table.

    Args:
        title: Table title
        header_style: Rich style for header (default: "bold cyan")

    Returns:
        Table: Configured Rich Table
    """
    table = Table(
        title=title,
        show_header=True,
        header_style=header_style,
        box=ROUNDED,
    )
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right", style="green")
    return table


def create_data_table(title: str, columns: List[Tuple[str, str, str]]) -> Table:
    """Create a configurable data display table.

    Args:
        title: Table title
        columns: List of (column_name, justify, style) tuples

    Returns:
        Table: Configured Rich Table
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold cyan",
        box=ROUNDED,
    )

    for col_name, justify, style in columns:
        table.add_column(col_name, justify=justify, style=style)

    return table


def create_header_panel(
    title: str,
    subtitle: str = "",
    border_style: str = "cyan"
) -> Panel:
    """Create a styled header panel.

    Args:
        title: Panel title
        subtitle: Optional subtitle
        border_style: Rich style for border

    Returns:
        Panel: Configured Rich Panel
    """
    if subtitle:
        content = f"[bold cyan]{title}[/bold cyan]\n{subtitle}"
    else:
        content = f"[bold cyan]{title}[/bold cyan]"

    return Panel.fit(
        content,
        border_style=border_style,
        padding=(0, 1),
    )


class StyleGuide:
    """Color and styling guide for consistency.

    Attributes:
        header: Style for headers
        success: Style for success messages
        error: Style for error messages
        warning: Style for warnings
        label: Style for labels/headings
        dim: Style for less important info
    """

    header = "bold cyan"
    success = "green"
    error = "red"
    warning = "yellow"
    label = "cyan"
    dim = "dim"

    success_icon = "[green]✓[/green]"
    error_icon = "[red]✗[/red]"
    warning_icon = "[yellow]⚠[/yellow]"
