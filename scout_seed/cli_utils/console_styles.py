from __future__ import annotations

import json
from typing import Any, Dict, Mapping

from rich.console import Console
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text


class ConsoleStyles:
    """
    Centralized styles and helper methods for rich console output.
    """

    SUCCESS = Style(color="green", bold=True)
    WARNING = Style(color="yellow", bold=True)
    ERROR = Style(color="red", bold=True)
    INFO = Style(color="cyan", italic=True)

    @staticmethod
    def print_success(console: Console, message: str) -> None:
        console.print(Text(message, style=ConsoleStyles.SUCCESS))

    @staticmethod
    def print_warning(console: Console, message: str) -> None:
        console.print(Text(message, style=ConsoleStyles.WARNING))

    @staticmethod
    def print_error(console: Console, message: str) -> None:
        console.print(Text(message, style=ConsoleStyles.ERROR))

    @staticmethod
    def print_info(console: Console, message: str) -> None:
        console.print(Text(message, style=ConsoleStyles.INFO))

    @staticmethod
    def print_panel(console: Console, content: str, title: str | None = None, border_style: str = "blue") -> None:
        """Print content in a panel."""
        console.print(
            Panel(
                content,
                title=f"[bold]{title}[/bold]" if title else None,
                border_style=border_style,
                expand=False,
            )
        )

    @staticmethod
    def format_label_value(label: str, value: Any, label_color: str = "cyan") -> str:
        """Format a label-value pair with consistent styling."""
        return f"[{label_color}]{label}:[/{label_color}] {value}"


def key_value_table(rows: Mapping[str, Any], key_header: str = "Name", value_header: str = "Value") -> Table:
    """Build a two-column table from a mapping."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column(key_header, style="cyan")
    table.add_column(value_header)
    for key, value in rows.items():
        table.add_row(str(key), str(value))
    return table


def print_json_or_tables(console: Console, items: Dict[str, Any], output_format: str = "table") -> None:
    """Print sections of items as JSON or one table per section."""
    if output_format == "json":
        console.print_json(json.dumps(items, indent=2, default=str))
        return

    for section, data in items.items():
        console.print(f"\n[bold blue]{section.replace('_', ' ').title()}:[/bold blue]")
        if isinstance(data, dict):
            console.print(key_value_table(data))
        else:
            console.print(data)
