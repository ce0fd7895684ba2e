"""Rich terminal output for the command-line interface."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from brother_exporter.publisher import METRIC_PREFIX, MetricSet

console = Console()


def display_information(fields: dict[str, str], metric_set: MetricSet) -> None:
    """Display the fields of one printer and the gauges they become.

    Args:
        fields: Normalized field name to raw value
        metric_set: Gauges published from those fields
    """
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_column("Gauge")

    for name, raw in fields.items():
        value = metric_set.get(f"{METRIC_PREFIX}{name}")
        if value is None:
            gauge = "[dim]skipped[/dim]"
        else:
            gauge = f"[green]{METRIC_PREFIX}{name} = {value:g}[/green]"
        table.add_row(escape(name), escape(raw), gauge)

    title = f"{escape(metric_set.target)} ({len(metric_set.values)} gauges)"
    console.print(Panel(table, title=title, border_style="blue"))


def display_printers(printers: list[str]) -> None:
    """Display the configured printer list."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("#", style="dim")
    table.add_column("Printer", style="cyan")

    for index, printer in enumerate(printers, start=1):
        table.add_row(str(index), escape(printer))

    console.print(Panel(table, title="Printers", border_style="blue"))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✅ {escape(message)}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]❌ {escape(message)}[/red]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]ℹ️  {escape(message)}[/blue]")
