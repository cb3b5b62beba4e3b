"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with tables and formatted messages. Machine-readable JSON never goes
through these helpers.
"""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from plotweave.algorithms import Algorithm

console = Console()
err_console = Console(stderr=True)

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Plotweave[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_generation_info(algorithm_id: str, seed: int, width: float, height: float, margin: float) -> None:
    """Print what is about to be generated.

    Args:
        algorithm_id: Algorithm id
        seed: Seed in use
        width: Canvas width
        height: Canvas height
        margin: Canvas margin
    """
    console.print(f"  {algorithm_id} {SYM_DOT} seed {seed}")
    console.print(f"  {width:g} x {height:g} {SYM_DOT} margin {margin:g}")


def print_algorithms(algorithms: list[Algorithm]) -> None:
    """Print the algorithm catalog as a table."""
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("id", style="cyan", no_wrap=True)
    table.add_column("label")
    table.add_column("description", style="dim")
    for algorithm in algorithms:
        table.add_row(algorithm.id, algorithm.label, algorithm.description)
    console.print(table)


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(
    output_path: str,
    file_size: str,
    total_time_s: float,
    paths: int,
    points: int,
    helpers: int,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        total_time_s: Total generation time in seconds
        paths: Number of paths written
        points: Number of explicit points written
        helpers: Number of helper paths written
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    console.print(f"  {paths:,} paths {SYM_DOT} {points:,} points {SYM_DOT} {helpers} helpers")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message to stderr.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    err_console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        err_console.print(f"  {details}")
