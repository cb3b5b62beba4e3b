"""CLI application entry point for plotweave.

This module provides the main CLI interface using Typer.
"""

import json
import time
from pathlib import Path
from typing import Annotated, Any

import typer

from plotweave import __version__
from plotweave.algorithms import AlgorithmRegistry, build_default_registry
from plotweave.cli.output import (
    console,
    print_algorithms,
    print_error,
    print_generation_info,
    print_header,
    print_step,
    print_success,
)
from plotweave.config import KernelSettings, LoggingConfig
from plotweave.core.engine import GenerationEngine
from plotweave.domain import Bounds
from plotweave.exceptions import OutputWriteError, PlotweaveError, PresetLoadError, UnknownAlgorithmError
from plotweave.io import PathWriter, PresetReader, result_document
from plotweave.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="plotweave",
    help="Generate deterministic vector paths for pen plotters.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Plotweave[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Generate deterministic vector paths for pen plotters."""


def parse_param(item: str) -> tuple[str, Any]:
    """Split ``key=value``; the value is read as JSON when it parses, else kept as text.

    Raises:
        typer.BadParameter: If there is no ``=`` or the key is empty
    """
    key, sep, raw = item.partition("=")
    key = key.strip()
    if not sep or not key:
        raise typer.BadParameter(f"Expected key=value, got '{item}'")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return key, value


def _build_params(algorithm_id: str, preset: Path | None, params: list[str], seed: int | None) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    if preset is not None:
        reader = PresetReader(preset)
        reader.load()
        merged.update(reader.first_params(algorithm_id))
    for item in params:
        key, value = parse_param(item)
        merged[key] = value
    if seed is not None:
        merged["seed"] = seed
    return merged


def _registry() -> AlgorithmRegistry:
    return build_default_registry()


@app.command()
def generate(
    algorithm_id: Annotated[
        str,
        typer.Argument(
            help="Algorithm id (see 'plotweave list')",
            show_default=False,
        ),
    ],
    seed: Annotated[
        int | None,
        typer.Option(
            "--seed",
            "-s",
            help="Random seed (overrides presets and --param)",
            min=0,
        ),
    ] = None,
    width: Annotated[
        float,
        typer.Option("--width", help="Canvas width"),
    ] = 400.0,
    height: Annotated[
        float,
        typer.Option("--height", help="Canvas height"),
    ] = 400.0,
    margin: Annotated[
        float,
        typer.Option("--margin", help="Canvas margin", min=0.0),
    ] = 20.0,
    truncate: Annotated[
        bool,
        typer.Option(
            "--truncate/--no-truncate",
            help="Keep output inside the margin",
        ),
    ] = True,
    param: Annotated[
        list[str] | None,
        typer.Option(
            "--param",
            "-p",
            help="Parameter override as key=value (repeatable, JSON values)",
        ),
    ] = None,
    preset: Annotated[
        Path | None,
        typer.Option(
            "--preset",
            help="JSON preset file; the first preset matching the algorithm is used",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write JSON here instead of stdout",
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
) -> None:
    """Generate paths for one algorithm and emit them as JSON.

    Example:
        plotweave generate lissajous -p freqX=3 -p freqY=2 -o figure.json
    """
    settings = KernelSettings(
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "ERROR",
        ),
    )
    configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
        write_file=settings.logging.log_file is not None,
    )

    # Decorated output only makes sense when stdout is not the JSON stream
    chatty = output is not None and not quiet

    try:
        bounds = Bounds(width=width, height=height, margin=margin, truncate=truncate)
        params = _build_params(algorithm_id, preset, param or [], seed)
        engine = GenerationEngine(_registry(), settings)
        resolved = engine.resolve(algorithm_id, params)[1]

        if chatty:
            print_header(__version__)
            print_step("Generating")
            print_generation_info(algorithm_id, resolved.seed, width, height, margin)

        start = time.time()
        result = engine.generate(algorithm_id, resolved, bounds)
        elapsed = time.time() - start

        if output is None:
            typer.echo(json.dumps(result_document(result, algorithm_id, resolved.seed, bounds)))
            return

        writer = PathWriter(output, indent=2)
        size = writer.write(result, algorithm_id, resolved.seed, bounds)
        if chatty:
            print_success(
                output_path=str(output),
                file_size=_format_file_size(size),
                total_time_s=elapsed,
                paths=len(result.paths),
                points=result.point_count,
                helpers=len(result.helpers),
            )

    except UnknownAlgorithmError as e:
        print_error(str(e), details="Run 'plotweave list' to see available algorithms.")
        raise typer.Exit(code=1)
    except PresetLoadError as e:
        print_error(f"Could not load preset: {e.reason}")
        raise typer.Exit(code=1)
    except OutputWriteError as e:
        print_error(f"Could not write output: {e.reason}")
        raise typer.Exit(code=1)
    except PlotweaveError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command("list")
def list_algorithms() -> None:
    """List available algorithms."""
    print_algorithms(list(_registry()))


@app.command()
def formula(
    algorithm_id: Annotated[
        str,
        typer.Argument(help="Algorithm id", show_default=False),
    ],
    param: Annotated[
        list[str] | None,
        typer.Option(
            "--param",
            "-p",
            help="Parameter override as key=value (repeatable, JSON values)",
        ),
    ] = None,
) -> None:
    """Print the formula behind an algorithm."""
    try:
        engine = GenerationEngine(_registry())
        params = dict(parse_param(item) for item in param or [])
        typer.echo(engine.formula(algorithm_id, params))
    except UnknownAlgorithmError as e:
        print_error(str(e), details="Run 'plotweave list' to see available algorithms.")
        raise typer.Exit(code=1)


def _format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable form.

    Args:
        size_bytes: Size in bytes

    Returns:
        Human-readable file size (e.g., "428 KB")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
