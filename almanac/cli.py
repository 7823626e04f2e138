"""Command-line interface for the almanac solver."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from almanac.config import DEFAULT_INPUT_PATH, DEFAULT_LOG_LEVEL, EvaluatorConfig, ExecutorKind, RunConfig
from almanac.core.domain.seeds import SeedMode
from almanac.core.errors import AlmanacError
from almanac.logging import configure_logging, get_logger
from almanac.runner import run

logger = get_logger(__name__)

app = typer.Typer(add_completion=False, help="Minimum location through the almanac maps")


def _solve(
    mode: SeedMode,
    input_path: Path,
    workers: Optional[int],
    processes: bool,
    log_level: str,
) -> None:
    configure_logging(log_level)
    try:
        config = RunConfig(
            input_path=input_path,
            mode=mode,
            log_level=log_level,
            evaluator=EvaluatorConfig(
                max_workers=workers,
                executor=ExecutorKind.PROCESS if processes else ExecutorKind.THREAD,
            ),
        )
        result = run(config)
    except (AlmanacError, ValueError) as exc:
        logger.error("run_failed", mode=mode.value, input=str(input_path), error=str(exc))
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(str(result.minimum))


@app.command("points")
def points_command(
    input_path: Path = typer.Option(DEFAULT_INPUT_PATH, "--input", help="Almanac file"),
    workers: Optional[int] = typer.Option(None, "--workers", help="Worker pool size"),
    processes: bool = typer.Option(False, "--processes", help="Use a process pool"),
    log_level: str = typer.Option(DEFAULT_LOG_LEVEL, "--log-level", help="Log level"),
) -> None:
    """Each seed is a single value."""
    _solve(SeedMode.POINTS, input_path, workers, processes, log_level)


@app.command("intervals")
def intervals_command(
    input_path: Path = typer.Option(DEFAULT_INPUT_PATH, "--input", help="Almanac file"),
    workers: Optional[int] = typer.Option(None, "--workers", help="Worker pool size"),
    processes: bool = typer.Option(False, "--processes", help="Use a process pool"),
    log_level: str = typer.Option(DEFAULT_LOG_LEVEL, "--log-level", help="Log level"),
) -> None:
    """Seeds are (start, length) pairs."""
    _solve(SeedMode.INTERVALS, input_path, workers, processes, log_level)


def main():
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
