from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from .errors import FormatError
from .version import __version__
from .utils.logging import parse_level, setup_logger
from .pipeline import RunConfig, run


app = typer.Typer(add_completion=False, help="Reformat Markdown files into a canonical hard-wrapped form.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


def _level_callback(value: str) -> str:
    try:
        parse_level(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    return value.upper()


@app.command()
def main(
    paths: Optional[List[Path]] = typer.Argument(None, help="Files or directories to format", show_default=False),
    log_level: str = typer.Option(
        "INFO", "--log-level", envvar="MDREFLOW_LOG_LEVEL", callback=_level_callback, help="Logging level"
    ),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Print version and exit"
    ),
):
    logger = setup_logger(log_level)
    cfg = RunConfig(paths=list(paths or []))
    try:
        ok = run(cfg)
    except FormatError as e:
        logger.error(f"Aborted: {e}")
        raise typer.Exit(code=2)
    if not ok:
        raise typer.Exit(code=1)


def entrypoint():
    app()

if __name__ == "__main__":
    entrypoint()
