from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console
from rich.pretty import Pretty
from rich.rule import Rule

from mdreflow.pipeline import format_phases
from mdreflow.utils.io import read_text_file
from mdreflow.utils.logging import LEVELS, setup_logger


def main():
    p = argparse.ArgumentParser(description="Show every stage of the mdreflow pipeline for a file")
    p.add_argument("path", type=Path, help="Markdown file to inspect")
    p.add_argument("--log-level", default="INFO", type=str.upper, choices=LEVELS, help="Log level")
    args = p.parse_args()

    setup_logger(args.log_level)
    console = Console()
    phases = format_phases(read_text_file(args.path))
    for title, value in (("tree", phases.tree), ("lowered", phases.lowered), ("resolved", phases.resolved)):
        console.print(Rule(title))
        console.print(Pretty(value))
    console.print(Rule("text"))
    console.print(phases.text, markup=False, highlight=False, end="")


if __name__ == "__main__":
    main()
