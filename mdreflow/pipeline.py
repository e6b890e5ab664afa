from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .errors import FormatError
from .layout.directives import Directive
from .layout.lower import lower
from .layout.reflow import fix_line_breaks
from .layout.render import render
from .parse.tokenizer import tokenize
from .parse.tree import Block
from .utils.io import WriteResult, read_text_file, write_text_file
from .utils.logging import get_logger

OUTPUT_SUFFIX = ".formatted-md"


@dataclass
class RunConfig:
    paths: List[Path] = field(default_factory=list)
    suffix: str = OUTPUT_SUFFIX


@dataclass
class Phases:
    tree: List[Block]
    lowered: List[Directive]
    resolved: List[Directive]
    text: str


def format_phases(text: str) -> Phases:
    tree = tokenize(text)
    lowered = lower(tree)
    resolved = fix_line_breaks(lowered)
    return Phases(tree=tree, lowered=lowered, resolved=resolved, text=render(resolved))


def format_markdown(text: str) -> str:
    return format_phases(text).text


def output_path(path: Path, suffix: str = OUTPUT_SUFFIX) -> Path:
    return path.with_suffix(suffix)


def process_file(path: Path, cfg: RunConfig) -> WriteResult:
    logger = get_logger()
    logger.info(f"Processing {path}")
    source = read_text_file(path)
    formatted = format_markdown(source)
    written = write_text_file(output_path(path, cfg.suffix), formatted)
    logger.debug(f"Saved: {written.path} ({written.bytes_written} bytes)")
    return written


def walk(path: Path, cfg: RunConfig) -> bool:
    """Format every file under ``path``; False if any of them failed with an I/O error.

    Missing paths count as success. Unsupported Markdown and internal errors
    are logged and re-raised, ending the run.
    """
    logger = get_logger()
    if path.is_dir():
        try:
            entries = sorted(path.iterdir())
        except OSError as e:
            logger.error(f"Error reading directory {path}: {e}")
            return False
        ok = True
        for entry in entries:
            if not walk(entry, cfg):
                ok = False
        return ok
    if path.is_file():
        try:
            process_file(path, cfg)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error processing {path}: {e}")
            return False
        except FormatError as e:
            logger.error(f"Error processing {path}: {e}")
            raise
    return True


def run(cfg: RunConfig) -> bool:
    ok = True
    for path in cfg.paths:
        if not walk(path, cfg):
            ok = False
    return ok

