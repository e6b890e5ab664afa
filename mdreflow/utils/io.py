from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class WriteResult:
    path: Path
    bytes_written: int


def read_text_file(path: Path, encoding: str = "utf-8") -> str:
    return path.read_bytes().decode(encoding)


def write_text_file(path: Path, content: str, encoding: str = "utf-8") -> WriteResult:
    data = content.encode(encoding)
    path.write_bytes(data)
    return WriteResult(path=path, bytes_written=len(data))
