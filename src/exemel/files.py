"""File loading helpers."""

from __future__ import annotations

from pathlib import Path


def read_file(path: Path | str) -> str:
    """Return the text of ``path``.

    Raises ``FileNotFoundError`` for a missing path and ``OSError`` for other
    read failures. Undecodable bytes are replaced rather than rejected.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"No such file: {path}")
    return path.read_text(encoding="utf-8-sig", errors="replace")
