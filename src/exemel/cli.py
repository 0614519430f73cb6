"""Command line entry point: clean a file or stdin and optionally delve into it."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .clipboard import MemoryClipboard
from .config import Settings, get_settings
from .models import CleanResult
from .session import EditorSession
from .utils.logging import configure_logging

logger = logging.getLogger("exemel")


async def run_cli(
    path: Optional[str],
    delve_offsets: Sequence[int] = (),
    stdin_text: str = "",
    settings: Settings | None = None,
) -> tuple[EditorSession, Optional[CleanResult]]:
    """Load the input, apply each delve in order and return the session."""
    settings = settings or get_settings()
    session = EditorSession(
        clipboard=MemoryClipboard(stdin_text),
        status_sink=lambda message: logger.info(message),
        settings=settings,
    )
    if path:
        result = await session.open_file(path)
    else:
        result = await session.refresh_from_clipboard()

    for offset in delve_offsets:
        delved = await session.delve_at_caret(offset)
        if delved is None:
            logger.warning("No encoded XML found at offset %d", offset)
            continue
        result = delved
    return session, result


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Clean up mangled XML and pretty-print it."
    )
    parser.add_argument(
        "path",
        nargs="?",
        help="File to clean (default: read standard input).",
    )
    parser.add_argument(
        "--delve",
        type=int,
        action="append",
        default=[],
        metavar="OFFSET",
        help="Decode the encoded XML around OFFSET in the current document; repeatable.",
    )
    parser.add_argument(
        "--output",
        help="Write the result to this path instead of standard output.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override EXEMEL_LOG_LEVEL for this run.",
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    stdin_text = "" if args.path else sys.stdin.read()
    session, result = asyncio.run(
        run_cli(args.path, delve_offsets=args.delve, stdin_text=stdin_text)
    )
    if result is None:
        return 1

    if args.output:
        Path(args.output).write_text(session.document_text + "\n", encoding="utf-8")
    else:
        sys.stdout.write(session.document_text + "\n")
    return 1 if result.is_failed else 0


if __name__ == "__main__":  # pragma: no cover - CLI helper
    sys.exit(main())
