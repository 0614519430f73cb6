"""Editor session: ties the clipboard, files, pipeline, locator and history together."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional

from .clipboard import Clipboard, ClipboardError
from .config import Settings, get_settings
from .extraction import EncodedXmlLocator
from .files import read_file
from .history import SnapshotHistory, SnapshotRef
from .models import CleanResult, DocumentSnapshot
from .pipeline import CleaningPipeline, StatusSink

logger = logging.getLogger(__name__)

RefreshListener = Callable[[], None]


def _log_status(message: str) -> None:
    logger.info("Status: %s", message)


def describe(value: Any) -> str:
    """Short one-line preview of a text value for log messages."""
    text = str(value).replace("\n", " ")
    return text if len(text) <= 60 else f"{text[:57]}..."


class EditorSession:
    """State of one open document.

    All mutation of the displayed text and the history happens on the event
    loop thread. Cleaning, decoding and file reads run in the default
    executor and hand back plain values.

    Every request takes a new generation number. When the off-thread work
    returns and a newer request has been issued in the meantime, the result
    is dropped without emitting a status or touching the document, so the
    most recent request always wins.
    """

    def __init__(
        self,
        clipboard: Clipboard,
        status_sink: Optional[StatusSink] = None,
        pipeline: Optional[CleaningPipeline] = None,
        settings: Settings | None = None,
        file_reader: Callable[[Path | str], str] = read_file,
    ):
        self.settings = settings or get_settings()
        self.clipboard = clipboard
        self.status_sink = status_sink or _log_status
        self.pipeline = pipeline or CleaningPipeline(settings=self.settings)
        self.file_reader = file_reader
        self.history = SnapshotHistory()
        self.caret_offset = 0
        self.document_text = ""
        self._generation = 0
        self._refresh_listeners: List[RefreshListener] = []

    def add_refresh_listener(self, listener: RefreshListener) -> None:
        self._refresh_listeners.append(listener)

    async def refresh_from_clipboard(self) -> Optional[CleanResult]:
        """Clean the clipboard text and make it the new original document."""
        generation = self._begin()
        try:
            raw = self.clipboard.get_text()
        except ClipboardError as exc:
            self._emit(f"Error reading clipboard: {exc}")
            return None

        result = await self._clean(raw)
        if self._is_stale(generation):
            return None
        self._emit(result.message)
        self._replace_document(result.text)
        self._raise_refresh_complete()
        return result

    async def open_file(self, path: Path | str) -> Optional[CleanResult]:
        """Load, clean and display a file; failures leave the session untouched."""
        generation = self._begin()
        loop = asyncio.get_running_loop()
        try:
            raw = await loop.run_in_executor(None, self.file_reader, path)
        except OSError as exc:
            if not self._is_stale(generation):
                self._emit(f"Error opening file: {exc}")
            return None

        result = await self._clean(raw)
        if self._is_stale(generation):
            return None
        self._emit(f"File opened: {Path(path).name} ({result.message})")
        self._replace_document(result.text)
        self._raise_refresh_complete()
        return result

    def copy_document(self) -> None:
        try:
            self.clipboard.set_text(self.document_text)
        except ClipboardError as exc:
            self._emit(f"Error writing clipboard: {exc}")

    async def copy_decoded_at_caret(self, offset: int | None = None) -> Optional[str]:
        """Put the decoded fragment around the caret on the clipboard."""
        generation = self._begin()
        fragment = await self._decode_at(offset)
        if fragment is None or self._is_stale(generation):
            return None
        try:
            self.clipboard.set_text(fragment)
        except ClipboardError as exc:
            self._emit(f"Error writing clipboard: {exc}")
            return None
        return fragment

    async def delve_at_caret(self, offset: int | None = None) -> Optional[CleanResult]:
        """Decode the fragment around the caret, clean it and make it current.

        Delving from an earlier snapshot discards the snapshots after it.
        """
        generation = self._begin()
        source = self.history.current
        source_text = self.document_text

        fragment = await self._decode_at(offset)
        if fragment is None or self._is_stale(generation):
            return None
        result = await self._clean(fragment)
        if self._is_stale(generation):
            return None

        self._emit(result.message)
        if source is None:
            source = self.history.reset(source_text)
        self.history.truncate_after(source)
        self._display(self.history.append(result.text))
        return result

    def create_snapshot(self, text: str | None = None) -> DocumentSnapshot:
        """Record the editor text (or ``text``) as a new snapshot."""
        text = self.document_text if text is None else text
        if not len(self.history):
            snapshot = self.history.reset(text)
        else:
            self.history.truncate_after(self.history.current)
            snapshot = self.history.append(text)
        self._display(snapshot)
        return snapshot

    def change_to_snapshot(self, snapshot: SnapshotRef) -> DocumentSnapshot:
        target = self.history.jump_to(snapshot)
        self._display(target)
        return target

    def _begin(self) -> int:
        self._generation += 1
        return self._generation

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            logger.info("Discarding result of superseded request %d", generation)
            return True
        return False

    async def _clean(self, raw: str) -> CleanResult:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.pipeline.clean, raw)

    async def _decode_at(self, offset: int | None) -> Optional[str]:
        offset = self.caret_offset if offset is None else offset
        locator = EncodedXmlLocator(self.document_text)
        fragment = await locator.decode_around_async(offset)
        if fragment is None:
            logger.debug("No encoded XML around offset %d", offset)
        return fragment

    def _emit(self, message: str) -> None:
        self.status_sink(message)

    def _replace_document(self, text: str) -> None:
        self._display(self.history.reset(text))

    def _display(self, snapshot: DocumentSnapshot) -> None:
        logger.debug("Displaying snapshot %d: %s", snapshot.handle, describe(snapshot.text))
        self.document_text = snapshot.text
        self.caret_offset = min(self.caret_offset, len(snapshot.text))

    def _raise_refresh_complete(self) -> None:
        for listener in list(self._refresh_listeners):
            listener()
