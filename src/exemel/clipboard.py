"""Clipboard access used by the editor session."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ClipboardError(RuntimeError):
    """Raised when the clipboard cannot be read or written."""


class Clipboard(ABC):
    """Common interface for clipboard backends."""

    @abstractmethod
    def get_text(self) -> str:
        """Return the clipboard text, ``""`` when it holds none."""

    @abstractmethod
    def set_text(self, text: str) -> None:
        """Replace the clipboard content with ``text``."""


class MemoryClipboard(Clipboard):
    """Process-local clipboard; used by the CLI and in tests."""

    def __init__(self, text: str = ""):
        self._text = text

    def get_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        if text is None:
            raise ClipboardError("Cannot place None on the clipboard")
        self._text = text
