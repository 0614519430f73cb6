"""Linear history of cleaned and decoded document versions."""

from __future__ import annotations

import itertools
import logging
from typing import Iterator, List, Optional, Union

from .models import DocumentSnapshot

logger = logging.getLogger(__name__)

ORIGINAL_LABEL = "Original"
CURRENT_LABEL = "Current"

SnapshotRef = Union[DocumentSnapshot, int]


def label_for_position(index: int, count: int) -> str:
    """Label of the snapshot at ``index`` in a history of ``count`` entries."""
    if index == 0:
        return ORIGINAL_LABEL
    if index == count - 1:
        return CURRENT_LABEL
    return str(index)


class SnapshotHistory:
    """Ordered snapshots with jump-to and truncate-after semantics.

    Labels are never stored; they are derived from position every time they
    are read. Snapshots are matched by handle, never by text or identity.
    """

    def __init__(self) -> None:
        self._entries: List[DocumentSnapshot] = []
        self._handles = itertools.count(1)
        self._current: Optional[DocumentSnapshot] = None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DocumentSnapshot]:
        return iter(list(self._entries))

    @property
    def snapshots(self) -> tuple[DocumentSnapshot, ...]:
        return tuple(self._entries)

    @property
    def labels(self) -> List[str]:
        count = len(self._entries)
        return [label_for_position(index, count) for index in range(count)]

    @property
    def current(self) -> Optional[DocumentSnapshot]:
        """The snapshot currently displayed."""
        return self._current

    @property
    def tip(self) -> Optional[DocumentSnapshot]:
        return self._entries[-1] if self._entries else None

    def label_of(self, ref: SnapshotRef) -> str:
        index = self._index_of(ref)
        if index is None:
            raise KeyError(f"Snapshot {_handle(ref)} is not part of this history")
        return label_for_position(index, len(self._entries))

    def find(self, ref: SnapshotRef) -> Optional[DocumentSnapshot]:
        index = self._index_of(ref)
        return None if index is None else self._entries[index]

    def reset(self, text: str) -> DocumentSnapshot:
        """Start over with ``text`` as the only, original snapshot."""
        snapshot = self._new_snapshot(text)
        self._entries = [snapshot]
        self._current = snapshot
        return snapshot

    def append(self, text: str) -> DocumentSnapshot:
        """Add ``text`` as the new tip and display it."""
        snapshot = self._new_snapshot(text)
        self._entries.append(snapshot)
        self._current = snapshot
        logger.debug("Appended snapshot %d (%d total)", snapshot.handle, len(self._entries))
        return snapshot

    def jump_to(self, ref: SnapshotRef) -> DocumentSnapshot:
        """Display an existing snapshot; the list itself is not touched."""
        snapshot = self.find(ref)
        if snapshot is None:
            raise KeyError(f"Snapshot {_handle(ref)} is not part of this history")
        self._current = snapshot
        return snapshot

    def truncate_after(self, ref: SnapshotRef | None) -> int:
        """Drop every snapshot after ``ref`` and return how many were removed.

        Nothing happens when ``ref`` is the tip or is not in the history.
        """
        if ref is None or len(self._entries) <= 1:
            return 0
        if _handle(ref) == self._entries[-1].handle:
            return 0
        index = self._index_of(ref)
        if index is None:
            return 0

        removed = len(self._entries) - index - 1
        del self._entries[index + 1 :]
        if self._current is not None and self._index_of(self._current) is None:
            self._current = self._entries[-1]
        logger.debug("Truncated %d snapshot(s) after %d", removed, _handle(ref))
        return removed

    def _new_snapshot(self, text: str) -> DocumentSnapshot:
        return DocumentSnapshot(handle=next(self._handles), text=text)

    def _index_of(self, ref: SnapshotRef) -> Optional[int]:
        handle = _handle(ref)
        for index, entry in enumerate(self._entries):
            if entry.handle == handle:
                return index
        return None


def _handle(ref: SnapshotRef) -> int:
    return ref.handle if isinstance(ref, DocumentSnapshot) else int(ref)
