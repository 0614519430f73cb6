"""Pydantic representations of cleaning runs and document snapshots."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class CleaningContext(BaseModel):
    """Unit of work handed from one cleaner stage to the next.

    Stages never mutate a context; they return an updated copy, so a context
    built for one clean request is never observed by another.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    input: str
    working_text: str
    parsed_result: Optional[Any] = None
    error_message: Optional[str] = None

    @classmethod
    def start(cls, raw_text: str) -> "CleaningContext":
        return cls(input=raw_text, working_text=raw_text)

    @property
    def halted(self) -> bool:
        return bool(self.error_message and self.error_message.strip())

    def with_text(self, text: str) -> "CleaningContext":
        if text == self.working_text:
            return self
        return self.model_copy(update={"working_text": text})

    def fail(self, message: str) -> "CleaningContext":
        return self.model_copy(update={"error_message": message})


class CleanOutcome(str, Enum):
    UNCHANGED = "unchanged"
    CLEANED = "cleaned"
    FAILED = "failed"


class CleanResult(BaseModel):
    """Outcome of one clean request, comparable by value."""

    model_config = ConfigDict(frozen=True)

    outcome: CleanOutcome
    text: str
    parsed: bool = False
    message: str
    diagnostic: Optional[str] = None

    @property
    def is_failed(self) -> bool:
        return self.outcome is CleanOutcome.FAILED

    @property
    def is_parsed(self) -> bool:
        return self.outcome is CleanOutcome.CLEANED and self.parsed


class DocumentSnapshot(BaseModel):
    """One immutable version of the document in the snapshot history.

    ``handle`` is assigned by the owning history when the snapshot is created
    and is the only thing used to tell snapshots apart; two snapshots holding
    identical text are still different points in history.
    """

    model_config = ConfigDict(frozen=True)

    handle: int
    text: str
