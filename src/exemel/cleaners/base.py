"""Abstract base class for cleaner stages."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import Settings, get_settings
from ..models import CleaningContext


class BaseCleaner(ABC):
    """Common interface for pipeline stages.

    A stage receives the context produced by the previous stage and returns
    the context for the next one. Malformed text is reported through
    ``CleaningContext.fail``; stages do not raise for it.
    """

    name: str

    def __init__(self, settings: Settings | None = None) -> None:
        if not getattr(self, "name", None):
            raise ValueError("Cleaner classes must define `name`.")
        self.settings = settings or get_settings()

    @abstractmethod
    def clean(self, context: CleaningContext) -> CleaningContext:
        """Return the context with this stage's transformation applied."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
