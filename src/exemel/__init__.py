"""Clean up mangled XML, decode embedded XML and keep a history of the results."""

from .config import Settings, get_settings
from .extraction import EncodedXmlLocator, locate_and_decode
from .history import SnapshotHistory
from .models import CleaningContext, CleanOutcome, CleanResult, DocumentSnapshot
from .pipeline import CleaningPipeline, clean_xml, should_clean
from .session import EditorSession

__all__ = [
    "Settings",
    "get_settings",
    "CleaningContext",
    "CleanOutcome",
    "CleanResult",
    "DocumentSnapshot",
    "CleaningPipeline",
    "clean_xml",
    "should_clean",
    "EncodedXmlLocator",
    "locate_and_decode",
    "SnapshotHistory",
    "EditorSession",
]
