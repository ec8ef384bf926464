"""Pure predicates deciding which raw events matter."""

from collections.abc import Iterable
from pathlib import PurePath

from watchdog.events import (
    DirCreatedEvent,
    DirDeletedEvent,
    DirModifiedEvent,
    DirMovedEvent,
    FileClosedEvent,
    FileClosedNoWriteEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileOpenedEvent,
    FileSystemEvent,
)

from watchrun_engine.models import EventKind

RELEVANT_KINDS = frozenset(
    {
        EventKind.CREATED,
        EventKind.DATA_MODIFIED,
        EventKind.NAME_MODIFIED,
        EventKind.REMOVED,
    }
)


def is_relevant(kind: EventKind) -> bool:
    """Check if an event kind represents a content-relevant change.

    Args:
        kind: Normalized event kind

    Returns:
        True for file creation, data modification, rename and removal
    """
    return kind in RELEVANT_KINDS


def matches(path: str | PurePath, extensions: Iterable[str]) -> bool:
    """Check if path's final extension is in the allow-set.

    Args:
        path: Changed path
        extensions: Extensions without leading dot; empty allows everything

    Returns:
        True if path matches the filter
    """
    allowed = extensions if isinstance(extensions, (set, frozenset)) else set(extensions)
    if not allowed:
        return True

    suffix = PurePath(path).suffix
    if not suffix or suffix == ".":
        return False
    return suffix[1:] in allowed


def normalize_extensions(values: Iterable[str]) -> frozenset[str]:
    """Normalize user-supplied extensions ("py", ".py", " py ") to bare names.

    Args:
        values: Raw extension strings

    Returns:
        Set of non-empty extensions without leading dot
    """
    normalized = set()
    for value in values:
        ext = value.strip()
        if ext.startswith("."):
            ext = ext[1:]
        if ext:
            normalized.add(ext)
    return frozenset(normalized)


def kind_from_watchdog(event: FileSystemEvent) -> EventKind:
    """Map a watchdog event to an EventKind.

    Args:
        event: Event delivered by a watchdog observer

    Returns:
        Normalized kind; directory events map to DIRECTORY
    """
    if event.is_directory or isinstance(
        event, (DirCreatedEvent, DirDeletedEvent, DirModifiedEvent, DirMovedEvent)
    ):
        return EventKind.DIRECTORY
    if isinstance(event, FileCreatedEvent):
        return EventKind.CREATED
    if isinstance(event, FileModifiedEvent):
        return EventKind.DATA_MODIFIED
    if isinstance(event, FileMovedEvent):
        return EventKind.NAME_MODIFIED
    if isinstance(event, FileDeletedEvent):
        return EventKind.REMOVED
    if isinstance(event, (FileOpenedEvent, FileClosedEvent, FileClosedNoWriteEvent)):
        return EventKind.ACCESS
    return EventKind.OTHER
