"""Error kinds raised and surfaced by the event feed.

Pure core functions raise InvalidCriteria synchronously. The shell raises
RetrievalFailure and LocationUnavailable; the coordinator catches those and
surfaces them on the published snapshot instead of propagating them.
"""


class EventFeedError(Exception):
    """Base class for all event feed errors."""


class InvalidCriteria(EventFeedError):
    """Filter criteria were rejected before reaching retrieval."""


class RetrievalFailure(EventFeedError):
    """The event retrieval collaborator failed (network or backend error)."""


class LocationUnavailable(EventFeedError):
    """No location fix: permission denied or the position could not be resolved."""
