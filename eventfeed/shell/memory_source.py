"""In-process event source - Imperative Shell.

Serves a fixed list of events, filtered in process with the core
matching functions. Useful for local runs and fixtures loaded from disk.
"""

import json
import logging
from pathlib import Path
from typing import Sequence

from eventfeed.core.criteria import RetrievalRequest
from eventfeed.core.event import Event, parse_events
from eventfeed.core.filters import filter_events


logger = logging.getLogger(__name__)


class InMemoryEventSource:
    """Retrieval collaborator backed by a list of events."""

    def __init__(self, events: Sequence[Event]) -> None:
        self.events = tuple(events)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryEventSource":
        """Load events from a JSON file of raw records.

        The file holds either a list of records or {"events": [...]}.

        Raises:
            FileNotFoundError: If the file doesn't exist
            json.JSONDecodeError: If the file is not valid JSON
        """
        with open(path, "r") as f:
            data = json.load(f)

        records = data.get("events", []) if isinstance(data, dict) else data
        events = parse_events(records)

        logger.info("Loaded %d events from %s", len(events), path)

        return cls(events)

    def fetch_events(self, request: RetrievalRequest) -> list[Event]:
        """Return the events matching a request, in stored order."""
        matched = filter_events(self.events, request)
        logger.debug("Matched %d of %d events", len(matched), len(self.events))
        return matched
