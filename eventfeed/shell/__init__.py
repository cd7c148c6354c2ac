"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- Events API client (HTTP)
- In-process event source (files)
- Location providers (HTTP)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from eventfeed.shell.events_client import EventsClient
from eventfeed.shell.memory_source import InMemoryEventSource
from eventfeed.shell.location_client import (
    IPLocationClient,
    StaticLocationProvider,
    create_location_provider,
)
from eventfeed.shell.config_loader import load_config, load_config_from_env

__all__ = [
    "EventsClient",
    "InMemoryEventSource",
    "IPLocationClient",
    "StaticLocationProvider",
    "create_location_provider",
    "load_config",
    "load_config_from_env",
]
