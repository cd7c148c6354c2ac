"""Cloud Function Entry Point.

This module provides the entry point for Google Cloud Functions.
It's a thin wrapper that loads configuration, wires the coordinator to
its collaborators and invokes the API handler.
"""

import asyncio
import logging
import os
from zoneinfo import ZoneInfo

import functions_framework
from flask import Request, Response

from eventfeed.api_handler import handle_feed_request
from eventfeed.coordinator import QueryCoordinator
from eventfeed.core.config import Config, validate_config
from eventfeed.shell.config_loader import load_config, load_config_from_env
from eventfeed.shell.events_client import EventsClient
from eventfeed.shell.location_client import create_location_provider
from eventfeed.shell.memory_source import InMemoryEventSource


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _get_config() -> Config:
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    elif os.environ.get("EVENTS_API_URL"):
        # Simple env-based config
        return load_config_from_env()
    else:
        # Try default config path
        return load_config()


def build_coordinator(config: Config) -> QueryCoordinator:
    """Wire a coordinator to the collaborators selected by config.

    EVENTS_FILE points at a JSON file of events served in process;
    otherwise events come from the configured events API.
    """
    events_file = os.environ.get("EVENTS_FILE")
    if events_file:
        source = InMemoryEventSource.from_json_file(events_file)
    else:
        source = EventsClient(
            config.events_api_url,
            timeout=config.request_timeout_seconds,
        )

    return QueryCoordinator(
        source,
        location_provider=create_location_provider(config),
        tz=ZoneInfo(config.timezone) if config.timezone else None,
    )


@functions_framework.http
def event_feed(request: Request) -> Response | tuple[dict, int]:
    """HTTP Cloud Function entry point.

    Args:
        request: Flask request object carrying the filter query arguments

    Returns:
        JSON response with the grouped event feed
    """
    logger.info("Serving event feed request")

    try:
        config = _get_config()

        validation = validate_config(config)
        for warning in validation.warnings:
            logger.warning("Config %s: %s", warning.field, warning.message)
        if not validation.valid:
            messages = [f"{e.field}: {e.message}" for e in validation.critical_errors]
            logger.error("Invalid configuration: %s", "; ".join(messages))
            return {
                "status": "error",
                "message": "Invalid configuration",
                "errors": messages,
            }, 500

        coordinator = build_coordinator(config)
        return asyncio.run(
            handle_feed_request(request, coordinator, config.default_radius_km)
        )

    except Exception as e:
        logger.exception("Unexpected error in event feed")
        return {
            "status": "error",
            "message": str(e),
        }, 500
