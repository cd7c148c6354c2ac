"""Cloud Function Entry Point - Root Module.

This is the root-level entry point for Google Cloud Functions.
It imports from the eventfeed package.
"""

from eventfeed.main import event_feed

__all__ = [
    "event_feed",
]
