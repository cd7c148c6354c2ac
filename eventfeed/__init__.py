"""Event feed: filter, order and group events for display."""
