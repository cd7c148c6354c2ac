"""Event data models and parsing - Pure functions.

This module handles parsing raw event records (JSON documents from the
events backend) into typed Event objects. All functions are pure with no
side effects.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Any


class ParticipantStatus(str, Enum):
    """Attendance status of a participant."""
    INVITED = "invited"
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class ParticipantType(str, Enum):
    """Whether a participant is a registered user or a named guest."""
    USER = "user"
    NON_USER = "non-user"


@dataclass(frozen=True)
class Participant:
    """A participant entry attached to one event.

    Attributes:
        id: User ID, or a generated ID for non-user guests
        status: Attendance status
        type: Registered user or non-user placeholder
    """
    id: str
    status: ParticipantStatus
    type: ParticipantType = ParticipantType.USER


@dataclass(frozen=True)
class Event:
    """Immutable event data model.

    Attributes:
        id: Unique event ID
        title: Event title
        date: Scheduled date and time of the event
        latitude: Venue latitude
        longitude: Venue longitude
        created_by: ID of the user who created the event
        created_at: When the event document was created (optional)
        uploaded_at: When the event was published (optional, preferred
            over created_at for recency)
        capacity: Maximum attendees, None for unlimited
        participants: Participant entries, order irrelevant
        image_url: Cover image reference (optional)
        description: Free-text description
        address: Human-readable venue address
        category: Category ID (optional)
        sub_category: Sub-category ID (optional)
    """
    id: str
    title: str
    date: datetime
    latitude: float
    longitude: float
    created_by: str
    created_at: datetime | None = None
    uploaded_at: datetime | None = None
    capacity: int | None = None
    participants: tuple[Participant, ...] = field(default_factory=tuple)
    image_url: str | None = None
    description: str = ""
    address: str = ""
    category: str | None = None
    sub_category: str | None = None

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)

    @property
    def recency_timestamp(self) -> datetime:
        """Upload time, falling back to creation time.

        Raises:
            ValueError: If the event has neither timestamp
        """
        if self.uploaded_at is not None:
            return self.uploaded_at
        if self.created_at is not None:
            return self.created_at
        raise ValueError(f"Event {self.id!r} has no upload or creation time")


def ensure_aware(moment: datetime, tz: tzinfo | None = timezone.utc) -> datetime:
    """Attach a zone to a naive datetime; aware ones are returned unchanged.

    With tz None a naive value is taken as system local time.
    """
    if moment.tzinfo is not None and moment.utcoffset() is not None:
        return moment
    if tz is None:
        return moment.astimezone()
    return moment.replace(tzinfo=tz)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a timestamp from a raw record.

    Accepts ISO-8601 strings (a trailing 'Z' means UTC) and numbers as
    milliseconds since the epoch. Returns None for missing values.
    Results are always timezone-aware; values without an offset are UTC.

    Raises:
        ValueError: If the value cannot be interpreted
        TypeError: If the value has an unsupported type
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return ensure_aware(value)

    if isinstance(value, bool):
        raise TypeError(f"Unsupported timestamp value: {value!r}")

    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)

    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return ensure_aware(datetime.fromisoformat(text))

    raise TypeError(f"Unsupported timestamp value: {value!r}")


def parse_participant(data: dict[str, Any]) -> Participant:
    """Parse a participant entry.

    Raises:
        KeyError: If the ID is missing
        ValueError: If status or type is not a known value
    """
    return Participant(
        id=str(data["id"]),
        status=ParticipantStatus(data.get("status", ParticipantStatus.PENDING.value)),
        type=ParticipantType(data.get("type", ParticipantType.USER.value)),
    )


def parse_event(record: dict[str, Any]) -> Event | None:
    """Parse a single raw event record into an Event.

    Pure function: takes raw dict, returns typed Event or None if invalid.
    A record needs an ID, a date, a location and at least one of
    uploadedAt/createdAt.

    Args:
        record: Event document from the events backend

    Returns:
        Event object or None if parsing fails
    """
    try:
        location = record.get("location") or {}

        date = parse_timestamp(record.get("date"))
        if date is None:
            return None

        created_at = parse_timestamp(record.get("createdAt"))
        uploaded_at = parse_timestamp(record.get("uploadedAt"))
        if created_at is None and uploaded_at is None:
            return None

        event_id = record.get("id")
        if not event_id:
            return None

        capacity = record.get("capacity")

        return Event(
            id=str(event_id),
            title=record.get("title", ""),
            date=date,
            latitude=float(location["latitude"]),
            longitude=float(location["longitude"]),
            created_by=str(record.get("createdBy", "")),
            created_at=created_at,
            uploaded_at=uploaded_at,
            capacity=int(capacity) if capacity is not None else None,
            participants=tuple(
                parse_participant(p) for p in record.get("participants") or []
            ),
            image_url=record.get("imageUrl"),
            description=record.get("description") or "",
            address=location.get("address") or "",
            category=record.get("category"),
            sub_category=record.get("subCategory"),
        )
    except (KeyError, TypeError, ValueError):
        return None


def parse_events(records: list[dict[str, Any]]) -> list[Event]:
    """Parse a list of raw records, skipping invalid ones.

    Pure function. Preserves the order of the input records.

    Args:
        records: Raw event documents

    Returns:
        List of valid Event objects
    """
    events = []

    for record in records:
        event = parse_event(record)
        if event is not None:
            events.append(event)

    return events
