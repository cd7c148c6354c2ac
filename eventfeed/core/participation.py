"""Participation counting - Pure functions.

Decides which participants effectively attend an event. The same rule is
the ranking key for popularity ordering, so it must not be reimplemented
elsewhere.
"""

from eventfeed.core.event import Event, Participant, ParticipantStatus, ParticipantType


def is_effective_participant(participant: Participant, event: Event) -> bool:
    """Check if a participant counts as attending.

    Pure function.

    Accepted participants, non-user guests and the event creator count,
    unless their status is still "invited".
    """
    if participant.status == ParticipantStatus.INVITED:
        return False

    return (
        participant.status == ParticipantStatus.ACCEPTED
        or participant.type == ParticipantType.NON_USER
        or participant.id == event.created_by
    )


def effective_participants(event: Event) -> list[Participant]:
    """Return the participants that count as attending, in stored order."""
    return [p for p in event.participants if is_effective_participant(p, event)]


def effective_count(event: Event) -> int:
    """Count participants that effectively attend an event.

    Pure function.

    Args:
        event: Event to count

    Returns:
        Number of effective participants (>= 0)
    """
    return sum(1 for p in event.participants if is_effective_participant(p, event))
