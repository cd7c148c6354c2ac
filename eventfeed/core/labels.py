"""Section and sort-option labels - Pure functions.

All functions are pure with no side effects. "Today" is passed in by the
caller so results are deterministic.
"""

from datetime import date

from eventfeed.core.sorting import OrderingMode


# Fixed section captions for modes that do not bucket by day
SECTION_CAPTIONS: dict[OrderingMode, str] = {
    OrderingMode.RECENT: "Recently added",
    OrderingMode.OLDEST: "Oldest added first",
    OrderingMode.DISTANCE: "Nearest first",
    OrderingMode.CAPACITY: "By capacity",
    OrderingMode.POPULARITY: "Most popular",
}

# Names of the sort options themselves, as shown in the sort picker
ORDERING_DESCRIPTIONS: dict[OrderingMode, str] = {
    OrderingMode.DATE_ASC: "Date (Earliest first)",
    OrderingMode.DATE_DESC: "Date (Latest first)",
    OrderingMode.DISTANCE: "Distance (Nearest first)",
    OrderingMode.RECENT: "Recently added",
    OrderingMode.OLDEST: "Oldest added",
    OrderingMode.CAPACITY: "Capacity (Largest first)",
    OrderingMode.POPULARITY: "Popularity (Most attendees first)",
}


def format_day_label(group_date: date, today: date) -> str:
    """Format a day section header.

    Pure function.

    Args:
        group_date: Calendar day of the section
        today: Current calendar day

    Returns:
        "Today", "Tomorrow", or e.g. "Wednesday, October 21"
    """
    delta = (group_date - today).days

    if delta == 0:
        return "Today"
    if delta == 1:
        return "Tomorrow"

    return f"{group_date:%A, %B} {group_date.day}"


def resolve_label(
    mode: OrderingMode,
    group_date: date | None = None,
    today: date | None = None,
) -> str:
    """Resolve the section label for a mode.

    Pure function (given today).

    Args:
        mode: Active ordering mode
        group_date: Day of the section, required for date modes
        today: Current calendar day, defaults to date.today()

    Returns:
        Section label

    Raises:
        ValueError: If a date mode is given no group_date
    """
    if not mode.is_date_mode:
        return SECTION_CAPTIONS[mode]

    if group_date is None:
        raise ValueError(f"{mode.value} sections need a date")

    return format_day_label(group_date, today or date.today())


def describe_ordering(mode: OrderingMode) -> str:
    """Human-readable name of a sort option."""
    return ORDERING_DESCRIPTIONS[mode]
