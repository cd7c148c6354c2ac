"""Filter criteria - Immutable value objects.

FilterCriteria is validated on construction and replaced wholesale on
every edit (use dataclasses.replace, which validates again). Invalid
criteria never reach retrieval, sorting or grouping.
"""

from dataclasses import dataclass, field
from datetime import datetime

from eventfeed.core.categories import get_category
from eventfeed.core.config import ValidationError, validate_coordinates
from eventfeed.core.errors import InvalidCriteria
from eventfeed.core.geo import Coordinate
from eventfeed.core.sorting import OrderingMode


DEFAULT_RADIUS_KM = 50.0

# Steps offered by the radius slider; 1000 km stands for "any distance"
RADIUS_STEPS_KM: tuple[float, ...] = (
    0.5, 1, 2, 5, 10, 20, 50, 100, 200, 500, 1000,
)


@dataclass(frozen=True)
class DateRange:
    """Date window; either bound may be open."""
    start: datetime | None = None
    end: datetime | None = None

    @property
    def is_bounded(self) -> bool:
        return self.start is not None or self.end is not None


@dataclass(frozen=True)
class RetrievalRequest:
    """The subset of criteria passed to the retrieval collaborator.

    Ordering is not part of it. coordinate and radius_km are only set
    when the criteria carry a coordinate.
    """
    search_query: str = ""
    start: datetime | None = None
    end: datetime | None = None
    category: str | None = None
    sub_categories: frozenset[str] = frozenset()
    coordinate: Coordinate | None = None
    radius_km: float | None = None


@dataclass(frozen=True)
class FilterCriteria:
    """User-selected constraints on the event feed.

    Attributes:
        coordinate: Search center, None when no location is set
        radius_km: Search radius, only meaningful with a coordinate
        search_query: Free text, empty for no constraint
        date_range: Date window
        category: Category ID (optional)
        sub_categories: Sub-category IDs within category
        ordering: Ordering mode

    Raises:
        InvalidCriteria: On construction, if any constraint is malformed
    """
    coordinate: Coordinate | None = None
    radius_km: float = DEFAULT_RADIUS_KM
    search_query: str = ""
    date_range: DateRange = field(default_factory=DateRange)
    category: str | None = None
    sub_categories: frozenset[str] = frozenset()
    ordering: OrderingMode = OrderingMode.DATE_ASC

    def __post_init__(self) -> None:
        # Accept any iterable of IDs but store a frozenset
        if not isinstance(self.sub_categories, frozenset):
            object.__setattr__(self, "sub_categories", frozenset(self.sub_categories))

        errors = validate_criteria(self)
        if errors:
            raise InvalidCriteria("; ".join(e.message for e in errors))

    def to_request(self) -> RetrievalRequest:
        """Derive the retrieval parameters."""
        has_location = self.coordinate is not None
        return RetrievalRequest(
            search_query=self.search_query.strip(),
            start=self.date_range.start,
            end=self.date_range.end,
            category=self.category,
            sub_categories=self.sub_categories,
            coordinate=self.coordinate,
            radius_km=self.radius_km if has_location else None,
        )

    @property
    def active_filter_count(self) -> int:
        """Number of filter groups in use (location, text, dates, category)."""
        count = 0
        if self.coordinate is not None:
            count += 1
        if self.search_query.strip():
            count += 1
        if self.date_range.is_bounded:
            count += 1
        if self.category is not None:
            count += 1
        return count


def _is_aware(moment: datetime) -> bool:
    return moment.tzinfo is not None and moment.utcoffset() is not None


def validate_criteria(criteria: FilterCriteria) -> list[ValidationError]:
    """Validate filter criteria.

    Pure function.

    Args:
        criteria: Criteria to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors: list[ValidationError] = []

    if criteria.coordinate is not None:
        errors.extend(validate_coordinates(
            criteria.coordinate.latitude,
            criteria.coordinate.longitude,
            "coordinate",
        ))

    if criteria.radius_km <= 0:
        errors.append(ValidationError(
            field="radius_km",
            message=f"Radius must be positive, got {criteria.radius_km}",
        ))

    start, end = criteria.date_range.start, criteria.date_range.end
    if start is not None and end is not None and _is_aware(start) != _is_aware(end):
        errors.append(ValidationError(
            field="date_range",
            message="Start and end dates must both have a timezone or both have none",
        ))
    elif start is not None and end is not None and end < start:
        errors.append(ValidationError(
            field="date_range",
            message=f"End date {end.isoformat()} is before start date {start.isoformat()}",
        ))

    if not isinstance(criteria.ordering, OrderingMode):
        errors.append(ValidationError(
            field="ordering",
            message=f"Unknown ordering '{criteria.ordering}'",
        ))

    errors.extend(_validate_categories(criteria.category, criteria.sub_categories))

    return errors


def _validate_categories(
    category_id: str | None,
    sub_category_ids: frozenset[str],
) -> list[ValidationError]:
    """Check category and sub-categories against the catalog."""
    if category_id is None:
        if sub_category_ids:
            return [ValidationError(
                field="sub_categories",
                message="Sub-categories given without a category",
            )]
        return []

    category = get_category(category_id)
    if category is None:
        return [ValidationError(
            field="category",
            message=f"Unknown category '{category_id}'",
        )]

    known = {sub.id for sub in category.sub_categories}
    return [
        ValidationError(
            field="sub_categories",
            message=f"Sub-category '{sub_id}' does not belong to '{category_id}'",
        )
        for sub_id in sorted(sub_category_ids - known)
    ]
