"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from eventfeed.core.geo import Coordinate


LOCATION_PROVIDERS = ("none", "static", "ip")


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        events_api_url: Endpoint of the event retrieval service
        request_timeout_seconds: Timeout for outbound HTTP requests
        default_radius_km: Radius used when a request gives none
        timezone: IANA zone for day boundaries (None for system zone)
        location_provider: 'none', 'static' or 'ip'
        static_location: Fixed location for the 'static' provider
        ip_location_url: Lookup endpoint for the 'ip' provider
    """
    events_api_url: str = ""
    request_timeout_seconds: int = 30
    default_radius_km: float = 50.0
    timezone: str | None = None
    location_provider: str = "none"
    static_location: Coordinate | None = None
    ip_location_url: str = "https://ipapi.co/json/"


@dataclass
class ValidationError:
    """A validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    if not config.events_api_url or config.events_api_url.startswith("${"):
        errors.append(ValidationError(
            field="events_api_url",
            message="Events API URL not set (or still contains placeholder)",
            severity="warning",
        ))

    if config.request_timeout_seconds <= 0:
        errors.append(ValidationError(
            field="request_timeout_seconds",
            message=f"Timeout must be positive, got {config.request_timeout_seconds}",
        ))

    if config.default_radius_km <= 0:
        errors.append(ValidationError(
            field="default_radius_km",
            message=f"Radius must be positive, got {config.default_radius_km}",
        ))

    if config.timezone is not None:
        try:
            ZoneInfo(config.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            errors.append(ValidationError(
                field="timezone",
                message=f"Unknown timezone '{config.timezone}'",
            ))

    if config.location_provider not in LOCATION_PROVIDERS:
        errors.append(ValidationError(
            field="location_provider",
            message=(
                f"Unknown location provider '{config.location_provider}' "
                f"(expected one of: {', '.join(LOCATION_PROVIDERS)})"
            ),
        ))
    elif config.location_provider == "static":
        if config.static_location is None:
            errors.append(ValidationError(
                field="static_location",
                message="Static location provider configured without a location",
                severity="warning",
            ))
        else:
            errors.extend(validate_coordinates(
                config.static_location.latitude,
                config.static_location.longitude,
                "static_location",
            ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
