"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field
from enum import Enum

from safety_alerts.core.geo import Position
from safety_alerts.core.proximity import NEARBY_RADIUS_KM
from safety_alerts.core.triage import INTERRUPT_RADIUS_KM


# Reference point used whenever no real position is available (Bangkok)
DEFAULT_POSITION = Position(latitude=13.7563, longitude=100.5018)

# Simulated walk: one step per tick on both axes
SIMULATION_TICK_SECONDS = 1.0
SIMULATION_STEP_DEGREES = 0.00008

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_CLASSIFIER_MODEL = "gemini-2.5-flash"


class TrackingMode(str, Enum):
    """Where user positions come from."""
    LIVE = "live"
    SIMULATION = "simulation"


@dataclass(frozen=True)
class EmergencyContact:
    """A number handed to the dialer collaborator.

    Attributes:
        name: Display name
        number: Number to dial
    """
    name: str
    number: str


DEFAULT_EMERGENCY_CONTACTS = (
    EmergencyContact(name="Police", number="191"),
    EmergencyContact(name="Ambulance", number="1669"),
    EmergencyContact(name="Fire", number="199"),
    EmergencyContact(name="Tourist Police", number="1155"),
    EmergencyContact(name="Highway Police", number="1193"),
    EmergencyContact(name="JS100", number="1137"),
)


@dataclass
class TrackerConfig:
    """Location tracking configuration.

    Attributes:
        mode: Initial tracking mode
        default_position: Fallback when no position can be obtained
        tick_seconds: Simulation tick interval
        step_degrees: Simulation step on both axes per tick
    """
    mode: TrackingMode = TrackingMode.LIVE
    default_position: Position = DEFAULT_POSITION
    tick_seconds: float = SIMULATION_TICK_SECONDS
    step_degrees: float = SIMULATION_STEP_DEGREES


@dataclass
class ClassifierConfig:
    """Text-classification service configuration.

    Attributes:
        api_key: Service credential; None or empty means no service
        model: Model name used by the service
        endpoint: Service base URL
        timeout_seconds: Request timeout
    """
    api_key: str | None = None
    model: str = DEFAULT_CLASSIFIER_MODEL
    endpoint: str = GEMINI_API_BASE
    timeout_seconds: int = 20

    @property
    def configured(self) -> bool:
        """True if a usable credential is present."""
        return bool(self.api_key) and not self.api_key.startswith("${")


@dataclass
class TriageConfig:
    """Proximity and interruption radii.

    Attributes:
        nearby_radius_km: Radius of the nearby feed (exclusive)
        interrupt_radius_km: Radius for interrupting alerts (inclusive)
    """
    nearby_radius_km: float = NEARBY_RADIUS_KM
    interrupt_radius_km: float = INTERRUPT_RADIUS_KM


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        tracker: Location tracking settings
        classifier: Classification service settings
        triage: Proximity and interruption settings
        emergency_contacts: Numbers offered to the dialer
        load_mock_feed: Seed the store with the demo alerts on start
    """
    tracker: TrackerConfig = field(default_factory=TrackerConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    triage: TriageConfig = field(default_factory=TriageConfig)
    emergency_contacts: list[EmergencyContact] = field(
        default_factory=lambda: list(DEFAULT_EMERGENCY_CONTACTS)
    )
    load_mock_feed: bool = True


@dataclass
class ValidationError:
    """One problem found in a configuration.

    Attributes:
        field: Dotted path of the offending setting
        message: What is wrong with it
        severity: 'error' blocks startup, 'warning' is only logged
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Outcome of validate_config.

    Attributes:
        valid: False if any problem has severity 'error'
        errors: Every problem found, errors and warnings alike
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[ValidationError]) -> "ValidationResult":
        return cls(
            valid=not any(e.severity == "error" for e in errors),
            errors=errors,
        )

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_position(position: Position, field_name: str) -> list[ValidationError]:
    """Check that a position lies on the WGS84 globe.

    Pure function.

    Returns:
        One error per out-of-range axis (empty if valid)
    """
    errors = []

    if not -90 <= position.latitude <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {position.latitude} out of range [-90, 90]",
        ))

    if not -180 <= position.longitude <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {position.longitude} out of range [-180, 180]",
        ))

    return errors


def _validate_positive(value: float, field_name: str, label: str) -> list[ValidationError]:
    if value <= 0:
        return [ValidationError(
            field=field_name,
            message=f"{label} must be positive, got {value}",
        )]
    return []


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    tracker = config.tracker
    errors.extend(validate_position(tracker.default_position, "tracker.default_position"))
    errors.extend(_validate_positive(
        tracker.tick_seconds, "tracker.tick_seconds", "Tick interval",
    ))

    triage = config.triage
    errors.extend(_validate_positive(
        triage.nearby_radius_km, "triage.nearby_radius_km", "Nearby radius",
    ))
    errors.extend(_validate_positive(
        triage.interrupt_radius_km, "triage.interrupt_radius_km", "Interrupt radius",
    ))

    if triage.interrupt_radius_km > triage.nearby_radius_km:
        errors.append(ValidationError(
            field="triage",
            message=(
                f"interrupt_radius_km ({triage.interrupt_radius_km}) > "
                f"nearby_radius_km ({triage.nearby_radius_km}); "
                "interrupting alerts may be missing from the nearby feed"
            ),
            severity="warning",
        ))

    classifier = config.classifier
    errors.extend(_validate_positive(
        classifier.timeout_seconds, "classifier.timeout_seconds", "Timeout",
    ))

    if classifier.api_key and classifier.api_key.startswith("${"):
        errors.append(ValidationError(
            field="classifier.api_key",
            message="API key not resolved (still contains placeholder)",
            severity="warning",
        ))
    elif not classifier.api_key:
        errors.append(ValidationError(
            field="classifier.api_key",
            message="No API key configured, classification uses the offline fallback",
            severity="warning",
        ))

    for i, contact in enumerate(config.emergency_contacts):
        if not contact.number.strip():
            errors.append(ValidationError(
                field=f"emergency_contacts[{i}].number",
                message=f"Contact '{contact.name}' has no number",
            ))

    return ValidationResult.from_errors(errors)
