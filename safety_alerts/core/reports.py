"""User-authored reports - Pure functions.

Turns a confirmed classification, a quick-report preset, or a manual
category/severity choice into a new Alert at the user's position.
"""

from dataclasses import dataclass

from safety_alerts.core.alert import Alert, Category, Severity, Status
from safety_alerts.core.classification import ClassificationResult
from safety_alerts.core.geo import Position


# Reporter label for alerts created on this device
SELF_REPORTER_LABEL = "Me"


@dataclass(frozen=True)
class QuickReport:
    """A one-tap report preset.

    Attributes:
        label: Button label
        category: Emergency category
        description: Description sent with the alert
        severity: Severity level
    """
    label: str
    category: Category
    description: str
    severity: Severity


QUICK_REPORTS = (
    QuickReport("Accident", Category.MEDICAL, "Road traffic accident", Severity.CRITICAL),
    QuickReport("Illness", Category.MEDICAL, "Medical emergency", Severity.HIGH),
    QuickReport("Fire", Category.FIRE, "Fire", Severity.CRITICAL),
    QuickReport("Breakdown", Category.CAR, "Car broke down", Severity.MEDIUM),
    QuickReport("Theft", Category.POLICE, "Theft / intruder", Severity.HIGH),
    QuickReport("Assault", Category.POLICE, "Physical assault", Severity.CRITICAL),
    QuickReport("Flood", Category.GENERAL, "Flooding", Severity.HIGH),
    QuickReport("Animal", Category.GENERAL, "Dangerous animal", Severity.HIGH),
    QuickReport("Electrical", Category.FIRE, "Electrical short circuit", Severity.HIGH),
    QuickReport("Missing person", Category.POLICE, "Missing person", Severity.HIGH),
)


def find_quick_report(label: str) -> QuickReport | None:
    """Look up a preset by label (case-insensitive). Pure function."""
    wanted = label.strip().lower()
    for preset in QUICK_REPORTS:
        if preset.label.lower() == wanted:
            return preset
    return None


def build_report_alert(
    alert_id: str,
    category: Category,
    severity: Severity,
    description: str,
    position: Position,
    created_at: int,
    reporter_label: str = SELF_REPORTER_LABEL,
) -> Alert:
    """Create a new pending alert for a user report.

    Pure function.
    """
    return Alert(
        id=alert_id,
        category=category,
        severity=severity,
        description=description,
        position=position,
        created_at=created_at,
        reporter_label=reporter_label,
        status=Status.PENDING,
    )


def alert_from_classification(
    alert_id: str,
    text: str,
    result: ClassificationResult,
    position: Position,
    created_at: int,
) -> Alert:
    """Create an alert from a confirmed classification.

    Pure function. The user's own text is kept as the description; the
    classifier only contributes category and severity.
    """
    return build_report_alert(
        alert_id=alert_id,
        category=result.category,
        severity=result.severity,
        description=text,
        position=position,
        created_at=created_at,
    )


def alert_from_quick_report(
    alert_id: str,
    preset: QuickReport,
    position: Position,
    created_at: int,
) -> Alert:
    """Create an alert from a one-tap preset. Pure function."""
    return build_report_alert(
        alert_id=alert_id,
        category=preset.category,
        severity=preset.severity,
        description=preset.description,
        position=position,
        created_at=created_at,
    )


def alert_from_manual_report(
    alert_id: str,
    text: str,
    severity: Severity,
    position: Position,
    created_at: int,
) -> Alert:
    """Create a GENERAL alert when the user skips classification.

    Pure function.
    """
    return build_report_alert(
        alert_id=alert_id,
        category=Category.GENERAL,
        severity=severity,
        description=text,
        position=position,
        created_at=created_at,
    )
