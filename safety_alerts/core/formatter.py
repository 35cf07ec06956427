"""Display text formatting - Pure functions.

Builds the strings handed to presentation collaborators: distance labels,
feed lines, overlay text, the report notification and route links. No I/O.
"""

from urllib.parse import urlencode

from safety_alerts.core.alert import Alert, Category, Severity
from safety_alerts.core.geo import Position, distance_km
from safety_alerts.core.proximity import NEARBY_RADIUS_KM


DIRECTIONS_URL = "https://www.google.com/maps/dir/"

# Rough urban travel time used for the ETA badge
MINUTES_PER_KM = 2.0

CATEGORY_EMOJI = {
    Category.MEDICAL: "🚑",
    Category.POLICE: "🚓",
    Category.FIRE: "🔥",
    Category.CAR: "🚗",
    Category.GENERAL: "🆘",
    Category.CCTV: "📹",
}

SEVERITY_LABELS = {
    Severity.LOW: "Low",
    Severity.MEDIUM: "Medium",
    Severity.HIGH: "High",
    Severity.CRITICAL: "Critical",
}


def format_distance(km: float) -> str:
    """Format a distance with one decimal, e.g. ``"1.2 km"``.

    Pure function.
    """
    return f"{km:.1f} km"


def format_eta_minutes(km: float) -> int:
    """Estimate travel minutes to a destination.

    Pure function.
    """
    return round(km * MINUTES_PER_KM)


def format_alert_line(alert: Alert, distance: float | None = None) -> str:
    """Format a one-line feed entry for an alert.

    Pure function.

    Args:
        alert: Alert to format
        distance: Distance from the user, omitted if None

    Returns:
        e.g. ``"🔥 FIRE [Critical] Black smoke behind the market - 0.7 km"``
    """
    emoji = CATEGORY_EMOJI.get(alert.category, "⚠️")
    label = SEVERITY_LABELS[alert.severity]
    description = alert.description or "(no description)"

    line = f"{emoji} {alert.category.value} [{label}] {description}"
    if distance is not None:
        line += f" - {format_distance(distance)}"
    return line


def format_overlay(alert: Alert, user: Position | None) -> dict[str, str]:
    """Build the text for the interrupting overlay.

    Pure function. Distance is 0 when the user position is unknown.
    """
    distance = distance_km(user, alert.position) if user is not None else 0.0
    return {
        "title": "Help needed!",
        "category": alert.category.value,
        "level": f"LEVEL: {alert.severity.value}",
        "distance": format_distance(distance),
        "description": alert.description,
        "reporter": alert.reporter_label,
    }


def format_report_notification(radius_km: float = NEARBY_RADIUS_KM) -> str:
    """Notification shown after the user submits a report.

    Pure function.
    """
    return f"Alerted users within {radius_km:g} km!"


def build_route_url(origin: Position, destination: Position) -> str:
    """Build a driving-directions link between two positions.

    Pure function.
    """
    params = {
        "api": "1",
        "origin": f"{origin.latitude},{origin.longitude}",
        "destination": f"{destination.latitude},{destination.longitude}",
        "travelmode": "driving",
    }
    return f"{DIRECTIONS_URL}?{urlencode(params)}"


def format_navigation_summary(origin: Position, destination: Position) -> dict[str, str | int]:
    """Distance, ETA and route link for the navigation panel.

    Pure function.
    """
    km = distance_km(origin, destination)
    return {
        "distance": format_distance(km),
        "eta_minutes": format_eta_minutes(km),
        "route_url": build_route_url(origin, destination),
    }
