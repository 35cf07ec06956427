"""Proximity views over the alert collection - Pure functions.

Derives the "nearby" feed and the distance-annotated list from the current
user position and the alerts in store order. All functions are pure with no
side effects.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from safety_alerts.core.alert import Alert
from safety_alerts.core.geo import Position, distance_km


# Fixed radius for every "nearby" view and for triage
NEARBY_RADIUS_KM = 5.0


class UnknownPositionPolicy(str, Enum):
    """What ``nearby`` returns before the tracker has produced a position."""
    INCLUDE_ALL = "include_all"
    NONE = "none"


@dataclass(frozen=True)
class AlertDistance:
    """An alert paired with its distance from the user.

    Attributes:
        alert: The alert
        distance_km: Distance from the user (0 when position unknown)
    """
    alert: Alert
    distance_km: float


def alert_distance(alert: Alert, position: Position | None) -> float:
    """Distance from the user to an alert, 0 if the position is unknown.

    Pure function.
    """
    if position is None:
        return 0.0
    return distance_km(position, alert.position)


def nearby(
    alerts: Iterable[Alert],
    position: Position | None,
    radius_km: float = NEARBY_RADIUS_KM,
    unknown_position: UnknownPositionPolicy = UnknownPositionPolicy.INCLUDE_ALL,
) -> list[Alert]:
    """Filter alerts to those strictly closer than ``radius_km``.

    Pure function. Preserves store order.

    Args:
        alerts: Alerts in store order
        position: Current user position, None if not yet known
        radius_km: Exclusive radius in kilometers
        unknown_position: Policy when ``position`` is None

    Returns:
        Alerts within the radius
    """
    if position is None:
        if unknown_position is UnknownPositionPolicy.INCLUDE_ALL:
            return list(alerts)
        return []

    return [a for a in alerts if distance_km(position, a.position) < radius_km]


def with_distance(
    alerts: Iterable[Alert],
    position: Position | None,
) -> list[AlertDistance]:
    """Annotate every alert with its distance from the user.

    Pure function. Does not filter; preserves store order.
    """
    return [AlertDistance(alert=a, distance_km=alert_distance(a, position)) for a in alerts]


def sorted_by_distance(
    alerts: Iterable[Alert],
    position: Position | None,
) -> list[AlertDistance]:
    """Annotate alerts with distance and sort closest first.

    Pure function. The sort is stable, so equal distances keep store order.
    """
    return sorted(with_distance(alerts, position), key=lambda d: d.distance_km)


def count_nearby(
    alerts: Iterable[Alert],
    position: Position | None,
    radius_km: float = NEARBY_RADIUS_KM,
) -> int:
    """Number of alerts in the nearby view (summary badge)."""
    return len(nearby(alerts, position, radius_km))


@dataclass(frozen=True)
class ProximityFilter:
    """Proximity views bound to one alert collection and one position.

    ``alerts`` should be restartable (e.g. ``AlertStore.all()``) since each
    view iterates it again.
    """
    alerts: Iterable[Alert]
    position: Position | None

    def nearby(
        self,
        radius_km: float = NEARBY_RADIUS_KM,
        unknown_position: UnknownPositionPolicy = UnknownPositionPolicy.INCLUDE_ALL,
    ) -> list[Alert]:
        return nearby(self.alerts, self.position, radius_km, unknown_position)

    def with_distance(self) -> list[AlertDistance]:
        return with_distance(self.alerts, self.position)

    def sorted_by_distance(self) -> list[AlertDistance]:
        return sorted_by_distance(self.alerts, self.position)
