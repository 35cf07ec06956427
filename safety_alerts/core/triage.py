"""Interruption triage - Pure functions.

Decides whether a newly arrived alert should interrupt the user with a
full-attention notification or just land in the passive feed.

The state machine has a single slot: ``Idle -> Presenting(alert) -> Idle``.
While an alert is presenting, other qualifying alerts do not preempt it and
are not queued; they stay in the passive feed. Decisions are made once, when
an alert arrives. Moving closer to an alert that was skipped earlier does not
re-trigger it.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from safety_alerts.core.alert import Alert
from safety_alerts.core.geo import Position, distance_km, is_within_radius


logger = logging.getLogger(__name__)


# Alerts at or inside this distance interrupt the user
INTERRUPT_RADIUS_KM = 5.0


@dataclass(frozen=True)
class Idle:
    """No alert is being presented."""

    def to_dict(self) -> dict[str, Any]:
        return {"state": "idle"}


@dataclass(frozen=True)
class Presenting:
    """An alert is shown as an interrupting overlay.

    Attributes:
        alert: The alert being presented
        distance_km: Distance at the moment of evaluation
    """
    alert: Alert
    distance_km: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": "presenting",
            "alert": self.alert.to_dict(),
            "distance_km": self.distance_km,
        }


TriageState = Union[Idle, Presenting]

IDLE = Idle()


class TriageReason(str, Enum):
    """Why a decision came out the way it did."""
    WITHIN_RADIUS = "within_radius"
    OUT_OF_RANGE = "out_of_range"
    POSITION_UNKNOWN = "position_unknown"
    ALREADY_PRESENTING = "already_presenting"


@dataclass(frozen=True)
class TriageDecision:
    """Result of evaluating one alert.

    Attributes:
        alert: The alert evaluated
        interrupt: True if the alert is now presenting
        reason: Why
        distance_km: Distance from the user, None if position unknown
    """
    alert: Alert
    interrupt: bool
    reason: TriageReason
    distance_km: float | None = None


def qualifies(
    alert: Alert,
    position: Position,
    radius_km: float = INTERRUPT_RADIUS_KM,
) -> bool:
    """Check if an alert is close enough to interrupt (inclusive).

    Pure function.
    """
    return is_within_radius(alert.position, position, radius_km)


def evaluate(
    state: TriageState,
    alert: Alert,
    position: Position | None,
    radius_km: float = INTERRUPT_RADIUS_KM,
) -> tuple[TriageState, TriageDecision]:
    """Evaluate a newly observed alert against the current state.

    Pure function.

    Args:
        state: Current triage state
        alert: Newly arrived or newly created alert
        position: User position at the moment of evaluation
        radius_km: Interruption radius

    Returns:
        Tuple of (next state, decision)
    """
    if position is None:
        return state, TriageDecision(alert, False, TriageReason.POSITION_UNKNOWN)

    distance = distance_km(position, alert.position)

    if not qualifies(alert, position, radius_km):
        return state, TriageDecision(alert, False, TriageReason.OUT_OF_RANGE, distance)

    if isinstance(state, Presenting):
        return state, TriageDecision(alert, False, TriageReason.ALREADY_PRESENTING, distance)

    return (
        Presenting(alert=alert, distance_km=distance),
        TriageDecision(alert, True, TriageReason.WITHIN_RADIUS, distance),
    )


def dismiss(state: TriageState) -> TriageState:
    """Return to Idle, whatever the current state. Pure function."""
    return IDLE


def navigate(state: TriageState) -> tuple[TriageState, Position | None]:
    """Dismiss the overlay and hand back the presented alert's location.

    Pure function.

    Returns:
        Tuple of (Idle, destination or None if nothing was presenting)
    """
    if isinstance(state, Presenting):
        return IDLE, state.alert.position
    return IDLE, None


class TriageDecider:
    """Stateful wrapper around the pure triage transitions."""

    def __init__(self, radius_km: float = INTERRUPT_RADIUS_KM) -> None:
        self.radius_km = radius_km
        self._state: TriageState = IDLE

    @property
    def state(self) -> TriageState:
        return self._state

    @property
    def presenting(self) -> Alert | None:
        if isinstance(self._state, Presenting):
            return self._state.alert
        return None

    def evaluate(self, alert: Alert, position: Position | None) -> TriageDecision:
        self._state, decision = evaluate(self._state, alert, position, self.radius_km)
        if decision.interrupt:
            logger.info(
                "Presenting alert %s (%s, %.2f km)",
                alert.id,
                alert.severity.value,
                decision.distance_km,
            )
        else:
            logger.debug("Alert %s stays in feed: %s", alert.id, decision.reason.value)
        return decision

    def dismiss(self) -> None:
        self._state = dismiss(self._state)

    def navigate(self) -> Position | None:
        self._state, destination = navigate(self._state)
        return destination
