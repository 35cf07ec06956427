"""Session - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the pure functional
core and the I/O-performing shell components. All UI-facing state lives in
one immutable ``SessionState`` snapshot that is replaced on every event, so
presentation collaborators read (or serialize) a single object.

Every handler runs on the event loop's thread; mutations are serialized by
the loop rather than by locks.
"""

import itertools
import logging
import random
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

from safety_alerts.core.alert import Alert, Severity, Status
from safety_alerts.core.classification import ClassificationResult
from safety_alerts.core.config import Config, TrackingMode
from safety_alerts.core.feed import mock_feed, simulated_alert
from safety_alerts.core.formatter import (
    format_navigation_summary,
    format_overlay,
    format_report_notification,
)
from safety_alerts.core.geo import Position
from safety_alerts.core.proximity import AlertDistance, ProximityFilter, count_nearby
from safety_alerts.core.reports import (
    alert_from_classification,
    alert_from_manual_report,
    alert_from_quick_report,
    find_quick_report,
)
from safety_alerts.core.store import AlertStore
from safety_alerts.core.triage import IDLE, TriageDecider, TriageDecision, TriageState
from safety_alerts.shell.incident_classifier import IncidentClassifier
from safety_alerts.shell.location_tracker import LocationTracker


logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ClassificationDraft:
    """A classified report awaiting the user's confirmation.

    Attributes:
        token: Request token that produced this draft
        text: The user's original text
        result: Classification result
    """
    token: int
    text: str
    result: ClassificationResult


@dataclass(frozen=True)
class SessionState:
    """Everything the presentation layer needs, in one snapshot.

    Attributes:
        position: Current user position (None until tracking starts)
        tracking_mode: Active tracking mode (None when stopped)
        triage: Idle or Presenting(alert)
        destination: Navigation target, if any
        notification: Transient banner text, if any
        pending_request: Token of the in-flight classification, if any
        draft: Classified report awaiting confirmation, if any
    """
    position: Position | None = None
    tracking_mode: TrackingMode | None = None
    triage: TriageState = IDLE
    destination: Position | None = None
    notification: str | None = None
    pending_request: int | None = None
    draft: ClassificationDraft | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position.to_dict() if self.position else None,
            "tracking_mode": self.tracking_mode.value if self.tracking_mode else None,
            "triage": self.triage.to_dict(),
            "destination": self.destination.to_dict() if self.destination else None,
            "notification": self.notification,
            "pending_request": self.pending_request,
            "draft": {
                "token": self.draft.token,
                "text": self.draft.text,
                "result": self.draft.result.to_dict(),
            } if self.draft else None,
        }


class SafetySession:
    """Coordinates location tracking, the alert feed, triage and reporting.

    This class wires together:
    - Location tracker (position updates)
    - Alert store (feed and user reports)
    - Core functions (proximity, triage, report building)
    - Incident classifier (text classification)
    """

    def __init__(
        self,
        config: Config | None = None,
        tracker: LocationTracker | None = None,
        classifier: IncidentClassifier | None = None,
        store: AlertStore | None = None,
        clock: Callable[[], int] = _now_ms,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize session.

        Args:
            config: Application configuration
            tracker: Location tracker (created if not provided)
            classifier: Incident classifier (created if not provided)
            store: Alert store (empty if not provided)
            clock: Milliseconds-since-epoch clock
            rng: Random source for simulated alerts
        """
        self.config = config or Config()
        self.tracker = tracker or LocationTracker(config=self.config.tracker)
        self.classifier = classifier or IncidentClassifier.from_config(self.config.classifier)
        self.store = store if store is not None else AlertStore()
        self.decider = TriageDecider(radius_km=self.config.triage.interrupt_radius_km)
        self.clock = clock
        self.rng = rng or random.Random()
        self._tokens = itertools.count(1)
        self._state = SessionState()

        self.tracker.add_listener(self._on_position)

    @property
    def state(self) -> SessionState:
        return self._state

    def _update(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)

    # -- lifecycle ---------------------------------------------------------

    def start(self, mode: TrackingMode | None = None) -> None:
        """Load the initial feed and start location tracking."""
        if self.config.load_mock_feed and len(self.store) == 0:
            added = self.store.extend_from_feed(mock_feed(self.clock()))
            logger.info("Loaded %d alerts from feed", added)

        self.set_tracking_mode(mode or self.config.tracker.mode)

    def set_tracking_mode(self, mode: TrackingMode) -> None:
        """Switch tracking mode; the previous mode is fully released first.

        A classification still in flight is abandoned; its result is dropped
        when it arrives.
        """
        self.tracker.start(mode)
        if self._state.pending_request is not None:
            logger.info("Abandoning classification %d on mode switch", self._state.pending_request)
        self._update(tracking_mode=mode, pending_request=None)

    def toggle_simulated_walk(self) -> TrackingMode:
        """Flip between live tracking and the simulated walk."""
        if self.tracker.mode is TrackingMode.SIMULATION:
            mode = TrackingMode.LIVE
        else:
            mode = TrackingMode.SIMULATION
        self.set_tracking_mode(mode)
        return mode

    def shutdown(self) -> None:
        """Release tracking resources and abandon any in-flight classification."""
        self.tracker.stop()
        self._update(tracking_mode=None, pending_request=None)
        logger.info("Session shut down")

    def _on_position(self, position: Position) -> None:
        # No re-triage here: alerts are only evaluated when they arrive
        self._update(position=position)

    # -- alert feed --------------------------------------------------------

    def receive_alert(self, alert: Alert) -> TriageDecision:
        """Take a new alert from the feed and decide whether it interrupts.

        Raises:
            DuplicateAlertError: If the alert id is already stored
        """
        self.store.append(alert)
        decision = self.decider.evaluate(alert, self._state.position)
        self._update(triage=self.decider.state)
        return decision

    def receive_feed(self, alerts: list[Alert]) -> int:
        """Load a batch of existing alerts without triaging them."""
        return self.store.extend_from_feed(alerts)

    def update_status(self, alert_id: str, status: Status) -> bool:
        """Merge an external status transition by id."""
        return self.store.upsert_status(alert_id, status)

    def retrigger(self, alert_id: str) -> TriageDecision | None:
        """Explicitly re-evaluate a stored alert against the current position."""
        alert = self.store.get(alert_id)
        if alert is None:
            return None
        decision = self.decider.evaluate(alert, self._state.position)
        self._update(triage=self.decider.state)
        return decision

    def simulate_incoming_alert(self) -> TriageDecision | None:
        """Inject a test FIRE alert near the user. No-op before tracking starts."""
        position = self._state.position
        if position is None:
            return None
        return self.receive_alert(simulated_alert(position, self.clock(), self.rng))

    # -- views -------------------------------------------------------------

    @property
    def proximity(self) -> ProximityFilter:
        return ProximityFilter(self.store.all(), self._state.position)

    def nearby(self) -> list[Alert]:
        return self.proximity.nearby(self.config.triage.nearby_radius_km)

    def nearby_count(self) -> int:
        """Summary badge count for the nearby view."""
        return count_nearby(
            self.store.all(), self._state.position, self.config.triage.nearby_radius_km,
        )

    def with_distance(self) -> list[AlertDistance]:
        return self.proximity.with_distance()

    def sorted_by_distance(self) -> list[AlertDistance]:
        return self.proximity.sorted_by_distance()

    # -- triage actions ----------------------------------------------------

    def overlay(self) -> dict[str, str] | None:
        """Overlay text for the presented alert, None when idle."""
        alert = self.decider.presenting
        if alert is None:
            return None
        return format_overlay(alert, self._state.position)

    def dismiss(self) -> None:
        """Close the interrupting overlay."""
        self.decider.dismiss()
        self._update(triage=self.decider.state)

    def navigate(self) -> Position | None:
        """Close the overlay and navigate to the presented alert."""
        destination = self.decider.navigate()
        self._update(triage=self.decider.state)
        if destination is not None:
            self.start_navigation(destination)
        return destination

    def start_navigation(self, destination: Position) -> None:
        self._update(destination=destination)

    def cancel_navigation(self) -> None:
        self._update(destination=None)

    def navigation_summary(self) -> dict[str, str | int] | None:
        """Distance, ETA and route link to the destination, if navigating."""
        if self._state.position is None or self._state.destination is None:
            return None
        return format_navigation_summary(self._state.position, self._state.destination)

    # -- reporting ---------------------------------------------------------

    async def classify(self, text: str) -> ClassificationResult | None:
        """Classify a report and store it as a draft for confirmation.

        Each call gets a new request token. If the user abandons the flow or
        starts another request before the result arrives, the result is
        discarded. Switching tracking mode and shutting down also abandon it.

        Returns:
            The result, or None if it arrived stale
        """
        token = next(self._tokens)
        self._update(pending_request=token, draft=None)

        result = await self.classifier.classify(text)

        if self._state.pending_request != token:
            logger.info("Discarding stale classification result (request %d)", token)
            return None

        self._update(
            pending_request=None,
            draft=ClassificationDraft(token=token, text=text, result=result),
        )
        return result

    def cancel_classification(self) -> None:
        """Leave the classification flow; late results will be ignored."""
        self._update(pending_request=None, draft=None)

    def _submit(self, alert: Alert) -> Alert:
        # The reporter is not interrupted by their own report
        self.store.append(alert)
        self._update(notification=format_report_notification(
            self.config.triage.nearby_radius_km
        ))
        logger.info("Submitted report %s (%s)", alert.id, alert.category.value)
        return alert

    def _new_alert_id(self) -> str:
        return uuid.uuid4().hex

    def confirm_report(self) -> Alert | None:
        """Turn the current draft into a new alert at the user's position."""
        draft = self._state.draft
        position = self._state.position
        if draft is None or position is None:
            return None

        alert = alert_from_classification(
            self._new_alert_id(), draft.text, draft.result, position, self.clock(),
        )
        self._update(draft=None)
        return self._submit(alert)

    def submit_quick_report(self, label: str) -> Alert | None:
        """Submit a one-tap preset report by label."""
        preset = find_quick_report(label)
        position = self._state.position
        if preset is None or position is None:
            return None
        return self._submit(alert_from_quick_report(
            self._new_alert_id(), preset, position, self.clock(),
        ))

    def submit_manual_report(self, text: str, severity: Severity = Severity.MEDIUM) -> Alert | None:
        """Submit a report without classification (GENERAL category)."""
        position = self._state.position
        if position is None:
            return None
        return self._submit(alert_from_manual_report(
            self._new_alert_id(), text, severity, position, self.clock(),
        ))

    def clear_notification(self) -> None:
        self._update(notification=None)
