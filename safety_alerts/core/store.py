"""In-memory alert store.

Holds the ordered alert collection: newest first, unique ids, and status as
the only field that changes after creation. There is no persistence and no
deletion; alerts live for the lifetime of the session.
"""

import logging
from collections.abc import Iterable, Iterator

from safety_alerts.core.alert import Alert, Status


logger = logging.getLogger(__name__)


class AlertStoreError(Exception):
    """Base class for alert store contract violations."""


class DuplicateAlertError(AlertStoreError):
    """Raised when appending an alert whose id is already stored."""

    def __init__(self, alert_id: str) -> None:
        super().__init__(f"Alert '{alert_id}' already exists")
        self.alert_id = alert_id


class AlertView:
    """Read-only, restartable view over the store's current order.

    Each iteration walks the store as it is at that moment, so a view taken
    once keeps reflecting later appends and status changes.
    """

    def __init__(self, store: "AlertStore") -> None:
        self._store = store

    def __iter__(self) -> Iterator[Alert]:
        return iter(tuple(self._store._alerts))

    def __len__(self) -> int:
        return len(self._store)


class AlertStore:
    """Ordered alert collection with append and replace-by-id semantics."""

    def __init__(self, alerts: Iterable[Alert] = ()) -> None:
        self._alerts: list[Alert] = []
        self._ids: set[str] = set()
        for alert in alerts:
            if alert.id in self._ids:
                raise DuplicateAlertError(alert.id)
            self._alerts.append(alert)
            self._ids.add(alert.id)

    def __len__(self) -> int:
        return len(self._alerts)

    def __contains__(self, alert_id: object) -> bool:
        return alert_id in self._ids

    def append(self, alert: Alert) -> None:
        """Insert an alert at the front of the store.

        Raises:
            DuplicateAlertError: If an alert with the same id exists. The
                store is left unchanged.
        """
        if alert.id in self._ids:
            raise DuplicateAlertError(alert.id)

        self._alerts.insert(0, alert)
        self._ids.add(alert.id)
        logger.debug("Appended alert %s (%s)", alert.id, alert.category.value)

    def extend_from_feed(self, alerts: Iterable[Alert]) -> int:
        """Load a batch from the feed producer, keeping the feed's order.

        Duplicates are skipped with a warning instead of raising, since the
        producer may resend alerts it already delivered. Within one batch
        the first copy of an id wins.

        Returns:
            Number of alerts added
        """
        fresh: list[Alert] = []
        seen: set[str] = set()
        for alert in alerts:
            if alert.id in self._ids or alert.id in seen:
                logger.warning("Skipping duplicate alert %s from feed", alert.id)
                continue
            seen.add(alert.id)
            fresh.append(alert)

        for alert in reversed(fresh):
            self.append(alert)
        return len(fresh)

    def upsert_status(self, alert_id: str, status: Status) -> bool:
        """Replace the status of a stored alert.

        Unknown ids are ignored so out-of-order or repeated external events
        are harmless.

        Returns:
            True if the id was found
        """
        for index, alert in enumerate(self._alerts):
            if alert.id == alert_id:
                if alert.status != status:
                    self._alerts[index] = alert.with_status(status)
                    logger.debug("Alert %s status -> %s", alert_id, status.value)
                return True

        logger.debug("Ignoring status update for unknown alert %s", alert_id)
        return False

    def get(self, alert_id: str) -> Alert | None:
        for alert in self._alerts:
            if alert.id == alert_id:
                return alert
        return None

    def all(self) -> AlertView:
        """Return a lazy, read-only view in store order (newest first)."""
        return AlertView(self)
