"""Incident classification - Imperative Shell.

Wraps the classification client so callers always get a complete,
schema-valid result: the offline fallback when no service is configured,
the safe default when the call or its payload fails.
"""

import asyncio
import logging

from safety_alerts.core.classification import (
    SAFE_DEFAULT_RESULT,
    ClassificationResult,
    Validated,
    no_service_result,
    validate_payload,
)
from safety_alerts.core.config import ClassifierConfig
from safety_alerts.shell.classification_client import ClassificationClient


logger = logging.getLogger(__name__)


class IncidentClassifier:
    """Maps free text to a category/severity pair with advice.

    Exactly one service round trip per call, no retries. The blocking HTTP
    request runs in a worker thread so the event loop keeps handling
    position and store updates meanwhile.
    """

    def __init__(self, client: ClassificationClient | None = None) -> None:
        """Initialize classifier.

        Args:
            client: Service client, None when no service is configured
        """
        self.client = client

    @classmethod
    def from_config(cls, config: ClassifierConfig) -> "IncidentClassifier":
        """Build a classifier, treating a missing credential as no service."""
        if not config.configured:
            return cls(client=None)

        return cls(client=ClassificationClient(
            api_key=config.api_key,
            model=config.model,
            base_url=config.endpoint,
            timeout=config.timeout_seconds,
        ))

    @property
    def configured(self) -> bool:
        return self.client is not None

    async def classify(self, text: str) -> ClassificationResult:
        """Classify an incident description. Never raises.

        Args:
            text: Free-text incident description

        Returns:
            A complete ClassificationResult
        """
        if self.client is None:
            logger.warning("No classification service configured, using offline fallback")
            return no_service_result(text)

        try:
            response = await asyncio.to_thread(self.client.classify, text)
        except Exception:
            logger.exception("Classification call failed")
            return SAFE_DEFAULT_RESULT

        if not response.success:
            logger.error("Classification failed: %s", response.error)
            return SAFE_DEFAULT_RESULT

        outcome = validate_payload(response.payload)

        if isinstance(outcome, Validated):
            logger.info(
                "Classified report as %s/%s",
                outcome.result.category.value,
                outcome.result.severity.value,
            )
            return outcome.result

        logger.error("Classification payload rejected: %s", outcome.reason)
        return SAFE_DEFAULT_RESULT
