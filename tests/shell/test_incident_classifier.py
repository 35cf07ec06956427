"""Tests for the incident classifier.

The HTTP client is replaced with a Mock; no network access.
"""

from unittest.mock import Mock

import pytest

from safety_alerts.core.alert import Category, Severity
from safety_alerts.core.classification import (
    NO_SERVICE_ADVICE,
    SAFE_DEFAULT_RESULT,
    ClassificationResult,
)
from safety_alerts.core.config import ClassifierConfig
from safety_alerts.shell.classification_client import (
    ClassificationClient,
    ClassificationResponse,
)
from safety_alerts.shell.incident_classifier import IncidentClassifier


def mock_client(response=None, side_effect=None) -> Mock:
    client = Mock(spec=ClassificationClient)
    client.classify.return_value = response
    client.classify.side_effect = side_effect
    return client


class TestFromConfig:
    """Tests for IncidentClassifier.from_config()."""

    def test_no_key_means_no_service(self):
        """Missing credential yields an unconfigured classifier."""
        classifier = IncidentClassifier.from_config(ClassifierConfig())
        assert classifier.configured is False

    def test_placeholder_key_means_no_service(self):
        """Unresolved placeholder is treated as missing."""
        classifier = IncidentClassifier.from_config(ClassifierConfig(api_key="${KEY}"))
        assert classifier.configured is False

    def test_key_builds_client(self):
        """Credential and model are passed to the HTTP client."""
        classifier = IncidentClassifier.from_config(
            ClassifierConfig(api_key="k", model="m", timeout_seconds=5)
        )

        assert classifier.configured is True
        assert classifier.client.api_key == "k"
        assert classifier.client.model == "m"
        assert classifier.client.timeout == 5


class TestClassify:
    """Tests for IncidentClassifier.classify()."""

    @pytest.mark.asyncio
    async def test_no_service_echoes_each_text(self):
        """Without a service, the fallback summary is the input text."""
        classifier = IncidentClassifier()

        first = await classifier.classify("car on fire")
        second = await classifier.classify("lost child")

        assert first.category is Category.GENERAL
        assert first.severity is Severity.MEDIUM
        assert first.advice == NO_SERVICE_ADVICE
        assert first.summary == "car on fire"
        assert second.summary == "lost child"

    @pytest.mark.asyncio
    async def test_valid_payload_is_returned(self):
        """Valid service payload becomes the result."""
        client = mock_client(ClassificationResponse(
            success=True,
            status_code=200,
            payload={
                "category": "FIRE",
                "severity": "CRITICAL",
                "advice": "Get out and call 199.",
                "summary": "Kitchen fire",
            },
        ))
        classifier = IncidentClassifier(client)

        result = await classifier.classify("kitchen fire")

        assert result == ClassificationResult(
            category=Category.FIRE,
            severity=Severity.CRITICAL,
            advice="Get out and call 199.",
            summary="Kitchen fire",
        )
        client.classify.assert_called_once_with("kitchen fire")

    @pytest.mark.asyncio
    async def test_failed_response_returns_safe_default(self):
        """Non-success response yields the safe default."""
        client = mock_client(ClassificationResponse(
            success=False, status_code=500, error="boom",
        ))

        result = await IncidentClassifier(client).classify("test")

        assert result == SAFE_DEFAULT_RESULT

    @pytest.mark.asyncio
    async def test_invalid_payload_returns_safe_default(self):
        """Payload outside the schema yields the safe default."""
        client = mock_client(ClassificationResponse(
            success=True,
            status_code=200,
            payload={"category": "EARTHQUAKE", "severity": "HIGH", "advice": "a", "summary": "b"},
        ))

        result = await IncidentClassifier(client).classify("test")

        assert result == SAFE_DEFAULT_RESULT

    @pytest.mark.asyncio
    async def test_client_exception_returns_safe_default(self):
        """Unexpected exception from the client never propagates."""
        client = mock_client(side_effect=RuntimeError("unexpected"))

        result = await IncidentClassifier(client).classify("test")

        assert result == SAFE_DEFAULT_RESULT

    @pytest.mark.asyncio
    async def test_single_request_per_call(self):
        """Failures are not retried."""
        client = mock_client(ClassificationResponse(success=False, status_code=0))

        await IncidentClassifier(client).classify("test")

        assert client.classify.call_count == 1
