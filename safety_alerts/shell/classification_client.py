"""Classification Service Client - Imperative Shell.

This module handles HTTP communication with the text-classification
service (Gemini generateContent API). All I/O is contained here; payload
validation and fallbacks are in the core module.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

import requests

from safety_alerts.core.alert import Category, Severity
from safety_alerts.core.classification import build_prompt
from safety_alerts.core.config import DEFAULT_CLASSIFIER_MODEL, GEMINI_API_BASE


logger = logging.getLogger(__name__)


# Default timeout for classification requests (seconds)
DEFAULT_TIMEOUT = 20

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "category": {"type": "STRING", "enum": [c.value for c in Category]},
        "severity": {"type": "STRING", "enum": [s.value for s in Severity]},
        "advice": {"type": "STRING"},
        "summary": {"type": "STRING"},
    },
    "required": ["category", "severity", "advice", "summary"],
}


@dataclass
class ClassificationResponse:
    """Response from the classification service.

    Attributes:
        success: Whether a JSON payload was obtained
        status_code: HTTP status code (0 if no response)
        payload: Decoded, not yet validated, JSON payload
        error: Error message if failed
    """
    success: bool
    status_code: int
    payload: Any = None
    error: str | None = None


class ClassificationClient:
    """Client for the text-classification service.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_CLASSIFIER_MODEL,
        base_url: str = GEMINI_API_BASE,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize classification client.

        Args:
            api_key: Service credential
            model: Model name
            base_url: Service base URL
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.model}:generateContent"

    def _build_body(self, text: str) -> dict[str, Any]:
        """Build the generateContent request body."""
        return {
            "contents": [{"parts": [{"text": build_prompt(text)}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }

    @staticmethod
    def _extract_payload(data: dict[str, Any]) -> Any:
        """Pull the model's JSON answer out of a generateContent response.

        Raises:
            KeyError, IndexError, TypeError: If the envelope is malformed
            ValueError: If the answer is not valid JSON
        """
        text = data["candidates"][0]["content"]["parts"][0]["text"]
        return json.loads(text or "{}")

    def classify(self, text: str) -> ClassificationResponse:
        """Send one classification request.

        This method performs HTTP I/O. It never raises for transport or
        decoding problems; they are reported in the response.

        Args:
            text: Free-text incident description

        Returns:
            ClassificationResponse with the raw payload on success
        """
        logger.info("Requesting classification (%d chars)", len(text))

        try:
            response = requests.post(
                self.url,
                json=self._build_body(text),
                timeout=self.timeout,
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self.api_key,
                },
            )

            if response.status_code != 200:
                error_text = response.text
                logger.warning(
                    "Classification service returned non-200: %d - %s",
                    response.status_code,
                    error_text,
                )
                return ClassificationResponse(
                    success=False,
                    status_code=response.status_code,
                    error=error_text,
                )

            payload = self._extract_payload(response.json())
            return ClassificationResponse(
                success=True,
                status_code=response.status_code,
                payload=payload,
            )

        except requests.Timeout:
            logger.error("Classification request timed out")
            return ClassificationResponse(
                success=False,
                status_code=0,
                error="Request timed out",
            )
        except requests.RequestException as e:
            logger.error("Classification request failed: %s", str(e))
            return ClassificationResponse(
                success=False,
                status_code=0,
                error=str(e),
            )
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("Malformed classification response: %s", str(e))
            return ClassificationResponse(
                success=False,
                status_code=response.status_code,
                error=f"Malformed response: {e}",
            )
