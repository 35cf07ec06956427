"""Incident classification results - Pure functions.

This module validates loosely-typed classification payloads into a strict
result type and defines the deterministic fallbacks used when the external
service is not configured or fails. The actual service call lives in the
imperative shell.
"""

from dataclasses import dataclass
from typing import Any, Union

from safety_alerts.core.alert import Category, Severity


# Bounds for the free-text fields returned by the service
MAX_ADVICE_LENGTH = 200
MAX_SUMMARY_LENGTH = 80

RESULT_FIELDS = frozenset({"category", "severity", "advice", "summary"})

NO_SERVICE_ADVICE = "API key missing. Please ensure safety first."
SAFE_DEFAULT_ADVICE = "Contact the authorities immediately if you feel unsafe."
SAFE_DEFAULT_SUMMARY = "Could not analyze the report."


@dataclass(frozen=True)
class ClassificationResult:
    """A complete, schema-valid classification.

    Attributes:
        category: Emergency category
        severity: Severity level
        advice: Short, actionable advice
        summary: Very short summary of the incident
    """
    category: Category
    severity: Severity
    advice: str
    summary: str

    def to_dict(self) -> dict[str, str]:
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "advice": self.advice,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class Validated:
    """Payload passed validation."""
    result: ClassificationResult


@dataclass(frozen=True)
class Invalid:
    """Payload failed validation.

    Attributes:
        reason: Human-readable description of the first problem found
    """
    reason: str


ValidationOutcome = Union[Validated, Invalid]


def _check_text(payload: dict[str, Any], name: str, max_length: int) -> str | None:
    value = payload[name]
    if not isinstance(value, str) or not value.strip():
        return f"'{name}' must be a non-empty string"
    if len(value) > max_length:
        return f"'{name}' exceeds {max_length} characters"
    return None


def validate_payload(payload: Any) -> ValidationOutcome:
    """Validate a raw service payload into a classification result.

    Pure function. The payload must be an object with exactly the four
    result fields, enum values drawn from the known categories and
    severities, and bounded non-empty text fields.

    Args:
        payload: Decoded JSON from the classification service

    Returns:
        Validated(result) or Invalid(reason)
    """
    if not isinstance(payload, dict):
        return Invalid(f"expected an object, got {type(payload).__name__}")

    keys = set(payload)
    if keys != RESULT_FIELDS:
        missing = sorted(RESULT_FIELDS - keys)
        extra = sorted(keys - RESULT_FIELDS)
        return Invalid(f"field mismatch (missing={missing}, unexpected={extra})")

    try:
        category = Category(payload["category"])
    except ValueError:
        return Invalid(f"unknown category {payload['category']!r}")

    try:
        severity = Severity(payload["severity"])
    except ValueError:
        return Invalid(f"unknown severity {payload['severity']!r}")

    for name, limit in (("advice", MAX_ADVICE_LENGTH), ("summary", MAX_SUMMARY_LENGTH)):
        problem = _check_text(payload, name, limit)
        if problem:
            return Invalid(problem)

    return Validated(ClassificationResult(
        category=category,
        severity=severity,
        advice=payload["advice"].strip(),
        summary=payload["summary"].strip(),
    ))


def no_service_result(text: str) -> ClassificationResult:
    """Result used when no classification service is configured.

    Pure function. Echoes the input text as the summary.
    """
    return ClassificationResult(
        category=Category.GENERAL,
        severity=Severity.MEDIUM,
        advice=NO_SERVICE_ADVICE,
        summary=text,
    )


# Returned whenever a configured service call fails for any reason
SAFE_DEFAULT_RESULT = ClassificationResult(
    category=Category.GENERAL,
    severity=Severity.MEDIUM,
    advice=SAFE_DEFAULT_ADVICE,
    summary=SAFE_DEFAULT_SUMMARY,
)


def build_prompt(text: str) -> str:
    """Build the instruction text sent along with the user's report.

    Pure function.
    """
    categories = ", ".join(c.value for c in Category)
    severities = ", ".join(s.value for s in Severity)
    return (
        f'Analyze the following emergency situation description: "{text}".\n'
        f"Classify it into one of these categories: {categories}.\n"
        f"Determine severity ({severities}).\n"
        "Provide short, actionable advice (under 20 words).\n"
        "Provide a very short summary (under 5 words)."
    )
