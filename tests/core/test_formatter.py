"""Unit tests for display formatting.

Pure function tests - no mocks needed.
"""

from urllib.parse import parse_qs, urlparse

from safety_alerts.core.alert import Alert, Category, Severity
from safety_alerts.core.formatter import (
    build_route_url,
    format_alert_line,
    format_distance,
    format_eta_minutes,
    format_navigation_summary,
    format_overlay,
    format_report_notification,
)
from safety_alerts.core.geo import Position


USER = Position(13.7563, 100.5018)


def make_alert(description: str = "Black smoke behind the market") -> Alert:
    return Alert(
        id="3",
        category=Category.FIRE,
        severity=Severity.CRITICAL,
        description=description,
        position=USER.offset(0.01, 0.0),
        created_at=0,
        reporter_label="Uncle Pol",
    )


class TestFormatDistance:
    """Tests for format_distance() and format_eta_minutes()."""

    def test_one_decimal(self):
        assert format_distance(1.234) == "1.2 km"
        assert format_distance(0) == "0.0 km"

    def test_eta_two_minutes_per_km(self):
        assert format_eta_minutes(3.0) == 6
        assert format_eta_minutes(0.2) == 0


class TestFormatAlertLine:
    """Tests for format_alert_line() function."""

    def test_includes_category_severity_and_distance(self):
        line = format_alert_line(make_alert(), 1.11)
        assert line == "🔥 FIRE [Critical] Black smoke behind the market - 1.1 km"

    def test_without_distance(self):
        assert not format_alert_line(make_alert()).endswith("km")

    def test_empty_description(self):
        assert "(no description)" in format_alert_line(make_alert(""))


class TestFormatOverlay:
    """Tests for format_overlay() function."""

    def test_overlay_fields(self):
        overlay = format_overlay(make_alert(), USER)

        assert overlay["level"] == "LEVEL: CRITICAL"
        assert overlay["distance"] == "1.1 km"
        assert overlay["reporter"] == "Uncle Pol"

    def test_unknown_position_shows_zero(self):
        assert format_overlay(make_alert(), None)["distance"] == "0.0 km"


class TestReportNotifications:
    """Tests for format_report_notification() function."""

    def test_mentions_radius(self):
        assert format_report_notification() == "Alerted users within 5 km!"

    def test_custom_radius(self):
        assert format_report_notification(2.5) == "Alerted users within 2.5 km!"


class TestRouteUrl:
    """Tests for build_route_url() and format_navigation_summary()."""

    def test_route_url_params(self):
        url = build_route_url(USER, Position(13.75, 100.505))
        parsed = urlparse(url)
        params = parse_qs(parsed.query)

        assert parsed.netloc == "www.google.com"
        assert params["origin"] == ["13.7563,100.5018"]
        assert params["destination"] == ["13.75,100.505"]
        assert params["travelmode"] == ["driving"]

    def test_navigation_summary(self):
        summary = format_navigation_summary(USER, USER.offset(0.045, 0.0))

        assert summary["distance"] == "5.0 km"
        assert summary["eta_minutes"] == 10
        assert summary["route_url"].startswith("https://www.google.com/maps/dir/?")
