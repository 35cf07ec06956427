"""Command-line entry point.

Runs a safety session for a few seconds against the demo feed and prints
the resulting state and views as JSON. A thin wrapper that loads
configuration and drives the session.

Usage:
    # Simulated walk for 5 seconds
    safety-alerts --simulate --seconds 5

    # Inject a test alert near the user, then dismiss it
    safety-alerts --simulate --simulate-alert

    # Classify a report and submit it
    safety-alerts --classify "smoke coming out of the building next door" --confirm

Environment:
    CONFIG_PATH: Path to config file (otherwise environment variables are used)
    CLASSIFIER_API_KEY: Classification service key
    LOG_LEVEL: Logging level (default INFO)
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any

from safety_alerts.core.config import Config, TrackingMode, validate_config
from safety_alerts.core.formatter import format_alert_line
from safety_alerts.session import SafetySession
from safety_alerts.shell.config_loader import load_config, load_config_from_env


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _get_config() -> Config:
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    return load_config_from_env()


async def run_session(
    config: Config,
    mode: TrackingMode,
    seconds: float,
    simulate_alert: bool = False,
    classify_text: str | None = None,
    confirm: bool = False,
) -> dict[str, Any]:
    """Run one session and return a JSON-serializable report."""
    session = SafetySession(config)
    report: dict[str, Any] = {}

    try:
        session.start(mode)

        if classify_text:
            result = await session.classify(classify_text)
            report["classification"] = result.to_dict() if result else None
            if confirm:
                alert = session.confirm_report()
                report["submitted"] = alert.to_dict() if alert else None

        if simulate_alert:
            decision = session.simulate_incoming_alert()
            if decision is not None:
                report["simulated_alert"] = {
                    "id": decision.alert.id,
                    "interrupt": decision.interrupt,
                    "reason": decision.reason.value,
                }

        await asyncio.sleep(seconds)

        report["state"] = session.state.to_dict()
        nearby_ids = {a.id for a in session.nearby()}
        report["nearby"] = [
            format_alert_line(d.alert, d.distance_km)
            for d in session.sorted_by_distance()
            if d.alert.id in nearby_ids
        ]
        report["nearby_count"] = session.nearby_count()
        report["overlay"] = session.overlay()
        report["navigation"] = session.navigation_summary()
        report["emergency_contacts"] = [
            {"name": c.name, "number": c.number} for c in config.emergency_contacts
        ]
    finally:
        session.shutdown()

    return report


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Run a proximity alert triage session against the demo feed",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Use the simulated walk instead of live positioning",
    )
    parser.add_argument(
        "--seconds",
        type=float,
        default=3.0,
        help="How long to keep the session running (default: 3)",
    )
    parser.add_argument(
        "--simulate-alert",
        action="store_true",
        help="Inject a test FIRE alert near the user",
    )
    parser.add_argument(
        "--classify",
        metavar="TEXT",
        help="Classify an incident description",
    )
    parser.add_argument(
        "--confirm",
        action="store_true",
        help="Submit the classified report as a new alert",
    )
    args = parser.parse_args(argv)

    config = _get_config()

    validation = validate_config(config)
    for error in validation.errors:
        log = logger.warning if error.severity == "warning" else logger.error
        log("Config %s: %s", error.field, error.message)
    if not validation.valid:
        return 1

    mode = TrackingMode.SIMULATION if args.simulate else config.tracker.mode

    report = asyncio.run(run_session(
        config,
        mode=mode,
        seconds=args.seconds,
        simulate_alert=args.simulate_alert,
        classify_text=args.classify,
        confirm=args.confirm,
    ))

    print(json.dumps(report, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
