"""Proximity-based personal safety alerting.

Tracks the user's position, ranks incoming emergency alerts by distance,
decides which one deserves an interrupting notification, and classifies
user-written incident reports into new alerts.
"""

__version__ = "1.0.0"
