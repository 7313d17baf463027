"""Client for the TaskFlow task tracker: session, task cache and derived views."""

__version__ = "1.0.0"
