"""Render notification templates and send them as Opsgenie alerts."""

__version__ = "0.1.0"
