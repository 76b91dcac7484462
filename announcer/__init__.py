"""Announcer: keeps a Slack channel in sync with a published announcement feed."""

__version__ = "0.1.0"
