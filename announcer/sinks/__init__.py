"""Notification sinks."""

from announcer.sinks.base import NotificationSink
from announcer.sinks.dry_run import DryRunSink
from announcer.sinks.slack import SlackSink

__all__ = [
    "NotificationSink",
    "DryRunSink",
    "SlackSink",
]
