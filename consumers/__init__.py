from consumers.base import Notifier
from consumers.console import ConsoleNotifier
from consumers.slack import SlackWebhookNotifier

__all__ = ["Notifier", "ConsoleNotifier", "SlackWebhookNotifier"]
