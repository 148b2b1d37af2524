"""Silence event publisher scoped to a single monitor."""

import logging
from pubsub.core import Publisher
from ..models.silence import Silence, SilenceAlert

logger = logging.getLogger(__name__)


SILENCE_DETECTED = "silence_detected"
SILENCE_ALERT = "silence_alert"


def _silence_detected_spec(silence: Silence) -> None:
    """Message data of the ``silence_detected`` topic."""


def _silence_alert_spec(alert: SilenceAlert) -> None:
    """Message data of the ``silence_alert`` topic."""


class SilencePublisher:
    """Publishes silence events on a private pypubsub ``Publisher``.

    Each instance owns its own topic tree, so two monitors never see each
    other's events. pypubsub keeps weak references to listeners: subscribers
    must stay referenced for as long as they want events.
    """

    def __init__(self):
        self.publisher = Publisher()
        topic_mgr = self.publisher.getTopicMgr()
        topic_mgr.getOrCreateTopic(SILENCE_DETECTED, _silence_detected_spec)
        topic_mgr.getOrCreateTopic(SILENCE_ALERT, _silence_alert_spec)
        logger.info(f"SilencePublisher initialized with topics: {SILENCE_DETECTED}, {SILENCE_ALERT}")

    def subscribe_silences(self, listener) -> None:
        """Subscribe ``listener(silence)`` to finalized silences."""
        self.publisher.subscribe(listener, SILENCE_DETECTED)

    def subscribe_alerts(self, listener) -> None:
        """Subscribe ``listener(alert)`` to silence alerts."""
        self.publisher.subscribe(listener, SILENCE_ALERT)

    def publish_silence(self, silence: Silence) -> None:
        self.publisher.sendMessage(SILENCE_DETECTED, silence=silence)
        logger.debug(f"Published silence: {silence.silence_id} ({silence.category})")

    def publish_alert(self, alert: SilenceAlert) -> None:
        self.publisher.sendMessage(SILENCE_ALERT, alert=alert)
        logger.debug(f"Published alert: {alert.severity} after {alert.duration:.0f}ms")
