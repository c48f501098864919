from dataclasses import dataclass
from typing import Protocol

from vitalguard.events.notification import Notification


@dataclass(frozen=True)
class FallEvent:
    event_id: str
    detected_at: float
    freefall_at: float
    impact_magnitude: float

    @property
    def elapsed(self) -> float:
        """Seconds between freefall onset and impact"""
        return self.detected_at - self.freefall_at


class FallEventObserver(Protocol):
    def on_fall_detected(self, event: FallEvent) -> None: ...


class NotificationObserver(Protocol):
    """Receives every notification the dispatcher emits"""

    def on_notification(self, notification: Notification) -> None: ...
    def on_escalation(self, notification: Notification) -> None: ...
