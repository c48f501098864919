import logging
import time
import uuid
from collections.abc import Callable

from vitalguard.analysis.vitals import BloodPressure, Glucose, HeartRate, VitalReading
from vitalguard.analysis.vitals_classifier import Severity, assess
from vitalguard.events import messages
from vitalguard.events.notification import (
    AlertCandidate,
    AlertCategory,
    Notification,
    NotificationStore,
)
from vitalguard.events.observer import FallEvent, NotificationObserver

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWNS: dict[AlertCategory, float] = {
    AlertCategory.HEART_RATE: 60.0,
    AlertCategory.BLOOD_PRESSURE: 60.0,
    AlertCategory.GLUCOSE: 60.0,
    AlertCategory.FALL: 30.0,
    AlertCategory.DAILY_SUMMARY: 6 * 3600.0,
}

# Lowest severity that produces a notification. Elevated never alerts.
MIN_ALERT_SEVERITY: dict[AlertCategory, Severity] = {
    AlertCategory.HEART_RATE: Severity.WARNING,
    AlertCategory.BLOOD_PRESSURE: Severity.WARNING,
    AlertCategory.GLUCOSE: Severity.WARNING,
    AlertCategory.FALL: Severity.WARNING,
    AlertCategory.DAILY_SUMMARY: Severity.NORMAL,
}

_READING_CATEGORY = {
    HeartRate: AlertCategory.HEART_RATE,
    BloodPressure: AlertCategory.BLOOD_PRESSURE,
    Glucose: AlertCategory.GLUCOSE,
}


class AlertDispatcher:
    """Turns classified vitals and fall events into notifications.

    Each category keeps its own cooldown clock. A candidate arriving inside
    its category's cooldown is dropped without touching any state.
    """

    def __init__(
        self,
        store: NotificationStore | None = None,
        cooldowns: dict[AlertCategory, float] | None = None,
        banner_seconds: float = 4.0,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store if store is not None else NotificationStore()
        self.cooldowns = {**DEFAULT_COOLDOWNS, **(cooldowns or {})}
        self.banner_seconds = banner_seconds
        self.clock = clock

        self.last_alert_at: dict[AlertCategory, float] = {
            category: float("-inf") for category in AlertCategory
        }
        self.banner_notification: Notification | None = None
        self._banner_shown_at: float | None = None
        self.pending_escalation: Notification | None = None
        self.observers: list[NotificationObserver] = []

    def add_observer(self, observer: NotificationObserver) -> None:
        self.observers.append(observer)

    def send(self, candidate: AlertCandidate) -> Notification | None:
        category = candidate.category
        if candidate.severity < MIN_ALERT_SEVERITY[category]:
            return None

        now = candidate.timestamp
        if now - self.last_alert_at[category] <= self.cooldowns[category]:
            logger.debug(f"{category.value} alert suppressed, within cooldown window")
            return None

        notification = Notification(
            category=category,
            severity=candidate.severity,
            title=candidate.title,
            message=candidate.message,
            timestamp=now,
        )
        self.store.insert(notification)
        self.last_alert_at[category] = now
        self.banner_notification = notification
        self._banner_shown_at = now

        if notification.requires_acknowledgement:
            logger.warning(f"[{category.value}] {notification.title}")
            self.pending_escalation = notification
        else:
            logger.info(f"[{category.value}] {notification.title}")

        for observer in self.observers:
            observer.on_notification(notification)
            if notification.requires_acknowledgement:
                observer.on_escalation(notification)

        return notification

    def check_vital(self, reading: VitalReading, now: float | None = None) -> Notification | None:
        if isinstance(reading, HeartRate) and reading.bpm <= 0:
            return None

        assessment = assess(reading)
        category = _READING_CATEGORY[type(reading)]
        if assessment.severity < MIN_ALERT_SEVERITY[category]:
            return None

        match reading:
            case HeartRate():
                title, message = messages.heart_rate_message(reading, assessment.band)
            case BloodPressure():
                title, message = messages.blood_pressure_message(reading, assessment.band)
            case Glucose():
                title, message = messages.glucose_message(reading, assessment.band)

        return self.send(
            AlertCandidate(
                category=category,
                severity=assessment.severity,
                title=title,
                message=message,
                timestamp=self.clock() if now is None else now,
            )
        )

    def on_fall_detected(self, event: FallEvent) -> None:
        title, message = messages.fall_message(event)
        self.send(
            AlertCandidate(
                category=AlertCategory.FALL,
                severity=Severity.CRITICAL,
                title=title,
                message=message,
                timestamp=event.detected_at,
            )
        )

    def send_daily_summary(
        self, heart_rate: float, steps: int, now: float | None = None
    ) -> Notification | None:
        title, message = messages.daily_summary_message(heart_rate, steps)
        return self.send(
            AlertCandidate(
                category=AlertCategory.DAILY_SUMMARY,
                severity=Severity.NORMAL,
                title=title,
                message=message,
                timestamp=self.clock() if now is None else now,
            )
        )

    def banner_at(self, now: float) -> Notification | None:
        if self.banner_notification is None or self._banner_shown_at is None:
            return None
        if now - self._banner_shown_at >= self.banner_seconds:
            return None
        return self.banner_notification

    @property
    def banner(self) -> Notification | None:
        return self.banner_at(self.clock())

    def dismiss_banner(self) -> None:
        self.banner_notification = None
        self._banner_shown_at = None

    def acknowledge_escalation(self) -> Notification | None:
        notification, self.pending_escalation = self.pending_escalation, None
        if notification is not None:
            self.store.mark_read(notification.id)
        return notification

    def mark_read(self, notification_id: uuid.UUID) -> bool:
        return self.store.mark_read(notification_id)

    def mark_all_read(self) -> None:
        self.store.mark_all_read()

    def clear_all(self) -> None:
        self.store.clear_all()
        self.pending_escalation = None

    @property
    def notifications(self) -> list[Notification]:
        return self.store.notifications

    @property
    def unread_count(self) -> int:
        return self.store.unread_count
