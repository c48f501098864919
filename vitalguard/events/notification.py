import uuid
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from vitalguard.analysis.vitals_classifier import Severity


class AlertCategory(Enum):
    HEART_RATE = "heart_rate"
    BLOOD_PRESSURE = "blood_pressure"
    GLUCOSE = "glucose"
    FALL = "fall"
    DAILY_SUMMARY = "daily_summary"


@dataclass(frozen=True)
class AlertCandidate:
    category: AlertCategory
    severity: Severity
    title: str
    message: str
    timestamp: float


@dataclass
class Notification:
    category: AlertCategory
    severity: Severity
    title: str
    message: str
    timestamp: float
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    is_read: bool = False

    @property
    def requires_acknowledgement(self) -> bool:
        return self.severity == Severity.CRITICAL

    @property
    def timestamp_iso(self) -> str:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc).isoformat()

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "category": self.category.value,
            "severity": self.severity.label,
            "title": self.title,
            "message": self.message,
            "timestamp": self.timestamp,
            "timestamp_iso": self.timestamp_iso,
            "is_read": self.is_read,
            "requires_acknowledgement": self.requires_acknowledgement,
        }


class NotificationStore:
    """Newest-first notification list with an unread counter.

    Entries are never reordered; they leave only through ``clear_all`` or
    eviction of the oldest entry once ``max_size`` is reached.
    """

    def __init__(self, max_size: int | None = None):
        self.max_size = max_size
        self._items: deque[Notification] = deque()
        self._by_id: dict[uuid.UUID, Notification] = {}
        self._unread = 0

    def insert(self, notification: Notification) -> None:
        self._items.appendleft(notification)
        self._by_id[notification.id] = notification
        if not notification.is_read:
            self._unread += 1

        if self.max_size is not None:
            while len(self._items) > self.max_size:
                self._evict_oldest()

    def _evict_oldest(self) -> None:
        oldest = self._items.pop()
        del self._by_id[oldest.id]
        if not oldest.is_read:
            self._unread -= 1

    def get(self, notification_id: uuid.UUID) -> Notification | None:
        return self._by_id.get(notification_id)

    def mark_read(self, notification_id: uuid.UUID) -> bool:
        notification = self._by_id.get(notification_id)
        if notification is None:
            return False
        if not notification.is_read:
            notification.is_read = True
            self._unread -= 1
        return True

    def mark_all_read(self) -> None:
        for notification in self._items:
            notification.is_read = True
        self._unread = 0

    def clear_all(self) -> None:
        self._items.clear()
        self._by_id.clear()
        self._unread = 0

    @property
    def notifications(self) -> list[Notification]:
        return list(self._items)

    @property
    def unread_count(self) -> int:
        return self._unread

    def __getitem__(self, index: int) -> Notification:
        return self._items[index]

    def __iter__(self) -> Iterator[Notification]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
