import logging
from enum import Enum

from vitalguard.capture.samples import AccelerationSample
from vitalguard.events.observer import FallEvent, FallEventObserver

logger = logging.getLogger(__name__)


class DetectorPhase(Enum):
    IDLE = "idle"
    FREEFALL = "freefall"


class FallEventDetector:
    """Freefall -> impact detector over a live acceleration stream.

    A fall is a magnitude dip below ``freefall_threshold`` followed by a spike
    above ``impact_threshold`` within ``detection_window`` seconds. Forwarded
    events are rate limited by ``alert_cooldown``.

    Samples must arrive in timestamp order from a single writer.
    """

    def __init__(
        self,
        freefall_threshold: float = 0.35,
        impact_threshold: float = 2.8,
        detection_window: float = 0.6,
        alert_cooldown: float = 30.0,
    ):
        self.phase = DetectorPhase.IDLE
        self.freefall_threshold = freefall_threshold
        self.impact_threshold = impact_threshold
        self.detection_window = detection_window
        self.alert_cooldown = alert_cooldown

        self.freefall_since: float | None = None
        self.last_alert_at: float = float("-inf")
        self.observers: list[FallEventObserver] = []

    def add_observer(self, observer: FallEventObserver) -> None:
        self.observers.append(observer)

    def update(self, sample: AccelerationSample) -> DetectorPhase:
        magnitude = sample.magnitude
        now = sample.timestamp

        match self.phase:
            case DetectorPhase.IDLE:
                if magnitude < self.freefall_threshold:
                    self.phase = DetectorPhase.FREEFALL
                    self.freefall_since = now
                    logger.debug(f"Freefall phase detected: {magnitude:.2f}g")

            case DetectorPhase.FREEFALL:
                elapsed = now - self.freefall_since
                if elapsed > self.detection_window:
                    logger.debug("Detection window expired without impact, resetting")
                    self.reset()
                elif magnitude > self.impact_threshold:
                    logger.info(f"Impact confirmed: {magnitude:.2f}g, elapsed {elapsed:.2f}s")
                    freefall_at = self.freefall_since
                    self.reset()
                    self._trigger(now, freefall_at, magnitude)

        return self.phase

    def _trigger(self, now: float, freefall_at: float, magnitude: float) -> None:
        if now - self.last_alert_at <= self.alert_cooldown:
            logger.info("Fall alert suppressed, within cooldown window")
            return

        self.last_alert_at = now
        event = FallEvent(
            event_id=f"fall_{int(now * 1000)}",
            detected_at=now,
            freefall_at=freefall_at,
            impact_magnitude=magnitude,
        )
        for observer in self.observers:
            observer.on_fall_detected(event)

    def reset(self) -> None:
        self.phase = DetectorPhase.IDLE
        self.freefall_since = None
