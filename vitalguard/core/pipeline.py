import dataclasses
import logging
import threading
import time
import uuid
from concurrent.futures import Future

from vitalguard.analysis.fall_detector import DetectorPhase, FallEventDetector
from vitalguard.analysis.vitals import (
    HeartRate,
    VitalsSnapshot,
    parse_blood_pressure,
    parse_glucose,
)
from vitalguard.assistant.chat import HealthAssistant
from vitalguard.assistant.client import ChatCompletionClient
from vitalguard.assistant.risk import RiskAssessment, RiskAssessor
from vitalguard.capture.samples import (
    AccelerationSample,
    HeartRateSample,
    Sample,
    SampleSource,
    SensorUnavailableError,
)
from vitalguard.core.config import Config
from vitalguard.events.dispatcher import AlertDispatcher
from vitalguard.events.notification import AlertCategory, Notification, NotificationStore
from vitalguard.events.observer import FallEvent

logger = logging.getLogger(__name__)


class AssistantUnavailableError(Exception):
    pass


class MonitoringPipeline:
    """Single serialized alert lane.

    Acceleration samples, heart-rate samples and manual entries all pass
    through one lock, which guards the detector state, the per-category
    cooldown clocks and the notification store.
    """

    def __init__(self, config: Config | None = None):
        self.config = config or Config()
        fall = self.config.fall_detection
        alerts = self.config.alerts

        self.detector = FallEventDetector(
            freefall_threshold=fall.freefall_threshold,
            impact_threshold=fall.impact_threshold,
            detection_window=fall.detection_window,
            alert_cooldown=fall.alert_cooldown,
        )
        self.dispatcher = AlertDispatcher(
            store=NotificationStore(max_size=alerts.max_notifications),
            cooldowns={
                AlertCategory.HEART_RATE: alerts.vital_cooldown,
                AlertCategory.BLOOD_PRESSURE: alerts.vital_cooldown,
                AlertCategory.GLUCOSE: alerts.vital_cooldown,
                AlertCategory.FALL: alerts.fall_cooldown,
                AlertCategory.DAILY_SUMMARY: alerts.daily_summary_cooldown,
            },
            banner_seconds=alerts.banner_seconds,
        )
        self.detector.add_observer(self.dispatcher)
        self.detector.add_observer(self)

        self.snapshot = VitalsSnapshot()
        self.fall_events: list[FallEvent] = []
        self.is_monitoring = False

        self.risk_assessor: RiskAssessor | None = None
        self.assistant: HealthAssistant | None = None
        if self.config.assistant.enabled:
            assistant = self.config.assistant
            client = ChatCompletionClient(
                base_url=assistant.base_url,
                model=assistant.model,
                api_key=assistant.api_key,
                max_tokens=assistant.max_tokens,
                temperature=assistant.temperature,
                timeout=assistant.timeout,
            )
            self.risk_assessor = RiskAssessor(client)
            self.assistant = HealthAssistant(client)

        self._lock = threading.Lock()
        self._source: SampleSource | None = None

    def on_fall_detected(self, event: FallEvent) -> None:
        logger.warning(f"Fall detected: {event.event_id} ({event.impact_magnitude:.2f}g)")
        self.fall_events.append(event)

    def start_monitoring(self, source: SampleSource) -> bool:
        if self.is_monitoring:
            logger.warning("Monitoring already running")
            return True

        if not source.is_available:
            logger.warning("Accelerometer not available, monitoring not started")
            return False

        self._source = source
        self.is_monitoring = True
        logger.info("Monitoring started")
        try:
            source.start(self)
        except SensorUnavailableError as e:
            logger.warning(f"Sensor unavailable: {e}")
            self._source = None
            self.is_monitoring = False
            return False
        return True

    def stop_monitoring(self) -> None:
        if self._source is not None:
            self._source.stop()
            self._source = None
        with self._lock:
            self.detector.reset()
        self.is_monitoring = False
        logger.info("Monitoring stopped")

    def shutdown(self) -> None:
        self.stop_monitoring()
        if self.risk_assessor:
            self.risk_assessor.shutdown()

    def on_sample(self, sample: Sample) -> None:
        match sample:
            case AccelerationSample():
                self.process_acceleration(sample)
            case HeartRateSample():
                self.process_heart_rate(sample)

    def process_acceleration(self, sample: AccelerationSample) -> DetectorPhase:
        with self._lock:
            return self.detector.update(sample)

    def process_heart_rate(self, sample: HeartRateSample) -> Notification | None:
        with self._lock:
            self.snapshot.heart_rate = sample.bpm
            return self.dispatcher.check_vital(HeartRate(bpm=sample.bpm), now=sample.timestamp)

    def submit_manual_vitals(
        self,
        systolic: str | None = None,
        diastolic: str | None = None,
        glucose: str | None = None,
        now: float | None = None,
    ) -> list[Notification]:
        """Record manually entered text and classify whatever parses.

        Fields left as None keep their previous text. Text that does not
        parse is stored for display but produces no classification.
        """
        now = time.time() if now is None else now
        sent: list[Notification] = []

        with self._lock:
            if systolic is not None:
                self.snapshot.systolic_text = systolic.strip()
            if diastolic is not None:
                self.snapshot.diastolic_text = diastolic.strip()
            if glucose is not None:
                self.snapshot.glucose_text = glucose.strip()

            if systolic is not None or diastolic is not None:
                bp = parse_blood_pressure(self.snapshot.systolic_text, self.snapshot.diastolic_text)
                if bp is not None:
                    notification = self.dispatcher.check_vital(bp, now=now)
                    if notification:
                        sent.append(notification)

            if glucose is not None:
                reading = parse_glucose(self.snapshot.glucose_text)
                if reading is not None:
                    notification = self.dispatcher.check_vital(reading, now=now)
                    if notification:
                        sent.append(notification)

        return sent

    def update_activity(self, steps: int | None = None, oxygen_saturation: float | None = None) -> None:
        with self._lock:
            if steps is not None:
                self.snapshot.steps = steps
            if oxygen_saturation is not None:
                self.snapshot.oxygen_saturation = oxygen_saturation

    def run_daily_summary(self, now: float | None = None) -> Notification | None:
        with self._lock:
            return self.dispatcher.send_daily_summary(
                heart_rate=self.snapshot.heart_rate,
                steps=self.snapshot.steps,
                now=now,
            )

    def assess_risk(self) -> Future[RiskAssessment]:
        """Submit a risk assessment of the current vitals.

        The snapshot is copied under the lock; the HTTP call runs on the
        assessor's worker thread.

        Raises:
            AssistantUnavailableError: the assistant is disabled in config
        """
        if self.risk_assessor is None:
            raise AssistantUnavailableError("Assistant is disabled")
        with self._lock:
            snapshot = dataclasses.replace(self.snapshot)
        return self.risk_assessor.assess_async(snapshot)

    def chat(self, text: str) -> str | None:
        if self.assistant is None:
            raise AssistantUnavailableError("Assistant is disabled")
        with self._lock:
            snapshot = dataclasses.replace(self.snapshot)
        return self.assistant.reply(text, snapshot)

    def banner(self, now: float | None = None) -> Notification | None:
        with self._lock:
            if now is None:
                return self.dispatcher.banner
            return self.dispatcher.banner_at(now)

    def acknowledge_escalation(self) -> Notification | None:
        with self._lock:
            return self.dispatcher.acknowledge_escalation()

    def mark_read(self, notification_id: uuid.UUID) -> bool:
        with self._lock:
            return self.dispatcher.mark_read(notification_id)

    def mark_all_read(self) -> None:
        with self._lock:
            self.dispatcher.mark_all_read()

    def clear_all(self) -> None:
        with self._lock:
            self.dispatcher.clear_all()

    @property
    def notifications(self) -> list[Notification]:
        with self._lock:
            return self.dispatcher.notifications

    @property
    def unread_count(self) -> int:
        with self._lock:
            return self.dispatcher.unread_count

    @property
    def pending_escalation(self) -> Notification | None:
        with self._lock:
            return self.dispatcher.pending_escalation
