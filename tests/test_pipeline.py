import threading
import time
from unittest.mock import patch

import pytest

from vitalguard.analysis.fall_detector import DetectorPhase
from vitalguard.capture.replay import ReplaySource
from vitalguard.capture.samples import (
    AccelerationSample,
    HeartRateSample,
    SampleSink,
    SensorUnavailableError,
)
from vitalguard.core.config import AlertsConfig, AssistantConfig, Config
from vitalguard.assistant.risk import RiskLabel
from vitalguard.core.pipeline import AssistantUnavailableError, MonitoringPipeline
from vitalguard.events.notification import AlertCategory


class UnavailableSource:
    is_available = False

    def start(self, sink: SampleSink) -> None:
        raise AssertionError("start must not be called")

    def stop(self) -> None:
        pass


class FailingSource:
    is_available = True

    def start(self, sink: SampleSink) -> None:
        raise SensorUnavailableError("accelerometer busy")

    def stop(self) -> None:
        pass


class ManualSource:
    """Source whose samples are pushed by the test"""

    is_available = True

    def __init__(self):
        self.sink: SampleSink | None = None
        self.stopped = False

    def start(self, sink: SampleSink) -> None:
        self.sink = sink

    def stop(self) -> None:
        self.stopped = True


def accel(t: float, g: float) -> AccelerationSample:
    return AccelerationSample(timestamp=t, x=0.0, y=0.0, z=g)


@pytest.fixture
def config():
    return Config(assistant=AssistantConfig(enabled=False))


@pytest.fixture
def pipeline(config):
    return MonitoringPipeline(config=config)


class TestMonitoringLifecycle:
    def test_sensor_unavailable_never_starts(self, pipeline):
        assert pipeline.start_monitoring(UnavailableSource()) is False
        assert pipeline.is_monitoring is False

    def test_sensor_error_on_start(self, pipeline):
        assert pipeline.start_monitoring(FailingSource()) is False
        assert pipeline.is_monitoring is False

    def test_start_and_stop(self, pipeline):
        source = ManualSource()
        assert pipeline.start_monitoring(source) is True
        assert pipeline.is_monitoring is True

        pipeline.stop_monitoring()
        assert source.stopped is True
        assert pipeline.is_monitoring is False

    def test_stop_resets_detector(self, pipeline):
        source = ManualSource()
        pipeline.start_monitoring(source)
        source.sink.on_sample(accel(0.0, 0.2))
        assert pipeline.detector.phase == DetectorPhase.FREEFALL

        pipeline.stop_monitoring()
        assert pipeline.detector.phase == DetectorPhase.IDLE

    def test_assistant_disabled(self, pipeline):
        assert pipeline.risk_assessor is None
        assert pipeline.assistant is None

    def test_assistant_enabled_by_default(self):
        pipeline = MonitoringPipeline()
        assert pipeline.risk_assessor is not None
        assert pipeline.assistant is not None
        pipeline.shutdown()


class TestFallFlow:
    def test_replayed_fall_reaches_notification_store(self, pipeline):
        samples = [accel(-0.4 + i * 0.02, 0.9) for i in range(20)]
        samples += [accel(0.0, 0.2), accel(0.02, 0.2), accel(0.3, 3.0)]

        pipeline.start_monitoring(ReplaySource(samples))

        assert len(pipeline.fall_events) == 1
        assert pipeline.fall_events[0].detected_at == 0.3
        assert pipeline.detector.phase == DetectorPhase.IDLE

        notifications = pipeline.notifications
        assert len(notifications) == 1
        assert notifications[0].category == AlertCategory.FALL
        assert pipeline.pending_escalation is notifications[0]

    def test_wall_clock_replay_shows_banner(self, pipeline):
        samples = [accel(0.0, 0.2), accel(0.02, 0.2), accel(0.3, 3.0)]
        start = time.time()

        pipeline.start_monitoring(ReplaySource(samples, start_at=start))

        notification = pipeline.notifications[0]
        assert notification.timestamp == pytest.approx(start + 0.3)
        assert pipeline.banner(now=start + 1.0) is notification

    def test_process_acceleration_returns_phase(self, pipeline):
        assert pipeline.process_acceleration(accel(0.0, 1.0)) == DetectorPhase.IDLE
        assert pipeline.process_acceleration(accel(0.02, 0.1)) == DetectorPhase.FREEFALL


class TestVitalsFlow:
    def test_heart_rate_sample(self, pipeline):
        notification = pipeline.process_heart_rate(HeartRateSample(timestamp=0.0, bpm=125))
        assert notification.category == AlertCategory.HEART_RATE
        assert pipeline.snapshot.heart_rate == 125

    def test_heart_rate_via_sink(self, pipeline):
        pipeline.on_sample(HeartRateSample(timestamp=0.0, bpm=40))
        assert pipeline.unread_count == 1

    def test_manual_vitals(self, pipeline):
        sent = pipeline.submit_manual_vitals(systolic="185", diastolic="100", glucose="300", now=0.0)

        assert [n.category for n in sent] == [AlertCategory.BLOOD_PRESSURE, AlertCategory.GLUCOSE]
        assert pipeline.snapshot.bp_display == "185/100 mmHg"
        assert pipeline.snapshot.glucose_display == "300 mg/dL"

    def test_malformed_manual_text_is_no_reading(self, pipeline):
        sent = pipeline.submit_manual_vitals(systolic="abc", diastolic="90", glucose="", now=0.0)
        assert sent == []
        assert pipeline.notifications == []

    def test_partial_bp_entry_waits_for_other_field(self, pipeline):
        assert pipeline.submit_manual_vitals(systolic="150", now=0.0) == []
        sent = pipeline.submit_manual_vitals(diastolic="95", now=1.0)
        assert len(sent) == 1
        assert "150/95" in sent[0].message

    def test_categories_do_not_block_each_other(self, pipeline):
        pipeline.process_acceleration(accel(0.0, 0.2))
        pipeline.process_acceleration(accel(0.3, 3.0))
        pipeline.process_acceleration(accel(10.0, 0.2))
        pipeline.process_acceleration(accel(10.3, 3.0))
        notification = pipeline.process_heart_rate(HeartRateSample(timestamp=10.4, bpm=130))

        assert notification is not None
        assert len(pipeline.fall_events) == 1


class TestDailySummaryAndActivity:
    def test_daily_summary_uses_snapshot(self, pipeline):
        pipeline.process_heart_rate(HeartRateSample(timestamp=0.0, bpm=72))
        pipeline.update_activity(steps=9000, oxygen_saturation=97.0)

        notification = pipeline.run_daily_summary(now=0.0)

        assert notification.category == AlertCategory.DAILY_SUMMARY
        assert "9000 steps" in notification.message
        assert pipeline.snapshot.oxygen_saturation == 97.0

    def test_daily_summary_cooldown_from_config(self):
        config = Config(
            alerts=AlertsConfig(daily_summary_cooldown=60.0),
            assistant=AssistantConfig(enabled=False),
        )
        pipeline = MonitoringPipeline(config=config)
        pipeline.run_daily_summary(now=0.0)
        assert pipeline.run_daily_summary(now=30.0) is None
        assert pipeline.run_daily_summary(now=61.0) is not None


class TestNotificationOperations:
    def test_read_and_clear(self, pipeline):
        pipeline.process_heart_rate(HeartRateSample(timestamp=0.0, bpm=130))
        pipeline.submit_manual_vitals(glucose="60", now=0.0)
        first = pipeline.notifications[-1]

        assert pipeline.mark_read(first.id) is True
        assert pipeline.unread_count == 1

        pipeline.mark_all_read()
        assert pipeline.unread_count == 0

        pipeline.clear_all()
        assert pipeline.notifications == []

    def test_banner_and_acknowledge(self, pipeline):
        notification = pipeline.process_heart_rate(HeartRateSample(timestamp=100.0, bpm=130))
        assert pipeline.banner(now=101.0) is notification
        assert pipeline.banner(now=105.0) is None

        assert pipeline.acknowledge_escalation() is notification
        assert pipeline.pending_escalation is None

    def test_store_capacity_from_config(self):
        config = Config(
            alerts=AlertsConfig(max_notifications=1),
            assistant=AssistantConfig(enabled=False),
        )
        pipeline = MonitoringPipeline(config=config)
        pipeline.process_heart_rate(HeartRateSample(timestamp=0.0, bpm=130))
        pipeline.submit_manual_vitals(glucose="300", now=0.0)

        assert len(pipeline.notifications) == 1
        assert pipeline.notifications[0].category == AlertCategory.GLUCOSE

    def test_pending_escalation_waits_for_lock(self, pipeline):
        pipeline.process_heart_rate(HeartRateSample(timestamp=0.0, bpm=130))
        results = []

        with pipeline._lock:
            reader = threading.Thread(target=lambda: results.append(pipeline.pending_escalation))
            reader.start()
            reader.join(timeout=0.1)
            assert reader.is_alive()

        reader.join(timeout=1.0)
        assert results[0].category == AlertCategory.HEART_RATE


def mock_completion(mock_post, content: str) -> None:
    mock_post.return_value.status_code = 200
    mock_post.return_value.json.return_value = {"choices": [{"message": {"content": content}}]}


class TestAssistantFlow:
    @pytest.fixture
    def assistant_pipeline(self):
        pipeline = MonitoringPipeline(Config())
        yield pipeline
        pipeline.shutdown()

    def test_disabled_assistant_raises(self, pipeline):
        with pytest.raises(AssistantUnavailableError):
            pipeline.assess_risk()
        with pytest.raises(AssistantUnavailableError):
            pipeline.chat("hello")

    def test_assess_risk_uses_snapshot_copy(self, assistant_pipeline):
        assistant_pipeline.process_heart_rate(HeartRateSample(timestamp=0.0, bpm=72))
        snapshots = []
        original = assistant_pipeline.risk_assessor.assess

        def recording_assess(snapshot):
            snapshots.append(snapshot)
            return original(snapshot)

        assistant_pipeline.risk_assessor.assess = recording_assess

        with patch("requests.post") as mock_post:
            mock_completion(mock_post, "Stable.\nRISK:LOW")
            assessment = assistant_pipeline.assess_risk().result(timeout=5)

        assert assessment.label == RiskLabel.LOW
        assert snapshots[0] == assistant_pipeline.snapshot
        assert snapshots[0] is not assistant_pipeline.snapshot

    def test_chat(self, assistant_pipeline):
        assistant_pipeline.process_heart_rate(HeartRateSample(timestamp=0.0, bpm=72))

        with patch("requests.post") as mock_post:
            mock_completion(mock_post, "Your heart rate is normal.")
            reply = assistant_pipeline.chat("Should I rest today?")

        assert reply == "Your heart rate is normal."
        prompt = mock_post.call_args.kwargs["json"]["messages"][0]["content"]
        assert "heart rate 72 BPM" in prompt
        assert "User: Should I rest today?" in prompt
