"""
Replay a recorded accelerometer trace through the fall detector

Usage: python -m scripts.replay_trace <trace.csv>
   or: vitalguard-replay <trace.csv>  (after install)
"""

import argparse
import logging

from vitalguard.capture.replay import ReplaySource, load_acceleration_trace
from vitalguard.capture.samples import SensorUnavailableError
from vitalguard.core.config import Config, load_config
from vitalguard.core.pipeline import MonitoringPipeline

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def replay(trace_path: str, config: Config, realtime: bool = False) -> int:
    """Replay one trace and print the resulting notifications.

    Returns:
        process exit code
    """
    try:
        samples = load_acceleration_trace(trace_path)
    except SensorUnavailableError as e:
        logger.error(str(e))
        return 1

    config.assistant.enabled = False
    pipeline = MonitoringPipeline(config=config)
    if not pipeline.start_monitoring(ReplaySource(samples, realtime=realtime)):
        return 1
    pipeline.stop_monitoring()

    print(f"\nSamples replayed: {len(samples)}")
    print(f"Fall events:      {len(pipeline.fall_events)}")
    for event in pipeline.fall_events:
        print(
            f"  {event.event_id}: t={event.detected_at:.3f}s "
            f"impact={event.impact_magnitude:.2f}g after {event.elapsed:.2f}s"
        )
    print(f"Notifications:    {len(pipeline.notifications)}")
    for notification in pipeline.notifications:
        print(f"  [{notification.severity.label}] {notification.title}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Replay an accelerometer trace (t,x,y,z CSV)")
    parser.add_argument("trace", help="trace file path")
    parser.add_argument("--config", help="YAML config path (defaults built in)")
    parser.add_argument("--realtime", action="store_true", help="sleep between samples")
    args = parser.parse_args()

    config = load_config(args.config) if args.config else Config()
    return replay(args.trace, config, realtime=args.realtime)


if __name__ == "__main__":
    exit(main())
