import argparse
import logging
import signal
import sys
import time

from vitalguard.capture.replay import ReplaySource, load_acceleration_trace
from vitalguard.capture.samples import SensorUnavailableError
from vitalguard.core.config import load_config
from vitalguard.core.pipeline import MonitoringPipeline
from vitalguard.lifecycle.daily_scheduler import DailySummaryScheduler


def main():
    parser = argparse.ArgumentParser(description="VitalGuard fall and vitals monitor")
    parser.add_argument("--config", default="config/settings.yaml", help="YAML config path")
    parser.add_argument("--trace", help="CSV accelerometer trace (t,x,y,z) to replay")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = load_config(args.config)
    pipeline = MonitoringPipeline(config=config)

    scheduler = DailySummaryScheduler(config, pipeline)
    scheduler.start()

    def signal_handler(_signum: int, _frame: object) -> None:
        logging.info("Received termination signal, shutting down...")
        scheduler.stop()
        pipeline.shutdown()
        sys.exit(0)

    _ = signal.signal(signal.SIGINT, signal_handler)
    _ = signal.signal(signal.SIGTERM, signal_handler)

    try:
        if args.trace:
            try:
                samples = load_acceleration_trace(args.trace)
            except SensorUnavailableError as e:
                logging.warning(f"{e}; monitoring not started")
            else:
                pipeline.start_monitoring(ReplaySource(samples, start_at=time.time()))

        import uvicorn

        from vitalguard.web.app import create_app

        uvicorn.run(create_app(pipeline), host=args.host, port=args.port, log_level="info")
    finally:
        scheduler.stop()
        pipeline.shutdown()


if __name__ == "__main__":
    main()
