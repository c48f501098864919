#!/usr/bin/env python3
"""
Start the VitalGuard API server

Usage:
    python scripts/run_web.py
    python scripts/run_web.py --port 8080
    python scripts/run_web.py --host 0.0.0.0 --port 8000
"""

import argparse

from vitalguard.core.config import load_config
from vitalguard.core.pipeline import MonitoringPipeline
from vitalguard.web.app import create_app


def main():
    parser = argparse.ArgumentParser(description="Start the VitalGuard API server")
    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="bind address (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="listen port (default: 8000)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/settings.yaml",
        help="YAML config path",
    )

    args = parser.parse_args()

    import logging
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = create_app(MonitoringPipeline(load_config(args.config)))

    print("\n" + "=" * 50)
    print("VitalGuard API")
    print("=" * 50)
    print(f"  Notifications: http://localhost:{args.port}/api/notifications")
    print(f"  API docs:      http://localhost:{args.port}/docs")
    print("=" * 50)
    print("Press Ctrl+C to stop\n")

    uvicorn.run(app, host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
