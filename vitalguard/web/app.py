"""
VitalGuard presentation API

FastAPI entry point. The app reads and mutates one explicitly constructed
MonitoringPipeline; there is no module-level instance.
"""

import logging

from fastapi import FastAPI

from vitalguard.core.pipeline import MonitoringPipeline
from vitalguard.web.routes.api import router as api_router

logger = logging.getLogger(__name__)


def create_app(pipeline: MonitoringPipeline | None = None) -> FastAPI:
    """Build the FastAPI application around a pipeline.

    Args:
        pipeline: pipeline to expose; a default-configured one is created when omitted

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="VitalGuard",
        description="Fall and vitals alert monitor",
        version="0.1.0",
    )
    app.state.pipeline = pipeline or MonitoringPipeline()
    app.include_router(api_router)

    logger.info("VitalGuard API application created")

    return app


def main() -> None:
    """Start the web server"""
    import uvicorn

    from vitalguard.core.config import load_config

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = create_app(MonitoringPipeline(load_config()))

    logger.info("Starting web server: http://localhost:8000")
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")


if __name__ == "__main__":
    main()
