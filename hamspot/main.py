"""hamspot - relay POTA and HamAlert spots to a Discord channel."""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from hamspot.collectors.hamalert import create_router
from hamspot.config import Settings, settings
from hamspot.engine import SpotEngine
from hamspot.utils.logging import setup_logging


def create_app(engine: SpotEngine, run_engine: bool = True) -> FastAPI:
    """Build the HTTP app; with ``run_engine`` the lifespan starts and stops the engine."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        if run_engine:
            await engine.start()
        yield
        if run_engine:
            await engine.stop()

    app = FastAPI(
        title="hamspot",
        description="Amateur radio spot relay",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.include_router(create_router(engine.receiver, engine.settings.server.webhook_path))

    @app.get("/api/status")
    async def get_status():
        """Get system status."""
        return await engine.status()

    return app


def check_settings(config: Settings) -> bool:
    missing = config.missing_required()
    for name in missing:
        logger.critical(f"Environment variable {name} is not set. Exiting.")
    invalid = config.invalid_options()
    for problem in invalid:
        logger.critical(f"Invalid configuration: {problem}. Exiting.")
    return not missing and not invalid


def main():
    """Run the server."""
    import uvicorn

    setup_logging(settings.log_level)
    if not check_settings(settings):
        sys.exit(1)

    host, port = settings.server.bind
    app = create_app(SpotEngine(settings))

    logger.info("Starting hamspot...")
    logger.info(f"HamAlert webhook at http://{host}:{port}{settings.server.webhook_path}")
    logger.info(f"POTA poll interval: {settings.pota.poll_interval}s")

    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
