"""Main FastAPI application."""

import asyncio
import contextlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from familiar import __version__
from familiar.api.endpoints import router
from familiar.config import Settings, get_settings
from familiar.factory import EngineFactory, build_context
from familiar.inference import create_engine
from familiar.services.orchestrator import Orchestrator
from familiar.utils.logging import LogConfig, get_logger, setup_logging

logger = get_logger(__name__)


def create_app(settings: Settings | None = None, engine_factory: EngineFactory | None = None) -> FastAPI:
    """Create the application.

    Args:
        settings: Settings to use instead of the environment
        engine_factory: Engine builder to use instead of the configured provider

    Returns:
        FastAPI application whose lifespan runs the orchestrator
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        resolved = settings or get_settings()
        context = await build_context(resolved, engine_factory=engine_factory or create_engine)
        orchestrator = Orchestrator(context)
        await orchestrator.start()

        app.state.context = context
        app.state.orchestrator = orchestrator
        task = asyncio.create_task(orchestrator.run())
        logger.info(f"Familiar v{__version__} started")

        yield

        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("Shutting down...")

    app = FastAPI(
        title="Familiar",
        description="A local, tool-using conversational agent.",
        version=__version__,
        lifespan=lifespan,
        tags_metadata=[
            {
                "name": "Agent",
                "description": "Queue input, reset the conversation and inspect agent state.",
            },
            {
                "name": "Health",
                "description": "Service health monitoring and status checks.",
            },
        ],
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = get_settings()
    setup_logging(LogConfig(level=config.log_level))
    uvicorn.run("familiar.main:app", host=config.api_host, port=config.api_port, log_level="info")
