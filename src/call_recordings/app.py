"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from call_recordings.config import load_config
from call_recordings.dependencies import Container, build_container
from call_recordings.routes import recordings_router


def create_app(container: Container | None = None) -> FastAPI:
    """
    Builds the application around a pipeline container.

    Without an explicit container one is built from the environment when
    the application starts.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.container = container or build_container(load_config())
        await app.state.container.startup()
        try:
            yield
        finally:
            await app.state.container.shutdown()

    app = FastAPI(title="Cold Call Recording Service", lifespan=lifespan)
    app.include_router(recordings_router)
    return app
