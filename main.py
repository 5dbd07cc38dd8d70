import logging
from contextlib import asynccontextmanager
from functools import partial

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cdstock.application.use_cases.chat import send_outgoing
from cdstock.config import get_settings
from cdstock.infrastructure.database import SessionLocal, engine, initialize_database
from cdstock.infrastructure.offline_queue import get_offline_queue
from cdstock.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


def flush_offline_queue() -> None:
    """Send chat messages that were queued while the store was unreachable."""

    queue = get_offline_queue()
    if queue is None:
        return

    session = SessionLocal()
    try:
        result = queue.flush(partial(send_outgoing, session))
    finally:
        session.close()
    if result.failed:
        logger.warning("%s queued chat messages remain unsent", len(result.failed))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema and flush the offline queue on start-up; release the pool on shutdown."""

    initialize_database()
    flush_offline_queue()
    yield
    engine.dispose()


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title="CD Stock", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
