"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from bh2e.api.health import router as health_router
from bh2e.api.sheet import router as sheet_router
from bh2e.config import settings
from bh2e.core.event_bus import ANY_EVENT, EventBus, SheetEvent
from bh2e.core.logging import get_logger, setup_logging
from bh2e.db.database import SessionLocal, engine as db_engine
from bh2e.db.models import Base
from bh2e.services.chat_log import ChatLog
from bh2e.services.dice import RandomDiceRoller
from bh2e.services.item_store import SqlItemStore
from bh2e.services.sheet_service import SheetService

setup_logging(settings.LOG_LEVEL, debug=settings.DEBUG)
logger = get_logger(__name__)


def _log_event(event: SheetEvent) -> None:
    logger.debug(
        "%s from %s (actor=%s item=%s fields=%s)",
        event.event_type,
        event.source,
        event.actor_id,
        event.item_id,
        ",".join(event.fields) or "-",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=db_engine)
    logger.info("Database tables created.")

    event_bus = EventBus()
    event_bus.subscribe(ANY_EVENT, _log_event)
    db_session = SessionLocal()

    item_store = SqlItemStore(db_session, event_bus)
    chat_log = ChatLog(db_session, event_bus)
    roller = RandomDiceRoller(seed=settings.DICE_SEED)
    if settings.DICE_SEED is not None:
        logger.info("Dice seeded with %d", settings.DICE_SEED)

    app.state.event_bus = event_bus
    app.state.item_store = item_store
    app.state.chat_log = chat_log
    app.state.sheet_service = SheetService(item_store, roller, chat_log, event_bus)
    logger.info("SheetService initialized.")

    yield

    logger.info("Shutting down...")
    db_session.close()


app = FastAPI(title="Black Hack 2e Sheets", lifespan=lifespan)

app.include_router(health_router)
app.include_router(sheet_router)
