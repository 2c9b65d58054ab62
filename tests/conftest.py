"""Shared test fixtures."""

from typing import Any, Callable

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bh2e.api.health import router as health_router
from bh2e.api.sheet import router as sheet_router
from bh2e.core.event_bus import EventBus
from bh2e.core.sheet.models import (
    Actor,
    ActorType,
    DamageDice,
    Item,
    RollResult,
    Speaker,
)
from bh2e.db.database import build_engine, get_db
from bh2e.db.models import Base
from bh2e.services.base import DiceRoller, MessageSink
from bh2e.services.chat_log import ChatLog
from bh2e.services.item_store import SqlItemStore
from bh2e.services.sheet_service import SheetService


class ScriptedDiceRoller(DiceRoller):
    """미리 넣어 둔 결과를 순서대로 돌려주는 굴림기"""

    def __init__(self) -> None:
        self.queue: list[tuple[int, tuple[int, ...]]] = []
        self.formulas: list[str] = []

    def push(self, total: int, raw: tuple[int, ...] | None = None) -> None:
        self.queue.append((total, tuple(raw) if raw else (total,)))

    def roll(self, formula: str) -> RollResult:
        self.formulas.append(formula)
        if not self.queue:
            raise AssertionError(f"No scripted roll left for {formula}")
        total, raw = self.queue.pop(0)
        return RollResult(formula=formula, total=total, raw_results=raw)


class RecordingSink(MessageSink):
    def __init__(self) -> None:
        self.messages: list[tuple[str, Speaker]] = []

    @property
    def texts(self) -> list[str]:
        return [text for text, _ in self.messages]

    def post(self, text: str, speaker: Speaker) -> None:
        self.messages.append((text, speaker))


@pytest.fixture()
def db_session() -> Session:
    """In-memory SQLite session shared by the store, chat log and API."""
    engine = build_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def store(db_session: Session, event_bus: EventBus) -> SqlItemStore:
    return SqlItemStore(db_session, event_bus)


@pytest.fixture()
def chat_log(db_session: Session, event_bus: EventBus) -> ChatLog:
    return ChatLog(db_session, event_bus)


@pytest.fixture()
def dice() -> ScriptedDiceRoller:
    return ScriptedDiceRoller()


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def service(
    store: SqlItemStore,
    dice: ScriptedDiceRoller,
    chat_log: ChatLog,
    event_bus: EventBus,
) -> SheetService:
    return SheetService(store, dice, chat_log, event_bus)


@pytest.fixture()
def character(store: SqlItemStore) -> Actor:
    """능력치 12/10, 무장 d8 / 맨손 d4 캐릭터"""
    return store.create_actor(
        Actor(
            actor_id="hero",
            name="Ayla",
            actor_type=ActorType.CHARACTER,
            attributes={"strength": 12, "dexterity": 10, "wisdom": 8},
            damage_dice=DamageDice(armed="d8", unarmed="d4"),
        )
    )


@pytest.fixture()
def add_item(store: SqlItemStore, character: Actor) -> Callable[..., Item]:
    """캐릭터에게 아이템을 추가하는 팩토리"""

    def _add(**kwargs: Any) -> Item:
        kwargs.setdefault("item_id", "")
        kwargs.setdefault("actor_id", character.actor_id)
        return store.add_item(character, Item(**kwargs))

    return _add


@pytest.fixture()
def client(
    db_session: Session,
    store: SqlItemStore,
    chat_log: ChatLog,
    service: SheetService,
    event_bus: EventBus,
) -> TestClient:
    """FastAPI TestClient wired to the in-memory services."""
    app = FastAPI()
    app.include_router(health_router)
    app.include_router(sheet_router)
    app.state.event_bus = event_bus
    app.state.item_store = store
    app.state.chat_log = chat_log
    app.state.sheet_service = service

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    return TestClient(app)
