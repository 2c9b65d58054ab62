"""SQLAlchemy declarative base and ORM models for actors, items and chat."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.types import JSON


class Base(DeclarativeBase):
    """Base class for all database models."""


class ActorModel(Base):
    """ORM model for actors (characters and creatures)."""

    __tablename__ = "actors"

    actor_id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    actor_type: Mapped[str] = mapped_column(String, nullable=False, default="character")
    attributes: Mapped[dict] = mapped_column(JSON, default=dict)
    # {"armed": "d6", "unarmed": "d4"}
    damage_dice: Mapped[dict] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    items: Mapped[list["ItemModel"]] = relationship(
        "ItemModel",
        back_populates="actor",
        cascade="all, delete-orphan",
        order_by="ItemModel.position",
    )


class ItemModel(Base):
    """ORM model for owned items.

    Type-specific fields live in ``data``::

        {"usage_die": {"maximum": "d6", "current": "none"},
         "quantity": 3,
         "armour_value": {"total": 3, "broken": 0},
         "level": 1, "kind": "spell", "weapon_kind": "armed", "size": "large"}
    """

    __tablename__ = "items"

    item_id: Mapped[str] = mapped_column(String, primary_key=True)
    actor_id: Mapped[str] = mapped_column(
        String, ForeignKey("actors.actor_id", ondelete="CASCADE"), nullable=False
    )
    item_type: Mapped[str] = mapped_column(String, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    data: Mapped[dict] = mapped_column(JSON, default=dict)
    position: Mapped[int] = mapped_column(Integer, default=0)

    actor: Mapped["ActorModel"] = relationship("ActorModel", back_populates="items")

    __table_args__ = (Index("idx_item_actor", "actor_id"),)


class ChatMessageModel(Base):
    """ORM model for the shared chat log."""

    __tablename__ = "chat_messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    actor_id: Mapped[str | None] = mapped_column(String, nullable=True)
    alias: Mapped[str] = mapped_column(String, nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
