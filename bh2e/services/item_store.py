"""SQL 아이템 저장소 - ItemStore 구현 (SQLAlchemy)

Core 모델 ↔ ORM 변환, 부분 갱신, EventBus 통지.
"""

import copy
import uuid
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bh2e.core.event_bus import EventBus, SheetEvent
from bh2e.core.event_types import EventTypes
from bh2e.core.logging import get_logger
from bh2e.core.sheet.errors import NotFound, StoreError, UnknownVariant
from bh2e.core.sheet.models import (
    Actor,
    ActorType,
    ArmourValue,
    DamageDice,
    DieSize,
    Item,
    ItemType,
    UsageDie,
)
from bh2e.core.sheet.patches import ItemPatch
from bh2e.db.models import ActorModel, ItemModel
from bh2e.services.base import ItemStore

logger = get_logger(__name__)

SOURCE = "item_store"


def _merge(target: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """중첩 dict 병합. update에 있는 잎 값만 덮어쓴다."""
    for key, value in update.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge(target[key], value)
        else:
            target[key] = value
    return target


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


class SqlItemStore(ItemStore):
    """액터/아이템 CRUD + 부분 갱신"""

    def __init__(self, db: Session, event_bus: EventBus):
        self._db = db
        self._bus = event_bus

    # === 조회 ===

    def get_actor(self, actor_id: str) -> Optional[Actor]:
        orm = (
            self._db.query(ActorModel).filter(ActorModel.actor_id == actor_id).first()
        )
        if orm is None:
            return None
        return self._actor_to_core(orm)

    def find_owner(self, item_id: str) -> Optional[Actor]:
        row = self._db.query(ItemModel).filter(ItemModel.item_id == item_id).first()
        if row is None:
            return None
        return self.get_actor(row.actor_id)

    # === 갱신 ===

    def update_partial(self, actor: Actor, patch: ItemPatch) -> None:
        orm = self._get_owned(actor, patch.item_id)
        update = patch.to_update()
        if not update:
            return

        try:
            # JSON 컬럼은 변경 추적이 없으므로 새 dict로 교체
            orm.data = _merge(copy.deepcopy(orm.data or {}), update)
            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            raise StoreError(f"Failed to update item {patch.item_id}: {e}") from e

        self._bus.emit(
            SheetEvent(
                event_type=EventTypes.ITEM_UPDATED,
                source=SOURCE,
                actor_id=actor.actor_id,
                item_id=patch.item_id,
                fields=tuple(sorted(update)),
            )
        )
        logger.debug("Updated item %s: %s", patch.item_id, update)

    def create_actor(self, actor: Actor) -> Actor:
        orm = ActorModel(
            actor_id=actor.actor_id or str(uuid.uuid4()),
            name=actor.name,
            actor_type=actor.actor_type.value,
            attributes=dict(actor.attributes),
            damage_dice={
                "armed": actor.damage_dice.armed,
                "unarmed": actor.damage_dice.unarmed,
            },
        )
        self._commit_new(orm)

        self._bus.emit(
            SheetEvent(
                event_type=EventTypes.ACTOR_CREATED,
                source=SOURCE,
                actor_id=orm.actor_id,
            )
        )
        return self._actor_to_core(orm)

    def add_item(self, actor: Actor, item: Item) -> Item:
        position = (
            self._db.query(ItemModel).filter(ItemModel.actor_id == actor.actor_id).count()
        )
        orm = self._item_to_orm(item, actor.actor_id, position)
        self._commit_new(orm)

        self._bus.emit(
            SheetEvent(
                event_type=EventTypes.ITEM_CREATED,
                source=SOURCE,
                actor_id=actor.actor_id,
                item_id=orm.item_id,
            )
        )
        return self._item_to_core(orm)

    def delete_item(self, actor: Actor, item_id: str) -> None:
        orm = self._get_owned(actor, item_id)
        try:
            self._db.delete(orm)
            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            raise StoreError(f"Failed to delete item {item_id}: {e}") from e

        self._bus.emit(
            SheetEvent(
                event_type=EventTypes.ITEM_DELETED,
                source=SOURCE,
                actor_id=actor.actor_id,
                item_id=item_id,
                dedup_key=item_id,
            )
        )
        logger.info("Deleted item %s from actor %s", item_id, actor.actor_id)

    # === 헬퍼 ===

    def _get_owned(self, actor: Actor, item_id: str) -> ItemModel:
        orm = (
            self._db.query(ItemModel)
            .filter(
                ItemModel.item_id == item_id,
                ItemModel.actor_id == actor.actor_id,
            )
            .first()
        )
        if orm is None:
            raise NotFound(
                f"The actor '{actor.name}' ({actor.actor_id}) does not appear "
                f"to own item id {item_id}"
            )
        return orm

    def _commit_new(self, orm: Any) -> None:
        try:
            self._db.add(orm)
            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            raise StoreError(f"Failed to create {type(orm).__name__}: {e}") from e

    # === ORM ↔ Core 변환 ===

    def _actor_to_core(self, orm: ActorModel) -> Actor:
        """ORM → Core. 해석할 수 없는 아이템은 경고 후 제외."""
        items = []
        for row in orm.items:
            try:
                items.append(self._item_to_core(row))
            except UnknownVariant as e:
                logger.warning("Ignoring item %s: %s", row.item_id, e)

        damage = orm.damage_dice or {}
        return Actor(
            actor_id=orm.actor_id,
            name=orm.name,
            actor_type=ActorType(orm.actor_type),
            attributes=dict(orm.attributes or {}),
            damage_dice=DamageDice(
                armed=damage.get("armed", "d6"),
                unarmed=damage.get("unarmed", "d4"),
            ),
            items=items,
        )

    def _item_to_core(self, orm: ItemModel) -> Item:
        """ORM → Core"""
        try:
            item_type = ItemType(orm.item_type)
        except ValueError:
            raise UnknownVariant(f"Unknown item type '{orm.item_type}'") from None

        data = orm.data or {}

        usage_die = None
        raw_usage = data.get("usage_die")
        if raw_usage:
            try:
                usage_die = UsageDie(
                    maximum=DieSize(raw_usage.get("maximum", "none")),
                    current=DieSize(raw_usage.get("current", "none")),
                )
            except ValueError:
                raise UnknownVariant(f"Unknown usage die {raw_usage}") from None

        armour_value = None
        raw_armour = data.get("armour_value")
        if raw_armour is not None:
            try:
                armour_value = ArmourValue(
                    total=int(raw_armour.get("total", 0)),
                    broken=int(raw_armour.get("broken", 0)),
                )
            except (AttributeError, TypeError, ValueError):
                raise UnknownVariant(f"Unreadable armour value {raw_armour!r}") from None

        try:
            quantity = _optional_int(data.get("quantity"))
            level = _optional_int(data.get("level"))
        except (TypeError, ValueError):
            raise UnknownVariant(
                f"Unreadable quantity/level on item {orm.item_id}: "
                f"{data.get('quantity')!r}, {data.get('level')!r}"
            ) from None

        return Item(
            item_id=orm.item_id,
            actor_id=orm.actor_id,
            item_type=item_type,
            name=orm.name,
            usage_die=usage_die,
            armour_value=armour_value,
            quantity=quantity,
            level=level,
            magic_kind=data.get("kind"),
            description=orm.description or "",
            weapon_kind=data.get("weapon_kind"),
            weapon_size=data.get("size"),
        )

    def _item_to_orm(self, core: Item, actor_id: str, position: int) -> ItemModel:
        """Core → ORM"""
        data: dict[str, Any] = {}
        if core.usage_die is not None:
            data["usage_die"] = {
                "maximum": core.usage_die.maximum.value,
                "current": core.usage_die.current.value,
            }
        if core.armour_value is not None:
            data["armour_value"] = {
                "total": core.armour_value.total,
                "broken": core.armour_value.broken,
            }
        if core.quantity is not None:
            data["quantity"] = core.quantity
        if core.level is not None:
            data["level"] = core.level
        if core.magic_kind is not None:
            data["kind"] = core.magic_kind
        if core.weapon_kind is not None:
            data["weapon_kind"] = core.weapon_kind
        if core.weapon_size is not None:
            data["size"] = core.weapon_size

        return ItemModel(
            item_id=core.item_id or str(uuid.uuid4()),
            actor_id=actor_id,
            item_type=core.item_type.value,
            name=core.name,
            description=core.description,
            data=data,
            position=position,
        )
