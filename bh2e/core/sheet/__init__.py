"""시트 엔진 Core - 순수 Python, DB 무관"""

from .errors import (
    InvalidLevel,
    NoUsageDie,
    NotEligible,
    NotFound,
    SheetError,
    StoreError,
    UnknownVariant,
)
from .models import (
    Actor,
    ActorType,
    ArmourValue,
    DamageDice,
    DieSize,
    Item,
    ItemType,
    MagicKind,
    RollKind,
    RollResult,
    Speaker,
    UsageDie,
    WeaponKind,
    WeaponSize,
)
from .patches import ItemPatch

__all__ = [
    "Actor",
    "ActorType",
    "ArmourValue",
    "DamageDice",
    "DieSize",
    "InvalidLevel",
    "Item",
    "ItemPatch",
    "ItemType",
    "MagicKind",
    "NoUsageDie",
    "NotEligible",
    "NotFound",
    "RollKind",
    "RollResult",
    "SheetError",
    "Speaker",
    "StoreError",
    "UnknownVariant",
    "UsageDie",
    "WeaponKind",
    "WeaponSize",
]
