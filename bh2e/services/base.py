"""Abstract capability interfaces consumed by the sheet trackers."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from bh2e.core.sheet.models import Actor, Item, RollResult, Speaker
from bh2e.core.sheet.patches import ItemPatch


class ItemStore(ABC):
    """Actor/item persistence.

    The store is the sole arbiter of durability. A single update_partial
    call must be atomic per item.
    """

    @abstractmethod
    def get_actor(self, actor_id: str) -> Optional[Actor]:
        """Return the actor with its owned items, or None."""
        ...

    @abstractmethod
    def find_owner(self, item_id: str) -> Optional[Actor]:
        """Return the actor owning the item, or None."""
        ...

    @abstractmethod
    def update_partial(self, actor: Actor, patch: ItemPatch) -> None:
        """Write only the fields set on the patch.

        Raises:
            NotFound: the actor does not own patch.item_id.
            StoreError: the write failed.
        """
        ...

    @abstractmethod
    def create_actor(self, actor: Actor) -> Actor:
        """Persist a new actor (without items)."""
        ...

    @abstractmethod
    def add_item(self, actor: Actor, item: Item) -> Item:
        """Persist a new item owned by the actor."""
        ...

    @abstractmethod
    def delete_item(self, actor: Actor, item_id: str) -> None:
        """Delete an owned item. Raises NotFound if not owned."""
        ...


class DiceRoller(ABC):
    """Dice rolling subsystem."""

    @abstractmethod
    def roll(self, formula: str) -> RollResult:
        """Roll the formula.

        Args:
            formula: A dice formula such as "1d20", "2d20kl+1d4" or "(1d6+1d4)*2".

        Returns:
            RollResult with the total and every individual die in rolling order.
        """
        ...


class MessageSink(ABC):
    """Shared chat log."""

    @abstractmethod
    def post(self, text: str, speaker: Speaker) -> Any:
        """Post a message on behalf of the speaker."""
        ...
