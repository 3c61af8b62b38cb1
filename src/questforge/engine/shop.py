"""Shop purchases, equipping and consumable use."""

from __future__ import annotations

from questforge.core.constants import DEFAULT_ITEM_ICON
from questforge.core.exceptions import BusinessRuleViolation, NotFoundError, ValidationError
from questforge.core.logging import get_logger
from questforge.models.character import (
    Character,
    Equipment,
    InventoryEntry,
    add_to_inventory,
    remove_from_inventory,
)
from questforge.models.enums import SLOT_ITEM_TYPES, EquipmentSlot, ItemType
from questforge.models.results import CharacterActionResult, PurchaseResult
from questforge.models.world import Item
from questforge.storage.repository import Repository


logger = get_logger(__name__)


class ShopAdjudicator:
    """Validates and applies item transactions for characters."""

    def __init__(self, repository: Repository) -> None:
        self._repository = repository

    def shop_items(self, location_id: str) -> list[Item]:
        """Items sold at ``location_id``. Empty means the location has no shop list."""
        return self._repository.get_shop_items(location_id)

    def buy(self, character_id: str, item_id: str) -> PurchaseResult:
        """Buy one ``item_id`` and auto-equip it when it is an upgrade.

        Raises:
            NotFoundError: If the character or item does not exist.
            BusinessRuleViolation: If the item is not sold at the character's
                location or the character cannot afford it.
        """
        character = self._require_character(character_id)
        item = self._require_item(item_id)

        stock = self.shop_items(character.current_location_id)
        if stock and all(sold.id != item.id for sold in stock):
            raise BusinessRuleViolation(
                "Item not sold here",
                rule="item_not_sold_here",
                details={"item_id": item_id, "location_id": character.current_location_id},
            )
        if character.gold < item.sell_value:
            raise BusinessRuleViolation(
                "Not enough gold",
                rule="insufficient_gold",
                details={"gold": character.gold, "price": item.sell_value},
            )

        inventory = add_to_inventory(
            character.inventory,
            InventoryEntry(
                item_id=item.id,
                quantity=1,
                name=item.name,
                type=item.type.value,
                icon=item.icon or DEFAULT_ITEM_ICON,
            ),
        )
        equipment, upgrade_message = self._auto_equip(character.equipment, item)

        updated = self._repository.update_character(
            character_id,
            {
                "gold": character.gold - item.sell_value,
                "inventory": inventory,
                "equipment": equipment,
            },
        )
        logger.info(
            "Item purchased",
            character_id=character_id,
            item_id=item.id,
            price=item.sell_value,
            auto_equipped=bool(upgrade_message),
        )
        return PurchaseResult(character=updated, purchased=item.id, upgrade_message=upgrade_message)

    def _auto_equip(self, equipment: Equipment, item: Item) -> tuple[Equipment, str]:
        if item.type is ItemType.WEAPON:
            slot, stat, label, unit = EquipmentSlot.WEAPON, "attack", "weapon", "ATK"
        elif item.type is ItemType.ARMOR:
            slot, stat, label, unit = EquipmentSlot.ARMOR, "defense", "shield", "DEF"
        else:
            return equipment, ""

        current_id = equipment.get(slot)
        current = self._repository.get_item(current_id) if current_id else None
        current_value = getattr(current.stats, stat) if current else 0
        new_value = getattr(item.stats, stat)
        if current_id is None or new_value > current_value:
            return equipment.with_item(slot, item.id), f" (auto-equipped new {label} +{new_value} {unit})"
        return equipment, ""

    def equip(self, character_id: str, item_id: str, slot: str) -> CharacterActionResult:
        """Put an owned item into a matching equipment slot.

        Raises:
            ValidationError: If the slot is unknown or does not accept the item type.
            NotFoundError: If the character or item does not exist.
            BusinessRuleViolation: If the item is not in the inventory.
        """
        try:
            equipment_slot = EquipmentSlot(slot)
        except ValueError as exc:
            raise ValidationError("Invalid slot", field_name="slot", invalid_value=slot) from exc

        character = self._require_character(character_id)
        item = self._require_item(item_id)

        if item.type is not SLOT_ITEM_TYPES[equipment_slot]:
            raise ValidationError(
                f"Cannot equip {item.type} into {equipment_slot}",
                field_name="slot",
                invalid_value=slot,
            )
        if character.inventory_entry(item_id) is None:
            raise BusinessRuleViolation(
                "Item not in inventory", rule="item_not_owned", details={"item_id": item_id}
            )

        updated = self._repository.update_character(
            character_id,
            {"equipment": character.equipment.with_item(equipment_slot, item_id)},
        )
        logger.info("Item equipped", character_id=character_id, item_id=item_id, slot=slot)
        return CharacterActionResult(character=updated, message=f"Equipped {item.name}")

    def use_item(self, character_id: str, item_id: str) -> CharacterActionResult:
        """Consume one ``item_id`` and apply its health effect.

        Raises:
            NotFoundError: If the character or item does not exist.
            BusinessRuleViolation: If the item is not owned or not consumable.
        """
        character = self._require_character(character_id)
        item = self._require_item(item_id)

        entry = character.inventory_entry(item_id)
        if entry is None or entry.quantity <= 0:
            raise BusinessRuleViolation(
                "Item not in inventory", rule="item_not_owned", details={"item_id": item_id}
            )
        if not item.consumable:
            raise BusinessRuleViolation(
                "Item is not consumable", rule="item_not_consumable", details={"item_id": item_id}
            )

        updates: dict[str, object] = {
            "inventory": remove_from_inventory(character.inventory, item_id),
        }
        if item.stats.health:
            updates["health"] = min(character.max_health, character.health + item.stats.health)

        updated = self._repository.update_character(character_id, updates)
        logger.info("Item used", character_id=character_id, item_id=item_id)
        return CharacterActionResult(character=updated, message=f"Used {item.name}")

    def _require_character(self, character_id: str) -> Character:
        character = self._repository.get_character(character_id)
        if character is None:
            raise NotFoundError(
                "Character not found", entity_type="character", entity_id=character_id
            )
        return character

    def _require_item(self, item_id: str) -> Item:
        item = self._repository.get_item(item_id)
        if item is None:
            raise NotFoundError("Item not found", entity_type="item", entity_id=item_id)
        return item


__all__ = [
    "ShopAdjudicator",
]
