"""Tests for purchases, equipping and consumables."""

from __future__ import annotations

from typing import Any

import pytest

from questforge.core.exceptions import BusinessRuleViolation, NotFoundError, ValidationError


class TestBuy:
    """Tests for buying items."""

    def test_not_enough_gold(self, service: Any, hero: Any, repository: Any) -> None:
        """Test an unaffordable item leaves gold and inventory unchanged."""
        with pytest.raises(BusinessRuleViolation) as exc_info:
            service.buy_item(hero.id, "steel_sword")

        assert exc_info.value.message == "Not enough gold"
        stored = repository.get_character(hero.id)
        assert stored.gold == 50
        assert stored.inventory == hero.inventory

    def test_buy_upgrade_auto_equips(self, service: Any, hero: Any) -> None:
        """Test a stronger weapon is equipped on purchase."""
        result = service.buy_item(hero.id, "sword")

        assert result.purchased == "sword"
        assert result.upgrade_message == " (auto-equipped new weapon +5 ATK)"
        assert result.character.gold == 0
        assert result.character.equipment.weapon == "sword"
        assert result.character.inventory_entry("sword").quantity == 1

    def test_buy_armor_upgrade(self, service: Any, hero: Any) -> None:
        """Test stronger armor is equipped on purchase."""
        service.update_character(hero.id, {"gold": 100})

        result = service.buy_item(hero.id, "iron_shield")

        assert result.upgrade_message == " (auto-equipped new shield +5 DEF)"
        assert result.character.equipment.armor == "iron_shield"

    def test_equal_item_not_equipped(self, service: Any, hero: Any) -> None:
        """Test an item that is not strictly better stacks without equipping."""
        result = service.buy_item(hero.id, "wooden_sword")

        assert result.upgrade_message == ""
        assert result.character.inventory_entry("wooden_sword").quantity == 2
        assert result.character.gold == 40

    def test_empty_slot_always_filled(self, service: Any, hero: Any) -> None:
        """Test a weapon is equipped when none is held."""
        service.update_character(hero.id, {"equipment": {"armor": "shield"}})

        result = service.buy_item(hero.id, "wooden_sword")

        assert result.character.equipment.weapon == "wooden_sword"
        assert result.upgrade_message == " (auto-equipped new weapon +2 ATK)"

    def test_non_equipment_never_equipped(self, service: Any, hero: Any) -> None:
        """Test consumables are only stacked."""
        result = service.buy_item(hero.id, "health_potion")

        assert result.upgrade_message == ""
        assert result.character.inventory_entry("health_potion").quantity == 4
        assert result.character.equipment == hero.equipment

    def test_not_sold_here(self, service: Any, hero: Any) -> None:
        """Test shop lists restrict what a location sells."""
        service.move_character(hero.id, "village_shop")

        with pytest.raises(BusinessRuleViolation) as exc_info:
            service.buy_item(hero.id, "steel_shield")

        assert exc_info.value.rule == "item_not_sold_here"

    def test_new_stack_metadata(self, service: Any, hero: Any) -> None:
        """Test a new stack copies display data from the item."""
        service.move_character(hero.id, "village_shop")

        result = service.buy_item(hero.id, "leather_cap")

        entry = result.character.inventory_entry("leather_cap")
        assert entry.name == "Leather Cap"
        assert entry.type == "helmet"
        assert entry.icon

    def test_unknown_item(self, service: Any, hero: Any) -> None:
        """Test buying a missing item."""
        with pytest.raises(NotFoundError):
            service.buy_item(hero.id, "excalibur")


class TestEquip:
    """Tests for manual equipping."""

    def test_equip_owned_item(self, service: Any, hero: Any) -> None:
        """Test equipping into the matching slot keeps the inventory."""
        service.move_character(hero.id, "village_shop")
        service.buy_item(hero.id, "leather_boots")

        result = service.equip_item(hero.id, "leather_boots", "boots")

        assert result.character.equipment.boots == "leather_boots"
        assert result.message == "Equipped Leather Boots"
        assert result.character.inventory_entry("leather_boots").quantity == 1

    def test_type_mismatch(self, service: Any, hero: Any, repository: Any) -> None:
        """Test armor cannot go into the weapon slot."""
        with pytest.raises(ValidationError):
            service.equip_item(hero.id, "shield", "weapon")

        assert repository.get_character(hero.id).equipment == hero.equipment

    def test_invalid_slot(self, service: Any, hero: Any) -> None:
        """Test unknown slots are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            service.equip_item(hero.id, "shield", "ring")

        assert exc_info.value.details["field_name"] == "slot"

    def test_item_not_owned(self, service: Any, hero: Any) -> None:
        """Test equipping requires owning the item."""
        with pytest.raises(BusinessRuleViolation):
            service.equip_item(hero.id, "leather_cap", "helmet")


class TestUseItem:
    """Tests for consumables."""

    def test_potion_heals_and_decrements(self, service: Any, hero: Any) -> None:
        """Test a potion restores health and leaves one fewer."""
        service.update_character(hero.id, {"health": 50})

        result = service.use_item(hero.id, "health_potion")

        assert result.character.health == 80
        assert result.character.inventory_entry("health_potion").quantity == 2
        assert result.message == "Used Health Potion"

    def test_heal_clamped_to_max(self, service: Any, hero: Any) -> None:
        """Test healing never exceeds max health."""
        service.update_character(hero.id, {"health": 90})

        result = service.use_item(hero.id, "health_potion")

        assert result.character.health == 100

    def test_last_one_removes_stack(self, service: Any, hero: Any) -> None:
        """Test the stack disappears at zero."""
        for _ in range(3):
            result = service.use_item(hero.id, "health_potion")

        assert result.character.inventory_entry("health_potion") is None

    def test_not_consumable(self, service: Any, hero: Any) -> None:
        """Test equipment cannot be used."""
        with pytest.raises(BusinessRuleViolation) as exc_info:
            service.use_item(hero.id, "wooden_sword")

        assert exc_info.value.rule == "item_not_consumable"

    def test_not_in_inventory(self, service: Any, hero: Any) -> None:
        """Test using an item the character does not have."""
        with pytest.raises(BusinessRuleViolation) as exc_info:
            service.use_item(hero.id, "herb")

        assert exc_info.value.rule == "item_not_owned"


class TestShopItems:
    """Tests for shop listings."""

    def test_listing(self, service: Any) -> None:
        """Test a location's shop list in order."""
        items = [item.id for item in service.shop_items("forest")]

        assert items == ["sword", "steel_sword", "iron_shield", "health_potion", "herb"]

    def test_no_shop(self, service: Any) -> None:
        """Test a location without a shop list."""
        assert service.shop_items("village") == []
