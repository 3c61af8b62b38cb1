"""Default world content: locations, items, shops, enemies and quests.

``seed_world`` writes the templates into any repository. It is idempotent:
templates are upserted by id, so reseeding an existing database only
refreshes their definitions.
"""

from __future__ import annotations

from questforge.core.logging import get_logger
from questforge.models.enums import ItemType, QuestType
from questforge.models.world import (
    Enemy,
    Item,
    ItemStats,
    Location,
    Quest,
    QuestReward,
    RewardItem,
)
from questforge.storage.repository import Repository

logger = get_logger(__name__)


LOCATIONS: tuple[Location, ...] = (
    Location(
        id="village",
        name="Village Center",
        description="A peaceful village where adventurers gather.",
        level_recommendation=1,
        x=32,
        y=32,
        icon="\N{HOUSE BUILDINGS}",
    ),
    Location(
        id="village_shop",
        name="Village Shop",
        description="Basic weapons, armor and potions for new adventurers.",
        level_recommendation=1,
        x=160,
        y=40,
        icon="\N{SHOPPING TROLLEY}",
    ),
    Location(
        id="training_grounds",
        name="Training Grounds",
        description="Practice your skills against a dummy that never hits back.",
        level_recommendation=1,
        x=32,
        y=176,
        icon="\N{CROSSED SWORDS}",
    ),
    Location(
        id="forest",
        name="Dark Forest",
        description="A mysterious forest filled with dangerous creatures.",
        level_recommendation=5,
        x=240,
        y=200,
        icon="\N{EVERGREEN TREE}",
    ),
    Location(
        id="ruins",
        name="Ancient Ruins",
        description="Crumbling ruins of an ancient civilization.",
        level_recommendation=15,
        x=400,
        y=120,
        icon="\N{CLASSICAL BUILDING}",
    ),
)

ITEMS: tuple[Item, ...] = (
    Item(
        id="wooden_sword",
        name="Wooden Sword",
        type=ItemType.WEAPON,
        icon="\N{DAGGER KNIFE}",
        description="A practice sword carved from oak.",
        stats=ItemStats(attack=2),
        sell_value=10,
    ),
    Item(
        id="sword",
        name="Iron Sword",
        type=ItemType.WEAPON,
        icon="\N{CROSSED SWORDS}",
        description="A sturdy iron blade.",
        stats=ItemStats(attack=5),
        sell_value=50,
    ),
    Item(
        id="steel_sword",
        name="Steel Sword",
        type=ItemType.WEAPON,
        icon="\N{CROSSED SWORDS}",
        description="A well-balanced steel blade.",
        stats=ItemStats(attack=9),
        sell_value=120,
    ),
    Item(
        id="shield",
        name="Wooden Shield",
        type=ItemType.ARMOR,
        icon="\N{SHIELD}",
        description="A simple wooden shield.",
        stats=ItemStats(defense=3),
        sell_value=30,
    ),
    Item(
        id="iron_shield",
        name="Iron Shield",
        type=ItemType.ARMOR,
        icon="\N{SHIELD}",
        description="An iron-banded shield.",
        stats=ItemStats(defense=5),
        sell_value=70,
    ),
    Item(
        id="steel_shield",
        name="Steel Shield",
        type=ItemType.ARMOR,
        icon="\N{SHIELD}",
        description="A heavy steel shield.",
        stats=ItemStats(defense=9),
        sell_value=140,
    ),
    Item(
        id="leather_cap",
        name="Leather Cap",
        type=ItemType.HELMET,
        icon="\N{BILLED CAP}",
        description="Boiled leather that turns a glancing blow.",
        stats=ItemStats(defense=1),
        sell_value=15,
    ),
    Item(
        id="leather_boots",
        name="Leather Boots",
        type=ItemType.BOOTS,
        icon="\N{ATHLETIC SHOE}",
        description="Worn but comfortable.",
        stats=ItemStats(defense=1),
        sell_value=15,
    ),
    Item(
        id="lucky_charm",
        name="Lucky Charm",
        type=ItemType.ACCESSORY,
        icon="\N{FOUR LEAF CLOVER}",
        description="A trinket found among the ruins.",
        stats=ItemStats(magic=2),
        sell_value=60,
    ),
    Item(
        id="health_potion",
        name="Health Potion",
        type=ItemType.CONSUMABLE,
        icon="\N{TEST TUBE}",
        description="Restores 30 health.",
        stats=ItemStats(health=30),
        consumable=True,
        sell_value=10,
    ),
    Item(
        id="magic_scroll",
        name="Magic Scroll",
        type=ItemType.CONSUMABLE,
        icon="\N{SCROLL}",
        description="Crackles with arcane energy.",
        stats=ItemStats(magic=15),
        consumable=True,
        sell_value=25,
    ),
    Item(
        id="herb",
        name="Healing Herb",
        type=ItemType.CONSUMABLE,
        icon="\N{HERB}",
        description="Restores 10 health.",
        stats=ItemStats(health=10),
        consumable=True,
        sell_value=5,
    ),
)

SHOP_INVENTORIES: dict[str, tuple[str, ...]] = {
    "village_shop": (
        "wooden_sword",
        "sword",
        "shield",
        "leather_cap",
        "leather_boots",
        "health_potion",
    ),
    "forest": ("sword", "steel_sword", "iron_shield", "health_potion", "herb"),
    "ruins": ("steel_sword", "steel_shield", "lucky_charm", "magic_scroll", "health_potion"),
}

ENEMIES: tuple[Enemy, ...] = (
    Enemy(
        id="training_dummy",
        name="Training Dummy",
        health=30,
        attack=3,
        defense=0,
        experience=10,
        gold=0,
        icon="\N{WOOD}",
        location_id="training_grounds",
    ),
    Enemy(
        id="goblin",
        name="Forest Goblin",
        health=45,
        attack=8,
        defense=2,
        experience=25,
        gold=10,
        icon="\N{JAPANESE OGRE}",
        location_id="forest",
    ),
    Enemy(
        id="skeleton",
        name="Ancient Skeleton",
        health=60,
        attack=12,
        defense=5,
        experience=50,
        gold=25,
        icon="\N{SKULL}",
        location_id="ruins",
    ),
)

QUESTS: tuple[Quest, ...] = (
    Quest(
        id="training_drills",
        title="Training Drills",
        description="Knock down the training dummy 3 times.",
        type=QuestType.KILL,
        target="training_dummy",
        target_amount=3,
        reward=QuestReward(experience=30, gold=10),
        location_id="village",
    ),
    Quest(
        id="goblin_problem",
        title="Goblin Problem",
        description="Defeat 5 goblins that have been harassing the village.",
        type=QuestType.KILL,
        target="goblin",
        target_amount=5,
        reward=QuestReward(experience=200, gold=50),
        location_id="village",
    ),
    Quest(
        id="herb_gathering",
        title="Herb Gathering",
        description="Collect 10 healing herbs from the forest.",
        type=QuestType.COLLECT,
        target="herb",
        target_amount=10,
        reward=QuestReward(experience=100, items=[RewardItem(item_id="magic_scroll")]),
        location_id="village",
    ),
    Quest(
        id="skeleton_purge",
        title="Restless Dead",
        description="Put 3 ancient skeletons back to rest.",
        type=QuestType.KILL,
        target="skeleton",
        target_amount=3,
        reward=QuestReward(
            experience=300,
            gold=100,
            items=[RewardItem(item_id="health_potion", quantity=2)],
        ),
        location_id="ruins",
    ),
)


def seed_world(repository: Repository) -> None:
    """Write the default world templates into ``repository``.

    All writes run in one transaction.

    Args:
        repository: Target repository.
    """
    with repository.transaction():
        for location in LOCATIONS:
            repository.save_location(location)
        for item in ITEMS:
            repository.save_item(item)
        for location_id, item_ids in SHOP_INVENTORIES.items():
            repository.set_shop_inventory(location_id, list(item_ids))
        for enemy in ENEMIES:
            repository.save_enemy(enemy)
        for quest in QUESTS:
            repository.save_quest(quest)

    logger.info(
        "World seeded",
        locations=len(LOCATIONS),
        items=len(ITEMS),
        enemies=len(ENEMIES),
        quests=len(QUESTS),
    )


__all__ = [
    "LOCATIONS",
    "ITEMS",
    "SHOP_INVENTORIES",
    "ENEMIES",
    "QUESTS",
    "seed_world",
]
