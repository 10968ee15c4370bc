"""
道具图鉴：全部可获得道具的静态注册表
"""
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from config import BASE_CHANCES, ConfigurationError, Rarity, RollConfig


class ItemType(str, Enum):
    WEAPON = 'Weapon'
    AURA = 'Aura'
    CHARM = 'Charm'
    CATALYST = 'Catalyst'
    KEY = 'Key'


@dataclass(frozen=True)
class Item:
    """图鉴条目（不可变）"""
    item_id: str
    name: str
    rarity: Rarity
    base_chance: float  # 百分比，主要用于活动池内的相对权重
    power: int
    item_type: ItemType
    description: Optional[str] = None
    special_effect: Optional[str] = None
    sell_value: int = 0
    is_secret: bool = False
    is_event_item: bool = False

    def __post_init__(self):
        if not 0 <= self.base_chance <= 100:
            raise ConfigurationError(f"道具 {self.item_id} 的基础概率 {self.base_chance} 不在 [0, 100] 内")
        if self.sell_value < 0:
            raise ConfigurationError(f"道具 {self.item_id} 的出售价格不能为负数")


class ItemCatalog:
    """道具图鉴"""

    def __init__(self, items: Iterable[Item], config: Optional[RollConfig] = None):
        self.config = config or RollConfig()
        self._items = tuple(items)
        self._by_id: Dict[str, Item] = {}

        for item in self._items:
            if item.item_id in self._by_id:
                raise ConfigurationError(f"道具ID重复: {item.item_id}")
            self._by_id[item.item_id] = item

        # 兜底路径依赖最常见档位至少有一件道具
        if not self.items_of_rarity(self.config.common_tier):
            raise ConfigurationError(
                f"图鉴中没有 {self.config.common_tier.value} 稀有度的道具，抽取无法兜底"
            )

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    def get(self, item_id: str) -> Optional[Item]:
        return self._by_id.get(item_id)

    def items_of_rarity(self, rarity: Rarity) -> List[Item]:
        """返回该稀有度的全部道具，保持声明顺序"""
        return [item for item in self._items if item.rarity == rarity]

    def random_item_of_rarity(self, rarity: Rarity, rng: Optional[random.Random] = None) -> Optional[Item]:
        """
        从该稀有度中等概率随机取一件
        该档位为空时返回 None（不是错误，调用方应改试其他档位）
        """
        pool = self.items_of_rarity(rarity)
        if not pool:
            return None
        return (rng or random).choice(pool)

    def filter(self, predicate: Callable[[Item], bool]) -> List[Item]:
        return [item for item in self._items if predicate(item)]

    def event_items(self) -> List[Item]:
        return self.filter(lambda item: item.is_event_item)

    def sort_by_rarity(self, items: Sequence[Item], reverse: bool = False) -> List[Item]:
        """按稀有度顺序排序，同档位按名称"""
        return sorted(items, key=lambda item: (self.config.rank(item.rarity), item.name), reverse=reverse)


DEFAULT_ITEMS: List[Item] = [
    # 材料
    Item('blacksmith_stone', 'Blacksmith Stone', Rarity.UNCOMMON, 15, 0, ItemType.CATALYST,
         description='Used to upgrade legendary items.', sell_value=10),
    Item('magic_ore', 'Magic Ore', Rarity.RARE, 5, 0, ItemType.CATALYST,
         description='Enhances upgrade chances.', sell_value=50),

    Item('rusty_sword', 'Rusty Sword', Rarity.COMMON, BASE_CHANCES[Rarity.COMMON], 1, ItemType.WEAPON,
         sell_value=1),
    Item('old_coin', 'Old Coin', Rarity.COMMON, BASE_CHANCES[Rarity.COMMON], 0, ItemType.CATALYST,
         sell_value=1),

    Item('iron_dagger', 'Iron Dagger', Rarity.UNCOMMON, BASE_CHANCES[Rarity.UNCOMMON], 3, ItemType.WEAPON,
         sell_value=5),
    Item('lucky_clover', 'Lucky Clover', Rarity.UNCOMMON, BASE_CHANCES[Rarity.UNCOMMON], 0, ItemType.CHARM,
         special_effect='+2% Luck', sell_value=5),

    Item('sapphire_wand', 'Sapphire Wand', Rarity.RARE, BASE_CHANCES[Rarity.RARE], 10, ItemType.WEAPON,
         sell_value=25),
    Item('blue_aura', 'Blue Flame', Rarity.RARE, BASE_CHANCES[Rarity.RARE], 0, ItemType.AURA,
         special_effect='+5% Luck', sell_value=30),

    Item('shadow_blade', 'Shadow Blade', Rarity.EPIC, BASE_CHANCES[Rarity.EPIC], 35, ItemType.WEAPON,
         sell_value=100),
    Item('void_stone', 'Void Stone', Rarity.EPIC, BASE_CHANCES[Rarity.EPIC], 0, ItemType.CATALYST,
         special_effect='Auto-roll speed up', sell_value=120),

    Item('midas_hand', "Midas' Hand", Rarity.LEGENDARY, BASE_CHANCES[Rarity.LEGENDARY], 100, ItemType.WEAPON,
         special_effect='Gold x2', sell_value=1000),
    Item('fate_key', 'Key of Fate', Rarity.LEGENDARY, BASE_CHANCES[Rarity.LEGENDARY], 0, ItemType.KEY,
         special_effect='Unlocks Boss Room', sell_value=2000),

    Item('blood_moon_scythe', 'Blood Moon Scythe', Rarity.MYTHIC, BASE_CHANCES[Rarity.MYTHIC], 500,
         ItemType.WEAPON, special_effect='Life Steal', sell_value=10000),

    Item('neon_katana', 'Neon Katana', Rarity.EXOTIC, BASE_CHANCES[Rarity.EXOTIC], 1200, ItemType.WEAPON,
         description='A glitch from the future.', sell_value=50000),

    Item('zeus_bolt', 'Thunderbolt', Rarity.DIVINE, BASE_CHANCES[Rarity.DIVINE], 5000, ItemType.WEAPON,
         special_effect='Insta-kill non-bosses', sell_value=200000),

    Item('developer_error', 'NULL_REFERENCE', Rarity.IMPOSSIBLE, BASE_CHANCES[Rarity.IMPOSSIBLE], 99999,
         ItemType.WEAPON, description='This item should not exist.', sell_value=0, is_secret=True),

    # 万圣节活动道具（base_chance 即活动池权重）
    Item('rotten_candy', 'Rotten Candy', Rarity.COMMON, 70, 0, ItemType.CHARM,
         description='Ew, not edible.', sell_value=1, is_event_item=True),
    Item('pumpkin_bomb', 'Pumpkin Bomb', Rarity.RARE, 20, 25, ItemType.WEAPON,
         description='An exploding surprise.', sell_value=50, is_event_item=True),
    Item('ghost_cloak', 'Ghost Cloak', Rarity.EPIC, 8, 0, ItemType.AURA,
         special_effect='Dodge +10%', sell_value=200, is_event_item=True),
    Item('witch_broom', "Witch's Broom", Rarity.LEGENDARY, 1.9, 150, ItemType.WEAPON,
         description='Slash while flying.', sell_value=1500, is_event_item=True),
    Item('headless_blade', "Headless Horseman's Blade", Rarity.MYTHIC, 0.1, 888, ItemType.WEAPON,
         description='Cursed and deadly.', sell_value=6666, is_event_item=True),
]


def default_catalog(config: Optional[RollConfig] = None) -> ItemCatalog:
    return ItemCatalog(DEFAULT_ITEMS, config)
