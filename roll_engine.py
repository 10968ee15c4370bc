"""
核心抽取引擎

单次抽取流程：
1. 硬保底判定：从最稀有的保底档位开始，计数 >= 阈值且该档位有道具则直接出货
   （每抽最多触发一个保底，高档位优先）
2. 逐档独立判定：从最稀有到最常见，每档重新掷一次 [0,100) 的随机数，
   随机数 <= 有效概率即出该档道具；该档为空或未命中则继续下一档
3. 兜底：全部未命中时给一件最常见档位的道具，不重置任何保底

有效概率 = 基础概率 × 幸运倍率，但最稀有档位不受幸运影响。
幸运倍率 <= 0 时所有逐档判定的有效概率为0，只剩保底与兜底可达。

引擎本身无状态：不修改保底计数，只返回应重置的档位，由调用方负责
“全部 +1，再把出货档位清零”。
前置条件（不做校验）：幸运倍率 >= 0，保底计数 >= 0。
"""
import random
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from config import ConfigurationError, Rarity, RollConfig
from item_catalog import Item, ItemCatalog


@dataclass(frozen=True)
class RollResult:
    """单次抽取结果"""
    item: Item
    pity_reset: Optional[Rarity]  # 需要清零的保底档位，None 表示不清零
    via_pity: bool = False  # 是否由硬保底产出


class RollEngine:
    """抽取引擎"""

    def __init__(self, catalog: ItemCatalog, config: Optional[RollConfig] = None,
                 rng: Optional[random.Random] = None):
        self.catalog = catalog
        self.config = config or catalog.config
        self.rng = rng or random.Random()

    def effective_chance(self, rarity: Rarity, luck_multiplier: float) -> float:
        """计算某档位的有效概率（百分比）"""
        if luck_multiplier <= 0:
            return 0.0

        chance = self.config.base_chances[rarity]
        # 最稀有档位不吃幸运，封顶其最大出率
        if rarity != self.config.rarest_tier:
            chance = chance * luck_multiplier
        return chance

    def roll(self, luck_multiplier: float, pity_counters: Mapping[Rarity, float],
             exclude_rarities: Iterable[Rarity] = ()) -> RollResult:
        """
        执行一次抽取
        luck_multiplier: 幸运倍率（1.0 为中性）
        pity_counters: 本抽之前的保底计数（尚未为本抽 +1），缺失的档位按0处理
        exclude_rarities: 本次跳过的档位（保底与逐档判定都跳过，兜底除外）
        返回: RollResult(道具, 需清零的保底档位, 是否保底出货)
        """
        excluded = frozenset(exclude_rarities)

        # 1. 硬保底（高档位优先）
        for rarity in self.config.pity_tiers:
            if rarity in excluded:
                continue
            if pity_counters.get(rarity, 0) >= self.config.pity_thresholds[rarity]:
                item = self.catalog.random_item_of_rarity(rarity, self.rng)
                if item is not None:
                    return RollResult(item, rarity, via_pity=True)

        # 2. 逐档独立判定（最稀有到最常见）
        for rarity in self.config.weighted_order:
            if rarity in excluded:
                continue

            chance = self.effective_chance(rarity, luck_multiplier)
            roll = self.rng.random() * 100
            if chance > 0 and roll <= chance:
                item = self.catalog.random_item_of_rarity(rarity, self.rng)
                if item is not None:
                    # 只有保底档位才需要清零
                    reset = rarity if rarity in self.config.pity_thresholds else None
                    return RollResult(item, reset)

        # 3. 兜底：总是最常见档位（即使被排除，调用方不应排除最常见档位）
        item = self.catalog.random_item_of_rarity(self.config.common_tier, self.rng)
        return RollResult(item, None)

    def roll_event_pool(self) -> Item:
        """
        活动兑换抽取：按活动道具的 base_chance 加权，不影响保底
        """
        event_items = self.catalog.event_items()
        if not event_items:
            raise ConfigurationError("图鉴中没有活动道具")

        total_weight = sum(item.base_chance for item in event_items)
        remaining = self.rng.random() * total_weight

        for item in event_items:
            remaining -= item.base_chance
            if remaining <= 0:
                return item
        return event_items[0]
