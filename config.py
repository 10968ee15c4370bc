"""
抽取配置：稀有度、保底阈值、基础概率
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class ConfigurationError(ValueError):
    """启动期配置错误（致命），不应在抽取时出现"""


class Rarity(str, Enum):
    """九档稀有度（值为显示名）"""
    COMMON = 'Common'
    UNCOMMON = 'Uncommon'
    RARE = 'Rare'
    EPIC = 'Epic'
    LEGENDARY = 'Legendary'
    MYTHIC = 'Mythic'
    EXOTIC = 'Exotic'
    DIVINE = 'Divine'
    IMPOSSIBLE = 'Impossible'


# 从常见到最稀有
RARITY_ORDER: List[Rarity] = [
    Rarity.COMMON,
    Rarity.UNCOMMON,
    Rarity.RARE,
    Rarity.EPIC,
    Rarity.LEGENDARY,
    Rarity.MYTHIC,
    Rarity.EXOTIC,
    Rarity.DIVINE,
    Rarity.IMPOSSIBLE,
]

# 硬保底：计数达到阈值时下一抽必出该稀有度
PITY_THRESHOLDS: Dict[Rarity, int] = {
    Rarity.RARE: 40,
    Rarity.LEGENDARY: 100,
    Rarity.MYTHIC: 350,
}

# 基础概率（百分比），各档独立判定，总和不必为100
BASE_CHANCES: Dict[Rarity, float] = {
    Rarity.COMMON: 65,
    Rarity.UNCOMMON: 20,
    Rarity.RARE: 10,
    Rarity.EPIC: 3.5,
    Rarity.LEGENDARY: 1,
    Rarity.MYTHIC: 0.3,
    Rarity.EXOTIC: 0.1,
    Rarity.DIVINE: 0.05,
    Rarity.IMPOSSIBLE: 0.009,
}

AURA_LUCK_BONUS = 0.05  # 每件光环道具 +5% 幸运


@dataclass
class RollConfig:
    """抽取配置"""
    rarity_order: List[Rarity] = field(default_factory=lambda: list(RARITY_ORDER))
    pity_thresholds: Dict[Rarity, int] = field(default_factory=lambda: dict(PITY_THRESHOLDS))
    base_chances: Dict[Rarity, float] = field(default_factory=lambda: dict(BASE_CHANCES))

    def __post_init__(self):
        if len(self.rarity_order) != 9 or len(set(self.rarity_order)) != 9:
            raise ConfigurationError(
                f"稀有度顺序必须恰好包含9个不同的档位，当前为 {len(self.rarity_order)} 个"
            )

        for rarity in self.rarity_order:
            if rarity not in self.base_chances:
                raise ConfigurationError(f"缺少 {rarity.value} 的基础概率")
            chance = self.base_chances[rarity]
            if not 0 <= chance <= 100:
                raise ConfigurationError(f"{rarity.value} 的基础概率 {chance} 不在 [0, 100] 内")

        if not self.pity_thresholds:
            raise ConfigurationError("至少需要一个保底档位")

        # 保底阈值必须随稀有度严格递增
        previous = None
        for rarity in self.rarity_order:
            if rarity not in self.pity_thresholds:
                continue
            threshold = self.pity_thresholds[rarity]
            if threshold <= 0:
                raise ConfigurationError(f"{rarity.value} 的保底阈值必须为正数，当前为 {threshold}")
            if previous is not None and threshold <= previous[1]:
                raise ConfigurationError(
                    f"保底阈值必须随稀有度严格递增: "
                    f"{previous[0].value}={previous[1]} >= {rarity.value}={threshold}"
                )
            previous = (rarity, threshold)

        unknown = [r for r in self.pity_thresholds if r not in self.rarity_order]
        if unknown:
            raise ConfigurationError(f"保底档位不在稀有度顺序中: {unknown}")
        if self.common_tier in self.pity_thresholds:
            raise ConfigurationError("最常见档位不能设置保底")

    @property
    def common_tier(self) -> Rarity:
        return self.rarity_order[0]

    @property
    def rarest_tier(self) -> Rarity:
        return self.rarity_order[-1]

    @property
    def pity_tiers(self) -> List[Rarity]:
        """保底档位，最稀有的在前（即判定顺序）"""
        return [r for r in reversed(self.rarity_order) if r in self.pity_thresholds]

    @property
    def weighted_order(self) -> List[Rarity]:
        """逐档判定顺序：从最稀有到最常见"""
        return list(reversed(self.rarity_order))

    def rank(self, rarity: Rarity) -> int:
        return self.rarity_order.index(rarity)


@dataclass(frozen=True)
class GameEvent:
    """限时活动"""
    event_id: str
    name: str
    description: str
    luck_bonus: float
    theme_color: str = 'orange'


EVENTS: Dict[str, GameEvent] = {
    'HALLOWEEN': GameEvent(
        event_id='hallows_eve',
        name="Hallow's Eve",
        description="The Haunted Realm is open. Collect Candy!",
        luck_bonus=0.20,
    ),
}


def total_luck(base_luck: float, aura_count: int = 0, event: Optional[GameEvent] = None) -> float:
    """
    计算最终幸运倍率
    base_luck: 玩家基础幸运（升级获得，初始1.0）
    aura_count: 背包中光环道具的总数量
    event: 当前进行中的活动（可为空）
    """
    luck = base_luck + AURA_LUCK_BONUS * aura_count
    if event is not None:
        luck += event.luck_bonus
    return luck
