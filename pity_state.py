"""
保底计数状态（由调用方持有）
"""
import threading
from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, Optional

from config import PITY_THRESHOLDS, Rarity
from roll_engine import RollEngine, RollResult


class PityCounters(Mapping):
    """
    各保底档位距上次出货的连续抽数（不可变值对象）
    每抽所有档位 +1，然后把本抽出货的保底档位清零
    """

    def __init__(self, counts: Optional[Dict[Rarity, int]] = None,
                 tiers: Optional[Iterable[Rarity]] = None):
        tiers = list(tiers) if tiers is not None else list(PITY_THRESHOLDS)
        counts = counts or {}
        self._counts = {tier: counts.get(tier, 0) for tier in tiers}

    def __getitem__(self, rarity: Rarity) -> int:
        return self._counts[rarity]

    def __iter__(self) -> Iterator[Rarity]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __repr__(self) -> str:
        inner = ', '.join(f'{r.value}={c}' for r, c in self._counts.items())
        return f'PityCounters({inner})'

    def advance(self, result: RollResult) -> 'PityCounters':
        """
        记一次抽取：全部 +1，再清零 result.pity_reset 对应的档位
        返回新的计数，不修改自身
        """
        counts = {tier: count + 1 for tier, count in self._counts.items()}
        if result.pity_reset in counts:
            counts[result.pity_reset] = 0
        return PityCounters(counts, counts.keys())

    def as_dict(self) -> Dict[str, int]:
        """导出为 {稀有度名: 计数}，供存档层使用"""
        return {tier.value: count for tier, count in self._counts.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, int], tiers: Optional[Iterable[Rarity]] = None) -> 'PityCounters':
        return cls({Rarity(name): count for name, count in data.items()}, tiers)


class PlayerSession:
    """单个玩家的抽取会话：同一玩家的抽取串行执行，保证 +1 与清零是原子的"""

    def __init__(self, engine: RollEngine, counters: Optional[PityCounters] = None):
        self.engine = engine
        self.counters = counters or PityCounters(tiers=engine.config.pity_tiers)
        self.total_rolls = 0
        self._lock = threading.Lock()

    def roll(self, luck_multiplier: float, exclude_rarities: Iterable[Rarity] = ()) -> RollResult:
        with self._lock:
            result = self.engine.roll(luck_multiplier, self.counters, exclude_rarities)
            self.counters = self.counters.advance(result)
            self.total_rolls += 1
        return result
