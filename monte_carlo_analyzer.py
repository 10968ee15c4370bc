"""
蒙特卡洛分析器
连续模拟一个玩家的大量抽取，保底计数按调用方流程逐抽传递
"""
import random
from typing import Dict, Iterable, List, Optional

import numpy as np

from config import Rarity, RollConfig
from item_catalog import ItemCatalog
from pity_state import PityCounters, PlayerSession
from roll_engine import RollEngine


class MonteCarloAnalyzer:
    """蒙特卡洛分析器"""

    def __init__(self, catalog: ItemCatalog, config: Optional[RollConfig] = None,
                 iterations: int = 100000, seed: Optional[int] = None):
        self.catalog = catalog
        self.config = config or catalog.config
        self.iterations = iterations
        self.seed = seed

    def simulate_session(self, luck_multiplier: float, track_pity: bool = True,
                         exclude_rarities: Iterable[Rarity] = ()) -> Dict:
        """
        模拟单个玩家连续抽取 iterations 次
        track_pity: False 时每抽都以0计数调用引擎（排除保底干扰，用于测纯概率）
        返回: {
            'luck': 幸运倍率,
            'rolls': 抽取次数,
            'rarity_counts': {稀有度: 出货次数},
            'pity_triggers': {保底档位: 保底触发次数},
            'top_pity_trace': 每抽结束后最高保底档位的计数,
            'top_gaps': 相邻两次最高保底档位出货的间隔抽数,
            'max_counters': {保底档位: 会话中出现过的最大计数}
        }
        """
        exclude_rarities = tuple(exclude_rarities)
        engine = RollEngine(self.catalog, self.config, random.Random(self.seed))
        session = PlayerSession(engine)
        zero_counters = PityCounters(tiers=self.config.pity_tiers)
        top_tier = self.config.pity_tiers[0]

        rarity_counts = {rarity: 0 for rarity in self.config.rarity_order}
        pity_triggers = {rarity: 0 for rarity in self.config.pity_tiers}
        max_counters = {rarity: 0 for rarity in self.config.pity_tiers}
        top_pity_trace = []
        top_gaps = []
        since_top = 0

        progress_step = max(self.iterations // 5, 1)
        for i in range(self.iterations):
            if (i + 1) % progress_step == 0:
                print(f"进度: {i + 1}/{self.iterations}")

            if track_pity:
                result = session.roll(luck_multiplier, exclude_rarities)
            else:
                result = engine.roll(luck_multiplier, zero_counters, exclude_rarities)
                session.counters = session.counters.advance(result)

            rarity_counts[result.item.rarity] += 1
            if result.via_pity:
                pity_triggers[result.pity_reset] += 1

            for rarity in max_counters:
                max_counters[rarity] = max(max_counters[rarity], session.counters[rarity])
            top_pity_trace.append(session.counters[top_tier])

            since_top += 1
            if result.item.rarity == top_tier:
                top_gaps.append(since_top)
                since_top = 0

        return {
            'luck': luck_multiplier,
            'rolls': self.iterations,
            'rarity_counts': rarity_counts,
            'pity_triggers': pity_triggers,
            'top_pity_trace': top_pity_trace,
            'top_gaps': top_gaps,
            'max_counters': max_counters,
        }

    def rarity_rates(self, result: Dict) -> Dict[Rarity, float]:
        """各稀有度经验出率（0~1）"""
        counts = np.array([result['rarity_counts'][r] for r in self.config.rarity_order], dtype=float)
        rates = counts / max(result['rolls'], 1)
        return dict(zip(self.config.rarity_order, rates.tolist()))

    def luck_sweep(self, luck_levels: List[float], track_pity: bool = True) -> List[Dict]:
        """对多个幸运倍率分别模拟，所有倍率共用同一随机种子"""
        results = []
        for luck in luck_levels:
            print(f"正在模拟幸运倍率 x{luck:.2f}，共 {self.iterations} 抽...")
            results.append(self.simulate_session(luck, track_pity=track_pity))
        return results

    def gap_statistics(self, result: Dict) -> Dict[str, float]:
        """最高保底档位出货间隔统计"""
        gaps = np.array(result['top_gaps'], dtype=float)
        if gaps.size == 0:
            return {'count': 0, 'mean': 0.0, 'median': 0.0, 'p90': 0.0, 'max': 0.0}
        return {
            'count': int(gaps.size),
            'mean': float(np.mean(gaps)),
            'median': float(np.median(gaps)),
            'p90': float(np.percentile(gaps, 90)),
            'max': float(np.max(gaps)),
        }

    def print_results(self, result: Dict):
        """打印单次会话的模拟结果"""
        rates = self.rarity_rates(result)
        top_tier = self.config.pity_tiers[0]

        print("\n" + "=" * 60)
        print(f"【模拟结果 - 幸运倍率 x{result['luck']:.2f}】")
        print("=" * 60)
        print(f"\n抽取次数: {result['rolls']}")
        print(f"\n各稀有度出率:")
        for rarity in self.config.rarity_order:
            print(f"  {rarity.value:<12} {result['rarity_counts'][rarity]:>8} 次  {rates[rarity] * 100:>8.4f}%")

        print(f"\n保底触发次数:")
        for rarity in self.config.pity_tiers:
            print(f"  {rarity.value:<12} {result['pity_triggers'][rarity]:>8} 次"
                  f"  (阈值 {self.config.pity_thresholds[rarity]}, 最高水位 {result['max_counters'][rarity]})")

        stats = self.gap_statistics(result)
        print(f"\n{top_tier.value} 出货间隔:")
        print(f"  出货次数: {stats['count']}")
        print(f"  平均值: {stats['mean']:.2f} 抽")
        print(f"  中位数: {stats['median']:.0f} 抽")
        print(f"  90%分位数: {stats['p90']:.0f} 抽")
        print(f"  最大值: {stats['max']:.0f} 抽")

        print("\n" + "=" * 60 + "\n")

    def print_luck_comparison(self, results: List[Dict]):
        """打印不同幸运倍率下的出率对比"""
        print(f"\n{'=' * 70}")
        print("【幸运倍率出率对比】")
        print(f"{'=' * 70}")

        header = ''.join(f"{'x' + format(r['luck'], '.2f'):>12}" for r in results)
        print(f"  {'稀有度':<12}{header}")
        all_rates = [self.rarity_rates(r) for r in results]
        for rarity in self.config.rarity_order:
            row = ''.join(f"{rates[rarity] * 100:>11.4f}%" for rates in all_rates)
            print(f"  {rarity.value:<12}{row}")
        print()
