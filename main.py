"""
道具抽取模拟器 - 主程序入口

运行此文件以执行完整的模拟分析


核心规则：
1. 九档稀有度，从 Common 到 Impossible
2. 三档硬保底：Rare 40抽、Legendary 100抽、Mythic 350抽，高档位优先，每抽最多触发一个
3. 未触发保底时从最稀有档位开始逐档独立判定，每档重新掷骰，未命中则判定下一档
4. 有效概率 = 基础概率 × 幸运倍率，Impossible 不受幸运影响
5. 全部未命中则兜底给一件 Common
6. 每抽所有保底计数 +1，然后把出货档位的计数清零（无论是保底还是自然出货）
"""


import pickle
from config import EVENTS, RollConfig, total_luck
from item_catalog import default_catalog
from monte_carlo_analyzer import MonteCarloAnalyzer

LUCK_LEVELS = [0.5, 1.0, 1.5, 2.0, 3.0]


def main():
    """主函数"""
    config = RollConfig()
    catalog = default_catalog(config)

    print("=" * 60)
    print("道具抽取模拟器")
    print("=" * 60)
    print("\n当前规则:")
    for rarity in config.rarity_order:
        print(f"  • {rarity.value:<12} 基础概率: {config.base_chances[rarity]}%")
    for rarity in config.pity_tiers:
        print(f"  • {rarity.value} 保底: {config.pity_thresholds[rarity]}抽")
    print(f"  • 图鉴道具数: {len(catalog)} (活动道具 {len(catalog.event_items())})")
    print()

    analyzer = MonteCarloAnalyzer(catalog, config, iterations=100000, seed=2024)

    # 纯概率对比（不计保底）
    print("\n" + "▶" * 30)
    print("幸运倍率对比（不计保底）")
    print("▶" * 30)
    luck_sweep = analyzer.luck_sweep(LUCK_LEVELS, track_pity=False)
    analyzer.print_luck_comparison(luck_sweep)

    # 完整会话（计保底），活动期间的幸运
    event_luck = total_luck(1.0, aura_count=2, event=EVENTS['HALLOWEEN'])
    print("\n" + "▶" * 30)
    print(f"完整会话（计保底，活动幸运 x{event_luck:.2f}）")
    print("▶" * 30)
    session = analyzer.simulate_session(event_luck)
    analyzer.print_results(session)

    # ========== 保存模拟结果 ==========
    print("\n" + "=" * 60)
    print("保存模拟结果")
    print("=" * 60)

    simulation_results = {
        'luck_sweep': luck_sweep,
        'session': session,
        'config': {
            'rarity_order': [r.value for r in config.rarity_order],
            'pity_thresholds': {r.value: t for r, t in config.pity_thresholds.items()},
            'base_chances': {r.value: c for r, c in config.base_chances.items()},
        }
    }

    output_file = 'simulation_results.pkl'
    with open(output_file, 'wb') as f:
        pickle.dump(simulation_results, f)

    print(f"\n✓ 模拟结果已保存至: {output_file}")
    print(f"  包含数据: {len(luck_sweep)} 个幸运倍率，1 个完整会话")
    print(f"\n提示: 运行 'python visualizer.py' 生成可视化图表")


if __name__ == "__main__":
    main()
