"""
数据可视化模块
用于生成抽取模拟结果的图表

独立运行: python visualizer.py
需要先运行 main.py 生成 simulation_results.pkl
"""

import pickle
import os
import sys
import warnings

import matplotlib
from matplotlib import font_manager
import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np
from typing import List, Dict, Optional

from config import Rarity

sns.set_style("whitegrid")
sns.set_context("paper", font_scale=1.2)

# Configure Chinese fonts so labels do not render as boxes
CHINESE_FONTS = [
    'PingFang SC', 'Hiragino Sans GB', 'Songti SC', 'STHeiti', 'SimHei',
    'Microsoft YaHei', 'Noto Sans CJK SC', 'Source Han Sans SC', 'Arial Unicode MS',
    'DejaVu Sans'
]


def configure_chinese_font():
    for font_name in CHINESE_FONTS:
        try:
            # findfont raises if the font does not exist when fallback_to_default is False
            font_manager.findfont(font_name, fallback_to_default=False)
            matplotlib.rcParams['font.sans-serif'] = [font_name]
            matplotlib.rcParams['axes.unicode_minus'] = False
            return
        except ValueError:
            continue
    warnings.warn("未找到可用的中文字体，图表文字可能显示为方框")


configure_chinese_font()

# 稀有度配色
RARITY_COLORS = {
    Rarity.COMMON: '#9CA3AF',
    Rarity.UNCOMMON: '#4ADE80',
    Rarity.RARE: '#60A5FA',
    Rarity.EPIC: '#C084FC',
    Rarity.LEGENDARY: '#FACC15',
    Rarity.MYTHIC: '#EF4444',
    Rarity.EXOTIC: '#EC4899',
    Rarity.DIVINE: '#67E8F9',
    Rarity.IMPOSSIBLE: '#111827',
}

LUCK_PALETTE = ['#7F7F7F', '#1F77B4', '#FF7F0E', '#2CA02C', '#D62728', '#9467BD']

# Global visual tweaks
plt.rcParams['figure.dpi'] = 150
plt.rcParams['savefig.dpi'] = 300
plt.rcParams['axes.facecolor'] = '#f9fafb'
plt.rcParams['figure.facecolor'] = 'white'
plt.rcParams['axes.edgecolor'] = '#e5e7eb'
plt.rcParams['grid.color'] = '#e5e7eb'
plt.rcParams['grid.alpha'] = 0.8
sns.set_palette(LUCK_PALETTE)


def style_axes(ax):
    ax.spines['top'].set_visible(False)
    ax.spines['right'].set_visible(False)
    ax.tick_params(axis='both', labelsize=10)
    ax.grid(True, linestyle='--', linewidth=0.8, alpha=0.7)
    ax.set_axisbelow(True)


def _save(save_path: Optional[str], default_name: str) -> str:
    path = save_path or default_name
    plt.savefig(path, dpi=300, bbox_inches='tight')
    print(f"图表已保存至: {path}")
    plt.close()
    return path


class RollVisualizer:
    """抽取结果可视化器"""

    def __init__(self, rarity_order: List[Rarity], pity_thresholds: Dict[Rarity, int]):
        self.rarity_order = rarity_order
        self.pity_thresholds = pity_thresholds
        self.top_tier = max(pity_thresholds, key=pity_thresholds.get)

    def plot_rarity_rates(self, luck_results: List[Dict], save_path: str = None) -> str:
        """
        绘制不同幸运倍率下各稀有度的经验出率（对数坐标）
        """
        fig, ax = plt.subplots(figsize=(14, 6))
        style_axes(ax)

        x = np.arange(len(self.rarity_order))
        width = 0.8 / max(len(luck_results), 1)

        for i, result in enumerate(luck_results):
            counts = np.array([result['rarity_counts'][r] for r in self.rarity_order], dtype=float)
            rates = counts / result['rolls'] * 100
            ax.bar(x + (i - (len(luck_results) - 1) / 2) * width, rates, width,
                   label=f"幸运 x{result['luck']:.2f}", alpha=0.85, edgecolor='white', linewidth=1.0)

        ax.set_yscale('log')
        ax.set_xlabel('稀有度', fontsize=13, fontweight='bold')
        ax.set_ylabel('出率 (%)', fontsize=13, fontweight='bold')
        ax.set_title('各稀有度经验出率 - 幸运倍率对比', fontsize=15, fontweight='bold', pad=20)
        ax.set_xticks(x)
        ax.set_xticklabels([r.value for r in self.rarity_order], rotation=30, ha='right', fontsize=11)
        for label, rarity in zip(ax.get_xticklabels(), self.rarity_order):
            label.set_color(RARITY_COLORS.get(rarity, 'black'))
        ax.legend(fontsize=10, frameon=True, shadow=True)

        sns.despine()
        plt.tight_layout()
        return _save(save_path, 'rarity_rates.png')

    def plot_pity_trace(self, session_result: Dict, max_rolls: int = 2000, save_path: str = None) -> str:
        """
        绘制最高保底档位的计数水位变化
        """
        trace = session_result['top_pity_trace'][:max_rolls]
        threshold = self.pity_thresholds[self.top_tier]

        fig, ax = plt.subplots(figsize=(14, 5))
        style_axes(ax)

        ax.plot(range(1, len(trace) + 1), trace, color=RARITY_COLORS[self.top_tier], linewidth=1.5)
        ax.axhline(y=threshold, color='orange', linestyle='--', linewidth=1.5, alpha=0.7,
                   label=f'保底阈值 ({threshold})')

        ax.set_xlabel('抽数', fontsize=12, fontweight='bold')
        ax.set_ylabel(f'{self.top_tier.value} 保底水位', fontsize=12, fontweight='bold')
        ax.set_title(f"{self.top_tier.value} 保底水位变化（幸运 x{session_result['luck']:.2f}）",
                     fontsize=15, fontweight='bold', pad=15)
        ax.set_ylim(0, threshold * 1.1)
        ax.legend(fontsize=10, frameon=True, shadow=True)

        sns.despine()
        plt.tight_layout()
        return _save(save_path, 'pity_trace.png')

    def plot_pity_gaps(self, session_result: Dict, save_path: str = None) -> str:
        """
        绘制最高保底档位出货间隔分布，标注保底阈值
        """
        gaps = session_result['top_gaps']
        threshold = self.pity_thresholds[self.top_tier]

        fig, ax = plt.subplots(figsize=(12, 6))
        style_axes(ax)

        if gaps:
            sns.histplot(gaps, bins=np.arange(0, threshold + 20, 10), stat='percent',
                         color=RARITY_COLORS[self.top_tier], alpha=0.8, ax=ax)
            mean_gap = np.mean(gaps)
            ax.axvline(x=mean_gap, color='gray', linestyle='-', linewidth=1.5, alpha=0.8,
                       label=f'平均 {mean_gap:.1f} 抽')
        ax.axvline(x=threshold + 1, color='orange', linestyle='--', linewidth=1.5, alpha=0.8,
                   label=f'保底上限 ({threshold + 1} 抽)')

        ax.set_xlabel('出货间隔（抽）', fontsize=12, fontweight='bold')
        ax.set_ylabel('占比 (%)', fontsize=12, fontweight='bold')
        ax.set_title(f'{self.top_tier.value} 出货间隔分布', fontsize=15, fontweight='bold', pad=15)
        ax.legend(fontsize=10, frameon=True, shadow=True)

        sns.despine()
        plt.tight_layout()
        return _save(save_path, 'pity_gaps.png')

    def generate_all_plots(self, luck_results: List[Dict], session_result: Dict):
        """生成所有可视化图表"""
        print("\n" + "=" * 60)
        print("正在生成可视化图表...")
        print("=" * 60)

        print("\n[1/3] 生成稀有度出率对比图...")
        self.plot_rarity_rates(luck_results)

        print("\n[2/3] 生成保底水位变化图...")
        self.plot_pity_trace(session_result)

        print("\n[3/3] 生成出货间隔分布图...")
        self.plot_pity_gaps(session_result)

        print("\n所有图表生成完成！")


def load_simulation_results(file_path: str = 'simulation_results.pkl') -> dict:
    """
    加载模拟结果

    返回: {
        'luck_sweep': List[Dict],
        'session': Dict,
        'config': Dict
    }
    """
    if not os.path.exists(file_path):
        print(f"错误: 找不到模拟结果文件 '{file_path}'")
        print("请先运行 'python main.py' 生成模拟数据")
        sys.exit(1)

    print(f"正在加载模拟结果: {file_path}")

    with open(file_path, 'rb') as f:
        results = pickle.load(f)

    print(f"✓ 成功加载数据")
    print(f"  幸运倍率数量: {len(results['luck_sweep'])}")
    print(f"  会话抽数: {results['session']['rolls']}")

    return results


def main():
    """主函数：独立运行可视化模块"""
    print("=" * 60)
    print("抽取模拟 - 数据可视化工具")
    print("=" * 60)

    results = load_simulation_results()
    config = results['config']

    rarity_order = [Rarity(name) for name in config['rarity_order']]
    pity_thresholds = {Rarity(name): value for name, value in config['pity_thresholds'].items()}

    print("\n模拟配置:")
    for rarity, threshold in pity_thresholds.items():
        print(f"  • {rarity.value} 保底: {threshold}抽")

    visualizer = RollVisualizer(rarity_order, pity_thresholds)
    visualizer.generate_all_plots(results['luck_sweep'], results['session'])

    print("\n" + "=" * 60)
    print("可视化完成！")
    print("=" * 60)


if __name__ == "__main__":
    main()
