import pytest

from config import Rarity
from monte_carlo_analyzer import MonteCarloAnalyzer


def test_rates_sum_to_one(catalog) -> None:
    analyzer = MonteCarloAnalyzer(catalog, iterations=5000, seed=1)
    result = analyzer.simulate_session(1.0)
    rates = analyzer.rarity_rates(result)
    assert sum(rates.values()) == pytest.approx(1.0)
    assert sum(result['rarity_counts'].values()) == 5000


def test_zero_luck_top_tier_arrives_exactly_on_pity(catalog) -> None:
    analyzer = MonteCarloAnalyzer(catalog, iterations=2000, seed=4)
    result = analyzer.simulate_session(0.0)
    assert result['top_gaps'] == [351] * 5
    assert result['max_counters'][Rarity.MYTHIC] == 350
    assert result['pity_triggers'][Rarity.MYTHIC] == 5


def test_top_tier_gap_never_exceeds_threshold(catalog) -> None:
    analyzer = MonteCarloAnalyzer(catalog, iterations=20000, seed=11)
    result = analyzer.simulate_session(1.0)
    assert max(result['top_pity_trace']) <= 350
    assert all(gap <= 351 for gap in result['top_gaps'])
    stats = analyzer.gap_statistics(result)
    assert stats['count'] == len(result['top_gaps'])
    assert stats['max'] <= 351


def test_luck_raises_scaled_tier_rates(catalog) -> None:
    analyzer = MonteCarloAnalyzer(catalog, iterations=50000, seed=7)
    normal, lucky = analyzer.luck_sweep([1.0, 2.0], track_pity=False)
    normal_rates = analyzer.rarity_rates(normal)
    lucky_rates = analyzer.rarity_rates(lucky)
    for rarity in (Rarity.UNCOMMON, Rarity.RARE, Rarity.EPIC, Rarity.LEGENDARY):
        assert lucky_rates[rarity] > normal_rates[rarity]
    assert lucky_rates[Rarity.COMMON] < normal_rates[Rarity.COMMON]


def test_untracked_pity_never_triggers(catalog) -> None:
    analyzer = MonteCarloAnalyzer(catalog, iterations=3000, seed=2)
    result = analyzer.simulate_session(0.0, track_pity=False)
    assert result['rarity_counts'][Rarity.COMMON] == 3000
    assert all(count == 0 for count in result['pity_triggers'].values())


def test_exclusion_is_applied(catalog) -> None:
    analyzer = MonteCarloAnalyzer(catalog, iterations=3000, seed=3)
    result = analyzer.simulate_session(1.0, exclude_rarities=[Rarity.LEGENDARY])
    assert result['rarity_counts'][Rarity.LEGENDARY] == 0


def test_gap_statistics_without_gaps(catalog) -> None:
    analyzer = MonteCarloAnalyzer(catalog, iterations=10, seed=1)
    stats = analyzer.gap_statistics({'top_gaps': []})
    assert stats['count'] == 0


def test_print_results(catalog, capsys) -> None:
    analyzer = MonteCarloAnalyzer(catalog, iterations=500, seed=5)
    result = analyzer.simulate_session(1.0)
    analyzer.print_results(result)
    analyzer.print_luck_comparison([result])
    out = capsys.readouterr().out
    assert 'Impossible' in out
    assert '模拟结果' in out
