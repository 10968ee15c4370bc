import random
import threading

from config import Rarity
from item_catalog import Item, ItemType
from pity_state import PityCounters, PlayerSession
from roll_engine import RollEngine, RollResult


SWORD = Item('rusty_sword', 'Rusty Sword', Rarity.COMMON, 65, 1, ItemType.WEAPON)
SCYTHE = Item('blood_moon_scythe', 'Blood Moon Scythe', Rarity.LEGENDARY, 1, 500, ItemType.WEAPON)


def test_counters_start_at_zero() -> None:
    counters = PityCounters()
    assert dict(counters) == {Rarity.RARE: 0, Rarity.LEGENDARY: 0, Rarity.MYTHIC: 0}


def test_advance_increments_every_tier() -> None:
    counters = PityCounters().advance(RollResult(SWORD, None))
    assert dict(counters) == {Rarity.RARE: 1, Rarity.LEGENDARY: 1, Rarity.MYTHIC: 1}


def test_advance_resets_only_awarded_tier() -> None:
    counters = PityCounters({Rarity.RARE: 12, Rarity.LEGENDARY: 100, Rarity.MYTHIC: 200})
    after = counters.advance(RollResult(SCYTHE, Rarity.LEGENDARY, via_pity=True))
    assert after[Rarity.LEGENDARY] == 0
    assert after[Rarity.RARE] == 13
    assert after[Rarity.MYTHIC] == 201
    # 原对象不变
    assert counters[Rarity.LEGENDARY] == 100


def test_round_trip_through_dict() -> None:
    counters = PityCounters({Rarity.RARE: 3, Rarity.MYTHIC: 7})
    data = counters.as_dict()
    assert data == {'Rare': 3, 'Legendary': 0, 'Mythic': 7}
    assert dict(PityCounters.from_dict(data)) == dict(counters)


def test_session_triggers_rare_pity_on_41st_roll(catalog, fixed_random) -> None:
    session = PlayerSession(RollEngine(catalog, rng=fixed_random(0.9999)))
    for _ in range(40):
        assert session.roll(1.0).item.rarity == Rarity.COMMON
    assert session.counters[Rarity.RARE] == 40

    result = session.roll(1.0)
    assert result.pity_reset == Rarity.RARE
    assert result.via_pity
    assert session.counters[Rarity.RARE] == 0
    assert session.counters[Rarity.LEGENDARY] == 41
    assert session.counters[Rarity.MYTHIC] == 41
    assert session.total_rolls == 41


def test_top_tier_counter_never_exceeds_threshold(catalog) -> None:
    session = PlayerSession(RollEngine(catalog, rng=random.Random(9)))
    for _ in range(3000):
        session.roll(1.0)
        assert session.counters[Rarity.MYTHIC] <= 350


def test_concurrent_rolls_are_serialised(catalog, fixed_random) -> None:
    session = PlayerSession(RollEngine(catalog, rng=fixed_random(0.9999)))
    reference = PlayerSession(RollEngine(catalog, rng=fixed_random(0.9999)))
    for _ in range(400):
        reference.roll(1.0)

    def worker() -> None:
        for _ in range(50):
            session.roll(1.0)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert session.total_rolls == 400
    assert dict(session.counters) == dict(reference.counters)
