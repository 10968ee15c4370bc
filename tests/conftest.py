import random

import pytest

from config import Rarity, RollConfig
from item_catalog import Item, ItemCatalog, ItemType, default_catalog
from roll_engine import RollEngine


class FixedRandom(random.Random):
    """random() 总是返回同一个值；choice() 仍走种子化的随机"""

    def __init__(self, value: float, seed: int = 0) -> None:
        super().__init__(seed)
        self.value = value

    def random(self) -> float:
        return self.value


def make_item(item_id: str, rarity: Rarity, **kwargs) -> Item:
    return Item(item_id, item_id.replace('_', ' ').title(), rarity, kwargs.pop('base_chance', 1.0),
                kwargs.pop('power', 1), kwargs.pop('item_type', ItemType.WEAPON), **kwargs)


@pytest.fixture
def config() -> RollConfig:
    return RollConfig()


@pytest.fixture
def catalog(config: RollConfig) -> ItemCatalog:
    return default_catalog(config)


@pytest.fixture
def engine(catalog: ItemCatalog) -> RollEngine:
    return RollEngine(catalog, rng=random.Random(1))


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def item_factory():
    return make_item
