import random
from typing import Callable, List, Optional

import pytest

from topk.collector import collect, collect_partitioned, partition, to_list
from topk.config import SelectionConfig
from topk.errors import InvalidArgument, NullReference
from topk.order import Order, by_key, natural_order, reverse_order
from topk.strategy import (
    bounded_select,
    select_top_k,
    select_top_k_descending,
    select_top_k_natural,
)

SelectFunction = Callable[[List[Optional[float]], int, Order], List[float]]


def _via_collector(source, k, order):
    return collect(source, to_list(k, order))


def _via_partitions(source, k, order):
    return collect_partitioned(partition(source, 7), to_list(k, order), max_workers=3)


def _via_sorted(source, k, order):
    config = SelectionConfig({"full_sort_threshold": 0})
    return select_top_k(source, k, order, config)


# Every entry point must satisfy the same contract.
SELECT_FUNCTIONS: List[SelectFunction] = [
    select_top_k,
    bounded_select,
    _via_collector,
    _via_partitions,
    _via_sorted,
]


def shuffled_doubles(n: int, seed: int = 42) -> List[Optional[float]]:
    values: List[Optional[float]] = [float(i) for i in range(n)]
    random.Random(seed).shuffle(values)
    return values


@pytest.mark.parametrize("select", SELECT_FUNCTIONS)
def test_result_sizes(select: SelectFunction):
    values = [float(i) for i in range(10)]
    assert len(select(values, 0, natural_order)) == 0
    assert len(select(values, 1, natural_order)) == 1
    assert len(select(values, 10, natural_order)) == 10
    assert len(select(values, 11, natural_order)) == 10


@pytest.mark.parametrize("select", SELECT_FUNCTIONS)
def test_negative_k(select: SelectFunction):
    with pytest.raises(InvalidArgument):
        select([1.0, 2.0], -1, natural_order)


@pytest.mark.parametrize("select", SELECT_FUNCTIONS)
def test_natural_order(select: SelectFunction):
    values = shuffled_doubles(100)
    values.append(-50.0)
    values.append(50_000.0)
    random.Random(1).shuffle(values)

    result = select(values, 10, natural_order)
    assert result == [-50.0] + [float(i) for i in range(9)]


@pytest.mark.parametrize("select", SELECT_FUNCTIONS)
def test_reverse_order(select: SelectFunction):
    values = shuffled_doubles(100)
    values.append(-50.0)
    values.append(50_000.0)
    random.Random(2).shuffle(values)

    result = select(values, 10, reverse_order(natural_order))
    assert result == [50_000.0] + [float(i) for i in range(99, 90, -1)]


@pytest.mark.parametrize("select", SELECT_FUNCTIONS)
def test_identical_elements(select: SelectFunction):
    result = select([1.0] * 100, 10, natural_order)
    assert result == [1.0] * 10


@pytest.mark.parametrize("select", SELECT_FUNCTIONS)
def test_repeating_elements(select: SelectFunction):
    values: List[Optional[float]] = [float(y) for _ in range(4) for y in range(25)]
    random.Random(3).shuffle(values)

    result = select(values, 10, natural_order)
    assert result == [0.0] * 4 + [1.0] * 4 + [2.0] * 2


@pytest.mark.parametrize("select", SELECT_FUNCTIONS)
def test_nulls_and_element(select: SelectFunction):
    values: List[Optional[float]] = [None] * 100
    values.append(1.0)
    random.Random(4).shuffle(values)

    assert select(values, 10, natural_order) == [1.0]


@pytest.mark.parametrize("select", SELECT_FUNCTIONS)
def test_one_null(select: SelectFunction):
    values = shuffled_doubles(100)
    values.append(None)
    random.Random(5).shuffle(values)

    result = select(values, 10, natural_order)
    assert result == [float(i) for i in range(10)]


@pytest.mark.parametrize("select", SELECT_FUNCTIONS)
def test_only_nulls(select: SelectFunction):
    assert select([None] * 100, 10, natural_order) == []


@pytest.mark.parametrize("select", SELECT_FUNCTIONS)
def test_empty_source(select: SelectFunction):
    assert select([], 10, natural_order) == []


@pytest.mark.parametrize("select", SELECT_FUNCTIONS)
def test_already_sorted(select: SelectFunction):
    values: List[Optional[float]] = [float(i) for i in range(10_000)]
    assert select(values, 10, natural_order)[0] == 0.0
    # Every element displaces the current boundary.
    assert select(values, 10, reverse_order(natural_order))[0] == 9_999.0


@pytest.mark.parametrize("select", SELECT_FUNCTIONS)
def test_k_covers_source(select: SelectFunction):
    values = shuffled_doubles(50)
    values.extend([None, None])
    assert select(values, 500, natural_order) == [float(i) for i in range(50)]


def test_null_arguments():
    with pytest.raises(NullReference):
        select_top_k(None, 3, natural_order)  # type: ignore
    with pytest.raises(NullReference):
        select_top_k([1, 2], 3, None)  # type: ignore
    with pytest.raises(NullReference):
        bounded_select(None, 3, natural_order)  # type: ignore


def test_full_sort_path():
    values = shuffled_doubles(2_000)
    values.append(None)
    result = select_top_k(values, 5_000, natural_order)
    assert result == [float(i) for i in range(2_000)]

    # The full sort path honours the provided order.
    result = select_top_k(values, 5_000, reverse_order(natural_order))
    assert result[0] == 1_999.0
    assert result[-1] == 0.0


def test_iterator_source():
    # Sources without a known length go through the bounded selector.
    result = select_top_k(iter(shuffled_doubles(5_000)), 5_000, natural_order)
    assert len(result) == 5_000
    assert result[0] == 0.0

    generated = (float(i % 13) for i in range(1_000))
    assert select_top_k_natural(generated, 3) == [0.0, 0.0, 0.0]


def test_natural_and_descending_wrappers():
    values = [5, 3, None, 9, 1]
    assert select_top_k_natural(values, 2) == [1, 3]
    assert select_top_k_descending(values, 2) == [9, 5]
    with pytest.raises(InvalidArgument):
        select_top_k_natural(values, -1)
    with pytest.raises(InvalidArgument):
        select_top_k_descending(values, -1)


def test_key_order():
    records = [("a", 3), ("b", 10), ("c", 1), ("d", 7)]
    best = select_top_k(records, 2, by_key(lambda r: r[1], reverse=True))
    assert best == [("b", 10), ("d", 7)]


def test_matches_full_sort():
    prng = random.Random(99)
    for _ in range(20):
        values = [prng.randint(-1_000, 1_000) for _ in range(prng.randint(0, 300))]
        k = prng.randint(0, 40)
        assert bounded_select(values, k, natural_order) == sorted(values)[:k]
