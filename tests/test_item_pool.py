import random

import pytest

from anekbot.cache.item_pool import ItemPool
from anekbot.exceptions import EmptyPoolError


def test_insert_batch_collapses_duplicates() -> None:
    pool = ItemPool(max_capacity=100)

    added = pool.insert_batch(["a", "a", "b"])

    assert added == 2
    assert pool.size() == 2
    assert len(pool) == 2


def test_reinserting_existing_item_keeps_size() -> None:
    pool = ItemPool(max_capacity=100)
    pool.insert_batch(["a", "b"])

    assert pool.insert_batch(["b", "a"]) == 0
    assert pool.size() == 2


def test_size_never_exceeds_capacity() -> None:
    pool = ItemPool(max_capacity=10, rng=random.Random(1))

    for start in range(0, 200, 7):
        pool.insert_batch([f"item-{n}" for n in range(start, start + 13)])
        assert pool.size() <= 10


def test_eviction_removes_oldest_items_first() -> None:
    pool = ItemPool(max_capacity=3)
    pool.insert_batch(["first", "second", "third"])

    pool.insert_batch(["fourth", "fifth"])

    assert pool.snapshot() == ["third", "fourth", "fifth"]
    assert "first" not in pool
    assert "second" not in pool


def test_duplicate_does_not_refresh_age() -> None:
    pool = ItemPool(max_capacity=2)
    pool.insert_batch(["old", "new"])
    pool.insert_batch(["old"])

    pool.insert_batch(["newest"])

    assert pool.snapshot() == ["new", "newest"]


def test_full_pool_evicts_exactly_the_overflow() -> None:
    capacity = 100_000
    pool = ItemPool(max_capacity=capacity)
    original = [f"joke {n}" for n in range(capacity)]
    pool.insert_batch(original)

    pool.insert_batch([f"fresh {n}" for n in range(5)])

    assert pool.size() == capacity
    removed = [item for item in original if item not in pool]
    assert removed == original[:5]
    assert all(f"fresh {n}" in pool for n in range(5))


def test_evicted_item_can_return() -> None:
    pool = ItemPool(max_capacity=2)
    pool.insert_batch(["a", "b", "c"])
    assert "a" not in pool

    assert pool.insert_batch(["a"]) == 1
    assert pool.snapshot() == ["c", "a"]


def test_sequence_compaction_keeps_contents() -> None:
    pool = ItemPool(max_capacity=5)
    for n in range(5000):
        pool.insert_batch([f"item-{n}"])

    assert pool.snapshot() == [f"item-{n}" for n in range(4995, 5000)]
    assert pool.size() == 5


def test_sample_one_returns_member() -> None:
    pool = ItemPool(max_capacity=100, rng=random.Random(7))
    items = {"x", "y", "z"}
    pool.insert_batch(sorted(items))

    for _ in range(1000):
        assert pool.sample_one() in items


def test_sample_one_eventually_hits_every_item() -> None:
    pool = ItemPool(max_capacity=100, rng=random.Random(3))
    pool.insert_batch(["x", "y", "z"])

    seen = {pool.sample_one() for _ in range(500)}

    assert seen == {"x", "y", "z"}


def test_sample_one_never_returns_evicted_item() -> None:
    pool = ItemPool(max_capacity=2, rng=random.Random(5))
    pool.insert_batch(["gone", "kept-1", "kept-2"])

    for _ in range(200):
        assert pool.sample_one() != "gone"


def test_sample_one_on_empty_pool_raises_empty_pool() -> None:
    pool = ItemPool()

    with pytest.raises(EmptyPoolError):
        pool.sample_one()


def test_sample_one_after_clear_raises_empty_pool() -> None:
    pool = ItemPool()
    pool.insert_batch(["a"])
    pool.clear()

    with pytest.raises(EmptyPoolError):
        pool.sample_one()


def test_sample_distinct_with_small_pool_returns_everything() -> None:
    pool = ItemPool(max_capacity=100)
    pool.insert_batch(["a", "b", "c"])

    result = pool.sample_distinct(10)

    assert sorted(result) == ["a", "b", "c"]


def test_sample_distinct_returns_distinct_members() -> None:
    pool = ItemPool(max_capacity=1000, rng=random.Random(11))
    items = [f"item-{n}" for n in range(50)]
    pool.insert_batch(items)

    result = pool.sample_distinct(10)

    assert len(result) == 10
    assert len(set(result)) == 10
    assert set(result) <= set(items)


def test_sample_distinct_stops_after_capped_attempts() -> None:
    class StuckRandom(random.Random):
        def randrange(self, start, stop=None, step=1):  # type: ignore[override]
            return start

    pool = ItemPool(max_capacity=100, rng=StuckRandom())
    pool.insert_batch([f"item-{n}" for n in range(20)])

    result = pool.sample_distinct(5)

    assert result == ["item-0"]


@pytest.mark.parametrize("k", [0, -3])
def test_sample_distinct_with_non_positive_k_is_empty(k: int) -> None:
    pool = ItemPool()
    pool.insert_batch(["a"])

    assert pool.sample_distinct(k) == []


def test_sample_distinct_on_empty_pool_is_empty() -> None:
    assert ItemPool().sample_distinct(10) == []


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        ItemPool(max_capacity=0)


def test_insert_batch_skips_ineligible_texts() -> None:
    pool = ItemPool(max_capacity=100)

    added = pool.insert_batch(["", "   ", "ping @everyone", "a real joke"])

    assert added == 1
    assert pool.snapshot() == ["a real joke"]
