import random

import pytest

from anekbot.cache.item_pool import ItemPool
from anekbot.crawler.source_crawler import SourceCrawler
from anekbot.datatypes.content_datatypes import FetchedMessage, SourceState
from anekbot.exceptions import SourceConfigurationError, TransientFetchError

from fakes import FakeSourceClient


@pytest.mark.asyncio
async def test_one_cycle_adds_only_filtered_messages() -> None:
    client = FakeSourceClient({"jokes": 50})
    client.responses["jokes"] = [
        FetchedMessage("a horse walks into a bar"),
        None,
        FetchedMessage("ping @everyone"),
        FetchedMessage("two fish in a tank"),
        None,
        FetchedMessage("a priest and a rabbi"),
        None,
        FetchedMessage("contact @admin"),
        None,
        FetchedMessage("knock knock"),
    ]
    pool = ItemPool(max_capacity=1000)
    pool.insert_batch(["already here"])
    crawler = SourceCrawler(client, pool, batch_size=10, rng=random.Random(0))
    state = SourceState("jokes")

    added = await crawler.crawl(state)

    assert added == 4
    assert pool.size() == 5
    assert state.items_added == 4
    assert state.runs == 1


@pytest.mark.asyncio
async def test_positions_stay_below_extent() -> None:
    client = FakeSourceClient({"jokes": 50})
    crawler = SourceCrawler(client, ItemPool(), batch_size=100, rng=random.Random(4))

    await crawler.crawl(SourceState("jokes"))

    (source_id, positions), = client.fetch_calls
    assert source_id == "jokes"
    assert len(positions) == 100
    assert all(0 <= position < 50 for position in positions)


@pytest.mark.asyncio
async def test_event_mode_queries_extent_once_and_caches_handle() -> None:
    client = FakeSourceClient({"jokes": 10})
    crawler = SourceCrawler(client, ItemPool(), batch_size=5, extent_refresh="event")
    state = SourceState("jokes")

    await crawler.crawl(state)
    state.record_new_message()
    await crawler.crawl(state)

    assert client.resolve_calls == ["jokes"]
    assert client.extent_calls == ["jokes"]
    assert state.extent == 11
    assert state.handle == "handle:jokes"


@pytest.mark.asyncio
async def test_poll_mode_refreshes_extent_every_run() -> None:
    client = FakeSourceClient({"jokes": 10})
    crawler = SourceCrawler(client, ItemPool(), batch_size=5, extent_refresh="poll")
    state = SourceState("jokes")

    await crawler.crawl(state)
    client.extents["jokes"] = 30
    await crawler.crawl(state)

    assert client.extent_calls == ["jokes", "jokes"]
    assert state.extent == 30


@pytest.mark.asyncio
async def test_empty_source_skips_fetch() -> None:
    client = FakeSourceClient({"quiet": 0})
    crawler = SourceCrawler(client, ItemPool(), batch_size=5)

    added = await crawler.crawl(SourceState("quiet"))

    assert added == 0
    assert client.fetch_calls == []


@pytest.mark.asyncio
async def test_unaddressable_source_raises_configuration_error() -> None:
    crawler = SourceCrawler(FakeSourceClient(), ItemPool(), batch_size=5)

    with pytest.raises(SourceConfigurationError):
        await crawler.crawl(SourceState("group-chat"))


@pytest.mark.asyncio
async def test_transient_fetch_error_propagates_without_inserting() -> None:
    client = FakeSourceClient({"jokes": 10})
    client.errors["jokes"] = TransientFetchError("rate limited")
    pool = ItemPool()
    crawler = SourceCrawler(client, pool, batch_size=5)

    with pytest.raises(TransientFetchError):
        await crawler.crawl(SourceState("jokes"))

    assert pool.size() == 0


@pytest.mark.asyncio
async def test_crawl_respects_pool_capacity() -> None:
    client = FakeSourceClient({"jokes": 10_000})
    pool = ItemPool(max_capacity=20)
    crawler = SourceCrawler(client, pool, batch_size=100, rng=random.Random(9))

    await crawler.crawl(SourceState("jokes"))

    assert pool.size() == 20


def test_batch_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        SourceCrawler(FakeSourceClient(), ItemPool(), batch_size=0)
