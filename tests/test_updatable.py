"""
test_updatable.py - UpdatableStats loading and subscription.
"""

import pytest

from errors import MissingLocationError
from sources import UpdatableStats


class TestUpdatableStats:

    def test_unknown_location_fails_fast(self, store):
        with pytest.raises(MissingLocationError):
            UpdatableStats("Atlantis", store)

    async def test_load_notifies_subscribers(self, store, endpoint, payload):
        endpoint.set("NY", payload([1, 2, 4], [10, 20, 35]))
        updatable = UpdatableStats("NY", store)
        received = []
        updatable.subscribe(received.append)

        stat = await updatable.load()

        assert stat is updatable.stat
        assert received == [stat]
        assert stat.caption == "New York"
        assert stat.deaths_delta == (1, 2)

    def test_load_sync(self, store, endpoint, payload):
        endpoint.set("France", payload([1, 2], [3, 4]))
        updatable = UpdatableStats("France", store)
        assert updatable.load_sync().caption == "France"

    def test_failed_fetch_keeps_previous_stats(self, store, endpoint, payload):
        endpoint.set("NY", payload([1, 2], [10, 20]))
        updatable = UpdatableStats("NY", store)
        first = updatable.load_sync()

        store.clear_cache(include_disk=True)
        endpoint.set("NY", status=500, body="down")
        received = []
        updatable.subscribe(received.append)

        assert updatable.load_sync() is None
        assert updatable.stat is first
        assert received == []

    def test_insufficient_data_keeps_previous_stats(self, store, endpoint, payload):
        endpoint.set("NY", payload([1], [10]))
        updatable = UpdatableStats("NY", store)
        assert updatable.load_sync() is None
        assert updatable.stat is None

    def test_load_always_refetches(self, store, endpoint, payload):
        endpoint.set("NY", payload([1, 2], [10, 20]))
        updatable = UpdatableStats("NY", store)
        updatable.load_sync()
        updatable.load_sync()
        assert len(endpoint.requests) == 2

    def test_failing_subscriber_does_not_block_others(self, store, endpoint, payload, caplog):
        endpoint.set("NY", payload([1, 2], [10, 20]))
        updatable = UpdatableStats("NY", store)

        def broken(stat):
            raise RuntimeError("render failed")

        received = []
        updatable.subscribe(broken)
        updatable.subscribe(received.append)

        with caplog.at_level("ERROR", logger="sources.updatable"):
            stat = updatable.load_sync()

        assert received == [stat]
        assert updatable.stat is stat
        assert "subscriber for NY failed" in caplog.text

    def test_unsubscribe(self, store, endpoint, payload):
        endpoint.set("NY", payload([1, 2], [10, 20]))
        updatable = UpdatableStats("NY", store)
        received = []
        unsubscribe = updatable.subscribe(received.append)
        unsubscribe()
        updatable.load_sync()
        assert received == []
