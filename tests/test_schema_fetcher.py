"""Tests for batched schema fetching."""

from __future__ import annotations

import math

import pytest

from conftest import FakeModelSource, make_model
from core.domain.errors import TransportError
from core.services.schema_fetcher import chunked, fetch_schemas


class TestChunked:
    @pytest.mark.parametrize("count,size", [(0, 10), (1, 10), (10, 10), (25, 10), (7, 3), (5, 1)])
    def test_partitions_in_order(self, count, size):
        items = list(range(count))
        chunks = [list(c) for c in chunked(items, size)]
        assert len(chunks) == math.ceil(count / size)
        assert [i for chunk in chunks for i in chunk] == items
        assert all(1 <= len(chunk) <= size for chunk in chunks)

    def test_rejects_zero_size(self):
        with pytest.raises(ValueError):
            list(chunked([1, 2], 0))


class TestFetchSchemas:
    @pytest.mark.asyncio
    async def test_twenty_five_models_in_three_chunks(self):
        models = [make_model(f"@cf/vendor/model-{i}") for i in range(25)]
        source = FakeModelSource(models)
        progress: list[tuple[int, int]] = []

        schemas = await fetch_schemas(source, models, batch_size=10, progress=lambda d, t: progress.append((d, t)))

        assert progress == [(10, 25), (20, 25), (25, 25)]
        assert list(schemas) == [m.name for m in models]
        assert source.max_in_flight == 10

    @pytest.mark.asyncio
    async def test_chunks_run_sequentially(self):
        models = [make_model(f"@cf/vendor/model-{i}") for i in range(6)]
        source = FakeModelSource(models)

        await fetch_schemas(source, models, batch_size=3)

        first_chunk = {m.name for m in models[:3]}
        # Every request of the first chunk completes before the second chunk starts.
        assert set(source.completed[:3]) == first_chunk
        assert set(source.requested[:3]) == first_chunk
        assert source.max_in_flight == 3

    @pytest.mark.asyncio
    async def test_failure_aborts_after_chunk_completes(self):
        models = [make_model(f"@cf/vendor/model-{i}") for i in range(5)]
        source = FakeModelSource(models, failing={"@cf/vendor/model-1"})

        with pytest.raises(TransportError):
            await fetch_schemas(source, models, batch_size=3)

        # The whole first chunk was awaited, the second never started.
        assert sorted(source.completed) == sorted(m.name for m in models[:3])
        assert "@cf/vendor/model-3" not in source.requested

    @pytest.mark.asyncio
    async def test_empty_input(self):
        source = FakeModelSource([])
        assert await fetch_schemas(source, []) == {}
        assert source.requested == []
