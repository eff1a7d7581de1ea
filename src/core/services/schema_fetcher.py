"""Batched schema fetching.

Fetching every schema at once risks API rate limiting, so requests are
issued in fixed-size chunks: all requests of a chunk are in flight together
and the next chunk starts only once the previous one has fully completed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterator, Sequence, TypeVar

from core.domain.models import ModelDescriptor, SchemaPair
from core.interfaces.model_source import ModelSource

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of at most `size` items, in order."""

    if size < 1:
        raise ValueError(f"batch size must be >= 1, got {size}")
    for start in range(0, len(items), size):
        yield items[start : start + size]


async def fetch_schemas(
    source: ModelSource,
    models: Sequence[ModelDescriptor],
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    progress: Callable[[int, int], None] | None = None,
) -> dict[str, SchemaPair]:
    """Fetch the schema of every model, `batch_size` requests at a time.

    Every request of a chunk is awaited before any failure is raised, and the
    first failure in input order aborts the whole fetch. The returned mapping
    follows input order.
    """

    schemas: dict[str, SchemaPair] = {}
    total = len(models)
    done = 0

    for index, chunk in enumerate(chunked(models, batch_size), start=1):
        logger.debug("Fetching schema chunk %d (%d models)", index, len(chunk))
        results = await asyncio.gather(
            *(source.fetch_schema(model.name) for model in chunk),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

        for model, schema in zip(chunk, results):
            schemas[model.name] = schema

        done += len(chunk)
        if progress:
            progress(done, total)

    return schemas
