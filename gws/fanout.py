"""
Concurrent per-item detail fetches with an ordered join.

List endpoints return bare references (ids); the summary fields need one more
call per reference. Those calls run on worker threads via asyncio.to_thread and
are joined with asyncio.gather, which keeps results in input order no matter
which call finishes first.

Failure is all-or-nothing: gather waits for every call, then the first failed
reference (in input order) is raised as AggregationError.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Sequence, TypeVar

from .errors import AggregationError

logger = logging.getLogger(__name__)

R = TypeVar("R")
T = TypeVar("T")


async def gather_ordered(
    fetch: Callable[[R], T],
    refs: Sequence[R],
    describe: Callable[[R], str] = str,
) -> list[T]:
    """Run fetch(ref) for every ref concurrently; return results in refs order."""
    if not refs:
        return []

    logger.debug("Fanning out %d fetches", len(refs))
    results = await asyncio.gather(
        *[asyncio.to_thread(fetch, ref) for ref in refs],
        return_exceptions=True,
    )

    for ref, result in zip(refs, results):
        if isinstance(result, BaseException):
            raise AggregationError(describe(ref), result) from result
    return list(results)


def fan_out(
    fetch: Callable[[R], T],
    refs: Sequence[R],
    describe: Callable[[R], str] = str,
) -> list[T]:
    """Synchronous entry point around gather_ordered()."""
    return asyncio.run(gather_ordered(fetch, refs, describe))
