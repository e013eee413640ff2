"""Structured concurrency helpers."""

import asyncio
from typing import Any, Awaitable, List


async def gather_all(*aws: Awaitable[Any]) -> List[Any]:
    """
    Run awaitables concurrently and wait for every one of them to settle.

    Siblings of a failing branch are not cancelled. Once all branches have
    finished, the first failure (in argument order) is raised; otherwise the
    results are returned in argument order.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)
