"""Bounded, time-limited execution of external reads."""

import asyncio
import logging
from typing import Awaitable, Iterable, List, Optional, TypeVar

from src.core.constants import DEFAULT_MAX_CONCURRENCY, DEFAULT_QUERY_TIMEOUT
from src.core.errors import DataUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class QueryRunner:
    """Runs oracle and chain state reads under a shared concurrency bound.

    Every read gets the same timeout. A timed out read raises
    DataUnavailable; the runner never retries.
    """

    def __init__(
        self,
        timeout: Optional[float] = DEFAULT_QUERY_TIMEOUT,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.timeout = timeout
        self.max_concurrency = max_concurrency
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def run(self, query: Awaitable[T], label: str = "query") -> T:
        """Await one external read.

        Args:
            query: Awaitable performing the read
            label: Short description used in logs and errors

        Returns:
            The read's result

        Raises:
            DataUnavailable: If the read does not finish within the timeout
        """
        async with self._semaphore:
            try:
                return await asyncio.wait_for(query, timeout=self.timeout)
            except asyncio.TimeoutError as e:
                logger.error(f"{label} timed out after {self.timeout}s")
                raise DataUnavailable(
                    f"{label} timed out after {self.timeout}s", source=label
                ) from e

    async def gather(self, queries: Iterable[Awaitable[T]]) -> List[T]:
        """Await several awaitables concurrently, results in input order.

        The first failure cancels the remaining awaitables and is re-raised.
        """
        tasks = [asyncio.ensure_future(q) for q in queries]
        if not tasks:
            return []
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
