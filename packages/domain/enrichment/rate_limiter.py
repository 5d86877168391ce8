"""
Remote call limiter - bounded concurrency plus a fixed pause per call

The inference API rate-limits aggressively. Every remote call takes a slot;
the slot is held for the call and then for `min_interval` seconds more, so
with max_concurrency=1 calls are spaced at least min_interval apart no
matter how fast the rest of the pipeline runs.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional

Sleep = Callable[[float], Awaitable[None]]


class RemoteCallLimiter:
    """
    Usage:
        limiter = RemoteCallLimiter(max_concurrency=1, min_interval=0.1)
        async with limiter.slot():
            response = await client.analyze_product(name, description)
    """

    def __init__(
        self,
        max_concurrency: int = 1,
        min_interval: float = 0.1,
        sleep: Optional[Sleep] = None,
    ):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        if min_interval < 0:
            raise ValueError(f"min_interval must be >= 0, got {min_interval}")

        self.max_concurrency = max_concurrency
        self.min_interval = min_interval
        self._sleep = sleep or asyncio.sleep
        self._semaphore: Optional[asyncio.Semaphore] = None

    @property
    def semaphore(self) -> asyncio.Semaphore:
        # Created lazily so it binds to the running event loop
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.max_concurrency)
        return self._semaphore

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold a remote-call slot; the pause runs even if the call fails"""
        async with self.semaphore:
            try:
                yield
            finally:
                if self.min_interval > 0:
                    await self._sleep(self.min_interval)
