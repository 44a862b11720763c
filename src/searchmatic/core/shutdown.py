"""In-flight request accounting so shutdown can wait for open requests."""

import asyncio

from src.searchmatic.core.logging import get_logger

logger = get_logger(__name__)


class InFlightRequests:
    """Counts open requests and lets shutdown wait until they finish."""

    def __init__(self) -> None:
        self._count = 0
        self._draining = False
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def count(self) -> int:
        return self._count

    @property
    def draining(self) -> bool:
        return self._draining

    def enter(self) -> None:
        self._count += 1
        self._idle.clear()

    def leave(self) -> None:
        self._count = max(self._count - 1, 0)
        if self._count == 0:
            self._idle.set()

    async def drain(self, timeout: float) -> bool:
        """Stop accepting work and wait up to ``timeout`` seconds for open requests.

        Returns True when every request finished in time.
        """
        self._draining = True
        if self._count:
            logger.info("Waiting for in-flight requests", in_flight=self._count)
        try:
            await asyncio.wait_for(self._idle.wait(), timeout=timeout)
        except TimeoutError:
            logger.warning(
                "Shutdown grace period elapsed", timeout=timeout, in_flight=self._count
            )
            return False
        return True

    def reset(self) -> None:
        self._count = 0
        self._draining = False
        self._idle = asyncio.Event()
        self._idle.set()


in_flight = InFlightRequests()
