"""Cooperative cancellation for in-flight reads."""

import asyncio

import structlog

log = structlog.stdlib.get_logger()


class CancellationToken:
    """One-shot handle that signals an operation to stop.

    The token is checked twice by its consumers: while the read is in flight
    (to abort the transport) and again when the outcome is delivered, so a
    response that arrives after ``cancel()`` is still suppressed.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        """Whether ``cancel()`` has been called."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Trigger the token. Calling it again is a no-op."""
        if self._event.is_set():
            return
        self._event.set()
        log.debug("Cancellation token triggered", token=self.name)

    async def wait(self) -> None:
        """Block until the token is triggered."""
        await self._event.wait()

    def __repr__(self) -> str:
        return f"CancellationToken(name={self.name!r}, cancelled={self.cancelled})"
