"""
Ordered startup/shutdown of the subsystems the process depends on.

Each subsystem registers a ``start`` coroutine function that returns its own
``stop`` coroutine function (``database.connect`` is the canonical example).
Subsystems start in registration order and stop in reverse order, so the
sequence is fixed and readable at the registration site.
"""
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

Stop = Callable[[], Awaitable[None]]
Start = Callable[[], Awaitable[Stop]]


class LifecycleError(RuntimeError):
    """Raised when a subsystem fails to start."""

    def __init__(self, name: str, cause: BaseException) -> None:
        super().__init__(f"{name} failed: {cause}")
        self.name = name


class Lifecycle:
    def __init__(self) -> None:
        self._entries: list[tuple[str, Start]] = []
        self._started: list[tuple[str, Stop]] = []

    def register(self, name: str, start: Start) -> None:
        self._entries.append((name, start))

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._entries]

    async def start(self) -> None:
        """
        Start every registered subsystem in order.

        If one fails, the subsystems already started are stopped again
        before ``LifecycleError`` is raised.
        """
        for name, start in self._entries:
            try:
                stop = await start()
            except Exception as exc:
                logger.error("Startup of %s failed: %s", name, exc)
                errors = await self.shutdown()
                for err in errors:
                    logger.error("Cleanup after failed startup: %s", err)
                raise LifecycleError(name, exc) from exc
            self._started.append((name, stop))
            logger.info("Started %s", name)

    async def shutdown(self) -> list[Exception]:
        """Stop started subsystems in reverse order and return any errors."""
        errors: list[Exception] = []
        while self._started:
            name, stop = self._started.pop()
            try:
                await stop()
            except Exception as exc:
                errors.append(LifecycleError(name, exc))
            else:
                logger.info("Stopped %s", name)
        return errors
