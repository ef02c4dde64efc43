"""Lifespan state and the manager that owns its creation and teardown.

The lifespan state is the one object deliberately shared, mutable, across every
request. It is created once per server process, before the first request is
dispatched, and released after the last request completes:

```
    async def on_startup(state: LifespanState) -> None:
        state.db = await create_db_pool()

    async def on_shutdown(state: LifespanState) -> None:
        await state.db.close()

    manager = LifecycleManager()
    async with manager.run(on_startup, on_shutdown) as state:
        factory.initialize(identity, state)
        ...
```

No locking is performed on the state. Whatever a startup hook stores there must
bring its own synchronization if handlers mutate it concurrently.
"""

from __future__ import annotations

import inspect
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator, MutableMapping
from contextlib import asynccontextmanager
from typing import Any

import anyio

from mcp_context.utilities.logging import get_logger

logger = get_logger(__name__)

LifespanHook = Callable[["LifespanState"], Awaitable[None] | None]


class LifespanState(MutableMapping[str, Any]):
    """Opaque mutable container with both attribute and item access.

    ``state.counter`` and ``state["counter"]`` refer to the same entry.
    """

    __slots__ = ("_values",)

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        object.__setattr__(self, "_values", dict(values or {}))

    def __getattr__(self, name: str) -> Any:
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(f"Lifespan state has no entry {name!r}") from None

    def __setattr__(self, name: str, value: Any) -> None:
        self._values[name] = value

    def __delattr__(self, name: str) -> None:
        try:
            del self._values[name]
        except KeyError:
            raise AttributeError(f"Lifespan state has no entry {name!r}") from None

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._values[key] = value

    def __delitem__(self, key: str) -> None:
        del self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"LifespanState({self._values!r})"


async def _run_hook(hook: LifespanHook, state: LifespanState) -> None:
    result = hook(state)
    if inspect.isawaitable(result):
        await result


class LifecycleManager:
    """Runs the optional startup and shutdown hooks around the lifespan state.

    Hook failures are logged, never raised: a failing startup hook still yields a
    usable (possibly partially populated) state so the server stays reachable for
    diagnostics, and shutdown always completes.
    """

    async def start(self, on_startup: LifespanHook | None = None) -> LifespanState:
        state = LifespanState()
        if on_startup is None:
            return state
        try:
            await _run_hook(on_startup, state)
        except Exception:
            logger.exception("Lifespan startup hook failed; continuing with the state it left behind")
        else:
            logger.debug("Lifespan state initialized with %d entries", len(state))
        return state

    async def stop(self, state: LifespanState, on_shutdown: LifespanHook | None = None) -> None:
        if on_shutdown is None:
            return
        try:
            await _run_hook(on_shutdown, state)
        except Exception:
            logger.exception("Lifespan shutdown hook failed")
        else:
            logger.debug("Lifespan state released")

    @asynccontextmanager
    async def run(
        self,
        on_startup: LifespanHook | None = None,
        on_shutdown: LifespanHook | None = None,
    ) -> AsyncIterator[LifespanState]:
        """Start the lifespan, yield the state, and stop it on exit.

        Shutdown runs shielded from cancellation so an abrupt exit still releases
        what the startup hook acquired.
        """
        state = await self.start(on_startup)
        try:
            yield state
        finally:
            with anyio.CancelScope(shield=True):
                await self.stop(state, on_shutdown)
