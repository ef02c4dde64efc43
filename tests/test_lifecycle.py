import anyio
import pytest

from mcp_context import ContextServer, LifecycleManager, LifespanState, ServerIdentity

pytestmark = pytest.mark.anyio


def test_state_attribute_and_item_access_share_entries():
    state = LifespanState()
    state.counter = 1
    assert state["counter"] == 1

    state["name"] = "db"
    assert state.name == "db"
    assert dict(state) == {"counter": 1, "name": "db"}

    del state.counter
    assert "counter" not in state
    with pytest.raises(AttributeError, match="counter"):
        state.counter


def test_state_missing_item_raises_key_error():
    with pytest.raises(KeyError):
        LifespanState()["missing"]


async def test_start_without_hook_returns_empty_state():
    state = await LifecycleManager().start()
    assert len(state) == 0


async def test_sync_and_async_hooks_are_supported():
    manager = LifecycleManager()

    def sync_startup(state):
        state.mode = "sync"

    async def async_shutdown(state):
        state.closed = True

    state = await manager.start(sync_startup)
    await manager.stop(state, async_shutdown)
    assert state.mode == "sync"
    assert state.closed is True


async def test_failing_startup_hook_still_yields_state(caplog: pytest.LogCaptureFixture):
    async def on_startup(state):
        state.partial = True
        raise ConnectionError("database unreachable")

    state = await LifecycleManager().start(on_startup)

    assert state.partial is True
    assert "Lifespan startup hook failed" in caplog.text


async def test_failing_shutdown_hook_is_logged_not_raised(caplog: pytest.LogCaptureFixture):
    async def on_shutdown(state):
        raise RuntimeError("close failed")

    manager = LifecycleManager()
    await manager.stop(LifespanState(), on_shutdown)

    assert "Lifespan shutdown hook failed" in caplog.text
    assert "close failed" in caplog.text


async def test_run_releases_state_on_exit():
    events: list[str] = []

    async def on_startup(state):
        events.append("startup")
        state.resource = "open"

    async def on_shutdown(state):
        events.append(f"shutdown:{state.resource}")

    async with LifecycleManager().run(on_startup, on_shutdown) as state:
        events.append("serving")
        assert state.resource == "open"

    assert events == ["startup", "serving", "shutdown:open"]


async def test_run_releases_state_when_body_raises():
    released: list[bool] = []

    async def on_shutdown(state):
        released.append(True)

    with pytest.raises(ValueError):
        async with LifecycleManager().run(on_shutdown=on_shutdown):
            raise ValueError("boom")

    assert released == [True]


async def test_run_shutdown_completes_under_cancellation():
    released: list[bool] = []

    async def on_shutdown(state):
        await anyio.sleep(0)
        released.append(True)

    with anyio.CancelScope() as scope:
        async with LifecycleManager().run(on_shutdown=on_shutdown):
            scope.cancel()
            await anyio.sleep(1)

    assert released == [True]


async def test_counter_shared_across_requests():
    shut_down: list[int] = []

    async def on_startup(state):
        state.counter = 0

    async def on_shutdown(state):
        shut_down.append(state.counter)

    async def increment(args, context):
        context.lifespan_state.counter += 1
        return context.lifespan_state.counter

    server = ContextServer(
        ServerIdentity(name="counter", version="0.1.0"),
        on_startup=on_startup,
        on_shutdown=on_shutdown,
    )

    async with server.run() as state:
        results = [await server.call(increment, {}) for _ in range(3)]
        assert state.counter == 3

    assert results == [1, 2, 3]
    assert shut_down == [3]


async def test_counter_shared_across_concurrent_requests():
    async def on_startup(state):
        state.counter = 0

    async def increment(args, context):
        await anyio.sleep(0)
        context.lifespan_state.counter += 1

    server = ContextServer(ServerIdentity(name="counter", version="0.1.0"), on_startup=on_startup)

    async with server.run() as state:
        async with anyio.create_task_group() as tg:
            for _ in range(3):
                tg.start_soon(server.call, increment, {})

    assert state.counter == 3


async def test_throwing_shutdown_hook_does_not_break_server_exit(caplog: pytest.LogCaptureFixture):
    async def on_shutdown(state):
        raise RuntimeError("cleanup exploded")

    server = ContextServer(ServerIdentity(name="demo", version="1.0.0"), on_shutdown=on_shutdown)

    async with server.run():
        pass

    assert not server.running
    assert "Lifespan shutdown hook failed" in caplog.text
