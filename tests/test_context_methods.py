import pytest

from mcp_context import CapabilityMissingError, ContextFactory, LifespanState, ServerIdentity
from mcp_context.types import ElicitResult

pytestmark = pytest.mark.anyio


@pytest.mark.parametrize("level", ["debug", "info", "notice", "warning", "error"])
async def test_log_shortcuts(factory: ContextFactory, peer, level: str):
    context = factory.build_context()

    await getattr(context, level)(f"{level} message")

    sent = peer.notifications[0]
    assert sent.params == {"level": level, "data": f"{level} message", "logger": "demo"}
    assert sent.related_request_id == context.request_id


async def test_log_with_custom_logger_name(factory: ContextFactory, peer):
    context = factory.build_context()
    await context.log("critical", "on fire", logger_name="thermals")
    assert peer.notifications[0].params["logger"] == "thermals"


async def test_report_progress_without_token_is_noop(factory: ContextFactory, peer):
    context = factory.build_context()
    await context.report_progress(1, 2)
    assert peer.notifications == []


async def test_report_progress_with_token(factory: ContextFactory, peer):
    context = factory.build_context({"progressToken": 99})

    await context.report_progress(1, 2, "step 1")

    sent = peer.notifications[0]
    assert sent.method == "notifications/progress"
    assert sent.params == {"progressToken": 99, "progress": 1.0, "total": 2.0, "message": "step 1"}
    assert sent.related_request_id == context.request_id


async def test_request_completion_tags_request_id(factory: ContextFactory, peer):
    factory.record_peer_capabilities({"sampling": {}})
    peer.response = {"role": "assistant", "content": {"type": "text", "text": "hi"}, "model": "m"}
    context = factory.build_context()

    await context.request_completion([{"role": "user", "content": {"type": "text", "text": "hello"}}])

    assert peer.requests[0].related_request_id == context.request_id


async def test_request_completion_without_capability(factory: ContextFactory, peer):
    context = factory.build_context()

    with pytest.raises(CapabilityMissingError):
        await context.request_completion([{"role": "user", "content": {"type": "text", "text": "hello"}}])
    assert peer.requests == []


async def test_context_exposes_identity_settings_and_state():
    state = LifespanState({"pool": "db-pool"})
    identity = ServerIdentity(name="demo", version="1.0.0", settings={"region": "eu"})
    factory = ContextFactory()
    factory.initialize(identity, state)

    context = factory.build_context()

    assert context.identity.settings["region"] == "eu"
    assert context.lifespan_state is state
    assert context.lifespan_state.pool == "db-pool"


async def test_elicit_tags_request_id(factory: ContextFactory, peer):
    factory.record_peer_capabilities({"elicitation": {}})
    peer.response = {"action": "accept", "content": {"confirm": True}}
    context = factory.build_context()

    result = await context.elicit("Proceed?", {"type": "object", "properties": {"confirm": {"type": "boolean"}}})

    assert isinstance(result, ElicitResult)
    assert result.content == {"confirm": True}
    assert peer.requests[0].method == "elicitation/create"
    assert peer.requests[0].related_request_id == context.request_id


async def test_elicit_without_capability(factory: ContextFactory, peer):
    context = factory.build_context()

    with pytest.raises(CapabilityMissingError):
        await context.elicit("Proceed?", {"type": "object", "properties": {}})
    assert peer.requests == []
