import pytest

from mcp_context import CapabilityNegotiator, ContextFactory, ServerCapabilityFlags, ServerIdentity
from mcp_context.types import LATEST_PROTOCOL_VERSION, InitializeResult, PeerCapabilities


def _initialize_params(capabilities=None, version="2025-06-18", client="test-client"):
    return {
        "protocolVersion": version,
        "capabilities": capabilities if capabilities is not None else {},
        "clientInfo": {"name": client, "version": "0.0.1"},
    }


def test_handshake_records_peer_capabilities(factory: ContextFactory):
    negotiator = CapabilityNegotiator(factory)

    result = negotiator.handle_initialize(_initialize_params({"sampling": {}, "roots": {"listChanged": True}}))

    assert isinstance(result, InitializeResult)
    assert negotiator.negotiated
    assert negotiator.peer_info is not None and negotiator.peer_info.name == "test-client"
    assert factory.session.supports_sampling
    assert factory.session.supports_roots
    assert negotiator.peer_capabilities == factory.session.peer_capabilities


def test_handshake_without_sampling(factory: ContextFactory):
    CapabilityNegotiator(factory).handle_initialize(_initialize_params({}))

    assert factory.session.peer_capabilities == PeerCapabilities()
    assert not factory.session.supports_sampling


def test_initialize_result_payload():
    identity = ServerIdentity(
        name="demo",
        version="2.0.0",
        title="Demo",
        instructions="Call tools politely",
        capabilities=ServerCapabilityFlags(prompts=True, list_changed=True),
    )
    factory = ContextFactory()
    factory.initialize(identity)

    result = CapabilityNegotiator(factory).handle_initialize(_initialize_params())
    payload = result.model_dump(by_alias=True, exclude_none=True)

    assert payload == {
        "protocolVersion": "2025-06-18",
        "capabilities": {"logging": {}, "tools": {"listChanged": True}, "prompts": {"listChanged": True}},
        "serverInfo": {"name": "demo", "version": "2.0.0", "title": "Demo"},
        "instructions": "Call tools politely",
    }


def test_unsupported_version_falls_back_to_latest(factory: ContextFactory):
    negotiator = CapabilityNegotiator(factory)
    result = negotiator.handle_initialize(_initialize_params(version="1999-01-01"))

    assert result.protocol_version == LATEST_PROTOCOL_VERSION
    assert negotiator.protocol_version == LATEST_PROTOCOL_VERSION


def test_repeated_initialize_keeps_first_snapshot(factory: ContextFactory, caplog: pytest.LogCaptureFixture):
    negotiator = CapabilityNegotiator(factory)
    negotiator.handle_initialize(_initialize_params({"sampling": {}}))
    session = factory.session

    negotiator.handle_initialize(_initialize_params({}))

    assert factory.session is session
    assert factory.session.supports_sampling
    assert "Repeated initialize" in caplog.text


def test_reset_allows_new_handshake(factory: ContextFactory):
    negotiator = CapabilityNegotiator(factory)
    negotiator.handle_initialize(_initialize_params({"sampling": {}}))
    before = factory.build_context()

    negotiator.reset()
    assert not negotiator.negotiated
    negotiator.handle_initialize(_initialize_params({}))
    after = factory.build_context()

    assert before.session.supports_sampling
    assert not after.session.supports_sampling


def test_initialize_before_factory_initialized_fails():
    negotiator = CapabilityNegotiator(ContextFactory())

    with pytest.raises(RuntimeError, match="initialize"):
        negotiator.handle_initialize(_initialize_params({"sampling": {}}))
    assert not negotiator.negotiated
    assert negotiator.peer_capabilities is None


def test_handshake_with_boolean_capabilities(factory: ContextFactory):
    CapabilityNegotiator(factory).handle_initialize(_initialize_params({"sampling": True, "elicitation": False}))

    assert factory.session.supports_sampling
    assert not factory.session.supports_elicitation
