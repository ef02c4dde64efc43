import dataclasses

import pytest

from mcp_context import ServerCapabilityFlags, ServerIdentity
from mcp_context.types import Icon


def test_identity_is_immutable():
    identity = ServerIdentity(name="demo", version="1.0.0", settings={"region": "eu"})

    with pytest.raises(dataclasses.FrozenInstanceError):
        identity.name = "other"  # type: ignore[misc]
    with pytest.raises(TypeError):
        identity.settings["region"] = "us"  # type: ignore[index]


def test_identity_copies_settings():
    source = {"region": "eu"}
    identity = ServerIdentity(name="demo", version="1.0.0", settings=source)
    source["region"] = "us"
    assert identity.settings["region"] == "eu"


@pytest.mark.parametrize(("name", "version"), [("", "1.0.0"), ("demo", "")])
def test_identity_requires_name_and_version(name: str, version: str):
    with pytest.raises(ValueError):
        ServerIdentity(name=name, version=version)


def test_implementation_payload():
    identity = ServerIdentity(
        name="demo",
        version="1.0.0",
        description="A demo server",
        website_url="https://example.com",
        icons=[Icon(src="https://example.com/icon.png", mime_type="image/png")],
    )

    payload = identity.implementation().model_dump(by_alias=True, exclude_none=True)

    assert payload == {
        "name": "demo",
        "version": "1.0.0",
        "description": "A demo server",
        "websiteUrl": "https://example.com",
        "icons": [{"src": "https://example.com/icon.png", "mimeType": "image/png"}],
    }
    assert isinstance(identity.icons, tuple)


def test_capability_flags_default():
    caps = ServerCapabilityFlags().to_server_capabilities().model_dump(exclude_none=True)
    assert caps == {"logging": {}, "tools": {}}


def test_capability_flags_resources_with_subscriptions():
    caps = ServerCapabilityFlags(
        logging=False, tools=False, resources=True, resource_subscriptions=True
    ).to_server_capabilities()

    assert caps.model_dump(exclude_none=True) == {"resources": {"subscribe": True}}
