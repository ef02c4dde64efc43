import pytest

from mcp_context import ContextFactory, ProgressContext, progress

pytestmark = pytest.mark.anyio


async def test_progress_accumulates_increments(factory: ContextFactory, peer):
    factory.record_peer_capabilities({})
    context = factory.build_context({"progressToken": "upload-1"})

    with progress(context, total=10) as p:
        await p.progress(3)
        await p.progress(4, "almost there")

    assert p.current == 7
    assert [n.params for n in peer.notifications] == [
        {"progressToken": "upload-1", "progress": 3.0, "total": 10.0},
        {"progressToken": "upload-1", "progress": 7.0, "total": 10.0, "message": "almost there"},
    ]
    assert all(n.related_request_id == context.request_id for n in peer.notifications)


async def test_progress_requires_token(factory: ContextFactory):
    context = factory.build_context()

    with pytest.raises(ValueError, match="No progress token provided"):
        with progress(context):
            pass


async def test_progress_past_total_is_dropped(factory: ContextFactory, peer):
    tracker = ProgressContext(factory.session, 7, total=2)

    await tracker.progress(1)
    await tracker.progress(5)

    assert tracker.current == 6
    assert len(peer.notifications) == 1
