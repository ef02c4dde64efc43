from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass, field

from mcp_context.context import Context
from mcp_context.session import PeerSession
from mcp_context.types.base import ProgressToken
from mcp_context.types.json_rpc import RequestId


@dataclass
class ProgressContext:
    session: PeerSession
    progress_token: ProgressToken
    total: float | None
    related_request_id: RequestId | None = None
    current: float = field(default=0.0, init=False)

    async def progress(self, amount: float, message: str | None = None) -> None:
        self.current += amount

        await self.session.send_progress(
            self.progress_token,
            self.current,
            self.total,
            message,
            related_request_id=self.related_request_id,
        )


@contextmanager
def progress(ctx: Context, total: float | None = None) -> Generator[ProgressContext, None, None]:
    if ctx.progress_token is None:
        raise ValueError("No progress token provided")

    yield ProgressContext(ctx.session, ctx.progress_token, total, related_request_id=ctx.request_id)
