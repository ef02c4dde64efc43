"""Request identifier generation."""

import uuid


class RequestIdGenerator:
    """Generates collision-resistant request identifiers (UUID version 4).

    ``count`` tracks how many identifiers were handed out, so callers can verify
    that no identifier is allocated for work that never needed one.
    """

    def __init__(self) -> None:
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    def generate(self) -> str:
        self._count += 1
        return str(uuid.uuid4())
