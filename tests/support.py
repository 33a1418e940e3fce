"""Content builders and test doubles shared across the suite."""

from __future__ import annotations

import asyncio
from typing import Any


def doc(*paragraphs: str) -> dict[str, Any]:
    """Build a content tree with one paragraph per argument."""
    return {
        "type": "doc",
        "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": text}]}
            for text in paragraphs
        ],
    }


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class GatedSave:
    """Save callback whose calls complete only when the test releases them."""

    def __init__(self) -> None:
        self.calls: list[tuple[dict[str, Any], Any, asyncio.Future[Any]]] = []

    async def __call__(self, content: dict[str, Any], trigger: Any) -> Any:
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self.calls.append((content, trigger, future))
        return await future

    def release(self, index: int, result: Any = None) -> None:
        self.calls[index][2].set_result(result)

    def fail(self, index: int, error: BaseException) -> None:
        self.calls[index][2].set_exception(error)
