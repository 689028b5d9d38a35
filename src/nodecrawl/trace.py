"""Append-only execution trace for one process call."""

from __future__ import annotations


class ExecutionChain:
    """Ordered log of which middleware and units ran.

    ``failed_at`` names the entry whose invocation raised, if any.
    """

    def __init__(self) -> None:
        self._entries: list[str] = []
        self._failed_at: str | None = None
        self._closed = False

    def append(self, entry: str) -> None:
        if self._closed:
            raise RuntimeError("ExecutionChain is closed")
        self._entries.append(entry)

    def fail(self, entry: str) -> None:
        if self._closed:
            raise RuntimeError("ExecutionChain is closed")
        self._failed_at = entry

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def failed_at(self) -> str | None:
        return self._failed_at

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def render(self, separator: str = " -> ") -> str:
        return separator.join(self._entries) or "<empty>"

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(tuple(self._entries))
