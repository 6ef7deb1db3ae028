"""
Session-scoped answer store.

Insertion-ordered, write-once mapping from input-node identifier to the value
chosen there. Logic rules read it as a plain ``Mapping``.
"""

from __future__ import annotations
from collections.abc import Iterator, Mapping, Sequence

from .errors import AnswerOverwriteError


class AnswerStore(Mapping[str, str]):
    """Answers recorded during one traversal."""

    def __init__(self, initial: Mapping[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def __getitem__(self, node_id: str) -> str:
        return self._data[node_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"AnswerStore({self._data!r})"

    def record(self, node_id: str, value: str) -> None:
        """Record an answer. Each node is answered at most once per session."""
        if node_id in self._data:
            raise AnswerOverwriteError(node_id)
        self._data[node_id] = value

    def resolve(self, sources: Sequence[str]) -> tuple[str, str] | None:
        """First populated source as ``(node_id, value)``, or None."""
        for node_id in sources:
            if node_id in self._data:
                return node_id, self._data[node_id]
        return None

    def snapshot(self) -> dict[str, str]:
        return dict(self._data)

    def clear(self) -> None:
        self._data.clear()
