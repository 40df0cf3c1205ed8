"""Canonical data structures for the mind-map engine.

Two layers live here. ``Node`` and ``Root`` are the live, mutable tree the
engine works on; identity matters for them, so they compare by ``is``.
``StoredNode`` is the persisted shape, validated strictly on the way in.
"""

import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, StrictStr

DEFAULT_LABEL = "Press Space or double click to edit"


# ---------------------------------------------------------------------------
# Live tree
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class Node:
    id: int
    label: str = ""
    active: bool = False
    collapsed: bool = False
    children: list["Node"] = field(default_factory=list)
    # Written only by NodeRegistry
    parent: "Node | None" = field(default=None, repr=False)

    @property
    def expandable(self) -> bool:
        """Childless nodes are never shown as expandable, whatever ``collapsed`` says."""
        return bool(self.children)


@dataclass(eq=False)
class Root:
    """Top-level container. Has children and nothing else."""

    children: list[Node] = field(default_factory=list)


Container = Node | Root


class IdAllocator:
    """Creation-ordered node ids derived from the wall clock.

    Millisecond timestamps collide when nodes are created in quick
    succession, so each id is at least one more than the previous one.
    """

    def __init__(self, clock=time.time) -> None:
        self._clock = clock
        self._last = 0

    def next(self) -> int:
        candidate = int(self._clock() * 1000)
        self._last = max(candidate, self._last + 1)
        return self._last

    def reseed(self, floor: int) -> None:
        """Guarantee every future id is greater than ``floor``."""
        self._last = max(self._last, floor)


# ---------------------------------------------------------------------------
# Persisted shape
# ---------------------------------------------------------------------------


class StoredNode(BaseModel):
    """One node as written to a storage slot. Unknown fields are dropped.

    Validated one level at a time: ``children`` stays raw here and each
    child is validated on its own by the codec, so tree depth is never
    limited by recursion.
    """

    model_config = ConfigDict(extra="ignore")

    id: StrictInt
    label: StrictStr
    active: StrictBool
    collapsed: StrictBool
    children: list[dict[str, Any]]

    def to_node(self) -> Node:
        """A detached live node without children. The codec attaches those."""
        return Node(
            id=self.id,
            label=self.label,
            active=self.active,
            collapsed=self.collapsed,
        )


def iter_subtree(node: Node) -> Iterator[Node]:
    """``node`` and all its descendants, depth-first pre-order, without recursion."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))
