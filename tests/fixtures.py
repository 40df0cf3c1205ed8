"""Shared test helpers: deterministic sessions, stored-tree builders, listener recorders."""

import json
from typing import Any

from mindmap.models import IdAllocator
from mindmap.tree.session import MindMapSession


def make_session() -> MindMapSession:
    """A session whose ids count up from 1 (the clock is frozen at zero)."""
    return MindMapSession(ids=IdAllocator(clock=lambda: 0))


def stored(
    node_id: int,
    label: str = "",
    active: bool = False,
    collapsed: bool = False,
    children: list[dict[str, Any]] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """One node in persisted form."""
    return {
        "id": node_id,
        "label": label,
        "active": active,
        "collapsed": collapsed,
        "children": children or [],
        **extra,
    }


def make_blob(*nodes: dict[str, Any]) -> str:
    return json.dumps(list(nodes))


def sample_tree_blob() -> str:
    """Two top-level nodes; the first has three children, the middle one a child.

        a(1) ── b(2)
             ── c(3) ── e(5)
             ── d(4)
        f(6)
    """
    return make_blob(
        stored(1, "a", children=[
            stored(2, "b"),
            stored(3, "c", children=[stored(5, "e")]),
            stored(4, "d"),
        ]),
        stored(6, "f"),
    )


def load_sample(session: MindMapSession) -> dict[str, Any]:
    """Load the sample tree and return its nodes by label."""
    assert session.load(sample_tree_blob())
    return {node.label: node for node in session.walk()}


class Recorder:
    """Collects listener calls in order, tagged by name."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def listener(self, name: str):
        def record() -> None:
            self.calls.append(name)

        return record

    def clear(self) -> None:
        self.calls.clear()


def active_nodes(session: MindMapSession) -> list:
    return [node for node in session.walk() if node.active]
