"""Spatial navigation over the tree.

The tree is laid out left to right: a node's parent is to its left, its
children to its right, and its siblings above and below. The predicates and
neighbour lookups are pure functions of the registry; ``activate`` and the
``move_*`` functions are the only writers of the active pointer.
"""

import logging
from typing import TYPE_CHECKING, Literal

from mindmap.models import Node
from mindmap.tree.registry import NodeRegistry

if TYPE_CHECKING:
    from mindmap.tree.store import TreeStore

logger = logging.getLogger(__name__)

Direction = Literal["left", "right", "up", "down"]
DIRECTIONS: tuple[Direction, ...] = ("left", "right", "up", "down")


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def can_go_parent(registry: NodeRegistry, node: Node) -> bool:
    return registry.parent_node(node) is not None


def can_go_child(node: Node) -> bool:
    return not node.collapsed and len(node.children) > 0


def can_go_prev_sibling(registry: NodeRegistry, node: Node) -> bool:
    index = registry.index_in_parent(node)
    return index is not None and index > 0


def can_go_next_sibling(registry: NodeRegistry, node: Node) -> bool:
    index = registry.index_in_parent(node)
    if index is None:
        return False
    return index < len(registry.parent_of(node).children) - 1


def can_go(registry: NodeRegistry, node: Node, direction: Direction) -> bool:
    if direction == "left":
        return can_go_parent(registry, node)
    if direction == "right":
        return can_go_child(node)
    if direction == "up":
        return can_go_prev_sibling(registry, node)
    return can_go_next_sibling(registry, node)


# ---------------------------------------------------------------------------
# Neighbours
# ---------------------------------------------------------------------------


def entry_child(node: Node) -> Node | None:
    """The middle child, so moving right lands near the centre of the subtree."""
    if not node.children:
        return None
    return node.children[(len(node.children) - 1) // 2]


def prev_sibling(registry: NodeRegistry, node: Node) -> Node | None:
    if not can_go_prev_sibling(registry, node):
        return None
    index = registry.index_in_parent(node)
    return registry.parent_of(node).children[index - 1]


def next_sibling(registry: NodeRegistry, node: Node) -> Node | None:
    if not can_go_next_sibling(registry, node):
        return None
    index = registry.index_in_parent(node)
    return registry.parent_of(node).children[index + 1]


def neighbour(registry: NodeRegistry, node: Node, direction: Direction) -> Node | None:
    """The node a move in ``direction`` would land on, None if the move is illegal."""
    if not can_go(registry, node, direction):
        return None
    if direction == "left":
        return registry.parent_node(node)
    if direction == "right":
        return entry_child(node)
    if direction == "up":
        return prev_sibling(registry, node)
    return next_sibling(registry, node)


# ---------------------------------------------------------------------------
# Activation
# ---------------------------------------------------------------------------


def activate(store: "TreeStore", node: Node | None) -> None:
    """Point the active pointer at ``node``.

    The previously active node is cleared and notified. The newly active
    node is *not* notified here; the calling operation does that so a
    composite change produces a single notification.
    """
    previous = store.active
    if node is not None and previous is node:
        return
    if previous is not None:
        previous.active = False
        store.notifier.notify_node(previous)
    if node is not None:
        node.active = True
    store.active = node


def move(store: "TreeStore", node: Node, direction: Direction) -> Node | None:
    """Activate the neighbour of ``node`` in ``direction``. No-op when illegal."""
    target = neighbour(store.registry, node, direction)
    if target is None:
        logger.debug("Move %s from node %s is not available", direction, node.id)
        return None
    activate(store, target)
    store.notifier.notify_toolbar()
    store.notifier.notify_node(target)
    return target


def move_left(store: "TreeStore", node: Node) -> Node | None:
    return move(store, node, "left")


def move_right(store: "TreeStore", node: Node) -> Node | None:
    return move(store, node, "right")


def move_up(store: "TreeStore", node: Node) -> Node | None:
    return move(store, node, "up")


def move_down(store: "TreeStore", node: Node) -> Node | None:
    return move(store, node, "down")


def activate_direction(store: "TreeStore", direction: Direction) -> Node | None:
    """Move from the current active node, if there is one."""
    if store.active is None:
        return None
    return move(store, store.active, direction)
