"""MindMapSession: one independent editing session.

Bundles a TreeStore, its ChangeNotifier and the persistence codec behind
the command surface an input layer drives, plus the capability flags a
toolbar reads after every toolbar notification.
"""

from collections.abc import Iterator

from mindmap.models import Container, IdAllocator, Node, Root
from mindmap.persistence import codec
from mindmap.tree import navigation
from mindmap.tree.navigation import Direction
from mindmap.tree.notify import ChangeNotifier, Listener, Unsubscribe
from mindmap.tree.store import TreeStore


class MindMapSession:
    """Explicit context object for the tree, the active pointer and listeners."""

    def __init__(self, ids: IdAllocator | None = None) -> None:
        self.notifier = ChangeNotifier()
        self.store = TreeStore(self.notifier, ids)

    def close(self) -> None:
        """Drop every subscription. The tree stays readable."""
        self.notifier.clear()

    # -- State --

    @property
    def root(self) -> Root:
        return self.store.root

    @property
    def active_node(self) -> Node | None:
        return self.store.active

    def find(self, node_id: int) -> Node | None:
        return self.store.find(node_id)

    def parent_of(self, node: Node) -> Container:
        return self.store.parent_of(node)

    def walk(self) -> Iterator[Node]:
        return self.store.registry.walk()

    # -- Subscriptions --

    def subscribe(self, node: Node | int, listener: Listener) -> Unsubscribe:
        node_id = node.id if isinstance(node, Node) else node
        return self.notifier.subscribe(node_id, listener)

    def subscribe_root(self, listener: Listener) -> Unsubscribe:
        return self.notifier.subscribe_root(listener)

    def subscribe_toolbar(self, listener: Listener) -> Unsubscribe:
        return self.notifier.subscribe_toolbar(listener)

    # -- Capabilities --

    @property
    def can_save(self) -> bool:
        return self.store.dirty

    def can_move(self, direction: Direction) -> bool:
        active = self.store.active
        return active is not None and navigation.can_go(self.store.registry, active, direction)

    @property
    def can_move_left(self) -> bool:
        return self.can_move("left")

    @property
    def can_move_right(self) -> bool:
        return self.can_move("right")

    @property
    def can_move_up(self) -> bool:
        return self.can_move("up")

    @property
    def can_move_down(self) -> bool:
        return self.can_move("down")

    def capabilities(self) -> dict[str, bool]:
        return {
            "can_save": self.can_save,
            "can_move_left": self.can_move_left,
            "can_move_right": self.can_move_right,
            "can_move_up": self.can_move_up,
            "can_move_down": self.can_move_down,
        }

    # -- Commands --

    def create_child(self, parent: Node | None, label: str = "") -> Node | None:
        return self.store.create_child(parent, label)

    def create_sibling(self, node: Node) -> Node | None:
        return self.store.create_sibling(node)

    def remove(self, node: Node) -> bool:
        return self.store.remove(node)

    def remove_current(self) -> bool:
        if self.store.active is None:
            return False
        return self.store.remove(self.store.active)

    def set_label(self, node: Node, text: str) -> None:
        self.store.set_label(node, text)

    def set_collapsed(self, node: Node, collapsed: bool) -> None:
        self.store.set_collapsed(node, collapsed)

    def toggle_collapsed(self, node: Node) -> bool:
        return self.store.toggle_collapsed(node)

    def set_children_collapsed(self, node: Node, collapsed: bool) -> list[Node]:
        return self.store.set_children_collapsed(node, collapsed)

    def toggle_children_collapsed(self, node: Node) -> bool:
        return self.store.toggle_children_collapsed(node)

    def activate_node(self, node: Node | None) -> None:
        self.store.activate_node(node)

    def move(self, node: Node, direction: Direction) -> Node | None:
        return navigation.move(self.store, node, direction)

    def move_left(self, node: Node) -> Node | None:
        return navigation.move_left(self.store, node)

    def move_right(self, node: Node) -> Node | None:
        return navigation.move_right(self.store, node)

    def move_up(self, node: Node) -> Node | None:
        return navigation.move_up(self.store, node)

    def move_down(self, node: Node) -> Node | None:
        return navigation.move_down(self.store, node)

    def activate_direction(self, direction: Direction) -> Node | None:
        return navigation.activate_direction(self.store, direction)

    def activate_left(self) -> Node | None:
        return self.activate_direction("left")

    def activate_right(self) -> Node | None:
        return self.activate_direction("right")

    def activate_up(self) -> Node | None:
        return self.activate_direction("up")

    def activate_down(self) -> Node | None:
        return self.activate_direction("down")

    # -- Persistence --

    def save(self) -> str:
        return codec.save(self.store)

    def encode(self) -> str:
        """The blob for the current tree, leaving the dirty flag alone."""
        return codec.encode(self.store)

    def mark_saved(self) -> None:
        codec.mark_saved(self.store)

    def load(self, blob: str | bytes | None) -> bool:
        return codec.load(self.store, blob)
