"""Tree store: the single owner of the live tree and its derived state.

Every structural change goes through here so the registry, the active
pointer and the dirty flag stay consistent with the children lists.
Illegal operations are logged at DEBUG and reported by return value; they
never raise.
"""

import logging

from mindmap.models import DEFAULT_LABEL, Container, IdAllocator, Node, Root, iter_subtree
from mindmap.tree.navigation import activate
from mindmap.tree.notify import ChangeNotifier
from mindmap.tree.registry import NodeRegistry

logger = logging.getLogger(__name__)


class TreeStore:
    """Owns the root, the registry, the active pointer and the dirty flag."""

    def __init__(
        self,
        notifier: ChangeNotifier | None = None,
        ids: IdAllocator | None = None,
    ) -> None:
        self.root = Root()
        self.registry = NodeRegistry(self.root)
        self.notifier = notifier or ChangeNotifier()
        self.ids = ids or IdAllocator()
        self.active: Node | None = None
        self.dirty = False
        # Nodes whose children were last collapsed through toggle_children_collapsed
        self._children_collapsed: set[int] = set()
        self.reset()

    # -- Queries --

    def find(self, node_id: int) -> Node | None:
        return self.registry.get(node_id)

    def parent_of(self, node: Node) -> Container:
        return self.registry.parent_of(node)

    def default_node(self) -> Node:
        return Node(id=self.ids.next(), label=DEFAULT_LABEL)

    # -- Whole-tree replacement --

    def reset(self, children: list[Node] | None = None) -> None:
        """Install ``children`` (or the default single node) as the top level.

        Clears the active pointer and the dirty flag. Callers re-establish
        the active pointer themselves.
        """
        if not children:
            children = [self.default_node()]
        self.active = None
        self.dirty = False
        self._children_collapsed.clear()
        self.registry.install(children)
        self.ids.reseed(max(node.id for node in self.registry.walk()))

    def _live(self, node: Node, action: str) -> Node | None:
        """The registered node with ``node``'s id, None when it is not in the tree.

        Callers may hold objects from before a load; the live node wins.
        """
        live = self.registry.get(node.id)
        if live is None:
            logger.debug("Cannot %s unknown node %s", action, node.id)
        return live

    # -- Mutations --

    def create_child(self, parent: Node | None, label: str = "") -> Node | None:
        """Append a new node under ``parent`` (top level when None) and activate it."""
        if parent is not None:
            parent = self._live(parent, "create a child under")
            if parent is None:
                return None

        node = Node(id=self.ids.next(), label=label)
        self.registry.link(parent or self.root, node)
        activate(self, node)

        if parent is not None:
            parent.collapsed = False
            self.notifier.notify_node(parent)
        else:
            self.notifier.notify_root()

        self.dirty = True
        self.notifier.notify_toolbar()
        return node

    def create_sibling(self, node: Node) -> Node | None:
        """Append a new node to the container holding ``node``."""
        live = self._live(node, "create a sibling of")
        if live is None:
            return None
        return self.create_child(live.parent)

    def remove(self, node: Node) -> bool:
        """Remove ``node`` and its subtree, then move focus to a neighbour.

        Focus goes to the node that took the removed node's place, else the
        new last child of the container, else the container itself when it
        is a node that just lost its last child. The top level is never
        emptied: removing the only top-level node is a no-op.
        """
        node = self._live(node, "remove")
        if node is None:
            return False

        parent = node.parent
        container: Container = parent or self.root
        if parent is None and len(container.children) < 2:
            logger.debug("Refusing to remove the only top-level node %s", node.id)
            return False

        removed_ids = [removed.id for removed in iter_subtree(node)]
        index = self.registry.unlink(node)

        focus: Node | None = None
        if index is not None and index < len(container.children):
            focus = container.children[index]
        elif container.children:
            focus = container.children[-1]
        elif parent is not None:
            focus = parent

        activate(self, focus)
        if focus is not None and focus is not parent:
            self.notifier.notify_node(focus)
        self.notifier.notify_container(container)

        self.notifier.drop(removed_ids)
        self._children_collapsed.difference_update(removed_ids)
        self.dirty = True
        self.notifier.notify_toolbar()
        return True

    def set_label(self, node: Node, text: str) -> None:
        node = self._live(node, "relabel")
        if node is None:
            return
        node.label = text
        self.notifier.notify_node(node)
        self.dirty = True
        self.notifier.notify_toolbar()

    def set_collapsed(self, node: Node, collapsed: bool) -> None:
        node = self._live(node, "collapse")
        if node is None:
            return
        node.collapsed = collapsed
        self.notifier.notify_node(node)
        self.notifier.notify_toolbar()

    def toggle_collapsed(self, node: Node) -> bool:
        """Flip ``collapsed`` and return the new value. False for unknown nodes."""
        node = self._live(node, "collapse")
        if node is None:
            return False
        self.set_collapsed(node, not node.collapsed)
        return node.collapsed

    def set_children_collapsed(self, node: Node, collapsed: bool) -> list[Node]:
        """Expand ``node`` and set ``collapsed`` on each child that has children.

        Leaf children are left alone. Returns the children that were changed.
        """
        node = self._live(node, "collapse the children of")
        if node is None:
            return []
        node.collapsed = False
        self.notifier.notify_node(node)

        affected = [child for child in node.children if child.children]
        for child in affected:
            child.collapsed = collapsed
            self.notifier.notify_node(child)

        if collapsed:
            self._children_collapsed.add(node.id)
        else:
            self._children_collapsed.discard(node.id)

        self.notifier.notify_toolbar()
        return affected

    def toggle_children_collapsed(self, node: Node) -> bool:
        """Flip the children-collapsed state last requested for ``node``."""
        node = self._live(node, "collapse the children of")
        if node is None:
            return False
        collapsed = node.id not in self._children_collapsed
        self.set_children_collapsed(node, collapsed)
        return collapsed

    def activate_node(self, node: Node | None) -> None:
        """Explicit selection. None clears the selection."""
        if node is not None:
            node = self._live(node, "activate")
            if node is None:
                return
        activate(self, node)
        self.notifier.notify_node(node)
        self.notifier.notify_toolbar()
