"""Flat id -> node lookup plus the parent links of the live tree."""

from collections.abc import Iterator

from mindmap.models import Container, Node, Root, iter_subtree


class NodeRegistry:
    """Indexes every node reachable from one root.

    Only the registry touches a node's ``children`` list or ``parent``
    field, so the parent of a node is read straight off the node and
    cannot disagree with the children lists.
    """

    def __init__(self, root: Root) -> None:
        self._root = root
        self._nodes: dict[int, Node] = {}

    @property
    def root(self) -> Root:
        return self._root

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, node_id: int) -> Node | None:
        return self._nodes.get(node_id)

    def parent_node(self, node: Node) -> Node | None:
        """The parent node, or None for top-level and unregistered nodes."""
        registered = self._nodes.get(node.id)
        if registered is None:
            return None
        return registered.parent

    def parent_of(self, node: Node) -> Container:
        """The container holding ``node``. Absence of a parent means the root."""
        return self.parent_node(node) or self._root

    def index_in_parent(self, node: Node) -> int | None:
        """Position of ``node`` in its container by identity, None if not listed."""
        for index, sibling in enumerate(self.parent_of(node).children):
            if sibling is node:
                return index
        return None

    def link(self, container: Container, child: Node, index: int | None = None) -> None:
        """Attach ``child`` (and its subtree) under ``container``.

        A node already listed somewhere is unlinked first, so no node can
        sit in two containers.
        """
        if child.id in self._nodes:
            self.unlink(child)
        if index is None:
            container.children.append(child)
        else:
            container.children.insert(index, child)
        child.parent = container if isinstance(container, Node) else None
        self._register(child)

    def unlink(self, child: Node) -> int | None:
        """Detach ``child`` and forget its whole subtree.

        ``child`` is resolved by id, so a stale object for a node that was
        reloaded still detaches the live node and all its live descendants.
        Returns the position the child held in its container, or None if it
        was not listed there.
        """
        child = self._nodes.get(child.id, child)
        container = self.parent_of(child)
        index = None
        for position, sibling in enumerate(container.children):
            if sibling.id == child.id:
                index = position
                break
        if index is not None:
            del container.children[index]
        child.parent = None
        self._forget(child)
        return index

    def install(self, children: list[Node]) -> None:
        """Replace the whole tree with ``children`` and rebuild the index."""
        self._nodes.clear()
        self._root.children = list(children)
        for child in self._root.children:
            child.parent = None
            self._register(child)

    def walk(self) -> Iterator[Node]:
        """Depth-first pre-order over every node under the root."""
        for top in self._root.children:
            yield from iter_subtree(top)

    def _register(self, node: Node) -> None:
        for current in iter_subtree(node):
            self._nodes[current.id] = current
            for child in current.children:
                child.parent = current

    def _forget(self, node: Node) -> None:
        for current in iter_subtree(node):
            self._nodes.pop(current.id, None)
