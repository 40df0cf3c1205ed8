"""Change notification: a subscription registry keyed by node id.

Views subscribe to the nodes they render, to the root (top-level list) and
to the toolbar (save/move capability flags). Every subscription hands back
an unsubscribe callable, so two views watching the same node never clobber
each other.
"""

from collections import defaultdict
from collections.abc import Callable

from mindmap.models import Container, Node

Listener = Callable[[], None]
Unsubscribe = Callable[[], None]


class ChangeNotifier:
    """Synchronous push-based observer. Listeners run in subscription order."""

    def __init__(self) -> None:
        self._node_listeners: defaultdict[int, list[Listener]] = defaultdict(list)
        self._root_listeners: list[Listener] = []
        self._toolbar_listeners: list[Listener] = []

    def subscribe(self, node_id: int, listener: Listener) -> Unsubscribe:
        return self._add(self._node_listeners[node_id], listener)

    def subscribe_root(self, listener: Listener) -> Unsubscribe:
        return self._add(self._root_listeners, listener)

    def subscribe_toolbar(self, listener: Listener) -> Unsubscribe:
        return self._add(self._toolbar_listeners, listener)

    def listener_count(self, node_id: int) -> int:
        return len(self._node_listeners.get(node_id, ()))

    def notify_node(self, node: Node | None) -> None:
        if node is None:
            return
        # Copy: a listener may unsubscribe itself while we iterate
        for listener in list(self._node_listeners.get(node.id, ())):
            listener()

    def notify_container(self, container: Container) -> None:
        """Notify a node's listeners, or the root listeners for the top level."""
        if isinstance(container, Node):
            self.notify_node(container)
        else:
            self.notify_root()

    def notify_root(self) -> None:
        for listener in list(self._root_listeners):
            listener()

    def notify_toolbar(self) -> None:
        for listener in list(self._toolbar_listeners):
            listener()

    def drop(self, node_ids: list[int]) -> None:
        """Forget the subscriptions of nodes that left the tree."""
        for node_id in node_ids:
            self._node_listeners.pop(node_id, None)

    def drop_nodes(self) -> None:
        self._node_listeners.clear()

    def clear(self) -> None:
        self._node_listeners.clear()
        self._root_listeners.clear()
        self._toolbar_listeners.clear()

    @staticmethod
    def _add(listeners: list[Listener], listener: Listener) -> Unsubscribe:
        listeners.append(listener)

        def unsubscribe() -> None:
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe
