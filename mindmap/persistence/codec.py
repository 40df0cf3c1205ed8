"""Serialize the live tree to a storage blob and restore it.

The blob is JSON text holding the top-level children list. The root itself
and the parent links are never written; they are rebuilt on load. Anything
that does not validate falls back to the default single-node tree.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from mindmap.models import Node, StoredNode, iter_subtree
from mindmap.tree.store import TreeStore
from mindmap.utils.json import parse_json_list

logger = logging.getLogger(__name__)


class InvalidBlobError(ValueError):
    """The blob parsed but does not describe a usable tree."""


def encode(store: TreeStore) -> str:
    """JSON text for the top-level children list."""
    return json.dumps(_to_plain(store.root.children))


def decode(blob: str | bytes | None) -> list[Node]:
    """Validate ``blob`` and build detached live nodes from it.

    Raises InvalidBlobError for anything that is not a non-empty list of
    well-formed nodes with unique ids. Each node is validated on its own
    while the tree is rebuilt from an explicit stack.
    """
    raw = parse_json_list(blob)
    if raw is None:
        raise InvalidBlobError("blob is missing or not a JSON list")
    if not raw:
        raise InvalidBlobError("blob holds no top-level nodes")

    top: list[Node] = []
    seen: set[int] = set()
    pending: list[tuple[Any, list[Node]]] = [(item, top) for item in reversed(raw)]
    while pending:
        item, siblings = pending.pop()
        try:
            stored = StoredNode.model_validate(item)
        except ValidationError as e:
            raise InvalidBlobError(str(e)) from e
        if stored.id in seen:
            raise InvalidBlobError(f"duplicate node id {stored.id}")
        seen.add(stored.id)

        node = stored.to_node()
        siblings.append(node)
        pending.extend((child, node.children) for child in reversed(stored.children))
    return top


def mark_saved(store: TreeStore) -> None:
    """Clear the dirty flag once a blob is safely stored."""
    store.dirty = False
    store.notifier.notify_toolbar()
    logger.info("Saved %d nodes", len(store.registry))


def save(store: TreeStore) -> str:
    """Serialize the tree and clear the dirty flag."""
    blob = encode(store)
    mark_saved(store)
    return blob


def load(store: TreeStore, blob: str | bytes | None) -> bool:
    """Replace the tree with the one in ``blob``.

    Returns False when the blob was unusable and the default tree was
    installed instead. Never raises for bad data.
    """
    try:
        children = decode(blob)
    except InvalidBlobError as e:
        if blob:
            logger.warning("Discarding unreadable mind map data: %s", e)
        store.reset()
        _after_load(store)
        return False

    store.reset(children)
    for node in store.registry.walk():
        if not node.active:
            continue
        if store.active is None:
            store.active = node
        else:
            logger.warning(
                "Node %s is also marked active; keeping node %s", node.id, store.active.id
            )
            node.active = False

    logger.info("Loaded %d nodes", len(store.registry))
    _after_load(store)
    return True


def _after_load(store: TreeStore) -> None:
    store.notifier.drop_nodes()
    store.notifier.notify_root()
    store.notifier.notify_toolbar()


def _to_plain(nodes: list[Node]) -> list[dict[str, Any]]:
    # Reversed pre-order visits every child before its parent
    built: dict[int, dict[str, Any]] = {}
    order = [node for top in nodes for node in iter_subtree(top)]
    for node in reversed(order):
        built[id(node)] = {
            "id": node.id,
            "label": node.label,
            "active": node.active,
            "collapsed": node.collapsed,
            "children": [built.pop(id(child)) for child in node.children],
        }
    return [built[id(node)] for node in nodes]
