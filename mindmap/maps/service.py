"""Mind map service: one editing session bound to one storage slot.

Resolves node ids coming off the wire, strips markup from labels, and
moves blobs between the session and the SlotStore. The session underneath
never raises; this layer raises NodeNotFoundError for ids it cannot find.
"""

import logging
import re

from mindmap.db.connection import Database
from mindmap.maps.schemas import (
    CapabilitiesResponse,
    LoadResponse,
    MindMapResponse,
    NodeResponse,
)
from mindmap.models import Node
from mindmap.persistence.slots import SlotStore
from mindmap.tree.navigation import Direction
from mindmap.tree.session import MindMapSession

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<([^>]+)>", re.IGNORECASE)


class NodeNotFoundError(Exception):
    def __init__(self, node_id: int) -> None:
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id}")


def strip_tags(text: str) -> str:
    """Drop anything that looks like an HTML tag from a label."""
    return _TAG_RE.sub("", text)


class MindMapService:
    """Coordinates a MindMapSession with its storage slot."""

    def __init__(
        self,
        db: Database,
        slot: str = "mindmap",
        session: MindMapSession | None = None,
    ) -> None:
        self._slots = SlotStore(db)
        self._slot = slot
        self.session = session or MindMapSession()

    # -- Snapshots --

    def snapshot(self) -> MindMapResponse:
        active = self.session.active_node
        return MindMapResponse(
            nodes=[NodeResponse.from_node(node) for node in self.session.root.children],
            active_id=active.id if active is not None else None,
            capabilities=self.capabilities(),
        )

    def capabilities(self) -> CapabilitiesResponse:
        return CapabilitiesResponse(**self.session.capabilities())

    # -- Persistence --

    async def load(self) -> LoadResponse:
        """Restore the session from the slot. Falls back to the default tree."""
        blob = await self._slots.read(self._slot)
        restored = self.session.load(blob)
        if not restored:
            logger.info("Slot %r held no usable mind map; starting fresh", self._slot)
        return LoadResponse(**self.snapshot().model_dump(), restored=restored)

    async def save(self) -> MindMapResponse:
        """Write the tree to the slot. The session stays dirty if the write fails."""
        blob = self.session.encode()
        await self._slots.write(self._slot, blob)
        self.session.mark_saved()
        return self.snapshot()

    # -- Commands --

    def create_child(self, parent_id: int | None, label: str = "") -> MindMapResponse:
        parent = self._node(parent_id) if parent_id is not None else None
        self.session.create_child(parent, strip_tags(label))
        return self.snapshot()

    def create_sibling(self, node_id: int) -> MindMapResponse:
        self.session.create_sibling(self._node(node_id))
        return self.snapshot()

    def remove(self, node_id: int) -> MindMapResponse:
        self.session.remove(self._node(node_id))
        return self.snapshot()

    def remove_current(self) -> MindMapResponse:
        self.session.remove_current()
        return self.snapshot()

    def set_label(self, node_id: int, label: str) -> MindMapResponse:
        self.session.set_label(self._node(node_id), strip_tags(label))
        return self.snapshot()

    def set_collapsed(self, node_id: int, collapsed: bool) -> MindMapResponse:
        self.session.set_collapsed(self._node(node_id), collapsed)
        return self.snapshot()

    def toggle_collapsed(self, node_id: int) -> MindMapResponse:
        self.session.toggle_collapsed(self._node(node_id))
        return self.snapshot()

    def set_children_collapsed(self, node_id: int, collapsed: bool) -> MindMapResponse:
        self.session.set_children_collapsed(self._node(node_id), collapsed)
        return self.snapshot()

    def toggle_children_collapsed(self, node_id: int) -> MindMapResponse:
        self.session.toggle_children_collapsed(self._node(node_id))
        return self.snapshot()

    def activate(self, node_id: int | None) -> MindMapResponse:
        node = self._node(node_id) if node_id is not None else None
        self.session.activate_node(node)
        return self.snapshot()

    def move(self, node_id: int, direction: Direction) -> MindMapResponse:
        self.session.move(self._node(node_id), direction)
        return self.snapshot()

    def move_active(self, direction: Direction) -> MindMapResponse:
        self.session.activate_direction(direction)
        return self.snapshot()

    def _node(self, node_id: int) -> Node:
        node = self.session.find(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node
