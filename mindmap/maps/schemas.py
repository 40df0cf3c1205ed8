"""Request and response schemas for the mind map endpoints."""

from pydantic import BaseModel

from mindmap.models import Node, iter_subtree

# -- Requests --


class CreateNodeRequest(BaseModel):
    parent_id: int | None = None
    label: str = ""


class PatchLabelRequest(BaseModel):
    label: str


class PatchCollapsedRequest(BaseModel):
    collapsed: bool


class ActivateRequest(BaseModel):
    """Select a node. A null node_id clears the selection."""

    node_id: int | None = None


# -- Responses --


class NodeResponse(BaseModel):
    id: int
    label: str
    active: bool
    collapsed: bool
    expandable: bool  # False for childless nodes, whatever collapsed says
    children: list["NodeResponse"]

    @classmethod
    def from_node(cls, node: Node) -> "NodeResponse":
        # Reversed pre-order reaches every child before its parent
        built: dict[int, NodeResponse] = {}
        for current in reversed(list(iter_subtree(node))):
            built[id(current)] = cls(
                id=current.id,
                label=current.label,
                active=current.active,
                collapsed=current.collapsed,
                expandable=current.expandable,
                children=[built.pop(id(child)) for child in current.children],
            )
        return built[id(node)]


class CapabilitiesResponse(BaseModel):
    can_save: bool
    can_move_left: bool
    can_move_right: bool
    can_move_up: bool
    can_move_down: bool


class MindMapResponse(BaseModel):
    nodes: list[NodeResponse]
    active_id: int | None = None
    capabilities: CapabilitiesResponse


class LoadResponse(MindMapResponse):
    restored: bool  # False when the slot was empty or unreadable
