"""FastAPI routes for the mind map command surface and capability queries."""

from fastapi import APIRouter, Depends, HTTPException

from mindmap.maps.schemas import (
    ActivateRequest,
    CapabilitiesResponse,
    CreateNodeRequest,
    LoadResponse,
    MindMapResponse,
    PatchCollapsedRequest,
    PatchLabelRequest,
)
from mindmap.maps.service import MindMapService, NodeNotFoundError
from mindmap.tree.navigation import Direction

router = APIRouter(prefix="/api/mindmap", tags=["mindmap"])


def get_mindmap_service() -> MindMapService:
    """Dependency placeholder, replaced at app startup."""
    raise RuntimeError("MindMapService not initialized")


def _not_found(e: NodeNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


@router.get("")
async def get_mindmap(
    service: MindMapService = Depends(get_mindmap_service),
) -> MindMapResponse:
    return service.snapshot()


@router.get("/capabilities")
async def get_capabilities(
    service: MindMapService = Depends(get_mindmap_service),
) -> CapabilitiesResponse:
    return service.capabilities()


@router.post("/nodes", status_code=201)
async def create_node(
    request: CreateNodeRequest,
    service: MindMapService = Depends(get_mindmap_service),
) -> MindMapResponse:
    try:
        return service.create_child(request.parent_id, request.label)
    except NodeNotFoundError as e:
        raise _not_found(e)


@router.post("/nodes/{node_id}/siblings", status_code=201)
async def create_sibling(
    node_id: int,
    service: MindMapService = Depends(get_mindmap_service),
) -> MindMapResponse:
    try:
        return service.create_sibling(node_id)
    except NodeNotFoundError as e:
        raise _not_found(e)


@router.delete("/nodes/{node_id}")
async def remove_node(
    node_id: int,
    service: MindMapService = Depends(get_mindmap_service),
) -> MindMapResponse:
    try:
        return service.remove(node_id)
    except NodeNotFoundError as e:
        raise _not_found(e)


@router.delete("/active")
async def remove_active_node(
    service: MindMapService = Depends(get_mindmap_service),
) -> MindMapResponse:
    return service.remove_current()


@router.patch("/nodes/{node_id}/label")
async def set_label(
    node_id: int,
    request: PatchLabelRequest,
    service: MindMapService = Depends(get_mindmap_service),
) -> MindMapResponse:
    try:
        return service.set_label(node_id, request.label)
    except NodeNotFoundError as e:
        raise _not_found(e)


@router.patch("/nodes/{node_id}/collapsed")
async def set_collapsed(
    node_id: int,
    request: PatchCollapsedRequest,
    service: MindMapService = Depends(get_mindmap_service),
) -> MindMapResponse:
    try:
        return service.set_collapsed(node_id, request.collapsed)
    except NodeNotFoundError as e:
        raise _not_found(e)


@router.post("/nodes/{node_id}/toggle-collapsed")
async def toggle_collapsed(
    node_id: int,
    service: MindMapService = Depends(get_mindmap_service),
) -> MindMapResponse:
    try:
        return service.toggle_collapsed(node_id)
    except NodeNotFoundError as e:
        raise _not_found(e)


@router.put("/nodes/{node_id}/children-collapsed")
async def set_children_collapsed(
    node_id: int,
    request: PatchCollapsedRequest,
    service: MindMapService = Depends(get_mindmap_service),
) -> MindMapResponse:
    try:
        return service.set_children_collapsed(node_id, request.collapsed)
    except NodeNotFoundError as e:
        raise _not_found(e)


@router.post("/nodes/{node_id}/toggle-children-collapsed")
async def toggle_children_collapsed(
    node_id: int,
    service: MindMapService = Depends(get_mindmap_service),
) -> MindMapResponse:
    try:
        return service.toggle_children_collapsed(node_id)
    except NodeNotFoundError as e:
        raise _not_found(e)


@router.post("/nodes/{node_id}/move/{direction}")
async def move_node(
    node_id: int,
    direction: Direction,
    service: MindMapService = Depends(get_mindmap_service),
) -> MindMapResponse:
    try:
        return service.move(node_id, direction)
    except NodeNotFoundError as e:
        raise _not_found(e)


@router.post("/move/{direction}")
async def move_active(
    direction: Direction,
    service: MindMapService = Depends(get_mindmap_service),
) -> MindMapResponse:
    return service.move_active(direction)


@router.post("/activate")
async def activate(
    request: ActivateRequest,
    service: MindMapService = Depends(get_mindmap_service),
) -> MindMapResponse:
    try:
        return service.activate(request.node_id)
    except NodeNotFoundError as e:
        raise _not_found(e)


@router.post("/save")
async def save(
    service: MindMapService = Depends(get_mindmap_service),
) -> MindMapResponse:
    return await service.save()


@router.post("/load")
async def load(
    service: MindMapService = Depends(get_mindmap_service),
) -> LoadResponse:
    return await service.load()
