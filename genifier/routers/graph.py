from fastapi import APIRouter, Depends, HTTPException, Query

from genifier.config import settings
from genifier.models.graph import GraphData, SelectedNode
from genifier.models.render import EngineStopResponse, Frame
from genifier.models.request import (
    ClickRequest,
    HoverRequest,
    PositionsRequest,
    PresentationRequest,
    ViewModeRequest,
    ViewportRequest,
)
from genifier.services.shell import Shell, get_shell

router = APIRouter(prefix="/api/graph", tags=["graph"])


@router.get("", response_model=GraphData)
async def graph_data(shell: Shell = Depends(get_shell)) -> GraphData:
    await shell.coordinator.sync()
    return shell.adapter.snapshot()


@router.put("/view-mode", response_model=GraphData)
async def set_view_mode(request: ViewModeRequest, shell: Shell = Depends(get_shell)) -> GraphData:
    await shell.coordinator.set_view_mode(request.view_mode)
    return shell.adapter.snapshot()


@router.post("/presentation")
async def switch_presentation(request: PresentationRequest, shell: Shell = Depends(get_shell)) -> dict:
    await shell.coordinator.switch(request.presentation)
    return {"presentation": shell.coordinator.presentation.value}


@router.post("/viewport")
async def resize_viewport(request: ViewportRequest, shell: Shell = Depends(get_shell)) -> dict:
    shell.viewport.publish(request.width, request.height)
    return {"drawable": shell.engine.drawable}


@router.post("/hover")
async def hover(request: HoverRequest, shell: Shell = Depends(get_shell)) -> dict:
    try:
        shell.engine.hover_by_id(request.node_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Node not found")
    return {"hover_node_id": request.node_id}


@router.post("/positions")
async def place_nodes(request: PositionsRequest, shell: Shell = Depends(get_shell)) -> dict:
    unknown = shell.engine.place({node_id: (p.x, p.y) for node_id, p in request.positions.items()})
    return {"placed": len(request.positions) - len(unknown), "unknown": unknown}


@router.get("/frame", response_model=Frame)
async def frame(scale: float = Query(default=1.0, gt=0), shell: Shell = Depends(get_shell)) -> Frame:
    return shell.engine.render_frame(scale)


@router.post("/engine-stop", response_model=EngineStopResponse)
async def engine_stop(shell: Shell = Depends(get_shell)) -> EngineStopResponse:
    return EngineStopResponse(zoom_to_fit=shell.engine.on_engine_stop(), duration_ms=settings.FIT_DURATION_MS)


@router.post("/click", response_model=SelectedNode)
async def click(request: ClickRequest, shell: Shell = Depends(get_shell)) -> SelectedNode:
    try:
        return shell.coordinator.click(request.node_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Node not found")


@router.get("/selection", response_model=SelectedNode | None)
async def selection(shell: Shell = Depends(get_shell)) -> SelectedNode | None:
    return shell.coordinator.selected


@router.delete("/selection", status_code=204)
async def close_detail(shell: Shell = Depends(get_shell)) -> None:
    shell.coordinator.close_detail()
