from fastapi import APIRouter, Depends

from genifier.models.pipeline import PipelineSnapshot
from genifier.models.request import PickedPathRequest
from genifier.services.pickers import PresetPicker
from genifier.services.shell import Shell, get_shell

router = APIRouter(prefix="/api/pipeline", tags=["pipeline"])


@router.get("/state", response_model=PipelineSnapshot)
async def pipeline_state(shell: Shell = Depends(get_shell)) -> PipelineSnapshot:
    return shell.coordinator.snapshot()


@router.post("/source", response_model=PipelineSnapshot)
async def select_source(request: PickedPathRequest, shell: Shell = Depends(get_shell)) -> PipelineSnapshot:
    await shell.controller.select_source(PresetPicker(request.path))
    return shell.coordinator.snapshot()


@router.post("/chat-log/source", response_model=PipelineSnapshot)
async def select_chat_log(request: PickedPathRequest, shell: Shell = Depends(get_shell)) -> PipelineSnapshot:
    await shell.controller.select_chat_log(PresetPicker(request.path))
    return shell.coordinator.snapshot()


@router.post("/ingest", response_model=PipelineSnapshot)
async def start_ingest(shell: Shell = Depends(get_shell)) -> PipelineSnapshot:
    await shell.controller.start_ingest()
    return shell.coordinator.snapshot()


@router.post("/build", response_model=PipelineSnapshot)
async def start_graph_build(shell: Shell = Depends(get_shell)) -> PipelineSnapshot:
    await shell.controller.start_graph_build()
    return shell.coordinator.snapshot()


@router.post("/pdf-graph", response_model=PipelineSnapshot)
async def start_pdf_graph(shell: Shell = Depends(get_shell)) -> PipelineSnapshot:
    await shell.controller.start_pdf_graph()
    return shell.coordinator.snapshot()


@router.post("/chat-log", response_model=PipelineSnapshot)
async def import_chat_log(shell: Shell = Depends(get_shell)) -> PipelineSnapshot:
    await shell.controller.import_chat_log()
    return shell.coordinator.snapshot()


@router.post("/hardware-accel", response_model=PipelineSnapshot)
async def toggle_hardware_accel(shell: Shell = Depends(get_shell)) -> PipelineSnapshot:
    await shell.controller.toggle_hardware_accel()
    return shell.coordinator.snapshot()
