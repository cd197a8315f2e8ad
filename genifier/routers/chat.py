import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from genifier.models.catalog import CatalogEntry
from genifier.models.request import ChatRequest, DownloadRequest
from genifier.services.chat import stream_chat_events
from genifier.services.shell import Shell, get_shell

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/chat/stream", tags=["chat"])
async def stream_chat(request: ChatRequest, shell: Shell = Depends(get_shell)) -> StreamingResponse:
    return StreamingResponse(
        stream_chat_events(shell.backend, shell.llm, request.query),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.get("/models", response_model=list[CatalogEntry], tags=["models"])
async def list_models(shell: Shell = Depends(get_shell)) -> list[CatalogEntry]:
    if not shell.models.models:
        await shell.models.refresh_catalog()
    return shell.models.entries()


@router.post("/models/download", tags=["models"])
async def download_model(request: DownloadRequest, shell: Shell = Depends(get_shell)) -> dict:
    ok = await shell.models.download(request.model_id)
    logger.info("Model download %s: %s", request.model_id, "ok" if ok else "failed")
    return {"model_id": request.model_id, "installed": ok}
