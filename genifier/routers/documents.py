from fastapi import APIRouter, Depends, HTTPException

from genifier.models.documents import DocumentView
from genifier.services.shell import Shell, get_shell

router = APIRouter(prefix="/api/documents", tags=["documents"])


@router.get("", response_model=list[DocumentView])
async def list_documents(shell: Shell = Depends(get_shell)) -> list[DocumentView]:
    await shell.documents.ensure_loaded(shell.controller.refresh_epoch)
    return shell.documents.render()


@router.post("/{document_id}/toggle", response_model=list[DocumentView])
async def toggle_document(document_id: str, shell: Shell = Depends(get_shell)) -> list[DocumentView]:
    try:
        shell.documents.toggle(document_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Document not found")
    return shell.documents.render()


@router.post("/chunks/{chunk_id}/toggle", response_model=list[DocumentView])
async def toggle_chunk_content(chunk_id: str, shell: Shell = Depends(get_shell)) -> list[DocumentView]:
    try:
        shell.documents.toggle_content(chunk_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Chunk not found")
    return shell.documents.render()
