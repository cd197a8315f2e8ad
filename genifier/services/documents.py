"""Document -> chunk hierarchy, fetched independently of the graph."""

import logging

from pydantic import TypeAdapter, ValidationError

from genifier.mappings import CHUNK_TITLE_TEMPLATE, SUMMARY_PLACEHOLDER
from genifier.models.commands import NoArgs
from genifier.models.documents import ChunkRecord, ChunkView, DocumentRecord, DocumentView, RecordMetadata
from genifier.models.pipeline import LogLevel
from genifier.services.backend import CommandError
from genifier.services.event_log import EventLog

logger = logging.getLogger(__name__)

_documents_adapter = TypeAdapter(list[DocumentRecord])


def _summary(metadata: RecordMetadata | None) -> str:
    if metadata is None or not metadata.summary:
        return SUMMARY_PLACEHOLDER
    return metadata.summary


def _tags(metadata: RecordMetadata | None) -> list[str]:
    if metadata is None or not metadata.tags:
        return []
    return list(metadata.tags)


def chunk_title(chunk: ChunkRecord, ordinal: int) -> str:
    if chunk.metadata is not None and chunk.metadata.title:
        return chunk.metadata.title
    return CHUNK_TITLE_TEMPLATE.format(n=ordinal)


def document_title(document: DocumentRecord) -> str:
    if document.metadata is not None and document.metadata.title:
        return document.metadata.title
    return document.filename


class DocumentListView:
    def __init__(self, backend, log: EventLog):
        self._backend = backend
        self._log = log
        self.records: list[DocumentRecord] = []
        self._expanded: set[str] = set()
        self._content_expanded: set[str] = set()
        self._loaded_epoch: int | None = None
        self._seq = 0

    @property
    def loaded_epoch(self) -> int | None:
        return self._loaded_epoch

    async def ensure_loaded(self, epoch: int) -> bool:
        """Fetch once per refresh epoch; later calls for the same epoch are no-ops."""
        if self._loaded_epoch == epoch:
            return False
        return await self.refresh(epoch)

    async def refresh(self, epoch: int | None = None) -> bool:
        if epoch is not None:
            self._loaded_epoch = epoch
        self._seq += 1
        seq = self._seq
        try:
            raw = await self._backend.invoke("get_documents", NoArgs())
            records = _documents_adapter.validate_python(raw or [])
        except (CommandError, ValidationError) as e:
            self._log.append(f"Document list refresh failed: {e}", LogLevel.ERROR)
            return False
        if seq != self._seq:
            logger.warning("Discarding superseded document list response")
            return False

        self.records = records
        ids = {r.id for r in records}
        chunk_ids = {c.id for r in records for c in r.chunks}
        self._expanded &= ids
        self._content_expanded &= chunk_ids
        logger.info("Document list loaded: %d documents", len(records))
        return True

    def toggle(self, document_id: str) -> bool:
        if not any(r.id == document_id for r in self.records):
            raise KeyError(document_id)
        if document_id in self._expanded:
            self._expanded.discard(document_id)
            return False
        self._expanded.add(document_id)
        return True

    def toggle_content(self, chunk_id: str) -> bool:
        if not any(c.id == chunk_id for r in self.records for c in r.chunks):
            raise KeyError(chunk_id)
        if chunk_id in self._content_expanded:
            self._content_expanded.discard(chunk_id)
            return False
        self._content_expanded.add(chunk_id)
        return True

    def is_expanded(self, document_id: str) -> bool:
        return document_id in self._expanded

    def render(self) -> list[DocumentView]:
        views = []
        for record in self.records:
            expanded = record.id in self._expanded
            views.append(
                DocumentView(
                    id=record.id,
                    filename=record.filename,
                    created_at=record.created_at,
                    title=document_title(record),
                    summary=_summary(record.metadata),
                    tags=_tags(record.metadata),
                    expanded=expanded,
                    chunk_count=len(record.chunks),
                    chunks=[self._render_chunk(c, i) for i, c in enumerate(record.chunks, start=1)] if expanded else [],
                )
            )
        return views

    def _render_chunk(self, chunk: ChunkRecord, ordinal: int) -> ChunkView:
        content_expanded = chunk.id in self._content_expanded
        return ChunkView(
            id=chunk.id,
            page_index=chunk.page_index,
            title=chunk_title(chunk, ordinal),
            summary=_summary(chunk.metadata),
            tags=_tags(chunk.metadata),
            content_expanded=content_expanded,
            content=chunk.content if content_expanded else None,
        )
