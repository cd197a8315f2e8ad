from dataclasses import dataclass

import httpx
from fastapi import Request

from genifier.config import settings
from genifier.services.backend import create_backend_client
from genifier.services.chat import create_llm_client
from genifier.services.coordinator import ViewCoordinator
from genifier.services.documents import DocumentListView
from genifier.services.event_log import EventLog
from genifier.services.graph_adapter import GraphDataAdapter
from genifier.services.interaction import InteractionEngine, ViewportChannel
from genifier.services.model_store import ModelStore
from genifier.services.pipeline import PipelineController


@dataclass
class Shell:
    """One desktop session: every long-lived piece of client state."""

    backend: object
    llm: httpx.AsyncClient
    catalog: httpx.AsyncClient
    log: EventLog
    documents: DocumentListView
    controller: PipelineController
    adapter: GraphDataAdapter
    engine: InteractionEngine
    viewport: ViewportChannel
    coordinator: ViewCoordinator
    models: ModelStore

    async def start(self):
        await self.backend.start()

    async def close(self):
        self.coordinator.close()
        await self.backend.close()
        await self.llm.aclose()
        await self.catalog.aclose()


def build_shell(backend=None, llm: httpx.AsyncClient | None = None, catalog: httpx.AsyncClient | None = None) -> Shell:
    backend = backend or create_backend_client()
    llm = llm or create_llm_client()
    catalog = catalog or httpx.AsyncClient(timeout=15.0)

    log = EventLog(settings.LOG_CAPACITY)
    documents = DocumentListView(backend, log)
    controller = PipelineController(backend, documents, log)
    adapter = GraphDataAdapter(backend, log)
    engine = InteractionEngine(label_zoom_threshold=settings.LINK_LABEL_ZOOM_THRESHOLD)
    viewport = ViewportChannel()
    coordinator = ViewCoordinator(
        controller,
        adapter,
        engine,
        documents,
        viewport,
        backend=backend,
        view_mode=settings.DEFAULT_VIEW_MODE,
        audit_clicks=settings.AUDIT_NODE_CLICKS,
    )
    return Shell(
        backend=backend,
        llm=llm,
        catalog=catalog,
        log=log,
        documents=documents,
        controller=controller,
        adapter=adapter,
        engine=engine,
        viewport=viewport,
        coordinator=coordinator,
        models=ModelStore(backend, catalog, log),
    )


def get_shell(request: Request) -> Shell:
    return request.app.state.shell
