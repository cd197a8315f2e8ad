import logging
from contextlib import ExitStack

from genifier.models.commands import LogNodeClickArgs
from genifier.models.graph import GraphNode, SelectedNode
from genifier.models.pipeline import PipelineSnapshot, Presentation
from genifier.services.documents import DocumentListView
from genifier.services.graph_adapter import GraphDataAdapter
from genifier.services.interaction import InteractionEngine, ViewportChannel
from genifier.services.pipeline import PipelineController
from genifier.services.tasks import spawn_detached

logger = logging.getLogger(__name__)


class ViewCoordinator:
    """Switches between the graph and list presentations.

    Pipeline state, the selected source and the refresh epoch live on the
    controller and survive every switch; each presentation fetches lazily.
    """

    def __init__(
        self,
        controller: PipelineController,
        adapter: GraphDataAdapter,
        engine: InteractionEngine,
        documents: DocumentListView,
        viewport: ViewportChannel,
        backend=None,
        view_mode: str = "all",
        audit_clicks: bool = True,
    ):
        self.controller = controller
        self.adapter = adapter
        self.engine = engine
        self.documents = documents
        self.viewport = viewport
        self._backend = backend
        self._audit_clicks = audit_clicks
        self.view_mode = view_mode
        self.presentation = Presentation.GRAPH
        self.selected: SelectedNode | None = None
        self._mount = ExitStack()
        self._mount.enter_context(engine.mounted(viewport))

        controller.navigate = self.switch
        engine.add_click_listener(self._handle_click)

    async def switch(self, presentation: Presentation) -> None:
        if presentation != self.presentation:
            if self.presentation is Presentation.GRAPH:
                self._mount.close()
            else:
                self._mount.enter_context(self.engine.mounted(self.viewport))
            self.presentation = presentation
            logger.info("Presentation switched to %s", presentation.value)
        await self.sync()

    async def set_view_mode(self, view_mode: str) -> None:
        self.view_mode = view_mode
        await self.sync()

    async def sync(self) -> bool:
        """Fetch whatever the active presentation is missing for the current epoch."""
        epoch = self.controller.refresh_epoch
        if self.presentation is Presentation.LIST:
            return await self.documents.ensure_loaded(epoch)

        data = await self.adapter.fetch(self.view_mode, epoch)
        if data is None:
            return False
        self.engine.load(data)
        if self.selected is not None and self.engine.node(self.selected.id) is None:
            self.selected = None
        return True

    # -- detail panel ----------------------------------------------------

    def click(self, node_id: str) -> SelectedNode:
        node = self.engine.node(node_id)
        if node is None:
            raise KeyError(node_id)
        self.engine.on_node_click(node)
        return self.selected

    def _handle_click(self, node: GraphNode) -> None:
        self.selected = SelectedNode.from_node(node)
        if self._audit_clicks and self._backend is not None:
            args = LogNodeClickArgs(node_id=node.id, group=node.group, label=node.label, info=node.info)
            spawn_detached(self._backend.invoke("log_node_click", args), name=f"log_node_click:{node.id}")

    def close_detail(self) -> None:
        self.selected = None

    # -- state -----------------------------------------------------------

    def snapshot(self) -> PipelineSnapshot:
        c = self.controller
        return PipelineSnapshot(
            status=c.status,
            selected_path=c.selected_path,
            selected_chat_log=c.selected_chat_log,
            refresh_epoch=c.refresh_epoch,
            hardware_accel=c.hardware.value,
            hardware_accel_pending=c.hardware.pending,
            presentation=self.presentation,
            view_mode=self.view_mode,
            log=c.log.entries(),
        )

    def close(self) -> None:
        self._mount.close()
