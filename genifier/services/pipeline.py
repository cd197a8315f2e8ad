"""Staged pipeline: source selection -> ingestion -> graph construction."""

import logging
from typing import Awaitable, Callable

from genifier.mappings import CHAT_LOG_EXTENSIONS
from genifier.models.commands import NoArgs, PathArgs, ProcessKakaoLogArgs, ToggleGpuArgs
from genifier.models.pipeline import LogLevel, PipelineStatus, Presentation
from genifier.services.backend import CommandError
from genifier.services.documents import DocumentListView
from genifier.services.event_log import EventLog
from genifier.services.hardware import HardwareAccelFlag
from genifier.services.pickers import SourcePicker

logger = logging.getLogger(__name__)

Navigator = Callable[[Presentation], Awaitable[None]]


class PipelineController:
    def __init__(
        self,
        backend,
        documents: DocumentListView,
        log: EventLog,
        picker: SourcePicker | None = None,
    ):
        self._backend = backend
        self._documents = documents
        self._picker = picker
        self.log = log
        self.status = PipelineStatus.IDLE
        self.selected_path: str | None = None
        self.selected_chat_log: str | None = None
        self.refresh_epoch = 0
        self.hardware = HardwareAccelFlag()
        self.navigate: Navigator | None = None
        self.status_listeners: list[Callable[[PipelineStatus], None]] = []
        # Latest stage trigger owns the status and navigation.
        self._seq = 0

    # -- state -----------------------------------------------------------

    def append_log(self, message: str, level: LogLevel = LogLevel.INFO) -> None:
        self.log.append(message, level)

    def _set_status(self, status: PipelineStatus) -> None:
        self.status = status
        for listener in self.status_listeners:
            listener(status)

    def _next_seq(self) -> int:
        self._seq += 1
        return self._seq

    def _superseded(self, seq: int, stage: str) -> bool:
        if seq == self._seq:
            return False
        logger.warning("%s (request %d) finished after request %d; status left to the newer one", stage, seq, self._seq)
        return True

    # -- source selection ------------------------------------------------

    async def select_source(self, picker: SourcePicker | None = None) -> str | None:
        picker = picker or self._picker
        if picker is None:
            raise RuntimeError("no source picker configured")
        try:
            path = await picker.pick_directory()
        except Exception as e:
            logger.exception("Directory picker failed")
            self.append_log(f"Folder selection failed: {e}", LogLevel.ERROR)
            return None
        if not path:
            return None
        self.selected_path = path
        self._set_status(PipelineStatus.IDLE)
        self.append_log(f"Selected: {path}")
        return path

    async def select_chat_log(self, picker: SourcePicker | None = None) -> str | None:
        picker = picker or self._picker
        if picker is None:
            raise RuntimeError("no source picker configured")
        try:
            path = await picker.pick_file(CHAT_LOG_EXTENSIONS)
        except Exception as e:
            logger.exception("File picker failed")
            self.append_log(f"Chat log selection failed: {e}", LogLevel.ERROR)
            return None
        if not path:
            return None
        self.selected_chat_log = path
        self._set_status(PipelineStatus.IDLE)
        self.append_log(f"Selected chat log: {path}")
        return path

    # -- stages ----------------------------------------------------------

    async def _run_stage(self, stage: str, command: str, args) -> tuple[bool, str] | None:
        """Shared loading -> success/error protocol.

        Returns ``(current, message)`` on success and ``None`` on failure. A
        success always advances the refresh epoch; ``current`` is false when a
        newer stage trigger owns the status.
        """
        seq = self._next_seq()
        self._set_status(PipelineStatus.LOADING)
        self.append_log(f"{stage} started")
        try:
            result = await self._backend.invoke(command, args)
        except CommandError as e:
            self.append_log(f"{stage} failed: {e.message}", LogLevel.ERROR)
            if not self._superseded(seq, stage):
                self._set_status(PipelineStatus.ERROR)
            return None

        message = "" if result is None else str(result)
        self.refresh_epoch += 1
        self.append_log(f"{stage} completed: {message}")
        current = not self._superseded(seq, stage)
        if current:
            self._set_status(PipelineStatus.SUCCESS)
        return current, message

    async def _go(self, presentation: Presentation) -> None:
        if self.navigate is not None:
            await self.navigate(presentation)

    async def start_ingest(self, path: str | None = None) -> str | None:
        if self.selected_path is None:
            self.append_log("Ingest skipped: no source folder selected", LogLevel.WARNING)
            return None
        outcome = await self._run_stage("Ingest", "ingest_documents", PathArgs(path=path or self.selected_path))
        if outcome is None:
            return None
        current, message = outcome
        await self._documents.refresh(self.refresh_epoch)
        if current:
            await self._go(Presentation.LIST)
        return message

    async def start_graph_build(self) -> str | None:
        outcome = await self._run_stage("Graph build", "construct_graph", NoArgs())
        if outcome is None:
            return None
        current, message = outcome
        if current:
            await self._go(Presentation.GRAPH)
        return message

    async def start_pdf_graph(self, path: str | None = None) -> str | None:
        """Ingest and build in one backend stage."""
        if self.selected_path is None:
            self.append_log("PDF analysis skipped: no source folder selected", LogLevel.WARNING)
            return None
        outcome = await self._run_stage("PDF analysis", "process_pdfs_graph", PathArgs(path=path or self.selected_path))
        if outcome is None:
            return None
        current, message = outcome
        if current:
            await self._go(Presentation.GRAPH)
        return message

    async def import_chat_log(self, file_path: str | None = None) -> str | None:
        target = file_path or self.selected_chat_log
        if not target:
            self.append_log("Chat log import skipped: no file selected", LogLevel.WARNING)
            return None
        outcome = await self._run_stage("Chat log import", "process_kakao_log", ProcessKakaoLogArgs(file_path=target))
        return None if outcome is None else outcome[1]

    # -- hardware acceleration ---------------------------------------------

    async def toggle_hardware_accel(self) -> bool:
        """Flip the flag now, confirm or roll back once the backend answers.

        Returns the flag value after settling. The toggle runs outside the
        stage sequence: it never supersedes a stage, and it leaves the status
        alone when a stage was triggered while it was in flight.
        """
        if self.hardware.pending:
            self.append_log("GPU toggle ignored: previous toggle still pending", LogLevel.WARNING)
            return self.hardware.value

        desired = self.hardware.propose()
        stage_seq = self._seq
        self._set_status(PipelineStatus.LOADING)
        self.append_log(f"{'Enabling' if desired else 'Disabling'} GPU acceleration")
        try:
            result = await self._backend.invoke("toggle_gpu", ToggleGpuArgs(enable=desired))
        except CommandError as e:
            self.hardware.rollback()
            self.append_log(f"GPU toggle failed: {e.message}", LogLevel.ERROR)
            if stage_seq == self._seq:
                self._set_status(PipelineStatus.ERROR)
            return self.hardware.value

        self.hardware.confirm()
        if result:
            self.append_log(str(result))
        if stage_seq == self._seq:
            self._set_status(PipelineStatus.IDLE)
        return self.hardware.value
