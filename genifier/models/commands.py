"""Argument schemas for the backend command surface.

Python field names are snake_case; ``model_dump(by_alias=True)`` yields the
exact argument names the backend declares. ``COMMAND_ARGS`` is the single
place that binds a command name to its schema.
"""

from pydantic import BaseModel, ConfigDict, Field


class _CommandArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class NoArgs(_CommandArgs):
    pass


class FetchGraphDataArgs(_CommandArgs):
    view_mode: str = Field(alias="viewMode")


class PathArgs(_CommandArgs):
    path: str


class ProcessKakaoLogArgs(_CommandArgs):
    file_path: str = Field(alias="filePath")


class ToggleGpuArgs(_CommandArgs):
    enable: bool


class SearchDocsArgs(_CommandArgs):
    query: str


class DownloadModelArgs(_CommandArgs):
    url: str
    filename: str


class LogNodeClickArgs(_CommandArgs):
    node_id: str = Field(alias="nodeId")
    group: str
    label: str
    info: str | None = None


COMMAND_ARGS: dict[str, type[_CommandArgs]] = {
    "fetch_graph_data": FetchGraphDataArgs,
    "get_documents": NoArgs,
    "ingest_documents": PathArgs,
    "construct_graph": NoArgs,
    # separate analysis step; the shell drives it through the combined process_pdfs_graph
    "process_pdfs": PathArgs,
    "process_pdfs_graph": PathArgs,
    "process_kakao_log": ProcessKakaoLogArgs,
    "toggle_gpu": ToggleGpuArgs,
    "search_docs": SearchDocsArgs,
    "download_model": DownloadModelArgs,
    "log_node_click": LogNodeClickArgs,
}
