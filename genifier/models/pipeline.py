from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class PipelineStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class Presentation(str, Enum):
    GRAPH = "graph"
    LIST = "list"


class LogLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogEntry(BaseModel):
    timestamp: datetime
    level: LogLevel
    message: str


class PipelineSnapshot(BaseModel):
    status: PipelineStatus
    selected_path: str | None
    selected_chat_log: str | None
    refresh_epoch: int
    hardware_accel: bool
    hardware_accel_pending: bool
    presentation: Presentation
    view_mode: str
    log: list[LogEntry]
