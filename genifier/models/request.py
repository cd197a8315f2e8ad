from pydantic import BaseModel, ConfigDict, Field

from genifier.models.pipeline import Presentation


class PickedPathRequest(BaseModel):
    # null when the native dialog was cancelled
    path: str | None = None


class ViewModeRequest(BaseModel):
    view_mode: str = Field(..., min_length=1, max_length=64)


class PresentationRequest(BaseModel):
    presentation: Presentation


class ViewportRequest(BaseModel):
    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)


class HoverRequest(BaseModel):
    node_id: str | None = None


class ClickRequest(BaseModel):
    node_id: str = Field(..., min_length=1)


class ChatRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=4000)


class DownloadRequest(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_id: str = Field(..., min_length=3, max_length=200, pattern=r"^[^/\s]+/[^/\s]+$")


class NodePosition(BaseModel):
    x: float
    y: float


class PositionsRequest(BaseModel):
    # node id -> position reported by the layout engine after a tick
    positions: dict[str, NodePosition]
