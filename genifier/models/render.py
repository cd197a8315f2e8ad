from pydantic import BaseModel, Field


class NodeStyle(BaseModel):
    id: str
    label: str
    color: str
    val: float
    hovered: bool = False


class LinkStyle(BaseModel):
    source: str
    target: str
    color: str
    width: float
    arrow_length: float
    connected: bool


class LabelBox(BaseModel):
    x: float
    y: float
    width: float
    height: float


class LinkLabel(BaseModel):
    text: str
    x: float
    y: float
    font: str
    font_size: float
    font_weight: str
    background: str
    foreground: str
    box: LabelBox


class Frame(BaseModel):
    scale: float
    hover_node_id: str | None = None
    empty: bool = True
    nodes: list[NodeStyle] = Field(default_factory=list)
    links: list[LinkStyle] = Field(default_factory=list)
    labels: list[LinkLabel] = Field(default_factory=list)


class EngineStopResponse(BaseModel):
    zoom_to_fit: bool
    duration_ms: int
