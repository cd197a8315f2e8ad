from pydantic import BaseModel, Field


class RecordMetadata(BaseModel):
    title: str | None = None
    summary: str | None = None
    tags: list[str] | None = None


class ChunkRecord(BaseModel):
    id: str
    content: str = ""
    page_index: int = 0
    metadata: RecordMetadata | None = None


class DocumentRecord(BaseModel):
    id: str
    filename: str
    created_at: str | None = None
    metadata: RecordMetadata | None = None
    chunks: list[ChunkRecord] = Field(default_factory=list)


class ChunkView(BaseModel):
    id: str
    page_index: int
    title: str
    summary: str
    tags: list[str]
    content_expanded: bool
    content: str | None = None


class DocumentView(BaseModel):
    id: str
    filename: str
    created_at: str | None = None
    title: str
    summary: str
    tags: list[str]
    expanded: bool
    chunk_count: int
    chunks: list[ChunkView] = Field(default_factory=list)
