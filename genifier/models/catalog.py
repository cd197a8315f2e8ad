from pydantic import BaseModel, ConfigDict


class CatalogModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    downloads: int = 0
    likes: int = 0
    size: int | None = None


class CatalogEntry(BaseModel):
    id: str
    name: str
    size_label: str
    downloads_label: str
    likes: int
    downloading: bool = False
