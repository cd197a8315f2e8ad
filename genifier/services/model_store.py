import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from genifier.config import settings
from genifier.models.catalog import CatalogEntry, CatalogModel
from genifier.models.commands import DownloadModelArgs
from genifier.models.pipeline import LogLevel
from genifier.services.backend import CommandError
from genifier.services.event_log import EventLog

logger = logging.getLogger(__name__)

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]
_catalog_adapter = TypeAdapter(list[CatalogModel])


def format_bytes(size: int | None) -> str:
    if not size or size <= 0:
        return "Unknown size"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[unit]}"


def format_downloads(count: int) -> str:
    if count > 1000:
        return f"{count / 1000:.1f}k"
    return str(count)


def download_target(model_id: str) -> tuple[str, str]:
    """``(url, filename)`` of the GGUF file published under ``model_id``."""
    owner, _, repo = model_id.partition("/")
    if not owner or not repo:
        raise ValueError(f"model id must be 'owner/name', got '{model_id}'")
    filename = f"{repo}.gguf"
    url = f"{settings.MODEL_DOWNLOAD_BASE.rstrip('/')}/{model_id}/resolve/main/{filename}"
    return url, filename


class ModelStore:
    def __init__(self, backend, client: httpx.AsyncClient, log: EventLog):
        self._backend = backend
        self._client = client
        self._log = log
        self.models: list[CatalogModel] = []
        self.downloading: set[str] = set()

    async def refresh_catalog(self) -> bool:
        params = {
            "search": settings.MODEL_CATALOG_SEARCH,
            "sort": "downloads",
            "direction": -1,
            "limit": settings.MODEL_CATALOG_LIMIT,
        }
        try:
            r = await self._client.get(settings.MODEL_CATALOG_URL, params=params)
            r.raise_for_status()
            self.models = _catalog_adapter.validate_python(r.json())
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.warning("Model catalog unavailable: %s", e)
            self._log.append(f"Model catalog unavailable: {e}", LogLevel.WARNING)
            return False
        return True

    def entries(self) -> list[CatalogEntry]:
        return [
            CatalogEntry(
                id=m.id,
                name=m.id.split("/", 1)[-1],
                size_label=format_bytes(m.size),
                downloads_label=format_downloads(m.downloads),
                likes=m.likes,
                downloading=m.id in self.downloading,
            )
            for m in self.models
        ]

    async def download(self, model_id: str) -> bool:
        if model_id in self.downloading:
            self._log.append(f"Download already running: {model_id}", LogLevel.WARNING)
            return False
        url, filename = download_target(model_id)
        self.downloading.add(model_id)
        self._log.append(f"Downloading {filename}")
        try:
            await self._backend.invoke("download_model", DownloadModelArgs(url=url, filename=filename))
        except CommandError as e:
            self._log.append(f"Download failed: {e.message}", LogLevel.ERROR)
            return False
        finally:
            self.downloading.discard(model_id)
        self._log.append(f"Download complete: {filename}")
        return True
