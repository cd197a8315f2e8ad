import logging

from pydantic import ValidationError

from genifier.models.commands import FetchGraphDataArgs
from genifier.models.graph import GraphData
from genifier.models.pipeline import LogLevel
from genifier.services.backend import CommandError
from genifier.services.event_log import EventLog

logger = logging.getLogger(__name__)


class GraphDataAdapter:
    """Fetches graph payloads keyed by ``(view_mode, epoch)``.

    One request per distinct key. Each successful response becomes a brand new
    object graph for the renderer; the validated payload itself is kept
    pristine so later copies never inherit layout mutations.
    """

    def __init__(self, backend, log: EventLog | None = None):
        self._backend = backend
        self._log = log
        self._key: tuple[str, int] | None = None
        self._pristine: GraphData | None = None

    @property
    def key(self) -> tuple[str, int] | None:
        return self._key

    @property
    def has_data(self) -> bool:
        return self._pristine is not None

    async def fetch(self, view_mode: str, epoch: int) -> GraphData | None:
        """Return new render data, or ``None`` when the current render stands.

        ``None`` covers: key already requested, fetch failed, or the response
        was overtaken by a request for a newer key.
        """
        key = (view_mode, epoch)
        if key == self._key:
            return None
        self._key = key

        try:
            raw = await self._backend.invoke("fetch_graph_data", FetchGraphDataArgs(view_mode=view_mode))
            payload = GraphData.model_validate(raw)
        except (CommandError, ValidationError) as e:
            if key != self._key:
                logger.warning("Ignoring failed graph response for %s; latest request is %s", key, self._key)
                return None
            logger.error("Graph load failed for %s: %s", key, e)
            if self._log is not None:
                self._log.append(f"Graph load failed: {e}", LogLevel.ERROR)
            return None

        if key != self._key:
            logger.warning("Discarding graph response for %s; latest request is %s", key, self._key)
            return None

        self._pristine = payload
        return payload.detached()

    def snapshot(self) -> GraphData:
        """Detached copy of the last good payload (empty before the first load)."""
        if self._pristine is None:
            return GraphData()
        return self._pristine.detached()
