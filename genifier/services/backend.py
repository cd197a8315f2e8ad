import logging
from typing import Any

import httpx
from pydantic import BaseModel

from genifier.config import settings
from genifier.models.commands import COMMAND_ARGS, NoArgs

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """A backend command rejected, or its transport failed."""

    def __init__(self, command: str, message: str):
        super().__init__(f"{command}: {message}")
        self.command = command
        self.message = message


class BackendClient:
    def __init__(self, base_url: str, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None):
        self._base = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def start(self):
        self._client = httpx.AsyncClient(
            base_url=self._base,
            headers={"Content-Type": "application/json"},
            timeout=self._timeout,
            transport=self._transport,
        )

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None

    async def invoke(self, command: str, args: BaseModel | None = None) -> Any:
        schema = COMMAND_ARGS.get(command)
        if schema is None:
            raise TypeError(f"unknown backend command '{command}'")
        if args is None:
            args = NoArgs()
        if type(args) is not schema:
            raise TypeError(f"'{command}' expects {schema.__name__}, got {type(args).__name__}")
        if not self._client:
            raise RuntimeError("BackendClient not started")

        payload = args.model_dump(by_alias=True)
        logger.debug("Invoking %s args=%s", command, payload)
        try:
            r = await self._client.post(f"/invoke/{command}", json=payload)
        except httpx.HTTPError as e:
            raise CommandError(command, f"transport error: {e}") from e

        if r.status_code >= 400:
            raise CommandError(command, _error_detail(r))
        if not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise CommandError(command, "response is not valid JSON") from e


def _error_detail(r: httpx.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        return r.text or f"HTTP {r.status_code}"
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or body)
    return str(body)


def create_backend_client() -> BackendClient:
    return BackendClient(settings.BACKEND_URL, timeout=settings.BACKEND_TIMEOUT_SECONDS)
