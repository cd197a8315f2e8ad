"""Grounded chat against the local model server."""

import json
import logging
from typing import AsyncIterator

import httpx

from genifier.config import settings
from genifier.models.commands import SearchDocsArgs
from genifier.services.backend import CommandError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful AI assistant."

_DATA_PREFIX = "data: "
_DONE = "[DONE]"


class ChatError(Exception):
    pass


def build_prompt(context: str, question: str) -> str:
    return (
        "You are an assistant that answers from the documents the user provided.\n"
        "Answer the question clearly and accurately using the [Reference documents] below.\n"
        "If the documents do not cover it, answer from general knowledge and say that "
        "the documents do not mention it.\n"
        "\n"
        "[Reference documents]\n"
        f"{context}\n"
        "\n"
        "[Question]\n"
        f"{question}"
    )


async def search_context(backend, query: str) -> str:
    """Concatenated context for ``query``; empty when the search fails."""
    try:
        result = await backend.invoke("search_docs", SearchDocsArgs(query=query))
    except CommandError as e:
        logger.warning("Document search failed, answering without context: %s", e)
        return ""
    return "" if result is None else str(result)


def parse_stream_line(line: str) -> str | None:
    """Content delta carried by one streamed line, or ``None`` to skip it."""
    if not line.startswith(_DATA_PREFIX):
        return None
    data = line[len(_DATA_PREFIX):].strip()
    if not data or data == _DONE:
        return None
    try:
        payload = json.loads(data)
        content = payload["choices"][0].get("delta", {}).get("content")
    except (ValueError, KeyError, IndexError, TypeError, AttributeError):
        return None
    return content or None


async def stream_completion(client: httpx.AsyncClient, prompt: str, model: str) -> AsyncIterator[str]:
    body = {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        "stream": True,
    }
    async with client.stream("POST", "/v1/chat/completions", json=body) as r:
        if r.status_code >= 400:
            raise ChatError(f"model server returned HTTP {r.status_code}")
        async for line in r.aiter_lines():
            if line.strip() == f"{_DATA_PREFIX}{_DONE}":
                break
            text = parse_stream_line(line)
            if text:
                yield text


def _sse(event: str, payload: dict) -> str:
    return f"event: {event}\ndata: {json.dumps(payload, ensure_ascii=False)}\n\n"


async def stream_chat_events(backend, client: httpx.AsyncClient, query: str, model: str | None = None):
    model = model or settings.LLM_MODEL
    yield _sse("start", {"query": query})

    context = await search_context(backend, query)
    yield _sse("context", {"grounded": bool(context), "context_chars": len(context)})

    full_text = ""
    try:
        async for text in stream_completion(client, build_prompt(context, query), model):
            full_text += text
            yield _sse("delta", {"text": text})
        yield _sse("done", {"text": full_text, "model": model})
    except (httpx.HTTPError, ChatError) as exc:
        logger.exception("Chat completion failed")
        yield _sse(
            "error",
            {
                "message": "The local model did not complete the answer.",
                "partial_text": full_text,
                "detail": str(exc),
            },
        )


def create_llm_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=settings.LLM_URL, timeout=settings.LLM_TIMEOUT_SECONDS)
