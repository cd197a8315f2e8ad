import asyncio
import json

import httpx

from genifier.config import settings
from genifier.services.backend import CommandError
from genifier.services.chat import build_prompt, parse_stream_line, stream_chat_events


def _chunk(text: str) -> str:
    return "data: " + json.dumps({"choices": [{"delta": {"content": text}}]})


def _events(raw: list[str]) -> list[tuple[str, dict]]:
    parsed = []
    for block in raw:
        event_line, data_line = block.strip().split("\n", 1)
        parsed.append((event_line[len("event: "):], json.loads(data_line[len("data: "):])))
    return parsed


def _collect(backend, client, query="What grew?") -> list[tuple[str, dict]]:
    async def scenario():
        try:
            return [e async for e in stream_chat_events(backend, client, query, model="test-model")]
        finally:
            await client.aclose()

    return _events(asyncio.run(scenario()))


def _llm(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url="http://llm", transport=httpx.MockTransport(handler))


def test_parse_stream_line():
    assert parse_stream_line(_chunk("Hel")) == "Hel"
    assert parse_stream_line("data: [DONE]") is None
    assert parse_stream_line("data: {not json") is None
    assert parse_stream_line('data: {"choices": []}') is None
    assert parse_stream_line('data: {"choices": [{"delta": {}}]}') is None
    assert parse_stream_line(": keep-alive") is None
    assert parse_stream_line("") is None


def test_prompt_carries_context_and_question():
    prompt = build_prompt("Revenue grew 12%.", "What grew?")
    assert "[Reference documents]\nRevenue grew 12%." in prompt
    assert prompt.endswith("[Question]\nWhat grew?")


def test_stream_accumulates_deltas_and_skips_bad_lines(backend):
    backend.responses["search_docs"] = "Revenue grew 12%."
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        lines = [_chunk("Revenue "), "data: {broken", "", _chunk("grew."), "data: [DONE]", _chunk("ignored")]
        return httpx.Response(200, text="\n".join(lines) + "\n")

    events = _collect(backend, _llm(handler))

    assert [name for name, _ in events] == ["start", "context", "delta", "delta", "done"]
    assert events[1][1] == {"grounded": True, "context_chars": len("Revenue grew 12%.")}
    assert events[-1][1] == {"text": "Revenue grew.", "model": "test-model"}
    assert seen["path"] == "/v1/chat/completions"
    assert seen["body"]["stream"] is True
    assert "Revenue grew 12%." in seen["body"]["messages"][1]["content"]
    assert backend.args_for("search_docs")[0].query == "What grew?"


def test_search_failure_still_answers_ungrounded(backend):
    backend.responses["search_docs"] = CommandError("search_docs", "index missing")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=_chunk("Hi") + "\n")

    events = _collect(backend, _llm(handler))

    assert events[1][1]["grounded"] is False
    assert events[-1] == ("done", {"text": "Hi", "model": "test-model"})


def test_model_server_error_becomes_error_event(backend):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="out of memory")

    events = _collect(backend, _llm(handler))

    name, payload = events[-1]
    assert name == "error"
    assert payload["partial_text"] == ""
    assert "500" in payload["detail"]


def test_configured_model_is_used_by_default(backend, monkeypatch):
    monkeypatch.setattr(settings, "LLM_MODEL", "qwen2-7b-instruct-q4")
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, text=_chunk("ok") + "\n")

    async def scenario():
        client = _llm(handler)
        try:
            return [e async for e in stream_chat_events(backend, client, "hello")]
        finally:
            await client.aclose()

    events = _events(asyncio.run(scenario()))

    assert bodies[0]["model"] == "qwen2-7b-instruct-q4"
    assert events[-1][1]["model"] == "qwen2-7b-instruct-q4"
