import asyncio
from typing import Any

import pytest


class FakeBackend:
    """Scripted stand-in for the backend command surface.

    A response may be a value, an exception instance (raised), a callable
    taking the args model, or an ``asyncio.Future`` awaited at call time.
    """

    def __init__(self, responses: dict[str, Any] | None = None):
        self.responses: dict[str, Any] = dict(responses or {})
        self.calls: list[tuple[str, Any]] = []
        self.started = False

    async def start(self):
        self.started = True

    async def close(self):
        self.started = False

    async def invoke(self, command: str, args=None):
        self.calls.append((command, args))
        result = self.responses.get(command)
        if isinstance(result, asyncio.Future):
            return await result
        if isinstance(result, BaseException):
            raise result
        if callable(result):
            result = result(args)
            if isinstance(result, BaseException):
                raise result
        return result

    def count(self, command: str) -> int:
        return sum(1 for name, _ in self.calls if name == command)

    def args_for(self, command: str) -> list:
        return [args for name, args in self.calls if name == command]


def graph_payload(*ids: str, links: list[tuple[str, str, str | None]] = ()) -> dict:
    groups = ["document", "entity", "chunk", "event"]
    return {
        "nodes": [
            {"id": node_id, "group": groups[i % len(groups)], "label": node_id.upper(), "val": 5 + i}
            for i, node_id in enumerate(ids)
        ],
        "links": [{"source": s, "target": t, "label": label} for s, t, label in links],
    }


def document_records(count: int) -> list[dict]:
    return [
        {
            "id": f"document:{i}",
            "filename": f"report-{i}.pdf",
            "created_at": "2024-05-01T09:00:00Z",
            "metadata": {"title": f"Report {i}", "summary": "Quarterly figures", "tags": ["finance"]},
            "chunks": [{"id": f"chunk:{i}-0", "content": "Revenue grew.", "page_index": 0}],
        }
        for i in range(count)
    ]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def make_graph():
    return graph_payload


@pytest.fixture
def make_documents():
    return document_records


@pytest.fixture
def backend_factory():
    return FakeBackend
