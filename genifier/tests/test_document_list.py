import asyncio

import pytest

from genifier.mappings import SUMMARY_PLACEHOLDER
from genifier.services.backend import CommandError
from genifier.services.documents import DocumentListView
from genifier.services.event_log import EventLog


def _records() -> list[dict]:
    return [
        {
            "id": "document:bare",
            "filename": "notes.pdf",
            "created_at": "2024-05-01T09:00:00Z",
            "metadata": {},
            "chunks": [
                {"id": "chunk:a", "content": "First page text.", "page_index": 0},
                {
                    "id": "chunk:b",
                    "content": "Second page text.",
                    "page_index": 1,
                    "metadata": {"title": "Results", "summary": "Key findings", "tags": ["ml", "graphs"]},
                },
            ],
        },
        {"id": "document:null-meta", "filename": "scan.pdf", "metadata": None, "chunks": []},
    ]


def _view(backend) -> DocumentListView:
    backend.responses["get_documents"] = _records()
    view = DocumentListView(backend, EventLog())
    asyncio.run(view.refresh())
    return view


def test_missing_summary_renders_placeholder(backend):
    view = _view(backend)

    bare, null_meta = view.render()

    assert bare.summary == SUMMARY_PLACEHOLDER
    assert null_meta.summary == SUMMARY_PLACEHOLDER
    assert bare.title == "notes.pdf"
    assert bare.tags == []


def test_documents_start_collapsed(backend):
    view = _view(backend)

    rendered = view.render()

    assert all(not d.expanded for d in rendered)
    assert rendered[0].chunks == []
    assert rendered[0].chunk_count == 2


def test_expanded_chunks_use_fallbacks(backend):
    view = _view(backend)

    assert view.toggle("document:bare") is True
    first, second = view.render()[0].chunks

    assert first.title == "Chunk #1"
    assert first.summary == SUMMARY_PLACEHOLDER
    assert first.tags == []
    assert second.title == "Results"
    assert second.summary == "Key findings"
    assert second.tags == ["ml", "graphs"]


def test_chunk_content_hidden_until_revealed(backend):
    view = _view(backend)
    view.toggle("document:bare")

    assert view.render()[0].chunks[0].content is None
    view.toggle_content("chunk:a")
    chunk = view.render()[0].chunks[0]

    assert chunk.content_expanded is True
    assert chunk.content == "First page text."
    assert view.toggle_content("chunk:a") is False


def test_toggle_unknown_ids_raise(backend):
    view = _view(backend)
    with pytest.raises(KeyError):
        view.toggle("document:missing")
    with pytest.raises(KeyError):
        view.toggle_content("chunk:missing")


def test_refresh_failure_keeps_cached_list(backend):
    view = _view(backend)
    backend.responses["get_documents"] = CommandError("get_documents", "store offline")

    assert asyncio.run(view.refresh()) is False
    assert [d.id for d in view.records] == ["document:bare", "document:null-meta"]


def test_ensure_loaded_fetches_once_per_epoch(backend):
    backend.responses["get_documents"] = _records()
    view = DocumentListView(backend, EventLog())

    async def scenario():
        await view.ensure_loaded(0)
        await view.ensure_loaded(0)
        await view.ensure_loaded(1)

    asyncio.run(scenario())

    assert backend.count("get_documents") == 2
    assert view.loaded_epoch == 1


def test_refresh_replaces_wholesale_and_prunes_expansion(backend):
    view = _view(backend)
    view.toggle("document:bare")
    view.toggle("document:null-meta")
    backend.responses["get_documents"] = [_records()[1]]

    asyncio.run(view.refresh())

    assert [d.id for d in view.records] == ["document:null-meta"]
    assert view.is_expanded("document:null-meta")
    assert not view.is_expanded("document:bare")
