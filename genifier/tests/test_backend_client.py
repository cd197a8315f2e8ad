import asyncio
import json

import httpx
import pytest

from genifier.models.commands import COMMAND_ARGS, FetchGraphDataArgs, NoArgs, PathArgs
from genifier.services.backend import BackendClient, CommandError


def _invoke(handler, command, args=None):
    async def scenario():
        client = BackendClient("http://backend/", transport=httpx.MockTransport(handler))
        await client.start()
        try:
            return await client.invoke(command, args)
        finally:
            await client.close()

    return asyncio.run(scenario())


def test_invoke_posts_aliased_arguments():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"nodes": [], "links": []})

    result = _invoke(handler, "fetch_graph_data", FetchGraphDataArgs(view_mode="all"))

    assert seen == {"path": "/invoke/fetch_graph_data", "body": {"viewMode": "all"}}
    assert result == {"nodes": [], "links": []}


def test_no_arg_command_sends_empty_object():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json="48 nodes, 70 edges")

    assert _invoke(handler, "construct_graph") == "48 nodes, 70 edges"
    assert bodies == [{}]


def test_empty_body_is_none():
    assert _invoke(lambda request: httpx.Response(204), "toggle_gpu", COMMAND_ARGS["toggle_gpu"](enable=True)) is None


@pytest.mark.parametrize(
    "command, args",
    [
        ("fetch_graph_data", NoArgs()),
        ("ingest_documents", FetchGraphDataArgs(view_mode="all")),
        ("drop_database", NoArgs()),
    ],
)
def test_mismatched_arguments_are_rejected_before_sending(command, args):
    def handler(request):
        raise AssertionError("request must not be sent")

    with pytest.raises(TypeError):
        _invoke(handler, command, args)


def test_backend_rejection_carries_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "folder does not exist"})

    with pytest.raises(CommandError) as exc_info:
        _invoke(handler, "ingest_documents", PathArgs(path="/missing"))

    assert exc_info.value.command == "ingest_documents"
    assert exc_info.value.message == "folder does not exist"


def test_transport_failure_is_a_command_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CommandError, match="transport error"):
        _invoke(handler, "get_documents")


def test_invoke_requires_start():
    client = BackendClient("http://backend")
    with pytest.raises(RuntimeError):
        asyncio.run(client.invoke("get_documents"))
