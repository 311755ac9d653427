import json

import httpx
import pytest

from mcp_rest_bridge.protocol.dispatcher import ProtocolDispatcher
from mcp_rest_bridge.protocol.errors import ErrorCode, InvalidParams
from mcp_rest_bridge.rest_bridge_client import RestBridgeClient

from conftest import RecordingTransport, make_request, make_route


class NoNetworkClient:
    """Bridge client that fails the test if a bridged call is attempted"""

    def __init__(self):
        self.calls = 0

    async def call_endpoint(self, route, arguments, request=None):
        self.calls += 1
        raise AssertionError("bridged call attempted")


def rpc(method, params=None, request_id=1):
    message = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        message["params"] = params
    return message


@pytest.fixture
def dispatcher(registry, bridge_client):
    return ProtocolDispatcher(registry, bridge_client)


@pytest.mark.asyncio
async def test_initialize_defaults(dispatcher):
    response = await dispatcher.dispatch(rpc("initialize", {}))

    assert response["jsonrpc"] == "2.0"
    assert response["id"] == 1
    assert response["result"] == {
        "protocolVersion": "2024-11-05",
        "capabilities": {"tools": {}},
        "serverInfo": {"name": "express-mcp-server", "version": "1.0.0"}
    }


@pytest.mark.asyncio
async def test_initialize_advertises_resources_and_prompts_when_present(registry, dispatcher):
    registry.configure({
        "server_name": "items-api",
        "server_version": "2.1.0",
        "resources": [{"uri": "data://x", "name": "X", "description": ""}],
        "prompts": [{"name": "p", "description": "", "arguments": []}]
    })

    result = (await dispatcher.dispatch(rpc("initialize")))["result"]

    assert result["capabilities"] == {"tools": {}, "resources": {}, "prompts": {}}
    assert result["serverInfo"] == {"name": "items-api", "version": "2.1.0"}


@pytest.mark.asyncio
async def test_tools_list(registry, dispatcher):
    registry.register(make_route("list_items"))
    registry.register(make_route("create_item", method="POST"))

    response = await dispatcher.dispatch(rpc("tools/list", request_id="abc"))

    assert response["id"] == "abc"
    assert [t["name"] for t in response["result"]["tools"]] == ["list_items", "create_item"]


@pytest.mark.asyncio
async def test_tools_call_unknown_tool_lists_known_tools(registry, dispatcher):
    registry.register(make_route("list_items"))
    registry.register(make_route("create_item", method="POST"))

    response = await dispatcher.dispatch(rpc("tools/call", {"name": "X", "arguments": {}}))

    assert response["error"]["code"] == ErrorCode.INVALID_PARAMS == -32602
    assert response["error"]["message"] == "Unknown tool: X. Available tools: list_items, create_item"


@pytest.mark.asyncio
async def test_custom_handler_never_touches_network(registry):
    seen = {}

    async def handler(args, request):
        seen["args"] = args
        seen["request"] = request
        return {"sum": args["a"] + args["b"]}

    registry.register(make_route("add", method="GET", path="/add/:a", handler=handler))
    client = NoNetworkClient()
    dispatcher = ProtocolDispatcher(registry, client)
    request = make_request(host="api.local")

    response = await dispatcher.dispatch(
        rpc("tools/call", {"name": "add", "arguments": {"a": 2, "b": 3}}), request
    )

    assert client.calls == 0
    assert seen == {"args": {"a": 2, "b": 3}, "request": request}
    assert response["result"] == {
        "content": [{"type": "text", "text": json.dumps({"sum": 5}, indent=2)}]
    }


@pytest.mark.asyncio
async def test_sync_handler_string_result_passes_through(registry):
    registry.register(make_route("echo", handler=lambda args, request: "plain text"))
    dispatcher = ProtocolDispatcher(registry, NoNetworkClient())

    response = await dispatcher.dispatch(rpc("tools/call", {"name": "echo"}))

    assert response["result"]["content"][0]["text"] == "plain text"


@pytest.mark.asyncio
async def test_bridged_tool_call(registry, dispatcher, transport):
    registry.register(make_route("get_item", path="/items/:id"))

    response = await dispatcher.dispatch(
        rpc("tools/call", {"name": "get_item", "arguments": {"id": "42", "verbose": True}}),
        make_request(authorization="Bearer t")
    )

    sent = transport.requests[-1]
    assert str(sent.url) == "http://localhost:3000/items/42?verbose=true"
    assert sent.headers["authorization"] == "Bearer t"
    assert response["result"]["content"][0]["text"] == '{\n  "ok": true\n}'


@pytest.mark.asyncio
async def test_bridged_http_error_becomes_internal_error(registry):
    transport = RecordingTransport(lambda request: httpx.Response(500, text="boom"))
    dispatcher = ProtocolDispatcher(registry, RestBridgeClient(transport=transport))
    registry.register(make_route("explode", method="POST", path="/explode"))

    response = await dispatcher.dispatch(rpc("tools/call", {"name": "explode", "arguments": {}}, 9))

    assert response["id"] == 9
    assert response["error"] == {"code": -32603, "message": "HTTP 500: boom"}


@pytest.mark.asyncio
async def test_bridged_timeout_becomes_internal_error(registry):
    def stall(request):
        raise httpx.ReadTimeout("timed out", request=request)

    dispatcher = ProtocolDispatcher(registry, RestBridgeClient(timeout=5, transport=RecordingTransport(stall)))
    registry.register(make_route("slow_report", path="/reports/slow"))

    response = await dispatcher.dispatch(rpc("tools/call", {"name": "slow_report", "arguments": {}}, 1))

    assert response == {
        "jsonrpc": "2.0",
        "id": 1,
        "error": {"code": -32603, "message": "timed out"}
    }


@pytest.mark.asyncio
async def test_handler_errors_map_to_internal_error(registry):
    def failing(args, request):
        raise ValueError("bad widget")

    def silent(args, request):
        raise RuntimeError()

    def protocol_error(args, request):
        raise InvalidParams("quantity must be positive")

    registry.register(make_route("failing", path="/f", handler=failing))
    registry.register(make_route("silent", path="/s", handler=silent))
    registry.register(make_route("protocol", path="/p", handler=protocol_error))
    dispatcher = ProtocolDispatcher(registry, NoNetworkClient())

    failing_resp = await dispatcher.dispatch(rpc("tools/call", {"name": "failing"}))
    silent_resp = await dispatcher.dispatch(rpc("tools/call", {"name": "silent"}))
    protocol_resp = await dispatcher.dispatch(rpc("tools/call", {"name": "protocol"}))

    assert failing_resp["error"] == {"code": -32603, "message": "bad widget"}
    assert silent_resp["error"] == {"code": -32603, "message": "Tool execution failed"}
    assert protocol_resp["error"] == {"code": -32603, "message": "quantity must be positive"}


@pytest.mark.asyncio
async def test_resources_list_and_read(registry, dispatcher):
    async def stats(params):
        return {"filter": params.get("filter", "all")}

    registry.configure({
        "resources": [{"uri": "data://stats", "name": "Stats", "description": "Live stats"}],
        "resource_handlers": {"data://stats": stats, "data://motd": lambda params: "hello"}
    })

    listed = await dispatcher.dispatch(rpc("resources/list"))
    read = await dispatcher.dispatch(rpc("resources/read", {"uri": "data://stats", "filter": "active"}))
    text = await dispatcher.dispatch(rpc("resources/read", {"uri": "data://motd"}))

    assert listed["result"] == {"resources": [{"uri": "data://stats", "name": "Stats", "description": "Live stats"}]}
    assert read["result"] == {"contents": [{
        "uri": "data://stats",
        "mimeType": "application/json",
        "text": json.dumps({"filter": "active"}, indent=2)
    }]}
    assert text["result"]["contents"][0]["text"] == "hello"


@pytest.mark.asyncio
async def test_resources_read_unregistered_uri(dispatcher):
    response = await dispatcher.dispatch(rpc("resources/read", {"uri": "data://nope"}))

    assert response["error"] == {"code": -32603, "message": "no handler for resource: data://nope"}


@pytest.mark.asyncio
async def test_prompts_list_and_get(registry, dispatcher):
    async def greet(args):
        return f"Greet {args.get('who', 'nobody')}"

    registry.configure({
        "prompts": [{"name": "greet", "description": "Greeting", "arguments": []}],
        "prompt_handlers": {"greet": greet}
    })

    listed = await dispatcher.dispatch(rpc("prompts/list"))
    got = await dispatcher.dispatch(rpc("prompts/get", {"name": "greet", "arguments": {"who": "Ada"}}))
    no_args = await dispatcher.dispatch(rpc("prompts/get", {"name": "greet"}))

    assert listed["result"]["prompts"][0]["name"] == "greet"
    assert got["result"] == {"messages": [{"role": "user", "content": {"type": "text", "text": "Greet Ada"}}]}
    assert no_args["result"]["messages"][0]["content"]["text"] == "Greet nobody"


@pytest.mark.asyncio
async def test_prompts_get_missing_handler(dispatcher):
    response = await dispatcher.dispatch(rpc("prompts/get", {"name": "ghost"}))
    assert response["error"] == {"code": -32603, "message": "no handler for prompt: ghost"}


@pytest.mark.asyncio
@pytest.mark.parametrize("method", [
    "notifications/initialized",
    "notifications/cancelled",
    "notifications/progress",
    "notifications/something/unheard_of"
])
async def test_notifications_produce_no_response(dispatcher, method):
    message = {"jsonrpc": "2.0", "method": method, "params": {"requestId": 3}}
    assert await dispatcher.dispatch(message) is None


@pytest.mark.asyncio
async def test_unknown_method(dispatcher):
    response = await dispatcher.dispatch(rpc("tools/explode", request_id=5))
    assert response == {
        "jsonrpc": "2.0",
        "id": 5,
        "error": {"code": -32601, "message": "Method not found: tools/explode"}
    }


@pytest.mark.asyncio
async def test_non_string_method_is_not_found(dispatcher):
    response = await dispatcher.dispatch({"jsonrpc": "2.0", "id": 1, "method": 5})

    assert response == {
        "jsonrpc": "2.0",
        "id": 1,
        "error": {"code": -32601, "message": "Method not found: 5"}
    }


@pytest.mark.asyncio
async def test_malformed_requests_hit_top_level_catch_all(dispatcher):
    missing_method = await dispatcher.dispatch({"jsonrpc": "2.0", "id": 12})
    missing_params = await dispatcher.dispatch(rpc("tools/call", request_id=13))
    not_an_object = await dispatcher.dispatch(["not", "a", "request"])

    assert missing_method["error"] == {"code": -32603, "message": "Internal error"}
    assert missing_method["id"] == 12
    assert missing_params["error"]["code"] == -32603
    assert missing_params["id"] == 13
    assert not_an_object["id"] == 0


def test_error_codes_are_the_ones_the_bridge_emits():
    assert sorted(int(code) for code in ErrorCode) == [-32603, -32602, -32601]
