import json
import pathlib
import sys
from types import SimpleNamespace

import httpx
import pytest
from starlette.datastructures import Headers

# Ensure project root is importable in tests
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mcp_rest_bridge.registry import MCPRegistry, MCPTool, RouteDefinition  # noqa: E402
from mcp_rest_bridge.registry import store  # noqa: E402
from mcp_rest_bridge.rest_bridge_client import RestBridgeClient  # noqa: E402


def make_route(name, method="GET", path="/items", handler=None, description=None):
    return RouteDefinition(
        path=path,
        method=method,
        tool=MCPTool(name=name, description=description or f"{name} tool"),
        handler=handler
    )


def make_request(**headers):
    """Stand-in for the originating transport request"""
    return SimpleNamespace(headers=Headers(headers={k.replace("_", "-"): v for k, v in headers.items()}))


class RecordingTransport(httpx.MockTransport):
    """Mock transport keeping every outbound request it served"""

    def __init__(self, responder=None):
        self.requests = []
        self._responder = responder or (lambda request: httpx.Response(200, json={"ok": True}))
        super().__init__(self._handle)

    def _handle(self, request):
        self.requests.append(request)
        return self._responder(request)

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def registry():
    return MCPRegistry()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def bridge_client(transport):
    return RestBridgeClient(port=3000, timeout=5, transport=transport)


@pytest.fixture
def default_registry(monkeypatch):
    """Fresh process-wide default registry for tests of the module-level helpers"""
    monkeypatch.setattr(store, "_default_registry", None)
    return store.get_default_registry()
