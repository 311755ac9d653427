"""
MCP HTTP middleware

Intercepts ``POST <base_path>`` on a Starlette/FastAPI application and
answers it as an MCP JSON-RPC endpoint. Every other request continues
down the application unchanged.

Usage::

    app = FastAPI(middleware=[create_mcp_middleware({"server_name": "users-api"})])

or, with an explicit registry::

    registry = MCPRegistry()
    app.add_middleware(MCPMiddleware, registry=registry)
"""

import json
from typing import Any, Callable, Mapping, Optional

from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from .protocol.dispatcher import ProtocolDispatcher
from .protocol.errors import InternalError
from .registry.definitions import RouteDefinition
from .registry.store import MCPRegistry, get_default_registry
from .rest_bridge_client import RestBridgeClient
from .utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_PATH = "/mcp"


class MCPMiddleware(BaseHTTPMiddleware):
    """Serve the MCP endpoint of one registry in front of a REST application"""

    def __init__(
        self,
        app,
        registry: Optional[MCPRegistry] = None,
        client: Optional[RestBridgeClient] = None
    ):
        super().__init__(app)
        self.registry = registry or get_default_registry()
        self.dispatcher = ProtocolDispatcher(self.registry, client)

    @property
    def base_path(self) -> str:
        return self.registry.get_config().get("base_path") or DEFAULT_BASE_PATH

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path != self.base_path or request.method != "POST":
            return await call_next(request)

        try:
            message = json.loads(await request.body())
        except ValueError as e:
            logger.error(f"MCP middleware error: undecodable body ({e})")
            return JSONResponse(InternalError().to_response(0))

        response = await self.dispatcher.dispatch(message, request)
        if response is None:
            return Response(status_code=202)
        return JSONResponse(response)


def create_mcp_middleware(
    config: Optional[Mapping[str, Any]] = None,
    *,
    registry: Optional[MCPRegistry] = None,
    client: Optional[RestBridgeClient] = None
) -> Middleware:
    """
    Configure ``registry`` (the default registry when omitted) with ``config``
    and return a middleware entry for ``FastAPI(middleware=[...])`` or
    ``Starlette(middleware=[...])``
    """
    registry = registry or get_default_registry()
    if config:
        registry.configure(config)
    return Middleware(MCPMiddleware, registry=registry, client=client)


# Module-level helpers over the default registry

def register_mcp_tool(definition: RouteDefinition) -> None:
    """Register an MCP tool that maps to a REST endpoint"""
    get_default_registry().register(definition)


def configure_mcp(config: Optional[Mapping[str, Any]] = None, **overrides: Any) -> None:
    """Configure the default MCP registry"""
    get_default_registry().configure(config, **overrides)


def clear_mcp_registry() -> None:
    """Clear all registered tools of the default registry; configuration is kept"""
    get_default_registry().clear()


def get_mcp_registry() -> MCPRegistry:
    """Get the default registry for advanced usage"""
    return get_default_registry()
