"""
mcp-rest-bridge

Expose the REST endpoints of a Starlette/FastAPI application as MCP tools.
Tool calls are forwarded to the bound endpoint, or to a custom handler,
and the results are wrapped into MCP JSON-RPC envelopes.
"""

from .registry import (
    MCPTool,
    RouteDefinition,
    BridgedEndpoint,
    CustomHandler,
    ResourceDefinition,
    PromptDefinition,
    PromptArgument,
    MCPRegistry
)
from .protocol.dispatcher import ProtocolDispatcher
from .rest_bridge_client import RestBridgeClient
from .middleware import (
    MCPMiddleware,
    create_mcp_middleware,
    register_mcp_tool,
    configure_mcp,
    clear_mcp_registry,
    get_mcp_registry
)
from .utils.schemas import schemas

__version__ = "0.1.0"

__all__ = [
    'MCPTool',
    'RouteDefinition',
    'BridgedEndpoint',
    'CustomHandler',
    'ResourceDefinition',
    'PromptDefinition',
    'PromptArgument',
    'MCPRegistry',
    'ProtocolDispatcher',
    'RestBridgeClient',
    'MCPMiddleware',
    'create_mcp_middleware',
    'register_mcp_tool',
    'configure_mcp',
    'clear_mcp_registry',
    'get_mcp_registry',
    'schemas'
]
