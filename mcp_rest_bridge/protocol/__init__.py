"""
Protocol Package - MCP Protocol Handling

This package contains:
- Error handling with proper JSON-RPC error codes
- The closed set of method and notification names
- The dispatcher (``protocol.dispatcher``), imported explicitly by callers
"""

from .errors import (
    MCPError,
    MethodNotFound,
    InvalidParams,
    UnknownTool,
    InternalError,
    HandlerNotFoundError,
    BridgeHTTPError,
    ErrorHandler,
    ErrorCode
)
from .methods import Method, NotificationKind, PROTOCOL_VERSION

__all__ = [
    'MCPError',
    'MethodNotFound',
    'InvalidParams',
    'UnknownTool',
    'InternalError',
    'HandlerNotFoundError',
    'BridgeHTTPError',
    'ErrorHandler',
    'ErrorCode',
    'Method',
    'NotificationKind',
    'PROTOCOL_VERSION'
]
