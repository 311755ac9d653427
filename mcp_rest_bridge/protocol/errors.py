"""
MCP Protocol Error Handling

JSON-RPC error codes used by the bridge, the exception hierarchy that
maps onto them, and the domain errors raised by the registry and the
REST bridge before the dispatcher converts them into envelopes.
"""

from typing import Optional, Any, Dict
from enum import IntEnum


class ErrorCode(IntEnum):
    """Standard JSON-RPC 2.0 error codes"""

    METHOD_NOT_FOUND = -32601      # The method does not exist or is not available
    INVALID_PARAMS = -32602        # Invalid method parameter(s), unknown tool
    INTERNAL_ERROR = -32603        # Execution failures and the top-level catch-all


class MCPError(Exception):
    """Base class for all MCP protocol errors"""

    def __init__(
        self,
        code: int,
        message: str,
        data: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize MCP error

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message, sent verbatim
            data: Optional additional error data
        """
        self.code = int(code)
        self.message = message
        self.data = data or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to JSON-RPC error format"""
        error_dict = {
            "code": self.code,
            "message": self.message
        }
        if self.data:
            error_dict["data"] = self.data
        return error_dict

    def to_response(self, request_id: Optional[Any] = None) -> Dict[str, Any]:
        """Create complete JSON-RPC error response"""
        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "error": self.to_dict()
        }


class MethodNotFound(MCPError):
    """The method does not exist or is not available"""

    def __init__(self, method: Any):
        super().__init__(
            ErrorCode.METHOD_NOT_FOUND,
            f"Method not found: {method}"
        )


class InvalidParams(MCPError):
    """Invalid method parameter(s)"""

    def __init__(self, message: str = "Invalid params", data: Optional[Dict] = None):
        super().__init__(ErrorCode.INVALID_PARAMS, message, data)


class UnknownTool(InvalidParams):
    """The named tool is not registered"""

    def __init__(self, name: Any, available: list):
        super().__init__(
            f"Unknown tool: {name}. Available tools: {', '.join(available)}"
        )


class InternalError(MCPError):
    """Internal JSON-RPC error"""

    def __init__(self, message: str = "Internal error", data: Optional[Dict] = None):
        super().__init__(ErrorCode.INTERNAL_ERROR, message, data)


class HandlerNotFoundError(LookupError):
    """No resource or prompt handler is registered under the requested key"""


class BridgeHTTPError(Exception):
    """A bridged REST endpoint answered with a non-2xx status"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body}")


class ErrorHandler:
    """Utility class for handling and formatting errors"""

    @staticmethod
    def handle_exception(
        e: Exception,
        request_id: Optional[Any] = None,
        fallback_message: str = "Internal error"
    ) -> Dict[str, Any]:
        """
        Convert an exception raised while executing a handler into an
        internal error response

        Handler, bridge and resolver failures all surface as -32603, even
        when the handler raised an MCPError of its own; only the message
        is kept.

        Args:
            e: Exception to handle
            request_id: Request ID for the response
            fallback_message: Message used when the exception carries none

        Returns:
            JSON-RPC error response dict
        """
        message = e.message if isinstance(e, MCPError) else str(e)
        return InternalError(message or fallback_message).to_response(request_id)
