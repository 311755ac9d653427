"""
Protocol Dispatcher

Routes one decoded JSON-RPC message to its handler and produces the
response envelope. Stateless; every call is one-shot.

Notifications are recognized before method routing and never produce a
response. Every other message yields a well-formed success or error
envelope, whatever the handlers raise.
"""

import inspect
import json
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from mcp.types import TextContent

from ..config import config
from ..registry.definitions import CustomHandler, RouteDefinition
from ..registry.store import MCPRegistry
from ..rest_bridge_client import RestBridgeClient
from ..utils.logger import get_logger
from .errors import ErrorHandler, InternalError, MethodNotFound, UnknownTool
from .methods import (
    NOTIFICATION_PREFIX,
    PROTOCOL_VERSION,
    Method,
    NotificationKind,
    is_notification
)

logger = get_logger(__name__)

DEFAULT_SERVER_NAME = config.server.name
DEFAULT_SERVER_VERSION = config.server.version


def to_text(value: Any) -> str:
    """Strings pass through, anything else becomes indented JSON"""
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False)


def _text_content(text: str) -> Dict[str, Any]:
    return TextContent(type="text", text=text).model_dump(exclude_none=True, by_alias=True)


def _success(request_id: Any, result: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "result": result
    }


class ProtocolDispatcher:
    """Dispatch MCP requests against a registry and a REST bridge client"""

    def __init__(self, registry: MCPRegistry, client: Optional[RestBridgeClient] = None):
        self.registry = registry
        self.client = client or RestBridgeClient()
        self._handlers: Dict[Method, Callable[[Any, Dict[str, Any], Any], Awaitable[Dict[str, Any]]]] = {
            Method.INITIALIZE: self._initialize,
            Method.TOOLS_LIST: self._tools_list,
            Method.TOOLS_CALL: self._tools_call,
            Method.RESOURCES_LIST: self._resources_list,
            Method.RESOURCES_READ: self._resources_read,
            Method.PROMPTS_LIST: self._prompts_list,
            Method.PROMPTS_GET: self._prompts_get,
        }

    async def dispatch(self, message: Any, request: Any = None) -> Optional[Dict[str, Any]]:
        """
        Handle one decoded JSON-RPC message

        Args:
            message: The decoded request body
            request: The originating transport request, forwarded to custom
                tool handlers and used for bridged call headers

        Returns:
            The response envelope, or None for notifications
        """
        request_id = 0
        if isinstance(message, Mapping):
            request_id = message.get("id", 0)

        try:
            method_name = message["method"]
            if isinstance(method_name, str) and is_notification(method_name):
                self._handle_notification(method_name, message.get("params"))
                return None

            method = Method.parse(method_name)
            if method is None:
                return MethodNotFound(method_name).to_response(request_id)

            params = message.get("params")
            logger.debug(f"Dispatching {method_name} (id={request_id})")
            return await self._handlers[method](request_id, params, request)
        except Exception as e:
            logger.error(f"MCP dispatch error: {e}", exc_info=True)
            return InternalError().to_response(request_id)

    # ---- notifications ------------------------------------------------

    def _handle_notification(self, method_name: str, params: Any) -> None:
        suffix = method_name[len(NOTIFICATION_PREFIX):]
        kind = NotificationKind.parse(suffix)

        if kind is NotificationKind.INITIALIZED:
            logger.info("Client initialized")
        elif kind is NotificationKind.CANCELLED:
            request_id = params.get("requestId") if isinstance(params, Mapping) else None
            logger.info(f"Client cancelled request {request_id}")
        elif kind is NotificationKind.PROGRESS:
            logger.debug(f"Progress notification: {params}")
        elif kind is NotificationKind.ROOTS_LIST_CHANGED:
            logger.info("Client roots list changed")
        elif kind is NotificationKind.MESSAGE:
            logger.info(f"Client message: {params}")
        else:
            logger.warning(f"Unhandled notification: {method_name}")

    # ---- discovery ----------------------------------------------------

    async def _initialize(self, request_id: Any, params: Any, request: Any) -> Dict[str, Any]:
        config = self.registry.get_config()

        capabilities: Dict[str, Any] = {"tools": {}}
        if self.registry.get_resources():
            capabilities["resources"] = {}
        if self.registry.get_prompts():
            capabilities["prompts"] = {}

        return _success(request_id, {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": capabilities,
            "serverInfo": {
                "name": config.get("server_name") or DEFAULT_SERVER_NAME,
                "version": config.get("server_version") or DEFAULT_SERVER_VERSION
            }
        })

    async def _tools_list(self, request_id: Any, params: Any, request: Any) -> Dict[str, Any]:
        return _success(request_id, {"tools": self.registry.get_tools()})

    async def _resources_list(self, request_id: Any, params: Any, request: Any) -> Dict[str, Any]:
        return _success(request_id, {"resources": self.registry.get_resources()})

    async def _prompts_list(self, request_id: Any, params: Any, request: Any) -> Dict[str, Any]:
        return _success(request_id, {"prompts": self.registry.get_prompts()})

    # ---- invocation ---------------------------------------------------

    async def _tools_call(self, request_id: Any, params: Any, request: Any) -> Dict[str, Any]:
        name = params["name"]
        arguments = params.get("arguments")

        route = self.registry.get_route(name)
        if route is None:
            return UnknownTool(name, self.registry.get_tool_names()).to_response(request_id)

        try:
            result = await self._execute(route, arguments, request)
            return _success(request_id, {"content": [_text_content(to_text(result))]})
        except Exception as e:
            logger.error(f"Error calling tool {name}: {e}")
            return ErrorHandler.handle_exception(e, request_id, "Tool execution failed")

    async def _execute(self, route: RouteDefinition, arguments: Any, request: Any) -> Any:
        if isinstance(route.execution, CustomHandler):
            result = route.execution.handler(arguments, request)
            if inspect.isawaitable(result):
                result = await result
            return result
        return await self.client.call_endpoint(route, arguments, request)

    async def _resources_read(self, request_id: Any, params: Any, request: Any) -> Dict[str, Any]:
        uri = params["uri"]
        try:
            content = await self.registry.handle_resource_read(uri, params)
            return _success(request_id, {
                "contents": [{
                    "uri": uri,
                    "mimeType": "application/json",
                    "text": to_text(content)
                }]
            })
        except Exception as e:
            logger.error(f"Error reading resource {uri}: {e}")
            return ErrorHandler.handle_exception(e, request_id, "Resource read failed")

    async def _prompts_get(self, request_id: Any, params: Any, request: Any) -> Dict[str, Any]:
        name = params["name"]
        arguments = params.get("arguments") or {}
        try:
            content = await self.registry.handle_prompt_get(name, arguments)
            return _success(request_id, {
                "messages": [{
                    "role": "user",
                    "content": _text_content(to_text(content))
                }]
            })
        except Exception as e:
            logger.error(f"Error getting prompt {name}: {e}")
            return ErrorHandler.handle_exception(e, request_id, "Prompt get failed")
