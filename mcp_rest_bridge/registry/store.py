"""
MCP Registry - definition store for tools, resources and prompts

Holds route definitions keyed by ``(METHOD, path)`` plus one configuration
mapping. Pure in-memory state, no I/O.

Concurrency contract: ``configure``, ``register`` and ``clear`` are meant
to run while the application is being wired, before it serves traffic.
They are not synchronized against concurrent reads; mutating a registry
that is already serving requests gives unspecified interleavings.
"""

import inspect
from typing import Any, Dict, List, Mapping, Optional

from ..protocol.errors import HandlerNotFoundError
from ..utils.logger import get_logger
from .definitions import RouteDefinition, RouteKey, to_wire

logger = get_logger(__name__)


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class MCPRegistry:
    """Route definitions and configuration for one MCP endpoint"""

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self._routes: Dict[RouteKey, RouteDefinition] = {}
        self._config: Dict[str, Any] = dict(config or {})

    def configure(self, config: Optional[Mapping[str, Any]] = None, **overrides: Any) -> None:
        """
        Shallow-merge ``config`` into the stored configuration

        Each top-level key overwrites the stored one; absent keys are left
        untouched. Nested mappings such as ``resource_handlers`` are
        replaced as a whole, never merged.
        """
        update = dict(config or {})
        update.update(overrides)
        self._config = {**self._config, **update}
        logger.debug(f"Registry configured with keys: {sorted(update)}")

    def register(self, definition: RouteDefinition) -> None:
        """Insert or silently replace the definition at its route key"""
        key = definition.route_key
        if key in self._routes:
            logger.debug(f"Replacing route {key[0]} {key[1]}")
        self._routes[key] = definition

    def get_tools(self) -> List[Dict[str, Any]]:
        """Wire descriptors of all registered tools, in registration order"""
        return [route.tool.to_dict() for route in self._routes.values()]

    def get_tool_names(self) -> List[str]:
        return [route.tool_name for route in self._routes.values()]

    def get_route(self, tool_name: str) -> Optional[RouteDefinition]:
        """
        First route whose tool is named ``tool_name``

        Tool names are not unique in the store. When two routes share a
        name, the one registered first wins.
        """
        for route in self._routes.values():
            if route.tool_name == tool_name:
                return route
        return None

    def get_resources(self) -> List[Any]:
        return [to_wire(r) for r in self._config.get("resources") or []]

    def get_prompts(self) -> List[Any]:
        return [to_wire(p) for p in self._config.get("prompts") or []]

    def get_config(self) -> Dict[str, Any]:
        return dict(self._config)

    async def handle_resource_read(self, uri: str, params: Optional[Dict[str, Any]] = None) -> Any:
        handlers = self._config.get("resource_handlers") or {}
        handler = handlers.get(uri)
        if handler is None:
            raise HandlerNotFoundError(f"no handler for resource: {uri}")
        return await _resolve(handler(params if params is not None else {}))

    async def handle_prompt_get(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Any:
        handlers = self._config.get("prompt_handlers") or {}
        handler = handlers.get(name)
        if handler is None:
            raise HandlerNotFoundError(f"no handler for prompt: {name}")
        return await _resolve(handler(arguments if arguments is not None else {}))

    def clear(self) -> None:
        """
        Remove every route definition

        The configuration is deliberately kept: server identity, resources
        and prompts survive a clear.
        """
        self._routes.clear()


# Process-wide default instance backing the module-level helpers
_default_registry: Optional[MCPRegistry] = None


def get_default_registry() -> MCPRegistry:
    """Get the lazily created process-wide MCPRegistry"""
    global _default_registry
    if _default_registry is None:
        _default_registry = MCPRegistry()
    return _default_registry
