"""
Definition types held by the registry

A RouteDefinition binds one MCP tool to a REST route. How a call to the
tool is executed is decided once, when the definition is built: either
the bridged endpoint at ``(method, path)`` or a caller-supplied handler.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from mcp.types import Tool


ToolHandler = Callable[[Dict[str, Any], Any], Union[Any, Awaitable[Any]]]
ResourceHandler = Callable[[Dict[str, Any]], Union[Any, Awaitable[Any]]]
PromptHandler = Callable[[Dict[str, Any]], Union[Any, Awaitable[Any]]]

RouteKey = Tuple[str, str]


@dataclass
class MCPTool:
    """Discovery descriptor of a tool. The input schema is advisory only."""
    name: str
    description: str
    input_schema: Dict[str, Any] = field(default_factory=lambda: {"type": "object", "properties": {}})

    def to_mcp_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema
        )

    def to_dict(self) -> Dict[str, Any]:
        """Wire form: ``{name, description, inputSchema}``"""
        return self.to_mcp_tool().model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class BridgedEndpoint:
    """Execute the tool by calling the REST route it is bound to"""
    method: str
    path: str


@dataclass(frozen=True)
class CustomHandler:
    """Execute the tool with a caller-supplied function; never touches the network"""
    handler: ToolHandler


ExecutionStrategy = Union[BridgedEndpoint, CustomHandler]


@dataclass
class RouteDefinition:
    """A tool bound to the REST route ``(method, path)``"""
    path: str
    method: str
    tool: MCPTool
    handler: Optional[ToolHandler] = None
    execution: ExecutionStrategy = field(init=False, repr=False)

    def __post_init__(self):
        self.method = self.method.upper()
        if self.handler is not None:
            self.execution = CustomHandler(self.handler)
        else:
            self.execution = BridgedEndpoint(self.method, self.path)

    @property
    def route_key(self) -> RouteKey:
        return (self.method, self.path)

    @property
    def tool_name(self) -> str:
        return self.tool.name


@dataclass
class ResourceDefinition:
    """A URI-addressed readable value, resolved by a resource handler"""
    uri: str
    name: str
    description: str = ""
    mime_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "uri": self.uri,
            "name": self.name,
            "description": self.description
        }
        if self.mime_type:
            data["mimeType"] = self.mime_type
        return data


@dataclass
class PromptArgument:
    name: str
    description: str = ""
    required: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "required": self.required
        }


@dataclass
class PromptDefinition:
    """A named, argument-parameterized prompt, resolved by a prompt handler"""
    name: str
    description: str = ""
    arguments: List[PromptArgument] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "arguments": [arg.to_dict() for arg in self.arguments]
        }


def to_wire(item: Any) -> Any:
    """Serialize a resource/prompt definition; plain dicts pass through"""
    if hasattr(item, "to_dict"):
        return item.to_dict()
    return item
