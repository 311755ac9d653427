"""
Registry Package - tool, resource and prompt definitions

This package contains:
- Definition types (routes, tools, resources, prompts)
- The in-memory MCPRegistry store
"""

from .definitions import (
    MCPTool,
    RouteDefinition,
    BridgedEndpoint,
    CustomHandler,
    ResourceDefinition,
    PromptDefinition,
    PromptArgument
)
from .store import MCPRegistry, get_default_registry

__all__ = [
    'MCPTool',
    'RouteDefinition',
    'BridgedEndpoint',
    'CustomHandler',
    'ResourceDefinition',
    'PromptDefinition',
    'PromptArgument',
    'MCPRegistry',
    'get_default_registry'
]
