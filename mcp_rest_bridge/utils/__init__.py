"""Utility modules for the MCP REST bridge"""

from .logger import get_logger, setup_bridge_logging
from .schemas import SchemaBuilder, schemas

__all__ = [
    "get_logger",
    "setup_bridge_logging",
    "SchemaBuilder",
    "schemas"
]
