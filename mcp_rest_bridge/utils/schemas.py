"""
Schema Builder Utilities
========================

Small factories producing JSON Schema fragments for tool input schemas.
The schemas are advisory metadata for protocol clients; the bridge never
validates arguments against them.
"""

import copy
from typing import Any, Dict, List, Optional


SchemaProperty = Dict[str, Any]


def _compact(options: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in options.items() if v is not None}


class SchemaBuilder:
    """Pre-built schema helpers for common patterns"""

    _ID = {
        "type": "string",
        "description": "Resource ID"
    }

    _SEARCH = {
        "type": "string",
        "description": "Search query"
    }

    _PAGINATION = {
        "type": "object",
        "properties": {
            "limit": {
                "type": "number",
                "minimum": 1,
                "maximum": 100,
                "description": "Number of items to return"
            },
            "offset": {
                "type": "number",
                "minimum": 0,
                "description": "Number of items to skip"
            }
        }
    }

    @property
    def id(self) -> SchemaProperty:
        """String ID field"""
        return copy.deepcopy(self._ID)

    @property
    def search(self) -> SchemaProperty:
        """Search query string"""
        return copy.deepcopy(self._SEARCH)

    @property
    def pagination(self) -> SchemaProperty:
        """Pagination object with limit and offset"""
        return copy.deepcopy(self._PAGINATION)

    @staticmethod
    def object_body(properties: Dict[str, SchemaProperty],
                    required: Optional[List[str]] = None) -> SchemaProperty:
        """
        Create an object schema with properties and required fields

        Args:
            properties: Object properties
            required: Required field names

        Returns:
            Object schema rejecting additional properties
        """
        return {
            "type": "object",
            "properties": properties,
            "required": list(required or []),
            "additionalProperties": False
        }

    @staticmethod
    def string(description: Optional[str] = None, min_length: Optional[int] = None,
               max_length: Optional[int] = None, pattern: Optional[str] = None,
               format: Optional[str] = None, enum: Optional[List[str]] = None) -> SchemaProperty:
        """Create a string schema; ``format`` is one of email, uri, date, date-time"""
        return {"type": "string", **_compact({
            "description": description,
            "minLength": min_length,
            "maxLength": max_length,
            "pattern": pattern,
            "format": format,
            "enum": enum
        })}

    @staticmethod
    def number(description: Optional[str] = None, minimum: Optional[float] = None,
               maximum: Optional[float] = None, enum: Optional[List[float]] = None) -> SchemaProperty:
        return {"type": "number", **_compact({
            "description": description,
            "minimum": minimum,
            "maximum": maximum,
            "enum": enum
        })}

    @staticmethod
    def integer(description: Optional[str] = None, minimum: Optional[int] = None,
                maximum: Optional[int] = None) -> SchemaProperty:
        return {"type": "integer", **_compact({
            "description": description,
            "minimum": minimum,
            "maximum": maximum
        })}

    @staticmethod
    def boolean(description: Optional[str] = None) -> SchemaProperty:
        schema = {"type": "boolean"}
        if description:
            schema["description"] = description
        return schema

    @staticmethod
    def array(items: SchemaProperty, description: Optional[str] = None,
              min_items: Optional[int] = None, max_items: Optional[int] = None) -> SchemaProperty:
        return {"type": "array", "items": items, **_compact({
            "description": description,
            "minItems": min_items,
            "maxItems": max_items
        })}

    @staticmethod
    def enum(values: List[Any], description: Optional[str] = None) -> SchemaProperty:
        """Enum over ``values``; typed string when the first value is a str, else number"""
        schema = {
            "type": "string" if values and isinstance(values[0], str) else "number",
            "enum": list(values)
        }
        if description:
            schema["description"] = description
        return schema


schemas = SchemaBuilder()
