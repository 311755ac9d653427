"""Closed set of protocol method names understood by the dispatcher"""

from enum import Enum
from typing import Optional


NOTIFICATION_PREFIX = "notifications/"

PROTOCOL_VERSION = "2024-11-05"


class Method(str, Enum):
    """Request methods that produce a response"""
    INITIALIZE = "initialize"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"
    RESOURCES_LIST = "resources/list"
    RESOURCES_READ = "resources/read"
    PROMPTS_LIST = "prompts/list"
    PROMPTS_GET = "prompts/get"

    @classmethod
    def parse(cls, name: str) -> Optional["Method"]:
        """Return the member for ``name`` or None when it is not a known method"""
        try:
            return cls(name)
        except ValueError:
            return None


class NotificationKind(str, Enum):
    """Suffixes following ``notifications/`` that have a dedicated log line"""
    INITIALIZED = "initialized"
    CANCELLED = "cancelled"
    PROGRESS = "progress"
    ROOTS_LIST_CHANGED = "roots/list_changed"
    MESSAGE = "message"

    @classmethod
    def parse(cls, suffix: str) -> Optional["NotificationKind"]:
        try:
            return cls(suffix)
        except ValueError:
            return None


def is_notification(method: str) -> bool:
    return method.startswith(NOTIFICATION_PREFIX)
