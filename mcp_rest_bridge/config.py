"""Configuration management for the MCP REST bridge"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Dict, Any
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class BridgeConfig:
    """Outbound REST call configuration"""
    port: int = 3000
    request_timeout: float = 30.0
    user_agent: str = "MCP-Client/1.0"
    debug_curl: bool = False


@dataclass
class ServerConfig:
    """MCP server identity and example runner settings"""
    name: str = "express-mcp-server"
    version: str = "1.0.0"
    base_path: str = "/mcp"
    host: str = "127.0.0.1"
    port: int = 3000


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Config:
    """Main configuration class"""

    def __init__(self):
        port = int(os.getenv("PORT", "3000"))

        self.bridge = BridgeConfig(
            port=port,
            request_timeout=float(os.getenv("BRIDGE_REQUEST_TIMEOUT", "30")),
            user_agent=os.getenv("BRIDGE_USER_AGENT", "MCP-Client/1.0"),
            debug_curl=_env_flag("DEBUG_CURL_LOGGING")
        )

        self.server = ServerConfig(
            name=os.getenv("MCP_SERVER_NAME", "express-mcp-server"),
            version=os.getenv("MCP_SERVER_VERSION", "1.0.0"),
            base_path=os.getenv("MCP_BASE_PATH", "/mcp"),
            host=os.getenv("HOST", "127.0.0.1"),
            port=port
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            file=os.getenv("LOG_FILE")
        )

    def validate(self) -> bool:
        """Validate configuration"""
        errors = []

        if self.bridge.request_timeout <= 0:
            errors.append("BRIDGE_REQUEST_TIMEOUT must be positive")
        if not 0 < self.bridge.port < 65536:
            errors.append("PORT must be between 1 and 65535")
        if not self.server.base_path.startswith("/"):
            errors.append("MCP_BASE_PATH must start with '/'")

        if errors:
            for error in errors:
                logging.error(f"Configuration error: {error}")
            return False

        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "bridge": {
                "port": self.bridge.port,
                "request_timeout": self.bridge.request_timeout,
                "user_agent": self.bridge.user_agent,
                "debug_curl": self.bridge.debug_curl
            },
            "server": {
                "name": self.server.name,
                "version": self.server.version,
                "base_path": self.server.base_path,
                "host": self.server.host,
                "port": self.server.port
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file
            }
        }


# Global configuration instance
config = Config()
