"""
Basic example: a small users API exposed as MCP tools

The REST routes stay usable as-is; ``POST /mcp`` serves the MCP protocol
and bridges tool calls back into the same application in-process.
"""

import itertools
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from ..config import config
from ..middleware import MCPMiddleware
from ..registry import MCPRegistry, MCPTool, RouteDefinition
from ..rest_bridge_client import RestBridgeClient
from ..utils.schemas import schemas


class UserCreate(BaseModel):
    name: str
    email: str
    age: Optional[int] = None


def register_tools(registry: MCPRegistry) -> None:
    registry.register(RouteDefinition(
        path="/api/users",
        method="GET",
        tool=MCPTool(
            name="list_users",
            description="Retrieve a list of all users in the system",
            input_schema=schemas.pagination
        )
    ))

    registry.register(RouteDefinition(
        path="/api/users",
        method="POST",
        tool=MCPTool(
            name="create_user",
            description="Create a new user with name and email",
            input_schema=schemas.object_body({
                "name": schemas.string(min_length=1, max_length=100),
                "email": schemas.string(format="email"),
                "age": schemas.number(minimum=18, maximum=120)
            }, ["name", "email"])
        )
    ))

    registry.register(RouteDefinition(
        path="/api/users/:id",
        method="GET",
        tool=MCPTool(
            name="get_user_by_id",
            description="Retrieve a specific user by their ID",
            input_schema=schemas.object_body({
                "id": schemas.string(pattern="^[0-9]+$", description="User ID (numeric)")
            }, ["id"])
        )
    ))


def create_app(registry: Optional[MCPRegistry] = None) -> FastAPI:
    """Build the users API with its MCP endpoint at ``/mcp``"""
    registry = registry or MCPRegistry()
    registry.configure({
        "server_name": "basic-example-server",
        "server_version": "1.0.0",
        "base_path": config.server.base_path
    })
    register_tools(registry)

    app = FastAPI(title="Basic MCP Example")
    users: Dict[int, Dict[str, Any]] = {
        1: {"id": 1, "name": "John Doe", "email": "john@example.com"},
        2: {"id": 2, "name": "Jane Smith", "email": "jane@example.com"}
    }
    next_id = itertools.count(3)

    @app.get("/api/users")
    async def list_users(limit: int = 100, offset: int = 0):
        page = list(users.values())[offset:offset + limit]
        return {"users": page, "total": len(users)}

    @app.post("/api/users", status_code=201)
    async def create_user(body: UserCreate):
        user = {
            "id": next(next_id),
            **body.model_dump(exclude_none=True),
            "createdAt": datetime.now(timezone.utc).isoformat()
        }
        users[user["id"]] = user
        return {"user": user, "message": "User created successfully"}

    @app.get("/api/users/{user_id}")
    async def get_user(user_id: int):
        if user_id not in users:
            raise HTTPException(status_code=404, detail=f"User {user_id} not found")
        return {"user": users[user_id]}

    @app.get("/health")
    async def health():
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    client = RestBridgeClient(transport=httpx.ASGITransport(app=app))
    app.add_middleware(MCPMiddleware, registry=registry, client=client)
    app.state.mcp_registry = registry
    return app
