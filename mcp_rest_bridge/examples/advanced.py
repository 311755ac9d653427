"""
Advanced example: resources, prompts and custom tool handlers

Shows tools that bypass the REST layer through a custom handler, a PUT
route with a path placeholder, static resources and a prompt template.
"""

import re
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx
from fastapi import FastAPI
from pydantic import BaseModel

from ..config import config
from ..middleware import MCPMiddleware
from ..registry import (
    MCPRegistry,
    MCPTool,
    PromptArgument,
    PromptDefinition,
    ResourceDefinition,
    RouteDefinition
)
from ..rest_bridge_client import RestBridgeClient
from ..utils.logger import get_logger
from ..utils.schemas import schemas

logger = get_logger(__name__)

STARTED_AT = datetime.now(timezone.utc).isoformat()


class UserCreate(BaseModel):
    name: str
    email: str
    role: str = "user"


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None


def _header(request: Any, name: str, default: str) -> str:
    if request is None:
        return default
    return request.headers.get(name) or default


async def server_info(params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": "Advanced API Server",
        "version": "2.0.0",
        "features": ["REST", "MCP", "Resources", "Prompts", "Custom Handlers"],
        "started_at": STARTED_AT
    }


async def user_stats(params: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "total_users": 1250,
        "active_users": 856,
        "new_today": 23,
        "filter": params.get("filter") or "all"
    }


async def summarize_user_prompt(arguments: Dict[str, Any]) -> str:
    user_id = arguments.get("user_id", "unknown")
    style = arguments.get("style") or "short"
    return f"Write a {style} summary of the activity of user {user_id}."


async def create_post(params: Dict[str, Any], request: Any) -> Dict[str, Any]:
    """Build the post locally, enriched with slug, reading time and hashtags"""
    title = params["title"]
    content = params["content"]
    post = {
        **params,
        "source": "mcp-client",
        "client_ip": _header(request, "x-forwarded-for", "unknown"),
        "user_agent": _header(request, "user-agent", "MCP-Client"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "slug": re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-"),
        "reading_time": -(-len(content.split(" ")) // 200),
        "hashtags": [tag[1:] for tag in re.findall(r"#\w+", content)]
    }
    return {
        "success": True,
        "message": "Post created successfully via MCP",
        "post": post
    }


async def generate_analytics_report(params: Dict[str, Any], request: Any) -> Dict[str, Any]:
    report_format = params.get("format") or "json"
    report_id = f"report_{int(time.time() * 1000)}"
    return {
        "success": True,
        "report": {
            "id": report_id,
            "type": params["report_type"],
            "period": params.get("date_range"),
            "format": report_format,
            "summary": {
                "total_records": 15420,
                "growth_rate": 12.5,
                "top_performing": ["tech", "lifestyle"]
            },
            "client_context": {
                "source": "mcp",
                "requested_by": _header(request, "user-agent", "unknown")
            }
        },
        "download_url": None if report_format == "json"
        else f"/api/downloads/reports/{report_id}.{report_format}"
    }


def configure_registry(registry: MCPRegistry) -> None:
    registry.configure({
        "server_name": "advanced-api-server",
        "server_version": "2.0.0",
        "base_path": config.server.base_path,
        "resources": [
            ResourceDefinition(
                uri="config://server-info",
                name="Server Information",
                description="Current server configuration and status",
                mime_type="application/json"
            ),
            ResourceDefinition(
                uri="data://user-stats",
                name="User Statistics",
                description="Live user statistics and metrics",
                mime_type="application/json"
            )
        ],
        "resource_handlers": {
            "config://server-info": server_info,
            "data://user-stats": user_stats
        },
        "prompts": [
            PromptDefinition(
                name="summarize_user",
                description="Summarize the recent activity of a user",
                arguments=[
                    PromptArgument("user_id", "ID of the user", required=True),
                    PromptArgument("style", "short or detailed")
                ]
            )
        ],
        "prompt_handlers": {
            "summarize_user": summarize_user_prompt
        }
    })


def register_user_tools(registry: MCPRegistry) -> None:
    registry.register(RouteDefinition(
        path="/api/users",
        method="GET",
        tool=MCPTool(
            name="list_users",
            description="List users with filtering and pagination",
            input_schema={
                "type": "object",
                "properties": {
                    **schemas.pagination["properties"],
                    "filter": schemas.enum(["all", "active", "inactive", "recent"], "User filter"),
                    "search": schemas.string(description="Search by name or email")
                }
            }
        )
    ))

    registry.register(RouteDefinition(
        path="/api/users",
        method="POST",
        tool=MCPTool(
            name="create_user",
            description="Create a new user",
            input_schema=schemas.object_body({
                "name": schemas.string(min_length=1, max_length=100),
                "email": schemas.string(format="email"),
                "role": schemas.enum(["user", "admin", "moderator"], "User role")
            }, ["name", "email"])
        )
    ))

    registry.register(RouteDefinition(
        path="/api/users/:id/profile",
        method="PUT",
        tool=MCPTool(
            name="update_user_profile",
            description="Update user profile information",
            input_schema=schemas.object_body({
                "id": schemas.string(pattern="^[0-9]+$"),
                "name": schemas.string(min_length=1, max_length=100),
                "bio": schemas.string(max_length=500),
                "avatar_url": schemas.string(format="uri")
            }, ["id"])
        )
    ))


def register_content_tools(registry: MCPRegistry) -> None:
    registry.register(RouteDefinition(
        path="/api/posts",
        method="POST",
        tool=MCPTool(
            name="create_post",
            description="Create a new blog post with content enrichment",
            input_schema=schemas.object_body({
                "title": schemas.string(min_length=1, max_length=200),
                "content": schemas.string(min_length=10, max_length=50000),
                "tags": schemas.array(schemas.string(), max_items=10),
                "category": schemas.enum(["tech", "lifestyle", "business", "other"]),
                "published": schemas.boolean("Publish immediately")
            }, ["title", "content", "category"])
        ),
        handler=create_post
    ))

    registry.register(RouteDefinition(
        path="/api/posts/search",
        method="GET",
        tool=MCPTool(
            name="search_posts",
            description="Search posts by query and category",
            input_schema={
                "type": "object",
                "properties": {
                    "q": schemas.string(min_length=1, description="Search query"),
                    "category": schemas.enum(["tech", "lifestyle", "business", "other"]),
                    "published_only": schemas.boolean("Only published posts"),
                    **schemas.pagination["properties"]
                },
                "required": ["q"]
            }
        )
    ))


def register_analytics_tools(registry: MCPRegistry) -> None:
    registry.register(RouteDefinition(
        path="/api/analytics/report",
        method="POST",
        tool=MCPTool(
            name="generate_analytics_report",
            description="Generate analytics reports",
            input_schema=schemas.object_body({
                "report_type": schemas.enum(["users", "content", "engagement", "performance"]),
                "date_range": {
                    "type": "object",
                    "properties": {
                        "start": schemas.string(format="date"),
                        "end": schemas.string(format="date")
                    },
                    "required": ["start", "end"]
                },
                "format": schemas.enum(["json", "csv", "pdf"], "Report format")
            }, ["report_type", "date_range"])
        ),
        handler=generate_analytics_report
    ))


def get_registry_info(registry: MCPRegistry) -> Dict[str, Any]:
    """Snapshot of the registry state"""
    tools = registry.get_tools()
    resources = registry.get_resources()
    registry_config = registry.get_config()
    return {
        "tools": tools,
        "resources": resources,
        "summary": {
            "total_tools": len(tools),
            "total_resources": len(resources),
            "server_name": registry_config.get("server_name")
        }
    }


def validate_tool_registration(registry: MCPRegistry, tool_name: str) -> bool:
    return registry.get_route(tool_name) is not None


def create_app(registry: Optional[MCPRegistry] = None) -> FastAPI:
    """Build the advanced API with its MCP endpoint at ``/mcp``"""
    registry = registry or MCPRegistry()
    configure_registry(registry)
    register_user_tools(registry)
    register_content_tools(registry)
    register_analytics_tools(registry)

    app = FastAPI(title="Advanced MCP Example")
    users: Dict[int, Dict[str, Any]] = {
        1: {"id": 1, "name": "Ada", "email": "ada@example.com", "role": "admin", "active": True},
        2: {"id": 2, "name": "Linus", "email": "linus@example.com", "role": "user", "active": False}
    }
    posts = [
        {"id": 1, "title": "Async Python", "category": "tech", "published": True},
        {"id": 2, "title": "Slow mornings", "category": "lifestyle", "published": False}
    ]

    @app.get("/api/users")
    async def list_users(filter: str = "all", search: Optional[str] = None,
                         limit: int = 100, offset: int = 0):
        result = list(users.values())
        if filter == "active":
            result = [u for u in result if u["active"]]
        elif filter == "inactive":
            result = [u for u in result if not u["active"]]
        if search:
            result = [u for u in result if search.lower() in u["name"].lower() or search.lower() in u["email"]]
        return {"users": result[offset:offset + limit], "total": len(result)}

    @app.post("/api/users", status_code=201)
    async def create_user(body: UserCreate):
        user_id = max(users) + 1
        users[user_id] = {"id": user_id, **body.model_dump(), "active": True}
        return {"user": users[user_id]}

    @app.put("/api/users/{user_id}/profile")
    async def update_profile(user_id: int, body: ProfileUpdate):
        user = users.setdefault(user_id, {"id": user_id, "active": True})
        user.update(body.model_dump(exclude_none=True))
        return {"user": user}

    @app.get("/api/posts/search")
    async def search_posts(q: str, category: Optional[str] = None, published_only: bool = False):
        found = [p for p in posts if q.lower() in p["title"].lower()]
        if category:
            found = [p for p in found if p["category"] == category]
        if published_only:
            found = [p for p in found if p["published"]]
        return {"posts": found}

    client = RestBridgeClient(transport=httpx.ASGITransport(app=app))
    app.add_middleware(MCPMiddleware, registry=registry, client=client)
    app.state.mcp_registry = registry
    logger.info(f"Advanced MCP configuration loaded: {get_registry_info(registry)['summary']}")
    return app
