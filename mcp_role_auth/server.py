"""
Reference MCP server with role-based tool access, using FastMCP v2.

This module shows how a host wires the authorization core in:

- RoleAuthMiddleware filters tools/list and gates tools/call by role
- Five introspection tools let an agent ask about its own permissions:
    mcp_auth_get_agent_info      current role, name, tool counts
    mcp_auth_get_allowed_tools   tools a role may use
    mcp_auth_get_blocked_tools   tools documented as blocked for a role
    mcp_auth_check_permission    may role R use tool T?
    mcp_auth_list_roles          every registered role
- Health and readiness HTTP endpoints (streamable-http transport only)

The introspection tools go through the same middleware as any other tool:
wildcard roles see them, explicit roles only if they list them.

A real host registers its own tool catalog on the server returned by
create_server() (or adds RoleAuthMiddleware to its existing FastMCP server).

Running the server:
    AGENT_ROLE=editor uv run python -m mcp_role_auth.server
"""

import logging
from dataclasses import asdict
from typing import Annotated

from fastmcp import FastMCP
from pydantic import Field
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from mcp_role_auth.auth import RoleAuth, create_role_auth
from mcp_role_auth.config import Settings, settings
from mcp_role_auth.defaults import DEFAULT_ROLES
from mcp_role_auth.logging_config import configure_logging
from mcp_role_auth.middleware import RoleAuthMiddleware, ToolObserver
from mcp_role_auth.models import RoleConfig

logger = logging.getLogger("mcp-role-auth")

RoleArg = Annotated[
    str | None,
    Field(description="Role to check (defaults to current role from environment)"),
]


def create_role_auth_from_settings(config: Settings) -> RoleAuth:
    """
    Build the process's RoleAuth from configuration.

    Raises:
        RoleConfigError: If a role in MCP_ROLES is malformed
    """
    roles = {key: RoleConfig.from_dict(data, role_key=key) for key, data in config.roles.items()}
    return create_role_auth(
        roles=roles,
        default_role=config.default_role,
        api_key_map=config.api_key_map,
        known_tools=config.known_tools,
        role_env_var=config.role_env_var,
        api_key_env_var=config.api_key_env_var,
    )


def create_server(
    auth: RoleAuth,
    on_access_denied: ToolObserver | None = None,
    on_tool_executed: ToolObserver | None = None,
) -> FastMCP:
    """Create the FastMCP server with role middleware and introspection tools."""
    mcp = FastMCP(
        name="mcp-role-auth",
        instructions=(
            "MCP server with role-based tool access. The tools you can see and "
            "call depend on your role; use mcp_auth_get_agent_info to inspect it."
        ),
        middleware=[
            RoleAuthMiddleware(
                auth,
                on_access_denied=on_access_denied,
                on_tool_executed=on_tool_executed,
            )
        ],
    )

    # -----------------------------------------------------------------------
    # Introspection tools
    # -----------------------------------------------------------------------

    @mcp.tool(
        name="mcp_auth_get_agent_info",
        description=(
            "Get information about the current agent including role, "
            "permissions, and tool access"
        ),
    )
    def get_agent_info() -> dict:
        return asdict(auth.agent_info())

    @mcp.tool(
        name="mcp_auth_get_allowed_tools",
        description="Get list of tools allowed for a specific role",
    )
    def get_allowed_tools(role: RoleArg = None) -> dict:
        role = role or auth.resolve_role()
        tools = auth.allowed_tools(role)
        return {"role": role, "tools": tools, "count": len(tools)}

    @mcp.tool(
        name="mcp_auth_get_blocked_tools",
        description="Get list of tools blocked for a specific role",
    )
    def get_blocked_tools(role: RoleArg = None) -> dict:
        role = role or auth.resolve_role()
        tools = auth.blocked_tools(role)
        return {"role": role, "tools": tools, "count": len(tools)}

    @mcp.tool(
        name="mcp_auth_check_permission",
        description="Check if a specific tool is allowed for a role",
    )
    def check_permission(
        tool_name: Annotated[str, Field(description="Name of the tool to check")],
        role: RoleArg = None,
    ) -> dict:
        role = role or auth.resolve_role()
        allowed = auth.is_tool_allowed(tool_name, role)
        verdict = "allowed" if allowed else "NOT allowed"
        return {
            "tool": tool_name,
            "role": role,
            "allowed": allowed,
            "message": f"Tool '{tool_name}' is {verdict} for role '{role}'",
        }

    @mcp.tool(
        name="mcp_auth_list_roles",
        description="List all available roles and their configurations",
    )
    def list_roles() -> dict:
        return {
            "roles": [asdict(info) for info in auth.list_roles()],
            "default_roles": list(DEFAULT_ROLES),
            "total_known_tools": len(auth.known_tools),
        }

    # -----------------------------------------------------------------------
    # Health and Readiness Endpoints
    # -----------------------------------------------------------------------
    # Plain HTTP endpoints (not MCP protocol), unauthenticated.

    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> Response:
        """Liveness probe: is the server process alive and responsive?"""
        return JSONResponse({"status": "healthy"})

    @mcp.custom_route("/ready", methods=["GET"])
    async def readiness_check(request: Request) -> Response:
        """Readiness probe: does the configured identity resolve to a known role?"""
        result = auth.authenticate()
        if not result.authenticated:
            return JSONResponse(
                {"status": "not_ready", "reason": result.error},
                status_code=503,
            )
        return JSONResponse({"status": "ready", "role": result.role})

    return mcp


def main() -> None:
    configure_logging(settings.log_level)

    auth = create_role_auth_from_settings(settings)
    info = auth.agent_info()
    logger.info(
        "Starting MCP server (transport=%s, role=%s)",
        settings.transport,
        info.role,
        extra={
            "auth_data": {
                "role": info.role,
                "role_name": info.name,
                "allowed_tools": info.allowed_tool_count,
            }
        },
    )

    mcp = create_server(auth)
    if settings.transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(
            transport=settings.transport,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level,
        )


if __name__ == "__main__":
    main()
