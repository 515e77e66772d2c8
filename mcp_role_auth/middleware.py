"""
FastMCP middleware that enforces role-based tool access.

The host's tools are registered on its FastMCP server as usual; adding
RoleAuthMiddleware makes the two MCP tool requests role-aware:

1. tools/list: the server's full tool list is passed through
   RoleAuth.filter_tools(), so an agent only sees what its role permits.
2. tools/call: before the tool runs, RoleAuth.is_tool_allowed() is checked.
   A denied call gets an error result naming the tool and the role, and the
   tool is never invoked. A permitted call for a tool the server doesn't
   have gets a separate "Unknown tool" error.

The role is resolved from the environment once per request and used for
every decision in that request.

Usage:
    auth = create_role_auth()
    mcp = FastMCP(name="my-server", middleware=[RoleAuthMiddleware(auth)])
"""

import json
import logging
import uuid
from collections.abc import Callable
from typing import Sequence

from fastmcp.exceptions import NotFoundError, ToolError
from fastmcp.server.middleware import CallNext, Middleware, MiddlewareContext
from fastmcp.tools.tool import Tool, ToolResult
from mcp.types import CallToolRequestParams, ListToolsRequest

from mcp_role_auth.auth import RoleAuth

logger = logging.getLogger("mcp-role-auth")

# Observer signature: (tool_name, role) -> None
ToolObserver = Callable[[str, str], None]


def access_denied_message(tool_name: str, role: str) -> str:
    """JSON body returned to the client when a tool call is denied."""
    return json.dumps(
        {
            "error": f'Access denied: Tool "{tool_name}" is not available for role "{role}"',
            "role": role,
            "hint": "This tool requires higher privileges.",
        }
    )


def unknown_tool_message(tool_name: str) -> str:
    return json.dumps({"error": f"Unknown tool: {tool_name}"})


class RoleAuthMiddleware(Middleware):
    """
    Role-based authorization middleware.

    Args:
        auth: The RoleAuth instance holding the policy
        on_access_denied: Called with (tool_name, role) when a call is denied
        on_tool_executed: Called with (tool_name, role) after a permitted
                          tool call completed without raising

    Observers run synchronously at the decision point. An observer that
    raises is logged and otherwise ignored; it can't change the decision.
    """

    def __init__(
        self,
        auth: RoleAuth,
        on_access_denied: ToolObserver | None = None,
        on_tool_executed: ToolObserver | None = None,
    ):
        self.auth = auth
        self.on_access_denied = on_access_denied
        self.on_tool_executed = on_tool_executed

    def _notify(self, observer: ToolObserver | None, tool_name: str, role: str) -> None:
        if observer is None:
            return
        try:
            observer(tool_name, role)
        except Exception:
            logger.exception(
                "Tool observer failed",
                extra={"auth_data": {"tool": tool_name, "role": role}},
            )

    async def on_list_tools(
        self,
        context: MiddlewareContext[ListToolsRequest],
        call_next: CallNext[ListToolsRequest, Sequence[Tool]],
    ) -> Sequence[Tool]:
        request_id = str(uuid.uuid4())[:8]
        role = self.auth.resolve_role()

        all_tools = await call_next(context)
        authorized = self.auth.filter_tools({tool.name: tool for tool in all_tools}, role)
        authorized_tools = list(authorized.values())

        logger.info(
            "Tool list filtered by role",
            extra={
                "auth_data": {
                    "request_id": request_id,
                    "role": role,
                    "total_tools": len(all_tools),
                    "authorized_tools": [t.name for t in authorized_tools],
                    "decision": "filtered",
                }
            },
        )

        return authorized_tools

    async def on_call_tool(
        self,
        context: MiddlewareContext[CallToolRequestParams],
        call_next: CallNext[CallToolRequestParams, ToolResult],
    ) -> ToolResult:
        request_id = str(uuid.uuid4())[:8]
        tool_name = context.message.name
        role = self.auth.resolve_role()

        if not self.auth.is_tool_allowed(tool_name, role):
            logger.warning(
                "Tool call denied",
                extra={
                    "auth_data": {
                        "request_id": request_id,
                        "role": role,
                        "tool": tool_name,
                        "decision": "denied",
                        "reason": "not_in_role",
                    }
                },
            )
            self._notify(self.on_access_denied, tool_name, role)
            raise ToolError(access_denied_message(tool_name, role))

        logger.info(
            "Tool call authorized",
            extra={
                "auth_data": {
                    "request_id": request_id,
                    "role": role,
                    "tool": tool_name,
                    "decision": "allowed",
                }
            },
        )

        try:
            result = await call_next(context)
        except NotFoundError:
            # Permitted by the role, but the host has no such tool.
            logger.warning(
                "Tool call for unknown tool",
                extra={
                    "auth_data": {
                        "request_id": request_id,
                        "role": role,
                        "tool": tool_name,
                        "decision": "not_found",
                    }
                },
            )
            raise ToolError(unknown_tool_message(tool_name))

        self._notify(self.on_tool_executed, tool_name, role)
        return result
