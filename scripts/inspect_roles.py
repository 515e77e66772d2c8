"""
CLI utility to inspect the role policy without starting the server.

Uses the same configuration as the server (MCP_ROLES, MCP_API_KEY_MAP,
MCP_DEFAULT_ROLE, ...) and the same identity environment (AGENT_ROLE,
AGENT_API_KEY), so it answers "what would the server let this agent do?".

Usage examples:

    # Table of all roles
    uv run python -m scripts.inspect_roles --list

    # Allowed and blocked tools for a role
    uv run python -m scripts.inspect_roles --role editor

    # Current identity (from AGENT_ROLE / AGENT_API_KEY)
    AGENT_API_KEY=lk_live_admin_123 uv run python -m scripts.inspect_roles

    # Permission check, exit code 0 = allowed, 1 = denied
    uv run python -m scripts.inspect_roles --check create_user --role editor
"""

import argparse

from mcp_role_auth.auth import RoleAuth
from mcp_role_auth.config import settings
from mcp_role_auth.server import create_role_auth_from_settings


def print_roles(auth: RoleAuth) -> None:
    roles = auth.list_roles()
    width = max(len(info.key) for info in roles)
    for info in roles:
        print(f"{info.key:<{width}}  {info.access_level:<7}  {info.tool_count:>3} tools  {info.description}")


def print_role(auth: RoleAuth, role: str) -> None:
    allowed = auth.allowed_tools(role)
    blocked = auth.blocked_tools(role)
    print(f"Role:       {role}")
    print(f"Allowed:    {len(allowed)}")
    for name in allowed:
        print(f"  + {name}")
    print(f"Blocked:    {len(blocked)}")
    for name in blocked:
        print(f"  - {name}")


def print_identity(auth: RoleAuth) -> None:
    identity = auth.resolve_identity()
    result = auth.authenticate()
    info = auth.agent_info()
    print(f"Role:       {identity.role} ({info.name})")
    print(f"Source:     {identity.source}")
    print(f"User ID:    {result.user_id or 'anonymous'}")
    print(f"Allowed:    {info.allowed_tool_count} tools")
    print(f"Blocked:    {info.blocked_tool_count} tools")
    if not result.authenticated:
        print(f"Error:      {result.error}")


def main(argv: list[str] | None = None, auth: RoleAuth | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Inspect the role policy of the MCP server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  All roles:
    %(prog)s --list

  One role:
    %(prog)s --role viewer

  Permission check:
    %(prog)s --check delete_entry --role editor
        """,
    )
    parser.add_argument("--list", action="store_true", help="List all registered roles")
    parser.add_argument(
        "--role",
        help="Role to inspect (default: resolved from AGENT_ROLE / AGENT_API_KEY)",
    )
    parser.add_argument("--check", metavar="TOOL", help="Check whether TOOL is allowed")

    args = parser.parse_args(argv)
    auth = auth or create_role_auth_from_settings(settings)

    if args.list:
        print_roles(auth)
        return 0

    if args.check:
        role = args.role or auth.resolve_role()
        allowed = auth.is_tool_allowed(args.check, role)
        verdict = "allowed" if allowed else "NOT allowed"
        print(f"Tool '{args.check}' is {verdict} for role '{role}'")
        return 0 if allowed else 1

    if args.role:
        print_role(auth, args.role)
    else:
        print_identity(auth)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
