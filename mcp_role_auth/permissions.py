"""
Permission evaluation and tool-collection filtering.

Pure functions over a single RoleConfig (or None for an unregistered role).
The facade in auth.py looks the role up and calls these.

Rules:
- Unregistered role (None): nothing is allowed, nothing is listed.
- Wildcard role: everything is allowed.
- Explicit role: a tool is allowed iff its name is in the role's tools.

Blocked tools are whatever the role's author documented. They are NOT the
complement of the allowed tools within the known universe.
"""

from collections.abc import Mapping, Sequence
from typing import TypeVar

from mcp_role_auth.models import RoleConfig

T = TypeVar("T")


def is_allowed(config: RoleConfig | None, tool_name: str) -> bool:
    if config is None:
        return False
    if config.is_wildcard:
        return True
    return tool_name in config.tools


def allowed_tools(config: RoleConfig | None, known_tools: Sequence[str]) -> list[str]:
    if config is None:
        return []
    if config.is_wildcard:
        return list(known_tools)
    return list(config.tools)


def blocked_tools(config: RoleConfig | None) -> list[str]:
    if config is None or config.is_wildcard:
        return []
    return list(config.blocked_tools)


def filter_tools(tools: Mapping[str, T], config: RoleConfig | None) -> Mapping[str, T]:
    """
    Return the part of a name -> tool mapping that the role may use.

    The input is never modified. A wildcard role gets the input mapping
    itself back (no copy); otherwise a new dict is built in the input's
    iteration order. Entries are never copied either way.
    """
    if config is None:
        return {}
    if config.is_wildcard:
        return tools

    permitted = set(config.tools)
    return {name: tool for name, tool in tools.items() if name in permitted}
