"""
Data model for role-based tool authorization.

A role is a named bundle of tool permissions. Its grant is either the
wildcard ALL_TOOLS (every tool in the known-tools universe, now and later)
or an explicit tuple of tool names:

    RoleConfig(
        name="Viewer",
        description="Read-only access to content",
        access_level=AccessLevel.LIMITED,
        tools=("list_entries", "get_entry"),
    )

Everything here is a frozen dataclass: once the policy store hands out a
role definition, nobody can edit it in place. Changing a role means
registering a new definition under the same key.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RoleConfigError(Exception):
    """
    Raised when a role definition from configuration is malformed.

    Only raised while parsing configuration at startup. Authorization
    decisions themselves never raise: an unknown role simply gets no tools.

    Attributes:
        message: Human-readable error description
        role_key: The role key whose definition failed to parse, if known
    """

    def __init__(self, message: str, role_key: str | None = None):
        self.message = message
        self.role_key = role_key
        if role_key:
            message = f"Role '{role_key}': {message}"
        super().__init__(message)


class AccessLevel(str, Enum):
    """Advisory access tier. 'full' is metadata only, not a permission grant."""

    FULL = "full"
    LIMITED = "limited"


class AllTools(Enum):
    """Wildcard grant: every tool in the known-tools universe."""

    ALL = "*"


ALL_TOOLS = AllTools.ALL

# The external (JSON / settings) spelling of the wildcard.
WILDCARD = "*"


@dataclass(frozen=True)
class RoleConfig:
    """
    Definition of a single role.

    Attributes:
        name: Display name (e.g., "Editor")
        description: What the role is for
        access_level: Advisory tier, see AccessLevel
        tools: ALL_TOOLS (or "*"), or the explicit tool names this role may use
        blocked_tools: Tools documented as blocked for this role. Purely
                       informational: it is never computed from the known
                       tools and never consulted when deciding access.
    """

    name: str
    description: str
    access_level: AccessLevel = AccessLevel.LIMITED
    tools: AllTools | tuple[str, ...] = ()
    blocked_tools: tuple[str, ...] = field(default=())

    def __post_init__(self):
        # Accept lists (and plain strings for the access level) from callers,
        # store immutable tuples so the frozen guarantee actually holds.
        object.__setattr__(self, "access_level", AccessLevel(self.access_level))
        if self.tools == WILDCARD:
            object.__setattr__(self, "tools", ALL_TOOLS)
        elif not isinstance(self.tools, AllTools):
            object.__setattr__(self, "tools", _tool_names(self.tools, "tools"))
        object.__setattr__(
            self, "blocked_tools", _tool_names(self.blocked_tools or (), "blocked_tools")
        )

    @property
    def is_wildcard(self) -> bool:
        return self.tools is ALL_TOOLS

    @classmethod
    def from_dict(cls, data: dict[str, Any], role_key: str | None = None) -> "RoleConfig":
        """
        Build a RoleConfig from its external dictionary form.

        Expected shape (the same one used in MCP_ROLES):
            {
                "name": "Tester",
                "description": "QA agents",
                "access_level": "limited",      # or "accessLevel"
                "tools": ["list_entries"],      # or "*" for all tools
                "blocked_tools": ["create_user"]  # optional, or "blockedTools"
            }

        Raises:
            RoleConfigError: If the dictionary doesn't describe a valid role
        """
        if not isinstance(data, dict):
            raise RoleConfigError("definition must be an object", role_key)

        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise RoleConfigError("missing 'name'", role_key)

        description = data.get("description", "")
        if not isinstance(description, str):
            raise RoleConfigError("'description' must be a string", role_key)

        raw_level = data.get("access_level", data.get("accessLevel", AccessLevel.LIMITED.value))
        try:
            access_level = AccessLevel(raw_level)
        except ValueError:
            raise RoleConfigError(
                f"invalid access level {raw_level!r}, expected 'full' or 'limited'", role_key
            )

        raw_tools = data.get("tools", [])
        if raw_tools == WILDCARD:
            tools: AllTools | tuple[str, ...] = ALL_TOOLS
        else:
            tools = _string_tuple(raw_tools, "tools", role_key)

        raw_blocked = data.get("blocked_tools", data.get("blockedTools")) or []
        blocked_tools = _string_tuple(raw_blocked, "blocked_tools", role_key)

        return cls(
            name=name,
            description=description,
            access_level=access_level,
            tools=tools,
            blocked_tools=blocked_tools,
        )


def _tool_names(value: Any, field_name: str) -> tuple[str, ...]:
    # A bare string is iterable too; tuple("search") would grant single letters.
    if isinstance(value, str):
        raise TypeError(f"RoleConfig.{field_name} must be a list of tool names, got {value!r}")
    return tuple(value)


def _string_tuple(value: Any, field_name: str, role_key: str | None) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise RoleConfigError(f"'{field_name}' must be a list of tool names", role_key)
    if not all(isinstance(v, str) for v in value):
        raise RoleConfigError(f"'{field_name}' entries must all be strings", role_key)
    return tuple(value)


@dataclass(frozen=True)
class EffectiveIdentity:
    """
    Outcome of identity resolution for the current environment.

    Never cached: the resolver builds a new one on every call, so a change
    to the environment is picked up immediately.

    Attributes:
        role: The effective role key (may be unregistered)
        credential_digest: "api-key:<first 14 chars>" when an API key is set
        source: Which step decided the role: "role", "api_key" or "default"
    """

    role: str
    credential_digest: str | None
    source: str


@dataclass(frozen=True)
class AuthResult:
    authenticated: bool
    role: str | None
    user_id: str | None
    error: str | None = None


@dataclass(frozen=True)
class RoleInfo:
    key: str
    name: str
    description: str
    access_level: str
    tool_count: int


@dataclass(frozen=True)
class AgentInfo:
    role: str
    name: str
    description: str
    allowed_tool_count: int
    blocked_tool_count: int


@dataclass(frozen=True)
class ToolFilter:
    allowed_tools: list[str]
    blocked_tools: list[str]
    role: str
    user_id: str
