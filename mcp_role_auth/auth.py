"""
Role-based authorization facade.

RoleAuth composes the policy store, the identity resolver and the
permission rules into the one object a host integrates against:

    auth = create_role_auth(
        roles={"tester": RoleConfig(name="Tester", description="QA", tools=["list_entries"])},
        api_key_map={"lk_live_admin_": "admin"},
    )

    auth.is_tool_allowed("create_user")           # for the current agent
    auth.is_tool_allowed("create_user", "editor")  # for an explicit role
    auth.filter_tools({"list_entries": ..., "create_user": ...})

There is no module-level instance: the host creates one at
startup (see server.create_role_auth_from_settings) and passes it around.

Any method taking `role=None` resolves the current agent's role from the
environment on that call. Nothing is cached between calls.

None of these methods raise for an unknown role or tool: the worst outcome
is "no tools" or "access denied".
"""

from collections.abc import Mapping, Sequence
from typing import TypeVar

from mcp_role_auth import permissions
from mcp_role_auth.defaults import (
    DEFAULT_API_KEY_ENV_VAR,
    DEFAULT_KNOWN_TOOLS,
    DEFAULT_ROLE,
    DEFAULT_ROLE_ENV_VAR,
)
from mcp_role_auth.identity import IdentityResolver
from mcp_role_auth.models import (
    AgentInfo,
    AuthResult,
    EffectiveIdentity,
    RoleConfig,
    RoleInfo,
    ToolFilter,
)
from mcp_role_auth.policy import PolicyStore

T = TypeVar("T")


class RoleAuth:
    """
    Authorization for one host process.

    Attributes:
        store: The role and API-key prefix tables
        resolver: Turns environment variables into a role key
        known_tools: Universe of tool names, used to expand wildcard grants
    """

    def __init__(
        self,
        store: PolicyStore,
        resolver: IdentityResolver,
        known_tools: Sequence[str] = DEFAULT_KNOWN_TOOLS,
    ):
        self.store = store
        self.resolver = resolver
        self.known_tools: tuple[str, ...] = tuple(known_tools)

    @property
    def default_role(self) -> str:
        return self.resolver.default_role

    # ----- Identity -----

    def resolve_role(self) -> str:
        return self.resolver.resolve_role()

    def resolve_identity(self) -> EffectiveIdentity:
        return self.resolver.resolve_identity()

    def resolve_role_from_api_key(self, api_key: str) -> str:
        return self.resolver.resolve_role_from_api_key(api_key)

    def authenticate(self) -> AuthResult:
        """
        Authenticate the current agent.

        Fails (without raising) when the resolved role isn't registered.
        On success, user_id identifies where the identity came from:
        "api-key:<first 14 chars>" if the role was resolved through the API
        key, else "env-role" (role claim or default).
        """
        identity = self.resolve_identity()
        if identity.role not in self.store:
            return AuthResult(
                authenticated=False,
                role=None,
                user_id=None,
                error=f"Unknown role: {identity.role}",
            )

        return AuthResult(
            authenticated=True,
            role=identity.role,
            user_id=identity.credential_digest if identity.source == "api_key" else "env-role",
        )

    # ----- Permissions -----

    def is_tool_allowed(self, tool_name: str, role: str | None = None) -> bool:
        return permissions.is_allowed(self._lookup(role), tool_name)

    def allowed_tools(self, role: str) -> list[str]:
        return permissions.allowed_tools(self.store.get(role), self.known_tools)

    def blocked_tools(self, role: str) -> list[str]:
        return permissions.blocked_tools(self.store.get(role))

    def filter_tools(self, tools: Mapping[str, T], role: str | None = None) -> Mapping[str, T]:
        return permissions.filter_tools(tools, self._lookup(role))

    def tool_filter(self) -> ToolFilter:
        """Allowed and blocked tools for the current agent."""
        result = self.authenticate()
        role = result.role or self.default_role
        return ToolFilter(
            allowed_tools=self.allowed_tools(role),
            blocked_tools=self.blocked_tools(role),
            role=role,
            user_id=result.user_id or "anonymous",
        )

    # ----- Introspection -----

    def list_roles(self) -> list[RoleInfo]:
        return [
            RoleInfo(
                key=key,
                name=config.name,
                description=config.description,
                access_level=config.access_level.value,
                tool_count=len(self.known_tools) if config.is_wildcard else len(config.tools),
            )
            for key, config in self.store.roles()
        ]

    def agent_info(self) -> AgentInfo:
        """
        Summary of the current agent.

        If the resolved role isn't registered, the name and description come
        from the default role so there's always something to show. Counts
        are still those of the resolved role (zero).
        """
        role = self.resolve_role()
        config = self.store.get(role) or self.store.get(self.default_role)
        if config is None:
            name, description = role, ""
        else:
            name, description = config.name, config.description

        return AgentInfo(
            role=role,
            name=name,
            description=description,
            allowed_tool_count=len(self.allowed_tools(role)),
            blocked_tool_count=len(self.blocked_tools(role)),
        )

    # ----- Runtime extension -----

    def register_role(self, key: str, config: RoleConfig) -> None:
        self.store.register_role(key, config)

    def map_api_key(self, prefix: str, role: str) -> None:
        self.store.map_api_key(prefix, role)

    def _lookup(self, role: str | None) -> RoleConfig | None:
        return self.store.get(role or self.resolve_role())


def create_role_auth(
    roles: Mapping[str, RoleConfig] | None = None,
    default_role: str = DEFAULT_ROLE,
    api_key_map: Mapping[str, str] | None = None,
    known_tools: Sequence[str] | None = None,
    role_env_var: str = DEFAULT_ROLE_ENV_VAR,
    api_key_env_var: str = DEFAULT_API_KEY_ENV_VAR,
    environ: Mapping[str, str] | None = None,
) -> RoleAuth:
    """
    Create a RoleAuth instance.

    Args:
        roles: Extra or replacement roles, merged over the built-in ones
               (caller wins on key collision)
        default_role: Role used when the environment names none
        api_key_map: Initial API-key prefix -> role key mappings
        known_tools: All tool names the host knows (expands wildcard grants)
        role_env_var: Environment variable holding a direct role claim
        api_key_env_var: Environment variable holding an API key
        environ: Environment mapping to read from (default: os.environ)
    """
    store = PolicyStore(roles=roles, api_key_map=api_key_map)
    resolver = IdentityResolver(
        store,
        default_role=default_role,
        role_env_var=role_env_var,
        api_key_env_var=api_key_env_var,
        environ=environ,
    )
    return RoleAuth(
        store,
        resolver,
        known_tools=DEFAULT_KNOWN_TOOLS if known_tools is None else known_tools,
    )
