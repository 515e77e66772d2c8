"""
Policy store: role definitions and API-key prefix mappings.

The store only ever grows. Roles and prefix mappings can be added or
overwritten at runtime (last write wins, no merge), never removed.

Nothing is validated at write time: a role may list tools the host doesn't
know, and a prefix may map to a role that doesn't exist yet. Both are
accepted; an undefined role simply gets no tools when evaluated.
"""

import logging
import threading
from collections.abc import Mapping

from mcp_role_auth.defaults import DEFAULT_ROLES
from mcp_role_auth.models import RoleConfig

logger = logging.getLogger("mcp-role-auth")


class PolicyStore:
    """
    Holds the role table and the API-key prefix table.

    FastMCP may run synchronous tools in worker threads, so every read and
    write goes through one re-entrant lock. Readers get snapshots, never the
    live dictionaries.
    """

    def __init__(
        self,
        roles: Mapping[str, RoleConfig] | None = None,
        api_key_map: Mapping[str, str] | None = None,
    ):
        # Caller roles win over the built-in ones on key collision.
        self._roles: dict[str, RoleConfig] = {**DEFAULT_ROLES, **(roles or {})}
        self._api_key_map: dict[str, str] = dict(api_key_map or {})
        self._lock = threading.RLock()

    def get(self, key: str) -> RoleConfig | None:
        with self._lock:
            return self._roles.get(key)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._roles

    def roles(self) -> list[tuple[str, RoleConfig]]:
        """All registered roles, in registration order."""
        with self._lock:
            return list(self._roles.items())

    def lookup_api_key(self, prefix: str) -> str | None:
        with self._lock:
            return self._api_key_map.get(prefix)

    def api_key_prefixes(self) -> list[tuple[str, str]]:
        """All (prefix, role) mappings, in registration order."""
        with self._lock:
            return list(self._api_key_map.items())

    def register_role(self, key: str, config: RoleConfig) -> None:
        with self._lock:
            replaced = key in self._roles
            self._roles[key] = config
        logger.info(
            "Role registered",
            extra={
                "auth_data": {
                    "role": key,
                    "replaced": replaced,
                    "wildcard": config.is_wildcard,
                }
            },
        )

    def map_api_key(self, prefix: str, role: str) -> None:
        with self._lock:
            self._api_key_map[prefix] = role
            known_role = role in self._roles
        if not known_role:
            # Accepted anyway: the role may be registered later.
            logger.warning(
                "API key prefix mapped to unregistered role",
                extra={"auth_data": {"role": role, "prefix_length": len(prefix)}},
            )
        else:
            logger.info(
                "API key prefix mapped",
                extra={"auth_data": {"role": role, "prefix_length": len(prefix)}},
            )
