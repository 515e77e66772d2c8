"""
Identity resolution: which role is the current agent acting as?

The agent's identity comes from its process environment, read fresh on
every call:

1. AGENT_ROLE names a registered role      -> that role
2. AGENT_API_KEY is set                    -> role from the key's prefix
3. Neither                                 -> the default role ("viewer")

Step 3 returns the default even when no such role is registered. Resolution
never fails; whether the role exists is checked by whoever evaluates it.

API-key prefix matching:
- Fast path: the first 14 characters of the key are looked up exactly.
- Fallback: the registered prefixes are scanned in registration order and
  the FIRST one the key starts with wins. This is first match, not longest
  match: with "ab" registered before "abc", the key "abcdef" maps to "ab"'s
  role.
"""

import os
from collections.abc import Mapping

from mcp_role_auth.defaults import DEFAULT_API_KEY_ENV_VAR, DEFAULT_ROLE, DEFAULT_ROLE_ENV_VAR
from mcp_role_auth.models import EffectiveIdentity
from mcp_role_auth.policy import PolicyStore

# Length of the API-key prefix used for the exact-match fast path and for
# the user id reported by authenticate().
API_KEY_PREFIX_LENGTH = 14


def api_key_digest(api_key: str) -> str:
    return f"api-key:{api_key[:API_KEY_PREFIX_LENGTH]}"


class IdentityResolver:
    """
    Resolves the effective role from ambient inputs.

    Args:
        store: Policy store used to check role claims and API-key prefixes
        default_role: Returned when nothing else matches
        role_env_var: Name of the variable holding a direct role claim
        api_key_env_var: Name of the variable holding an API key
        environ: Where to read those variables from. Defaults to os.environ
                 (the live mapping, so later changes are seen).
    """

    def __init__(
        self,
        store: PolicyStore,
        default_role: str = DEFAULT_ROLE,
        role_env_var: str = DEFAULT_ROLE_ENV_VAR,
        api_key_env_var: str = DEFAULT_API_KEY_ENV_VAR,
        environ: Mapping[str, str] | None = None,
    ):
        self.store = store
        self.default_role = default_role
        self.role_env_var = role_env_var
        self.api_key_env_var = api_key_env_var
        self._environ = environ if environ is not None else os.environ

    def role_claim(self) -> str | None:
        return self._environ.get(self.role_env_var) or None

    def api_key(self) -> str | None:
        return self._environ.get(self.api_key_env_var) or None

    def resolve_role(self) -> str:
        return self.resolve_identity().role

    def resolve_identity(self) -> EffectiveIdentity:
        api_key = self.api_key()
        digest = api_key_digest(api_key) if api_key else None

        claimed = self.role_claim()
        if claimed and claimed in self.store:
            return EffectiveIdentity(role=claimed, credential_digest=digest, source="role")

        if api_key:
            return EffectiveIdentity(
                role=self.resolve_role_from_api_key(api_key),
                credential_digest=digest,
                source="api_key",
            )

        return EffectiveIdentity(role=self.default_role, credential_digest=None, source="default")

    def resolve_role_from_api_key(self, api_key: str) -> str:
        role = self.store.lookup_api_key(api_key[:API_KEY_PREFIX_LENGTH])
        if role is not None:
            return role

        for prefix, role in self.store.api_key_prefixes():
            if api_key.startswith(prefix):
                return role

        return self.default_role
