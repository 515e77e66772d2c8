"""
Application configuration loaded from environment variables.

Uses pydantic-settings to define typed configuration that automatically reads
from environment variables (or a .env file for local development).

Two groups of variables matter here:

- MCP_* variables configure the server and the role policy itself
  (which roles exist, which API-key prefixes map to which role).
- AGENT_ROLE / AGENT_API_KEY (names configurable via MCP_ROLE_ENV_VAR and
  MCP_API_KEY_ENV_VAR) carry the agent's identity. They are NOT read here:
  the identity resolver reads them live on every request.

Complex fields are given as JSON, for example:

    MCP_API_KEY_MAP='{"lk_live_admin_": "admin", "lk_live_edit": "editor"}'
    MCP_ROLES='{"tester": {"name": "Tester", "description": "QA", "tools": ["list_entries"]}}'
"""

from typing import Any

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Server and policy configuration with environment variable bindings.

    Each field maps to an environment variable with the MCP_ prefix.
    For example, `default_role` reads from MCP_DEFAULT_ROLE.
    """

    # --- Server settings ---

    # "stdio" (default) or "streamable-http". Identity comes from the
    # process environment, so stdio (one server process per agent) is the
    # natural fit.
    transport: str = "stdio"

    # Only used with the streamable-http transport.
    host: str = "127.0.0.1"
    port: int = 8080

    # Logging verbosity. Maps to Python's logging levels.
    log_level: str = "info"

    # --- Role policy ---

    # Role used when the environment names no registered role and no API key.
    default_role: str = "viewer"

    # Names of the environment variables that carry the agent's identity.
    role_env_var: str = "AGENT_ROLE"
    api_key_env_var: str = "AGENT_API_KEY"

    # API-key prefix -> role key. Registration order matters for the
    # fallback prefix scan (first match wins).
    api_key_map: dict[str, str] = {}

    # Extra or replacement roles, merged over the built-in ones.
    # Values use the RoleConfig.from_dict() shape.
    roles: dict[str, dict[str, Any]] = {}

    # All tool names the host knows. None means the built-in list.
    known_tools: list[str] | None = None

    model_config = {
        "env_prefix": "MCP_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


# Read once at import time. Only the server entry point and the CLI use it;
# the authorization core takes its configuration as arguments.
settings = Settings()
