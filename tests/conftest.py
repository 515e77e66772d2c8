"""
Shared test fixtures for the role authorization test suite.

Key fixtures:
- env: A plain dict standing in for the process environment. Tests set
  AGENT_ROLE / AGENT_API_KEY on it instead of touching os.environ.
- make_auth: A factory that builds a RoleAuth reading from `env`
- tester_role: A small custom role used by the runtime extension tests

Because the resolver reads the mapping live, a test can change `env`
between assertions and the next call sees the new identity.
"""

import pytest

from mcp_role_auth.auth import create_role_auth
from mcp_role_auth.models import AccessLevel, RoleConfig


@pytest.fixture
def env() -> dict[str, str]:
    return {}


@pytest.fixture
def make_auth(env):
    """
    Factory fixture to create RoleAuth instances bound to the `env` dict.

    Usage in tests:
        def test_something(make_auth, env):
            auth = make_auth(api_key_map={"admin_": "admin"})
            env["AGENT_API_KEY"] = "admin_abc123xyz"
            assert auth.resolve_role() == "admin"
    """

    def _make_auth(**kwargs):
        kwargs.setdefault("environ", env)
        return create_role_auth(**kwargs)

    return _make_auth


@pytest.fixture
def tester_role() -> RoleConfig:
    return RoleConfig(
        name="Tester",
        description="Test role",
        access_level=AccessLevel.LIMITED,
        tools=["list_entries"],
    )
