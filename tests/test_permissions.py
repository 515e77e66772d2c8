"""
Unit tests for permission evaluation and tool filtering.

Covers the decision rules for the three kinds of role:
- wildcard (admin): everything allowed
- explicit (editor, viewer, ...): membership in the role's tool list
- unregistered: nothing allowed, nothing listed
"""

import pytest

from mcp_role_auth import permissions
from mcp_role_auth.defaults import DEFAULT_KNOWN_TOOLS
from mcp_role_auth.models import ALL_TOOLS, RoleConfig

SAMPLE_TOOLS = {
    "list_entries": {"description": "List entries"},
    "create_user": {"description": "Create a user"},
    "search": {"description": "Search content"},
    "backup_create": {"description": "Create a backup"},
}


class TestIsToolAllowed:
    # ----- Wildcard role -----

    @pytest.mark.parametrize("tool", ["create_user", "delete_user", "backup_create", "not_a_real_tool"])
    def test_admin_allowed_everything(self, make_auth, tool):
        """The wildcard grant covers known and unknown tool names alike."""
        auth = make_auth()

        assert auth.is_tool_allowed(tool, "admin") is True

    def test_custom_wildcard_role(self, make_auth):
        """A caller-defined wildcard role gets every tool, like admin."""
        auth = make_auth(
            roles={"ops": RoleConfig(name="Ops", description="Ops", tools=ALL_TOOLS)}
        )

        assert auth.is_tool_allowed("backup_restore", "ops") is True

    # ----- Explicit roles -----

    def test_editor_has_limited_access(self, make_auth):
        """Editor can manage content but not users or backups."""
        auth = make_auth()

        assert auth.is_tool_allowed("list_entries", "editor") is True
        assert auth.is_tool_allowed("create_entry", "editor") is True
        assert auth.is_tool_allowed("create_user", "editor") is False
        assert auth.is_tool_allowed("backup_create", "editor") is False

    def test_viewer_is_read_only(self, make_auth):
        """Viewer can read entries but not create or delete them."""
        auth = make_auth()

        assert auth.is_tool_allowed("list_entries", "viewer") is True
        assert auth.is_tool_allowed("get_entry", "viewer") is True
        assert auth.is_tool_allowed("create_entry", "viewer") is False
        assert auth.is_tool_allowed("delete_entry", "viewer") is False

    def test_explicit_role_is_pure_membership(self, make_auth):
        """Every known tool is allowed for an explicit role iff it is in its list."""
        auth = make_auth()
        editor_tools = set(auth.allowed_tools("editor"))

        for tool in DEFAULT_KNOWN_TOOLS:
            assert auth.is_tool_allowed(tool, "editor") == (tool in editor_tools)

    # ----- Unregistered role -----

    def test_unregistered_role_denied(self, make_auth):
        """An unknown role gets nothing and never raises."""
        auth = make_auth()

        assert auth.is_tool_allowed("list_entries", "ghost") is False
        assert auth.allowed_tools("ghost") == []
        assert auth.blocked_tools("ghost") == []

    # ----- Role resolved from the environment -----

    def test_no_role_uses_environment(self, make_auth, env):
        """Without a role argument the current agent's role is used."""
        auth = make_auth()
        env["AGENT_ROLE"] = "admin"

        assert auth.is_tool_allowed("create_user") is True

        env["AGENT_ROLE"] = "viewer"

        assert auth.is_tool_allowed("create_user") is False

    def test_empty_role_uses_environment(self, make_auth, env):
        """An empty role string counts as "no role given"."""
        auth = make_auth()
        env["AGENT_ROLE"] = "admin"

        assert auth.is_tool_allowed("create_user", "") is True


class TestAllowedAndBlockedTools:
    def test_admin_gets_all_known_tools(self, make_auth):
        """Admin's allowed list is the whole known-tools universe, in order."""
        auth = make_auth()

        assert auth.allowed_tools("admin") == list(DEFAULT_KNOWN_TOOLS)

    def test_editor_gets_26_tools(self, make_auth):
        """Editor's explicit list has 26 tools."""
        auth = make_auth()

        assert len(auth.allowed_tools("editor")) == 26

    def test_viewer_gets_13_tools(self, make_auth):
        """Viewer's explicit list has 13 tools."""
        auth = make_auth()

        assert len(auth.allowed_tools("viewer")) == 13

    def test_custom_known_tools_used_for_admin(self, make_auth):
        """A custom universe replaces the default one for wildcard roles."""
        auth = make_auth(known_tools=["custom_tool_1", "custom_tool_2"])

        assert auth.allowed_tools("admin") == ["custom_tool_1", "custom_tool_2"]

    def test_admin_has_no_blocked_tools(self, make_auth):
        """Wildcard roles never report blocked tools."""
        auth = make_auth()

        assert auth.blocked_tools("admin") == []

    def test_editor_blocked_tools_are_documented_list(self, make_auth):
        """Editor reports its 30 documented blocked tools."""
        auth = make_auth()

        blocked = auth.blocked_tools("editor")

        assert "create_user" in blocked
        assert len(blocked) == 30

    def test_blocked_tools_not_computed_from_universe(self, make_auth):
        """
        Viewer documents no blocked tools, so none are reported, even though
        most of the known tools are not in its allowed list.
        """
        auth = make_auth()

        assert auth.blocked_tools("viewer") == []
        assert auth.blocked_tools("author") == []

    def test_wildcard_ignores_documented_blocked_tools(self, make_auth):
        """A blocked list on a wildcard role is neither reported nor enforced."""
        auth = make_auth(
            roles={
                "odd": RoleConfig(
                    name="Odd",
                    description="Wildcard with docs",
                    tools=ALL_TOOLS,
                    blocked_tools=["create_user"],
                )
            }
        )

        assert auth.blocked_tools("odd") == []
        assert auth.is_tool_allowed("create_user", "odd") is True

    def test_unknown_tool_names_count_toward_allowed(self, make_auth):
        """Tool names are not checked against the universe."""
        auth = make_auth(
            roles={"x": RoleConfig(name="X", description="", tools=["list_entries", "no_such_tool"])}
        )

        assert len(auth.allowed_tools("x")) == 2


class TestFilterTools:
    def test_editor_filter(self, make_auth):
        """Only the editor's tools survive filtering, in input order."""
        auth = make_auth()

        filtered = auth.filter_tools(SAMPLE_TOOLS, "editor")

        assert list(filtered) == ["list_entries", "search"]

    def test_admin_gets_same_mapping_back(self, make_auth):
        """Wildcard filtering returns the input mapping itself."""
        auth = make_auth()

        filtered = auth.filter_tools(SAMPLE_TOOLS, "admin")

        assert filtered is SAMPLE_TOOLS

    def test_unregistered_role_gets_nothing(self, make_auth):
        """An unknown role filters everything out."""
        auth = make_auth()

        assert auth.filter_tools(SAMPLE_TOOLS, "ghost") == {}

    def test_entries_are_not_copied(self, make_auth):
        """Surviving entries are the caller's own objects."""
        auth = make_auth()

        filtered = auth.filter_tools(SAMPLE_TOOLS, "viewer")

        assert filtered["list_entries"] is SAMPLE_TOOLS["list_entries"]

    def test_input_not_mutated(self, make_auth):
        """Filtering builds a new mapping and leaves the input alone."""
        auth = make_auth()
        tools = dict(SAMPLE_TOOLS)

        auth.filter_tools(tools, "viewer")

        assert tools == SAMPLE_TOOLS

    def test_permitted_but_absent_tools_not_added(self, make_auth):
        """Filtering never adds tools that weren't in the input."""
        auth = make_auth()

        filtered = auth.filter_tools({"create_user": object()}, "viewer")

        assert filtered == {}

    @pytest.mark.parametrize("role", ["admin", "editor", "author", "viewer", "ghost"])
    def test_filter_is_subset_and_idempotent(self, make_auth, role):
        """Filtered output is a subset of the input and stable when filtered again."""
        auth = make_auth()

        once = auth.filter_tools(SAMPLE_TOOLS, role)
        twice = auth.filter_tools(once, role)

        assert set(once) <= set(SAMPLE_TOOLS)
        assert all(once[name] is SAMPLE_TOOLS[name] for name in once)
        assert dict(twice) == dict(once)

    def test_filter_uses_environment_role(self, make_auth, env):
        """Without a role argument the filter uses the current agent's role."""
        auth = make_auth()
        env["AGENT_ROLE"] = "editor"

        assert list(auth.filter_tools(SAMPLE_TOOLS)) == ["list_entries", "search"]

    def test_pure_function_without_facade(self):
        """The permission functions work on a bare RoleConfig."""
        config = RoleConfig(name="Solo", description="", tools=("search",))

        assert permissions.filter_tools(SAMPLE_TOOLS, config) == {"search": SAMPLE_TOOLS["search"]}
        assert permissions.is_allowed(None, "search") is False
