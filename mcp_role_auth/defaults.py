"""
Built-in roles and the known-tools universe.

This is the central registry for access control out of the box. Four roles
ship by default:

    admin   -> every known tool (wildcard)
    editor  -> content read/write, no structure, users, keys or operations
    author  -> create and manage own content, no delete or publish
    viewer  -> read-only

The tool names are those of a headless CMS MCP server (content types,
entries, taxonomies, terms, users, API keys, search, scheduler, audit,
revisions, webhooks, backups, structure). A host with a different catalog
passes its own roles and known tools to create_role_auth().
"""

from mcp_role_auth.models import ALL_TOOLS, AccessLevel, RoleConfig

DEFAULT_ROLE = "viewer"
DEFAULT_ROLE_ENV_VAR = "AGENT_ROLE"
DEFAULT_API_KEY_ENV_VAR = "AGENT_API_KEY"

DEFAULT_ROLES: dict[str, RoleConfig] = {
    "admin": RoleConfig(
        name="Admin",
        description="Full access to all operations",
        access_level=AccessLevel.FULL,
        tools=ALL_TOOLS,
    ),
    "editor": RoleConfig(
        name="Editor",
        description="Can read/write content but not modify structure",
        access_level=AccessLevel.LIMITED,
        tools=(
            # Structure (read-only)
            "list_content_types",
            "get_content_type",
            "get_structure_summary",
            # Entries
            "list_entries",
            "get_entry",
            "create_entry",
            "update_entry",
            "delete_entry",
            "publish_entry",
            "unpublish_entry",
            # Taxonomies (read-only)
            "list_taxonomies",
            "get_taxonomy",
            # Terms (read + assign)
            "list_terms",
            "get_term",
            "assign_terms",
            "get_entries_by_term",
            # Search
            "search",
            "search_in_content_type",
            "search_suggest",
            # Scheduler
            "scheduler_status",
            "scheduler_upcoming",
            "schedule_entry",
            "cancel_schedule",
            # Revisions (read-only)
            "revision_list",
            "revision_compare",
            "revision_stats",
        ),
        blocked_tools=(
            "create_content_type",
            "delete_content_type",
            "import_structure",
            "export_structure",
            "create_taxonomy",
            "delete_taxonomy",
            "create_term",
            "update_term",
            "delete_term",
            "list_users",
            "get_user",
            "create_user",
            "update_user",
            "update_user_role",
            "delete_user",
            "create_api_key",
            "list_api_keys",
            "revoke_api_key",
            "webhook_list",
            "webhook_create",
            "webhook_test",
            "webhook_stats",
            "backup_create",
            "backup_list",
            "backup_restore",
            "backup_stats",
            "audit_recent",
            "audit_query",
            "audit_resource_history",
            "audit_stats",
        ),
    ),
    "author": RoleConfig(
        name="Author",
        description="Can create and manage own content",
        access_level=AccessLevel.LIMITED,
        tools=(
            "list_content_types",
            "get_content_type",
            "get_structure_summary",
            "list_entries",
            "get_entry",
            "create_entry",
            "update_entry",
            "list_taxonomies",
            "get_taxonomy",
            "list_terms",
            "get_term",
            "assign_terms",
            "search",
            "search_in_content_type",
            "search_suggest",
        ),
    ),
    "viewer": RoleConfig(
        name="Viewer",
        description="Read-only access to content",
        access_level=AccessLevel.LIMITED,
        tools=(
            "list_content_types",
            "get_content_type",
            "get_structure_summary",
            "list_entries",
            "get_entry",
            "list_taxonomies",
            "get_taxonomy",
            "list_terms",
            "get_term",
            "get_entries_by_term",
            "search",
            "search_in_content_type",
            "search_suggest",
        ),
    ),
}

# Every tool the host understands. Only used to expand the wildcard grant
# (admin's allowed list and tool count).
DEFAULT_KNOWN_TOOLS: tuple[str, ...] = (
    # Content types
    "list_content_types",
    "get_content_type",
    "create_content_type",
    "delete_content_type",
    # Entries
    "list_entries",
    "get_entry",
    "create_entry",
    "update_entry",
    "delete_entry",
    "publish_entry",
    "unpublish_entry",
    # Taxonomies
    "list_taxonomies",
    "get_taxonomy",
    "create_taxonomy",
    "delete_taxonomy",
    # Terms
    "list_terms",
    "get_term",
    "create_term",
    "update_term",
    "delete_term",
    "assign_terms",
    "get_entries_by_term",
    # Users
    "list_users",
    "get_user",
    "create_user",
    "update_user",
    "update_user_role",
    "delete_user",
    # API keys
    "create_api_key",
    "list_api_keys",
    "revoke_api_key",
    # Search
    "search",
    "search_in_content_type",
    "search_suggest",
    # Scheduler
    "scheduler_status",
    "scheduler_upcoming",
    "schedule_entry",
    "cancel_schedule",
    # Audit
    "audit_recent",
    "audit_query",
    "audit_resource_history",
    "audit_stats",
    # Revisions
    "revision_list",
    "revision_compare",
    "revision_stats",
    # Webhooks
    "webhook_list",
    "webhook_create",
    "webhook_test",
    "webhook_stats",
    # Backups
    "backup_create",
    "backup_list",
    "backup_restore",
    "backup_stats",
    # Structure
    "export_structure",
    "import_structure",
    "get_structure_summary",
)
