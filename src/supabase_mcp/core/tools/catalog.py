"""The static catalog of every tool the server exposes.

Entries are declared once at import time and never change. Schemas are advertised
to the calling agent verbatim, so what the agent validates is exactly what the
dispatcher expects.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from .models import ToolAnnotations, ToolDefinition, ToolParameter

# Categories double as the key names of the server-info resource.
DATABASE_REST = "database_rest"
STORAGE = "storage"
AUTH_ADMIN = "auth_admin"
MANAGEMENT_PROJECTS = "management_projects"
MANAGEMENT_DATABASE = "management_database"
MANAGEMENT_FUNCTIONS = "management_functions"
MANAGEMENT_SECRETS_KEYS = "management_secrets_keys"

CATEGORIES = (
    DATABASE_REST,
    STORAGE,
    AUTH_ADMIN,
    MANAGEMENT_PROJECTS,
    MANAGEMENT_DATABASE,
    MANAGEMENT_FUNCTIONS,
    MANAGEMENT_SECRETS_KEYS,
)

# Accepted from callers that always attach it; stripped before dispatch.
FIELDS_PARAM = "_fields"

_RETURN_CHOICES = ("representation", "minimal", "headers-only")
_STRING_ITEMS = {"type": "string"}
_SECRET_ITEMS = {
    "type": "object",
    "properties": {"name": {"type": "string"}, "value": {"type": "string"}},
    "required": ["name", "value"],
}


def _p(
    name: str,
    type: Optional[str],
    description: str,
    *,
    required: bool = False,
    enum: Optional[Sequence[str]] = None,
    items: Optional[Dict[str, Any]] = None,
) -> ToolParameter:
    return ToolParameter(
        name=name,
        type=type,
        description=description,
        required=required,
        enum=tuple(enum) if enum is not None else None,
        items=items,
    )


def _tool(
    name: str,
    category: str,
    description: str,
    params: Sequence[ToolParameter],
    *,
    title: str,
    read_only: bool,
    destructive: Optional[bool] = None,
    idempotent: bool,
    open_world: bool,
) -> ToolDefinition:
    fields = _p(FIELDS_PARAM, "string", "Comma-separated list of fields to include in the response")
    return ToolDefinition(
        name=name,
        description=description,
        category=category,
        parameters=tuple(params) + (fields,),
        annotations=ToolAnnotations(
            title=title,
            read_only=read_only,
            destructive=destructive,
            idempotent=idempotent,
            open_world=open_world,
        ),
    )


def _project_ref(description: str = "Project reference ID") -> ToolParameter:
    return _p("project_ref", "string", description, required=True)


def _return_pref(description: str = "Return preference") -> ToolParameter:
    return _p("return", "string", description, enum=_RETURN_CHOICES)


def _select_returned() -> ToolParameter:
    return _p("select", "string", "Columns to return when return=representation")


_DATABASE_TOOLS: Tuple[ToolDefinition, ...] = (
    _tool(
        "sb_list_records",
        DATABASE_REST,
        "List records from a Supabase table/view with PostgREST filtering, column selection, ordering, and "
        "pagination. Filter syntax: age=gt.18, status=eq.active, name=ilike.*john*, id=in.(1,2,3). "
        "Resource embedding (JOINs): select=*,orders(*)",
        [
            _p("table", "string", "Table or view name", required=True),
            _p("select", "string", "Columns to return. Supports embedding: *,orders(*) or id,user:user_id(name,email)"),
            _p(
                "filter",
                "string",
                "PostgREST filter string. Example: age=gt.18&status=eq.active&or=(role.eq.admin,role.eq.mod)",
            ),
            _p("order", "string", "Sort order. Example: created_at.desc or name.asc.nullslast"),
            _p("limit", "number", "Maximum number of records to return"),
            _p("offset", "number", "Number of records to skip (for pagination)"),
        ],
        title="List Records",
        read_only=True,
        idempotent=True,
        open_world=False,
    ),
    _tool(
        "sb_insert_records",
        DATABASE_REST,
        "Insert one or more records into a Supabase table. Pass a single object or an array of objects. "
        "Use return=representation to get the created records back.",
        [
            _p("table", "string", "Table name", required=True),
            _p("records", None, "Single record object or array of record objects to insert", required=True),
            _return_pref(
                "Return preference. representation=full record, minimal=no body, headers-only=headers"
            ),
            _select_returned(),
        ],
        title="Insert Records",
        read_only=False,
        destructive=False,
        idempotent=False,
        open_world=False,
    ),
    _tool(
        "sb_update_records",
        DATABASE_REST,
        "Update records in a Supabase table matching a filter. Filter is REQUIRED to prevent accidental "
        "full-table updates. Use return=representation to see what changed.",
        [
            _p("table", "string", "Table name", required=True),
            _p("filter", "string", "PostgREST filter (REQUIRED). Example: id=eq.123 or status=eq.draft", required=True),
            _p("data", "object", "Fields to update as key-value pairs", required=True),
            _return_pref(),
            _select_returned(),
        ],
        title="Update Records",
        read_only=False,
        destructive=False,
        idempotent=True,
        open_world=False,
    ),
    _tool(
        "sb_upsert_records",
        DATABASE_REST,
        "Upsert (insert or update on conflict) records in a Supabase table. Uses merge-duplicates by default. "
        "Specify on_conflict for non-primary-key columns.",
        [
            _p("table", "string", "Table name", required=True),
            _p("records", None, "Single record object or array of record objects to upsert", required=True),
            _p(
                "resolution",
                "string",
                "Conflict resolution strategy (default: merge-duplicates)",
                enum=("merge-duplicates", "ignore-duplicates"),
            ),
            _p("on_conflict", "string", "Column(s) to detect conflicts on, if not primary key. Example: email"),
            _return_pref(),
            _select_returned(),
        ],
        title="Upsert Records",
        read_only=False,
        destructive=False,
        idempotent=True,
        open_world=False,
    ),
    _tool(
        "sb_delete_records",
        DATABASE_REST,
        "Delete records from a Supabase table matching a filter. Filter is REQUIRED to prevent accidental "
        "full-table deletion. Use sb_list_records first to verify which records will be deleted.",
        [
            _p("table", "string", "Table name", required=True),
            _p(
                "filter",
                "string",
                "PostgREST filter (REQUIRED). Example: id=eq.123 or status=eq.archived",
                required=True,
            ),
            _return_pref(),
            _select_returned(),
        ],
        title="Delete Records",
        read_only=False,
        destructive=True,
        idempotent=True,
        open_world=False,
    ),
    _tool(
        "sb_call_function",
        DATABASE_REST,
        "Call a stored PostgreSQL function (RPC) in Supabase. Use method=GET for immutable functions, "
        "POST for volatile ones (default).",
        [
            _p("function_name", "string", "PostgreSQL function name", required=True),
            _p("params", "object", "Function parameters as key-value pairs"),
            _p(
                "method",
                "string",
                "HTTP method. GET for immutable, POST for volatile (default: POST)",
                enum=("GET", "POST"),
            ),
        ],
        title="Call Function (RPC)",
        read_only=False,
        idempotent=False,
        open_world=False,
    ),
)

_STORAGE_TOOLS: Tuple[ToolDefinition, ...] = (
    _tool(
        "sb_list_buckets",
        STORAGE,
        "List all storage buckets in the Supabase project. Returns bucket name, public status, size limits, "
        "and allowed MIME types.",
        [],
        title="List Storage Buckets",
        read_only=True,
        idempotent=True,
        open_world=False,
    ),
    _tool(
        "sb_create_bucket",
        STORAGE,
        "Create a new storage bucket in Supabase. Set public=true for publicly accessible files. Optionally set "
        "file size limit and allowed MIME types.",
        [
            _p("name", "string", "Bucket name (unique identifier)", required=True),
            _p("public", "boolean", "Whether files are publicly accessible (default: false)"),
            _p("file_size_limit", "number", "Maximum file size in bytes (e.g. 1048576 for 1MB)"),
            _p(
                "allowed_mime_types",
                "array",
                'Allowed MIME types. Example: ["image/png", "image/jpeg"]',
                items=_STRING_ITEMS,
            ),
        ],
        title="Create Storage Bucket",
        read_only=False,
        destructive=False,
        idempotent=False,
        open_world=False,
    ),
    _tool(
        "sb_delete_bucket",
        STORAGE,
        "Delete a storage bucket from Supabase. The bucket must be empty before deletion. Use sb_delete_objects "
        "to remove files first.",
        [_p("bucket_id", "string", "Bucket ID/name to delete", required=True)],
        title="Delete Storage Bucket",
        read_only=False,
        destructive=True,
        idempotent=True,
        open_world=False,
    ),
    _tool(
        "sb_list_objects",
        STORAGE,
        "List objects (files) in a Supabase storage bucket. Supports prefix filtering, pagination, and search.",
        [
            _p("bucket", "string", "Bucket name", required=True),
            _p("prefix", "string", "Filter by path prefix (folder). Example: images/ or uploads/2026/"),
            _p("limit", "number", "Maximum number of objects to return (default: 100)"),
            _p("offset", "number", "Number of objects to skip"),
            _p("search", "string", "Search term to filter objects by name"),
            _p("sort_column", "string", "Column to sort by: name, created_at, updated_at"),
            _p("sort_order", "string", "Sort order (default: asc)", enum=("asc", "desc")),
        ],
        title="List Storage Objects",
        read_only=True,
        idempotent=True,
        open_world=False,
    ),
    _tool(
        "sb_delete_objects",
        STORAGE,
        "Delete one or more objects from a Supabase storage bucket. Provide an array of file paths to delete.",
        [
            _p("bucket", "string", "Bucket name", required=True),
            _p(
                "prefixes",
                "array",
                'Array of file paths to delete. Example: ["images/photo.jpg", "uploads/doc.pdf"]',
                required=True,
                items=_STRING_ITEMS,
            ),
        ],
        title="Delete Storage Objects",
        read_only=False,
        destructive=True,
        idempotent=True,
        open_world=False,
    ),
    _tool(
        "sb_create_signed_url",
        STORAGE,
        "Create a temporary signed URL for a private storage object. The URL expires after the specified duration.",
        [
            _p("bucket", "string", "Bucket name", required=True),
            _p("path", "string", "Object file path within the bucket", required=True),
            _p("expires_in", "number", "URL expiration time in seconds (e.g. 3600 for 1 hour)", required=True),
        ],
        title="Create Signed URL",
        read_only=True,
        idempotent=True,
        open_world=False,
    ),
)

_AUTH_TOOLS: Tuple[ToolDefinition, ...] = (
    _tool(
        "sb_list_users",
        AUTH_ADMIN,
        "List all users in the Supabase Auth system. Returns paginated results with user details including "
        "email, metadata, and creation date.",
        [
            _p("page", "number", "Page number (starts at 1)"),
            _p("per_page", "number", "Users per page (default: 50, max: 1000)"),
        ],
        title="List Users",
        read_only=True,
        idempotent=True,
        open_world=False,
    ),
    _tool(
        "sb_get_user",
        AUTH_ADMIN,
        "Get a single user by ID from Supabase Auth. Returns full user details including metadata, identities, "
        "and last sign-in.",
        [_p("user_id", "string", "User UUID", required=True)],
        title="Get User",
        read_only=True,
        idempotent=True,
        open_world=False,
    ),
    _tool(
        "sb_create_user",
        AUTH_ADMIN,
        "Create a new user in Supabase Auth. Set email_confirm=true to skip email verification. Use app_metadata "
        "for admin-controlled data (roles, permissions).",
        [
            _p("email", "string", "User email address"),
            _p("phone", "string", "User phone number (E.164 format)"),
            _p("password", "string", "User password"),
            _p("email_confirm", "boolean", "Auto-confirm email (skip verification, default: false)"),
            _p("phone_confirm", "boolean", "Auto-confirm phone (default: false)"),
            _p("user_metadata", "object", "User-editable metadata (name, avatar, etc.)"),
            _p("app_metadata", "object", "Admin-only metadata (role, permissions, etc.)"),
        ],
        title="Create User",
        read_only=False,
        destructive=False,
        idempotent=False,
        open_world=False,
    ),
    _tool(
        "sb_update_user",
        AUTH_ADMIN,
        "Update a user in Supabase Auth. Can change email, phone, password, metadata, or ban the user.",
        [
            _p("user_id", "string", "User UUID to update", required=True),
            _p("email", "string", "New email address"),
            _p("phone", "string", "New phone number"),
            _p("password", "string", "New password"),
            _p("email_confirm", "boolean", "Auto-confirm new email"),
            _p("phone_confirm", "boolean", "Auto-confirm new phone"),
            _p("user_metadata", "object", "User-editable metadata to update"),
            _p("app_metadata", "object", "Admin-only metadata to update"),
            _p("ban_duration", "string", 'Ban duration (e.g. "24h", "none" to unban)'),
        ],
        title="Update User",
        read_only=False,
        destructive=False,
        idempotent=True,
        open_world=False,
    ),
    _tool(
        "sb_delete_user",
        AUTH_ADMIN,
        "Delete a user from Supabase Auth. This permanently removes the user and all their auth data.",
        [_p("user_id", "string", "User UUID to delete", required=True)],
        title="Delete User",
        read_only=False,
        destructive=True,
        idempotent=True,
        open_world=False,
    ),
)

_PROJECT_TOOLS: Tuple[ToolDefinition, ...] = (
    _tool(
        "sb_list_projects",
        MANAGEMENT_PROJECTS,
        "List all Supabase projects in your account. Returns project name, ref, region, status, and database "
        "info. Requires SUPABASE_ACCESS_TOKEN.",
        [],
        title="List Projects",
        read_only=True,
        idempotent=True,
        open_world=True,
    ),
    _tool(
        "sb_get_project",
        MANAGEMENT_PROJECTS,
        "Get details of a specific Supabase project by reference ID. Returns name, region, status, database "
        "host, and API URL.",
        [_project_ref("Project reference ID (e.g. abcdefghijklmnop)")],
        title="Get Project",
        read_only=True,
        idempotent=True,
        open_world=True,
    ),
    _tool(
        "sb_create_project",
        MANAGEMENT_PROJECTS,
        "Create a new Supabase project. Requires organization ID, region, and database password. Project "
        "creation takes a few minutes.",
        [
            _p("name", "string", "Project name", required=True),
            _p("organization_id", "string", "Organization ID (from sb_list_projects or dashboard)", required=True),
            _p("region", "string", "AWS region. Examples: us-east-1, eu-west-1, ap-southeast-1", required=True),
            _p("db_pass", "string", "Database password (min 8 chars)", required=True),
            _p("plan", "string", "Project plan (default: free)", enum=("free", "pro")),
        ],
        title="Create Project",
        read_only=False,
        destructive=False,
        idempotent=False,
        open_world=True,
    ),
    _tool(
        "sb_pause_project",
        MANAGEMENT_PROJECTS,
        "Pause a Supabase project. Paused projects stop all services (database, auth, storage) and free up "
        "resources. Free tier projects auto-pause after inactivity.",
        [_project_ref("Project reference ID to pause")],
        title="Pause Project",
        read_only=False,
        destructive=False,
        idempotent=True,
        open_world=True,
    ),
    _tool(
        "sb_restore_project",
        MANAGEMENT_PROJECTS,
        "Restore a paused Supabase project. Restarts all services including database, auth, and storage.",
        [_project_ref("Project reference ID to restore")],
        title="Restore Project",
        read_only=False,
        destructive=False,
        idempotent=True,
        open_world=True,
    ),
)

_MANAGEMENT_DATABASE_TOOLS: Tuple[ToolDefinition, ...] = (
    _tool(
        "sb_run_query",
        MANAGEMENT_DATABASE,
        "Execute a SQL query on a Supabase project database via the Management API. Supports SELECT, INSERT, "
        "UPDATE, DELETE, CREATE TABLE, and all SQL. Returns query results as JSON.",
        [
            _project_ref(),
            _p("query", "string", "SQL query to execute. Example: SELECT * FROM users LIMIT 10", required=True),
        ],
        title="Run SQL Query",
        read_only=False,
        destructive=False,
        idempotent=False,
        open_world=True,
    ),
    _tool(
        "sb_list_migrations",
        MANAGEMENT_DATABASE,
        "List database migrations for a Supabase project. Shows migration version, name, and status.",
        [_project_ref()],
        title="List Migrations",
        read_only=True,
        idempotent=True,
        open_world=True,
    ),
    _tool(
        "sb_get_typescript_types",
        MANAGEMENT_DATABASE,
        "Generate TypeScript type definitions from the Supabase project database schema. Useful for type-safe "
        "database access.",
        [_project_ref()],
        title="Get TypeScript Types",
        read_only=True,
        idempotent=True,
        open_world=True,
    ),
)

_FUNCTION_TOOLS: Tuple[ToolDefinition, ...] = (
    _tool(
        "sb_list_functions",
        MANAGEMENT_FUNCTIONS,
        "List all Edge Functions deployed to a Supabase project. Returns function slug, name, status, and "
        "creation date.",
        [_project_ref()],
        title="List Edge Functions",
        read_only=True,
        idempotent=True,
        open_world=True,
    ),
    _tool(
        "sb_get_function",
        MANAGEMENT_FUNCTIONS,
        "Get details of a specific Edge Function by slug. Returns function metadata, status, version, and entry "
        "point.",
        [
            _project_ref(),
            _p("function_slug", "string", "Edge Function slug (URL-friendly name)", required=True),
        ],
        title="Get Edge Function",
        read_only=True,
        idempotent=True,
        open_world=True,
    ),
)

_SECRET_TOOLS: Tuple[ToolDefinition, ...] = (
    _tool(
        "sb_list_secrets",
        MANAGEMENT_SECRETS_KEYS,
        "List all secrets (environment variables) for a Supabase project. Returns secret names only (values are "
        "never exposed).",
        [_project_ref()],
        title="List Secrets",
        read_only=True,
        idempotent=True,
        open_world=True,
    ),
    _tool(
        "sb_create_secrets",
        MANAGEMENT_SECRETS_KEYS,
        "Create or update secrets (environment variables) for a Supabase project. If a secret with the same "
        "name exists, it will be overwritten.",
        [
            _project_ref(),
            _p(
                "secrets",
                "array",
                'Array of {name, value} pairs. Example: [{"name":"API_KEY","value":"sk-xxx"}]',
                required=True,
                items=_SECRET_ITEMS,
            ),
        ],
        title="Create/Update Secrets",
        read_only=False,
        destructive=False,
        idempotent=True,
        open_world=True,
    ),
    _tool(
        "sb_delete_secrets",
        MANAGEMENT_SECRETS_KEYS,
        "Delete secrets (environment variables) from a Supabase project by name.",
        [
            _project_ref(),
            _p(
                "names",
                "array",
                'Array of secret names to delete. Example: ["API_KEY", "WEBHOOK_URL"]',
                required=True,
                items=_STRING_ITEMS,
            ),
        ],
        title="Delete Secrets",
        read_only=False,
        destructive=True,
        idempotent=True,
        open_world=True,
    ),
    _tool(
        "sb_list_api_keys",
        MANAGEMENT_SECRETS_KEYS,
        "List API keys for a Supabase project. Returns anon key, service_role key, and any custom keys with "
        "their names and roles.",
        [_project_ref()],
        title="List API Keys",
        read_only=True,
        idempotent=True,
        open_world=True,
    ),
)

TOOLS: Tuple[ToolDefinition, ...] = (
    _DATABASE_TOOLS
    + _STORAGE_TOOLS
    + _AUTH_TOOLS
    + _PROJECT_TOOLS
    + _MANAGEMENT_DATABASE_TOOLS
    + _FUNCTION_TOOLS
    + _SECRET_TOOLS
)


def list_tools() -> List[ToolDefinition]:
    """Return every tool definition in catalog order."""
    return list(TOOLS)


def category_counts() -> Dict[str, int]:
    """Number of tools per category, in category order."""
    counts = {category: 0 for category in CATEGORIES}
    for tool in TOOLS:
        counts[tool.category] += 1
    return counts
