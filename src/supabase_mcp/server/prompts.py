"""Guidance prompts offered to MCP clients."""

from typing import Dict, List

from mcp import types

EXPLORE_DATABASE = "explore-database"
MANAGE_PROJECT = "manage-project"

_EXPLORE_DATABASE_TEXT = "\n".join(
    [
        "You are a Supabase database explorer. Help me discover and query data from a Supabase project.",
        "",
        "Available database tools:",
        "1. **sb_list_records** - List records with filters, select, order, pagination",
        "2. **sb_insert_records** - Insert one or more records",
        "3. **sb_update_records** - Update records matching a filter",
        "4. **sb_upsert_records** - Insert or update on conflict",
        "5. **sb_delete_records** - Delete records matching a filter",
        "6. **sb_call_function** - Call stored PostgreSQL functions via RPC",
        "",
        "PostgREST filter operators:",
        "- eq, neq, gt, gte, lt, lte - comparison",
        "- like, ilike - pattern matching (use * as wildcard)",
        "- in.(val1,val2) - IN list",
        "- is.null, is.true - NULL/boolean check",
        "- cs.{a,b}, cd.{a,b} - array contains/contained-by",
        "- fts.word - full-text search",
        "- or=(cond1,cond2) - OR logic",
        "",
        "Resource embedding (JOINs):",
        "- select=*,orders(*) - embed related table",
        "- select=id,user:user_id(name,email) - renamed embed",
        "",
        "Management tools:",
        "- **sb_run_query** - Execute raw SQL queries",
        "- **sb_get_typescript_types** - Generate TypeScript types from schema",
    ]
)

_MANAGE_PROJECT_TEXT = "\n".join(
    [
        "You are a Supabase project manager. Help me manage my Supabase infrastructure.",
        "",
        "Storage tools:",
        "- **sb_list_buckets** / **sb_create_bucket** / **sb_delete_bucket** - Manage storage buckets",
        "- **sb_list_objects** / **sb_delete_objects** - Manage files in buckets",
        "- **sb_create_signed_url** - Generate temporary download URLs",
        "",
        "Auth Admin tools:",
        "- **sb_list_users** / **sb_get_user** - View users",
        "- **sb_create_user** / **sb_update_user** / **sb_delete_user** - Manage users",
        "- Use email_confirm=true to skip email verification",
        "- Use app_metadata for admin-only data (roles, permissions)",
        "",
        "Project Management tools (requires SUPABASE_ACCESS_TOKEN):",
        "- **sb_list_projects** / **sb_get_project** - View projects",
        "- **sb_create_project** - Create new project",
        "- **sb_pause_project** / **sb_restore_project** - Control project lifecycle",
        "",
        "Database Management:",
        "- **sb_run_query** - Execute SQL directly",
        "- **sb_list_migrations** - View migration history",
        "",
        "Edge Functions & Secrets:",
        "- **sb_list_functions** / **sb_get_function** - View deployed functions",
        "- **sb_list_secrets** / **sb_create_secrets** / **sb_delete_secrets** - Manage env vars",
        "- **sb_list_api_keys** - View project API keys",
    ]
)

_PROMPTS: Dict[str, tuple] = {
    EXPLORE_DATABASE: ("Guide for exploring and querying a Supabase database", _EXPLORE_DATABASE_TEXT),
    MANAGE_PROJECT: ("Guide for managing Supabase projects, storage, users, and secrets", _MANAGE_PROJECT_TEXT),
}


def list_prompts() -> List[types.Prompt]:
    return [types.Prompt(name=name, description=description) for name, (description, _) in _PROMPTS.items()]


def get_prompt(name: str) -> types.GetPromptResult:
    """Render a prompt by name.

    Raises:
        ValueError: If no prompt has that name.
    """
    if name not in _PROMPTS:
        raise ValueError(f"Unknown prompt: {name}")
    description, text = _PROMPTS[name]
    return types.GetPromptResult(
        description=description,
        messages=[types.PromptMessage(role="user", content=types.TextContent(type="text", text=text))],
    )
