"""Dispatch table: which client method serves each tool, and how its arguments are extracted."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ...exceptions import ToolArgumentError

DATA = "data"
CONTROL = "control"

ArgumentAdapter = Callable[[Dict[str, Any]], Dict[str, Any]]


@dataclass(frozen=True)
class ToolRoute:
    """How one tool maps onto a backend client method.

    Attributes:
        name: Tool name, identical to the catalog entry.
        capability: ``"data"`` (project client) or ``"control"`` (management client).
        method: Name of the client coroutine to await.
        required: Argument keys that must be present.
        optional: Argument keys forwarded when present, ``None`` otherwise.
        renames: External key -> client keyword, for keys that differ.
        adapt: Optional hook folding several external keys into one keyword.
    """

    name: str
    capability: str
    method: str
    required: Tuple[str, ...] = ()
    optional: Tuple[str, ...] = ()
    renames: Mapping[str, str] = field(default_factory=dict)
    adapt: Optional[ArgumentAdapter] = None

    @property
    def argument_keys(self) -> Tuple[str, ...]:
        return self.required + self.optional

    def extract(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        """Rename the declared keys of ``arguments`` onto the client method's keywords.

        Undeclared keys are dropped. No defaults are filled in here.

        Raises:
            ToolArgumentError: If a required key is absent or null.
        """
        missing = [key for key in self.required if arguments.get(key) is None]
        if missing:
            raise ToolArgumentError(f"Missing required argument(s) for {self.name}: {', '.join(missing)}")

        kwargs = {self.renames.get(key, key): arguments.get(key) for key in self.argument_keys}
        if self.adapt is not None:
            kwargs = self.adapt(kwargs)
        return kwargs


def _sort_by(kwargs: Dict[str, Any]) -> Dict[str, Any]:
    column = kwargs.pop("sort_column", None)
    order = kwargs.pop("sort_order", None)
    kwargs["sort_by"] = {"column": column, "order": order or "asc"} if column else None
    return kwargs


_RETURN = {"return": "return_"}
_USER_FIELDS = (
    "email",
    "phone",
    "password",
    "email_confirm",
    "phone_confirm",
    "user_metadata",
    "app_metadata",
)
_REF = ("project_ref",)


def _data(
    name: str, method: str, required: Tuple[str, ...] = (), optional: Tuple[str, ...] = (), **kw: Any
) -> ToolRoute:
    return ToolRoute(name=name, capability=DATA, method=method, required=required, optional=optional, **kw)


def _control(name: str, method: str, required: Tuple[str, ...] = _REF, optional: Tuple[str, ...] = ()) -> ToolRoute:
    return ToolRoute(name=name, capability=CONTROL, method=method, required=required, optional=optional)


ROUTES: Tuple[ToolRoute, ...] = (
    # Database - REST API
    _data("sb_list_records", "list_records", ("table",), ("select", "filter", "order", "limit", "offset")),
    _data("sb_insert_records", "insert_records", ("table", "records"), ("return", "select"), renames=_RETURN),
    _data("sb_update_records", "update_records", ("table", "filter", "data"), ("return", "select"), renames=_RETURN),
    _data(
        "sb_upsert_records",
        "upsert_records",
        ("table", "records"),
        ("resolution", "on_conflict", "return", "select"),
        renames=_RETURN,
    ),
    _data("sb_delete_records", "delete_records", ("table", "filter"), ("return", "select"), renames=_RETURN),
    _data(
        "sb_call_function",
        "call_function",
        ("function_name",),
        ("params", "method"),
        renames={"function_name": "function"},
    ),
    # Storage
    _data("sb_list_buckets", "list_buckets"),
    _data("sb_create_bucket", "create_bucket", ("name",), ("public", "file_size_limit", "allowed_mime_types")),
    _data("sb_delete_bucket", "delete_bucket", ("bucket_id",)),
    _data(
        "sb_list_objects",
        "list_objects",
        ("bucket",),
        ("prefix", "limit", "offset", "search", "sort_column", "sort_order"),
        adapt=_sort_by,
    ),
    _data("sb_delete_objects", "delete_objects", ("bucket", "prefixes"), renames={"prefixes": "paths"}),
    _data("sb_create_signed_url", "create_signed_url", ("bucket", "path", "expires_in")),
    # Auth admin
    _data("sb_list_users", "list_users", (), ("page", "per_page")),
    _data("sb_get_user", "get_user", ("user_id",)),
    _data("sb_create_user", "create_user", (), _USER_FIELDS),
    _data("sb_update_user", "update_user", ("user_id",), _USER_FIELDS + ("ban_duration",)),
    _data("sb_delete_user", "delete_user", ("user_id",)),
    # Management - projects
    _control("sb_list_projects", "list_projects", required=()),
    _control("sb_get_project", "get_project"),
    _control(
        "sb_create_project",
        "create_project",
        required=("name", "organization_id", "region", "db_pass"),
        optional=("plan",),
    ),
    _control("sb_pause_project", "pause_project"),
    _control("sb_restore_project", "restore_project"),
    # Management - database
    _control("sb_run_query", "run_query", required=_REF + ("query",)),
    _control("sb_list_migrations", "list_migrations"),
    _control("sb_get_typescript_types", "get_typescript_types"),
    # Management - edge functions
    _control("sb_list_functions", "list_functions"),
    _control("sb_get_function", "get_function", required=_REF + ("function_slug",)),
    # Management - secrets & keys
    _control("sb_list_secrets", "list_secrets"),
    _control("sb_create_secrets", "create_secrets", required=_REF + ("secrets",)),
    _control("sb_delete_secrets", "delete_secrets", required=_REF + ("names",)),
    _control("sb_list_api_keys", "list_api_keys"),
)
