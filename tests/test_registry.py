import dataclasses

import pytest

from supabase_mcp.clients import ManagementClient, SupabaseClient
from supabase_mcp.core.exceptions import ToolArgumentError, ToolRegistrationError, UnknownToolError
from supabase_mcp.core.tools.catalog import TOOLS
from supabase_mcp.core.tools.registry import CONTROL, DATA, ROUTES, ToolRegistry


def _route(name: str):
    return next(route for route in ROUTES if route.name == name)


def test_default_registry_covers_the_catalog() -> None:
    registry = ToolRegistry(client_types={DATA: SupabaseClient, CONTROL: ManagementClient})

    assert len(registry) == 31
    assert [tool.name for tool in registry.list_tools()] == [tool.name for tool in TOOLS]


def test_route_required_keys_match_schema() -> None:
    registry = ToolRegistry()
    for tool in registry.list_tools():
        _, route = registry.lookup(tool.name)
        assert set(route.required) == set(tool.required), tool.name


def test_capabilities_follow_categories() -> None:
    registry = ToolRegistry()
    for tool in registry.list_tools():
        _, route = registry.lookup(tool.name)
        expected = CONTROL if tool.category.startswith("management_") else DATA
        assert route.capability == expected, tool.name


def test_missing_route_is_rejected() -> None:
    routes = [route for route in ROUTES if route.name != "sb_get_user"]
    with pytest.raises(ToolRegistrationError, match="sb_get_user"):
        ToolRegistry(routes=routes)


def test_route_without_tool_is_rejected() -> None:
    tools = [tool for tool in TOOLS if tool.name != "sb_list_buckets"]
    with pytest.raises(ToolRegistrationError, match="sb_list_buckets"):
        ToolRegistry(tools=tools)


def test_duplicate_route_is_rejected() -> None:
    with pytest.raises(ToolRegistrationError, match="declared twice"):
        ToolRegistry(routes=list(ROUTES) + [_route("sb_run_query")])


def test_required_mismatch_is_rejected() -> None:
    routes = [dataclasses.replace(r, required=()) if r.name == "sb_get_project" else r for r in ROUTES]
    with pytest.raises(ToolRegistrationError, match="sb_get_project"):
        ToolRegistry(routes=routes)


def test_undeclared_argument_is_rejected() -> None:
    routes = [
        dataclasses.replace(r, optional=r.optional + ("nonsense",)) if r.name == "sb_list_records" else r
        for r in ROUTES
    ]
    with pytest.raises(ToolRegistrationError, match="nonsense"):
        ToolRegistry(routes=routes)


def test_client_method_mismatch_is_rejected() -> None:
    with pytest.raises(ToolRegistrationError, match="list_projects"):
        ToolRegistry(client_types={DATA: SupabaseClient, CONTROL: SupabaseClient})


def test_lookup_unknown_tool() -> None:
    with pytest.raises(UnknownToolError, match="Unknown tool: sb_nope"):
        ToolRegistry().lookup("sb_nope")


def test_extract_renames_and_fills_absent_optionals() -> None:
    kwargs = _route("sb_insert_records").extract({"table": "t", "records": [{}], "return": "minimal", "extra": 1})
    assert kwargs == {"table": "t", "records": [{}], "return_": "minimal", "select": None}

    kwargs = _route("sb_call_function").extract({"function_name": "f"})
    assert kwargs == {"function": "f", "params": None, "method": None}

    kwargs = _route("sb_delete_objects").extract({"bucket": "b", "prefixes": ["x"]})
    assert kwargs == {"bucket": "b", "paths": ["x"]}


def test_extract_folds_sort_arguments() -> None:
    route = _route("sb_list_objects")

    kwargs = route.extract({"bucket": "b", "sort_column": "name", "sort_order": "desc"})
    assert kwargs["sort_by"] == {"column": "name", "order": "desc"}
    assert "sort_column" not in kwargs and "sort_order" not in kwargs

    assert route.extract({"bucket": "b", "sort_order": "desc"})["sort_by"] is None


def test_extract_reports_missing_required_keys() -> None:
    with pytest.raises(ToolArgumentError, match="table, filter"):
        _route("sb_update_records").extract({"data": {}})
