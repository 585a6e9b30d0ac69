from supabase_mcp.core.tools.catalog import CATEGORIES, FIELDS_PARAM, TOOLS, category_counts, list_tools


def test_catalog_has_31_unique_tools() -> None:
    names = [tool.name for tool in list_tools()]
    assert len(names) == 31
    assert len(set(names)) == 31
    assert all(name.startswith("sb_") for name in names)


def test_category_counts() -> None:
    assert category_counts() == {
        "database_rest": 6,
        "storage": 6,
        "auth_admin": 5,
        "management_projects": 5,
        "management_database": 3,
        "management_functions": 2,
        "management_secrets_keys": 4,
    }
    assert {tool.category for tool in TOOLS} == set(CATEGORIES)


def test_every_tool_accepts_fields_but_never_requires_it() -> None:
    for tool in TOOLS:
        assert FIELDS_PARAM in tool.input_schema["properties"], tool.name
        assert FIELDS_PARAM not in tool.required, tool.name


def test_required_lists() -> None:
    by_name = {tool.name: tool for tool in TOOLS}
    assert by_name["sb_update_records"].required == ("table", "filter", "data")
    assert by_name["sb_create_project"].required == ("name", "organization_id", "region", "db_pass")
    assert by_name["sb_create_user"].required == ()
    assert "required" not in by_name["sb_list_buckets"].input_schema


def test_list_tools_returns_a_copy() -> None:
    tools = list_tools()
    tools.pop()
    assert len(list_tools()) == 31


def test_to_mcp_tool_carries_schema_and_hints() -> None:
    tool = next(t for t in TOOLS if t.name == "sb_list_records").to_mcp_tool()

    assert tool.inputSchema["required"] == ["table"]
    assert tool.annotations is not None
    assert tool.annotations.readOnlyHint is True
    assert tool.annotations.idempotentHint is True
    assert tool.annotations.openWorldHint is False
    assert tool.annotations.destructiveHint is None


def test_upsert_resolution_is_an_enum() -> None:
    tool = next(t for t in TOOLS if t.name == "sb_upsert_records")
    assert tool.input_schema["properties"]["resolution"]["enum"] == ["merge-duplicates", "ignore-duplicates"]
