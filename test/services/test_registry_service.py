import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi import HTTPException

from uiregistry.models.schemas import (
    ComponentCreate,
    ComponentType,
    ComponentUpdate,
    ExampleCreate,
    ExampleUpdate,
    RegistryCreate,
    RegistryUpdate,
)
from uiregistry.services.assembler import add_command_argument, backfill_registries, format_component
from uiregistry.services.pagination import has_more
from uiregistry.services.query import (
    build_component_filter,
    normalize_registry_identifier,
    normalize_registry_identifiers,
    parse_item_name,
)


class TestQueryResolver:
    """Registry identifier normalization and filter plans"""

    def test_normalize_strips_single_at(self):
        assert normalize_registry_identifier("@antd") == "antd"
        assert normalize_registry_identifier("  @shadcn ") == "shadcn"
        assert normalize_registry_identifier("antd") == "antd"

    def test_normalize_is_idempotent(self):
        for raw in ["@antd", "antd", " @chakra", "shadcn/ui"]:
            once = normalize_registry_identifier(raw)
            assert normalize_registry_identifier(once) == once

    def test_empty_identifiers_mean_no_restriction(self):
        assert normalize_registry_identifiers(None) is None
        assert normalize_registry_identifiers([]) is None
        assert normalize_registry_identifiers(["  "]) is None

    def test_identifiers_deduplicated_in_order(self):
        assert normalize_registry_identifiers(["@antd", "shadcn", "antd"]) == ["antd", "shadcn"]

    def test_parse_item_name(self):
        assert parse_item_name("@shadcn/button") == ("shadcn", "button")
        assert parse_item_name("button") == (None, "button")
        assert parse_item_name("@shadcn") == (None, "@shadcn")

    def test_biz_is_accepted_as_business(self):
        assert ComponentType("biz") is ComponentType.BUSINESS

    @pytest.mark.asyncio
    async def test_unresolved_registries_match_nothing(self, seeded_database):
        component_filter = await build_component_filter(seeded_database, registries=["@nope"])
        assert component_filter.matches_nothing
        assert component_filter.registry_ids == []

    @pytest.mark.asyncio
    async def test_identifiers_take_precedence_over_ids(self, seeded_database):
        component_filter = await build_component_filter(
            seeded_database, registries=["antd"], registry_ids=[1]
        )
        assert component_filter.registry_ids == [2]

    @pytest.mark.asyncio
    async def test_blank_query_and_enum_filters(self, seeded_database):
        component_filter = await build_component_filter(
            seeded_database, query="   ", type=ComponentType.CONTAINER
        )
        assert component_filter.query is None
        assert component_filter.type == "container"
        assert component_filter.registry_ids is None


class TestAssembler:
    """Result assembly and registry backfill"""

    def test_add_command_argument(self):
        assert add_command_argument("shadcn", "button") == "@shadcn/button"
        assert add_command_argument("", "button") == "button"
        assert add_command_argument(None, "button") == "button"

    @pytest.mark.asyncio
    async def test_backfill_fills_missing_registry_and_keeps_rows(self):
        db = MagicMock()
        db.get_registries_by_ids = AsyncMock(
            return_value=[{"id": 1, "name": "shadcn/ui", "slug": "shadcn"}]
        )
        rows = [
            {"id": 10, "registry_id": 1, "name": "Button", "slug": "button", "type": "input-control"},
            {"id": 11, "registry_id": 99, "name": "Ghost", "slug": "ghost", "type": "container"},
        ]

        filled = await backfill_registries(db, rows)

        assert len(filled) == 2
        assert filled[0]["registry"]["slug"] == "shadcn"
        assert filled[1]["registry"] is None
        assert "registry" not in rows[0]
        db.get_registries_by_ids.assert_awaited_once_with([1, 99])

    @pytest.mark.asyncio
    async def test_backfill_skips_lookup_when_complete(self):
        db = MagicMock()
        db.get_registries_by_ids = AsyncMock()
        rows = [{"id": 1, "registry_id": 1, "registry": {"id": 1, "slug": "antd"}}]

        await backfill_registries(db, rows)

        db.get_registries_by_ids.assert_not_called()

    def test_format_component_without_registry_uses_bare_slug(self):
        item = format_component(
            {"id": 3, "registry_id": 7, "name": "Menu", "slug": "menu", "type": "navigational"}
        )
        assert item.add_command_argument == "menu"
        assert item.registry_slug == ""
        assert item.example_count == 0

    def test_format_component_sorts_examples_and_counts(self):
        item = format_component(
            {
                "id": 1, "registry_id": 1, "name": "Button", "slug": "button",
                "type": "input-control", "registry": {"slug": "shadcn", "name": "shadcn/ui"},
                "examples": [
                    {"id": 2, "name": "Primary Button", "slug": "primary-button", "code": "a"},
                    {"id": 1, "name": "Button Variants", "slug": "button-variants", "code": "b"},
                ],
            }
        )
        assert [example.name for example in item.examples] == ["Button Variants", "Primary Button"]
        assert item.example_count == 2
        assert all(example.language == "typescript" for example in item.examples)
        assert not any(example.is_primary for example in item.examples)

    def test_has_more(self):
        assert has_more(0, 10, 11)
        assert not has_more(0, 10, 10)
        assert not has_more(5, 10, 0)


class TestComponentSearch:
    """Component search across and within registries"""

    @pytest.mark.asyncio
    async def test_create_then_search_by_substring(self, empty_service):
        await empty_service.create_registry(
            RegistryCreate(name="shadcn/ui", slug="shadcn", framework="react")
        )
        await empty_service.create_component(
            ComponentCreate(name="Button", slug="button", type="input-control", registry_slug="shadcn")
        )

        results = await empty_service.search_components(query="but")

        assert results.total_count == 1
        assert len(results.items) == 1
        assert results.items[0].add_command_argument == "@shadcn/button"

    @pytest.mark.asyncio
    async def test_unknown_registry_gives_empty_page(self, empty_service):
        results = await empty_service.search_components(registries=["@antd"])
        assert results.items == []
        assert results.total_count == 0
        assert results.has_more is False

    @pytest.mark.asyncio
    async def test_second_page_of_three(self, service):
        results = await service.search_components(registries=["antd"], limit=1, offset=1)

        assert [item.name for item in results.items] == ["DatePicker"]
        assert results.total_count == 3
        assert results.has_more is True

    @pytest.mark.asyncio
    async def test_query_is_case_insensitive(self, service):
        results = await service.search_components(query="BUTTON")
        assert {item.add_command_argument for item in results.items} == {
            "@shadcn/button", "@antd/button", "@legacy/old-button"
        }

    @pytest.mark.asyncio
    async def test_total_count_matches_unpaged_rows(self, service, seeded_database):
        unpaged = await service.search_components(query="button", limit=100)
        paged = await service.search_components(query="button", limit=1)

        assert paged.total_count == len(unpaged.items) == 3
        assert paged.has_more is True
        assert seeded_database.calls.count("list_components") == seeded_database.calls.count(
            "count_components"
        )

    @pytest.mark.asyncio
    async def test_page_never_exceeds_limit(self, service):
        for limit in (1, 2, 5):
            results = await service.search_components(limit=limit)
            assert len(results.items) <= limit
            assert results.has_more == (results.offset + results.limit < results.total_count)

    @pytest.mark.asyncio
    async def test_absent_and_empty_registries_are_equivalent(self, service):
        absent = await service.search_components(registries=None)
        empty = await service.search_components(registries=[])
        assert absent.total_count == empty.total_count == 6

    @pytest.mark.asyncio
    async def test_type_and_status_filters(self, service):
        containers = await service.search_components(type=ComponentType.CONTAINER)
        assert [item.name for item in containers.items] == ["Card", "Table"]

        beta = await service.search_components(status="beta")
        assert [item.name for item in beta.items] == ["Table"]

    @pytest.mark.asyncio
    async def test_unknown_registry_id_gives_empty_page(self, service):
        results = await service.search_components(registry_ids=[999])
        assert results.items == []
        assert results.total_count == 0

    @pytest.mark.asyncio
    async def test_invalid_page_is_rejected(self, service):
        with pytest.raises(HTTPException) as exc_info:
            await service.search_components(limit=0)
        assert exc_info.value.status_code == 400

        with pytest.raises(HTTPException):
            await service.search_components(offset=-1)

    @pytest.mark.asyncio
    async def test_every_item_has_add_command(self, service):
        results = await service.search_components(limit=100)
        for item in results.items:
            assert item.add_command_argument == f"@{item.registry_slug}/{item.slug}"


class TestRegistrySearch:
    """Registry listings with and without nested components"""

    @pytest.mark.asyncio
    async def test_all_registries_with_counts(self, service):
        results = await service.search_all_registries()

        assert [item.slug for item in results.items] == ["antd", "legacy", "shadcn"]
        counts = {item.slug: item.component_count for item in results.items}
        assert counts == {"antd": 3, "legacy": 1, "shadcn": 2}
        assert all(item.components is None for item in results.items)

    @pytest.mark.asyncio
    async def test_named_registries_are_active_only(self, service):
        assert (await service.search_all_registries(["legacy"])).items == []
        found = await service.search_all_registries(["@shadcn", "Ant Design"])
        assert [item.slug for item in found.items] == ["antd", "shadcn"]

    @pytest.mark.asyncio
    async def test_registries_nest_components_and_examples(self, service):
        results = await service.search_registries(["@shadcn"])

        assert results.total_count == 1
        registry = results.items[0]
        assert [c.name for c in registry.components] == ["Button", "Card"]
        button = registry.components[0]
        assert button.add_command_argument == "@shadcn/button"
        assert [e.name for e in button.examples] == ["Button Variants", "Primary Button"]

    @pytest.mark.asyncio
    async def test_registry_paging(self, service):
        results = await service.search_registries(limit=2, offset=0)
        assert len(results.items) == 2
        assert results.total_count == 3
        assert results.has_more is True

    @pytest.mark.asyncio
    async def test_unknown_registries_give_empty_page(self, service):
        results = await service.search_registries(["@nope"])
        assert results.items == []
        assert results.has_more is False


class TestItemsAndExamples:
    """Item lookup and example search"""

    @pytest.mark.asyncio
    async def test_scoped_item_lookup(self, service):
        items = await service.get_registry_items(["@shadcn/button"])
        assert len(items) == 1
        assert items[0].registry_slug == "shadcn"

    @pytest.mark.asyncio
    async def test_bare_item_lookup_spans_registries(self, service):
        items = await service.get_registry_items(["button"])
        assert {item.add_command_argument for item in items} == {"@shadcn/button", "@antd/button"}

        by_name = await service.get_registry_items(["Old Button"])
        assert [item.slug for item in by_name] == ["old-button"]

    @pytest.mark.asyncio
    async def test_unknown_items_are_skipped(self, service):
        assert await service.get_registry_items(["@nope/button", "missing"]) == []

    @pytest.mark.asyncio
    async def test_examples_grouped_under_matched_components(self, service):
        items = await service.get_item_examples(query="button")

        by_command = {item.add_command_argument: item for item in items}
        assert set(by_command) == {"@shadcn/button", "@antd/button"}
        assert [e.name for e in by_command["@shadcn/button"].examples] == [
            "Button Variants", "Primary Button"
        ]
        assert [e.name for e in by_command["@antd/button"].examples] == ["Antd Button Demo"]

    @pytest.mark.asyncio
    async def test_example_search_restricted_to_registries(self, service):
        items = await service.get_item_examples(registries=["shadcn"], query="button")
        assert [item.add_command_argument for item in items] == ["@shadcn/button"]

        assert await service.get_item_examples(registries=["@nope"], query="button") == []

    @pytest.mark.asyncio
    async def test_search_examples_ordered_by_name(self, service):
        examples = await service.search_examples(query="TABLE")
        assert [e.slug for e in examples] == ["basic-table"]

        everything = await service.search_examples()
        assert [e.name for e in everything] == sorted(e.name for e in everything)

    @pytest.mark.asyncio
    async def test_example_limit(self, service):
        assert len(await service.search_examples(limit=2)) == 2


class TestRegistryCrud:
    """Create, update and delete with boundary validation"""

    @pytest.mark.asyncio
    async def test_create_registry_requires_fields(self, empty_service, mock_database):
        with pytest.raises(HTTPException) as exc_info:
            await empty_service.create_registry(RegistryCreate(name="x"))

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "slug, framework are required"
        assert "create_registry" not in mock_database.calls

    @pytest.mark.asyncio
    async def test_create_registry_strips_at_from_slug(self, empty_service):
        registry = await empty_service.create_registry(
            RegistryCreate(name="Chakra UI", slug="@chakra", framework="react")
        )
        assert registry.slug == "chakra"
        assert registry.is_active is True

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, service):
        updated = await service.update_registry(2, RegistryUpdate(description="New text"))
        assert updated.description == "New text"
        assert updated.slug == "antd"
        assert updated.framework == "react"

    @pytest.mark.asyncio
    async def test_update_missing_registry(self, service):
        with pytest.raises(HTTPException) as exc_info:
            await service.update_registry(999, RegistryUpdate(name="x"))
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_registry_cascades(self, service, seeded_database):
        await service.delete_registry(1)

        assert all(c["registry_id"] != 1 for c in seeded_database.components)
        assert {e["slug"] for e in seeded_database.examples} == {"antd-button-demo", "basic-table"}


class TestComponentCrud:
    @pytest.mark.asyncio
    async def test_create_component_needs_owner(self, service, seeded_database):
        with pytest.raises(HTTPException) as exc_info:
            await service.create_component(
                ComponentCreate(name="Tabs", slug="tabs", type="navigational")
            )
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Either registryId or registrySlug is required"
        assert "create_component" not in seeded_database.calls

    @pytest.mark.asyncio
    async def test_create_component_unknown_registry(self, service, seeded_database):
        with pytest.raises(HTTPException) as exc_info:
            await service.create_component(
                ComponentCreate(name="Tabs", slug="tabs", type="navigational", registry_id=999)
            )
        assert exc_info.value.status_code == 404

        with pytest.raises(HTTPException) as exc_info:
            await service.create_component(
                ComponentCreate(name="Tabs", slug="tabs", type="navigational", registry_slug="nope")
            )
        assert exc_info.value.status_code == 404
        assert "create_component" not in seeded_database.calls

    @pytest.mark.asyncio
    async def test_create_component_missing_type(self, service, seeded_database):
        with pytest.raises(HTTPException) as exc_info:
            await service.create_component(
                ComponentCreate(name="Tabs", slug="tabs", registry_slug="antd")
            )
        assert exc_info.value.detail == "type is required"
        assert "create_component" not in seeded_database.calls

    @pytest.mark.asyncio
    async def test_create_component_by_registry_slug(self, service):
        component = await service.create_component(
            ComponentCreate(name="Tabs", slug="tabs", type="navigational", registry_slug="@antd")
        )
        assert component.registry_id == 2
        assert component.type == "navigational"
        assert component.status == "stable"
        assert component.registry.slug == "antd"
        assert component.examples == []

    @pytest.mark.asyncio
    async def test_update_component_status(self, service):
        updated = await service.update_component(4, ComponentUpdate(status="stable"))
        assert updated.status == "stable"
        assert updated.name == "Table"

    @pytest.mark.asyncio
    async def test_delete_component_removes_examples(self, service, seeded_database):
        await service.delete_component(1)
        assert all(e["component_id"] != 1 for e in seeded_database.examples)

        with pytest.raises(HTTPException):
            await service.get_component(1)


class TestExampleCrud:
    @pytest.mark.asyncio
    async def test_create_example_requires_code(self, service, seeded_database):
        with pytest.raises(HTTPException) as exc_info:
            await service.create_example(
                2, ExampleCreate(name="Card Demo", slug="card-demo", language="tsx", code="")
            )
        assert exc_info.value.detail == "code is required"
        assert "create_example" not in seeded_database.calls

    @pytest.mark.asyncio
    async def test_create_example_for_missing_component(self, service):
        with pytest.raises(HTTPException) as exc_info:
            await service.create_example(
                999, ExampleCreate(name="x", slug="x", language="tsx", code="<X />")
            )
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_create_and_list_examples(self, service):
        created = await service.create_example(
            2, ExampleCreate(name="Card Demo", slug="card-demo", language="tsx", code="<Card />")
        )
        assert created.component_id == 2
        assert created.language == "tsx"
        assert created.component.slug == "card"

        examples = await service.list_examples(2)
        assert [e.slug for e in examples] == ["card-demo"]

    @pytest.mark.asyncio
    async def test_list_examples_for_missing_component(self, service):
        with pytest.raises(HTTPException) as exc_info:
            await service.list_examples(999)
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_update_example_rejects_empty_code(self, service):
        with pytest.raises(HTTPException) as exc_info:
            await service.update_example(1, ExampleUpdate(code=""))
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_update_example_merges(self, service):
        updated = await service.update_example(1, ExampleUpdate(description="Default button"))
        assert updated.description == "Default button"
        assert updated.code == "<Button>Click me</Button>"
