import copy
import pytest
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi.testclient import TestClient

from uiregistry.main import create_application
from uiregistry.services.registry_service import RegistryService
from uiregistry.utils.supabase_utils import serialize_json_fields


def _contains(value: Optional[str], text: str) -> bool:
    return value is not None and text.lower() in value.lower()


def _by_name(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(rows, key=lambda row: row["name"])


class MockDatabase:
    """In-memory stand-in for ``Database`` with the same method surface.

    Text matching is case-insensitive substring, ordering is by name, and
    deletes cascade from registry to component to example.
    """

    def __init__(self):
        self.registries: List[Dict[str, Any]] = []
        self.components: List[Dict[str, Any]] = []
        self.examples: List[Dict[str, Any]] = []
        self.calls: List[str] = []
        self._next_id = {"registry": 1, "component": 1, "example": 1}

    # ----- helpers -----

    def _insert(self, kind: str, table: List[Dict[str, Any]], data: Dict[str, Any]) -> Dict[str, Any]:
        row = serialize_json_fields(dict(data))
        row["id"] = self._next_id[kind]
        self._next_id[kind] += 1
        row.setdefault("metadata", {})
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        row.setdefault("updated_at", row["created_at"])
        table.append(row)
        return copy.deepcopy(row)

    def _registry(self, registry_id: int) -> Optional[Dict[str, Any]]:
        for row in self.registries:
            if row["id"] == registry_id:
                return row
        return None

    def _with_relations(self, component: Dict[str, Any]) -> Dict[str, Any]:
        row = copy.deepcopy(component)
        registry = self._registry(component["registry_id"])
        row["registry"] = copy.deepcopy(registry) if registry else None
        row["examples"] = [
            copy.deepcopy(example)
            for example in self.examples
            if example["component_id"] == component["id"]
        ]
        return row

    def _component_matches(self, component: Dict[str, Any], component_filter) -> bool:
        if component_filter.registry_ids is not None and component["registry_id"] not in component_filter.registry_ids:
            return False
        if component_filter.query and not any(
            _contains(component.get(column), component_filter.query)
            for column in ("name", "description", "slug")
        ):
            return False
        if component_filter.type and component["type"] != component_filter.type:
            return False
        if component_filter.status and component.get("status") != component_filter.status:
            return False
        return True

    # ----- registries -----

    async def list_registries(self, include_components: bool = False):
        rows = []
        for registry in _by_name(self.registries):
            row = copy.deepcopy(registry)
            if include_components:
                row["components"] = [
                    copy.deepcopy(c) for c in self.components if c["registry_id"] == registry["id"]
                ]
            rows.append(row)
        return rows

    async def get_registry(self, registry_id: int, include_components: bool = False):
        registry = self._registry(registry_id)
        if registry is None:
            return None
        row = copy.deepcopy(registry)
        if include_components:
            row["components"] = [
                copy.deepcopy(c) for c in self.components if c["registry_id"] == registry_id
            ]
        return row

    async def get_registry_by_slug(self, slug: str):
        for registry in self.registries:
            if registry["slug"] == slug:
                return copy.deepcopy(registry)
        return None

    async def get_registries_by_ids(self, registry_ids: List[int]):
        return [copy.deepcopy(r) for r in self.registries if r["id"] in registry_ids]

    async def find_registries(self, identifiers: List[str], active_only: bool = False):
        self.calls.append("find_registries")
        rows = [
            r for r in self.registries
            if (r["name"] in identifiers or r["slug"] in identifiers)
            and (not active_only or r.get("is_active", True))
        ]
        return copy.deepcopy(_by_name(rows))

    async def list_registries_page(self, registry_ids, limit: int, offset: int):
        rows = [r for r in self.registries if registry_ids is None or r["id"] in registry_ids]
        return copy.deepcopy(_by_name(rows)[offset:offset + limit])

    async def count_registries(self, registry_ids=None):
        return len([r for r in self.registries if registry_ids is None or r["id"] in registry_ids])

    async def create_registry(self, registry_data: Dict[str, Any]):
        self.calls.append("create_registry")
        return self._insert("registry", self.registries, registry_data)

    async def update_registry(self, registry_id: int, update_data: Dict[str, Any]):
        registry = self._registry(registry_id)
        if registry is None:
            return None
        registry.update(serialize_json_fields(update_data))
        return copy.deepcopy(registry)

    async def delete_registry(self, registry_id: int):
        component_ids = [c["id"] for c in self.components if c["registry_id"] == registry_id]
        self.examples = [e for e in self.examples if e["component_id"] not in component_ids]
        self.components = [c for c in self.components if c["registry_id"] != registry_id]
        before = len(self.registries)
        self.registries = [r for r in self.registries if r["id"] != registry_id]
        return len(self.registries) < before

    # ----- components -----

    async def list_components(self, component_filter, limit: int = 50, offset: int = 0):
        self.calls.append("list_components")
        rows = [c for c in self.components if self._component_matches(c, component_filter)]
        return [self._with_relations(c) for c in _by_name(rows)[offset:offset + limit]]

    async def count_components(self, component_filter):
        self.calls.append("count_components")
        return len([c for c in self.components if self._component_matches(c, component_filter)])

    async def list_components_for_registries(self, registry_ids: List[int]):
        rows = [c for c in self.components if c["registry_id"] in registry_ids]
        result = []
        for component in _by_name(rows):
            row = self._with_relations(component)
            row.pop("registry")
            result.append(row)
        return result

    async def count_components_by_registry(self, registry_ids: List[int]):
        counts = {registry_id: 0 for registry_id in registry_ids}
        for component in self.components:
            if component["registry_id"] in counts:
                counts[component["registry_id"]] += 1
        return counts

    async def list_component_ids(self, registry_ids: List[int]):
        return [c["id"] for c in self.components if c["registry_id"] in registry_ids]

    async def get_component(self, component_id: int):
        for component in self.components:
            if component["id"] == component_id:
                return self._with_relations(component)
        return None

    async def get_components_by_ids(self, component_ids: List[int]):
        rows = [c for c in self.components if c["id"] in component_ids]
        return [self._with_relations(c) for c in _by_name(rows)]

    async def get_component_in_registry(self, registry_id: int, slug: str):
        for component in self.components:
            if component["registry_id"] == registry_id and component["slug"] == slug:
                return self._with_relations(component)
        return None

    async def find_components_by_slug_or_name(self, value: str):
        return [
            self._with_relations(c)
            for c in self.components
            if c["slug"] == value or c["name"] == value
        ]

    async def create_component(self, component_data: Dict[str, Any]):
        self.calls.append("create_component")
        data = {"dependencies": [], "status": "stable", **component_data}
        return self._insert("component", self.components, data)

    async def update_component(self, component_id: int, update_data: Dict[str, Any]):
        for component in self.components:
            if component["id"] == component_id:
                component.update(serialize_json_fields(update_data))
                return copy.deepcopy(component)
        return None

    async def delete_component(self, component_id: int):
        self.examples = [e for e in self.examples if e["component_id"] != component_id]
        before = len(self.components)
        self.components = [c for c in self.components if c["id"] != component_id]
        return len(self.components) < before

    # ----- examples -----

    def _example_with_component(self, example: Dict[str, Any]) -> Dict[str, Any]:
        row = copy.deepcopy(example)
        row["component"] = next(
            (copy.deepcopy(c) for c in self.components if c["id"] == example["component_id"]),
            None,
        )
        return row

    async def list_examples(self, component_id: int):
        rows = [e for e in self.examples if e["component_id"] == component_id]
        return [self._example_with_component(e) for e in _by_name(rows)]

    async def get_example(self, example_id: int):
        for example in self.examples:
            if example["id"] == example_id:
                return self._example_with_component(example)
        return None

    async def search_examples(self, component_ids=None, query_text=None, limit: int = 100):
        self.calls.append("search_examples")
        rows = [
            e for e in self.examples
            if (component_ids is None or e["component_id"] in component_ids)
            and (not query_text or _contains(e["name"], query_text) or _contains(e["slug"], query_text))
        ]
        return copy.deepcopy(_by_name(rows)[:limit])

    async def create_example(self, example_data: Dict[str, Any]):
        self.calls.append("create_example")
        return self._insert("example", self.examples, example_data)

    async def update_example(self, example_id: int, update_data: Dict[str, Any]):
        for example in self.examples:
            if example["id"] == example_id:
                example.update(serialize_json_fields(update_data))
                return copy.deepcopy(example)
        return None

    async def delete_example(self, example_id: int):
        before = len(self.examples)
        self.examples = [e for e in self.examples if e["id"] != example_id]
        return len(self.examples) < before

    async def ping(self):
        return True


def _seed(db: MockDatabase) -> MockDatabase:
    shadcn = db._insert("registry", db.registries, {
        "name": "shadcn/ui", "slug": "shadcn", "framework": "react",
        "description": "Radix UI and Tailwind CSS components.",
        "npm_package": "shadcn-ui", "install_command": "npx shadcn-ui@latest init",
        "is_active": True,
    })
    antd = db._insert("registry", db.registries, {
        "name": "Ant Design", "slug": "antd", "framework": "react",
        "description": "A UI library for React.", "npm_package": "antd",
        "install_command": "npm install antd", "is_active": True,
    })
    legacy = db._insert("registry", db.registries, {
        "name": "Legacy UI", "slug": "legacy", "framework": "vue", "is_active": False,
    })

    def component(registry, name, slug, type, status="stable", **extra):
        return db._insert("component", db.components, {
            "registry_id": registry["id"], "name": name, "slug": slug, "type": type,
            "status": status, "dependencies": [], **extra,
        })

    shadcn_button = component(
        shadcn, "Button", "button", "input-control",
        description="A button with multiple variants.",
        dependencies=["@radix-ui/react-slot"],
    )
    component(shadcn, "Card", "card", "container", description="A flexible card.")
    antd_button = component(antd, "Button", "button", "input-control", description="Antd button.")
    antd_table = component(antd, "Table", "table", "container", status="beta")
    component(antd, "DatePicker", "date-picker", "input-control")
    component(legacy, "Old Button", "old-button", "input-control", status="deprecated")

    def example(owner, name, slug, code, language="tsx"):
        db._insert("example", db.examples, {
            "component_id": owner["id"], "name": name, "slug": slug,
            "language": language, "code": code,
        })

    example(shadcn_button, "Primary Button", "primary-button", "<Button>Click me</Button>")
    example(
        shadcn_button, "Button Variants", "button-variants",
        '<div>\n  <Button variant="outline">Outline</Button>\n</div>',
    )
    example(antd_button, "Antd Button Demo", "antd-button-demo", '<Button type="primary" />')
    example(antd_table, "Basic Table", "basic-table", "<Table />")
    return db


@pytest.fixture
def mock_database():
    """Empty in-memory store."""
    return MockDatabase()


@pytest.fixture
def seeded_database():
    """In-memory store holding shadcn, antd and an inactive legacy registry."""
    return _seed(MockDatabase())


@pytest.fixture
def service(seeded_database):
    return RegistryService(seeded_database)


@pytest.fixture
def empty_service(mock_database):
    return RegistryService(mock_database)


@pytest.fixture
def test_app(service):
    return create_application(service)


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


@pytest.fixture
def empty_client(empty_service):
    return TestClient(create_application(empty_service))
