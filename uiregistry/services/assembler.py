"""Turn stored rows into complete component/registry/example item graphs."""

from typing import Any, Dict, List, Optional

from loguru import logger

from uiregistry.models.schemas import ComponentItem, ExampleItem, RegistryItem


def add_command_argument(registry_slug: Optional[str], slug: str) -> str:
    """``@registry/slug`` when the registry slug is known, else the bare slug."""
    if registry_slug:
        return f"@{registry_slug}/{slug}"
    return slug


def _sorted_by_name(rows: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    return sorted(rows or [], key=lambda row: row.get("name") or "")


async def backfill_registries(db, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Make sure every component row carries its owning registry.

    Rows whose embedded ``registry`` is missing get it from a follow-up
    lookup by ``registry_id``. A registry that still cannot be found leaves
    the field empty; the row is never dropped.

    Args:
        db: Database used for the follow-up lookup
        rows: Component rows as returned by the store

    Returns:
        New row dictionaries with ``registry`` filled where possible
    """
    missing_ids = sorted(
        {row["registry_id"] for row in rows if not row.get("registry") and row.get("registry_id")}
    )
    if not missing_ids:
        return [dict(row) for row in rows]

    logger.info(f"Loading registry for {len(missing_ids)} registry IDs missing from the join")
    registries = await db.get_registries_by_ids(missing_ids)
    registry_map = {registry["id"]: registry for registry in registries}

    filled = []
    for row in rows:
        row = dict(row)
        if not row.get("registry") and row.get("registry_id"):
            row["registry"] = registry_map.get(row["registry_id"])
        filled.append(row)
    return filled


def format_example(row: Dict[str, Any], is_primary: bool = False) -> ExampleItem:
    """Format an example row for output."""
    return ExampleItem(
        id=row.get("id"),
        component_id=row.get("component_id"),
        name=row["name"],
        slug=row.get("slug"),
        description=row.get("description") or None,
        language=row.get("language") or "typescript",
        code=row.get("code") or "",
        is_primary=is_primary,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def format_component(
    row: Dict[str, Any],
    registry: Optional[Dict[str, Any]] = None,
    examples: Optional[List[Dict[str, Any]]] = None,
) -> ComponentItem:
    """
    Format a component row with its registry and examples denormalized.

    Args:
        row: Component row, possibly with embedded ``registry``/``examples``
        registry: Registry row overriding the embedded one
        examples: Example rows overriding the embedded ones

    Returns:
        ComponentItem with ``exampleCount`` and ``addCommandArgument`` computed
    """
    registry = registry if registry is not None else row.get("registry")
    if registry is None and row.get("registry_id"):
        logger.warning(
            f"Component {row.get('id')} ({row.get('name')}) has registry_id "
            f"{row.get('registry_id')} but no registry was loaded"
        )
    registry_slug = (registry or {}).get("slug") or ""
    registry_name = (registry or {}).get("name") or ""

    example_rows = _sorted_by_name(examples if examples is not None else row.get("examples"))
    example_items = [format_example(example) for example in example_rows]

    return ComponentItem(
        id=row.get("id"),
        registry_id=row.get("registry_id"),
        registry_slug=registry_slug,
        registry_name=registry_name,
        slug=row["slug"],
        name=row["name"],
        type=row["type"],
        status=row.get("status") or "stable",
        description=row.get("description") or None,
        dependencies=list(row.get("dependencies") or []),
        introduced_version=row.get("introduced_version"),
        deprecated_version=row.get("deprecated_version"),
        metadata=dict(row.get("metadata") or {}),
        example_count=len(example_items),
        add_command_argument=add_command_argument(registry_slug, row["slug"]),
        examples=example_items,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def format_registry(
    row: Dict[str, Any],
    components: Optional[List[Dict[str, Any]]] = None,
    component_count: Optional[int] = None,
) -> RegistryItem:
    """
    Format a registry row, nesting its components when they are given.

    Args:
        row: Registry row
        components: Component rows (with examples) owned by this registry
        component_count: Count to report when components are not nested

    Returns:
        RegistryItem
    """
    component_items = None
    if components is not None:
        component_items = [
            format_component(component, registry=row) for component in _sorted_by_name(components)
        ]
        component_count = len(component_items)

    return RegistryItem(
        id=row.get("id"),
        slug=row["slug"],
        name=row["name"],
        description=row.get("description") or None,
        framework=row.get("framework") or "",
        npm_package=row.get("npm_package") or None,
        install_command=row.get("install_command") or None,
        docs_url=row.get("docs_url") or None,
        is_official=False,
        component_count=component_count or 0,
        components=component_items,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def group_components_by_registry(
    components: List[Dict[str, Any]],
) -> Dict[int, List[Dict[str, Any]]]:
    """Bucket component rows by ``registry_id``, keeping their order."""
    grouped: Dict[int, List[Dict[str, Any]]] = {}
    for component in components:
        grouped.setdefault(component["registry_id"], []).append(component)
    return grouped
