"""
Service for searching and managing registries, components and examples.
"""
from typing import Any, Dict, Iterable, List, Optional

from fastapi import HTTPException, status
from loguru import logger

from uiregistry.db.client import Database
from uiregistry.models.schemas import (
    Component,
    ComponentCreate,
    ComponentItem,
    ComponentUpdate,
    Example,
    ExampleCreate,
    ExampleItem,
    ExampleUpdate,
    Registry,
    RegistryCreate,
    RegistryItem,
    RegistryUpdate,
    SearchResult,
)
from uiregistry.services.assembler import (
    backfill_registries,
    format_component,
    format_example,
    format_registry,
    group_components_by_registry,
)
from uiregistry.services.pagination import empty_page, paginate, validate_page
from uiregistry.services.query import (
    DEFAULT_EXAMPLE_LIMIT,
    DEFAULT_SEARCH_LIMIT,
    build_component_filter,
    normalize_registry_identifier,
    normalize_registry_identifiers,
    parse_item_name,
    resolve_registry_ids,
)


def _require_fields(data: Dict[str, Any], fields: List[str]) -> None:
    """Raise a 400 listing every required field that is missing or blank."""
    missing = []
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    if missing:
        verb = "is" if len(missing) == 1 else "are"
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{', '.join(missing)} {verb} required",
        )


def _not_found(entity: str, key: Any) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{entity} with id {key} not found",
    )


def _check_page(limit: int, offset: int) -> None:
    try:
        validate_page(limit, offset)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


class RegistryService:
    """Search and CRUD operations over the registry store."""

    def __init__(self, db: Database):
        """
        Initialize the registry service.

        Args:
            db: Database the service reads from and writes to
        """
        self.db = db

    # ===== Search =====

    async def search_all_registries(
        self, registries: Optional[Iterable[str]] = None
    ) -> SearchResult:
        """
        List available registries without their components.

        Args:
            registries: Optional registry names/slugs; when given, only
                active registries among them are returned

        Returns:
            SearchResult of RegistryItem holding every match on one page
        """
        names = normalize_registry_identifiers(registries)
        if names is None:
            rows = await self.db.list_registries()
        else:
            rows = await self.db.find_registries(names, active_only=True)

        counts = await self.db.count_components_by_registry([row["id"] for row in rows])
        items = [format_registry(row, component_count=counts.get(row["id"], 0)) for row in rows]

        return SearchResult(
            items=items,
            total_count=len(items),
            limit=len(items),
            offset=0,
            has_more=False,
        )

    async def search_registries(
        self,
        registries: Optional[Iterable[str]] = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
        offset: int = 0,
    ) -> SearchResult:
        """
        Page through registries with every component and example nested.

        Registries are paged first; all components of the registries on the
        page are then loaded in one query and attached to their owners.

        Args:
            registries: Optional registry names/slugs to restrict to
            limit: Maximum number of registries
            offset: Number of registries to skip

        Returns:
            SearchResult of RegistryItem
        """
        _check_page(limit, offset)
        registry_ids = await resolve_registry_ids(self.db, registries)
        if registry_ids is not None and not registry_ids:
            logger.info(f"No registries matched {list(registries or [])}")
            return empty_page(limit, offset)

        rows = await self.db.list_registries_page(registry_ids, limit, offset)
        page_ids = [row["id"] for row in rows]
        components = await self.db.list_components_for_registries(page_ids)
        logger.info(f"Loaded {len(components)} components across {len(rows)} registries")

        grouped = group_components_by_registry(components)
        items = [format_registry(row, components=grouped.get(row["id"], [])) for row in rows]

        total_count = await self.db.count_registries(registry_ids)
        return paginate(items, total_count, limit, offset)

    async def search_components(
        self,
        registries: Optional[Iterable[str]] = None,
        query: Optional[str] = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
        offset: int = 0,
        type: Optional[str] = None,
        status: Optional[str] = None,
        registry_ids: Optional[List[int]] = None,
    ) -> SearchResult:
        """
        Search components across all registries or within specific ones.

        Args:
            registries: Optional registry names/slugs (``@`` prefix allowed);
                absent or empty means all registries
            query: Case-insensitive substring matched on name, description or slug
            limit: Maximum number of components
            offset: Number of components to skip
            type: Optional component type filter
            status: Optional component status filter
            registry_ids: Registry IDs to restrict to when no identifiers are given

        Returns:
            SearchResult of ComponentItem ordered by name
        """
        _check_page(limit, offset)
        component_filter = await build_component_filter(
            self.db,
            registries=registries,
            query=query,
            type=type,
            status=status,
            registry_ids=registry_ids,
        )
        if component_filter.matches_nothing:
            logger.info(f"No registries matched {list(registries or [])}; returning no components")
            return empty_page(limit, offset)

        if component_filter.registry_ids is None:
            logger.debug("Searching components across all available registries")
        if component_filter.query:
            logger.debug(f'Fuzzy search query: "{component_filter.query}"')

        rows = await self.db.list_components(component_filter, limit, offset)
        rows = await backfill_registries(self.db, rows)
        total_count = await self.db.count_components(component_filter)
        logger.info(
            f"Found {len(rows)} components (limit: {limit}, offset: {offset}, total: {total_count})"
        )

        return paginate([format_component(row) for row in rows], total_count, limit, offset)

    async def get_registry_items(self, item_names: Iterable[str]) -> List[ComponentItem]:
        """
        Get components by name.

        ``@registry/slug`` looks only inside that registry; a bare value
        matches component slug or name across every registry. Names that
        match nothing are skipped.
        """
        items: List[ComponentItem] = []
        for item_name in item_names:
            registry_name, component_name = parse_item_name(item_name)

            if registry_name:
                registries = await self.db.find_registries([registry_name])
                for registry in registries:
                    row = await self.db.get_component_in_registry(registry["id"], component_name)
                    if row:
                        items.append(format_component(row, registry=row.get("registry") or registry))
                continue

            rows = await self.db.find_components_by_slug_or_name(component_name)
            rows = await backfill_registries(self.db, rows)
            items.extend(format_component(row) for row in rows)

        return items

    async def _search_example_rows(
        self,
        registries: Optional[Iterable[str]],
        query: Optional[str],
        limit: int,
    ) -> List[Dict[str, Any]]:
        _check_page(limit, 0)
        registry_ids = await resolve_registry_ids(self.db, registries)

        component_ids = None
        if registry_ids is not None:
            if not registry_ids:
                logger.info(f"No registries matched {list(registries or [])} for example search")
                return []
            component_ids = await self.db.list_component_ids(registry_ids)
            if not component_ids:
                return []

        query = query.strip() if query else None
        rows = await self.db.search_examples(component_ids, query or None, limit)
        logger.info(f'Found {len(rows)} examples matching "{query or ""}"')
        return rows

    async def search_examples(
        self,
        registries: Optional[Iterable[str]] = None,
        query: Optional[str] = None,
        limit: int = DEFAULT_EXAMPLE_LIMIT,
    ) -> List[ExampleItem]:
        """
        Search examples by name or slug, restricted to the given registries.

        Args:
            registries: Optional registry names/slugs
            query: Case-insensitive substring matched on example name or slug
            limit: Maximum number of examples

        Returns:
            ExampleItem list ordered by name
        """
        rows = await self._search_example_rows(registries, query, limit)
        return [format_example(row) for row in rows]

    async def get_item_examples(
        self,
        registries: Optional[Iterable[str]] = None,
        query: Optional[str] = None,
        limit: int = DEFAULT_EXAMPLE_LIMIT,
    ) -> List[ComponentItem]:
        """
        Search examples and group them under their owning components.

        Each returned component carries only the examples that matched.
        """
        example_rows = await self._search_example_rows(registries, query, limit)

        component_ids: List[int] = []
        for row in example_rows:
            if row.get("component_id") is not None and row["component_id"] not in component_ids:
                component_ids.append(row["component_id"])
        if not component_ids:
            return []

        components = await self.db.get_components_by_ids(component_ids)
        components = await backfill_registries(self.db, components)

        items = []
        for component in components:
            matched = [row for row in example_rows if row.get("component_id") == component["id"]]
            items.append(format_component(component, examples=matched))
        return items

    # ===== Registries =====

    async def list_registries(self) -> List[Registry]:
        """All registries with their components."""
        rows = await self.db.list_registries(include_components=True)
        return [Registry.model_validate(row) for row in rows]

    async def get_registry(self, registry_id: int) -> Registry:
        """Get a registry with its components or raise 404."""
        row = await self.db.get_registry(registry_id, include_components=True)
        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Registry not found"
            )
        return Registry.model_validate(row)

    async def create_registry(self, payload: RegistryCreate) -> Registry:
        """Validate and store a new registry."""
        data = payload.model_dump()
        _require_fields(data, ["name", "slug", "framework"])
        data["slug"] = normalize_registry_identifier(data["slug"])

        created = await self.db.create_registry(data)
        logger.info(f"Created registry {created['name']} ({created['slug']})")
        return Registry.model_validate(created)

    async def update_registry(self, registry_id: int, payload: RegistryUpdate) -> Registry:
        """Merge the supplied fields into an existing registry."""
        existing = await self.db.get_registry(registry_id)
        if not existing:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Registry not found"
            )

        update_data = payload.model_dump(exclude_unset=True)
        if "slug" in update_data and update_data["slug"]:
            update_data["slug"] = normalize_registry_identifier(update_data["slug"])
        if update_data:
            await self.db.update_registry(registry_id, update_data)
        return await self.get_registry(registry_id)

    async def delete_registry(self, registry_id: int) -> None:
        """Delete a registry together with its components and examples."""
        existing = await self.db.get_registry(registry_id)
        if not existing:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Registry not found"
            )
        await self.db.delete_registry(registry_id)
        logger.info(f"Deleted registry {registry_id}")

    # ===== Components =====

    async def get_component(self, component_id: int) -> Component:
        """Get a component with its registry and examples or raise 404."""
        row = await self.db.get_component(component_id)
        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Component not found"
            )
        row = (await backfill_registries(self.db, [row]))[0]
        return Component.model_validate(row)

    async def _resolve_owner_registry(self, data: Dict[str, Any]) -> int:
        if data.get("registry_id") is not None:
            registry = await self.db.get_registry(data["registry_id"])
            if not registry:
                raise _not_found("Registry", data["registry_id"])
            return registry["id"]

        if data.get("registry_slug"):
            slug = normalize_registry_identifier(data["registry_slug"])
            registry = await self.db.get_registry_by_slug(slug)
            if not registry:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f'Registry with slug "{slug}" not found',
                )
            return registry["id"]

        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Either registryId or registrySlug is required",
        )

    async def create_component(self, payload: ComponentCreate) -> Component:
        """Validate and store a new component in the registry given by ID or slug."""
        data = payload.model_dump()
        _require_fields(data, ["name", "slug", "type"])
        registry_id = await self._resolve_owner_registry(data)

        data.pop("registry_slug", None)
        data["registry_id"] = registry_id
        created = await self.db.create_component(data)
        logger.info(f"Created component {created['name']} in registry {registry_id}")
        return await self.get_component(created["id"])

    async def update_component(self, component_id: int, payload: ComponentUpdate) -> Component:
        """Merge the supplied fields into an existing component."""
        existing = await self.db.get_component(component_id)
        if not existing:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Component not found"
            )

        update_data = payload.model_dump(exclude_unset=True)
        if update_data:
            await self.db.update_component(component_id, update_data)
        return await self.get_component(component_id)

    async def delete_component(self, component_id: int) -> None:
        """Delete a component and its examples."""
        existing = await self.db.get_component(component_id)
        if not existing:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Component not found"
            )
        await self.db.delete_component(component_id)

    # ===== Examples =====

    async def list_examples(self, component_id: int) -> List[Example]:
        """Examples of a component ordered by name."""
        component = await self.db.get_component(component_id)
        if not component:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Component not found"
            )
        rows = await self.db.list_examples(component_id)
        return [Example.model_validate(row) for row in rows]

    async def get_example(self, example_id: int) -> Example:
        """Get an example with its component or raise 404."""
        row = await self.db.get_example(example_id)
        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Example not found"
            )
        return Example.model_validate(row)

    async def create_example(self, component_id: int, payload: ExampleCreate) -> Example:
        """Validate and store a new example for a component."""
        component = await self.db.get_component(component_id)
        if not component:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Component not found"
            )

        data = payload.model_dump()
        _require_fields(data, ["name", "slug", "language", "code"])
        data["component_id"] = component_id

        created = await self.db.create_example(data)
        return await self.get_example(created["id"])

    async def update_example(self, example_id: int, payload: ExampleUpdate) -> Example:
        """Merge the supplied fields into an existing example."""
        existing = await self.db.get_example(example_id)
        if not existing:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Example not found"
            )

        update_data = payload.model_dump(exclude_unset=True)
        if "code" in update_data and not update_data["code"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="code must not be empty"
            )
        if update_data:
            await self.db.update_example(example_id, update_data)
        return await self.get_example(example_id)

    async def delete_example(self, example_id: int) -> None:
        """Delete an example."""
        existing = await self.db.get_example(example_id)
        if not existing:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Example not found"
            )
        await self.db.delete_example(example_id)
