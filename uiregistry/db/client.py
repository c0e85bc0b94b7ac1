"""
Database client for accessing and managing registry data in Supabase.
This module provides an abstraction layer over the Supabase (PostgREST) query builder.
"""

import logging
from typing import Dict, List, Optional, Any
from datetime import datetime, timezone

from postgrest.exceptions import APIError

from uiregistry.utils.supabase_utils import (
    SupabaseClient,
    REGISTRIES_TABLE,
    COMPONENTS_TABLE,
    EXAMPLES_TABLE,
    parse_json_fields,
    serialize_json_fields,
    or_ilike,
)

# Set up logger
logger = logging.getLogger(__name__)

# Embedded relation selections
COMPONENT_WITH_RELATIONS = (
    f"*, registry:{REGISTRIES_TABLE}(*), examples:{EXAMPLES_TABLE}(*)"
)
REGISTRY_WITH_COMPONENTS = f"*, components:{COMPONENTS_TABLE}(*)"
EXAMPLE_WITH_COMPONENT = f"*, component:{COMPONENTS_TABLE}(*)"

# Columns searched by the fuzzy filters
COMPONENT_SEARCH_COLUMNS = ["name", "description", "slug"]
EXAMPLE_SEARCH_COLUMNS = ["name", "slug"]


class DatabaseError(Exception):
    """Raised when the store rejects or fails a query."""


def _parse_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """Decode JSON columns on a row and on any embedded relations."""
    parsed = parse_json_fields(row)
    for relation in ("registry", "component"):
        if isinstance(parsed.get(relation), dict):
            parsed[relation] = parse_json_fields(parsed[relation])
    for relation in ("components", "examples"):
        if isinstance(parsed.get(relation), list):
            parsed[relation] = [parse_json_fields(item) for item in parsed[relation]]
    return parsed


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class Database:
    """Data access for registries, components and examples.

    The Supabase client is passed in so the service and tests can supply
    their own; ``Database.from_config()`` builds one from the environment.
    """

    def __init__(self, client):
        self.client = client

    @classmethod
    def from_config(cls) -> "Database":
        return cls(SupabaseClient.get_client())

    @staticmethod
    def _execute(query, action: str):
        """
        Execute a query and normalize store failures into ``DatabaseError``.

        Args:
            query: PostgREST query builder ready to execute
            action: Human readable description used in the error message

        Returns:
            The PostgREST response
        """
        try:
            response = query.execute()
        except APIError as e:
            raise DatabaseError(f"Error {action}: {e.message}") from e

        if hasattr(response, "error") and response.error:
            raise DatabaseError(f"Error {action}: {response.error.message}")

        return response

    def _rows(self, query, action: str) -> List[Dict[str, Any]]:
        response = self._execute(query, action)
        return [_parse_row(row) for row in (response.data or [])]

    def _first(self, query, action: str) -> Optional[Dict[str, Any]]:
        rows = self._rows(query, action)
        return rows[0] if rows else None

    def _count(self, query, action: str) -> int:
        response = self._execute(query, action)
        return response.count or 0

    # ===== Registry Methods =====

    async def list_registries(self, include_components: bool = False) -> List[Dict[str, Any]]:
        """List every registry ordered by name, optionally with its components."""
        columns = REGISTRY_WITH_COMPONENTS if include_components else "*"
        query = self.client.table(REGISTRIES_TABLE).select(columns).order("name")
        return self._rows(query, "fetching registries")

    async def get_registry(
        self, registry_id: int, include_components: bool = False
    ) -> Optional[Dict[str, Any]]:
        """
        Get a registry by ID.

        Args:
            registry_id: Numeric registry ID
            include_components: Embed the registry's components

        Returns:
            Registry data dictionary or None if not found
        """
        columns = REGISTRY_WITH_COMPONENTS if include_components else "*"
        query = self.client.table(REGISTRIES_TABLE).select(columns).eq("id", registry_id)
        return self._first(query, "fetching registry")

    async def get_registry_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        """Get a registry by its exact slug."""
        query = self.client.table(REGISTRIES_TABLE).select("*").eq("slug", slug)
        return self._first(query, "fetching registry")

    async def get_registries_by_ids(self, registry_ids: List[int]) -> List[Dict[str, Any]]:
        """Fetch registries whose IDs are in ``registry_ids``."""
        if not registry_ids:
            return []
        query = self.client.table(REGISTRIES_TABLE).select("*").in_("id", registry_ids)
        return self._rows(query, "fetching registries")

    async def find_registries(
        self, identifiers: List[str], active_only: bool = False
    ) -> List[Dict[str, Any]]:
        """
        Find registries whose name OR slug equals one of ``identifiers``.

        Args:
            identifiers: Already-normalized registry names or slugs
            active_only: Restrict to registries flagged ``is_active``

        Returns:
            Matching registries, unique by ID, ordered by name
        """
        if not identifiers:
            return []

        found: Dict[int, Dict[str, Any]] = {}
        for column in ("name", "slug"):
            query = self.client.table(REGISTRIES_TABLE).select("*").in_(column, identifiers)
            if active_only:
                query = query.eq("is_active", True)
            for row in self._rows(query, "resolving registries"):
                found.setdefault(row["id"], row)

        return sorted(found.values(), key=lambda r: r["name"])

    async def list_registries_page(
        self, registry_ids: Optional[List[int]], limit: int, offset: int
    ) -> List[Dict[str, Any]]:
        """Page through registries ordered by name, optionally restricted to IDs."""
        query = self.client.table(REGISTRIES_TABLE).select("*")
        if registry_ids is not None:
            query = query.in_("id", registry_ids)
        query = query.order("name").range(offset, offset + limit - 1)
        return self._rows(query, "fetching registries")

    async def count_registries(self, registry_ids: Optional[List[int]] = None) -> int:
        """Count registries, optionally restricted to IDs."""
        query = self.client.table(REGISTRIES_TABLE).select("id", count="exact")
        if registry_ids is not None:
            query = query.in_("id", registry_ids)
        return self._count(query, "counting registries")

    async def create_registry(self, registry_data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a registry and return the stored row."""
        query = self.client.table(REGISTRIES_TABLE).insert(serialize_json_fields(registry_data))
        created = self._first(query, "creating registry")
        if created is None:
            raise DatabaseError("Error creating registry: no row returned")
        return created

    async def update_registry(
        self, registry_id: int, update_data: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Update only the supplied registry fields."""
        data = serialize_json_fields({**update_data, "updated_at": _now()})
        query = self.client.table(REGISTRIES_TABLE).update(data).eq("id", registry_id)
        return self._first(query, "updating registry")

    async def delete_registry(self, registry_id: int) -> bool:
        """Delete a registry; components and examples go with it (ON DELETE CASCADE)."""
        query = self.client.table(REGISTRIES_TABLE).delete().eq("id", registry_id)
        return len(self._rows(query, "deleting registry")) > 0

    # ===== Component Methods =====

    def _apply_component_filter(self, query, component_filter):
        """Apply the registry, text, type and status predicates of a filter plan.

        Both the paged fetch and the count go through here so they can never
        disagree about which rows match.
        """
        if component_filter.registry_ids is not None:
            query = query.in_("registry_id", component_filter.registry_ids)
        if component_filter.query:
            query = query.or_(or_ilike(COMPONENT_SEARCH_COLUMNS, component_filter.query))
        if component_filter.type:
            query = query.eq("type", component_filter.type)
        if component_filter.status:
            query = query.eq("status", component_filter.status)
        return query

    async def list_components(
        self, component_filter, limit: int = 50, offset: int = 0
    ) -> List[Dict[str, Any]]:
        """
        Fetch one page of components matching a filter plan.

        Each row embeds its ``registry`` and ``examples`` relations.

        Args:
            component_filter: ComponentFilter built by the query resolver
            limit: Maximum number of rows
            offset: Number of rows to skip

        Returns:
            Component rows ordered by name
        """
        query = self.client.table(COMPONENTS_TABLE).select(COMPONENT_WITH_RELATIONS)
        query = self._apply_component_filter(query, component_filter)
        query = query.order("name").range(offset, offset + limit - 1)
        return self._rows(query, "fetching components")

    async def count_components(self, component_filter) -> int:
        """Count components matching a filter plan."""
        query = self.client.table(COMPONENTS_TABLE).select("id", count="exact")
        query = self._apply_component_filter(query, component_filter)
        return self._count(query, "counting components")

    async def list_components_for_registries(
        self, registry_ids: List[int]
    ) -> List[Dict[str, Any]]:
        """Fetch every component (with examples) owned by the given registries."""
        if not registry_ids:
            return []
        query = (
            self.client.table(COMPONENTS_TABLE)
            .select(f"*, examples:{EXAMPLES_TABLE}(*)")
            .in_("registry_id", registry_ids)
            .order("name")
        )
        return self._rows(query, "fetching registry components")

    async def count_components_by_registry(self, registry_ids: List[int]) -> Dict[int, int]:
        """Number of components per registry ID."""
        if not registry_ids:
            return {}
        query = (
            self.client.table(COMPONENTS_TABLE)
            .select("id, registry_id")
            .in_("registry_id", registry_ids)
        )
        counts: Dict[int, int] = {registry_id: 0 for registry_id in registry_ids}
        for row in self._rows(query, "counting registry components"):
            counts[row["registry_id"]] = counts.get(row["registry_id"], 0) + 1
        return counts

    async def list_component_ids(self, registry_ids: List[int]) -> List[int]:
        """IDs of the components owned by the given registries."""
        query = (
            self.client.table(COMPONENTS_TABLE)
            .select("id")
            .in_("registry_id", registry_ids)
        )
        return [row["id"] for row in self._rows(query, "fetching component ids")]

    async def get_component(self, component_id: int) -> Optional[Dict[str, Any]]:
        """Get a component by ID with its registry and examples embedded."""
        query = (
            self.client.table(COMPONENTS_TABLE)
            .select(COMPONENT_WITH_RELATIONS)
            .eq("id", component_id)
        )
        return self._first(query, "fetching component")

    async def get_components_by_ids(self, component_ids: List[int]) -> List[Dict[str, Any]]:
        """Fetch components (with relations) whose IDs are in ``component_ids``."""
        if not component_ids:
            return []
        query = (
            self.client.table(COMPONENTS_TABLE)
            .select(COMPONENT_WITH_RELATIONS)
            .in_("id", component_ids)
            .order("name")
        )
        return self._rows(query, "fetching components")

    async def get_component_in_registry(
        self, registry_id: int, slug: str
    ) -> Optional[Dict[str, Any]]:
        """Get the component with ``slug`` inside one registry."""
        query = (
            self.client.table(COMPONENTS_TABLE)
            .select(COMPONENT_WITH_RELATIONS)
            .eq("registry_id", registry_id)
            .eq("slug", slug)
        )
        return self._first(query, "fetching component")

    async def find_components_by_slug_or_name(self, value: str) -> List[Dict[str, Any]]:
        """Components in any registry whose slug or name equals ``value``."""
        found: Dict[int, Dict[str, Any]] = {}
        for column in ("slug", "name"):
            query = (
                self.client.table(COMPONENTS_TABLE)
                .select(COMPONENT_WITH_RELATIONS)
                .eq(column, value)
            )
            for row in self._rows(query, "fetching components"):
                found.setdefault(row["id"], row)
        return list(found.values())

    async def create_component(self, component_data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a component and return the stored row."""
        query = self.client.table(COMPONENTS_TABLE).insert(serialize_json_fields(component_data))
        created = self._first(query, "creating component")
        if created is None:
            raise DatabaseError("Error creating component: no row returned")
        return created

    async def update_component(
        self, component_id: int, update_data: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Update only the supplied component fields."""
        data = serialize_json_fields({**update_data, "updated_at": _now()})
        query = self.client.table(COMPONENTS_TABLE).update(data).eq("id", component_id)
        return self._first(query, "updating component")

    async def delete_component(self, component_id: int) -> bool:
        """Delete a component and, by cascade, its examples."""
        query = self.client.table(COMPONENTS_TABLE).delete().eq("id", component_id)
        return len(self._rows(query, "deleting component")) > 0

    # ===== Example Methods =====

    async def list_examples(self, component_id: int) -> List[Dict[str, Any]]:
        """Examples of one component, each with its component embedded."""
        query = (
            self.client.table(EXAMPLES_TABLE)
            .select(EXAMPLE_WITH_COMPONENT)
            .eq("component_id", component_id)
            .order("name")
        )
        return self._rows(query, "fetching examples")

    async def get_example(self, example_id: int) -> Optional[Dict[str, Any]]:
        """Get an example by ID with its component embedded."""
        query = (
            self.client.table(EXAMPLES_TABLE)
            .select(EXAMPLE_WITH_COMPONENT)
            .eq("id", example_id)
        )
        return self._first(query, "fetching example")

    async def search_examples(
        self,
        component_ids: Optional[List[int]] = None,
        query_text: Optional[str] = None,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        """
        Search examples by name or slug.

        Args:
            component_ids: Restrict to examples of these components (None = all)
            query_text: Case-insensitive substring matched on name or slug
            limit: Maximum number of rows

        Returns:
            Example rows ordered by name
        """
        query = self.client.table(EXAMPLES_TABLE).select("*")
        if component_ids is not None:
            query = query.in_("component_id", component_ids)
        if query_text:
            query = query.or_(or_ilike(EXAMPLE_SEARCH_COLUMNS, query_text))
        query = query.order("name").limit(limit)
        return self._rows(query, "searching examples")

    async def create_example(self, example_data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert an example and return the stored row."""
        query = self.client.table(EXAMPLES_TABLE).insert(serialize_json_fields(example_data))
        created = self._first(query, "creating example")
        if created is None:
            raise DatabaseError("Error creating example: no row returned")
        return created

    async def update_example(
        self, example_id: int, update_data: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Update only the supplied example fields."""
        data = serialize_json_fields({**update_data, "updated_at": _now()})
        query = self.client.table(EXAMPLES_TABLE).update(data).eq("id", example_id)
        return self._first(query, "updating example")

    async def delete_example(self, example_id: int) -> bool:
        """Delete an example."""
        query = self.client.table(EXAMPLES_TABLE).delete().eq("id", example_id)
        return len(self._rows(query, "deleting example")) > 0

    # ===== Health =====

    async def ping(self) -> bool:
        """Return True when the store answers a trivial query."""
        query = self.client.table(REGISTRIES_TABLE).select("id").limit(1)
        try:
            self._execute(query, "pinging database")
        except DatabaseError as e:
            logger.warning(f"Database ping failed: {e}")
            return False
        return True
