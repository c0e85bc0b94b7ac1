"""Resolve caller-supplied search criteria into a concrete filter plan."""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from loguru import logger

# Per call-site default page sizes
DEFAULT_SEARCH_LIMIT = 50
DEFAULT_LIST_LIMIT = 20
DEFAULT_EXAMPLE_LIMIT = 100


def normalize_registry_identifier(identifier: str) -> str:
    """Strip one leading ``@`` from a registry name or slug."""
    identifier = identifier.strip()
    if identifier.startswith("@"):
        return identifier[1:]
    return identifier


def normalize_registry_identifiers(
    identifiers: Optional[Iterable[str]],
) -> Optional[List[str]]:
    """
    Normalize a list of registry identifiers.

    Returns None when there is no registry restriction (identifiers absent,
    empty, or blank), otherwise the de-duplicated normalized values in the
    order given.
    """
    if not identifiers:
        return None
    cleaned: List[str] = []
    for identifier in identifiers:
        value = normalize_registry_identifier(identifier)
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned or None


def parse_item_name(item_name: str):
    """Split ``@registry/slug`` into its parts; bare names give ``(None, name)``."""
    item_name = item_name.strip()
    if item_name.startswith("@") and "/" in item_name:
        registry_slug, _, component_slug = item_name[1:].partition("/")
        if registry_slug and component_slug:
            return registry_slug, component_slug
    return None, item_name


@dataclass(frozen=True)
class ComponentFilter:
    """Predicates shared by the paged component fetch and its count query.

    ``registry_ids`` of None means all registries. ``matches_nothing`` is set
    when registry identifiers were supplied but none resolved.
    """

    registry_ids: Optional[List[int]] = None
    query: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    matches_nothing: bool = False


async def resolve_registry_ids(db, identifiers: Optional[Iterable[str]], active_only: bool = False):
    """
    Map registry names/slugs to registry IDs.

    Args:
        db: Database used for the lookup
        identifiers: Raw identifiers, each possibly prefixed with ``@``
        active_only: Only consider active registries

    Returns:
        None when no restriction was requested, otherwise the (possibly
        empty) list of matching registry IDs
    """
    names = normalize_registry_identifiers(identifiers)
    if names is None:
        return None

    registries = await db.find_registries(names, active_only=active_only)
    registry_ids = [registry["id"] for registry in registries]
    logger.debug(f"Resolved registries {names} to IDs {registry_ids}")
    return registry_ids


async def build_component_filter(
    db,
    registries: Optional[Iterable[str]] = None,
    query: Optional[str] = None,
    type: Optional[str] = None,
    status: Optional[str] = None,
    registry_ids: Optional[List[int]] = None,
) -> ComponentFilter:
    """
    Build the filter plan for a component search.

    Registry identifiers take precedence over explicit ``registry_ids``.
    A blank ``query`` means no text filter.
    """
    query = query.strip() if query else None
    type = getattr(type, "value", type)
    status = getattr(status, "value", status)

    resolved = await resolve_registry_ids(db, registries)
    if resolved is None and registry_ids is not None:
        resolved = list(registry_ids)

    return ComponentFilter(
        registry_ids=resolved,
        query=query or None,
        type=type or None,
        status=status or None,
        matches_nothing=resolved is not None and not resolved,
    )
