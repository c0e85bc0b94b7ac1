"""
MCP tools exposing the registry to AI assistants.

Tools:
- get_available_registries: list registries
- get_available_ui_components_from_registries: registries with nested components
- search_items_in_registries: fuzzy component search with pagination
- get_item_examples_from_registries: fuzzy example search grouped by component
- view_items_in_registries: detail view for ``@registry/slug`` or bare names

Usage:
    python cli.py mcp                              # stdio
    python cli.py mcp --transport streamable-http  # HTTP on MCP_PORT
"""

from typing import List, Optional

from loguru import logger
from mcp.server.fastmcp import FastMCP

from uiregistry.core.config import config
from uiregistry.services.query import DEFAULT_EXAMPLE_LIMIT, DEFAULT_SEARCH_LIMIT
from uiregistry.services.registry_service import RegistryService
from uiregistry.utils.formatting import (
    format_item_examples,
    format_no_examples_found,
    format_registry_items,
    format_search_results_with_pagination,
)

SERVER_NAME = "ui-component-registry"

NO_REGISTRY_MESSAGE = "Please register your UI library"

NO_REGISTRIES_FOUND_MESSAGE = (
    "No registries found in this project.\n"
    "\n"
    "Registries are collections of UI components that can be added to your project.\n"
    "Common registries include: antd, mui, element-ui, @shadcn, etc."
)


async def get_available_registries(
    service: RegistryService, registries: Optional[List[str]] = None
) -> str:
    results = await service.search_all_registries(registries)
    if not results.items:
        return NO_REGISTRY_MESSAGE
    return format_search_results_with_pagination(results)


async def get_available_ui_components_from_registries(
    service: RegistryService,
    registries: Optional[List[str]] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> str:
    results = await service.search_registries(
        registries,
        limit=limit if limit is not None else DEFAULT_SEARCH_LIMIT,
        offset=offset or 0,
    )
    if not results.items:
        return NO_REGISTRIES_FOUND_MESSAGE
    return format_search_results_with_pagination(results)


async def search_items_in_registries(
    service: RegistryService,
    registries: Optional[List[str]] = None,
    query: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> str:
    """Component search text, with a context line and guided retry text when empty."""
    results = await service.search_components(
        registries,
        query,
        limit=limit if limit is not None else DEFAULT_SEARCH_LIMIT,
        offset=offset or 0,
    )

    context = []
    if registries:
        context.append(f"in registries: {', '.join(registries)}")
    else:
        context.append("across all available registries")
    if query:
        context.append(f'matching "{query}"')
    context_text = " ".join(context)

    if not results.items:
        reason = (
            f'The search term "{query}" did not match any component names, descriptions, or slugs.'
            if query
            else "No components available."
        )
        return (
            f"No UI components found {context_text}.\n"
            "\n"
            f"{reason}\n"
            "\n"
            "Try:\n"
            '1. Use broader search terms (e.g., "button" instead of "primary-button")\n'
            "2. Check registry slug spelling if filtering (e.g., 'antd', 'shadcn')\n"
            "3. Use get_available_registries to see available registries\n"
            "4. Search without registries filter to see all components\n"
            "5. Search without query to see all components in specified registries"
        )

    plural = "s" if results.total_count > 1 else ""
    header = f"Found {results.total_count} component{plural} {context_text}\n\n"
    return header + format_search_results_with_pagination(
        results, query=query, registries=registries
    )


async def get_item_examples_from_registries(
    service: RegistryService,
    query: str,
    registries: Optional[List[str]] = None,
) -> str:
    items = await service.get_item_examples(registries, query, limit=DEFAULT_EXAMPLE_LIMIT)
    logger.info(f'Example search for "{query}" matched {len(items)} components')
    if not items:
        return format_no_examples_found(query, registries)
    return format_item_examples(items, query)


async def view_items_in_registries(service: RegistryService, items: List[str]) -> str:
    found = await service.get_registry_items(items)
    if not found:
        return (
            f"No items found for: {', '.join(items)}\n"
            "\n"
            "Use the @registry/slug form (e.g., @shadcn/button) or a bare component "
            "name, or run search_items_in_registries to find the right name."
        )
    return "\n\n---\n\n".join(format_registry_items(found))


def create_mcp_server(service: RegistryService, port: int = None) -> FastMCP:
    """Build a FastMCP server whose tools run against ``service``."""
    mcp = FastMCP(SERVER_NAME, port=port or config.mcp_port)

    @mcp.tool(
        name="get_available_registries",
        description="Get all available registries and their description. Optionally "
        "restrict to registry names/slugs such as ['shadcn', 'antd'].",
    )
    async def _get_available_registries(registries: Optional[List[str]] = None) -> str:
        return await get_available_registries(service, registries)

    @mcp.tool(
        name="get_available_ui_components_from_registries",
        description="Get all available UI components from registries (e.g. ['antd', 'mui', "
        "'@shadcn']), with their examples. Supports limit/offset pagination over registries.",
    )
    async def _get_available_ui_components_from_registries(
        registries: Optional[List[str]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> str:
        return await get_available_ui_components_from_registries(
            service, registries, limit, offset
        )

    @mcp.tool(
        name="search_items_in_registries",
        description="Search for UI components across all available registries or within "
        "specific registries. Fuzzy matches component name, description, and slug. After "
        "finding items, use get_item_examples_from_registries to see usage examples.",
    )
    async def _search_items_in_registries(
        registries: Optional[List[str]] = None,
        query: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> str:
        return await search_items_in_registries(service, registries, query, limit, offset)

    @mcp.tool(
        name="get_item_examples_from_registries",
        description="Fuzzy search for component examples by example name and slug (e.g. "
        "'button', 'button-demo'). Returns matching examples grouped by component.",
    )
    async def _get_item_examples_from_registries(
        query: str, registries: Optional[List[str]] = None
    ) -> str:
        return await get_item_examples_from_registries(service, query, registries)

    @mcp.tool(
        name="view_items_in_registries",
        description="View details of specific components, e.g. ['@shadcn/button'] to look "
        "inside one registry or ['button'] to look across all registries.",
    )
    async def _view_items_in_registries(items: List[str]) -> str:
        return await view_items_in_registries(service, items)

    return mcp
