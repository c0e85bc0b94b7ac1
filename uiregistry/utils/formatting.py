"""
Text rendering of registry search results for conversational clients.

Every function here is pure: it reads the item graph it is given and returns
a string, never touching the store or mutating its arguments.
"""

from typing import Dict, List, Optional, Sequence, Union

from uiregistry.models.schemas import (
    ComponentItem,
    ExampleItem,
    RegistryItem,
    SearchResult,
)

SECTION_RULE = "═" * 60
ITEM_RULE = "─" * 60
INDENT = "  "

NO_ITEMS_MESSAGE = "No items found."


def _backticked(values: Sequence[str]) -> str:
    return ", ".join(f"`{value}`" for value in values)


def primary_example_index(examples: Sequence[ExampleItem]) -> Optional[int]:
    """Position of the one example shown as primary: the first flagged one by name."""
    flagged = [index for index, example in enumerate(examples) if example.is_primary]
    if not flagged:
        return None
    return min(flagged, key=lambda index: examples[index].name)


def format_search_results_with_pagination(
    results: SearchResult,
    query: Optional[str] = None,
    registries: Optional[Sequence[str]] = None,
) -> str:
    """
    Render a page of registries or components with a pagination footer.

    Args:
        results: Page of RegistryItem or ComponentItem
        query: Search text to echo in the header
        registries: Registry filter to echo in the header

    Returns:
        Markdown-like document
    """
    output = ""

    if query:
        output += f'Search results for "{query}"'
        if registries:
            output += f" in registries: {', '.join(registries)}"
        output += "\n\n"
    elif registries:
        output += f"Items in registries: {', '.join(registries)}\n\n"

    if not results.items:
        return output + NO_ITEMS_MESSAGE

    rendered = []
    for item in results.items:
        if isinstance(item, ComponentItem):
            rendered.append(format_component_item(item))
        else:
            rendered.append(format_registry_item(item))
    output += "\n\n---\n\n".join(rendered)

    output += "\n\n" + format_pagination_footer(results)
    return output


def format_pagination_footer(results: SearchResult) -> str:
    """``Showing A-B of N items``, counted from the items actually on the page."""
    offset = results.offset or 0
    showing_from = offset + 1
    showing_to = offset + len(results.items)
    footer = f"Showing {showing_from}-{showing_to} of {results.total_count} items"
    if results.has_more:
        footer += " (more available)"
    return footer


def format_registry_item(registry: RegistryItem) -> str:
    """Render a registry header block followed by its nested components."""
    lines = [
        f"**{registry.name}** (`{registry.slug}`)",
        "",
        f"Framework: {registry.framework}",
        "",
    ]

    if registry.description:
        lines.extend([registry.description, ""])

    if registry.npm_package:
        lines.append(f"📦 Package: `{registry.npm_package}`")
        if registry.install_command:
            lines.append(f"🚀 Install: `{registry.install_command}`")
        lines.append("")

    if registry.component_count:
        lines.extend([f"📊 Components: {registry.component_count}", ""])

    if registry.docs_url:
        lines.append(f"📚 Docs: {registry.docs_url}")

    if registry.is_official:
        lines.append("✅ Official Registry")

    if registry.components:
        lines.extend(["", SECTION_RULE, "## UI COMPONENTS", SECTION_RULE, ""])
        for index, component in enumerate(registry.components):
            if index > 0:
                lines.extend(["", ITEM_RULE, ""])
            lines.append(format_component_item_nested(component, 0))

    return "\n".join(lines)


def _metadata_line(component: ComponentItem) -> str:
    framework = component.registry_name or component.registry_slug
    return " | ".join(
        [f"Type: {component.type}", f"Framework: {framework}", f"Status: {component.status}"]
    )


def format_component_item(component: ComponentItem) -> str:
    """Render a standalone component summary."""
    lines = [f"**{component.name}** (`{component.add_command_argument}`)", ""]

    if component.description:
        lines.extend([component.description, ""])

    lines.extend([_metadata_line(component), ""])

    if component.dependencies:
        lines.extend([f"📦 Dependencies: {_backticked(component.dependencies)}", ""])

    if component.example_count > 0:
        plural = "s" if component.example_count > 1 else ""
        lines.append(f"📝 {component.example_count} example{plural} available")

    return "\n".join(lines)


def format_component_item_nested(component: ComponentItem, indent: int = 0) -> str:
    """Render a component inside a registry, with its examples inline."""
    prefix = INDENT * indent
    lines = [f"{prefix}### {component.name}", ""]

    if component.description:
        lines.extend([f"{prefix}{component.description}", ""])

    lines.extend([f"{prefix}Type: {component.type} | Status: {component.status}", ""])

    if component.dependencies:
        lines.extend([f"{prefix}📦 Dependencies: {_backticked(component.dependencies)}", ""])

    if component.examples:
        lines.extend([f"{prefix}📝 **Examples ({len(component.examples)}):**", ""])
        primary = primary_example_index(component.examples)
        for index, example in enumerate(component.examples):
            if index > 0:
                lines.append("")
            lines.append(format_component_example(example, indent + 1, primary=index == primary))

    return "\n".join(lines)


def format_component_example(
    example: ExampleItem, indent: int = 0, primary: Optional[bool] = None
) -> str:
    """
    Render an example as a fenced code block re-indented to ``indent``.

    ``primary`` overrides the example's own flag; callers rendering a whole
    component pass it so that only one example carries the star.
    """
    prefix = INDENT * indent
    if primary is None:
        primary = example.is_primary
    marker = " 🌟" if primary else ""
    lines = [f"{prefix}**{example.name}**{marker}"]

    if example.description:
        lines.extend([f"{prefix}{example.description}", ""])

    lines.append(f"{prefix}```{example.language}")
    lines.extend(f"{prefix}{line}" for line in example.code.split("\n"))
    lines.append(f"{prefix}```")

    return "\n".join(lines)


def format_registry_items(items: Sequence[Union[ComponentItem, RegistryItem]]) -> List[str]:
    """Detailed view of each item: components get a Basic Information block."""
    rendered = []
    for item in items:
        if not isinstance(item, ComponentItem):
            rendered.append(format_registry_item(item))
            continue

        lines = [f"## {item.name} (`{item.add_command_argument}`)", ""]
        if item.description:
            lines.extend([item.description, ""])

        lines.append("### Basic Information")
        lines.append(f"- **Registry:** {item.registry_name} (`{item.registry_slug}`)")
        lines.append(f"- **Type:** {item.type}")
        lines.append(f"- **Status:** {item.status}")
        if item.introduced_version:
            lines.append(f"- **Introduced:** Version {item.introduced_version}")
        if item.deprecated_version:
            lines.append(f"- **Deprecated:** Version {item.deprecated_version}")
        lines.append("")

        if item.dependencies:
            lines.extend(["### Dependencies", _backticked(item.dependencies), ""])

        if item.example_count:
            plural = "s" if item.example_count > 1 else ""
            lines.append(f"📝 {item.example_count} example{plural} available")

        rendered.append("\n".join(lines))
    return rendered


def format_no_examples_found(query: str, registries: Optional[Sequence[str]] = None) -> str:
    """Guidance shown when an example search matches nothing."""
    where = f" in registries: {', '.join(registries)}" if registries else ""
    return (
        f'No examples found for query "{query}"{where}.\n'
        "\n"
        "The search looks for examples matching the query in:\n"
        '- Example name (e.g., "button-demo", "primary-button")\n'
        '- Example slug (e.g., "button_demo", "primary_button")\n'
        "\n"
        "Try searching with patterns like:\n"
        '- "button" to find examples with "button" in name or slug\n'
        '- "demo" to find all demo examples\n'
        '- "primary" to find primary examples\n'
        "\n"
        "You can also:\n"
        "1. Use search_items_in_registries to find components first\n"
        "2. Check if the registry name is correct (e.g., 'antd', 'shadcn')\n"
        "3. Try a broader search term"
    )


def format_item_examples(items: Sequence[ComponentItem], query: str = "") -> str:
    """
    Render examples grouped by their component.

    Components sharing an add-command argument are merged under one heading.
    Each example gets its own fenced block labelled with its language.
    """
    if not items:
        return format_no_examples_found(query)

    output = f'Examples for "{query}":\n\n' if query else ""

    groups: Dict[str, Dict[str, object]] = {}
    for item in items:
        key = item.add_command_argument or item.slug
        group = groups.setdefault(key, {"component": item, "examples": []})
        group["examples"].extend(item.examples)

    for index, (key, group) in enumerate(groups.items()):
        component = group["component"]
        examples = group["examples"]
        if index > 0:
            output += "\n---\n\n"

        output += f"## {component.name} (`{key}`)\n\n"
        if component.description:
            output += f"{component.description}\n\n"

        if not examples:
            output += "No examples available for this component.\n\n"
            continue

        primary_index = primary_example_index(examples)
        for index, example in enumerate(examples):
            primary = " (Primary)" if index == primary_index else ""
            output += f"### {example.name}{primary}\n\n"
            if example.description:
                output += f"{example.description}\n\n"
            output += f"**Language:** {example.language}\n\n"
            output += f"```{example.language}\n{example.code}\n```\n\n"

    return output
