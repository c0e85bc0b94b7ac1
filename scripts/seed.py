#!/usr/bin/env python3
"""Seed a running registry API with sample registries, components and examples.

Usage:
    python scripts/seed.py                  # against API_BASE_URL
    python scripts/seed.py --base-url http://localhost:3000
"""

from typing import Any, Dict, List

import httpx
import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.box import HEAVY

from uiregistry.core.config import config

console = Console()

REGISTRIES: List[Dict[str, Any]] = [
    {
        "name": "shadcn/ui",
        "slug": "shadcn",
        "description": "Beautifully designed components built with Radix UI and Tailwind CSS.",
        "framework": "react",
        "npmPackage": "shadcn-ui",
        "installCommand": "npx shadcn-ui@latest init",
        "docsUrl": "https://ui.shadcn.com/docs",
        "isActive": True,
        "metadata": {"style": "default", "rsc": True, "tsx": True},
    },
    {
        "name": "Ant Design",
        "slug": "antd",
        "description": "A UI library for React with comprehensive design resources.",
        "framework": "react",
        "npmPackage": "antd",
        "installCommand": "npm install antd",
        "docsUrl": "https://ant.design/docs",
        "isActive": True,
        "metadata": {"version": "5.0.0", "typescript": True},
    },
    {
        "name": "Chakra UI",
        "slug": "chakra",
        "description": "Simple, modular and accessible component library for React applications.",
        "framework": "react",
        "npmPackage": "@chakra-ui/react",
        "installCommand": "npm install @chakra-ui/react @emotion/react @emotion/styled framer-motion",
        "docsUrl": "https://chakra-ui.com/docs",
        "isActive": True,
        "metadata": {"version": "2.8.0", "emotion": True},
    },
]

# Component payloads; "examples" is posted separately to each created component
COMPONENTS: List[Dict[str, Any]] = [
    {
        "registrySlug": "shadcn",
        "name": "Button",
        "slug": "button",
        "type": "input-control",
        "description": "A button component with multiple variants and sizes.",
        "dependencies": ["@radix-ui/react-slot"],
        "metadata": {"importPath": "@/components/ui/button"},
        "examples": [
            {
                "name": "Primary Button",
                "slug": "primary-button",
                "description": "A primary button example",
                "language": "tsx",
                "code": 'import { Button } from "@/components/ui/button"\n\n'
                "export function PrimaryButton() {\n"
                "  return <Button>Click me</Button>\n"
                "}",
            },
            {
                "name": "Button Variants",
                "slug": "button-variants",
                "description": "All button variants side by side",
                "language": "tsx",
                "code": 'import { Button } from "@/components/ui/button"\n\n'
                "export function ButtonVariants() {\n"
                "  return (\n"
                "    <div className=\"flex gap-2\">\n"
                "      <Button variant=\"secondary\">Secondary</Button>\n"
                "      <Button variant=\"outline\">Outline</Button>\n"
                "      <Button variant=\"ghost\">Ghost</Button>\n"
                "    </div>\n"
                "  )\n"
                "}",
            },
        ],
    },
    {
        "registrySlug": "shadcn",
        "name": "Input",
        "slug": "input",
        "type": "input-control",
        "description": "A versatile input component for text, email, password, and more.",
        "metadata": {"importPath": "@/components/ui/input"},
        "examples": [
            {
                "name": "Email Input",
                "slug": "email-input",
                "language": "tsx",
                "code": 'import { Input } from "@/components/ui/input"\n\n'
                "export function EmailInput() {\n"
                '  return <Input type="email" placeholder="Email" />\n'
                "}",
            },
        ],
    },
    {
        "registrySlug": "shadcn",
        "name": "Card",
        "slug": "card",
        "type": "container",
        "description": "A flexible card component for displaying content.",
        "metadata": {"importPath": "@/components/ui/card"},
        "examples": [],
    },
    {
        "registrySlug": "antd",
        "name": "Button",
        "slug": "button",
        "type": "input-control",
        "description": "A button component with multiple types and sizes.",
        "metadata": {"importPath": "antd"},
        "examples": [
            {
                "name": "Antd Button Demo",
                "slug": "antd-button-demo",
                "description": "Basic antd button types",
                "language": "tsx",
                "code": "import { Button, Space } from 'antd';\n\n"
                "const App = () => (\n"
                "  <Space>\n"
                "    <Button type=\"primary\">Primary Button</Button>\n"
                "    <Button>Default Button</Button>\n"
                "  </Space>\n"
                ");\n\n"
                "export default App;",
            },
        ],
    },
    {
        "registrySlug": "antd",
        "name": "Table",
        "slug": "table",
        "type": "container",
        "description": "A table component for displaying structured data with sorting, filtering, and pagination.",
        "metadata": {"importPath": "antd"},
        "examples": [
            {
                "name": "Basic Table",
                "slug": "basic-table",
                "language": "tsx",
                "code": "import { Table } from 'antd';\n\n"
                "const columns = [{ title: 'Name', dataIndex: 'name', key: 'name' }];\n"
                "const data = [{ key: '1', name: 'John Brown' }];\n\n"
                "export default () => <Table columns={columns} dataSource={data} />;",
            },
        ],
    },
    {
        "registrySlug": "antd",
        "name": "DatePicker",
        "slug": "date-picker",
        "type": "input-control",
        "description": "A date picker component for selecting dates with various formats and ranges.",
        "metadata": {"importPath": "antd"},
        "examples": [],
    },
    {
        "registrySlug": "antd",
        "name": "Menu",
        "slug": "menu",
        "type": "navigational",
        "description": "A menu component for navigation with submenus, icons, and grouping.",
        "metadata": {"importPath": "antd"},
        "examples": [],
    },
    {
        "registrySlug": "antd",
        "name": "Message",
        "slug": "message",
        "type": "informational",
        "description": "A message component for displaying global feedback messages.",
        "metadata": {"importPath": "antd"},
        "examples": [],
    },
    {
        "registrySlug": "chakra",
        "name": "Button",
        "slug": "button",
        "type": "input-control",
        "description": "A button component with multiple variants.",
        "metadata": {"importPath": "@chakra-ui/react"},
        "examples": [
            {
                "name": "Chakra Button Demo",
                "slug": "chakra-button-demo",
                "language": "jsx",
                "code": "import { Button } from '@chakra-ui/react'\n\n"
                "export function ChakraButton() {\n"
                "  return <Button colorScheme='blue'>Button</Button>\n"
                "}",
            },
        ],
    },
]


def post(client: httpx.Client, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """POST a payload and return the decoded body, raising on any non-2xx status."""
    response = client.post(endpoint, json=payload)
    if response.is_error:
        raise RuntimeError(f"HTTP {response.status_code}: {response.text}")
    return response.json()


def check_server_health(client: httpx.Client) -> bool:
    try:
        return client.get("/health").status_code == 200
    except httpx.HTTPError:
        return False


def seed(base_url: str) -> Dict[str, int]:
    """Create every sample registry, component and example through the HTTP API."""
    counts = {"registries": 0, "components": 0, "examples": 0}

    with httpx.Client(base_url=base_url, timeout=30.0) as client:
        if not check_server_health(client):
            raise RuntimeError(f"Cannot connect to server at {base_url}; start it with `python cli.py start`")

        for registry in REGISTRIES:
            created = post(client, "/api/registries", registry)
            logger.info(f"Created registry {created['name']} (ID: {created['id']})")
            counts["registries"] += 1

        for component in COMPONENTS:
            payload = {key: value for key, value in component.items() if key != "examples"}
            created = post(client, "/api/components", payload)
            logger.info(f"Created component {created['name']} (ID: {created['id']})")
            counts["components"] += 1

            for example in component["examples"]:
                created_example = post(client, f"/api/components/{created['id']}/examples", example)
                logger.info(f"Created example {created_example['name']} (ID: {created_example['id']})")
                counts["examples"] += 1

    return counts


def main(
    base_url: str = typer.Option(config.api_base_url, help="Base URL of the running registry API")
):
    """Seed the registry API with sample data."""
    console.print(Panel.fit(
        f"[bold green]Seeding registry[/bold green]\n{base_url}",
        title="🌱 Seed",
        border_style="green",
    ))

    try:
        counts = seed(base_url)
    except Exception as e:
        logger.error(f"Seeding failed: {str(e)}")
        console.print(Panel(f"[bold red]{str(e)}[/bold red]", title="❌ Seeding Failed", border_style="red"))
        raise typer.Exit(code=1)

    table = Table(title="[bold cyan]Seeded Records[/bold cyan]", box=HEAVY, header_style="bold magenta")
    table.add_column("Kind", style="bright_green")
    table.add_column("Created", justify="right")
    for kind, count in counts.items():
        table.add_row(kind, str(count))
    console.print(table)


if __name__ == "__main__":
    typer.run(main)
