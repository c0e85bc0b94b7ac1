#!/usr/bin/env python3
"""Database initialization script for the UI component registry.

This script creates the registry, component and example tables plus their
indexes in the Supabase Postgres database.
"""

import os
import asyncio
import asyncpg
from pathlib import Path
from dotenv import load_dotenv
from loguru import logger
from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.panel import Panel
from rich.box import HEAVY
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn

from uiregistry.db.schema import SCHEMA, create_index_sql, create_table_sql, index_name

# Setup logging to file only (silent console)
log_dir = Path("logs")
log_dir.mkdir(exist_ok=True)
logger.remove()
logger.add(log_dir / "db_init_{time}.log", rotation="10 MB")

# Initialize Rich console
console = Console()

# Load environment variables
load_dotenv()

# Database connection parameters
DB_CONNECTION_STRING = os.getenv("SUPABASE_CONNECTION_STRING")
DB_HOST = os.getenv("SUPABASE_HOST")
DB_PASSWORD = os.getenv("SUPABASE_PASSWORD")
DB_PORT = os.getenv("SUPABASE_PORT", "5432")
DB_USER = os.getenv("SUPABASE_USER", "postgres")
DB_NAME = os.getenv("SUPABASE_DB_NAME", "postgres")


async def connect():
    """Open an asyncpg connection from the configured parameters."""
    if not DB_CONNECTION_STRING and (not DB_HOST or not DB_PASSWORD):
        raise ValueError(
            "Database connection parameters missing. Set SUPABASE_CONNECTION_STRING "
            "or both SUPABASE_HOST and SUPABASE_PASSWORD"
        )
    if DB_CONNECTION_STRING:
        return await asyncpg.connect(DB_CONNECTION_STRING)
    return await asyncpg.connect(
        user=DB_USER,
        password=DB_PASSWORD,
        database=DB_NAME,
        host=DB_HOST,
        port=DB_PORT,
    )


async def create_tables():
    """Create all required tables and indexes."""
    console.print("\n")
    console.print(
        Panel.fit(
            "[bold green]UI Component Registry[/bold green]\nDatabase Initialization",
            title="🧩 Registry",
            border_style="green",
        )
    )
    console.print("\n")

    try:
        conn = await connect()
        logger.info("Database connection established")
    except Exception as e:
        console.print(
            Panel(
                f"[bold red]Failed to connect to database:[/bold red]\n{str(e)}",
                title="❌ Connection Error",
                border_style="red",
            )
        )
        logger.error(f"Database connection failed: {str(e)}")
        raise

    try:
        results_table = Table(
            title="[bold cyan]Registry Tables[/bold cyan]",
            show_header=True,
            header_style="bold magenta",
            border_style="bright_blue",
            box=HEAVY,
        )
        results_table.add_column("Table", style="bright_green")
        results_table.add_column("Status", justify="center")

        table_count = len(SCHEMA["tables"])
        success_count = 0

        with Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TextColumn("[bold]{task.percentage:.0f}%"),
            console=console,
        ) as progress:
            tables_task = progress.add_task("[yellow]Creating tables...", total=table_count)

            # Tables are listed parent-first so foreign keys resolve
            for table in SCHEMA["tables"]:
                try:
                    await conn.execute(create_table_sql(table))
                    results_table.add_row(
                        Text(table["name"], style="green"),
                        Text("✅", style="bold bright_green"),
                    )
                    success_count += 1
                except Exception as e:
                    results_table.add_row(
                        Text(table["name"], style="dim"), Text("❌", style="bold red")
                    )
                    logger.error(f"Failed to create table {table['name']}: {str(e)}")

                progress.update(tables_task, advance=1)

        console.print(results_table)

        index_table = Table(
            title="[bold cyan]Database Indexes[/bold cyan]",
            show_header=True,
            header_style="bold magenta",
            border_style="bright_blue",
            box=HEAVY,
        )
        index_table.add_column("Index", style="bright_yellow")
        index_table.add_column("Table", style="bright_green")
        index_table.add_column("Status", justify="center")

        index_count = len(SCHEMA["indexes"])
        index_success_count = 0

        for index in SCHEMA["indexes"]:
            name = index_name(index)
            try:
                await conn.execute(create_index_sql(index))
                index_table.add_row(
                    Text(name, style="yellow"),
                    Text(index["table"], style="green"),
                    Text("✅", style="bold bright_green"),
                )
                index_success_count += 1
            except Exception as e:
                index_table.add_row(
                    Text(name, style="dim"),
                    Text(index["table"], style="dim"),
                    Text("❌", style="bold red"),
                )
                logger.error(f"Failed to create index {name}: {str(e)}")

        console.print(index_table)

        console.print("\n")
        console.print(
            Panel(
                f"[bold green]Database Initialization Complete![/bold green]\n\n"
                f"[green]✓[/green] {success_count}/{table_count} Tables\n"
                f"[green]✓[/green] {index_success_count}/{index_count} Indexes",
                title="✅ Success" if success_count == table_count else "⚠️ Partial",
                border_style="green" if success_count == table_count else "yellow",
            )
        )
    finally:
        await conn.close()
        logger.info("Database connection closed")


async def main():
    """Execute the database initialization process."""
    try:
        await create_tables()
    except Exception as e:
        logger.error(f"Error in main: {str(e)}")
        raise


if __name__ == "__main__":
    asyncio.run(main())
