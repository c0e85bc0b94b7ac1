"""Configuration for the UI component registry, read from the environment."""

import os
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Environment-backed settings shared by the API, MCP server and scripts."""

    app_title: str = "UI Component Registry API"
    app_description: str = "Registries, UI components and usage examples for AI assistants"
    app_version: str = "0.1.0"

    # Store
    supabase_url: Optional[str] = os.environ.get("SUPABASE_URL")
    supabase_key: Optional[str] = os.environ.get("SUPABASE_KEY")

    # Servers
    http_host: str = os.environ.get("HTTP_HOST", "0.0.0.0")
    http_port: int = int(os.environ.get("HTTP_PORT", "3000"))
    mcp_port: int = int(os.environ.get("MCP_PORT", "3001"))
    allowed_origins: List[str] = os.environ.get(
        "ALLOWED_ORIGINS", "http://localhost:3000"
    ).split(",")

    log_level: str = os.environ.get("LOG_LEVEL", "INFO")

    # Seed script target
    api_base_url: str = os.environ.get("API_BASE_URL", "http://localhost:3000")


config = Config()
