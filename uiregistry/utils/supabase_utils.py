"""
Supabase utilities for connecting to the registry database.
This module provides the client factory, table names and JSON helpers.
"""
import json
from typing import Dict, List, Optional, Any

from supabase import create_client, Client

from uiregistry.core.config import config

# Table names
REGISTRIES_TABLE = "ui_registry"
COMPONENTS_TABLE = "ui_component"
EXAMPLES_TABLE = "ui_component_example"

# Columns stored as jsonb / text[] that may come back serialized
JSON_FIELDS = ("metadata",)
LIST_FIELDS = ("dependencies",)


class SupabaseClient:
    """
    A wrapper around the Supabase client that builds a connection from
    configuration. The resulting client is handed to ``Database`` explicitly.
    """

    def __init__(self, url: Optional[str] = None, key: Optional[str] = None):
        """Initialize the Supabase client with credentials from configuration."""
        supabase_url = url or config.supabase_url
        supabase_key = key or config.supabase_key

        if not supabase_url or not supabase_key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY environment variables must be set")

        self.client = create_client(supabase_url, supabase_key)

    @classmethod
    def get_client(cls, url: Optional[str] = None, key: Optional[str] = None) -> Client:
        """Create a new Supabase client."""
        return cls(url, key).client


def parse_json_fields(record: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of a row with JSON columns decoded and defaults filled.

    Args:
        record: Raw row returned by the store

    Returns:
        Row with ``metadata`` as a dict and ``dependencies`` as a list
    """
    parsed = dict(record)
    for field in JSON_FIELDS:
        if field not in parsed:
            continue
        value = parsed[field]
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                value = {}
        parsed[field] = value if value is not None else {}
    for field in LIST_FIELDS:
        if field not in parsed:
            continue
        value = parsed[field]
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                value = [value]
        parsed[field] = list(value) if value is not None else []
    return parsed


def serialize_json_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """Prepare a payload for insert/update: enums to values, datetimes to ISO strings."""
    serialized = {}
    for key, value in data.items():
        if hasattr(value, "value"):
            value = value.value
        elif hasattr(value, "isoformat"):
            value = value.isoformat()
        serialized[key] = value
    return serialized


def ilike_pattern(text: str) -> str:
    """
    Build a quoted PostgREST ``ilike`` operand matching ``text`` as a substring.

    The value is double-quoted so commas and parentheses survive inside
    ``or`` filters.
    """
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"%{escaped}%"'


def or_ilike(columns: List[str], text: str) -> str:
    """Build an ``or`` filter string matching ``text`` in any of ``columns``."""
    pattern = ilike_pattern(text)
    return ",".join(f"{column}.ilike.{pattern}" for column in columns)
