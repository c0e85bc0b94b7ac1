"""Data schemas for the UI component registry."""

from enum import Enum
from typing import List, Optional, Dict, Any, TypeVar, Generic
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from datetime import datetime


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while using snake_case attributes."""

    class Config:
        """Pydantic configuration for the model."""

        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# Enumerations
class ComponentType(str, Enum):
    """Closed set of component categories."""

    INPUT_CONTROL = "input-control"  # buttons, checkboxes, text fields, pickers
    CONTAINER = "container"  # cards, dialogs, accordions
    NAVIGATIONAL = "navigational"  # menus, breadcrumbs, tabs, pagination
    INFORMATIONAL = "informational"  # alerts, badges, progress, tooltips
    BUSINESS = "business"

    @classmethod
    def _missing_(cls, value):
        # Rows written by earlier tooling use the short form
        if value == "biz":
            return cls.BUSINESS
        return None


class ComponentStatus(str, Enum):
    """Lifecycle status of a component."""

    STABLE = "stable"
    BETA = "beta"
    ALPHA = "alpha"
    DEPRECATED = "deprecated"


class ExampleLanguage(str, Enum):
    """Canonical languages for example code."""

    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    TSX = "tsx"
    JSX = "jsx"
    HTML = "html"
    CSS = "css"


# Stored records
class Registry(CamelModel):
    """Registry row, optionally with its components."""

    id: int
    name: str
    slug: str
    description: Optional[str] = None
    framework: str
    npm_package: Optional[str] = None
    install_command: Optional[str] = None
    docs_url: Optional[str] = None
    is_active: bool = True
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    components: Optional[List["Component"]] = None


class Component(CamelModel):
    """Component row, optionally with its registry and examples."""

    id: int
    registry_id: int
    name: str
    slug: str
    type: str
    status: str = ComponentStatus.STABLE.value
    description: Optional[str] = None
    dependencies: List[str] = Field(default_factory=list)
    introduced_version: Optional[str] = None
    deprecated_version: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    registry: Optional[Registry] = None
    examples: Optional[List["Example"]] = None


class Example(CamelModel):
    """Example row, optionally with its component."""

    id: int
    component_id: int
    name: str
    slug: str
    description: Optional[str] = None
    language: Optional[str] = None
    code: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    component: Optional[Component] = None


# Create / update payloads. Required fields are checked by the service so the
# client gets a single message listing every missing field.
class RegistryCreate(CamelModel):
    """Model for creating a registry."""

    name: Optional[str] = None
    slug: Optional[str] = None
    framework: Optional[str] = None
    description: Optional[str] = None
    npm_package: Optional[str] = None
    install_command: Optional[str] = None
    docs_url: Optional[str] = None
    is_active: bool = True
    metadata: Dict[str, Any] = Field(default_factory=dict)


class RegistryUpdate(CamelModel):
    """Model for updating a registry; only supplied fields change."""

    name: Optional[str] = None
    slug: Optional[str] = None
    framework: Optional[str] = None
    description: Optional[str] = None
    npm_package: Optional[str] = None
    install_command: Optional[str] = None
    docs_url: Optional[str] = None
    is_active: Optional[bool] = None
    metadata: Optional[Dict[str, Any]] = None


class ComponentCreate(CamelModel):
    """Model for creating a component inside a registry given by ID or slug."""

    registry_id: Optional[int] = None
    registry_slug: Optional[str] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    type: Optional[ComponentType] = None
    description: Optional[str] = None
    dependencies: List[str] = Field(default_factory=list)
    status: ComponentStatus = ComponentStatus.STABLE
    introduced_version: Optional[str] = None
    deprecated_version: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ComponentUpdate(CamelModel):
    """Model for updating a component; only supplied fields change."""

    name: Optional[str] = None
    slug: Optional[str] = None
    type: Optional[ComponentType] = None
    description: Optional[str] = None
    dependencies: Optional[List[str]] = None
    status: Optional[ComponentStatus] = None
    introduced_version: Optional[str] = None
    deprecated_version: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class ExampleCreate(CamelModel):
    """Model for creating an example under a component."""

    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    language: Optional[ExampleLanguage] = None
    code: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ExampleUpdate(CamelModel):
    """Model for updating an example; only supplied fields change."""

    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    language: Optional[ExampleLanguage] = None
    code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


# Search result items
class ExampleItem(CamelModel):
    """Example as returned by searches."""

    id: Optional[int] = None
    component_id: Optional[int] = None
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    language: str = ExampleLanguage.TYPESCRIPT.value
    code: str
    # Display-only flag; not a stored column
    is_primary: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ComponentItem(CamelModel):
    """Component with its registry denormalized onto it."""

    id: Optional[int] = None
    registry_id: Optional[int] = None
    registry_slug: str = ""
    registry_name: str = ""
    slug: str
    name: str
    type: str
    status: str
    description: Optional[str] = None
    dependencies: List[str] = Field(default_factory=list)
    introduced_version: Optional[str] = None
    deprecated_version: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    example_count: int = 0
    add_command_argument: str
    examples: List[ExampleItem] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RegistryItem(CamelModel):
    """Registry as returned by searches, optionally with nested components."""

    id: Optional[int] = None
    slug: str
    name: str
    description: Optional[str] = None
    framework: str
    npm_package: Optional[str] = None
    install_command: Optional[str] = None
    docs_url: Optional[str] = None
    is_official: bool = False
    component_count: int = 0
    components: Optional[List[ComponentItem]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# Generic type for pagination
T = TypeVar("T")


class SearchResult(CamelModel, Generic[T]):
    """One page of search results with its bookkeeping."""

    items: List[T]
    total_count: int
    limit: int
    offset: int = 0
    has_more: bool


# Pagination Models
class PaginationMetadata(CamelModel):
    """Metadata for paginated responses."""

    total_count: int
    limit: int
    offset: int
    has_more: bool


class ComponentListResponse(CamelModel):
    """Paginated component listing returned by the HTTP API."""

    items: List[ComponentItem]
    pagination: PaginationMetadata


Registry.model_rebuild()
Component.model_rebuild()
Example.model_rebuild()
