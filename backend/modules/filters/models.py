"""
Filters module data models.

These models define the core data structures for the filter marketplace.
Attribute names are snake_case; the camelCase aliases are the field names
used in the document store and in JSON payloads.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FilterCategory(str, Enum):
    """Closed category taxonomy for filters."""

    USEFUL = "Useful"
    FUN = "Fun"
    AI_GENERATED = "AI Generated"

    @classmethod
    def parse(cls, value: Any) -> "FilterCategory":
        """
        Decode a stored category.

        Older documents used "Trending" for generated filters; anything
        unknown or missing is treated as Useful.
        """
        if isinstance(value, cls):
            return value
        if value == "Trending":
            return cls.AI_GENERATED
        try:
            return cls(value)
        except ValueError:
            return cls.USEFUL


class FilterType(str, Enum):
    """How many input images a filter consumes."""

    SINGLE = "single"  # One photo in, one photo out
    MERGE = "merge"    # Several photos merged into one

    @classmethod
    def parse(cls, value: Any) -> "FilterType":
        try:
            return cls(value)
        except ValueError:
            return cls.SINGLE


# Fields a partial update may never carry
PROTECTED_FIELDS = frozenset({"id", "userId", "username", "accessCount", "createdAt"})

# Fields a create must supply
REQUIRED_CREATE_FIELDS = ("name", "description", "prompt", "preview_image_url")


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class Filter(_CamelModel):
    """
    A named image-transformation recipe.

    `id`, `created_at` and `user_id`/`username` never change after creation;
    `access_count` only grows, through the store-side increment.
    """

    id: str = Field(..., description="Document id, assigned on creation")
    name: str = Field(..., description="Display name")
    description: str = Field(..., description="One-line description")
    prompt: str = Field(..., description="Instruction consumed by the image model")
    preview_image_url: str = Field(..., description="Preview URL or data URL")
    category: FilterCategory = Field(default=FilterCategory.USEFUL)
    type: FilterType = Field(default=FilterType.SINGLE)
    user_id: Optional[str] = Field(None, description="Creator uid, when user-created")
    username: Optional[str] = Field(None, description="Creator display name")
    access_count: int = Field(default=0, ge=0, description="Times the filter was opened")
    created_at: Optional[datetime] = Field(None, description="Server-assigned creation time")


class FilterCreate(_CamelModel):
    """Payload for creating a filter. Store-assigned fields are absent."""

    name: str = ""
    description: str = ""
    prompt: str = ""
    preview_image_url: str = ""
    category: Optional[FilterCategory] = None
    type: FilterType = FilterType.SINGLE
    user_id: Optional[str] = None
    username: Optional[str] = None

    def missing_fields(self) -> list[str]:
        """Return the camelCase names of required fields that are blank."""
        return [
            to_camel(field)
            for field in REQUIRED_CREATE_FIELDS
            if not str(getattr(self, field) or "").strip()
        ]


class FilterUpdate(_CamelModel):
    """
    A field-masked partial update.

    Only the fields a caller explicitly supplies are part of the mask, so
    every other stored field is left untouched. Identity and audit fields
    have no slot here and are dropped when building from a mapping.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    name: Optional[str] = None
    description: Optional[str] = None
    prompt: Optional[str] = None
    preview_image_url: Optional[str] = None
    category: Optional[FilterCategory] = None
    type: Optional[FilterType] = None

    @classmethod
    def from_fields(cls, fields: "Mapping[str, Any] | BaseModel") -> "FilterUpdate":
        """
        Build an update from a mapping or another model (e.g. a Filter).

        None values count as "not supplied".
        """
        if isinstance(fields, FilterUpdate):
            return fields
        if isinstance(fields, BaseModel):
            data = fields.model_dump(by_alias=True)
        else:
            data = dict(fields)
        supplied = {
            key: value
            for key, value in data.items()
            if value is not None and key not in PROTECTED_FIELDS
        }
        return cls.model_validate(supplied)

    def field_mask(self) -> list[str]:
        """CamelCase paths of the supplied fields, in declaration order."""
        return [
            to_camel(name)
            for name in type(self).model_fields
            if name in self.model_fields_set and getattr(self, name) is not None
        ]

    def to_store_fields(self) -> dict[str, Any]:
        """Values for the masked fields, keyed by their store names."""
        return {
            to_camel(name): getattr(self, name)
            for name in type(self).model_fields
            if name in self.model_fields_set and getattr(self, name) is not None
        }


class ViewName(str, Enum):
    """Navigational views of the client."""

    MARKETPLACE = "marketplace"
    APPLY = "apply"
    CREATE = "create"
    AUTH = "auth"
    SHARED = "shared"


class ViewState(BaseModel):
    """The current view, with the filter or share it targets."""

    model_config = {"frozen": True}

    view: ViewName = ViewName.MARKETPLACE
    filter: Optional[Filter] = None
    share_id: Optional[str] = None

    @classmethod
    def marketplace(cls) -> "ViewState":
        return cls(view=ViewName.MARKETPLACE)

    @classmethod
    def apply(cls, filter: Filter) -> "ViewState":
        return cls(view=ViewName.APPLY, filter=filter)

    @classmethod
    def create(cls) -> "ViewState":
        return cls(view=ViewName.CREATE)

    @classmethod
    def auth(cls) -> "ViewState":
        return cls(view=ViewName.AUTH)

    @classmethod
    def shared(cls, share_id: str) -> "ViewState":
        return cls(view=ViewName.SHARED, share_id=share_id)
