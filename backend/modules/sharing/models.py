"""
Sharing module data models.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Share(BaseModel):
    """A shared image. Written once, never modified."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, frozen=True)

    id: str
    image_url: str = Field(..., description="Public download URL of the image")
    filter_id: str
    filter_name: str
    user_id: Optional[str] = None
    username: Optional[str] = None
    created_at: Optional[datetime] = None


class ShareMethod(str, Enum):
    SHARED = "shared"  # Handed to the platform's share sheet
    LINK = "link"      # Uploaded; a link was created


class ShareResult(BaseModel):
    method: ShareMethod
    link: Optional[str] = None
    share_id: Optional[str] = None


@dataclass(frozen=True)
class ShareFile:
    """An image file offered to a native share capability."""

    filename: str
    mime_type: str
    data: bytes
