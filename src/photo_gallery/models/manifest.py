"""Pydantic schemas for the gallery manifest document."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

SCHEMA_REF = "./gallery.schema.json"


class Orientation(str, Enum):
    """Photo orientation derived from its pixel size."""
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"
    SQUARE = "square"


class PhotoEntry(BaseModel):
    """One photo as consumed by the gallery renderer."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str = Field(..., min_length=1, description="URL-safe slug, unique within the manifest")
    title: str = Field(..., description="Human readable title")
    description: str = Field(default="", description="Free text caption")
    thumbnail: str = Field(..., min_length=1, description="Manifest-relative thumbnail path")
    full: str = Field(..., min_length=1, description="Manifest-relative full-size path")
    orientation: Orientation = Field(default=Orientation.SQUARE)
    width: Optional[int] = Field(default=None, gt=0)
    height: Optional[int] = Field(default=None, gt=0)
    thumbnail_width: Optional[int] = Field(default=None, gt=0, alias="thumbnailWidth")
    thumbnail_height: Optional[int] = Field(default=None, gt=0, alias="thumbnailHeight")
    aspect_ratio: Optional[float] = Field(default=None, gt=0, alias="aspectRatio",
                                          description="height / width, 6 decimals")


class GalleryManifest(BaseModel):
    """Top-level manifest document."""

    model_config = ConfigDict(populate_by_name=True)

    schema_ref: str = Field(default=SCHEMA_REF, alias="$schema")
    photos: List[PhotoEntry] = Field(default_factory=list)
    download_archive: Optional[str] = Field(default=None, alias="downloadArchive")
    hero_eyebrow: Optional[str] = Field(default=None, alias="heroEyebrow")
    hero_title: Optional[str] = Field(default=None, alias="heroTitle")
    hero_subtitle: Optional[str] = Field(default=None, alias="heroSubtitle")
    hero_image: Optional[str] = Field(default=None, alias="heroImage")

    def to_document(self) -> Dict[str, Any]:
        """Serialize with camelCase keys, leaving out unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def manifest_json_schema() -> Dict[str, Any]:
    """JSON Schema describing the manifest document."""
    return GalleryManifest.model_json_schema(by_alias=True)
