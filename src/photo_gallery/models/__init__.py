"""Manifest data models."""

from .manifest import GalleryManifest, Orientation, PhotoEntry, SCHEMA_REF, manifest_json_schema

__all__ = [
    'GalleryManifest',
    'Orientation',
    'PhotoEntry',
    'SCHEMA_REF',
    'manifest_json_schema',
]
