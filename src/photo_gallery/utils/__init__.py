"""Utility modules for the photo gallery."""

from .dimensions import ImageDimensions, probe_dimensions, read_image_dimensions
from .file_utils import ImageFile, atomic_write, collect_image_files
from .text import natural_sort_key, normalize_asset_path, to_kebab_case, to_title_case

__all__ = [
    'ImageDimensions',
    'probe_dimensions',
    'read_image_dimensions',
    'ImageFile',
    'atomic_write',
    'collect_image_files',
    'natural_sort_key',
    'normalize_asset_path',
    'to_kebab_case',
    'to_title_case',
]
