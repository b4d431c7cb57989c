"""Manifest assembly and generation."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from ..core.config import Config, get_config
from ..core.exceptions import ValidationError
from ..core.logger import get_logger
from ..models.manifest import GalleryManifest, PhotoEntry
from ..utils.file_utils import atomic_write, collect_image_files, find_default_hero_image
from ..utils.text import is_probably_url, normalize_asset_path
from .reconciler import PhotoReconciler, ReconciliationReport

logger = get_logger(__name__)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def assemble_manifest(
    photos: Sequence[PhotoEntry],
    download_archive: Optional[str] = None,
    hero_eyebrow: Optional[str] = None,
    hero_title: Optional[str] = None,
    hero_subtitle: Optional[str] = None,
    hero_image: Optional[str] = None,
) -> GalleryManifest:
    """Wrap photos and page metadata into a manifest document.

    Blank metadata is omitted. The archive and hero image paths are made
    manifest-relative unless they are URLs.
    """
    return GalleryManifest(
        photos=list(photos),
        download_archive=normalize_asset_path(download_archive) or None,
        hero_eyebrow=_clean(hero_eyebrow),
        hero_title=_clean(hero_title),
        hero_subtitle=_clean(hero_subtitle),
        hero_image=normalize_asset_path(hero_image) or None,
    )


def render_manifest(manifest: GalleryManifest) -> str:
    """Serialize as 2-space indented JSON with a trailing newline."""
    return json.dumps(manifest.to_document(), indent=2, ensure_ascii=False) + "\n"


def write_manifest(manifest: GalleryManifest, output_path: Union[str, Path]) -> bool:
    """Write the manifest atomically; returns False if nothing was written."""
    return atomic_write(output_path, render_manifest(manifest))


@dataclass
class GenerationResult:
    """Outcome of a manifest generation run."""
    manifest: GalleryManifest
    report: ReconciliationReport
    files_scanned: int


class ManifestGenerator:
    """Scans the photo tree and builds the gallery manifest."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or get_config()
        self.logger = logger

    def build_reconciler(self) -> PhotoReconciler:
        return PhotoReconciler(
            thumbnail_suffix=self.config.thumbnail_suffix,
            full_suffix=self.config.full_suffix,
            collision_policy=self.config.collision_policy,
            probe_concurrency=self.config.probe_concurrency,
        )

    async def generate(self) -> GenerationResult:
        """Run discovery, reconciliation and assembly.

        Raises :class:`ValidationError` when the photo root does not exist.
        """
        photos_dir = self.config.photos_dir
        if not photos_dir.is_dir():
            raise ValidationError(f"photos directory not found at {photos_dir}")

        hero_image = normalize_asset_path(self.config.hero_image) or find_default_hero_image(photos_dir)

        image_files = collect_image_files(photos_dir)
        if not image_files:
            self.logger.warning(f"No image files found in {photos_dir}. Generated manifest will be empty.")

        # A local hero image is page chrome, not a gallery photo
        if hero_image and not is_probably_url(hero_image):
            image_files = [f for f in image_files if f.relative_path != hero_image]

        report = await self.build_reconciler().reconcile(image_files)
        if not report.photos:
            self.logger.warning("No photos detected. Generated manifest will be empty.")

        manifest = assemble_manifest(
            report.photos,
            download_archive=self.config.archive,
            hero_eyebrow=self.config.hero_eyebrow,
            hero_title=self.config.hero_title,
            hero_subtitle=self.config.hero_subtitle,
            hero_image=hero_image,
        )
        return GenerationResult(manifest=manifest, report=report, files_scanned=len(image_files))
