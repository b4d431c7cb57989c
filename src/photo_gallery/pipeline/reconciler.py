"""Merge thumbnail/full/generic image variants into photo entries.

Files are grouped under a reconciliation key (``directory/cleanBaseName``).
Suffix markers are matched as substrings anywhere in the base name, not only
at its end, so ``beach_small_v2.jpg`` is a thumbnail of ``beach_v2``.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..core.config import COLLISION_POLICIES
from ..core.exceptions import MalformedHeader, ReconciliationConflict
from ..core.logger import get_logger
from ..models.manifest import Orientation, PhotoEntry
from ..utils.dimensions import ImageDimensions, read_image_dimensions
from ..utils.file_utils import ImageFile
from ..utils.text import natural_sort_key, strip_marker, to_kebab_case, to_title_case

logger = get_logger(__name__)

UNTITLED_PHOTO = "Untitled photo"

Prober = Callable[[Path], Optional[ImageDimensions]]


class FileRole(Enum):
    """Role a file plays for its photo."""
    THUMBNAIL = "thumbnail"
    FULL = "full"
    GENERIC = "generic"


@dataclass(frozen=True)
class Classification:
    """Result of matching a base name against the suffix markers."""
    role: FileRole
    clean_base_name: str


@dataclass
class Candidate:
    """A file offered for one role of a photo."""
    path: str
    dimensions: Optional[ImageDimensions] = None


@dataclass
class ReconciliationEntry:
    """Variants collected for one reconciliation key."""
    key: str
    relative_dir: str
    base_name: str
    thumbnail: Optional[Candidate] = None
    full: Optional[Candidate] = None
    generic: Optional[Candidate] = None

    @property
    def thumbnail_candidate(self) -> Optional[Candidate]:
        return self.thumbnail or self.generic

    @property
    def full_candidate(self) -> Optional[Candidate]:
        return self.full or self.generic


@dataclass
class ReconciliationReport:
    """Photos produced by one run plus the problems met on the way."""
    photos: List[PhotoEntry] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class PhotoIdCounter:
    """Sequential ``photo-NNN`` ids for entries whose slug comes out empty.

    One counter belongs to one generation run.
    """

    def __init__(self, prefix: str = "photo", start: int = 1):
        self.prefix = prefix
        self._next = start

    def next_id(self) -> str:
        value = f"{self.prefix}-{self._next:03d}"
        self._next += 1
        return value


def classify_base_name(base_name: str, thumbnail_suffix: str, full_suffix: str) -> Classification:
    """Classify a base name by the first marker it contains.

    The thumbnail marker is checked before the full marker. An empty marker
    never matches.
    """
    if thumbnail_suffix and thumbnail_suffix in base_name:
        return Classification(FileRole.THUMBNAIL, strip_marker(base_name, thumbnail_suffix))

    if full_suffix and full_suffix in base_name:
        return Classification(FileRole.FULL, strip_marker(base_name, full_suffix))

    return Classification(FileRole.GENERIC, base_name)


def derive_entry_key(relative_dir: str, base_name: str) -> str:
    """Build the reconciliation key for a clean base name."""
    if not relative_dir:
        return base_name
    return f"{relative_dir}/{base_name}"


def determine_orientation(width: Optional[int], height: Optional[int]) -> Orientation:
    if not width or not height:
        return Orientation.SQUARE
    if abs(width - height) <= 1:
        return Orientation.SQUARE
    return Orientation.PORTRAIT if height > width else Orientation.LANDSCAPE


def compute_aspect_ratio(width: Optional[int], height: Optional[int]) -> Optional[float]:
    if not width or not height:
        return None
    # Extremely wide images round to 0.0, which is no usable ratio
    ratio = round(height / width, 6)
    return ratio or None


def _usable(dimensions: Optional[ImageDimensions]) -> Optional[ImageDimensions]:
    # Zero-sized headers are treated as unknown
    if dimensions is None or not dimensions.width or not dimensions.height:
        return None
    return dimensions


class PhotoReconciler:
    """Turns discovered image files into ordered :class:`PhotoEntry` records."""

    def __init__(
        self,
        thumbnail_suffix: str = "_small",
        full_suffix: str = "_large",
        collision_policy: str = "overwrite",
        probe_concurrency: int = 8,
        prober: Prober = read_image_dimensions,
    ):
        if collision_policy not in COLLISION_POLICIES:
            raise ValueError(f"Unknown collision policy: {collision_policy}")
        self.thumbnail_suffix = thumbnail_suffix
        self.full_suffix = full_suffix
        self.collision_policy = collision_policy
        self.probe_concurrency = max(1, probe_concurrency)
        self.prober = prober
        self.logger = logger

    async def reconcile(self, files: Sequence[ImageFile]) -> ReconciliationReport:
        """Probe, merge, sort and finalize ``files`` into a report."""
        report = ReconciliationReport()
        probes = await self.probe_files(files)

        entries: Dict[str, ReconciliationEntry] = {}
        for image_file, (dimensions, error) in zip(files, probes):
            if error is not None:
                message = f"Unable to read dimensions for {image_file.absolute_path}: {error}"
                self.logger.warning(message)
                report.warnings.append(message)
            self.merge(entries, image_file, dimensions, report)

        for entry in entries.values():
            if entry.generic and entry.thumbnail and entry.full:
                self._collision(entry.key, FileRole.GENERIC.value, entry.full.path, entry.generic.path, report)

        report.photos = self.finalize_entries(self.sort_entries(entries.values()), PhotoIdCounter())
        self.logger.info(f"Reconciled {len(files)} files into {len(report.photos)} photos")
        return report

    async def probe_files(
        self, files: Sequence[ImageFile]
    ) -> List[Tuple[Optional[ImageDimensions], Optional[Exception]]]:
        """Probe every file concurrently; results keep the order of ``files``."""
        semaphore = asyncio.Semaphore(self.probe_concurrency)

        async def probe_one(image_file: ImageFile):
            async with semaphore:
                try:
                    dimensions = await asyncio.to_thread(self.prober, image_file.absolute_path)
                    return _usable(dimensions), None
                except (MalformedHeader, OSError) as e:
                    return None, e

        return list(await asyncio.gather(*(probe_one(image_file) for image_file in files)))

    def merge(
        self,
        entries: Dict[str, ReconciliationEntry],
        image_file: ImageFile,
        dimensions: Optional[ImageDimensions],
        report: ReconciliationReport,
    ) -> ReconciliationEntry:
        """Fold one file into the keyed accumulator."""
        base_name = Path(image_file.file_name).stem
        classification = classify_base_name(base_name, self.thumbnail_suffix, self.full_suffix)
        clean_base_name = classification.clean_base_name or base_name
        key = derive_entry_key(image_file.relative_dir, clean_base_name)

        entry = entries.get(key)
        if entry is None:
            entry = ReconciliationEntry(key=key, relative_dir=image_file.relative_dir, base_name=clean_base_name)
            entries[key] = entry

        candidate = Candidate(path=image_file.relative_path, dimensions=dimensions)
        role = classification.role.value
        current = getattr(entry, role)

        if current is not None:
            self._collision(key, role, current.path, candidate.path, report)
            if classification.role is FileRole.GENERIC:
                # The first generic file keeps the roles it filled
                return entry

        setattr(entry, role, candidate)
        return entry

    def _collision(self, key: str, role: str, kept: str, replaced: str, report: ReconciliationReport) -> None:
        if self.collision_policy == "error":
            raise ReconciliationConflict(key, role, kept, replaced)

        message = f"Reconciliation key {key!r}: {role} candidate {replaced} collides with {kept}"
        if self.collision_policy == "warn":
            self.logger.warning(message)
            report.warnings.append(message)
        else:
            self.logger.debug(message)

    @staticmethod
    def sort_entries(entries: Iterable[ReconciliationEntry]) -> List[ReconciliationEntry]:
        """Canonical manifest order: natural, case-insensitive key order."""
        return sorted(entries, key=lambda entry: natural_sort_key(entry.key))

    def finalize_entries(
        self, entries: Iterable[ReconciliationEntry], counter: PhotoIdCounter
    ) -> List[PhotoEntry]:
        """Finalize sorted entries, keeping ids unique."""
        photos: List[PhotoEntry] = []
        seen_ids = set()

        for entry in entries:
            photo = finalize_entry(entry, counter)
            if photo is None:
                continue

            if photo.id in seen_ids:
                suffix = 2
                while f"{photo.id}-{suffix}" in seen_ids:
                    suffix += 1
                self.logger.debug(f"Duplicate photo id {photo.id!r} renamed to {photo.id}-{suffix}")
                photo.id = f"{photo.id}-{suffix}"

            seen_ids.add(photo.id)
            photos.append(photo)

        return photos


def finalize_entry(entry: ReconciliationEntry, counter: PhotoIdCounter) -> Optional[PhotoEntry]:
    """Convert an accumulated entry into a :class:`PhotoEntry`.

    Returns ``None`` when the entry has neither a thumbnail nor a full path.
    """
    thumbnail = entry.thumbnail_candidate
    full = entry.full_candidate
    thumbnail_path = (thumbnail.path if thumbnail else "") or (full.path if full else "")
    full_path = (full.path if full else "") or thumbnail_path
    if not thumbnail_path and not full_path:
        return None

    id_seed = " ".join(part for part in (entry.relative_dir, entry.base_name) if part)
    photo_id = to_kebab_case(id_seed) or counter.next_id()

    title = to_title_case(entry.base_name or "").strip() or UNTITLED_PHOTO

    full_dimensions = full.dimensions if full else None
    thumbnail_dimensions = thumbnail.dimensions if thumbnail else None
    dimensions = full_dimensions or thumbnail_dimensions
    width = dimensions.width if dimensions else None
    height = dimensions.height if dimensions else None

    return PhotoEntry(
        id=photo_id,
        title=title,
        thumbnail=thumbnail_path,
        full=full_path,
        orientation=determine_orientation(width, height),
        width=width,
        height=height,
        thumbnail_width=thumbnail_dimensions.width if thumbnail_dimensions else None,
        thumbnail_height=thumbnail_dimensions.height if thumbnail_dimensions else None,
        aspect_ratio=compute_aspect_ratio(width, height),
    )
