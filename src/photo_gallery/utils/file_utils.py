"""File system utilities."""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..core.logger import get_logger

logger = get_logger(__name__)

IMAGE_EXTENSIONS = frozenset({'.jpg', '.jpeg', '.png', '.gif', '.webp', '.avif', '.svg'})

HERO_IMAGE_CANDIDATES = ('hero.jpg', 'hero.jpeg', 'hero.png', 'hero.webp')


@dataclass(frozen=True)
class ImageFile:
    """An image discovered under the photo root."""
    absolute_path: Path
    relative_dir: str
    file_name: str
    relative_path: str


def portable_name(name: str) -> str:
    """Replace bytes that are not valid UTF-8 in an OS-decoded name with U+FFFD."""
    return os.fsencode(name).decode('utf-8', 'replace')


def is_image_file(file_name: str) -> bool:
    """Check if the file name carries a gallery image extension."""
    return Path(file_name).suffix.lower() in IMAGE_EXTENSIONS


def collect_image_files(root_dir: Union[str, Path], url_prefix: str = 'photos') -> List[ImageFile]:
    """Recursively collect image files below ``root_dir``.

    Directory entries are visited in name order so repeated runs see the same
    sequence. ``relative_dir`` is relative to ``root_dir``; ``relative_path`` is
    prefixed with ``url_prefix`` and always uses forward slashes. Symbolic links
    are not followed. Names that are not valid UTF-8 carry U+FFFD in place of
    the bad bytes; ``absolute_path`` keeps the real name.
    """
    root = Path(root_dir)
    results: List[ImageFile] = []

    def walk(current: Path, relative_parts: Sequence[str]) -> None:
        with os.scandir(current) as it:
            entries = sorted(it, key=lambda entry: entry.name)

        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                walk(Path(entry.path), [*relative_parts, portable_name(entry.name)])
                continue
            if not entry.is_file(follow_symlinks=False) or not is_image_file(entry.name):
                continue

            file_name = portable_name(entry.name)
            relative_dir = '/'.join(relative_parts)
            relative_path = '/'.join(part for part in (url_prefix, relative_dir, file_name) if part)
            results.append(ImageFile(
                absolute_path=Path(entry.path),
                relative_dir=relative_dir,
                file_name=file_name,
                relative_path=relative_path,
            ))

    walk(root, [])
    return results


def find_default_hero_image(photos_dir: Union[str, Path], url_prefix: str = 'photos') -> Optional[str]:
    """Return the manifest path of the first conventional hero image present."""
    for filename in HERO_IMAGE_CANDIDATES:
        if (Path(photos_dir) / filename).is_file():
            return f"{url_prefix}/{filename}"
    return None


def atomic_write(file_path: Union[str, Path], content: Union[str, bytes],
                 mode: str = 'w', encoding: str = 'utf-8') -> bool:
    """Atomically write content to file.

    The content lands in a temporary sibling first and replaces the target in
    one rename, so readers never observe a partially written file. ``OSError``
    is logged and reported as ``False``; anything else propagates. The
    temporary file is removed either way.
    """
    path = Path(file_path)
    tmp_path: Optional[Path] = None

    try:
        path.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            mode=mode,
            encoding=encoding if 'b' not in mode else None,
            dir=path.parent,
            prefix=f'.{path.name}.',
            suffix='.tmp',
            delete=False
        ) as tmp_file:
            tmp_path = Path(tmp_file.name)
            tmp_file.write(content)

        tmp_path.replace(path)
        tmp_path = None
        logger.debug(f"Atomically wrote file: {path}")

        return True

    except OSError as e:
        logger.error(f"Failed to atomically write {path}: {e}")
        return False

    finally:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
