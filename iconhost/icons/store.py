"""Filesystem-backed category tree.

Layout is `<root>/<category>/<file>` for flat categories and
`<root>/custom/<slug>/<file>` for custom ones. A directory that holds no
visible files keeps a `.gitkeep` marker so it survives in version control.
"""

import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from ..core.errors import DuplicateFileError, NotFoundError, ValidationError
from ..core.models import IconEntry, format_file_size

logger = logging.getLogger(__name__)

CUSTOM_CONTAINER = "custom"
MARKER_NAME = ".gitkeep"
MARKER_CONTENT = "# This file ensures the folder is tracked by git\n"


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


class CategoryStore:
    def __init__(
        self,
        root,
        supported_formats: Iterable[str] = (".svg", ".png", ".ico", ".webp"),
        url_for: Optional[Callable[[str, str], str]] = None,
    ):
        self.root = Path(root)
        self.supported_formats = {f.lower() for f in supported_formats}
        self.url_for = url_for or (lambda category, name: f"/icons/{category}/{name}")

    # -- paths -----------------------------------------------------------

    def resolve_category_path(self, category: str) -> Path:
        """`custom/<slug>` maps two levels deep, anything else one level."""
        category = (category or "").strip("/")
        if category.startswith(CUSTOM_CONTAINER + "/"):
            path = self.root / CUSTOM_CONTAINER / category[len(CUSTOM_CONTAINER) + 1:]
        else:
            path = self.root / category
        root = self.root.resolve()
        resolved = path.resolve()
        if resolved == root or root not in resolved.parents:
            raise ValidationError("invalid_path", f"category {category!r} escapes the icons root")
        return path

    def _file_path(self, category: str, file_name: str) -> Path:
        directory = self.resolve_category_path(category)
        target = directory / file_name
        if target.resolve().parent != directory.resolve():
            raise ValidationError("invalid_path", f"file name {file_name!r} escapes its category")
        return target

    @staticmethod
    def ensure_directory(path) -> Path:
        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)
        return path

    # -- marker files ----------------------------------------------------

    @staticmethod
    def _has_visible_entries(directory: Path) -> bool:
        return any(not _is_hidden(entry.name) for entry in directory.iterdir())

    def _write_marker(self, directory: Path) -> None:
        marker = directory / MARKER_NAME
        if marker.exists():
            return
        marker.write_text(MARKER_CONTENT)
        logger.debug("Wrote marker in %s", directory)

    def _remove_marker(self, directory: Path) -> None:
        marker = directory / MARKER_NAME
        try:
            marker.unlink()
            logger.debug("Removed marker from %s", directory)
        except FileNotFoundError:
            pass

    # -- writes ----------------------------------------------------------

    def place_file(self, category: str, file_name: str, data: bytes) -> Path:
        """Store `data` as `<category>/<file_name>` without ever overwriting.

        The bytes go to a hidden temp file in the target directory first and
        are hard-linked into place, so the final name either does not exist or
        holds the complete file. An existing target raises DuplicateFileError.
        """
        target = self._file_path(category, file_name)
        directory = self.ensure_directory(target.parent)

        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".upload-", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            try:
                os.link(tmp_name, target)
            except FileExistsError:
                raise DuplicateFileError(
                    "file_exists", f"File {file_name} already exists in {category}"
                ) from None
        finally:
            os.unlink(tmp_name)

        self._remove_marker(directory)
        return target

    def remove_file(self, category: str, file_name: str) -> None:
        target = self._file_path(category, file_name)
        if not target.is_file():
            raise NotFoundError("not_found", f"File {file_name} not found in {category}")
        try:
            target.unlink()
        except FileNotFoundError:
            raise NotFoundError("not_found", f"File {file_name} not found in {category}") from None

        directory = target.parent
        if not self._has_visible_entries(directory):
            self._write_marker(directory)

    def init_structure(self, categories: Iterable[str]) -> List[str]:
        """Create the given category folders, marking the empty ones."""
        created = []
        for category in categories:
            directory = self.resolve_category_path(category)
            if not directory.exists():
                created.append(category)
            self.ensure_directory(directory)
            if not self._has_visible_entries(directory):
                self._write_marker(directory)
        return created

    # -- reads -----------------------------------------------------------

    def _iter_category_dirs(self) -> Iterator[Tuple[str, Path]]:
        if not self.root.is_dir():
            return
        for entry in sorted(self.root.iterdir()):
            if _is_hidden(entry.name) or not entry.is_dir():
                continue
            if entry.name == CUSTOM_CONTAINER:
                subfolders = [
                    sub for sub in sorted(entry.iterdir())
                    if sub.is_dir() and not _is_hidden(sub.name)
                ]
                if subfolders:
                    for sub in subfolders:
                        yield f"{CUSTOM_CONTAINER}/{sub.name}", sub
                    continue
            yield entry.name, entry

    def _icon_files(self, directory: Path) -> Iterator[Path]:
        for entry in sorted(directory.iterdir()):
            if _is_hidden(entry.name) or not entry.is_file():
                continue
            if entry.suffix.lower() not in self.supported_formats:
                continue
            yield entry

    def _entry(self, category: str, path: Path) -> IconEntry:
        stat = path.stat()
        return IconEntry(
            name=path.name,
            category=category,
            size=stat.st_size,
            size_human=format_file_size(stat.st_size),
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
            url=self.url_for(category, path.name),
        )

    def list_all(self) -> List[IconEntry]:
        return [
            self._entry(category, path)
            for category, directory in self._iter_category_dirs()
            for path in self._icon_files(directory)
        ]

    def list_categories(self) -> List[str]:
        return [category for category, _ in self._iter_category_dirs()]

    def get_structure(self) -> Dict[str, List[str]]:
        return {
            category: [path.name for path in self._icon_files(directory)]
            for category, directory in self._iter_category_dirs()
        }

    def get_info(self, category: str, file_name: str) -> IconEntry:
        target = self._file_path(category, file_name)
        if not target.is_file():
            raise NotFoundError("not_found", f"File {file_name} not found in {category}")
        return self._entry(category, target)
