"""
Detection and removal of directories that hold no files.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Union
import logging
import os

from .index import EmptyFolder

logger = logging.getLogger(__name__)


@dataclass
class FolderDeletionResult:
    deleted: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)


def is_directory_empty(directory: Union[str, Path]) -> bool:
    """
    Check whether a directory transitively contains no files.

    Symlinks count as content and are never followed. Unreadable
    directories are reported as not empty.
    """
    directory = Path(directory)
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        logger.warning(f"Could not read directory {directory}: {e}")
        return False

    for entry in entries:
        if entry.is_symlink() or not entry.is_dir():
            return False
        if not is_directory_empty(entry):
            return False
    return True


def _remove_empty_tree(directory: Path):
    """Remove a directory and its empty subdirectories; raises OSError if any holds a file."""
    def fail(error: OSError):
        raise error

    for dirpath, _, _ in os.walk(directory, topdown=False, onerror=fail):
        os.rmdir(dirpath)


class EmptyFolderFinder:
    """Finds empty folders under the action directories."""

    def __init__(self, project_root: Union[str, Path], directories: Iterable[str]):
        self.project_root = Path(project_root)
        self.directories = [self.project_root / d for d in directories]

    async def find(self) -> List[EmptyFolder]:
        """
        Find every empty directory below the configured roots.

        The roots themselves are never reported, even when they are empty,
        so a cleanup cannot remove app/api or app/lib.

        Returns:
            Empty folders in post-order (children before their parent)
        """
        found: List[Path] = []
        for root in self.directories:
            if not root.is_dir():
                continue
            for child in self._subdirectories(root):
                self._collect(child, found)

        return [
            EmptyFolder(
                path=str(folder),
                relative_path=folder.relative_to(self.project_root).as_posix(),
            )
            for folder in found
        ]

    def _subdirectories(self, directory: Path) -> List[Path]:
        return sorted(
            p for p in directory.iterdir() if p.is_dir() and not p.is_symlink()
        )

    def _collect(self, directory: Path, found: List[Path]) -> bool:
        """Post-order walk; returns True if directory is empty."""
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            logger.warning(f"Could not read directory {directory}: {e}")
            return False

        empty = True
        for entry in entries:
            if entry.is_dir() and not entry.is_symlink():
                if not self._collect(entry, found):
                    empty = False
            else:
                empty = False

        if empty:
            found.append(directory)
        return empty

    async def delete(self, folder_paths: Iterable[Union[str, Path]]) -> FolderDeletionResult:
        """
        Delete folders deepest-first, re-checking each one right before removal.

        Args:
            folder_paths: Folders previously reported by find()

        Returns:
            FolderDeletionResult with deleted, skipped and failed paths
        """
        result = FolderDeletionResult()
        ordered = sorted(
            (Path(p) for p in folder_paths), key=lambda p: len(p.parts), reverse=True
        )

        for folder in ordered:
            try:
                if not folder.exists():
                    # Removed along with an already deleted parent
                    result.skipped.append(str(folder))
                    continue
                if not is_directory_empty(folder):
                    logger.info(f"Folder {folder} is no longer empty, skipping")
                    result.skipped.append(str(folder))
                    continue
                _remove_empty_tree(folder)
                result.deleted.append(str(folder))
            except OSError as e:
                logger.error(f"Failed to delete folder {folder}: {e}")
                result.errors.append({"path": str(folder), "error": str(e)})

        return result
