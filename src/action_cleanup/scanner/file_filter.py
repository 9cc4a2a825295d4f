"""
Candidate file selection for reference extraction.
Uses PathSpec for .gitignore-style pattern matching and identify for text file detection.
"""

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union
from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern
from identify import identify
import logging
import os

from ..config import ScanConfig
from .extractor import FileCategory

logger = logging.getLogger(__name__)


def _base_dir(pattern: str) -> str:
    """Leading literal directory of a glob pattern, e.g. 'views' for 'views/**/*.ejs'."""
    head = pattern.lstrip("/").split("/", 1)[0]
    if any(ch in head for ch in "*?["):
        return ""
    return head


class FileFilter:
    """Classifies project files into extraction categories."""

    def __init__(self, config: Optional[ScanConfig] = None):
        """
        Build one pattern set per category plus the exclusion set.

        Args:
            config: Scan configuration holding the glob patterns
        """
        config = config or ScanConfig()
        self.category_patterns: Dict[FileCategory, List[str]] = {
            FileCategory.MARKUP: list(config.markup_patterns),
            FileCategory.STRUCTURED: list(config.structured_patterns),
            FileCategory.SCRIPT: list(config.script_patterns),
        }
        self.specs: Dict[FileCategory, PathSpec] = {
            category: PathSpec.from_lines(GitWildMatchPattern, patterns)
            for category, patterns in self.category_patterns.items()
        }
        self.exclude_spec = PathSpec.from_lines(
            GitWildMatchPattern, config.exclude_patterns
        )

    def is_excluded(self, relative_path: str, is_dir: bool = False) -> bool:
        """Check if a project-relative path matches an exclusion pattern."""
        if is_dir:
            relative_path = relative_path.rstrip("/") + "/"
        return self.exclude_spec.match_file(relative_path)

    def classify(self, relative_path: str) -> Optional[FileCategory]:
        """
        Decide which extraction strategy applies to a file.

        Args:
            relative_path: POSIX path relative to the project root

        Returns:
            The first matching category, or None if the file is not a candidate
        """
        if self.is_excluded(relative_path):
            return None
        for category, spec in self.specs.items():
            if spec.match_file(relative_path):
                return category
        return None

    def is_text_file(self, path: Union[str, Path]) -> bool:
        """
        Check if a file is a text file using identify.

        Args:
            path: Path to the file to check

        Returns:
            bool: True if file is text, False otherwise
        """
        try:
            tags = identify.tags_from_path(str(path))
            return "text" in tags
        except Exception as e:
            logger.debug(f"identify failed for {path}: {e}")
            return False

    def base_dirs(self) -> List[str]:
        """Top-level directories that need to be walked to cover every pattern."""
        bases = set()
        for patterns in self.category_patterns.values():
            for pattern in patterns:
                bases.add(_base_dir(pattern))
        # An unanchored pattern forces a walk of the whole project
        if "" in bases:
            return [""]
        return sorted(bases)

    def iter_candidates(self, root_dir: Union[str, Path]) -> Iterator[tuple]:
        """
        Yield (relative_path, category) for every candidate file, sorted per directory.

        Args:
            root_dir: Project root

        Yields:
            Tuples of POSIX relative path and FileCategory
        """
        root_path = Path(root_dir)
        seen = set()

        for base in self.base_dirs():
            start = root_path / base if base else root_path
            if not start.is_dir():
                continue

            for dirpath, dirnames, filenames in os.walk(
                start, onerror=self._walk_error
            ):
                rel_dir = Path(dirpath).relative_to(root_path).as_posix()
                rel_dir = "" if rel_dir == "." else rel_dir

                dirnames[:] = sorted(
                    d
                    for d in dirnames
                    if not self.is_excluded(f"{rel_dir}/{d}" if rel_dir else d, True)
                )

                for name in sorted(filenames):
                    rel_path = f"{rel_dir}/{name}" if rel_dir else name
                    if rel_path in seen:
                        continue
                    seen.add(rel_path)

                    category = self.classify(rel_path)
                    if category is None:
                        continue
                    if not self.is_text_file(root_path / rel_path):
                        logger.debug(f"Skipping non-text file {rel_path}")
                        continue
                    yield rel_path, category

    @staticmethod
    def _walk_error(error: OSError):
        logger.warning(f"Could not read directory {error.filename}: {error.strerror}")
