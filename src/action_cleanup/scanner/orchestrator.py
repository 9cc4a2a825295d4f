"""
Scan orchestration: discovery, extraction and classification.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging
import os

from ..config import ScanConfig
from ..errors import DiscoveryError, ScanStateError, StructuralParseError
from .empty_folders import EmptyFolderFinder
from .extractor import TEXT_STRATEGIES, FileCategory, extract_structured
from .file_filter import FileFilter
from .index import ActionIndex, ScanResult, rank
from .normalizer import declaration_key

logger = logging.getLogger(__name__)


class ScanState(str, Enum):
    IDLE = "idle"
    DISCOVERING = "discovering"
    EXTRACTING = "extracting"
    CLASSIFIED = "classified"
    FAILED = "failed"


TRANSITIONS = {
    ScanState.IDLE: {ScanState.DISCOVERING},
    ScanState.DISCOVERING: {ScanState.EXTRACTING, ScanState.FAILED},
    ScanState.EXTRACTING: {ScanState.CLASSIFIED, ScanState.FAILED},
    ScanState.CLASSIFIED: {ScanState.IDLE},
    ScanState.FAILED: {ScanState.IDLE},
}


def declares_action(content: Any) -> bool:
    """Only JSON objects with a non-empty exec or steps field are server actions."""
    if not isinstance(content, dict):
        return False
    return any(
        content.get(key) not in (None, False, "", 0) for key in ("exec", "steps")
    )


class Scanner:
    """Builds the action index for a project and classifies every action."""

    def __init__(
        self, project_root: Union[str, Path], config: Optional[ScanConfig] = None
    ):
        self.project_root = Path(project_root)
        self.config = config or ScanConfig()
        self.file_filter = FileFilter(self.config)
        self.state = ScanState.IDLE

    def _advance(self, target: ScanState) -> None:
        if target not in TRANSITIONS[self.state]:
            raise ScanStateError(
                f"Cannot move scan from {self.state.value} to {target.value}"
            )
        logger.debug(f"Scan state {self.state.value} -> {target.value}")
        self.state = target

    async def scan(self) -> ScanResult:
        """
        Run a complete scan of the project.

        Returns:
            ScanResult with actions sorted safe-to-delete first

        Raises:
            DiscoveryError: If the action directories cannot be enumerated
        """
        if self.state != ScanState.IDLE:
            self._advance(ScanState.IDLE)

        index = ActionIndex()
        warnings: List[str] = []
        parsed: Dict[str, Any] = {}

        self._advance(ScanState.DISCOVERING)
        try:
            await self._discover(index, parsed, warnings)
            logger.info(f"Found {len(index)} server actions. Scanning for references...")

            self._advance(ScanState.EXTRACTING)
            await self._extract(index, parsed, warnings)

            actions = rank(index.snapshot())
            finder = EmptyFolderFinder(self.project_root, self.config.action_dirs)
            empty_folders = await finder.find()
        except Exception:
            self._advance(ScanState.FAILED)
            raise

        self._advance(ScanState.CLASSIFIED)
        result = ScanResult(
            actions=actions,
            empty_folders=tuple(empty_folders),
            warnings=tuple(warnings),
            unresolved=index.unresolved(),
        )
        logger.info(
            f"Scan complete: {result.summary.total_actions} actions, "
            f"{result.summary.likely_unused} safe to delete"
        )
        return result

    def _warn(self, warnings: List[str], message: str) -> None:
        logger.warning(message)
        warnings.append(message)

    def _parse_json(
        self, rel_path: str, parsed: Dict[str, Any], warnings: List[str]
    ) -> Optional[Any]:
        """Parse a JSON file once per scan; failures are warned about once."""
        if rel_path in parsed:
            return parsed[rel_path]

        try:
            text = (self.project_root / rel_path).read_text(encoding="utf-8-sig")
            content = json.loads(text)
        except (OSError, ValueError) as e:
            error = StructuralParseError(rel_path, f"could not parse: {e}")
            self._warn(warnings, f"Warning: {error}")
            content = None

        parsed[rel_path] = content
        return content

    def _list_action_files(self, root: Path) -> List[str]:
        def fail(error: OSError):
            raise DiscoveryError(
                f"Could not read action directory {error.filename}: {error.strerror}"
            ) from error

        files = []
        for dirpath, dirnames, filenames in os.walk(root, onerror=fail):
            dirnames.sort()
            for name in filenames:
                if name.endswith(".json"):
                    path = Path(dirpath) / name
                    files.append(path.relative_to(self.project_root).as_posix())
        return sorted(files)

    async def _discover(
        self, index: ActionIndex, parsed: Dict[str, Any], warnings: List[str]
    ) -> None:
        roots = [self.project_root / d for d in self.config.action_dirs]
        existing = [root for root in roots if root.is_dir()]
        if not existing:
            raise DiscoveryError(
                f"No action directories ({', '.join(self.config.action_dirs)}) "
                f"found under {self.project_root}"
            )
        for root in roots:
            if root not in existing:
                self._warn(warnings, f"Warning: action directory {root} does not exist")

        for root in existing:
            for rel_path in self._list_action_files(root):
                content = self._parse_json(rel_path, parsed, warnings)
                if declares_action(content):
                    index.declare(declaration_key(rel_path), rel_path, content)

    async def _extract(
        self, index: ActionIndex, parsed: Dict[str, Any], warnings: List[str]
    ) -> None:
        for rel_path, category in self.file_filter.iter_candidates(self.project_root):
            if category == FileCategory.STRUCTURED:
                content = self._parse_json(rel_path, parsed, warnings)
                if content is None:
                    continue
                try:
                    raw_refs = extract_structured(content, self.config.max_depth)
                except StructuralParseError as e:
                    self._warn(warnings, f"Warning: {rel_path}: {e.reason}")
                    continue
            else:
                try:
                    text = (self.project_root / rel_path).read_text(
                        encoding="utf-8", errors="replace"
                    )
                except OSError as e:
                    self._warn(warnings, f"Warning: could not read {rel_path}: {e}")
                    continue
                raw_refs = TEXT_STRATEGIES[category](text)

            for raw in raw_refs:
                index.record(raw.raw_path, rel_path, raw.provenance)
