"""
Action index and scan result types.

The index is the mutable accumulator owned by a single scan; the result
types are frozen snapshots handed to reporting and UI code.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

from .extractor import ProvenanceType
from .normalizer import EntityKind, normalize_reference

logger = logging.getLogger(__name__)


class Confidence(str, Enum):
    SAFE_TO_DELETE = "safe-to-delete"
    REVIEW_NEEDED = "review-needed"


CONFIDENCE_ORDER = {Confidence.SAFE_TO_DELETE: 0, Confidence.REVIEW_NEEDED: 1}


def classify(reference_count: int) -> Confidence:
    """Confidence tier for an action with the given number of references."""
    if reference_count == 0:
        return Confidence.SAFE_TO_DELETE
    return Confidence.REVIEW_NEEDED


@dataclass(frozen=True)
class Reference:
    source_file: str
    type: ProvenanceType
    original_reference: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "sourceFile": self.source_file,
            "type": self.type.value,
            "originalReference": self.original_reference,
        }


@dataclass(frozen=True)
class ActionResult:
    """A declared action together with every reference found to it."""

    url_path: str
    file_path: str
    content: Any
    references: Tuple[Reference, ...] = ()

    @property
    def reference_count(self) -> int:
        return len(self.references)

    @property
    def confidence(self) -> Confidence:
        return classify(self.reference_count)

    @property
    def status(self) -> str:
        if self.confidence == Confidence.SAFE_TO_DELETE:
            return "unused"
        return "used"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "urlPath": self.url_path,
            "filePath": self.file_path,
            "status": self.status,
            "confidence": self.confidence.value,
            "referenceCount": self.reference_count,
            "references": [ref.to_dict() for ref in self.references],
            "content": self.content,
        }


@dataclass(frozen=True)
class EmptyFolder:
    path: str
    relative_path: str

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "relativePath": self.relative_path}


@dataclass(frozen=True)
class ScanSummary:
    total_actions: int
    used: int
    possibly_unused: int
    likely_unused: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalActions": self.total_actions,
            "used": self.used,
            "possiblyUnused": self.possibly_unused,
            "likelyUnused": self.likely_unused,
        }


@dataclass(frozen=True)
class ScanResult:
    """Immutable outcome of one scan."""

    actions: Tuple[ActionResult, ...] = ()
    empty_folders: Tuple[EmptyFolder, ...] = ()
    warnings: Tuple[str, ...] = ()
    unresolved: Dict[str, Tuple[Reference, ...]] = field(default_factory=dict)

    @property
    def summary(self) -> ScanSummary:
        likely_unused = sum(
            1 for a in self.actions if a.confidence == Confidence.SAFE_TO_DELETE
        )
        return ScanSummary(
            total_actions=len(self.actions),
            used=len(self.actions) - likely_unused,
            possibly_unused=0,
            likely_unused=likely_unused,
        )

    def get(self, url_path: str) -> Optional[ActionResult]:
        for action in self.actions:
            if action.url_path == url_path:
                return action
        return None

    def with_confidence(self, confidence: Confidence) -> List[ActionResult]:
        return [a for a in self.actions if a.confidence == confidence]

    def without(self, url_paths: Iterable[str]) -> "ScanResult":
        """
        Drop actions from the result, e.g. after their files were deleted.

        Reference lists of the remaining actions are left untouched; a rescan
        is needed to see the effect of the deletion on them.
        """
        removed = set(url_paths)
        return ScanResult(
            actions=tuple(a for a in self.actions if a.url_path not in removed),
            empty_folders=self.empty_folders,
            warnings=self.warnings,
            unresolved=self.unresolved,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "actions": [a.to_dict() for a in self.actions],
            "emptyFolders": [f.to_dict() for f in self.empty_folders],
            "warnings": list(self.warnings),
        }


@dataclass
class _ActionEntry:
    url_path: str
    file_path: str
    content: Any
    references: List[Reference] = field(default_factory=list)


class ActionIndex:
    """Maps logical keys to declared actions and accumulates references."""

    def __init__(self):
        self._actions: Dict[str, _ActionEntry] = {}
        self._by_key: Dict[str, List[Reference]] = {}

    def __len__(self) -> int:
        return len(self._actions)

    def __contains__(self, key: str) -> bool:
        return key in self._actions

    def declare(self, url_path: str, file_path: str, content: Any) -> None:
        if url_path in self._actions:
            logger.warning(
                f"Duplicate action key {url_path}: {file_path} shadows "
                f"{self._actions[url_path].file_path}"
            )
        self._actions[url_path] = _ActionEntry(url_path, file_path, content)

    def record(
        self, raw_path: str, source_file: str, provenance: ProvenanceType
    ) -> Optional[str]:
        """
        Normalize a raw reference and attach it to the action it names.

        Args:
            raw_path: Reference exactly as extracted
            source_file: Project-relative file the reference was found in
            provenance: Extraction pattern that produced it

        Returns:
            The normalized key, or None if the string is not a reference
        """
        key = normalize_reference(raw_path, EntityKind.ACTION)
        if key is None:
            return None

        ref = Reference(source_file, provenance, raw_path)
        if key in self._actions:
            self._actions[key].references.append(ref)
        self._by_key.setdefault(key, []).append(ref)
        return key

    def references_for(self, key: str) -> List[Reference]:
        return list(self._by_key.get(key, []))

    def unresolved(self) -> Dict[str, Tuple[Reference, ...]]:
        """References whose key matches no declared action."""
        return {
            key: tuple(refs)
            for key, refs in self._by_key.items()
            if key not in self._actions
        }

    def snapshot(self) -> List[ActionResult]:
        """Frozen actions in declaration order."""
        return [
            ActionResult(
                url_path=entry.url_path,
                file_path=entry.file_path,
                content=entry.content,
                references=tuple(entry.references),
            )
            for entry in self._actions.values()
        ]


def rank(actions: Iterable[ActionResult]) -> Tuple[ActionResult, ...]:
    """Safe-to-delete first; stable within each tier."""
    return tuple(sorted(actions, key=lambda a: CONFIDENCE_ORDER[a.confidence]))
