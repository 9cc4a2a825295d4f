"""
Reference-resolution engine: discovery, extraction and classification.
"""

from .extractor import FileCategory, ProvenanceType, RawReference
from .index import ActionResult, Confidence, EmptyFolder, Reference, ScanResult
from .normalizer import EntityKind, declaration_key, normalize_reference
from .orchestrator import Scanner, ScanState
from .empty_folders import EmptyFolderFinder

__all__ = [
    "ActionResult",
    "Confidence",
    "EmptyFolder",
    "EmptyFolderFinder",
    "EntityKind",
    "FileCategory",
    "ProvenanceType",
    "RawReference",
    "Reference",
    "ScanResult",
    "ScanState",
    "Scanner",
    "declaration_key",
    "normalize_reference",
]
