"""
Exception hierarchy for the cleanup tool.
"""

from pathlib import Path
from typing import Optional, Union


class CleanupError(Exception):
    """Base exception for all cleanup tool errors."""


class StructuralParseError(CleanupError):
    """A file could not be read as structured (JSON) data.

    Raised for invalid JSON and for structures nested deeper than the
    configured walk depth. Scans recover from it by skipping the file.
    """

    def __init__(self, path: Optional[Union[str, Path]], reason: str):
        self.path = str(path) if path is not None else None
        self.reason = reason
        if self.path:
            super().__init__(f"{self.path}: {reason}")
        else:
            super().__init__(reason)


class DiscoveryError(CleanupError):
    """A required action root could not be enumerated. Aborts the scan."""


class ScanStateError(CleanupError):
    """The scan lifecycle was driven through an illegal transition."""
