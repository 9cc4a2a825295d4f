"""
Path normalization for action and route references.

Raw strings pulled out of markup, JSON and scripts are mapped onto the
logical keys declared actions are indexed by:

    app/api/v1/courses/create.json  ->  /api/v1/courses/create
    app/lib/security/check.json     ->  lib/security/check
"""

from enum import Enum
from pathlib import PurePosixPath
from typing import Optional, Union

API_PREFIX = "/api/"
INTERNAL_API_PREFIX = "/app/api/"
LIB_PREFIX = "lib/"
JSON_SUFFIX = ".json"


class EntityKind(str, Enum):
    ACTION = "action"
    ROUTE = "route"


def strip_json_suffix(path: str) -> str:
    if path.endswith(JSON_SUFFIX):
        return path[: -len(JSON_SUFFIX)]
    return path


def normalize_reference(
    raw: str, kind: EntityKind = EntityKind.ACTION
) -> Optional[str]:
    """
    Canonicalize a raw reference string into a logical key.

    Args:
        raw: Path or path-like string as found in the source file
        kind: Whether the key is meant for the action index or a route check

    Returns:
        The logical key, or None if the string cannot be a reference
    """
    if not raw or not raw.strip() or raw.startswith("#"):
        return None

    if raw.startswith(API_PREFIX):
        normalized = raw
    elif raw.startswith(INTERNAL_API_PREFIX):
        # Queue configuration: /app/api/v1/queues/... -> /api/v1/queues/...
        normalized = raw[len("/app") :]
    elif (
        kind == EntityKind.ACTION
        and not raw.startswith("/")
        and not raw.startswith(LIB_PREFIX)
    ):
        normalized = LIB_PREFIX + raw
    else:
        normalized = raw

    return strip_json_suffix(normalized)


def declaration_key(relative_path: Union[str, PurePosixPath]) -> str:
    """
    Logical key of an action declared at a project-relative path.

    Args:
        relative_path: Declaration file path relative to the project root

    Returns:
        Key in the form used by the action index
    """
    path = PurePosixPath(relative_path).as_posix()
    if path.startswith("app/api/"):
        return "/" + strip_json_suffix(path[len("app/") :])
    if path.startswith("app/lib/"):
        return strip_json_suffix(path[len("app/") :])
    return strip_json_suffix(path)


def route_exec_path(exec_ref: str) -> Optional[str]:
    """Project-relative file a route's exec entry should resolve to."""
    key = normalize_reference(exec_ref, EntityKind.ROUTE)
    if key is None:
        return None
    return f"app/{key.lstrip('/')}{JSON_SUFFIX}"
