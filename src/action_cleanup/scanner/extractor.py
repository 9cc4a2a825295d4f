"""
Reference extraction strategies.

Each strategy is a pure function from one file's content to the raw
references it contains. Strategies are selected by file category, never by
inspecting the content.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple
import re

from ..errors import StructuralParseError
from .normalizer import API_PREFIX


class FileCategory(str, Enum):
    MARKUP = "markup"
    STRUCTURED = "structured"
    SCRIPT = "script"


class ProvenanceType(str, Enum):
    MARKUP_URL_ATTRIBUTE = "markup-url-attribute"
    MARKUP_ACTION_ATTRIBUTE = "markup-action-attribute"
    EMBEDDED_URL_STRING = "embedded-url-string"
    TEMPLATE_URL_STRING = "template-url-string"
    QUEUE_FILE_FIELD = "queue-file-field"
    EXEC_FIELD = "exec-field"
    MODULE_FIELD = "module-field"
    SCRIPT_FETCH_CALL = "script-fetch-call"
    SCRIPT_AJAX_URL = "script-ajax-url"


class RawReference(NamedTuple):
    raw_path: str
    provenance: ProvenanceType


# Markup attributes
URL_ATTRIBUTE = re.compile(r"""url=["']([^"']+)["']""")
ACTION_ATTRIBUTE = re.compile(r"""action=["']([^"']+)["']""")
HREF_ATTRIBUTE = re.compile(r"""href=["']([^"']+)["']""")

# Bare API paths anywhere in a string
API_PATH = re.compile(r"""/api/[^'"?\s&]+""")
# API paths inside a quoted string, e.g. '/api/v1/x?token=' + token
QUOTED_API_PATH = re.compile(r"""['"`][^'"]*/api/[^'"?\s&]+[^'"]*['"`]""")

# Script calls
FETCH_CALL = re.compile(r"""fetch\s*\(\s*['"`]([^'"`]+)['"`]\s*\)""")
AJAX_URL = re.compile(r"""url\s*:\s*['"`]([^'"`]+)['"`]""")

# Structured fields holding a whole reference
DIRECT_FIELDS: Dict[str, ProvenanceType] = {
    "api_file": ProvenanceType.QUEUE_FILE_FIELD,
    "exec": ProvenanceType.EXEC_FIELD,
    "module": ProvenanceType.MODULE_FIELD,
}
# Structured fields that may embed a URL inside a larger string
EMBEDDED_URL_FIELDS = ("value", "url", "link")

DEFAULT_MAX_DEPTH = 64


def _strip_query(path: str) -> str:
    return path.split("?")[0].split("#")[0]


def scan_api_urls(text: str) -> List[RawReference]:
    """
    Find API paths embedded anywhere in a string.

    Args:
        text: Arbitrary text (file content or a single field value)

    Returns:
        One reference per bare API path and one per quoted API string
    """
    refs = []

    for match in API_PATH.finditer(text):
        refs.append(
            RawReference(_strip_query(match.group(0)), ProvenanceType.EMBEDDED_URL_STRING)
        )

    for match in QUOTED_API_PATH.finditer(text):
        # Keep only the static path prefix of the quoted string
        inner = API_PATH.search(match.group(0))
        if inner:
            refs.append(
                RawReference(
                    _strip_query(inner.group(0)), ProvenanceType.TEMPLATE_URL_STRING
                )
            )

    return refs


def extract_markup(content: str) -> List[RawReference]:
    """Extract references from HTML/EJS content."""
    refs = [
        RawReference(m.group(1), ProvenanceType.MARKUP_URL_ATTRIBUTE)
        for m in URL_ATTRIBUTE.finditer(content)
    ]
    refs.extend(
        RawReference(m.group(1), ProvenanceType.MARKUP_ACTION_ATTRIBUTE)
        for m in ACTION_ATTRIBUTE.finditer(content)
    )

    for match in HREF_ATTRIBUTE.finditer(content):
        href = match.group(1)
        if API_PREFIX in href:
            refs.extend(scan_api_urls(href))

    # Whole content, for magic links in email templates and free text
    refs.extend(scan_api_urls(content))
    return refs


def extract_script(content: str) -> List[RawReference]:
    """Extract fetch() calls and url: fields pointing at the API."""
    refs = [
        RawReference(m.group(1), ProvenanceType.SCRIPT_FETCH_CALL)
        for m in FETCH_CALL.finditer(content)
        if m.group(1).startswith(API_PREFIX)
    ]
    refs.extend(
        RawReference(m.group(1), ProvenanceType.SCRIPT_AJAX_URL)
        for m in AJAX_URL.finditer(content)
        if m.group(1).startswith(API_PREFIX)
    )
    return refs


def extract_structured(
    data: Any, max_depth: int = DEFAULT_MAX_DEPTH
) -> List[RawReference]:
    """
    Walk parsed JSON and collect references from known fields.

    Args:
        data: Parsed JSON document
        max_depth: Deepest nesting level the walk will enter

    Returns:
        References in document order

    Raises:
        StructuralParseError: If the document nests deeper than max_depth
    """
    refs = []
    stack = [(data, 0)]

    while stack:
        node, depth = stack.pop()
        if depth > max_depth:
            raise StructuralParseError(
                None, f"nesting deeper than {max_depth} levels"
            )

        if isinstance(node, list):
            children = list(node)
        elif isinstance(node, dict):
            children = []
            for key, value in node.items():
                if isinstance(value, str):
                    if key in DIRECT_FIELDS:
                        refs.append(RawReference(value, DIRECT_FIELDS[key]))
                    elif key in EMBEDDED_URL_FIELDS:
                        refs.extend(scan_api_urls(value))
                else:
                    children.append(value)
        else:
            continue

        # Reversed so the stack pops children in document order
        for child in reversed(children):
            if isinstance(child, (dict, list)):
                stack.append((child, depth + 1))

    return refs


TEXT_STRATEGIES: Dict[FileCategory, Callable[[str], List[RawReference]]] = {
    FileCategory.MARKUP: extract_markup,
    FileCategory.SCRIPT: extract_script,
}
