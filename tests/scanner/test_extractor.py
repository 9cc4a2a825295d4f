import pytest

from action_cleanup.errors import StructuralParseError
from action_cleanup.scanner.extractor import (
    ProvenanceType,
    RawReference,
    extract_markup,
    extract_script,
    extract_structured,
    scan_api_urls,
)


def of_type(refs, provenance):
    return [r for r in refs if r.provenance == provenance]


def test_markup_url_attribute():
    refs = extract_markup('<div is="dmx-serverconnect" url="/api/v1/courses/create"></div>')

    url_refs = of_type(refs, ProvenanceType.MARKUP_URL_ATTRIBUTE)
    assert url_refs == [
        RawReference("/api/v1/courses/create", ProvenanceType.MARKUP_URL_ATTRIBUTE)
    ]


def test_markup_action_attribute():
    refs = extract_markup("<form action='/api/v1/login' method='post'></form>")

    assert of_type(refs, ProvenanceType.MARKUP_ACTION_ATTRIBUTE) == [
        RawReference("/api/v1/login", ProvenanceType.MARKUP_ACTION_ATTRIBUTE)
    ]


def test_markup_href_with_query_string():
    refs = extract_markup('<a href="/api/v1/files/download?id=1">Download</a>')

    paths = {r.raw_path for r in refs}
    assert paths == {"/api/v1/files/download"}
    assert of_type(refs, ProvenanceType.EMBEDDED_URL_STRING)


def test_markup_href_without_api_is_ignored():
    assert extract_markup('<a href="/courses">Courses</a>') == []


def test_markup_free_text_magic_link():
    refs = extract_markup("<p>Log in at https://example.com/api/v1/security/magic-login today</p>")

    assert refs == [
        RawReference("/api/v1/security/magic-login", ProvenanceType.EMBEDDED_URL_STRING)
    ]


def test_template_string_with_concatenation():
    text = "...click here: '/api/v1/security/magic-login?token='+tok..."
    refs = scan_api_urls(text)

    templates = of_type(refs, ProvenanceType.TEMPLATE_URL_STRING)
    assert templates == [
        RawReference("/api/v1/security/magic-login", ProvenanceType.TEMPLATE_URL_STRING)
    ]


def test_url_scan_strips_fragment():
    refs = scan_api_urls("see /api/v1/docs#intro")
    assert refs == [RawReference("/api/v1/docs", ProvenanceType.EMBEDDED_URL_STRING)]


def test_url_scan_no_match():
    assert scan_api_urls("nothing to see here") == []


def test_structured_queue_file_field():
    refs = extract_structured({"api_file": "/app/api/v1/queues/integrations/sync.json"})

    assert refs == [
        RawReference(
            "/app/api/v1/queues/integrations/sync.json", ProvenanceType.QUEUE_FILE_FIELD
        )
    ]


def test_structured_walks_nested_exec_and_module():
    data = {
        "exec": {
            "steps": [
                {"module": "core", "options": {"exec": "security/check"}},
                [{"options": {"exec": "/api/v1/other"}}],
            ]
        }
    }
    refs = extract_structured(data)

    assert RawReference("core", ProvenanceType.MODULE_FIELD) in refs
    assert RawReference("security/check", ProvenanceType.EXEC_FIELD) in refs
    assert RawReference("/api/v1/other", ProvenanceType.EXEC_FIELD) in refs
    assert len(refs) == 3


def test_structured_embedded_url_fields():
    data = {
        "steps": [
            {"value": "see /api/v1/reports/export now"},
            {"url": "https://host/api/v1/a?x=1"},
            {"link": "no api here"},
            {"body": "/api/v1/ignored"},
        ]
    }
    refs = extract_structured(data)

    assert {r.raw_path for r in refs} == {"/api/v1/reports/export", "/api/v1/a"}
    assert all(r.provenance == ProvenanceType.EMBEDDED_URL_STRING for r in refs)


def test_structured_ignores_non_string_direct_fields():
    assert extract_structured({"api_file": 5, "module": None, "exec": True}) == []


def test_structured_depth_guard():
    data = current = []
    for _ in range(20):
        nested = []
        current.append(nested)
        current = nested

    with pytest.raises(StructuralParseError):
        extract_structured(data, max_depth=10)

    assert extract_structured(data, max_depth=64) == []


def test_script_fetch_and_ajax():
    content = """
    fetch('/api/v1/reports/export').then(r => r.json());
    fetch("/static/data.json");
    $.ajax({ url: "/api/v1/courses/list", method: "GET" });
    $.ajax({ url: '/legacy/endpoint' });
    """
    refs = extract_script(content)

    assert refs == [
        RawReference("/api/v1/reports/export", ProvenanceType.SCRIPT_FETCH_CALL),
        RawReference("/api/v1/courses/list", ProvenanceType.SCRIPT_AJAX_URL),
    ]
