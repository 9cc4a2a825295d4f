import json

import click

from action_cleanup.reporter import Reporter
from action_cleanup.scanner.index import ActionResult, Reference, ScanResult
from action_cleanup.scanner.extractor import ProvenanceType


def make_result():
    used = ActionResult(
        url_path="/api/v1/used",
        file_path="app/api/v1/used.json",
        content={"exec": {}},
        references=(
            Reference("views/index.ejs", ProvenanceType.MARKUP_URL_ATTRIBUTE, "/api/v1/used"),
        ),
    )
    unused = [
        ActionResult(
            url_path=f"/api/v1/unused{i}<b>",
            file_path=f"app/api/v1/unused{i}<b>.json",
            content={"exec": {}},
        )
        for i in range(12)
    ]
    return ScanResult(actions=tuple(unused) + (used,), warnings=("Warning: bad.json",))


def test_format_summary():
    text = click.unstyle(Reporter(make_result()).format_summary(ignored_count=2))

    assert "Used actions: 1" in text
    assert "Likely unused: 12" in text
    assert "Ignored actions: 2" in text
    assert "Total actions: 13" in text


def test_print_summary_truncates(capsys):
    Reporter(make_result()).print_summary(limit=10)

    captured = capsys.readouterr()
    assert "... and 2 more" in captured.out
    assert "Warning: bad.json" in captured.err


def test_save_json(tmp_path):
    path = tmp_path / "out.json"
    Reporter(make_result()).save(path)

    data = json.loads(path.read_text())
    assert data["summary"]["likelyUnused"] == 12
    assert data["warnings"] == ["Warning: bad.json"]


def test_save_html_escapes_paths(tmp_path):
    path = tmp_path / "out.html"
    Reporter(make_result()).save(path)

    page = path.read_text()
    assert "/api/v1/unused0&lt;b&gt;" in page
    assert "<b>" not in page
