"""
Test candidate file classification.
"""

from action_cleanup.config import ScanConfig
from action_cleanup.scanner.extractor import FileCategory
from action_cleanup.scanner.file_filter import FileFilter


def test_classify_by_directory_and_extension():
    file_filter = FileFilter()

    assert file_filter.classify("views/index.ejs") == FileCategory.MARKUP
    assert file_filter.classify("public/emails/welcome.html") == FileCategory.MARKUP
    assert file_filter.classify("app/api/v1/x.json") == FileCategory.STRUCTURED
    assert file_filter.classify("app/config/routes.json") == FileCategory.STRUCTURED
    assert file_filter.classify("extensions/custom/module.js") == FileCategory.SCRIPT
    assert file_filter.classify("public/js/app.js") == FileCategory.SCRIPT

    # Right extension, wrong directory
    assert file_filter.classify("lib/helper.js") is None
    assert file_filter.classify("public/data.json") is None
    assert file_filter.classify("README.md") is None


def test_excluded_paths():
    file_filter = FileFilter()

    assert file_filter.classify("public/node_modules/jquery/jquery.js") is None
    assert file_filter.is_excluded("public/node_modules", is_dir=True)
    assert not file_filter.is_excluded("public/js", is_dir=True)


def test_base_dirs():
    assert FileFilter().base_dirs() == ["app", "extensions", "public", "views"]
    assert FileFilter(ScanConfig(script_patterns=["**/*.js"])).base_dirs() == [""]


def test_iter_candidates(tmp_path):
    (tmp_path / "views").mkdir()
    (tmp_path / "views/index.ejs").write_text("<div></div>")
    (tmp_path / "views/logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00")
    (tmp_path / "public/js").mkdir(parents=True)
    (tmp_path / "public/js/app.js").write_text("fetch('/api/x')")
    (tmp_path / "app/api").mkdir(parents=True)
    (tmp_path / "app/api/a.json").write_text("{}")

    candidates = list(FileFilter().iter_candidates(tmp_path))

    assert candidates == [
        ("app/api/a.json", FileCategory.STRUCTURED),
        ("public/js/app.js", FileCategory.SCRIPT),
        ("views/index.ejs", FileCategory.MARKUP),
    ]
