"""
Tests for configuration loading.
"""

import pytest
import yaml

from action_cleanup.config import (
    CleanupConfig,
    DEFAULT_CONFIG_PATH,
    ScanConfig,
    load_config,
)


def test_defaults():
    config = CleanupConfig()

    assert config.scan.action_dirs == ["app/api", "app/lib"]
    assert config.scan.routes_file == "app/config/routes.json"
    assert config.scan.max_depth == 64
    assert config.ignore.directory == ".action-cleanup"
    assert config.delete.backup_dir is None


def test_packaged_default_matches_dataclass_defaults():
    data = yaml.safe_load(DEFAULT_CONFIG_PATH.read_text())
    packaged = ScanConfig(**data["scan"])

    assert packaged == ScanConfig()


def test_load_explicit_config(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "log_level": "debug",
                "scan": {"action_dirs": ["server/api"], "max_depth": 10},
                "delete": {"backup_dir": "~/action-backups"},
            }
        )
    )

    config = load_config(str(path))

    assert config.log_level == "debug"
    assert config.scan.action_dirs == ["server/api"]
    assert config.scan.max_depth == 10
    # Unset fields keep their defaults
    assert config.scan.structured_patterns == ["app/**/*.json"]
    assert not config.delete.backup_dir.startswith("~")


def test_missing_explicit_config(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))


def test_local_config_is_found(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "action-cleanup.yaml").write_text("name: Local\n")

    assert load_config().name == "Local"


def test_empty_config_falls_through(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "action-cleanup.yaml").write_text("")
    monkeypatch.setattr(
        "action_cleanup.config.get_config_search_paths",
        lambda: ["./action-cleanup.yaml"],
    )

    assert load_config() == CleanupConfig()


def test_ignore_paths_resolve_per_project(tmp_path):
    config = CleanupConfig()

    path = config.ignore.resolve(tmp_path, config.ignore.actions_file)

    assert path == tmp_path / ".action-cleanup" / "ignore-list.json"
