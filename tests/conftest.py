import json
from pathlib import Path

import pytest


def write_json(root: Path, rel_path: str, data) -> Path:
    """Helper to write a JSON file inside a test project."""
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))
    return path


def write_text(root: Path, rel_path: str, text: str) -> Path:
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


@pytest.fixture
def project(tmp_path):
    """A small project with used, unused and indirectly referenced actions."""
    root = tmp_path / "project"

    # Declared actions
    write_json(root, "app/api/v1/courses/create.json", {"exec": {"steps": []}})
    write_json(root, "app/api/v1/courses/delete.json", {"exec": {"steps": []}})
    write_json(root, "app/api/v1/queues/integrations/sync.json", {"steps": [{"module": "core"}]})
    write_json(root, "app/api/v1/security/magic-login.json", {"exec": {"steps": []}})
    write_json(root, "app/api/v1/reports/export.json", {"exec": {"steps": []}})
    write_json(root, "app/lib/security/check.json", {"exec": {"steps": []}})
    write_json(root, "app/lib/unused/helper.json", {"exec": {"steps": []}})

    # Not an action: no exec or steps
    write_json(root, "app/api/v1/meta/settings.json", {"meta": {"name": "settings"}})

    # References
    write_text(
        root,
        "views/courses.ejs",
        '<div is="dmx-serverconnect" url="/api/v1/courses/create"></div>\n',
    )
    write_json(
        root,
        "app/api/v1/queues/start.json",
        {
            "exec": {
                "steps": [
                    {
                        "name": "add_job",
                        "options": {"api_file": "/app/api/v1/queues/integrations/sync.json"},
                    },
                    {"name": "check", "options": {"exec": "security/check"}},
                ]
            }
        },
    )
    write_json(
        root,
        "app/api/v1/mail/send.json",
        {
            "exec": {
                "steps": [
                    {
                        "name": "mail",
                        "options": {
                            "body": {
                                "value": "Click here: '/api/v1/security/magic-login?token='+tok"
                            }
                        },
                    }
                ]
            }
        },
    )
    write_text(
        root,
        "public/js/reports.js",
        "fetch('/api/v1/reports/export')\n",
    )
    return root


@pytest.fixture
def json_file():
    return write_json


@pytest.fixture
def text_file():
    return write_text
