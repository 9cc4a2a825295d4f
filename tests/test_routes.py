import json

import pytest

from action_cleanup.errors import StructuralParseError
from action_cleanup.routes import RoutesScanner


@pytest.fixture
def routed_project(project, json_file, text_file):
    text_file(project, "views/index.ejs", "<h1>Home</h1>")
    text_file(project, "views/layouts/main.ejs", "<%- body %>")
    json_file(
        project,
        "app/config/routes.json",
        {
            "routes": [
                {"path": "/", "page": "index", "layout": "main"},
                {"path": "/courses", "exec": "/api/v1/courses/create"},
                {"path": "/old", "page": "old-page", "layout": "legacy"},
                {"path": "/gone", "exec": "/api/v1/gone"},
            ]
        },
    )
    return project


@pytest.mark.asyncio
async def test_scan_finds_dead_routes(routed_project):
    result = await RoutesScanner(routed_project).scan()

    assert result.total_routes == 4
    assert result.valid_routes == 2
    assert [r.path for r in result.dead_routes] == ["/old", "/gone"]

    old = result.dead_routes[0]
    assert [i.type for i in old.issues] == ["missing_page", "missing_layout"]
    assert old.issues[0].expected_path == "views/old-page.ejs"
    assert old.issues[1].expected_path == "views/layouts/legacy.ejs"

    gone = result.dead_routes[1]
    assert [i.type for i in gone.issues] == ["missing_exec"]
    assert gone.issues[0].expected_path == "app/api/v1/gone.json"


@pytest.mark.asyncio
async def test_result_dict(routed_project):
    data = (await RoutesScanner(routed_project).scan()).to_dict()

    assert data["totalRoutes"] == 4
    assert data["validRoutes"] == 2
    assert data["deadRoutes"][1]["issues"][0] == {
        "type": "missing_exec",
        "message": "Server action not found: app/api/v1/gone.json",
        "expectedPath": "app/api/v1/gone.json",
    }


@pytest.mark.asyncio
async def test_missing_routes_file(tmp_path):
    result = await RoutesScanner(tmp_path).scan()

    assert not result.found
    assert result.total_routes == 0
    assert result.dead_routes == ()


@pytest.mark.asyncio
async def test_invalid_routes_file(project, text_file):
    text_file(project, "app/config/routes.json", "[not json")

    with pytest.raises(StructuralParseError):
        await RoutesScanner(project).scan()


@pytest.mark.asyncio
async def test_delete_routes(routed_project):
    scanner = RoutesScanner(routed_project)

    removed = await scanner.delete_routes(["/old", "/gone", "/not-there"])

    assert removed == 2
    data = json.loads((routed_project / "app/config/routes.json").read_text())
    assert [r["path"] for r in data["routes"]] == ["/", "/courses"]
    assert not (routed_project / "app/config/routes.tmp").exists()

    result = await scanner.scan()
    assert result.dead_routes == ()
