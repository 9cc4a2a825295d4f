import json

from action_cleanup.ignore_list import IgnoreList


def test_add_and_persist(tmp_path):
    path = tmp_path / "lists" / "ignore-list.json"
    ignore_list = IgnoreList(path).load()

    ignore_list.add("/api/v1/courses/delete")
    ignore_list.add("/api/v1/courses/delete")
    ignore_list.add("lib/unused/helper")

    data = json.loads(path.read_text())
    assert data["ignored"] == ["/api/v1/courses/delete", "lib/unused/helper"]
    assert data["version"] == "1.0.0"
    assert "lastUpdated" in data

    reloaded = IgnoreList(path).load()
    assert reloaded.is_ignored("lib/unused/helper")
    assert len(reloaded) == 2


def test_remove(tmp_path):
    path = tmp_path / "ignore-list.json"
    ignore_list = IgnoreList(path).load()
    ignore_list.add("/a")
    ignore_list.add("/b")

    ignore_list.remove("/a")
    ignore_list.remove("/missing")

    assert IgnoreList(path).load().keys() == ["/b"]


def test_missing_file_starts_empty(tmp_path):
    ignore_list = IgnoreList(tmp_path / "nope.json").load()
    assert ignore_list.keys() == []
    assert not (tmp_path / "nope.json").exists()


def test_corrupt_file_starts_empty(tmp_path):
    path = tmp_path / "ignore-list.json"
    path.write_text("{broken")

    assert IgnoreList(path).load().keys() == []


def test_legacy_list_format(tmp_path):
    path = tmp_path / "ignored-routes.json"
    path.write_text(json.dumps(["/old", "/gone"]))

    ignore_list = IgnoreList(path).load()
    assert ignore_list.keys() == ["/old", "/gone"]

    ignore_list.add("/third")
    assert json.loads(path.read_text())["ignored"] == ["/old", "/gone", "/third"]
