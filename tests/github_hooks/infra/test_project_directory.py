import json

from github_hooks.core.domain.models import Connection, Project
from github_hooks.infra.project_directory import ProjectDirectory


LAYOUT = {
    "projects": [
        {"id": "_Root", "name": "<Root project>"},
        {"id": "Acme", "name": "Acme", "parent_id": "_Root"},
        {"id": "Widgets", "parent_id": "Acme"},
    ],
    "connections": [
        {"id": "root-gh", "project_id": "_Root", "host": "https://github.com", "display_name": "GitHub.com"},
        {"id": "acme-gh", "project_id": "Acme", "host": "github.com"},
    ],
}


def test_loads_from_file(tmp_path):
    path = tmp_path / "projects.json"
    path.write_text(json.dumps(LAYOUT), encoding="utf-8")

    directory = ProjectDirectory.from_file(path)

    assert [p.id for p in directory.list_projects()] == ["_Root", "Acme", "Widgets"]
    assert directory.find_project("Widgets") == Project(id="Widgets", name="Widgets", parent_id="Acme")


def test_missing_file_is_empty(tmp_path):
    directory = ProjectDirectory.from_file(tmp_path / "absent.json")
    assert directory.list_projects() == []
    assert directory.find_project("_Root") is None


def test_ancestry_nearest_first():
    directory = ProjectDirectory.from_dict(LAYOUT)
    assert [p.id for p in directory.ancestry("Widgets")] == ["Widgets", "Acme", "_Root"]
    assert directory.ancestry("Nope") == []


def test_ancestry_survives_cycles():
    directory = ProjectDirectory(
        projects=[Project(id="a", name="a", parent_id="b"), Project(id="b", name="b", parent_id="a")],
    )
    assert [p.id for p in directory.ancestry("a")] == ["a", "b"]


def test_connections_of_project():
    directory = ProjectDirectory.from_dict(LAYOUT)
    assert directory.connections_of("Acme") == [Connection(id="acme-gh", project_id="Acme", host="github.com")]
    assert directory.connections_of("Widgets") == []


def test_find_connection_includes_inherited():
    directory = ProjectDirectory.from_dict(LAYOUT)
    assert directory.find_connection("Widgets", "root-gh").display_name == "GitHub.com"
    # Not visible from a project outside the owner's subtree.
    assert directory.find_connection("_Root", "acme-gh") is None
