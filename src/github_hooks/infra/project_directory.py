from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Optional

from ..core.domain.models import Connection, Project


class ProjectDirectory:
    """Read-only view of the project hierarchy and its OAuth connections.

    Loaded from a JSON document of the form::

        {
          "projects": [{"id": "_Root", "name": "<Root project>"},
                       {"id": "Acme", "name": "Acme", "parent_id": "_Root"}],
          "connections": [{"id": "PROJECT_EXT_1", "project_id": "_Root",
                           "host": "https://github.com", "display_name": "GitHub.com"}]
        }
    """

    def __init__(
        self,
        *,
        projects: Iterable[Project] = (),
        connections: Iterable[Connection] = (),
    ) -> None:
        self._projects: dict[str, Project] = {p.id: p for p in projects}
        self._connections: list[Connection] = list(connections)

    @classmethod
    def from_file(cls, path: Path) -> "ProjectDirectory":
        if not path.exists():
            return cls()
        raw = json.loads(path.read_text(encoding="utf-8"))
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ProjectDirectory":
        projects = [
            Project(
                id=str(item["id"]),
                name=str(item.get("name") or item["id"]),
                parent_id=item.get("parent_id") or None,
            )
            for item in raw.get("projects", [])
        ]
        connections = [
            Connection(
                id=str(item["id"]),
                project_id=str(item["project_id"]),
                host=str(item["host"]),
                display_name=str(item.get("display_name", "")),
            )
            for item in raw.get("connections", [])
        ]
        return cls(projects=projects, connections=connections)

    def find_project(self, project_id: str) -> Optional[Project]:
        return self._projects.get(project_id)

    def ancestry(self, project_id: str) -> list[Project]:
        chain: list[Project] = []
        seen: set[str] = set()
        current = self._projects.get(project_id)
        while current is not None and current.id not in seen:
            chain.append(current)
            seen.add(current.id)
            current = self._projects.get(current.parent_id) if current.parent_id else None
        return chain

    def connections_of(self, project_id: str) -> list[Connection]:
        return [c for c in self._connections if c.project_id == project_id]

    def find_connection(self, project_id: str, connection_id: str) -> Optional[Connection]:
        for project in self.ancestry(project_id):
            for connection in self.connections_of(project.id):
                if connection.id == connection_id:
                    return connection
        return None

    def list_projects(self) -> list[Project]:
        return list(self._projects.values())
