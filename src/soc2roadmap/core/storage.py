"""Roadmap and task-completion persistence.

Roadmaps are stored verbatim as JSON documents keyed by company/session:
.soc2-roadmap/roadmaps/<key>.json

The intake each roadmap came from is kept beside it:
.soc2-roadmap/intakes/<key>.json

Completed task ids are tracked separately in
.soc2-roadmap/completed-tasks.yaml and never written into a roadmap.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Protocol

import yaml
from pydantic import ValidationError

from ..models.intake import IntakeForm
from ..models.roadmap import ComplianceRoadmap
from ..utils.sanitize import sanitize_key
from .config import DEFAULT_CONFIG, state_dir


class RoadmapRepository(Protocol):
    def load(self, key: str) -> Optional[ComplianceRoadmap]: ...

    def save(self, key: str, roadmap: ComplianceRoadmap) -> None: ...


def roadmap_to_dict(roadmap: ComplianceRoadmap) -> dict:
    """Plain JSON-ready document (camelCase keys, ISO timestamp)."""
    return roadmap.model_dump(mode="json", by_alias=True)


class FileRoadmapRepository:
    """Stores one JSON document per key under the project state directory."""

    def __init__(self, project_path: Path, roadmaps_dir: str = DEFAULT_CONFIG["storage"]["roadmaps_dir"]):
        self.root = state_dir(project_path) / roadmaps_dir

    def path_for(self, key: str) -> Path:
        return self.root / f"{sanitize_key(key)}.json"

    def load(self, key: str) -> Optional[ComplianceRoadmap]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return ComplianceRoadmap.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError):
            return None

    def save(self, key: str, roadmap: ComplianceRoadmap) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(roadmap_to_dict(roadmap), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    def keys(self) -> list[str]:
        if not self.root.exists():
            return []
        return sorted(p.stem for p in self.root.glob("*.json"))


class FileIntakeRepository:
    """Stores the intake answers each roadmap was generated from."""

    def __init__(self, project_path: Path, intakes_dir: str = DEFAULT_CONFIG["storage"]["intakes_dir"]):
        self.root = state_dir(project_path) / intakes_dir

    def path_for(self, key: str) -> Path:
        return self.root / f"{sanitize_key(key)}.json"

    def load(self, key: str) -> Optional[IntakeForm]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return IntakeForm.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError):
            return None

    def save(self, key: str, intake: IntakeForm) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(intake.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )


def _as_ids(value) -> list[str]:
    # Hand-edited files may hold a single id instead of a list
    if isinstance(value, list):
        return [str(i) for i in value]
    if isinstance(value, (str, int)):
        return [str(value)]
    return []


class CompletedTaskStore:
    """Completed task ids per roadmap key, kept in one YAML file."""

    def __init__(
        self,
        project_path: Path,
        filename: str = DEFAULT_CONFIG["storage"]["completed_tasks_file"],
    ):
        self.path = state_dir(project_path) / filename

    def _load_all(self) -> dict[str, list[str]]:
        if not self.path.exists():
            return {}
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8-sig")) or {}
        except (OSError, yaml.YAMLError):
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): _as_ids(v) for k, v in data.items()}

    def _save_all(self, data: dict[str, list[str]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = yaml.dump(
            data,
            default_flow_style=False,
            sort_keys=True,
            allow_unicode=True,
            width=120,
        )
        self.path.write_text(content, encoding="utf-8")

    def load(self, key: str) -> set[str]:
        return set(self._load_all().get(sanitize_key(key), []))

    def set_completed(self, key: str, task_id: str, completed: bool = True) -> set[str]:
        """Mark a task done (or reopen it) and return the updated set."""
        data = self._load_all()
        slug = sanitize_key(key)
        current = set(data.get(slug, []))
        if completed:
            current.add(task_id)
        else:
            current.discard(task_id)
        data[slug] = sorted(current)
        self._save_all(data)
        return current
