"""3-layer configuration for the roadmap CLI.

Loads and merges configuration from:
1. Default settings (built-in)
2. Project config (.soc2-roadmap/config.yaml)
3. CLI parameters (override)

Configuration only shapes storage and reporting; the engine takes none.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Optional

import yaml

STATE_DIR = ".soc2-roadmap"

DEFAULT_CONFIG: dict = {
    "project": {
        "name": "",
    },
    "output": {
        "format": "markdown",
        "include_gaps": True,
        "include_policies": True,
        "include_evidence": True,
    },
    "storage": {
        "roadmaps_dir": "roadmaps",
        "intakes_dir": "intakes",
        "completed_tasks_file": "completed-tasks.yaml",
    },
}


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts. Arrays are replaced, not merged."""
    result = {}
    for key in base:
        result[key] = base[key]
    for key, value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            result[key] = deep_merge(base_value, value)
        else:
            result[key] = value
    return result


def state_dir(project_path: Path) -> Path:
    return project_path / STATE_DIR


def load_project_config(project_path: Path) -> dict:
    """Load project configuration from .soc2-roadmap/config.yaml."""
    config_path = state_dir(project_path) / "config.yaml"
    if not config_path.exists():
        return {}
    try:
        content = config_path.read_text(encoding="utf-8-sig")  # utf-8-sig strips BOM
        data = yaml.safe_load(content) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def get_effective_config(
    project_path: Path,
    cli_overrides: Optional[dict] = None,
) -> dict:
    """Get the fully resolved configuration for a project."""
    config = copy.deepcopy(DEFAULT_CONFIG)

    project_config = load_project_config(project_path)
    if project_config:
        config = deep_merge(config, project_config)

    if cli_overrides:
        config = deep_merge(config, cli_overrides)

    config["_project_path"] = str(project_path)
    return config


def initialize_project(project_path: Path, project_name: str = "") -> Path:
    """Create the .soc2-roadmap directory with a starter config."""
    root = state_dir(project_path)
    (root / DEFAULT_CONFIG["storage"]["roadmaps_dir"]).mkdir(parents=True, exist_ok=True)

    config_path = root / "config.yaml"
    if not config_path.exists():
        starter = {
            "project": {"name": project_name or project_path.name},
            "output": {"format": DEFAULT_CONFIG["output"]["format"]},
        }
        content = yaml.safe_dump(starter, default_flow_style=False, sort_keys=False, allow_unicode=True)
        config_path.write_text("# SOC 2 roadmap project configuration\n\n" + content, encoding="utf-8")
    return root
