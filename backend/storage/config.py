"""Global app configuration (LLM connections, generation roles, theme, prompts)."""

import json
from pathlib import Path
from typing import Any

from .core import data_dir

GENERATION_ROLES = ("description", "choices")

_CONFIG_DEFAULTS: dict[str, Any] = {
    "llm_connections": [],
    "generation_roles": {role: "" for role in GENERATION_ROLES},
    "prompts": {role: "" for role in GENERATION_ROLES},
    "theme": "Fantasy Quest",
}


def _config_path() -> Path:
    return data_dir() / "config.json"


def get_config() -> dict[str, Any]:
    """Read config, returning defaults merged with stored values."""
    config: dict[str, Any] = {
        "llm_connections": list(_CONFIG_DEFAULTS["llm_connections"]),
        "generation_roles": dict(_CONFIG_DEFAULTS["generation_roles"]),
        "prompts": dict(_CONFIG_DEFAULTS["prompts"]),
        "theme": _CONFIG_DEFAULTS["theme"],
    }
    path = _config_path()
    if path.is_file():
        stored = json.loads(path.read_text())
        if "llm_connections" in stored:
            config["llm_connections"] = stored["llm_connections"]
        for group in ("generation_roles", "prompts"):
            if isinstance(stored.get(group), dict):
                config[group].update(stored[group])
        if "theme" in stored:
            config["theme"] = stored["theme"]
    return config


def update_config(fields: dict[str, Any]) -> dict[str, Any]:
    """Merge fields into config and persist. Returns full config."""
    config = get_config()
    if "llm_connections" in fields:
        config["llm_connections"] = fields["llm_connections"]
    for group in ("generation_roles", "prompts"):
        if isinstance(fields.get(group), dict):
            config[group].update(fields[group])
    if "theme" in fields:
        config["theme"] = fields["theme"]
    _config_path().write_text(json.dumps(config, indent=2))
    return config


def resolve_connection(config: dict[str, Any], role: str) -> dict[str, Any] | None:
    """Find the LLM connection assigned to a generation role, if any."""
    conn_name = config.get("generation_roles", {}).get(role, "")
    if not conn_name:
        return None
    for conn in config["llm_connections"]:
        if conn.get("name") == conn_name:
            return conn
    return None
