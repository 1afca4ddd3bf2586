"""Tests for config storage: defaults, partial merge, connection resolution."""

import json

from backend import storage


def test_get_config_empty():
    """Returns defaults when no config file exists."""
    config = storage.get_config()
    assert config["llm_connections"] == []
    assert config["generation_roles"] == {"description": "", "choices": ""}
    assert config["prompts"] == {"description": "", "choices": ""}
    assert config["theme"] == "Fantasy Quest"


def test_update_config_connections():
    """Adding connections replaces the array and persists."""
    conns = [{"name": "Local", "provider_url": "http://localhost:5001", "api_key": ""}]
    result = storage.update_config({"llm_connections": conns})
    assert result["llm_connections"][0]["name"] == "Local"

    reloaded = storage.get_config()
    assert reloaded["llm_connections"][0]["provider_url"] == "http://localhost:5001"

    storage.update_config({"llm_connections": []})
    assert storage.get_config()["llm_connections"] == []


def test_update_config_roles_merge():
    """Partial role update preserves other roles."""
    storage.update_config({"generation_roles": {"description": "Local"}})
    storage.update_config({"generation_roles": {"choices": "Remote"}})
    assert storage.get_config()["generation_roles"] == {
        "description": "Local",
        "choices": "Remote",
    }


def test_update_config_prompts_and_theme():
    storage.update_config({"prompts": {"choices": "List {{count}} moves."}, "theme": "Noir"})
    config = storage.get_config()
    assert config["prompts"]["choices"] == "List {{count}} moves."
    assert config["prompts"]["description"] == ""
    assert config["theme"] == "Noir"


def test_stored_file_missing_keys_get_defaults():
    (storage.data_dir() / "config.json").write_text(json.dumps({"theme": "Space"}))
    config = storage.get_config()
    assert config["theme"] == "Space"
    assert config["generation_roles"] == {"description": "", "choices": ""}


def test_update_config_ignores_non_dict_groups():
    storage.update_config({"generation_roles": "Local"})
    assert storage.get_config()["generation_roles"] == {"description": "", "choices": ""}


# ── resolve_connection ───────────────────────────────────


def test_resolve_connection():
    config = storage.update_config({
        "llm_connections": [
            {"name": "Local", "provider_url": "http://localhost:5001"},
            {"name": "Remote", "provider_url": "http://example.test"},
        ],
        "generation_roles": {"choices": "Remote"},
    })
    assert storage.resolve_connection(config, "choices")["provider_url"] == "http://example.test"
    assert storage.resolve_connection(config, "description") is None


def test_resolve_connection_unknown_name():
    config = storage.update_config({"generation_roles": {"description": "Gone"}})
    assert storage.resolve_connection(config, "description") is None
