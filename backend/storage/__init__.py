"""File-based JSON storage.

Data layout:
  data/
    adventures/
      <id>.json          One adventure: {"id", "title", "gameData"}
    config.json          App settings (LLM connections, generation roles,
                         theme, prompt overrides)

Ids come from cyoa_builder.graph.new_id("adv") and start with a nanosecond
timestamp, so filename order is creation order.

Every graph edit is persisted by replacing the adventure's gameData with the
new revision produced by the cyoa_builder.graph mutators.

Config: get_config() returns defaults merged with stored values.
update_config() applies partial updates: llm_connections replaced wholesale,
generation_roles and prompts merged key-by-key, theme overwritten.
"""

# Re-export all public symbols so `from backend import storage` keeps working.

from .core import (  # noqa: F401
    adventures_dir,
    data_dir,
    init_storage,
    slugify,
)

from .adventures import (  # noqa: F401
    DEFAULT_TITLE,
    MalformedImportError,
    create_adventure,
    delete_adventure,
    export_adventure,
    export_filename,
    get_adventure,
    import_adventure,
    list_adventures,
    save_game_data,
    update_adventure,
)

from .config import (  # noqa: F401
    GENERATION_ROLES,
    get_config,
    resolve_connection,
    update_config,
)
