"""The bundled example adventure, used for first runs and development."""

import shutil

from cyoa_builder.models import Adventure, parse_game_data

from backend import storage

EXAMPLE_TITLE = "The Key and the Door (Example)"

EXAMPLE_GAME_DATA = {
    "loc_1689793111164": {
        "id": "loc_1689793111164",
        "name": "The Crossroads",
        "description": "You stand at a dusty crossroads under a pale sky. To your left, "
        "a dark forest looms, whispering secrets on the wind. To your right, a derelict "
        "house stands silently against the horizon, its windows like vacant eyes.",
        "choices": [
            {"id": "choice_1689793149429", "text": "Enter the Whispering Forest",
             "destinationId": "loc_1689793123832"},
            {"id": "choice_1689793158315", "text": "Approach the Decrepit House",
             "destinationId": "loc_1689793136247"},
        ],
        "isStart": True,
    },
    "loc_1689793123832": {
        "id": "loc_1689793123832",
        "name": "Whispering Forest",
        "description": "The trees murmur as you step into the shadows. Sunlight struggles "
        "to pierce the thick canopy above. You notice something glinting under the "
        "gnarled root of an ancient oak.",
        "choices": [
            {"id": "choice_1689793203803", "text": "Go back to the crossroads",
             "destinationId": "loc_1689793111164"},
        ],
        "isStart": False,
        "addsItem": "Rusty Key",
    },
    "loc_1689793136247": {
        "id": "loc_1689793136247",
        "name": "Decrepit House",
        "description": "The house groans with the wind. The front door is made of heavy, "
        "splintered wood and is fitted with a large, ornate lock, rusted with age.",
        "choices": [
            {"id": "choice_1689793233866", "text": "Try the locked door",
             "destinationId": "loc_1689793189978", "requiresItem": "Rusty Key"},
            {"id": "choice_1689793244831", "text": "Return to the crossroads",
             "destinationId": "loc_1689793111164"},
        ],
        "isStart": False,
    },
    "loc_1689793189978": {
        "id": "loc_1689793189978",
        "name": "Dusty Hallway",
        "description": "The rusty key turns with a loud, grating CLICK! The heavy door "
        "swings open into a long, dark hallway filled with cobwebs and the smell of "
        "decay. You have found a way inside.",
        "choices": [],
        "isStart": False,
        "isFinish": True,
        "finishMessage": "Congratulations! You unlocked the door and uncovered the first "
        "secret of the house. Your adventure has just begun!",
    },
}


def create_example_adventure() -> Adventure:
    return storage.create_adventure(EXAMPLE_TITLE, parse_game_data(EXAMPLE_GAME_DATA))


def ensure_example_adventure() -> Adventure | None:
    """Seed the example when storage holds no adventures at all."""
    if storage.list_adventures():
        return None
    return create_example_adventure()


def create_demo_data() -> None:
    """Wipe existing adventures and recreate the example."""
    if storage.adventures_dir().exists():
        shutil.rmtree(storage.adventures_dir())
    storage.adventures_dir().mkdir(parents=True, exist_ok=True)

    adventure = create_example_adventure()
    print(f"Created demo adventure {adventure.title!r} "
          f"({len(adventure.game_data)} locations).")
