import json
import logging
import os
import tempfile

from adventure.entities import Feature, Item, Player, Room
from adventure.errors import PersistenceError, WorldBuildError
from adventure.world import World

logger = logging.getLogger(__name__)

SNAPSHOT_FORMAT = "adventure-snapshot"
SNAPSHOT_VERSION = 1
DEFAULT_SAVE_FILE = "savegame.json"


def world_to_state(world):
    return {
        'format': SNAPSHOT_FORMAT,
        'version': SNAPSHOT_VERSION,
        'title': world.title,
        'player_location': world.player_location,
        'player': world.player.to_state(),
        'rooms': [room.to_state() for room in world.rooms.values()],
    }


def save_world(world, filename=DEFAULT_SAVE_FILE):
    """
    Writes a complete snapshot of the world to `filename`.

    The snapshot is serialized in memory first, then written to a temporary
    file next to the target and renamed over it, so a failed save never
    leaves a half-written file behind.
    """
    try:
        payload = json.dumps(world_to_state(world), indent=2)
    except (TypeError, ValueError) as e:
        logger.error("Error serializing game state: %s", e)
        raise PersistenceError("could not save game: the world could not be serialized") from e

    directory = os.path.dirname(os.path.abspath(filename))
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
                "w", dir=directory, prefix=".save-", suffix=".tmp",
                delete=False, encoding="utf-8") as f:
            tmp_path = f.name
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, filename)
    except OSError as e:
        logger.error("Error saving game to %s: %s", filename, e)
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise PersistenceError(f"could not save game: {e.strerror or e}") from e

    logger.info("Game saved to %s", filename)
    return f"game saved to {filename}"


def load_world(filename=DEFAULT_SAVE_FILE, interactions=None):
    """
    Reads a snapshot and returns a brand new World. Raises PersistenceError
    without side effects if anything about the snapshot is wrong.
    """
    try:
        with open(filename, 'r', encoding="utf-8") as f:
            state = json.load(f)
    except FileNotFoundError as e:
        raise PersistenceError(f"No save file found at {filename}") from e
    except json.JSONDecodeError as e:
        logger.error("Malformed save file %s: %s", filename, e)
        raise PersistenceError(f"Save file {filename} is corrupted: {e.msg} (line {e.lineno})") from e
    except RecursionError as e:
        logger.error("Malformed save file %s: nested too deeply", filename)
        raise PersistenceError(f"Save file {filename} is corrupted: nested too deeply") from e
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Error reading save file %s: %s", filename, e)
        raise PersistenceError(f"Could not read save file {filename}: {e}") from e

    world = world_from_state(state, interactions)
    logger.info("Game loaded from %s", filename)
    return world


def world_from_state(state, interactions=None):
    _check_header(state)

    # Phase 1: materialize every room by id.
    rooms = {}
    pending_exits = []
    for index, room_state in enumerate(_require(state, 'rooms', list, "snapshot")):
        where = f"room #{index + 1}"
        if not isinstance(room_state, dict):
            raise PersistenceError(f"Save file is invalid: {where} is not an object")
        room_id = _require(room_state, 'id', str, where).lower()
        if room_id in rooms:
            raise PersistenceError(f"Save file is invalid: duplicate room {room_id}")

        room = Room(room_id, _require(room_state, 'description', str, room_id))
        for name in _require_names(room_state, 'items', room_id):
            room.add_item(Item(name))
        for name in _require_names(room_state, 'features', room_id):
            room.add_feature(Feature(name))
        exits = _require(room_state, 'exits', dict, room_id)
        for direction, destination in exits.items():
            if not isinstance(destination, str):
                raise PersistenceError(
                    f"Save file is invalid: exit {direction} of {room_id} is not a room id")
            pending_exits.append((room, direction, destination))
        rooms[room_id] = room

    # Phase 2: resolve exits against the complete room set.
    for room, direction, destination in pending_exits:
        if destination.lower() not in rooms:
            raise PersistenceError(
                f"Save file is invalid: exit {direction} of {room.id} "
                f"leads to unknown room {destination}")
        room.add_exit(direction, destination)

    player_state = _require(state, 'player', dict, "snapshot")
    player = Player(_require(player_state, 'name', str, "player"))
    for name in _require_names(player_state, 'inventory', "player"):
        player.add_item(Item(name))

    location = _require(state, 'player_location', str, "snapshot")
    title = state.get('title') or "Untitled"
    try:
        return World(rooms, location, player, interactions, title)
    except WorldBuildError as e:
        raise PersistenceError(f"Save file is invalid: {e.message}") from e


def _check_header(state):
    if not isinstance(state, dict):
        raise PersistenceError("Save file is invalid: expected an object at the top level")
    if state.get('format') != SNAPSHOT_FORMAT:
        raise PersistenceError("Save file is invalid: not an adventure snapshot")
    version = state.get('version')
    if not isinstance(version, int) or version > SNAPSHOT_VERSION:
        raise PersistenceError(f"Save file version {version} is not supported")


def _require(data, key, kind, where):
    if key not in data:
        raise PersistenceError(f"Save file is invalid: {where} has no '{key}'")
    value = data[key]
    if not isinstance(value, kind):
        raise PersistenceError(
            f"Save file is invalid: '{key}' of {where} should be a {kind.__name__}")
    return value


def _require_names(data, key, where):
    names = _require(data, key, list, where)
    for name in names:
        if not isinstance(name, str):
            raise PersistenceError(f"Save file is invalid: '{key}' of {where} holds a non-name")
    return names
