"""
World construction. Turns a flat, declarative room list (usually read from a
YAML world file) into a fully wired World.

    title: The Cellar
    start_room: entrance
    player: {name: Player}
    rooms:
      - id: entrance
        description: A draughty entrance hall.
        items: [Stick]
        features: []
        exits: {north: corridor}
    interactions:
      - item: key
        feature: grate
        message: The grate swings open.
        consumes: true
        effects:
          - {type: remove_feature}
          - {type: open_exit, direction: down, destination: cellar}
"""
import logging

import yaml

from adventure import interactions as effects
from adventure.entities import Feature, Item, Player, Room
from adventure.errors import WorldBuildError
from adventure.interactions import InteractionRegistry
from adventure.world import World

logger = logging.getLogger(__name__)


def build_world(rooms, start_room, player_name="Player", interactions=None, title="Untitled"):
    """
    Builds a World from room definitions.

    Each definition is a dict with `id`, `description` and optional `items`,
    `features` and `exits` (direction -> destination id). Rooms are created
    first and exits wired afterwards, so rooms may point at each other in
    any order. Returns the World; its interaction registry is filled from
    `interactions` (a list of declarative interaction dicts).
    """
    if not isinstance(rooms, list):
        raise WorldBuildError("Rooms must be a list of room definitions")
    if not isinstance(player_name, str):
        raise WorldBuildError("The player name must be text")

    room_lookup = {}
    destination_lookup = []

    for data in rooms:
        if not isinstance(data, dict):
            raise WorldBuildError(f"Room definition {data!r} is not a mapping")
        if data.get('id') is None:
            raise WorldBuildError("Every room needs an id")
        description = data.get('description')
        room = Room(str(data['id']), "" if description is None else str(description))
        if room.id in room_lookup:
            raise WorldBuildError(f"Room {room.id} is defined twice")
        for name in _names(data, 'items', room.id):
            room.add_item(Item(name))
        for name in _names(data, 'features', room.id):
            room.add_feature(Feature(name))
        exits = data.get('exits') or {}
        if not isinstance(exits, dict):
            raise WorldBuildError(f"Exits of room {room.id} must map directions to rooms")
        for direction, destination in exits.items():
            destination_lookup.append((room, str(direction), str(destination)))
        room_lookup[room.id] = room

    for room, direction, destination in destination_lookup:
        if destination.lower() not in room_lookup:
            raise WorldBuildError(
                f"Exit {direction.lower()} from {room.id} leads to unknown room {destination.lower()}")
        room.add_exit(direction, destination)

    if start_room is None or str(start_room).lower() not in room_lookup:
        raise WorldBuildError(f"Starting room {start_room} does not exist")

    if interactions is not None and not isinstance(interactions, list):
        raise WorldBuildError("Interactions must be a list")
    registry = InteractionRegistry()
    for data in interactions or []:
        _register_interaction(registry, data, room_lookup)

    world = World(room_lookup, str(start_room), Player(player_name), registry, title)
    logger.info("Built world with %d rooms and %d interactions, starting in %s",
                len(room_lookup), len(registry), world.player_location)
    return world


def _names(data, key, room_id):
    names = data.get(key) or []
    if not isinstance(names, list):
        raise WorldBuildError(f"{key.capitalize()} of room {room_id} must be a list")
    return [str(name) for name in names]


def _register_interaction(registry, data, room_lookup):
    try:
        item_name = str(data['item'])
        feature_name = str(data['feature'])
    except (KeyError, TypeError) as e:
        raise WorldBuildError("Every interaction needs an item and a feature") from e

    steps = []
    for effect in data.get('effects') or []:
        steps.append(_build_effect(effect, room_lookup, item_name, feature_name))
    if not steps:
        raise WorldBuildError(f"Interaction {item_name} on {feature_name} has no effects")

    handler = effects.combine(*steps, message=data.get('message'))
    registry.register(item_name, feature_name, handler, consumes=bool(data.get('consumes', False)))


def _build_effect(effect, room_lookup, item_name, feature_name):
    kind = effect.get('type') if isinstance(effect, dict) else None
    if kind == 'remove_feature':
        return effects.remove_feature()
    if kind == 'open_exit':
        direction = effect.get('direction')
        destination = str(effect.get('destination', "")).lower()
        if not direction or destination not in room_lookup:
            raise WorldBuildError(
                f"Interaction {item_name} on {feature_name} opens an exit to unknown room {destination}")
        return effects.open_exit(str(direction), destination)
    if kind == 'add_item':
        if not effect.get('name'):
            raise WorldBuildError(f"Interaction {item_name} on {feature_name} adds an unnamed item")
        return effects.add_item(str(effect['name']))
    raise WorldBuildError(f"Unknown effect type {kind!r} in interaction {item_name} on {feature_name}")


def load_world_definition(path):
    """Reads a YAML world file and builds it."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise WorldBuildError(f"World file not found: {path}") from e
    except yaml.YAMLError as e:
        raise WorldBuildError(f"World file {path} is not valid YAML: {e}") from e

    if not isinstance(data, dict) or 'rooms' not in data:
        raise WorldBuildError(f"World file {path} has no rooms")

    player = data.get('player') or {}
    if not isinstance(player, dict):
        raise WorldBuildError(f"World file {path}: player must be a mapping with a name")
    return build_world(
        data['rooms'],
        data.get('start_room'),
        player_name=player.get('name') or "Player",
        interactions=data.get('interactions'),
        title=data.get('title') or "Untitled",
    )
