import logging

from adventure.entities import Player
from adventure.errors import InteractionError, InventoryError, NavigationError, WorldBuildError
from adventure.interactions import InteractionRegistry

logger = logging.getLogger(__name__)


class World:
    def __init__(self, rooms, player_location, player=None, interactions=None, title="Untitled"):
        """
        The complete game state for one session.

        `rooms` maps room id -> Room. Exits hold room ids, never Room objects,
        so cycles in the map are just ids pointing back at each other.
        """
        self.rooms = rooms
        self.player_location = player_location.lower()
        self.player = player or Player()
        self.interactions = InteractionRegistry() if interactions is None else interactions
        self.title = title
        self._validate()

    def _validate(self):
        if self.player_location not in self.rooms:
            raise WorldBuildError(f"Starting location {self.player_location} does not exist")
        for room in self.rooms.values():
            for direction, destination in room.exits.items():
                if destination not in self.rooms:
                    raise WorldBuildError(
                        f"Exit {direction} from {room.id} leads to unknown room {destination}")

    def get_player_room(self):
        return self.rooms[self.player_location]

    def describe_room(self):
        return self.get_player_room().get_full_description()

    # ==========================================================
    # NAVIGATION
    # ==========================================================
    def move_player(self, direction):
        direction = direction.lower()
        room = self.get_player_room()
        if direction not in room.exits:
            raise NavigationError(f"{direction} is not a valid direction")

        self.player_location = room.exits[direction]
        logger.info("Player moved %s from %s to %s", direction, room.id, self.player_location)
        return f"You have moved {direction}"

    # ==========================================================
    # INVENTORY
    # ==========================================================
    def take_item(self, item_name):
        room = self.get_player_room()
        item = room.remove_item(item_name)
        if item is None:
            raise InventoryError(f"No item of type {item_name.lower()} is present")

        self.player.add_item(item)
        logger.info("Player took %s from %s", item.name, room.id)
        return f"Picked up {item.name}"

    def list_inventory(self):
        return self.player.list_inventory()

    # ==========================================================
    # FEATURE INTERACTION
    # ==========================================================
    def use_item(self, item_name, feature_name):
        room = self.get_player_room()
        feature = room.find_feature(feature_name)
        item = self.player.find_item(item_name)
        if feature is None or item is None:
            raise InteractionError(
                f"You cannot use {item_name.lower()} on {feature_name.lower()} here")

        interaction = self.interactions.lookup(item.name, feature.name)
        if interaction is None:
            raise InteractionError(f"Nothing happens when you use {item.name} on {feature.name}")

        # Handlers may touch the room freely; restore everything if they fail.
        room_state = room.to_state()
        player_state = self.player.to_state()
        try:
            message = interaction.handler(item, feature, room)
            self._check_exits(room)
            if interaction.consumes:
                self.player.remove_item(item.name)
        except InteractionError:
            room.load_state(room_state)
            self.player.load_state(player_state)
            raise
        except Exception as e:
            room.load_state(room_state)
            self.player.load_state(player_state)
            logger.exception("Interaction %s on %s crashed", item.name, feature.name)
            raise InteractionError(f"Using {item.name} on {feature.name} went wrong") from e

        logger.info("Player used %s on %s in %s", item.name, feature.name, room.id)
        return message

    def _check_exits(self, room):
        for direction, destination in room.exits.items():
            if destination not in self.rooms:
                raise InteractionError(f"The way {direction} leads nowhere")
