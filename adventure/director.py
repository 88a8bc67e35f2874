import logging

from adventure import listener
from adventure.errors import GameError
from adventure.persistence import DEFAULT_SAVE_FILE, load_world, save_world

logger = logging.getLogger(__name__)


class Director:
    def __init__(self, world, save_file=DEFAULT_SAVE_FILE):
        """
        The Director owns the live World for a session and applies parsed
        actions to it. It never prints; every call to `execute` returns a
        result dictionary for the front end to render.
        """
        self.world = world
        self.save_file = save_file

    def execute(self, action):
        """
        Master Router: Action -> World operation -> result.
        Any GameError raised along the way becomes a FAILURE result.
        """
        try:
            if action.verb == listener.EXIT:
                return {"event_type": "exit", "status": "SUCCESS", "message": "Exiting"}
            elif action.verb == listener.MOVE:
                return self._return_result("scene_change", self.world.move_player(action.noun))
            elif action.verb == listener.TAKE:
                return self._return_result("inventory_result", self.world.take_item(action.noun))
            elif action.verb == listener.INVENTORY:
                return self._return_result("inventory_report", self.world.list_inventory())
            elif action.verb == listener.USE:
                return self._return_result(
                    "interaction_result", self.world.use_item(action.noun, action.second))
            elif action.verb == listener.SAVE:
                return self.save()
            elif action.verb == listener.LOAD:
                return self.load()
            else:
                return self._return_error("unknown_command", "I don't understand that.")
        except GameError as e:
            logger.debug("Action %r failed: %s", action, e.message)
            return self._return_error(e.reason, e.message)

    def save(self):
        message = save_world(self.world, self.save_file)
        return self._return_result("saved", message)

    def load(self):
        # Interactions are part of the world definition, not the snapshot.
        world = load_world(self.save_file, self.world.interactions)
        self.world = world
        return self._return_result("loaded", f"game loaded from {self.save_file}")

    def _return_result(self, event_type, message):
        return {"event_type": event_type, "status": "SUCCESS", "message": message}

    def _return_error(self, reason, message):
        return {
            "event_type": "error",
            "status": "FAILURE",
            "reason": reason,
            "message": message,
        }
