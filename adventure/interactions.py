"""
Feature interactions: what happens when the player uses an item on a
feature. Handlers are plain callables `handler(item, feature, room) -> str`
that raise InteractionError to refuse. The World rolls back any room or
inventory changes made by a handler that fails.
"""
import logging

from adventure.entities import Item
from adventure.errors import InteractionError

logger = logging.getLogger(__name__)


class Interaction:
    def __init__(self, handler, consumes=False):
        self.handler = handler
        self.consumes = consumes


class InteractionRegistry:
    def __init__(self):
        self._interactions = {}

    def register(self, item_name, feature_name, handler, consumes=False):
        key = (item_name.lower(), feature_name.lower())
        if key in self._interactions:
            logger.warning("Replacing interaction for %s on %s", *key)
        self._interactions[key] = Interaction(handler, consumes)

    def lookup(self, item_name, feature_name):
        return self._interactions.get((item_name.lower(), feature_name.lower()))

    def __contains__(self, pair):
        item_name, feature_name = pair
        return self.lookup(item_name, feature_name) is not None

    def __len__(self):
        return len(self._interactions)


# ==========================================================
# EFFECT FACTORIES
# ==========================================================
def remove_feature(message=None):
    def effect(item, feature, room):
        if room.remove_feature(feature.name) is None:
            raise InteractionError(f"The {feature.name} is no longer here")
        return message or f"The {feature.name} is gone"
    return effect


def open_exit(direction, destination, message=None):
    """Adds an exit from the room. The destination must be an existing room id."""
    def effect(item, feature, room):
        if room.has_exit(direction):
            raise InteractionError(f"There is already a way {direction.lower()}")
        room.add_exit(direction, destination)
        return message or f"A way {direction.lower()} opens up"
    return effect


def add_item(name, message=None):
    def effect(item, feature, room):
        room.add_item(Item(name))
        return message or f"A {name} appears"
    return effect


def combine(*effects, message=None):
    """
    Runs effects in order. The last effect's message wins unless a message
    is given.
    """
    def effect(item, feature, room):
        result = None
        for eff in effects:
            result = eff(item, feature, room)
        return message or result
    return effect
