class GameError(Exception):
    """
    Base class for every error the engine reports back to the player.
    The message is user-facing text, not a diagnostic.
    """
    reason = "game_error"

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class NavigationError(GameError):
    reason = "no_exit_that_way"


class InventoryError(GameError):
    reason = "item_not_present"


class InteractionError(GameError):
    reason = "interaction_failed"


class PersistenceError(GameError):
    reason = "persistence_failed"


class WorldBuildError(GameError):
    reason = "invalid_world"


class FatalInputError(GameError):
    """The input source itself failed. Ends the session."""
    reason = "input_failed"
