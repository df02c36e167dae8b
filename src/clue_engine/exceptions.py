"""
Exceptions raised by the Clue engine.

Illegal actions (wrong player, wrong phase, no legal destination) are not
exceptions: the engine rejects them with a false/empty result. The errors
below signal a caller bug or bad configuration instead.
"""


class GameError(ValueError):
    """Base class for engine errors."""


class InvalidCardError(GameError):
    """The card is not part of the open suspicion."""


class UnknownPlayerError(GameError):
    """No player with the given id is seated in this game."""

    def __init__(self, player_id):
        super().__init__(f"Invalid player id: {player_id}")
        self.player_id = player_id


class BoardConfigError(GameError):
    """The board configuration is malformed."""
