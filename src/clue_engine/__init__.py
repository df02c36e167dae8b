"""
Clue engine: rules, turn state machine and board movement for a
Cluedo-style deduction game.
"""

from clue_engine.board import Board, MoveValidation, Tile
from clue_engine.cards import Card, CardCategory, Combination, Room, Suspect, Weapon
from clue_engine.context import GameContext, create_context
from clue_engine.exceptions import BoardConfigError, GameError, InvalidCardError, UnknownPlayerError
from clue_engine.game import Action, Game
from clue_engine.player import Permission, Player
from clue_engine.players import Disproof, Players

__all__ = [
    "Action",
    "Board",
    "BoardConfigError",
    "Card",
    "CardCategory",
    "Combination",
    "Disproof",
    "Game",
    "GameContext",
    "GameError",
    "InvalidCardError",
    "MoveValidation",
    "Permission",
    "Player",
    "Players",
    "Room",
    "Suspect",
    "Tile",
    "UnknownPlayerError",
    "Weapon",
    "create_context",
]
