"""
A single participant: position, hand, permissions and stranded status.
"""

import logging
from dataclasses import dataclass
from enum import Flag, auto
from typing import Dict, Iterable, Optional, Tuple

from clue_engine.board import Tile
from clue_engine.cards import Card

logger = logging.getLogger(__name__)


class Permission(Flag):
    """Actions a player may currently take, as a capability set."""
    NONE = 0
    ROLL_DICE = auto()
    MOVE_PAWN = auto()
    ACCUSE = auto()
    END_TURN = auto()


INITIAL_PERMISSIONS = Permission.ROLL_DICE | Permission.ACCUSE

# Wire names of each permission, as exposed to the presentation layer
PERMISSION_FLAGS = {
    Permission.ROLL_DICE: "canRollDice",
    Permission.MOVE_PAWN: "canMovePawn",
    Permission.ACCUSE: "canAccuse",
    Permission.END_TURN: "shouldEndTurn",
}


@dataclass(frozen=True)
class PlayerInfo:
    """Public view of a player. Never carries the hand."""
    id: int
    name: str
    character: str
    position: Optional[Tile]
    is_stranded: bool
    last_suspicion_room: Optional[str]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "character": self.character,
            "currentPosition": self.position.to_dict() if self.position else None,
            "isStranded": self.is_stranded,
            "lastSuspicionPosition": self.last_suspicion_room,
        }


class Player:
    """Represents a player in the game."""

    def __init__(
        self,
        player_id: int,
        name: str,
        character: str,
        position: Optional[Tile] = None,
        cards: Iterable[Card] = (),
    ):
        self._id = player_id
        self._name = name
        self._character = character
        self._position = position
        self._cards: Tuple[Card, ...] = tuple(cards)
        self._permissions = INITIAL_PERMISSIONS
        self._is_stranded = False
        self._is_accusing = False
        self._last_suspicion_room: Optional[str] = None

    def __repr__(self):
        return f"Player(id={self._id}, name={self._name!r}, character={self._character!r})"

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def character(self) -> str:
        return self._character

    @property
    def position(self) -> Optional[Tile]:
        return self._position

    @property
    def cards(self) -> Tuple[Card, ...]:
        return self._cards

    @property
    def permissions(self) -> Permission:
        return self._permissions

    @property
    def is_stranded(self) -> bool:
        return self._is_stranded

    @property
    def is_accusing(self) -> bool:
        return self._is_accusing

    @property
    def last_suspicion_room(self) -> Optional[str]:
        return self._last_suspicion_room

    def can(self, permission: Permission) -> bool:
        return permission in self._permissions

    def allow(self, permission: Permission) -> None:
        self._permissions |= permission

    def revoke(self, permission: Permission) -> None:
        self._permissions &= ~permission

    def setup_initial_permissions(self) -> None:
        """Reset to the start-of-turn defaults: roll dice or accuse."""
        self._permissions = INITIAL_PERMISSIONS
        self._is_accusing = False

    def permission_flags(self) -> Dict[str, bool]:
        return {name: self.can(permission) for permission, name in PERMISSION_FLAGS.items()}

    def move_pawn(self, new_pos: Tile) -> None:
        """Place the token on ``new_pos``. The move must already be validated."""
        self._position = new_pos

    def strand(self) -> None:
        if not self._is_stranded:
            logger.info(f"{self._name} is stranded")
        self._is_stranded = True

    def start_accusing(self) -> None:
        self._is_accusing = True

    def update_last_suspicion_position(self, room: Optional[str]) -> None:
        self._last_suspicion_room = room

    def holds_any(self, cards: Iterable[Card]) -> Tuple[Card, ...]:
        """The cards of this hand that appear in ``cards``, in hand order."""
        wanted = set(cards)
        return tuple(card for card in self._cards if card in wanted)

    def info(self) -> PlayerInfo:
        return PlayerInfo(
            id=self._id,
            name=self._name,
            character=self._character,
            position=self._position,
            is_stranded=self._is_stranded,
            last_suspicion_room=self._last_suspicion_room,
        )
