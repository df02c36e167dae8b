"""
The roster: seating order, turn rotation and queries across players.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from clue_engine.board import Tile
from clue_engine.cards import Card
from clue_engine.exceptions import UnknownPlayerError
from clue_engine.player import Player, PlayerInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Disproof:
    """The first player able to disprove a suspicion and the cards they match."""
    invalidator_id: int
    cards: Tuple[Card, ...]

    def to_dict(self) -> dict:
        return {
            "invalidatedBy": self.invalidator_id,
            "matchingCards": [card.to_dict() for card in self.cards],
        }


class Players:
    """Ordered, fixed-membership roster with a rotation cursor."""

    def __init__(self, players: Iterable[Player]):
        self._players: List[Player] = list(players)
        ids = [p.id for p in self._players]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Player ids must be unique: {ids}")
        self._current_index = -1

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self):
        return iter(self._players)

    def get_next_player(self) -> Optional[Player]:
        """
        Advance the cursor to the next player who is not stranded.

        Returns:
            The new current player, or None when every player is stranded
            (the cursor is left where it was).
        """
        count = len(self._players)
        for offset in range(1, count + 1):
            index = (self._current_index + offset) % count
            candidate = self._players[index]
            if not candidate.is_stranded:
                self._current_index = index
                return candidate
        logger.warning("No eligible player left in the rotation")
        return None

    def find_player(self, player_id: int) -> Optional[Player]:
        for player in self._players:
            if player.id == player_id:
                return player
        return None

    def _require(self, player_id: int) -> Player:
        player = self.find_player(player_id)
        if player is None:
            raise UnknownPlayerError(player_id)
        return player

    def get_player_position(self, player_id: int) -> Optional[Tile]:
        return self._require(player_id).position

    def get_last_suspicion_position(self, player_id: int) -> Optional[str]:
        return self._require(player_id).last_suspicion_room

    def get_character_positions(self) -> Dict[str, Tile]:
        return {p.character: p.position for p in self._players if p.position is not None}

    def get_players_positions(self) -> Dict[int, Optional[Tile]]:
        return {p.id: p.position for p in self._players}

    def strand_player(self, player_id: int) -> None:
        """Strand a player. Raises UnknownPlayerError for an unknown id."""
        self._require(player_id).strand()

    def are_all_stranded(self) -> bool:
        return all(p.is_stranded for p in self._players)

    def rule_out_suspicion(
        self, current_player_id: int, suspicion_cards: Iterable[Card]
    ) -> Optional[Disproof]:
        """
        Find who disproves a suspicion.

        Players are asked in turn order, starting with the seat after the
        suspector and wrapping around. Stranded players still answer. The
        first player holding any suspicion card disproves it, with every
        matching card of their hand.

        Returns:
            A Disproof, or None if nobody can disprove the suspicion
        """
        cards = list(suspicion_cards)
        suspector = self._require(current_player_id)
        start = self._players.index(suspector)

        for offset in range(1, len(self._players)):
            other = self._players[(start + offset) % len(self._players)]
            matching = other.holds_any(cards)
            if matching:
                logger.debug(f"{other.name} can disprove with {len(matching)} card(s)")
                return Disproof(invalidator_id=other.id, cards=matching)

        logger.debug("No one can disprove the suspicion")
        return None

    def info(self) -> List[PlayerInfo]:
        return [p.info() for p in self._players]
