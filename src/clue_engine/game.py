"""
Game orchestration for the Clue engine.

Turn flow:
- The current player rolls the dice, then moves exactly that many squares
- Entering a room lets the player raise a suspicion about it
- The first player after the suspector (clockwise) holding a suspected card
  must reveal one of them
- At any point of their turn the current player may accuse instead
- A correct accusation wins; a wrong one strands the accuser, who still
  blocks squares and still has to disprove suspicions
- The game ends on a correct accusation or once every player is stranded

Every mutating operation checks that the game is still running, that the
caller is the current player and that the player holds the permission the
action needs. A rejected action changes nothing and returns a false/empty
result.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from clue_engine.board import Board, Tile, TileKey, TileLike
from clue_engine.cards import Card, Combination
from clue_engine.exceptions import InvalidCardError, UnknownPlayerError
from clue_engine.player import Permission, Player, PlayerInfo
from clue_engine.players import Disproof, Players

logger = logging.getLogger(__name__)


class Action(Enum):
    """The last thing that happened in the game, as seen by the clients."""
    DICE_ROLLED = "diceRolled"
    UPDATE_BOARD = "updateBoard"
    ACCUSING = "accusing"
    ACCUSED = "accused"
    SUSPECTING = "suspecting"
    SUSPECTED = "suspected"
    INVALIDATED = "invalidated"
    TURN_ENDED = "turnEnded"


@dataclass(frozen=True)
class MoveOutcome:
    is_moved: bool
    can_suspect: bool = False
    room: Optional[str] = None

    def to_dict(self) -> dict:
        result = {"isMoved": self.is_moved}
        if self.can_suspect:
            result["canSuspect"] = True
            result["room"] = self.room
        return result


@dataclass(frozen=True)
class AccusationResult:
    is_won: bool
    killing_combination: Combination

    def to_dict(self) -> dict:
        return {
            "isWon": self.is_won,
            "killingCombination": self.killing_combination.to_dict(),
        }


@dataclass(frozen=True)
class Suspicion:
    """An open suspicion and, once shown, the card that invalidated it."""
    combination: Combination
    suspector_id: int
    invalidator_id: Optional[int] = None
    invalidated_card: Optional[str] = None


@dataclass(frozen=True)
class GameStatus:
    current_player_id: Optional[int]
    action: Optional[Action]
    is_game_over: bool

    def to_dict(self) -> dict:
        return {
            "currentPlayerId": self.current_player_id,
            "action": self.action.value if self.action else None,
            "isGameOver": self.is_game_over,
        }


@dataclass(frozen=True)
class GameOverInfo:
    killing_combination: Combination
    is_game_won: bool

    def to_dict(self) -> dict:
        return {
            "killingCombination": self.killing_combination.to_dict(),
            "isGameWon": self.is_game_won,
        }


@dataclass(frozen=True)
class PlayersInfo:
    """Everything the clients need to draw the table. Hands are not included."""
    players: List[PlayerInfo]
    current_player_id: int
    stranded_player_ids: List[int]
    character_positions: Dict[str, Tile]
    dice_roll_combination: List[int]
    is_accusing: bool
    is_suspecting: bool
    permissions: Dict[str, bool]

    def to_dict(self) -> dict:
        return {
            "players": [p.to_dict() for p in self.players],
            "currentPlayerId": self.current_player_id,
            "strandedPlayerIds": list(self.stranded_player_ids),
            "characterPositions": {
                character: tile.to_dict()
                for character, tile in self.character_positions.items()
            },
            "diceRollCombination": list(self.dice_roll_combination),
            "isAccusing": self.is_accusing,
            "isSuspecting": self.is_suspecting,
            **self.permissions,
        }


class Game:
    """Main game state manager for one match."""

    def __init__(self, players: Players, board: Board, killing_combination: Combination):
        self._players = players
        self._board = board
        self._killing_combination = killing_combination
        self._current_player: Optional[Player] = None
        self._action: Optional[Action] = None
        self._last_dice_combination: List[int] = [0, 0]
        self._possible_positions: Dict[TileKey, Tile] = {}
        self._last_accusation_combination: Optional[Combination] = None
        self._last_suspicion: Optional[Suspicion] = None
        self._stranded_player_ids: List[int] = []
        self._entered_room: Optional[str] = None
        self._is_game_won = False
        self._is_game_over = False
        self._is_accusing = False
        self._is_suspecting = False

    # ========================================================================
    # GUARDS
    # ========================================================================

    @property
    def current_player_id(self) -> Optional[int]:
        return self._current_player.id if self._current_player else None

    @property
    def is_game_over(self) -> bool:
        return self._is_game_over

    def _acting_player(self, player_id: Optional[int], permission: Permission = Permission.NONE) -> Optional[Player]:
        """
        The current player, if they may act now.

        ``player_id`` of None skips the identity check (the caller already
        made it). Returns None when the action must be rejected.
        """
        if self._is_game_over or self._current_player is None:
            logger.warning(f"Rejected action from player {player_id}: game is not running")
            return None
        if player_id is not None and player_id != self._current_player.id:
            logger.warning(f"Rejected action from player {player_id}: not their turn")
            return None
        if not self._current_player.can(permission):
            logger.warning(
                f"Rejected action from player {self._current_player.id}: "
                f"missing permission {permission.name}"
            )
            return None
        return self._current_player

    # ========================================================================
    # TURN FLOW
    # ========================================================================

    def start(self) -> None:
        """Seat the first player. The phase stays empty until they act."""
        self._current_player = self._players.get_next_player()
        if self._current_player is None:
            self._is_game_over = True
            logger.warning("Game cannot start: every player is stranded")
            return
        self._current_player.setup_initial_permissions()
        logger.info(f"Game started, {self._current_player.name} goes first")

    def update_dice_combination(self, dice_combination: Sequence[int], player_id: Optional[int] = None) -> bool:
        """Record the roll of the two dice and let the player move."""
        player = self._acting_player(player_id, Permission.ROLL_DICE)
        if player is None:
            return False

        self._last_dice_combination = list(dice_combination)
        self._action = Action.DICE_ROLLED
        player.allow(Permission.MOVE_PAWN)
        player.revoke(Permission.ROLL_DICE)
        logger.debug(f"{player.name} rolled {self._last_dice_combination}")
        return True

    def _occupied_tiles(self) -> List[Tile]:
        return list(self._players.get_character_positions().values())

    def find_possible_positions(self, step_count: int) -> Dict[TileKey, Tile]:
        """
        Squares the current player can reach with ``step_count`` steps.

        A roll with no legal destination forfeits the move: the player may
        only end the turn.
        """
        player = self._acting_player(None, Permission.MOVE_PAWN)
        if player is None:
            return {}

        self._possible_positions = self._board.possible_destinations(
            step_count, player.position, self._occupied_tiles()
        )
        if not self._possible_positions:
            logger.info(f"{player.name} has no legal move for {step_count} steps")
            player.revoke(Permission.MOVE_PAWN)
            player.allow(Permission.END_TURN)
        return dict(self._possible_positions)

    def get_possible_positions(self) -> Dict[TileKey, Tile]:
        return dict(self._possible_positions)

    def move_pawn(self, tile_coordinates: TileLike, player_id: int) -> MoveOutcome:
        """Move the current player's token, if the square is reachable with the roll."""
        player = self._acting_player(player_id, Permission.MOVE_PAWN)
        if player is None:
            return MoveOutcome(is_moved=False)

        step_count = sum(self._last_dice_combination)
        validation = self._board.validate_move(
            step_count, player.position, self._occupied_tiles(), tile_coordinates
        )
        if not validation.can_move:
            logger.warning(f"{player.name} cannot move to {tile_coordinates} with {step_count} steps")
            return MoveOutcome(is_moved=False)

        player.move_pawn(validation.new_pos)
        player.revoke(Permission.MOVE_PAWN)
        player.allow(Permission.END_TURN)
        self._action = Action.UPDATE_BOARD
        self._possible_positions = {}

        if validation.room:
            self._entered_room = validation.room
            player.update_last_suspicion_position(validation.room)
            logger.info(f"{player.name} entered the {validation.room}")
            return MoveOutcome(is_moved=True, can_suspect=True, room=validation.room)

        logger.debug(f"{player.name} moved to {validation.new_pos.key}")
        return MoveOutcome(is_moved=True)

    def change_turn(self, player_id: Optional[int] = None) -> bool:
        """Pass the turn to the next player who is not stranded."""
        if self._acting_player(player_id) is None:
            return False
        if self._players.are_all_stranded():
            self._is_game_over = True
            return False

        next_player = self._players.get_next_player()
        if next_player is None:
            self._is_game_over = True
            return False

        self._current_player = next_player
        next_player.setup_initial_permissions()
        self._is_accusing = False
        self._is_suspecting = False
        self._entered_room = None
        self._possible_positions = {}
        self._action = Action.TURN_ENDED
        logger.info(f"Turn passes to {next_player.name}")
        return True

    # ========================================================================
    # ACCUSATIONS
    # ========================================================================

    def toggle_is_accusing(self, player_id: Optional[int] = None) -> bool:
        player = self._acting_player(player_id, Permission.ACCUSE)
        if player is None:
            return False

        self._is_accusing = True
        self._action = Action.ACCUSING
        player.start_accusing()
        return True

    def validate_accuse(self, player_id: int, combination: Combination) -> Optional[AccusationResult]:
        """
        Check an accusation against the killing combination.

        A correct accusation wins the game. A wrong one strands the accuser,
        and ends the game once nobody is left to play. Either way the turn
        can only be ended afterwards.

        Returns:
            The result and a copy of the killing combination, or None if
            the player may not accuse now
        """
        player = self._acting_player(player_id, Permission.ACCUSE)
        if player is None:
            return None

        self._last_accusation_combination = combination
        self._is_game_won = self._killing_combination.matches(combination)
        self._is_game_over = self._is_game_won

        if self._is_game_won:
            logger.info(f"{player.name} solved the mystery")
        else:
            self._players.strand_player(player.id)
            if player.id not in self._stranded_player_ids:
                self._stranded_player_ids.append(player.id)
            self._is_game_over = self._players.are_all_stranded()
            logger.info(f"{player.name} accused wrongly")

        self._is_accusing = False
        self._entered_room = None
        self._action = Action.ACCUSED
        player.revoke(Permission.ROLL_DICE | Permission.MOVE_PAWN | Permission.ACCUSE)
        player.allow(Permission.END_TURN)

        if self._is_game_over:
            logger.info("Game over")
        return AccusationResult(
            is_won=self._is_game_won,
            killing_combination=replace(self._killing_combination),
        )

    # ========================================================================
    # SUSPICIONS
    # ========================================================================

    def toggle_is_suspecting(self, player_id: Optional[int] = None) -> bool:
        """Open the suspicion prompt. Only after entering a room this turn."""
        player = self._acting_player(player_id)
        if player is None:
            return False
        if self._entered_room is None:
            logger.warning(f"{player.name} cannot suspect without entering a room")
            return False

        self._is_suspecting = True
        self._action = Action.SUSPECTING
        return True

    def validate_suspicion(self, player_id: int, combination: Combination) -> bool:
        """Record the open suspicion. Disproof happens in rule_out_suspicion."""
        player = self._acting_player(player_id)
        if player is None:
            return False
        if self._entered_room is None:
            logger.warning(f"{player.name} has no room entry to suspect in")
            return False

        self._last_suspicion = Suspicion(combination=combination, suspector_id=player.id)
        self._is_suspecting = False
        self._entered_room = None
        self._action = Action.SUSPECTED
        logger.debug(f"{player.name} suspects {combination.to_dict()}")
        return True

    def rule_out_suspicion(self) -> Optional[Disproof]:
        """Who must disprove the open suspicion, and with which cards."""
        if self._last_suspicion is None or self._current_player is None:
            return None
        return self._players.rule_out_suspicion(
            self._current_player.id, self._last_suspicion.combination.cards()
        )

    def invalidate_card(self, invalidator_id: int, card_title: str) -> None:
        """
        Record the card shown against the open suspicion.

        Raises:
            InvalidCardError: no suspicion is open, or the card is not part of it
        """
        if self._last_suspicion is None:
            raise InvalidCardError("No open suspicion to invalidate")
        if card_title not in self._last_suspicion.combination.titles():
            raise InvalidCardError(f"Card not present in suspicion: {card_title}")

        self._last_suspicion = replace(
            self._last_suspicion,
            invalidator_id=invalidator_id,
            invalidated_card=card_title,
        )
        self._action = Action.INVALIDATED
        logger.debug(f"Player {invalidator_id} invalidated the suspicion")

    # ========================================================================
    # PROJECTIONS
    # ========================================================================

    def state(self) -> GameStatus:
        return GameStatus(
            current_player_id=self.current_player_id,
            action=self._action,
            is_game_over=self._is_game_over,
        )

    def players_info(self) -> PlayersInfo:
        player = self._current_player
        return PlayersInfo(
            players=self._players.info(),
            current_player_id=self.current_player_id,
            stranded_player_ids=list(self._stranded_player_ids),
            character_positions=self._players.get_character_positions(),
            dice_roll_combination=list(self._last_dice_combination),
            is_accusing=self._is_accusing,
            is_suspecting=self._is_suspecting,
            permissions=player.permission_flags() if player else {},
        )

    def get_cards_of_player(self, player_id: int) -> Tuple[Card, ...]:
        """The hand of one player. Only to be sent to that player."""
        player = self._players.find_player(player_id)
        if player is None:
            raise UnknownPlayerError(player_id)
        return player.cards

    def get_character_positions(self) -> Dict[str, Tile]:
        return self._players.get_character_positions()

    def get_game_over_info(self) -> GameOverInfo:
        return GameOverInfo(
            killing_combination=replace(self._killing_combination),
            is_game_won=self._is_game_won,
        )

    def get_last_accusation_combination(self) -> Optional[Combination]:
        return self._last_accusation_combination

    def get_last_suspicion_combination(self) -> Optional[Combination]:
        return self._last_suspicion.combination if self._last_suspicion else None

    def get_last_suspicion(self) -> Optional[Suspicion]:
        return self._last_suspicion

    def get_last_dice_combination(self) -> List[int]:
        return list(self._last_dice_combination)

    def get_last_suspicion_position(self, player_id: int) -> Optional[str]:
        return self._players.get_last_suspicion_position(player_id)
