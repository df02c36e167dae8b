"""
Board grid and movement validation for the Clue engine.

Movement rules:
- Move exactly the number of squares rolled
- Movement is horizontal or vertical only (no diagonal)
- Cannot pass through or land on squares occupied by another token
- Cannot visit the same square twice in one move
- Entering a room ends the move, even if steps remain

A board is a fixed set of walkable tiles. Some tiles carry a room label
(the doors on the classic layout); standing on any tile labelled for a room
means being in that room.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from clue_engine.cards import Room, Suspect
from clue_engine.exceptions import BoardConfigError

logger = logging.getLogger(__name__)

TileKey = Tuple[int, int]


@dataclass(frozen=True)
class Tile:
    """A walkable square. ``room`` is the room label, if the square has one."""
    x: int
    y: int
    room: Optional[str] = None

    @property
    def key(self) -> TileKey:
        return (self.x, self.y)

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}


TileLike = Union[Tile, TileKey, Mapping[str, int]]


def tile_key(tile: TileLike) -> TileKey:
    """Normalize a Tile, an ``(x, y)`` tuple or an ``{x, y}`` mapping to a key."""
    if isinstance(tile, Tile):
        return tile.key
    if isinstance(tile, Mapping):
        return (int(tile["x"]), int(tile["y"]))
    x, y = tile
    return (int(x), int(y))


@dataclass(frozen=True)
class MoveValidation:
    """Outcome of checking a single move against the board."""
    can_move: bool
    new_pos: Optional[Tile] = None
    room: Optional[str] = None


# ============================================================================
# DEFAULT BOARD LAYOUT
# The classic board as a 25-row grid, one character per square.
#
# Legend:
#   W = Wall/void (impassable)
#   H, . = Hallway (walkable)
#   K, B, C, D, I, L, O, A, S = Room interiors (impassable)
#   k, b, c, d, i, l, o, a, s = Room doors (walkable, entering one enters the room)
#   1-6 = Starting squares for each suspect
# ============================================================================

BOARD_LAYOUT = [
    "WWWWWWWWWW3WWWWW4WWWWWWWW",
    "KKKKKK.WHHHHHHHHWW.CCCCCC",
    "KKKKKK.HHHWWWWWWHH.CCCCCC",
    "KKKKKK.HHWWBBBBWWH.CCCCCC",
    "KKKKKK.HHWBBBBBBWH.CCCCCC",
    "KKKKKK.HHbBBBBBBbH.CCCCCc",
    "WWWWWWkHHWBBBBBBWHHHHHHHW",
    "HHHHHHHHHWWWWWWWWHHHHHHH5",
    "W.HHHHHHHHHHHHHHHHHHHHHHW",
    "DDDDDD.HHHHHHHHHHHHW.IIII",
    "DDDDDD.HHHHHHHHHHHHW.IIII",
    "DDDDDD.HHHHHHHHHHHHW.IIII",
    "DDDDDDdHHWWWWWWWWHHiIIIII",
    "DDDDDD.HHWAAAAAWHHHHIIIII",
    "DDDDDD.HHaAAAAAaHHHHWiWWW",
    "WWWWWW.HHWAAAAAAWHHHHHHHH",
    "WHHHHHHHHHWAAAAAWHHHHHHH6",
    "W.HHHHHHHHWAAAAAAWHHHHHWW",
    "OOOOOOoHHWWWWaWWWHH.LLLLL",
    "OOOOOOO.HHHHHHHHHHH.LLLLL",
    "OOOOOOO.HHWWWWWWWHH.LLLLl",
    "OOOOOOO.HHWSSSSSWHHlLLLLL",
    "OOOOOOO.HHWSSSSSWHH.LLLLL",
    "WWWWWWW2HHsSSSSSsHHWWWWWW",
    "WWWWWWWWWHHH1HHHHHWWWWWWW",
]

# Door letters map to rooms (the upper-case letter is the room interior)
ROOM_CODES = {
    'k': Room.KITCHEN,
    'b': Room.BALLROOM,
    'c': Room.CONSERVATORY,
    'd': Room.DINING_ROOM,
    'i': Room.BILLIARD_ROOM,
    'l': Room.LIBRARY,
    'o': Room.LOUNGE,
    'a': Room.HALL,
    's': Room.STUDY,
}

# Starting square codes map to suspects
START_CODES = {
    '1': Suspect.MISS_SCARLET,
    '2': Suspect.COLONEL_MUSTARD,
    '3': Suspect.MRS_WHITE,
    '4': Suspect.MR_GREEN,
    '5': Suspect.MRS_PEACOCK,
    '6': Suspect.PROFESSOR_PLUM,
}

HALLWAY_CODES = "H."


def get_adjacent_keys(x: int, y: int) -> List[TileKey]:
    """Orthogonally adjacent coordinates (no diagonal movement)."""
    return [
        (x, y - 1),  # Up
        (x, y + 1),  # Down
        (x - 1, y),  # Left
        (x + 1, y),  # Right
    ]


class Board:
    """The set of walkable tiles, the rooms they belong to and start squares."""

    def __init__(
        self,
        tiles: Iterable[Tile],
        rooms: Mapping[str, Iterable[str]],
        start_positions: Optional[Mapping[str, TileLike]] = None,
    ):
        self._tiles: Dict[TileKey, Tile] = {}
        for tile in tiles:
            if tile.key in self._tiles:
                raise BoardConfigError(f"Duplicate tile at {tile.key}")
            self._tiles[tile.key] = tile

        self._room_by_label: Dict[str, str] = {}
        for room_name, labels in rooms.items():
            for label in labels:
                if label in self._room_by_label:
                    raise BoardConfigError(
                        f"Room label '{label}' belongs to both "
                        f"{self._room_by_label[label]} and {room_name}"
                    )
                self._room_by_label[label] = room_name

        for tile in self._tiles.values():
            if tile.room is not None and tile.room not in self._room_by_label:
                raise BoardConfigError(
                    f"Tile {tile.key} has unknown room label '{tile.room}'"
                )

        self._start_positions: Dict[str, Tile] = {}
        for character, position in (start_positions or {}).items():
            tile = self._tiles.get(tile_key(position))
            if tile is None:
                raise BoardConfigError(
                    f"Start position of {character} is not a walkable tile"
                )
            self._start_positions[character] = tile

        logger.debug(
            f"Board ready: {len(self._tiles)} tiles, "
            f"{len(set(self._room_by_label.values()))} rooms"
        )

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_layout(cls, layout: Optional[List[str]] = None) -> "Board":
        """Build a board from an ASCII layout (see the legend above)."""
        layout = BOARD_LAYOUT if layout is None else layout
        tiles = []
        rooms: Dict[str, List[str]] = {}
        starts: Dict[str, TileKey] = {}

        for y, row in enumerate(layout):
            for x, char in enumerate(row):
                if char in HALLWAY_CODES:
                    tiles.append(Tile(x, y))
                elif char in START_CODES:
                    tiles.append(Tile(x, y))
                    starts[START_CODES[char].value] = (x, y)
                elif char in ROOM_CODES:
                    tiles.append(Tile(x, y, room=char))
                    labels = rooms.setdefault(ROOM_CODES[char].value, [])
                    if char not in labels:
                        labels.append(char)

        return cls(tiles, rooms, starts)

    @classmethod
    def from_config(cls, config: Mapping) -> "Board":
        """
        Build a board from its JSON form.

        Args:
            config: ``{"tiles": [{"x", "y", "room"?}], "rooms": {name: [label]},
                    "startPositions": {character: {"x", "y"}}}``
        """
        try:
            tiles = [
                Tile(int(entry["x"]), int(entry["y"]), entry.get("room"))
                for entry in config["tiles"]
            ]
            rooms = {name: list(labels) for name, labels in config["rooms"].items()}
            starts = {
                character: tile_key(position)
                for character, position in config.get("startPositions", {}).items()
            }
        except (KeyError, TypeError, ValueError) as e:
            raise BoardConfigError(f"Malformed board configuration: {e}") from e
        return cls(tiles, rooms, starts)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Board":
        """Load a board from a JSON file."""
        try:
            with open(path, encoding="utf-8") as f:
                config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise BoardConfigError(f"Cannot read board configuration {path}: {e}") from e
        logger.info(f"Loaded board configuration from {path}")
        return cls.from_config(config)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def start_positions(self) -> Dict[str, Tile]:
        return dict(self._start_positions)

    @property
    def room_names(self) -> List[str]:
        return sorted(set(self._room_by_label.values()))

    def get_tile(self, x: int, y: int) -> Optional[Tile]:
        """The walkable tile at (x, y), or None for walls and off-board squares."""
        return self._tiles.get((x, y))

    def room_of(self, tile: TileLike) -> Optional[str]:
        """Name of the room a tile belongs to, if any."""
        board_tile = self._tiles.get(tile_key(tile))
        if board_tile is None or board_tile.room is None:
            return None
        return self._room_by_label[board_tile.room]

    def _neighbours(self, key: TileKey) -> List[TileKey]:
        return [adj for adj in get_adjacent_keys(*key) if adj in self._tiles]

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------

    def possible_destinations(
        self,
        step_count: int,
        from_tile: TileLike,
        occupied_tiles: Iterable[TileLike] = (),
    ) -> Dict[TileKey, Tile]:
        """
        Find every tile reachable in exactly ``step_count`` steps.

        Paths never revisit a square and never cross an occupied hallway
        square. A room tile is a destination as soon as it is reached, and
        the path stops there. Room tiles are never blocked by occupancy.

        Returns:
            Mapping of (x, y) to Tile, empty when no legal move exists
        """
        destinations: Dict[TileKey, Tile] = {}
        if step_count <= 0 or from_tile is None:
            return destinations
        start = tile_key(from_tile)
        if start not in self._tiles:
            return destinations

        blocked = {tile_key(t) for t in occupied_tiles}
        self._walk(start, step_count, {start}, blocked, destinations)
        return destinations

    def _walk(
        self,
        key: TileKey,
        steps_left: int,
        path: set,
        blocked: set,
        found: Dict[TileKey, Tile],
    ) -> None:
        for neighbour in self._neighbours(key):
            if neighbour in path:
                continue
            tile = self._tiles[neighbour]
            if tile.room is None and neighbour in blocked:
                continue
            if tile.room is not None or steps_left == 1:
                found[neighbour] = tile
                continue
            path.add(neighbour)
            self._walk(neighbour, steps_left - 1, path, blocked, found)
            path.discard(neighbour)

    def validate_move(
        self,
        step_count: int,
        from_tile: TileLike,
        occupied_tiles: Iterable[TileLike],
        target_tile: TileLike,
    ) -> MoveValidation:
        """Check whether ``target_tile`` is a legal destination for this roll."""
        destinations = self.possible_destinations(step_count, from_tile, occupied_tiles)
        new_pos = destinations.get(tile_key(target_tile))
        if new_pos is None:
            return MoveValidation(can_move=False)
        return MoveValidation(can_move=True, new_pos=new_pos, room=self.room_of(new_pos))
