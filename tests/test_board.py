"""
Tests for Board movement
Exact-length moves, no diagonals, no revisits, no passing through tokens,
and rooms ending the move.
"""

import json

import pytest

from clue_engine.board import Board, Tile
from clue_engine.cards import Room, Suspect
from clue_engine.exceptions import BoardConfigError


def corridor(row: str) -> Board:
    return Board.from_layout([row])


class TestDefaultBoard:
    """Test the classic board layout."""

    def test_all_suspects_have_start_squares(self):
        board = Board.from_layout()
        for suspect in Suspect:
            assert suspect.value in board.start_positions

    def test_all_rooms_have_doors(self):
        board = Board.from_layout()
        assert board.room_names == sorted(r.value for r in Room)

    def test_walls_and_room_interiors_are_not_tiles(self):
        board = Board.from_layout()
        assert board.get_tile(0, 0) is None     # Wall
        assert board.get_tile(0, 1) is None     # Kitchen interior
        assert board.get_tile(100, 100) is None  # Off the board
        assert board.get_tile(6, 1) is not None  # Hallway

    def test_doors_belong_to_rooms(self):
        board = Board.from_layout()
        assert board.room_of((6, 6)) == Room.KITCHEN.value
        assert board.room_of((7, 7)) is None

    def test_one_step_from_scarlet_start(self):
        """Miss Scarlet's square has hallway on both sides and the Study wall above."""
        board = Board.from_layout()
        start = board.start_positions[Suspect.MISS_SCARLET.value]
        assert start.key == (12, 24)

        destinations = board.possible_destinations(1, start, [])
        assert set(destinations) == {(11, 24), (13, 24)}


class TestPossibleDestinations:
    """Test the exact-length search."""

    def test_zero_steps_is_always_empty(self):
        board = Board.from_layout()
        for start in board.start_positions.values():
            assert board.possible_destinations(0, start, []) == {}

    def test_exact_step_count(self):
        board = corridor("HHHHH")
        assert set(board.possible_destinations(1, (0, 0), [])) == {(1, 0)}
        assert set(board.possible_destinations(2, (0, 0), [])) == {(2, 0)}

    def test_not_enough_room_to_spend_all_steps(self):
        board = corridor("HHHHH")
        assert board.possible_destinations(5, (0, 0), []) == {}

    def test_cannot_revisit_a_square(self):
        """On a 2x2 block every square is used after three steps."""
        board = Board.from_layout(["HH", "HH"])
        assert set(board.possible_destinations(2, (0, 0), [])) == {(1, 1)}
        assert set(board.possible_destinations(3, (0, 0), [])) == {(0, 1), (1, 0)}
        assert board.possible_destinations(4, (0, 0), []) == {}

    def test_cannot_pass_through_occupied_square(self):
        board = corridor("HHHHH")
        assert board.possible_destinations(2, (0, 0), [(1, 0)]) == {}

    def test_cannot_land_on_occupied_square(self):
        board = corridor("HHHHH")
        assert board.possible_destinations(1, (0, 0), [Tile(1, 0)]) == {}

    def test_own_square_in_occupied_list_is_ignored(self):
        board = corridor("HHHHH")
        assert set(board.possible_destinations(1, (0, 0), [(0, 0)])) == {(1, 0)}

    def test_room_ends_the_move_early(self):
        board = corridor("HHaHH")
        destinations = board.possible_destinations(4, (0, 0), [])
        assert set(destinations) == {(2, 0)}
        assert destinations[(2, 0)].room == "a"

    def test_occupied_room_square_is_still_enterable(self):
        board = corridor("HaH")
        assert set(board.possible_destinations(1, (0, 0), [(1, 0)])) == {(1, 0)}

    def test_walls_block_movement(self):
        board = corridor("HWH")
        assert board.possible_destinations(2, (0, 0), []) == {}

    def test_unknown_start_square(self):
        board = corridor("HHH")
        assert board.possible_destinations(1, (7, 7), []) == {}


class TestValidateMove:
    """Test move validation."""

    def test_valid_hallway_move(self):
        board = corridor("HHHHH")
        result = board.validate_move(2, (0, 0), [], (2, 0))
        assert result.can_move is True
        assert result.new_pos == Tile(2, 0)
        assert result.room is None

    def test_room_entry_reports_room_name(self):
        board = corridor("HHaHH")
        result = board.validate_move(4, (0, 0), [], {"x": 2, "y": 0})
        assert result.can_move is True
        assert result.room == Room.HALL.value

    def test_unreachable_target(self):
        board = corridor("HHHHH")
        result = board.validate_move(2, (0, 0), [], (3, 0))
        assert result.can_move is False
        assert result.new_pos is None

    def test_wall_target(self):
        board = corridor("HWH")
        assert board.validate_move(1, (0, 0), [], (1, 0)).can_move is False


class TestBoardConfig:
    """Test loading boards from configuration."""

    CONFIG = {
        "tiles": [
            {"x": 0, "y": 0},
            {"x": 1, "y": 0},
            {"x": 2, "y": 0, "room": "lounge-door"},
        ],
        "rooms": {"Lounge": ["lounge-door"]},
        "startPositions": {"Colonel Mustard": {"x": 0, "y": 0}},
    }

    def test_from_config(self):
        board = Board.from_config(self.CONFIG)
        assert board.start_positions["Colonel Mustard"] == Tile(0, 0)
        result = board.validate_move(2, (0, 0), [], (2, 0))
        assert result.room == "Lounge"

    def test_from_file(self, tmp_path):
        path = tmp_path / "board.json"
        path.write_text(json.dumps(self.CONFIG))
        board = Board.from_file(path)
        assert board.room_names == ["Lounge"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(BoardConfigError, match="Cannot read"):
            Board.from_file(tmp_path / "missing.json")

    def test_unknown_room_label(self):
        config = {"tiles": [{"x": 0, "y": 0, "room": "nowhere"}], "rooms": {}}
        with pytest.raises(BoardConfigError, match="unknown room label"):
            Board.from_config(config)

    def test_malformed_tiles(self):
        with pytest.raises(BoardConfigError, match="Malformed"):
            Board.from_config({"tiles": [{"x": 0}], "rooms": {}})

    def test_start_position_must_be_walkable(self):
        config = {
            "tiles": [{"x": 0, "y": 0}],
            "rooms": {},
            "startPositions": {"Mrs. White": {"x": 5, "y": 5}},
        }
        with pytest.raises(BoardConfigError, match="not a walkable tile"):
            Board.from_config(config)

    def test_duplicate_tiles(self):
        config = {"tiles": [{"x": 0, "y": 0}, {"x": 0, "y": 0}], "rooms": {}}
        with pytest.raises(BoardConfigError, match="Duplicate"):
            Board.from_config(config)
