"""
Tests for Game Tools
Tests the tool functions agents use to act on a match.

Note: CrewAI @tool decorated functions return Tool objects.
To call them directly in tests, we use .func() to get the underlying function.
"""

import random

import pytest

from clue_engine.board import Board
from clue_engine.cards import Card, CardCategory, Combination
from clue_engine.context import GameContext
from clue_engine.game import Game
from clue_engine.player import Player
from clue_engine.players import Players
from clue_engine.tools import build_game_tools

KILLING_COMBINATION = Combination(weapon="Rope", room="Library", suspect="Mrs. White")


@pytest.fixture
def context():
    # Scarlet starts two squares from the Hall door, Mustard just past it
    board = Board.from_layout(["1Ha2HH"])
    starts = board.start_positions
    players = Players([
        Player(1, "Scarlet", "Miss Scarlet", position=starts["Miss Scarlet"]),
        Player(2, "Mustard", "Colonel Mustard", position=starts["Colonel Mustard"],
               cards=[Card(CardCategory.WEAPON, "Knife")]),
    ])
    game = Game(players=players, board=board, killing_combination=KILLING_COMBINATION)
    game.start()
    return GameContext(game=game, players=players, board=board, rng=random.Random(0))


def tools_by_name(tools):
    return {t.name: t for t in tools}


@pytest.fixture
def tools(context):
    return tools_by_name(build_game_tools(context))


def enter_hall(context, tools):
    context.game.update_dice_combination([1, 1], 1)
    return tools["Move Pawn"].func(player_id=1, x=2, y=0)


class TestToolSet:
    """Test the tool list handed to agents."""

    def test_tool_names(self, tools):
        assert set(tools) == {
            "Get My Cards",
            "Get Game Status",
            "Roll Dice",
            "Move Pawn",
            "Make Suspicion",
            "Make Accusation",
            "End Turn",
        }


class TestGetMyCards:
    """Test the Get My Cards tool."""

    def test_returns_player_cards(self, tools):
        result = tools["Get My Cards"].func(player_id=2)
        assert "Your cards (1 total)" in result
        assert "Knife" in result

    def test_error_for_unknown_player(self, tools):
        result = tools["Get My Cards"].func(player_id=9)
        assert "Error" in result


class TestGetGameStatus:
    """Test the Get Game Status tool."""

    def test_shows_turn_and_permissions(self, tools):
        result = tools["Get Game Status"].func(player_id=1)
        assert "Current player: 1" in result
        assert "canRollDice" in result

    def test_other_players_do_not_see_permissions(self, tools):
        result = tools["Get Game Status"].func(player_id=2)
        assert "You may now" not in result


class TestRollDice:
    """Test the Roll Dice tool."""

    def test_returns_dice_values(self, tools):
        result = tools["Roll Dice"].func(player_id=1)
        assert "DICE ROLL" in result
        assert "+" in result

    def test_lists_reachable_room(self, tools):
        """Any roll of two dice reaches the Hall door two squares away."""
        result = tools["Roll Dice"].func(player_id=1)
        assert "Hall" in result

    def test_not_your_turn(self, tools):
        result = tools["Roll Dice"].func(player_id=2)
        assert "Not your turn" in result

    def test_cannot_roll_twice(self, tools):
        tools["Roll Dice"].func(player_id=1)
        result = tools["Roll Dice"].func(player_id=1)
        assert "cannot roll" in result


class TestMovePawn:
    """Test the Move Pawn tool."""

    def test_enter_room(self, context, tools):
        result = enter_hall(context, tools)
        assert "entered the Hall" in result

    def test_move_before_rolling(self, tools):
        result = tools["Move Pawn"].func(player_id=1, x=1, y=0)
        assert "Cannot move" in result


class TestMakeSuspicion:
    """Test the Make Suspicion tool."""

    def test_requires_room(self, tools):
        result = tools["Make Suspicion"].func(player_id=1, suspect="Mrs. White", weapon="Rope")
        assert "must enter a room" in result

    def test_card_is_shown(self, context, tools):
        enter_hall(context, tools)
        result = tools["Make Suspicion"].func(player_id=1, suspect="colonel mustard", weapon="knife")

        assert "Player 2 showed you: Knife" in result
        suspicion = context.game.get_last_suspicion()
        assert suspicion.combination == Combination("Knife", "Hall", "Colonel Mustard")
        assert suspicion.invalidated_card == "Knife"

    def test_nobody_disproves(self, context, tools):
        enter_hall(context, tools)
        result = tools["Make Suspicion"].func(player_id=1, suspect="Mrs. White", weapon="Rope")
        assert "Nobody could disprove" in result


class TestMakeAccusation:
    """Test the Make Accusation tool."""

    def test_correct_accusation_wins(self, context, tools):
        result = tools["Make Accusation"].func(
            player_id=1, suspect="mrs. white", weapon="rope", room="library"
        )
        assert "CORRECT" in result
        assert context.game.is_game_over is True

    def test_wrong_accusation_strands(self, context, tools):
        result = tools["Make Accusation"].func(
            player_id=1, suspect="Mrs. White", weapon="Knife", room="Library"
        )
        assert "WRONG" in result
        assert context.players.find_player(1).is_stranded is True
        assert context.game.is_game_over is False

    def test_not_your_turn(self, tools):
        result = tools["Make Accusation"].func(
            player_id=2, suspect="Mrs. White", weapon="Rope", room="Library"
        )
        assert "Not your turn" in result


class TestEndTurn:
    """Test the End Turn tool."""

    def test_passes_the_turn(self, context, tools):
        result = tools["End Turn"].func(player_id=1)
        assert "Player 2 is next" in result
        assert context.game.current_player_id == 2

    def test_not_your_turn(self, tools):
        result = tools["End Turn"].func(player_id=2)
        assert "Not your turn" in result
