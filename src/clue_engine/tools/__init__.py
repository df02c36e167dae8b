"""Agent tools for the Clue engine."""

from clue_engine.tools.game_tools import build_game_tools

__all__ = ["build_game_tools"]
