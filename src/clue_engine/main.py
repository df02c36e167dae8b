#!/usr/bin/env python
"""
Clue engine with LLM agents
Entry point for running a match where every seat is played by an agent.
"""

import logging
import random
import sys
import time
import traceback
from typing import Optional

from clue_engine.config import Settings, configure_logging
from clue_engine.context import GameContext, MAX_PLAYERS, MIN_PLAYERS, create_context
from clue_engine.crew import create_player_agent, create_player_turn_crew
from clue_engine.tools import build_game_tools

logger = logging.getLogger(__name__)

PLAYER_NAMES = ["Scarlet", "Mustard", "White", "Green", "Peacock", "Plum"]


def get_error_details(exception):
    """
    Extract detailed error information from an exception.

    Args:
        exception: The exception to analyze

    Returns:
        A formatted string with error details
    """
    error_info = []
    error_info.append(f"Type: {type(exception).__name__}")
    error_info.append(f"Message: {str(exception)}")

    if exception.__cause__ is not None:
        error_info.append(f"Caused by: {type(exception.__cause__).__name__}: {exception.__cause__}")

    # HTTP status codes (common in API errors)
    if hasattr(exception, 'status_code'):
        error_info.append(f"Status Code: {exception.status_code}")
    if hasattr(exception, 'response'):
        response = exception.response
        if hasattr(response, 'status_code'):
            error_info.append(f"Response Status: {response.status_code}")
        if hasattr(response, 'text'):
            error_info.append(f"Response Body: {response.text[:500]}")

    if hasattr(exception, 'code'):
        error_info.append(f"Error Code: {exception.code}")

    return " | ".join(error_info)


def retry_with_backoff(func, max_retries=3, base_delay=5, debug=False):
    """
    Retry a function with exponential backoff.

    Args:
        func: Callable to retry
        max_retries: Maximum number of retry attempts
        base_delay: Base delay in seconds (will be multiplied exponentially)
        debug: Log full stack traces of failed attempts

    Returns:
        The result of the function call

    Raises:
        The last exception if all retries fail
    """
    last_exception = None

    for attempt in range(max_retries + 1):
        try:
            result = func()
            if result is None or (hasattr(result, 'raw') and not result.raw):
                raise ValueError("Empty or None response from LLM")
            return result
        except Exception as e:
            last_exception = e
            error_details = get_error_details(e)
            if debug:
                logger.error(f"Attempt {attempt + 1} failed with exception:", exc_info=True)

            if attempt < max_retries:
                delay = base_delay * (2 ** attempt)
                sys.stdout.write(f"\n⚠️ Attempt {attempt + 1}/{max_retries + 1} failed\n")
                sys.stdout.write(f"   📋 Error: {error_details}\n")
                sys.stdout.write(f"🔄 Retrying in {delay} seconds...\n")
                sys.stdout.flush()
                time.sleep(delay)
            else:
                sys.stdout.write(f"\n❌ All {max_retries + 1} attempts failed\n")
                sys.stdout.write(f"   📋 Final Error: {error_details}\n")
                if debug:
                    for line in traceback.format_exception(type(e), e, e.__traceback__):
                        sys.stdout.write(f"      {line}")
                sys.stdout.flush()
    raise last_exception


def finish_turn(context: GameContext, player_id: int) -> None:
    """End the turn for an agent that stopped without ending it."""
    game = context.game
    if not game.is_game_over and game.current_player_id == player_id:
        logger.info(f"Player {player_id} did not end the turn, ending it for them")
        game.change_turn(player_id)


def run_game(num_players: int = 6, max_turns: int = 50, settings: Optional[Settings] = None):
    """
    Run a complete game of Clue with AI agents.

    Args:
        num_players: Number of players
        max_turns: Maximum number of turns before the game is abandoned
        settings: Runtime settings (default: read from the environment)
    """
    settings = settings or Settings.from_env()
    if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
        print(f"❌ Error: Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}")
        return None

    print("\n" + "=" * 60)
    print("🔍 CLUE: THE MYSTERY GAME WITH AI AGENTS 🔍")
    print("=" * 60 + "\n")

    context = create_context(
        PLAYER_NAMES[:num_players],
        board=settings.load_board(),
        rng=random.Random(settings.seed),
    )
    game = context.game
    tools = build_game_tools(context)
    agents = {
        player.id: create_player_agent(player, tools, settings.llm_model)
        for player in context.players
    }

    for player in context.players:
        cards = ", ".join(card.title for card in player.cards)
        print(f"{player.name} ({player.character}): {cards}")

    turn_count = 0
    while not game.is_game_over and turn_count < max_turns:
        turn_count += 1
        player = context.players.find_player(game.current_player_id)

        sys.stdout.write("\n" + "=" * 50 + "\n")
        sys.stdout.write(f"🎲 TURN {turn_count}: {player.name} ({player.character})\n")
        sys.stdout.write("=" * 50 + "\n")
        sys.stdout.flush()

        turn_crew = create_player_turn_crew(player, agents[player.id])
        try:
            result = retry_with_backoff(turn_crew.kickoff, debug=settings.debug)
            sys.stdout.write(str(result.raw if hasattr(result, 'raw') else result) + "\n")
        except Exception as e:
            sys.stdout.write(f"\n❌ Error during {player.name}'s turn: {e}\n")
        sys.stdout.flush()

        finish_turn(context, player.id)
        if settings.turn_delay and not game.is_game_over:
            time.sleep(settings.turn_delay)

    print("\n" + "=" * 60)
    print("🏁 GAME OVER!")
    print("=" * 60)

    info = game.get_game_over_info()
    solution = info.killing_combination
    winner = game.current_player_id if info.is_game_won else None
    print(f"Winner: {f'player {winner}' if winner else 'No winner'}")
    print(f"Total Turns: {turn_count}")
    print(f"Solution: {solution.suspect} with the {solution.weapon} in the {solution.room}")
    return context


def main():
    """Main entry point."""
    settings = Settings.from_env()
    configure_logging(settings)

    if not settings.google_api_key:
        print("❌ Error: GOOGLE_API_KEY environment variable not set.")
        print("Please create a .env file with your Google API key:")
        print("  GOOGLE_API_KEY=your-key-here")
        sys.exit(1)

    if len(sys.argv) > 1:
        if sys.argv[1] == "game":
            num_players = int(sys.argv[2]) if len(sys.argv) > 2 else 6
            run_game(num_players, settings=settings)
        else:
            print("Usage: python -m clue_engine.main [game [num_players]]")
            print(f"  num_players: {MIN_PLAYERS}-{MAX_PLAYERS} (default: 6)")
    else:
        run_game(settings=settings)


if __name__ == "__main__":
    main()
