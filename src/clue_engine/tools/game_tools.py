"""
CrewAI Tools for the Clue engine
Tools for agents to play one seat of a match through the engine's public
operations.

Every tool takes the acting player's id. The engine decides whether the
action is legal; the tools only translate its answers into text an LLM can
act on.
"""

from typing import Optional

from crewai.tools import tool

from clue_engine.cards import CardCategory, Combination
from clue_engine.context import GameContext
from clue_engine.exceptions import GameError

# Hallway squares listed after a roll; rooms are always listed
MAX_LISTED_SQUARES = 12


def _normalize_title(context: GameContext, category: CardCategory, title: str) -> str:
    """Match a card title case-insensitively against the master list."""
    for known in context.card_titles.get(category, []):
        if known.lower() == title.strip().lower():
            return known
    return title.strip()


def _not_your_turn(context: GameContext, player_id: int) -> Optional[str]:
    current = context.game.current_player_id
    if context.game.is_game_over:
        return "❌ The game is over."
    if player_id != current:
        return f"❌ Not your turn. It is player {current}'s turn."
    return None


def build_game_tools(context: GameContext) -> list:
    """Create the player tools, bound to one match."""
    game = context.game

    @tool("Get My Cards")
    def get_my_cards(player_id: int) -> str:
        """
        Get the cards in your hand. Cards you hold cannot be part of the
        killing combination.

        Args:
            player_id: Your player id

        Returns:
            List of cards in your hand
        """
        try:
            cards = game.get_cards_of_player(player_id)
        except GameError as e:
            return f"Error: {e}"

        by_category = {category: [] for category in CardCategory}
        for card in cards:
            by_category[card.category].append(card.title)

        result = f"Your cards ({len(cards)} total):\n"
        result += f"  Suspects: {', '.join(by_category[CardCategory.SUSPECT]) or 'None'}\n"
        result += f"  Weapons: {', '.join(by_category[CardCategory.WEAPON]) or 'None'}\n"
        result += f"  Rooms: {', '.join(by_category[CardCategory.ROOM]) or 'None'}"
        return result

    @tool("Get Game Status")
    def get_game_status(player_id: int) -> str:
        """
        Get the current state of the game: whose turn it is, where every
        token stands and what you are allowed to do now.

        Args:
            player_id: Your player id

        Returns:
            A summary of the game state
        """
        status = game.state()
        info = game.players_info()

        result = "=== GAME STATUS ===\n"
        result += f"Current player: {status.current_player_id}\n"
        result += f"Last action: {status.action.value if status.action else 'none'}\n"
        if status.is_game_over:
            result += "🏁 The game is over.\n"

        result += "\nPlayers:\n"
        for player in info.players:
            marker = " (stranded)" if player.is_stranded else ""
            position = game_position_text(context, player.position)
            result += f"  {player.id}. {player.name} as {player.character}{marker} - {position}\n"

        if player_id == status.current_player_id:
            allowed = [name for name, value in info.permissions.items() if value]
            result += f"\nYou may now: {', '.join(allowed) or 'nothing'}"
        return result

    @tool("Roll Dice")
    def roll_dice(player_id: int) -> str:
        """
        Roll two dice at the start of your turn and see where you can move.

        MOVEMENT RULES:
        - Move exactly the number of squares rolled
        - Horizontal or vertical only, never through another token
        - Entering a room ends the move
        - Cannot cross the same square twice

        Args:
            player_id: Your player id

        Returns:
            The roll and the squares you can reach
        """
        refusal = _not_your_turn(context, player_id)
        if refusal:
            return refusal

        dice = context.roll_dice()
        if not game.update_dice_combination(dice, player_id):
            return "❌ You cannot roll the dice now."

        steps = sum(dice)
        destinations = game.find_possible_positions(steps)
        result = f"🎲 DICE ROLL: {dice[0]} + {dice[1]} = {steps}\n\n"
        if not destinations:
            return result + "⚠️ No legal move with this roll. End your turn."

        rooms = sorted(
            ((context.board.room_of(tile), tile) for tile in destinations.values() if tile.room),
            key=lambda pair: pair[0],
        )
        if rooms:
            result += "🚪 REACHABLE ROOMS:\n"
            for room, tile in rooms:
                result += f"   • {room} - square ({tile.x}, {tile.y})\n"

        hallway = [tile for tile in destinations.values() if not tile.room]
        if hallway:
            result += "\n🚶 Hallway squares:\n"
            for tile in sorted(hallway, key=lambda t: (t.y, t.x))[:MAX_LISTED_SQUARES]:
                result += f"   • ({tile.x}, {tile.y})\n"
            if len(hallway) > MAX_LISTED_SQUARES:
                result += f"   ... and {len(hallway) - MAX_LISTED_SQUARES} more\n"

        result += "\n💡 Use 'Move Pawn' with the x and y of a square."
        return result

    @tool("Move Pawn")
    def move_pawn(player_id: int, x: int, y: int) -> str:
        """
        Move your token to a square you can reach with your roll.

        Args:
            player_id: Your player id
            x: Column of the target square
            y: Row of the target square

        Returns:
            Confirmation of the move or the reason it was refused
        """
        outcome = game.move_pawn((x, y), player_id)
        if not outcome.is_moved:
            return f"❌ Cannot move to ({x}, {y}). Roll first, and pick a listed square."
        if outcome.can_suspect:
            return (f"🚪 You entered the {outcome.room}!\n\n"
                    f"You can now use 'Make Suspicion' about the {outcome.room}.")
        return f"✅ Moved to ({x}, {y}). End your turn or accuse."

    @tool("Make Suspicion")
    def make_suspicion(player_id: int, suspect: str, weapon: str) -> str:
        """
        Raise a suspicion about the room you just entered. The first player
        after you who holds one of the cards must show you one of them.

        Args:
            player_id: Your player id
            suspect: The suspect you suspect (e.g. "Colonel Mustard")
            weapon: The weapon you suspect (e.g. "Rope")

        Returns:
            Who disproved the suspicion and the card they showed
        """
        refusal = _not_your_turn(context, player_id)
        if refusal:
            return refusal
        if not game.toggle_is_suspecting(player_id):
            return "❌ You must enter a room this turn before raising a suspicion."

        room = game.get_last_suspicion_position(player_id)
        combination = Combination(
            weapon=_normalize_title(context, CardCategory.WEAPON, weapon),
            room=room,
            suspect=_normalize_title(context, CardCategory.SUSPECT, suspect),
        )
        game.validate_suspicion(player_id, combination)

        disproof = game.rule_out_suspicion()
        if disproof is None:
            return (f"🔍 Nobody could disprove {combination.suspect} with the "
                    f"{combination.weapon} in the {combination.room}!")

        shown = context.rng.choice(disproof.cards)
        game.invalidate_card(disproof.invalidator_id, shown.title)
        return (f"🃏 Player {disproof.invalidator_id} showed you: {shown.title} "
                f"({shown.category.value})")

    @tool("Make Accusation")
    def make_accusation(player_id: int, suspect: str, weapon: str, room: str) -> str:
        """
        Accuse: name the suspect, weapon and room of the murder. A correct
        accusation wins. A wrong one strands you for the rest of the game.

        Args:
            player_id: Your player id
            suspect: The murderer
            weapon: The murder weapon
            room: The murder room (any room, not only where you stand)

        Returns:
            Whether the accusation was right
        """
        refusal = _not_your_turn(context, player_id)
        if refusal:
            return refusal
        if not game.toggle_is_accusing(player_id):
            return "❌ You cannot accuse now."

        combination = Combination(
            weapon=_normalize_title(context, CardCategory.WEAPON, weapon),
            room=_normalize_title(context, CardCategory.ROOM, room),
            suspect=_normalize_title(context, CardCategory.SUSPECT, suspect),
        )
        result = game.validate_accuse(player_id, combination)
        if result.is_won:
            return "🎉 CORRECT! You solved the mystery and win the game!"

        solution = result.killing_combination
        return (f"❌ WRONG. It was {solution.suspect} with the {solution.weapon} "
                f"in the {solution.room}. You are stranded, end your turn.")

    @tool("End Turn")
    def end_turn(player_id: int) -> str:
        """
        End your turn and pass play to the next player.

        Args:
            player_id: Your player id

        Returns:
            Who plays next
        """
        refusal = _not_your_turn(context, player_id)
        if refusal:
            return refusal
        if not game.change_turn(player_id):
            return "🏁 No one is left to play."
        return f"✅ Turn ended. Player {game.current_player_id} is next."

    return [
        get_my_cards,
        get_game_status,
        roll_dice,
        move_pawn,
        make_suspicion,
        make_accusation,
        end_turn,
    ]


def game_position_text(context: GameContext, position) -> str:
    if position is None:
        return "off the board"
    room = context.board.room_of(position)
    if room:
        return f"in the {room}"
    return f"hallway ({position.x}, {position.y})"
