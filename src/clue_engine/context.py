"""
Game setup and the per-match context.

A GameContext is built once per match and handed to whoever serves the
players (request handlers, agent tools, the CLI runner). Nothing in the
engine keeps it in a module global.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from clue_engine.board import Board
from clue_engine.cards import Card, CardCategory, Combination, Suspect, default_card_titles
from clue_engine.game import Game
from clue_engine.player import Player
from clue_engine.players import Players

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2
MAX_PLAYERS = len(Suspect)


@dataclass
class GameContext:
    """The single game of this process and the objects it was built from."""
    game: Game
    players: Players
    board: Board
    rng: random.Random = field(default_factory=random.Random)
    card_titles: Dict[CardCategory, List[str]] = field(default_factory=default_card_titles)

    def roll_dice(self) -> List[int]:
        """Roll two six-sided dice."""
        return [self.rng.randint(1, 6), self.rng.randint(1, 6)]


def choose_killing_combination(
    card_titles: Dict[CardCategory, List[str]], rng: random.Random
) -> Combination:
    """Draw one card of each category as the solution."""
    return Combination(
        weapon=rng.choice(card_titles[CardCategory.WEAPON]),
        room=rng.choice(card_titles[CardCategory.ROOM]),
        suspect=rng.choice(card_titles[CardCategory.SUSPECT]),
    )


def deal_cards(
    card_titles: Dict[CardCategory, List[str]],
    killing_combination: Combination,
    player_count: int,
    rng: random.Random,
) -> List[List[Card]]:
    """Shuffle every non-solution card and deal them round-robin."""
    solution = set(killing_combination.cards())
    deck = [
        Card(category, title)
        for category, titles in card_titles.items()
        for title in titles
        if Card(category, title) not in solution
    ]
    rng.shuffle(deck)

    hands: List[List[Card]] = [[] for _ in range(player_count)]
    for i, card in enumerate(deck):
        hands[i % player_count].append(card)
    return hands


def create_context(
    player_names: Sequence[str],
    board: Optional[Board] = None,
    card_titles: Optional[Dict[CardCategory, List[str]]] = None,
    rng: Optional[random.Random] = None,
    killing_combination: Optional[Combination] = None,
) -> GameContext:
    """
    Set up a match and start it.

    Characters follow the classic seating: Miss Scarlet is always in play
    and goes first, the others follow in the usual clockwise order. Each
    token starts on its character's start square.

    Args:
        player_names: Names in joining order; ids are assigned from 1
        board: Board to play on (default: the classic layout)
        card_titles: Master card list (default: the classic cards)
        rng: Random source for dealing and dice
        killing_combination: Fixed solution instead of a random draw
    """
    if not MIN_PLAYERS <= len(player_names) <= MAX_PLAYERS:
        raise ValueError(
            f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}"
        )

    board = board or Board.from_layout()
    card_titles = card_titles or default_card_titles()
    rng = rng or random.Random()

    killing_combination = killing_combination or choose_killing_combination(card_titles, rng)
    hands = deal_cards(card_titles, killing_combination, len(player_names), rng)

    characters = [s.value for s in Suspect][:len(player_names)]
    start_positions = board.start_positions
    roster = [
        Player(
            player_id=i + 1,
            name=name,
            character=characters[i],
            position=start_positions.get(characters[i]),
            cards=hands[i],
        )
        for i, name in enumerate(player_names)
    ]

    players = Players(roster)
    game = Game(players=players, board=board, killing_combination=killing_combination)
    game.start()
    logger.info(f"Game set up for {len(roster)} players")
    return GameContext(
        game=game, players=players, board=board, rng=rng, card_titles=card_titles
    )
