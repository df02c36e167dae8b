"""
Runtime settings, read from the environment and an optional .env file.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from clue_engine.board import Board

TRUTHY = ("1", "true", "yes")


@dataclass
class Settings:
    debug: bool = False
    board_config: Optional[str] = None  # JSON board file; classic layout when unset
    seed: Optional[int] = None
    llm_model: str = "gemini/gemini-2.0-flash"
    turn_delay: float = 0.0
    google_api_key: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        seed = os.environ.get("CLUE_SEED")
        return cls(
            debug=os.environ.get("CLUE_DEBUG", "").lower() in TRUTHY,
            board_config=os.environ.get("CLUE_BOARD_CONFIG") or None,
            seed=int(seed) if seed else None,
            llm_model=os.environ.get("CLUE_LLM_MODEL", cls.llm_model),
            turn_delay=float(os.environ.get("CLUE_TURN_DELAY", "0")),
            google_api_key=os.environ.get("GOOGLE_API_KEY"),
        )

    def load_board(self) -> Board:
        if self.board_config:
            return Board.from_file(self.board_config)
        return Board.from_layout()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
