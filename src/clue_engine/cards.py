"""
Cards and card combinations.

The default master list follows the classic Cluedo/Clue set: six suspects,
six weapons and nine rooms. A combination names exactly one card of each
category; the secret "killing combination" is one of these.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping


class CardCategory(Enum):
    WEAPON = "weapon"
    ROOM = "room"
    SUSPECT = "suspect"


class Suspect(Enum):
    MISS_SCARLET = "Miss Scarlet"
    COLONEL_MUSTARD = "Colonel Mustard"
    MRS_WHITE = "Mrs. White"
    MR_GREEN = "Mr. Green"
    MRS_PEACOCK = "Mrs. Peacock"
    PROFESSOR_PLUM = "Professor Plum"


class Weapon(Enum):
    CANDLESTICK = "Candlestick"
    KNIFE = "Knife"
    LEAD_PIPE = "Lead Pipe"
    REVOLVER = "Revolver"
    ROPE = "Rope"
    WRENCH = "Wrench"


class Room(Enum):
    KITCHEN = "Kitchen"
    BALLROOM = "Ballroom"
    CONSERVATORY = "Conservatory"
    BILLIARD_ROOM = "Billiard Room"
    LIBRARY = "Library"
    STUDY = "Study"
    HALL = "Hall"
    LOUNGE = "Lounge"
    DINING_ROOM = "Dining Room"


def default_card_titles() -> Dict[CardCategory, List[str]]:
    """The master card list, one list of titles per category."""
    return {
        CardCategory.WEAPON: [w.value for w in Weapon],
        CardCategory.ROOM: [r.value for r in Room],
        CardCategory.SUSPECT: [s.value for s in Suspect],
    }


@dataclass(frozen=True)
class Card:
    """A single card: its category and its title."""
    category: CardCategory
    title: str

    def to_dict(self) -> dict:
        return {"type": self.category.value, "title": self.title}


@dataclass(frozen=True)
class Combination:
    """One card title per category.

    Used for the killing combination as well as for suspicions and
    accusations. Instances are immutable, so handing one out never exposes
    the game's own state to mutation.
    """
    weapon: str
    room: str
    suspect: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, str]) -> "Combination":
        """Build a combination from a ``{weapon, room, suspect}`` mapping."""
        missing = [c.value for c in CardCategory if c.value not in data]
        if missing:
            raise ValueError(f"Combination is missing: {', '.join(missing)}")
        return cls(weapon=data["weapon"], room=data["room"], suspect=data["suspect"])

    def title_of(self, category: CardCategory) -> str:
        return getattr(self, category.value)

    def cards(self) -> List[Card]:
        return [Card(category, self.title_of(category)) for category in CardCategory]

    def titles(self) -> List[str]:
        return [card.title for card in self.cards()]

    def matches(self, other: "Combination") -> bool:
        """True when every category names the same card."""
        return all(
            self.title_of(category) == other.title_of(category)
            for category in CardCategory
        )

    def to_dict(self) -> Dict[str, str]:
        return {"weapon": self.weapon, "room": self.room, "suspect": self.suspect}
