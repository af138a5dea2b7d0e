import re
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Dict, List
from enum import IntEnum
from line_profiler import LineProfiler

DEFAULT_LOCATION: str = "Unknown Venue"

class Direction(IntEnum):
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    __from_str_map__ = {"N": NORTH, "E": EAST, "S": SOUTH, "W": WEST}

    @classmethod
    def from_str(cls, direction_str: str) -> "Direction":
        return Direction(cls.__from_str_map__[direction_str.upper()])

    def __repr__(self) -> str:
        return self.name

    def offset(self, offset: int) -> "Direction":
        return Direction((self.value + offset) % 4)

    def abbreviation(self) -> str:
        return self.name[0]

    def field_name(self) -> str:
        """Name of the BoardRecord attribute holding this seat's hand."""
        return self.name.capitalize()

# PBN vulnerability tokens and the values stored on a BoardRecord
vulFromPBN: Dict[str, str] = {
    '-': 'None',
    'NS': 'NS',
    'EW': 'EW',
    'All': 'Both'
}

vulToPBN: Dict[str, str] = {v: k for k, v in vulFromPBN.items()}

def translate_vul(vulStr: str) -> str:
    """Map a PBN Vulnerable token; unknown tokens pass through unchanged."""
    return vulFromPBN.get(vulStr, vulStr)

def vul_to_pbn(vul: str) -> str:
    return vulToPBN.get(vul, vul)

dealVulnerabilities: List[str] = [
    'EW',      # deal 0 has value for deal 16
    'None',
    'NS',
    'EW',
    'Both',
    'NS',
    'EW',
    'Both',
    'None',
    'EW',
    'Both',
    'None',
    'NS',
    'Both',
    'None',
    'NS'
]

def dealNo2dealer(dno: int) -> Direction:
    return Direction((dno - 1) % 4)

def dealNo2vul(dno: int) -> str:
    return dealVulnerabilities[dno % 16]

def get_number(s: Optional[str]) -> Optional[int]:
    match: Optional[re.Match] = re.search(r'-?\d+', s) if s else None
    return int(match.group()) if match else None

@dataclass
class BoardRecord:
    """Represents one board: dealer, vulnerability and the four hands."""
    BoardNum: int = 0
    Dealer: Direction = Direction.NORTH
    Vulnerability: str = "None"
    Deal: str = ""
    North: str = ""
    East: str = ""
    South: str = ""
    West: str = ""

    def hand(self, seat: Direction) -> str:
        return getattr(self, seat.field_name())

    def hands(self) -> Dict[Direction, str]:
        return {seat: self.hand(seat) for seat in Direction}

@dataclass
class TournamentRecord:
    """Represents a tournament and its boards in source order."""
    EventName: str = ""
    EventLocation: str = DEFAULT_LOCATION
    EventDate: Optional[date] = None
    Boards: List[BoardRecord] = field(default_factory=list)

lineProf: LineProfiler = LineProfiler()

SUIT_ORDER: str = "SHDC"
SUIT_SYMBOLS: Dict[str, str] = {'S': '♠', 'H': '♥', 'D': '♦', 'C': '♣'}

rank_order = "AKQJT98765432"
rank_positions = {card: i for i, card in enumerate(rank_order)}
def sort_holding(holding: str | List[str]) -> str:
    """
    Sorts cards in descending rank order. Input must be valid cards:
    Either a string (e.g. "QA39") or a list of cards
    """
    return ''.join(sorted(holding, key=lambda x: rank_positions[x]))

def split_hand(hand: str) -> Optional[Dict[str, str]]:
    """Split "AKQ95.J743.A2.Q42" into suit holdings, or None if not 4 suits."""
    holdings: List[str] = hand.split(".")
    if len(holdings) != len(SUIT_ORDER):
        return None
    return dict(zip(SUIT_ORDER, holdings))

def format_hand(hand: str) -> str:
    """Render a hand one suit per line, highest card first, '-' for a void."""
    holdings = split_hand(hand)
    if holdings is None:
        raise ValueError(f"Invalid hand {hand}")
    lines: List[str] = []
    for suit, holding in holdings.items():
        cards = holding.upper().replace("10", "T")
        if cards and all(c in rank_positions for c in cards):
            cards = sort_holding(cards)
        lines.append(f"{SUIT_SYMBOLS[suit]} {cards or '-'}")
    return "\n".join(lines)
