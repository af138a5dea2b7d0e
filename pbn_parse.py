import re
from logging import getLogger
from pathlib import Path
from typing import List, Dict, Optional, Union
from dataclasses import dataclass, field
from common_objects import BoardRecord, TournamentRecord, Direction, DEFAULT_LOCATION
from common_objects import lineProf, translate_vul, dealNo2dealer, dealNo2vul, get_number
from deal_codec import decode_deal
from pbn_date import convert_date
from pbn_errors import BoardDecodeError, IncompleteTournament, UnrecognizedDealerCode

logger = getLogger(__name__)

# Greedy value so raw or backslash-escaped quotes stay inside it
TAG_PATTERN = re.compile(r'\[(\w+)\s+"(.*)"\]')
ESCAPE_PATTERN = re.compile(r'\\(["\\])')

@dataclass
class PBNBoard:
    """Board-level tag values exactly as they appear in the file"""
    BoardNum: int = 0
    Dealer: Optional[str] = None
    Vulnerable: Optional[str] = None
    Deal: str = ""

@dataclass
class PBNTournament:
    """Tournament-level tag values plus the raw boards, before decoding"""
    Event: str = ""
    Site: str = ""
    Date: str = ""
    Boards: List[PBNBoard] = field(default_factory=list)

@dataclass
class BoardImported:
    Board: BoardRecord

@dataclass
class BoardSkipped:
    BoardNum: int
    Reason: str

BoardOutcome = Union[BoardImported, BoardSkipped]

@dataclass
class ImportResult:
    """A decoded tournament together with the outcome of every board"""
    Tournament: TournamentRecord
    Outcomes: List[BoardOutcome] = field(default_factory=list)

    @property
    def boards_created(self) -> int:
        return len(self.Tournament.Boards)

    @property
    def total_boards(self) -> int:
        return len(self.Outcomes)

    @property
    def skipped(self) -> List[BoardSkipped]:
        return [o for o in self.Outcomes if isinstance(o, BoardSkipped)]

class PBNParser:
    """Line scanner for PBN (Portable Bridge Notation) tournament files"""

    TOURNAMENT_TAGS = ("Event", "Site", "Date")
    BOARD_TAGS = ("Dealer", "Vulnerable", "Deal")

    def __init__(self):
        self.tournament = PBNTournament()
        self.current_board = PBNBoard()
        self.previous_board: Optional[PBNBoard] = None

    def scan(self, content: str) -> PBNTournament:
        """Collect tag values from PBN text. Lines that are not tags are ignored."""
        self.tournament = PBNTournament()
        self.current_board = PBNBoard()
        self.previous_board = None
        lines: List[str] = [line.strip() for line in content.splitlines()]

        for line in lines:
            if not line:
                continue
            if not (line.startswith('[') and line.endswith(']')):
                continue
            tag_match = TAG_PATTERN.fullmatch(line)
            if not tag_match:
                continue
            tag_name, tag_value = tag_match.groups()
            tag_value = ESCAPE_PATTERN.sub(r'\1', tag_value).strip()

            if tag_name == 'Board':
                self._commit_board()
                board_num: int = get_number(tag_value) or 0
                if board_num <= 0:
                    logger.warning(f"Ignoring board with invalid number '{tag_value}'")
                    board_num = 0
                self.current_board = PBNBoard(BoardNum=board_num)
            elif tag_name in self.TOURNAMENT_TAGS:
                if tag_value and tag_value not in ('?', '#'):
                    setattr(self.tournament, tag_name, tag_value)
            elif tag_name in self.BOARD_TAGS:
                self._set_board_tag(tag_name, tag_value)

        # The final board has no following Board tag to commit it
        self._commit_board()
        return self.tournament

    def _set_board_tag(self, attr: str, value: str) -> None:
        # Empty and "?" mean unknown; "#" repeats the previous board's value
        if value in ('', '?'):
            return
        if value == '#':
            if self.previous_board is None:
                return
            value = getattr(self.previous_board, attr)
        setattr(self.current_board, attr, value)

    def _commit_board(self) -> None:
        if self.current_board.BoardNum > 0:
            self.tournament.Boards.append(self.current_board)
            self.previous_board = self.current_board
        self.current_board = PBNBoard()

lineProf.add_function(PBNParser.scan)

def decode_board(board: PBNBoard) -> BoardRecord:
    """Turn raw board tags into a BoardRecord, raising BoardDecodeError on bad input"""
    if board.Dealer is None:
        dealer: Direction = dealNo2dealer(board.BoardNum)
    else:
        try:
            dealer = Direction.from_str(board.Dealer)
        except KeyError:
            raise UnrecognizedDealerCode(board.Dealer, board.BoardNum) from None
    vul: str = translate_vul(board.Vulnerable) if board.Vulnerable is not None else dealNo2vul(board.BoardNum)
    hands: Dict[Direction, str] = decode_deal(board.Deal, board.BoardNum)

    return BoardRecord(
        BoardNum=board.BoardNum,
        Dealer=dealer,
        Vulnerability=vul,
        Deal=board.Deal,
        North=hands[Direction.NORTH],
        East=hands[Direction.EAST],
        South=hands[Direction.SOUTH],
        West=hands[Direction.WEST]
    )

def decode_board_outcome(board: PBNBoard) -> BoardOutcome:
    try:
        return BoardImported(decode_board(board))
    except BoardDecodeError as e:
        logger.warning(f"Skipping board {board.BoardNum}: {e}")
        return BoardSkipped(board.BoardNum, str(e))

def decode_tournament(raw: PBNTournament) -> ImportResult:
    """
    Check the required tournament fields and decode every board.

    Raises:
        IncompleteTournament: event name, date or boards missing, or no
            board could be decoded
        InvalidDateFormat: the Date tag is not a valid date
    """
    missing: List[str] = []
    if not raw.Event:
        missing.append("event name")
    if not raw.Date:
        missing.append("date")
    if not raw.Boards:
        missing.append("boards")
    if missing:
        raise IncompleteTournament(missing)

    event_date = convert_date(raw.Date)
    outcomes: List[BoardOutcome] = [decode_board_outcome(b) for b in raw.Boards]
    boards: List[BoardRecord] = [o.Board for o in outcomes if isinstance(o, BoardImported)]
    if not boards:
        raise IncompleteTournament(["decodable boards"])

    tournament = TournamentRecord(
        EventName=raw.Event,
        EventLocation=raw.Site or DEFAULT_LOCATION,
        EventDate=event_date,
        Boards=boards
    )
    return ImportResult(Tournament=tournament, Outcomes=outcomes)

def parse_pbn(content: str) -> ImportResult:
    """Parse PBN text into a tournament plus a per-board import summary"""
    return decode_tournament(PBNParser().scan(content))

def parse(content: str) -> TournamentRecord:
    return parse_pbn(content).Tournament

def read_pbn_text(file_path: Path) -> str:
    """Read a PBN file as UTF-8 (with or without BOM), else as ISO-8859-1"""
    raw: bytes = Path(file_path).read_bytes()
    try:
        return raw.decode('utf-8-sig')
    except UnicodeDecodeError:
        return raw.decode('iso-8859-1')

def parse_pbn_file(file_path: Path) -> ImportResult:
    return parse_pbn(read_pbn_text(file_path))
