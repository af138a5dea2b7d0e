from logging import getLogger
from pathlib import Path
from typing import List
from common_objects import BoardRecord, TournamentRecord, Direction, vul_to_pbn
from deal_codec import encode_deal
from pbn_date import format_date

logger = getLogger(__name__)

def _tag(name: str, value: object) -> str:
    escaped = str(value).replace('\\', '\\\\').replace('"', '\\"')
    return f'[{name} "{escaped}"]'

def serialize_board(board: BoardRecord) -> str:
    return "\n".join([
        _tag("Board", board.BoardNum),
        _tag("Dealer", board.Dealer.abbreviation()),
        _tag("Vulnerable", vul_to_pbn(board.Vulnerability)),
        _tag("Deal", encode_deal(board.hands(), Direction.NORTH))
    ])

def serialize_tournament(record: TournamentRecord) -> str:
    """
    Write a tournament as PBN text.

    Dates always use dots and deals always start at North, so the output is
    equivalent to, not a byte copy of, whatever file the record came from.
    """
    if record.EventDate is None:
        raise ValueError(f"Tournament '{record.EventName}' has no date")
    header: str = "\n".join([
        _tag("Event", record.EventName),
        _tag("Site", record.EventLocation),
        _tag("Date", format_date(record.EventDate))
    ])
    sections: List[str] = [header] + [serialize_board(b) for b in record.Boards]
    return "\n\n".join(sections) + "\n"

def write_pbn_file(record: TournamentRecord, file_path: Path) -> Path:
    file_path = Path(file_path)
    file_path.write_text(serialize_tournament(record), encoding='utf-8')
    logger.info(f"Wrote {len(record.Boards)} boards to {file_path}")
    return file_path
