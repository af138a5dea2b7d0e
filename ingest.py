import threading
import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional
from concurrent.futures import ThreadPoolExecutor, as_completed
from pbn_parse import ImportResult, BoardSkipped, parse_pbn_file
from pbn_errors import PBNError
from tournament_db import TournamentDB

PBN_EXTENSION = ".PBN"

@dataclass
class ImportSummary:
    """What one file import produced, in the shape callers report to users."""
    FilePath: str
    EventName: str
    EventDate: date
    TournamentUID: Optional[int] = None
    boardsCreated: int = 0
    totalBoards: int = 0
    Skipped: List[BoardSkipped] = field(default_factory=list)

class DataCollector:
    """Thread-safe collector for parsed files."""

    def __init__(self):
        self._lock = threading.Lock()
        self.results: List[tuple[Path, ImportResult]] = []
        self.failures: List[tuple[Path, str]] = []

    def add(self, file_path: Path, result: ImportResult) -> None:
        with self._lock:
            self.results.append((file_path, result))

    def fail(self, file_path: Path, reason: str) -> None:
        with self._lock:
            self.failures.append((file_path, reason))

def store_result(file_path: Path, result: ImportResult, db: Optional[TournamentDB] = None) -> ImportSummary:
    """Persist a parsed tournament (when a db is given) and summarize the import."""
    tournament = result.Tournament
    summary = ImportSummary(
        FilePath=str(file_path),
        EventName=tournament.EventName,
        EventDate=tournament.EventDate,
        boardsCreated=result.boards_created,
        totalBoards=result.total_boards,
        Skipped=list(result.skipped)
    )
    if db is not None:
        summary.TournamentUID, dropped = db.add(tournament)
        summary.boardsCreated -= len(dropped)
        summary.Skipped.extend(BoardSkipped(num, f"Board {num}: repeated board number") for num in dropped)
    return summary

def import_file(file_path: Path, db: Optional[TournamentDB] = None) -> ImportSummary:
    """
    Import a single PBN file.

    Args:
        file_path: Path to the .pbn file
        db: Tournament store; when None the file is only parsed

    Raises:
        IncompleteTournament, InvalidDateFormat: the file cannot be imported
        DuplicateTournament: the tournament is already stored
    """
    result: ImportResult = parse_pbn_file(file_path)
    logging.info(f"Parsed tournament {result.Tournament.EventName}: {result.boards_created} of {result.total_boards} boards")
    return store_result(file_path, result, db)

def parse_into(file_path: Path, collector: DataCollector) -> None:
    """Parse a single file and add the result to collector."""
    try:
        collector.add(file_path, parse_pbn_file(file_path))
    except (PBNError, OSError) as e:
        logging.error(f"Error processing file {file_path}: {str(e)}")
        collector.fail(file_path, str(e))

def collect_files(paths: List[Path]) -> List[Path]:
    """Collect all PBN files from the given paths."""
    files: List[Path] = []

    for path in paths:
        if path.is_file():
            if path.suffix.upper() == PBN_EXTENSION:
                files.append(path)
        elif path.is_dir():
            files.extend(sorted(p for p in path.rglob("*") if p.is_file() and p.suffix.upper() == PBN_EXTENSION))

    return files

def import_files(paths: List[Path], db: Optional[TournamentDB] = None, parallelize: bool = True) -> List[ImportSummary]:
    """
    Parse every PBN file under paths and store the tournaments.

    Parsing runs in parallel when parallelize is set; storing is always done
    in file order on the calling thread. Files that fail are logged and left
    out of the returned summaries.
    """
    files_to_process: List[Path] = collect_files(paths)

    if not files_to_process:
        logging.warning("No PBN files found to process")
        return []

    logging.info(f"Found {len(files_to_process)} files to process")
    collector = DataCollector()

    if parallelize:
        with ThreadPoolExecutor() as executor:
            future_to_file = {
                executor.submit(parse_into, file_path, collector): file_path
                for file_path in files_to_process
            }
            for future in as_completed(future_to_file):
                future.result()
    else:
        for file_path in files_to_process:
            parse_into(file_path, collector)

    order = {f: i for i, f in enumerate(files_to_process)}
    summaries: List[ImportSummary] = []
    for file_path, result in sorted(collector.results, key=lambda r: order[r[0]]):
        try:
            summaries.append(store_result(file_path, result, db))
        except PBNError as e:
            logging.error(f"Error storing {file_path}: {str(e)}")
            collector.fail(file_path, str(e))

    logging.info(f"Imported {len(summaries)} files, {len(collector.failures)} failed")
    return summaries
