import logging
import cProfile
import pstats
import sys
from argparse import ArgumentParser, Namespace
from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from common_objects import Direction, lineProf, format_hand
from db_comp import BridgeDB, DBType
from ingest import ImportSummary, import_files
from pbn_errors import PBNError
from pbn_export import write_pbn_file
from pbn_parse import parse_pbn_file
from tournament_db import TournamentDB

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = Path("config.ini")

@dataclass
class ImportConfig:
    """Where and how imported tournaments are stored."""
    store_path: Path
    store_type: DBType

    @classmethod
    def from_config_file(cls, config_path: Path) -> 'ImportConfig':
        """Load configuration from a file. A missing file gives the defaults."""
        config = ConfigParser()
        config.read(config_path)
        store_type_str = config.get('Type', 'store_type', fallback=DBType.CSV.value)
        return cls(
            store_path=Path(config.get('Paths', 'store_path', fallback='./DB')),
            store_type=DBType(store_type_str)
        )

    def open(self) -> TournamentDB:
        return TournamentDB(BridgeDB.create(self.store_type, self.store_path))

def build_arg_parser() -> ArgumentParser:
    arg_list = ArgumentParser(description="Import and export PBN bridge tournament files")
    arg_list.add_argument("-c", "--config", default=str(DEFAULT_CONFIG), help="INI file with [Paths] store_path and [Type] store_type")
    arg_list.add_argument("--db", help="Store folder, overrides the config file")
    arg_list.add_argument("--db-type", choices=[t.value for t in DBType], help="Store file format, overrides the config file")
    arg_list.add_argument("-v", "--verbose", action="store_true", help="Log progress at INFO level")
    arg_list.add_argument("--profile", action="store_true", help="Enable performance profiling")
    commands = arg_list.add_subparsers(dest="command", required=True)

    imp = commands.add_parser("import", help="Import PBN files or directories into the store")
    imp.add_argument("files", nargs="+", help="PBN files or directories to import")
    imp.add_argument("-n", "--dry-run", action="store_true", help="Parse only, do not store")
    imp.add_argument("--serial", action="store_true", help="Parse files one at a time")

    exp = commands.add_parser("export", help="Write a stored tournament as PBN")
    exp.add_argument("tournament", type=int, help="Tournament id (see 'list')")
    exp.add_argument("output", help="PBN file to write")

    commands.add_parser("list", help="List stored tournaments, newest first")

    delete = commands.add_parser("delete", help="Remove a stored tournament and its boards")
    delete.add_argument("tournament", type=int, help="Tournament id (see 'list')")

    show = commands.add_parser("show", help="Print the boards of a PBN file")
    show.add_argument("file", help="PBN file")
    show.add_argument("-b", "--board", type=int, help="Only show this board number")
    return arg_list

def load_config(args: Namespace) -> ImportConfig:
    config = ImportConfig.from_config_file(Path(args.config))
    if args.db:
        config.store_path = Path(args.db)
    if args.db_type:
        config.store_type = DBType(args.db_type)
    return config

def report(summary: ImportSummary) -> None:
    stored = f" as tournament {summary.TournamentUID}" if summary.TournamentUID is not None else ""
    print(f"{summary.FilePath}: {summary.EventName} ({summary.EventDate}){stored}, "
          f"{summary.boardsCreated}/{summary.totalBoards} boards")
    for skipped in summary.Skipped:
        print(f"  skipped board {skipped.BoardNum}: {skipped.Reason}")

def run_import(args: Namespace, config: ImportConfig) -> int:
    db: Optional[TournamentDB] = None if args.dry_run else config.open()
    summaries: List[ImportSummary] = import_files([Path(f) for f in args.files], db, parallelize=not args.serial)
    if db is not None:
        db.sync()
    for summary in summaries:
        report(summary)
    return 0 if summaries else 1

def run_export(args: Namespace, config: ImportConfig) -> int:
    record = config.open().get(args.tournament)
    if record is None:
        logger.error(f"No tournament with id {args.tournament}")
        return 1
    write_pbn_file(record, Path(args.output))
    print(f"Wrote {len(record.Boards)} boards to {args.output}")
    return 0

def run_list(args: Namespace, config: ImportConfig) -> int:
    db = config.open()
    for row in db.list().iter_rows(named=True):
        print(f"{row['TournamentUID']:>4}  {row['EventDate']}  {row['EventName']} @ {row['EventLocation']}  ({row['Boards']} boards)")
    tournaments, boards = db.totals()
    print(f"{tournaments} tournaments, {boards} boards")
    return 0

def run_delete(args: Namespace, config: ImportConfig) -> int:
    db = config.open()
    removed = db.delete(args.tournament)
    db.sync()
    print(f"Deleted tournament {args.tournament} and {removed} boards")
    return 0

def run_show(args: Namespace, config: ImportConfig) -> int:
    result = parse_pbn_file(Path(args.file))
    tournament = result.Tournament
    print(f"{tournament.EventName}, {tournament.EventLocation}, {tournament.EventDate}")
    for board in tournament.Boards:
        if args.board is not None and board.BoardNum != args.board:
            continue
        print(f"\nBoard {board.BoardNum}  Dealer {board.Dealer.abbreviation()}  Vul {board.Vulnerability}")
        for seat in Direction:
            print(f"{seat.name}\n{format_hand(board.hand(seat))}")
    for skipped in result.skipped:
        print(f"\nBoard {skipped.BoardNum} skipped: {skipped.Reason}")
    return 0

COMMANDS = {
    "import": run_import,
    "export": run_export,
    "list": run_list,
    "delete": run_delete,
    "show": run_show
}

def _main_impl(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)
    try:
        return COMMANDS[args.command](args, load_config(args))
    except (PBNError, OSError, ValueError) as e:
        logger.error(f"Error during {args.command}: {str(e)}")
        return 1

def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the pbn-import console script."""
    logging.basicConfig(level=logging.WARNING, format='%(asctime)s - %(levelname)s - %(message)s')
    argv = sys.argv[1:] if argv is None else argv
    if '--profile' in argv:
        profiler = cProfile.Profile()
        profiler.enable()
        lineProf.add_function(_main_impl)
        status = lineProf.runcall(_main_impl, argv)
        lineProf.print_stats()
        profiler.disable()
        stats = pstats.Stats(profiler)
        stats.strip_dirs().sort_stats('time').print_stats(10)  # Top 10 functions sorted by time
        return status
    return _main_impl(argv)

if __name__ == "__main__":
    sys.exit(main())
