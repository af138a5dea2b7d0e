import polars as pl
from datetime import date
from typing import Optional, Tuple, List, Dict, Any, Set
from logging import getLogger
from common_objects import BoardRecord, TournamentRecord, Direction
from db_comp import DBComp, BridgeDB
from pbn_errors import DuplicateTournament, TournamentNotFound

logger = getLogger(__name__)

class BoardDB(DBComp):
    """Database manager for the boards of stored tournaments."""
    SCHEMA = {
        "BoardUID":      pl.Int64,
        "TournamentUID": pl.Int64,
        "BoardNum":      pl.Int64,
        "Dealer":        pl.Utf8,
        "Vulnerability": pl.Utf8,
        "Deal":          pl.Utf8,
        "North":         pl.Utf8,
        "East":          pl.Utf8,
        "South":         pl.Utf8,
        "West":          pl.Utf8
    }

    def __init__(self, db: BridgeDB):
        super().__init__(db, "Boards", pkey="BoardUID", schema=self.SCHEMA)

    def add_batch(self, tournamentUid: int, boards: List[BoardRecord]) -> List[int]:
        """
        Add the boards of one tournament in a single append.

        Returns the numbers of the boards that were not stored because the
        tournament already had a board with that number.
        """
        seen: Set[int] = set(self.df.filter(pl.col("TournamentUID") == tournamentUid)["BoardNum"].to_list())
        new_rows: List[Dict[str, Any]] = []
        dropped: List[int] = []

        for board in boards:
            if board.BoardNum in seen:
                logger.error(f"Tournament {tournamentUid} already has board {board.BoardNum}. Ignoring.")
                dropped.append(board.BoardNum)
                continue
            seen.add(board.BoardNum)
            new_rows.append({
                "BoardUID":      self.next_id(),
                "TournamentUID": tournamentUid,
                "BoardNum":      board.BoardNum,
                "Dealer":        board.Dealer.abbreviation(),
                "Vulnerability": board.Vulnerability,
                "Deal":          board.Deal,
                "North":         board.North,
                "East":          board.East,
                "South":         board.South,
                "West":          board.West
            })

        self.append_rows(new_rows)
        return dropped

    def for_tournament(self, tournamentUid: int) -> List[BoardRecord]:
        rows = self.df.filter(pl.col("TournamentUID") == tournamentUid).sort("BoardUID")
        return [
            BoardRecord(
                BoardNum=row["BoardNum"],
                Dealer=Direction.from_str(row["Dealer"]),
                Vulnerability=row["Vulnerability"],
                Deal=row["Deal"],
                North=row["North"],
                East=row["East"],
                South=row["South"],
                West=row["West"]
            )
            for row in rows.iter_rows(named=True)
        ]

class TournamentDB(DBComp):
    """
    Database manager for imported tournaments.

    At most one tournament is stored per (EventName, EventDate); the boards
    live in a BoardDB sharing the same BridgeDB.
    """
    SCHEMA = {
        "TournamentUID": pl.Int64,
        "EventName":     pl.Utf8,
        "EventLocation": pl.Utf8,
        "EventDate":     pl.Utf8,
        "Source":        pl.Utf8
    }

    def __init__(self, db: BridgeDB):
        super().__init__(db, "Tournaments", pkey="TournamentUID", schema=self.SCHEMA)
        self.boards = BoardDB(db)

    def find(self, EventName: str, EventDate: date) -> Optional[int]:
        """Return the id of the tournament with this name and date, if stored."""
        matches = self.df.filter((pl.col("EventName") == EventName) &
                                 (pl.col("EventDate") == EventDate.isoformat()))
        if matches.height > 1:
            raise ValueError(f"Multiple tournaments found for {EventName} on {EventDate}")
        return int(matches["TournamentUID"][0]) if matches.height == 1 else None

    def add(self, record: TournamentRecord, source: str = "PBN Upload") -> Tuple[int, List[int]]:
        """
        Store a tournament and its boards.

        The tournament row is only appended once its boards are in, so a
        failure part way leaves no tournament without boards.

        Returns:
            (TournamentUID, numbers of the boards dropped as repeats)

        Raises:
            DuplicateTournament: a tournament with this name and date exists
        """
        if record.EventDate is None:
            raise ValueError(f"Cannot store tournament '{record.EventName}' without a date")
        existing: Optional[int] = self.find(record.EventName, record.EventDate)
        if existing is not None:
            logger.error(f"Found existing tournament {existing} for {record.EventName} on {record.EventDate}")
            raise DuplicateTournament(record.EventName, record.EventDate, existing)

        uid: int = self.next_id()
        dropped: List[int] = self.boards.add_batch(uid, record.Boards)
        self.append_rows([{
            "TournamentUID": uid,
            "EventName":     record.EventName,
            "EventLocation": record.EventLocation,
            "EventDate":     record.EventDate.isoformat(),
            "Source":        source
        }])
        logger.info(f"Stored tournament {uid} '{record.EventName}' with {len(record.Boards) - len(dropped)} boards")
        return uid, dropped

    def get(self, tournamentUid: int) -> Optional[TournamentRecord]:
        """Get a stored tournament, boards in the order they were stored."""
        matches = self.df.filter(pl.col("TournamentUID") == tournamentUid)
        if matches.height == 0:
            return None
        row = matches.row(0, named=True)
        return TournamentRecord(
            EventName=row["EventName"],
            EventLocation=row["EventLocation"],
            EventDate=date.fromisoformat(row["EventDate"]),
            Boards=self.boards.for_tournament(tournamentUid)
        )

    def delete(self, tournamentUid: int) -> int:
        """
        Remove a tournament and its boards.

        Returns:
            Number of boards removed

        Raises:
            TournamentNotFound: no tournament has this id
        """
        if self.delete_where(pl.col("TournamentUID") == tournamentUid) == 0:
            logger.error(f"Cannot delete tournament {tournamentUid}: not found")
            raise TournamentNotFound(tournamentUid)
        removed: int = self.boards.delete_where(pl.col("TournamentUID") == tournamentUid)
        logger.info(f"Deleted tournament {tournamentUid} and {removed} boards")
        return removed

    def list(self) -> pl.DataFrame:
        """One row per tournament with its board count, newest event first."""
        counts = self.boards.df.group_by("TournamentUID").agg(pl.len().cast(pl.Int64).alias("Boards"))
        return (
            self.df
            .join(counts, on="TournamentUID", how="left")
            .with_columns(pl.col("Boards").fill_null(0))
            .sort(["EventDate", "TournamentUID"], descending=[True, False])
        )

    def totals(self) -> Tuple[int, int]:
        """(tournaments, boards) currently stored."""
        return self.df.height, self.boards.df.height

    def sync(self) -> None:
        super().sync()
        self.boards.sync()
