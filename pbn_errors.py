"""Exceptions raised while importing, exporting and storing PBN tournaments."""

from typing import List, Optional


class PBNError(Exception):
    """Base exception for all PBN import/export errors."""

    pass


# ========== Board-level errors (the board is skipped) ==========


class BoardDecodeError(PBNError):
    """Base for errors that invalidate a single board but not the import."""

    def __init__(self, message: str, raw: str, board_num: Optional[int] = None):
        self.raw = raw
        self.board_num = board_num
        prefix = f"Board {board_num}: " if board_num is not None else ""
        super().__init__(f"{prefix}{message}")


class MalformedDealString(BoardDecodeError):
    """Raised when a Deal tag lacks a seat prefix, has the wrong number of
    hands, an unknown starting seat, or a hand without four suits."""

    def __init__(self, raw: str, detail: str, board_num: Optional[int] = None):
        self.detail = detail
        super().__init__(f"Malformed deal string '{raw}': {detail}", raw, board_num)


class UnrecognizedDealerCode(BoardDecodeError):
    """Raised when a Dealer tag is not one of N, E, S, W."""

    def __init__(self, raw: str, board_num: Optional[int] = None):
        super().__init__(f"Unrecognized dealer code '{raw}'", raw, board_num)


# ========== Tournament-level errors (the import is aborted) ==========


class InvalidDateFormat(PBNError):
    """Raised when a Date tag is not a valid YYYY.MM.DD / YYYY-MM-DD date."""

    def __init__(self, raw: str, detail: str = "expected YYYY.MM.DD"):
        self.raw = raw
        self.detail = detail
        super().__init__(f"Invalid date '{raw}': {detail}")


class IncompleteTournament(PBNError):
    """Raised when the event name, the date or every board is missing."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(f"Invalid PBN file: missing {', '.join(self.missing)}")


# ========== Store errors ==========


class DuplicateTournament(PBNError):
    """Raised when a tournament with the same name and date is already stored."""

    def __init__(self, event_name: str, event_date, existing_uid: int):
        self.event_name = event_name
        self.event_date = event_date
        self.existing_uid = existing_uid
        super().__init__(
            f"Tournament '{event_name}' on {event_date} already exists (id {existing_uid})"
        )


class TournamentNotFound(PBNError):
    """Raised when no tournament is stored under the requested id."""

    def __init__(self, tournament_uid: int):
        self.tournament_uid = tournament_uid
        super().__init__(f"No tournament with id {tournament_uid}")
