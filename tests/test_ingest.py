"""Tests for file-level import."""

import pytest
import sys
from datetime import date
from pathlib import Path

# Add parent directory to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from db_comp import BridgeDB, DBType
from ingest import collect_files, import_file, import_files
from pbn_errors import DuplicateTournament, IncompleteTournament
from tournament_db import TournamentDB

GOOD_DEAL = "N:AKQJ.AKQ.AKQ.AKQ T987.JT9.JT9.JT9 6543.876.876.876 2.5432.5432.5432"


def write_pbn(path, event="Club Pairs", date_str="2025.06.17", deals=(GOOD_DEAL, GOOD_DEAL, GOOD_DEAL)):
    lines = [f'[Event "{event}"]', '[Site "Local Club"]', f'[Date "{date_str}"]']
    for num, deal in enumerate(deals, 1):
        lines += ["", f'[Board "{num}"]', '[Dealer "N"]', '[Vulnerable "-"]', f'[Deal "{deal}"]']
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def tdb(tmp_path):
    return TournamentDB(BridgeDB.create(DBType.CSV, tmp_path / "db"))


class TestImportFile:
    """Tests for import_file."""

    def test_parse_only(self, tmp_path):
        summary = import_file(write_pbn(tmp_path / "a.pbn"))
        assert summary.EventName == "Club Pairs"
        assert summary.EventDate == date(2025, 6, 17)
        assert summary.TournamentUID is None
        assert summary.boardsCreated == 3
        assert summary.totalBoards == 3

    def test_partial_success(self, tmp_path, tdb):
        path = write_pbn(tmp_path / "a.pbn", deals=(GOOD_DEAL, "N:AKQ", GOOD_DEAL))
        summary = import_file(path, tdb)
        assert summary.TournamentUID == 1
        assert summary.boardsCreated == 2
        assert summary.totalBoards == 3
        assert [s.BoardNum for s in summary.Skipped] == [2]
        assert [b.BoardNum for b in tdb.get(1).Boards] == [1, 3]

    def test_repeated_board_number_reported_as_skipped(self, tmp_path, tdb):
        path = tmp_path / "a.pbn"
        lines = ['[Event "Club Pairs"]', '[Date "2025.06.17"]']
        for num in (1, 2, 2):
            lines += ["", f'[Board "{num}"]', '[Dealer "N"]', '[Vulnerable "-"]', f'[Deal "{GOOD_DEAL}"]']
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        summary = import_file(path, tdb)
        assert summary.totalBoards == 3
        assert summary.boardsCreated == 2
        assert [s.BoardNum for s in summary.Skipped] == [2]
        assert "repeated board number" in summary.Skipped[0].Reason
        assert summary.boardsCreated + len(summary.Skipped) == summary.totalBoards
        assert len(tdb.get(summary.TournamentUID).Boards) == 2

    def test_duplicate_tournament(self, tmp_path, tdb):
        import_file(write_pbn(tmp_path / "a.pbn"), tdb)
        with pytest.raises(DuplicateTournament):
            import_file(write_pbn(tmp_path / "b.pbn"), tdb)

    def test_incomplete_file_not_stored(self, tmp_path, tdb):
        with pytest.raises(IncompleteTournament):
            import_file(write_pbn(tmp_path / "a.pbn", event=""), tdb)
        assert tdb.list().height == 0


class TestImportFiles:
    """Tests for collect_files and import_files."""

    def test_collect_files(self, tmp_path):
        write_pbn(tmp_path / "a.pbn")
        (tmp_path / "sub").mkdir()
        write_pbn(tmp_path / "sub" / "b.PBN")
        (tmp_path / "notes.txt").write_text("x")
        found = collect_files([tmp_path])
        assert sorted(p.name for p in found) == ["a.pbn", "b.PBN"]
        assert collect_files([tmp_path / "notes.txt"]) == []

    @pytest.mark.parametrize("parallelize", [True, False])
    def test_import_files(self, tmp_path, tdb, parallelize):
        src = tmp_path / "src"
        src.mkdir()
        write_pbn(src / "1.pbn", event="Monday Pairs")
        write_pbn(src / "2.pbn", event="Tuesday Pairs")
        write_pbn(src / "3.pbn", event="")
        summaries = import_files([src], tdb, parallelize=parallelize)
        assert [s.EventName for s in summaries] == ["Monday Pairs", "Tuesday Pairs"]
        assert [s.TournamentUID for s in summaries] == [1, 2]

    def test_duplicate_among_files_logged(self, tmp_path, tdb, caplog):
        src = tmp_path / "src"
        src.mkdir()
        write_pbn(src / "1.pbn")
        write_pbn(src / "2.pbn")
        with caplog.at_level("ERROR"):
            summaries = import_files([src], tdb)
        assert len(summaries) == 1
        assert "already exists" in caplog.text

    def test_no_files(self, tmp_path, tdb):
        assert import_files([tmp_path], tdb) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
