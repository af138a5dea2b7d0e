"""Tests for writing tournaments as PBN."""

import pytest
import sys
from datetime import date
from pathlib import Path

# Add parent directory to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from common_objects import BoardRecord, TournamentRecord, Direction
from pbn_export import serialize_board, serialize_tournament, write_pbn_file
from pbn_parse import parse, parse_pbn_file

NORTH_HAND = "AKQJ.AKQ.AKQ.AKQ"
EAST_HAND = "T987.JT9.JT9.JT9"
SOUTH_HAND = "6543.876.876.876"
WEST_HAND = "2.5432.5432.5432"


def make_board(num, dealer, vul, rotate=0):
    hands = [NORTH_HAND, EAST_HAND, SOUTH_HAND, WEST_HAND]
    hands = hands[rotate:] + hands[:rotate]
    return BoardRecord(
        BoardNum=num,
        Dealer=dealer,
        Vulnerability=vul,
        Deal="",
        North=hands[0],
        East=hands[1],
        South=hands[2],
        West=hands[3],
    )


@pytest.fixture
def tournament():
    return TournamentRecord(
        EventName="Tuesday Night Duplicate",
        EventLocation="Local Club",
        EventDate=date(2025, 6, 7),
        Boards=[
            make_board(1, Direction.NORTH, "None"),
            make_board(2, Direction.EAST, "NS", rotate=1),
            make_board(3, Direction.SOUTH, "EW", rotate=2),
            make_board(4, Direction.WEST, "Both", rotate=3),
        ],
    )


class TestSerialize:
    """Tests for serialize_tournament."""

    def test_layout(self, tournament):
        tournament.Boards = tournament.Boards[:2]
        expected = (
            '[Event "Tuesday Night Duplicate"]\n'
            '[Site "Local Club"]\n'
            '[Date "2025.06.07"]\n'
            "\n"
            '[Board "1"]\n'
            '[Dealer "N"]\n'
            '[Vulnerable "-"]\n'
            f'[Deal "N:{NORTH_HAND} {EAST_HAND} {SOUTH_HAND} {WEST_HAND}"]\n'
            "\n"
            '[Board "2"]\n'
            '[Dealer "E"]\n'
            '[Vulnerable "NS"]\n'
            f'[Deal "N:{EAST_HAND} {SOUTH_HAND} {WEST_HAND} {NORTH_HAND}"]\n'
        )
        assert serialize_tournament(tournament) == expected

    def test_vulnerability_tokens(self, tournament):
        text = serialize_tournament(tournament)
        assert '[Vulnerable "-"]' in text
        assert '[Vulnerable "All"]' in text
        assert "Both" not in text

    def test_deal_always_starts_at_north(self):
        board = make_board(5, Direction.NORTH, "NS")
        board.Deal = f"S:{SOUTH_HAND} {WEST_HAND} {NORTH_HAND} {EAST_HAND}"
        assert f'[Deal "N:{NORTH_HAND} {EAST_HAND} {SOUTH_HAND} {WEST_HAND}"]' in serialize_board(board)

    def test_requires_date(self, tournament):
        tournament.EventDate = None
        with pytest.raises(ValueError):
            serialize_tournament(tournament)


class TestRoundTrip:
    """Parsing serialized output gives back the same tournament."""

    def test_round_trip(self, tournament):
        parsed = parse(serialize_tournament(tournament))
        assert parsed.EventName == tournament.EventName
        assert parsed.EventLocation == tournament.EventLocation
        assert parsed.EventDate == tournament.EventDate
        assert len(parsed.Boards) == len(tournament.Boards)
        for got, want in zip(parsed.Boards, tournament.Boards):
            assert got.BoardNum == want.BoardNum
            assert got.Dealer == want.Dealer
            assert got.Vulnerability == want.Vulnerability
            assert got.hands() == want.hands()

    def test_round_trip_quoted_names(self, tournament):
        tournament.EventName = 'Bob "Ace" Cup'
        tournament.EventLocation = 'Hall \\ "B"'
        text = serialize_tournament(tournament)
        assert '[Event "Bob \\"Ace\\" Cup"]' in text
        parsed = parse(text)
        assert parsed.EventName == 'Bob "Ace" Cup'
        assert parsed.EventLocation == 'Hall \\ "B"'
        assert len(parsed.Boards) == 4

    def test_reexport_is_stable(self, tournament):
        text = serialize_tournament(tournament)
        assert serialize_tournament(parse(text)) == text

    def test_write_pbn_file(self, tournament, tmp_path):
        path = write_pbn_file(tournament, tmp_path / "out.pbn")
        assert path.read_text(encoding="utf-8").endswith("\n")
        assert parse_pbn_file(path).boards_created == 4


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
