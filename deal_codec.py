from typing import Dict, List, Optional, Final
from common_objects import Direction, split_hand
from pbn_errors import MalformedDealString

NHANDS: Final[int] = 4

def decode_deal(deal: str, board_num: Optional[int] = None) -> Dict[Direction, str]:
    """
    Split a PBN deal string into the four seat hands.

    The first hand listed belongs to the seat named before the colon and the
    rest follow clockwise, so "E:h0 h1 h2 h3" gives h0 to EAST, h1 to SOUTH,
    h2 to WEST and h3 to NORTH.

    Args:
        deal: String such as "N:KQ95.A743.A2.Q42 J74.J985.Q543.K7 ..."
        board_num: Board number, only used to label errors

    Returns:
        Dictionary mapping each Direction to its hand string (S.H.D.C)
    """
    seat_str, sep, hands_str = deal.strip().partition(":")
    if not sep:
        raise MalformedDealString(deal, "missing ':' after the starting seat", board_num)
    seat_str = seat_str.strip()
    try:
        first: Direction = Direction.from_str(seat_str)
    except KeyError:
        raise MalformedDealString(deal, f"unknown starting seat '{seat_str}'", board_num) from None

    hands: List[str] = hands_str.split()
    if len(hands) != NHANDS:
        raise MalformedDealString(deal, f"found {len(hands)} hands, expected {NHANDS}", board_num)

    result: Dict[Direction, str] = {}
    for j, hand in enumerate(hands):
        if split_hand(hand) is None:
            raise MalformedDealString(deal, f"hand '{hand}' does not have 4 suits", board_num)
        result[first.offset(j)] = hand
    return result

def encode_deal(hands: Dict[Direction, str], first: Direction = Direction.NORTH) -> str:
    """Inverse of decode_deal: list the hands clockwise starting at `first`."""
    return f"{first.abbreviation()}:" + " ".join(hands[first.offset(j)] for j in range(NHANDS))
