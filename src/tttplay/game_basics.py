"""
Game basics: cell values, the winning line set, and pure rule helpers.
Notes:
- A board is a sequence of 9 cells in row-major order: 0=empty, 1=X, 2=O.
- Indices 0,1,2 are the top row and 6,7,8 the bottom row.
- Nothing here mutates its input.
"""
from typing import List, Optional, Sequence, Tuple

EMPTY = 0
X = 1
O = 2
PLAYERS = (X, O)
BOARD_SIZE = 9

# rows, columns, diagonals
WIN_PATTERNS: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

MARK_SYMBOLS = {EMPTY: '.', X: 'X', O: 'O'}


def other_player(player: int) -> int:
    if player not in PLAYERS:
        raise ValueError(f"Unknown player: {player!r}")
    return O if player == X else X


def parse_player(raw: str) -> int:
    """Accept 1/2 or x/o (any case)."""
    key = str(raw).strip().lower()
    if key in ('1', 'x'):
        return X
    if key in ('2', 'o'):
        return O
    raise ValueError(f"Unknown player: {raw!r}. Use x/o or 1/2.")


def serialize_board(board: Sequence[int]) -> str:
    return ''.join(str(cell) for cell in board)


def parse_board(raw: str) -> List[int]:
    raw = (raw or '').strip()
    if len(raw) != BOARD_SIZE or any(c not in '012' for c in raw):
        raise ValueError("Invalid board string. Must be 9 chars of 0/1/2.")
    return [int(c) for c in raw]


def winning_line(board: Sequence[int]) -> Optional[Tuple[int, int, int]]:
    for line in WIN_PATTERNS:
        a, b, c = line
        v = board[a]
        if v != EMPTY and v == board[b] and v == board[c]:
            return line
    return None


def get_winner(board: Sequence[int]) -> int:
    line = winning_line(board)
    return board[line[0]] if line is not None else EMPTY


def has_line(board: Sequence[int], player: int) -> bool:
    return any(all(board[i] == player for i in line) for line in WIN_PATTERNS)


def is_full(board: Sequence[int]) -> bool:
    return EMPTY not in board


def is_draw(board: Sequence[int]) -> bool:
    return is_full(board) and get_winner(board) == EMPTY


def legal_moves(board: Sequence[int]) -> List[int]:
    return [i for i, v in enumerate(board) if v == EMPTY]


def get_piece_counts(board: Sequence[int]) -> Tuple[int, int]:
    board = list(board)
    return board.count(X), board.count(O)


def current_player(board: Sequence[int]) -> int:
    """Side to move assuming X opened the round."""
    x, o = get_piece_counts(board)
    return X if x == o else O


def is_valid_state(board: Sequence[int]) -> bool:
    """True if the board can be reached from the empty board with X moving first."""
    if len(board) != BOARD_SIZE:
        return False
    x_count, o_count = get_piece_counts(board)
    if not (x_count == o_count or x_count == o_count + 1):
        return False
    x_wins = has_line(board, X)
    o_wins = has_line(board, O)
    if x_wins and o_wins:
        return False
    if x_wins and x_count != o_count + 1:
        return False
    if o_wins and x_count != o_count:
        return False
    return True


def is_valid_position(board: Sequence[int]) -> bool:
    """Like is_valid_state, but either mark may have opened the round."""
    if len(board) != BOARD_SIZE:
        return False
    x_count, o_count = get_piece_counts(board)
    if abs(x_count - o_count) > 1:
        return False
    x_wins = has_line(board, X)
    o_wins = has_line(board, O)
    if x_wins and o_wins:
        return False
    # the winner made the last move, so it cannot trail in marks
    if x_wins and x_count < o_count:
        return False
    if o_wins and o_count < x_count:
        return False
    return True


def side_to_move(board: Sequence[int]) -> Optional[int]:
    """Side to move when either mark may have opened; None when counts are equal."""
    x, o = get_piece_counts(board)
    if x == o:
        return None
    return O if x > o else X


def format_board(board: Sequence[int]) -> str:
    """Three text rows; empty cells show their index so a human can pick them."""
    rows = []
    for r in range(3):
        cells = []
        for c in range(3):
            i = r * 3 + c
            cells.append(str(i) if board[i] == EMPTY else MARK_SYMBOLS[board[i]])
        rows.append(' ' + ' | '.join(cells))
    return '\n---+---+---\n'.join(rows)
