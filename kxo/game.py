"""Board geometry, win detection, move listing and static evaluation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

BOARD_SIZE = 4
GOAL = 3
N_GRIDS = BOARD_SIZE * BOARD_SIZE

EMPTY = " "
DRAW = "D"

# Fixed-point values carry FIXED_SCALE_BITS fractional bits in 32 bits.
FIXED_SCALE_BITS = 8
FIXED_MAX = 0xFFFFFFFF
FIXED_MIN = 0

DRAW_SIZE = N_GRIDS + BOARD_SIZE
DRAWBUFFER_SIZE = (
    ((BOARD_SIZE * (BOARD_SIZE + 1)) << 1)
    + BOARD_SIZE * BOARD_SIZE
    + ((BOARD_SIZE << 1) + 1)
    + 1
)

Board = Sequence[str]


def get_index(i: int, j: int) -> int:
    """Flat board index of row ``i``, column ``j``."""
    return i * BOARD_SIZE + j


@dataclass(frozen=True)
class Line:
    """A direction on the board and the range of segment starting points."""

    i_shift: int
    j_shift: int
    i_lower_bound: int
    j_lower_bound: int
    i_upper_bound: int
    j_upper_bound: int

    def starts(self) -> Iterator[tuple[int, int]]:
        """Yield every (row, column) where a segment of GOAL cells starts."""
        for i in range(self.i_lower_bound, self.i_upper_bound):
            for j in range(self.j_lower_bound, self.j_upper_bound):
                yield i, j

    def cells(self, i: int, j: int) -> list[int]:
        """Flat indices of the GOAL cells of the segment starting at (i, j)."""
        return [
            get_index(i + k * self.i_shift, j + k * self.j_shift)
            for k in range(GOAL)
        ]


LINES: tuple[Line, ...] = (
    Line(1, 0, 0, 0, BOARD_SIZE - GOAL + 1, BOARD_SIZE),  # column
    Line(0, 1, 0, 0, BOARD_SIZE, BOARD_SIZE - GOAL + 1),  # row
    Line(1, 1, 0, 0, BOARD_SIZE - GOAL + 1, BOARD_SIZE - GOAL + 1),  # primary
    Line(1, -1, 0, GOAL - 1, BOARD_SIZE - GOAL + 1, BOARD_SIZE),  # secondary
)


def _segments() -> Iterator[tuple[Line, int, int]]:
    for line in LINES:
        for i, j in line.starts():
            yield line, i, j


def _require_board(table: Board) -> None:
    if len(table) != N_GRIDS:
        raise ValueError(f"board must have {N_GRIDS} cells, got {len(table)}")


def opponent(player: str) -> str:
    """The other player: 'O' for 'X' and 'X' for 'O'."""
    return chr(ord(player) ^ ord("O") ^ ord("X"))


def _segment_winner(table: Board, line: Line, i: int, j: int) -> str:
    cells = [table[idx] for idx in line.cells(i, j)]
    first = cells[0]
    if first == EMPTY or any(cell != first for cell in cells[1:]):
        return EMPTY
    return first


def check_win(table: Board) -> str:
    """Return the winner, DRAW for a full board, or EMPTY if play goes on."""
    _require_board(table)
    for line, i, j in _segments():
        winner = _segment_winner(table, line, i, j)
        if winner != EMPTY:
            return winner
    if EMPTY in table:
        return EMPTY
    return DRAW


def calculate_win_value(win: str, player: str) -> int:
    """Fixed-point value of the outcome ``win`` seen from ``player``."""
    if win == player:
        return 1 << FIXED_SCALE_BITS
    if win == opponent(player):
        return 0
    return 1 << (FIXED_SCALE_BITS - 1)


def available_moves(table: Board) -> list[int]:
    """Indices of the empty cells, in ascending order."""
    _require_board(table)
    return [idx for idx, cell in enumerate(table) if cell == EMPTY]


def eval_line_segment_score(
    table: Board, player: str, i: int, j: int, line: Line
) -> int:
    """Score one segment: powers of ten for an unopposed run, zero if mixed."""
    score = 0
    for idx in line.cells(i, j):
        cell = table[idx]
        if cell == player:
            if score < 0:
                return 0
            score = score * 10 if score else 1
        elif cell != EMPTY:
            if score > 0:
                return 0
            score = score * 10 if score else -1
    return score


def get_score(table: Board, player: str) -> int:
    """Static evaluation of the whole board for ``player``."""
    _require_board(table)
    return sum(
        eval_line_segment_score(table, player, i, j, line)
        for line, i, j in _segments()
    )