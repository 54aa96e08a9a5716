"""Monte Carlo tree search with fixed-point UCT scoring."""

from __future__ import annotations

from typing import Optional

from kxo.game import (
    EMPTY,
    FIXED_MAX,
    FIXED_SCALE_BITS,
    N_GRIDS,
    Board,
    available_moves,
    calculate_win_value,
    check_win,
    opponent,
)
from kxo.xoroshiro import Xoroshiro

ITERATIONS = 100000

_MASK32 = 0xFFFFFFFF
_ONE = 1 << FIXED_SCALE_BITS
_SIGN = 1 << 31


def fixed_sqrt(x: int) -> int:
    """Square root of a fixed-point value, bit by bit from the top."""
    x &= _MASK32
    if x == 0 or x == _ONE:
        return x
    s = 0
    for i in range((x | 1).bit_length() - 1, -1, -1):
        t = 1 << i
        if ((((s + t) * (s + t)) & _MASK32) >> FIXED_SCALE_BITS) <= x:
            s += t
    return s


def fixed_log(v: int) -> int:
    """Natural logarithm of a fixed-point value; negative results carry bit 31."""
    v &= _MASK32
    if v == 0 or v == _ONE:
        return 0

    numerator = (v - _ONE) & _MASK32
    negative = bool(numerator & _SIGN)
    if negative:
        numerator &= _SIGN - 1
        numerator = (_SIGN - numerator) & _MASK32

    y = ((numerator << FIXED_SCALE_BITS) & _MASK32) // ((v + _ONE) & _MASK32)

    ans = 0
    for i in range(1, 20, 2):
        z = _ONE
        for _ in range(i):
            z = ((z * y) & _MASK32) >> FIXED_SCALE_BITS
        z = (z << FIXED_SCALE_BITS) & _MASK32
        z //= i << FIXED_SCALE_BITS
        ans = (ans + z) & _MASK32
    ans = (ans << 1) & _MASK32
    return ans | _SIGN if negative else ans


EXPLORATION_FACTOR = fixed_sqrt(1 << (FIXED_SCALE_BITS + 1))


def uct_score(n_total: int, n_visits: int, score: int) -> int:
    """Upper-confidence score of a child visited ``n_visits`` times."""
    if n_visits == 0:
        return FIXED_MAX
    # The shift amount is FIXED_SCALE_BITS divided by the scaled visit count.
    shift = FIXED_SCALE_BITS // ((n_visits << FIXED_SCALE_BITS) & _MASK32)
    result = (score << shift) & _MASK32
    log_term = fixed_log((n_total << FIXED_SCALE_BITS) & _MASK32) // n_visits
    tmp = ((EXPLORATION_FACTOR * fixed_sqrt(log_term)) & _MASK32) >> FIXED_SCALE_BITS
    return (result + tmp) & _MASK32


class _Node:
    __slots__ = ("move", "player", "n_visits", "score", "parent", "children")

    def __init__(self, move: int, player: str, parent: Optional["_Node"]):
        self.move = move
        self.player = player
        self.n_visits = 0
        self.score = 0
        self.parent = parent
        self.children: list[_Node] = []


def _backpropagate(node: Optional[_Node], score: int) -> None:
    while node is not None:
        node.n_visits += 1
        node.score = (node.score + score) & _MASK32
        node = node.parent
        score = (1 - score) & _MASK32


def _expand(node: _Node, table: Board) -> int:
    moves = available_moves(table)
    node.children.extend(_Node(move, opponent(node.player), node) for move in moves)
    return len(moves)


def _select(node: _Node) -> Optional[_Node]:
    best_node = None
    best_score = 0
    for child in node.children:
        score = uct_score(node.n_visits, child.n_visits, child.score)
        if score > best_score:
            best_score = score
            best_node = child
    return best_node


class MctsEngine:
    """Move chooser running a fixed number of tree-search iterations."""

    def __init__(self, iterations: int = ITERATIONS):
        self.iterations = iterations
        self.nr_active_nodes = 0
        self._rng = Xoroshiro()

    def _simulate(self, table: Board, player: str) -> int:
        current = player
        board = list(table)
        self._rng.jump()
        while True:
            moves = available_moves(board)
            if not moves:
                break
            move = moves[self._rng.next() % len(moves)]
            board[move] = current
            win = check_win(board)
            if win != EMPTY:
                return calculate_win_value(win, player)
            current = opponent(current)
        return 1 << (FIXED_SCALE_BITS - 1)

    def choose(self, table: Board, player: str) -> int:
        """Return the cell to play for ``player``, or -1 if there is none."""
        if len(table) != N_GRIDS:
            raise ValueError(f"board must have {N_GRIDS} cells, got {len(table)}")
        board = list(table)
        root = _Node(-1, player, None)
        self.nr_active_nodes = 1
        for _ in range(self.iterations):
            node = root
            scratch = list(board)
            while True:
                win = check_win(scratch)
                if win != EMPTY:
                    _backpropagate(
                        node, calculate_win_value(win, opponent(node.player))
                    )
                    break
                if node.n_visits == 0:
                    _backpropagate(node, self._simulate(scratch, node.player))
                    break
                if not node.children:
                    self.nr_active_nodes += _expand(node, scratch)
                selected = _select(node)
                if selected is None:
                    return -1
                node = selected
                scratch[node.move] = opponent(node.player)
        if not root.children:
            return root.move
        return max(root.children, key=lambda child: child.n_visits).move