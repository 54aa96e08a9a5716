"""Negamax search with principal-variation windows and a transposition table."""

from __future__ import annotations

from dataclasses import dataclass

from kxo.game import (
    EMPTY,
    N_GRIDS,
    Board,
    available_moves,
    check_win,
    get_score,
    opponent,
)
from kxo.zobrist import ZobristTable

MAX_SEARCH_DEPTH = 6


@dataclass(frozen=True)
class Move:
    """A search result: its score and the cell to play (-1 if none)."""

    score: int
    move: int


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


class NegamaxEngine:
    """Iterative-deepening negamax player guided by move history."""

    def __init__(self, max_depth: int = MAX_SEARCH_DEPTH, seed: int | None = None):
        if max_depth < 2:
            raise ValueError("max_depth must be at least 2")
        self.max_depth = max_depth
        self._zobrist = ZobristTable(seed)
        self._hash = 0
        self._score_sum = [0] * N_GRIDS
        self._count = [0] * N_GRIDS

    def _history(self, move: int) -> int:
        count = self._count[move]
        return _trunc_div(self._score_sum[move], count) if count else 0

    def _negamax(
        self, table: list[str], depth: int, player: str, alpha: int, beta: int
    ) -> Move:
        if check_win(table) != EMPTY or depth == 0:
            return Move(get_score(table, player), -1)
        entry = self._zobrist.get(self._hash)
        if entry is not None:
            return Move(entry.score, entry.move)

        best = Move(-10000, -1)
        moves = sorted(available_moves(table), key=self._history, reverse=True)
        other = opponent(player)

        for i, move in enumerate(moves):
            table[move] = player
            self._hash ^= self._zobrist.key(move, player)
            if i == 0:
                score = -self._negamax(table, depth - 1, other, -beta, -alpha).score
            else:
                score = -self._negamax(
                    table, depth - 1, other, -alpha - 1, -alpha
                ).score
                if alpha < score < beta:
                    score = -self._negamax(
                        table, depth - 1, other, -beta, -score
                    ).score
            self._count[move] += 1
            self._score_sum[move] += score
            if score > best.score:
                best = Move(score, move)
            table[move] = EMPTY
            self._hash ^= self._zobrist.key(move, player)
            if score > alpha:
                alpha = score
            if alpha >= beta:
                break

        self._zobrist.put(self._hash, best.score, best.move)
        return best

    def predict(self, table: Board, player: str) -> Move:
        """Search even depths up to ``max_depth`` and return the best move."""
        if len(table) != N_GRIDS:
            raise ValueError(f"board must have {N_GRIDS} cells, got {len(table)}")
        board = list(table)
        self._score_sum = [0] * N_GRIDS
        self._count = [0] * N_GRIDS
        result = Move(-10000, -1)
        for depth in range(2, self.max_depth + 1, 2):
            result = self._negamax(board, depth, player, -100000, 100000)
            self._zobrist.clear()
        return result