import math

import pytest

from kxo.game import FIXED_MAX, available_moves
from kxo.mcts import MctsEngine, fixed_log, fixed_sqrt, uct_score

SIGN = 1 << 31

# No line of three anywhere; cell 15 left empty.
ONE_EMPTY = list("OOXX" "XXOO" "OOXX" "XXO ")


def test_fixed_sqrt_fixed_points():
    assert fixed_sqrt(0) == 0
    assert fixed_sqrt(256) == 256


def test_fixed_log_of_one_and_zero():
    assert fixed_log(256) == 0
    assert fixed_log(0) == 0


def test_fixed_log_close_to_natural_log():
    for v in (384, 512, 768):
        expected = math.log(v / 256) * 256
        assert abs(fixed_log(v) - expected) <= 4


def test_fixed_log_below_one_is_signed_mirror():
    assert fixed_log(128) & SIGN
    assert fixed_log(128) == fixed_log(512) | SIGN


def test_fixed_log_monotonic_above_one():
    values = [fixed_log(v) for v in range(257, 2000, 37)]
    assert values == sorted(values)


def test_uct_unvisited_is_max():
    assert uct_score(10, 0, 5) == FIXED_MAX


@pytest.mark.parametrize("score", [0, 128, 256, 1000])
def test_uct_single_total_is_plain_score(score):
    assert uct_score(1, 1, score) == score


def test_uct_grows_with_total_visits():
    assert uct_score(50, 3, 100) >= uct_score(5, 3, 100) > 100


def test_choose_single_empty_cell():
    engine = MctsEngine(iterations=20)
    assert engine.choose(ONE_EMPTY, "O") == 15
    assert engine.nr_active_nodes == 2


def test_choose_full_board_returns_minus_one():
    full = ONE_EMPTY[:15] + ["O"]
    assert MctsEngine(iterations=10).choose(full, "X") == -1


def test_choose_won_board_returns_minus_one():
    board = list("XXX " + " " * 12)
    assert MctsEngine(iterations=10).choose(board, "O") == -1


def test_choose_returns_available_move_and_keeps_board():
    board = list("X  O" + " O  " + "  X " + "    ")
    before = list(board)
    move = MctsEngine(iterations=300).choose(board, "X")
    assert move in available_moves(board)
    assert board == before


def test_choose_is_deterministic_for_fresh_engines():
    board = list("O   " + " X  " + "    " + "    ")
    first = MctsEngine(iterations=200).choose(board, "O")
    second = MctsEngine(iterations=200).choose(board, "O")
    assert first == second


def test_choose_rejects_wrong_board_size():
    with pytest.raises(ValueError):
        MctsEngine(iterations=5).choose(list("   "), "O")