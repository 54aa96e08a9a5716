import os
import sys

import pytest

from kxo.cli import CTRL_P, CTRL_Q, handle_key, main
from kxo.engine import GameEngine


def test_ctrl_p_toggles_display():
    engine = GameEngine(mcts_iterations=5)
    message = handle_key(engine, CTRL_P)
    assert engine.state.display == "0"
    assert "Stopping to display" in message
    assert handle_key(engine, CTRL_P) is None
    assert engine.state.display == "1"


def test_ctrl_q_sets_end_only():
    engine = GameEngine(mcts_iterations=5)
    message = handle_key(engine, CTRL_Q)
    assert engine.state.end == "1"
    assert engine.state.display == "1"
    assert "Stopping" in message


def test_other_key_is_ignored():
    engine = GameEngine(mcts_iterations=5)
    before = engine.state.show()
    assert handle_key(engine, "a") is None
    assert engine.state.show() == before


def test_main_stops_on_ctrl_q(monkeypatch, capsys):
    read_fd, write_fd = os.pipe()
    os.write(write_fd, CTRL_Q.encode())
    os.close(write_fd)
    stdin = os.fdopen(read_fd, "r")
    monkeypatch.setattr(sys, "stdin", stdin)
    try:
        assert main(["--delay", "10000", "--iterations", "5"]) == 0
    finally:
        stdin.close()
    assert "Stopping the tic-tac-toe game..." in capsys.readouterr().out


def test_main_rejects_bad_argument():
    with pytest.raises(SystemExit):
        main(["--delay", "soon"])