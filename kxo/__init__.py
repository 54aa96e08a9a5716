"""4x4 tic-tac-toe engine where an MCTS player and a negamax player play each other."""

__version__ = "0.1.0"