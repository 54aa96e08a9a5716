"""Terminal viewer that runs the engine and shows its boards."""

from __future__ import annotations

import argparse
import contextlib
import os
import select
import sys
from typing import Iterator

from kxo.engine import DEFAULT_DELAY, GameEngine
from kxo.game import DRAWBUFFER_SIZE
from kxo.mcts import ITERATIONS

CTRL_P = "\x10"
CTRL_Q = "\x11"

_POLL_SECONDS = 0.05


def handle_key(engine: GameEngine, key: str) -> str | None:
    """Apply a control key to the engine state; return a message to show."""
    if key == CTRL_P:
        text = list(engine.state.show())
        text[0] = "1" if text[0] == "0" else "0"
        engine.state.store("".join(text))
        if engine.state.display == "0":
            return "Stopping to display the chess board..."
        return None
    if key == CTRL_Q:
        text = list(engine.state.show())
        text[4] = "1"
        engine.state.store("".join(text))
        return "Stopping the tic-tac-toe game..."
    return None


@contextlib.contextmanager
def _raw_mode(fd: int) -> Iterator[None]:
    if not os.isatty(fd):
        yield
        return
    import termios

    original = termios.tcgetattr(fd)
    raw = termios.tcgetattr(fd)
    raw[0] &= ~termios.IXON
    raw[3] &= ~(termios.ECHO | termios.ICANON)
    termios.tcsetattr(fd, termios.TCSAFLUSH, raw)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSAFLUSH, original)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kxo", description="Watch two AIs play tic-tac-toe."
    )
    parser.add_argument(
        "--delay", type=int, default=DEFAULT_DELAY, help="ms between moves"
    )
    parser.add_argument(
        "--iterations", type=int, default=ITERATIONS, help="tree-search iterations"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the game, show boards, and react to Ctrl-P and Ctrl-Q."""
    args = _parse_args(argv)
    engine = GameEngine(delay=args.delay, mcts_iterations=args.iterations)
    fd = sys.stdin.fileno()
    out = sys.stdout
    with _raw_mode(fd), engine:
        while engine.state.end != "1":
            readable, _, _ = select.select([fd], [], [], _POLL_SECONDS)
            if readable:
                key = os.read(fd, 1).decode("latin-1")
                if not key:
                    break
                message = handle_key(engine, key)
                if message:
                    print(message, file=out, flush=True)
            elif engine.state.display == "1":
                try:
                    data = engine.read(DRAWBUFFER_SIZE, block=False)
                except BlockingIOError:
                    continue
                out.write("\033[H\033[J")
                out.write(data.decode("ascii"))
                out.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())