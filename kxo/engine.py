"""The game engine: timer-driven AI-versus-AI play feeding a board stream."""

from __future__ import annotations

import errno
import logging
import threading
import time
from dataclasses import dataclass, field

from kxo.game import (
    BOARD_SIZE,
    DRAWBUFFER_SIZE,
    EMPTY,
    N_GRIDS,
    Board,
    check_win,
)
from kxo.mcts import ITERATIONS, MctsEngine
from kxo.negamax import NegamaxEngine

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 100
FIFO_SIZE = 4096


def draw_board(table: Board) -> str:
    """Render the board as the text frame sent to readers."""
    if len(table) != N_GRIDS:
        raise ValueError(f"board must have {N_GRIDS} cells, got {len(table)}")
    separator = "-" * ((BOARD_SIZE << 1) - 1)
    rows = (
        table[start : start + BOARD_SIZE] for start in range(0, N_GRIDS, BOARD_SIZE)
    )
    body = "".join("|".join(row) + "\n" + separator + "\n" for row in rows)
    return ("\n\n" + body)[:DRAWBUFFER_SIZE]


@dataclass
class EngineState:
    """Display, resume and end switches, exposed as "d r e" text."""

    display: str = "1"
    resume: str = "1"
    end: str = "0"
    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    def show(self) -> str:
        """The three switches separated by spaces."""
        with self.lock:
            return f"{self.display} {self.resume} {self.end}"

    def store(self, text: str) -> int:
        """Parse "d r e" and update the switches present; return len(text)."""
        values = []
        pos = 0
        while len(values) < 3 and pos < len(text):
            if values:
                while pos < len(text) and text[pos].isspace():
                    pos += 1
                if pos >= len(text):
                    break
            values.append(text[pos])
            pos += 1
        with self.lock:
            for name, value in zip(("display", "resume", "end"), values):
                setattr(self, name, value)
        return len(text)


class GameEngine:
    """Two AIs playing on a shared board, one move per timer tick."""

    def __init__(self, delay: int = DEFAULT_DELAY, mcts_iterations: int = ITERATIONS):
        self.delay = delay
        self.state = EngineState()
        self.table: list[str] = [EMPTY] * N_GRIDS
        self.turn = "O"
        self._mcts = MctsEngine(mcts_iterations)
        self._negamax = NegamaxEngine()
        self._game_lock = threading.Lock()
        self._fifo = bytearray()
        self._fifo_cond = threading.Condition()
        self._read_lock = threading.Lock()
        self._open_lock = threading.Lock()
        self._open_count = 0
        self._stop = threading.Event()
        self._timer: threading.Thread | None = None

    def _produce_board(self) -> None:
        frame = draw_board(self.table).encode("ascii")
        with self._fifo_cond:
            room = FIFO_SIZE - len(self._fifo)
            accepted = frame[: max(room, 0)]
            self._fifo.extend(accepted)
            if len(accepted) < len(frame):
                logger.warning("%d bytes dropped", len(frame) - len(accepted))
            self._fifo_cond.notify_all()

    def _play_turn(self) -> None:
        start = time.perf_counter_ns()
        player = self.turn
        if player == "O":
            move = self._mcts.choose(self.table, "O")
            self.turn = "X"
        else:
            move = self._negamax.predict(self.table, "X").move
            self.turn = "O"
        if move != -1:
            self.table[move] = player
        logger.info(
            "player %s move completed in %d usec",
            player,
            (time.perf_counter_ns() - start) >> 10,
        )

    def tick(self) -> bool:
        """Run one timer period; return whether the timer stays armed."""
        with self._game_lock:
            win = check_win(self.table)
            if win == EMPTY:
                self._play_turn()
                with self.state.lock:
                    display = self.state.display
                if display != "0":
                    self._produce_board()
                return True

            with self.state.lock:
                display = self.state.display
                end = self.state.end
            if display == "1":
                logger.info("drawing final board")
                self._produce_board()
            restart = end == "0"
            if restart:
                self.table = [EMPTY] * N_GRIDS
            logger.info("%s win!!!", win)
            return restart

    def read(self, count: int, block: bool = True) -> bytes:
        """Take up to ``count`` bytes of board frames from the stream."""
        if count < 0:
            raise ValueError("count must not be negative")
        with self._read_lock, self._fifo_cond:
            while not self._fifo:
                if not block:
                    raise BlockingIOError(errno.EAGAIN, "no board available")
                self._fifo_cond.wait()
            data = bytes(self._fifo[:count])
            del self._fifo[:count]
            return data

    def _run_timer(self) -> None:
        while not self._stop.wait(self.delay / 1000):
            if not self.tick():
                break

    def open(self) -> None:
        """Register a reader; the first one starts the timer."""
        with self._open_lock:
            self._open_count += 1
            if self._open_count == 1:
                self._stop.clear()
                self._timer = threading.Thread(target=self._run_timer, daemon=True)
                self._timer.start()
            logger.info("open, current count: %d", self._open_count)

    def release(self) -> None:
        """Unregister a reader; the last one stops the timer."""
        with self._open_lock:
            if self._open_count == 0:
                raise RuntimeError("release without matching open")
            self._open_count -= 1
            if self._open_count == 0:
                self._stop.set()
                if self._timer is not None:
                    self._timer.join()
                    self._timer = None
            logger.info("release, current count: %d", self._open_count)

    def __enter__(self) -> "GameEngine":
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()