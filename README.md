# kxo

kxo is a tic-tac-toe engine for a 4×4 board, where three marks in a row
(horizontally, vertically or diagonally) win. Two computer players play each
other over and over:

- **O** picks its moves with Monte Carlo tree search (`kxo.mcts.MctsEngine`).
  The arithmetic is fixed-point, and the random playouts use a xoroshiro128+
  generator (`kxo.xoroshiro.Xoroshiro`).
- **X** picks its moves with negamax and alpha-beta pruning
  (`kxo.negamax.NegamaxEngine`). It deepens the search by two plies at a time,
  orders moves by their history, and keeps a Zobrist-keyed transposition table
  (`kxo.zobrist.ZobristTable`).

`kxo.engine.GameEngine` plays one move per timer tick. It draws the board as
text into a buffer, and readers take those drawings from it. The `kxo` command
shows the game in a terminal.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Watching a game

```
kxo
```

Options:

- `--delay MS` sets the milliseconds between moves (default 100).
- `--iterations N` sets the number of tree-search iterations for O
  (default 100000).

The command puts the terminal in raw mode when stdin is a terminal. It clears
the screen and redraws the board each time the engine produces a new drawing.
Two keys control it:

- **Ctrl-P** turns the board display off, or back on.
- **Ctrl-Q** ends the game and exits.

When a game ends and no stop was asked for, the board is cleared and a new
game starts.

## Using the library

```python
from kxo.game import check_win, available_moves, get_score
from kxo.mcts import MctsEngine
from kxo.negamax import NegamaxEngine

table = [" "] * 16
table[0] = table[5] = "O"

print(check_win(table))          # " " while the game is still open
print(available_moves(table))    # indices of the empty squares
print(get_score(table, "X"))     # heuristic score from X's point of view

o_move = MctsEngine(iterations=2000).choose(table, "O")
x_move = NegamaxEngine(max_depth=6, seed=1).predict(table, "X")
print(o_move, x_move.move, x_move.score)
```

`check_win` returns `"O"` or `"X"` for a winner, `"D"` for a draw and `" "`
when the game is still going. Functions that take a board raise `ValueError`
when it does not have 16 cells. `MctsEngine.choose` returns a cell index, or
-1 when there is nothing to play; `NegamaxEngine.predict` returns a `Move` with
`score` and `move`.

The engine that the command drives can also be stepped by hand:

```python
from kxo.engine import GameEngine, draw_board

engine = GameEngine(delay=100, mcts_iterations=2000)
engine.tick()                        # plays one move and queues a drawing
print(engine.read(1024, block=False).decode("ascii"))
print(draw_board(engine.table))
```

`tick()` returns whether play goes on. `read(count, block=False)` raises
`BlockingIOError` when no drawing is waiting. `open()` starts a background
timer that calls `tick()` every `delay` milliseconds, and `release()` stops
it; the engine can also be used as a context manager that does both.

`engine.state` is an `EngineState` holding the display, resume and end
switches. Its `show()` returns them as text, for example `"1 1 0"`, and
`store(text)` sets them again from text in the same form.

## What it does not do

The engine runs inside the same Python process as its reader. There is no
device file, background service or settings file that other programs can use
to watch or control a game; the `kxo` command starts its own engine each time.