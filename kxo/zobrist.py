"""Zobrist keys for board positions and a transposition table."""

from __future__ import annotations

import time
from dataclasses import dataclass

from kxo.game import N_GRIDS

_MASK64 = (1 << 64) - 1

HASH_TABLE_SIZE = 100003


def wyhash64_stateless(seed: int) -> tuple[int, int]:
    """Return ``(hash, next_seed)`` for a 64-bit seed using wyhash mixing."""
    seed = (seed + 0x60BEE2BEE120FC15) & _MASK64
    tmp = seed * 0xA3B195354A39B70D
    m1 = ((tmp >> 64) ^ tmp) & _MASK64
    tmp = m1 * 0x1B03738712FAD5C9
    m2 = ((tmp >> 64) ^ tmp) & _MASK64
    return m2, seed


@dataclass
class ZobristEntry:
    """A cached search result for one position key."""

    key: int
    score: int
    move: int


class ZobristTable:
    """Random per-cell keys plus a key-to-entry cache."""

    def __init__(self, seed: int | None = None):
        state = (time.time_ns() if seed is None else seed) & _MASK64
        keys = []
        for _ in range(N_GRIDS):
            o_key, state = wyhash64_stateless(state)
            x_key, state = wyhash64_stateless(state)
            keys.append((o_key, x_key))
        self._keys: tuple[tuple[int, int], ...] = tuple(keys)
        self._entries: dict[int, ZobristEntry] = {}

    def key(self, index: int, player: str) -> int:
        """The random key for ``player`` occupying cell ``index``."""
        return self._keys[index][player == "X"]

    def get(self, key: int) -> ZobristEntry | None:
        """The most recent entry stored under ``key``, or None."""
        return self._entries.get(key)

    def put(self, key: int, score: int, move: int) -> None:
        """Store a result under ``key``, shadowing any earlier one."""
        self._entries[key] = ZobristEntry(key, score, move)

    def clear(self) -> None:
        """Drop every cached entry; the cell keys stay the same."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries