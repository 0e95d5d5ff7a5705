"""Background move selection with an inline fallback.

Deep searches (level ``UTTT_BACKGROUND_MIN_DIFFICULTY`` and up) run on a
worker thread so the host's event loop stays responsive. If the worker does
not answer within ``UTTT_BACKGROUND_TIMEOUT_SECONDS``, cannot be started, or
raises, the same computation runs inline on the calling thread instead.

An abandoned search is never interrupted; its result is discarded and the
pool it occupies is replaced so later requests do not queue behind it.

Usage:
    with BackgroundMoveSelector() as selector:
        move = selector.select_move(state, level=9, ai_symbol="O")
"""

from __future__ import annotations

import logging
import os
import random
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Optional

from ..errors import AIFallbackError, AITimeoutError, UTTTError
from ..models import GameState, Move
from .factory import choose_move, clamp_difficulty

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}; using {default}")
        return default
    if value <= 0:
        logger.warning(f"{name} must be positive; using {default}")
        return default
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid {name}={raw!r}; using {default}")
        return default
    if value <= 0:
        logger.warning(f"{name} must be positive; using {default}")
        return default
    return value


BACKGROUND_TIMEOUT_SECONDS = _env_float("UTTT_BACKGROUND_TIMEOUT_SECONDS", 5.0)
BACKGROUND_MIN_DIFFICULTY = _env_int("UTTT_BACKGROUND_MIN_DIFFICULTY", 7)
BACKGROUND_WORKERS = _env_int("UTTT_BACKGROUND_WORKERS", 1)

MoveFunction = Callable[[GameState, int, Optional[str], Optional[int]], Optional[Move]]


class BackgroundMoveSelector:
    """Runs deep move selection off-thread, falling back to inline.

    Args:
        timeout_seconds: Budget for the background answer.
        min_difficulty: Lowest level sent to the worker; lower levels run
            inline directly since they answer quickly.
        max_workers: Worker threads in the pool.
        move_fn: ``(state, level, ai_symbol, rng_seed) -> Move | None``;
            defaults to :func:`~uttt.ai.factory.choose_move`.
    """

    def __init__(
        self,
        timeout_seconds: float | None = None,
        min_difficulty: int | None = None,
        max_workers: int | None = None,
        move_fn: MoveFunction | None = None,
    ) -> None:
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else BACKGROUND_TIMEOUT_SECONDS
        )
        self.min_difficulty = (
            min_difficulty if min_difficulty is not None else BACKGROUND_MIN_DIFFICULTY
        )
        self.max_workers = max_workers or BACKGROUND_WORKERS
        self._move_fn: MoveFunction = move_fn or choose_move
        self._executor: ThreadPoolExecutor | None = None
        self.fallback_count = 0
        self.last_error: UTTTError | None = None

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix="uttt-search",
            )
        return self._executor

    def _discard_executor(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None

    def select_move(
        self,
        game_state: GameState,
        level: int,
        ai_symbol: str | None = None,
        rng_seed: int | None = None,
    ) -> Move | None:
        """Pick a move at ``level``, off-thread when the level is deep enough."""
        level = clamp_difficulty(level)
        if rng_seed is None:
            # Fixed up front so an inline retry reproduces the worker's choice.
            rng_seed = random.getrandbits(32)

        if level < self.min_difficulty:
            return self._move_fn(game_state, level, ai_symbol, rng_seed)

        try:
            future = self._get_executor().submit(
                self._move_fn, game_state, level, ai_symbol, rng_seed
            )
        except RuntimeError as exc:
            self._record_fallback(
                AIFallbackError(
                    "Could not start background search",
                    original_error=exc,
                    fallback_method="inline",
                    context={"level": level},
                )
            )
            self._discard_executor()
            return self._move_fn(game_state, level, ai_symbol, rng_seed)

        try:
            return future.result(timeout=self.timeout_seconds)
        except FutureTimeoutError:
            self._record_fallback(
                AITimeoutError(
                    "Background search timed out",
                    timeout_seconds=self.timeout_seconds,
                    context={"level": level},
                )
            )
            self._discard_executor()
        except Exception as exc:
            self._record_fallback(
                AIFallbackError(
                    "Background search failed",
                    original_error=exc,
                    fallback_method="inline",
                    context={"level": level},
                )
            )
        return self._move_fn(game_state, level, ai_symbol, rng_seed)

    def _record_fallback(self, error: UTTTError) -> None:
        self.fallback_count += 1
        self.last_error = error
        logger.warning(f"{error}; computing move inline")

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def __enter__(self) -> BackgroundMoveSelector:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=False)
