"""Core game engine: the turn-order state machine.

The engine is a set of pure functions over immutable :class:`GameState`
values. :meth:`GameEngine.apply_move` never mutates its input; it returns a
fresh successor state, or the *same object* when the move is rejected. That
identity is the only "invalid move" signal on the normal play path, so
callers can write ``if GameEngine.apply_move(s, m) is s``.

Sub-board and global win detection both use the 8 lines of a 3x3 grid
(:data:`~uttt.models.LINES_3`). A sub-board is playable while it has no
recorded winner and at least one empty cell. Which board a player must use
is decided by the master queue and the wildcard flag; see
:mod:`uttt.turn_order` for the sequencing rules.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from .errors import ConfigurationError, InvalidMoveError
from .models import (
    BOARD_COUNT,
    CELLS_PER_BOARD,
    DRAW,
    LINES_3,
    MAX_PLAYERS,
    MIN_PLAYERS,
    Cell,
    GameState,
    Move,
    SmallBoard,
)
from .turn_order import queue_target, resolve_next_directive

logger = logging.getLogger(__name__)


# Every possible move, built once. Moves are frozen so the same instances
# are shared by every generated move list.
_ALL_MOVES: tuple[tuple[Move, ...], ...] = tuple(
    tuple(
        Move.model_construct(
            big_row=board // 3,
            big_col=board % 3,
            small_row=cell // 3,
            small_col=cell % 3,
        )
        for cell in range(CELLS_PER_BOARD)
    )
    for board in range(BOARD_COUNT)
)

_EMPTY_BOARD: SmallBoard = (None,) * CELLS_PER_BOARD


def line_winner(cells: Sequence[Cell]) -> Cell:
    """Return the symbol holding any complete line of a 3x3 grid."""
    for a, b, c in LINES_3:
        first = cells[a]
        if first is not None and first == cells[b] and first == cells[c]:
            return first
    return None


# Lines through each cell, for checks that only care about one placement.
LINES_THROUGH: tuple[tuple[tuple[int, int, int], ...], ...] = tuple(
    tuple(line for line in LINES_3 if index in line) for index in range(9)
)


def completes_line(cells: Sequence[Cell], index: int, symbol: str) -> bool:
    """Would ``symbol`` at ``index`` complete a line through that cell?

    ``cells[index]`` itself is ignored, so this works both before and after
    the placement.
    """
    for line in LINES_THROUGH[index]:
        if all(cells[i] == symbol for i in line if i != index):
            return True
    return False


def check_small_board_win(board: SmallBoard) -> Cell:
    return line_winner(board)


def check_global_win(global_wins: Sequence[Cell]) -> Cell:
    return line_winner(global_wins)


def is_small_board_full(board: SmallBoard) -> bool:
    return None not in board


def is_board_playable(board: SmallBoard, winner: Cell) -> bool:
    """A board is playable iff it is undecided and has an empty cell."""
    return winner is None and None in board


def playable_boards(state: GameState) -> list[int]:
    return [
        index
        for index in range(BOARD_COUNT)
        if is_board_playable(state.boards[index], state.global_wins[index])
    ]


def generate_master_queue(rng: random.Random | None = None) -> tuple[int, ...]:
    """Nine independently shuffled permutations of 0..8, concatenated."""
    rng = rng or random.Random()
    queue: list[int] = []
    for _ in range(BOARD_COUNT):
        block = list(range(BOARD_COUNT))
        rng.shuffle(block)
        queue.extend(block)
    return tuple(queue)


class GameEngine:
    """Turn-order rules for queued ultimate tic-tac-toe."""

    @staticmethod
    def create_initial_state(
        num_players: int = 2,
        random_start: bool = False,
        starting_player_index: int | None = None,
        rng: random.Random | None = None,
        master_queue: Sequence[int] | None = None,
    ) -> GameState:
        """Create a fresh game with empty boards and a newly shuffled queue.

        Args:
            num_players: Number of players (2-4).
            random_start: Pick the starting player at random.
            starting_player_index: Explicit starting player; wins over
                ``random_start``.
            rng: Random source for the queue and starting player.
            master_queue: Explicit 81-slot queue, mainly for tests and
                replays of a known deal.

        Raises:
            ConfigurationError: If the player count or start index is invalid.
        """
        if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
            raise ConfigurationError(
                f"num_players must be between {MIN_PLAYERS} and {MAX_PLAYERS}",
                context={"num_players": num_players},
            )
        rng = rng or random.Random()

        if starting_player_index is None:
            starting_player_index = rng.randrange(num_players) if random_start else 0
        elif not 0 <= starting_player_index < num_players:
            raise ConfigurationError(
                "starting_player_index out of range",
                context={
                    "starting_player_index": starting_player_index,
                    "num_players": num_players,
                },
            )

        queue = tuple(master_queue) if master_queue is not None else generate_master_queue(rng)

        try:
            return GameState(
                boards=(_EMPTY_BOARD,) * BOARD_COUNT,
                global_wins=(None,) * BOARD_COUNT,
                num_players=num_players,
                current_player_index=starting_player_index,
                master_queue=queue,
                queue_position=0,
                has_wildcard=False,
                game_over=None,
            )
        except ValueError as exc:
            # pydantic.ValidationError subclasses ValueError
            raise ConfigurationError(
                "invalid initial game configuration",
                context={"detail": str(exc)},
            ) from exc

    @staticmethod
    def candidate_boards(state: GameState) -> list[int]:
        """Boards the current player may place on.

        With a wildcard, every playable board. Otherwise the queue target,
        falling back to every playable board when the target is unplayable
        or the queue is exhausted.
        """
        if state.game_over is not None:
            return []
        if not state.has_wildcard:
            target = queue_target(state.master_queue, state.queue_position)
            if target is not None and is_board_playable(
                state.boards[target], state.global_wins[target]
            ):
                return [target]
        return playable_boards(state)

    @staticmethod
    def get_valid_moves(state: GameState) -> list[Move]:
        """All legal moves for the current player, in board then cell order."""
        moves: list[Move] = []
        for board_index in GameEngine.candidate_boards(state):
            board = state.boards[board_index]
            row = _ALL_MOVES[board_index]
            for cell_index in range(CELLS_PER_BOARD):
                if board[cell_index] is None:
                    moves.append(row[cell_index])
        return moves

    @staticmethod
    def get_rejection_reason(state: GameState, move: Move) -> str | None:
        """Why ``move`` is illegal in ``state``, or ``None`` if it is legal."""
        if state.game_over is not None:
            return "game_over"
        board_index = move.board_index
        if state.global_wins[board_index] is not None:
            return "board_won"
        if state.boards[board_index][move.cell_index] is not None:
            return "occupied"
        if not state.has_wildcard:
            target = queue_target(state.master_queue, state.queue_position)
            if (
                target is not None
                and target != board_index
                and is_board_playable(state.boards[target], state.global_wins[target])
            ):
                return "wrong_board"
        return None

    @staticmethod
    def is_valid_move(state: GameState, move: Move) -> bool:
        return GameEngine.get_rejection_reason(state, move) is None

    @staticmethod
    def apply_move(state: GameState, move: Move) -> GameState:
        """Apply ``move`` for the current player.

        Returns:
            The successor state, or ``state`` itself if the move is illegal.
        """
        reason = GameEngine.get_rejection_reason(state, move)
        if reason is not None:
            logger.debug(f"Rejected {move} for {state.current_player}: {reason}")
            return state
        return GameEngine._apply_unchecked(state, move)

    @staticmethod
    def apply_move_strict(state: GameState, move: Move) -> GameState:
        """Like :meth:`apply_move`, but raise on an illegal move.

        Raises:
            InvalidMoveError: If the move is rejected.
        """
        reason = GameEngine.get_rejection_reason(state, move)
        if reason is not None:
            raise InvalidMoveError(
                f"Illegal move {move} for player {state.current_player}",
                reason=reason,
                context={
                    "board": move.board_index,
                    "cell": move.cell_index,
                    "next_board": state.next_board,
                },
            )
        return GameEngine._apply_unchecked(state, move)

    @staticmethod
    def _apply_unchecked(state: GameState, move: Move) -> GameState:
        board_index = move.board_index
        symbol = state.current_player

        cells = list(state.boards[board_index])
        cells[move.cell_index] = symbol
        new_board = tuple(cells)
        boards = state.boards[:board_index] + (new_board,) + state.boards[board_index + 1:]

        global_wins = state.global_wins
        local_winner = check_small_board_win(new_board)
        if local_winner is not None:
            global_wins = (
                global_wins[:board_index] + (local_winner,) + global_wins[board_index + 1:]
            )
        board_completed = local_winner is not None or is_small_board_full(new_board)

        playable = [
            is_board_playable(boards[index], global_wins[index])
            for index in range(BOARD_COUNT)
        ]
        directive = resolve_next_directive(
            state.master_queue,
            state.queue_position,
            state.has_wildcard,
            board_completed,
            playable,
        )

        game_over = check_global_win(global_wins)
        if game_over is None and not any(playable):
            game_over = DRAW

        if game_over is not None:
            logger.debug(f"Game over after {move}: {game_over}")

        # Successors skip re-validation; every field is built from a
        # validated predecessor.
        return GameState.model_construct(
            boards=boards,
            global_wins=global_wins,
            num_players=state.num_players,
            current_player_index=(state.current_player_index + 1) % state.num_players,
            master_queue=state.master_queue,
            queue_position=directive.queue_position,
            has_wildcard=directive.has_wildcard,
            game_over=game_over,
        )
