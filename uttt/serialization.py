"""Serialization adapter between live game states and persisted records.

Records are plain JSON-compatible dicts with camelCase keys. They are only
produced and consumed at session save/load boundaries; the engine never
sees them.

Older records are upgraded on load:

- ``queuePosition`` falls back to the legacy ``sequencePosition``, then 0.
- ``hasWildcard`` defaults to false.
- ``masterQueue`` falls back to a legacy 9-slot ``masterSequence`` repeated
  nine times, then to nine copies of 0..8.

Fields that are present but malformed are rejected with
:class:`~uttt.errors.StateValidationError`; nothing structural is coerced.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .errors import StateValidationError
from .models import (
    BOARD_COUNT,
    CELLS_PER_BOARD,
    DRAW,
    MAX_PLAYERS,
    MIN_PLAYERS,
    PLAYER_SYMBOLS,
    QUEUE_LENGTH,
    GameState,
)

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 3

_IDENTITY_BLOCK: tuple[int, ...] = tuple(range(BOARD_COUNT))


def serialize_state(state: GameState) -> dict[str, Any]:
    """Convert ``state`` into a persistence-neutral record."""
    return {
        "schemaVersion": SCHEMA_VERSION,
        "boards": [list(board) for board in state.boards],
        "globalWins": list(state.global_wins),
        "nextBoard": state.next_board,
        "numPlayers": state.num_players,
        "currentPlayerIndex": state.current_player_index,
        "gameOver": state.game_over,
        "queuePosition": state.queue_position,
        "hasWildcard": state.has_wildcard,
        "masterQueue": list(state.master_queue),
    }


def state_to_json(state: GameState) -> str:
    return json.dumps(serialize_state(state), ensure_ascii=False)


def state_from_json(payload: str) -> GameState:
    return deserialize_state(payload)


def deserialize_state(record: Mapping[str, Any] | str) -> GameState:
    """Rebuild a :class:`GameState` from a persisted record.

    Args:
        record: A record mapping, or its JSON text.

    Raises:
        StateValidationError: If the record is malformed.
    """
    if isinstance(record, str):
        try:
            record = json.loads(record)
        except json.JSONDecodeError as exc:
            raise StateValidationError(f"Saved game is not valid JSON: {exc.msg}") from exc
    if not isinstance(record, Mapping):
        raise StateValidationError(
            f"Saved game must be an object, got {type(record).__name__}"
        )

    boards = _read_boards(record)
    global_wins = _read_cells(_require(record, "globalWins"), "globalWins", BOARD_COUNT)

    num_players = _read_int(_require(record, "numPlayers"), "numPlayers")
    if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
        raise StateValidationError(
            f"numPlayers must be between {MIN_PLAYERS} and {MAX_PLAYERS}",
            field="numPlayers",
            context={"value": num_players},
        )

    current_player_index = _read_int(
        _require(record, "currentPlayerIndex"), "currentPlayerIndex"
    )
    if not 0 <= current_player_index < num_players:
        raise StateValidationError(
            "currentPlayerIndex out of range",
            field="currentPlayerIndex",
            context={"value": current_player_index, "num_players": num_players},
        )

    game_over = record.get("gameOver")
    if game_over is not None and game_over != DRAW and game_over not in PLAYER_SYMBOLS:
        raise StateValidationError(
            "gameOver must be null, 'draw' or a player symbol",
            field="gameOver",
            context={"value": game_over},
        )

    next_board = record.get("nextBoard")
    if next_board is not None:
        next_board = _read_int(next_board, "nextBoard")
        if not 0 <= next_board < BOARD_COUNT:
            raise StateValidationError(
                "nextBoard must be null or a board index 0-8",
                field="nextBoard",
                context={"value": next_board},
            )

    queue_position = _read_queue_position(record)
    has_wildcard = record.get("hasWildcard")
    if has_wildcard is None:
        has_wildcard = False
    elif not isinstance(has_wildcard, bool):
        raise StateValidationError("hasWildcard must be a boolean", field="hasWildcard")
    master_queue = _read_master_queue(record)

    try:
        return GameState(
            boards=boards,
            global_wins=global_wins,
            num_players=num_players,
            current_player_index=current_player_index,
            master_queue=master_queue,
            queue_position=queue_position,
            has_wildcard=has_wildcard,
            game_over=game_over,
        )
    except PydanticValidationError as exc:
        raise StateValidationError(
            "Saved game failed state validation",
            context={"errors": exc.error_count(), "detail": str(exc)},
        ) from exc


def _require(record: Mapping[str, Any], key: str) -> Any:
    if key not in record:
        raise StateValidationError(f"Saved game is missing '{key}'", field=key)
    return record[key]


def _read_int(value: Any, field: str) -> int:
    # bool is an int subclass; a flag in a numeric slot is corruption
    if isinstance(value, bool) or not isinstance(value, int):
        raise StateValidationError(
            f"{field} must be an integer",
            field=field,
            context={"value": value},
        )
    return value


def _read_cells(value: Any, field: str, expected: int) -> tuple[str | None, ...]:
    if not isinstance(value, (list, tuple)) or len(value) != expected:
        raise StateValidationError(
            f"{field} must be a list of {expected} entries",
            field=field,
        )
    for cell in value:
        if cell is not None and cell not in PLAYER_SYMBOLS:
            raise StateValidationError(
                f"{field} contains an unknown symbol",
                field=field,
                context={"value": cell},
            )
    return tuple(value)


def _read_boards(record: Mapping[str, Any]) -> tuple[tuple[str | None, ...], ...]:
    raw = _require(record, "boards")
    if not isinstance(raw, (list, tuple)) or len(raw) != BOARD_COUNT:
        raise StateValidationError(
            f"boards must be a list of {BOARD_COUNT} sub-boards", field="boards"
        )
    return tuple(
        _read_cells(board, f"boards[{index}]", CELLS_PER_BOARD)
        for index, board in enumerate(raw)
    )


def _read_queue_position(record: Mapping[str, Any]) -> int:
    # null counts as missing
    if record.get("queuePosition") is not None:
        field = "queuePosition"
    elif record.get("sequencePosition") is not None:
        field = "sequencePosition"
        logger.debug("Upgrading legacy sequencePosition to queuePosition")
    else:
        return 0
    position = _read_int(record[field], field)
    if not 0 <= position <= QUEUE_LENGTH:
        raise StateValidationError(
            f"{field} must be between 0 and {QUEUE_LENGTH}",
            field=field,
            context={"value": position},
        )
    return position


def _read_queue_slots(value: Any, field: str, expected: int) -> tuple[int, ...]:
    if not isinstance(value, (list, tuple)) or len(value) != expected:
        raise StateValidationError(
            f"{field} must be a list of {expected} board indices",
            field=field,
        )
    slots = tuple(_read_int(slot, field) for slot in value)
    if any(not 0 <= slot < BOARD_COUNT for slot in slots):
        raise StateValidationError(
            f"{field} entries must be board indices 0-8", field=field
        )
    return slots


def _read_master_queue(record: Mapping[str, Any]) -> tuple[int, ...]:
    if record.get("masterQueue") is not None:
        return _read_queue_slots(record["masterQueue"], "masterQueue", QUEUE_LENGTH)
    if record.get("masterSequence") is not None:
        logger.debug("Expanding legacy 9-slot masterSequence to an 81-slot queue")
        block = _read_queue_slots(record["masterSequence"], "masterSequence", BOARD_COUNT)
        return block * BOARD_COUNT
    logger.debug("Saved game has no queue; using the identity queue")
    return _IDENTITY_BLOCK * BOARD_COUNT
