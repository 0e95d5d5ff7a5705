"""Queue and wildcard sequencing for the turn-order state machine.

After every accepted move the engine asks :func:`resolve_next_directive`
where the next player must play. The answer is a :class:`TurnDirective`:
either a single queue-designated board or a wildcard (any playable board).

Rules, in order:

1. A wildcard move that completes its board chains the wildcard. The queue
   pointer stays where it is.
2. A wildcard move that leaves its board open ends the wildcard. The queue
   resumes at the current pointer.
3. A queue-governed move consumes one slot. If it completed its board the
   next player receives a wildcard.
4. Otherwise the next target is the board at the advanced pointer.

Candidate targets from cases 2 and 4 are skipped forward while the board
they name is unplayable. Running off the end of the queue grants a wildcard.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .models import QUEUE_LENGTH


class DirectiveKind(str, Enum):
    """Why the next mover is constrained the way they are."""
    QUEUE = "queue"
    WILDCARD = "wildcard"
    CHAINED_WILDCARD = "chained_wildcard"
    QUEUE_EXHAUSTED = "queue_exhausted"


@dataclass(frozen=True)
class TurnDirective:
    """Where the next mover may play.

    Exactly one of ``has_wildcard`` / ``target_board`` is meaningful:
    ``target_board`` is ``None`` whenever ``has_wildcard`` is true.
    """
    queue_position: int
    has_wildcard: bool
    target_board: int | None
    kind: DirectiveKind

    @classmethod
    def wildcard(cls, queue_position: int, kind: DirectiveKind) -> TurnDirective:
        return cls(queue_position, True, None, kind)


def queue_target(master_queue: Sequence[int], queue_position: int) -> int | None:
    """Board named at ``queue_position``, or ``None`` once the queue is spent."""
    if queue_position >= QUEUE_LENGTH:
        return None
    return master_queue[queue_position]


def resolve_next_directive(
    master_queue: Sequence[int],
    queue_position: int,
    was_wildcard: bool,
    board_completed: bool,
    playable: Sequence[bool],
) -> TurnDirective:
    """Resolve the constraint for the player after the one who just moved.

    Args:
        master_queue: The game's 81-slot board queue.
        queue_position: Pointer before the move was applied.
        was_wildcard: Whether the move just made was a wildcard move.
        board_completed: Whether the move won or filled its sub-board.
        playable: Per-board playability *after* the move.

    Returns:
        The directive for the next mover.
    """
    position = queue_position
    if was_wildcard:
        if board_completed:
            return TurnDirective.wildcard(position, DirectiveKind.CHAINED_WILDCARD)
    else:
        position = min(position + 1, QUEUE_LENGTH)
        if board_completed:
            return TurnDirective.wildcard(position, DirectiveKind.WILDCARD)

    target = queue_target(master_queue, position)
    while target is not None and not playable[target]:
        position += 1
        target = queue_target(master_queue, position)

    if target is None:
        return TurnDirective.wildcard(position, DirectiveKind.QUEUE_EXHAUSTED)
    return TurnDirective(position, False, target, DirectiveKind.QUEUE)
