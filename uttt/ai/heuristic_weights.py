"""Heuristic weight profiles.

This module keeps every scalar weight used by :class:`HeuristicAI` in one
place and exposes named profiles that can be selected per instance through
``AIConfig.heuristic_profile_id``.

The keys mirror the attribute names on :class:`HeuristicAI`
(``WEIGHT_SMALL_TWO``, ``WEIGHT_GLOBAL_TWO``, ...) so an instance can simply
``setattr(self, name, value)`` when applying a profile.

Scale: global-line bands sit roughly 100-1000x above sub-board bands so that
control of the 3x3 board of outcomes dominates cell-level tactics.
"""

from __future__ import annotations

from collections.abc import Mapping

HeuristicWeights = dict[str, float]


BASE_V1_BALANCED_WEIGHTS: HeuristicWeights = {
    # Sub-board lines (per open line)
    "WEIGHT_SMALL_THREE": 1_000.0,
    "WEIGHT_SMALL_TWO": 100.0,
    "WEIGHT_SMALL_ONE": 5.0,
    # Global lines (per open line of board outcomes)
    "WEIGHT_GLOBAL_THREE": 100_000.0,
    "WEIGHT_GLOBAL_TWO": 10_000.0,
    "WEIGHT_GLOBAL_ONE": 1_000.0,
    # Opponent-held lines score this fraction of the matching bonus
    "OPPONENT_PENALTY_FACTOR": 0.9,
    # Positional table multipliers
    "WEIGHT_CELL_POSITION": 1.0,
    "WEIGHT_BOARD_POSITION": 100.0,
    # Strategic adjustments
    "WEIGHT_WILDCARD": 150.0,
    "WEIGHT_FUNNEL_THREAT": 80.0,
}


HEURISTIC_WEIGHT_KEYS: list[str] = list(BASE_V1_BALANCED_WEIGHTS)


def _with_deltas(
    base: Mapping[str, float],
    *,
    scale: Mapping[str, float] | None = None,
) -> HeuristicWeights:
    """Copy ``base`` with per-key multipliers applied."""
    scale = scale or {}
    return {key: value * scale.get(key, 1.0) for key, value in base.items()}


# Aggressive: chases its own lines, cares less about blocking.
HEURISTIC_V1_AGGRESSIVE = _with_deltas(
    BASE_V1_BALANCED_WEIGHTS,
    scale={
        "WEIGHT_SMALL_TWO": 1.2,
        "WEIGHT_GLOBAL_TWO": 1.2,
        "OPPONENT_PENALTY_FACTOR": 0.75 / 0.9,
    },
)

# Defensive: weighs opponent threats almost as much as its own.
HEURISTIC_V1_DEFENSIVE = _with_deltas(
    BASE_V1_BALANCED_WEIGHTS,
    scale={
        "OPPONENT_PENALTY_FACTOR": 0.98 / 0.9,
        "WEIGHT_WILDCARD": 1.5,
    },
)


HEURISTIC_WEIGHT_PROFILES: dict[str, HeuristicWeights] = {
    "v1-balanced": BASE_V1_BALANCED_WEIGHTS,
    "v1-aggressive": HEURISTIC_V1_AGGRESSIVE,
    "v1-defensive": HEURISTIC_V1_DEFENSIVE,
}


def get_weights(profile_id: str) -> HeuristicWeights:
    """Return the weight profile for ``profile_id``.

    Unknown ids return an empty mapping, which callers treat as "no
    override" and keep the class defaults.
    """
    return HEURISTIC_WEIGHT_PROFILES.get(profile_id, {})
