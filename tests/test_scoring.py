"""Point scoring for finished single-player games."""

import pytest

from uttt.models import DRAW
from uttt.scoring import (
    GameResult,
    ScoreParams,
    calculate_score,
    count_boards,
    difficulty_multiplier,
    result_for,
)
from tests.helpers import make_state


def _params(**overrides) -> ScoreParams:
    values = dict(
        result=GameResult.WIN,
        moves=20,
        elapsed_seconds=95.7,
        boards_won=3,
        boards_lost=1,
        difficulty=10,
    )
    values.update(overrides)
    return ScoreParams(**values)


class TestCalculateScore:

    def test_worked_example(self):
        assert calculate_score(_params()) == 26125

    def test_hell_mode_doubles(self):
        assert calculate_score(_params(hell_mode=True)) == 52250

    def test_lowest_difficulty_halves(self):
        assert calculate_score(_params(difficulty=1)) == 5225

    def test_partial_seconds_are_not_charged(self):
        assert calculate_score(_params(elapsed_seconds=95.0)) == calculate_score(
            _params(elapsed_seconds=95.99)
        )

    def test_draw_bonus(self):
        # 10000 - 3000 - 2850 + 1500 - 200 + 1000 = 6450
        assert calculate_score(_params(result=GameResult.DRAW, difficulty=1)) == 3225

    def test_never_negative(self):
        params = _params(result=GameResult.LOSS, moves=80, elapsed_seconds=900, boards_won=0)
        assert calculate_score(params) == 0

    def test_rounds_to_nearest_point(self):
        # 10000 - 150 - 30 + 500 = 10320; x (0.5 + 2/9 * 4) = 14333.33...
        params = _params(
            result=GameResult.LOSS, moves=1, elapsed_seconds=1, boards_won=1,
            boards_lost=0, difficulty=5,
        )
        assert calculate_score(params) == 14333

    @pytest.mark.parametrize("difficulty, expected", [(1, 0.5), (10, 2.5)])
    def test_multiplier_endpoints(self, difficulty, expected):
        assert difficulty_multiplier(difficulty) == pytest.approx(expected)


class TestFromState:

    def test_count_boards(self):
        state = make_state(global_wins={0: "X", 4: "X", 2: "O", 7: "△"}, num_players=3)
        assert count_boards(state, "X") == (2, 2)
        assert count_boards(state, "O") == (1, 3)

    def test_result_for(self):
        assert result_for(make_state(), "X") is None
        assert result_for(make_state(game_over="X"), "X") == GameResult.WIN
        assert result_for(make_state(game_over="X"), "O") == GameResult.LOSS
        assert result_for(make_state(game_over=DRAW), "O") == GameResult.DRAW
