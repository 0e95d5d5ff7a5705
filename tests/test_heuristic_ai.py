"""Static evaluation, one-ply play and the tiered rule player."""

from __future__ import annotations

import logging

import pytest

from uttt.ai.heuristic_ai import DEPTH_BONUS, WIN_SCORE, HeuristicAI, TieredAI
from uttt.ai.heuristic_weights import (
    BASE_V1_BALANCED_WEIGHTS,
    HEURISTIC_WEIGHT_KEYS,
    HEURISTIC_WEIGHT_PROFILES,
    get_weights,
)
from uttt.models import DRAW, AIConfig, Move
from tests.helpers import make_state

TEST_TIMEOUT_SECONDS = 30


def _ai(symbol: str = "X", **config) -> HeuristicAI:
    return HeuristicAI(symbol, AIConfig(difficulty=4, rng_seed=1, **config))


class TestEvaluation:

    def test_empty_position_is_neutral(self, initial_state):
        assert _ai("X").evaluate_position(initial_state) == 0.0

    def test_perspective_flips_sign(self):
        state = make_state(boards={4: "....X...."}, current_player_index=1)
        assert _ai("X").evaluate_position(state) > 0
        assert _ai("O").evaluate_position(state) < 0

    @pytest.mark.parametrize("outcome, expected", [("X", WIN_SCORE), ("O", -WIN_SCORE), (DRAW, 0.0)])
    def test_terminal_scores(self, outcome, expected):
        state = make_state(game_over=outcome)
        assert _ai("X").evaluate_position(state) == expected

    def test_faster_wins_score_higher(self):
        state = make_state(game_over="X")
        ai = _ai("X")
        assert ai.evaluate_position(state, depth_remaining=3) == WIN_SCORE + 3 * DEPTH_BONUS
        assert ai.evaluate_position(state, depth_remaining=3) > ai.evaluate_position(state)

    def test_slower_losses_score_higher(self):
        state = make_state(game_over="O")
        ai = _ai("X")
        assert ai.evaluate_position(state, depth_remaining=0) > ai.evaluate_position(
            state, depth_remaining=2
        )

    def test_won_boards_outweigh_cell_play(self):
        ai = _ai("X")
        won_center = make_state(boards={4: "XXXOO...."}, global_wins={4: "X"})
        busy_cells = make_state(boards={0: "X...X....", 1: "....X...."})
        assert ai.evaluate_position(won_center) > ai.evaluate_position(busy_cells)

    def test_drawn_board_blocks_global_line(self):
        ai = _ai("X")
        open_line = make_state(
            boards={0: "XXXOO....", 1: "XXXOO...."}, global_wins={0: "X", 1: "X"}
        )
        blocked = make_state(
            boards={0: "XXXOO....", 1: "XXXOO....", 2: "XOXXOOOXX"},
            global_wins={0: "X", 1: "X"},
        )
        assert ai.evaluate_position(blocked) < ai.evaluate_position(open_line)

    def test_wildcard_belongs_to_mover(self):
        ai = _ai("X")
        mine = make_state(queue_position=1, has_wildcard=True, current_player_index=0)
        theirs = make_state(queue_position=1, has_wildcard=True, current_player_index=1)
        assert ai.get_evaluation_breakdown(mine)["wildcard"] == ai.WEIGHT_WILDCARD
        assert ai.get_evaluation_breakdown(theirs)["wildcard"] == -ai.WEIGHT_WILDCARD

    def test_funnel_into_own_threat(self):
        ai = _ai("X")
        state = make_state(boards={0: "XX.OO...."})
        assert ai.get_evaluation_breakdown(state)["funnel"] > 0
        state = make_state(boards={0: "XX.OO...."}, current_player_index=1)
        assert ai.get_evaluation_breakdown(state)["funnel"] < 0

    def test_breakdown_sums_to_total(self):
        ai = _ai("X")
        state = make_state(
            boards={0: "X...O....", 4: "XXXOO....", 7: ".O..X...."},
            global_wins={4: "X"},
            queue_position=7,
        )
        breakdown = ai.get_evaluation_breakdown(state)
        assert set(breakdown) == {
            "global_lines",
            "global_position",
            "small_boards",
            "wildcard",
            "funnel",
            "total",
        }
        parts = sum(v for k, v in breakdown.items() if k != "total")
        assert breakdown["total"] == pytest.approx(parts)
        assert breakdown["total"] == pytest.approx(ai.evaluate_position(state))

    def test_terminal_breakdown(self):
        breakdown = _ai("O").get_evaluation_breakdown(make_state(game_over="O"))
        assert breakdown == {"terminal": WIN_SCORE, "total": WIN_SCORE}


class TestWeightProfiles:

    def test_profiles_cover_every_key(self):
        for profile in HEURISTIC_WEIGHT_PROFILES.values():
            assert set(profile) == set(HEURISTIC_WEIGHT_KEYS)

    def test_balanced_matches_class_defaults(self):
        ai = _ai()
        for name, value in BASE_V1_BALANCED_WEIGHTS.items():
            assert getattr(ai, name) == pytest.approx(value)

    def test_profile_applies_per_instance(self):
        ai = _ai(heuristic_profile_id="v1-aggressive")
        assert ai.WEIGHT_SMALL_TWO == pytest.approx(120.0)
        assert ai.OPPONENT_PENALTY_FACTOR == pytest.approx(0.75)
        assert HeuristicAI.WEIGHT_SMALL_TWO == 100.0

    def test_unknown_profile_keeps_defaults(self, caplog):
        with caplog.at_level(logging.WARNING, logger="uttt.ai.heuristic_ai"):
            ai = _ai(heuristic_profile_id="nope")
        assert ai.WEIGHT_SMALL_TWO == 100.0
        assert "Unknown heuristic profile" in caplog.text

    def test_get_weights_unknown_is_empty(self):
        assert get_weights("nope") == {}
        assert get_weights("v1-defensive")["WEIGHT_WILDCARD"] == pytest.approx(225.0)


class TestOnePlySelection:

    @pytest.mark.timeout(TEST_TIMEOUT_SECONDS)
    def test_takes_game_winning_move(self, one_winning_move_state):
        assert _ai("X").select_move(one_winning_move_state) == Move.from_indices(8, 2)

    @pytest.mark.timeout(TEST_TIMEOUT_SECONDS)
    def test_blocks_game_winning_threat(self, must_block_state):
        assert _ai("O").select_move(must_block_state) == Move.from_indices(8, 2)

    def test_no_moves_in_finished_game(self):
        assert _ai().select_move(make_state(game_over=DRAW)) is None

    def test_full_randomness_still_legal(self, initial_state):
        ai = _ai(randomness=1.0)
        legal = {(mv.board_index, mv.cell_index) for mv in ai.get_valid_moves(initial_state)}
        for _ in range(50):
            mv = ai.select_move(initial_state)
            assert (mv.board_index, mv.cell_index) in legal
        assert ai.move_count == 50

    def test_same_seed_same_choice(self, initial_state):
        first = _ai("X").select_move(initial_state)
        second = _ai("X").select_move(initial_state)
        assert first == second


class TestTieredAI:

    def _tiered(self, symbol: str) -> TieredAI:
        return TieredAI(symbol, AIConfig(difficulty=3, rng_seed=2))

    def test_wins_game_first(self, one_winning_move_state):
        assert self._tiered("X").select_move(one_winning_move_state) == Move.from_indices(8, 2)

    def test_blocks_game_win(self, must_block_state):
        assert self._tiered("O").select_move(must_block_state) == Move.from_indices(8, 2)

    def test_wins_board_before_blocking_board(self):
        state = make_state(boards={0: "XX.OO...."})
        assert self._tiered("X").select_move(state) == Move.from_indices(0, 2)

    def test_blocks_board_win(self):
        state = make_state(boards={0: "XX..O...."}, current_player_index=1)
        assert self._tiered("O").select_move(state) == Move.from_indices(0, 2)

    def test_falls_back_to_random_legal_move(self, initial_state):
        ai = self._tiered("X")
        mv = ai.select_move(initial_state)
        assert mv in ai.get_valid_moves(initial_state)
