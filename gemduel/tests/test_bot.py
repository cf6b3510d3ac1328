"""
Tests for bot action selection and legality.

Tests:
- Bots select legal actions
- Random outcomes are resolved before dispatch
- The evaluator prefers winning states
"""

import pytest

from ..bots import BotDecision, FirstLegalPolicy, GreedyPolicy, RandomPolicy
from ..bots.evaluator import EvaluationWeights, HeuristicEvaluator
from ..engine_core.action import Action, ActionType
from ..engine_core.action_generator import legal_actions


def same_move(a, b):
    """Equal action type and payload, ignoring the resolved randoms."""
    strip = lambda p: {k: v for k, v in p.items() if k not in ("randoms", "random_color", "p2_draft_pool_indices")}
    return a.action_type == b.action_type and strip(a.payload) == strip(b.payload)


class TestBotActionLegality:
    """Tests that bots only select legal actions."""

    @pytest.mark.parametrize("policy", [RandomPolicy(seed=1), FirstLegalPolicy(), GreedyPolicy(seed=1)])
    def test_selects_legal_action(self, started_state, policy):
        legal = legal_actions(started_state)
        decision = policy.select_action(started_state, legal)
        assert isinstance(decision, BotDecision)
        assert any(same_move(decision.action, a) for a in legal)

    def test_random_bot_many_picks(self, started_state):
        bot = RandomPolicy(seed=42)
        legal = legal_actions(started_state)
        for _ in range(10):
            assert any(same_move(bot.select_action(started_state, legal).action, a) for a in legal)

    @pytest.mark.parametrize("policy", [RandomPolicy(), FirstLegalPolicy(), GreedyPolicy()])
    def test_no_legal_actions(self, started_state, policy):
        with pytest.raises(ValueError):
            policy.select_action(started_state, [])

    def test_randoms_resolved(self, make_state):
        state = make_state(bag=["red"])
        decision = FirstLegalPolicy(seed=3).select_action(state, [Action.replenish()])
        randoms = decision.action.payload["randoms"]
        assert {"extortion_color", "expansion_color", "gem_color"} <= set(randoms)

    def test_seeded_bots_repeat(self, started_state):
        legal = legal_actions(started_state)
        a = RandomPolicy(seed=9).select_action(started_state, legal).action
        b = RandomPolicy(seed=9).select_action(started_state, legal).action
        assert a == b


class TestGreedyPolicy:
    """Tests for the one-ply greedy bot."""

    def test_takes_winning_purchase(self, make_state, card_factory):
        winner = card_factory("win", points=2)
        filler = card_factory("filler")
        state = make_state(market={1: [filler, winner]}, extra_points={"p1": 18, "p2": 0})
        legal = [
            Action.buy_card("filler", market_info={"level": 1, "idx": 0}),
            Action.buy_card("win", market_info={"level": 1, "idx": 1}),
        ]
        decision = GreedyPolicy(seed=0).select_action(state, legal)
        assert decision.action.payload["card_id"] == "win"
        assert decision.best_score > 500

    def test_prefers_more_gems(self, make_state):
        state = make_state(board={(0, 0): "blue", (0, 1): "red"})
        legal = [Action.take_gems([(0, 0)]), Action.take_gems([(0, 0), (0, 1)])]
        decision = GreedyPolicy(seed=0).select_action(state, legal)
        assert len(decision.action.payload["coords"]) == 2


class TestEvaluator:
    """Tests for the heuristic evaluator."""

    def test_winner_dominates(self, make_state):
        evaluator = HeuristicEvaluator()
        won = make_state(winner="p1")
        assert evaluator.evaluate(won, "p1").total_score > 900
        assert evaluator.evaluate(won, "p2").total_score < -900

    def test_symmetric_start(self, started_state):
        evaluation = HeuristicEvaluator().evaluate(started_state, "p1")
        assert set(evaluation.player_scores) == {"p1", "p2"}
        assert "relative_score" in evaluation.feature_breakdown

    def test_weights_change_score(self, make_state):
        state = make_state(inventories={"p1": {"gold": 2}})
        low = HeuristicEvaluator(EvaluationWeights(gold_value=1.0)).evaluate(state, "p1")
        high = HeuristicEvaluator(EvaluationWeights(gold_value=5.0)).evaluate(state, "p1")
        assert high.total_score > low.total_score


class TestLegalActions:
    """Tests for the action generator."""

    def test_idle_contains_main_actions(self, started_state):
        types = {a.action_type for a in legal_actions(started_state)}
        assert ActionType.TAKE_GEMS in types
        assert ActionType.INITIATE_RESERVE in types
        assert ActionType.INITIATE_RESERVE_DECK in types

    def test_none_after_winner(self, make_state):
        assert legal_actions(make_state(winner="p2")) == []
        assert legal_actions(None) == []

    def test_specialist_limits_runs(self, make_state):
        state = make_state(board={(0, 0): "blue", (0, 1): "blue", (0, 2): "blue"}, buffs={"p1": "specialist"})
        takes = [a for a in legal_actions(state) if a.action_type == ActionType.TAKE_GEMS]
        assert max(len(a.payload["coords"]) for a in takes) == 2

    def test_every_take_is_accepted(self, started_state):
        from ..engine_core.reducer import apply_action

        for action in legal_actions(started_state):
            if action.action_type != ActionType.TAKE_GEMS:
                continue
            result = apply_action(started_state, action)
            assert result.toast_message is None, action.payload
