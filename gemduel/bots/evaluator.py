"""
Heuristic Evaluator - Scores game states for bot decision-making.

The evaluator assigns a numeric score to game states based on:
- Progress toward the win thresholds (points, crowns, best colour)
- Economy (gems held, tableau bonuses, privileges)
- Opponent progress

Weights can be adjusted to create different play styles.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..engine_core.constants import GOLD, opponent_of
from ..engine_core.modifiers import win_thresholds
from ..engine_core.selectors import bonus_counts, color_points, crown_count, player_score

if TYPE_CHECKING:
    from ..engine_core.state import GameState


@dataclass
class EvaluationWeights:
    """
    Weights for the heuristic evaluator.

    Higher values = more importance.
    """
    # Progress toward the thresholds, as fractions of the goal
    points_progress: float = 40.0
    crowns_progress: float = 25.0
    color_progress: float = 25.0

    # Economy
    gem_value: float = 1.0
    gold_value: float = 2.0
    bonus_value: float = 3.0
    privilege_value: float = 1.5

    # Opponent-related
    opponent_penalty: float = -0.8


@dataclass
class StateEvaluation:
    """
    Result of evaluating a game state.
    """
    total_score: float
    player_scores: dict[str, float] = field(default_factory=dict)
    feature_breakdown: dict[str, float] = field(default_factory=dict)


class HeuristicEvaluator:
    """
    Evaluates game states using weighted heuristics.

    Used by bots for 1-ply lookahead:
    1. Generate legal actions
    2. Apply each action to get new state
    3. Evaluate new states
    4. Select action leading to best state
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def evaluate(self, state: GameState, for_player_id: str) -> StateEvaluation:
        """
        Evaluate a game state from a player's perspective.

        Returns positive score if state is good for player,
        negative if bad.
        """
        features: dict[str, float] = {}
        opponent = opponent_of(for_player_id)
        player_scores = {
            pid: self._evaluate_player(state, pid)
            for pid in (for_player_id, opponent)
        }

        relative = player_scores[for_player_id] + self.weights.opponent_penalty * player_scores[opponent]
        features["relative_score"] = relative

        if state.winner == for_player_id:
            relative += 1000
        elif state.winner is not None:
            relative -= 1000

        return StateEvaluation(
            total_score=relative,
            player_scores=player_scores,
            feature_breakdown=features,
        )

    def _evaluate_player(self, state: GameState, player: str) -> float:
        w = self.weights
        goals = win_thresholds(state, player)
        score = w.points_progress * player_score(state, player) / goals.points
        score += w.crowns_progress * crown_count(state, player) / goals.crowns
        if goals.single_color:
            best = max(color_points(state, player).values(), default=0)
            score += w.color_progress * best / goals.single_color

        inventory = state.inventories[player]
        score += w.gem_value * sum(n for color, n in inventory.items() if color != GOLD)
        score += w.gold_value * inventory.get(GOLD, 0)
        score += w.bonus_value * sum(bonus_counts(state.player_tableau[player]).values())
        score += w.privilege_value * (state.privileges[player] + state.extra_privileges[player])
        return score
