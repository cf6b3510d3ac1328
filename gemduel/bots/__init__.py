"""
Bots module - Automated opponents.

Provides:
- BotPolicy: Interface for bot decision-making
- RandomPolicy / FirstLegalPolicy: baselines for tests
- GreedyPolicy: one-ply lookahead over HeuristicEvaluator
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy, GreedyPolicy
from .evaluator import HeuristicEvaluator, EvaluationWeights, StateEvaluation

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "GreedyPolicy",
    "HeuristicEvaluator",
    "EvaluationWeights",
    "StateEvaluation",
]
