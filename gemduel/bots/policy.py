"""
Bot Policy - Interface for bot decision-making.

A bot is just another action producer: it reads a state and the legal
actions and returns a decision. Every random outcome in the chosen action
is resolved by the bot before dispatch, so the engine stays deterministic.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
import random

from ..engine_core.reducer import apply_action
from ..games.gem_duel.setup import with_randoms
from .evaluator import HeuristicEvaluator

if TYPE_CHECKING:
    from ..engine_core.state import GameState
    from ..engine_core.action import Action


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The action to take (randoms resolved)
    - Explanation (for UI/debugging)
    - Confidence in the decision
    """
    action: Action
    explanation: str = ""
    confidence: float = 1.0

    # Evaluation details (for debugging)
    evaluated_actions: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects actions.
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    @abstractmethod
    def select_action(self, state: GameState, legal_actions: list[Action]) -> BotDecision:
        """
        Select an action from the legal actions.

        Args:
            state: Current game state
            legal_actions: List of legal actions to choose from

        Returns:
            BotDecision with the selected action
        """

    def resolve(self, state: GameState, action: Action) -> Action:
        return with_randoms(state, action, self.rng)

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects actions uniformly at random.

    Used for:
    - Randomized property tests
    - Baseline comparison
    """

    def select_action(self, state: GameState, legal_actions: list[Action]) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        action = self.rng.choice(legal_actions)
        return BotDecision(
            action=self.resolve(state, action),
            explanation="Selected randomly",
            confidence=1.0 / len(legal_actions),
            evaluated_actions=len(legal_actions),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first legal action.

    Used for deterministic testing.
    """

    def select_action(self, state: GameState, legal_actions: list[Action]) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        return BotDecision(
            action=self.resolve(state, legal_actions[0]),
            explanation="Selected first legal action",
            evaluated_actions=1,
        )


class GreedyPolicy(BotPolicy):
    """
    One-ply lookahead over the heuristic evaluator.

    Ties are broken by the policy's random generator.
    """

    def __init__(self, seed: int | None = None, evaluator: HeuristicEvaluator | None = None):
        super().__init__(seed)
        self.evaluator = evaluator or HeuristicEvaluator()

    def select_action(self, state: GameState, legal_actions: list[Action]) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        player = state.turn
        best: list[Action] = []
        best_score = float("-inf")
        for candidate in legal_actions:
            action = self.resolve(state, candidate)
            result = apply_action(state, action)
            if result is None:
                continue
            score = self.evaluator.evaluate(result, player).total_score
            if score > best_score:
                best, best_score = [action], score
            elif score == best_score:
                best.append(action)

        choice = self.rng.choice(best) if best else self.resolve(state, legal_actions[0])
        return BotDecision(
            action=choice,
            explanation="Best one-ply evaluation",
            evaluated_actions=len(legal_actions),
            best_score=best_score,
        )
