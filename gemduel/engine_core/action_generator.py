"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. Bots to enumerate possible moves
2. Randomized property tests
3. Validation (is this action in legal_actions?)

Design: Generates Action objects, not just action types.
Random outcomes are left out of payloads; callers that want them fill in
"randoms" before dispatching.
"""

from __future__ import annotations
from dataclasses import dataclass

from .action import Action, ActionType
from .constants import BASIC_COLORS, GOLD, RESERVE_LIMIT, opponent_of
from .modifiers import has_active, passive
from .state import GamePhase, GameState
from .transaction import calculate_transaction

# Line directions for gem selections: row, column and both diagonals.
_DIRECTIONS = ((0, 1), (1, 0), (1, 1), (1, -1))


@dataclass
class ActionGenerator:
    """
    Generates legal actions for the current game state.

    Actions are generated for state.turn; turn ownership is enforced
    by the network authority layer, not here.
    """
    def generate(self, state: GameState | None) -> list[Action]:
        """
        Generate all legal actions for the current player.

        Returns a list of fully-specified Action objects.
        """
        if state is None or state.winner is not None:
            return []

        phase_generators = {
            GamePhase.DRAFT_PHASE: self._generate_draft_actions,
            GamePhase.IDLE: self._generate_idle_actions,
            GamePhase.RESERVE_WAITING_GEM: self._generate_reserve_commit_actions,
            GamePhase.SELECT_CARD_COLOR: self._generate_color_actions,
            GamePhase.BONUS_ACTION: self._generate_bonus_actions,
            GamePhase.STEAL_ACTION: self._generate_steal_actions,
            GamePhase.PRIVILEGE_ACTION: self._generate_privilege_actions,
            GamePhase.DISCARD_EXCESS_GEMS: self._generate_discard_actions,
            GamePhase.SELECT_ROYAL: self._generate_royal_actions,
        }
        generator = phase_generators.get(state.phase)
        return generator(state) if generator else []

    def _generate_draft_actions(self, state: GameState) -> list[Action]:
        pool = state.draft_pool if state.turn == "p1" else state.p2_draft_pool
        return [Action.select_buff(buff_id) for buff_id in pool]

    def _generate_idle_actions(self, state: GameState) -> list[Action]:
        player = state.turn
        actions = self._generate_take_actions(state, player)
        actions.extend(self._generate_buy_actions(state, player))
        actions.extend(self._generate_reserve_actions(state, player))

        if state.extra_privileges[player] > 0 or state.privileges[player] > 0:
            if self._non_gold_cells(state):
                actions.append(Action.simple(ActionType.ACTIVATE_PRIVILEGE))

        if state.bag and any(gem is None for row in state.board for gem in row):
            actions.append(Action.replenish())

        if has_active(state, player, "discard_reserved"):
            for card in state.player_reserved[player]:
                actions.append(Action(ActionType.DISCARD_RESERVED, {"card_id": card.id}))

        return actions

    def _non_gold_cells(self, state: GameState) -> list[tuple[int, int]]:
        return [
            (r, c)
            for r, row in enumerate(state.board)
            for c, gem in enumerate(row)
            if gem is not None and gem.color != GOLD
        ]

    def _generate_take_actions(self, state: GameState, player: str) -> list[Action]:
        """Every straight, contiguous run of 1-3 non-gold gems."""
        takeable = set(self._non_gold_cells(state))
        max_len = 2 if passive(state, player, "no_take3") else 3
        seen: set[tuple] = set()
        actions = []
        for r, c in sorted(takeable):
            for dr, dc in _DIRECTIONS:
                run = []
                for step in range(max_len):
                    cell = (r + dr * step, c + dc * step)
                    if cell not in takeable:
                        break
                    run.append(cell)
                    key = tuple(sorted(run))
                    if key not in seen:
                        seen.add(key)
                        actions.append(Action.take_gems(list(run)))
        return actions

    def _affordable(self, state: GameState, player: str, card, reserved: bool) -> bool:
        return calculate_transaction(
            card,
            state.inventories[player],
            state.player_tableau[player],
            state.player_buffs[player],
            is_reserved=reserved,
        ).affordable

    def _buy_action(self, card, source: str, info: dict | None) -> Action:
        if card.is_joker:
            payload = {"card_id": card.id, "source": source}
            if info is not None:
                payload["market_info"] = info
            return Action(ActionType.INITIATE_BUY_JOKER, payload)
        return Action.buy_card(card.id, source=source, market_info=info)

    def _market_cards(self, state: GameState, player: str):
        for level, slots in state.market.items():
            for idx, card in enumerate(slots):
                if card is not None:
                    yield card, {"level": level, "idx": idx}
        if passive(state, player, "extra_l3"):
            deck = state.decks.get(3, [])
            for extra_idx in (1, 2):
                target = len(deck) - (extra_idx + 1)
                if target >= 0:
                    yield deck[target], {"level": 3, "is_extra": True, "extra_idx": extra_idx}

    def _generate_buy_actions(self, state: GameState, player: str) -> list[Action]:
        actions = []
        for card, info in self._market_cards(state, player):
            if self._affordable(state, player, card, reserved=False):
                actions.append(self._buy_action(card, "market", info))
        for card in state.player_reserved[player]:
            if self._affordable(state, player, card, reserved=True):
                actions.append(self._buy_action(card, "reserved", None))
        return actions

    def _generate_reserve_actions(self, state: GameState, player: str) -> list[Action]:
        if len(state.player_reserved[player]) >= RESERVE_LIMIT:
            return []
        actions = []
        for card, info in self._market_cards(state, player):
            actions.append(Action(ActionType.INITIATE_RESERVE, {"card_id": card.id, **info}))
        for level, deck in state.decks.items():
            if deck:
                actions.append(Action(ActionType.INITIATE_RESERVE_DECK, {"level": level}))
        return actions

    def _generate_reserve_commit_actions(self, state: GameState) -> list[Action]:
        pending = state.pending_reserve or {}
        action_type = ActionType.RESERVE_DECK if pending.get("is_deck") else ActionType.RESERVE_CARD
        actions = [Action.simple(ActionType.CANCEL_RESERVE)]
        for r, row in enumerate(state.board):
            for c, gem in enumerate(row):
                if gem is not None and gem.color == GOLD:
                    actions.append(Action(action_type, {"gold_coords": {"r": r, "c": c}}))
        return actions

    def _generate_color_actions(self, state: GameState) -> list[Action]:
        pending = state.pending_buy or {}
        return [
            Action.buy_card(
                pending.get("card_id"),
                source=pending.get("source", "market"),
                market_info=pending.get("market_info"),
                bonus_color=color,
            )
            for color in BASIC_COLORS
        ]

    def _generate_bonus_actions(self, state: GameState) -> list[Action]:
        target = state.bonus_gem_target
        return [
            Action.take_bonus_gem(r, c)
            for r, row in enumerate(state.board)
            for c, gem in enumerate(row)
            if gem is not None and gem.color == target
        ]

    def _generate_steal_actions(self, state: GameState) -> list[Action]:
        inventory = state.inventories[opponent_of(state.turn)]
        return [
            Action.steal_gem(color)
            for color, count in inventory.items()
            if color != GOLD and count > 0
        ]

    def _generate_privilege_actions(self, state: GameState) -> list[Action]:
        actions = [Action.use_privilege(r, c) for r, c in self._non_gold_cells(state)]
        actions.append(Action.simple(ActionType.CANCEL_PRIVILEGE))
        return actions

    def _generate_discard_actions(self, state: GameState) -> list[Action]:
        inventory = state.inventories[state.turn]
        return [Action.discard_gem(color) for color, count in inventory.items() if count > 0]

    def _generate_royal_actions(self, state: GameState) -> list[Action]:
        return [Action.select_royal(royal.id) for royal in state.royal_deck]


def legal_actions(state: GameState | None) -> list[Action]:
    """
    Convenience function to get legal actions.

    Creates an ActionGenerator and generates actions.
    """
    return ActionGenerator().generate(state)


def is_legal(state: GameState, action: Action) -> bool:
    """Check if a specific action is legal (same type and payload)."""
    return any(
        a.action_type == action.action_type and a.payload == action.payload
        for a in legal_actions(state)
    )
