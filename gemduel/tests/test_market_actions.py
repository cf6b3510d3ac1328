"""
Tests for market handlers.

Tests:
- Buying from the market and the reserve
- Card abilities after a purchase
- Joker colour selection
- Reserving (with and without gold) and Puppet Master discards
"""

import pytest

from ..engine_core.action import Action, ActionType
from ..engine_core.state import Ability, GamePhase

SLOT = {"level": 1, "idx": 0}


def _decks(**levels):
    decks = {1: [], 2: [], 3: []}
    for key, cards in levels.items():
        decks[int(key[1:])] = list(cards)
    return decks


class TestBuyCard:
    """Tests for BUY_CARD from the market."""

    def test_buy_pays_and_refills(self, make_state, card_factory, dispatch):
        card = card_factory("c1", cost={"blue": 2, "red": 1}, points=1, bonus_color="green")
        replacement = card_factory("c2")
        state = make_state(
            inventories={"p1": {"blue": 2, "red": 1}},
            market={1: [card]},
            decks=_decks(l1=[replacement]),
        )
        result = dispatch(state, Action.buy_card("c1", market_info=SLOT))

        assert result.player_tableau["p1"] == [card]
        assert result.market[1][0] == replacement
        assert result.decks[1] == []
        assert result.inventories["p1"]["blue"] == 0
        assert sorted(g.color for g in result.bag) == ["blue", "blue", "red"]
        assert result.turn == "p2"

    def test_empty_deck_leaves_slot_empty(self, make_state, card_factory, dispatch):
        card = card_factory("c1")
        state = make_state(market={1: [card]})
        result = dispatch(state, Action.buy_card("c1", market_info=SLOT))
        assert result.market[1][0] is None

    def test_unaffordable(self, make_state, card_factory, dispatch):
        card = card_factory("c1", cost={"blue": 2})
        state = make_state(inventories={"p1": {"blue": 1}}, market={1: [card]})
        result = dispatch(state, Action.buy_card("c1", market_info=SLOT))
        assert result.toast_message == "Cannot afford this card!"
        assert result.market[1][0] == card
        assert result.turn == "p1"

    def test_gold_covers_shortfall(self, make_state, card_factory, dispatch):
        card = card_factory("c1", cost={"blue": 2, "red": 1})
        state = make_state(inventories={"p1": {"blue": 1, "red": 1, "gold": 1}}, market={1: [card]})
        result = dispatch(state, Action.buy_card("c1", market_info=SLOT))
        assert result.inventories["p1"]["gold"] == 0
        assert sorted(g.color for g in result.bag) == ["blue", "gold", "red"]

    def test_tableau_bonus_discount(self, make_state, card_factory, dispatch):
        owned = card_factory("owned", bonus_color="blue", bonus_count=2)
        card = card_factory("c1", cost={"blue": 2})
        state = make_state(market={1: [card]}, player_tableau={"p1": [owned], "p2": []})
        result = dispatch(state, Action.buy_card("c1", market_info=SLOT))
        assert len(result.player_tableau["p1"]) == 2
        assert result.bag == []

    def test_unknown_card(self, make_state, dispatch):
        result = dispatch(make_state(), Action.buy_card("missing"))
        assert result.toast_message == "Card not found."

    def test_card_found_without_slot_info(self, make_state, card_factory, dispatch):
        card = card_factory("c1")
        state = make_state(market={1: [None, card]})
        result = dispatch(state, Action.buy_card("c1"))
        assert result.player_tableau["p1"] == [card]

    def test_recycler_refunds_one_gem(self, make_state, card_factory, dispatch):
        """A level 2 purchase refunds the first basic colour paid."""
        card = card_factory("c1", level=2, cost={"red": 3, "pearl": 1})
        state = make_state(
            inventories={"p1": {"red": 5, "pearl": 1}},
            market={2: [card]},
            buffs={"p1": "recycler"},
        )
        result = dispatch(state, Action.buy_card("c1", market_info={"level": 2, "idx": 0}))

        assert result.inventories["p1"]["red"] == 3
        assert result.inventories["p1"]["pearl"] == 0
        assert result.extra_allocation["p1"]["red"] == 1
        assert sorted(g.color for g in result.bag) == ["pearl", "red", "red"]
        assert result.toast_message == "Recycled 1 red!"

    def test_minimalist_doubles_early_bonus(self, make_state, card_factory, dispatch):
        card = card_factory("c1", bonus_color="white")
        state = make_state(market={1: [card]}, buffs={"p1": "minimalist"})
        result = dispatch(state, Action.buy_card("c1", market_info=SLOT))
        assert result.player_tableau["p1"][0].bonus_count == 2

    def test_bounty_hunter_crown_bonus(self, make_state, card_factory, dispatch):
        card = card_factory("c1", crowns=1)
        state = make_state(market={1: [card]}, buffs={"p1": "bounty_hunter"})
        action = Action.buy_card("c1", market_info=SLOT, randoms={"bounty_hunter_color": "black"})
        result = dispatch(state, action)
        assert result.inventories["p1"]["black"] == 1
        assert result.extra_allocation["p1"]["black"] == 1


class TestPurchaseAbilities:
    """Tests for abilities resolved after a purchase."""

    def _buy(self, make_state, card_factory, dispatch, abilities, bonus_color="blue", **kwargs):
        card = card_factory("c1", abilities=tuple(abilities), bonus_color=bonus_color)
        state = make_state(market={1: [card]}, **kwargs)
        return dispatch(state, Action.buy_card("c1", market_info=SLOT))

    def test_win_check_precedes_abilities(self, make_state, card_factory, dispatch):
        """Reaching 20 points ends the game before STEAL can open."""
        card = card_factory("c1", points=2, abilities=(Ability.STEAL,))
        state = make_state(
            market={1: [card]},
            inventories={"p2": {"green": 1}},
            extra_points={"p1": 18, "p2": 0},
        )
        result = dispatch(state, Action.buy_card("c1", market_info=SLOT))

        assert result.winner == "p1"
        assert result.phase == GamePhase.IDLE
        assert result.effective_phase == GamePhase.GAME_OVER
        assert result.next_player_after_royal is None

        after = dispatch(result, Action.take_gems([(0, 0)]))
        assert after.toast_message == "The game is over."

    def test_again_keeps_turn(self, make_state, card_factory, dispatch):
        result = self._buy(make_state, card_factory, dispatch, [Ability.AGAIN])
        assert result.turn == "p1"
        assert result.player_turn_counts["p1"] == 1

    def test_steal_opens_interrupt(self, make_state, card_factory, dispatch):
        result = self._buy(
            make_state, card_factory, dispatch, [Ability.STEAL], inventories={"p2": {"green": 1}}
        )
        assert result.phase == GamePhase.STEAL_ACTION
        assert result.turn == "p1"
        assert result.next_player_after_royal == "p2"

        done = dispatch(result, Action.steal_gem("green"))
        assert done.inventories["p1"]["green"] == 1
        assert done.turn == "p2"

    def test_again_and_steal(self, make_state, card_factory, dispatch):
        """The extra turn survives the steal interrupt."""
        result = self._buy(
            make_state, card_factory, dispatch,
            [Ability.STEAL, Ability.AGAIN], inventories={"p2": {"green": 1}},
        )
        assert result.next_player_after_royal == "p1"
        done = dispatch(result, Action.steal_gem("green"))
        assert done.turn == "p1"
        assert done.phase == GamePhase.IDLE

    def test_steal_skipped_without_gems(self, make_state, card_factory, dispatch):
        result = self._buy(
            make_state, card_factory, dispatch, [Ability.STEAL], inventories={"p2": {"gold": 2}}
        )
        assert result.toast_message == "No stealable gem from opponent - Skill skipped"
        assert result.turn == "p2"

    def test_steal_blocked_by_pacifist(self, make_state, card_factory, dispatch):
        result = self._buy(
            make_state, card_factory, dispatch, [Ability.STEAL],
            inventories={"p2": {"green": 1}}, buffs={"p2": "pacifist"},
        )
        assert result.toast_message == "Steal blocked by Pacifist!"
        assert result.inventories["p2"]["green"] == 1
        assert result.turn == "p2"

    def test_bonus_gem_interrupt(self, make_state, card_factory, dispatch):
        result = self._buy(
            make_state, card_factory, dispatch, [Ability.BONUS_GEM],
            bonus_color="red", board={(1, 1): "red"},
        )
        assert result.phase == GamePhase.BONUS_ACTION
        assert result.bonus_gem_target == "red"

    def test_bonus_gem_skipped(self, make_state, card_factory, dispatch):
        result = self._buy(
            make_state, card_factory, dispatch, [Ability.BONUS_GEM],
            bonus_color="red", board={(1, 1): "blue"},
        )
        assert result.toast_message == "No matching gem available - Skill skipped"
        assert result.turn == "p2"

    def test_scroll_grants_privilege(self, make_state, card_factory, dispatch):
        result = self._buy(make_state, card_factory, dispatch, [Ability.SCROLL])
        assert result.privileges == {"p1": 1, "p2": 1}


class TestJokerCards:
    """Tests for the two-step joker purchase."""

    @pytest.fixture
    def joker_state(self, make_state, card_factory):
        joker = card_factory("j1", cost={"blue": 1}, points=1, bonus_color="gold")
        return make_state(inventories={"p1": {"blue": 1}}, market={1: [joker]})

    def _initiate(self):
        return Action(
            ActionType.INITIATE_BUY_JOKER,
            {"card_id": "j1", "source": "market", "market_info": SLOT},
        )

    def test_initiate_waits_for_colour(self, joker_state, dispatch):
        result = dispatch(joker_state, self._initiate())
        assert result.phase == GamePhase.SELECT_CARD_COLOR
        assert result.pending_buy["card_id"] == "j1"
        assert result.inventories["p1"]["blue"] == 1

    def test_colour_completes_purchase(self, joker_state, dispatch):
        result = dispatch(
            joker_state,
            self._initiate(),
            Action.buy_card("j1", market_info=SLOT, bonus_color="red"),
        )
        assert result.player_tableau["p1"][0].bonus_color == "red"
        assert result.pending_buy is None
        assert result.turn == "p2"

    def test_colour_required(self, joker_state, dispatch):
        result = dispatch(joker_state, self._initiate(), Action.buy_card("j1", market_info=SLOT))
        assert result.toast_message == "Choose a colour for this card."
        assert result.phase == GamePhase.SELECT_CARD_COLOR

    def test_winning_joker_auto_buys(self, joker_state, dispatch):
        """When any colour wins, the best one is chosen without asking."""
        joker_state.extra_points["p1"] = 19
        result = dispatch(joker_state, self._initiate())
        assert result.winner == "p1"
        assert result.player_tableau["p1"][0].bonus_color == "blue"

    def test_not_a_joker(self, make_state, card_factory, dispatch):
        state = make_state(market={1: [card_factory("c1")]})
        result = dispatch(
            state, Action(ActionType.INITIATE_BUY_JOKER, {"card_id": "c1", "market_info": SLOT})
        )
        assert result.toast_message == "Only joker cards need a colour."


class TestReserve:
    """Tests for reserving cards."""

    def _initiate(self, card_id="c1"):
        return Action(ActionType.INITIATE_RESERVE, {"card_id": card_id, **SLOT})

    def test_reserve_without_gold_commits(self, make_state, card_factory, dispatch):
        card = card_factory("c1")
        state = make_state(market={1: [card]})
        result = dispatch(state, self._initiate())
        assert result.player_reserved["p1"] == [card]
        assert result.market[1][0] is None
        assert result.turn == "p2"

    def test_reserve_with_gold(self, make_state, card_factory, dispatch):
        card = card_factory("c1")
        state = make_state(market={1: [card]}, board={(0, 0): "gold"})
        waiting = dispatch(state, self._initiate())
        assert waiting.phase == GamePhase.RESERVE_WAITING_GEM
        assert waiting.player_reserved["p1"] == []

        result = dispatch(waiting, Action(ActionType.RESERVE_CARD, {"gold_coords": {"r": 0, "c": 0}}))
        assert result.player_reserved["p1"] == [card]
        assert result.inventories["p1"]["gold"] == 1
        assert result.board[0][0] is None
        assert result.pending_reserve is None
        assert result.turn == "p2"

    def test_cancel_reserve(self, make_state, card_factory, dispatch):
        state = make_state(market={1: [card_factory("c1")]}, board={(0, 0): "gold"})
        cancel = Action.simple(ActionType.CANCEL_RESERVE)
        once = dispatch(state, self._initiate(), cancel)
        twice = dispatch(once, cancel)
        assert once.phase == GamePhase.IDLE
        assert once.pending_reserve is None
        assert twice.phase == once.phase
        assert twice.pending_reserve == once.pending_reserve

    def test_cancel_outside_reserve_keeps_phase(self, make_state, dispatch):
        state = make_state(phase=GamePhase.STEAL_ACTION)
        result = dispatch(state, Action.simple(ActionType.CANCEL_RESERVE))
        assert result.phase == GamePhase.STEAL_ACTION

    def test_reserve_limit(self, make_state, card_factory, dispatch):
        held = [card_factory(f"r{i}") for i in range(3)]
        state = make_state(market={1: [card_factory("c1")]}, player_reserved={"p1": held, "p2": []})
        result = dispatch(state, self._initiate())
        assert result.toast_message == "Reserve limit reached!"

    def test_reserve_from_deck(self, make_state, card_factory, dispatch):
        bottom, top = card_factory("d1"), card_factory("d2")
        state = make_state(decks=_decks(l1=[bottom, top]))
        result = dispatch(state, Action(ActionType.INITIATE_RESERVE_DECK, {"level": 1}))
        assert result.player_reserved["p1"] == [top]
        assert result.decks[1] == [bottom]

    def test_reserve_empty_deck(self, make_state, dispatch):
        result = dispatch(make_state(), Action(ActionType.INITIATE_RESERVE_DECK, {"level": 2}))
        assert result.toast_message == "Deck is empty."
        assert result.turn == "p1"

    def test_nimble_fingers(self, make_state, card_factory, dispatch):
        state = make_state(market={1: [card_factory("c1")]}, buffs={"p1": "nimble_fingers"})
        action = self._initiate()
        action.payload["randoms"] = {"nimble_color": "green"}
        result = dispatch(state, action)
        assert result.inventories["p1"]["green"] == 1
        assert result.toast_message == "Nimble Fingers: +1 green!"

    def test_patient_investor_first_reserve_only(self, make_state, card_factory, dispatch):
        state = make_state(
            market={1: [card_factory("c1"), card_factory("c2")]},
            buffs={"p1": "patient_investor"},
        )
        first = dispatch(state, self._initiate())
        assert first.inventories["p1"]["gold"] == 1
        first.turn = "p1"
        second = dispatch(first, Action(ActionType.INITIATE_RESERVE, {"card_id": "c2", "level": 1, "idx": 1}))
        assert second.inventories["p1"]["gold"] == 1


class TestReservedCards:
    """Tests for buying and discarding reserved cards."""

    def test_buy_reserved_with_down_payment(self, make_state, card_factory, dispatch):
        card = card_factory("c1", cost={"blue": 2})
        state = make_state(
            inventories={"p1": {"blue": 1}},
            player_reserved={"p1": [card], "p2": []},
            buffs={"p1": "down_payment"},
        )
        result = dispatch(state, Action.buy_card("c1", source="reserved"))
        assert result.player_reserved["p1"] == []
        assert result.player_tableau["p1"] == [card]
        assert result.inventories["p1"]["blue"] == 0

    def test_speculator_bonus(self, make_state, card_factory, dispatch):
        card = card_factory("c1")
        state = make_state(player_reserved={"p1": [card], "p2": []}, buffs={"p1": "speculator"})
        action = Action.buy_card("c1", source="reserved", randoms={"speculator_colors": ["red", "white"]})
        result = dispatch(state, action)
        assert result.inventories["p1"]["red"] == 1
        assert result.inventories["p1"]["white"] == 1

    def test_puppet_master_discard(self, make_state, card_factory, dispatch):
        card, other = card_factory("c1"), card_factory("d1")
        state = make_state(
            player_reserved={"p1": [card], "p2": []},
            decks=_decks(l1=[other]),
            buffs={"p1": "puppet_master"},
        )
        action = Action(ActionType.DISCARD_RESERVED, {"card_id": "c1", "randoms": {"gem_color": "white"}})
        result = dispatch(state, action)
        assert result.player_reserved["p1"] == []
        assert result.decks[1] == [card, other]
        assert result.inventories["p1"]["white"] == 1
        assert result.turn == "p1"

    def test_discard_reserved_requires_buff(self, make_state, card_factory, dispatch):
        state = make_state(player_reserved={"p1": [card_factory("c1")], "p2": []})
        result = dispatch(state, Action(ActionType.DISCARD_RESERVED, {"card_id": "c1"}))
        assert result.toast_message == "You cannot discard reserved cards."
