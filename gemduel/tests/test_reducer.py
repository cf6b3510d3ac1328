"""
Tests for the reducer (dispatch and snapshot semantics).

Tests:
- Bootstrap actions build fresh states
- Sync actions replace the state wholesale
- Transient feedback is cleared per action
- Malformed payloads and finished games
"""

import logging

import pytest

from ..engine_core.action import Action, ActionType
from ..engine_core.codec import state_to_dict
from ..engine_core.constants import GRID_SIZE, MARKET_SLOTS
from ..engine_core.reducer import Reducer, apply_action, replay
from ..engine_core.state import GameMode, GamePhase
from ..games.gem_duel.setup import create_init_action, create_init_draft_action


class TestBootstrap:
    """Tests for INIT and INIT_DRAFT."""

    def test_init_deals_full_board(self, started_state):
        """INIT fills every cell and leaves the bag empty."""
        cells = [gem for row in started_state.board for gem in row]
        assert len(cells) == GRID_SIZE * GRID_SIZE
        assert all(gem is not None for gem in cells)
        assert started_state.bag == []

    def test_init_deals_market(self, started_state):
        """Each market row has its fixed slot count."""
        for level, slots in MARKET_SLOTS.items():
            assert len(started_state.market[level]) == slots
            assert all(card is not None for card in started_state.market[level])

    def test_init_starting_values(self, started_state):
        """p1 starts, p2 holds the first privilege, the court is full."""
        assert started_state.turn == "p1"
        assert started_state.phase == GamePhase.IDLE
        assert started_state.privileges == {"p1": 0, "p2": 1}
        assert len(started_state.royal_deck) == 4
        assert started_state.winner is None

    def test_init_ignores_existing_state(self, started_state):
        """A bootstrap action starts over regardless of the current state."""
        fresh = apply_action(started_state, create_init_action(seed=99))
        assert fresh == apply_action(None, create_init_action(seed=99))

    def test_same_seed_same_setup(self):
        """Setup payloads are a pure function of the seed."""
        a = create_init_action(seed=5)
        b = create_init_action(seed=5)
        assert a.payload == b.payload

    def test_init_draft_parks_setup(self):
        """INIT_DRAFT opens the draft and keeps the setup for later."""
        state = apply_action(None, create_init_draft_action(seed=1, buff_level=2))
        assert state.phase == GamePhase.DRAFT_PHASE
        assert state.buff_level == 2
        assert len(state.draft_pool) == 3
        assert "board" in state.pending_setup
        assert all(gem is None for row in state.board for gem in row)

    def test_gameplay_action_without_state(self):
        """Non-bootstrap actions on no state return None."""
        assert apply_action(None, Action.take_gems([(0, 0)])) is None


class TestSync:
    """Tests for FORCE_SYNC and FLATTEN."""

    def test_force_sync_replaces_state(self, started_state):
        """The synced state replaces the current one, field for field."""
        other = apply_action(None, create_init_action(seed=42))
        action = Action(ActionType.FORCE_SYNC, {"state": state_to_dict(other)})
        assert apply_action(started_state, action) == other

    def test_flatten_accepts_bare_state(self, started_state):
        """FLATTEN takes the encoded state as the whole payload."""
        payload = state_to_dict(started_state)
        payload["turn"] = "p2"
        result = apply_action(started_state, Action(ActionType.FLATTEN, payload))
        assert result.turn == "p2"


class TestReducerBehaviour:
    """Tests for per-action housekeeping."""

    def test_input_state_never_mutated(self, make_state):
        """The previous snapshot keeps its board and inventories."""
        state = make_state(board={(0, 0): "blue"})
        result = apply_action(state, Action.take_gems([(0, 0)]))
        assert state.board[0][0] is not None
        assert state.inventories["p1"]["blue"] == 0
        assert result.board[0][0] is None
        assert result.inventories["p1"]["blue"] == 1

    def test_toast_cleared_before_handler(self, make_state):
        """Feedback from the previous action does not leak."""
        state = make_state(toast_message="old", last_feedback=[{"player": "p1", "type": "blue", "diff": 1}])
        result = apply_action(state, Action.simple(ActionType.CLOSE_MODAL))
        assert result.toast_message is None
        assert result.last_feedback is None

    def test_rejected_action_sets_toast(self, make_state):
        """Precondition failures never raise."""
        state = make_state(board={(0, 0): "gold"})
        result = apply_action(state, Action.take_gems([(0, 0)]))
        assert result.toast_message == "Gold can only be taken by reserving."
        assert result.turn == "p1"
        assert result.board[0][0] is not None

    def test_malformed_payload_is_reported(self, make_state, caplog):
        """A payload that breaks a handler yields a toast, and the traceback is logged."""
        state = make_state(board={(0, 0): "blue"}, phase=GamePhase.PRIVILEGE_ACTION)
        with caplog.at_level(logging.ERROR, logger="gemduel.engine_core.reducer"):
            result = apply_action(state, Action(ActionType.USE_PRIVILEGE, {"r": "x", "c": 0}))
        assert result.toast_message == "Invalid action."
        assert result.board == state.board
        [record] = [r for r in caplog.records if r.name == "gemduel.engine_core.reducer"]
        assert record.levelno == logging.ERROR
        assert record.exc_info is not None
        assert "USE_PRIVILEGE" in record.getMessage()

    def test_game_over_blocks_gameplay(self, make_state):
        """After a winner is set only CLOSE_MODAL is accepted."""
        state = make_state(board={(0, 0): "blue"}, winner="p1")
        result = apply_action(state, Action.take_gems([(0, 0)]))
        assert result.toast_message == "The game is over."
        assert result.board[0][0] is not None
        assert result.effective_phase == GamePhase.GAME_OVER

        closed = apply_action(state._copy_with(active_modal={"type": "PEEK"}), Action.simple(ActionType.CLOSE_MODAL))
        assert closed.active_modal is None

    @pytest.mark.parametrize("action_type", [ActionType.UNDO, ActionType.REDO])
    def test_history_actions_pass_through(self, started_state, action_type):
        """UNDO/REDO are handled by the action log, not the reducer."""
        assert apply_action(started_state, Action.simple(action_type)) is started_state

    def test_history_actions_warn_online(self, caplog):
        """History moves are logged as disabled in online matches."""
        state = apply_action(None, create_init_action(seed=1, mode=GameMode.ONLINE_MULTIPLAYER))
        with caplog.at_level("WARNING"):
            Reducer().apply(state, Action.simple(ActionType.UNDO))
        assert "disabled in online matches" in caplog.text

    def test_replay_folds_actions(self, make_state):
        """replay() equals applying the actions one by one."""
        state = make_state(board={(0, 0): "blue", (4, 4): "red"})
        actions = [Action.take_gems([(0, 0)]), Action.take_gems([(4, 4)])]
        stepwise = apply_action(apply_action(state, actions[0]), actions[1])
        assert replay(actions, state) == stepwise
        assert stepwise.inventories["p1"]["blue"] == 1
        assert stepwise.inventories["p2"]["red"] == 1
