"""
Tests for the action log: history, undo/redo and persistence.
"""

import json

import pytest

from ..engine_core.action import Action
from ..engine_core.codec import action_to_dict
from ..engine_core.state import GameMode
from ..games.gem_duel.setup import create_init_action
from ..session import ActionLog


def takeable(state, skip=0):
    cells = [
        (r, c)
        for r, row in enumerate(state.board)
        for c, gem in enumerate(row)
        if gem is not None and gem.color != "gold"
    ]
    return cells[skip]


@pytest.fixture
def log():
    """A log with INIT and two single-gem takes."""
    log = ActionLog()
    log.clear_and_init(create_init_action(seed=3))
    log.record(Action.take_gems([takeable(log.current_state)]))
    log.record(Action.take_gems([takeable(log.current_state)]))
    return log


class TestHistory:
    """Tests for record, undo and redo."""

    def test_record(self, log):
        assert log.cursor == 3
        assert len(log) == 3
        assert log.current_state.turn == "p1"

    def test_undo_redo(self, log):
        after = log.current_state
        state = log.undo()
        assert log.cursor == 2
        assert state.turn == "p2"
        redone = log.redo()
        assert log.cursor == 3
        assert redone == after

    def test_undo_stops_at_bootstrap(self, log):
        log.undo()
        log.undo()
        assert not log.can_undo()
        assert log.undo() is log.current_state
        assert log.cursor == 1

    def test_record_truncates_redo_tail(self, log):
        log.undo()
        log.record(Action.replenish())
        assert not log.can_redo()
        assert len(log.actions) == 3
        assert log.actions[-1].action_type.value == "REPLENISH"

    def test_clear_and_init(self, log):
        log.clear_and_init(create_init_action(seed=4))
        assert log.cursor == 1
        assert not log.can_undo()

    def test_precomputed_result_is_kept(self, log):
        action = Action.replenish()
        result = log.current_state._copy_with(toast_message="precomputed")
        assert log.record(action, result) is result

    def test_online_history_blocked(self, caplog):
        log = ActionLog()
        log.clear_and_init(create_init_action(seed=3, mode=GameMode.ONLINE_MULTIPLAYER))
        log.record(Action.take_gems([takeable(log.current_state)]))
        assert not log.can_undo()
        before = log.current_state
        assert log.undo() is before
        assert "disabled in online matches" in caplog.text


class TestPersistence:
    """Tests for saving and loading logs."""

    def test_save_and_load(self, log, tmp_path):
        path = tmp_path / "match.json"
        log.save(path)
        loaded = ActionLog.load(path)
        assert loaded.cursor == log.cursor
        assert loaded.current_state == log.current_state

    def test_saved_format(self, log, tmp_path):
        path = tmp_path / "match.json"
        log.save(path)
        entries = json.loads(path.read_text())
        assert entries[0]["type"] == "INIT"
        assert entries[1] == action_to_dict(log.actions[1])

    def test_save_excludes_undone(self, log, tmp_path):
        log.undo()
        path = tmp_path / "match.json"
        log.save(path)
        assert len(json.loads(path.read_text())) == 2

    def test_load_rejects_non_list(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"type": "INIT"}))
        with pytest.raises(ValueError):
            ActionLog.load(path)

    def test_load_rejects_unknown_action(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"type": "FLY_AWAY", "payload": {}}]))
        with pytest.raises(ValueError):
            ActionLog.load(path)
