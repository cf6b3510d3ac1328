"""
Tests for the command-line interface.
"""

import json

import pytest

from ..cli import main
from ..network.checksum import generate_state_hash
from ..session import ActionLog


@pytest.fixture
def simulated_log(tmp_path, capsys):
    path = tmp_path / "match.json"
    main(["simulate", "--seed", "3", "--max-actions", "10", "-o", str(path)])
    capsys.readouterr()
    return path


class TestCli:
    """Tests for the gemduel CLI."""

    def test_simulate_writes_log(self, tmp_path, capsys):
        path = tmp_path / "match.json"
        main(["simulate", "--seed", "3", "--max-actions", "10", "-o", str(path)])
        out = capsys.readouterr().out
        assert "Actions: 11" in out
        assert "Checksum: " in out
        entries = json.loads(path.read_text())
        assert entries[0]["type"] == "INIT"
        assert len(entries) == 11

    def test_simulate_with_draft(self, tmp_path, capsys):
        path = tmp_path / "draft.json"
        main(["simulate", "--seed", "1", "--buff-level", "2", "--max-actions", "4", "-o", str(path)])
        entries = json.loads(path.read_text())
        assert entries[0]["type"] == "INIT_DRAFT"
        assert [e["type"] for e in entries[1:3]] == ["SELECT_BUFF", "SELECT_BUFF"]

    def test_checksum_matches_replay(self, simulated_log, capsys):
        main(["checksum", str(simulated_log)])
        out = capsys.readouterr().out.strip()
        assert out == generate_state_hash(ActionLog.load(simulated_log).current_state)

    def test_replay_summary(self, simulated_log, capsys):
        main(["replay", str(simulated_log)])
        out = capsys.readouterr().out
        assert "Actions: 11" in out
        assert "p1:" in out and "p2:" in out

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["replay", str(tmp_path / "nope.json")])
        assert exc.value.code == 1
        assert "File not found" in capsys.readouterr().out

    def test_invalid_log(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("{}")
        with pytest.raises(SystemExit):
            main(["checksum", str(path)])

    def test_no_command(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 1
