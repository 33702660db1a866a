"""Tests for the werewolf-host command line."""

import sys

from werewolf_host import play
from werewolf_host.events import MatchEventLog


def run_cli(monkeypatch, *args) -> int:
    monkeypatch.setattr(sys, "argv", ["werewolf-host", *args])
    return play.main()


class TestCommandLine:

    def test_single_match_writes_log(self, monkeypatch, tmp_path, capsys):
        log_file = tmp_path / "match.yaml"
        assert run_cli(monkeypatch, "--seed", "5", "--validate", "--log-file", str(log_file)) == 0

        out = capsys.readouterr().out
        assert "Match Over" in out
        assert "Invariant Violations" in out
        loaded = MatchEventLog.load_from_file(str(log_file))
        assert loaded.winner is not None
        assert len(loaded.roles_secret) == 8

    def test_stress_test(self, monkeypatch, capsys):
        assert run_cli(monkeypatch, "--seed", "1", "--games", "3") == 0
        assert "Winner Distribution" in capsys.readouterr().out

    def test_too_few_players(self, monkeypatch, capsys):
        assert run_cli(monkeypatch, "--players", "3") == 1
        assert "Error" in capsys.readouterr().out

    def test_config_file(self, monkeypatch, tmp_path, capsys):
        config_file = tmp_path / "match.yaml"
        config_file.write_text("roles:\n  wolf: 1\n  seer: 1\nnight_time: 10\n", encoding="utf-8")
        assert run_cli(monkeypatch, "--seed", "2", "--players", "5", "--config", str(config_file)) == 0
