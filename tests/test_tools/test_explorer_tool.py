"""Tests for the explorer CLI argument handling and key validation."""

from __future__ import annotations

import pytest

from zcash_analytics.tools import explorer_tool

SAPLING_KEY = "zxviews" + "a1b2c3d4e5" * 9 + "a1b2c"


class TestExplorerTool:
    def test_no_command_prints_usage(self, monkeypatch, capsys) -> None:
        monkeypatch.setattr("sys.argv", ["explorer_tool"])
        with pytest.raises(SystemExit) as exc_info:
            explorer_tool.main()
        assert exc_info.value.code == 1
        assert "explorer_tool height" in capsys.readouterr().out

    def test_unknown_command(self, monkeypatch, capsys) -> None:
        monkeypatch.setattr("sys.argv", ["explorer_tool", "mine"])
        with pytest.raises(SystemExit):
            explorer_tool.main()
        assert "Unknown command: mine" in capsys.readouterr().out

    def test_block_requires_argument(self, monkeypatch, capsys) -> None:
        monkeypatch.setattr("sys.argv", ["explorer_tool", "block"])
        with pytest.raises(SystemExit):
            explorer_tool.main()
        assert "Usage: explorer_tool block" in capsys.readouterr().out

    def test_validate_from_env(self, monkeypatch, capsys) -> None:
        monkeypatch.setenv("ZCASH_VIEWING_KEY", SAPLING_KEY)
        monkeypatch.setattr("sys.argv", ["explorer_tool", "validate", "sapling"])
        explorer_tool.main()
        assert "Valid sapling viewing key" in capsys.readouterr().out

    def test_validate_rejects_wrong_type(self, monkeypatch, capsys) -> None:
        monkeypatch.setenv("ZCASH_VIEWING_KEY", SAPLING_KEY)
        monkeypatch.setattr("sys.argv", ["explorer_tool", "validate", "unified"])
        with pytest.raises(SystemExit) as exc_info:
            explorer_tool.main()
        assert exc_info.value.code == 1
        assert "Invalid unified viewing key" in capsys.readouterr().out

    def test_scan_exits_when_key_missing_from_session(self, monkeypatch, capsys) -> None:
        from zcash_analytics.keys.viewing_keys import ViewingKeyStore

        monkeypatch.setenv("ZCASH_VIEWING_KEY", SAPLING_KEY)
        monkeypatch.setattr(ViewingKeyStore, "get", lambda self, key_id_: None)
        monkeypatch.setattr("sys.argv", ["explorer_tool", "scan", "sapling", "1", "2"])
        with pytest.raises(SystemExit) as exc_info:
            explorer_tool.main()
        assert exc_info.value.code == 1
        assert f"Viewing key {SAPLING_KEY[:16]} is not in the session" in capsys.readouterr().out

    def test_scan_rejects_invalid_key(self, monkeypatch, capsys) -> None:
        monkeypatch.setenv("ZCASH_VIEWING_KEY", "zxviews-bad")
        monkeypatch.setattr("sys.argv", ["explorer_tool", "scan", "sapling", "1", "2"])
        with pytest.raises(SystemExit):
            explorer_tool.main()
        assert "Invalid sapling viewing key" in capsys.readouterr().out
