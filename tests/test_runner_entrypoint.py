from __future__ import annotations

import sys

import shiftlab.cli as cli_module


def test_runner_delegates_to_cli_main_with_forwarded_args(monkeypatch):
    captured = {}

    def fake_cli_main(argv: list[str] | None = None) -> int:
        captured["argv"] = argv
        return 0

    monkeypatch.setattr(cli_module, "main", fake_cli_main)
    monkeypatch.setattr(sys, "argv", ["runner.py", "attribute", "--artifact", "x.json"])

    import runner

    rc = runner.main()

    assert rc == 0
    assert captured["argv"] == ["attribute", "--artifact", "x.json"]
