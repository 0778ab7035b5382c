import importlib
import json
import sys

import pytest

# Import run.py as a module and exercise parse_args + main with a patched
# start_server so nothing binds a socket.


@pytest.fixture()
def run_module(monkeypatch):
    if "run" in sys.modules:
        del sys.modules["run"]
    return importlib.import_module("run")


def test_version_flag_outputs_version(run_module, capsys):
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(["--version"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert run_module.__version__ in out
    assert "undercroft" in out


def test_default_command_is_generate(run_module):
    assert run_module.parse_args([]).command == "generate"


def test_generate_prints_map_and_summary(run_module, capsys):
    assert run_module.main(["generate", "--seed", "42", "--width", "40", "--height", "30"]) == 0
    out = capsys.readouterr().out
    assert "Seed:" in out and "42" in out
    assert "#" in out or "." in out


def test_generate_json(run_module, capsys):
    code = run_module.main(["generate", "--seed", "9", "--width", "32", "--height", "24", "--rooms", "4", "--json"])
    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["seed"] == 9
    assert len(data["grid"]) == 24
    assert len(data["rooms"]) <= 4


def test_generate_rejects_bad_config(run_module, capsys):
    assert run_module.main(["generate", "--width", "0"]) == 2
    assert "[ERROR]" in capsys.readouterr().err


def test_generate_reads_env_defaults(run_module, monkeypatch, capsys):
    monkeypatch.setenv("UNDERCROFT_DUNGEON_WIDTH", "21")
    run_module.main(["generate", "--seed", "3", "--json"])
    assert json.loads(capsys.readouterr().out)["width"] == 21


def test_server_main_invokes_start_server(monkeypatch, run_module):
    calls = {}

    def fake_start_server(host, port, debug):
        calls.update(host=host, port=port, debug=debug)

    monkeypatch.setenv("PORT", "5555")
    monkeypatch.setenv("HOST", "127.0.0.1")
    import undercroft.server as server_mod

    monkeypatch.setattr(server_mod, "start_server", fake_start_server)
    monkeypatch.setattr(run_module.signal, "signal", lambda *a: None)
    assert run_module.main(["server"]) == 0
    assert calls == {"host": "127.0.0.1", "port": 5555, "debug": False}


def test_server_flags_beat_env(monkeypatch, run_module):
    calls = {}
    import undercroft.server as server_mod

    monkeypatch.setattr(server_mod, "start_server", lambda host, port, debug: calls.update(port=port, debug=debug))
    monkeypatch.setattr(run_module.signal, "signal", lambda *a: None)
    monkeypatch.setenv("PORT", "5555")
    run_module.main(["server", "--port", "8080", "--debug"])
    assert calls == {"port": 8080, "debug": True}


def test_env_file_argument(monkeypatch, tmp_path, run_module, capsys):
    env_file = tmp_path / ".env"
    env_file.write_text("UNDERCROFT_DUNGEON_HEIGHT=17\n")
    monkeypatch.delenv("UNDERCROFT_DUNGEON_HEIGHT", raising=False)
    try:
        run_module.main(["--env-file", str(env_file), "generate", "--seed", "4", "--json"])
        assert json.loads(capsys.readouterr().out)["height"] == 17
    finally:
        monkeypatch.delenv("UNDERCROFT_DUNGEON_HEIGHT", raising=False)


def test_log_level_flag_sets_level(monkeypatch, run_module, capsys):
    from undercroft import logging_utils

    monkeypatch.setattr(logging_utils, "CURRENT_LEVEL", logging_utils.LEVELS["debug"])
    code = run_module.main(["--log-level", "warn", "generate", "--seed", "3", "--width", "20", "--height", "20", "--json"])
    assert code == 0
    assert logging_utils.CURRENT_LEVEL == logging_utils.LEVELS["warn"]
    assert "corridors_carved" not in capsys.readouterr().err


def test_log_level_flag_rejects_unknown(run_module):
    with pytest.raises(SystemExit):
        run_module.parse_args(["--log-level", "loud", "generate"])


def test_summary_labels_align_with_color(monkeypatch, run_module):
    from colorama import Fore, Style

    monkeypatch.setattr(run_module, "_COLOR_ENABLED", True)
    assert run_module._label("Seed:") == f"{Fore.YELLOW}{'Seed:':<12}{Style.RESET_ALL}"
    assert run_module._label("Fallbacks:") == f"{Fore.YELLOW}{'Fallbacks:':<12}{Style.RESET_ALL}"
    monkeypatch.setattr(run_module, "_COLOR_ENABLED", False)
    assert run_module._label("Seed:") == "Seed:".ljust(12)


def test_summary_values_start_in_same_column(run_module, capsys):
    run_module.main(["generate", "--seed", "5", "--width", "30", "--height", "24"])
    out = capsys.readouterr().out
    rows = [line for line in out.splitlines() if line[2:14].rstrip().endswith(":")]
    assert len(rows) == 7
    for line in rows:
        assert line[14] == " " and line[15] != " "
