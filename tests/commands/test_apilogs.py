import json
import os
import time

import pytest
import typer
from rich.text import Text

from apilogs.commands.apilogs import ApiLogsCommand, parse_count


def _entry(index, status=200):
    return {
        "timestamp": "2024-05-01T12:00:00.000Z",
        "id": f"id-{index}",
        "service": "openai",
        "url": f"https://api.openai.com/v1/item/{index}",
        "method": "GET",
        "statusCode": status,
        "durationMs": index,
    }


def _write_log(log_dir, name, entries, age_minutes=0):
    log_dir.mkdir(parents=True, exist_ok=True)
    path = log_dir / name
    path.write_text("".join(json.dumps(e) + "\n" for e in entries), encoding="utf-8")
    stamp = time.time() - age_minutes * 60
    os.utime(path, (stamp, stamp))
    return path


@pytest.fixture
def command(log_dir, mocker):
    mocker.patch("apilogs.commands.apilogs.get_logger")
    return ApiLogsCommand(log_dir=log_dir, confirm=lambda prompt: False)


@pytest.mark.parametrize(
    "value, default, expected",
    [(None, 20, 20), ("5", 20, 5), ("abc", 20, 20), ("-3", 0, 0), ("0", 20, 0)],
)
def test_parse_count(value, default, expected):
    assert parse_count(value, default) == expected


def test_usage_for_missing_or_unknown_subcommand(command):
    for args in ("", "   ", "bogus"):
        text = command.call(args)
        for sub in ("list", "tail [n]", "clear", "dir", "view <file> [n]"):
            assert f"apilogs {sub}" in text


def test_dir_returns_logs_directory(command, log_dir):
    assert command.call("dir") == str(log_dir)


def test_default_logs_directory_from_cache(monkeypatch, tmp_path):
    monkeypatch.setenv("APILOGS_CACHE_DIR", str(tmp_path))

    command = ApiLogsCommand()

    assert command.log_dir.name == "api-logs"
    assert command.log_dir.parent.parent == tmp_path


def test_list_without_files(command):
    assert command.call("list") == "No log files found"


def test_list_with_files(command, log_dir):
    _write_log(log_dir, "api-log-2024-05-01.jsonl", [_entry(1)], age_minutes=10)
    newer = _write_log(log_dir, "api-log-2024-05-02.jsonl", [_entry(2)])

    text = command.call("list")

    assert text.startswith("API Log Files:")
    assert text.index("1. api-log-2024-05-02.jsonl") < text.index("2. api-log-2024-05-01.jsonl")
    assert f"   Size: {newer.stat().st_size / 1024:.2f} KB" in text
    assert "   Created: " in text
    assert f"   Path: {newer}" in text


def test_list_reports_errors(command, mocker):
    mocker.patch(
        "apilogs.commands.apilogs.list_log_files", side_effect=PermissionError("denied")
    )

    assert command.call("list") == "Error listing log files: denied"


def test_tail_without_files(command):
    assert command.call("tail") == "No log files found"


def test_tail_shows_last_entries_of_latest_file(command, log_dir):
    _write_log(log_dir, "old.jsonl", [_entry(90)], age_minutes=10)
    _write_log(log_dir, "new.jsonl", [_entry(i) for i in range(1, 6)])

    text = command.call("tail 2")

    assert text.startswith("Log File: new.jsonl")
    assert "/v1/item/4" in text
    assert "/v1/item/5" in text
    assert "/v1/item/3" not in text
    assert "/v1/item/90" not in text


def test_tail_more_than_available(command, log_dir):
    _write_log(log_dir, "only.jsonl", [_entry(i) for i in range(3)])

    text = command.call("tail 5")

    assert text.count("GET /v1/item/") == 3


def test_tail_defaults_to_twenty(command, log_dir):
    _write_log(log_dir, "big.jsonl", [_entry(i) for i in range(25)])

    for args in ("tail", "tail many"):
        assert command.call(args).count("GET /v1/item/") == 20


def test_view_requires_file(command):
    assert command.call("view") == "Error: Please specify a log file to view"


def test_view_missing_file_does_not_create_it(command, log_dir):
    text = command.call("view api-log-1999-01-01")

    expected = log_dir / "api-log-1999-01-01.jsonl"
    assert text == f"Log file not found: {expected}"
    assert not expected.exists()


def test_view_resolves_bare_name_and_adds_extension(command, log_dir):
    _write_log(log_dir, "api-log-2024-05-01.jsonl", [_entry(1), _entry(2)])

    text = command.call("view api-log-2024-05-01")

    assert text.startswith("Log File: api-log-2024-05-01.jsonl")
    assert text.count("GET /v1/item/") == 2


def test_view_keeps_explicit_extension(command, log_dir):
    _write_log(log_dir, "legacy.log", [_entry(1)])

    assert "Log File: legacy.log" in command.call("view legacy.log")


def test_view_accepts_full_path(command, tmp_path):
    path = _write_log(tmp_path / "elsewhere", "mine.jsonl", [_entry(7)])

    assert "/v1/item/7" in command.view(str(path))


def test_view_last_entries(command, log_dir):
    _write_log(log_dir, "day.jsonl", [_entry(i) for i in range(1, 5)])

    text = command.call("view day 1")

    assert text.count("GET /v1/item/") == 1
    assert "/v1/item/4" in text


def test_view_non_numeric_count_shows_all(command, log_dir):
    _write_log(log_dir, "day.jsonl", [_entry(i) for i in range(1, 5)])

    assert command.call("view day lots").count("GET /v1/item/") == 4


def test_view_empty_file(command, log_dir):
    _write_log(log_dir, "empty.jsonl", [])

    assert command.call("view empty") == "Log file is empty"


def test_view_shows_malformed_lines_verbatim(command, log_dir):
    log_dir.mkdir(parents=True)
    (log_dir / "mixed.jsonl").write_text(
        json.dumps(_entry(1)) + "\nnot json at all\n", encoding="utf-8"
    )

    assert "\nnot json at all" in command.call("view mixed")


def test_view_renders_non_string_method_and_url(command, log_dir):
    _write_log(
        log_dir,
        "odd.jsonl",
        [
            {"method": 7, "url": "https://a.example/p", "statusCode": 200},
            {"method": "GET", "url": 5, "statusCode": 200},
        ],
    )

    text = command.call("view odd")

    assert "7 /p" in text
    assert "GET 5" in text


def test_view_falls_back_to_json_for_unrenderable_entry(command, log_dir, mocker):
    _write_log(log_dir, "day.jsonl", [_entry(1), _entry(2)])
    mocker.patch(
        "apilogs.commands.apilogs.render_entry",
        side_effect=[RuntimeError("bad entry"), Text("GET /v1/item/2")],
    )

    text = command.call("view day")

    assert json.dumps(_entry(1)) in text
    assert "GET /v1/item/2" in text


def test_view_reports_read_errors(command, log_dir, mocker):
    _write_log(log_dir, "day.jsonl", [_entry(1)])
    mocker.patch("apilogs.commands.apilogs.read_entries", side_effect=OSError("io failure"))

    assert command.call("view day") == "Error viewing log file: io failure"


def test_clear_declined_deletes_nothing(command, log_dir):
    _write_log(log_dir, "a.jsonl", [_entry(1)])
    _write_log(log_dir, "b.log", [])
    before = sorted(os.listdir(log_dir))

    assert command.call("clear") == "Operation cancelled"
    assert sorted(os.listdir(log_dir)) == before


def test_clear_aborted_prompt_is_cancelled(log_dir, mocker):
    mocker.patch("apilogs.commands.apilogs.get_logger")
    _write_log(log_dir, "a.jsonl", [_entry(1)])
    command = ApiLogsCommand(log_dir=log_dir, confirm=mocker.Mock(side_effect=typer.Abort()))

    assert command.call("clear") == "Operation cancelled"
    assert (log_dir / "a.jsonl").exists()


def test_clear_confirmed_deletes_log_files(log_dir, mocker):
    mocker.patch("apilogs.commands.apilogs.get_logger")
    prompts = []

    def confirm(prompt):
        prompts.append(prompt)
        return True

    _write_log(log_dir, "a.jsonl", [_entry(1)])
    _write_log(log_dir, "b.log", [])
    _write_log(log_dir, "keep.txt", [])

    text = ApiLogsCommand(log_dir=log_dir, confirm=confirm).call("clear")

    assert text == "Successfully deleted 2 log files"
    assert os.listdir(log_dir) == ["keep.txt"]
    assert prompts == ["Are you sure you want to clear all API logs?"]


def test_clear_confirmed_without_directory(log_dir, mocker):
    mocker.patch("apilogs.commands.apilogs.get_logger")

    text = ApiLogsCommand(log_dir=log_dir, confirm=lambda prompt: True).call("clear")

    assert text == "Successfully deleted 0 log files"


def test_clear_reports_deletion_errors(log_dir, mocker):
    mocker.patch("apilogs.commands.apilogs.get_logger")
    _write_log(log_dir, "a.jsonl", [_entry(1)])
    mocker.patch("pathlib.Path.unlink", side_effect=PermissionError("denied"))

    text = ApiLogsCommand(log_dir=log_dir, confirm=lambda prompt: True).call("clear")

    assert text == "Error clearing logs: denied"


def test_default_confirmation_uses_typer(log_dir, mocker):
    mocker.patch("apilogs.commands.apilogs.get_logger")
    confirm = mocker.patch("apilogs.commands.apilogs.typer.confirm", return_value=False)

    assert ApiLogsCommand(log_dir=log_dir).call("clear") == "Operation cancelled"
    confirm.assert_called_once_with(
        "Are you sure you want to clear all API logs?", default=False
    )


def test_run_returns_styled_text(command):
    text = command.run("list")

    assert text.plain == "No log files found"
    assert text.style == "yellow"
