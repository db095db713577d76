import json
from datetime import date

from apilogs.capture.models import LogEntry
from apilogs.capture.writer import ApiLogWriter, log_api_call
from apilogs.constants import REDACTION_MARKER


def test_get_log_file_path_creates_directory(writer, log_dir):
    assert not log_dir.exists()

    path = writer.get_log_file_path(date(2024, 3, 7))

    assert log_dir.is_dir()
    assert path == log_dir / "api-log-2024-03-07.jsonl"
    assert not path.exists()


def test_get_log_file_path_defaults_to_today(writer, log_dir):
    expected = f"api-log-{date.today().isoformat()}.jsonl"

    assert writer.get_log_file_path().name == expected


def test_default_log_dir_comes_from_cache_directory(monkeypatch, tmp_path):
    monkeypatch.setenv("APILOGS_CACHE_DIR", str(tmp_path))

    writer = ApiLogWriter()

    assert writer.log_dir.parent.parent == tmp_path
    assert writer.log_dir.name == "api-logs"


def test_append_writes_one_json_line_per_entry(writer, read_log):
    for index in range(3):
        writer.append(LogEntry(url=f"https://example.com/{index}", method="GET"))

    raw = writer.get_log_file_path().read_text(encoding="utf-8")
    entries = read_log(writer)

    assert raw.endswith("\n")
    assert len(raw.splitlines()) == 3
    assert [e["url"] for e in entries] == [f"https://example.com/{i}" for i in range(3)]


def test_append_sanitizes_headers_and_bodies(writer, read_log):
    writer.append(
        LogEntry(
            url="https://example.com",
            method="POST",
            headers={"authorization": "Bearer x", "accept": "*/*"},
            body={"password": "pw", "user": "ann"},
            response_body={"data": [{"token": "t"}]},
        )
    )

    [entry] = read_log(writer)

    assert entry["headers"] == {"authorization": REDACTION_MARKER, "accept": "*/*"}
    assert entry["body"] == {"password": REDACTION_MARKER, "user": "ann"}
    assert entry["responseBody"] == {"data": [{"token": REDACTION_MARKER}]}


def test_append_leaves_other_fields_alone(writer, read_log):
    writer.append({"url": "u", "method": "GET", "token": "kept", "durationMs": 1})

    [entry] = read_log(writer)

    assert entry["token"] == "kept"


def test_append_never_raises_and_reports(tmp_path, mocker):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    sink = mocker.Mock()
    writer = ApiLogWriter(log_dir=blocker, diagnostics=sink)

    writer.append(LogEntry(url="u", method="GET"))

    sink.assert_called_once()
    message, exc = sink.call_args[0]
    assert message == "Error writing API log"
    assert isinstance(exc, OSError)


def test_append_survives_failing_sink(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    def sink(message, exc):
        raise RuntimeError("sink is broken")

    ApiLogWriter(log_dir=blocker, diagnostics=sink).append(LogEntry(url="u", method="GET"))


def test_append_default_sink_uses_logger(tmp_path, mocker):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    get_logger = mocker.patch("apilogs.capture.writer.get_logger")

    ApiLogWriter(log_dir=blocker).append(LogEntry(url="u", method="GET"))

    get_logger.return_value.error.assert_called_once()


def test_append_serializes_unusual_values(writer, read_log):
    writer.append(LogEntry(url="u", method="GET", error=date(2024, 1, 1)))

    [entry] = read_log(writer)

    assert entry["error"] == "2024-01-01"


def test_log_api_call_builds_entry(writer, read_log):
    log_api_call(
        url="https://api.openai.com/v1/chat",
        method="POST",
        duration_ms=42,
        body={"apiKey": "sk"},
        status_code=200,
        response_body="",
        service="openai",
        writer=writer,
    )

    [entry] = read_log(writer)

    assert entry["service"] == "openai"
    assert entry["statusCode"] == 200
    assert entry["durationMs"] == 42
    assert entry["body"] == {"apiKey": REDACTION_MARKER}
    assert "responseBody" not in entry


def test_appended_lines_are_valid_json(writer):
    writer.append(LogEntry(url="u", method="GET", body="line one\nline two"))

    lines = writer.get_log_file_path().read_text(encoding="utf-8").splitlines()

    assert len(lines) == 1
    assert json.loads(lines[0])["body"] == "line one\nline two"
