import json
import logging

from github_hooks.infra.logging import EVENTS_FILE, HookLogger, redact


def read_events(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


def test_writes_json_lines(tmp_path):
    logger = HookLogger()
    logger.init(logs_dir=tmp_path, logger_name="test.hooks.jsonl")
    logger.info("hook_attempt", repository="github.com/acme/widgets", connection_id="acme-gh", token="gho_...abcd")
    logger.warning("token_evicted", credential={"user": "alice", "token": "gho_...abcd"})
    logger.shutdown(logger)

    events = read_events(tmp_path / EVENTS_FILE)
    assert [e["event"] for e in events] == ["hook_attempt", "token_evicted"]
    assert events[0]["level"] == "INFO"
    assert events[0]["repository"] == "github.com/acme/widgets"
    assert events[1]["credential"]["user"] == "alice"
    assert "ts" in events[0]


def test_level_filters_debug(tmp_path):
    logger = HookLogger()
    logger.init(logs_dir=tmp_path, logger_name="test.hooks.level", level="INFO")
    logger.debug("noise")
    logger.info("kept")
    logger.shutdown(logger)

    assert [e["event"] for e in read_events(tmp_path / EVENTS_FILE)] == ["kept"]


def test_error_with_traceback(tmp_path):
    logger = HookLogger()
    logger.init(logs_dir=tmp_path, logger_name="test.hooks.exc")
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logger.exception("unexpected_failure", repository="x")
    logger.shutdown(logger)

    [event] = read_events(tmp_path / EVENTS_FILE)
    assert event["level"] == "ERROR"
    assert "RuntimeError: boom" in event["exc_info"]


def test_without_logs_dir_has_no_file(tmp_path):
    logger = HookLogger()
    logger.init(logs_dir=None, logger_name="test.hooks.none")
    logger.info("nothing")
    logger.shutdown(logger)
    assert not (tmp_path / EVENTS_FILE).exists()
    assert logging.getLogger("test.hooks.none").handlers == []


def test_console_output(capsys):
    logger = HookLogger()
    logger.init(logs_dir=None, logger_name="test.hooks.console", console_output=True)
    logger.info("hook_terminal", result="Created")
    logger.shutdown(logger)
    err = capsys.readouterr().err
    assert "hook_terminal" in err
    assert "result=Created" in err


def test_redact():
    assert redact("GET /x?access_token=gho_abc&x=1") == "GET /x?access_token=[redacted]&x=1"
    assert redact("Authorization: Bearer gho_abc") == "Authorization: Bearer [redacted]"
