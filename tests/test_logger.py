import logging

import pytest

from userhub.logger import LoggerConfig, init_logger, new_logger


@pytest.fixture(autouse=True)
def _close_handlers():
    yield
    logger = logging.getLogger("userhub")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _flush(logger):
    for handler in logger.handlers:
        handler.flush()


def test_writes_console_line_to_file(tmp_path):
    path = tmp_path / "out.txt"
    log = init_logger(LoggerConfig(level="info", output_paths=[str(path)]))
    log.info("User created")
    _flush(log)
    line = path.read_text(encoding="utf-8").strip()
    parts = line.split("\t")
    assert parts[1] == "INFO"
    assert parts[3] == "User created"
    assert "test_logger.py:" in parts[2]


def test_level_filters_lower_messages(tmp_path):
    path = tmp_path / "out.txt"
    log = init_logger(LoggerConfig(level="error", output_paths=[str(path)]))
    log.info("hidden")
    log.error("shown")
    _flush(log)
    content = path.read_text(encoding="utf-8")
    assert "hidden" not in content
    assert "shown" in content


def test_warn_level_name_and_fields(tmp_path):
    path = tmp_path / "out.txt"
    log = init_logger(LoggerConfig(level="WARN", output_paths=[str(path)]))
    log.warning("careful", extra={"fields": {"op": "SaveUser"}})
    _flush(log)
    parts = path.read_text(encoding="utf-8").strip().split("\t")
    assert parts[1] == "WARN"
    assert parts[4] == '{"op": "SaveUser"}'


def test_appends_across_initialisations(tmp_path):
    path = tmp_path / "out.txt"
    for message in ("first", "second"):
        log = init_logger(LoggerConfig(level="debug", output_paths=[str(path)]))
        log.debug(message)
        _flush(log)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [line.split("\t")[3] for line in lines] == ["first", "second"]


def test_reinitialisation_does_not_duplicate_handlers(tmp_path):
    path = tmp_path / "out.txt"
    init_logger(LoggerConfig(output_paths=[str(path)]))
    log = init_logger(LoggerConfig(output_paths=[str(path)]))
    assert len(log.handlers) == 1


@pytest.mark.parametrize("level", ["verbose", "Info", "warning"])
def test_unknown_level_raises(tmp_path, level):
    with pytest.raises(ValueError):
        init_logger(LoggerConfig(level=level, output_paths=[str(tmp_path / "x.txt")]))


def test_stdout_output(capsys):
    log = init_logger(LoggerConfig(level="info", output_paths=["stdout"]))
    log.info("to console")
    _flush(log)
    assert "to console" in capsys.readouterr().out


def test_new_logger_writes_logs_file(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    log = new_logger()
    log.debug("not at info")
    log.info("default logger")
    _flush(log)
    content = (tmp_path / "logs.txt").read_text(encoding="utf-8")
    assert "default logger" in content
    assert "not at info" not in content
    assert "default logger" in capsys.readouterr().out