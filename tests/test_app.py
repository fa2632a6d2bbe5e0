import pytest

from userhub.app import main


def test_missing_config_fails(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["--config", str(tmp_path / "absent.yaml")]) == 1
    assert "failed to load config" in (tmp_path / "logs.txt").read_text(encoding="utf-8")


def test_unreachable_database_fails(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = tmp_path / "config.yaml"
    config.write_text(
        "env: test\n"
        "database:\n"
        "  host: 127.0.0.1\n"
        "  port: '1'\n"
        "  user: user\n"
        "  dbname: users\n"
        "  ssl_mode: disable\n"
        "http-server:\n"
        "  address: 127.0.0.1:0\n",
        encoding="utf-8",
    )
    assert main(["--config", str(config)]) == 1
    log_text = (tmp_path / "logs.txt").read_text(encoding="utf-8")
    assert "error connecting to database" in log_text
    assert "failed to load config" not in log_text


def test_unknown_option_is_rejected(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit) as info:
        main(["--bogus"])
    assert info.value.code == 2