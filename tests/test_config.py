"""
Tests for configuration loading and logging setup.
"""

import json
import logging

import pytest

from ticketdb.config import Config, configure_logging
from ticketdb.utils.errors import InvalidConfigError, TicketDBError


def test_defaults(monkeypatch):
    for key in ("DATABASE_PATH", "TABLE_NAME", "LOG_LEVEL"):
        monkeypatch.delenv(f"TICKETDB_{key}", raising=False)
    config = Config()

    assert config.get("database_path") == "./tickets.yaml"
    assert config.get("table_name") == "CNGC-BB-2024"
    assert config.get("log_level") == "INFO"
    assert config.get("missing", "fallback") == "fallback"


def test_file_overrides_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("TICKETDB_TABLE_NAME", raising=False)
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"table_name": "SPRING-GALA"}), encoding="utf-8")

    assert Config(str(config_file)).get("table_name") == "SPRING-GALA"


def test_env_overrides_file(tmp_path, monkeypatch):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"table_name": "SPRING-GALA"}), encoding="utf-8")
    monkeypatch.setenv("TICKETDB_TABLE_NAME", "WINTER-GALA")

    config = Config(str(config_file))
    assert config.get("table_name") == "WINTER-GALA"

    config.load_from_file(str(config_file))
    assert config.get("table_name") == "WINTER-GALA"


def test_env_values_take_default_types(tmp_path, monkeypatch):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"backup_count": 3, "compress": False}), encoding="utf-8")
    monkeypatch.setenv("TICKETDB_BACKUP_COUNT", "5")
    monkeypatch.setenv("TICKETDB_COMPRESS", "yes")

    config = Config(str(config_file))
    assert config.get("backup_count") == 5
    assert config.get("compress") is True


@pytest.mark.parametrize("content", ["[1, 2]", "{\"table_name\": ", "not json"])
def test_invalid_config_file(tmp_path, content):
    config_file = tmp_path / "config.json"
    config_file.write_text(content, encoding="utf-8")

    with pytest.raises(InvalidConfigError):
        Config(str(config_file))


def test_invalid_env_value(tmp_path, monkeypatch):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"backup_count": 3}), encoding="utf-8")
    monkeypatch.setenv("TICKETDB_BACKUP_COUNT", "many")

    with pytest.raises(InvalidConfigError) as exc_info:
        Config(str(config_file))
    assert exc_info.value.field == "backup_count"
    assert isinstance(exc_info.value, TicketDBError)


def test_set_and_save(tmp_path):
    config_file = tmp_path / "nested" / "config.json"
    config = Config(str(config_file))
    config.set("table_name", "AUTUMN-GALA")
    config.save_to_file()

    assert json.loads(config_file.read_text(encoding="utf-8"))["table_name"] == "AUTUMN-GALA"
    assert config.to_dict()["table_name"] == "AUTUMN-GALA"


def test_configure_logging_sets_package_level(monkeypatch):
    monkeypatch.setenv("TICKETDB_LOG_LEVEL", "debug")
    configure_logging(Config())
    assert logging.getLogger("ticketdb").level == logging.DEBUG

    monkeypatch.setenv("TICKETDB_LOG_LEVEL", "nonsense")
    configure_logging(Config())
    assert logging.getLogger("ticketdb").level == logging.INFO
