"""Tests for configuration loading."""

import json

import pytest

from gradedesk.config import DEFAULT_CONFIG, load_config
from gradedesk.core import ConfigurationError, ErrorCode


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv('GRADEDESK_LOG_LEVEL', raising=False)


def test_defaults():
    config = load_config()
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_file_then_overrides(tmp_path):
    path = tmp_path / "gradedesk.json"
    path.write_text(json.dumps({'max_error_logs': 10, 'log_level': 'DEBUG'}))

    config = load_config(str(path), overrides={'max_error_logs': 5})
    assert config['max_error_logs'] == 5
    assert config['log_level'] == 'DEBUG'
    assert config['max_persisted_errors'] == 50


def test_env_log_level_wins(monkeypatch):
    monkeypatch.setenv('GRADEDESK_LOG_LEVEL', 'WARNING')
    assert load_config(overrides={'log_level': 'DEBUG'})['log_level'] == 'WARNING'


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError) as exc_info:
        load_config(str(tmp_path / "missing.json"))
    assert exc_info.value.error_code == ErrorCode.CONFIGURATION_ERROR


def test_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{max_error_logs: 10")
    with pytest.raises(ConfigurationError, match='Invalid JSON'):
        load_config(str(path))


def test_document_must_be_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]")
    with pytest.raises(ConfigurationError, match='must contain a JSON object'):
        load_config(str(path))


@pytest.mark.parametrize("key,value", [
    ('max_error_logs', 0),
    ('max_error_logs', True),
    ('max_persisted_errors', '50'),
    ('error_log_storage_key', ''),
])
def test_invalid_values(key, value):
    with pytest.raises(ConfigurationError) as exc_info:
        load_config(overrides={key: value})
    assert exc_info.value.field == key
