import os

import pytest

from imagesource.config.env_config import get_source_config, load_env_file
from imagesource.features.sources.domain.source_config import AllowedOrigin

ENV_VARS = ('ALLOWED_ORIGINS', 'HTTP_SOURCE_MAX_BYTES', 'HTTP_SOURCE_TIMEOUT')


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so values written by load_dotenv are undone after the test
    for name in ENV_VARS:
        monkeypatch.setenv(name, '')
        monkeypatch.delenv(name)


def test_unset_environment_is_unrestricted():
    config = get_source_config()

    assert config.allowed_origins == ()
    assert config.max_response_bytes is None
    assert config.timeout is None


def test_origins_and_limits_are_parsed(monkeypatch):
    monkeypatch.setenv('ALLOWED_ORIGINS', 'https://cdn.example.com, http://127.0.0.1:8080 ,')
    monkeypatch.setenv('HTTP_SOURCE_MAX_BYTES', '1048576')
    monkeypatch.setenv('HTTP_SOURCE_TIMEOUT', '2.5')

    config = get_source_config()

    assert config.allowed_origins == (
        AllowedOrigin('https', 'cdn.example.com'),
        AllowedOrigin('http', '127.0.0.1', 8080),
    )
    assert config.max_response_bytes == 1048576
    assert config.timeout == 2.5


@pytest.mark.parametrize("name, value", [
    ('ALLOWED_ORIGINS', 'cdn.example.com'),
    ('HTTP_SOURCE_MAX_BYTES', 'ten megabytes'),
    ('HTTP_SOURCE_MAX_BYTES', '0'),
    ('HTTP_SOURCE_TIMEOUT', 'soon'),
])
def test_malformed_settings_fail_fast(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        get_source_config()


def test_load_env_file_does_not_override_process_env(tmp_path, monkeypatch):
    env_file = tmp_path / '.env'
    env_file.write_text(
        "ALLOWED_ORIGINS=http://from-file.example\nHTTP_SOURCE_TIMEOUT=7\n",
        encoding='utf-8',
    )
    monkeypatch.setenv('ALLOWED_ORIGINS', 'http://from-env.example')

    assert load_env_file(str(env_file)) is True
    config = get_source_config()

    assert [str(o) for o in config.allowed_origins] == ['http://from-env.example']
    assert config.timeout == 7.0


def test_missing_env_file_is_ignored(tmp_path):
    assert load_env_file(str(tmp_path / 'absent.env')) is False
    assert 'ALLOWED_ORIGINS' not in os.environ
