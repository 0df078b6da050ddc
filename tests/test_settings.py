import os

import pytest

from ingest.settings import DEFAULT_API_URL, Settings, load_settings

ENV_VARS = [
    "CONNPASS_API_URL",
    "CONNPASS_API_KEY",
    "CONNPASS_TIMEOUT_SECONDS",
    "CONNPASS_MAX_PAGES",
    "LUNCH_PARTITION_MODE",
    "LUNCH_YMD_BATCH_SIZE",
    "LUNCH_MAX_RANGE_DAYS",
    "LUNCH_MAX_WORKERS",
    "LUNCH_TIMEZONE",
    "LUNCH_LOCALE",
    "LUNCH_OFFLINE",
    "SCRAPER_DEBUG",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a stray .env in the working directory out of these tests
    monkeypatch.chdir(tmp_path)
    yield
    # load_dotenv writes straight to os.environ
    for name in ENV_VARS:
        os.environ.pop(name, None)


def test_defaults():
    settings = load_settings()
    assert settings.api_url == DEFAULT_API_URL
    assert settings.api_key is None
    assert settings.partition_mode == "ymd"
    assert settings.ymd_batch_size == 4
    assert settings.max_range_days == 32
    assert settings.locale == "ja"
    assert settings.timezone == "Asia/Tokyo"
    assert settings.offline is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CONNPASS_API_KEY", "secret")
    monkeypatch.setenv("CONNPASS_TIMEOUT_SECONDS", "7.5")
    monkeypatch.setenv("LUNCH_PARTITION_MODE", "YM")
    monkeypatch.setenv("LUNCH_YMD_BATCH_SIZE", "3")
    monkeypatch.setenv("LUNCH_LOCALE", "en")
    monkeypatch.setenv("LUNCH_OFFLINE", "true")

    settings = load_settings()

    assert settings.api_key == "secret"
    assert settings.timeout_seconds == 7.5
    assert settings.partition_mode == "ym"
    assert settings.ymd_batch_size == 3
    assert settings.locale == "en"
    assert settings.offline is True


def test_empty_api_key_means_anonymous(monkeypatch):
    monkeypatch.setenv("CONNPASS_API_KEY", "")
    assert load_settings().api_key is None


def test_dotenv_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("CONNPASS_API_KEY=from-dotenv\nLUNCH_MAX_WORKERS=2\n")
    settings = load_settings()
    assert settings.api_key == "from-dotenv"
    assert settings.max_workers == 2


@pytest.mark.parametrize(
    "name, value",
    [
        ("LUNCH_PARTITION_MODE", "weekly"),
        ("LUNCH_YMD_BATCH_SIZE", "zero"),
        ("LUNCH_YMD_BATCH_SIZE", "0"),
        ("LUNCH_LOCALE", "fr"),
        ("CONNPASS_TIMEOUT_SECONDS", "-1"),
        ("CONNPASS_TIMEOUT_SECONDS", "soon"),
    ],
)
def test_invalid_values_fail_at_startup(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        load_settings()


def test_settings_are_immutable():
    with pytest.raises(Exception):
        Settings().api_key = "changed"
