import pytest

from subtracker.config import Settings, load_settings
from subtracker.errors import ConfigurationError

ENV_VARS = (
    "SUBTRACKER_STORE",
    "SUBTRACKER_DATA_PATH",
    "SUBTRACKER_SEED_PATH",
    "SUBTRACKER_CURRENCY",
    "SUBTRACKER_ALERT_THRESHOLD",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        # setenv first so teardown also removes values load_dotenv adds
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    # keep load_dotenv from picking up a developer's .env
    monkeypatch.chdir(tmp_path)


def test_defaults():
    assert load_settings(env_file="missing.env") == Settings()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SUBTRACKER_STORE", "JSON")
    monkeypatch.setenv("SUBTRACKER_DATA_PATH", "/tmp/subs.json")
    monkeypatch.setenv("SUBTRACKER_CURRENCY", "€")
    monkeypatch.setenv("SUBTRACKER_ALERT_THRESHOLD", "250.5")
    monkeypatch.setenv("LOG_FORMAT", "json")

    settings = load_settings(env_file="missing.env")

    assert settings.store == "json"
    assert settings.data_path == "/tmp/subs.json"
    assert settings.currency == "€"
    assert settings.alert_threshold == 250.5
    assert settings.log_format == "json"


def test_env_file_is_read(tmp_path):
    env = tmp_path / "test.env"
    env.write_text("SUBTRACKER_CURRENCY=£\n", encoding="utf-8")

    assert load_settings(env_file=str(env)).currency == "£"


@pytest.mark.parametrize("name, value", [
    ("SUBTRACKER_STORE", "postgres"),
    ("SUBTRACKER_ALERT_THRESHOLD", "lots"),
    ("LOG_FORMAT", "xml"),
])
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError):
        load_settings(env_file="missing.env")
