import pytest
from loguru import logger

from gift_claimer.config import Settings

CONFIG_ENV_VARS = [
    "BEARER_TOKEN",
    "SLACK_WEBHOOK_URL",
    "NOTIFICATION_CHANNEL",
    "CLAIMER_CONFIG_FILE",
    "SMTP_HOST",
    "SMTP_FROM",
    "NOTIFY_TO",
    "TIMEZONE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # keep a stray .env in the working directory out of the settings
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def make_settings():
    def _make(**overrides):
        values = {
            "bearer_token": "test-token",
            "slack_webhook_url": "https://hooks.slack.test/services/T000/B000/XXX",
            "bundle_id_10m": 1786571320,
            "bundle_id_4h": 844758222,
            "bundle_id_24h": 1918154038,
            "daily_bundle_ids": [787829412, 1579845062],
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def log_messages():
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def log_records():
    records = []
    handler_id = logger.add(
        lambda m: records.append((m.record["level"].name, m.record["message"])),
        level="DEBUG",
    )
    yield records
    logger.remove(handler_id)
