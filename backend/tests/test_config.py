"""Tests for settings loading."""

import base64

import pytest
from pydantic import ValidationError

from keeper.core.config import Settings

VALID_KEY = base64.b64encode(b"k" * 32).decode("ascii")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SECRET_KEY", "DATA_ENCRYPTION_KEY"):
        monkeypatch.delenv(name, raising=False)


def test_keys_have_no_defaults():
    with pytest.raises(ValidationError) as exc_info:
        Settings(_env_file=None)
    missing = {error["loc"][0] for error in exc_info.value.errors()}
    assert missing == {"SECRET_KEY", "DATA_ENCRYPTION_KEY"}


def test_keys_are_read_from_environment(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "signing")
    monkeypatch.setenv("DATA_ENCRYPTION_KEY", VALID_KEY)

    settings = Settings(_env_file=None)
    assert settings.SECRET_KEY == "signing"
    assert settings.data_key == b"k" * 32


@pytest.mark.parametrize("size", [16, 24, 32])
def test_data_key_accepts_aes_sizes(size):
    key = base64.b64encode(b"a" * size).decode("ascii")
    assert len(Settings(_env_file=None, SECRET_KEY="s", DATA_ENCRYPTION_KEY=key).data_key) == size


@pytest.mark.parametrize(
    "key",
    [
        "not base64!!",
        base64.b64encode(b"a" * 20).decode("ascii"),
        "",
    ],
)
def test_bad_data_key_is_refused(key):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, SECRET_KEY="s", DATA_ENCRYPTION_KEY=key)


def test_empty_signing_key_is_refused():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, SECRET_KEY="", DATA_ENCRYPTION_KEY=VALID_KEY)
