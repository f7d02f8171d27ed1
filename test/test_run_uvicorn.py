"""Tests for the uvicorn entry point."""

import os
from unittest.mock import MagicMock, patch

import pytest

import run_uvicorn

ENV_KEYS = ("ADDRESS", "HTTPS", "PORT", "LOG_LEVEL", "LOG_FILE", "SSLPATH")


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with patch.dict(os.environ):
        for key in ENV_KEYS:
            os.environ.pop(key, None)
        yield tmp_path


@pytest.fixture
def mocked_startup(monkeypatch):
    mocks = MagicMock()
    monkeypatch.setattr(run_uvicorn, "setup_logging", mocks.setup_logging)
    monkeypatch.setattr(run_uvicorn.uvicorn, "run", mocks.run)
    return mocks


def test_log_level_from_dotenv_file(clean_env, mocked_startup):
    (clean_env / ".env").write_text("ADDRESS=voice.example\nLOG_LEVEL=DEBUG\n")

    run_uvicorn.main()

    mocked_startup.setup_logging.assert_called_once_with("DEBUG", None)
    kwargs = mocked_startup.run.call_args.kwargs
    assert kwargs["port"] == 9736
    assert kwargs["log_level"] == "debug"
    assert "ssl_keyfile" not in kwargs


def test_missing_address_exits(clean_env, mocked_startup):
    with pytest.raises(SystemExit) as excinfo:
        run_uvicorn.main()

    assert excinfo.value.code == 1
    mocked_startup.run.assert_not_called()
