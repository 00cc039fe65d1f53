import typing as t
from pathlib import Path

import pytest

from teelog import facade
from teelog.config import LogSettings
from teelog.core import Logger


def _read_log(path: Path) -> str:
    return path.read_text(encoding="utf-8") if path.exists() else ""


@pytest.fixture(autouse=True)
def reset_default_logger(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> t.Iterator[None]:
    """Keep the default logger and any relative log paths inside tmp_path."""
    monkeypatch.chdir(tmp_path)
    for name in ("FILE_NAME", "LEVEL", "MAX_AGE", "LOCAL_TIME", "LOG_DIR", "MAX_SIZE", "MAX_BACKUPS", "COLOR", "DEVELOPMENT"):
        monkeypatch.delenv(f"TEELOG_{name}", raising=False)
    facade.reset()
    yield
    facade.reset()


@pytest.fixture
def settings(tmp_path: Path) -> LogSettings:
    return LogSettings(log_dir=str(tmp_path / "logs"), file_name="app", color=False)


@pytest.fixture
def exit_codes() -> list[int]:
    return []


@pytest.fixture
def logger(settings: LogSettings, exit_codes: list[int]) -> t.Iterator[Logger]:
    lg = Logger.from_settings(settings, exit_hook=exit_codes.append)
    yield lg
    lg.close()


@pytest.fixture
def read_log() -> t.Callable[[Path], str]:
    """Contents of a log file, or an empty string if it was never written."""
    return _read_log
