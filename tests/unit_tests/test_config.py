from pathlib import Path

import pytest
from pydantic import ValidationError

from teelog.config import LogSettings
from teelog.exceptions import ConfigurationError
from teelog.levels import Level


def test_defaults():
    """Defaults match the documented process-start configuration."""
    settings = LogSettings()
    assert settings.file_name == "log"
    assert settings.level is Level.DEBUG
    assert settings.max_age == 20
    assert settings.local_time is True
    assert settings.file_path == Path("logs") / "log.log"
    assert settings.error_file_path == Path("logs") / "log_err.log"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch):
    """TEELOG_* variables override every default."""
    monkeypatch.setenv("TEELOG_FILE_NAME", "worker")
    monkeypatch.setenv("TEELOG_LEVEL", "WARN")
    monkeypatch.setenv("TEELOG_MAX_AGE", "7")
    monkeypatch.setenv("TEELOG_LOCAL_TIME", "false")

    settings = LogSettings()

    assert settings.file_name == "worker"
    assert settings.level is Level.WARN
    assert settings.max_age == 7
    assert settings.local_time is False


def test_dotenv_file_is_read(tmp_path: Path):
    """A .env file in the working directory is read."""
    # conftest chdirs into tmp_path
    (tmp_path / ".env").write_text("TEELOG_LEVEL=error\n", encoding="utf-8")
    assert LogSettings().level is Level.ERROR


def test_unknown_level_is_rejected():
    """An unrecognized level name fails validation."""
    with pytest.raises(ValidationError, match="unrecognized log level"):
        LogSettings(level="verbose")


def test_assignment_is_validated():
    """Assigned values are parsed and validated like constructor values."""
    settings = LogSettings()
    settings.level = "info"  # type: ignore[assignment]
    assert settings.level is Level.INFO

    with pytest.raises(ValidationError):
        settings.level = "loud"  # type: ignore[assignment]
    with pytest.raises(ValidationError):
        settings.max_age = -1


def test_merged_applies_overrides_without_touching_original():
    """Overrides produce a new settings object; the original is unchanged."""
    settings = LogSettings(file_name="first")
    merged = settings.merged(file_name="second", level="error")

    assert merged is not settings
    assert merged.file_name == "second"
    assert merged.level is Level.ERROR
    assert settings.file_name == "first"


def test_merged_without_overrides_returns_same_object():
    """No overrides returns the same instance."""
    settings = LogSettings()
    assert settings.merged() is settings


def test_merged_invalid_override_raises_configuration_error():
    """An invalid override surfaces as ConfigurationError."""
    with pytest.raises(ConfigurationError):
        LogSettings().merged(level="nope")
