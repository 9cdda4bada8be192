"""Unit tests for application settings configuration."""

from pathlib import Path

from js_extractor.config import Settings


def test_settings_uses_project_env_file_independent_of_cwd():
    """Settings should always include the project .env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_project_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_project_env in normalized
    assert str(Path(".env")) in normalized


def test_job_store_defaults_to_memory(monkeypatch):
    monkeypatch.delenv("JOB_STORE", raising=False)
    settings = Settings(_env_file=None)

    assert settings.job_store == "memory"
    assert settings.uses_database is False


def test_job_store_database_is_read_from_environment(monkeypatch):
    monkeypatch.setenv("JOB_STORE", "Database")
    monkeypatch.setenv("REQUEST_TIMEOUT", "5")

    settings = Settings(_env_file=None)

    assert settings.uses_database is True
    assert settings.request_timeout == 5.0
