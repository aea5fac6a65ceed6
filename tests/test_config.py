"""Tests for OrphanageConfig: defaults, environment overrides, validation."""

import pytest
from pydantic import ValidationError

from backend.config import OrphanageConfig


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)  # no stray .env
    for var in ("DATABASE_URL", "BCRYPT_ROUNDS", "DEBUG", "BOOTSTRAP_ADMIN_EMAIL", "LOG_FILE"):
        monkeypatch.delenv(var, raising=False)

    config = OrphanageConfig()
    assert config.database_url == "sqlite+aiosqlite:///./orphanage.db"
    assert config.bcrypt_rounds == 12
    assert config.bootstrap_admin_email is None
    assert config.log_file == "orphanage.log"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BCRYPT_ROUNDS", "10")
    monkeypatch.setenv("bootstrap_admin_email", "root@x.com")

    config = OrphanageConfig()
    assert config.bcrypt_rounds == 10
    assert config.bootstrap_admin_email == "root@x.com"


def test_env_file(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("PORT", raising=False)
    (tmp_path / ".env").write_text("PORT=9000\nUNRELATED_SETTING=ignored\n")

    assert OrphanageConfig().port == 9000


@pytest.mark.parametrize("rounds", [3, 32])
def test_bcrypt_rounds_range(monkeypatch, tmp_path, rounds):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BCRYPT_ROUNDS", str(rounds))
    with pytest.raises(ValidationError):
        OrphanageConfig()
