"""
Tests for settings validation.
"""
import os
import subprocess
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

from vitals_tracker.core.config import Settings


def test_defaults(monkeypatch):
    for name in ("VITALS_STORE_BACKEND", "VITALS_TIMEZONE", "VITALS_DB_DIR", "VITALS_DB_FILE"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.vitals_store_backend == "sqlite"
    assert settings.vitals_timezone == "UTC"
    assert settings.database_path.endswith("vitals.db")
    assert settings.vitals_report_include_charts is True


def test_backend_is_normalized():
    assert Settings(_env_file=None, vitals_store_backend=" Memory ").vitals_store_backend == "memory"


def test_unknown_backend_fails_fast():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, vitals_store_backend="mongodb")


def test_unknown_timezone_fails_fast():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, vitals_timezone="Mars/Olympus_Mons")


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("VITALS_PORT", "9001")
    monkeypatch.setenv("VITALS_REPORT_TITLE", "Blood work")
    settings = Settings(_env_file=None)
    assert settings.vitals_port == 9001
    assert settings.vitals_report_title == "Blood work"


def test_ensure_directories_creates_database_dir(tmp_path):
    db_dir = tmp_path / "nested" / "data"
    settings = Settings(_env_file=None, vitals_store_backend="sqlite", vitals_db_dir=str(db_dir))
    assert not db_dir.exists()

    settings.ensure_directories()
    assert db_dir.is_dir()


def test_analytics_import_loads_no_settings_or_fastapi(tmp_path):
    code = (
        "import sys\n"
        "import vitals_tracker.analytics\n"
        "assert 'vitals_tracker.core.config' not in sys.modules\n"
        "assert 'fastapi' not in sys.modules\n"
    )
    project_root = str(Path(__file__).resolve().parents[1])
    env = dict(
        os.environ,
        PYTHONPATH=os.pathsep.join(filter(None, [project_root, os.environ.get("PYTHONPATH")])),
        VITALS_STORE_BACKEND="sqlite",
        VITALS_DB_DIR=str(tmp_path / "data"),
    )
    result = subprocess.run([sys.executable, "-c", code], cwd=tmp_path, env=env, capture_output=True, text=True)

    assert result.returncode == 0, result.stderr
    assert not (tmp_path / "data").exists()
