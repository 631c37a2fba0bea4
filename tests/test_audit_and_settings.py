"""Tests for the audit logger and configuration."""

import pytest
from pydantic import ValidationError

from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.config import get_settings
from expense_tracker.config.settings import (
    AppSettings,
    StorageSettings,
    validate_all_settings,
)
from expense_tracker.models import AuditEventBuilder, AuditEventType


class TestAuditLogger:

    def test_log_returns_true_and_records(self):
        audit = AuditLogger()
        assert audit.log(AuditEventBuilder.user_signed_in("alice")) is True
        assert audit.recent_events[0].username == "alice"

    def test_recent_events_newest_first_and_bounded(self):
        audit = AuditLogger(history_size=2)
        audit.log_user_registered("a")
        audit.log_user_signed_in("a")
        audit.log_user_signed_out("a")

        assert [e.event_type for e in audit.recent_events] == [
            AuditEventType.USER_SIGNED_OUT,
            AuditEventType.USER_SIGNED_IN,
        ]

    def test_history_disabled(self):
        audit = AuditLogger(history_size=0)
        audit.log_ledger_unloaded("a")
        assert audit.recent_events == []

    def test_logging_after_configure(self):
        configure_logging("DEBUG", json_logs=False)
        audit = AuditLogger()
        audit.log_persistence_failed("a", "create", "disk full")
        audit.log_ledger_loaded("a", 0)
        assert len(audit.recent_events) == 2


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "EXPENSE_TRACKER_STORAGE_BACKEND",
        "EXPENSE_TRACKER_STORAGE_KEY_PREFIX",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


class TestSettings:

    def test_defaults(self, clean_env):
        storage = StorageSettings(_env_file=None)
        assert storage.backend == "file"
        assert storage.key_prefix == "expense-tracker"
        assert storage.quota_bytes == 5 * 1024 * 1024

    def test_env_override(self, clean_env):
        clean_env.setenv("EXPENSE_TRACKER_STORAGE_BACKEND", "memory")
        assert get_settings().storage.backend == "memory"

    def test_key_prefix_cannot_contain_separator(self):
        with pytest.raises(ValidationError):
            StorageSettings(key_prefix="a:b")

    def test_log_level_normalized(self):
        assert AppSettings(log_level=" debug ").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            AppSettings(log_level="LOUD")

    def test_validate_all_settings(self, clean_env):
        assert validate_all_settings() == {"storage": True, "app": True}

        clean_env.setenv("LOG_LEVEL", "LOUD")
        results = validate_all_settings()
        assert results["app"] is False
        assert "app_error" in results
