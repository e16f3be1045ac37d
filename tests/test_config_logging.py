"""Tests for settings, logging setup and the database helpers."""

import json
import logging

import pytest
from pydantic import ValidationError as SettingsValidationError
from sqlalchemy import inspect, text

from campusqa.config.settings import Settings
from campusqa.core.logging import get_logger, setup_logging
from campusqa.db.init_db import drop_db, init_db, reset_db
from campusqa.db.session import create_engine_from_settings, session_scope
from campusqa.models.review import TrustedReviewer


class TestSettings:
    def test_defaults(self):
        config = Settings()

        assert config.API_V1_STR == "/api/v1"
        assert config.LOG_FORMAT == "text"
        assert Settings(DATABASE_URL="sqlite://").is_sqlite()

    def test_log_level_normalized(self):
        assert Settings(LOG_LEVEL="warning").LOG_LEVEL == "WARNING"

    def test_invalid_log_level(self):
        with pytest.raises(SettingsValidationError):
            Settings(LOG_LEVEL="LOUD")

    def test_invalid_log_format(self):
        with pytest.raises(SettingsValidationError):
            Settings(LOG_FORMAT="xml")

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("ENFORCE_ROLE_CHECKS", "false")
        monkeypatch.setenv("PROJECT_NAME", "Campus QA Test")

        config = Settings()

        assert config.ENFORCE_ROLE_CHECKS is False
        assert config.APP_NAME == "Campus QA Test"

    def test_environment_helpers(self):
        assert Settings(ENVIRONMENT="production").is_production()
        assert Settings().is_development()


class TestLogging:
    def teardown_method(self):
        setup_logging(Settings(LOG_LEVEL="INFO"))

    def test_json_logs_to_file(self, tmp_path):
        log_file = tmp_path / "logs" / "campusqa.log"
        setup_logging(Settings(LOG_FORMAT="json", LOG_FILE=str(log_file), LOG_LEVEL="INFO"))

        get_logger("campusqa.tests").info("review submitted", extra={"review_id": 7})
        for handler in logging.getLogger("campusqa").handlers:
            handler.flush()

        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["message"] == "review submitted"
        assert record["review_id"] == 7
        assert record["level"] == "INFO"
        assert record["logger"] == "campusqa.tests"

    def test_setup_replaces_handlers(self):
        setup_logging(Settings())
        setup_logging(Settings())

        package_logger = logging.getLogger("campusqa")
        assert len(package_logger.handlers) == 1
        assert package_logger.propagate is False

    def test_adapter_context(self, caplog):
        logger = get_logger("campusqa.tests").add_context(request_id="abc")
        package_logger = logging.getLogger("campusqa")
        package_logger.propagate = True
        try:
            with caplog.at_level(logging.INFO, logger="campusqa"):
                logger.info("hello")
        finally:
            package_logger.propagate = False

        assert caplog.records[-1].request_id == "abc"


class TestDatabaseHelpers:
    def test_init_and_drop(self, tmp_path):
        engine = create_engine_from_settings(f"sqlite:///{tmp_path / 'qa.db'}")
        init_db(engine)

        assert {"reviews", "trusted_reviewers", "flags", "users"} <= set(inspect(engine).get_table_names())

        drop_db(engine)
        assert inspect(engine).get_table_names() == []
        engine.dispose()

    def test_reset_clears_rows(self, engine, session_factory):
        with session_scope(session_factory) as session:
            session.add(TrustedReviewer(student_username="maan", reviewer_username="alex", weight=2))

        reset_db(engine)

        with session_scope(session_factory) as session:
            assert session.get(TrustedReviewer, ("maan", "alex")) is None

    def test_sqlite_foreign_keys_enabled(self, engine):
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_session_scope_rolls_back(self, session_factory):
        with pytest.raises(RuntimeError):
            with session_scope(session_factory) as session:
                session.add(TrustedReviewer(student_username="maan", reviewer_username="alex", weight=2))
                session.flush()
                raise RuntimeError("abort")

        with session_scope(session_factory) as session:
            assert session.get(TrustedReviewer, ("maan", "alex")) is None
