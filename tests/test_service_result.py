"""Tests for ServiceResult and the exception-to-error mapping."""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from campusqa.core.exceptions import (
    AuthorizationError,
    ConcurrencyError,
    DuplicateError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from campusqa.services.base.base_service import BaseService
from campusqa.services.base.service_result import ErrorCode, ErrorSeverity, ServiceResult


class TestServiceResult:
    def test_success(self):
        result = ServiceResult.success(3, message="ok", metadata={"changed": True})

        assert result
        assert result.unwrap() == 3
        assert result.error_code is None
        assert result.to_dict()["data"] == 3

    def test_failure_cannot_unwrap(self):
        result = ServiceResult.not_found("Review", 9)

        assert not result
        assert result.error_code == ErrorCode.NOT_FOUND
        assert result.message == "Review not found (ID: 9)"
        assert result.unwrap_or("fallback") == "fallback"
        with pytest.raises(ValueError):
            result.unwrap()

    def test_map_and_metadata(self):
        result = ServiceResult.success(2).map(lambda x: x * 10).add_metadata("k", "v")

        assert result.data == 20
        assert result.metadata == {"k": "v"}
        assert ServiceResult.conflict("nope").map(lambda x: x).error_code == ErrorCode.CONFLICT

    def test_failure_to_dict(self):
        payload = ServiceResult.validation_failure("bad", field="rating").to_dict()

        assert payload["is_success"] is False
        assert payload["error"]["code"] == "VALIDATION_ERROR"
        assert payload["error"]["field"] == "rating"
        assert payload["error"]["severity"] == "WARNING"

    def test_forbidden(self):
        result = ServiceResult.forbidden("maan", "flag content", ["staff"])
        assert result.error.details == {"username": "maan", "required_roles": ["staff"]}


class TestExceptionMapping:
    @pytest.fixture
    def service(self, db, config):
        return BaseService(db, config)

    @pytest.mark.parametrize("exception, code", [
        (ValidationError("bad", field="rating"), ErrorCode.VALIDATION_ERROR),
        (ValueError("bad"), ErrorCode.VALIDATION_ERROR),
        (NotFoundError("Review", 1), ErrorCode.NOT_FOUND),
        (AuthorizationError("no"), ErrorCode.INSUFFICIENT_PERMISSIONS),
        (ConcurrencyError("raced"), ErrorCode.CONFLICT),
        (DuplicateError("dup"), ErrorCode.CONFLICT),
        (StorageError("disk"), ErrorCode.STORAGE_ERROR),
        (RuntimeError("boom"), ErrorCode.INTERNAL_ERROR),
    ])
    def test_codes(self, service, exception, code):
        result = service._handle_exception(exception, "do thing", "ref")

        assert result.error.code == code
        assert result.error.details["entity_ref"] == "ref"

    def test_expected_failures_are_warnings(self, service):
        assert service._handle_exception(ValidationError("x"), "op").error.severity == ErrorSeverity.WARNING
        assert service._handle_exception(RuntimeError("x"), "op").error.severity == ErrorSeverity.ERROR

    def test_unexpected_error_message_is_generic(self, service):
        result = service._handle_exception(RuntimeError("secret"), "load reviews")
        assert result.message == "Failed to load reviews"
        assert result.error.details["error"] == "secret"

    def test_translate_db_errors(self):
        integrity = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
        locked = OperationalError("BEGIN", {}, Exception("database is locked"))
        other = OperationalError("SELECT", {}, Exception("no such table"))

        assert isinstance(BaseService._translate_db_error(integrity), DuplicateError)
        assert isinstance(BaseService._translate_db_error(locked), ConcurrencyError)
        translated = BaseService._translate_db_error(other)
        assert type(translated) is StorageError

    def test_require_int_in_range_rejects_bool(self):
        with pytest.raises(ValidationError):
            BaseService._require_int_in_range(True, "rating", 1, 5)
        assert BaseService._require_int_in_range(5, "rating", 1, 5) == 5
