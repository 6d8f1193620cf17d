"""Unit tests for custom exception hierarchy"""
import pytest
from datetime import datetime

import psycopg

from quizhub.exceptions import (
    QuizHubError,
    ValidationError,
    DataAccessError,
    StoreConnectionError,
    QueryError,
    RecordNotFoundError,
    AuthenticationError,
    ConfigurationError,
    wrap_external_exception
)


class TestQuizHubError:
    """Test base exception class"""

    def test_basic_exception(self):
        error = QuizHubError("Test error")
        assert error.message == "Test error"
        assert error.user_message == "An error occurred. Please try again."
        assert error.request_id is not None
        assert isinstance(error.timestamp, datetime)

    def test_exception_with_context(self):
        error = QuizHubError(
            message="Achievement save failed",
            user_id="user-123",
            operation="save_achievement_state",
            context={"collection": "users"},
            user_message="Could not save your progress"
        )
        assert error.user_id == "user-123"
        assert error.operation == "save_achievement_state"
        assert error.context["collection"] == "users"
        assert error.user_message == "Could not save your progress"

    def test_to_dict(self):
        error = QuizHubError("Test error", request_id="req-1")
        data = error.to_dict()

        assert data["error"] == "QuizHubError"
        assert data["message"] == "Test error"
        assert data["request_id"] == "req-1"
        assert "timestamp" in data


class TestDataAccessErrors:

    def test_hierarchy(self):
        assert issubclass(StoreConnectionError, DataAccessError)
        assert issubclass(QueryError, DataAccessError)
        assert issubclass(RecordNotFoundError, DataAccessError)
        assert issubclass(DataAccessError, QuizHubError)

    def test_query_error_does_not_mutate_caller_context(self):
        context = {"doc_id": "u1"}
        error = QueryError("insert failed", collection="users", context=context)

        assert error.context == {"doc_id": "u1", "collection": "users"}
        assert context == {"doc_id": "u1"}

    def test_record_not_found(self):
        error = RecordNotFoundError("missing", collection="users/u1/notifications", record_id="n1")

        assert error.record_id == "n1"
        assert error.user_message == "Record not found."


class TestOtherErrors:

    def test_validation_error_user_message(self):
        error = ValidationError("must be a non-empty string", field="user_id", value="")

        assert error.field == "user_id"
        assert error.user_message == "Invalid user_id: must be a non-empty string"

    def test_configuration_error(self):
        error = ConfigurationError("missing", config_key="DATABASE_URL")

        assert error.config_key == "DATABASE_URL"

    def test_authentication_error_default_message(self):
        assert AuthenticationError().message == "Authentication failed"


class TestWrapExternalException:

    def test_operational_error_becomes_connection_error(self):
        original = psycopg.OperationalError("connection refused")

        wrapped = wrap_external_exception(original, operation="get_document")

        assert isinstance(wrapped, StoreConnectionError)
        assert wrapped.cause is original

    def test_driver_error_becomes_query_error(self):
        wrapped = wrap_external_exception(
            psycopg.errors.UniqueViolation("duplicate key"),
            operation="add_document",
            context={"collection": "users/u1/notifications"}
        )

        assert isinstance(wrapped, QueryError)
        assert wrapped.collection == "users/u1/notifications"

    def test_unknown_error_becomes_data_access_error(self):
        wrapped = wrap_external_exception(TimeoutError("pool timeout"), operation="set_document")

        assert type(wrapped) is DataAccessError
        assert "set_document failed" in wrapped.message
