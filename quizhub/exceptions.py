"""
Standardized exception hierarchy for QuizHub
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

import psycopg

logger = logging.getLogger(__name__)


class QuizHubError(Exception):
    """
    Base exception for all QuizHub errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise QuizHubError(
            message="Failed to save achievements",
            user_id="uid-123",
            operation="check_and_update_achievements",
            context={"collection": "users"}
        )
    """

    def __init__(
        self,
        message: str,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.user_id = user_id
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "user_id": self.user_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (User Input)
# ==========================================

class ValidationError(QuizHubError):
    """
    Raised when user input fails validation

    Examples:
    - Attempt with more correct answers than questions
    - Empty user id
    - Unknown sort direction
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": value},
            **kwargs
        )


# ==========================================
# Data Access Errors
# ==========================================

class DataAccessError(QuizHubError):
    """
    Any failure reading or writing the document store.

    Propagated to the caller; the engine never retries.
    """

    def __init__(self, message: str, user_message: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            user_message=user_message or "We couldn't load or save your progress. Please try again.",
            **kwargs
        )


class StoreConnectionError(DataAccessError):
    """Document store connection failed"""

    def __init__(self, message: str = "Document store connection failed", **kwargs):
        super().__init__(
            message=message,
            user_message="We're having trouble connecting to the database. Please try again in a moment.",
            **kwargs
        )


class QueryError(DataAccessError):
    """Document store read or write failed"""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        **kwargs
    ):
        self.collection = collection
        context = dict(kwargs.pop("context", None) or {})
        context.setdefault("collection", collection)
        super().__init__(
            message=message,
            user_message="We encountered an issue saving your data. Please try again.",
            context=context,
            **kwargs
        )


class RecordNotFoundError(DataAccessError):
    """Requested document does not exist"""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        record_id: Optional[str] = None,
        **kwargs
    ):
        self.collection = collection
        self.record_id = record_id
        super().__init__(
            message=message,
            user_message="Record not found.",
            context={"collection": collection, "record_id": record_id},
            **kwargs
        )


# ==========================================
# Authentication
# ==========================================

class AuthenticationError(QuizHubError):
    """Authentication failed"""

    def __init__(
        self,
        message: str = "Authentication failed",
        **kwargs
    ):
        super().__init__(
            message=message,
            user_message="Authentication failed. Please check your credentials.",
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(QuizHubError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The system is not properly configured. Please contact support.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_external_exception(
    error: Exception,
    operation: str,
    user_id: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> QuizHubError:
    """
    Wrap driver exceptions (psycopg, pool timeouts) into our exception hierarchy

    Args:
        error: Original exception
        operation: What operation was being performed
        user_id: User ID if applicable
        context: Additional context

    Returns:
        Appropriate DataAccessError subclass

    Example:
        try:
            await cur.execute(query, params)
        except psycopg.Error as e:
            raise wrap_external_exception(
                e,
                operation="get_document",
                context={"collection": "users"}
            ) from e
    """
    if isinstance(error, psycopg.OperationalError):
        return StoreConnectionError(
            message=f"Document store connection failed: {error}",
            user_id=user_id,
            operation=operation,
            context=context,
            cause=error
        )
    elif isinstance(error, psycopg.Error):
        return QueryError(
            message=f"Document store query failed: {error}",
            collection=(context or {}).get("collection"),
            user_id=user_id,
            operation=operation,
            context=context,
            cause=error
        )

    # Generic fallback
    return DataAccessError(
        message=f"{operation} failed: {error}",
        user_id=user_id,
        operation=operation,
        context=context,
        cause=error
    )
