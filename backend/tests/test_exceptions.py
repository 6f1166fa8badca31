"""Tests for custom exceptions."""

from src.core.exceptions import (
    _SAFE_MESSAGES,
    AuthenticationError,
    CompletionError,
    ConflictError,
    DatabaseError,
    ExternalServiceError,
    SetuException,
    ValidationError,
    sanitize_error,
)


def test_base_exception_attributes() -> None:
    """Test SetuException carries message, code, status and details."""
    exc = SetuException("boom", code="BOOM", status_code=418, details={"a": 1})
    assert str(exc) == "boom"
    assert exc.message == "boom"
    assert exc.code == "BOOM"
    assert exc.status_code == 418
    assert exc.details == {"a": 1}


def test_validation_error_keeps_every_violation() -> None:
    """Test ValidationError.from_errors joins messages and keeps the list."""
    exc = ValidationError.from_errors(["user_id is required", "message is required"])
    assert exc.status_code == 400
    assert exc.message == "user_id is required; message is required"
    assert exc.errors == ["user_id is required", "message is required"]
    assert exc.details["errors"] == exc.errors


def test_validation_error_single_message() -> None:
    exc = ValidationError("user_id and agent_id required")
    assert exc.errors == ["user_id and agent_id required"]


def test_status_codes() -> None:
    assert AuthenticationError().status_code == 401
    assert ConflictError("taken").status_code == 409
    assert DatabaseError().status_code == 500
    assert ExternalServiceError("groq").status_code == 502


def test_completion_error_records_upstream_status() -> None:
    """Test CompletionError is an ExternalServiceError with the upstream code."""
    exc = CompletionError("Completion API error: 429 rate limited", upstream_status=429)
    assert isinstance(exc, ExternalServiceError)
    assert exc.code == "COMPLETION_ERROR"
    assert exc.upstream_status == 429
    assert exc.details == {"service": "groq", "upstream_status": 429}


def test_public_message_hides_server_side_detail() -> None:
    """Test 5xx errors expose only a generic message."""
    exc = DatabaseError("relation chat_history does not exist")
    assert "chat_history" not in exc.public_message
    assert exc.public_message == "A database error occurred. Please try again."


def test_public_message_keeps_client_error_text() -> None:
    exc = ConflictError("Email already registered. Please login instead.")
    assert exc.public_message == "Email already registered. Please login instead."


def test_sanitize_error_uses_most_specific_type() -> None:
    """Test sanitize_error walks the MRO, preferring the subclass message."""
    assert sanitize_error(CompletionError("x")) == (
        "The assistant is temporarily unavailable. Please try again."
    )
    assert sanitize_error(ExternalServiceError("supabase")) == (
        "An external service is temporarily unavailable."
    )


def test_sanitize_error_unknown_exception() -> None:
    assert sanitize_error(RuntimeError("secret detail")) == "An error occurred. Please try again."


def test_every_error_type_has_a_safe_message() -> None:
    """Test each concrete error maps to its own generic message."""
    errors = [
        AuthenticationError(),
        ValidationError("bad"),
        ConflictError("taken"),
        DatabaseError(),
        ExternalServiceError("groq"),
        CompletionError("boom"),
    ]
    for exc in errors:
        assert _SAFE_MESSAGES[type(exc).__name__] == sanitize_error(exc)
    assert set(_SAFE_MESSAGES) == {type(exc).__name__ for exc in errors}
