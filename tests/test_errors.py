"""
Tests for the errors module.

This test module validates:
- MessageError base class functionality
- Error subclasses and their codes
- Error serialization (to_dict)
"""

from __future__ import annotations

import pytest

from ami_message.errors import InternalError, InvalidArgumentError, MessageError

# =============================================================================
# Tests for MessageError Base Class
# =============================================================================


class TestMessageError:
    """Tests for MessageError base class."""

    def test_init_with_all_args(self) -> None:
        error = MessageError(
            error_code="test_error",
            message="Test error message",
            details={"key": "value"},
        )

        assert error.error_code == "test_error"
        assert error.message == "Test error message"
        assert error.details == {"key": "value"}

    def test_init_with_minimal_args(self) -> None:
        error = MessageError(error_code="test_error", message="Test message")

        assert error.details == {}

    def test_str_representation(self) -> None:
        assert str(MessageError("test_error", "Test error message")) == (
            "Test error message"
        )

    def test_repr_representation(self) -> None:
        error = MessageError("test_error", "Oops", {"n": 1})

        assert repr(error) == (
            "MessageError(error_code='test_error', message='Oops', details={'n': 1})"
        )

    def test_to_dict(self) -> None:
        error = MessageError("test_error", "Oops", {"n": 1})

        assert error.to_dict() == {
            "error_code": "test_error",
            "message": "Oops",
            "details": {"n": 1},
        }

    def test_can_be_raised_and_caught(self) -> None:
        with pytest.raises(MessageError, match="boom"):
            raise MessageError("internal", "boom")


# =============================================================================
# Tests for Subclasses
# =============================================================================


class TestErrorSubclasses:
    """Tests for MessageError subclasses."""

    @pytest.mark.parametrize(
        ("error_class", "code"),
        [
            (InvalidArgumentError, "invalid_argument"),
            (InternalError, "internal"),
        ],
    )
    def test_error_codes(self, error_class: type[MessageError], code: str) -> None:
        error = error_class("message", {"detail": True})

        assert isinstance(error, MessageError)
        assert error.error_code == code
        assert error.details == {"detail": True}

    def test_repr_uses_subclass_name(self) -> None:
        assert repr(InvalidArgumentError("bad")).startswith("InvalidArgumentError(")
