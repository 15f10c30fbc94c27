"""
Tests for the public codec functions.

This test module validates:
- encode/decode free functions and the constructor-returning variant
- Round trip of simple fields (modulo key casing)
- Async variants
- Splitting concatenated messages
"""

from __future__ import annotations

import pytest

from ami_message import (
    Message,
    adecode,
    aencode,
    decode,
    decode_message,
    encode,
    iter_messages,
)
from ami_message.config import CodecConfig

# =============================================================================
# Tests for encode / decode
# =============================================================================


class TestEncodeDecode:
    """Tests for the synchronous codec functions."""

    def test_encode_variables(self, originate_message: Message) -> None:
        """Test that variables encode as CRLF-terminated Variable: lines."""
        wire = encode(originate_message)
        lines = wire.split("\r\n")

        assert "Variable: foo=bar" in lines
        assert "Variable: baz=1" in lines
        assert wire.endswith("Variable: baz=1\r\n\r\n")

    def test_decode_populates_given_message(self) -> None:
        message = Message()
        result = decode("Response: Success\r\n\r\n", message)

        assert result is message
        assert message.get("response") == "Success"

    def test_decode_creates_message(self) -> None:
        message = decode("Response: Error\r\nMessage: Permission denied\r\n\r\n")

        assert isinstance(message, Message)
        assert message.get("message") == "Permission denied"

    def test_decode_with_config(self) -> None:
        message = decode(
            "Variable: foo=bar\r\n\r\n", config=CodecConfig(variables_mode="routed")
        )

        assert message.variables == {"foo": "bar"}

    def test_decode_message(self) -> None:
        message = decode_message("Event: FullyBooted\r\nStatus: Fully Booted\r\n\r\n")

        assert message.fields == {"event": "FullyBooted", "status": "Fully Booted"}

    def test_round_trip_simple_fields(self) -> None:
        """Test that colon-free fields survive a round trip, keys normalized."""
        original = Message()
        original.set("Action", "Login")
        original.set("Username", "admin")
        original.set("Secret", "s3cr3t")
        original.set("Events", "off")

        decoded = decode(encode(original))

        assert decoded.fields == {
            "action": "Login",
            "username": "admin",
            "secret": "s3cr3t",
            "events": "off",
        }

    def test_round_trip_normalized_keys_is_stable(self) -> None:
        """Test that a decoded message re-encodes to the same field set."""
        first = decode("Channel-State: 6\r\nUniqueid: 1.23\r\n\r\n")
        second = decode(encode(first))

        assert second.fields == first.fields


# =============================================================================
# Tests for async variants
# =============================================================================


class TestAsyncCodec:
    """Tests for aencode/adecode."""

    @pytest.mark.asyncio
    async def test_aencode(self, originate_message: Message) -> None:
        assert await aencode(originate_message) == encode(originate_message)

    @pytest.mark.asyncio
    async def test_adecode(self, command_response: str) -> None:
        message = await adecode(command_response)

        assert message.get("actionid") == "42"
        assert message.get("commandoutput") == "core show uptime: 10 minutes"

    @pytest.mark.asyncio
    async def test_adecode_in_place(self) -> None:
        message = Message()
        result = await adecode(
            "Variable: foo=bar\r\n\r\n",
            message,
            CodecConfig(variables_mode="routed"),
        )

        assert result is message
        assert message.variables == {"foo": "bar"}


# =============================================================================
# Tests for iter_messages
# =============================================================================


class TestIterMessages:
    """Tests for splitting concatenated messages."""

    def test_splits_on_blank_line(self) -> None:
        text = "Event: A\r\n\r\nEvent: B\r\nX: 1\r\n\r\n"

        assert list(iter_messages(text)) == [
            "Event: A\r\n\r\n",
            "Event: B\r\nX: 1\r\n\r\n",
        ]

    def test_yields_unterminated_tail(self) -> None:
        assert list(iter_messages("Event: A\r\n\r\nEvent: B\r\n")) == [
            "Event: A\r\n\r\n",
            "Event: B\r\n",
        ]

    def test_drops_empty_blocks(self) -> None:
        assert list(iter_messages("\r\n\r\nEvent: A\r\n\r\n\r\n")) == [
            "Event: A\r\n\r\n",
        ]

    def test_empty_text(self) -> None:
        assert list(iter_messages("")) == []

    def test_round_trip_of_several_messages(self, originate_message: Message) -> None:
        ping = Message()
        ping.set("Action", "Ping")
        text = encode(originate_message) + encode(ping)

        decoded = [decode_message(block) for block in iter_messages(text)]

        assert [m.get("action") for m in decoded] == ["Originate", "Ping"]
