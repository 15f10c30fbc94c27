"""
The Message data container.

A Message holds ordinary fields (``Key: Value`` lines) and channel variables
(``Variable: key=value`` lines) in two separate namespaces. Fields are stored
under their normalized key (first hyphen to underscore, lowercased) while the
name last passed to ``set`` is kept for serialization.

Example:
    >>> msg = Message()
    >>> msg.set("Action", "Originate")
    >>> msg.set_variable("foo", "bar")
    >>> msg.encode()
    'Action: Originate\\r\\nVariable: foo=bar\\r\\n\\r\\n'
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from ami_message.config import CodecConfig
from ami_message.errors import InvalidArgumentError
from ami_message.logging import get_logger
from ami_message.wire import (
    EOL,
    format_field,
    format_variable,
    normalize_key,
    parse_line,
    parse_variable,
    split_lines,
)

logger = get_logger(__name__)


class Message:
    """
    A protocol message: ordered fields, variables and the raw decoded lines.

    Attributes:
        variables: Channel variables, emitted as ``Variable:`` lines.
        lines: Raw lines from the last ``decode`` call. Diagnostics only,
            never serialized.
    """

    def __init__(self) -> None:
        """Create an empty message."""
        # normalized key -> (name as given, value)
        self._fields: dict[str, tuple[str, str]] = {}
        self.variables: dict[str, str] = {}
        self.lines: list[str] = []

    # -------------------------------------------------------------------------
    # Fields
    # -------------------------------------------------------------------------

    def _resolve_key(self, name: str) -> str:
        # normalize_key is not idempotent: "a_b-c" would become "a_b_c", so an
        # already normalized key that is stored is matched as-is first.
        lowered = name.lower()
        if lowered in self._fields:
            return lowered
        return normalize_key(name)

    def _store(self, key: str, name: str, value: str) -> None:
        self._fields[key] = (name, value)

    def set(self, name: str, value: str) -> None:
        """
        Store a field value, overwriting any previous value for the key.

        Args:
            name: Field name. Stored under its normalized form, the name
                itself is kept for serialization.
            value: Field value. Not validated or converted.
        """
        self._store(self._resolve_key(name), name, value)

    def get(self, name: str) -> str | None:
        """
        Return the value of a field.

        Args:
            name: Field name as sent on the wire (any casing) or in its
                normalized form.

        Returns:
            The stored value, or None if the field was never set.
        """
        entry = self._fields.get(self._resolve_key(name))
        if entry is None:
            return None
        return entry[1]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._resolve_key(name) in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def items(self) -> Iterator[tuple[str, str]]:
        """Iterate over (name, value) pairs in insertion order."""
        return iter(self._fields.values())

    @property
    def fields(self) -> dict[str, str]:
        """Ordered copy of the fields, keyed by the name passed to ``set``."""
        return dict(self._fields.values())

    # -------------------------------------------------------------------------
    # Variables
    # -------------------------------------------------------------------------

    def set_variable(self, name: str, value: str) -> None:
        """Store a channel variable. Variable names are not normalized."""
        self.variables[name] = value

    def get_variable(self, name: str) -> str | None:
        """Return a channel variable, or None if absent."""
        return self.variables.get(name)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def encode(self) -> str:
        """
        Serialize the message to wire text.

        Fields come first in insertion order, then one ``Variable:`` line per
        variable, then the empty terminating line. Values are not escaped or
        trimmed.

        Returns:
            The CRLF-delimited message text.
        """
        output = [format_field(name, value) for name, value in self._fields.values()]
        output.extend(
            format_variable(name, value) for name, value in self.variables.items()
        )
        output.append(EOL)
        return "".join(output)

    def decode(self, data: str | bytes, config: CodecConfig | None = None) -> None:
        """
        Populate this message from a complete wire text block.

        Each CRLF-delimited line is split into key and value (see
        ``ami_message.wire.parse_line``). Keys are normalized, values are
        stripped of surrounding whitespace, and the result is stored with
        ``set``. Blank lines, including the terminator, are skipped.

        With ``variables_mode="routed"``, lines keyed ``variable`` are parsed
        into ``variables``; otherwise they are stored as an ordinary
        ``variable`` field and the last one wins.

        Malformed lines never raise.

        Args:
            data: Message text. Bytes are decoded using the configured
                encoding and error handler.
            config: Codec settings. Defaults to ``CodecConfig()``.

        Raises:
            InvalidArgumentError: If ``data`` is neither str nor bytes.
        """
        if config is None:
            config = CodecConfig()

        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode(config.encoding, config.encoding_errors)
        elif not isinstance(data, str):
            raise InvalidArgumentError(
                f"Cannot decode object of type {type(data).__name__}",
                details={"type": type(data).__name__},
            )

        self.lines = split_lines(data)
        route_variables = config.route_variables

        for line in self.lines:
            if not line.strip():
                continue

            raw_key, raw_value = parse_line(line)
            key = normalize_key(raw_key)
            value = raw_value.strip()

            if route_variables and key == "variable":
                name, var_value = parse_variable(value)
                if "=" not in value:
                    logger.debug(
                        "Variable line without '='",
                        extra={"line": line},
                    )
                self.set_variable(name, var_value)
                continue

            self._store(key, key, value)

        logger.debug(
            "Decoded message",
            extra={
                "line_count": len(self.lines),
                "field_count": len(self._fields),
                "variable_count": len(self.variables),
            },
        )

    @classmethod
    def from_wire(cls, data: str | bytes, config: CodecConfig | None = None) -> Message:
        """Create a message and decode ``data`` into it."""
        message = cls()
        message.decode(data, config)
        return message

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON serialization."""
        return {"fields": self.fields, "variables": dict(self.variables)}

    def __repr__(self) -> str:
        return f"Message(fields={self.fields!r}, variables={self.variables!r})"
