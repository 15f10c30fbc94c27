"""
Wire format primitives for manager-style text protocol messages.

A message on the wire is a sequence of CRLF-terminated lines followed by one
empty line:

    Action: Originate
    Channel: SIP/100
    Variable: foo=bar
    <blank line>

Format rules:
- Fields are ``Key: Value`` lines; only the first colon separates key and value.
- Channel variables are ``Variable: key=value`` lines.
- A line containing ``--END COMMAND--`` carries raw command output and is not
  split on colons.
- There is no escaping. A value containing a colon or CRLF cannot be told
  apart from protocol structure.
"""

from __future__ import annotations

# =============================================================================
# Protocol Constants
# =============================================================================

# Line delimiter
EOL = "\r\n"

# A serialized message ends with an empty line
TERMINATOR = EOL + EOL

# Marker appended to the output of the "Command" action
COMMAND_OUTPUT_SENTINEL = "--END COMMAND--"

# Synthetic field holding a line that carried the sentinel
COMMAND_OUTPUT_KEY = "CommandOutput"

VARIABLE_KEY = "Variable"


# =============================================================================
# Line Helpers
# =============================================================================


def normalize_key(name: str) -> str:
    """
    Normalize a field name for storage and lookup.

    Only the first hyphen is replaced with an underscore, then the result is
    lowercased. ``Channel-State-Desc`` becomes ``channel_state-desc``.

    Args:
        name: Field name as found on the wire or passed by a caller.

    Returns:
        The normalized key.
    """
    return name.replace("-", "_", 1).lower()


def split_lines(text: str) -> list[str]:
    """Split a message block on CRLF. A bare LF is not a delimiter."""
    return text.split(EOL)


def parse_line(line: str) -> tuple[str, str]:
    """
    Split one wire line into its raw key and raw value.

    Neither part is normalized or trimmed here.

    - A line containing the command output sentinel maps to the
      ``CommandOutput`` key, with the sentinel removed from the value.
    - Otherwise the first colon separates key and value. Any further colons
      belong to the value (``ListCommands`` responses rely on this).
    - A line without a colon yields the whole line as both key and value.

    Args:
        line: A single line without its delimiter.

    Returns:
        Tuple of (key, value).
    """
    if COMMAND_OUTPUT_SENTINEL in line:
        return COMMAND_OUTPUT_KEY, line.replace(COMMAND_OUTPUT_SENTINEL, "", 1)

    key, sep, value = line.partition(":")
    if not sep:
        return line, line
    return key, value


def parse_variable(text: str) -> tuple[str, str]:
    """
    Split the value of a ``Variable:`` line into name and value.

    Only the first ``=`` separates them. Without an ``=`` the whole text is the
    name and the value is empty.
    """
    name, _, value = text.partition("=")
    return name, value


def format_field(name: str, value: str) -> str:
    """Format a field as a CRLF-terminated ``Key: Value`` line."""
    return f"{name}: {value}{EOL}"


def format_variable(name: str, value: str) -> str:
    """Format a variable as a CRLF-terminated ``Variable: key=value`` line."""
    return f"{VARIABLE_KEY}: {name}={value}{EOL}"
