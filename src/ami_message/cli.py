"""
Command line interface for the message codec.

Usage:
    ami-message [--config PATH] [--log-level LEVEL] [--debug]
                [--variables-mode {compat,routed}] decode [FILE]
    ami-message [...] encode [FILE]

``decode`` reads wire text (one or more messages) and prints one JSON object
per message. ``encode`` reads a JSON object, or a list of them, shaped like
``{"fields": {...}, "variables": {...}}`` and prints the wire text.
FILE defaults to stdin.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, BinaryIO

from ami_message import __version__
from ami_message.codec import decode_message, encode, iter_messages
from ami_message.config import AppConfig, cli_overrides, config_arguments, load_config
from ami_message.errors import InternalError, InvalidArgumentError, MessageError
from ami_message.logging import get_logger, setup_logging
from ami_message.message import Message

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="ami-message",
        description="Convert manager protocol messages between wire text and JSON",
        parents=[config_arguments()],
    )
    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", required=True)

    decode_parser = subparsers.add_parser(
        "decode", help="Decode wire text to JSON lines"
    )
    decode_parser.add_argument(
        "file", nargs="?", default="-", help="Input file (default: stdin)"
    )

    encode_parser = subparsers.add_parser("encode", help="Encode JSON to wire text")
    encode_parser.add_argument(
        "file", nargs="?", default="-", help="Input file (default: stdin)"
    )

    return parser


def _read_input(path: str, stdin: BinaryIO) -> bytes:
    if path == "-":
        return stdin.read()
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise InvalidArgumentError(
            f"Cannot read input file: {e}", details={"path": path}
        ) from e


def message_from_dict(data: Any) -> Message:
    """
    Build a message from its JSON representation.

    Args:
        data: Object with a "fields" mapping and an optional "variables"
            mapping, both of strings.

    Returns:
        The populated message.

    Raises:
        InvalidArgumentError: If the object does not have that shape.
    """
    if not isinstance(data, dict):
        raise InvalidArgumentError(
            "Message must be a JSON object", details={"type": type(data).__name__}
        )

    message = Message()
    for section, setter in (
        ("fields", message.set),
        ("variables", message.set_variable),
    ):
        entries = data.get(section, {})
        if not isinstance(entries, dict):
            raise InvalidArgumentError(
                f"'{section}' must be a JSON object", details={"section": section}
            )
        for name, value in entries.items():
            if not isinstance(value, str):
                raise InvalidArgumentError(
                    f"Value of {section[:-1]} '{name}' must be a string",
                    details={"section": section, "name": name},
                )
            setter(name, value)

    return message


def run_decode(raw: bytes, config: AppConfig) -> list[str]:
    """Decode every message in ``raw`` and return their JSON lines."""
    codec = config.codec
    text = raw.decode(codec.encoding, codec.encoding_errors)
    output = []
    for block in iter_messages(text):
        message = decode_message(block, codec)
        output.append(json.dumps(message.to_dict(), ensure_ascii=False))
    logger.info("Decoded messages", extra={"message_count": len(output)})
    return output


def run_encode(raw: bytes, config: AppConfig) -> str:
    """Encode the JSON message(s) in ``raw`` and return the wire text."""
    codec = config.codec
    try:
        data = json.loads(raw.decode(codec.encoding, codec.encoding_errors))
    except json.JSONDecodeError as e:
        raise InvalidArgumentError(
            f"Invalid JSON input: {e.msg}",
            details={"line": e.lineno, "column": e.colno},
        ) from e

    items = data if isinstance(data, list) else [data]
    wire = "".join(encode(message_from_dict(item)) for item in items)
    logger.info("Encoded messages", extra={"message_count": len(items)})
    return wire


def main(
    argv: list[str] | None = None,
    stdin: BinaryIO | None = None,
    stdout: BinaryIO | None = None,
) -> int:
    """
    Run the command line interface.

    Args:
        argv: Arguments without the program name. Defaults to sys.argv[1:].
        stdin: Binary input stream. Defaults to sys.stdin.buffer.
        stdout: Binary output stream. Defaults to sys.stdout.buffer.

    Returns:
        Process exit code: 0 on success, 1 on error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    stdin = stdin if stdin is not None else sys.stdin.buffer
    stdout = stdout if stdout is not None else sys.stdout.buffer

    try:
        config = load_config(overrides=cli_overrides(args))
    except (FileNotFoundError, ValueError) as e:
        # pydantic.ValidationError is a ValueError
        print(f"ami-message: configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging)
    codec = config.codec

    try:
        raw = _read_input(args.file, stdin)
        if args.command == "decode":
            lines = run_decode(raw, config)
            payload = "".join(f"{line}\n" for line in lines)
        else:
            payload = run_encode(raw, config)
        stdout.write(payload.encode(codec.encoding, codec.encoding_errors))
        stdout.flush()
    except MessageError as e:
        logger.error(
            "Command failed",
            extra={"command": args.command, "error": e.to_dict()},
        )
        print(f"ami-message: {e.message}", file=sys.stderr)
        return 1
    except UnicodeError as e:
        error = InternalError(f"Encoding failure: {e}")
        logger.exception(
            "Command failed",
            extra={"command": args.command, "error": error.to_dict()},
        )
        print(f"ami-message: {error.message}", file=sys.stderr)
        return 1

    return 0
