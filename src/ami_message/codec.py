"""
Public encode/decode operations.

These wrap the ``Message`` methods for callers that prefer free functions,
plus async variants that run the work in the default executor so an event
loop driving a connection is not blocked by large messages.
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Iterator

from ami_message.config import CodecConfig
from ami_message.message import Message
from ami_message.wire import TERMINATOR


def encode(message: Message) -> str:
    """
    Serialize a message to wire text.

    Args:
        message: The message to serialize.

    Returns:
        CRLF-delimited text ending with an empty line.
    """
    return message.encode()


def decode(
    data: str | bytes,
    message: Message | None = None,
    config: CodecConfig | None = None,
) -> Message:
    """
    Decode wire text into a message.

    Args:
        data: One complete message block.
        message: Message to populate in place. A new one is created if None.
        config: Codec settings.

    Returns:
        The populated message.

    Raises:
        InvalidArgumentError: If ``data`` is neither str nor bytes.
    """
    if message is None:
        message = Message()
    message.decode(data, config)
    return message


def decode_message(data: str | bytes, config: CodecConfig | None = None) -> Message:
    """Decode wire text into a new message."""
    return Message.from_wire(data, config)


async def aencode(message: Message) -> str:
    """Async variant of ``encode``."""
    return await asyncio.get_running_loop().run_in_executor(None, message.encode)


async def adecode(
    data: str | bytes,
    message: Message | None = None,
    config: CodecConfig | None = None,
) -> Message:
    """
    Async variant of ``decode``.

    The caller must not share ``message`` with another decode in flight.
    """
    return await asyncio.get_running_loop().run_in_executor(
        None, functools.partial(decode, data, message, config)
    )


def iter_messages(text: str) -> Iterator[str]:
    """
    Split a text block holding several complete messages.

    Each yielded block keeps its terminating empty line. A trailing block
    without terminator is yielded as-is; empty blocks are dropped.

    Args:
        text: Concatenated wire messages.

    Yields:
        The text of each message.
    """
    start = 0
    while True:
        end = text.find(TERMINATOR, start)
        if end == -1:
            break
        end += len(TERMINATOR)
        block = text[start:end]
        start = end
        if block.strip():
            yield block

    tail = text[start:]
    if tail.strip():
        yield tail
