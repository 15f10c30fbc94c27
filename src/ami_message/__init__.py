"""
Manager protocol message codec.

This package converts between structured messages and the CRLF-delimited
``Key: Value`` text format used by manager-style protocols. Transport,
login sequencing and per-action semantics live with the caller.
"""

__version__ = "0.1.0"

from ami_message.codec import (
    adecode,
    aencode,
    decode,
    decode_message,
    encode,
    iter_messages,
)
from ami_message.message import Message

__all__ = [
    "Message",
    "adecode",
    "aencode",
    "decode",
    "decode_message",
    "encode",
    "iter_messages",
]
