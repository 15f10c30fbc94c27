"""
Pytest configuration for the message codec tests.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

import pytest

from ami_message.message import Message


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Undo setup_logging changes so caplog keeps working across tests."""
    yield
    logger = logging.getLogger("ami_message")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture(autouse=True)
def _isolated_config(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Keep host config files and AMI_MESSAGE_* variables out of the tests."""
    missing = tmp_path_factory.mktemp("etc") / "config.yml"
    monkeypatch.setattr("ami_message.config.DEFAULT_CONFIG_PATH", missing)
    for key in list(os.environ):
        if key.startswith("AMI_MESSAGE_"):
            monkeypatch.delenv(key)


@pytest.fixture
def originate_message() -> Message:
    """An outbound Originate action with two channel variables."""
    message = Message()
    message.set("Action", "Originate")
    message.set("ActionID", "1234")
    message.set("Channel", "SIP/100")
    message.set_variable("foo", "bar")
    message.set_variable("baz", "1")
    return message


@pytest.fixture
def command_response() -> str:
    """Wire text of a Command action response."""
    return (
        "Response: Follows\r\n"
        "Privilege: Command\r\n"
        "ActionID: 42\r\n"
        "Name/username: 100/100\r\n"
        "core show uptime: 10 minutes --END COMMAND--\r\n"
        "\r\n"
    )
