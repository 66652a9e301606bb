# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the user-facing message context and framed engine messages."""

import io

import pytest

from multiscan.errors import MessageFormatError
from multiscan.messaging import (
    DIRECTORY_WITHOUT_PATTERNS,
    END,
    ENGINE_SKIPPED,
    START,
    Message,
    MessageHandler,
    MessageType,
    Messenger,
    encode_message,
    extract_messages,
)


def test_encoded_messages_are_framed() -> None:
    frame = encode_message(Message(key="custom", args=("a",)))

    assert frame.startswith(START)
    assert frame.endswith(END)
    assert '"key":"custom"' in frame


def test_extract_messages_strips_frames_from_output() -> None:
    first = Message(key=ENGINE_SKIPPED, args=("pmd", "no matching rules"), verbose=True)
    second = Message(key="progress", type=MessageType.INFO, handler=MessageHandler.INTERNAL)
    text = f"line one\n{encode_message(first)}\nline two\n{encode_message(second)}"

    messages, residual = extract_messages(text)

    assert [message.key for message in messages] == [ENGINE_SKIPPED, "progress"]
    assert messages[0].args == ("pmd", "no matching rules")
    assert messages[0].verbose is True
    assert messages[1].handler is MessageHandler.INTERNAL
    assert residual == "line one\n\nline two\n"


def test_extract_messages_without_frames_returns_text() -> None:
    assert extract_messages("plain output") == ([], "plain output")


def test_unterminated_frame_is_rejected() -> None:
    with pytest.raises(MessageFormatError, match="Unterminated"):
        extract_messages(f'{START}{{"key": "broken"}}')


def test_invalid_frame_payload_is_rejected() -> None:
    with pytest.raises(MessageFormatError, match="Invalid message frame"):
        extract_messages(f"{START}not json{END}")


def test_templates_render_arguments() -> None:
    message = Message(key=DIRECTORY_WITHOUT_PATTERNS, args=("graph", "src"))

    assert message.render() == "graph declares no target patterns; analysing directory src as a whole."
    assert Message(key="unknownKey", args=("x", "y")).render() == "unknownKey: x, y"
    assert Message(key=ENGINE_SKIPPED).render() == ENGINE_SKIPPED


def test_identical_warnings_are_displayed_once(console_buffer: io.StringIO, messenger: Messenger) -> None:
    messenger.warn(DIRECTORY_WITHOUT_PATTERNS, ("graph", "src"))
    messenger.warn(DIRECTORY_WITHOUT_PATTERNS, ("graph", "src"))
    messenger.warn(DIRECTORY_WITHOUT_PATTERNS, ("graph", "lib"))

    output = console_buffer.getvalue()
    assert output.count("analysing directory src") == 1
    assert output.count("analysing directory lib") == 1
    assert len(messenger.history) == 3


def test_verbose_messages_need_verbose_messenger(console_buffer: io.StringIO, quiet_console) -> None:
    quiet = Messenger(console=quiet_console)
    quiet.warn(ENGINE_SKIPPED, ("pmd", "no matching rules"), verbose=True)
    assert console_buffer.getvalue() == ""
    assert len(quiet.history) == 1

    chatty = Messenger(console=quiet_console, verbose=True)
    chatty.warn(ENGINE_SKIPPED, ("pmd", "no matching rules"), verbose=True)
    assert "pmd was not run: no matching rules." in console_buffer.getvalue()


def test_relay_emits_ux_messages_only(console_buffer: io.StringIO, messenger: Messenger) -> None:
    shown = Message(key=ENGINE_SKIPPED, args=("eslint", "no matching targets"))
    hidden = Message(key="telemetry", handler=MessageHandler.INTERNAL)

    residual = messenger.relay(f"{encode_message(shown)}done\n{encode_message(hidden)}")

    assert residual == "done\n"
    assert [message.key for message in messenger.history] == [ENGINE_SKIPPED, "telemetry"]
    assert "eslint was not run" in console_buffer.getvalue()
    assert "telemetry" not in console_buffer.getvalue()


def test_info_messages_are_recorded_with_info_type(messenger: Messenger) -> None:
    message = messenger.info("scanStarted")

    assert message.type is MessageType.INFO
    assert messenger.history == (message,)
