# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing message context shared by the orchestrator, resolver, and engines.

A :class:`Messenger` is created by the embedding application and passed
explicitly to every collaborator that needs to surface warnings. Engines that
execute out of process relay messages by framing them on their output stream
with :func:`encode_message`; :meth:`Messenger.relay` decodes those frames and
re-emits them through the same context.
"""

from __future__ import annotations

import string
import threading
import time
from collections.abc import Sequence
from enum import Enum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.console import Console

from .config import OutputConfig
from .errors import MessageFormatError
from .logging import info, warn

START: Final[str] = "SFDX-START"
END: Final[str] = "SFDX-END"

DIRECTORY_WITHOUT_PATTERNS: Final[str] = "directoryWithoutPatterns"
ENGINE_SKIPPED: Final[str] = "engineSkipped"

MESSAGE_TEMPLATES: Final[dict[str, str]] = {
    DIRECTORY_WITHOUT_PATTERNS: "{0} declares no target patterns; analysing directory {1} as a whole.",
    ENGINE_SKIPPED: "{0} was not run: {1}.",
}
_FORMATTER: Final[string.Formatter] = string.Formatter()


def _field_count(template: str) -> int:
    """Return the number of replacement fields in ``template``."""

    return sum(1 for _, field, _, _ in _FORMATTER.parse(template) if field is not None)


class MessageType(str, Enum):
    """Severity class of a user-facing message."""

    INFO = "INFO"
    WARNING = "WARNING"


class MessageHandler(str, Enum):
    """Channel responsible for displaying a message."""

    UX = "UX"
    INTERNAL = "INTERNAL"


class Message(BaseModel):
    """Structured message emitted by the core or relayed from an engine."""

    model_config = ConfigDict(frozen=True)

    key: str
    args: tuple[str, ...] = Field(default_factory=tuple)
    type: MessageType = MessageType.WARNING
    handler: MessageHandler = MessageHandler.UX
    verbose: bool = False
    time: int = Field(default_factory=lambda: time.time_ns() // 1_000_000)

    def render(self) -> str:
        """Return the human readable text for this message."""

        template = MESSAGE_TEMPLATES.get(self.key)
        if template is not None and len(self.args) >= _field_count(template):
            return template.format(*self.args)
        return f"{self.key}: {', '.join(self.args)}" if self.args else self.key


def encode_message(message: Message) -> str:
    """Return ``message`` framed for transport on an engine output stream."""

    return f"{START}{message.model_dump_json()}{END}"


def extract_messages(text: str) -> tuple[list[Message], str]:
    """Split framed messages out of ``text``.

    Args:
        text: Captured output that may contain framed messages spanning lines.

    Returns:
        tuple[list[Message], str]: Decoded messages in stream order and the
        remaining output with every frame removed.

    Raises:
        MessageFormatError: If a frame is unterminated or carries invalid JSON.
    """

    messages: list[Message] = []
    residual: list[str] = []
    cursor = 0
    while (start := text.find(START, cursor)) != -1:
        residual.append(text[cursor:start])
        body_start = start + len(START)
        end = text.find(END, body_start)
        if end == -1:
            raise MessageFormatError(f"Unterminated message frame at offset {start}")
        try:
            messages.append(Message.model_validate_json(text[body_start:end]))
        except ValidationError as exc:
            raise MessageFormatError(f"Invalid message frame at offset {start}: {exc}") from exc
        cursor = end + len(END)
    residual.append(text[cursor:])
    return messages, "".join(residual)


class Messenger:
    """Collect and display user-facing messages for one embedding context."""

    def __init__(
        self,
        *,
        output: OutputConfig | None = None,
        verbose: bool = False,
        console: Console | None = None,
    ) -> None:
        """Create a messenger.

        Args:
            output: Colour and emoji preferences for displayed messages.
            verbose: When ``True`` messages flagged as verbose are displayed.
            console: Optional console overriding the shared console manager.
        """

        self._output = output or OutputConfig()
        self._verbose = verbose
        self._console = console
        self._history: list[Message] = []
        self._displayed: set[tuple[str, tuple[str, ...]]] = set()
        self._lock = threading.Lock()

    @property
    def history(self) -> tuple[Message, ...]:
        """Return every message recorded so far in emission order."""

        with self._lock:
            return tuple(self._history)

    def warn(self, key: str, args: Sequence[str] = (), *, verbose: bool = False) -> Message:
        """Record and display a warning identified by ``key``.

        Args:
            key: Message key selecting the display template.
            args: Positional template arguments.
            verbose: Whether the message is only displayed in verbose mode.

        Returns:
            Message: The recorded message.
        """

        message = Message(key=key, args=tuple(str(arg) for arg in args), verbose=verbose)
        self.emit(message)
        return message

    def info(self, key: str, args: Sequence[str] = (), *, verbose: bool = False) -> Message:
        """Record and display an informational message identified by ``key``."""

        message = Message(
            key=key,
            args=tuple(str(arg) for arg in args),
            type=MessageType.INFO,
            verbose=verbose,
        )
        self.emit(message)
        return message

    def emit(self, message: Message) -> None:
        """Record ``message`` and display it when its handler and verbosity allow.

        Identical warnings are displayed once per messenger but always recorded.
        """

        with self._lock:
            self._history.append(message)
            identity = (message.key, message.args)
            if message.handler is not MessageHandler.UX or (message.verbose and not self._verbose):
                return
            if identity in self._displayed:
                return
            self._displayed.add(identity)
        display = warn if message.type is MessageType.WARNING else info
        display(
            message.render(),
            use_emoji=self._output.emoji,
            use_color=self._output.color,
            console=self._console,
        )

    def relay(self, text: str) -> str:
        """Emit every framed message embedded in ``text``.

        Args:
            text: Output captured from an engine process.

        Returns:
            str: ``text`` with the message frames removed.
        """

        messages, residual = extract_messages(text)
        for message in messages:
            self.emit(message)
        return residual


__all__ = [
    "DIRECTORY_WITHOUT_PATTERNS",
    "END",
    "ENGINE_SKIPPED",
    "Message",
    "MessageHandler",
    "MessageType",
    "Messenger",
    "START",
    "encode_message",
    "extract_messages",
]
