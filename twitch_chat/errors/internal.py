"""Centralized error hierarchy for the chat session layer.

Configuration and state errors are raised synchronously, before any I/O.
Transport errors propagate unmodified to whoever awaited the operation.
Tag decode errors never leave the message model: the decode routine turns
them into absent fields.

Classes:
  ChatClientError          – Base for all package errors.
  ConfigurationError       – Invalid session configuration (e.g. blank nickname).
  StateError               – Operation not valid in the current connection state.
  AlreadyConnectedError    – Connect requested while connected.
  AlreadyDisconnectedError – Disconnect requested while not connected.
  TagDecodeError           – A present tag value failed its decode rule.
  TransportError           – Failure surfaced by the underlying connection.
"""

from __future__ import annotations

from collections.abc import Mapping


class ChatClientError(Exception):
    """Base class for all chat client errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class ConfigurationError(ChatClientError):
    """Exception raised when the session configuration cannot be used.

    Fatal to the attempt that detected it; never retried.
    """


class StateError(ChatClientError):
    """Exception raised when an operation conflicts with the connection state.

    No state is mutated before this is raised.
    """


class AlreadyConnectedError(StateError):
    """Raised by connect when the transport already reports connected."""


class AlreadyDisconnectedError(StateError):
    """Raised by disconnect when the transport is not connected."""


class TagDecodeError(ChatClientError, ValueError):
    """Exception raised when a present tag value fails its decode rule.

    Args:
        message: Descriptive error message.
        key: The tag key being decoded, when known.
        value: The raw tag value that failed.
    """

    def __init__(
        self, message: str, *, key: str | None = None, value: str | None = None
    ) -> None:
        super().__init__(message, data={"key": key, "value": value})
        self.key = key
        self.value = value


class TransportError(ChatClientError):
    """Exception raised for failures of the underlying connection.

    Args:
        message (str): Error message.
        operation_type (str | None): Operation that failed ('open', 'send', 'close').
    """

    def __init__(self, message: str, operation_type: str | None = None) -> None:
        super().__init__(message, data={"operation_type": operation_type})
        self.operation_type = operation_type
