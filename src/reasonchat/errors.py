"""Failure taxonomy for chat turns.

Every failure that reaches the conversation layer is one of these classes,
so callers can tell "will not succeed on retry" apart from "already
exhausted retries" without inspecting transport exceptions.
"""

from enum import Enum
from typing import Any


class FailureKind(str, Enum):
    """Classified cause of a failed turn."""

    VALIDATION = "validation"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    CLIENT_REJECTED = "client_rejected"
    MALFORMED_RESPONSE = "malformed_response"

    @property
    def retryable(self) -> bool:
        """Whether the completion client retries this kind locally."""
        return self in _TRANSIENT

    def describe(self) -> str:
        """Human-readable text shown to the user."""
        return _DESCRIPTIONS[self]


_TRANSIENT = frozenset({
    FailureKind.TIMEOUT,
    FailureKind.NETWORK_ERROR,
    FailureKind.RATE_LIMITED,
    FailureKind.SERVER_ERROR,
})

_DESCRIPTIONS = {
    FailureKind.VALIDATION: "Message is empty. Type something before sending.",
    FailureKind.TIMEOUT: "The model did not respond in time.",
    FailureKind.NETWORK_ERROR: "Could not reach the completion service.",
    FailureKind.RATE_LIMITED: "Rate limit reached. Wait a moment and try again.",
    FailureKind.SERVER_ERROR: "The completion service had an internal error.",
    FailureKind.CLIENT_REJECTED: "The completion service rejected the request.",
    FailureKind.MALFORMED_RESPONSE: "The completion service returned an unexpected response.",
}


class ChatError(Exception):
    """Base exception for chat failures."""

    kind: FailureKind = FailureKind.VALIDATION

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None):
        self.message = message or self.kind.describe()
        self.details = details or {}
        super().__init__(self.message)

    def describe(self) -> str:
        """Text for ChatState.error."""
        return self.kind.describe()

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.details:
            result["details"] = self.details
        return result


class MessageValidationError(ChatError):
    """User input was rejected before any network activity."""

    kind = FailureKind.VALIDATION


class CompletionError(ChatError):
    """A completion exchange failed.

    Attributes:
        status_code: HTTP status of the last attempt, if one was received
        attempts: Number of physical attempts made for the call
        exhausted: True when a retryable failure stopped because retries ran out
        partial_content: Content delivered before a stream broke off
        partial_reasoning: Reasoning delivered before a stream broke off
    """

    kind = FailureKind.NETWORK_ERROR

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code
        self.attempts = 0
        self.exhausted = False
        self.partial_content: str | None = None
        self.partial_reasoning: str | None = None

    @property
    def retryable(self) -> bool:
        return self.kind.retryable

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["attempts"] = self.attempts
        if self.status_code is not None:
            result["status_code"] = self.status_code
        return result


class CompletionTimeout(CompletionError):
    kind = FailureKind.TIMEOUT


class NetworkError(CompletionError):
    kind = FailureKind.NETWORK_ERROR


class RateLimited(CompletionError):
    kind = FailureKind.RATE_LIMITED


class ServerError(CompletionError):
    kind = FailureKind.SERVER_ERROR


class ClientRejected(CompletionError):
    kind = FailureKind.CLIENT_REJECTED


class MalformedResponse(CompletionError):
    kind = FailureKind.MALFORMED_RESPONSE


def error_for_status(status_code: int, message: str | None = None) -> CompletionError:
    """Classify an HTTP error status."""
    if status_code == 429:
        return RateLimited(message, status_code=status_code)
    if status_code >= 500:
        return ServerError(message, status_code=status_code)
    return ClientRejected(message, status_code=status_code)
