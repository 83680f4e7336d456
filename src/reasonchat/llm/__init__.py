"""Completion client module.

Hides the network exchange with the completion endpoint: transport,
retries, deadlines, response validation and streaming.
"""

from .client import CompletionClient, classify_transport_error, parse_completion_body
from .factory import create_completion_client
from .models import (
    Choice,
    ClientConfig,
    CompletionRequest,
    CompletionResponse,
    CompletionStream,
    ResponseMessage,
    StreamFragment,
    TransportMessage,
)

__all__ = [
    "Choice",
    "ClientConfig",
    "CompletionClient",
    "CompletionRequest",
    "CompletionResponse",
    "CompletionStream",
    "ResponseMessage",
    "StreamFragment",
    "TransportMessage",
    "classify_transport_error",
    "create_completion_client",
    "parse_completion_body",
]
