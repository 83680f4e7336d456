"""Reasoning extraction module.

Hides how a reasoning trace is recognized in a completion reply and how
each ReasoningFormat surfaces it.
"""

from .models import DEFAULT_MARKERS, MarkerPair, ParsedReply, ReasoningFormat
from .parser import parse_reasoning, split_embedded
from .tokenizer import Token, TokenKind, tokenize

__all__ = [
    "DEFAULT_MARKERS",
    "MarkerPair",
    "ParsedReply",
    "ReasoningFormat",
    "Token",
    "TokenKind",
    "parse_reasoning",
    "split_embedded",
    "tokenize",
]
