"""Tokenizer for reasoning delimiters embedded in reply text."""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from .models import DEFAULT_MARKERS, MarkerPair


class TokenKind(str, Enum):
    TEXT = "text"
    OPEN = "open"
    CLOSE = "close"


@dataclass(frozen=True)
class Token:
    """A run of reply text or a single delimiter.

    ``pair`` is the index of the MarkerPair a delimiter belongs to and is
    None for text runs. Concatenating ``text`` over all tokens reproduces
    the input exactly.
    """

    kind: TokenKind
    text: str
    pair: int | None = None


@lru_cache(maxsize=16)
def _compile(markers: tuple[MarkerPair, ...]) -> tuple[re.Pattern[str], dict[str, tuple[TokenKind, int]]]:
    lookup: dict[str, tuple[TokenKind, int]] = {}
    for index, pair in enumerate(markers):
        lookup.setdefault(pair.start, (TokenKind.OPEN, index))
        lookup.setdefault(pair.end, (TokenKind.CLOSE, index))
    # Longest first so "<thinking>" is not read as "<think>" + "ing>"
    alternatives = sorted(lookup, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(a) for a in alternatives))
    return pattern, lookup


def tokenize(text: str, markers: tuple[MarkerPair, ...] = DEFAULT_MARKERS) -> list[Token]:
    """Split text into TEXT, OPEN and CLOSE tokens.

    Args:
        text: Reply text to scan
        markers: Recognized delimiter pairs

    Returns:
        Tokens in input order; adjacent text is merged into one token
    """
    if not markers:
        return [Token(TokenKind.TEXT, text)] if text else []

    pattern, lookup = _compile(tuple(markers))
    tokens: list[Token] = []
    position = 0
    for match in pattern.finditer(text):
        if match.start() > position:
            tokens.append(Token(TokenKind.TEXT, text[position:match.start()]))
        kind, pair = lookup[match.group()]
        tokens.append(Token(kind, match.group(), pair))
        position = match.end()
    if position < len(text):
        tokens.append(Token(TokenKind.TEXT, text[position:]))
    return tokens
