from .models import DEFAULT_MARKERS, MarkerPair, ParsedReply, ReasoningFormat
from .tokenizer import TokenKind, tokenize


def split_embedded(
    text: str,
    markers: tuple[MarkerPair, ...] = DEFAULT_MARKERS,
) -> tuple[str, str] | None:
    """Split text at its first balanced delimiter pair.

    Delimiters of the opening pair nest, so the span ends at the close that
    brings the depth back to zero. Delimiters of other pairs inside the
    span are plain text. A close before any open, or an open that is never
    closed, makes the text malformed.

    Returns:
        ``(outside, inside)`` with everything outside the span concatenated,
        or None when no well-formed pair exists
    """
    tokens = tokenize(text, markers)
    outside: list[str] = []
    inside: list[str] = []
    active: int | None = None
    depth = 0

    for index, token in enumerate(tokens):
        if active is None:
            if token.kind is TokenKind.OPEN:
                active, depth = token.pair, 1
            elif token.kind is TokenKind.CLOSE:
                return None
            else:
                outside.append(token.text)
            continue

        if token.pair == active and token.kind is TokenKind.OPEN:
            depth += 1
        elif token.pair == active and token.kind is TokenKind.CLOSE:
            depth -= 1
            if depth == 0:
                outside.extend(t.text for t in tokens[index + 1:])
                return "".join(outside), "".join(inside)
        inside.append(token.text)

    return None


def parse_reasoning(
    content: str,
    reasoning: str | None = None,
    reasoning_format: ReasoningFormat | str = ReasoningFormat.PARSED,
    markers: tuple[MarkerPair, ...] = DEFAULT_MARKERS,
) -> ParsedReply:
    """Separate a reply's reasoning trace from its answer.

    Extraction is best-effort: malformed or unbalanced delimiters leave the
    content untouched and yield no reasoning. It never raises for any
    content. A split answer is stripped of surrounding whitespace; the
    marked interior is returned exactly as written.

    Args:
        content: Assistant message content as received
        reasoning: Distinct reasoning field supplied by the transport
        reasoning_format: Active surfacing policy
        markers: Delimiter pairs recognized inside ``content``

    Returns:
        ParsedReply for the outgoing assistant message
    """
    fmt = ReasoningFormat(reasoning_format)

    if fmt is ReasoningFormat.RAW:
        return ParsedReply(content=content)

    if fmt is ReasoningFormat.PARSED and reasoning:
        # A distinct field wins; embedded delimiters are left alone
        return ParsedReply(content=content, reasoning=reasoning)

    split = split_embedded(content, markers)
    if split is None:
        return ParsedReply(content=content)

    outside, inside = split
    if fmt is ReasoningFormat.HIDDEN:
        return ParsedReply(content=outside.strip())
    return ParsedReply(content=outside.strip(), reasoning=inside)
