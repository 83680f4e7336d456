"""Data models for reasoning extraction."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ReasoningFormat(str, Enum):
    """How a reply's reasoning trace is surfaced.

    - parsed: reasoning is split out of the answer into its own field
    - raw: the reply is shown exactly as received, markers inline
    - hidden: reasoning is dropped entirely
    """

    PARSED = "parsed"
    RAW = "raw"
    HIDDEN = "hidden"


class MarkerPair(BaseModel):
    """Start/end delimiters that embed a reasoning trace in reply text."""

    model_config = ConfigDict(frozen=True)

    start: str = Field(min_length=1)
    end: str = Field(min_length=1)


DEFAULT_MARKERS: tuple[MarkerPair, ...] = (
    MarkerPair(start="<think>", end="</think>"),
    MarkerPair(start="<thinking>", end="</thinking>"),
    MarkerPair(start="<reasoning>", end="</reasoning>"),
)


class ParsedReply(BaseModel):
    """User-facing answer plus the optional reasoning trace."""

    model_config = ConfigDict(frozen=True)

    content: str
    reasoning: str | None = None
