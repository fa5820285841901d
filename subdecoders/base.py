from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Union

STYLE_DEFAULT = "Default"
STYLE_TANDA = "tanda"


class SubtitleError(Exception):
    """Base error for subtitle decoding and conversion."""


class FormatError(SubtitleError):
    """Input cannot be associated with any recognised subtitle schema."""


class TimeParseError(SubtitleError):
    """Timestamp could not be parsed (raised only in strict timestamp mode)."""


@dataclass
class TimedTextBlock:
    """One subtitle cue in the common intermediate model.

    Times are integer milliseconds. `text` keeps embedded newlines and inline
    override tags (`{\\tag}`) exactly as decoded.
    """

    start_ms: int
    end_ms: int
    text: str
    style: str = STYLE_DEFAULT
    # 1-based position in the source document; breaks ties between equal starts.
    index: int = 0


RawContent = Union[str, bytes]


class SubtitleDecoder(ABC):
    """Unified interface for timed-text decoders.

    Decoders map one native schema into a list of TimedTextBlock sorted by
    start time (stable, so equal starts keep document order).

    Implementors should:
    - Raise FormatError when the input matches no part of their schema.
    - Skip malformed entries of an otherwise recognised document.
    - Leave merging and style classification to the pipeline.
    """

    def __init__(self, *, default_duration_ms: int = 2000, strict: bool = False) -> None:
        self._default_duration_ms = default_duration_ms
        self._strict = strict

    @property
    def default_duration_ms(self) -> int:
        return self._default_duration_ms

    @property
    def strict(self) -> bool:
        return self._strict

    @abstractmethod
    def name(self) -> str:
        """Short format name (e.g., 'srt', 'ttml')."""

    @abstractmethod
    def decode_text(self, content: str) -> List[TimedTextBlock]:
        """Decode already-decoded text into sorted blocks."""

    def decode(self, content: RawContent) -> List[TimedTextBlock]:
        """Decode raw bytes or text. Bytes are read as UTF-8 (BOM tolerated)."""
        if isinstance(content, bytes):
            content = content.decode("utf-8-sig", errors="replace")
        else:
            content = content.lstrip("\ufeff")
        return self.decode_text(content)

    @staticmethod
    def sort_blocks(blocks: List[TimedTextBlock]) -> List[TimedTextBlock]:
        return sorted(blocks, key=lambda b: (b.start_ms, b.index))
