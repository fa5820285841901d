"""Timed-text decoder package.

Exposes the common block model, the decoder base type and the error types.
Concrete decoders are loaded through `subdecoders.factory.create_decoder`.
"""

from .base import (
    STYLE_DEFAULT,
    STYLE_TANDA,
    FormatError,
    SubtitleDecoder,
    SubtitleError,
    TimedTextBlock,
    TimeParseError,
)

__all__ = [
    "STYLE_DEFAULT",
    "STYLE_TANDA",
    "FormatError",
    "SubtitleDecoder",
    "SubtitleError",
    "TimedTextBlock",
    "TimeParseError",
]
