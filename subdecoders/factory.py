from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Union

from .base import FormatError, SubtitleDecoder

# Extension -> format name. "ass" has no decoder; it feeds the resampler.
FORMAT_BY_EXTENSION: Dict[str, str] = {
    ".srt": "srt",
    ".json": "json",
    ".xml": "xml",
    ".ttml": "ttml",
    ".ass": "ass",
}

DECODABLE_FORMATS = ("srt", "json", "xml", "ttml")


def detect_format(path: Union[str, Path]) -> Optional[str]:
    """Map a file path to a format name by extension, or None when unsupported."""
    return FORMAT_BY_EXTENSION.get(Path(path).suffix.lower())


def _normalize_format(fmt: str) -> str:
    key = (fmt or "").strip().lower()
    if key.startswith("."):
        return FORMAT_BY_EXTENSION.get(key, key)
    return key


def create_decoder(fmt: str, *, default_duration_ms: int = 2000, strict: bool = False) -> SubtitleDecoder:
    """Factory returning a decoder for a format name or file extension.

    - Accepts 'srt', '.SRT', 'ttml', ... (case-insensitive).
    - Raises FormatError for anything without a decoder, including 'ass'.
    """
    name = _normalize_format(fmt)
    kwargs = {"default_duration_ms": default_duration_ms, "strict": strict}

    if name == "srt":
        from .srt_decoder import SrtDecoder
        decoder: SubtitleDecoder = SrtDecoder(**kwargs)
    elif name == "json":
        from .json_decoder import JsonEventsDecoder
        decoder = JsonEventsDecoder(**kwargs)
    elif name == "xml":
        from .xml_decoder import XmlDialogueDecoder
        decoder = XmlDialogueDecoder(**kwargs)
    elif name == "ttml":
        from .ttml_decoder import TtmlDecoder
        decoder = TtmlDecoder(**kwargs)
    else:
        raise FormatError(f"Unsupported input format: '{fmt}'. Supported: {', '.join(DECODABLE_FORMATS)}")
    return decoder
