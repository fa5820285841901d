from __future__ import annotations

import html
import re
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional

from limesub.logging_helper import log_debug
from limesub.utils import normalize_newlines, parse_time_to_ms, trim_lines

from .base import FormatError, SubtitleDecoder, TimedTextBlock
from .xml_decoder import local_name

BR_OPEN_RE = re.compile(r"<(?:[\w.-]+:)?br\b[^>]*>", re.IGNORECASE)
BR_CLOSE_RE = re.compile(r"</(?:[\w.-]+:)?br\s*>", re.IGNORECASE)
TAG_RE = re.compile(r"<[^>]+>", re.DOTALL)
P_BLOCK_RE = re.compile(r"<(?:[\w.-]+:)?p\b([^>]*)>(.*?)</(?:[\w.-]+:)?p\s*>", re.DOTALL | re.IGNORECASE)
ATTR_RE = re.compile(r"([\w:.-]+)\s*=\s*([\"'])(.*?)\2", re.DOTALL)


def normalize_br_tags(text: str) -> str:
    """Turn every <br> variant into a newline; must run before XML parsing."""
    text = BR_OPEN_RE.sub("\n", text)
    text = BR_CLOSE_RE.sub("", text)
    return normalize_newlines(text)


def strip_tags(markup: str) -> str:
    return html.unescape(TAG_RE.sub("", markup))


class TtmlDecoder(SubtitleDecoder):
    """Timed Text Markup Language decoder.

    Reads `begin`/`end`/`dur` from every `<p>`. Missing `end` falls back to
    `begin + dur`, then to `begin + default duration`. Non well-formed
    documents degrade to a regex scan of `<p>` blocks.
    """

    def name(self) -> str:
        return "ttml"

    def _block(self, attrs: Dict[str, str], text: str, index: int) -> TimedTextBlock:
        start_ms = parse_time_to_ms(attrs.get("begin", ""), strict=self.strict)
        end_ms = parse_time_to_ms(attrs.get("end", ""), strict=self.strict)
        if end_ms == 0:
            dur = attrs.get("dur", "")
            if dur:
                end_ms = start_ms + parse_time_to_ms(dur, strict=self.strict)
            else:
                end_ms = start_ms + self.default_duration_ms
        return TimedTextBlock(start_ms=start_ms, end_ms=end_ms, text=trim_lines(text), index=index)

    def _structured(self, content: str) -> Optional[List[TimedTextBlock]]:
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            log_debug(f"ttml: structured parse failed ({e}); using fallback scan")
            return None
        blocks: List[TimedTextBlock] = []
        for el in root.iter():
            if local_name(el.tag) != "p":
                continue
            attrs = {local_name(k): v for k, v in el.attrib.items()}
            blocks.append(self._block(attrs, "".join(el.itertext()), len(blocks) + 1))
        return blocks

    def _fallback(self, content: str) -> List[TimedTextBlock]:
        blocks: List[TimedTextBlock] = []
        for attr_text, inner in P_BLOCK_RE.findall(content):
            attrs = {local_name(m.group(1)): html.unescape(m.group(3)) for m in ATTR_RE.finditer(attr_text)}
            blocks.append(self._block(attrs, strip_tags(inner), len(blocks) + 1))
        return blocks

    def decode_text(self, content: str) -> List[TimedTextBlock]:
        content = normalize_br_tags(content)
        blocks = self._structured(content)
        if blocks is None:
            blocks = self._fallback(content)
        if not blocks:
            raise FormatError("No <p> elements found in TTML")
        return self.sort_blocks(blocks)
