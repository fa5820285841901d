from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional, Tuple

from limesub.logging_helper import log_debug, log_skipped
from limesub.utils import parse_time_to_ms, trim_lines

from .base import FormatError, SubtitleDecoder, TimedTextBlock

ENTRY_TAGS = ("dia", "entry", "p")
FIELD_TAGS = ("st", "et", "sub")

# Permissive fallback for documents ElementTree rejects.
DIA_BLOCK_RE = re.compile(r"<dia>(.*?)</dia>", re.DOTALL)
ST_RE = re.compile(r"<st>(.*?)</st>", re.DOTALL)
ET_RE = re.compile(r"<et>(.*?)</et>", re.DOTALL)
SUB_CDATA_RE = re.compile(r"<sub><!\[CDATA\[(.*?)\]\]></sub>", re.DOTALL)


def local_name(tag) -> str:
    """Lower-cased tag name without namespace; '' for comments and PIs."""
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1].lower()


def _int_or_zero(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        return 0


class XmlDialogueDecoder(SubtitleDecoder):
    """Generic timed XML decoder.

    Looks for `<dia>`, `<entry>` or `<p>` elements carrying `<st>`, `<et>` and
    `<sub>` children. Documents that are not well-formed fall back to a regex
    scan of `<dia>` blocks with CDATA-wrapped `<sub>` text, where `<st>`/`<et>`
    are plain integer milliseconds.
    """

    def name(self) -> str:
        return "xml"

    def _end_or_default(self, start_ms: int, end_ms: int) -> int:
        return end_ms if end_ms != 0 else start_ms + self.default_duration_ms

    def _structured(self, content: str) -> Tuple[Optional[int], List[TimedTextBlock]]:
        """Return (candidate count, blocks); count is None when parsing failed."""
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            log_debug(f"xml: structured parse failed ({e}); using fallback scan")
            return None, []

        candidates = 0
        blocks: List[TimedTextBlock] = []
        for el in root.iter():
            if local_name(el.tag) not in ENTRY_TAGS:
                continue
            candidates += 1
            fields: Dict[str, str] = {}
            for child in el:
                name = local_name(child.tag)
                if name in FIELD_TAGS and name not in fields:
                    fields[name] = "".join(child.itertext())
            text = fields.get("sub", "")
            if not text:
                continue
            start_ms = parse_time_to_ms(fields.get("st", ""), strict=self.strict)
            end_ms = parse_time_to_ms(fields.get("et", ""), strict=self.strict)
            blocks.append(
                TimedTextBlock(
                    start_ms=start_ms,
                    end_ms=self._end_or_default(start_ms, end_ms),
                    text=trim_lines(text),
                    index=len(blocks) + 1,
                )
            )
        return candidates, blocks

    def _fallback(self, content: str) -> Tuple[int, List[TimedTextBlock]]:
        matches = DIA_BLOCK_RE.findall(content)
        blocks: List[TimedTextBlock] = []
        for body in matches:
            sub = SUB_CDATA_RE.search(body)
            if not sub:
                continue
            st = ST_RE.search(body)
            et = ET_RE.search(body)
            start_ms = _int_or_zero(st.group(1)) if st else 0
            end_ms = _int_or_zero(et.group(1)) if et else 0
            blocks.append(
                TimedTextBlock(
                    start_ms=start_ms,
                    end_ms=self._end_or_default(start_ms, end_ms),
                    text=trim_lines(sub.group(1)),
                    index=len(blocks) + 1,
                )
            )
        return len(matches), blocks

    def decode_text(self, content: str) -> List[TimedTextBlock]:
        candidates, blocks = self._structured(content)
        if not blocks:
            fallback_candidates, blocks = self._fallback(content)
            candidates = (candidates or 0) + fallback_candidates
        if not candidates:
            raise FormatError("No <dia>, <entry> or <p> elements found in XML")
        log_skipped(self.name(), candidates - len(blocks), "element(s) without usable <sub> text")
        return self.sort_blocks(blocks)
