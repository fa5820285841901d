from __future__ import annotations

from typing import List, Tuple

from limesub.logging_helper import log_skipped
from limesub.utils import parse_time_to_ms, split_blank_line_blocks

from .base import FormatError, SubtitleDecoder, TimedTextBlock

ARROW = "-->"


class SrtDecoder(SubtitleDecoder):
    """SubRip decoder.

    Blocks are blank-line separated. The first line holding `-->` is the timing
    line; everything after it is cue text. Index lines are not required, and
    stray lines before the timing line are ignored.
    """

    def name(self) -> str:
        return "srt"

    def _parse_time_line(self, line: str) -> Tuple[int, int]:
        start, _, end = line.partition(ARROW)
        return (
            parse_time_to_ms(start, strict=self.strict),
            parse_time_to_ms(end, strict=self.strict),
        )

    def decode_text(self, content: str) -> List[TimedTextBlock]:
        blocks: List[TimedTextBlock] = []
        skipped = 0
        for raw_block in split_blank_line_blocks(content):
            lines = raw_block.split("\n")
            if len(lines) < 2:
                skipped += 1
                continue
            for i, line in enumerate(lines):
                if ARROW not in line:
                    continue
                start_ms, end_ms = self._parse_time_line(line)
                blocks.append(
                    TimedTextBlock(
                        start_ms=start_ms,
                        end_ms=end_ms,
                        text="\n".join(lines[i + 1:]),
                        index=len(blocks) + 1,
                    )
                )
                break
            else:
                skipped += 1

        if not blocks:
            raise FormatError("No SRT timing lines ('-->') found")
        log_skipped(self.name(), skipped, "block(s) without a timing line")
        return self.sort_blocks(blocks)
