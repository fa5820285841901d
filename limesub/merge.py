"""
Merge engine: turns per-line cues into the final event list.

  split_multiline            one block per text line, parent timing inherited
  merge_same_or_continuous   stable sort, drop exact repeats, bridge redraws
  merge_same_time_and_style  stack simultaneous lines of one style with \\N
"""
from dataclasses import replace
from typing import Dict, List, Tuple

from subdecoders.base import TimedTextBlock

from .utils import normalize_spaces

ASS_LINE_BREAK = "\\N"


def split_multiline(blocks: List[TimedTextBlock]) -> List[TimedTextBlock]:
    """Split each block on newlines; lines are trimmed and empty ones dropped."""
    out: List[TimedTextBlock] = []
    for block in blocks:
        for line in block.text.split("\n"):
            line = line.strip()
            if not line:
                continue
            out.append(replace(block, text=line))
    return out


def merge_same_or_continuous(blocks: List[TimedTextBlock], tolerance_s: float = 0.1) -> List[TimedTextBlock]:
    """
    Coalesce repeated captions.

    Blocks are stably sorted by start. A block whose style and whitespace-
    normalised text equal the previous accumulator is either dropped (same
    interval) or folded into it when |start - accumulator end| is within the
    tolerance. Ties keep input order.
    """
    tolerance_ms = tolerance_s * 1000
    merged: List[TimedTextBlock] = []
    for block in sorted(blocks, key=lambda b: b.start_ms):
        if merged:
            last = merged[-1]
            if last.style == block.style and normalize_spaces(last.text) == normalize_spaces(block.text):
                if last.start_ms == block.start_ms and last.end_ms == block.end_ms:
                    continue
                if abs(block.start_ms - last.end_ms) <= tolerance_ms:
                    last.end_ms = max(last.end_ms, block.end_ms)
                    continue
        merged.append(replace(block))
    return merged


def merge_same_time_and_style(blocks: List[TimedTextBlock]) -> List[TimedTextBlock]:
    """Join blocks sharing (start, end, style); groups keep first-seen order."""
    groups: Dict[Tuple[int, int, str], List[TimedTextBlock]] = {}
    for block in blocks:
        groups.setdefault((block.start_ms, block.end_ms, block.style), []).append(block)

    out: List[TimedTextBlock] = []
    for members in groups.values():
        first = members[0]
        out.append(replace(first, text=ASS_LINE_BREAK.join(m.text for m in members)))
    return out


def merge_blocks(blocks: List[TimedTextBlock], tolerance_s: float = 0.1) -> List[TimedTextBlock]:
    return merge_same_time_and_style(merge_same_or_continuous(blocks, tolerance_s))
