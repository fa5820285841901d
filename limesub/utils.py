import re
from typing import List, Optional

from subdecoders.base import TimeParseError

NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
WHITESPACE_RE = re.compile(r"\s+")
BLOCK_SPLIT_RE = re.compile(r"\n[ \t]*\n\s*")


def _to_number(text: str) -> Optional[float]:
    text = text.strip()
    if not NUMBER_RE.fullmatch(text):
        return None
    return float(text)


def _truncate_ms(value: float) -> int:
    # Rounding to microseconds first keeps 1.001 * 1000 from truncating to 1000.
    return int(round(value, 3))


def _unparsed(raw: str, strict: bool) -> int:
    if strict:
        raise TimeParseError(f"Unparseable timestamp: {raw!r}")
    return 0


def parse_time_to_ms(value, strict: bool = False) -> int:
    """
    Convert a timestamp string to integer milliseconds.

    Accepted shapes, checked in this order:
      "1500ms"            -> milliseconds
      "1.5s"              -> seconds
      "HH:MM:SS.mmm"      -> clock time (SRT comma accepted), also "MM:SS.mmm"
      "1500" / "1.5"      -> bare number; > 1000 is read as ms, otherwise as seconds

    The bare-number rule is a lossy heuristic: "1000" is 1000 seconds while
    "1001" is 1001 ms. Unparseable input resolves to 0 unless strict=True,
    in which case TimeParseError is raised. Empty input is always 0.
    """
    if value is None:
        return 0
    raw = str(value)
    s = raw.strip()
    if not s:
        return 0
    s = s.replace(",", ".")
    lower = s.lower()

    if lower.endswith("ms"):
        num = _to_number(lower[:-2])
        if num is None:
            return _unparsed(raw, strict)
        return _truncate_ms(num)
    if lower.endswith("s"):
        num = _to_number(lower[:-1])
        if num is None:
            return _unparsed(raw, strict)
        return _truncate_ms(num * 1000)

    if ":" in s:
        parts = s.split(":")
        if len(parts) not in (2, 3):
            return _unparsed(raw, strict)
        nums = [_to_number(p) for p in parts]
        if strict and any(n is None for n in nums):
            raise TimeParseError(f"Unparseable timestamp: {raw!r}")
        nums = [n or 0.0 for n in nums]
        if len(nums) == 3:
            hh, mm, ss = nums
        else:
            hh = 0.0
            mm, ss = nums
        return _truncate_ms((hh * 3600 + mm * 60 + ss) * 1000)

    num = _to_number(s)
    if num is None:
        return _unparsed(raw, strict)
    if num > 1000:
        return _truncate_ms(num)
    return _truncate_ms(num * 1000)


def format_ass_time(ms: int) -> str:
    """Format milliseconds as H:MM:SS.cc (centiseconds, hours unbounded)."""
    ms = max(0, int(ms))
    total_sec = ms // 1000
    hh = total_sec // 3600
    mm = (total_sec % 3600) // 60
    ss = total_sec % 60
    cs = (ms % 1000) // 10
    return f"{hh}:{mm:02d}:{ss:02d}.{cs:02d}"


def format_srt_time(ms: int) -> str:
    ms = max(0, int(ms))
    hh = ms // 3600000
    mm = (ms % 3600000) // 60000
    ss = (ms % 60000) // 1000
    return f"{hh:02d}:{mm:02d}:{ss:02d},{ms % 1000:03d}"


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def normalize_spaces(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return WHITESPACE_RE.sub(" ", text).strip()


def trim_lines(text: str) -> str:
    """Trim every line but keep the line structure."""
    return "\n".join(line.strip() for line in normalize_newlines(text).split("\n"))


def split_blank_line_blocks(content: str) -> List[str]:
    """Split text on blank-line separators after newline normalisation."""
    content = normalize_newlines(content).strip()
    if not content:
        return []
    return BLOCK_SPLIT_RE.split(content)
