import re
from typing import List

from subdecoders.base import STYLE_DEFAULT, STYLE_TANDA, TimedTextBlock

OVERRIDE_TAG_RE = re.compile(r"\{.*?\}")
LOWERCASE_RE = re.compile(r"[a-z]")

BRACKET_PAIRS = {"(": ")", "[": "]"}


def strip_override_tags(text: str) -> str:
    return OVERRIDE_TAG_RE.sub("", text)


def is_bracket_wrapped(text: str) -> bool:
    """True when text[0] opens a ( or [ pair that closes exactly at text[-1]."""
    if len(text) < 2 or text[0] not in BRACKET_PAIRS:
        return False
    opener, closer = text[0], BRACKET_PAIRS[text[0]]
    if text[-1] != closer:
        return False
    depth = 0
    for i, ch in enumerate(text):
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return i == len(text) - 1
    return False


def classify_style(text: str) -> str:
    """
    Label a line as signage ("tanda") or dialogue ("Default").

    Override tags are ignored. Text with no lowercase ASCII letter (all caps,
    digits, punctuation, non-Latin scripts) or fully wrapped in one pair of
    parentheses/square brackets is signage.
    """
    clean = strip_override_tags(text).strip()
    if not clean:
        return STYLE_DEFAULT
    if not LOWERCASE_RE.search(clean):
        return STYLE_TANDA
    if is_bracket_wrapped(clean):
        return STYLE_TANDA
    return STYLE_DEFAULT


def classify_blocks(blocks: List[TimedTextBlock]) -> List[TimedTextBlock]:
    for block in blocks:
        block.style = classify_style(block.text)
    return blocks
