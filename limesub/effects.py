import re
from typing import List

from subdecoders.base import STYLE_TANDA, TimedTextBlock

DEFAULT_EFFECT = "{\\blur3}{\\fad(00,40)}"

# Order matters: wrapped {\blur..}/{\fad(..)} go before their inline forms.
_CLEANUP_PATTERNS = [
    re.compile(r"\\fn[^\\}]+", re.IGNORECASE),
    re.compile(r"\\fs\d+(?:\.\d+)?", re.IGNORECASE),
    re.compile(r"\{\\blur[0-9.]*\}", re.IGNORECASE),
    re.compile(r"\{\\fad\([^)]*\)\}", re.IGNORECASE),
    re.compile(r"\\blur[0-9.]+", re.IGNORECASE),
    re.compile(r"\\fad\([^)]*\)", re.IGNORECASE),
]


def clean_font_and_effects(text: str) -> str:
    """Drop \\fn, \\fs, \\blur and \\fad overrides, then any empty {} left behind."""
    for pattern in _CLEANUP_PATTERNS:
        text = pattern.sub("", text)
    return text.replace("{}", "")


def apply_default_effect(block: TimedTextBlock, effect: str = DEFAULT_EFFECT) -> TimedTextBlock:
    if block.style != STYLE_TANDA:
        block.text = effect + block.text
    return block


def annotate_blocks(blocks: List[TimedTextBlock], effect: str = DEFAULT_EFFECT) -> List[TimedTextBlock]:
    for block in blocks:
        block.text = clean_font_and_effects(block.text)
        apply_default_effect(block, effect)
    return blocks
