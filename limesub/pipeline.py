from __future__ import annotations

from typing import List, Optional

from subdecoders.base import RawContent, TimedTextBlock
from subdecoders.factory import create_decoder

from .ass_resample import resample_ass
from .ass_writer import build_ass_document, format_dialogue
from .config_loader import ConversionConfig
from .effects import annotate_blocks
from .logging_helper import log_debug, log_trace_block
from .merge import merge_blocks, split_multiline
from .styling import classify_blocks


def decode_document(content: RawContent, fmt: str, config: Optional[ConversionConfig] = None) -> List[TimedTextBlock]:
    """Decode one input document into sorted blocks (no merging)."""
    config = config or ConversionConfig()
    decoder = create_decoder(
        fmt,
        default_duration_ms=config.default_duration_ms,
        strict=config.strict_timestamps,
    )
    blocks = decoder.decode(content)
    log_debug(f"{decoder.name()}: decoded {len(blocks)} cue(s)")
    return blocks


def convert_blocks_to_ass_lines(blocks: List[TimedTextBlock], config: Optional[ConversionConfig] = None) -> List[str]:
    """
    Run the normalisation pipeline over decoded cues and return Dialogue lines.

    Steps:
    1) split multi-line cues into one block per line (timing inherited)
    2) classify each line as Default or tanda
    3) drop exact repeats and bridge continuous repeats within tolerance
    4) stack same-interval, same-style lines with \\N
    5) strip font/size/blur/fade overrides, add the default effect to non-tanda lines
    6) format as ASS Dialogue lines
    """
    config = config or ConversionConfig()
    lines = classify_blocks(split_multiline(blocks))
    merged = merge_blocks(lines, config.tolerance_s)
    log_debug(f"merge: {len(lines)} line(s) -> {len(merged)} event(s) (tolerance={config.tolerance_s}s)")
    annotate_blocks(merged, config.default_effect)
    return [format_dialogue(b) for b in merged]


def render_document(blocks: List[TimedTextBlock], config: Optional[ConversionConfig] = None) -> str:
    """Complete ASS script (header + events) for already decoded cues."""
    config = config or ConversionConfig()
    document = build_ass_document(
        convert_blocks_to_ass_lines(blocks, config),
        font_name=config.font_name,
        play_res_x=config.play_res_x,
        play_res_y=config.play_res_y,
    )
    log_trace_block("ASS output", document)
    return document


def convert_to_ass(content: RawContent, fmt: str, config: Optional[ConversionConfig] = None) -> str:
    """Decode one document and render the complete ASS script."""
    config = config or ConversionConfig()
    return render_document(decode_document(content, fmt, config), config)


def resample_document(content: RawContent, config: Optional[ConversionConfig] = None) -> str:
    """Resample an existing ASS script to the configured PlayRes and font."""
    config = config or ConversionConfig()
    if isinstance(content, bytes):
        content = content.decode("utf-8-sig", errors="replace")
    return resample_ass(
        content.lstrip("\ufeff"),
        target_x=config.play_res_x,
        target_y=config.play_res_y,
        font_name=config.font_name,
    )
