from typing import Iterable, List

from subdecoders.base import TimedTextBlock

from .utils import format_ass_time, format_srt_time

DEFAULT_FONT = "Basic Comical NC"

# Rendered with the defaults this is the exact header existing players and
# workflows expect, comment lines included.
HEADER_TEMPLATE = """[Script Info]
; Script generated by Limesub v2
; https://t.me/s/limenime
; https://www.facebook.com/limenime.official
; https://discord.gg/7XS7MCvVwh
; https://x.com/limenime
Title: Default Limenime Subtitle File
ScriptType: v4.00+
WrapStyle: 0
ScaledBorderAndShadow: yes
YCbCr Matrix: None
PlayResX: {play_res_x}
PlayResY: {play_res_y}
Timer: 100.0000

[V4+ Styles]
Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding
Style: Default,{font},70,&H00FFFFFF,&H00FFFFFF,&H00000000,&H80000000,0,0,0,0,100,100,0,0,1,1.5,1,2,64,64,33,1
Style: tanda,{font},75,&H00FFFFFF,&H000000FF,&H00000000,&H00000000,-1,0,0,0,100,100,0,0,1,1,0,8,0,0,0,1

[Events]
Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
"""


def render_header(font_name: str = DEFAULT_FONT, play_res_x: int = 1920, play_res_y: int = 1080) -> str:
    return HEADER_TEMPLATE.format(font=font_name, play_res_x=play_res_x, play_res_y=play_res_y)


def format_dialogue(block: TimedTextBlock) -> str:
    """Layer 0, empty Name/Effect, zero margins; text is the last field so commas are safe."""
    start = format_ass_time(block.start_ms)
    end = format_ass_time(block.end_ms)
    return f"Dialogue: 0,{start},{end},{block.style},,0,0,0,,{block.text}"


def build_ass_document(
    dialogue_lines: Iterable[str],
    font_name: str = DEFAULT_FONT,
    play_res_x: int = 1920,
    play_res_y: int = 1080,
) -> str:
    parts: List[str] = [render_header(font_name, play_res_x, play_res_y)]
    parts.extend(f"{line}\n" for line in dialogue_lines)
    return "".join(parts)


def blocks_to_srt(blocks: Iterable[TimedTextBlock]) -> str:
    """Render decoded blocks as SRT (debug dump of the intermediate list)."""
    out: List[str] = []
    for i, block in enumerate(blocks, 1):
        out.append(f"{i}\n{format_srt_time(block.start_ms)} --> {format_srt_time(block.end_ms)}\n{block.text}\n")
    return "\n".join(out)
