"""
Resample an existing ASS script to a new PlayRes.

Script Info and styles are read and written through pysubs2. Override tags
inside event text are rescaled with regexes; only the geometry and size tags
listed in INLINE_* below are touched, everything else is left as is.
"""
import re
from typing import Tuple, Union

import pysubs2
from pysubs2.exceptions import Pysubs2Error

from subdecoders.base import FormatError

from .ass_writer import DEFAULT_FONT
from .logging_helper import log_debug
from .utils import normalize_newlines

FALLBACK_PLAY_RES = (1280, 720)
RESAMPLE_COMMENT = "; Resampled to {x}x{y} and normalized by Limesub v3"

STYLES_SECTION_RE = re.compile(r"^\[V4\+ Styles\]", re.MULTILINE)

_NUM = r"\s*([0-9.+-]+)\s*"
INLINE_POS_RE = re.compile(r"\\pos\(" + _NUM + "," + _NUM + r"\)", re.IGNORECASE)
INLINE_ORG_RE = re.compile(r"\\org\(" + _NUM + "," + _NUM + r"\)", re.IGNORECASE)
INLINE_MOVE_RE = re.compile(
    r"\\move\(" + _NUM + "," + _NUM + "," + _NUM + "," + _NUM + r"(,[^)]*)?\)", re.IGNORECASE
)
INLINE_ICLIP_RE = re.compile(r"\\iclip\(" + _NUM + "," + _NUM + "," + _NUM + "," + _NUM + r"\)", re.IGNORECASE)
INLINE_FN_RE = re.compile(r"\\fn[^\\}]+", re.IGNORECASE)
# Uniformly scaled numeric tags. \fs cannot swallow \fsp: it needs a digit right after "fs".
INLINE_UNIFORM_TAGS = ("fs", "fsp", "bord", "shad", "blur")


def format_number(value: float) -> str:
    """At most two decimals, trailing zeros trimmed: 960.0 -> '960', 1.125 -> '1.12'."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _compact(value: float) -> Union[int, float]:
    """Two-decimal value; integral results become int so pysubs2 writes '3', not '3.0'."""
    value = round(value, 2)
    return int(value) if value.is_integer() else value


def _rounded(value: float) -> int:
    return int(round(value))


def load_script(content: str) -> pysubs2.SSAFile:
    try:
        return pysubs2.SSAFile.from_string(normalize_newlines(content), format_="ass")
    except (Pysubs2Error, ValueError) as e:
        raise FormatError(f"Not a readable ASS script: {e}") from e


def _info_int(subs: pysubs2.SSAFile, key: str) -> int:
    try:
        return int(str(subs.info.get(key, "0")).strip())
    except ValueError:
        return 0


def detect_play_res(subs: pysubs2.SSAFile) -> Tuple[int, int]:
    """Return (PlayResX, PlayResY); a missing or unreadable value is reported as 0."""
    return _info_int(subs, "PlayResX"), _info_int(subs, "PlayResY")


def scale_factors(old_x: int, old_y: int, target_x: int, target_y: int) -> Tuple[float, float, float]:
    fx = target_x / old_x
    fy = target_y / old_y
    return fx, fy, (fx + fy) / 2.0


def rescale_styles(subs: pysubs2.SSAFile, fx: float, fy: float, f: float, font_name: str = DEFAULT_FONT) -> None:
    """Retarget the font and scale sizes by f, horizontal margins by fx, vertical by fy."""
    for style in subs.styles.values():
        style.fontname = font_name
        style.fontsize = _rounded(style.fontsize * f)
        style.spacing = _compact(style.spacing * f)
        style.outline = _compact(style.outline * f)
        style.shadow = _compact(style.shadow * f)
        style.marginl = _rounded(style.marginl * fx)
        style.marginr = _rounded(style.marginr * fx)
        style.marginv = _rounded(style.marginv * fy)


def _scaled_tag(name: str, factors: Tuple[float, ...], tail_group: int = 0):
    """Build a re.sub callback that rescales the numeric groups of one tag."""
    def _sub(m: re.Match) -> str:
        try:
            values = [float(m.group(i + 1)) * factor for i, factor in enumerate(factors)]
        except ValueError:
            return m.group(0)
        tail = (m.group(tail_group) or "") if tail_group else ""
        return f"\\{name}(" + ",".join(format_number(v) for v in values) + tail + ")"
    return _sub


def _uniform_tag_re(name: str) -> re.Pattern:
    return re.compile(r"\\" + name + r"([0-9.]+)", re.IGNORECASE)


def rescale_override_tags(text: str, fx: float, fy: float, f: float) -> str:
    text = INLINE_POS_RE.sub(_scaled_tag("pos", (fx, fy)), text)
    text = INLINE_MOVE_RE.sub(_scaled_tag("move", (fx, fy, fx, fy), tail_group=5), text)
    text = INLINE_ORG_RE.sub(_scaled_tag("org", (fx, fy)), text)
    text = INLINE_ICLIP_RE.sub(_scaled_tag("iclip", (fx, fy, fx, fy)), text)
    for name in INLINE_UNIFORM_TAGS:
        def _sub(m: re.Match, name: str = name) -> str:
            try:
                return f"\\{name}" + format_number(float(m.group(1)) * f)
            except ValueError:
                return m.group(0)
        text = _uniform_tag_re(name).sub(_sub, text)
    return text


def replace_inline_fonts(text: str, font_name: str = DEFAULT_FONT) -> str:
    return INLINE_FN_RE.sub(lambda _m: f"\\fn{font_name}", text)


def insert_resample_comment(content: str, x: int, y: int) -> str:
    """Put the provenance comment (and a blank line) right above [V4+ Styles]."""
    comment = RESAMPLE_COMMENT.format(x=x, y=y) + "\n\n"
    m = STYLES_SECTION_RE.search(content)
    if not m:
        return comment + content
    return content[:m.start()] + comment + content[m.start():]


def resample_ass(
    content: str,
    target_x: int = 1920,
    target_y: int = 1080,
    font_name: str = DEFAULT_FONT,
) -> str:
    """Rewrite an ASS document for a new PlayRes and retarget its font.

    Missing or zero PlayRes is taken as 1280x720. Axis-specific values
    (positions, margins) use fx/fy; size-like values (font size, spacing,
    outline, shadow, blur) use the mean factor.
    """
    subs = load_script(content)
    old_x, old_y = detect_play_res(subs)
    if not old_x or not old_y:
        old_x, old_y = FALLBACK_PLAY_RES
    fx, fy, f = scale_factors(old_x, old_y, target_x, target_y)
    log_debug(f"resample: {old_x}x{old_y} -> {target_x}x{target_y} (fx={fx:.4f}, fy={fy:.4f}, f={f:.4f})")

    subs.info["PlayResX"] = str(target_x)
    subs.info["PlayResY"] = str(target_y)
    rescale_styles(subs, fx, fy, f, font_name)
    for line in subs:
        line.text = replace_inline_fonts(rescale_override_tags(line.text, fx, fy, f), font_name)

    return insert_resample_comment(subs.to_string("ass"), target_x, target_y)
