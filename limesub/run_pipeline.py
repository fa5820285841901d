#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
import traceback
from pathlib import Path
from typing import List, Optional, Tuple

from subdecoders.base import FormatError
from subdecoders.factory import detect_format

from .ass_writer import blocks_to_srt
from .config_loader import (
    PACKAGE_DIR,
    ConversionConfig,
    config_from_dict,
    load_effective_config,
    log_level_from_dict,
    read_yaml_dict,
)
from .logging_helper import is_enabled, log_debug, log_error, log_info, log_warn, set_log_level, source_context
from .pipeline import decode_document, render_document, resample_document

NO_INPUT_MESSAGE = (
    "No subtitle file provided.\n\n"
    "Please drag and drop subtitle file(s) onto this program or run it from the command line."
)
TEMP_SRT_SUFFIX = ".tmp.srt"


def parse_resolution(text: str) -> Tuple[int, int]:
    """argparse type for 'WIDTHxHEIGHT' (e.g. 1920x1080)."""
    try:
        w, h = text.lower().split("x", 1)
        width, height = int(w), int(h)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {text!r}")
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"resolution must be positive, got {text!r}")
    return width, height


def next_output_path(input_path: Path, outdir: Optional[Path], suffix: str) -> Path:
    """<dir>/<stem><suffix>.ass, or the first free <stem><suffix>(N).ass."""
    directory = outdir if outdir is not None else input_path.parent
    base = f"{input_path.stem}{suffix}"
    candidate = directory / f"{base}.ass"
    n = 1
    while candidate.exists():
        candidate = directory / f"{base}({n}).ass"
        n += 1
    return candidate


def process_one(in_path: Path, outdir: Optional[Path], config: ConversionConfig, keep_temp: bool = False) -> Path:
    """Convert (or resample) one file and return the written path."""
    fmt = detect_format(in_path)
    if fmt is None:
        raise FormatError(f"Unsupported input format: {in_path.suffix or '(no extension)'}")
    raw = in_path.read_bytes()

    if fmt == "ass":
        document = resample_document(raw, config)
    else:
        blocks = decode_document(raw, fmt, config)
        document = render_document(blocks, config)

    if outdir is not None:
        outdir.mkdir(parents=True, exist_ok=True)
    out_path = next_output_path(in_path, outdir, config.output_suffix)
    out_path.write_text(document, encoding="utf-8")

    if keep_temp and fmt != "ass":
        temp_path = out_path.with_name(out_path.stem + TEMP_SRT_SUFFIX)
        temp_path.write_text(blocks_to_srt(blocks), encoding="utf-8")
        log_debug(f"Intermediate SRT: {temp_path}")
    return out_path


def resolve_config(args: argparse.Namespace, base: Path, local_dir: Optional[Path] = None) -> ConversionConfig:
    try:
        cfg, has_local = load_effective_config(base, extra_path=args.config, local_dir=local_dir)
    except FileNotFoundError as e:
        if args.config is not None and not args.config.exists():
            raise
        log_warn(f"{e}; using built-in defaults")
        cfg = read_yaml_dict(args.config) if args.config is not None else {}
        has_local = args.config is not None

    level = log_level_from_dict(cfg)
    if args.debug:
        level = "debug"
    if args.trace:
        level = "trace"
    set_log_level(level)
    if has_local:
        log_debug("Local config overrides applied")

    width, height = args.resolution if args.resolution else (None, None)
    config = config_from_dict(cfg).with_overrides(
        tolerance_s=args.tolerance,
        play_res_x=width,
        play_res_y=height,
        font_name=args.font,
        strict_timestamps=True if args.strict_timestamps else None,
    )
    log_debug(
        f"Settings -> tolerance={config.tolerance_s}s, default_duration={config.default_duration_ms}ms, "
        f"strict={config.strict_timestamps}, font={config.font_name!r}, "
        f"res={config.play_res_x}x{config.play_res_y}, suffix={config.output_suffix!r}"
    )
    return config


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="limesub",
        description=(
            "Convert SRT, JSON caption events, timed XML and TTML subtitles to ASS, "
            "or resample existing .ass files to the target resolution. "
            "Defaults come from the bundled config.default.yaml and ./config.yaml; flags override them."
        ),
    )
    ap.add_argument("inputs", nargs="*", type=Path, help="Subtitle files (.srt, .json, .xml, .ttml, .ass)")
    ap.add_argument("--tolerance", type=float, default=None, help="Time tolerance in seconds for merging continuous dialogs")
    ap.add_argument("--outdir", type=Path, default=None, help="Output directory (default: next to each input)")
    ap.add_argument("--keep-temp", action="store_true", help="Also write the decoded cues as <output>.tmp.srt for debugging")
    ap.add_argument("--resolution", type=parse_resolution, default=None, help="Output PlayRes as WIDTHxHEIGHT (default 1920x1080)")
    ap.add_argument("--font", default=None, help="Font name for output styles and resampled \\fn tags")
    ap.add_argument("--strict-timestamps", action="store_true", help="Fail a file on unreadable timestamps instead of using 0")
    ap.add_argument("--config", type=Path, default=None, help="Extra YAML config merged over the defaults")
    ap.add_argument("--debug", action="store_true", help="Enable debug logging")
    ap.add_argument("--trace", action="store_true", help="Enable trace logging (prints full output documents)")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if not args.inputs:
        print(NO_INPUT_MESSAGE)
        return 0

    try:
        config = resolve_config(args, PACKAGE_DIR, local_dir=Path.cwd())
    except Exception as e:
        log_error(f"FATAL: failed to load configuration: {e}")
        return 2

    ok_count = 0
    fail_count = 0
    for in_path in args.inputs:
        try:
            with source_context(in_path.name):
                out_path = process_one(in_path, args.outdir, config, keep_temp=args.keep_temp)
        except Exception as e:
            # One bad input never stops the rest of the batch.
            fail_count += 1
            log_error(f"Failed to process '{in_path}': {e}")
            if is_enabled("debug"):
                traceback.print_exc()
            continue
        ok_count += 1
        log_info(f"Converted: {in_path.name} -> {out_path.name}")

    if len(args.inputs) > 1:
        log_info(f"Done: {ok_count} converted, {fail_count} failed")
    return 1 if fail_count else 0


if __name__ == "__main__":
    sys.exit(main())
