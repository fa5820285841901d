import logging

from limesub.logging_helper import (
    TRACE,
    is_enabled,
    log_debug,
    log_error,
    log_info,
    log_skipped,
    log_trace_block,
    log_warn,
    resolve_level,
    set_log_level,
    source_context,
)


def test_resolve_level_names():
    assert resolve_level("TRACE") == TRACE
    assert resolve_level(" Debug ") == logging.DEBUG
    assert resolve_level("warn") == logging.WARNING
    assert resolve_level("nonsense") == logging.INFO
    assert resolve_level(None) == logging.INFO


def test_set_log_level_and_is_enabled():
    set_log_level("error")
    try:
        assert not is_enabled("info")
        assert is_enabled("error")
    finally:
        set_log_level("info")


def test_info_goes_to_stdout_and_warnings_to_stderr(capsys):
    log_info("converted")
    log_debug("hidden at info level")
    log_warn("odd timing")
    log_error("failed")
    out, err = capsys.readouterr()
    assert out == "[INFO] converted\n"
    assert err == "[WARNING] odd timing\n[ERROR] failed\n"


def test_source_context_prefixes_records(capsys):
    with source_context("ep01.srt"):
        log_info("decoded")
    log_info("done")
    assert capsys.readouterr().out == "[INFO] ep01.srt: decoded\n[INFO] done\n"


def test_records_do_not_reach_the_root_logger(capsys):
    root = logging.getLogger()
    seen = []
    handler = logging.Handler()
    handler.emit = seen.append
    root.addHandler(handler)
    try:
        log_info("only once")
    finally:
        root.removeHandler(handler)
    assert seen == []
    assert capsys.readouterr().out == "[INFO] only once\n"


def test_log_skipped_is_silent_for_zero(capsys):
    set_log_level("debug")
    try:
        log_skipped("srt", 0, "block(s)")
        log_skipped("srt", 2, "block(s)")
    finally:
        set_log_level("info")
    assert capsys.readouterr().out == "[DEBUG] srt: skipped 2 block(s)\n"


def test_trace_block_only_when_trace_enabled(capsys):
    set_log_level("debug")
    try:
        log_trace_block("ASS output", "a\nb")
        assert capsys.readouterr().out == ""
        set_log_level("trace")
        log_trace_block("ASS output", "a\nb")
    finally:
        set_log_level("info")
    assert capsys.readouterr().out == (
        "[TRACE] ----- ASS output BEGIN -----\n"
        "[TRACE] a\n"
        "[TRACE] b\n"
        "[TRACE] ----- ASS output END -----\n"
    )
