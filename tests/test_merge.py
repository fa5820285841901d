from limesub.merge import (
    merge_blocks,
    merge_same_or_continuous,
    merge_same_time_and_style,
    split_multiline,
)
from subdecoders.base import TimedTextBlock


def block(start, end, text, style="Default"):
    return TimedTextBlock(start_ms=start, end_ms=end, text=text, style=style)


def _triples(blocks):
    return [(b.start_ms, b.end_ms, b.text) for b in blocks]


def test_split_multiline_inherits_timing_and_drops_empty_lines():
    original = block(1000, 2000, " A \n\n B ")
    out = split_multiline([original])
    assert _triples(out) == [(1000, 2000, "A"), (1000, 2000, "B")]
    # input is not mutated
    assert original.text == " A \n\n B "


def test_exact_repeat_is_dropped():
    out = merge_same_or_continuous([block(0, 1000, "Hi"), block(0, 1000, "Hi")])
    assert _triples(out) == [(0, 1000, "Hi")]


def test_continuity_respects_tolerance():
    blocks = [block(0, 1000, "Hi"), block(1050, 2000, "Hi")]
    assert _triples(merge_same_or_continuous(blocks, 0.1)) == [(0, 2000, "Hi")]
    assert _triples(merge_same_or_continuous(blocks, 0.02)) == [(0, 1000, "Hi"), (1050, 2000, "Hi")]


def test_continuity_bridges_small_overlap_and_never_shrinks():
    out = merge_same_or_continuous([block(0, 2000, "Hi"), block(1950, 3000, "Hi")])
    assert _triples(out) == [(0, 3000, "Hi")]
    out = merge_same_or_continuous([block(0, 2000, "Hi"), block(1950, 1960, "Hi")])
    assert _triples(out) == [(0, 2000, "Hi")]


def test_continuity_compares_whitespace_normalised_text():
    out = merge_same_or_continuous([block(0, 1000, "Hello  world"), block(1000, 1500, "Hello world")])
    assert _triples(out) == [(0, 1500, "Hello  world")]


def test_different_styles_are_not_merged():
    out = merge_same_or_continuous([block(0, 1000, "OK"), block(1000, 2000, "OK", style="tanda")])
    assert len(out) == 2


def test_continuity_does_not_mutate_input():
    first = block(0, 1000, "Hi")
    merge_same_or_continuous([first, block(1000, 2000, "Hi")])
    assert first.end_ms == 1000


def test_same_time_and_style_lines_are_stacked():
    out = merge_same_time_and_style([block(1000, 3000, "A"), block(1000, 3000, "B")])
    assert _triples(out) == [(1000, 3000, "A\\NB")]


def test_stacking_keeps_styles_apart_and_first_seen_order():
    out = merge_same_time_and_style(
        [block(0, 1000, "SIGN", "tanda"), block(0, 1000, "x"), block(0, 1000, "MORE", "tanda")]
    )
    assert [(b.style, b.text) for b in out] == [("tanda", "SIGN\\NMORE"), ("Default", "x")]


def test_merge_blocks_sorts_stably_before_grouping():
    out = merge_blocks([block(1000, 2000, "B"), block(0, 500, "X"), block(1000, 2000, "A")])
    assert _triples(out) == [(0, 500, "X"), (1000, 2000, "B\\NA")]
