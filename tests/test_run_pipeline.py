import argparse

import pytest

from limesub.config_loader import ConversionConfig
from limesub.run_pipeline import NO_INPUT_MESSAGE, main, next_output_path, parse_resolution, process_one

SRT = "1\n00:00:01,000 --> 00:00:02,000\nHello\n"

ASS_720 = (
    "[Script Info]\nPlayResX: 1280\nPlayResY: 720\n\n"
    "[V4+ Styles]\n"
    "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, BackColour, Bold, Italic, "
    "Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, "
    "MarginL, MarginR, MarginV, Encoding\n"
    "Style: Default,Arial,48,&H00FFFFFF,&H000000FF,&H00000000,&H00000000,0,0,0,0,100,100,0,0,1,2,1,2,64,64,30,1\n\n"
    "[Events]\n"
)


def test_no_inputs_prints_guidance(capsys):
    assert main([]) == 0
    assert NO_INPUT_MESSAGE in capsys.readouterr().out


def test_bad_file_does_not_stop_the_batch(tmp_path):
    good = tmp_path / "good.srt"
    good.write_text(SRT, encoding="utf-8")
    bad = tmp_path / "bad.json"
    bad.write_text("{ not json", encoding="utf-8")
    unsupported = tmp_path / "notes.txt"
    unsupported.write_text("hi", encoding="utf-8")

    assert main([str(bad), str(unsupported), str(good)]) == 1
    out = tmp_path / "good_Limenime.ass"
    assert out.exists()
    assert "Dialogue: 0,0:00:01.00,0:00:02.00,Default,,0,0,0,," in out.read_text(encoding="utf-8")
    assert not (tmp_path / "bad_Limenime.ass").exists()


def test_outputs_are_numbered_instead_of_overwritten(tmp_path):
    src = tmp_path / "ep01.srt"
    src.write_text(SRT, encoding="utf-8")
    assert main([str(src)]) == 0
    assert main([str(src)]) == 0
    assert main([str(src)]) == 0
    names = sorted(p.name for p in tmp_path.glob("*.ass"))
    assert names == ["ep01_Limenime(1).ass", "ep01_Limenime(2).ass", "ep01_Limenime.ass"]


def test_next_output_path_uses_outdir(tmp_path):
    outdir = tmp_path / "out"
    path = next_output_path(tmp_path / "a.srt", outdir, "_X")
    assert path == outdir / "a_X.ass"


def test_cli_flags_reach_the_output(tmp_path):
    src = tmp_path / "cue.srt"
    src.write_text(SRT, encoding="utf-8")
    outdir = tmp_path / "out"
    rc = main([str(src), "--outdir", str(outdir), "--resolution", "1280x720", "--font", "Arial", "--keep-temp"])
    assert rc == 0
    text = (outdir / "cue_Limenime.ass").read_text(encoding="utf-8")
    assert "PlayResX: 1280\nPlayResY: 720\n" in text
    assert "Style: Default,Arial,70," in text
    temp = outdir / "cue_Limenime.tmp.srt"
    assert temp.read_text(encoding="utf-8") == SRT


def test_ass_input_is_resampled(tmp_path):
    src = tmp_path / "signs.ass"
    src.write_text(ASS_720, encoding="utf-8")
    assert main([str(src)]) == 0
    text = (tmp_path / "signs_Limenime.ass").read_text(encoding="utf-8")
    assert "PlayResX: 1920" in text
    assert ",96,96,45,1" in text


def test_strict_flag_fails_bad_timestamps(tmp_path):
    src = tmp_path / "bad_time.srt"
    src.write_text("1\nlater --> 00:00:02,000\nHi\n", encoding="utf-8")
    assert main([str(src), "--strict-timestamps"]) == 1
    assert main([str(src)]) == 0


def test_missing_extra_config_is_fatal(tmp_path):
    src = tmp_path / "a.srt"
    src.write_text(SRT, encoding="utf-8")
    assert main([str(src), "--config", str(tmp_path / "missing.yaml")]) == 2


def test_process_one_rejects_unknown_extension(tmp_path):
    src = tmp_path / "a.vtt"
    src.write_text("WEBVTT\n", encoding="utf-8")
    with pytest.raises(Exception, match="Unsupported input format"):
        process_one(src, None, ConversionConfig())


def test_parse_resolution():
    assert parse_resolution("1920x1080") == (1920, 1080)
    assert parse_resolution("1280X720") == (1280, 720)
    for bad in ["1920", "axb", "0x720"]:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_resolution(bad)


def test_bundled_defaults_and_local_config_from_working_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.yaml").write_text("output:\n  suffix: _local\n", encoding="utf-8")
    src = tmp_path / "ep02.srt"
    src.write_text(SRT, encoding="utf-8")
    assert main([str(src)]) == 0
    text = (tmp_path / "ep02_local.ass").read_text(encoding="utf-8")
    assert "PlayResX: 1920\nPlayResY: 1080\n" in text
