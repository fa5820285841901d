import pytest

from limesub.config_loader import (
    DEFAULT_CONFIG_PATH,
    ConversionConfig,
    config_from_dict,
    deep_merge,
    load_effective_config,
    log_level_from_dict,
    read_yaml_dict,
)


def test_deep_merge_recurses_into_dicts_and_replaces_lists():
    base = {"a": {"x": 1, "y": [1, 2]}, "b": 1}
    override = {"a": {"y": [3]}, "c": 2}
    assert deep_merge(base, override) == {"a": {"x": 1, "y": [3]}, "b": 1, "c": 2}
    # inputs untouched
    assert base == {"a": {"x": 1, "y": [1, 2]}, "b": 1}


def test_shipped_defaults_match_built_in_defaults():
    assert DEFAULT_CONFIG_PATH.parent.name == "limesub"
    cfg = read_yaml_dict(DEFAULT_CONFIG_PATH)
    assert config_from_dict(cfg) == ConversionConfig()
    assert log_level_from_dict(cfg) == "info"


def test_config_from_dict_maps_sections():
    cfg = {
        "conversion": {"tolerance_seconds": 0.5, "default_duration_ms": "1500", "strict_timestamps": True},
        "output": {"font_name": "Arial", "play_res_x": 1280, "play_res_y": 720, "suffix": "_out"},
    }
    config = config_from_dict(cfg)
    assert config.tolerance_s == 0.5
    assert config.default_duration_ms == 1500
    assert config.strict_timestamps is True
    assert config.font_name == "Arial"
    assert (config.play_res_x, config.play_res_y) == (1280, 720)
    assert config.output_suffix == "_out"


def test_config_from_dict_ignores_missing_or_malformed_sections():
    assert config_from_dict({}) == ConversionConfig()
    assert config_from_dict({"conversion": "nope", "output": None}) == ConversionConfig()


def test_with_overrides_skips_none():
    config = ConversionConfig().with_overrides(tolerance_s=None, font_name="Arial")
    assert config.tolerance_s == 0.1
    assert config.font_name == "Arial"


def test_load_effective_config_merge_order(tmp_path):
    (tmp_path / "config.default.yaml").write_text(
        "conversion:\n  tolerance_seconds: 0.1\n  default_duration_ms: 2000\nlogging:\n  level: info\n",
        encoding="utf-8",
    )
    (tmp_path / "config.yaml").write_text("conversion:\n  tolerance_seconds: 0.3\n", encoding="utf-8")
    extra = tmp_path / "extra.yaml"
    extra.write_text("logging:\n  level: DEBUG\n", encoding="utf-8")

    cfg, has_local = load_effective_config(tmp_path, extra_path=extra)
    assert has_local is True
    assert cfg["conversion"] == {"tolerance_seconds": 0.3, "default_duration_ms": 2000}
    assert log_level_from_dict(cfg) == "debug"


def test_load_effective_config_without_local(tmp_path):
    (tmp_path / "config.default.yaml").write_text("", encoding="utf-8")
    cfg, has_local = load_effective_config(tmp_path)
    assert cfg == {}
    assert has_local is False


def test_local_config_can_live_outside_the_defaults_dir(tmp_path):
    defaults = tmp_path / "pkg"
    defaults.mkdir()
    (defaults / "config.default.yaml").write_text("output:\n  suffix: _a\n  font_name: X\n", encoding="utf-8")
    (defaults / "config.yaml").write_text("output:\n  suffix: _ignored\n", encoding="utf-8")
    work = tmp_path / "work"
    work.mkdir()
    (work / "config.yaml").write_text("output:\n  suffix: _b\n", encoding="utf-8")

    cfg, has_local = load_effective_config(defaults, local_dir=work)
    assert has_local is True
    assert cfg["output"] == {"suffix": "_b", "font_name": "X"}


def test_missing_default_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_effective_config(tmp_path)


def test_non_mapping_yaml_is_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        read_yaml_dict(path)
