import textwrap
import warnings

import pytest

from kernsplit.config import SplitSettings, load_settings
from kernsplit.errors import ConfigurationWarning


def test_missing_file_yields_defaults(tmp_path):
    settings = load_settings(tmp_path / "absent.yaml")
    assert settings == SplitSettings()
    assert settings.kerning_threshold == 20.0
    assert settings.break_chars == ["—", "–"]


def test_yaml_values_are_loaded(tmp_path):
    cfg = tmp_path / "kernsplit.yaml"
    cfg.write_text(
        textwrap.dedent(
            """
            kerning_threshold: 12
            resize_debounce: 0.5
            kerning:
              AV: -0.08
            """
        ),
        encoding="utf-8",
    )
    settings = load_settings(cfg)
    assert settings.kerning_threshold == 12.0
    assert settings.resize_debounce == 0.5
    assert settings.kerning == {"AV": -0.08}


def test_unknown_setting_emits_warning(tmp_path):
    cfg = tmp_path / "kernsplit.yaml"
    cfg.write_text("kerning_threshold: 10\nextra_knob: 1\n", encoding="utf-8")
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        settings = load_settings(cfg)

    assert [w.message.args[0] for w in caught] == ["Unknown kernsplit settings: extra_knob"]
    assert all(issubclass(w.category, ConfigurationWarning) for w in caught)
    assert settings.kerning_threshold == 10.0


def test_known_settings_do_not_warn(tmp_path):
    cfg = tmp_path / "kernsplit.yaml"
    cfg.write_text("line_tolerance_min: 3\n", encoding="utf-8")
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        load_settings(cfg)
    assert not caught


def test_load_settings_merges_env_and_overrides(tmp_path, monkeypatch):
    cfg = tmp_path / "kernsplit.yaml"
    cfg.write_text("kerning_threshold: 12\nline_height: 1.5\n", encoding="utf-8")
    monkeypatch.setenv("KERNSPLIT__KERNING_THRESHOLD", "15")
    monkeypatch.setenv("KERNSPLIT__GRAPHEME_CLUSTERING", "false")

    settings = load_settings(cfg, overrides={"line_height": 1.1})

    assert settings.kerning_threshold == 15.0
    assert settings.grapheme_clustering is False
    assert settings.line_height == 1.1


def test_non_mapping_yaml_is_rejected(tmp_path):
    cfg = tmp_path / "kernsplit.yaml"
    cfg.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(TypeError, match="top-level mapping"):
        load_settings(cfg)


def test_empty_yaml_is_defaults(tmp_path):
    cfg = tmp_path / "kernsplit.yaml"
    cfg.write_text("", encoding="utf-8")
    assert load_settings(cfg) == SplitSettings()
