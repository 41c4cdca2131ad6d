import pytest

from kernsplit.metrics import (
    FontMetrics,
    TableMetrics,
    metrics_from_settings,
    parse_kerning_pairs,
)


def test_table_metrics_scale_with_size():
    m = TableMetrics(advance=0.5, widths={"W": 0.9}, kerning={("A", "V"): -0.1}, space=0.25)
    assert m.advance("a", 16) == 8
    assert m.advance("W", 10) == 9
    assert m.advance(" ", 16) == 4
    assert m.kern("A", "V", 20) == pytest.approx(-2.0)
    assert m.kern("V", "A", 20) == 0.0


def test_table_metrics_satisfy_protocol():
    assert isinstance(TableMetrics(), FontMetrics)


def test_parse_kerning_pairs():
    assert parse_kerning_pairs({"AV": -0.08, "To": "-0.05"}) == {
        ("A", "V"): -0.08,
        ("T", "o"): -0.05,
    }


@pytest.mark.parametrize("key", ["A", "AVA", ""])
def test_parse_kerning_pairs_rejects_non_pairs(key):
    with pytest.raises(ValueError):
        parse_kerning_pairs({key: -0.1})


def test_metrics_from_settings_defaults_to_table():
    m = metrics_from_settings(None, {"AV": -0.125})
    assert isinstance(m, TableMetrics)
    assert m.kern("A", "V", 16) == -2.0


def test_fitz_metrics_use_font_advances():
    pytest.importorskip("fitz")
    from kernsplit.metrics import FitzMetrics

    m = metrics_from_settings("helv", {"AV": -0.1})
    assert isinstance(m, FitzMetrics)
    assert m.advance("W", 12) > m.advance("i", 12) > 0
    assert m.kern("A", "V", 10) == pytest.approx(-1.0)
    assert isinstance(m, FontMetrics)
