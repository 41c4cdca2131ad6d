import pytest
from bs4 import BeautifulSoup

from kernsplit.styles import (
    format_px,
    parse_length,
    parse_style,
    set_style_property,
    style_of,
)


def test_parse_style_tolerates_noise():
    assert parse_style(" Display : block ;; color:red;bad ") == {
        "display": "block",
        "color": "red",
    }
    assert parse_style(None) == {}


def test_set_style_property_keeps_other_declarations():
    tag = BeautifulSoup('<span style="color: red; display: inline">x</span>', "html.parser").span
    set_style_property(tag, "display", "inline-block")
    set_style_property(tag, "margin-left", "-1px")
    assert tag["style"] == "color: red; display: inline-block; margin-left: -1px"
    assert style_of(tag)["margin-left"] == "-1px"


@pytest.mark.parametrize(
    "value,expected",
    [("12px", 12.0), ("-1.5px", -1.5), ("3", 3.0), (".5px", 0.5), ("1em", None), (None, None)],
)
def test_parse_length(value, expected):
    assert parse_length(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [(-2.0, "-2px"), (-1.02, "-1.02px"), (0.0, "0px"), (-0.0, "0px"), (0.5, "0.5px")],
)
def test_format_px(value, expected):
    assert format_px(value) == expected
