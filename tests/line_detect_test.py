import pytest
from bs4.element import Tag
from hypothesis import given, strategies as st

from kernsplit.options import SplitOptions
from kernsplit.passes.line_detect import group_lines
from kernsplit.pipeline import run_split
from kernsplit.styles import style_of


@pytest.mark.parametrize(
    "tops,tolerance,expected",
    [
        ([], 5, []),
        ([0, 0, 19, 19, 38], 5, [[0, 1], [2, 3], [4]]),
        ([0, 4, 8], 5, [[0, 1], [2]]),
        ([0, 5], 5, [[0], [1]]),
        ([10, 8, 30], 5, [[0, 1], [2]]),
    ],
)
def test_group_lines(tops, tolerance, expected):
    assert group_lines(tops, tolerance) == expected


@given(
    st.lists(st.integers(min_value=0, max_value=500), max_size=30),
    st.floats(min_value=1, max_value=50),
)
def test_group_lines_partitions_in_order(tops, tolerance):
    groups = group_lines(tops, tolerance)
    assert [i for g in groups for i in g] == list(range(len(tops)))
    assert all(abs(tops[i] - tops[g[0]]) < tolerance for g in groups for i in g)


def test_tolerance_scales_with_font_size(settings):
    assert settings.line_tolerance(16) == 5.0
    assert settings.line_tolerance(40) == pytest.approx(12.0)


def test_lines_follow_wrapping(make_page):
    page = make_page("<p>aa bb cc</p>", width=50)
    parts, metrics = run_split(page.soup.p, page, SplitOptions())
    assert [line.get_text() for line in parts.lines] == ["aa bb", "cc"]
    assert [line["data-index"] for line in parts.lines] == ["0", "1"]
    assert all(line["class"] == "split-line" for line in parts.lines)
    assert all(style_of(line)["display"] == "block" for line in parts.lines)
    assert page.soup.p.contents == parts.lines
    assert metrics["detect_lines"] == {"lines": 2, "tolerance": 5.0}


def test_words_keep_their_wrapping_after_regroup(make_page):
    page = make_page("<p>aa bb cc</p>", width=50)
    parts, _ = run_split(page.soup.p, page, SplitOptions())
    tops = [page.measure(w).top for w in parts.words]
    assert tops == [0.0, 0.0, pytest.approx(19.2)]
    assert [page.measure(w).left for w in parts.words] == [0.0, 24.0, 0.0]


def test_each_word_in_exactly_one_line(make_page):
    page = make_page("<p>one two three four five six</p>", width=70)
    parts, _ = run_split(page.soup.p, page, SplitOptions())
    owners = [w.parent for w in parts.words]
    assert all(isinstance(o, Tag) and o["class"] == "split-line" for o in owners)
    assert sum(len(line.find_all(class_="split-word")) for line in parts.lines) == len(
        parts.words
    )


def test_single_line_at_wide_width(make_page):
    page = make_page("<p>one two three</p>")
    parts, _ = run_split(page.soup.p, page, SplitOptions())
    assert len(parts.lines) == 1
    assert parts.lines[0].get_text() == "one two three"
