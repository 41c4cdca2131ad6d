import pytest

from kernsplit.framework import Artifact, run_step
from kernsplit.options import SplitOptions


def _measure(page, container=None):
    container = container or page.soup.p
    return run_step(
        "measure",
        Artifact(payload=container, meta={"page": page, "options": SplitOptions()}),
    )


def _shape(words):
    return [(w.text, w.no_space_before) for w in words]


def test_measure_records_original_lefts(make_page):
    page = make_page("<p>AVA To</p>")
    art = _measure(page)
    words = art.payload
    assert [w.text for w in words] == ["AVA", "To"]
    assert [g.original_left for g in words[0].graphemes] == [0.0, 6.0, 12.0]
    assert words[0].expected_gaps() == [None, 6.0, 6.0]
    assert words[1].start_left == 28.0
    assert art.meta["container"] is page.soup.p
    assert art.meta["metrics"]["measure"] == {"words": 2, "graphemes": 5}


def test_measure_does_not_touch_markup(make_page):
    page = make_page("<p>Hello <em>big</em> world</p>")
    before = page.soup.p.decode()
    _measure(page)
    assert page.soup.p.decode() == before


@pytest.mark.parametrize(
    "markup,expected",
    [
        ("<p>a—b</p>", [("a—", False), ("b", True)]),
        ("<p>a – b</p>", [("a", False), ("–", False), ("b", False)]),
        ("<p>a— b</p>", [("a—", False), ("b", False)]),
        ("<p>one—two—three</p>", [("one—", False), ("two—", True), ("three", True)]),
        ("<p>a-b</p>", [("a-b", False)]),
        ("<p>  lead\n\ttrail  </p>", [("lead", False), ("trail", False)]),
    ],
)
def test_words_split_on_whitespace_and_dashes(make_page, markup, expected):
    assert _shape(_measure(make_page(markup)).payload) == expected


def test_words_span_inline_elements(make_page):
    page = make_page("<p>He<em>llo</em> there</p>")
    words = _measure(page).payload
    assert [w.text for w in words] == ["Hello", "there"]
    assert [g.original_left for g in words[0].graphemes] == [0.0, 8.0, 16.0, 24.0, 32.0]


def test_codepoint_fallback_when_clustering_disabled(make_page, settings):
    page = make_page(
        "<p>e\u0301</p>",
        settings=settings.model_copy(update={"grapheme_clustering": False}),
    )
    assert [g.text for g in _measure(page).payload[0].graphemes] == ["e", "\u0301"]
