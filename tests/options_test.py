import warnings

import pytest

from kernsplit.errors import ConfigurationWarning
from kernsplit.options import DEFAULT_TYPE, SplitOptions, resolve_options


def test_defaults():
    opts = resolve_options()
    assert opts.type == DEFAULT_TYPE
    assert (opts.char_class, opts.word_class, opts.line_class) == (
        "split-char",
        "split-word",
        "split-line",
    )
    assert not opts.auto_split and not opts.prop_index and not opts.will_change
    assert opts.on_resize is None and opts.revert_on_complete is None


def test_camel_and_snake_case_mix():
    opts = resolve_options({"autoSplit": True}, char_class="c", willChange=True)
    assert opts.auto_split and opts.will_change
    assert opts.char_class == "c"


def test_overrides_win_over_model():
    base = SplitOptions(char_class="a", word_class="w")
    opts = resolve_options(base, char_class="b")
    assert (opts.char_class, opts.word_class) == ("b", "w")


@pytest.mark.parametrize(
    "value,reason",
    [("chars", "not yet implemented"), ("letters", "not recognized")],
)
def test_non_default_type_falls_back(value, reason):
    with pytest.warns(ConfigurationWarning, match=reason):
        opts = resolve_options(type=value)
    assert opts.type == DEFAULT_TYPE


def test_unknown_keys_are_reported_once():
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        opts = resolve_options({"splitBy": "x", "zzz": 1})
    assert [str(w.message) for w in caught] == ["Unknown split options: splitBy, zzz"]
    assert opts == SplitOptions()


def test_callbacks_are_kept_as_is():
    def on_resize(result):
        return result

    sentinel = object()
    opts = resolve_options(on_resize=on_resize, revert_on_complete=sentinel)
    assert opts.on_resize is on_resize
    assert opts.revert_on_complete is sentinel
