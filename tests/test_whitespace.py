from sanitizer.whitespace import collapse_whitespace


def test_collapses_runs_and_newlines():
    assert collapse_whitespace("a   b\n\n  c") == "a b\nc"


def test_trims_edges():
    assert collapse_whitespace("  lead and trail \t\n") == "lead and trail"
    assert collapse_whitespace("\n\n") == ""
    assert collapse_whitespace("") == ""


def test_unicode_blanks_and_carriage_returns():
    assert collapse_whitespace("a\u00a0\u2003b") == "a b"
    assert collapse_whitespace("a\r\nb") == "a\nb"


def test_kept_whitespace_is_untouched():
    assert collapse_whitespace("  ", keep=frozenset(" ")) == "  "
    assert collapse_whitespace("a\n\nb", keep=frozenset("\n")) == "a\n\nb"
    assert collapse_whitespace(" a\t\tb ", keep=frozenset("\t")) == "a\t\tb"
