import pytest

from minish.quoting import QuoteState, has_open_quote


def test_feed_reports_quote_characters():
    state = QuoteState()
    assert state.feed("a") is False
    assert state.feed("'") is True
    assert state.single is True


def test_single_quote_opens_and_closes():
    state = QuoteState()
    state.feed("'")
    state.feed("x")
    state.feed("'")
    assert state.is_open is False


def test_double_quote_ignores_single_inside():
    state = QuoteState()
    state.feed('"')
    state.feed("'")
    assert state.double is True
    assert state.single is False
    state.feed('"')
    assert state.is_open is False


def test_single_quote_ignores_double_inside():
    state = QuoteState()
    state.feed("'")
    state.feed('"')
    assert state.single is True
    assert state.double is False


@pytest.mark.parametrize(
    "text, expected",
    [
        ("echo hi", False),
        ("echo 'hi'", False),
        ('echo "hi', True),
        ("echo 'hi", True),
        ("\"'\"", False),
        ("'\"'", False),
        ("\"\"'", True),
        ("", False),
    ],
)
def test_has_open_quote(text, expected):
    assert has_open_quote(text) is expected