import pytest

from batepapo import sanitize
from batepapo.errors import InternalError
from batepapo.sanitize import sanitize_fields, strip_markup


def test_strips_tags_and_whitespace():
    assert strip_markup("  <b>Alice</b>  ") == "Alice"
    assert strip_markup("<p>oi <i>pessoal</i></p>") == "oi pessoal"


def test_clean_text_is_unchanged():
    for text in ["hello", "a & b", "Todos", "private_message"]:
        assert strip_markup(text) == text
        assert strip_markup(strip_markup(text)) == strip_markup(text)


def test_idempotent_on_markup():
    once = strip_markup("<div><h1>title</h1> body</div>")
    assert strip_markup(once) == once


def test_only_string_fields_are_touched():
    data = {"name": " <em>Bob</em> ", "to": 5, "other": "<b>x</b>"}
    out = sanitize_fields(data, ("name", "to"))
    assert out == {"name": "Bob", "to": 5, "other": "<b>x</b>"}
    # input is not mutated
    assert data["name"] == " <em>Bob</em> "


def test_failure_becomes_internal_error(monkeypatch: pytest.MonkeyPatch):
    def boom(text):
        raise RuntimeError("parser exploded")

    monkeypatch.setattr(sanitize, "strip_markup", boom)
    with pytest.raises(InternalError):
        sanitize_fields({"text": "hi"}, ("text",))


def test_escaped_markup_does_not_come_back():
    escaped = "&lt;b&gt;x&lt;/b&gt;"
    once = strip_markup(escaped)
    assert once == "x"
    assert strip_markup(once) == once
    assert "<" not in strip_markup("&lt;script&gt;alert(1)&lt;/script&gt;")


def test_double_escaped_markup():
    out = strip_markup("&amp;lt;i&amp;gt;hi&amp;lt;/i&amp;gt;")
    assert out == "hi"
    assert strip_markup(out) == out
