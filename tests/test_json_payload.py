"""
Tests for JSON extraction from AI replies.
"""
import pytest

from app.core.errors import PayloadParseError
from app.llm.json_payload import find_json_object, cleanup_json_text, parse_json_payload


def test_extracts_object_from_prose_and_fences():
    payload = parse_json_payload('Sure!\n```json\n{"score": 81, "tags": ["a", "b"]}\n```\nDone.')
    assert payload.data == {"score": 81, "tags": ["a", "b"]}
    assert payload.recovered is False


def test_returns_first_balanced_object():
    text = 'first {"a": {"b": 1}} then {"c": 2}'
    assert find_json_object(text) == '{"a": {"b": 1}}'


def test_braces_inside_strings_are_ignored():
    text = 'x {"note": "use } and { freely", "n": 1} y'
    assert parse_json_payload(text).data == {"note": "use } and { freely", "n": 1}


def test_no_object_found():
    assert find_json_object("nothing here") is None
    with pytest.raises(PayloadParseError):
        parse_json_payload("nothing here")


def test_cleanup_strips_trailing_commas_and_newlines():
    assert cleanup_json_text('{"a": [1, 2,],\n"b": 3,\n}') == '{"a": [1, 2], "b": 3}'


def test_trailing_commas_are_recovered():
    payload = parse_json_payload('{"skills": ["python", "sql",], "years": 2,}')
    assert payload.data == {"skills": ["python", "sql"], "years": 2}
    assert payload.recovered is True


def test_cleanup_can_be_disabled():
    with pytest.raises(PayloadParseError):
        parse_json_payload('{"a": 1,}', allow_cleanup=False)


def test_unrecoverable_json_raises():
    with pytest.raises(PayloadParseError) as excinfo:
        parse_json_payload('{"a": undefined}')
    assert excinfo.value.kind == "parse_error"
