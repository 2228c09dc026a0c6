"""Validation of raw Gemini output."""
import pytest

from app.services.ai_response import parse_answer_text, parse_guidance_list, strip_code_fence


def test_answer_text_is_trimmed():
    assert parse_answer_text("\n  Rinse the ears gently.  \n") == "Rinse the ears gently."


@pytest.mark.parametrize("raw", [None, "", "   \n\t "])
def test_empty_answer_is_failure(raw):
    assert parse_answer_text(raw) is None


def test_plain_json_array():
    assert parse_guidance_list('["Check for ticks", "Use prevention"]') == ["Check for ticks", "Use prevention"]


def test_json_fenced_array():
    raw = '```json\n["Keep dogs indoors", "Provide water"]\n```'
    assert parse_guidance_list(raw) == ["Keep dogs indoors", "Provide water"]


def test_bare_fenced_array():
    raw = '```\n["Keep dogs on leash"]\n```'
    assert parse_guidance_list(raw) == ["Keep dogs on leash"]


def test_strip_code_fence_leaves_plain_text_alone():
    assert strip_code_fence('  ["a"]  ') == '["a"]'


def test_items_are_returned_verbatim():
    assert parse_guidance_list('["  one ", "two"]') == ["  one ", "two"]


def test_blank_item_rejects_the_whole_list():
    assert parse_guidance_list('["ok", ""]') is None
    assert parse_guidance_list('["ok", "   "]') is None


def test_mixed_types_are_rejected_as_a_whole():
    assert parse_guidance_list('["ok", 5, "also ok"]') is None


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "   ",
        "not json at all",
        '{"guidance": ["a"]}',
        '"just a string"',
        "[]",
        '["", "  "]',
        "[1, 2, 3]",
    ],
)
def test_invalid_guidance_is_failure(raw):
    assert parse_guidance_list(raw) is None
