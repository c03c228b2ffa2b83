"""Tests for recovering JSON objects from model output."""

from jobtracker.services.salvage import extract_json, strip_comments


def test_plain_json_object():
    assert extract_json('{"a": 1, "b": [1, 2]}') == {"a": 1, "b": [1, 2]}


def test_fenced_block_with_surrounding_prose():
    text = (
        "好的，以下是解析结果：\n"
        "```json\n"
        '{"company": {"name": "字节跳动", "type": "互联网"}}\n'
        "```\n"
        "如需调整请告诉我。"
    )
    assert extract_json(text) == {"company": {"name": "字节跳动", "type": "互联网"}}


def test_unlabelled_fence():
    text = "```\n{\"ok\": true}\n```"
    assert extract_json(text) == {"ok": True}


def test_brace_span_inside_prose():
    text = 'Result: {"position": {"title": "测试工程师"}} -- end'
    assert extract_json(text) == {"position": {"title": "测试工程师"}}


def test_comments_are_stripped():
    text = '{\n  "a": 1, // first\n  /* block */ "b": 2\n}'
    assert extract_json(text) == {"a": 1, "b": 2}


def test_urls_survive_comment_stripping():
    text = '{"link": "https://example.com/jobs", // apply here\n "n": 1}'
    assert extract_json(text) == {"link": "https://example.com/jobs", "n": 1}


def test_strip_comments_leaves_plain_text():
    assert strip_comments('{"a": "b"}') == '{"a": "b"}'


def test_non_object_json_is_rejected():
    assert extract_json("[1, 2, 3]") is None


def test_unrecoverable_output():
    assert extract_json("抱歉，我无法解析这段内容") is None
    assert extract_json("{not json at all}") is None


def test_empty_output():
    assert extract_json("") is None
    assert extract_json("   ") is None
    assert extract_json(None) is None
