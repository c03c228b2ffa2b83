"""Tests for input routing and conversational replies."""

import json

import responses

from conftest import API_URL
from jobtracker.models import ChatMessage, JobRecord, MessageAuthor
from jobtracker.services.chat import (
    HISTORY_WINDOW,
    ChatResponder,
    canned_reply,
    should_parse_job,
)
from jobtracker.services.base import ModelClient
from jobtracker.services.prompts import DEFAULT_CANNED_REPLY, EMPTY_CHAT_REPLY, IMAGE_PLACEHOLDER


def _msg(author, content="", **kwargs):
    return ChatMessage(id=f"msg-{content}", author=author, content=content, **kwargs)


def test_should_parse_job_routing():
    assert should_parse_job("", has_image=True)
    assert should_parse_job("这个岗位怎么样", has_image=False)
    assert should_parse_job("招聘 Java 工程师", has_image=False)
    assert not should_parse_job("你好", has_image=False)
    assert not should_parse_job("", has_image=False)


def test_canned_reply_selects_by_keyword():
    assert "简历" in canned_reply("帮我改改简历")
    assert "面试" in canned_reply("面试要准备什么")
    assert "薪资" in canned_reply("这个 Offer 值得去吗")
    assert canned_reply("随便聊聊") == DEFAULT_CANNED_REPLY


@responses.activate
def test_missing_credential_uses_canned_reply(offline_config):
    reply = ChatResponder(ModelClient(offline_config)).reply([], "帮我改改简历")
    assert reply == canned_reply("帮我改改简历")
    assert len(responses.calls) == 0


@responses.activate
def test_model_reply_is_returned(model_config):
    responses.add(
        responses.POST, API_URL,
        json={"choices": [{"message": {"content": "  当然可以！  "}}]},
        status=200,
    )

    reply = ChatResponder(ModelClient(model_config)).reply([], "能帮我吗")

    assert reply == "当然可以！"
    body = json.loads(responses.calls[0].request.body)
    assert body["model"] == model_config.chat_model
    assert body["messages"][-1] == {"role": "user", "content": "能帮我吗"}


@responses.activate
def test_empty_model_reply(model_config):
    responses.add(responses.POST, API_URL, json={"choices": [{"message": {"content": ""}}]}, status=200)
    assert ChatResponder(ModelClient(model_config)).reply([], "嗯") == EMPTY_CHAT_REPLY


@responses.activate
def test_failed_call_uses_canned_reply(model_config):
    responses.add(responses.POST, API_URL, json={"error": {"message": "boom"}}, status=503)
    reply = ChatResponder(ModelClient(model_config)).reply([], "你好")
    assert reply == canned_reply("你好")


def test_history_skips_job_cards_and_fills_image_placeholder():
    job = JobRecord(id="job-1")
    history = [
        _msg(MessageAuthor.USER, "", image="data:image/png;base64,AAAA"),
        _msg(MessageAuthor.ASSISTANT, "已为您解析该职位信息", parsed_job=job),
        _msg(MessageAuthor.USER, "这个岗位难吗"),
        _msg(MessageAuthor.ASSISTANT, "还好"),
    ]

    messages = ChatResponder.build_messages(history, "谢谢")

    assert messages[0]["role"] == "system"
    assert messages[1:] == [
        {"role": "user", "content": IMAGE_PLACEHOLDER},
        {"role": "user", "content": "这个岗位难吗"},
        {"role": "assistant", "content": "还好"},
        {"role": "user", "content": "谢谢"},
    ]


def test_history_is_windowed():
    history = [_msg(MessageAuthor.USER, str(i)) for i in range(HISTORY_WINDOW + 5)]
    messages = ChatResponder.build_messages(history, "last")
    assert len(messages) == 1 + HISTORY_WINDOW + 1
    assert messages[1]["content"] == "5"


@responses.activate
def test_content_parts_reply_is_flattened(model_config):
    responses.add(
        responses.POST, API_URL,
        json={"choices": [{"message": {"content": [{"type": "text", "text": " 好的 "}]}}]},
        status=200,
    )
    assert ChatResponder(ModelClient(model_config)).reply([], "能帮我吗") == "好的"
