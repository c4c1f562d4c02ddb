"""OpenAI client: response parsing and error mapping."""

import json
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from app.services.document_reader import DocumentContent
from app.services.openai_service import OpenAIHealthClient, extract_json_from_text
from app.shared.exceptions import ExtractionFailedException, TransientServiceFailure
from tests.fakes import make_lab_report, run


class StubCompletions:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(reply=None, error=None):
    completions = StubCompletions(reply=reply, error=error)
    stub = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIHealthClient(api_key="test-key", model="gpt-4o", client=stub), completions


def test_extract_json_plain():
    assert extract_json_from_text('{"a": 1}') == {"a": 1}


def test_extract_json_fenced_block():
    text = 'Here you go:\n```json\n{"document_type": "Receipt"}\n```'
    assert extract_json_from_text(text) == {"document_type": "Receipt"}


def test_extract_json_outermost_braces():
    text = 'Result: {"vitals": {"LDL": {"value": 140}}} hope this helps'
    assert extract_json_from_text(text) == {"vitals": {"LDL": {"value": 140}}}


def test_extract_json_nothing_found():
    assert extract_json_from_text("no json here") is None
    assert extract_json_from_text("") is None


def test_extract_parses_json_reply():
    client, completions = _client(reply=json.dumps({"document_type": "Lab Report"}))
    content = DocumentContent(file_name="lipids.txt", text="LDL 140")

    assert run(client.extract(content, "user-a")) == {"document_type": "Lab Report"}
    assert completions.requests[0]["response_format"] == {"type": "json_object"}


def test_extract_failure_is_extraction_failed():
    client, _ = _client(error=OpenAIError("rate limited"))
    content = DocumentContent(file_name="lipids.txt", text="LDL 140")

    with pytest.raises(ExtractionFailedException):
        run(client.extract(content, "user-a"))


def test_extract_unparseable_reply_is_extraction_failed():
    client, _ = _client(reply="I could not read this document.")
    content = DocumentContent(file_name="lipids.txt", text="LDL 140")

    with pytest.raises(ExtractionFailedException):
        run(client.extract(content, "user-a"))


def test_chat_failure_is_transient():
    client, _ = _client(error=OpenAIError("timeout"))
    with pytest.raises(TransientServiceFailure):
        run(client.chat("How is my LDL?", [make_lab_report()]))


def test_missing_api_key_is_transient():
    client = OpenAIHealthClient(api_key="")
    with pytest.raises(TransientServiceFailure):
        run(client.translate("Hello", "Hindi"))
