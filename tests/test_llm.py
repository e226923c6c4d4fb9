from unittest.mock import patch, MagicMock

from api_whispr.llm import LlmClient, extract_json, parse_json_reply


def _mock_response(content):
    mock_resp = MagicMock()
    mock_resp.choices = [MagicMock()]
    mock_resp.choices[0].message.content = content
    return mock_resp


class TestLlmClient:
    def test_default_model(self):
        client = LlmClient()
        assert client.model is not None

    def test_custom_model(self):
        client = LlmClient(model="gpt-4o")
        assert client.model == "gpt-4o"

    @patch("api_whispr.llm.completion")
    def test_call_returns_content(self, mock_completion):
        mock_completion.return_value = _mock_response("test response")

        client = LlmClient(model="gpt-4o")
        result = client.call(system="You are helpful.", user="Hello")
        assert result == "test response"
        mock_completion.assert_called_once()

    @patch("api_whispr.llm.completion")
    def test_call_passes_model_and_messages(self, mock_completion):
        mock_completion.return_value = _mock_response("ok")

        client = LlmClient(model="claude-sonnet-4-20250514", temperature=0.2, max_tokens=200)
        client.call(system="sys", user="usr")

        call_kwargs = mock_completion.call_args[1]
        assert call_kwargs["model"] == "claude-sonnet-4-20250514"
        assert call_kwargs["temperature"] == 0.2
        assert call_kwargs["max_tokens"] == 200
        messages = call_kwargs["messages"]
        assert messages[0]["role"] == "system"
        assert messages[1]["role"] == "user"

    @patch("api_whispr.llm.completion")
    def test_empty_content_becomes_empty_string(self, mock_completion):
        mock_completion.return_value = _mock_response(None)
        assert LlmClient().call(system="sys", user="usr") == ""


class TestJsonReplies:
    def test_extract_from_code_block(self):
        assert extract_json('Here:\n```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_extract_plain(self):
        assert extract_json('  {"a": 1}\n') == '{"a": 1}'

    def test_parse_valid(self):
        assert parse_json_reply('```\n{"tag": "Users"}\n```') == {"tag": "Users"}

    def test_parse_invalid_returns_none(self):
        assert parse_json_reply("Sorry, I cannot help with that.") is None
        assert parse_json_reply("") is None
        assert parse_json_reply(None) is None
