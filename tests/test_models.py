"""Tests for data models."""

import json
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from familiar.models.api import HealthResponse, MessageRequest
from familiar.models.events import MessageAppended, StatusChanged, turn_event_adapter
from familiar.models.messages import Message
from familiar.models.tools import ToolFailure, ToolInvocationRequest, ToolSuccess


class TestToolCallParsing:
    """Tests for strict tool-call classification of model responses."""

    def test_exact_tool_call(self):
        """Test that a bare JSON object with tool and args parses."""
        request = ToolInvocationRequest.from_response('{"tool": "file_system", "args": {"action": "list_dir"}}')
        assert request == ToolInvocationRequest(name="file_system", args={"action": "list_dir"})

    def test_surrounding_whitespace_allowed(self):
        """Test that leading and trailing whitespace is tolerated."""
        request = ToolInvocationRequest.from_response('\n  {"tool": "echo", "args": {}}  \n')
        assert request is not None
        assert request.name == "echo"

    @pytest.mark.parametrize(
        "text",
        [
            "Sure! {\"tool\": \"echo\", \"args\": {}}",
            '{"tool": "echo", "args": {}} done',
            '```json\n{"tool": "echo", "args": {}}\n```',
            '{"tool": "echo", "args": {}, "reason": "because"}',
            '{"tool": "echo"}',
            '{"args": {}}',
            '{"tool": 3, "args": {}}',
            '{"tool": "", "args": {}}',
            '{"tool": "echo", "args": []}',
            '{"tool": "echo", "args": "x"}',
            '[{"tool": "echo", "args": {}}]',
            "{not json",
            "Hello there",
            "",
        ],
    )
    def test_anything_else_is_chat(self, text):
        """Test that non-conforming responses are classified as chat."""
        assert ToolInvocationRequest.from_response(text) is None


class TestToolOutcomes:
    """Tests for tool outcome observation messages."""

    def test_success_observation(self):
        """Test the observation for a successful tool call."""
        message = ToolSuccess(text="a.txt").to_observation()
        assert message == Message(role="user", content="Tool Output: a.txt")
        assert message.is_observation

    def test_failure_observation(self):
        """Test the observation for a failed tool call."""
        message = ToolFailure(error="Tool not found: x").to_observation()
        assert message.content == "Tool Error: Tool not found: x"
        assert message.is_observation

    def test_plain_user_message_is_not_observation(self):
        assert not Message(role="user", content="hello").is_observation


class TestMessageModels:
    """Tests for conversation message models."""

    def test_messages_are_immutable(self):
        """Test that messages cannot be mutated after creation."""
        message = Message(role="user", content="hi")
        with pytest.raises(ValidationError):
            message.content = "changed"

    def test_invalid_role_rejected(self):
        with pytest.raises(ValidationError):
            Message(role="tool", content="hi")


class TestEventModels:
    """Tests for transport events."""

    def test_events_serialize_with_type_tag(self):
        """Test the JSON shape of each event variant."""
        status = json.loads(StatusChanged(label="Thinking", is_busy=True).model_dump_json())
        message = json.loads(MessageAppended(role="assistant", content="hi").model_dump_json())

        assert status == {"type": "status", "label": "Thinking", "is_busy": True}
        assert message == {"type": "message", "role": "assistant", "content": "hi"}

    def test_event_adapter_discriminates(self):
        """Test that events parse back into the right variant."""
        event = turn_event_adapter.validate_json('{"type": "status", "label": "Online", "is_busy": false}')
        assert event == StatusChanged(label="Online", is_busy=False)


class TestApiModels:
    """Tests for HTTP request/response models."""

    def test_message_request_requires_text(self):
        with pytest.raises(ValidationError):
            MessageRequest(message="")

    def test_health_response_valid(self):
        """Test valid health response."""
        now = datetime.now(UTC)
        response = HealthResponse(status="healthy", timestamp=now, version="0.1.0")
        assert response.status == "healthy"
        assert response.timestamp == now
