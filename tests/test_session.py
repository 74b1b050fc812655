import pytest

from assistant_agent.agent_core import (
    AssistantMessage,
    InputMode,
    Session,
    SystemMessage,
    ToolCallRequest,
    ToolMessage,
    UserMessage,
)
from assistant_agent.agent_core.exceptions import TranscriptProtocolError
from assistant_agent.agent_core.session import contains_termination_keyword


def _call(call_id: str, name: str = "echo") -> ToolCallRequest:
    return ToolCallRequest(name=name, arguments="{}", call_id=call_id)


def test_system_message_is_first() -> None:
    session = Session("You are helpful.")

    assert len(session.transcript) == 1
    assert isinstance(session.transcript[0], SystemMessage)
    assert session.system_prompt == "You are helpful."
    assert session.input_mode is InputMode.ALWAYS
    assert not session.terminated


def test_turn_sequence() -> None:
    session = Session("sys")
    session.begin_turn("hello")
    session.record_assistant(None, [_call("a"), _call("b")])
    assert session.pending_tool_call_ids == ["a", "b"]

    session.record_tool_result("a", "echo", '{"result": 1}')
    session.record_tool_result("b", "echo", '{"result": 2}')
    session.record_assistant("done")

    roles = [m.role for m in session.transcript]
    assert roles == ["system", "user", "assistant", "tool", "tool", "assistant"]
    assert isinstance(session.transcript[1], UserMessage)
    assert isinstance(session.transcript[3], ToolMessage)
    assert session.transcript[3].tool_call_id == "a"
    assert session.pending_tool_call_ids == []
    assert session.turn_count == 1
    assert isinstance(session.transcript[0], SystemMessage)


def test_transcript_is_read_only_view() -> None:
    session = Session("sys")
    view = session.transcript
    session.begin_turn("hi")
    assert len(view) == 1
    assert len(session.transcript) == 2


def test_new_turn_with_pending_calls_is_rejected() -> None:
    session = Session("sys")
    session.begin_turn("hello")
    session.record_assistant(None, [_call("a")])

    with pytest.raises(TranscriptProtocolError, match="unanswered"):
        session.begin_turn("again")


def test_model_cannot_speak_with_pending_calls() -> None:
    session = Session("sys")
    session.begin_turn("hello")
    session.record_assistant(None, [_call("a")])

    with pytest.raises(TranscriptProtocolError):
        session.record_assistant("too early")


def test_tool_results_must_follow_request_order() -> None:
    session = Session("sys")
    session.begin_turn("hello")
    session.record_assistant(None, [_call("a"), _call("b")])

    with pytest.raises(TranscriptProtocolError, match="arrived before"):
        session.record_tool_result("b", "echo", "{}")


def test_unknown_tool_result_is_rejected() -> None:
    session = Session("sys")
    session.begin_turn("hello")

    with pytest.raises(TranscriptProtocolError):
        session.record_tool_result("ghost", "echo", "{}")


def test_duplicate_ids_in_one_batch_are_rejected_atomically() -> None:
    session = Session("sys")
    session.begin_turn("hello")

    with pytest.raises(TranscriptProtocolError, match="Duplicate"):
        session.record_assistant(None, [_call("a"), _call("a")])
    assert session.pending_tool_call_ids == []
    assert len(session.transcript) == 2


def test_call_without_id_is_rejected() -> None:
    session = Session("sys")
    session.begin_turn("hello")

    with pytest.raises(TranscriptProtocolError, match="no id"):
        session.record_assistant(None, [ToolCallRequest(name="echo", arguments="{}")])


def test_terminated_session_refuses_mutation() -> None:
    session = Session("sys")
    session.begin_turn("hello")
    session.record_assistant("TERMINATE")
    session.terminate()

    assert session.terminated
    with pytest.raises(TranscriptProtocolError):
        session.begin_turn("more")
    with pytest.raises(TranscriptProtocolError):
        session.record_assistant("more")


def test_assistant_message_serializes_tool_calls() -> None:
    message = AssistantMessage(content=None, tool_calls=[ToolCallRequest(name="echo", arguments={"x": 1}, call_id="a")])

    assert message.to_openai() == {
        "role": "assistant",
        "content": None,
        "tool_calls": [{"id": "a", "type": "function", "function": {"name": "echo", "arguments": '{"x": 1}'}}],
    }


@pytest.mark.parametrize(
    "text, expected",
    [
        ("All done. TERMINATE", True),
        ("terminate", True),
        ("Terminated the process.", True),
        ("All done.", False),
        ("", False),
        (None, False),
    ],
)
def test_contains_termination_keyword(text, expected: bool) -> None:
    assert contains_termination_keyword(text) is expected
