from kai.hooks.utils.transcript import (
    UsageStats,
    collect_turn,
    describe_tool_call,
    find_turn_window,
    is_real_user_turn,
    parse_line,
    read_transcript,
    summarize_turn,
)
from transcripts import assistant, text_block, to_jsonl, tool_result, tool_use, user_text


def test_parse_line_skips_blank_and_corrupt_lines():
    assert parse_line("") is None
    assert parse_line("   ") is None
    assert parse_line("{not json") is None
    assert parse_line("[1, 2]") is None
    assert parse_line('{"type": "user"}') == {"type": "user"}


def test_tool_result_records_are_not_user_turns():
    assert is_real_user_turn(user_text("fix the bug"))
    assert not is_real_user_turn(tool_result())
    assert not is_real_user_turn(assistant(text_block("hi")))


def test_turn_window_starts_at_last_real_user_message():
    records = [
        user_text("first prompt"),
        assistant(text_block("old answer")),
        user_text("second prompt"),
        assistant(tool_use("Read", file_path="/src/app.py")),
        tool_result(),
        assistant(text_block("new answer")),
    ]
    window = find_turn_window(to_jsonl(records).splitlines())

    assert window[0] == user_text("second prompt")
    assert len(window) == 4


def test_turn_window_without_user_turn_is_whole_transcript():
    records = [assistant(text_block("a")), tool_result(), assistant(text_block("b"))]
    assert len(find_turn_window(to_jsonl(records).splitlines())) == 3


def test_describe_tool_call_table():
    assert describe_tool_call("Edit", {"file_path": "/repo/src/a.ts"}) == "Modified a.ts"
    assert describe_tool_call("MultiEdit", {"file_path": "C:\\repo\\b.ts"}) == "Modified b.ts"
    assert describe_tool_call("Write", {"file_path": "/repo/new.py"}) == "Created new.py"
    assert describe_tool_call("Bash", {"description": "Run unit tests"}) == "Run unit tests"
    assert describe_tool_call("Bash", {"command": "ls"}) is None
    assert describe_tool_call("Read", {"file_path": "/x/README.md"}) == "Read README.md"
    assert describe_tool_call("Grep", {"pattern": "foo"}) == "Searched codebase"
    assert describe_tool_call("Task", {}) == "Ran subagent task"
    assert describe_tool_call("WebSearch", {"query": "x"}) == "Searched the web"
    assert describe_tool_call("TodoWrite", {"todos": []}) is None


def test_collect_turn_keeps_last_text_and_dedupes_skills_and_agents():
    window = [
        user_text("do it"),
        assistant(
            text_block("Starting."),
            tool_use("Skill", skill="research"),
            tool_use("Task", subagent_type="engineer", description="Implement parser"),
            usage={"input_tokens": 100, "output_tokens": 50, "cache_read_input_tokens": 1000},
        ),
        tool_result(),
        assistant(
            text_block("All done."),
            tool_use("Skill", skill="research"),
            tool_use("Task", subagent_type="engineer", description="Review parser"),
            usage={"input_tokens": 10, "output_tokens": 5},
            model="claude-opus-4-1-20250805",
        ),
    ]
    turn = collect_turn(window)

    assert turn.last_assistant_text == "All done."
    assert turn.skills == ["research"]
    assert turn.agents == ["engineer"]
    assert turn.tool_calls == ["Implement parser", "Review parser"]
    assert turn.usage.input_tokens == 110
    assert turn.usage.output_tokens == 55
    assert turn.usage.cache_read_tokens == 1000
    assert turn.usage.model == "claude-opus-4-1-20250805"


def test_usage_ignores_non_numeric_counters():
    usage = UsageStats()
    usage.add({"input_tokens": "12", "output_tokens": True, "cache_read_input_tokens": -5})
    assert usage.total_tokens == 0


def test_summarize_turn_ignores_corrupt_lines():
    text = to_jsonl([user_text("go"), assistant(text_block("Finished the job."))])
    text = text + "garbage line\n"
    assert summarize_turn(text).last_assistant_text == "Finished the job."


def test_read_transcript_missing_file_is_empty(tmp_path):
    assert read_transcript(str(tmp_path / "missing.jsonl")) == ""
    assert read_transcript("") == ""


def test_read_transcript_reads_file(tmp_path):
    path = tmp_path / "session.jsonl"
    path.write_text(to_jsonl([user_text("hi")]))
    assert "hi" in read_transcript(str(path))


def test_user_records_without_tool_results_are_turn_boundaries():
    assert is_real_user_turn({"type": "user"})
    assert is_real_user_turn({"type": "user", "message": {"content": []}})
    assert is_real_user_turn({"type": "user", "message": {"content": None}})
    assert is_real_user_turn({"type": "user", "message": "plain"})
    assert not is_real_user_turn({"type": "user", "message": {"content": [
        {"type": "tool_result", "tool_use_id": "a"},
        {"type": "tool_result", "tool_use_id": "b"},
    ]}})
