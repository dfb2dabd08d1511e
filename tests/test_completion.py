import pytest

from kai.hooks.utils.completion import (
    CATEGORIES,
    DEFAULT_CATEGORY,
    ExtractedSummary,
    categorize,
    clean_for_speech,
    combine_descriptions,
    extract_completion,
    extract_summary,
    run_description_cascade,
    truncate_words,
)


def test_completed_marker_wins_over_everything_else():
    text = (
        "## Summary\n"
        "Refactored the whole module for clarity.\n"
        "\U0001F3AF COMPLETED: Fixed the login redirect loop\n"
        "Want me to add tests?"
    )
    description, rule = run_description_cascade(text, ["Modified auth.py", "Searched codebase"])

    assert rule == "explicit_marker"
    assert description == "Fixed the login redirect loop"


def test_bold_marker_and_agent_tag_are_stripped():
    text = "**COMPLETED:** [AGENT:engineer] Added retry logic to the client"
    assert extract_completion(text, []) == "Added retry logic to the client"


def test_summary_heading_uses_next_line():
    text = "Some preamble.\n\n## Summary\n\n- Migrated the config loader to TOML\n- More"
    description, rule = run_description_cascade(text, [])
    assert rule == "summary_heading"
    assert description == "Migrated the config loader to TOML"


def test_action_verb_line():
    text = "Looking at the failing build now.\nUpdated the CI matrix to include Python 3.12."
    description, rule = run_description_cascade(text, [])
    assert rule == "action_verb"
    assert description.startswith("Updated the CI matrix")


def test_two_edits_without_other_signal():
    summary = extract_summary("", ["Modified a.ts", "Modified b.ts"])
    assert summary.message == "Code updated: Modified a.ts and b.ts"


def test_combine_descriptions_caps_files_at_three():
    entries = ["Modified a.py", "Modified b.py", "Modified c.py", "Modified d.py"]
    assert combine_descriptions(entries) == "Modified a.py, b.py, and c.py"
    assert combine_descriptions(["Run tests", "Modified x.py"]) == "Run tests and modified x.py"


def test_question_topic_when_nothing_was_modified():
    text = "What do you want to know about the rate limiter?"
    description, rule = run_description_cascade(text, ["Read limiter.py"])
    # Reads are still tool activity, so the tool rule answers first
    assert rule == "tool_calls"

    description, rule = run_description_cascade(text, [])
    assert rule == "question_topic"
    assert description == "Answered question about the rate limiter"


def test_first_sentence_skips_filler():
    text = "Sure! Here you go. The parser now handles nested quotes correctly."
    description, rule = run_description_cascade(text, [])
    assert rule == "first_sentence"
    assert description == "The parser now handles nested quotes correctly."


def test_short_result_is_overridden_by_modifications():
    assert extract_completion("Done: ok", ["Modified setup.cfg"]) == "Modified setup.cfg"


def test_nothing_matches_gives_empty_description():
    summary = extract_summary("", [])
    assert summary.description == ""
    assert summary.message == DEFAULT_CATEGORY


def test_clean_for_speech_keeps_emotion_tags_only():
    text = "✨ **Fixed** the `parser` [\U0001F4A5 excited] \U0001F680"
    assert clean_for_speech(text) == "Fixed the parser [\U0001F4A5 excited]"


def test_truncate_words():
    assert truncate_words("one two three four five six seven eight nine ten eleven") == (
        "one two three four five six seven eight nine ten"
    )


def test_message_omits_short_descriptions():
    assert ExtractedSummary("Task completed", "ok").message == "Task completed"
    assert ExtractedSummary("Bug fixed", "Fixed it").message == "Bug fixed: Fixed it"


@pytest.mark.parametrize("description, tools, expected", [
    ("Fixed the crash in the new importer", [], "Bug fixed"),
    ("Added a new export command", [], "Feature added"),
    ("Explained how the cache works", [], "Question answered"),
    ("Changed the timeout setting", [], "Config updated"),
    ("Touched things", ["Modified pyproject.toml"], "Config updated"),
    ("Looked around", ["Searched codebase"], "Search completed"),
    ("Tidied up", ["Modified app.py"], "Code updated"),
    ("Investigated the memory profile", [], "Analysis complete"),
    ("Talked it through", [], "Task completed"),
])
def test_categorize(description, tools, expected):
    assert categorize(description, tools) == expected


def test_categorize_is_total():
    for description in ["", "x", "Fixed", "???", "\U0001F680"]:
        assert categorize(description, []) in CATEGORIES
    assert len(CATEGORIES) == 8
