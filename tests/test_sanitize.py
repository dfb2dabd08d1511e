import pytest

from kai.voice_server.errors import InvalidInputError
from kai.voice_server.sanitize import (
    MAX_TEXT_LENGTH,
    clean_field,
    sanitize_for_speech,
    validate_text,
    validate_voice_id,
)


def test_script_tags_are_removed():
    assert sanitize_for_speech("<script>alert(1)</script>Build finished") == "alert1Build finished"


def test_command_substitution_is_removed_without_raising():
    assert sanitize_for_speech("Deploy done $(rm -rf /)") == "Deploy done"
    assert sanitize_for_speech("Ran `whoami` ok") == "Ran  ok"


def test_path_traversal_and_metacharacters():
    assert sanitize_for_speech("read ../../etc/passwd; echo hi | cat") == "read etc/passwd echo hi  cat"


def test_markdown_is_stripped():
    assert sanitize_for_speech("## **Done** with ~~the~~ task") == "Done with the task"


def test_safe_text_only_loses_surrounding_whitespace():
    text = "  Code updated: Modified a.ts and b.ts. It took 45 seconds, and cost 4 cents.  "
    assert sanitize_for_speech(text) == text.strip()
    assert clean_field(text, "message") == text.strip()


def test_output_is_capped():
    assert len(sanitize_for_speech("word " * 200)) <= MAX_TEXT_LENGTH


def test_validate_text_rejections():
    with pytest.raises(InvalidInputError, match="Invalid message"):
        validate_text(None, "message")
    with pytest.raises(InvalidInputError, match="must be a string"):
        validate_text(42, "message")
    with pytest.raises(InvalidInputError, match="longer than"):
        validate_text("x" * (MAX_TEXT_LENGTH + 1), "message")
    assert validate_text(None, "title", required=False) is None


def test_empty_after_sanitization_is_rejected():
    with pytest.raises(InvalidInputError, match="empty after sanitization"):
        clean_field("$(rm -rf /)", "message")


def test_voice_id_allows_only_safe_characters():
    assert validate_voice_id("21m00Tcm4TlvDq8ikWAM") == "21m00Tcm4TlvDq8ikWAM"
    assert validate_voice_id(" engineer ") == "engineer"
    assert validate_voice_id("kokoro-am_echo") == "kokoro-am_echo"
    assert validate_voice_id(None) is None
    assert validate_voice_id("") is None
    for bad in ["../../v1/user", "voice?x=1", "a b", "voice/123", 42]:
        with pytest.raises(InvalidInputError, match="Invalid voice_id"):
            validate_voice_id(bad)
