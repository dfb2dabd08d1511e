#!/usr/bin/env python3
"""
Transcript parsing for the Stop hook.

Finds the current turn (everything since the last real user message) in a
JSONL transcript and collects what the assistant did during it: final text,
tool activity, skills, subagents and token usage.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

SKILL_TOOL = "Skill"
TASK_TOOL = "Task"


@dataclass
class UsageStats:
    """Token counters accumulated over one turn"""
    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_tokens: int = 0
    model: str = ""

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens + self.cache_read_tokens

    def add(self, usage: Dict[str, Any]) -> None:
        self.input_tokens += _as_count(usage.get("input_tokens"))
        self.output_tokens += _as_count(usage.get("output_tokens"))
        self.cache_read_tokens += _as_count(usage.get("cache_read_input_tokens"))


@dataclass
class TurnSummary:
    """Everything the Stop hook needs from the current turn"""
    last_assistant_text: str = ""
    tool_calls: List[str] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)
    agents: List[str] = field(default_factory=list)
    usage: UsageStats = field(default_factory=UsageStats)


def _as_count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(0, int(value))


def _basename(path: Any) -> str:
    if not isinstance(path, str) or not path.strip():
        return ""
    return Path(path.strip().replace("\\", "/")).name


def parse_line(line: str) -> Optional[Dict[str, Any]]:
    """Parse one transcript line, None for blank or corrupt lines."""
    line = line.strip()
    if not line:
        return None
    try:
        entry = json.loads(line)
    except json.JSONDecodeError:
        return None
    return entry if isinstance(entry, dict) else None


def _content_of(entry: Dict[str, Any]) -> Any:
    message = entry.get("message")
    if not isinstance(message, dict):
        return None
    return message.get("content")


def is_real_user_turn(entry: Dict[str, Any]) -> bool:
    """
    True for a user record typed by the human.

    User records made only of tool_result blocks are tool output echoed
    back to the model and do not start a new turn.
    """
    if entry.get("type") != "user":
        return False

    content = _content_of(entry)
    if not isinstance(content, list) or not content:
        return True
    return not all(
        isinstance(block, dict) and block.get("type") == "tool_result"
        for block in content
    )


def find_turn_window(lines: List[str]) -> List[Dict[str, Any]]:
    """
    Return the parsed records of the current turn.

    Scans backward for the last real user turn; the window runs from that
    record to the end of the transcript, or covers the whole transcript if
    there is none.
    """
    start = 0
    for index in range(len(lines) - 1, -1, -1):
        entry = parse_line(lines[index])
        if entry is not None and is_real_user_turn(entry):
            start = index
            break

    window = []
    for line in lines[start:]:
        entry = parse_line(line)
        if entry is not None:
            window.append(entry)
    return window


def describe_tool_call(name: str, tool_input: Any) -> Optional[str]:
    """Map a tool_use block to a short past-tense description."""
    if not isinstance(tool_input, dict):
        tool_input = {}

    if name in ("Edit", "MultiEdit"):
        file_name = _basename(tool_input.get("file_path"))
        return f"Modified {file_name}" if file_name else None
    if name == "Write":
        file_name = _basename(tool_input.get("file_path"))
        return f"Created {file_name}" if file_name else None
    if name == "Bash":
        description = tool_input.get("description")
        if isinstance(description, str) and description.strip():
            return description.strip()
        return None
    if name == "Read":
        file_name = _basename(tool_input.get("file_path"))
        return f"Read {file_name}" if file_name else None
    if name in ("Glob", "Grep"):
        return "Searched codebase"
    if name == TASK_TOOL:
        description = tool_input.get("description")
        if isinstance(description, str) and description.strip():
            return description.strip()
        return "Ran subagent task"
    if name in ("WebFetch", "WebSearch"):
        return "Searched the web"
    return None


def _append_unique(items: List[str], value: Any) -> None:
    if isinstance(value, str) and value.strip() and value.strip() not in items:
        items.append(value.strip())


def collect_turn(window: List[Dict[str, Any]]) -> TurnSummary:
    """Walk the turn window in order and gather assistant activity."""
    summary = TurnSummary()

    for entry in window:
        if entry.get("type") != "assistant":
            continue
        message = entry.get("message")
        if not isinstance(message, dict):
            continue

        usage = message.get("usage")
        if isinstance(usage, dict):
            summary.usage.add(usage)
        model = message.get("model")
        if isinstance(model, str) and model:
            summary.usage.model = model

        content = message.get("content")
        if isinstance(content, str):
            if content.strip():
                summary.last_assistant_text = content.strip()
            continue
        if not isinstance(content, list):
            continue

        texts = []
        for block in content:
            if not isinstance(block, dict):
                continue
            block_type = block.get("type")
            if block_type == "text":
                text = block.get("text")
                if isinstance(text, str) and text.strip():
                    texts.append(text.strip())
            elif block_type == "tool_use":
                name = block.get("name") or ""
                tool_input = block.get("input") or {}
                if name == SKILL_TOOL and isinstance(tool_input, dict):
                    _append_unique(summary.skills, tool_input.get("skill") or tool_input.get("command"))
                elif name == TASK_TOOL and isinstance(tool_input, dict):
                    _append_unique(summary.agents, tool_input.get("subagent_type"))

                description = describe_tool_call(name, tool_input)
                if description:
                    summary.tool_calls.append(description)

        # Only the most recent assistant message survives
        if texts:
            summary.last_assistant_text = "\n".join(texts)

    return summary


def summarize_turn(transcript_text: str) -> TurnSummary:
    """Find the current turn in raw transcript text and collect it."""
    return collect_turn(find_turn_window(transcript_text.splitlines()))


def read_transcript(transcript_path: str) -> str:
    """
    Read a transcript file.

    Returns:
        str: File contents, or "" when the path is missing or unreadable
    """
    if not transcript_path:
        return ""
    path = Path(transcript_path).expanduser()
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        logger.warning("Transcript file not found: %s", path)
    except OSError as e:
        logger.warning("Failed to read transcript %s: %s", path, e)
    return ""
