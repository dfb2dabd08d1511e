#!/usr/bin/env python3
"""
Completion summary extraction for the Stop hook.

Turns the final assistant message of a turn, plus the tool activity that
preceded it, into a short spoken summary such as
"Code updated: Modified a.ts and b.ts".

Both the description cascade and the categorizer are ordered lists of
small rules evaluated first-match-wins, so each rule can be tested alone.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from kai.hooks.utils.formatting import join_naturally

MAX_DESCRIPTION_WORDS = 10

# Past-tense verbs that open a "what I did" sentence
ACTION_VERBS = [
    "Fixed", "Created", "Added", "Updated", "Installed", "Configured", "Removed",
    "Refactored", "Built", "Implemented", "Resolved", "Completed", "Deployed",
    "Wrote", "Rewrote", "Moved", "Renamed", "Deleted", "Replaced", "Merged",
    "Migrated", "Upgraded", "Downgraded", "Optimized", "Improved", "Cleaned",
    "Simplified", "Extracted", "Integrated", "Enabled", "Disabled", "Changed",
    "Modified", "Adjusted", "Tweaked", "Patched", "Debugged", "Tested",
    "Verified", "Validated", "Documented", "Generated", "Converted",
    "Restructured", "Reorganized", "Consolidated", "Published", "Released",
    "Committed", "Pushed", "Reverted", "Restored", "Initialized", "Scaffolded",
    "Designed", "Drafted", "Analyzed", "Researched", "Investigated", "Reviewed",
    "Identified", "Diagnosed", "Explained", "Answered", "Launched", "Restarted",
    "Connected", "Synced", "Exported", "Imported", "Formatted", "Polished",
    "Finished", "Ran", "Executed", "Compiled", "Set up",
]

FILLER_OPENERS = re.compile(
    r"^(?:yes|no|sure|ok|okay|here|let me|let's|i'll|i will|great|perfect|"
    r"alright|all right|got it|certainly|absolutely|thanks|thank you|now)\b",
    re.IGNORECASE,
)

_EMOJI = "\U0001F000-\U0001FAFF\u2600-\u27BF\u2B00-\u2BFF"
EMOJI_RE = re.compile(f"[{_EMOJI}\ufe0f\u200d]")
EMOTION_TAG_RE = re.compile(f"^\\[[{_EMOJI}][\ufe0f\u200d{_EMOJI}]*\\s+[A-Za-z][\\w-]*\\]$")
BRACKET_SPLIT_RE = re.compile(r"(\[[^\]\n]*\])")

AGENT_TAG_RE = re.compile(r"^\s*\[AGENT:[^\]]*\]\s*", re.IGNORECASE)
MARKER_RE = re.compile(
    r"^[ \t]*(?:\U0001F3AF\ufe0f?[ \t]*)?(?:\*\*|__)?(?:COMPLETED|Done)(?:\*\*|__)?[ \t]*:"
    r"(?:\*\*|__)?[ \t]*(.*)$",
    re.IGNORECASE | re.MULTILINE,
)
SUMMARY_HEADING_RE = re.compile(
    r"^#{1,6}\s*(?:\*\*)?(?:Summary|Done|Complete)(?:\*\*)?\s*:?\s*$", re.IGNORECASE
)
ACTION_LINE_RE = re.compile(
    r"^(" + "|".join(re.escape(verb) for verb in ACTION_VERBS) + r")\b\s*"
    r"((?:[^.!?]|[.!?](?=\S)){5,80}?)\s*(?:[.!?](?:\s|$)|$)"
)
TOPIC_RE = re.compile(
    r"\b(?:about|regarding|for|with|the)\s+([A-Za-z0-9][\w'./-]*(?:\s+[\w'./-]+){0,5}?)\s*(?=[?.!,;:]|$)",
    re.IGNORECASE,
)
BULLET_RE = re.compile(r"^[ \t]*(?:[-*\u2022+]|\d+[.)])[ \t]+", re.MULTILINE)


@dataclass
class ExtractedSummary:
    """Category plus a short description of what the turn accomplished"""
    category: str
    description: str

    @property
    def message(self) -> str:
        if len(self.description) > 3:
            return f"{self.category}: {self.description}"
        return self.category


# --- Text cleanup ---

def strip_markup(text: str) -> str:
    """Remove markdown emphasis, inline code, headings, bullets and links."""
    text = re.sub(r"\[([^\]]+)\]\([^)]*\)", r"\1", text)
    text = re.sub(r"^[ \t]*#{1,6}[ \t]*", "", text, flags=re.MULTILINE)
    text = BULLET_RE.sub("", text)
    text = text.replace("**", "").replace("__", "").replace("`", "")
    text = re.sub(r"(?<!\w)\*(?!\s)|(?<!\s)\*(?!\w)", "", text)
    return text.strip()


def _remove_emoji_outside_tags(text: str) -> str:
    parts = BRACKET_SPLIT_RE.split(text)
    cleaned = []
    for part in parts:
        if part.startswith("[") and EMOTION_TAG_RE.match(part):
            cleaned.append(part)
        else:
            cleaned.append(EMOJI_RE.sub("", part))
    return "".join(cleaned)


def clean_for_speech(text: str) -> str:
    """Strip markup, marker labels, agent tags and stray emoji; collapse whitespace."""
    if not text:
        return ""
    text = re.sub(r"\[AGENT:[^\]]*\]", "", text, flags=re.IGNORECASE)
    text = re.sub(r"\b(?:COMPLETED|SUMMARY)\s*:", "", text)
    text = strip_markup(text)
    text = _remove_emoji_outside_tags(text)
    return re.sub(r"\s+", " ", text).strip()


def truncate_words(text: str, max_words: int = MAX_DESCRIPTION_WORDS) -> str:
    """Keep the first max_words whitespace-delimited words."""
    return " ".join(text.split()[:max_words])


# --- Tool call helpers ---

def _dedupe(items: Sequence[str]) -> List[str]:
    seen = []
    for item in items:
        if item and item not in seen:
            seen.append(item)
    return seen


def _is_modification(description: str) -> bool:
    return description.startswith("Modified ") or description.startswith("Created ")


def modifications_from(tool_calls: Sequence[str]) -> List[str]:
    """Deduplicated "Modified x" / "Created x" entries."""
    return [call for call in _dedupe(tool_calls) if _is_modification(call)]


def combine_descriptions(entries: Sequence[str]) -> str:
    """
    Merge several tool descriptions into one phrase.

    Up to three files sharing the first entry's verb collapse into
    "Modified a, b, and c"; otherwise the first two entries are joined
    with "and".
    """
    if not entries:
        return ""
    if len(entries) == 1:
        return entries[0]

    verb = entries[0].split(" ", 1)[0]
    if verb in ("Modified", "Created"):
        files = [entry.split(" ", 1)[1] for entry in entries if entry.startswith(verb + " ")][:3]
        if len(files) >= 2:
            return f"{verb} {join_naturally(files)}"

    second = entries[1]
    return f"{entries[0]} and {second[:1].lower()}{second[1:]}"


def summarize_tool_calls(tool_calls: Sequence[str]) -> Optional[str]:
    """Describe the turn from tool activity alone, ignoring reads and searches."""
    meaningful = [
        call for call in _dedupe(tool_calls)
        if not call.startswith("Read ") and not call.startswith("Searched")
    ]
    if not meaningful:
        return tool_calls[-1] if tool_calls else None
    return combine_descriptions(meaningful)


# --- Description cascade ---

def _rule_explicit_marker(text: str, tool_calls: Sequence[str]) -> Optional[str]:
    for match in MARKER_RE.finditer(text):
        captured = match.group(1).strip().rstrip("*_").strip()
        captured = AGENT_TAG_RE.sub("", captured).strip()
        if captured:
            return captured
    return None


def _rule_summary_heading(text: str, tool_calls: Sequence[str]) -> Optional[str]:
    lines = text.splitlines()
    for index, line in enumerate(lines):
        if not SUMMARY_HEADING_RE.match(line.strip()):
            continue
        for following in lines[index + 1:]:
            stripped = following.strip()
            if not stripped or stripped.startswith("#"):
                continue
            return strip_markup(stripped) or None
    return None


def _rule_action_verb(text: str, tool_calls: Sequence[str]) -> Optional[str]:
    for line in text.splitlines():
        cleaned = strip_markup(line)
        match = ACTION_LINE_RE.match(cleaned)
        if match:
            return f"{match.group(1)} {match.group(2).strip()}"
    return None


def _rule_tool_calls(text: str, tool_calls: Sequence[str]) -> Optional[str]:
    return summarize_tool_calls(tool_calls)


def _rule_question_topic(text: str, tool_calls: Sequence[str]) -> Optional[str]:
    if "?" not in text or modifications_from(tool_calls):
        return None

    questions = [s for s in re.split(r"(?<=[.!?])\s+|\n+", text) if "?" in s]
    for candidate in questions + [text]:
        match = TOPIC_RE.search(strip_markup(candidate))
        if match:
            topic = match.group(1).strip()
            if len(topic) >= 3:
                return f"Answered question about {topic}"
    return None


def _rule_first_sentence(text: str, tool_calls: Sequence[str]) -> Optional[str]:
    for sentence in re.split(r"(?<=[.!?])\s+|\n+", text):
        cleaned = strip_markup(sentence)
        if len(cleaned) <= 15 or FILLER_OPENERS.match(cleaned):
            continue
        return cleaned
    return None


Rule = Callable[[str, Sequence[str]], Optional[str]]

DESCRIPTION_RULES: List[Tuple[str, Rule]] = [
    ("explicit_marker", _rule_explicit_marker),
    ("summary_heading", _rule_summary_heading),
    ("action_verb", _rule_action_verb),
    ("tool_calls", _rule_tool_calls),
    ("question_topic", _rule_question_topic),
    ("first_sentence", _rule_first_sentence),
]


def run_description_cascade(text: str, tool_calls: Sequence[str]) -> Tuple[Optional[str], str]:
    """
    Evaluate DESCRIPTION_RULES in order.

    Returns:
        (description, rule_name) for the first rule with a non-empty result,
        (None, "") when none matched
    """
    text = text or ""
    for name, rule in DESCRIPTION_RULES:
        result = rule(text, tool_calls)
        if result and result.strip():
            return result.strip(), name
    return None, ""


def extract_completion(text: str, tool_calls: Sequence[str]) -> str:
    """
    Build the cleaned, word-limited completion description for a turn.

    Concrete file modifications override a missing or very short cascade
    result.
    """
    description, _ = run_description_cascade(text, tool_calls)

    modifications = modifications_from(tool_calls)
    if modifications and (not description or len(description) < 10):
        description = combine_descriptions(modifications)

    return truncate_words(clean_for_speech(description or ""))


# --- Categorization ---

BUG_FIX_RE = re.compile(r"\b(?:fix\w*|patch\w*|debug\w*|resolv\w*)\b", re.IGNORECASE)
FEATURE_RE = re.compile(
    r"\b(?:add(?:s|ed|ing)?|creat(?:e|es|ed|ing)|implement\w*|built|build(?:s|ing)?|new)\b",
    re.IGNORECASE,
)
QUESTION_RE = re.compile(r"\b(?:explain\w*|answer\w*|describ\w*|what|why|how)\b", re.IGNORECASE)
CONFIG_RE = re.compile(r"\b(?:config\w*|setting\w*|env)\b", re.IGNORECASE)
CONFIG_FILE_RE = re.compile(r"\.(?:env|json|ya?ml|toml|ini)\b", re.IGNORECASE)
SEARCH_TOOL_RE = re.compile(r"search|grep|glob|web", re.IGNORECASE)
FILE_TOOL_RE = re.compile(r"modified|created|edit|write", re.IGNORECASE)
ANALYSIS_RE = re.compile(r"analy[sz]|research|investigat|explor|review", re.IGNORECASE)

DEFAULT_CATEGORY = "Task completed"

CategoryRule = Callable[[str, Sequence[str]], bool]

CATEGORY_RULES: List[Tuple[str, CategoryRule]] = [
    ("Bug fixed", lambda text, tools: bool(BUG_FIX_RE.search(text))),
    ("Feature added", lambda text, tools: bool(FEATURE_RE.search(text))),
    ("Question answered", lambda text, tools: bool(QUESTION_RE.search(text))),
    ("Config updated", lambda text, tools: bool(CONFIG_RE.search(text))
        or any(CONFIG_FILE_RE.search(call) for call in tools)),
    ("Search completed", lambda text, tools: any(SEARCH_TOOL_RE.search(call) for call in tools)),
    ("Code updated", lambda text, tools: any(FILE_TOOL_RE.search(call) for call in tools)),
    ("Analysis complete", lambda text, tools: bool(ANALYSIS_RE.search(text))),
]

CATEGORIES = [name for name, _ in CATEGORY_RULES] + [DEFAULT_CATEGORY]


def categorize(description: str, tool_calls: Sequence[str]) -> str:
    """Pick exactly one category; bug fixes take precedence over features."""
    description = description or ""
    for category, matches in CATEGORY_RULES:
        if matches(description, tool_calls):
            return category
    return DEFAULT_CATEGORY


def extract_summary(text: str, tool_calls: Sequence[str]) -> ExtractedSummary:
    """Description cascade plus categorization for one turn."""
    description = extract_completion(text, tool_calls)
    return ExtractedSummary(category=categorize(description, tool_calls), description=description)
