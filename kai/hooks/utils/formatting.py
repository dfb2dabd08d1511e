#!/usr/bin/env python3
"""
Formatting helpers for completion announcements.

Two registers:
- Voice: natural spoken English ("about 12 thousand tokens", "1 minute and 1 second")
- Display: dense terminal shorthand ("12K", "61s", "$0.48") for the boxed summary
"""

import math
from dataclasses import dataclass, field
from typing import List

from kai.hooks.utils.transcript import UsageStats


@dataclass
class TurnStats:
    """Measured cost of one turn"""
    duration_ms: int = 0
    usage: UsageStats = field(default_factory=UsageStats)
    cost: float = 0.0
    agents: List[str] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def join_naturally(items: List[str]) -> str:
    """
    Join items as an English list with an Oxford comma.

    ["a"] -> "a", ["a", "b"] -> "a and b", ["a", "b", "c"] -> "a, b, and c"
    """
    items = [item for item in items if item]
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return f"{', '.join(items[:-1])}, and {items[-1]}"


# --- Voice formatters ---

def format_duration(duration_ms: int) -> str:
    """Spoken duration, e.g. "2 minutes" or "1 minute and 1 second"."""
    total_seconds = int(max(0, duration_ms) // 1000)
    if total_seconds < 1:
        return "less than a second"

    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours:
        if minutes:
            return f"{_plural(hours, 'hour')} and {_plural(minutes, 'minute')}"
        return _plural(hours, "hour")
    if minutes:
        if seconds:
            return f"{_plural(minutes, 'minute')} and {_plural(seconds, 'second')}"
        return _plural(minutes, "minute")
    return _plural(seconds, "second")


def format_tokens_for_voice(tokens: int) -> str:
    """
    Round a token count to a granularity that sounds natural when spoken.

    Granularity grows with the count: hundreds, thousands, ten thousands,
    then millions.
    """
    if tokens <= 0:
        return "no"
    if tokens < 950:
        hundreds = max(1, _round_half_up(tokens / 100))
        return f"about {hundreds * 100}"
    if tokens < 10_000:
        thousands = _round_half_up(tokens / 1000)
        if thousands == 1:
            return "about a thousand"
        return f"about {thousands} thousand"
    if tokens < 100_000:
        return f"about {_round_half_up(tokens / 1000)} thousand"
    if tokens < 950_000:
        return f"about {_round_half_up(tokens / 10_000) * 10} thousand"

    millions = max(1, _round_half_up(tokens / 1_000_000))
    if millions == 1:
        return "about a million"
    return f"about {millions} million"


def format_cost_for_voice(cost: float) -> str:
    """Spoken cost: "less than a cent", "12 cents", "1.25 dollars"."""
    if cost < 0.01:
        return "less than a cent"
    cents = _round_half_up(cost * 100)
    if cents < 100:
        return "1 cent" if cents == 1 else f"{cents} cents"
    return f"{cents / 100:.2f} dollars"


# --- Display formatters ---

def format_duration_short(duration_ms: int) -> str:
    total_seconds = int(max(0, duration_ms) // 1000)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}h {minutes}m"
    if minutes:
        return f"{minutes}m {seconds}s" if seconds else f"{minutes}m"
    return f"{seconds}s"


def format_tokens_short(tokens: int) -> str:
    if tokens < 1000:
        return str(max(0, tokens))
    if tokens < 100_000:
        return f"{tokens / 1000:.1f}".rstrip("0").rstrip(".") + "K"
    thousands = _round_half_up(tokens / 1000)
    if thousands < 1000:
        return f"{thousands}K"
    return f"{tokens / 1_000_000:.1f}".rstrip("0").rstrip(".") + "M"


def format_cost_short(cost: float) -> str:
    if cost <= 0:
        return "$0.00"
    if cost < 0.01:
        return "<$0.01"
    return f"${cost:.2f}"


# --- Message builders ---

def build_stats_clauses(stats: TurnStats) -> List[str]:
    """Spoken clauses for every non-empty statistic, in a fixed order."""
    clauses = []
    if stats.duration_ms >= 1000:
        clauses.append(f"took {format_duration(stats.duration_ms)}")
    if stats.usage.total_tokens > 0:
        clauses.append(f"used {format_tokens_for_voice(stats.usage.total_tokens)} tokens")
    if stats.agents:
        noun = "agent" if len(stats.agents) == 1 else "agents"
        clauses.append(f"spawned the {join_naturally(stats.agents)} {noun}")
    if stats.skills:
        noun = "skill" if len(stats.skills) == 1 else "skills"
        clauses.append(f"used the {join_naturally(stats.skills)} {noun}")
    if stats.cost > 0:
        clauses.append(f"cost {format_cost_for_voice(stats.cost)}")
    return clauses


def build_spoken_message(completion: str, stats: TurnStats) -> str:
    """
    Completion sentence followed by a natural statistics clause.

    e.g. "Code updated: Modified a.ts. It took 45 seconds, used about
    12 thousand tokens, and cost 4 cents."
    """
    clauses = build_stats_clauses(stats)
    if not clauses:
        return completion
    sentence = completion.rstrip(" .!?")
    return f"{sentence}. It {join_naturally(clauses)}."


def build_display_block(completion: str, stats: TurnStats, title: str = "Kai") -> str:
    """Boxed terminal summary of the turn."""
    lines = [completion]

    metrics = []
    if stats.duration_ms >= 1000:
        metrics.append(f"Time {format_duration_short(stats.duration_ms)}")
    if stats.usage.total_tokens > 0:
        metrics.append(f"Tokens {format_tokens_short(stats.usage.total_tokens)}")
    if stats.cost > 0:
        metrics.append(f"Cost {format_cost_short(stats.cost)}")
    if metrics:
        lines.append(" | ".join(metrics))
    if stats.agents:
        lines.append(f"Agents: {', '.join(stats.agents)}")
    if stats.skills:
        lines.append(f"Skills: {', '.join(stats.skills)}")
    if stats.usage.model:
        lines.append(f"Model: {stats.usage.model}")

    width = max(len(line) for line in lines + [title]) + 2
    top = f"╭─ {title} " + "─" * (width - len(title) - 2) + "╮"
    body = [f"│ {line.ljust(width)}│" for line in lines]
    bottom = "╰" + "─" * (width + 1) + "╯"
    return "\n".join([top, *body, bottom])
