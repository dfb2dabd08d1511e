#!/usr/bin/env python3
"""
Stop hook: announce what the assistant just finished.

Reads the hook payload, analyzes the transcript since the last user
message, prints a boxed summary and sends a spoken version to the local
voice server. Never fails the host: every error ends in exit code 0.
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from kai.hooks.utils.completion import ExtractedSummary, extract_summary
from kai.hooks.utils.formatting import TurnStats, build_display_block, build_spoken_message
from kai.hooks.utils.hook_input import read_hook_input
from kai.hooks.utils.notify import build_payload, get_assistant_name, send_notification
from kai.hooks.utils.pricing import calculate_cost
from kai.hooks.utils.prompt_timer import PromptTimestampStore
from kai.hooks.utils.transcript import TurnSummary, read_transcript, summarize_turn
from kai.log_utils import setup_hook_logger

logger = logging.getLogger("kai.hooks.stop")


@dataclass
class CompletionReport:
    """Everything produced for one Stop event"""
    summary: ExtractedSummary
    turn: TurnSummary
    stats: TurnStats
    spoken: str
    display: str


def build_report(transcript_text: str, duration_ms: int = 0, title: str = "Kai") -> CompletionReport:
    """
    Analyze a transcript into the spoken and displayed completion.

    Args:
        transcript_text: Raw JSONL transcript
        duration_ms: Time since the prompt was submitted (0 if unknown)
        title: Assistant name for the display box

    Returns:
        CompletionReport: Summary, stats and both renderings
    """
    turn = summarize_turn(transcript_text)
    summary = extract_summary(turn.last_assistant_text, turn.tool_calls)

    stats = TurnStats(
        duration_ms=duration_ms,
        usage=turn.usage,
        cost=calculate_cost(turn.usage),
        agents=list(turn.agents),
        skills=list(turn.skills),
    )

    return CompletionReport(
        summary=summary,
        turn=turn,
        stats=stats,
        spoken=build_spoken_message(summary.message, stats),
        display=build_display_block(summary.message, stats, title=title),
    )


def handle_stop(input_data: Dict[str, Any], store: Optional[PromptTimestampStore] = None,
                notify: bool = True) -> CompletionReport:
    """Run the Stop hook for one decoded payload."""
    session_id = input_data.get("session_id", "") or ""
    transcript_path = input_data.get("transcript_path", "") or ""

    store = store or PromptTimestampStore()
    duration_ms = store.elapsed_ms(session_id)

    report = build_report(read_transcript(transcript_path), duration_ms=duration_ms,
                          title=get_assistant_name())
    logger.info("Session %s completed: %s", session_id or "?", report.summary.message)

    print(report.display)

    if notify:
        delivered = send_notification(build_payload(report.spoken))
        logger.info("Voice notification %s", "sent" if delivered else "skipped (server unavailable)")

    return report


def main():
    setup_hook_logger()
    try:
        load_dotenv()

        parser = argparse.ArgumentParser(description="Announce turn completion")
        parser.add_argument("--no-voice", action="store_true", help="Print the summary without notifying the voice server")
        args = parser.parse_args()

        input_data = read_hook_input()

        # Subagent completions are summarized by the main agent's Stop
        if input_data.get("hook_event_name") == "SubagentStop":
            sys.exit(0)

        handle_stop(input_data, notify=not args.no_voice)
        sys.exit(0)

    except SystemExit:
        raise
    except Exception:
        logger.exception("Stop hook failed")
        sys.exit(0)


if __name__ == "__main__":
    main()
