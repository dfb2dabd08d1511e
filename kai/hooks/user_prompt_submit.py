#!/usr/bin/env python3
"""
UserPromptSubmit hook: remember when the prompt was accepted.

The Stop hook pops this timestamp to report how long the turn took.
"""

import logging
import sys

from dotenv import load_dotenv

from kai.hooks.utils.hook_input import read_hook_input
from kai.hooks.utils.prompt_timer import PromptTimestampStore
from kai.log_utils import setup_hook_logger

logger = logging.getLogger("kai.hooks.user_prompt_submit")


def main():
    setup_hook_logger()
    try:
        load_dotenv()
        input_data = read_hook_input()
        session_id = input_data.get("session_id", "") or ""

        path = PromptTimestampStore().record(session_id)
        logger.debug("Recorded prompt timestamp at %s", path)
        sys.exit(0)

    except SystemExit:
        raise
    except Exception:
        logger.exception("UserPromptSubmit hook failed")
        sys.exit(0)


if __name__ == "__main__":
    main()
