"""Claude Code hook entry points (Stop, UserPromptSubmit)."""
