"""Builders for JSONL transcript records used across the hook tests."""

import json

SONNET = "claude-sonnet-4-5-20250929"


def user_text(text):
    return {"type": "user", "message": {"role": "user", "content": text}}


def tool_result(tool_use_id="toolu_1"):
    return {
        "type": "user",
        "message": {
            "role": "user",
            "content": [{"type": "tool_result", "tool_use_id": tool_use_id, "content": "ok"}],
        },
    }


def text_block(text):
    return {"type": "text", "text": text}


def tool_use(name, **tool_input):
    return {"type": "tool_use", "id": f"toolu_{name}", "name": name, "input": tool_input}


def assistant(*blocks, usage=None, model=SONNET):
    message = {"role": "assistant", "model": model, "content": list(blocks)}
    if usage is not None:
        message["usage"] = usage
    return {"type": "assistant", "message": message}


def to_jsonl(records):
    return "\n".join(json.dumps(record) for record in records) + "\n"
