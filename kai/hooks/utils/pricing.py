#!/usr/bin/env python3
"""
Model pricing table for turn cost estimates.

Prices are USD per million tokens.
"""

from typing import Dict

from kai.hooks.utils.transcript import UsageStats

MODEL_PRICING: Dict[str, Dict[str, float]] = {
    "claude-opus-4-1-20250805": {"input": 15.0, "output": 75.0, "cache_read": 1.5},
    "claude-opus-4-20250514": {"input": 15.0, "output": 75.0, "cache_read": 1.5},
    "claude-sonnet-4-5-20250929": {"input": 3.0, "output": 15.0, "cache_read": 0.3},
    "claude-sonnet-4-20250514": {"input": 3.0, "output": 15.0, "cache_read": 0.3},
    "claude-3-7-sonnet-20250219": {"input": 3.0, "output": 15.0, "cache_read": 0.3},
    "claude-haiku-4-5-20251001": {"input": 1.0, "output": 5.0, "cache_read": 0.1},
    "claude-3-5-haiku-20241022": {"input": 0.8, "output": 4.0, "cache_read": 0.08},
}

# Unknown models are billed like Sonnet
DEFAULT_PRICING: Dict[str, float] = {"input": 3.0, "output": 15.0, "cache_read": 0.3}

TOKENS_PER_UNIT = 1_000_000


def get_pricing(model: str) -> Dict[str, float]:
    """Pricing row for a model id, DEFAULT_PRICING when unknown."""
    return MODEL_PRICING.get(model or "", DEFAULT_PRICING)


def calculate_cost(usage: UsageStats) -> float:
    """Estimated USD cost of the turn's token usage."""
    pricing = get_pricing(usage.model)
    return (
        usage.input_tokens / TOKENS_PER_UNIT * pricing["input"]
        + usage.output_tokens / TOKENS_PER_UNIT * pricing["output"]
        + usage.cache_read_tokens / TOKENS_PER_UNIT * pricing["cache_read"]
    )
