import re

from kai.hooks.utils.formatting import (
    TurnStats,
    build_display_block,
    build_spoken_message,
    format_cost_for_voice,
    format_cost_short,
    format_duration,
    format_duration_short,
    format_tokens_for_voice,
    format_tokens_short,
    join_naturally,
)
from kai.hooks.utils.transcript import UsageStats


def test_format_duration():
    assert format_duration(0) == "less than a second"
    assert format_duration(999) == "less than a second"
    assert format_duration(1000) == "1 second"
    assert format_duration(45_000) == "45 seconds"
    assert format_duration(61_000) == "1 minute and 1 second"
    assert format_duration(120_000) == "2 minutes"
    assert format_duration(3_600_000) == "1 hour"
    assert format_duration(3_780_000) == "1 hour and 3 minutes"


def test_small_token_counts_start_with_about():
    for tokens in range(1, 950):
        assert format_tokens_for_voice(tokens).startswith("about ")


def _granularity(tokens):
    spoken = format_tokens_for_voice(tokens)
    if "million" in spoken:
        return 1_000_000
    number = int(re.search(r"\d+", spoken).group()) if re.search(r"\d+", spoken) else 1
    if "thousand" in spoken:
        return 10_000 if number >= 100 else 1000
    return 100


def test_token_granularity_never_shrinks():
    samples = [1, 50, 120, 949, 950, 5_400, 12_345, 99_999, 100_000, 456_789, 949_999, 950_000, 3_300_000]
    granularities = [_granularity(tokens) for tokens in samples]
    assert granularities == sorted(granularities)


def test_format_tokens_for_voice_values():
    assert format_tokens_for_voice(0) == "no"
    assert format_tokens_for_voice(40) == "about 100"
    assert format_tokens_for_voice(949) == "about 900"
    assert format_tokens_for_voice(1_200) == "about a thousand"
    assert format_tokens_for_voice(5_600) == "about 6 thousand"
    assert format_tokens_for_voice(12_345) == "about 12 thousand"
    assert format_tokens_for_voice(456_789) == "about 460 thousand"
    assert format_tokens_for_voice(1_100_000) == "about a million"
    assert format_tokens_for_voice(2_600_000) == "about 3 million"


def test_format_cost_for_voice():
    assert format_cost_for_voice(0.004) == "less than a cent"
    assert format_cost_for_voice(0.01) == "1 cent"
    assert format_cost_for_voice(0.123) == "12 cents"
    assert format_cost_for_voice(1.5) == "1.50 dollars"


def test_display_formatters():
    assert format_duration_short(45_000) == "45s"
    assert format_duration_short(125_000) == "2m 5s"
    assert format_duration_short(3_780_000) == "1h 3m"
    assert format_tokens_short(850) == "850"
    assert format_tokens_short(12_500) == "12.5K"
    assert format_tokens_short(1_500) == "1.5K"
    assert format_tokens_short(120_000) == "120K"
    assert format_tokens_short(1_200_000) == "1.2M"
    assert format_cost_short(0.004) == "<$0.01"
    assert format_cost_short(0.48) == "$0.48"


def test_join_naturally():
    assert join_naturally([]) == ""
    assert join_naturally(["a"]) == "a"
    assert join_naturally(["a", "b"]) == "a and b"
    assert join_naturally(["a", "b", "c"]) == "a, b, and c"


def test_spoken_message_lists_only_present_stats():
    stats = TurnStats(
        duration_ms=45_000,
        usage=UsageStats(input_tokens=10_000, output_tokens=2_000),
        cost=0.04,
        agents=["engineer"],
        skills=["research", "docs"],
    )
    message = build_spoken_message("Code updated: Modified a.ts", stats)
    assert message == (
        "Code updated: Modified a.ts. It took 45 seconds, used about 12 thousand tokens, "
        "spawned the engineer agent, used the research and docs skills, and cost 4 cents."
    )


def test_spoken_message_without_stats_is_unchanged():
    assert build_spoken_message("Task completed", TurnStats()) == "Task completed"


def test_display_block_rows_have_equal_width():
    stats = TurnStats(duration_ms=61_000, usage=UsageStats(input_tokens=850, model="claude-sonnet-4-5-20250929"),
                      cost=0.48, skills=["research"])
    block = build_display_block("Bug fixed: Fixed the login loop", stats, title="Kai")
    rows = block.splitlines()

    assert rows[0].startswith("╭─ Kai ")
    assert rows[-1].startswith("╰")
    assert len({len(row) for row in rows}) == 1
    assert any("Time 1m 1s | Tokens 850 | Cost $0.48" in row for row in rows)


def test_cost_rounding_to_a_dollar_says_dollars():
    assert format_cost_for_voice(0.994) == "99 cents"
    assert format_cost_for_voice(0.995) == "1.00 dollars"
    assert format_cost_for_voice(0.999) == "1.00 dollars"
    assert format_cost_for_voice(12.5) == "12.50 dollars"


def test_short_tokens_roll_over_to_millions():
    assert format_tokens_short(999_400) == "999K"
    assert format_tokens_short(999_600) == "1M"
