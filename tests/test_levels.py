from attendance_gamification.progression.levels import (
    LEVELS,
    RANK_TIERS,
    calculate_level,
    calculate_rank_tier,
    level_progress,
    rank_icon,
    rank_progress,
)


def test_level_is_highest_threshold_not_above_points():
    assert calculate_level(0).name == "Rookie"
    assert calculate_level(199).level == 1
    assert calculate_level(200).name == "Regular"
    assert calculate_level(14999).name == "Legend"
    assert calculate_level(250000).name == "Immortal"


def test_rank_tier_boundaries():
    assert calculate_rank_tier(0).name == "Unranked"
    assert calculate_rank_tier(49).name == "Unranked"
    assert calculate_rank_tier(50).name == "Bronze"
    assert calculate_rank_tier(300).name == "Gold"
    assert calculate_rank_tier(10_000).name == "Diamond"


def test_step_functions_are_monotonic():
    previous = 0
    for points in range(0, 16000, 50):
        level = calculate_level(points).level
        assert level >= previous
        previous = level

    tiers = [t.name for t in RANK_TIERS]
    previous_idx = 0
    for points in range(0, 1000, 10):
        idx = tiers.index(calculate_rank_tier(points).name)
        assert idx >= previous_idx
        previous_idx = idx


def test_progress_between_thresholds():
    p = level_progress(100)
    assert p.next_threshold == 200
    assert p.percent == 50

    r = rank_progress(100)
    assert r.next_threshold == 150
    assert r.percent == 50


def test_progress_at_top_is_complete():
    assert level_progress(LEVELS[-1].threshold + 1).percent == 100
    assert rank_progress(RANK_TIERS[-1].threshold).percent == 100
    assert rank_progress(RANK_TIERS[-1].threshold).next_threshold == 0


def test_rank_icon_lookup():
    assert rank_icon("Gold") == "🥇"
    assert rank_icon("no-such-tier") == rank_icon("Unranked")
