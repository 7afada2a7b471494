import pytest

from repladder.services.gamification import (
    LEVEL_THRESHOLDS,
    calculate_xp,
    format_multiplier,
    format_xp,
    get_level_from_xp,
    get_level_info,
    get_level_title,
    get_xp_for_level,
    list_levels,
)


class TestCalculateXP:
    def test_reference_workout(self):
        xp = calculate_xp(100, 20, "normal", 0, "standard")
        assert xp.base_xp == 500
        assert xp.speed_bonus == 40
        assert xp.combined_multiplier == 1.0
        assert xp.streak_bonus == 0
        assert xp.total_xp == 540
        assert xp.daily_goal_bonus is None

    def test_speed_and_streak_caps(self):
        xp = calculate_xp(10, 100, "normal", 20)
        assert xp.speed_bonus == 75
        assert xp.streak_bonus == 30
        assert xp.total_xp == 50 + 75 + 30

    def test_no_reps_still_gets_streak_bonus(self):
        xp = calculate_xp(0, 0, "hard", 4, "archer")
        assert xp.total_xp == 12

    def test_variation_lookup_spans_whole_catalog(self):
        # "planche" ist eine extreme Variation, wird hier mit "easy" gewertet
        xp = calculate_xp(10, 0, "easy", 0, "planche")
        assert xp.variation_multiplier == 2.0
        assert xp.combined_multiplier == pytest.approx(1.5)
        assert xp.total_xp == 75

        pull = calculate_xp(10, 0, "normal", 0, "muscle_up_progression")
        assert pull.variation_multiplier == 1.5
        assert pull.total_xp == 75

    def test_unknown_variation_counts_as_one(self):
        assert calculate_xp(10, 0, "normal", 0, "does_not_exist").variation_multiplier == 1.0

    def test_unknown_difficulty(self):
        with pytest.raises(ValueError):
            calculate_xp(10, 0, "brutal", 0)

    @pytest.mark.parametrize("difficulty", ["easy", "normal", "hard", "extreme"])
    @pytest.mark.parametrize("variation", ["standard", "knee", "one_arm", "typewriter"])
    def test_monotonic_in_reps(self, difficulty, variation):
        totals = [calculate_xp(r, 15, difficulty, 2, variation).total_xp for r in range(0, 150)]
        assert totals == sorted(totals)

    def test_to_dict(self):
        data = calculate_xp(100, 20, "normal", 0).to_dict()
        assert data["total_xp"] == 540
        assert "daily_goal_bonus" in data


class TestLevels:
    @pytest.mark.parametrize(
        "xp, level",
        [(0, 1), (499, 1), (500, 2), (25000, 10), (59999, 10), (60000, 15), (10_000_000, 50)],
    )
    def test_level_from_xp(self, xp, level):
        assert get_level_from_xp(xp) == level

    @pytest.mark.parametrize("level, xp, _title", LEVEL_THRESHOLDS)
    def test_round_trip_for_listed_levels(self, level, xp, _title):
        assert get_level_from_xp(get_xp_for_level(level)) == level

    def test_xp_for_unlisted_levels_is_interpolated(self):
        assert get_xp_for_level(11) == 32000
        assert get_xp_for_level(12) == 39000
        assert get_xp_for_level(45) == 625000

    def test_xp_for_level_out_of_table(self):
        assert get_xp_for_level(0) == 0
        assert get_xp_for_level(60) == 750000

    def test_titles(self):
        assert get_level_title(0) == "Rookie"
        assert get_level_title(1) == "Rookie"
        assert get_level_title(12) == "Champion"
        assert get_level_title(45) == "Mythic"
        assert get_level_title(99) == "Immortal"

    def test_level_info_progress(self):
        info = get_level_info(750)
        assert info.level == 2
        assert info.title == "Beginner"
        assert info.xp_for_current_level == 500
        assert info.xp_for_next_level == 1200
        assert info.progress == pytest.approx(250 / 700 * 100)

    @pytest.mark.parametrize("xp", [750000, 1_000_000])
    def test_level_info_at_max_tier(self, xp):
        info = get_level_info(xp)
        assert info.level == 50
        assert info.title == "Immortal"
        assert info.xp_for_next_level == info.xp_for_current_level == 750000
        assert info.progress == 0.0

    def test_list_levels(self):
        levels = list_levels()
        assert len(levels) == 16
        assert levels[0] == {"level": 1, "xp_required": 0, "title": "Rookie"}


def test_formatting():
    assert format_xp(999) == "999"
    assert format_xp(1500) == "1.5K"
    assert format_xp(2_300_000) == "2.3M"
    assert format_multiplier(1.5) == "1.50x"
    assert format_multiplier(1.1) == "1.10x"
