import sqlite3

import pytest

from repladder.db import get_db
from repladder.models import plan as plan_model
from repladder.models.profile import get_profile
from repladder.services.plan_generator import PlanInputError


def make_plan(user_id="u1", **kw):
    params = {"exercise_type": "pushups", "intensity": "beginner", "timeline_months": 1}
    params.update(kw)
    return plan_model.create_workout_plan(user_id, **params)


def count(table):
    return get_db().execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


def test_create_plan_stores_header_days_and_pointer(ctx):
    plan_id = make_plan()
    assert plan_id is not None

    plan = plan_model.get_active_workout_plan("u1")
    assert plan["id"] == plan_id
    assert plan["is_active"] is True
    assert plan["total_days"] == 30
    assert plan["target_goal"] == 100
    assert count("plan_days") == 30

    profile = get_profile("u1")
    assert profile["current_plan_id"] == plan_id
    assert profile["current_plan_day"] == 1
    assert profile["exercise_type"] == "pushups"


def test_new_plan_replaces_active_plan(ctx):
    first = make_plan()
    second = make_plan(intensity="advanced", timeline_months=3)

    active = get_db().execute(
        "SELECT id FROM workout_plans WHERE user_id = ? AND is_active = 1", ("u1",)
    ).fetchall()
    assert [r["id"] for r in active] == [second]
    assert first != second
    assert get_profile("u1")["current_plan_id"] == second


def test_invalid_input_writes_nothing(ctx):
    with pytest.raises(PlanInputError):
        make_plan(timeline_months=2)
    assert count("workout_plans") == 0
    assert count("profiles") == 0


def test_failed_write_is_rolled_back(ctx, monkeypatch):
    def broken_upsert(db, plan_id, days):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(plan_model, "_upsert_plan_days", broken_upsert)

    assert make_plan() is None
    assert count("workout_plans") == 0
    assert count("plan_days") == 0
    assert count("profiles") == 0


def test_todays_plan(ctx):
    make_plan()
    today = plan_model.get_todays_plan("u1")
    assert today["day_number"] == 1
    assert today["plan_day"]["target_total_reps"] == 30
    assert today["plan_day"]["recommended_sets"] == [5, 5, 5, 5, 5, 5]
    assert today["plan_day"]["is_rest_day"] is False


def test_todays_plan_without_plan(ctx):
    assert plan_model.get_todays_plan("nobody") == {"plan_day": None, "plan": None, "day_number": 1}


def test_advance_never_passes_last_day(ctx):
    make_plan()
    assert plan_model.advance_plan_day("u1") == 2
    for _ in range(40):
        day = plan_model.advance_plan_day("u1")
    assert day == 30
    assert plan_model.advance_plan_day("nobody") == 1


def test_reset_plan_to_day(ctx):
    make_plan()
    assert plan_model.reset_plan_to_day("u1", 12)
    assert plan_model.get_todays_plan("u1")["day_number"] == 12
    assert not plan_model.reset_plan_to_day("u1", 0)
    assert not plan_model.reset_plan_to_day("u1", 31)
    assert plan_model.get_todays_plan("u1")["day_number"] == 12


def test_upcoming_days(ctx):
    make_plan()
    days = plan_model.get_upcoming_days("u1")
    assert [d["day_number"] for d in days] == [1, 2, 3, 4, 5, 6, 7]
    assert days[1]["is_rest_day"] is True
    assert days[1]["recommended_sets"] == []

    plan_model.reset_plan_to_day("u1", 28)
    assert [d["day_number"] for d in plan_model.get_upcoming_days("u1")] == [28, 29, 30]


def test_plan_progress_for_new_plan(ctx):
    make_plan()
    progress = plan_model.get_plan_progress("u1")
    assert progress == {
        "current_day": 1,
        "total_days": 30,
        "percent_complete": 3,
        "workouts_completed": 0,
        "days_remaining": 29,
        "is_on_track": True,
    }
    assert plan_model.get_plan_progress("nobody") is None


def test_apply_adjustment_only_changes_future_days(ctx):
    make_plan()
    plan_model.reset_plan_to_day("u1", 5)

    assert plan_model.apply_plan_adjustment("u1", "harder")
    plan = plan_model.load_workout_plan(plan_model.get_active_workout_plan("u1")["id"])
    assert plan.days[0].target_total_reps == 30
    assert plan.days[7].target_total_reps == 39
    assert sum(plan.days[7].recommended_sets) == 39
    assert len(plan.days) == 30

    assert not plan_model.apply_plan_adjustment("nobody", "easier")


def test_load_workout_plan_matches_stored_rows(ctx):
    plan_id = make_plan(exercise_type="pullups", max_reps=8)
    plan = plan_model.load_workout_plan(plan_id)
    assert plan.exercise_type == "pullups"
    assert plan.starting_max_reps == 8
    assert plan.days[0].target_total_reps == 16
    assert plan_model.load_workout_plan(9999) is None
