import pytest

PLAN = {"exercise_type": "pushups", "intensity": "beginner", "timeline_months": 1}
SETS = [
    {"reps": 15, "duration_seconds": 45, "rest_after_seconds": 60},
    {"reps": 13, "duration_seconds": 39, "rest_after_seconds": 0},
]


@pytest.fixture
def planned(client):
    resp = client.post("/users/u1/plan", json=PLAN)
    assert resp.status_code == 201
    return resp.get_json()


def test_health_and_index(client):
    assert client.get("/health").get_json() == {"status": "ok"}
    index = client.get("/").get_json()
    assert index["exercises"]["pullups"]["goal"] == 50
    assert index["default_exercise"] == "pushups"


def test_preview_does_not_store(client):
    resp = client.post("/plans/preview", json={"intensity": "advanced", "timeline_months": 3})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["total_days"] == 90
    assert len(data["week"]) == 7
    assert data["week"][0]["target_total_reps"] == 70
    assert data["week"][6]["is_rest_day"] is True

    assert client.get("/users/u1/plan/today").status_code == 404


@pytest.mark.parametrize(
    "payload",
    [
        {"intensity": "beginner", "timeline_months": 2},
        {"intensity": "insane", "timeline_months": 1},
        {"exercise_type": "squats", "intensity": "beginner", "timeline_months": 1},
        {"intensity": "beginner", "timeline_months": 1, "fitness_level": "pro"},
        {},
        {"intensity": ["beginner"], "timeline_months": 1},
        {"intensity": "beginner", "timeline_months": 1, "fitness_level": ["advanced"]},
        {"exercise_type": {"id": "pullups"}, "intensity": "beginner", "timeline_months": 1},
        {"intensity": "beginner", "timeline_months": 1, "max_reps": -5},
        {"intensity": "beginner", "timeline_months": 1, "max_reps": "lots"},
        {"intensity": "beginner", "timeline_months": 1, "max_reps": [10]},
        {"intensity": "beginner", "timeline_months": 1, "max_reps": "inf"},
        [1, 2],
        "beginner",
    ],
)
def test_create_plan_rejects_bad_input(client, payload):
    resp = client.post("/users/u1/plan", json=payload)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_create_plan_and_today(client, planned):
    assert planned["plan"]["total_days"] == 30

    today = client.get("/users/u1/plan/today").get_json()
    assert today["day_number"] == 1
    assert today["label"] == "Week 1, Day 1"
    assert today["plan_day"]["target_total_reps"] == 30
    assert today["plan_day"]["notes"] == "Day 1 - Let's begin your journey!"


def test_advance_and_reset(client, planned):
    assert client.post("/users/u1/plan/advance").get_json() == {"day_number": 2}
    assert client.post("/users/u1/plan/reset", json={"day_number": 9}).get_json() == {"day_number": 9}
    assert client.post("/users/u1/plan/reset", json={"day_number": 99}).status_code == 400
    assert client.get("/users/u1/plan/today").get_json()["label"] == "Week 2, Day 2"
    assert client.post("/users/nobody/plan/advance").status_code == 404


def test_progress_and_upcoming(client, planned):
    progress = client.get("/users/u1/plan/progress").get_json()
    assert progress["current_day"] == 1
    assert progress["is_on_track"] is True
    assert len(client.get("/users/u1/plan/upcoming").get_json()) == 7
    assert client.get("/users/nobody/plan/progress").status_code == 404


def test_adjust_from_completion_rates(client, planned):
    resp = client.post("/users/u1/plan/adjust", json={"completion_rates": [120, 115, 130]})
    assert resp.get_json()["adjustment"] == "harder"

    keep = client.post("/users/u1/plan/adjust", json={"completion_rates": [95, 100, 90]})
    assert keep.get_json()["adjustment"] == "keep"

    assert client.post("/users/u1/plan/adjust", json={"adjustment": "sideways"}).status_code == 400
    assert client.post("/users/u1/plan/adjust", json={}).status_code == 400
    assert client.post("/users/nobody/plan/adjust", json={"adjustment": "easier"}).status_code == 404


def test_save_workout_meets_daily_goal(client, planned):
    resp = client.post("/users/u1/workouts", json={"sets": SETS})
    assert resp.status_code == 201
    data = resp.get_json()
    assert data["workout"]["total_reps"] == 28
    assert data["workout"]["variation"] == "standard"
    assert data["daily_goal_completed"] is True
    assert data["xp_earned"] == 180 + 100

    assert client.get("/users/u1/plan/today").get_json()["day_number"] == 2

    sets = client.get(f"/workouts/{data['workout']['id']}/sets").get_json()
    assert [s["reps"] for s in sets] == [15, 13]


@pytest.mark.parametrize(
    "payload",
    [
        {"sets": []},
        {"sets": [{"reps": 0, "duration_seconds": 10}]},
        {"sets": SETS, "difficulty": "brutal"},
        {"sets": SETS, "exercise_type": "squats"},
        {"sets": SETS, "variation": {"id": "wide"}},
        {"sets": SETS, "variation": ["wide"]},
        {"sets": SETS, "difficulty": ["hard"]},
        [SETS],
    ],
)
def test_save_workout_rejects_bad_input(client, payload):
    assert client.post("/users/u1/workouts", json=payload).status_code == 400


def test_pullup_workout_uses_pullup_default_variation(client):
    resp = client.post("/users/u1/workouts", json={"sets": SETS, "exercise_type": "pullups"})
    assert resp.get_json()["workout"]["variation"] == "standard_pullup"


def test_history_stats_profile_leaderboard(client):
    client.post("/users/a/workouts", json={"sets": SETS})
    client.post("/users/b/workouts", json={"sets": SETS, "difficulty": "hard"})

    assert len(client.get("/users/a/workouts").get_json()) == 1
    assert client.get("/users/a/stats").get_json()["total_workouts"] == 1

    profile = client.get("/users/b/profile").get_json()
    assert profile["level_info"]["level"] == 1
    assert client.get("/users/nobody/profile").status_code == 404

    board = client.get("/leaderboard?limit=5").get_json()
    assert [p["id"] for p in board] == ["b", "a"]
    assert client.get("/workouts/9999/sets").status_code == 404


def test_catalog_and_levels(client):
    data = client.get("/catalog/pullups?level=3").get_json()
    assert data["goal"] == 50
    assert "close_grip_pullup" in data["unlocked"]
    assert "neutral_grip" not in data["unlocked"]
    assert client.get("/catalog/squats").status_code == 404

    assert len(client.get("/levels").get_json()) == 16
    assert client.get("/levels/500").get_json()["level"] == 2


def test_onboarding_flow(client):
    assert client.get("/users/u1/onboarding").status_code == 404
    resp = client.put(
        "/users/u1/onboarding",
        json={"exercise_type": "pullups", "intensity": "intermediate", "timeline_months": 3, "max_reps": 5},
    )
    assert resp.status_code == 200
    assert resp.get_json()["max_reps"] == 5

    assert client.get("/users/u1/onboarding").get_json()["completed"] is False
    assert client.post("/users/u1/onboarding/complete").get_json() == {"completed": True}
    assert client.get("/users/u1/onboarding").get_json()["completed"] is True

    assert client.put("/users/u1/onboarding", json={"intensity": "beginner"}).status_code == 400


def test_progress_charts(client, planned):
    resp = client.get("/progress/users/u1/plan.png")
    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert resp.data.startswith(b"\x89PNG")

    client.post("/users/u1/workouts", json={"sets": SETS})
    history = client.get("/progress/users/u1/history.png?download=1")
    assert history.status_code == 200
    assert "attachment" in history.headers["Content-Disposition"]

    assert client.get("/progress/users/nobody/plan.png").status_code == 404
    assert client.get("/progress/users/u1/history.png?exercise_type=squats").status_code == 400


def test_empty_history_chart(client):
    resp = client.get("/progress/users/nobody/history.png")
    assert resp.status_code == 200
    assert resp.data.startswith(b"\x89PNG")


def test_create_plan_accepts_numeric_max_reps_string(client):
    resp = client.post("/users/u1/plan", json={**PLAN, "max_reps": "12"})
    assert resp.status_code == 201
    assert resp.get_json()["plan"]["starting_max_reps"] == 12


def test_unknown_variation_string_scores_neutral(client):
    resp = client.post("/users/u1/workouts", json={"sets": SETS, "variation": "no_such_variation"})
    assert resp.status_code == 201
    assert resp.get_json()["xp"]["variation_multiplier"] == 1.0


@pytest.mark.parametrize(
    "url, payload",
    [
        ("/users/u1/plan/reset", [9]),
        ("/users/u1/plan/adjust", ["harder"]),
        ("/users/u1/onboarding", [1, 2]),
    ],
)
def test_non_object_bodies_are_rejected(client, planned, url, payload):
    method = client.put if url.endswith("onboarding") else client.post
    resp = method(url, json=payload)
    assert resp.status_code == 400
    assert "error" in resp.get_json()
