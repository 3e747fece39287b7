"""Workout aggregate: create, replace-on-update, results, generate, cascades."""

import pytest

from app.models.workout import Workout, WorkoutExercise, WorkoutResult


@pytest.fixture
async def exercises(client, admin):
    _, headers = admin
    ids = []
    for name in ["Push-ups", "Pull-ups", "Air Squats", "Sit-ups", "Rowing", "Double-unders"]:
        resp = await client.post("/exercises", json={"name": name}, headers=headers)
        ids.append(resp.json()["id"])
    return ids


async def test_create_workout_with_exercises(client, admin, member, exercises):
    member_id, _ = member
    _, headers = admin
    resp = await client.post(
        "/workouts",
        json={
            "user_id": member_id,
            "name": "Cindy",
            "description": "AMRAP 20",
            "date": "2025-07-11",
            "exercises": [
                {"exerciseId": exercises[0], "reps": 10},
                {"exercise_id": exercises[1], "reps": 5, "notes": "strict"},
                {"exercise_id": exercises[2], "duration": 60},
            ],
        },
        headers=headers,
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["user_id"] == member_id
    assert body["date"] == "2025-07-11"
    assert [(e["exercise_id"], e["reps"]) for e in body["exercises"]] == [
        (exercises[0], 10),
        (exercises[1], 5),
        (exercises[2], None),
    ]
    assert body["exercises"][2]["duration_seconds"] == 60
    assert body["exercises"][1]["exercise"]["name"] == "Pull-ups"


async def test_create_for_missing_owner_writes_nothing(client, admin, count_rows):
    _, headers = admin
    resp = await client.post("/workouts", json={"user_id": 42, "name": "Ghost"}, headers=headers)
    assert resp.status_code == 404
    assert await count_rows(Workout) == 0


async def test_create_with_unknown_exercise_writes_nothing(client, admin, member, exercises, count_rows):
    member_id, _ = member
    _, headers = admin
    resp = await client.post(
        "/workouts",
        json={"user_id": member_id, "name": "Bad", "exercises": [{"exercise_id": exercises[0]}, {"exercise_id": 999}]},
        headers=headers,
    )
    assert resp.status_code == 404
    assert "999" in resp.json()["message"]
    assert await count_rows(Workout) == 0
    assert await count_rows(WorkoutExercise) == 0


async def test_create_rejects_missing_fields_and_duplicates(client, admin, member, exercises):
    member_id, _ = member
    _, headers = admin
    resp = await client.post("/workouts", json={"name": "No owner"}, headers=headers)
    assert resp.status_code == 400
    resp = await client.post(
        "/workouts",
        json={"user_id": member_id, "name": "Twice", "exercises": [{"exercise_id": exercises[0]}] * 2},
        headers=headers,
    )
    assert resp.status_code == 400


async def test_create_requires_staff(client, member):
    member_id, headers = member
    resp = await client.post("/workouts", json={"user_id": member_id, "name": "Mine"}, headers=headers)
    assert resp.status_code == 403


async def test_update_replaces_exercise_list(client, coach, member, exercises, count_rows):
    member_id, _ = member
    _, headers = coach
    created = await client.post(
        "/workouts",
        json={"user_id": member_id, "name": "Swap", "exercises": [{"exerciseId": exercises[0], "sets": 3}]},
        headers=headers,
    )
    workout_id = created.json()["id"]

    resp = await client.put(
        f"/workouts/{workout_id}",
        json={"exercises": [{"exerciseId": exercises[1], "reps": 10}]},
        headers=headers,
    )
    assert resp.status_code == 200
    assigned = resp.json()["exercises"]
    assert len(assigned) == 1
    assert assigned[0]["exercise_id"] == exercises[1]
    assert assigned[0]["reps"] == 10
    assert assigned[0]["sets"] is None
    assert await count_rows(WorkoutExercise) == 1
    assert await count_rows(WorkoutExercise, WorkoutExercise.exercise_id == exercises[0]) == 0


async def test_update_same_exercise_replaces_attributes(client, coach, member, exercises):
    member_id, _ = member
    _, headers = coach
    created = await client.post(
        "/workouts",
        json={"user_id": member_id, "name": "Same", "exercises": [{"exercise_id": exercises[0], "sets": 3, "notes": "x"}]},
        headers=headers,
    )
    workout_id = created.json()["id"]
    resp = await client.put(
        f"/workouts/{workout_id}", json={"exercises": [{"exercise_id": exercises[0], "reps": 12}]}, headers=headers
    )
    (entry,) = resp.json()["exercises"]
    assert (entry["sets"], entry["reps"], entry["notes"]) == (None, 12, None)


async def test_update_without_exercises_keeps_them(client, coach, member, exercises):
    member_id, _ = member
    _, headers = coach
    created = await client.post(
        "/workouts",
        json={"user_id": member_id, "name": "Keep", "exercises": [{"exercise_id": exercises[0]}]},
        headers=headers,
    )
    workout_id = created.json()["id"]
    resp = await client.put(f"/workouts/{workout_id}", json={"name": "Kept"}, headers=headers)
    assert resp.json()["name"] == "Kept"
    assert len(resp.json()["exercises"]) == 1


async def test_update_with_empty_list_clears(client, coach, member, exercises, count_rows):
    member_id, _ = member
    _, headers = coach
    created = await client.post(
        "/workouts",
        json={"user_id": member_id, "name": "Clear", "exercises": [{"exercise_id": exercises[0]}]},
        headers=headers,
    )
    resp = await client.put(f"/workouts/{created.json()['id']}", json={"exercises": []}, headers=headers)
    assert resp.json()["exercises"] == []
    assert await count_rows(WorkoutExercise) == 0


async def test_update_unknown_workout_or_owner(client, coach, member):
    member_id, _ = member
    _, headers = coach
    assert (await client.put("/workouts/77", json={"name": "x"}, headers=headers)).status_code == 404
    created = await client.post("/workouts", json={"user_id": member_id, "name": "Owner"}, headers=headers)
    resp = await client.put(f"/workouts/{created.json()['id']}", json={"user_id": 5555}, headers=headers)
    assert resp.status_code == 404
    assert resp.json() == {"message": "User not found"}


async def test_failed_update_leaves_old_exercises(client, coach, member, exercises, count_rows):
    member_id, _ = member
    _, headers = coach
    created = await client.post(
        "/workouts",
        json={"user_id": member_id, "name": "Atomic", "exercises": [{"exercise_id": exercises[0]}]},
        headers=headers,
    )
    resp = await client.put(
        f"/workouts/{created.json()['id']}", json={"exercises": [{"exercise_id": 31337}]}, headers=headers
    )
    assert resp.status_code == 404
    assert await count_rows(WorkoutExercise, WorkoutExercise.exercise_id == exercises[0]) == 1


async def test_log_result_for_own_workout(client, coach, member, count_rows):
    member_id, member_headers = member
    _, headers = coach
    created = await client.post("/workouts", json={"user_id": member_id, "name": "Grace"}, headers=headers)
    workout_id = created.json()["id"]

    for value in (3.5, 3.2):
        resp = await client.post(
            f"/workouts/{workout_id}/log-result",
            json={"resultValue": value, "resultUnit": "minutes", "notes": "rx"},
            headers=member_headers,
        )
        assert resp.status_code == 201
        logged = resp.json()["workout_result"]
        assert logged["user_id"] == member_id
        assert logged["result_value"] == value
    assert await count_rows(WorkoutResult, WorkoutResult.workout_id == workout_id) == 2


async def test_log_result_on_someone_elses_workout_is_not_found(client, make_user, coach):
    owner_id, _ = await make_user("owner@example.com")
    _, intruder_headers = await make_user("intruder@example.com")
    _, headers = coach
    created = await client.post("/workouts", json={"user_id": owner_id, "name": "Private"}, headers=headers)
    workout_id = created.json()["id"]

    resp = await client.post(f"/workouts/{workout_id}/log-result", json={"resultValue": 1}, headers=intruder_headers)
    missing = await client.post("/workouts/9999/log-result", json={"resultValue": 1}, headers=intruder_headers)
    assert resp.status_code == missing.status_code == 404
    assert resp.json() == missing.json()


async def test_read_and_list_workouts(client, coach, member, exercises):
    member_id, member_headers = member
    coach_id, headers = coach
    await client.post("/workouts", json={"user_id": member_id, "name": "A"}, headers=headers)
    await client.post("/workouts", json={"user_id": coach_id, "name": "B"}, headers=headers)

    everything = await client.get("/workouts", headers=member_headers)
    assert [w["name"] for w in everything.json()] == ["A", "B"]
    mine = await client.get("/workouts", params={"user_id": member_id}, headers=member_headers)
    assert [w["name"] for w in mine.json()] == ["A"]

    workout_id = mine.json()[0]["id"]
    assert (await client.get(f"/workouts/{workout_id}", headers=member_headers)).status_code == 200
    assert (await client.get("/workouts/12345", headers=member_headers)).status_code == 404


async def test_generate_returns_sample(client, member, exercises):
    _, headers = member
    resp = await client.get("/workouts/generate", headers=headers)
    assert resp.status_code == 200
    assert [e["id"] for e in resp.json()["exercises"]] == exercises[:5]


async def test_delete_workout_cascades(client, admin, member, exercises, count_rows):
    member_id, member_headers = member
    _, headers = admin
    created = await client.post(
        "/workouts",
        json={"user_id": member_id, "name": "Gone", "exercises": [{"exercise_id": exercises[0]}]},
        headers=headers,
    )
    workout_id = created.json()["id"]
    await client.post(f"/workouts/{workout_id}/log-result", json={"notes": "done"}, headers=member_headers)

    assert (await client.delete(f"/workouts/{workout_id}", headers=member_headers)).status_code == 403
    assert (await client.delete(f"/workouts/{workout_id}", headers=headers)).status_code == 200
    assert await count_rows(Workout) == 0
    assert await count_rows(WorkoutExercise) == 0
    assert await count_rows(WorkoutResult) == 0
    assert (await client.delete(f"/workouts/{workout_id}", headers=headers)).status_code == 404


async def test_replacing_exercises_bumps_updated_at(client, coach, member, exercises):
    member_id, _ = member
    _, headers = coach
    created = await client.post(
        "/workouts",
        json={"user_id": member_id, "name": "Touch", "exercises": [{"exercise_id": exercises[0]}]},
        headers=headers,
    )
    before = created.json()["updated_at"]
    resp = await client.put(
        f"/workouts/{created.json()['id']}", json={"exercises": [{"exercise_id": exercises[1]}]}, headers=headers
    )
    assert resp.status_code == 200
    assert resp.json()["updated_at"] > before


async def test_update_rejects_null_name_and_owner(client, coach, member):
    member_id, _ = member
    _, headers = coach
    created = await client.post("/workouts", json={"user_id": member_id, "name": "Named"}, headers=headers)
    workout_id = created.json()["id"]
    assert (await client.put(f"/workouts/{workout_id}", json={"name": None}, headers=headers)).status_code == 400
    assert (await client.put(f"/workouts/{workout_id}", json={"userId": None}, headers=headers)).status_code == 400
    resp = await client.get(f"/workouts/{workout_id}", headers=headers)
    assert resp.json()["name"] == "Named"
    assert resp.json()["user_id"] == member_id
