from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from faceyoga.core.constants import GoalStatusEnum
from faceyoga.crud.history import lesson_history as crud_lesson_history
from faceyoga.models.profile import Profile
from faceyoga.services.history import next_streak
from tests.helpers.asserts import api_call, auth_headers


def test_next_streak():
    now = datetime(2024, 6, 10, 9, 0)

    assert next_streak(0, None, now) == 1
    assert next_streak(4, datetime(2024, 6, 10, 7, 0), now) == 4
    assert next_streak(0, datetime(2024, 6, 10, 7, 0), now) == 1
    assert next_streak(4, datetime(2024, 6, 9, 23, 59), now) == 5
    assert next_streak(4, datetime(2024, 6, 7, 12, 0), now) == 1


def test_complete_exercise_updates_profile(client, db_session, user_session, exercise_factory):
    exercise = exercise_factory()

    entry = api_call(
        client, "POST", f"/exercises/{exercise.id}/complete", user_session, json={"duration": 90}
    ).json()["data"]
    assert entry["exercise_id"] == exercise.id
    assert entry["duration"] == 90

    profile = db_session.query(Profile).filter(Profile.user_id == user_session.user_id).one()
    assert profile.exercises_done == 1
    assert profile.practice_time == 90

    history = api_call(client, "GET", "/history/exercises", user_session).json()["data"]
    assert [h["exercise_id"] for h in history] == [exercise.id]


def test_completing_locked_exercise_is_forbidden(client, user_session, exercise_factory, course_factory):
    exercise = exercise_factory(is_premium=True)
    course_factory(exercises=[exercise])

    response = client.post(f"/exercises/{exercise.id}/complete", json={}, headers=auth_headers(user_session))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


def test_completion_requires_a_session(client, exercise_factory):
    exercise = exercise_factory()

    assert client.post(f"/exercises/{exercise.id}/complete", json={}).status_code == 401


def test_complete_lesson_tracks_streak_and_goals(client, db_session, user_session, lesson_factory, goal_factory):
    lesson = lesson_factory()
    goal = goal_factory(targets=(2, 4), lesson_weights=[(lesson, 2)])

    first = api_call(
        client, "POST", f"/lessons/{lesson.id}/complete", user_session, json={"practice_time": 300}
    ).json()["data"]
    assert first["streak"] == 1
    assert first["goal_progress"][0]["goal_id"] == goal.id
    assert first["goal_progress"][0]["milestone_reached"] == 1

    second = api_call(
        client, "POST", f"/lessons/{lesson.id}/complete", user_session, json={"practice_time": 120}
    ).json()["data"]
    assert second["streak"] == 1
    assert second["goal_progress"][0]["status"] == GoalStatusEnum.COMPLETED.value

    profile = db_session.query(Profile).filter(Profile.user_id == user_session.user_id).one()
    db_session.refresh(profile)
    assert profile.practice_time == 420

    history = api_call(client, "GET", "/history/lessons", user_session).json()["data"]
    assert len(history) == 2


@pytest.mark.parametrize("days_ago, expected", [(1, 4), (3, 1)])
def test_lesson_streak_follows_last_practice_day(client, db_session, session_factory, lesson_factory, days_ago, expected):
    session = session_factory()
    lesson = lesson_factory()
    db_session.add(Profile(user_id=session.user_id, email=session.email, streak=3))
    db_session.commit()
    crud_lesson_history.create(
        db_session,
        user_id=session.user_id,
        lesson_id=lesson.id,
        practice_time=0,
        completed_at=datetime.utcnow() - timedelta(days=days_ago),
    )

    body = api_call(client, "POST", f"/lessons/{lesson.id}/complete", session, json={}).json()["data"]

    assert body["streak"] == expected


def test_goal_endpoints(client, user_session, goal_factory):
    goal = goal_factory(targets=(10, 25, 50))

    milestones = client.get(f"/goals/{goal.id}/milestones").json()["data"]
    assert [m["target_value"] for m in milestones] == [10, 25, 50]

    for weight in (10, 20, 25):
        progress = api_call(
            client, "POST", f"/goals/{goal.id}/contributions", user_session, json={"weight": weight}
        ).json()["data"]
    assert progress["progress_value"] == 55
    assert progress["milestone_reached"] == 3
    assert progress["status"] == "completed"

    rows = api_call(client, "GET", "/goals/progress", user_session).json()["data"]
    assert [r["goal_id"] for r in rows] == [goal.id]

    response = client.post(f"/goals/{goal.id}/contributions", json={"weight": -5}, headers=auth_headers(user_session))
    assert response.status_code == 422


def test_goal_pause_and_analytics(client, user_session, admin_session, goal_factory):
    goal = goal_factory(targets=(10,))
    api_call(client, "POST", f"/goals/{goal.id}/contributions", user_session, json={"weight": 3})

    paused = api_call(client, "PUT", f"/goals/{goal.id}/status", user_session, json={"status": "paused"}).json()["data"]
    assert paused["status"] == "paused"

    api_call(client, "PUT", f"/goals/{goal.id}/status", user_session, json={"status": "completed"}, expected_min=400, expected_max=401)
    api_call(client, "GET", f"/goals/{goal.id}/analytics", user_session, expected_min=403, expected_max=404)

    analytics = api_call(client, "GET", f"/goals/{goal.id}/analytics", admin_session).json()["data"]
    assert analytics["participants"] == 1
    assert analytics["average_progress"] == 3


def test_access_endpoints(client, user_session, lesson_factory, course_factory, grant_factory):
    lesson = lesson_factory(is_premium=True)
    course = course_factory(lessons=[lesson])

    assert client.get(f"/access/lessons/{lesson.id}").status_code == 401
    assert client.get(f"/access/lessons/{lesson.id}", headers={"Authorization": "Bearer garbage"}).status_code == 401

    denied = api_call(client, "GET", f"/access/lessons/{lesson.id}", user_session).json()["data"]
    assert denied == {"has_access": False}

    grant_factory(user_session.user_id, course)
    allowed = api_call(client, "GET", f"/access/lessons/{lesson.id}", user_session).json()["data"]
    assert allowed == {"has_access": True}

    unknown = api_call(client, "GET", "/access/exercises/987654", user_session).json()["data"]
    assert unknown == {"has_access": False}


def test_profile_is_created_on_first_read(client, session_factory):
    session = session_factory(email="maria.lopez@example.com")

    profile = api_call(client, "GET", "/profile/me", session).json()["data"]
    assert profile["username"] == "maria.lopez"
    assert profile["role"] == "user"
    assert profile["streak"] == 0

    again = api_call(client, "GET", "/profile/me", session).json()["data"]
    assert again["id"] == profile["id"]

    updated = api_call(
        client, "PUT", "/profile/me", session, json={"full_name": "Maria Lopez", "experience_level": "beginner"}
    ).json()["data"]
    assert updated["full_name"] == "Maria Lopez"
    assert updated["experience_level"] == "beginner"
    assert updated["username"] == "maria.lopez"


def test_avatar_replacement_removes_previous_image(client, user_session):
    uploads = [
        {"secure_url": "https://res.cloudinary.com/demo/image/upload/v1/avatars/first.png"},
        {"secure_url": "https://res.cloudinary.com/demo/image/upload/v2/avatars/second.png"},
    ]
    with patch("cloudinary.uploader.upload", side_effect=uploads), \
            patch("cloudinary.uploader.destroy", return_value={"result": "ok"}) as destroy:
        for _ in range(2):
            response = client.post(
                "/profile/me/avatar",
                files={"file": ("face.png", b"\x89PNG fake", "image/png")},
                headers=auth_headers(user_session),
            )
            assert response.status_code == 200

    assert response.json()["data"]["avatar_url"].endswith("second.png")
    destroy.assert_called_once_with("avatars/first", resource_type="image")


def test_avatar_cleanup_failure_does_not_fail_upload(client, user_session):
    uploads = [
        {"secure_url": "https://res.cloudinary.com/demo/image/upload/v1/avatars/a.png"},
        {"secure_url": "https://res.cloudinary.com/demo/image/upload/v1/avatars/b.png"},
    ]
    with patch("cloudinary.uploader.upload", side_effect=uploads), \
            patch("cloudinary.uploader.destroy", side_effect=RuntimeError("cdn down")):
        for _ in range(2):
            response = client.post(
                "/profile/me/avatar",
                files={"file": ("face.png", b"\x89PNG fake", "image/png")},
                headers=auth_headers(user_session),
            )

    assert response.status_code == 200
    assert response.json()["data"]["avatar_url"].endswith("b.png")


def test_non_image_upload_is_rejected(client, user_session):
    with patch("cloudinary.uploader.upload") as upload:
        response = client.post(
            "/progress-photos",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers(user_session),
        )

    assert response.status_code == 400
    upload.assert_not_called()


def test_progress_photos(client, user_session):
    with patch("cloudinary.uploader.upload", return_value={"secure_url": "https://res.cloudinary.com/demo/image/upload/p.jpg"}):
        response = client.post(
            "/progress-photos",
            files={"file": ("day1.jpg", b"jpegdata", "image/jpeg")},
            data={"notes": "Day 1"},
            headers=auth_headers(user_session),
        )
    assert response.status_code == 200

    photos = api_call(client, "GET", "/progress-photos", user_session).json()["data"]
    assert [p["notes"] for p in photos] == ["Day 1"]


@pytest.mark.parametrize("rating, expected", [(5, 200), (0, 422), (6, 422)])
def test_feedback_rating_bounds(client, user_session, rating, expected):
    response = client.post("/feedback", json={"rating": rating, "message": "Loving it"}, headers=auth_headers(user_session))

    assert response.status_code == expected
