import asyncio
import uuid

import pytest

from faceyoga.core.cache import cache
from faceyoga.core.config import settings
from faceyoga.core.constants import ExerciseCategoryEnum, GoalStatusEnum
from faceyoga.models.goal import GoalProgress
from faceyoga.services.goal_progress import goal_progress_service
from faceyoga.services.purchase import purchase_service
from tests.helpers.asserts import api_call, auth_headers


def _exercise_payload(**overrides):
    payload = {
        "title": f"Cheek lift {uuid.uuid4().hex[:6]}",
        "description": "Lift the cheeks towards the eyes",
        "duration": "3 min",
        "target_area": "Cheeks",
        "image_url": "https://img.example.com/cheek.png",
        "video_url": "https://video.example.com/cheek.mp4",
        "category": "cheeks",
        "difficulty": "Beginner",
        "instructions": ["Smile wide", "Hold for ten seconds"],
        "benefits": ["Firmer cheeks"],
        "is_premium": False,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def catalog_cache(monkeypatch):
    monkeypatch.setattr(settings, "CACHE_ENABLED", True)
    asyncio.run(cache.clear())
    yield cache
    asyncio.run(cache.clear())


def test_admin_creates_exercise(client, admin_session):
    response = api_call(client, "POST", "/admin/exercises", admin_session, json=_exercise_payload())

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["category"] == "cheeks"
    assert data["instructions"] == ["Smile wide", "Hold for ten seconds"]


def test_admin_routes_reject_non_admins(client, user_session):
    api_call(client, "POST", "/admin/exercises", user_session, json=_exercise_payload(), expected_min=403, expected_max=404)
    api_call(client, "GET", "/admin/dashboard", None, expected_min=401, expected_max=402)


@pytest.mark.parametrize("overrides", [
    {"title": "   "},
    {"image_url": ""},
    {"video_url": "ftp://video.example.com/clip.mp4"},
    {"instructions": ["", "  "]},
    {"category": "toes"},
])
def test_exercise_validation(client, admin_session, overrides):
    response = client.post("/admin/exercises", json=_exercise_payload(**overrides), headers=auth_headers(admin_session))

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_exercise_catalog_is_newest_first_and_filtered(client, admin_session):
    older = api_call(client, "POST", "/admin/exercises", admin_session, json=_exercise_payload(category="forehead")).json()["data"]
    newer = api_call(client, "POST", "/admin/exercises", admin_session, json=_exercise_payload(category="forehead")).json()["data"]
    api_call(client, "POST", "/admin/exercises", admin_session, json=_exercise_payload(category="neck"))

    listed = client.get("/exercises", params={"category": "forehead"}).json()["data"]
    ids = [e["id"] for e in listed]

    assert ids.index(newer["id"]) < ids.index(older["id"])
    assert all(e["category"] == "forehead" for e in listed)


def test_locked_exercise_hides_video(client, session_factory, exercise_factory, course_factory, grant_factory):
    exercise = exercise_factory(is_premium=True)
    course = course_factory(exercises=[exercise])
    buyer = session_factory()
    grant_factory(buyer.user_id, course)

    anonymous = client.get(f"/exercises/{exercise.id}").json()["data"]
    assert anonymous["locked"] is True
    assert anonymous["video_url"] is None

    stranger = client.get(f"/exercises/{exercise.id}", headers=auth_headers(session_factory())).json()["data"]
    assert stranger["locked"] is True

    owned = client.get(f"/exercises/{exercise.id}", headers=auth_headers(buyer)).json()["data"]
    assert owned["locked"] is False
    assert owned["video_url"] == exercise.video_url


def test_catalog_listings_never_include_premium_videos(client, exercise_factory, lesson_factory):
    category = f"routine-{uuid.uuid4().hex[:6]}"
    premium_exercise = exercise_factory(is_premium=True, category=ExerciseCategoryEnum.EYES)
    free_exercise = exercise_factory(is_premium=False, category=ExerciseCategoryEnum.EYES)
    premium_lesson = lesson_factory(is_premium=True, category=category)
    free_lesson = lesson_factory(is_premium=False, category=category)

    exercises = {e["id"]: e for e in client.get("/exercises", params={"category": "eyes"}).json()["data"]}
    lessons = {l["id"]: l for l in client.get("/lessons", params={"category": category}).json()["data"]}

    assert exercises[premium_exercise.id]["video_url"] is None
    assert exercises[free_exercise.id]["video_url"] == free_exercise.video_url
    assert lessons[premium_lesson.id]["video_url"] is None
    assert lessons[free_lesson.id]["video_url"] == free_lesson.video_url
    assert all(e["video_url"] is None for e in exercises.values() if e["is_premium"])


def test_missing_catalog_items_return_404(client):
    assert client.get("/exercises/987654").status_code == 404
    assert client.get("/lessons/987654").status_code == 404
    assert client.get("/courses/987654").status_code == 404


def test_admin_course_lifecycle(client, admin_session, exercise_factory, lesson_factory):
    first = exercise_factory()
    second = exercise_factory()
    lesson = lesson_factory()
    payload = {
        "title": "Glow in 30 days",
        "price": 29.0,
        "access_type": "lifetime",
        "sections": [
            {"title": "Week 1", "exercises": [first.id, second.id], "lessons": [lesson.id]},
        ],
    }

    created = api_call(client, "POST", "/admin/courses", admin_session, json=payload).json()["data"]
    items = created["sections"][0]["items"]
    assert [i["exercise_id"] for i in items[:2]] == [first.id, second.id]
    assert items[2]["lesson_id"] == lesson.id
    assert [i["order_index"] for i in items] == [0, 1, 2]

    payload["sections"] = [{"title": "Only week", "exercises": [second.id]}]
    updated = api_call(client, "PUT", f"/admin/courses/{created['id']}", admin_session, json=payload).json()["data"]
    assert len(updated["sections"]) == 1
    assert updated["sections"][0]["title"] == "Only week"
    assert [i["exercise_id"] for i in updated["sections"][0]["items"]] == [second.id]

    api_call(client, "DELETE", f"/admin/courses/{created['id']}", admin_session)
    assert client.get(f"/courses/{created['id']}").status_code == 404


def test_course_with_unknown_items_is_rejected(client, admin_session):
    payload = {"title": "Broken", "price": 10, "sections": [{"title": "Week 1", "exercises": [987654]}]}

    response = client.post("/admin/courses", json=payload, headers=auth_headers(admin_session))

    assert response.status_code == 400


def test_course_access_terms_are_validated(client, admin_session):
    trial = {"title": "Trial", "price": 10, "access_type": "trial"}
    subscription = {"title": "Monthly", "price": 10, "access_type": "subscription"}

    assert client.post("/admin/courses", json=trial, headers=auth_headers(admin_session)).status_code == 422
    assert client.post("/admin/courses", json=subscription, headers=auth_headers(admin_session)).status_code == 422


@pytest.mark.asyncio
async def test_course_with_purchases_cannot_be_deleted(client, db_session, admin_session, user_session, course_factory):
    course = course_factory()
    await purchase_service.record_purchase(db_session, user_session.user_id, course.id, 19.99, f"pi_{uuid.uuid4().hex}")

    response = client.delete(f"/admin/courses/{course.id}", headers=auth_headers(admin_session))

    assert response.status_code == 409


def test_course_detail_withholds_premium_videos_without_access(
    client, db_session, session_factory, exercise_factory, course_factory, grant_factory
):
    premium = exercise_factory(is_premium=True)
    free_item = exercise_factory(is_premium=False)
    course = course_factory(exercises=[premium, free_item])
    buyer = session_factory()
    grant = grant_factory(buyer.user_id, course)

    def videos(body):
        return [i["exercise"]["video_url"] for i in body["sections"][0]["items"]]

    anonymous = client.get(f"/courses/{course.id}").json()["data"]
    assert anonymous["has_access"] is None
    assert videos(anonymous) == [None, free_item.video_url]

    owned = client.get(f"/courses/{course.id}", headers=auth_headers(buyer)).json()["data"]
    assert owned["has_access"] is True
    assert videos(owned) == [premium.video_url, free_item.video_url]
    db_session.refresh(grant)
    assert grant.last_accessed_at is not None


def test_free_course_is_open_to_everyone(client, exercise_factory, course_factory):
    premium = exercise_factory(is_premium=True)
    course = course_factory(price=0, exercises=[premium])

    body = client.get(f"/courses/{course.id}").json()["data"]

    assert body["is_free"] is True
    assert body["has_access"] is True
    assert body["sections"][0]["items"][0]["exercise"]["video_url"] == premium.video_url


def test_catalog_cache_is_invalidated_by_admin_writes(client, admin_session, catalog_cache):
    first = client.get("/exercises", params={"category": "eyes"})
    assert first.status_code == 200

    created = api_call(client, "POST", "/admin/exercises", admin_session, json=_exercise_payload(category="eyes")).json()["data"]

    listed = client.get("/exercises", params={"category": "eyes"}).json()["data"]
    assert created["id"] in [e["id"] for e in listed]


def test_dashboard_counts(client, admin_session, exercise_factory):
    exercise_factory()

    data = api_call(client, "GET", "/admin/dashboard", admin_session).json()["data"]

    assert data["total_exercises"] >= 1
    assert data["total_users"] >= 1
    assert data["total_revenue"] >= 0


@pytest.mark.asyncio
async def test_goal_edit_recounts_existing_progress(client, db_session, admin_session, user_session, lesson_factory):
    lesson = lesson_factory()
    payload = {
        "label": "Smooth forehead",
        "milestones": [{"target_value": 10}, {"target_value": 20}],
        "lesson_mappings": [{"lesson_id": lesson.id, "contribution_weight": 2}],
    }
    goal = api_call(client, "POST", "/admin/goals", admin_session, json=payload).json()["data"]
    await goal_progress_service.apply_contribution(db_session, user_session, goal["id"], 15)

    payload["milestones"] = [{"target_value": 5}, {"target_value": 15}]
    api_call(client, "PUT", f"/admin/goals/{goal['id']}", admin_session, json=payload)

    row = db_session.query(GoalProgress).filter(
        GoalProgress.user_id == user_session.user_id, GoalProgress.goal_id == goal["id"]
    ).one()
    db_session.refresh(row)
    assert row.milestone_reached == 2
    assert row.status == GoalStatusEnum.COMPLETED


def test_goal_with_unknown_lesson_is_rejected(client, admin_session):
    payload = {"label": "Broken", "lesson_mappings": [{"lesson_id": 987654}]}

    response = client.post("/admin/goals", json=payload, headers=auth_headers(admin_session))

    assert response.status_code == 400
