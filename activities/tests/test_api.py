# activities/tests/test_api.py
import datetime as dt

import pytest
from django.db import DatabaseError
from rest_framework.test import APIClient

from activities.models import Activity
from activities.services import ActivityRecorder

URL = "/api/activities"


def client_for(sub="u1"):
    c = APIClient()
    c.credentials(HTTP_X_USER_SUB=sub)
    return c


def seed(user_id, item_id, action_type, when, item_type="flashcard", title=None):
    rec = ActivityRecorder(clock=lambda: when)
    return rec.log_activity(
        user_id=user_id,
        title=title or f"{item_type} {item_id}",
        item_type=item_type,
        action_type=action_type,
        item_id=item_id,
    )


@pytest.fixture
def feed():
    base = dt.datetime(2025, 10, 27, 10, 0, 0, tzinfo=dt.timezone.utc)
    return {
        "create": seed("u1", "f1", "create", base),
        "study": seed("u1", "f1", "study", base + dt.timedelta(hours=2)),
        "quiz": seed("u1", "q1", "complete", base + dt.timedelta(hours=6), item_type="quiz"),
        "late": seed("u1", "f2", "create", base + dt.timedelta(days=1)),
        "other": seed("u2", "f9", "create", base + dt.timedelta(hours=1)),
    }


@pytest.mark.django_db
def test_post_creates_then_deduplicates():
    c = client_for("u1")
    payload = {"title": "Set A", "itemType": "flashcard", "actionType": "study", "itemId": "f1",
               "metadata": {"cardsStudied": 5}}

    r1 = c.post(URL, payload, format="json")
    assert r1.status_code == 201
    obj1 = r1.json()
    assert obj1["userId"] == "u1"
    assert obj1["actionType"] == "study"
    assert obj1["metadata"] == {"cardsStudied": 5}
    assert obj1["timestamp"].endswith("Z")

    r2 = c.post(URL, dict(payload, metadata={"cardsStudied": 6}), format="json")
    assert r2.status_code == 200
    assert r2.json()["id"] == obj1["id"]
    assert r2.json()["metadata"] == {"cardsStudied": 5}
    assert Activity.objects.count() == 1


@pytest.mark.django_db
def test_post_ignores_user_id_in_body():
    r = client_for("u1").post(
        URL,
        {"userId": "someone-else", "title": "Quiz", "itemType": "quiz", "actionType": "complete", "itemId": "q1"},
        format="json",
    )
    assert r.status_code == 201
    assert r.json()["userId"] == "u1"
    assert r.json()["metadata"] == {}


@pytest.mark.django_db
@pytest.mark.parametrize(
    "payload",
    [
        {"title": "Set A", "itemType": "flashcard", "actionType": "study"},
        {"itemType": "flashcard", "actionType": "study", "itemId": "f1"},
        {"title": "Set A", "itemType": "video", "actionType": "study", "itemId": "f1"},
        {"title": "Set A", "itemType": "flashcard", "actionType": "delete", "itemId": "f1"},
    ],
)
def test_post_invalid_body_is_400(payload):
    r = client_for("u1").post(URL, payload, format="json")
    assert r.status_code == 400
    assert "required" in r.json()["detail"]
    assert Activity.objects.count() == 0


@pytest.mark.django_db
def test_post_storage_failure_is_500(monkeypatch):
    def boom(*args, **kwargs):
        raise DatabaseError("connection lost")

    monkeypatch.setattr(Activity.objects, "create", boom)
    r = client_for("u1").post(
        URL, {"title": "Set A", "itemType": "flashcard", "actionType": "create", "itemId": "f1"}, format="json"
    )
    assert r.status_code == 500
    assert r.json()["detail"] == "Error logging activity."


@pytest.mark.django_db
def test_feed_requires_subject():
    assert APIClient().get(URL).status_code == 401


@pytest.mark.django_db
def test_feed_is_newest_first_and_scoped_to_user(feed):
    r = client_for("u1").get(URL)
    assert r.status_code == 200
    ids = [a["id"] for a in r.json()]
    assert ids == [feed["late"].pk, feed["quiz"].pk, feed["study"].pk, feed["create"].pk]


@pytest.mark.django_db
def test_feed_sort_oldest_and_limit(feed):
    r = client_for("u1").get(f"{URL}?sort=oldest&limit=2")
    assert [a["id"] for a in r.json()] == [feed["create"].pk, feed["study"].pk]


@pytest.mark.django_db
@pytest.mark.parametrize("limit", ["0", "-3", "lots"])
def test_feed_bad_limit_falls_back_to_default(feed, limit):
    r = client_for("u1").get(f"{URL}?limit={limit}")
    assert r.status_code == 200
    assert len(r.json()) == 4


@pytest.mark.django_db
def test_feed_filters_by_type_and_action(feed):
    c = client_for("u1")
    quizzes = c.get(f"{URL}?type=quiz").json()
    assert [a["id"] for a in quizzes] == [feed["quiz"].pk]

    creates = c.get(f"{URL}?type=flashcard&action=create").json()
    assert [a["id"] for a in creates] == [feed["late"].pk, feed["create"].pk]


@pytest.mark.django_db
def test_feed_filters_by_date_range(feed):
    r = client_for("u1").get(f"{URL}?startDate=2025-10-27T11:00:00Z&endDate=2025-10-27T23:59:59Z")
    assert [a["id"] for a in r.json()] == [feed["quiz"].pk, feed["study"].pk]


@pytest.mark.django_db
def test_feed_bare_dates_are_read_in_requested_tz(feed):
    # 2025-10-28 in Asia/Tokyo starts at 2025-10-27T15:00Z.
    r = client_for("u1").get(f"{URL}?startDate=2025-10-28&tz=Asia/Tokyo&sort=oldest")
    assert [a["id"] for a in r.json()] == [feed["quiz"].pk, feed["late"].pk]

    r_end = client_for("u1").get(f"{URL}?endDate=2025-10-27&sort=oldest")
    assert [a["id"] for a in r_end.json()] == [feed["create"].pk, feed["study"].pk, feed["quiz"].pk]


@pytest.mark.django_db
@pytest.mark.parametrize(
    "query",
    ["type=video", "action=delete", "tz=Mars/Olympus", "startDate=yesterday"],
)
def test_feed_rejects_bad_query(query):
    r = client_for("u1").get(f"{URL}?{query}")
    assert r.status_code == 400
    assert "detail" in r.json()
