# progress/tests/test_services.py
import datetime as dt

import pytest

from progress.models import StudyProgress
from progress.services import InvalidProgress, ProgressTracker


def fields(**overrides):
    base = {
        "currentCardIndex": 3,
        "learnedCards": {"c1": True},
        "reviewLaterCards": {},
        "studyMode": "normal",
        "totalCards": 10,
    }
    base.update(overrides)
    return base


@pytest.mark.django_db
def test_save_then_get_round_trips_tracked_fields():
    tracker = ProgressTracker()
    tracker.save("u1", "d1", fields())

    got = tracker.get("u1", "d1")
    assert got is not None
    assert got.current_card_index == 3
    assert got.learned_cards == {"c1": True}
    assert got.review_later_cards == {}
    assert got.study_mode == "normal"
    assert got.total_cards == 10


@pytest.mark.django_db
def test_get_without_save_is_none_and_creates_nothing():
    tracker = ProgressTracker()
    assert tracker.get("u1", "nope") is None
    assert StudyProgress.objects.count() == 0


@pytest.mark.django_db
def test_second_save_replaces_fields_and_keeps_single_row():
    tracker = ProgressTracker()
    tracker.save("u1", "d1", fields(currentCardIndex=1, learnedCards={"c1": True, "c2": True}))
    tracker.save(
        "u1", "d1",
        fields(currentCardIndex=7, learnedCards={"c3": True}, reviewLaterCards={"c1": True}, studyMode="review"),
    )

    assert StudyProgress.objects.filter(user_id="u1", deck_id="d1").count() == 1
    got = tracker.get("u1", "d1")
    assert got.current_card_index == 7
    # Full replace: keys from the first save are gone.
    assert got.learned_cards == {"c3": True}
    assert got.review_later_cards == {"c1": True}
    assert got.study_mode == "review"


@pytest.mark.django_db
def test_save_refreshes_last_studied_from_clock():
    t0 = dt.datetime(2025, 10, 27, 10, 0, tzinfo=dt.timezone.utc)
    times = iter([t0, t0 + dt.timedelta(minutes=30)])
    tracker = ProgressTracker(clock=lambda: next(times))

    first = tracker.save("u1", "d1", fields())
    assert first.last_studied == t0

    second = tracker.save("u1", "d1", fields(currentCardIndex=4))
    assert second.pk == first.pk
    assert tracker.get("u1", "d1").last_studied == t0 + dt.timedelta(minutes=30)


@pytest.mark.django_db
def test_pairs_are_isolated_by_user_and_deck():
    tracker = ProgressTracker()
    tracker.save("u1", "d1", fields(currentCardIndex=1))
    tracker.save("u1", "d2", fields(currentCardIndex=2))
    tracker.save("u2", "d1", fields(currentCardIndex=5))

    assert StudyProgress.objects.count() == 3
    assert tracker.get("u1", "d2").current_card_index == 2
    assert tracker.get("u2", "d1").current_card_index == 5


@pytest.mark.django_db
def test_reset_reports_whether_anything_was_deleted():
    tracker = ProgressTracker()
    assert tracker.reset("u1", "d1") is False

    tracker.save("u1", "d1", fields())
    assert tracker.reset("u1", "d1") is True
    assert tracker.get("u1", "d1") is None
    assert tracker.reset("u1", "d1") is False


@pytest.mark.django_db
def test_invalid_study_mode_is_rejected_before_storage(django_assert_num_queries):
    tracker = ProgressTracker()
    with django_assert_num_queries(0):
        with pytest.raises(InvalidProgress) as exc:
            tracker.save("u1", "d1", fields(studyMode="cramming"))
    assert "studyMode" in exc.value.errors


@pytest.mark.django_db
@pytest.mark.parametrize(
    "bad",
    [
        {"learnedCards": {"c1": "true"}},
        {"reviewLaterCards": ["c1"]},
        {"currentCardIndex": -1},
        {"totalCards": 0},
    ],
)
def test_malformed_fields_are_rejected(bad):
    with pytest.raises(InvalidProgress):
        ProgressTracker().save("u1", "d1", fields(**bad))
    assert StudyProgress.objects.count() == 0


@pytest.mark.django_db
def test_missing_field_is_rejected():
    payload = fields()
    del payload["totalCards"]
    with pytest.raises(InvalidProgress) as exc:
        ProgressTracker().save("u1", "d1", payload)
    assert "totalCards" in exc.value.errors


@pytest.mark.django_db
def test_index_beyond_total_cards_is_stored_unchanged():
    tracker = ProgressTracker()
    tracker.save("u1", "d1", fields(currentCardIndex=12, totalCards=10))
    assert tracker.get("u1", "d1").current_card_index == 12
