# activities/services.py
from __future__ import annotations

import datetime as dt
import functools
import logging
from typing import Any, Callable, Mapping, Optional, Tuple

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone

from .models import ActionType, Activity, ActivityLock, ItemType

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("user_id", "title", "item_type", "action_type", "item_id")


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read `name` from a mapping or an attribute-style domain object."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _item_id(obj: Any) -> Any:
    return _field(obj, "_id") or _field(obj, "id")


def best_effort(func):
    """Log and swallow anything `func` raises; the wrapped logger then returns None."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception:
            logger.exception("Activity logging failed in %s", func.__name__)
            return None
    return wrapper


class ActivityRecorder:
    """
    Append-mostly activity feed with near-duplicate suppression.

    Two entry points with different failure policies:
      - record(): strict; raises on storage errors. Used where logging is the primary operation.
      - log_activity() and the log_* wrappers: best-effort side effects. Bad input and storage
        errors are logged server-side and yield None; they never raise into the caller, so the
        operation that triggered the log always proceeds.
    """

    def __init__(
        self,
        model: type[Activity] = Activity,
        lock_model: type[ActivityLock] = ActivityLock,
        window: dt.timedelta | float | None = None,
        clock: Callable[[], dt.datetime] = timezone.now,
    ):
        if window is None:
            window = settings.ACTIVITY_DEDUP_WINDOW_SECONDS
        if not isinstance(window, dt.timedelta):
            window = dt.timedelta(seconds=float(window))
        self.model = model
        self.lock_model = lock_model
        self.window = window
        self.clock = clock

    def record(
        self,
        *,
        user_id: str,
        title: str,
        item_type: str,
        action_type: str,
        item_id: str,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Tuple[Activity, bool]:
        """
        Find-or-create an Activity for (user_id, item_id, action_type).

        Rules:
          1) A record of the same key with timestamp in [now - window, now] is returned
             unchanged (no new row, metadata left as first written).
          2) Otherwise a new record is inserted with timestamp = now.
          3) The key's lock row is held FOR UPDATE across the check and the insert, so two
             concurrent callers cannot both observe "no match" and both insert.
        Returns (activity, created).
        """
        key = {"user_id": str(user_id), "item_id": str(item_id), "action_type": action_type}
        with transaction.atomic():
            # Locks the key row, inserting it if absent (or pruned since the last event).
            self.lock_model.objects.select_for_update().get_or_create(**key)

            # Read the clock only once the lock is held; an earlier reading could miss a row
            # inserted by the caller we were waiting on.
            now = self.clock()
            existing = (
                self.model.objects.filter(
                    **key,
                    timestamp__gte=now - self.window,
                    timestamp__lte=now,
                )
                .order_by("-timestamp")
                .first()
            )
            if existing is not None:
                return existing, False

            obj = self.model.objects.create(
                **key,
                title=title,
                item_type=item_type,
                metadata=dict(metadata or {}),
                timestamp=now,
            )
        return obj, True

    def log_activity(
        self,
        user_id: Optional[str] = None,
        title: Optional[str] = None,
        item_type: Optional[str] = None,
        action_type: Optional[str] = None,
        item_id: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Activity]:
        """
        Best-effort activity log. Returns the new or deduplicated Activity, or None when
        nothing was recorded. Never raises: callers must not wrap this in error handling
        or make their own success depend on it.
        """
        params = {
            "user_id": user_id,
            "title": title,
            "item_type": item_type,
            "action_type": action_type,
            "item_id": item_id,
        }
        missing = [name for name in REQUIRED_FIELDS if not params[name]]
        if missing:
            logger.warning("Activity logging skipped: missing required fields %s", ", ".join(missing))
            return None
        if item_type not in ItemType.values or action_type not in ActionType.values:
            logger.warning(
                "Activity logging skipped: unsupported item_type=%r action_type=%r", item_type, action_type
            )
            return None

        try:
            activity, created = self.record(metadata=metadata, **params)
        except DatabaseError:
            logger.exception(
                "Error logging activity %s/%s for user=%s item=%s", item_type, action_type, user_id, item_id
            )
            return None
        except Exception:
            # e.g. metadata that will not serialize to JSON
            logger.exception(
                "Unexpected error logging activity %s/%s for user=%s item=%s", item_type, action_type, user_id, item_id
            )
            return None

        if not created:
            logger.debug("Duplicate %s activity for user=%s item=%s suppressed", action_type, user_id, item_id)
        return activity

    @best_effort
    def log_flashcard_creation(self, user: Any, flashcard_set: Any) -> Optional[Activity]:
        cards = _field(flashcard_set, "cards")
        return self.log_activity(
            user_id=_field(user, "id"),
            title=_field(flashcard_set, "title"),
            item_type=ItemType.FLASHCARD,
            action_type=ActionType.CREATE,
            item_id=_item_id(flashcard_set),
            metadata={
                "cardCount": len(cards) if cards else 0,
                "category": _field(flashcard_set, "category") or "",
            },
        )

    @best_effort
    def log_flashcard_update(self, user: Any, flashcard_set: Any) -> Optional[Activity]:
        cards = _field(flashcard_set, "cards")
        return self.log_activity(
            user_id=_field(user, "id"),
            title=_field(flashcard_set, "title"),
            item_type=ItemType.FLASHCARD,
            action_type=ActionType.UPDATE,
            item_id=_item_id(flashcard_set),
            metadata={"cardCount": len(cards) if cards else 0},
        )

    @best_effort
    def log_flashcard_study(self, user: Any, flashcard_set: Any, study_stats: Any) -> Optional[Activity]:
        return self.log_activity(
            user_id=_field(user, "id"),
            title=_field(flashcard_set, "title"),
            item_type=ItemType.FLASHCARD,
            action_type=ActionType.STUDY,
            item_id=_item_id(flashcard_set),
            metadata={
                "cardsStudied": _field(study_stats, "cardsStudied") or 0,
                "correctPercentage": _field(study_stats, "correctPercentage") or 0,
                "timeSpent": _field(study_stats, "timeSpent") or 0,
            },
        )

    @best_effort
    def log_quiz_completion(self, user: Any, quiz: Any, results: Any) -> Optional[Activity]:
        return self.log_activity(
            user_id=_field(user, "id"),
            title=_field(quiz, "title"),
            item_type=ItemType.QUIZ,
            action_type=ActionType.COMPLETE,
            item_id=_item_id(quiz),
            metadata={
                "score": _field(results, "score") or 0,
                "questionsAnswered": _field(results, "questionsAnswered") or 0,
                "timeSpent": _field(results, "timeSpent") or 0,
            },
        )


def get_activity_recorder() -> ActivityRecorder:
    """Recorder wired to the default models and the configured dedup window."""
    return ActivityRecorder()
