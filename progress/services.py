# progress/services.py
from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Callable, Mapping, Optional

from django.db import transaction
from django.utils import timezone

from .models import StudyProgress
from .serializers import StudyProgressWriteSerializer

logger = logging.getLogger(__name__)


class InvalidProgress(ValueError):
    """Raised when a save carries malformed fields; nothing has touched storage yet."""

    def __init__(self, errors: Mapping[str, Any]):
        super().__init__("invalid study progress")
        self.errors = dict(errors)


class ProgressTracker:
    """
    Study state of one (user, deck) pair: position, learned / review-later flags, study mode.

    Storage errors (django.db.DatabaseError) are not handled here; callers decide
    what the user sees.
    """

    def __init__(
        self,
        model: type[StudyProgress] = StudyProgress,
        clock: Callable[[], dt.datetime] = timezone.now,
    ):
        self.model = model
        self.clock = clock

    def get(self, user_id: str, deck_id: str) -> Optional[StudyProgress]:
        """Return the stored progress, or None when the pair has never been saved."""
        return self.model.objects.filter(user_id=user_id, deck_id=deck_id).first()

    def save(self, user_id: str, deck_id: str, fields: Mapping[str, Any]) -> StudyProgress:
        """
        Upsert the pair's progress from the wire mapping
        {currentCardIndex, learnedCards, reviewLaterCards, studyMode, totalCards}.

        Rules:
          1) Fields are validated before any query; bad input raises InvalidProgress.
          2) The five fields are replaced wholesale and last_studied is set to now.
          3) Create-or-replace runs as one transaction against the (user_id, deck_id)
             unique constraint, so concurrent saves resolve to last-writer-wins.
        """
        ser = StudyProgressWriteSerializer(data=dict(fields))
        if not ser.is_valid():
            raise InvalidProgress(ser.errors)

        values = dict(ser.validated_data, last_studied=self.clock())
        with transaction.atomic():
            obj, created = self.model.objects.update_or_create(
                user_id=user_id,
                deck_id=deck_id,
                defaults=values,
            )
        logger.debug("progress %s for user=%s deck=%s", "created" if created else "replaced", user_id, deck_id)
        return obj

    def reset(self, user_id: str, deck_id: str) -> bool:
        """Delete the pair's progress if any; report whether a row was removed."""
        deleted, _ = self.model.objects.filter(user_id=user_id, deck_id=deck_id).delete()
        return deleted > 0
