# progress/views.py
from __future__ import annotations

import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from activities.services import get_activity_recorder

from .serializers import StudyProgressSerializer
from .services import InvalidProgress, ProgressTracker

logger = logging.getLogger(__name__)

TRACKED_FIELDS = ("currentCardIndex", "learnedCards", "reviewLaterCards", "studyMode", "totalCards")


class StudyProgressView(APIView):
    """
    GET    /api/progress/{deck_id}  -> 200 progress | 404 when never saved
    POST   /api/progress/{deck_id}  -> 200 progress after upsert | 400 invalid fields
    DELETE /api/progress/{deck_id}  -> 200 whether or not anything existed
    Storage failures answer 500. The user is always the authenticated subject.

    A POST that also carries `deckTitle` logs a flashcard study activity with the body's
    cardsStudied / correctPercentage / timeSpent; that log is best-effort and never changes
    the response.
    """
    tracker_class = ProgressTracker

    def get_tracker(self) -> ProgressTracker:
        return self.tracker_class()

    def get(self, request, deck_id: str):
        try:
            progress = self.get_tracker().get(request.user.id, deck_id)
        except DatabaseError:
            logger.exception("Error fetching study progress user=%s deck=%s", request.user.id, deck_id)
            return Response({"detail": "Error fetching study progress."}, status=500)

        if progress is None:
            return Response({"detail": "No progress found for this deck."}, status=status.HTTP_404_NOT_FOUND)
        return Response(StudyProgressSerializer(progress).data, status=status.HTTP_200_OK)

    def post(self, request, deck_id: str):
        body = request.data or {}
        if not hasattr(body, "get"):
            return Response({"detail": "Request body must be a JSON object."}, status=400)
        fields = {name: body.get(name) for name in TRACKED_FIELDS if name in body}

        try:
            progress = self.get_tracker().save(request.user.id, deck_id, fields)
        except InvalidProgress as e:
            return Response({"detail": "Invalid study progress.", "errors": e.errors}, status=400)
        except DatabaseError:
            logger.exception("Error saving study progress user=%s deck=%s", request.user.id, deck_id)
            return Response({"detail": "Error saving study progress."}, status=500)

        deck_title = body.get("deckTitle")
        if deck_title:
            get_activity_recorder().log_flashcard_study(
                request.user,
                {"_id": deck_id, "title": deck_title},
                {
                    "cardsStudied": body.get("cardsStudied"),
                    "correctPercentage": body.get("correctPercentage"),
                    "timeSpent": body.get("timeSpent"),
                },
            )

        return Response(StudyProgressSerializer(progress).data, status=status.HTTP_200_OK)

    def delete(self, request, deck_id: str):
        try:
            deleted = self.get_tracker().reset(request.user.id, deck_id)
        except DatabaseError:
            logger.exception("Error resetting study progress user=%s deck=%s", request.user.id, deck_id)
            return Response({"detail": "Error resetting study progress."}, status=500)

        return Response({"detail": "Study progress reset successfully.", "deleted": deleted}, status=200)
