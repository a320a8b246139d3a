# activities/views.py
from __future__ import annotations

import datetime as dt
import logging

import pytz
from django.db import DatabaseError
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import ActionType, Activity, ItemType
from .serializers import ActivityCreateSerializer, ActivitySerializer
from .services import get_activity_recorder

logger = logging.getLogger(__name__)

DEFAULT_FEED_LIMIT = 100


def _to_aware(value: str | None, tzinfo: dt.tzinfo, *, end_of_day: bool = False) -> dt.datetime | None:
    """
    Parse an ISO datetime or date into a tz-aware UTC datetime; allow None.
    Naive values are read in `tzinfo`. A bare date means the start of that local day,
    or its last instant when `end_of_day` is set.
    """
    if not value:
        return None
    day = parse_date(value)
    if day is not None:
        d = dt.datetime.combine(day, dt.time.max if end_of_day else dt.time.min)
    else:
        d = parse_datetime(value)
        if d is None:
            raise ValueError("startDate/endDate must be ISO-8601")
    if timezone.is_naive(d):
        d = tzinfo.localize(d) if hasattr(tzinfo, "localize") else d.replace(tzinfo=tzinfo)
    return d.astimezone(dt.timezone.utc)


def _parse_limit(raw: str | None) -> int:
    """Non-numeric or non-positive limits fall back to the default."""
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_FEED_LIMIT
    return limit if limit > 0 else DEFAULT_FEED_LIMIT


class ActivityListCreateView(APIView):
    """
    GET  /api/activities
      ?type=flashcard|quiz
      &action=create|update|study|complete
      &startDate=ISO&endDate=ISO
      &tz=Asia/Tokyo
      &limit=100
      &sort=newest|oldest
    POST /api/activities (201 when created, 200 when a duplicate inside the dedup window was returned).
    """
    def get(self, request):
        params = request.query_params
        item_type = params.get("type")
        action = params.get("action")
        tzname = params.get("tz", "UTC")

        if item_type and item_type not in ItemType.values:
            return Response({"detail": "type must be flashcard|quiz."}, status=400)
        if action and action not in ActionType.values:
            return Response({"detail": "action must be create|update|study|complete."}, status=400)
        try:
            tzinfo = pytz.timezone(tzname)
        except pytz.UnknownTimeZoneError:
            return Response({"detail": "invalid tz."}, status=400)
        try:
            start = _to_aware(params.get("startDate"), tzinfo)
            end = _to_aware(params.get("endDate"), tzinfo, end_of_day=True)
        except ValueError as e:
            return Response({"detail": str(e)}, status=400)

        qs = Activity.objects.filter(user_id=request.user.id)
        if item_type:
            qs = qs.filter(item_type=item_type)
        if action:
            qs = qs.filter(action_type=action)
        if start is not None:
            qs = qs.filter(timestamp__gte=start)
        if end is not None:
            qs = qs.filter(timestamp__lte=end)

        if params.get("sort", "newest") == "newest":
            qs = qs.order_by("-timestamp", "-id")
        else:
            qs = qs.order_by("timestamp", "id")
        qs = qs[: _parse_limit(params.get("limit"))]

        try:
            data = ActivitySerializer(qs, many=True).data
        except DatabaseError:
            logger.exception("Error fetching activities for user=%s", request.user.id)
            return Response({"detail": "Error fetching activities."}, status=500)
        return Response(data, status=status.HTTP_200_OK)

    def post(self, request):
        ser = ActivityCreateSerializer(data=request.data or {})
        if not ser.is_valid():
            return Response(
                {
                    "detail": "title, itemType, actionType and itemId are required and must be valid.",
                    "errors": ser.errors,
                },
                status=400,
            )

        try:
            activity, created = get_activity_recorder().record(user_id=request.user.id, **ser.validated_data)
        except DatabaseError:
            logger.exception("Error logging activity for user=%s", request.user.id)
            return Response({"detail": "Error logging activity."}, status=500)

        status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
        return Response(ActivitySerializer(activity).data, status=status_code)
