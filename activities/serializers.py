# activities/serializers.py
from rest_framework import serializers

from studytrack.fields import AwareDateTimeField

from .models import ActionType, Activity, ItemType


class ActivityCreateSerializer(serializers.Serializer):
    """
    Body of a client-side activity log.
    Notes:
      - userId is never read from the body; it comes from the authenticated subject.
      - metadata is free-form and defaults to {}.
    """
    title = serializers.CharField(max_length=255)
    itemType = serializers.ChoiceField(source="item_type", choices=ItemType.choices)
    actionType = serializers.ChoiceField(source="action_type", choices=ActionType.choices)
    itemId = serializers.CharField(source="item_id", max_length=128)
    metadata = serializers.DictField(required=False, default=dict)


class ActivitySerializer(serializers.ModelSerializer):
    userId = serializers.CharField(source="user_id", read_only=True)
    itemType = serializers.CharField(source="item_type", read_only=True)
    actionType = serializers.CharField(source="action_type", read_only=True)
    itemId = serializers.CharField(source="item_id", read_only=True)
    timestamp = AwareDateTimeField(read_only=True)
    createdAt = AwareDateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Activity
        fields = (
            "id",
            "userId",
            "title",
            "itemType",
            "actionType",
            "itemId",
            "metadata",
            "timestamp",
            "createdAt",
        )
        read_only_fields = fields
