# progress/serializers.py
from rest_framework import serializers

from studytrack.fields import AwareDateTimeField, BooleanMapField

from .models import StudyMode, StudyProgress


class StudyProgressWriteSerializer(serializers.Serializer):
    """
    Validates the five tracked fields of a save.
    Notes:
      - All five fields are required; a save is a full replace, never a merge.
      - currentCardIndex is not cross-checked against totalCards.
      - learnedCards / reviewLaterCards are free-form card ids mapped to booleans.
    """
    currentCardIndex = serializers.IntegerField(source="current_card_index", min_value=0)
    learnedCards = BooleanMapField(source="learned_cards")
    reviewLaterCards = BooleanMapField(source="review_later_cards")
    studyMode = serializers.ChoiceField(source="study_mode", choices=StudyMode.choices)
    totalCards = serializers.IntegerField(source="total_cards", min_value=1)


class StudyProgressSerializer(serializers.ModelSerializer):
    """Read-only snapshot of a StudyProgress row in the camelCase wire format."""
    userId = serializers.CharField(source="user_id", read_only=True)
    deckId = serializers.CharField(source="deck_id", read_only=True)
    currentCardIndex = serializers.IntegerField(source="current_card_index", read_only=True)
    learnedCards = serializers.DictField(source="learned_cards", read_only=True)
    reviewLaterCards = serializers.DictField(source="review_later_cards", read_only=True)
    studyMode = serializers.CharField(source="study_mode", read_only=True)
    totalCards = serializers.IntegerField(source="total_cards", read_only=True)
    lastStudied = AwareDateTimeField(source="last_studied", read_only=True)
    createdAt = AwareDateTimeField(source="created_at", read_only=True)
    updatedAt = AwareDateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = StudyProgress
        fields = (
            "id",
            "userId",
            "deckId",
            "currentCardIndex",
            "learnedCards",
            "reviewLaterCards",
            "studyMode",
            "totalCards",
            "lastStudied",
            "createdAt",
            "updatedAt",
        )
        read_only_fields = fields
