from django.db import models
from django.utils import timezone


class StudyMode(models.TextChoices):
    NORMAL = "normal", "Normal"
    REVIEW = "review", "Review"
    COMPLETED = "completed", "Completed"


class StudyProgress(models.Model):
    user_id = models.CharField(max_length=128, db_index=True)           # Subject from the identity provider
    deck_id = models.CharField(max_length=128, db_index=True)           # Studied collection
    current_card_index = models.PositiveIntegerField(default=0)         # Position in the deck's card sequence
    learned_cards = models.JSONField(default=dict, blank=True)          # card id -> known
    review_later_cards = models.JSONField(default=dict, blank=True)     # card id -> deferred for another pass
    study_mode = models.CharField(max_length=16, choices=StudyMode.choices, default=StudyMode.NORMAL)
    total_cards = models.PositiveIntegerField()                         # Deck size snapshot at last save
    last_studied = models.DateTimeField(default=timezone.now)           # Refreshed on every save
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user_id", "deck_id"],
                                    name="uq_progress_user_deck"),
        ]

    def __str__(self):
        return f"{self.user_id}:{self.deck_id} @{self.current_card_index}/{self.total_cards}"
