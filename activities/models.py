from django.db import models
from django.utils import timezone


class ItemType(models.TextChoices):
    FLASHCARD = "flashcard", "Flashcard set"
    QUIZ = "quiz", "Quiz"


class ActionType(models.TextChoices):
    CREATE = "create", "Create"
    UPDATE = "update", "Update"
    STUDY = "study", "Study"
    COMPLETE = "complete", "Complete"


class Activity(models.Model):
    user_id = models.CharField(max_length=128, db_index=True)               # Acting user
    title = models.CharField(max_length=255)                                # Display name of the item
    item_type = models.CharField(max_length=16, choices=ItemType.choices)
    action_type = models.CharField(max_length=16, choices=ActionType.choices)
    item_id = models.CharField(max_length=128, db_index=True)               # Acted-upon flashcard set / quiz
    metadata = models.JSONField(default=dict, blank=True)                   # Shape depends on action_type
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)   # Event time, used by the dedup window
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["user_id", "timestamp"], name="idx_act_user_ts"),
            models.Index(fields=["user_id", "item_type", "timestamp"], name="idx_act_user_type_ts"),
            models.Index(fields=["user_id", "item_id", "action_type", "timestamp"], name="idx_act_dedup"),
        ]

    def __str__(self):
        return f"{self.user_id} {self.action_type} {self.item_type} {self.title!r}"


class ActivityLock(models.Model):
    """One row per (user, item, action); held FOR UPDATE while deciding whether to insert."""
    user_id = models.CharField(max_length=128)
    item_id = models.CharField(max_length=128)
    action_type = models.CharField(max_length=16, choices=ActionType.choices)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user_id", "item_id", "action_type"],
                                    name="uq_activity_lock_key"),
        ]
