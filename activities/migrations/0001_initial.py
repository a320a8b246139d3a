import django.utils.timezone
from django.db import migrations, models

ACTION_CHOICES = [
    ("create", "Create"),
    ("update", "Update"),
    ("study", "Study"),
    ("complete", "Complete"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Activity",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.CharField(db_index=True, max_length=128)),
                ("title", models.CharField(max_length=255)),
                ("item_type", models.CharField(
                    choices=[("flashcard", "Flashcard set"), ("quiz", "Quiz")],
                    max_length=16,
                )),
                ("action_type", models.CharField(choices=ACTION_CHOICES, max_length=16)),
                ("item_id", models.CharField(db_index=True, max_length=128)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("timestamp", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "indexes": [
                    models.Index(fields=["user_id", "timestamp"], name="idx_act_user_ts"),
                    models.Index(fields=["user_id", "item_type", "timestamp"], name="idx_act_user_type_ts"),
                    models.Index(fields=["user_id", "item_id", "action_type", "timestamp"], name="idx_act_dedup"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ActivityLock",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.CharField(max_length=128)),
                ("item_id", models.CharField(max_length=128)),
                ("action_type", models.CharField(choices=ACTION_CHOICES, max_length=16)),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("user_id", "item_id", "action_type"), name="uq_activity_lock_key"),
                ],
            },
        ),
    ]
