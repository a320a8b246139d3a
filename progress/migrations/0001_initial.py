import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="StudyProgress",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.CharField(db_index=True, max_length=128)),
                ("deck_id", models.CharField(db_index=True, max_length=128)),
                ("current_card_index", models.PositiveIntegerField(default=0)),
                ("learned_cards", models.JSONField(blank=True, default=dict)),
                ("review_later_cards", models.JSONField(blank=True, default=dict)),
                ("study_mode", models.CharField(
                    choices=[("normal", "Normal"), ("review", "Review"), ("completed", "Completed")],
                    default="normal",
                    max_length=16,
                )),
                ("total_cards", models.PositiveIntegerField()),
                ("last_studied", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("user_id", "deck_id"), name="uq_progress_user_deck"),
                ],
            },
        ),
    ]
