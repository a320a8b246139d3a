# activities/management/commands/prune_activity_locks.py
import datetime as dt

from django.core.management.base import BaseCommand, CommandError
from django.db.models import Exists, OuterRef
from django.utils import timezone

from activities.models import Activity, ActivityLock


class Command(BaseCommand):
    help = "Delete dedup lock rows whose (user, item, action) key has no activity in the last --days days."

    def add_arguments(self, parser):
        parser.add_argument("--days", type=int, default=30)
        parser.add_argument("--dry-run", action="store_true")

    def handle(self, *args, days, dry_run, **options):
        if days < 1:
            raise CommandError("--days must be >= 1")
        cutoff = timezone.now() - dt.timedelta(days=days)

        recent = Activity.objects.filter(
            user_id=OuterRef("user_id"),
            item_id=OuterRef("item_id"),
            action_type=OuterRef("action_type"),
            timestamp__gte=cutoff,
        )
        stale = ActivityLock.objects.filter(~Exists(recent))

        if dry_run:
            self.stdout.write(f"{stale.count()} lock rows would be deleted")
            return
        deleted, _ = stale.delete()
        self.stdout.write(f"Deleted {deleted} lock rows")
