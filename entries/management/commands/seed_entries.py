# entries/management/commands/seed_entries.py
import random

from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from entries.models import JournalEntry
from entries.placeholders import generate_placeholder_entries

User = get_user_model()

class Command(BaseCommand):
    help = "Create placeholder entries for calendar / sentiment demo"

    def add_arguments(self, parser):
        parser.add_argument("--username", default="devuser")
        parser.add_argument("--seed", type=int, default=None)
        parser.add_argument("--clear", action="store_true", help="remove this user's placeholder entries first")

    def handle(self, *args, **options):
        user, _ = User.objects.get_or_create(username=options["username"])
        if options["clear"]:
            deleted, _ = JournalEntry.objects.filter(user=user, is_placeholder=True).delete()
            self.stdout.write(f"Removed {deleted} placeholder entries.")

        entries = generate_placeholder_entries(rng=random.Random(options["seed"]))
        for entry in entries:
            entry.user = user
        JournalEntry.objects.bulk_create(entries)
        self.stdout.write(self.style.SUCCESS(f"Seeded {len(entries)} entries for {user.username}."))
