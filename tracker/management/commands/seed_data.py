"""
seed_data.py
------------
Seeds (creates if missing) the staff list, WFH reasons and the historic WFH
entries. Safe to run any time: rows are matched by natural key
(staff full name, reason name, staff + date), so a second run creates nothing.

Usage:
    python manage.py seed_data
"""

import logging
from datetime import date

from django.core.management.base import BaseCommand
from django.db import IntegrityError, transaction

from tracker.models import Staff, Reason, WfhEntry

logger = logging.getLogger(__name__)


STAFF = [
    "Schalk Lotz",
    "Yvette Gottschalk",
    "Werner Cloete",
    "Olan Moodley",
    "Alexander Esterhuyse",
    "Iggy Maboshego",
    "Monray Jacobs",
    "Sauraav Jayrajh",
]

REASONS = [
    "Medical",
    "Family",
    "Contractors at Home",
    "Deliveries",
    "Load shedding",
    "Internet outage",
    "Focus work",
    "Other",
]

# Team-wide focus work days
FOCUS_DAYS = [date(2025, 6, 5), date(2025, 6, 12)]

HISTORIC_ENTRIES = [
    # August 2025
    ("Schalk Lotz", date(2025, 8, 7), "Other"),
    ("Sauraav Jayrajh", date(2025, 8, 7), "Family"),
    ("Yvette Gottschalk", date(2025, 8, 13), "Contractors at Home"),
    ("Yvette Gottschalk", date(2025, 8, 14), "Contractors at Home"),
] + [
    (name, day, "Focus work") for day in FOCUS_DAYS for name in STAFF
]


class Command(BaseCommand):
    help = "Seed staff, WFH reasons and historic WFH entries (idempotent)."

    def handle(self, *args, **options):
        staff_by_name, staff_created = self._seed_staff()
        reasons_by_name, reasons_created = self._seed_reasons()
        entries_created, entries_skipped = self._seed_entries(staff_by_name, reasons_by_name)

        self.stdout.write(f"Staff: {staff_created} created, {len(STAFF) - staff_created} already present")
        self.stdout.write(f"Reasons: {reasons_created} created, {len(REASONS) - reasons_created} already present")
        self.stdout.write(f"Historic entries: {entries_created} created, {entries_skipped} skipped")
        self.stdout.write(self.style.SUCCESS("Seed complete."))

    def _seed_staff(self):
        staff_by_name = {}
        created = 0
        for name in STAFF:
            staff, is_created = Staff.objects.get_or_create(full_name=name)
            staff_by_name[name] = staff
            created += int(is_created)
        return staff_by_name, created

    def _seed_reasons(self):
        reasons_by_name = {}
        created = 0
        for name in REASONS:
            reason, is_created = Reason.objects.get_or_create(name=name)
            reasons_by_name[name] = reason
            created += int(is_created)
        return reasons_by_name, created

    def _seed_entries(self, staff_by_name, reasons_by_name):
        created = 0
        skipped = 0
        for staff_name, day, reason_name in HISTORIC_ENTRIES:
            staff = staff_by_name[staff_name]
            try:
                # savepoint so a duplicate doesn't poison the outer transaction
                with transaction.atomic():
                    _, is_created = WfhEntry.objects.get_or_create(
                        staff=staff,
                        date=day,
                        defaults={
                            "reason": reasons_by_name[reason_name],
                            "created_by": "system",
                        },
                    )
            except IntegrityError:
                logger.warning("Skipping duplicate WFH entry for %s on %s", staff_name, day)
                self.stdout.write(self.style.NOTICE(f"Skipped duplicate entry: {staff_name} on {day}"))
                skipped += 1
                continue

            if is_created:
                created += 1
            else:
                skipped += 1
        return created, skipped
