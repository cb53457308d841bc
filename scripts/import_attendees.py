"""
Bulk registration from a CSV export of the paper sign-up sheet.

    python -m scripts.import_attendees data/attendees.csv

Columns: name, phone. Rows whose phone is already registered are skipped.
"""

import csv
import sys

from dotenv import load_dotenv

load_dotenv()

from sqlalchemy.orm import Session

from database.db import SessionLocal
import models.attendance_logs  # noqa: F401
from services.exceptions import DuplicateRegistration, MalformedRequest
from services.registration import register_attendee
from services.storage import get_storage

CSV_PATH = "data/attendees.csv"  # default path


def import_attendees(path: str = CSV_PATH):
    db: Session = SessionLocal()
    storage = get_storage()
    created = skipped = 0

    try:
        with open(path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for line_no, row in enumerate(reader, start=2):
                try:
                    registration = register_attendee(db, row.get("name", ""), row.get("phone", ""), storage)
                except (DuplicateRegistration, MalformedRequest) as e:
                    print(f"⚠️  line {line_no}: skipped ({e.message})")
                    skipped += 1
                    continue
                print(f"   line {line_no}: {registration.attendee.uid} {registration.attendee.name}")
                created += 1
    finally:
        db.close()

    print(f"✅ attendee import done: {created} registered, {skipped} skipped")


if __name__ == "__main__":
    import_attendees(sys.argv[1] if len(sys.argv) > 1 else CSV_PATH)
