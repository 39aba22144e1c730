#!/usr/bin/env python3
"""Check that the booking tables and the double-booking guard exist in the database"""

import sys

from sqlalchemy import inspect

from sportspot.database import engine

REQUIRED_TABLES = ["venue", "sport", "venuesport", "operatinghours", "pricingrule", "slot", "booking"]
BOOKING_GUARD_INDEX = "uq_booking_confirmed_slot_time"


def check_schema() -> bool:
    inspector = inspect(engine)
    existing_tables = set(inspector.get_table_names())

    print(f"Database: {engine.url}")
    missing = [table for table in REQUIRED_TABLES if table not in existing_tables]
    for table in REQUIRED_TABLES:
        print(f"{'✓' if table not in missing else '✗'} {table}")

    if "booking" in existing_tables:
        index_names = {index["name"] for index in inspector.get_indexes("booking")}
        if BOOKING_GUARD_INDEX in index_names:
            print(f"✓ {BOOKING_GUARD_INDEX}")
        else:
            print(f"✗ {BOOKING_GUARD_INDEX} MISSING (confirmed bookings are not unique per slot)")
            missing.append(BOOKING_GUARD_INDEX)

    if missing:
        print("\nERROR: schema is incomplete. Run migrations with: alembic upgrade head")
        return False
    print("\nSchema is complete.")
    return True


if __name__ == "__main__":
    try:
        sys.exit(0 if check_schema() else 1)
    except Exception as e:
        print(f"Error checking schema: {e}")
        sys.exit(1)
