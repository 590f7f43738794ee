#!/usr/bin/env python3
"""
Script to create the schema and seed reference data, default working hours
and an optional administrator account.

Admin credentials are read from SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD.
"""

import os

from salon_booking import models  # noqa: F401 - registers tables with Base
from salon_booking.database import Base, SessionLocal, engine
from salon_booking.domain.schedules.entities import DayOfWeek, Schedule
from salon_booking.domain.schedules.repository import ScheduleRepository
from salon_booking.domain.users.entities import ROLE_ADMIN, User
from salon_booking.domain.users.repository import RoleRepository, UserRepository
from salon_booking.security_utils import hash_password_bcrypt
from salon_booking.seed import seed_reference_data

DEFAULT_OPENING = "09:00"
DEFAULT_CLOSING = "18:00"
WORKING_DAYS = [day for day in DayOfWeek if day != DayOfWeek.SUNDAY]


def seed():
    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()

    try:
        print("🔍 Seeding salon reference data...\n")

        added = seed_reference_data(db)
        print(f"1️⃣ Roles and statuses: {added} row(s) added")

        print("\n2️⃣ Default working hours...")
        schedules = ScheduleRepository(db)
        for day in WORKING_DAYS:
            if schedules.find_by_day_of_week(day):
                print(f"   - {day.value}: already configured")
                continue
            schedules.save(Schedule.create(day, DEFAULT_OPENING, DEFAULT_CLOSING))
            print(f"   ✅ {day.value}: {DEFAULT_OPENING}-{DEFAULT_CLOSING}")

        admin_email = os.getenv("SEED_ADMIN_EMAIL")
        admin_password = os.getenv("SEED_ADMIN_PASSWORD")
        print("\n3️⃣ Administrator account...")
        if not admin_email or not admin_password:
            print("   ⚠️  SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD not set, skipping")
        else:
            users = UserRepository(db)
            if users.exists_by_email(admin_email):
                print(f"   - {admin_email}: already exists")
            else:
                role = RoleRepository(db).find_by_name(ROLE_ADMIN)
                users.save(
                    User.create(
                        role_id=role.id,
                        name="Administrator",
                        email=admin_email,
                        phone=os.getenv("SEED_ADMIN_PHONE", "0000000000"),
                        password_hash=hash_password_bcrypt(admin_password),
                        role_name=ROLE_ADMIN,
                    )
                )
                print(f"   ✅ Created {admin_email}")

        print(f"\n{'=' * 80}")
        print("✅ Seeding completed!")
        print(f"{'=' * 80}\n")

    except Exception as e:
        print(f"❌ Error: {e}")
        import traceback

        traceback.print_exc()
        db.rollback()
    finally:
        db.close()


if __name__ == "__main__":
    seed()
