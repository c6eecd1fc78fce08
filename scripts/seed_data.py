"""Seed script to provision sample meters and readings.

Meter provisioning belongs to an external process; this script stands in
for it in development.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

from smartmeter.core.database import Base, SessionLocal, engine
from smartmeter.models.enums import MeterStatus
from smartmeter.models.meter import Meter
from smartmeter.services.readings import record_reading


def seed_database() -> None:
    """Seed the database with sample data."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # Check if data already exists
        if db.query(Meter).first():
            print("Database already has data. Skipping seed.")
            return

        print("Seeding database...")

        meters = [
            Meter(serial_number="MTR-001", status=MeterStatus.ACTIVE.value, consumer_id=7),
            Meter(serial_number="MTR-002", status=MeterStatus.ACTIVE.value, consumer_id=8),
            Meter(serial_number="MTR-999", status=MeterStatus.INACTIVE.value),
        ]
        db.add_all(meters)
        db.commit()

        print(f"Created {len(meters)} meters: {', '.join(m.serial_number for m in meters)}")

        # Daily readings for the past 30 days on the active meters
        base_date = datetime.now(UTC).replace(hour=12, minute=0, second=0, microsecond=0)
        base_date -= timedelta(days=30)
        count = 0
        for day in range(31):
            reading_date = (base_date + timedelta(days=day)).isoformat()
            for serial, daily in (("MTR-001", Decimal("10.0")), ("MTR-002", Decimal("6.5"))):
                if record_reading(db, serial, reading_date, daily + Decimal(day % 5)):
                    count += 1

        print(f"Created {count} readings (31 days x 2 meters)")
        print("\nSeed data created successfully!")
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
