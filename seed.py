"""
Seed script -- populates the database with sample rides for reviewers.

Run after migrations:
    python seed.py

Creates 8 rides in Lagos and Abuja covering every status, so both the
driver dashboard lists and the rider tracking steps have something to show.
"""

import asyncio

from sqlalchemy import func, select

from ridetrack.domain.enums import RideStatus
from ridetrack.infrastructure.database import async_session_factory, engine
from ridetrack.infrastructure.models import RideModel

RIDES = [
    {"pickup": "Ikeja City Mall", "destination": "Lekki Phase 1", "city": "Lagos",
     "estimate": 8500, "offered_price": None, "status": RideStatus.REQUESTED, "driver": None},
    {"pickup": "Yaba Tech Gate", "destination": "Victoria Island", "city": "Lagos",
     "estimate": 6200, "offered_price": 5500, "status": RideStatus.REQUESTED, "driver": None},
    {"pickup": "Wuse Market", "destination": "Nnamdi Azikiwe Airport", "city": "Abuja",
     "estimate": 12000, "offered_price": None, "status": RideStatus.REQUESTED, "driver": None},
    {"pickup": "Surulere Stadium", "destination": "Ikoyi Club", "city": "Lagos",
     "estimate": 5400, "offered_price": None, "status": RideStatus.ACCEPTED, "driver": "Ada"},
    {"pickup": "Maitama Park", "destination": "Jabi Lake Mall", "city": "Abuja",
     "estimate": 4300, "offered_price": 4000, "status": RideStatus.ARRIVING, "driver": "Bayo"},
    {"pickup": "Ajah Roundabout", "destination": "Eko Atlantic", "city": "Lagos",
     "estimate": 9800, "offered_price": None, "status": RideStatus.IN_PROGRESS, "driver": "Chidi"},
    {"pickup": "Garki Area 11", "destination": "Central Business District", "city": "Abuja",
     "estimate": 3100, "offered_price": None, "status": RideStatus.COMPLETED, "driver": "Ada"},
    {"pickup": "Oshodi Interchange", "destination": "Murtala Muhammed Airport", "city": "Lagos",
     "estimate": 4700, "offered_price": None, "status": RideStatus.CANCELLED, "driver": "Bayo"},
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(select(func.count()).select_from(RideModel))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        for r in RIDES:
            session.add(
                RideModel(
                    pickup=r["pickup"],
                    destination=r["destination"],
                    city=r["city"],
                    estimate=r["estimate"],
                    offered_price=r["offered_price"],
                    status=r["status"],
                    driver_name=r["driver"],
                )
            )
        await session.flush()
        print(f"  Created {len(RIDES)} rides")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
