import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_registry.models.vehicle import Vehicle, VehicleStatus

logger = logging.getLogger(__name__)


SEED_VEHICLES = [
    {"plate": "ABC1234", "brand": "Toyota", "model": "Corolla", "year": 2022, "color": "Silver", "status": VehicleStatus.ACTIVE},
    {"plate": "BRA2E19", "brand": "Toyota", "model": "Hilux", "year": 2021, "color": "White", "status": VehicleStatus.ACTIVE},
    {"plate": "DEF5678", "brand": "Volkswagen", "model": "Gol", "year": 2018, "color": "Red", "status": VehicleStatus.INACTIVE},
    {"plate": "GHI9012", "brand": "Fiat", "model": "Uno", "year": 2015, "color": "Blue", "status": VehicleStatus.ACTIVE},
    {"plate": "JKL3456", "brand": "Honda", "model": "Civic", "year": 2023, "color": "Black", "status": VehicleStatus.ACTIVE},
]


async def seed_data(session: AsyncSession) -> None:
    result = await session.execute(select(Vehicle).limit(1))
    if result.scalars().first() is not None:
        return

    # spread creation times so the newest-first listing is stable
    base = datetime.now(timezone.utc) - timedelta(minutes=len(SEED_VEHICLES))
    for offset, v in enumerate(SEED_VEHICLES):
        created = base + timedelta(minutes=offset)
        session.add(Vehicle(**v, created_at=created, updated_at=created))

    await session.commit()
    logger.info("Seeded %s demo vehicles", len(SEED_VEHICLES))
